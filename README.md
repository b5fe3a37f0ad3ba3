# envmonitor

A small environmental monitoring station. It takes temperature, humidity,
luminosity and gas level readings, runs them through a trained multilayer
perceptron to score the conditions as a percentage, and publishes the
readings and a verdict to an MQTT broker.

The verdict is one of:

- `Propicio a vida`: the score is 80 % or above
- `Moderado`: the score is between 50 % and 80 %
- `Hostil`: the score is below 50 %

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the station

```
envmonitor --help
```

Options:

- `--broker` (default `localhost`) and `--port` (default `1883`)
- `--user` and `--password`, passed to the broker when `--user` is given
- `--client-id` (default `esp32_control`)
- `--control-topic` (default `/control`), the topic the station subscribes to

The station connects to the broker, retrying every two seconds while the
connection fails. It then publishes `ATIVO` on `/status` and reads lines
from standard input:

- A line of four numbers, `temperature humidity luminosity gas`, separated
  by commas, semicolons or whitespace, is one set of readings. Lines that
  cannot be parsed are logged and skipped.
- A line `button` toggles the emergency stop, as the physical button would.
  Presses less than 200 ms apart are ignored. The new state is published on
  `/status` when the next readings line arrives.

The timers are driven by the arrival of input lines. When a readings line
arrives at least half a second after the last report, a console line with
all values and the score is printed. When it arrives at least two seconds
after the last publication, the station publishes `/temperature`,
`/humidity`, `/luminosity` and `/gas` (two decimals) and the verdict on
`/environment`. Nothing is reported or published while the station is
stopped.

Publishing `On` to the control topic stops the station and publishes
`PARADO` on `/status`. Publishing `Off` resumes it and publishes `ATIVO`.
The match is case-insensitive.

## Using the library

The neural network lives in `envmonitor.mlp`. `create_model` builds a
network with weights drawn uniformly from [-0.5, 0.5); `backpropagation`
trains it and returns the mean squared error of each epoch; `forward`
returns the outputs for one input vector.

```python
import random
from envmonitor.mlp import create_model

model = create_model(2, 4, 1, max_epochs=1000, learning_rate=0.1,
                     threshold=1e-3, rng=random.Random(0))
errors = model.backpropagation([[0, 0], [0, 1], [1, 0], [1, 1]],
                               [[0], [1], [1], [0]])
print(errors[-1], model.forward([1, 0]))
```

The activation functions `identity`, `sigmoid` and `tanhyper` and their
derivatives `d_identity`, `d_sigmoid` and `d_tanhyper` are available too;
the derivatives take the activation's output.

`envmonitor.environment` holds the trained model and the sensor conversions:

```python
from envmonitor.environment import (
    Readings, trained_model, environmental_conditions, classify_environment,
)

model = trained_model()
readings = Readings(temperature=24.0, humidity=55.0, luminosity=600.0, gas_level=30.0)
percent = 100 * environmental_conditions(model, readings)
print(classify_environment(percent))
```

`normalize` scales the four features with the training dataset's bounds.
`luminosity_from_adc` and `gas_level_from_adc` convert raw 12-bit ADC counts
(0 to 4095) into lux and a whole gas percentage, and raise `ValueError` for
counts outside that range. `sensor_value_or_default` replaces a NaN reading
with -99.99.

`envmonitor.station` gives you `Station`, `StationConfig` and
`parse_readings` if you want to drive the station logic yourself.
`Station(publish, model=None, report=print)` takes a function that sends a
payload to a topic and one that receives console lines; call
`handle_message`, `press_button`, `on_500ms`, `on_2s` and `update` on it.
`update` returns the score in percent.

## What it does not do

The package does not read sensors or buttons itself. Readings and button
presses come from standard input, or from your own code calling `Station`.