"""Sensor conversions and the trained model that rates the environment."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .mlp import MLP

ADC_MAX = 4095
ADC_VREF = 3.3
LDR_SERIES_RESISTANCE = 10000
LUX_CONSTANT = 2255000
SENSOR_ERROR_VALUE = -99.99

# Feature order: temperature, humidity, gas level, luminosity.
X_MIN = (5.793664, 20.596113, 9.414636, 160.582703)
X_MAX = (41.263657, 81.931076, 217.787125, 1086.463989)

FAVOURABLE = "Propicio a vida"
MODERATE = "Moderado"
HOSTILE = "Hostil"

_HIDDEN_WEIGHTS = [
    [-0.356924, 0.618732, 0.670465, -0.049423, 0.756215],
    [4.530966, -0.387522, 0.228863, 2.415418, -1.799217],
    [-0.117189, 0.276763, -0.317315, 0.320550, 0.900807],
    [-0.181342, -0.323829, 0.522486, 0.247581, 1.433480],
    [0.296701, 0.579473, -0.417481, -0.337416, 0.755573],
    [1.013583, -0.288321, 0.303478, -3.889414, 2.723397],
    [-0.254679, 0.667375, 0.640776, -0.064995, 0.631764],
    [0.090767, 0.797015, 0.565025, -0.054839, 1.045970],
    [-5.436245, -0.334825, 0.278600, 1.523835, 3.057570],
    [-0.339902, 4.057984, -0.080821, -0.298409, -1.539995],
]

_OUTPUT_WEIGHTS = [
    [-1.278173, 2.497450, -0.980342, -1.152672, -0.523618, 2.293101,
     -1.104998, -1.021778, 2.461326, 1.786587, -1.164977],
]


@dataclass(frozen=True)
class Readings:
    """One set of sensor values."""

    temperature: float
    humidity: float
    luminosity: float
    gas_level: float

    def features(self) -> list[float]:
        """Values in the order the model expects."""
        return [self.temperature, self.humidity, self.gas_level, self.luminosity]


def _check_adc(adc: int) -> None:
    if not 0 <= adc <= ADC_MAX:
        raise ValueError(f"ADC reading {adc} outside 0..{ADC_MAX}")


def luminosity_from_adc(adc: int) -> float:
    """Convert an LDR divider reading to lux (empirical fit)."""
    _check_adc(adc)
    vout = adc * ADC_VREF / ADC_MAX
    rldr = LDR_SERIES_RESISTANCE * (ADC_VREF - vout) / (vout if vout else 1e-3)
    if rldr == 0:
        return math.inf
    return LUX_CONSTANT / rldr


def gas_level_from_adc(adc: int) -> float:
    """Convert a gas sensor reading to a whole percentage."""
    _check_adc(adc)
    return float(adc * 100 // ADC_MAX)


def sensor_value_or_default(value: float) -> float:
    """Return the value, or the error marker when the sensor gave NaN."""
    return SENSOR_ERROR_VALUE if math.isnan(value) else value


def normalize(values: Sequence[float]) -> list[float]:
    """Min-max scale features with the training dataset's bounds."""
    if len(values) != len(X_MIN):
        raise ValueError(f"expected {len(X_MIN)} values, got {len(values)}")
    return [(v - lo) / (hi - lo) for v, lo, hi in zip(values, X_MIN, X_MAX)]


def trained_model() -> MLP:
    """The network with the weights obtained in training."""
    return MLP(
        input_layer_length=4,
        hidden_layer_length=10,
        output_layer_length=1,
        hidden_layer_weights=_HIDDEN_WEIGHTS,
        output_layer_weights=_OUTPUT_WEIGHTS,
    )


def environmental_conditions(model: MLP, readings: Readings) -> float:
    """Rate the readings; 1.0 means fully favourable."""
    return model.forward(normalize(readings.features()))[0]


def classify_environment(percent: float) -> str:
    """Label an environment rating given in percent."""
    if percent >= 80.0:
        return FAVOURABLE
    if 50.0 <= percent <= 80.0:
        return MODERATE
    return HOSTILE