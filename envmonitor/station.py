"""Monitoring station: sensor reports, emergency stop and MQTT control."""

from __future__ import annotations

import argparse
import logging
import re
import sys
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .environment import (
    Readings,
    classify_environment,
    environmental_conditions,
    trained_model,
)
from .mlp import MLP

logger = logging.getLogger(__name__)

STATUS_TOPIC = "/status"
TEMPERATURE_TOPIC = "/temperature"
HUMIDITY_TOPIC = "/humidity"
LUMINOSITY_TOPIC = "/luminosity"
GAS_TOPIC = "/gas"
ENVIRONMENT_TOPIC = "/environment"

ACTIVE = "ATIVO"
STOPPED = "PARADO"

DEBOUNCE_MS = 200
RECONNECT_DELAY_S = 2.0
REPORT_PERIOD_S = 0.5
PUBLISH_PERIOD_S = 2.0

Publisher = Callable[[str, str], object]
Reporter = Callable[[str], object]


@dataclass(frozen=True)
class StationConfig:
    """Broker connection settings."""

    broker: str = "localhost"
    port: int = 1883
    user: str | None = None
    password: str | None = None
    client_id: str = "esp32_control"
    control_topic: str = "/control"


class Station:
    """State of the station between sensor readings.

    ``publish`` sends a message to a topic; ``report`` receives the console
    lines the station writes.
    """

    def __init__(
        self,
        publish: Publisher,
        model: MLP | None = None,
        report: Reporter = print,
    ) -> None:
        self._publish = publish
        self._report = report
        self.model = model if model is not None else trained_model()
        self.stopped = False
        self.led_on = False
        self.last_press_ms = 0
        self.environment = 0.0
        self._status_pending = False
        self._report_due = False
        self._publish_due = False
        self._lock = threading.RLock()

    def _set_stopped(self, stopped: bool) -> None:
        self.stopped = stopped
        self.led_on = stopped
        self._report("PARADA SOLICITADA!!!\n" if stopped else "REINICIO SOLICITADO!!!\n")

    def handle_message(self, topic: str, payload: bytes | str) -> None:
        """React to a message on the control topic: "On" stops, "Off" resumes."""
        text = payload.decode("latin-1") if isinstance(payload, (bytes, bytearray)) else payload
        self._report(f"Recebido no tópico {topic}: {text}")
        command = text.lower()
        with self._lock:
            if command == "on":
                self._set_stopped(True)
                self._publish(STATUS_TOPIC, STOPPED)
            elif command == "off":
                self._set_stopped(False)
                self._publish(STATUS_TOPIC, ACTIVE)

    def press_button(self, now_ms: int) -> bool:
        """Toggle the emergency stop; presses within the debounce time are ignored."""
        with self._lock:
            if now_ms - self.last_press_ms <= DEBOUNCE_MS:
                return False
            self.last_press_ms = now_ms
            self._status_pending = True
            self._set_stopped(not self.stopped)
            return True

    def on_500ms(self) -> None:
        """Mark the console report as due."""
        with self._lock:
            self._report_due = True

    def on_2s(self) -> None:
        """Mark the sensor publication as due."""
        with self._lock:
            self._publish_due = True

    def update(self, readings: Readings) -> float:
        """Process one set of readings and return the environment rating in percent."""
        environment = 100 * environmental_conditions(self.model, readings)
        with self._lock:
            self.environment = environment
            if not self.stopped:
                if self._report_due:
                    self._report_due = False
                    self._report(
                        f"TEMP: {readings.temperature:f} - HUMID: {readings.humidity:f}"
                        f" - GAS: {readings.gas_level:f} - LUX: {readings.luminosity:f}"
                        f" - ENVIRONMENT: {environment:f}\n"
                    )
                if self._publish_due:
                    self._publish_due = False
                    self._publish(TEMPERATURE_TOPIC, f"{readings.temperature:.2f}")
                    self._publish(HUMIDITY_TOPIC, f"{readings.humidity:.2f}")
                    self._publish(LUMINOSITY_TOPIC, f"{readings.luminosity:.2f}")
                    self._publish(GAS_TOPIC, f"{readings.gas_level:.2f}")
                    self._publish(ENVIRONMENT_TOPIC, classify_environment(environment))
            if self._status_pending:
                self._status_pending = False
                self._publish(STATUS_TOPIC, STOPPED if self.stopped else ACTIVE)
        return environment


_SEPARATOR = re.compile(r"[,;\s]+")


def parse_readings(line: str) -> Readings:
    """Parse "temperature humidity luminosity gas", separated by commas or spaces."""
    fields = [f for f in _SEPARATOR.split(line.strip()) if f]
    if len(fields) != 4:
        raise ValueError(f"expected 4 values, got {len(fields)}")
    try:
        temperature, humidity, luminosity, gas_level = (float(f) for f in fields)
    except ValueError as exc:
        raise ValueError(f"invalid reading: {line.strip()!r}") from exc
    return Readings(
        temperature=temperature,
        humidity=humidity,
        luminosity=luminosity,
        gas_level=gas_level,
    )


def _make_client(client_id: str):
    import paho.mqtt.client as mqtt

    if hasattr(mqtt, "CallbackAPIVersion"):
        return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
    return mqtt.Client(client_id=client_id)


def _connect(client, config: StationConfig) -> None:
    while True:
        logger.info("Conectando ao broker MQTT...")
        try:
            client.connect(config.broker, config.port)
        except OSError as exc:
            logger.warning("Falha (%s), tentando novamente em 2 segundos...", exc)
            time.sleep(RECONNECT_DELAY_S)
        else:
            logger.info("Conectado ao MQTT!")
            return


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envmonitor",
        description="Read sensor lines from standard input and publish them over MQTT. "
        "A line 'button' toggles the emergency stop.",
    )
    defaults = StationConfig()
    parser.add_argument("--broker", default=defaults.broker)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--user", default=defaults.user)
    parser.add_argument("--password", default=defaults.password)
    parser.add_argument("--client-id", default=defaults.client_id)
    parser.add_argument("--control-topic", default=defaults.control_topic)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the station against an MQTT broker."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    config = StationConfig(
        broker=args.broker,
        port=args.port,
        user=args.user,
        password=args.password,
        client_id=args.client_id,
        control_topic=args.control_topic,
    )

    client = _make_client(config.client_id)
    if config.user:
        client.username_pw_set(config.user, config.password)

    station = Station(publish=lambda topic, payload: client.publish(topic, payload))

    def on_connect(mqtt_client, *_rest) -> None:
        mqtt_client.subscribe(config.control_topic)
        logger.info("Inscrito no tópico: %s", config.control_topic)

    client.on_connect = on_connect
    client.on_message = lambda _c, _u, msg: station.handle_message(msg.topic, msg.payload)

    _connect(client, config)
    client.loop_start()
    try:
        client.publish(STATUS_TOPIC, ACTIVE)
        now = time.monotonic()
        next_report = now + REPORT_PERIOD_S
        next_publish = now + PUBLISH_PERIOD_S
        for line in sys.stdin:
            now = time.monotonic()
            if now >= next_report:
                station.on_500ms()
                next_report = now + REPORT_PERIOD_S
            if now >= next_publish:
                station.on_2s()
                next_publish = now + PUBLISH_PERIOD_S
            if line.strip().lower() == "button":
                station.press_button(int(now * 1000))
                continue
            if not line.strip():
                continue
            try:
                readings = parse_readings(line)
            except ValueError as exc:
                logger.warning("%s", exc)
                continue
            station.update(readings)
    except KeyboardInterrupt:
        pass
    finally:
        client.loop_stop()
        client.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())