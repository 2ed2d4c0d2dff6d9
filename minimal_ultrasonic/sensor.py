from dataclasses import dataclass
from typing import Optional

from . import timing
from .gpio import GPIOBackend, INPUT, LOW, OUTPUT, RPiGPIO
from .units import MICROSECONDS_PER_CM, Unit, to_centimeters, to_distance

DEFAULT_TIMEOUT_US = 20000


@dataclass
class SensorConfig:
    trigger_pin: int
    echo_pin: int
    single_pin_mode: bool = False
    timeout_us: int = DEFAULT_TIMEOUT_US
    default_unit: Unit = Unit.CM


class UltrasonicSensor:
    """Ultrasonic time-of-flight distance sensor.

    Works with 4-pin sensors (separate TRIG and ECHO, e.g. HC-SR04) and 3-pin
    sensors where one SIG line is used for both (e.g. Grove, Parallax PING).
    Leave `echo_pin` out, or use UltrasonicSensor.single_pin(), for the latter.

    read() blocks for up to twice the timeout and returns 0.0 when no echo was
    measured. Always check for that value: it is not a real distance.
    """

    def __init__(self, trigger_pin: int, echo_pin: Optional[int] = None,
                 timeout_us: int = DEFAULT_TIMEOUT_US, unit=Unit.CM,
                 gpio: Optional[GPIOBackend] = None):
        single = echo_pin is None or echo_pin == trigger_pin
        self.config = SensorConfig(
            trigger_pin=trigger_pin,
            echo_pin=trigger_pin if single else echo_pin,
            single_pin_mode=single,
            timeout_us=int(timeout_us),
            default_unit=Unit.coerce(unit),
        )
        self.gpio = gpio if gpio is not None else RPiGPIO()

        self.gpio.set_pin_mode(self.config.trigger_pin, OUTPUT)
        if not single:
            self.gpio.set_pin_mode(self.config.echo_pin, INPUT)
        self.gpio.write_digital(self.config.trigger_pin, LOW)

    @classmethod
    def single_pin(cls, signal_pin: int, timeout_us: int = DEFAULT_TIMEOUT_US,
                   unit=Unit.CM, gpio: Optional[GPIOBackend] = None):
        """Sensor whose trigger and echo share one signal pin."""
        return cls(signal_pin, None, timeout_us=timeout_us, unit=unit, gpio=gpio)

    @property
    def single_pin_mode(self) -> bool:
        return self.config.single_pin_mode

    def measure(self) -> Optional[int]:
        """Raw echo pulse width in microseconds, None on timeout."""
        cfg = self.config
        return timing.measure(self.gpio, cfg.trigger_pin, cfg.echo_pin,
                              cfg.single_pin_mode, cfg.timeout_us)

    def read(self, unit=None) -> float:
        """Distance in `unit` (the default unit if omitted), or 0.0 on timeout."""
        unit = self.config.default_unit if unit is None else Unit.coerce(unit)
        duration = self.measure()
        if duration is None:
            return 0.0
        return to_distance(duration, unit)

    def set_timeout(self, timeout_us: int) -> None:
        # not validated: a zero timeout makes every read time out
        self.config.timeout_us = int(timeout_us)

    def get_timeout(self) -> int:
        return self.config.timeout_us

    def set_max_distance(self, distance, unit=Unit.CM) -> None:
        """Set the timeout to the round-trip time of `distance` (centimetres
        unless `unit` says otherwise)."""
        distance_cm = to_centimeters(distance, unit)
        self.config.timeout_us = int(distance_cm * 2 * MICROSECONDS_PER_CM)

    def get_max_distance(self, unit=None) -> float:
        """Farthest distance the current timeout can report, in `unit`."""
        unit = self.config.default_unit if unit is None else Unit.coerce(unit)
        return to_distance(self.config.timeout_us, unit)

    def set_unit(self, unit) -> None:
        self.config.default_unit = Unit.coerce(unit)

    def get_unit(self) -> Unit:
        return self.config.default_unit

    def close(self) -> None:
        self.gpio.cleanup()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        cfg = self.config
        if cfg.single_pin_mode:
            pins = f'signal={cfg.trigger_pin}'
        else:
            pins = f'trig={cfg.trigger_pin}, echo={cfg.echo_pin}'
        return f'<UltrasonicSensor {pins} timeout={cfg.timeout_us}us unit={cfg.default_unit}>'
