"""GPIO access used by the timing engine.

Two backends are provided:
 - RPiGPIO drives real pins through RPi.GPIO (BCM numbering)
 - SimulatedGPIO is a deterministic bench with a virtual microsecond clock,
   for mock runs and tests on machines without sensor hardware
"""
import time
from typing import List, Optional, Tuple

from .units import ROUND_TRIP_MICROSECONDS_PER_CM

try:
    import RPi.GPIO as GPIO
    HAS_GPIO = True
except Exception:
    HAS_GPIO = False

INPUT = 'in'
OUTPUT = 'out'
LOW = 0
HIGH = 1


class GPIOBackend:
    """Pin and clock primitives the timing engine needs."""

    def set_pin_mode(self, pin: int, direction: str) -> None:
        raise NotImplementedError

    def write_digital(self, pin: int, level: int) -> None:
        raise NotImplementedError

    def read_digital(self, pin: int) -> int:
        raise NotImplementedError

    def wait_us(self, us: int) -> None:
        """Busy-wait for `us` microseconds."""
        raise NotImplementedError

    def now_us(self) -> int:
        """Monotonic timestamp in microseconds."""
        raise NotImplementedError

    def cleanup(self) -> None:
        pass


class RPiGPIO(GPIOBackend):
    """Raspberry Pi pins via RPi.GPIO. Pin numbers are BCM."""

    def __init__(self, gpio_module=None):
        if gpio_module is None:
            if not HAS_GPIO:
                raise RuntimeError('RPi.GPIO is not available on this machine')
            gpio_module = GPIO
        self._gpio = gpio_module
        # channels configured through this backend, released by cleanup()
        self._pins = set()
        self._gpio.setmode(self._gpio.BCM)
        self._gpio.setwarnings(False)

    def set_pin_mode(self, pin, direction):
        mode = self._gpio.OUT if direction == OUTPUT else self._gpio.IN
        self._gpio.setup(pin, mode)
        self._pins.add(pin)

    def write_digital(self, pin, level):
        self._gpio.output(pin, self._gpio.HIGH if level else self._gpio.LOW)

    def read_digital(self, pin):
        return HIGH if self._gpio.input(pin) else LOW

    def wait_us(self, us):
        # time.sleep() is far too coarse for a 10 us trigger pulse
        end = self.now_us() + us
        while self.now_us() < end:
            pass

    def now_us(self):
        return time.monotonic_ns() // 1000

    def cleanup(self):
        # only our own channels: other sensors may share the RPi.GPIO state
        if self._pins:
            self._gpio.cleanup(sorted(self._pins))
            self._pins.clear()


class SimulatedGPIO(GPIOBackend):
    """Simulated sensor bench.

    Time only moves when the engine waits or looks at the clock: wait_us()
    advances it by the requested amount, now_us() by `tick_us`. That makes
    every run repeatable.

    The simulated sensor answers each trigger pulse (a HIGH -> LOW edge on an
    output pin) by raising the echo line `echo_delay_us` after the falling edge
    and holding it HIGH for `echo_width_us`.

    echo_delay_us=None  -> the sensor never answers (nothing in range)
    echo_width_us=None  -> the echo line gets stuck HIGH
    """

    def __init__(self, echo_delay_us: Optional[int] = 100,
                 echo_width_us: Optional[int] = 5882, tick_us: int = 1):
        self.echo_delay_us = echo_delay_us
        self.echo_width_us = echo_width_us
        self.tick_us = int(tick_us)
        self.modes = {}
        self.levels = {}
        # (pin, high_at, low_at) for every trigger pulse seen
        self.pulses: List[Tuple[int, int, int]] = []
        self.log: List[Tuple] = []
        self.cleaned_up = False
        self._now = 0
        self._fired_at: Optional[int] = None
        self._high_since = {}

    def set_echo(self, delay_us: Optional[int], width_us: Optional[int]) -> None:
        self.echo_delay_us = delay_us
        self.echo_width_us = width_us

    def set_distance(self, distance_cm: float, delay_us: int = 100) -> None:
        """Answer the next pulses as if an object stood `distance_cm` away."""
        self.set_echo(delay_us, int(round(distance_cm * ROUND_TRIP_MICROSECONDS_PER_CM)))

    def set_pin_mode(self, pin, direction):
        self.modes[pin] = direction
        self.log.append(('mode', pin, direction, self._now))

    def write_digital(self, pin, level):
        level = HIGH if level else LOW
        prev = self.levels.get(pin, LOW)
        self.levels[pin] = level
        self.log.append(('write', pin, level, self._now))
        if level == HIGH and prev == LOW:
            self._high_since[pin] = self._now
        elif level == LOW and prev == HIGH and self.modes.get(pin) == OUTPUT:
            self.pulses.append((pin, self._high_since.pop(pin, self._now), self._now))
            self._fired_at = self._now

    def read_digital(self, pin):
        if self.modes.get(pin) == OUTPUT:
            return self.levels.get(pin, LOW)
        return self._echo_level()

    def _echo_level(self):
        if self._fired_at is None or self.echo_delay_us is None:
            return LOW
        rise = self._fired_at + self.echo_delay_us
        if self._now < rise:
            return LOW
        if self.echo_width_us is None:
            return HIGH
        return HIGH if self._now < rise + self.echo_width_us else LOW

    @property
    def time_us(self) -> int:
        """Current virtual time, without advancing it."""
        return self._now

    def wait_us(self, us):
        self._now += int(us)

    def now_us(self):
        self._now += self.tick_us
        return self._now

    def cleanup(self):
        self.cleaned_up = True
