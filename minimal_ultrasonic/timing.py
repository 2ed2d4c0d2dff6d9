"""Trigger/echo measurement cycle.

One cycle: pulse the trigger line, wait for the echo line to rise, then wait
for it to fall. Each of the two waits is bounded by the timeout on its own,
so a cycle blocks for at most about twice the timeout.
"""
from typing import Callable, Optional

from .gpio import GPIOBackend, HIGH, INPUT, LOW, OUTPUT

# trigger pulse shape required by HC-SR04 / Grove style sensors
SETTLE_US = 2
TRIGGER_PULSE_US = 10


def wait_until(condition: Callable[[], bool], clock: Callable[[], int],
               timeout_us: int, start: Optional[int] = None) -> Optional[int]:
    """Poll `condition` until it holds or more than `timeout_us` has elapsed
    since `start` (defaults to now).

    Returns the clock reading taken right after the condition held, or None
    on timeout. Exactly `timeout_us` elapsed is still within the window.
    """
    if start is None:
        start = clock()
    while not condition():
        if clock() - start > timeout_us:
            return None
    return clock()


def send_trigger(gpio: GPIOBackend, pin: int) -> None:
    gpio.write_digital(pin, LOW)
    gpio.wait_us(SETTLE_US)
    gpio.write_digital(pin, HIGH)
    gpio.wait_us(TRIGGER_PULSE_US)
    gpio.write_digital(pin, LOW)


def measure(gpio: GPIOBackend, trigger_pin: int, echo_pin: int,
            single_pin_mode: bool, timeout_us: int) -> Optional[int]:
    """Run one measurement cycle.

    Returns the echo pulse width in microseconds, or None when the echo did
    not start, or did not end, within `timeout_us`. The two cases are not
    told apart.
    """
    if single_pin_mode:
        gpio.set_pin_mode(trigger_pin, OUTPUT)

    send_trigger(gpio, trigger_pin)

    if single_pin_mode:
        # the same wire now carries the echo
        gpio.set_pin_mode(trigger_pin, INPUT)
        echo_pin = trigger_pin

    rose_at = wait_until(lambda: gpio.read_digital(echo_pin) == HIGH,
                         gpio.now_us, timeout_us)
    if rose_at is None:
        return None

    fell_at = wait_until(lambda: gpio.read_digital(echo_pin) == LOW,
                         gpio.now_us, timeout_us, start=rose_at)
    if fell_at is None:
        return None

    return fell_at - rose_at
