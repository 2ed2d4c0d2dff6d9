"""Driver for ultrasonic time-of-flight distance sensors (4-pin TRIG/ECHO and
3-pin single-signal modules)."""
from .gpio import GPIOBackend, RPiGPIO, SimulatedGPIO
from .sensor import DEFAULT_TIMEOUT_US, SensorConfig, UltrasonicSensor
from .units import MICROSECONDS_PER_CM, Unit, from_legacy, to_distance

__version__ = '2.0.0'

__all__ = [
    'DEFAULT_TIMEOUT_US',
    'GPIOBackend',
    'MICROSECONDS_PER_CM',
    'RPiGPIO',
    'SensorConfig',
    'SimulatedGPIO',
    'Unit',
    'UltrasonicSensor',
    'from_legacy',
    'to_distance',
]
