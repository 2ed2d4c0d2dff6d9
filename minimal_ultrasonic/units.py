"""Distance units and the echo-duration -> distance conversion.

The speed of sound is taken as 343 m/s (dry air, 20 C). Sound needs
1 / 0.0343 ~= 29.15 us to travel one centimetre, so an echo pulse that lasts
``t`` microseconds corresponds to an object ``t / (2 * 29.15)`` cm away.
"""
from enum import Enum

SPEED_OF_SOUND_M_S = 343.0

# one-way travel time for one centimetre, in microseconds
MICROSECONDS_PER_CM = 1e6 / (SPEED_OF_SOUND_M_S * 100.0)
ROUND_TRIP_MICROSECONDS_PER_CM = 2.0 * MICROSECONDS_PER_CM


class Unit(Enum):
    CM = 'cm'
    METERS = 'm'
    MM = 'mm'
    INCHES = 'in'
    YARDS = 'yd'
    MILES = 'mi'

    @classmethod
    def coerce(cls, value):
        """Return the Unit for a Unit, a symbol ('cm'), a member name
        ('INCHES') or a legacy name/divisor ('INC', 71).

        Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for unit in cls:
                if key.lower() == unit.value or key.upper() == unit.name:
                    return unit
        try:
            return from_legacy(value)
        except ValueError:
            raise ValueError(f'unknown distance unit: {value!r}') from None

    def __str__(self):
        return self.value


# centimetres per one of each unit
_CM_PER_UNIT = {
    Unit.CM: 1.0,
    Unit.METERS: 100.0,
    Unit.MM: 0.1,
    Unit.INCHES: 2.54,
    Unit.YARDS: 91.44,
    Unit.MILES: 160934.4,
}


def to_distance(duration_us, unit=Unit.CM) -> float:
    """Convert a round-trip echo duration (us) into a distance in `unit`.

    No rounding and no clamping: readings under ~2 cm or beyond the range
    implied by the sensor timeout are not trustworthy and must be filtered
    by the caller.
    """
    unit = Unit.coerce(unit)
    distance_cm = duration_us / ROUND_TRIP_MICROSECONDS_PER_CM
    if unit is Unit.CM:
        return distance_cm
    if unit is Unit.MM:
        return distance_cm * 10.0
    return distance_cm / _CM_PER_UNIT[unit]


def to_centimeters(distance, unit=Unit.CM) -> float:
    """Scale a distance in `unit` back to centimetres."""
    return distance * _CM_PER_UNIT[Unit.coerce(unit)]


# Old-style unit constants. They used to be integer divisors applied to the
# raw duration; now they only name a Unit.
LEGACY_UNITS = {
    'CM': Unit.CM,
    'INC': Unit.INCHES,
}
LEGACY_DIVISORS = {
    28: Unit.CM,
    71: Unit.INCHES,
}


def from_legacy(value):
    """Map a legacy unit name ('CM', 'INC') or divisor (28, 71) to a Unit."""
    if isinstance(value, str) and value.strip().upper() in LEGACY_UNITS:
        return LEGACY_UNITS[value.strip().upper()]
    if isinstance(value, int) and not isinstance(value, bool) and value in LEGACY_DIVISORS:
        return LEGACY_DIVISORS[value]
    raise ValueError(f'not a legacy unit: {value!r}')
