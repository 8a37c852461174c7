"""Unit conversions for buoy readings."""

import math

FEET_PER_METER = 3.28084
METERS_PER_SECOND_PER_MPH = 0.44704


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def mps_to_mph(speed: float) -> float:
    return speed / METERS_PER_SECOND_PER_MPH


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def round_places(value: float, places: int) -> float:
    """Round half up to a fixed number of decimal places.

    Unlike the built-in round(), round_places(0.25, 1) == 0.3.
    """
    shift = 10**places
    return math.floor(value * shift + 0.5) / shift
