"""Compass bearing to 16-point cardinal label."""

BELOW_RANGE_LABEL = "ERROR - DEGREE LESS THAN ZERO"
ABOVE_RANGE_LABEL = "ERROR - DEGREE GREATER THAN 360"
MISSING_LABEL = "ERROR - DEGREE MISSING"

# Inclusive upper bound (degrees) for each sector, in compass order.
_SECTORS: list[tuple[int, str]] = [
    (11, "N"),
    (34, "NNE"),
    (56, "NE"),
    (79, "ENE"),
    (101, "E"),
    (124, "ESE"),
    (146, "SE"),
    (169, "SSE"),
    (191, "S"),
    (214, "SSW"),
    (236, "SW"),
    (259, "WSW"),
    (281, "W"),
    (304, "WNW"),
    (326, "NW"),
    (349, "NNW"),
    (360, "N"),
]

CARDINALS: tuple[str, ...] = tuple(label for _, label in _SECTORS[:-1])


def direction(degrees: int) -> str:
    """Map a bearing in [0, 360] to a cardinal label.

    Out-of-range bearings return a sentinel label instead of raising so a bad
    angle never aborts a parse.
    """
    if degrees < 0:
        return BELOW_RANGE_LABEL
    for upper, label in _SECTORS:
        if degrees <= upper:
            return label
    return ABOVE_RANGE_LABEL


def is_cardinal(label: str) -> bool:
    return label in CARDINALS
