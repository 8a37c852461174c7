"""Observation parser: turns a feed row into a unit-converted Observation.

Each numeric token is parsed into a FieldResult. Fallbacks for fields the
buoy did not report (NDBC writes "MM") are applied explicitly here. Speeds,
heights and periods must be non-negative and every number must be finite;
anything else counts as unreported:

    dominant / average wave period   -> 0
    wind speed, wave height, air temp -> 0.0
    wind / wave direction            -> MISSING_LABEL, or the range label
                                        for an angle outside 0-360
    water temperature                -> prior observation's value, else fatal
"""

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from buoybot.conversion.direction import MISSING_LABEL, direction, is_cardinal
from buoybot.conversion.units import (
    celsius_to_fahrenheit,
    meters_to_feet,
    mps_to_mph,
    round_places,
)
from buoybot.ingest import record_extractor as cols
from buoybot.models.errors import (
    MissingWaterTemperatureError,
    RecordExtractionError,
    TimestampParseError,
)
from buoybot.models.observation import Observation

logger = logging.getLogger(__name__)

T = TypeVar("T")

FEED_TIME_FORMAT = "%Y %m %d %H %M"
DEFAULT_TIMEZONE = "America/Los_Angeles"


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """Outcome of parsing one raw token: a value, or the reason there is none."""

    name: str
    raw: str
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_else(self, fallback: T) -> T:
        if self.error is None:
            assert self.value is not None
            return self.value
        return fallback


def finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {raw!r}")
    return value


def non_negative_float(raw: str) -> float:
    value = finite_float(raw)
    if value < 0:
        raise ValueError(f"negative value {raw!r}")
    return value


def non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise ValueError(f"negative value {raw!r}")
    return value


def parse_field(name: str, raw: str, convert: Callable[[str], T]) -> FieldResult[T]:
    try:
        return FieldResult(name=name, raw=raw, value=convert(raw))
    except ValueError as e:
        return FieldResult(name=name, raw=raw, error=str(e))


def parse_timestamp(tokens: Sequence[str], tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Parse the row's UTC time columns and convert to the display timezone."""
    raw_time = " ".join(tokens[cols.YEAR:cols.MINUTE + 1])
    try:
        observed = datetime.strptime(raw_time, FEED_TIME_FORMAT).replace(tzinfo=UTC)
    except ValueError as e:
        raise TimestampParseError(f"Bad observation time {raw_time!r}: {e}") from e

    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimestampParseError(f"Unknown timezone {tz_name!r}") from e

    return observed.astimezone(tz)


class ObservationParser:
    def __init__(self, tz_name: str = DEFAULT_TIMEZONE):
        self.tz_name = tz_name
        self.fallbacks: list[str] = []

    def parse(
        self, tokens: Sequence[str], prior: Observation | None = None
    ) -> Observation:
        """Build an Observation from a feed row.

        ``prior`` is the most recently persisted observation; it only
        supplies water temperature when the row has none. ``fallbacks`` lists
        the fields that were substituted during the last call.
        """
        self.fallbacks = []
        if len(tokens) <= cols.WATER_TEMP:
            raise RecordExtractionError(
                f"Row has {len(tokens)} columns, need at least {cols.WATER_TEMP + 1}"
            )
        observed_at = parse_timestamp(tokens, self.tz_name)

        wind_deg = parse_field("wind_direction", tokens[cols.WIND_DIRECTION], int)
        wind_speed = parse_field(
            "wind_speed", tokens[cols.WIND_SPEED], non_negative_float
        )
        wave_height = parse_field(
            "wave_height", tokens[cols.WAVE_HEIGHT], non_negative_float
        )
        dominant = parse_field(
            "dominant_period", tokens[cols.DOMINANT_PERIOD], non_negative_int
        )
        average = parse_field(
            "average_period", tokens[cols.AVERAGE_PERIOD], non_negative_float
        )
        wave_deg = parse_field(
            "mean_wave_direction", tokens[cols.MEAN_WAVE_DIRECTION], int
        )
        air_temp = parse_field("air_temp", tokens[cols.AIR_TEMP], finite_float)
        water_temp = parse_field("water_temp", tokens[cols.WATER_TEMP], finite_float)

        return Observation(
            observed_at=observed_at,
            wind_direction=self._direction(wind_deg),
            wind_speed_mph=mps_to_mph(self._number(wind_speed, 0.0)),
            wave_height_ft=meters_to_feet(self._number(wave_height, 0.0)),
            dominant_period_s=self._number(dominant, 0),
            average_period_s=self._number(average, 0.0),
            mean_wave_direction=self._direction(wave_deg),
            air_temp_f=self._fahrenheit(air_temp, 0.0),
            water_temp_f=self._water_temp(water_temp, prior),
        )

    def _number(self, result: FieldResult[T], fallback: T) -> T:
        if not result.ok:
            self._note_fallback(result, fallback)
        return result.or_else(fallback)

    def _direction(self, result: FieldResult[int]) -> str:
        if not result.ok:
            self._note_fallback(result, MISSING_LABEL)
            return MISSING_LABEL
        label = direction(result.or_else(0))
        if not is_cardinal(label):
            self._note_fallback(result, label)
        return label

    def _fahrenheit(self, result: FieldResult[float], fallback: float) -> float:
        if not result.ok:
            self._note_fallback(result, fallback)
            return fallback
        return round_places(celsius_to_fahrenheit(result.or_else(0.0)), 1)

    def _water_temp(
        self, result: FieldResult[float], prior: Observation | None
    ) -> float:
        if result.ok:
            return round_places(celsius_to_fahrenheit(result.or_else(0.0)), 1)
        if prior is None:
            raise MissingWaterTemperatureError(
                f"Water temperature {result.raw!r} unparsable and no prior "
                "observation to fall back on"
            )
        self._note_fallback(result, prior.water_temp_f)
        return prior.water_temp_f

    def _note_fallback(self, result: FieldResult, fallback: object) -> None:
        logger.warning(
            "Field %s not usable (%r), using %r", result.name, result.raw, fallback
        )
        self.fallbacks.append(result.name)


def parse_observation(
    tokens: Sequence[str],
    prior: Observation | None = None,
    tz_name: str = DEFAULT_TIMEZONE,
) -> Observation:
    return ObservationParser(tz_name).parse(tokens, prior)
