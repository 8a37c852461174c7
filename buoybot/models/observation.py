"""Buoy observation and tide prediction models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TideFlag(StrEnum):
    HIGH = "H"
    LOW = "L"


@dataclass(frozen=True)
class Observation:
    observed_at: datetime  # aware, in the station's display timezone
    wind_direction: str
    wind_speed_mph: float
    wave_height_ft: float
    dominant_period_s: int  # 0 when the feed had no value
    average_period_s: float  # 0.0 when the feed had no value
    mean_wave_direction: str
    air_temp_f: float
    water_temp_f: float


@dataclass(frozen=True)
class TidePrediction:
    date: str  # YYYY-MM-DD, local
    day: str  # weekday label, e.g. "Tue"
    time: str  # display label, e.g. "10:14 AM"
    predicted_ft: float
    high_low: str  # "H" or "L" as stored; validated when formatted
    tide_at: datetime  # aware UTC, used for ordering only
