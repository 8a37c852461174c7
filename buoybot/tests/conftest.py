"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from buoybot.config.schema import BuoyBotConfig
from buoybot.ingest.record_extractor import FEED_HEADER, RECORD_END, RECORD_START
from buoybot.models.observation import Observation, TidePrediction
from buoybot.storage.database import connect, run_migrations

SAMPLE_ROW = (
    "2016 03 01 12 00 270 5.1 6.0 1.20 8 6.5 280 1015.0 14.0 13.5 10.0 9.0 1012.0 2.0"
)
PACIFIC = ZoneInfo("America/Los_Angeles")


def build_feed(row: str, older_rows: tuple[str, ...] = ()) -> bytes:
    """Header lines, ``row`` padded to the fixed width, then older rows."""
    width = RECORD_END - RECORD_START
    lines = [FEED_HEADER, row.ljust(width)]
    lines.extend(r.ljust(width) for r in older_rows)
    return ("\n".join(lines) + "\n").encode()


@pytest.fixture
def make_feed() -> Callable[..., bytes]:
    return build_feed


@pytest.fixture
def sample_tokens() -> list[str]:
    return SAMPLE_ROW.split()


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> BuoyBotConfig:
    return BuoyBotConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "station": {"station_id": "46026", "title": "SF Buoy"},
        "publisher": {"enabled": False},
        "ops": {"cycle_interval_minutes": 30},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def prior_observation() -> Observation:
    return Observation(
        observed_at=datetime(2016, 3, 1, 11, 50, tzinfo=UTC).astimezone(PACIFIC),
        wind_direction="W",
        wind_speed_mph=10.7,
        wave_height_ft=4.3,
        dominant_period_s=9,
        average_period_s=6.7,
        mean_wave_direction="WNW",
        air_temp_f=57.0,
        water_temp_f=55.0,
    )


@pytest.fixture
def high_tide() -> TidePrediction:
    return TidePrediction(
        date="2016-03-01",
        day="Tue",
        time="10:14 AM",
        predicted_ft=5.23,
        high_low="H",
        tide_at=datetime(2016, 3, 1, 18, 14, tzinfo=UTC),
    )
