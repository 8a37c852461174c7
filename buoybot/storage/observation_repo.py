"""Repository for persisted buoy observations."""

import sqlite3
from zoneinfo import ZoneInfo

from buoybot.models.common import from_db_timestamp, to_db_timestamp
from buoybot.models.observation import Observation


def save_observation(
    conn: sqlite3.Connection, station_id: str, obs: Observation
) -> int:
    """Persist an observation. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO observations "
        "(station_id, observed_at, display_tz, wind_direction, wind_speed_mph, "
        "wave_height_ft, dominant_period_s, average_period_s, mean_wave_direction, "
        "air_temp_f, water_temp_f) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            station_id,
            to_db_timestamp(obs.observed_at),
            str(obs.observed_at.tzinfo),
            obs.wind_direction,
            obs.wind_speed_mph,
            obs.wave_height_ft,
            obs.dominant_period_s,
            obs.average_period_s,
            obs.mean_wave_direction,
            obs.air_temp_f,
            obs.water_temp_f,
        ),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_latest_observation(
    conn: sqlite3.Connection, station_id: str
) -> Observation | None:
    """Most recently saved observation for a station, if any."""
    row = conn.execute(
        "SELECT * FROM observations WHERE station_id = ? "
        "ORDER BY id DESC LIMIT 1",
        (station_id,),
    ).fetchone()
    if row is None:
        return None
    return _row_to_observation(row)


def count_observations(conn: sqlite3.Connection, station_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM observations WHERE station_id = ?", (station_id,)
    ).fetchone()
    return row[0]


def _row_to_observation(row: sqlite3.Row) -> Observation:
    observed_at = from_db_timestamp(row["observed_at"]).astimezone(
        ZoneInfo(row["display_tz"])
    )
    return Observation(
        observed_at=observed_at,
        wind_direction=row["wind_direction"],
        wind_speed_mph=row["wind_speed_mph"],
        wave_height_ft=row["wave_height_ft"],
        dominant_period_s=row["dominant_period_s"],
        average_period_s=row["average_period_s"],
        mean_wave_direction=row["mean_wave_direction"],
        air_temp_f=row["air_temp_f"],
        water_temp_f=row["water_temp_f"],
    )
