"""Initial schema: observations, tide predictions and the cycle log."""

import sqlite3

DDL = [
    # One row per successfully parsed cycle
    """
    CREATE TABLE IF NOT EXISTS observations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        station_id TEXT NOT NULL,
        observed_at TEXT NOT NULL,
        display_tz TEXT NOT NULL,
        wind_direction TEXT NOT NULL,
        wind_speed_mph REAL NOT NULL,
        wave_height_ft REAL NOT NULL,
        dominant_period_s INTEGER NOT NULL,
        average_period_s REAL NOT NULL,
        mean_wave_direction TEXT NOT NULL,
        air_temp_f REAL NOT NULL,
        water_temp_f REAL NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_observations_station_time "
        "ON observations(station_id, observed_at)"
    ),

    # Pre-populated tide table, read only by the cycle
    """
    CREATE TABLE IF NOT EXISTS tide_predictions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tide_at TEXT NOT NULL UNIQUE,
        date TEXT NOT NULL,
        day TEXT NOT NULL,
        time TEXT NOT NULL,
        predicted_ft REAL NOT NULL,
        high_low TEXT NOT NULL
    )
    """,

    # Cycle audit log
    """
    CREATE TABLE IF NOT EXISTS cycles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        cycle_id TEXT UNIQUE NOT NULL,
        station_id TEXT NOT NULL,
        publish_mode TEXT NOT NULL,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        observation_id INTEGER REFERENCES observations(id),
        post_id TEXT,
        report_text TEXT,
        summary_json TEXT,
        error_message TEXT
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
