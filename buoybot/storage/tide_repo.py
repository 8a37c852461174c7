"""Repository for tide predictions.

The table is filled ahead of time from published tide tables; the cycle only
reads the next prediction.
"""

import sqlite3
from datetime import datetime

from buoybot.models.common import from_db_timestamp, to_db_timestamp
from buoybot.models.observation import TidePrediction


def save_tide_prediction(conn: sqlite3.Connection, tide: TidePrediction) -> int:
    """Insert or replace the prediction at ``tide.tide_at``. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO tide_predictions "
        "(tide_at, date, day, time, predicted_ft, high_low) "
        "VALUES (?, ?, ?, ?, ?, ?) "
        "ON CONFLICT(tide_at) DO UPDATE SET date = excluded.date, "
        "day = excluded.day, time = excluded.time, "
        "predicted_ft = excluded.predicted_ft, high_low = excluded.high_low",
        (
            to_db_timestamp(tide.tide_at),
            tide.date,
            tide.day,
            tide.time,
            tide.predicted_ft,
            tide.high_low,
        ),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_next_tide(conn: sqlite3.Connection, now: datetime) -> TidePrediction | None:
    """First prediction at or after ``now`` (an aware datetime)."""
    row = conn.execute(
        "SELECT * FROM tide_predictions WHERE tide_at >= ? "
        "ORDER BY tide_at ASC LIMIT 1",
        (to_db_timestamp(now),),
    ).fetchone()
    if row is None:
        return None
    return TidePrediction(
        date=row["date"],
        day=row["day"],
        time=row["time"],
        predicted_ft=row["predicted_ft"],
        high_low=row["high_low"],
        tide_at=from_db_timestamp(row["tide_at"]),
    )
