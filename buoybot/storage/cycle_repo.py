"""Repository for the cycle audit log."""

import sqlite3


def create_cycle(
    conn: sqlite3.Connection, cycle_id: str, station_id: str, publish_mode: str
) -> None:
    """Record the start of a cycle."""
    conn.execute(
        "INSERT INTO cycles (cycle_id, station_id, publish_mode) VALUES (?, ?, ?)",
        (cycle_id, station_id, publish_mode),
    )
    conn.commit()


def complete_cycle(
    conn: sqlite3.Connection,
    cycle_id: str,
    status: str,
    observation_id: int | None = None,
    post_id: str | None = None,
    report_text: str | None = None,
    summary_json: str | None = None,
    error_message: str | None = None,
) -> None:
    """Record cycle completion. Only non-None fields are written."""
    sets = ["completed_at = CURRENT_TIMESTAMP", "status = ?"]
    params: list = [status]

    optional = {
        "observation_id": observation_id,
        "post_id": post_id,
        "report_text": report_text,
        "summary_json": summary_json,
        "error_message": error_message,
    }
    for column, val in optional.items():
        if val is not None:
            sets.append(f"{column} = ?")
            params.append(val)

    params.append(cycle_id)
    conn.execute(f"UPDATE cycles SET {', '.join(sets)} WHERE cycle_id = ?", params)
    conn.commit()


def get_latest_cycle(conn: sqlite3.Connection) -> dict | None:
    row = conn.execute(
        "SELECT * FROM cycles ORDER BY id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_cycle(conn: sqlite3.Connection, cycle_id: str) -> dict | None:
    row = conn.execute(
        "SELECT * FROM cycles WHERE cycle_id = ?", (cycle_id,)
    ).fetchone()
    if row is None:
        return None
    return dict(row)
