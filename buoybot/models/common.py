"""Common types and helpers shared across models."""

from datetime import UTC, datetime

DB_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def to_db_timestamp(dt: datetime) -> str:
    """Render an aware datetime as a sortable UTC string for sqlite columns."""
    return dt.astimezone(UTC).strftime(DB_TIMESTAMP_FORMAT)


def from_db_timestamp(value: str) -> datetime:
    return datetime.strptime(value, DB_TIMESTAMP_FORMAT).replace(tzinfo=UTC)
