"""Cycle reporting models."""

from dataclasses import dataclass, field
from enum import StrEnum


class CycleStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    PUBLISH_FAILED = "publish_failed"
    FAILED = "failed"


@dataclass
class CycleSummary:
    cycle_id: str
    station_id: str
    status: CycleStatus = CycleStatus.RUNNING
    observation_row_id: int | None = None
    report_text: str = ""
    publish_status: str = ""
    post_id: str | None = None
    used_fallbacks: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)
