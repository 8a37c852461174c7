"""Publishing result models."""

from dataclasses import dataclass
from enum import StrEnum


class PublishStatus(StrEnum):
    DRY_RUN = "DRY_RUN"
    PUBLISHED = "PUBLISHED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PublishResult:
    status: PublishStatus
    post_id: str | None
    error_message: str
    published_at: str

    @property
    def ok(self) -> bool:
        return self.status != PublishStatus.FAILED
