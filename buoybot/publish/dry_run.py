"""Dry-run publisher: logs the report instead of posting it."""

import logging

from buoybot.models.common import utc_now_iso
from buoybot.models.publishing import PublishResult, PublishStatus

logger = logging.getLogger(__name__)


class DryRunPublisher:
    mode = "dry-run"

    def publish(self, text: str) -> PublishResult:
        logger.info("DRY-RUN: would publish %d chars:\n%s", len(text), text)
        return PublishResult(
            status=PublishStatus.DRY_RUN,
            post_id=None,
            error_message="",
            published_at=utc_now_iso(),
        )
