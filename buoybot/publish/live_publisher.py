"""Live publisher: posts reports through a TwitterClient."""

import logging

from buoybot.config.loader import load_credentials
from buoybot.config.schema import BuoyBotConfig
from buoybot.models.common import utc_now_iso
from buoybot.models.publishing import PublishResult, PublishStatus
from buoybot.publish.dry_run import DryRunPublisher
from buoybot.publish.twitter_client import TwitterClient, TwitterClientError

logger = logging.getLogger(__name__)


class LivePublisher:
    """Wraps a TwitterClient constructed once by the caller.

    API failures become a FAILED result; they are not retried.
    """

    mode = "live"

    def __init__(self, client: TwitterClient):
        self.client = client

    def publish(self, text: str) -> PublishResult:
        logger.info("LIVE: publishing %d chars", len(text))
        try:
            post_id = self.client.post(text)
        except TwitterClientError as e:
            logger.error("Publish failed: %s", e)
            return PublishResult(
                status=PublishStatus.FAILED,
                post_id=None,
                error_message=str(e),
                published_at=utc_now_iso(),
            )

        logger.info("Published post %s", post_id)
        return PublishResult(
            status=PublishStatus.PUBLISHED,
            post_id=post_id,
            error_message="",
            published_at=utc_now_iso(),
        )


def build_publisher(config: BuoyBotConfig, live: bool) -> DryRunPublisher | LivePublisher:
    """Live only when asked for on the command line or enabled in config."""
    if not (live or config.publisher.enabled):
        return DryRunPublisher()
    creds = load_credentials(config.publisher.credentials_file)
    client = TwitterClient(
        bearer_token=creds.bearer_token,
        base_url=config.publisher.api_base_url,
        timeout=config.publisher.timeout_seconds,
    )
    return LivePublisher(client)
