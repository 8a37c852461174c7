"""Cycle pipeline: fetch, extract, parse, compose, persist, publish."""

import logging
import sqlite3
import time
import uuid
from datetime import datetime

import httpx

from buoybot.config.schema import BuoyBotConfig
from buoybot.ingest.ndbc_client import NdbcClient
from buoybot.ingest.observation_parser import ObservationParser
from buoybot.ingest.record_extractor import extract_latest_record
from buoybot.models.common import utc_now
from buoybot.models.errors import FatalCycleError
from buoybot.models.observation import Observation
from buoybot.models.reporting import CycleStatus, CycleSummary
from buoybot.publish.dry_run import DryRunPublisher
from buoybot.publish.live_publisher import LivePublisher
from buoybot.reporting.formatters import (
    compose_report,
    format_summary_json,
    format_summary_text,
    format_tide,
)
from buoybot.storage import cycle_repo, observation_repo, tide_repo
from buoybot.storage.database import open_database

logger = logging.getLogger(__name__)


class CyclePipeline:
    def __init__(
        self,
        config: BuoyBotConfig,
        publisher: DryRunPublisher | LivePublisher,
        db_path: str = "data/buoybot.db",
        client: NdbcClient | None = None,
    ):
        self.config = config
        self.publisher = publisher
        self.db_path = db_path
        self.client = client or NdbcClient(
            base_url=config.station.feed_base_url,
            user_agent=config.fetch.user_agent,
            timeout=config.fetch.timeout_seconds,
        )

    def run(self, now: datetime | None = None) -> CycleSummary:
        """Execute one cycle.

        Fatal conditions end the cycle before anything is saved or published.
        The next scheduled cycle is the only retry.
        """
        start_time = time.monotonic()
        cycle_id = str(uuid.uuid4())
        station = self.config.station

        with open_database(self.db_path) as conn:
            cycle_repo.create_cycle(
                conn, cycle_id, station.station_id, self.publisher.mode
            )
            summary = CycleSummary(cycle_id=cycle_id, station_id=station.station_id)
            return self._run_cycle(conn, summary, now or utc_now(), start_time)

    def _run_cycle(
        self,
        conn: sqlite3.Connection,
        summary: CycleSummary,
        now: datetime,
        start_time: float,
    ) -> CycleSummary:
        cycle_id = summary.cycle_id
        try:
            try:
                obs, report = self._build_report(conn, summary, now)
            except (FatalCycleError, httpx.HTTPError) as e:
                logger.error("Cycle %s aborted: %s", cycle_id[:8], e)
                summary.status = CycleStatus.FAILED
                summary.errors.append(f"{type(e).__name__}: {e}")
                self._finish(conn, summary, start_time, error_message=str(e))
                return summary

            summary.report_text = report
            summary.observation_row_id = observation_repo.save_observation(
                conn, summary.station_id, obs
            )

            result = self.publisher.publish(report)
            summary.publish_status = result.status.value
            summary.post_id = result.post_id
            if result.ok:
                summary.status = CycleStatus.COMPLETED
            else:
                summary.status = CycleStatus.PUBLISH_FAILED
                summary.errors.append(f"Publish failed: {result.error_message}")

            self._finish(
                conn,
                summary,
                start_time,
                error_message=result.error_message or None,
            )
            return summary

        except Exception as e:
            logger.exception("Cycle %s crashed", cycle_id[:8])
            cycle_repo.complete_cycle(
                conn, cycle_id, CycleStatus.FAILED.value, error_message=str(e)
            )
            raise

    def _build_report(
        self, conn: sqlite3.Connection, summary: CycleSummary, now: datetime
    ) -> tuple[Observation, str]:
        station = self.config.station

        raw = self.client.get_realtime(station.station_id)
        tokens = extract_latest_record(raw, station.record_start, station.record_end)

        prior = observation_repo.get_latest_observation(conn, station.station_id)
        parser = ObservationParser(station.timezone)
        obs = parser.parse(tokens, prior)
        summary.used_fallbacks = list(parser.fallbacks)

        tide_text = format_tide(tide_repo.get_next_tide(conn, now))
        report = compose_report(obs, tide_text, station.title)
        logger.info("Report for %s:\n%s", station.station_id, report)
        return obs, report

    def _finish(
        self,
        conn: sqlite3.Connection,
        summary: CycleSummary,
        start_time: float,
        error_message: str | None = None,
    ) -> None:
        summary.duration_seconds = time.monotonic() - start_time
        cycle_repo.complete_cycle(
            conn,
            summary.cycle_id,
            summary.status.value,
            observation_id=summary.observation_row_id,
            post_id=summary.post_id,
            report_text=summary.report_text or None,
            summary_json=format_summary_json(summary),
            error_message=error_message,
        )
        logger.info("\n%s", format_summary_text(summary))
