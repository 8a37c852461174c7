"""Cycle daemon: runs one buoy cycle per tick on a fixed interval.

A failed cycle is not retried early; the next tick is the retry.

Usage:
    python -m buoybot daemon                 # interval from config
    python -m buoybot daemon --interval 900  # every 15 minutes
    python -m buoybot daemon --stop
    python -m buoybot daemon --status
"""

import json
import logging
import os
import signal
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

from buoybot.config.schema import BuoyBotConfig
from buoybot.pipeline.cycle_pipeline import CyclePipeline
from buoybot.publish.dry_run import DryRunPublisher
from buoybot.publish.live_publisher import LivePublisher

logger = logging.getLogger(__name__)

PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100


class CycleDaemon:
    def __init__(
        self,
        config: BuoyBotConfig,
        publisher: DryRunPublisher | LivePublisher,
        db_path: str = "data/buoybot.db",
        interval: int | None = None,
    ):
        self.config = config
        self.publisher = publisher
        self.db_path = db_path
        self.interval = interval or config.ops.cycle_interval_minutes * 60
        self._running = False
        self._total_cycles = 0
        self._total_successes = 0
        self._total_failures = 0
        self._last_status: str | None = None
        self._started_at: str | None = None

    def start(self) -> None:
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._running = True
        self._started_at = datetime.now(UTC).isoformat()

        logger.info(
            "Daemon started: station=%s publish=%s interval=%ds pid=%d",
            self.config.station.station_id,
            self.publisher.mode,
            self.interval,
            os.getpid(),
        )
        print(
            f"Cycle daemon started (pid {os.getpid()}, {self.publisher.mode}, "
            f"every {self.interval}s). Stop: python -m buoybot daemon --stop"
        )

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by keyboard")
        finally:
            self._cleanup()

    def _loop(self) -> None:
        while self._running:
            tick = time.monotonic()
            self._run_one_cycle()
            self._save_state()

            # Sleep in short steps so a signal can stop the loop promptly
            wake_at = tick + self.interval
            while self._running and time.monotonic() < wake_at:
                time.sleep(1)

    def _run_one_cycle(self) -> bool:
        """Run a cycle with a per-cycle log file. Returns True on success."""
        self._total_cycles += 1
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")

        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / f"cycle_{stamp}.log")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        try:
            logger.info("=== Cycle #%d starting ===", self._total_cycles)
            pipeline = CyclePipeline(self.config, self.publisher, self.db_path)
            summary = pipeline.run()
            self._last_status = summary.status.value

            if summary.errors:
                self._total_failures += 1
                logger.error(
                    "Cycle #%d ended with errors: %s", self._total_cycles, summary.errors
                )
                return False
            self._total_successes += 1
            return True

        except Exception:
            self._total_failures += 1
            self._last_status = "crashed"
            logger.exception("Cycle #%d crashed", self._total_cycles)
            return False

        finally:
            root_logger.removeHandler(file_handler)
            file_handler.close()
            self._rotate_logs()

    def _rotate_logs(self) -> None:
        if not LOG_DIR.exists():
            return
        logs = sorted(LOG_DIR.glob("cycle_*.log"))
        for old in logs[: max(0, len(logs) - MAX_LOG_FILES)]:
            old.unlink(missing_ok=True)

    def _setup_signals(self) -> None:
        def _stop(signum: int, frame: object) -> None:
            logger.info(
                "Received %s, stopping after current cycle", signal.Signals(signum).name
            )
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

    def _check_not_already_running(self) -> None:
        if not PID_FILE.exists():
            return
        try:
            pid = int(PID_FILE.read_text().strip())
            os.kill(pid, 0)
        except (ProcessLookupError, ValueError):
            # stale
            PID_FILE.unlink(missing_ok=True)
            return
        except PermissionError:
            print("Daemon may already be running, cannot verify its pid.")
            sys.exit(1)
        print(f"Daemon already running (pid {pid}). Stop it first.")
        sys.exit(1)

    def _write_pid(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "station_id": self.config.station.station_id,
            "interval": self.interval,
            "publish_mode": self.publisher.mode,
            "total_cycles": self._total_cycles,
            "total_successes": self._total_successes,
            "total_failures": self._total_failures,
            "last_status": self._last_status,
            "last_update": datetime.now(UTC).isoformat(),
        }
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))

    def _cleanup(self) -> None:
        PID_FILE.unlink(missing_ok=True)
        self._save_state()
        logger.info(
            "Daemon stopped: %d cycles (%d ok, %d failed)",
            self._total_cycles,
            self._total_successes,
            self._total_failures,
        )


def stop_daemon(wait_seconds: int = 60) -> int:
    """Send SIGTERM to a running daemon and wait for it to exit."""
    if not PID_FILE.exists():
        print("No daemon running (no PID file found)")
        return 1

    try:
        pid = int(PID_FILE.read_text().strip())
    except ValueError:
        print("Corrupt PID file, removing")
        PID_FILE.unlink(missing_ok=True)
        return 1

    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        return 0

    print(f"Stopping daemon (pid {pid})...")
    for _ in range(wait_seconds):
        time.sleep(1)
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            print("Daemon stopped")
            PID_FILE.unlink(missing_ok=True)
            return 0

    print(f"Daemon did not stop within {wait_seconds}s")
    return 1


def daemon_status() -> int:
    if not STATE_FILE.exists():
        print("No daemon state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    running = False
    try:
        os.kill(int(state.get("pid")), 0)
        running = True
    except PermissionError:
        running = True
    except (ProcessLookupError, ValueError, TypeError):
        pass

    print(f"Daemon {'running' if running else 'stopped'}")
    for key in (
        "pid",
        "station_id",
        "publish_mode",
        "interval",
        "started_at",
        "total_cycles",
        "total_successes",
        "total_failures",
        "last_status",
        "last_update",
    ):
        print(f"  {key}: {state.get(key, '?')}")
    return 0
