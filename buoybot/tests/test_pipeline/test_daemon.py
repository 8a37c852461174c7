"""Tests for the cycle daemon."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest

from buoybot.config.schema import BuoyBotConfig
from buoybot.daemon import CycleDaemon, daemon_status, stop_daemon
from buoybot.models.reporting import CycleStatus
from buoybot.publish.dry_run import DryRunPublisher


@pytest.fixture
def tmp_data(tmp_path, monkeypatch):
    """Redirect PID/state/log files to a temp directory."""
    pid_file = tmp_path / "daemon.pid"
    state_file = tmp_path / "daemon_state.json"
    monkeypatch.setattr("buoybot.daemon.PID_FILE", pid_file)
    monkeypatch.setattr("buoybot.daemon.PID_DIR", tmp_path)
    monkeypatch.setattr("buoybot.daemon.STATE_FILE", state_file)
    monkeypatch.setattr("buoybot.daemon.LOG_DIR", tmp_path / "logs")
    return {"pid": pid_file, "state": state_file, "dir": tmp_path}


@pytest.fixture
def daemon(tmp_data) -> CycleDaemon:
    return CycleDaemon(BuoyBotConfig(), DryRunPublisher(), db_path=str(tmp_data["dir"] / "d.db"))


def _summary(status: CycleStatus, errors: list[str]) -> MagicMock:
    summary = MagicMock()
    summary.status = status
    summary.errors = errors
    return summary


class TestCycleDaemon:
    def test_interval_from_config(self, tmp_data):
        config = BuoyBotConfig(ops={"cycle_interval_minutes": 15})
        assert CycleDaemon(config, DryRunPublisher()).interval == 900

    def test_explicit_interval_wins(self, tmp_data):
        assert CycleDaemon(BuoyBotConfig(), DryRunPublisher(), interval=5).interval == 5

    def test_start_writes_state_and_removes_pid(self, tmp_data, daemon):
        with patch.object(daemon, "_loop"), patch.object(daemon, "_setup_signals"):
            daemon.start()
        assert tmp_data["state"].exists()
        assert not tmp_data["pid"].exists()

    def test_prevents_duplicate_start(self, tmp_data, daemon):
        tmp_data["pid"].write_text(str(os.getpid()))
        with pytest.raises(SystemExit):
            daemon._check_not_already_running()

    def test_cleans_stale_pid(self, tmp_data, daemon):
        tmp_data["pid"].write_text("999999999")
        daemon._check_not_already_running()
        assert not tmp_data["pid"].exists()

    def test_successful_cycle(self, tmp_data, daemon):
        with patch("buoybot.daemon.CyclePipeline") as MockPipeline:
            MockPipeline.return_value.run.return_value = _summary(CycleStatus.COMPLETED, [])
            assert daemon._run_one_cycle() is True
        assert daemon._total_successes == 1
        assert daemon._last_status == "completed"
        assert list((tmp_data["dir"] / "logs").glob("cycle_*.log"))

    def test_failed_cycle_is_counted(self, tmp_data, daemon):
        with patch("buoybot.daemon.CyclePipeline") as MockPipeline:
            MockPipeline.return_value.run.return_value = _summary(
                CycleStatus.FAILED, ["MissingTideError: none"]
            )
            assert daemon._run_one_cycle() is False
        assert daemon._total_failures == 1
        assert daemon._last_status == "failed"

    def test_crash_is_contained(self, tmp_data, daemon):
        with patch("buoybot.daemon.CyclePipeline") as MockPipeline:
            MockPipeline.return_value.run.side_effect = RuntimeError("boom")
            assert daemon._run_one_cycle() is False
        assert daemon._total_failures == 1
        assert daemon._last_status == "crashed"

    def test_loop_runs_one_cycle_per_tick(self, tmp_data, daemon):
        calls = []

        def _cycle():
            calls.append(1)
            daemon._running = False
            return False

        daemon._running = True
        with patch.object(daemon, "_run_one_cycle", side_effect=_cycle), patch(
            "buoybot.daemon.time.sleep"
        ) as sleep:
            daemon._loop()
        assert len(calls) == 1
        sleep.assert_not_called()

    def test_saves_state(self, tmp_data, daemon):
        daemon._started_at = "2026-01-01T00:00:00Z"
        daemon._total_cycles = 5
        daemon._total_successes = 4
        daemon._total_failures = 1
        daemon._save_state()

        state = json.loads(tmp_data["state"].read_text())
        assert state["total_cycles"] == 5
        assert state["total_failures"] == 1
        assert state["station_id"] == "46026"
        assert state["publish_mode"] == "dry-run"

    def test_log_rotation(self, tmp_data, daemon):
        log_dir = tmp_data["dir"] / "logs"
        log_dir.mkdir()
        for i in range(110):
            (log_dir / f"cycle_{i:04d}.log").write_text(f"log {i}")

        daemon._rotate_logs()

        remaining = sorted(p.name for p in log_dir.glob("cycle_*.log"))
        assert len(remaining) == 100
        assert remaining[0] == "cycle_0010.log"


class TestDaemonControl:
    def test_stop_without_pid_file(self, tmp_data, capsys):
        assert stop_daemon() == 1
        assert "No daemon running" in capsys.readouterr().out

    def test_stop_stale_pid(self, tmp_data, capsys):
        tmp_data["pid"].write_text("999999999")
        assert stop_daemon() == 0
        assert not tmp_data["pid"].exists()

    def test_status_reports_state(self, tmp_data, daemon, capsys):
        daemon._save_state()
        assert daemon_status() == 0
        out = capsys.readouterr().out
        assert "running" in out
        assert "station_id: 46026" in out
