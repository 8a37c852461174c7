"""CLI entry point for buoybot."""

import argparse
import logging

from buoybot.config.loader import CredentialsError, load_config
from buoybot.daemon import CycleDaemon, daemon_status, stop_daemon
from buoybot.models.common import utc_now
from buoybot.models.errors import FatalCycleError
from buoybot.pipeline.cycle_pipeline import CyclePipeline
from buoybot.publish.live_publisher import build_publisher
from buoybot.reporting.formatters import (
    REPORT_TIME_FORMAT,
    format_observation_lines,
    format_tide,
)
from buoybot.storage import cycle_repo, observation_repo, tide_repo
from buoybot.storage.database import open_database

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/buoybot.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="buoybot",
        description="Publish the latest NDBC buoy observation with the next tide",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="Run one fetch-parse-persist-publish cycle")
    run_p.add_argument("--publish", action="store_true", help="Post the report")

    sub.add_parser("latest", help="Show the latest saved observation")
    sub.add_parser("tide", help="Show the next tide prediction")

    cycle_p = sub.add_parser("cycle", help="Show a cycle from the audit log")
    cycle_p.add_argument("cycle_id", nargs="?", help="Cycle id (default: latest)")

    daemon_p = sub.add_parser("daemon", help="Run cycles on a fixed interval")
    daemon_p.add_argument("--interval", type=int, help="Seconds between cycles")
    daemon_p.add_argument("--publish", action="store_true", help="Post reports")
    daemon_p.add_argument("--stop", action="store_true", help="Stop the daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon state")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display resolved config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "daemon" and args.stop:
        return stop_daemon()
    if args.command == "daemon" and args.status:
        return daemon_status()

    config = load_config(args.config)

    if args.command == "run":
        return _cmd_run(config, args)
    elif args.command == "latest":
        return _cmd_latest(config, args)
    elif args.command == "tide":
        return _cmd_tide(args)
    elif args.command == "cycle":
        return _cmd_cycle(args)
    elif args.command == "daemon":
        return _cmd_daemon(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_run(config, args) -> int:
    try:
        publisher = build_publisher(config, live=args.publish)
    except CredentialsError as e:
        print(f"Error: {e}")
        return 1

    summary = CyclePipeline(config, publisher, args.db).run()
    if summary.report_text:
        print(summary.report_text)
    for err in summary.errors:
        print(f"Error: {err}")
    return 0 if not summary.errors else 1


def _cmd_latest(config, args) -> int:
    station = config.station
    with open_database(args.db) as conn:
        obs = observation_repo.get_latest_observation(conn, station.station_id)
        saved = observation_repo.count_observations(conn, station.station_id)
        last_cycle = cycle_repo.get_latest_cycle(conn)

    if obs is None:
        print(f"No observations saved for station {station.station_id}")
        return 1

    print(f"{station.title} at {obs.observed_at.strftime(REPORT_TIME_FORMAT)}")
    for line in format_observation_lines(obs):
        print(line)
    print(f"Water Temp: {obs.water_temp_f:.1f}F")
    print(f"Air Temp: {obs.air_temp_f:.1f}F")
    print(f"Observations saved: {saved}")
    if last_cycle is not None:
        print(f"Last cycle: {last_cycle['status']} at {last_cycle['started_at']}")
    return 0


def _cmd_tide(args) -> int:
    with open_database(args.db) as conn:
        tide = tide_repo.get_next_tide(conn, utc_now())

    try:
        print(format_tide(tide))
    except FatalCycleError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_cycle(args) -> int:
    with open_database(args.db) as conn:
        if args.cycle_id:
            cycle = cycle_repo.get_cycle(conn, args.cycle_id)
        else:
            cycle = cycle_repo.get_latest_cycle(conn)

    if cycle is None:
        print(f"No cycle found: {args.cycle_id or 'audit log is empty'}")
        return 1

    print(f"Cycle {cycle['cycle_id']} ({cycle['publish_mode']})")
    print(f"Station: {cycle['station_id']} | Status: {cycle['status']}")
    print(f"Started: {cycle['started_at']} | Completed: {cycle['completed_at'] or '-'}")
    if cycle["post_id"]:
        print(f"Post: {cycle['post_id']}")
    if cycle["error_message"]:
        print(f"Error: {cycle['error_message']}")
    if cycle["report_text"]:
        print(cycle["report_text"])
    return 0


def _cmd_daemon(config, args) -> int:
    try:
        publisher = build_publisher(config, live=args.publish)
    except CredentialsError as e:
        print(f"Error: {e}")
        return 1

    daemon = CycleDaemon(config, publisher, db_path=args.db, interval=args.interval)
    daemon.start()
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    print("Use: config show")
    return 1
