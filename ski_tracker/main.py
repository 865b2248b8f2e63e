import argparse
import logging
from typing import Sequence

from .errors import SkiTrackerError
from .fix_reader import read_fixes
from .services import (
    HistoryService,
    HistoryServiceConfig,
    RideTrackingService,
    RideTrackingServiceConfig,
)
from .storage import RideStore
from .tools.ride_map import build_ride_map
from .utils import format_time, parse_iso_datetime


def _setup_logging() -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _cmd_replay(args: argparse.Namespace) -> int:
    fixes, summary = read_fixes(args.csv)
    if not fixes:
        logging.error("No usable fixes in %s (rows=%d)", args.csv, summary.rows_total)
        return 1
    logging.info("Replaying %d fixes from %s ...", len(fixes), args.csv)
    service = RideTrackingService(RideTrackingServiceConfig(store=RideStore(args.store)))
    service.start(fixes[0].timestamp)
    accepted = service.record(fixes)
    if accepted < len(fixes):
        logging.info("Accepted %d of %d fixes", accepted, len(fixes))
    record = service.stop_and_save(fixes[-1].timestamp)
    if record is not None:
        print(record.id)
    return 0


def _format_ride_line(ride: dict) -> str:
    parsed = parse_iso_datetime(str(ride.get("date", "")))
    when = parsed.strftime("%b %d %H:%M") if parsed else str(ride.get("date", "?"))
    try:
        duration = format_time(int(float(ride.get("duration", 0))))
    except (TypeError, ValueError):
        duration = "?"
    return (
        f"{ride.get('id', '?'):>16}  {when:<12}  {duration:>8}  "
        f"{ride.get('distance', '?')} mi  {ride.get('maxSpeed', '?')} mph  "
        f"{ride.get('elevation', '?')} ft"
    )


def _cmd_history(args: argparse.Namespace) -> int:
    service = HistoryService(HistoryServiceConfig(store=RideStore(args.store)))
    rides = service.rides()
    totals = service.totals()
    print(
        f"Total rides: {totals.total_rides}  "
        f"Miles: {totals.total_distance_miles:.1f}  "
        f"Vertical (ft): {totals.total_vertical_ft:,.0f}"
    )
    if not rides:
        print("No rides yet! Record one with the 'replay' command.")
    for ride in rides:
        print(_format_ride_line(ride))
    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    service = HistoryService(HistoryServiceConfig(store=RideStore(args.store)))
    if not service.delete_ride(args.ride_id):
        logging.error("Ride %s not found", args.ride_id)
        return 1
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    service = HistoryService(HistoryServiceConfig(store=RideStore(args.store)))
    print(service.export(args.output))
    return 0


def _cmd_map(args: argparse.Namespace) -> int:
    try:
        path = build_ride_map(RideStore(args.store), args.ride_id, args.output)
    except KeyError:
        logging.error("Ride %s not found", args.ride_id)
        return 1
    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ski_tracker", description="Record and review ski/snowboard rides"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--store", help="Ride store file (defaults to RIDE_STORE_FILE)")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", parents=[common], help="Record a ride from a CSV of fixes")
    replay.add_argument("csv", help="CSV with timestamp, latitude, longitude[, altitude, speed]")
    replay.set_defaults(func=_cmd_replay)

    history = sub.add_parser("history", parents=[common], help="Show lifetime totals and rides")
    history.set_defaults(func=_cmd_history)

    delete = sub.add_parser("delete", parents=[common], help="Delete a saved ride")
    delete.add_argument("ride_id")
    delete.set_defaults(func=_cmd_delete)

    export = sub.add_parser("export", parents=[common], help="Export history to Excel")
    export.add_argument("--output", help="Workbook path (defaults to HISTORY_EXPORT_FILE)")
    export.set_defaults(func=_cmd_export)

    ride_map = sub.add_parser("map", parents=[common], help="Render a ride route as HTML")
    ride_map.add_argument("ride_id")
    ride_map.add_argument("--output", help="HTML output path")
    ride_map.set_defaults(func=_cmd_map)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    _setup_logging()
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        return args.func(args)
    except (SkiTrackerError, FileNotFoundError, ValueError) as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1
