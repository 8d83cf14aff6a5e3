#!/usr/bin/env python3
"""
WPML Viewer - Command line entry point

Inspect DJI waypoint missions: waypoints, POIs, mission settings and
the reconstructed flight path.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import Config, set_config
from .mission import (
    MissionParser,
    MissionStore,
    ParseError,
    ValidationError,
    build_map_payload,
)
from .mission.models import Mission
from .navigation import FlightPathBuilder, SegmentStyle, describe_legs
from .utils.logger import setup_logging

logger = logging.getLogger(__name__)


# ANSI colors
class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'


def color(text: str, c: str) -> str:
    """Apply color to text"""
    return f"{c}{text}{Colors.RESET}"


def print_error(msg: str):
    """Print error message"""
    print(color(f"Error: {msg}", Colors.RED), file=sys.stderr)


def print_success(msg: str):
    """Print success message"""
    print(color(msg, Colors.GREEN))


def print_warning(msg: str):
    """Print warning message"""
    print(color(msg, Colors.YELLOW))


def _parse(config: Config, args) -> Mission:
    if getattr(args, 'demo_fallback', False):
        config.parser.demo_fallback = True
    mission = MissionParser(config.parser).parse(args.source)
    if mission.is_demo:
        print_warning("No waypoints in document, showing demo mission")
    return mission


# ==================== Commands ====================

def cmd_show(config: Config, args) -> int:
    """Show mission settings, waypoints and POIs"""
    mission = _parse(config, args)

    if args.json:
        print(json.dumps(build_map_payload(mission), indent=2))
        return 0

    cfg = mission.config
    print()
    print(color("=== Mission ===", Colors.BOLD))
    print(f"Drone: {cfg.drone_info.drone_model}")
    print(f"Fly to wayline: {cfg.fly_to_wayline_mode or '-'}")
    print(f"Finish action: {cfg.finish_action or '-'}")
    print(f"Exit on RC lost: {cfg.exit_on_rc_lost or '-'}")
    print(f"RC lost action: {cfg.execute_rc_lost_action or '-'}")
    print(f"Transitional speed: {cfg.global_transitional_speed:.1f} m/s")

    print()
    print(color(f"--- Waypoints ({mission.waypoint_count}) ---", Colors.CYAN))
    for wp in mission.waypoints:
        line = (f"  {wp.index:3d}  {wp.lat:.6f}, {wp.lon:.6f}  "
                f"{wp.execute_height:6.1f} m  {wp.speed:4.1f} m/s  "
                f"{'straight' if wp.use_straight_line else 'curved  '}")
        if wp.heading_angle is not None:
            line += f"  hdg {wp.heading_angle:.0f}°"
        if wp.poi_index is not None:
            line += f"  POI {wp.poi_index}"
        if wp.actions:
            line += f"  [{wp.actions_text}]"
        print(line)

    if mission.pois:
        print()
        print(color(f"--- POIs ({mission.poi_count}) ---", Colors.CYAN))
        for poi in mission.pois:
            print(f"  {poi.index:3d}  {poi.lat:.6f}, {poi.lon:.6f}  {poi.alt:.1f} m")

    print()
    return 0


def cmd_path(config: Config, args) -> int:
    """Show the reconstructed flight path"""
    mission = _parse(config, args)

    if args.matcher:
        config.path.matcher = args.matcher
    builder = FlightPathBuilder(config.path)
    segments = builder.build(mission.waypoints)

    if args.json:
        print(json.dumps(build_map_payload(mission, segments), indent=2))
        return 0

    print()
    print(color(f"=== Flight path ({len(segments)} segments) ===", Colors.BOLD))
    for segment in segments:
        style = segment.style.value
        if segment.fallback:
            style += " (fallback)"
        style_color = Colors.BLUE if segment.style == SegmentStyle.STRAIGHT else Colors.GREEN
        print(f"  {segment.from_index:3d} -> {segment.to_index:3d}  "
              f"{color(f'{style:20s}', style_color)}  {len(segment.points)} points")

    legs = describe_legs(mission.waypoints)
    if legs:
        print()
        print(color("--- Legs ---", Colors.CYAN))
        total = 0.0
        for leg in legs:
            total += leg.distance_m
            turn = f"{leg.turn_angle_deg:5.1f}°" if leg.turn_angle_deg is not None else "    -"
            print(f"  {leg.from_index:3d} -> {leg.to_index:3d}  {leg.distance_m:8.1f} m  "
                  f"brg {leg.bearing_deg:5.1f}°  turn {turn}")
        print(f"  Total: {total:.1f} m")

    print()
    return 0


def cmd_export(config: Config, args) -> int:
    """Parse a mission and save it to the mission store"""
    mission = _parse(config, args)
    store = MissionStore(args.store or config.store.missions_dir)
    path = store.save(mission, args.name)
    print_success(f"Mission exported to {path}")
    return 0


def cmd_list(config: Config, args) -> int:
    """List stored missions"""
    store = MissionStore(args.store or config.store.missions_dir)
    missions = store.list_all()

    if not missions:
        print("No stored missions")
        return 0

    print()
    print(color("=== Stored missions ===", Colors.BOLD))
    for summary in missions:
        demo = " (demo)" if summary['is_demo'] else ""
        print(f"  {summary['name']:24s} {summary['waypoint_count']:4d} waypoints  "
              f"{summary['poi_count']:3d} POIs  {summary['drone_model']}{demo}")
    print()
    return 0


def cmd_delete(config: Config, args) -> int:
    """Delete a stored mission"""
    store = MissionStore(args.store or config.store.missions_dir)
    if not store.delete(args.name):
        print_error(f"Mission '{args.name}' not found")
        return 1
    print_success(f"Deleted mission '{args.name}'")
    return 0


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="wpml-viewer",
        description="WPML Viewer - DJI waypoint mission inspector"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to configuration file (YAML)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file path"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Show waypoints, POIs and mission settings")
    show.add_argument("source", help="Mission document or extracted package directory")
    show.add_argument("--json", action="store_true", help="Print map payload as JSON")
    show.add_argument("--demo-fallback", action="store_true",
                      help="Show the demo mission if the document has no waypoints")
    show.set_defaults(func=cmd_show)

    path = sub.add_parser("path", help="Show the reconstructed flight path")
    path.add_argument("source", help="Mission document or extracted package directory")
    path.add_argument("--json", action="store_true", help="Print map payload as JSON")
    path.add_argument("--matcher", choices=["threshold", "knot"], default=None,
                      help="Spline slicing strategy")
    path.add_argument("--demo-fallback", action="store_true",
                      help="Use the demo mission if the document has no waypoints")
    path.set_defaults(func=cmd_path)

    export = sub.add_parser("export", help="Save a parsed mission to the mission store")
    export.add_argument("source", help="Mission document or extracted package directory")
    export.add_argument("name", help="Name to store the mission under")
    export.add_argument("--store", default=None, help="Mission store directory")
    export.set_defaults(func=cmd_export)

    lst = sub.add_parser("list", help="List stored missions")
    lst.add_argument("--store", default=None, help="Mission store directory")
    lst.set_defaults(func=cmd_list)

    delete = sub.add_parser("delete", help="Delete a stored mission")
    delete.add_argument("name", help="Stored mission name")
    delete.add_argument("--store", default=None, help="Mission store directory")
    delete.set_defaults(func=cmd_delete)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    config = Config.load(args.config)
    set_config(config)

    log_level = "DEBUG" if args.verbose else config.logging.level
    setup_logging(level=log_level, log_file=args.log_file or config.logging.file or None)

    try:
        return args.func(config, args)
    except (ParseError, ValidationError) as e:
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
