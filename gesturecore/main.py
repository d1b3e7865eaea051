#!/usr/bin/env python3
"""
gesturecore - replay recorded hand-landmark streams through a gesture session.

Usage:
    gesturecore replay recording.jsonl                       # live_stream profile
    gesturecore replay recording.jsonl --profile still_image
    gesturecore replay recording.jsonl --config config/config.yaml --debug
    gesturecore profiles --config config/config.yaml         # list available profiles

A recording holds one JSON object per line:
    {"timestamp_ms": 33, "hands": [{"handedness": "Right", "landmarks": [[x, y, z], ...]}]}
"""

import sys
import json
import argparse
import logging
from collections import Counter

from gesturecore.core.events import EventBus
from gesturecore.core.session import GestureSession
from gesturecore.core.types import GestureLabel, InvalidFrame
from gesturecore.detection.landmarks import frame_from_record
from gesturecore.utils.config import BUILTIN_PROFILES, Config
from gesturecore.utils.logger import GestureLogger, log_timing, setup_logging

logger = logging.getLogger(__name__)


@log_timing
def replay(session: GestureSession, lines, out=None) -> Counter:
    """Feed each JSON line through ``session``, writing one label per frame.

    Malformed lines are logged and skipped without touching the session.

    Returns:
        Counter of emitted labels plus a ``"skipped"`` count
    """
    out = out or sys.stdout
    counts = Counter()
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            frame = frame_from_record(json.loads(line))
            label = session.ingest(frame)
        except (json.JSONDecodeError, InvalidFrame) as e:
            logger.warning("Line %d skipped: %s", line_number, e)
            counts["skipped"] += 1
            continue

        counts[label] += 1
        out.write(f"{line_number}\t{frame.hand_count}\t{label.name}\n")
    return counts


def _print_summary(counts: Counter, out=None) -> None:
    out = out or sys.stdout
    out.write("\nSummary\n")
    for label in GestureLabel:
        if counts[label]:
            out.write(f"  {label.display_name:<16}{counts[label]}\n")
    if counts["skipped"]:
        out.write(f"  {'Skipped lines':<16}{counts['skipped']}\n")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="gesturecore",
        description="Real-time hand gesture classification core",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    replay_parser = sub.add_parser("replay", help="Replay a JSON-lines landmark recording")
    replay_parser.add_argument("recording", help="Path to the .jsonl recording")
    replay_parser.add_argument(
        "--profile", "-p", default=None,
        help="Gesture profile name (default: session.profile from config, else live_stream)"
    )
    replay_parser.add_argument(
        "--config", "-c", default=None,
        help="Path to config.yaml"
    )
    replay_parser.add_argument(
        "--debug", "-d", action="store_true",
        help="Enable debug logging"
    )

    profiles_parser = sub.add_parser("profiles", help="List built-in and configured gesture profiles")
    profiles_parser.add_argument("--config", "-c", default=None, help="Path to config.yaml")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = Config()
    config.load(config_path=args.config)

    if args.command == "profiles":
        for name in config.profile_names():
            print(name if name in BUILTIN_PROFILES else f"{name}\t(config)")
        return 0

    log_cfg = config.log_settings
    setup_logging(
        level="DEBUG" if args.debug else log_cfg.get("level", "INFO"),
        log_file=log_cfg.get("file"),
        max_size_mb=log_cfg.get("max_size_mb", 10),
        backup_count=log_cfg.get("backup_count", 3),
    )

    try:
        profile = config.get_profile(args.profile)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    bus = EventBus()
    gesture_log = GestureLogger().attach(bus)
    session = GestureSession(profile, event_bus=bus)
    logger.info("Replaying %s with profile '%s' (window=%d, scale=%.0f)",
                args.recording, profile.name, profile.frame_buffer_size, profile.scale)

    try:
        with open(args.recording, "r") as f:
            counts = replay(session, f)
    except FileNotFoundError:
        logger.error("Recording not found: %s", args.recording)
        return 1

    _print_summary(counts)
    logger.info("%d frames, %d gestures, %d hand losses, %d identity conflicts",
                session.frames_ingested, gesture_log.total_gestures,
                gesture_log.hand_losses, gesture_log.identity_conflicts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
