"""CLI main module with subcommands for run and inspect.

Usage:
    python -m tfpublisher.cli run 0 0 1 0 0 0 base_link camera 100
    python -m tfpublisher.cli run 0 0 1 0 0 0 1 base_link camera 100 --count 10
    python -m tfpublisher.cli run --config sender.yaml
    python -m tfpublisher.cli inspect --config sender.yaml --units degrees
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from ..core.config import EULER_ARGC, QUATERNION_ARGC, USAGE, SenderConfig, from_argv, load_config
from ..core.errors import ConfigError
from ..core.logging import get_logger, setup_logging
from ..core.reconfigure import ReconfigurationEngine
from ..core.types import AngleUnits, ChangeAngleUnits
from ..runtime import LoggingBroadcaster, ReconfigureServer, TransformSender

logger = get_logger("tfpublisher.cli")


def _load(args: argparse.Namespace) -> SenderConfig | None:
    """Build the startup config from a file or positional arguments.

    Returns None after reporting the problem when the sender cannot start.
    """
    try:
        if args.config is not None:
            if args.values:
                print("Error: pass either --config or positional values, not both", file=sys.stderr)
                return None
            return load_config(args.config)

        if len(args.values) not in (EULER_ARGC, QUATERNION_ARGC):
            print(USAGE)
            logger.error("tfpublisher exited due to not having the right number of arguments")
            return None
        return from_argv(args.values)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    except ConfigError as e:
        logger.critical(str(e))
        return None


def _snapshot_data(server: ReconfigureServer) -> dict:
    config = asdict(server.config)
    config["angle_units"] = server.config.angle_units.name.lower()
    return {
        "config": config,
        "limits": {"min": server.limits.minimum, "max": server.limits.maximum},
    }


def _start(config: SenderConfig) -> tuple[ReconfigureServer, TransformSender]:
    state = config.build_state()
    engine = ReconfigurationEngine(state, config.angle_units)
    server = ReconfigureServer(engine)
    sender = TransformSender(state, server, LoggingBroadcaster(), config.period_s)
    return server, sender


def cmd_run(args: argparse.Namespace) -> int:
    """Publish the transform until interrupted or ``--count`` publishes.

    Scripted edits from the config file are applied before the first publish.
    The final configuration is printed as JSON on exit.
    """
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)

    config = _load(args)
    if config is None:
        return 1

    try:
        edits = config.edit_requests()
    except ConfigError as e:
        logger.critical(str(e))
        return 1

    server, sender = _start(config)
    for edit in edits:
        server.submit(edit)

    logger.info(
        f"Publishing {config.frame_id} -> {config.child_frame_id} every {config.period_ms:g} ms"
    )
    try:
        sent = sender.run(args.count)
    except KeyboardInterrupt:
        sender.stop()
        sent = None
    logger.info("Transform sender stopped", {"published": sent})

    print(json.dumps(_snapshot_data(server), indent=2))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the initial configuration snapshot without publishing."""
    setup_logging(None, logging.WARNING)

    config = _load(args)
    if config is None:
        return 1

    server, _ = _start(config)
    if args.units is not None:
        server.update(ChangeAngleUnits(AngleUnits[args.units.upper()]))

    data = {
        "frame_id": config.frame_id,
        "child_frame_id": config.child_frame_id,
        "period_ms": config.period_ms,
        **_snapshot_data(server),
    }
    print(json.dumps(data, indent=2))
    return 0


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "values",
        nargs="*",
        metavar="VALUE",
        help="x y z yaw pitch roll frame_id child_frame_id period_ms, "
        "or x y z qx qy qz qw frame_id child_frame_id period_ms",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML/JSON config file (instead of positional values)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfpublisher.cli",
        description="Periodically republish a reconfigurable static transform",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # Run subcommand
    parser_run = subparsers.add_parser(
        "run",
        help="Publish the transform periodically",
    )
    _add_source_arguments(parser_run)
    parser_run.add_argument(
        "--count",
        "-n",
        type=int,
        default=None,
        help="Stop after this many publishes (default: run until interrupted)",
    )
    parser_run.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional JSON lines log file",
    )
    parser_run.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every published transform",
    )
    parser_run.set_defaults(func=cmd_run)

    # Inspect subcommand
    parser_inspect = subparsers.add_parser(
        "inspect",
        help="Print the initial configuration snapshot",
    )
    _add_source_arguments(parser_inspect)
    parser_inspect.add_argument(
        "--units",
        choices=["radians", "degrees"],
        default=None,
        help="Display roll/pitch/yaw in these units",
    )
    parser_inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
