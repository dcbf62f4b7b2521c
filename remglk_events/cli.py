#!/usr/bin/env python3
"""CLI entry point for remglk-events.

Reads a recorded RemGlk output stream and either prints the UI events each
generation produces (as JSON lines) or replays it to plain window text.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import ClientConfig, ConfigError, load_config
from .consumer import replay_transcript
from .parser import read_updates
from .processor import extract_directives, parse_update

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Command Implementations
# ---------------------------------------------------------------------------


def _events(documents: list[dict], config: ClientConfig, directives: bool) -> int:
    """Print one JSON line per UI event, tagged with its generation."""
    resolver = config.image_resolver()
    for document in documents:
        generation = document.get("gen")
        for event in parse_update(document, resolver):
            print(json.dumps({"gen": generation, **event.to_dict()}))
        if directives and document.get("type") != "error":
            print(json.dumps({"type": "directives", **extract_directives(document).to_dict()}))
    return 0


def _replay(documents: list[dict], config: ClientConfig) -> int:
    """Print the final text of every window."""
    print(replay_transcript(documents, config.image_resolver()))
    return 0


# ---------------------------------------------------------------------------
# Argument Parser
# ---------------------------------------------------------------------------


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remglk-events",
        description="Convert RemGlk/GlkOte output into UI events",
    )

    def add_common_options(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "transcript",
            type=Path,
            help="File of RemGlk output documents",
        )
        subparser.add_argument(
            "-c",
            "--config",
            type=Path,
            default=None,
            help="Path to config.yaml (default: ~/.remglk-events/config.yaml)",
        )
        subparser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable debug logging",
        )

    subparsers = parser.add_subparsers(dest="command")

    events_parser = subparsers.add_parser(
        "events",
        help="Print UI events as JSON lines",
    )
    events_parser.add_argument(
        "--directives",
        action="store_true",
        help="Also print timer/exit/debug directives for each update",
    )
    add_common_options(events_parser)

    replay_parser = subparsers.add_parser(
        "replay",
        help="Replay the transcript and print final window text",
    )
    add_common_options(replay_parser)

    return parser


# ---------------------------------------------------------------------------
# Main Entry Point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Run the remglk-events CLI.

    Usage:
        remglk-events events <transcript>   # UI events as JSON lines
        remglk-events replay <transcript>   # Final window text
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    path = args.transcript
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    documents = read_updates(path)
    logger.info("Read %d documents from %s", len(documents), path)

    if args.command == "events":
        sys.exit(_events(documents, config, args.directives))
    elif args.command == "replay":
        sys.exit(_replay(documents, config))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
