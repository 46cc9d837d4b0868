"""Command-line entry point for on-demand scans.

Usage:
    airlock scan notes.txt           # scan a file
    pbpaste | airlock scan           # scan stdin
    airlock scan --json notes.txt    # machine-readable finding
    pbpaste | airlock guard          # run the paste gate under the configured deadline
    airlock patterns                 # list monitored detectors

Exit codes:
    0  text is clean (or the gate allowed the transfer)
    1  sensitive data detected (or the gate blocked the transfer)
    2  usage or input error (config errors exit via SystemExit(1) from load_config)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from airlock import __version__
from airlock.alerts import build_selection_notice
from airlock.config import VALID_LOG_LEVELS, Config, load_config
from airlock.constants import VALID_LOG_FORMATS
from airlock.scanner.catalog import Catalog
from airlock.scanner.regex_engine import list_detector_names
from airlock.scanner.safe_scan import guard_transfer_async
from airlock.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_CLEAN = 0
EXIT_FLAGGED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airlock",
        description="Check text for secrets and personal data before sharing it.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to an Airlock config.yaml")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help="Override logging.level",
    )
    parser.add_argument(
        "--log-format",
        choices=sorted(VALID_LOG_FORMATS),
        help="Override logging.format",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    scan_p = sub.add_parser("scan", help="Scan a file or stdin")
    scan_p.add_argument("path", nargs="?", default="-", help="File to scan ('-' for stdin)")
    scan_p.add_argument("--json", action="store_true", help="Print the finding as JSON")

    guard_p = sub.add_parser("guard", help="Run the transfer gate on a file or stdin")
    guard_p.add_argument("path", nargs="?", default="-", help="File to check ('-' for stdin)")
    guard_p.add_argument("--context-id", help="Identifier recorded on the detection event")

    sub.add_parser("patterns", help="List monitored detectors")
    return parser


def _read_input(path: str) -> Optional[str]:
    """File contents, stdin for ``-``, or None after reporting a read error."""
    try:
        if path == "-":
            return sys.stdin.read()
        with open(path, encoding="utf-8", errors="replace") as fh:
            return fh.read()
    except OSError as exc:
        print(f"airlock: cannot read {path}: {exc.strerror or exc}", file=sys.stderr)
        return None


def _cmd_scan(args: argparse.Namespace, catalog: Catalog) -> int:
    text = _read_input(args.path)
    if text is None:
        return EXIT_USAGE

    notice = build_selection_notice(text, catalog)
    finding = notice.finding
    logger.info(
        "On-demand scan complete",
        detector_key=finding.detector_key if finding else None,
        match_count=finding.match_count if finding else 0,
        text_length=len(text),
    )

    if args.json:
        print(json.dumps({"finding": finding.to_dict() if finding else None}, indent=2))
    else:
        print(notice.title)
        print(notice.message)
    return EXIT_FLAGGED if finding else EXIT_CLEAN


def _cmd_guard(args: argparse.Namespace, config: Config) -> int:
    text = _read_input(args.path)
    if text is None:
        return EXIT_USAGE

    decision = asyncio.run(
        guard_transfer_async(text, context_id=args.context_id, **config.gate_kwargs())
    )
    if decision.blocked:
        print(decision.alert)
        return EXIT_FLAGGED
    print("Transfer allowed (fail-open)" if decision.failed_open else "Transfer allowed")
    return EXIT_CLEAN


def _cmd_patterns(catalog: Catalog) -> int:
    names = list_detector_names(catalog)
    print(f"{len(names)} security patterns active:")
    for name in names:
        print(f"  - {name}")
    return EXIT_CLEAN


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(
        log_level=args.log_level or config.logging.level,
        json_output=(args.log_format or config.logging.format) == "json",
    )

    if args.command == "scan":
        return _cmd_scan(args, config.build_catalog())
    if args.command == "guard":
        return _cmd_guard(args, config)
    return _cmd_patterns(config.build_catalog())


if __name__ == "__main__":
    sys.exit(main())
