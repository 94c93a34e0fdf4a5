# SPDX-License-Identifier: MIT
"""
secret-detector command line interface

- secret-detector version
- secret-detector scan <root> --format {text,json,sarif} --config <path>

Exits 1 when secrets are found so CI pipelines fail the build. Files that
could not be read are reported as warnings and do not change the exit
code on their own.
"""

import argparse
import dataclasses
import logging
import signal
import sys
import time
from contextlib import contextmanager
from enum import IntEnum

from . import __version__
from .core.exceptions import ConfigError, ScanCancelledError, ScanFatalError
from .reporter import FORMATS, report
from .scanner import CancellationToken, load_scanner_config

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    SECRETS_FOUND = 1
    ERROR = 2


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    p = argparse.ArgumentParser(prog="secret-detector", description="Find committed secrets before they ship")
    p.add_argument("-v", "--version", action="store_true", help="print version and exit")

    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("version", help="print version")

    sp = sub.add_parser("scan", help="scan a directory tree")
    sp.add_argument("root", nargs="?", default=".", help="path to scan (default: .)")
    sp.add_argument(
        "--format",
        choices=FORMATS,
        default="text",
        help="output format (default: text)"
    )
    sp.add_argument(
        "--config",
        help="path to a scanner config YAML file"
    )
    sp.add_argument(
        "--max-workers",
        dest="max_workers",
        type=int,
        help="maximum number of files scanned concurrently"
    )
    sp.add_argument(
        "-o", "--output",
        help="write the report to this file instead of stdout"
    )
    sp.add_argument(
        "--verbose",
        action="store_true",
        help="enable debug logging"
    )

    args = p.parse_args(argv)

    if args.version or args.cmd == "version":
        print(__version__)
        return ExitCode.SUCCESS

    if args.cmd == "scan":
        return handle_scan_command(args)

    p.print_help()
    return ExitCode.SUCCESS


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[secret-detector] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


@contextmanager
def _cancel_on_interrupt(token: CancellationToken):
    """Turn Ctrl-C into a cooperative cancellation for the duration of a scan."""
    def _handler(signum, frame):
        print("Interrupted, waiting for in-flight files...", file=sys.stderr)
        token.cancel()

    try:
        previous = signal.signal(signal.SIGINT, _handler)
    except ValueError:
        # Only the main thread may install handlers.
        previous = None
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def handle_scan_command(args):
    """Handle the scan subcommand."""
    _setup_logging(args.verbose)

    try:
        config = load_scanner_config(args.config, repo_root=args.root)
    except ConfigError as e:
        print(f"CONFIG ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    logger.debug("Scanner config source: %s", config.source or "defaults")

    if args.max_workers is not None:
        if args.max_workers < 1:
            print("error: --max-workers must be at least 1", file=sys.stderr)
            return ExitCode.ERROR
        config = dataclasses.replace(config, max_workers=args.max_workers)

    token = CancellationToken()
    print(f"Scanning {args.root}...", file=sys.stderr)
    start = time.monotonic()
    try:
        with _cancel_on_interrupt(token):
            result = config.build_scanner().scan(token, args.root)
    except ScanCancelledError:
        print("error: scan cancelled", file=sys.stderr)
        return ExitCode.ERROR
    except ScanFatalError as e:
        print(f"error: scan: {e}", file=sys.stderr)
        return ExitCode.ERROR
    duration = time.monotonic() - start

    for err in sorted(result.errors, key=lambda e: e.path):
        print(f"warning: could not scan {err}", file=sys.stderr)
    print(
        f"Scanned {result.files_scanned} files in {duration:.2f}s. Found {len(result.findings)} secrets.",
        file=sys.stderr,
    )

    try:
        if args.output:
            with open(args.output, "w", encoding="utf-8") as out:
                report(out, result, args.format, root=args.root)
        else:
            report(sys.stdout, result, args.format, root=args.root)
    except OSError as e:
        print(f"error: report: {e}", file=sys.stderr)
        return ExitCode.ERROR

    if result.has_findings:
        return ExitCode.SECRETS_FOUND
    return ExitCode.SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
