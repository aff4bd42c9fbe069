#!/usr/bin/env python3
"""Validate a product feed file and print a per-record report.

Accepts a JSON array of records, a JSON object with an "items" array, or
JSON Lines (one record per line, with --jsonl).

Exit codes:
  0  every record is valid
  1  at least one record is invalid
  2  the file could not be read or parsed

Run with: python3 -m scripts.validate_feed FILE [--jsonl] [--concurrency N] [--coerce] [--json]
"""
import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any

from core.config import settings
from core.errors import AppError, Err, Ok, Result, invalid_json, validation_error
from core.logging import configure_logging
from core.validation import ValidationConfig
from feed import BatchReport, FeedItemValidator, validate_many

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2

# ANSI color codes
C_RESET = "\033[0m"
C_BOLD = "\033[1m"
C_DIM = "\033[2m"
C_GREEN = "\033[32m"
C_YELLOW = "\033[33m"
C_RED = "\033[31m"


def fmt_num(n: int) -> str:
    """Format number with thousands separator."""
    return f"{n:,}"


def load_records(path: Path, jsonl: bool = False) -> Result[list[Any], AppError]:
    """Read feed records from ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return validation_error(f"Cannot read {path}: {e}", origin="cli.load_records")

    if jsonl:
        records = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                return invalid_json(f"line {lineno}: {e.msg}", origin="cli.load_records")
        return Ok(records)

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        return invalid_json(f"line {e.lineno}: {e.msg}", origin="cli.load_records")

    if isinstance(document, dict) and isinstance(document.get("items"), list):
        return Ok(document["items"])
    if isinstance(document, list):
        return Ok(document)
    return validation_error(
        "Feed must be a JSON array of records or an object with an 'items' array",
        origin="cli.load_records",
    )


def print_report(report: BatchReport, color: bool) -> None:
    def c(code: str) -> str:
        return code if color else ""

    for entry in report.results:
        label = entry.input_key or f"#{entry.index}"
        match entry.result:
            case Ok(verdict) if verdict.is_valid:
                print(f"  {c(C_GREEN)}✓{c(C_RESET)} [{entry.index}] {label}")
            case Ok(verdict):
                print(f"  {c(C_RED)}✗{c(C_RESET)} [{entry.index}] {label} "
                      f"{c(C_DIM)}({len(verdict.violations)} violations){c(C_RESET)}")
                for v in verdict.violations:
                    print(f"      {c(C_YELLOW)}{v.path}{c(C_RESET)} {v.code.value}: {v.message}")
            case Err(error):
                print(f"  {c(C_RED)}!{c(C_RESET)} [{entry.index}] {label} {error.message}")

    print()
    print(f"  {c(C_BOLD)}Records:{c(C_RESET)} {fmt_num(report.total_count)}")
    print(f"    Valid:   {c(C_GREEN)}{fmt_num(report.valid_count)}{c(C_RESET)}")
    if report.invalid_count:
        print(f"    Invalid: {c(C_RED)}{fmt_num(report.invalid_count)}{c(C_RESET)}")
    if report.error_count:
        print(f"    Errors:  {c(C_RED)}{fmt_num(report.error_count)}{c(C_RESET)}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate a product feed file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 -m scripts.validate_feed feed.json
  python3 -m scripts.validate_feed feed.jsonl --jsonl --concurrency 16
  python3 -m scripts.validate_feed feed.json --coerce --json > report.json
        """
    )
    parser.add_argument("file", type=Path, help="Feed file (JSON array or JSON Lines)")
    parser.add_argument("--jsonl", action="store_true", help="Read one JSON record per line")
    parser.add_argument("--concurrency", type=int, default=settings.FEED_BATCH_CONCURRENCY,
                        help=f"Worker threads (default: {settings.FEED_BATCH_CONCURRENCY})")
    parser.add_argument("--coerce", action="store_true", default=settings.FEED_COERCE,
                        help="Parse numeric strings and upper-case currency codes")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    args = parser.parse_args(argv)
    if args.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    configure_logging(level="WARNING", json_logs=settings.LOG_JSON, stream=sys.stderr)

    match load_records(args.file, jsonl=args.jsonl):
        case Err(error):
            print(f"Error: {error.message}", file=sys.stderr)
            return EXIT_UNREADABLE
        case Ok(records):
            pass

    validator = FeedItemValidator(ValidationConfig(
        enable_coercion=args.coerce,
        allow_datetime_offset=settings.FEED_DATETIME_ALLOW_OFFSET,
    ))

    start = time.time()
    report = validate_many(records, validator=validator, max_concurrent=args.concurrency)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print_report(report, color=sys.stdout.isatty())
        print(f"    Time:    {time.time() - start:.2f}s")

    return EXIT_OK if report.all_valid else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
