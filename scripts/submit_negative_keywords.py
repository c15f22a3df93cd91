"""
Negative keyword upload from the command line.

Usage:
    # Write the upload template
    python scripts/submit_negative_keywords.py template negative_keywords.xlsx

    # Parse a filled template and print the grouped payload
    python scripts/submit_negative_keywords.py preview negative_keywords.xlsx

    # Parse, submit every group and print the failure table
    python scripts/submit_negative_keywords.py submit negative_keywords.xlsx \
        --concurrency 5
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, _root_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(_root_dir, ".env"))

from config import settings, configure_logging
from exceptions import AppError
from models.negative_keyword import SubmissionReport
from parsers.keyword_sheet_parser import parse_keyword_sheet
from services.normalizer_service import count_keywords, normalize_records, render_groups
from services.submission_service import KeywordSubmissionService
from services.template_service import get_template_service


def write_template(output: Path) -> int:
    output.write_bytes(get_template_service().generate_template().getvalue())
    print(f"[OK] Template written to {output}")
    return 0


def load_groups(path: Path):
    records = parse_keyword_sheet(path)
    return normalize_records(records)


def preview(path: Path) -> int:
    groups = load_groups(path)
    print(render_groups(groups))
    print(f"\n{len(groups)} groups, {count_keywords(groups)} keywords")
    return 0


def print_report(report: SubmissionReport) -> None:
    print(report.message)
    if not report.failures:
        return

    print()
    print(f"{'ADVERTISER ID':<16} {'UNIT ID':<16} MESSAGE")
    print("-" * 60)
    for failure in report.failures:
        print(f"{failure.advertiser_id!s:<16} {failure.unit_id!s:<16} {failure.message}")


def submit(path: Path, endpoint: str, concurrency: int, timeout: float) -> int:
    groups = load_groups(path)
    if not groups:
        print("ERROR: No complete rows found, nothing to submit.")
        return 1

    print(f"Submitting {len(groups)} groups ({count_keywords(groups)} keywords)...")

    service = KeywordSubmissionService(
        endpoint_url=endpoint,
        max_concurrency=concurrency,
        timeout_seconds=timeout,
    )
    report = asyncio.run(service.submit_and_report(groups))
    print_report(report)

    return 0 if report.all_succeeded else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Bulk upload negative keywords per advertiser and unit."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    template_cmd = commands.add_parser("template", help="Write the upload template")
    template_cmd.add_argument("output", type=Path, help="Path of the .xlsx to write")

    preview_cmd = commands.add_parser("preview", help="Print the grouped payload")
    preview_cmd.add_argument("file", type=Path, help="Filled template (.xlsx)")

    submit_cmd = commands.add_parser("submit", help="Submit every group")
    submit_cmd.add_argument("file", type=Path, help="Filled template (.xlsx)")
    submit_cmd.add_argument(
        "--endpoint",
        default=settings.negative_keyword_api_url,
        help="API endpoint (default: NEGATIVE_KEYWORD_API_URL setting)",
    )
    submit_cmd.add_argument(
        "--concurrency",
        type=int,
        default=settings.max_concurrent_requests,
        help="Maximum requests in flight at once",
    )
    submit_cmd.add_argument(
        "--timeout",
        type=float,
        default=settings.request_timeout_seconds,
        help="Per-request timeout in seconds",
    )

    args = parser.parse_args(argv)

    if args.command == "submit" and args.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    try:
        if args.command == "template":
            return write_template(args.output)
        if args.command == "preview":
            return preview(args.file)
        return submit(args.file, args.endpoint, args.concurrency, args.timeout)
    except AppError as e:
        print(f"ERROR: {e.message}")
        if e.details:
            print(f"       {e.details}")
        return 1


if __name__ == "__main__":
    configure_logging()
    sys.exit(main())
