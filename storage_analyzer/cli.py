"""Command line front end for the storage analyzer."""

import argparse
import functools
import json
import logging
import signal
import sys
import threading
from datetime import datetime, timezone
from typing import Optional, Sequence

from pydantic import BaseModel

from storage_analyzer.config import Settings, get_settings
from storage_analyzer.errors import StorageAnalyzerError
from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.report import Report
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat
from storage_analyzer.models.volume import VolumeSpace
from storage_analyzer.services.analyzer import StorageAnalyzer
from storage_analyzer.utils.formatters import format_timestamp
from storage_analyzer.utils.validators import normalize_drive_reference

logger = logging.getLogger(__name__)

SINGLE_VOLUME_COMMANDS = (
    "space",
    "folders",
    "extensions",
    "largest-files",
    "recent-files",
    "old-files",
)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(args: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="storage-analyzer",
        description="Report where space goes on local volumes",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("volumes", help="List fixed local volumes")

    help_texts = {
        "space": "Total, used and free space of a volume",
        "folders": "Largest folders up to three levels deep",
        "extensions": "Space used per file extension",
        "largest-files": "Largest files",
        "recent-files": "Largest files modified recently",
        "old-files": "Largest files not modified for months",
    }
    for command in SINGLE_VOLUME_COMMANDS:
        sub = subparsers.add_parser(command, help=help_texts[command])
        sub.add_argument("volume", help="Drive letter (e.g. 'C') or mount point")
        if command != "space":
            sub.add_argument("--limit", type=positive_int, default=None, help="Number of entries to show")

    report_parser = subparsers.add_parser("report", help="Full analysis of one or more volumes")
    report_parser.add_argument(
        "volumes",
        nargs="*",
        help="Drive letters or mount points (default: every fixed volume)",
    )

    return parser.parse_args(args)


def print_space(space: VolumeSpace) -> None:
    print("\n--- Drive Space Overview ---")
    print(f"Total Size: {space.total_gb:.2f} GB")
    print(f"Used Space: {space.used_gb:.2f} GB")
    print(f"Free Space: {space.free_gb:.2f} GB ({space.free_percent:.2f}%)")


def print_folders(folders: Sequence[DirectorySummary], top_n: int) -> None:
    print(f"\n--- Largest Folders (Top {top_n}) ---")
    for index, folder in enumerate(folders, 1):
        print(f"\n[{index}] {folder.path}")
        print(f"  Size: {folder.size_gb:.2f} GB")
        print(f"  Files: {folder.file_count}")


def print_extensions(stats: Sequence[ExtensionStat], top_n: int) -> None:
    print(f"\n--- File Type Distribution (Top {top_n}) ---")
    for stat in stats:
        print(f"\n[>] {stat.extension}")
        print(f"  Count: {stat.file_count}")
        print(f"  Size: {stat.size_gb:.2f} GB")


def print_files(title: str, files: Sequence[FileRecord], date_format: str) -> None:
    print(f"\n--- {title} ---")
    for record in files:
        print(f"\n[*] Path: {record.path}")
        print(f"    Size: {record.size_mb:.2f} MB / {record.size_gb:.2f} GB")
        print(f"    Last Modified: {format_timestamp(record.modified_time, date_format)}")
        if record.accessed_time is not None:
            print(f"    Last Accessed: {format_timestamp(record.accessed_time, date_format)}")


def print_report(report: Report, date_format: str, top_n: int) -> None:
    print("\n=== Storage Distribution Analysis ===")
    print(f"Date: {format_timestamp(report.generated_at, date_format)}")
    print(f"Drive: {report.volume}")
    if report.space is not None:
        print_space(report.space)
    print_folders(report.largest_folders, top_n)
    print_extensions(report.extension_distribution, top_n)
    print_files("Largest Files", report.largest_files, date_format)
    print_files("Recent Large Files", report.recent_large_files, date_format)
    print_files("Old Large Files (>6 months old)", report.old_large_files, date_format)
    for error in report.errors:
        print(f"\n[!] {error}")


def print_json(value) -> None:
    if isinstance(value, BaseModel):
        print(value.model_dump_json(indent=2))
    elif isinstance(value, list) and all(isinstance(item, BaseModel) for item in value):
        print(json.dumps([item.model_dump(mode="json") for item in value], indent=2))
    else:
        print(json.dumps(value, indent=2))


def _install_interrupt_handler(running: threading.Event):
    """First Ctrl-C stops the run after the current volume, the second aborts."""

    def handler(signum, frame):
        if running.is_set():
            print("\nStopping after the current volume (Ctrl-C again to abort)...", file=sys.stderr)
            running.clear()
        else:
            signal.default_int_handler(signum, frame)

    return signal.signal(signal.SIGINT, handler)


def run_single(analyzer: StorageAnalyzer, args: argparse.Namespace, settings: Settings) -> int:
    volume = normalize_drive_reference(args.volume)
    limit = getattr(args, "limit", None)
    top_n = settings.top_n if limit is None else limit

    if args.command == "space":
        result = analyzer.get_drive_space(volume)
        render = print_space
    elif args.command == "folders":
        result = analyzer.get_largest_folders(volume, limit)
        render = functools.partial(print_folders, top_n=top_n)
    elif args.command == "extensions":
        result = analyzer.get_extension_distribution(volume, limit)
        render = functools.partial(print_extensions, top_n=top_n)
    elif args.command == "largest-files":
        result = analyzer.get_largest_files(volume, limit)
        render = functools.partial(print_files, "Largest Files", date_format=settings.date_format)
    elif args.command == "recent-files":
        result = analyzer.get_recent_large_files(volume, limit)
        render = functools.partial(print_files, "Recent Large Files", date_format=settings.date_format)
    else:
        result = analyzer.get_old_large_files(volume, limit)
        render = functools.partial(print_files, "Old Large Files (>6 months old)", date_format=settings.date_format)

    if args.json:
        print_json(result)
    else:
        render(result)
    return 0


def run_report(analyzer: StorageAnalyzer, args: argparse.Namespace, settings: Settings) -> int:
    volumes = [normalize_drive_reference(v) for v in args.volumes] if args.volumes else None
    running = threading.Event()
    running.set()
    previous = _install_interrupt_handler(running)

    started = datetime.now(timezone.utc)
    try:
        reports = analyzer.analyze_volumes(volumes, running=running)
    finally:
        signal.signal(signal.SIGINT, previous)
    logger.info(f"Analyzed {len(reports)} volume(s) in {(datetime.now(timezone.utc) - started).total_seconds():.1f}s")

    if args.json:
        print_json(reports)
    else:
        for report in reports:
            print_report(report, settings.date_format, settings.top_n)

    return 0 if reports and all(report.complete for report in reports) else 1


def main(args: Optional[Sequence[str]] = None) -> int:
    """Entry point for the storage-analyzer command."""
    parsed = parse_args(args)
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else settings.log_level,
        format=settings.log_format,
    )

    with StorageAnalyzer(settings=settings) as analyzer:
        try:
            if parsed.command == "volumes":
                volumes = analyzer.list_volumes()
                if parsed.json:
                    print_json(volumes)
                else:
                    for volume in volumes:
                        print(volume)
                return 0
            if parsed.command == "report":
                return run_report(analyzer, parsed, settings)
            return run_single(analyzer, parsed, settings)
        except StorageAnalyzerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
