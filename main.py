"""klog-query — parse, filter, and aggregate klog time-tracking files."""

import logging
import sys
from argparse import ArgumentParser

from klog_query.config import load_config, load_yaml_config
from klog_query.demo import DEMO_FILE_NAME, DEMO_DATA
from klog_query.filters import build_criteria, filter_records
from klog_query.formatter import (
    format_text,
    records_to_csv,
    records_to_json,
    tags_to_csv,
    tags_to_json,
    tags_to_text,
)
from klog_query.merge import parse_files
from klog_query.reader import expand_paths, list_data_files, load_files
from klog_query.stats import (
    GROUP_BY_CHOICES,
    aggregate,
    all_tag_names,
    compute_summary,
    format_buckets_json,
    format_buckets_text,
    format_summary_json,
    format_summary_text,
)

logger = logging.getLogger("klog_query")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="klog-query",
        description="Parse, filter, and aggregate klog time-tracking files.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="klog file path(s) or glob pattern(s); defaults to the data directory",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the built-in sample document instead of files",
    )
    parser.add_argument(
        "--data-dir",
        help="Directory scanned for .klg/.klog/.txt files when no files are given",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--from",
        dest="date_from",
        help="Only records on or after this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--to",
        dest="date_to",
        help="Only records on or before this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        help="Keep entries carrying this tag (repeatable, e.g. --tag meeting --tag customer=acme)",
    )
    parser.add_argument(
        "--search",
        help="Keep entries whose text contains this keyword (case-insensitive)",
    )
    parser.add_argument(
        "--group-by",
        choices=GROUP_BY_CHOICES,
        help="Show hour totals per date, week, month or tag",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Show summary statistics instead of entries",
    )
    parser.add_argument(
        "--list-tags",
        action="store_true",
        help="List all tags found in the (filtered) records",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json", "csv"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug details, including dropped lines",
    )
    return parser


def load_sources(args, config) -> list[tuple[str, str]]:
    """Return (name, content) pairs from --demo, explicit files, or the data directory."""
    if args.demo:
        return [(DEMO_FILE_NAME, DEMO_DATA)]
    if args.files:
        return load_files(expand_paths(args.files))
    infos = list_data_files(config.data_dir, config.extensions)
    logger.info("Found %d file(s) in %s", len(infos), config.data_dir)
    return load_files([info.path for info in infos])


def run_pipeline(args, config):
    """Load, parse, filter, then print entries, buckets, tags or summary."""
    if args.summary and args.group_by:
        print("Error: --summary and --group-by cannot be used together", file=sys.stderr)
        sys.exit(1)

    if not args.tags and config.default_tags:
        args.tags = list(config.default_tags)

    sources = load_sources(args, config)
    records = parse_files(sources)
    logger.info("Parsed %d record(s) from %d source(s)", len(records), len(sources))

    records = filter_records(records, build_criteria(args))

    if args.list_tags:
        names = all_tag_names(records)
        if args.output == "json":
            print(tags_to_json(names))
        elif args.output == "csv":
            sys.stdout.write(tags_to_csv(names))
        elif names:
            print(tags_to_text(names))
        return

    if args.summary:
        summary = compute_summary(records, config.daily_target_hours)
        if args.output == "json":
            print(format_summary_json(summary))
        else:
            print(format_summary_text(summary))
        return

    if args.group_by:
        buckets = aggregate(records, args.group_by)
        if args.output == "json":
            print(format_buckets_json(buckets))
        else:
            print(format_buckets_text(buckets))
        return

    if args.output == "csv":
        sys.stdout.write(records_to_csv(records))
        return
    if args.output == "json":
        print(records_to_json(records))
        return

    for record in records:
        for entry in record.entries:
            print(format_text(record, entry))


def main():
    parser = build_parser()
    args = parser.parse_args()

    yaml_data = load_yaml_config(args.config)
    config = load_config(args, yaml_data)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [KLOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        run_pipeline(args, config)
    except BrokenPipeError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
