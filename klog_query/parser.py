"""klog text parser — blocks, records and entries.

A file is a sequence of blank-line separated blocks. Each block is a record:

    2024-01-15 (8h!)
    Record summary, may carry #tags
        8:00 - 9:30 Sprint planning #meeting
            continuation of the entry summary
        -30m Lunch break
        17:00 - ? still running

Entry kinds are tried in a fixed order: closed range, open range, duration.
Anything that does not parse is dropped; the parser never raises for content.
"""

import logging
import re
from dataclasses import replace
from datetime import datetime

from klog_query.durations import (
    parse_duration_string,
    parse_time_to_minutes,
    range_minutes,
)
from klog_query.models import (
    DATE_FORMAT,
    ENTRY_DURATION,
    ENTRY_OPEN_RANGE,
    ENTRY_RANGE,
    Entry,
    Record,
    make_record,
)
from klog_query.tags import dedupe_tags, extract_tags

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------

DATE_PATTERN = re.compile(r"^(\d{4}[-/]\d{2}[-/]\d{2})")
SHOULD_TOTAL_PATTERN = re.compile(r"\(([+-]?\d+[hm]\d*[hm]?)!\)")

_TIME_TOKEN = r"<?\d{1,2}:\d{2}(?:am|pm)?>?"

RANGE_PATTERN = re.compile(
    rf"^({_TIME_TOKEN})\s*-\s*({_TIME_TOKEN})(.*)$", re.IGNORECASE
)
OPEN_RANGE_PATTERN = re.compile(rf"^({_TIME_TOKEN})\s*-\s*\?+(.*)$", re.IGNORECASE)
DURATION_ENTRY_PATTERN = re.compile(r"^([+-]?\d+h(?:\d+m)?|[+-]?\d+m)(.*)$")

TAB_WIDTH = 4

# ---------------------------------------------------------------------------
# Block segmentation
# ---------------------------------------------------------------------------


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def segment_blocks(text: str) -> list[list[str]]:
    """Split file text into groups of consecutive non-blank lines."""
    blocks = []
    current: list[str] = []
    for line in normalize_newlines(text or "").split("\n"):
        if line.strip() == "":
            if current:
                blocks.append(current)
                current = []
        else:
            current.append(line)
    if current:
        blocks.append(current)
    return blocks


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


def indent_width(line: str) -> int:
    """Columns of leading whitespace, a tab counting as four."""
    width = 0
    for ch in line:
        if ch == "\t":
            width += TAB_WIDTH
        elif ch == " ":
            width += 1
        else:
            break
    return width


def is_indented(line: str) -> bool:
    return line.startswith("\t") or line.startswith("  ")


# ---------------------------------------------------------------------------
# Entry matchers: each returns None when the line is not of its kind
# ---------------------------------------------------------------------------


def match_range(line: str) -> tuple[str, str, int, str] | None:
    """``8:00 - 9:30 text`` → (start, end, minutes, text)."""
    match = RANGE_PATTERN.match(line)
    if not match:
        return None
    start, end, rest = match.groups()
    start_min = parse_time_to_minutes(start)
    end_min = parse_time_to_minutes(end)
    if start_min is None or end_min is None:
        return None
    return start, end, range_minutes(start_min, end_min), rest


def match_open_range(line: str) -> tuple[str, str] | None:
    """``8:00 - ? text`` → (start, text)."""
    match = OPEN_RANGE_PATTERN.match(line)
    if not match:
        return None
    start, rest = match.groups()
    if parse_time_to_minutes(start) is None:
        return None
    return start, rest


def match_duration(line: str) -> tuple[int, str] | None:
    """``-30m text`` → (minutes, text)."""
    match = DURATION_ENTRY_PATTERN.match(line)
    if not match:
        return None
    token, rest = match.groups()
    minutes = parse_duration_string(token)
    if minutes is None:
        return None
    return minutes, rest


def _entry_summary(rest: str, continuation: list[str]) -> str:
    return " ".join([rest.strip(), *continuation]).strip()


def parse_entry(lines: list[str]) -> Entry | None:
    """Parse one entry group (first line + stripped continuation lines)."""
    if not lines:
        return None
    first = lines[0].strip()
    continuation = [line.strip() for line in lines[1:]]
    raw = "\n".join(line.strip() for line in lines)

    ranged = match_range(first)
    if ranged:
        start, end, minutes, rest = ranged
        summary = _entry_summary(rest, continuation)
        tags = tuple(extract_tags(summary))
        return Entry(type=ENTRY_RANGE, start=start, end=end, minutes=minutes,
                     summary=summary, tags=tags, all_tags=tags, raw=raw)

    open_ranged = match_open_range(first)
    if open_ranged:
        start, rest = open_ranged
        summary = _entry_summary(rest, continuation)
        tags = tuple(extract_tags(summary))
        return Entry(type=ENTRY_OPEN_RANGE, start=start, minutes=0,
                     summary=summary, tags=tags, all_tags=tags, raw=raw)

    duration = match_duration(first)
    if duration:
        minutes, rest = duration
        summary = _entry_summary(rest, continuation)
        tags = tuple(extract_tags(summary))
        return Entry(type=ENTRY_DURATION, minutes=minutes,
                     summary=summary, tags=tags, all_tags=tags, raw=raw)

    logger.debug("Dropping unrecognized entry line: %r", first)
    return None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def _group_entries(lines: list[str]) -> list[list[str]]:
    """Group indented lines into [entry line, continuation...] lists."""
    groups: list[list[str]] = []
    base_width = None
    for line in lines:
        if not is_indented(line):
            logger.debug("Skipping unindented line among entries: %r", line)
            continue
        width = indent_width(line)
        if base_width is None:
            base_width = width
        if width <= base_width:
            groups.append([line])
        elif groups:
            groups[-1].append(line)
    return groups


def parse_record(lines: list[str], file_name: str = "") -> Record | None:
    """Parse one block into a Record, or None if it does not start with a date."""
    if not lines:
        return None
    first = lines[0]
    date_match = DATE_PATTERN.match(first)
    if not date_match:
        logger.debug("Dropping block without leading date: %r", first)
        return None
    date = date_match.group(1).replace("/", "-")
    try:
        datetime.strptime(date, DATE_FORMAT)
    except ValueError:
        logger.debug("Dropping block with impossible date: %r", first)
        return None

    should_total = None
    should_match = SHOULD_TOTAL_PATTERN.search(first)
    if should_match:
        should_total = parse_duration_string(should_match.group(1))

    i = 1
    summary_lines = []
    while i < len(lines) and not is_indented(lines[i]):
        summary_lines.append(lines[i].strip())
        i += 1
    summary = " ".join(summary_lines).strip()
    record_tags = extract_tags(summary)

    entries = []
    for group in _group_entries(lines[i:]):
        entry = parse_entry(group)
        if entry is None:
            continue
        all_tags = tuple(dedupe_tags([*record_tags, *entry.tags]))
        entries.append(replace(entry, all_tags=all_tags))

    return make_record(
        date=date,
        summary=summary,
        entries=entries,
        tags=record_tags,
        should_total=should_total,
        file_name=file_name,
    )


def parse_text(text: str, file_name: str = "") -> list[Record]:
    """Parse a whole klog file. Blocks that are not records are skipped."""
    records = []
    for block in segment_blocks(text):
        record = parse_record(block, file_name=file_name)
        if record is not None:
            records.append(record)
    logger.debug("Parsed %d record(s) from %s", len(records), file_name or "<text>")
    return records
