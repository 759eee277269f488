"""Combine records from many files, and re-import changed files.

The engine keeps no state between calls: the caller owns both the record
collection and the ``{file name: mtime}`` map of files already seen, and
passes them in.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from klog_query.models import Record
from klog_query.parser import parse_text

logger = logging.getLogger(__name__)

RecordKey = tuple[str, str, str]


@dataclass(frozen=True)
class FileInfo:
    name: str
    path: str
    mtime: int


def merge_and_sort(per_file_records: Iterable[Iterable[Record]]) -> list[Record]:
    """Flatten per-file record lists and stable-sort them by date."""
    merged = [record for records in per_file_records for record in records]
    merged.sort(key=lambda r: r.date)
    return merged


def parse_files(files: Iterable[tuple[str, str]]) -> list[Record]:
    """Parse ``(name, content)`` pairs into one date-sorted collection."""
    return merge_and_sort(parse_text(content, file_name=name) for name, content in files)


def record_key(record: Record) -> RecordKey:
    return record.date, record.summary, record.file_name


def reconcile(
    existing: Iterable[Record],
    incoming: Iterable[Record],
    replace_files: Iterable[str] = (),
) -> list[Record]:
    """Merge *incoming* into *existing* without duplicating records.

    Records of every file named in *replace_files* are removed first, so a
    re-imported file swaps its old records for the new ones in one step.
    Incoming records whose (date, summary, file) key is already held are
    skipped; incoming records are not deduplicated against each other.
    """
    replaced = set(replace_files)
    kept = [r for r in existing if r.file_name not in replaced]
    seen = {record_key(r) for r in kept}

    added = 0
    for record in incoming:
        if record_key(record) in seen:
            continue
        kept.append(record)
        added += 1

    logger.debug("Reconciled: %d new record(s), %d file(s) replaced", added, len(replaced))
    kept.sort(key=lambda r: r.date)
    return kept


def plan_reimport(
    known: Mapping[str, int],
    listing: Iterable[FileInfo],
) -> tuple[list[FileInfo], dict[str, int]]:
    """Pick files that are new or modified since last seen.

    Returns the files to fetch and the updated known-files map. *known* is
    left untouched.
    """
    to_fetch = []
    updated = dict(known)
    for info in listing:
        last_seen = known.get(info.name)
        if last_seen is None or last_seen < info.mtime:
            to_fetch.append(info)
            updated[info.name] = info.mtime
    return to_fetch, updated
