"""Output formatters — entry text lines, CSV export, JSON dump, tag lists."""

import csv
import io
import json
from typing import Iterable

from klog_query.durations import format_minutes, minutes_to_decimal_hours
from klog_query.models import Entry, Record, record_from_dict, record_to_dict

CSV_HEADERS = ["Date", "Type", "Duration (min)", "Duration", "Hours", "Summary", "Tags", "File"]


def format_text(record: Record, entry: Entry) -> str:
    """One line per entry: date, duration, summary."""
    return f"{record.date}  {format_minutes(entry.minutes):>7}  {entry.summary}"


def _csv_row(record: Record, entry: Entry) -> list:
    return [
        record.date,
        entry.type,
        entry.minutes,
        format_minutes(entry.minutes),
        f"{minutes_to_decimal_hours(entry.minutes):.2f}",
        entry.summary,
        ", ".join("#" + t.full for t in entry.all_tags),
        record.file_name,
    ]


def records_to_csv(records: Iterable[Record]) -> str:
    """Flat CSV export, one row per entry."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        for entry in record.entries:
            writer.writerow(_csv_row(record, entry))
    return buf.getvalue()


def records_to_json(records: Iterable[Record]) -> str:
    """Dump the record collection in its plain dict form."""
    return json.dumps([record_to_dict(r) for r in records], indent=2, ensure_ascii=False)


def records_from_json(payload: str) -> list[Record]:
    return [record_from_dict(d) for d in json.loads(payload or "[]")]


def tags_to_text(names: Iterable[str]) -> str:
    return "\n".join(f"#{name}" for name in names)


def tags_to_json(names: Iterable[str]) -> str:
    return json.dumps([f"#{name}" for name in names], indent=2, ensure_ascii=False)


def tags_to_csv(names: Iterable[str]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Tag"])
    for name in names:
        writer.writerow([f"#{name}"])
    return buf.getvalue()
