"""Record/Entry/Tag dataclasses — every parsed klog file maps to this schema."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from klog_query.durations import format_minutes

DATE_FORMAT = "%Y-%m-%d"
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ENTRY_RANGE = "range"
ENTRY_OPEN_RANGE = "open-range"
ENTRY_DURATION = "duration"


@dataclass(frozen=True)
class Tag:
    name: str
    value: str | None = None
    full: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "name", self.name.lower())
        full = f"{self.name}={self.value}" if self.value else self.name
        object.__setattr__(self, "full", full)

    # Identity is the canonical string, so #Work and #work collapse.
    def __eq__(self, other):
        if isinstance(other, Tag):
            return self.full == other.full
        return NotImplemented

    def __hash__(self):
        return hash(self.full)

    def __str__(self):
        return self.full


@dataclass(frozen=True)
class Entry:
    type: str  # "range", "open-range", "duration"
    minutes: int
    summary: str
    tags: tuple[Tag, ...] = ()
    all_tags: tuple[Tag, ...] = ()
    raw: str = ""
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class Record:
    date: str
    summary: str
    entries: tuple[Entry, ...]
    total_minutes: int
    tags: tuple[Tag, ...] = ()
    should_total: int | None = None
    file_name: str = ""

    @property
    def total_formatted(self) -> str:
        return format_minutes(self.total_minutes)


def make_record(date, summary, entries, tags=(), should_total=None, file_name="") -> Record:
    """Build a Record whose total is always the sum of its entries."""
    entries = tuple(entries)
    return Record(
        date=date,
        summary=summary,
        entries=entries,
        total_minutes=sum(e.minutes for e in entries),
        tags=tuple(tags),
        should_total=should_total,
        file_name=file_name,
    )


def with_entries(record: Record, entries) -> Record:
    """Shallow copy of *record* holding only *entries*, total recomputed."""
    entries = tuple(entries)
    return replace(record, entries=entries, total_minutes=sum(e.minutes for e in entries))


# ---------------------------------------------------------------------------
# Plain dict form, safe to json.dump and load back verbatim
# ---------------------------------------------------------------------------


def tag_to_dict(tag: Tag) -> dict[str, Any]:
    return {"name": tag.name, "value": tag.value, "full": tag.full}


def tag_from_dict(data) -> Tag:
    """Accepts the structured form or a bare ``name[=value]`` string."""
    if isinstance(data, str):
        name, _, value = data.lstrip("#").partition("=")
        return Tag(name=name, value=value or None)
    return Tag(name=data["name"], value=data.get("value"))


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    d = {
        "type": entry.type,
        "start": entry.start,
        "end": entry.end,
        "minutes": entry.minutes,
        "summary": entry.summary,
        "tags": [tag_to_dict(t) for t in entry.tags],
        "allTags": [tag_to_dict(t) for t in entry.all_tags],
        "raw": entry.raw,
    }
    return {k: v for k, v in d.items() if v is not None}


def entry_from_dict(data: dict) -> Entry:
    tags = tuple(tag_from_dict(t) for t in data.get("tags", []))
    return Entry(
        type=data["type"],
        minutes=int(data.get("minutes", 0)),
        summary=data.get("summary", ""),
        tags=tags,
        all_tags=tuple(tag_from_dict(t) for t in data["allTags"]) if "allTags" in data else tags,
        raw=data.get("raw", ""),
        start=data.get("start"),
        end=data.get("end"),
    )


def record_to_dict(record: Record) -> dict[str, Any]:
    return {
        "date": record.date,
        "shouldTotal": record.should_total,
        "summary": record.summary,
        "tags": [tag_to_dict(t) for t in record.tags],
        "entries": [entry_to_dict(e) for e in record.entries],
        "totalMinutes": record.total_minutes,
        "totalFormatted": record.total_formatted,
        "fileName": record.file_name,
    }


def record_from_dict(data: dict) -> Record:
    """Rebuild a Record from its dict form. The stored total is not trusted.

    Raises ValueError if the date is not a real YYYY-MM-DD calendar date.
    """
    date = data["date"]
    if not ISO_DATE_PATTERN.match(date):
        raise ValueError(f"Invalid record date: {date!r}")
    datetime.strptime(date, DATE_FORMAT)
    return make_record(
        date=date,
        summary=data.get("summary", ""),
        entries=[entry_from_dict(e) for e in data.get("entries", [])],
        tags=[tag_from_dict(t) for t in data.get("tags", [])],
        should_total=data.get("shouldTotal"),
        file_name=data.get("fileName", ""),
    )
