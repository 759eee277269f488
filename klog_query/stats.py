"""Aggregation — hour totals per day, week, month and tag, plus summary stats."""

import json
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Iterable

from klog_query.durations import format_minutes, minutes_to_decimal_hours
from klog_query.models import Record

UNTAGGED = "(untagged)"

GROUP_BY_CHOICES = ("date", "week", "month", "tag")


@dataclass(frozen=True)
class Bucket:
    key: str
    minutes: int
    hours: float


def _buckets(counter: Counter, ordered_keys) -> list[Bucket]:
    return [Bucket(key, counter[key], minutes_to_decimal_hours(counter[key])) for key in ordered_keys]


def week_start(date_str: str) -> str:
    """Monday of the week containing *date_str*, as YYYY-MM-DD."""
    day = date.fromisoformat(date_str)
    return (day - timedelta(days=day.weekday())).isoformat()


def aggregate_by_date(records: Iterable[Record]) -> list[Bucket]:
    totals = Counter()
    for r in records:
        totals[r.date] += r.total_minutes
    return _buckets(totals, sorted(totals))


def aggregate_by_week(records: Iterable[Record]) -> list[Bucket]:
    totals = Counter()
    for r in records:
        totals[week_start(r.date)] += r.total_minutes
    return _buckets(totals, sorted(totals))


def aggregate_by_month(records: Iterable[Record]) -> list[Bucket]:
    totals = Counter()
    for r in records:
        totals[r.date[:7]] += r.total_minutes
    return _buckets(totals, sorted(totals))


def _record_tag_names(record: Record) -> list[str]:
    """Distinct tag strings of a record and its entries, first appearance first."""
    names = dict.fromkeys(t.full for t in record.tags)
    for entry in record.entries:
        names.update(dict.fromkeys(t.full for t in entry.tags))
    return list(names)


def aggregate_by_tag(records: Iterable[Record]) -> list[Bucket]:
    """Minutes per tag, largest first.

    A tag is credited with the minutes of the entries carrying it. When no
    entry carries it (record-level tag only) it gets the whole record total,
    so one record can count towards several tags in full.
    """
    totals = Counter()
    for r in records:
        names = _record_tag_names(r)
        if not names:
            totals[UNTAGGED] += r.total_minutes
            continue
        for name in names:
            tagged = sum(e.minutes for e in r.entries if any(t.full == name for t in e.all_tags))
            totals[name] += tagged or r.total_minutes
    # Counter keeps insertion order, and sorted() is stable for ties.
    ordered = sorted(totals, key=lambda k: totals[k], reverse=True)
    return _buckets(totals, ordered)


AGGREGATORS = {
    "date": aggregate_by_date,
    "week": aggregate_by_week,
    "month": aggregate_by_month,
    "tag": aggregate_by_tag,
}


def aggregate(records: Iterable[Record], group_by: str) -> list[Bucket]:
    try:
        aggregator = AGGREGATORS[group_by]
    except KeyError:
        raise ValueError(f"Unknown grouping {group_by!r}, expected one of {GROUP_BY_CHOICES}") from None
    return aggregator(records)


def all_tag_names(records: Iterable[Record]) -> list[str]:
    """Sorted distinct tag strings across records and entries."""
    names = set()
    for r in records:
        names.update(_record_tag_names(r))
    return sorted(names)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass
class Summary:
    total_minutes: int = 0
    total_hours: float = 0.0
    days_tracked: int = 0
    daily_average_minutes: float = 0.0
    unique_tags: int = 0
    total_entries: int = 0
    should_total_minutes: int = 0
    should_vs_actual_minutes: int | None = None


def compute_summary(records: Iterable[Record], daily_target_hours: float | None = None) -> Summary:
    """Headline numbers for a (possibly filtered) record collection."""
    records = list(records)
    # Sum entries, not record totals, so hand-built records are counted right too.
    total = sum(e.minutes for r in records for e in r.entries)
    days = len({r.date for r in records})

    tag_names = set()
    for r in records:
        tag_names.update(t.name for t in r.tags)
        for e in r.entries:
            tag_names.update(t.name for t in e.tags)

    should = sum(r.should_total for r in records if r.should_total is not None)
    has_should = any(r.should_total is not None for r in records)
    if not has_should and daily_target_hours and days:
        should = round(daily_target_hours * 60 * days)
        has_should = True

    return Summary(
        total_minutes=total,
        total_hours=minutes_to_decimal_hours(total),
        days_tracked=days,
        daily_average_minutes=total / days if days else 0.0,
        unique_tags=len(tag_names),
        total_entries=sum(len(r.entries) for r in records),
        should_total_minutes=should,
        should_vs_actual_minutes=total - should if has_should else None,
    )


def format_summary_text(summary: Summary) -> str:
    """Human-readable summary block."""
    lines = []
    lines.append(f"Total hours:     {summary.total_hours:.2f}h ({format_minutes(summary.total_minutes)})")
    lines.append(f"Days tracked:    {summary.days_tracked}")
    lines.append(f"Daily average:   {minutes_to_decimal_hours(summary.daily_average_minutes):.2f}h")
    lines.append(f"Unique tags:     {summary.unique_tags}")
    lines.append(f"Total entries:   {summary.total_entries}")
    if summary.should_vs_actual_minutes is None:
        lines.append("Should vs actual: -")
    else:
        diff = summary.should_vs_actual_minutes
        sign = "+" if diff >= 0 else ""
        lines.append(f"Should vs actual: {sign}{minutes_to_decimal_hours(diff):.2f}h")
    return "\n".join(lines)


def format_summary_json(summary: Summary) -> str:
    return json.dumps(asdict(summary), indent=2)


def format_buckets_text(buckets: list[Bucket]) -> str:
    if not buckets:
        return "No data."
    width = max(len(b.key) for b in buckets)
    return "\n".join(
        f"  {b.key:<{width}}  {b.hours:>8.2f}h  {format_minutes(b.minutes)}" for b in buckets
    )


def format_buckets_json(buckets: list[Bucket]) -> str:
    return json.dumps([asdict(b) for b in buckets], indent=2)
