"""Filter records by date range, tags and free-text search."""

from dataclasses import dataclass, field
from typing import Iterable

from klog_query.models import Entry, Record, with_entries
from klog_query.tags import normalize_tag


@dataclass(frozen=True)
class FilterCriteria:
    date_from: str = ""
    date_to: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    search: str = ""

    def __post_init__(self):
        object.__setattr__(self, "tags", frozenset(normalize_tag(t) for t in self.tags or ()))

    @property
    def filters_entries(self) -> bool:
        return bool(self.tags) or bool(self.search.strip())


def filter_by_date_range(record: Record, date_from: str = "", date_to: str = "") -> bool:
    """True if the record's date lies within the inclusive bounds (empty = open)."""
    if date_from and record.date < date_from:
        return False
    if date_to and record.date > date_to:
        return False
    return True


def filter_by_tags(entry: Entry, record: Record, tags: frozenset[str]) -> bool:
    """True if the entry or its record carries any of *tags*."""
    carried = {t.full for t in entry.tags} | {t.full for t in record.tags}
    return not carried.isdisjoint(tags)


def filter_by_search(entry: Entry, record: Record, keyword: str) -> bool:
    """True if keyword appears in date, summary, raw text or file name (case-insensitive)."""
    haystack = " ".join([record.date, entry.summary, entry.raw, record.file_name])
    return keyword.lower() in haystack.lower()


def entry_matches(entry: Entry, record: Record, criteria: FilterCriteria) -> bool:
    if criteria.tags and not filter_by_tags(entry, record, criteria.tags):
        return False
    if criteria.search.strip() and not filter_by_search(entry, record, criteria.search):
        return False
    return True


def filter_records(records: Iterable[Record], criteria: FilterCriteria) -> list[Record]:
    """Apply *criteria* to a record collection.

    Date bounds keep or drop whole records. Tag and search criteria work on
    entries: records keep only matching entries (with the total recomputed)
    and disappear when none match. Input records are never modified.
    """
    result = []
    for record in records:
        if not filter_by_date_range(record, criteria.date_from, criteria.date_to):
            continue
        if not criteria.filters_entries:
            result.append(record)
            continue
        survivors = [e for e in record.entries if entry_matches(e, record, criteria)]
        if survivors:
            result.append(with_entries(record, survivors))
    return result


def build_criteria(args) -> FilterCriteria:
    """Combine the active filter options from parsed CLI args."""
    return FilterCriteria(
        date_from=getattr(args, "date_from", None) or "",
        date_to=getattr(args, "date_to", None) or "",
        tags=frozenset(getattr(args, "tags", None) or ()),
        search=getattr(args, "search", None) or "",
    )
