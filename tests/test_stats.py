"""Tests for klog_query/stats.py"""

import json
import unittest

from klog_query.models import Entry, make_record
from klog_query.parser import parse_text
from klog_query.stats import (
    UNTAGGED,
    Bucket,
    Summary,
    aggregate,
    aggregate_by_date,
    aggregate_by_month,
    aggregate_by_tag,
    aggregate_by_week,
    all_tag_names,
    compute_summary,
    format_buckets_json,
    format_buckets_text,
    format_summary_json,
    format_summary_text,
    week_start,
)

TAGGED_AND_UNTAGGED = """\
2024-01-15
#a #b
    1h work

2024-01-16
    30m other
"""


def _record(date, minutes, should_total=None):
    entries = [Entry(type="duration", minutes=minutes, summary="x")]
    return make_record(date, "", entries, should_total=should_total)


def _pairs(buckets):
    return [(b.key, b.minutes) for b in buckets]


class TestTimeBuckets(unittest.TestCase):
    def setUp(self):
        self.records = [
            _record("2024-01-31", 60),
            _record("2024-01-15", 30),
            _record("2024-01-15", 45),
            _record("2024-02-01", 120),
        ]

    def test_by_date(self):
        self.assertEqual(_pairs(aggregate_by_date(self.records)),
                         [("2024-01-15", 75), ("2024-01-31", 60), ("2024-02-01", 120)])

    def test_by_week(self):
        # 2024-01-31 (Wed) and 2024-02-01 (Thu) share the week of Monday 2024-01-29.
        self.assertEqual(_pairs(aggregate_by_week(self.records)),
                         [("2024-01-15", 75), ("2024-01-29", 180)])

    def test_by_month(self):
        self.assertEqual(_pairs(aggregate_by_month(self.records)),
                         [("2024-01", 135), ("2024-02", 120)])

    def test_hours_rounded(self):
        bucket = aggregate_by_date([_record("2024-01-15", 100)])[0]
        self.assertEqual(bucket, Bucket("2024-01-15", 100, 1.67))

    def test_empty(self):
        self.assertEqual(aggregate_by_date([]), [])
        self.assertEqual(aggregate_by_week([]), [])
        self.assertEqual(aggregate_by_month([]), [])
        self.assertEqual(aggregate_by_tag([]), [])


class TestWeekStart(unittest.TestCase):
    def test_monday_is_its_own_start(self):
        self.assertEqual(week_start("2024-01-15"), "2024-01-15")

    def test_sunday_belongs_to_previous_monday(self):
        self.assertEqual(week_start("2024-01-21"), "2024-01-15")

    def test_crosses_year_boundary(self):
        self.assertEqual(week_start("2025-01-01"), "2024-12-30")


class TestAggregateByTag(unittest.TestCase):
    def test_scenario_record_tags_and_untagged(self):
        records = parse_text(TAGGED_AND_UNTAGGED)
        self.assertEqual(_pairs(aggregate_by_tag(records)),
                         [("a", 60), ("b", 60), (UNTAGGED, 30)])

    def test_entry_tags_split_minutes(self):
        text = "2024-01-15\n  1h x #a\n  30m y #b\n  15m z\n"
        self.assertEqual(_pairs(aggregate_by_tag(parse_text(text))), [("a", 60), ("b", 30)])

    def test_record_only_tag_gets_whole_total(self):
        text = "2024-01-15\n#r\n  1h x #a\n  30m y\n"
        # "r" is on every entry through all_tags, so it is credited 90.
        self.assertEqual(_pairs(aggregate_by_tag(parse_text(text))), [("r", 90), ("a", 60)])

    def test_fallback_when_no_entry_minutes(self):
        record = make_record("2024-01-15", "#solo", [], tags=parse_text("2024-01-15\n#solo")[0].tags)
        self.assertEqual(_pairs(aggregate_by_tag([record])), [("solo", 0)])

    def test_ties_keep_first_appearance(self):
        text = "2024-01-15\n  1h x #zeta\n  1h y #alpha\n"
        self.assertEqual([b.key for b in aggregate_by_tag(parse_text(text))], ["zeta", "alpha"])

    def test_tag_with_value(self):
        text = "2024-01-15\n  1h x #customer=acme\n"
        self.assertEqual(_pairs(aggregate_by_tag(parse_text(text))), [("customer=acme", 60)])


class TestAggregateDispatch(unittest.TestCase):
    def test_dispatch(self):
        records = [_record("2024-01-15", 30)]
        self.assertEqual(aggregate(records, "month"), aggregate_by_month(records))

    def test_unknown_grouping(self):
        with self.assertRaises(ValueError):
            aggregate([], "year")


class TestAllTagNames(unittest.TestCase):
    def test_sorted_distinct(self):
        text = "2024-01-15\n#b\n  1h x #a #B\n\n2024-01-16\n  1h #c=1\n"
        self.assertEqual(all_tag_names(parse_text(text)), ["a", "b", "c=1"])


class TestComputeSummary(unittest.TestCase):
    def test_empty(self):
        summary = compute_summary([])
        self.assertEqual(summary.total_minutes, 0)
        self.assertEqual(summary.days_tracked, 0)
        self.assertEqual(summary.daily_average_minutes, 0.0)
        self.assertIsNone(summary.should_vs_actual_minutes)

    def test_totals(self):
        text = "2024-01-15 (2h!)\n#a\n  1h x #b\n  2h y\n\n2024-01-16\n  30m z #a=1\n"
        summary = compute_summary(parse_text(text))
        self.assertEqual(summary.total_minutes, 210)
        self.assertEqual(summary.total_hours, 3.5)
        self.assertEqual(summary.days_tracked, 2)
        self.assertEqual(summary.daily_average_minutes, 105)
        self.assertEqual(summary.unique_tags, 2)
        self.assertEqual(summary.total_entries, 3)
        self.assertEqual(summary.should_total_minutes, 120)
        self.assertEqual(summary.should_vs_actual_minutes, 90)

    def test_daily_target_used_without_should_totals(self):
        summary = compute_summary([_record("2024-01-15", 420)], daily_target_hours=8)
        self.assertEqual(summary.should_total_minutes, 480)
        self.assertEqual(summary.should_vs_actual_minutes, -60)

    def test_should_totals_win_over_daily_target(self):
        summary = compute_summary([_record("2024-01-15", 60, should_total=60)], daily_target_hours=8)
        self.assertEqual(summary.should_vs_actual_minutes, 0)


class TestFormatting(unittest.TestCase):
    def test_summary_text(self):
        text = format_summary_text(Summary(total_minutes=90, total_hours=1.5, days_tracked=1,
                                           daily_average_minutes=90, total_entries=2))
        self.assertIn("Total hours:     1.50h (1h30m)", text)
        self.assertIn("Should vs actual: -", text)

    def test_summary_text_positive_diff(self):
        text = format_summary_text(Summary(should_vs_actual_minutes=30))
        self.assertIn("+0.50h", text)

    def test_summary_json(self):
        parsed = json.loads(format_summary_json(Summary(total_minutes=5)))
        self.assertEqual(parsed["total_minutes"], 5)

    def test_buckets_text(self):
        text = format_buckets_text([Bucket("2024-01", 90, 1.5)])
        self.assertIn("2024-01", text)
        self.assertIn("1.50h", text)
        self.assertIn("1h30m", text)
        self.assertEqual(format_buckets_text([]), "No data.")

    def test_buckets_json(self):
        parsed = json.loads(format_buckets_json([Bucket("a", 60, 1.0)]))
        self.assertEqual(parsed, [{"key": "a", "minutes": 60, "hours": 1.0}])


if __name__ == "__main__":
    unittest.main()
