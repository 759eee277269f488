"""Tests for klog_query/tags.py and the Tag model"""

import unittest

from klog_query.models import Tag
from klog_query.tags import dedupe_tags, extract_tags, normalize_tag


class TestExtractTags(unittest.TestCase):
    def test_simple_tags_in_order(self):
        tags = extract_tags("Sprint planning #project-alpha #meeting")
        self.assertEqual([t.full for t in tags], ["project-alpha", "meeting"])

    def test_name_lowercased(self):
        self.assertEqual(extract_tags("#Work")[0].full, "work")
        self.assertEqual(extract_tags("#Work"), extract_tags("#work"))

    def test_bare_value(self):
        tag = extract_tags("#customer=acme rest")[0]
        self.assertEqual(tag.name, "customer")
        self.assertEqual(tag.value, "acme")
        self.assertEqual(tag.full, "customer=acme")

    def test_value_case_preserved(self):
        self.assertEqual(extract_tags("#Customer=ACME")[0].full, "customer=ACME")

    def test_double_quoted_value(self):
        tag = extract_tags('#customer="ACME Corp"')[0]
        self.assertEqual(tag.value, "ACME Corp")

    def test_single_quoted_value(self):
        tag = extract_tags("#note='a b'")[0]
        self.assertEqual(tag.full, "note=a b")

    def test_no_word_boundary_needed(self):
        self.assertEqual([t.full for t in extract_tags("fix#bug")], ["bug"])

    def test_diacritics_in_name(self):
        self.assertEqual(extract_tags("#Überstunden")[0].full, "überstunden")

    def test_duplicates_kept(self):
        self.assertEqual(len(extract_tags("#a #a")), 2)

    def test_empty_text(self):
        self.assertEqual(extract_tags(""), [])
        self.assertEqual(extract_tags("no tags here"), [])


class TestDedupeTags(unittest.TestCase):
    def test_keeps_first_occurrence(self):
        tags = [Tag("a"), Tag("B"), Tag("b"), Tag("a", "1")]
        self.assertEqual([t.full for t in dedupe_tags(tags)], ["a", "b", "a=1"])


class TestTagIdentity(unittest.TestCase):
    def test_structural_equality(self):
        self.assertEqual(Tag("Meeting"), Tag("meeting"))
        self.assertEqual(hash(Tag("Meeting")), hash(Tag("meeting")))

    def test_value_distinguishes(self):
        self.assertNotEqual(Tag("customer", "a"), Tag("customer", "b"))

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            Tag("a").name = "b"


class TestNormalizeTag(unittest.TestCase):
    def test_strips_hash_and_lowercases_name(self):
        self.assertEqual(normalize_tag("#Meeting"), "meeting")
        self.assertEqual(normalize_tag("Customer=ACME"), "customer=ACME")

    def test_accepts_tag_object(self):
        self.assertEqual(normalize_tag(Tag("x", "y")), "x=y")


if __name__ == "__main__":
    unittest.main()
