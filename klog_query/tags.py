"""Tag extraction — ``#name`` and ``#name=value`` tokens in free text."""

import re
from typing import Iterable

from klog_query.models import Tag

# ASCII word chars, Latin-1/Latin Extended, Latin Extended Additional, CJK.
TAG_NAME_CHARS = r"a-zA-Z0-9_\-\u00C0-\u024F\u1E00-\u1EFF\u3000-\u9FFF"

TAG_PATTERN = re.compile(
    rf"#([{TAG_NAME_CHARS}]+)"
    r"""(?:=(?:"([^"]*?)"|'([^']*?)'|([a-zA-Z0-9_-]+)))?"""
)


def extract_tags(text: str) -> list[Tag]:
    """Return every tag in *text* in order of appearance, duplicates included."""
    if not text:
        return []
    tags = []
    for match in TAG_PATTERN.finditer(text):
        name, double_quoted, single_quoted, bare = match.groups()
        value = double_quoted or single_quoted or bare or None
        tags.append(Tag(name=name, value=value))
    return tags


def dedupe_tags(tags: Iterable[Tag]) -> list[Tag]:
    """Drop repeated tags (by ``full``), keeping the first occurrence."""
    seen = set()
    unique = []
    for tag in tags:
        if tag.full not in seen:
            seen.add(tag.full)
            unique.append(tag)
    return unique


def normalize_tag(tag) -> str:
    """``#Work``, ``work`` or a Tag all become the canonical ``work`` string."""
    if isinstance(tag, Tag):
        return tag.full
    name, sep, value = str(tag).strip().lstrip("#").partition("=")
    return f"{name.lower()}{sep}{value}"
