"""Shared pytest fixtures for the klog-query test suite."""

import pytest

from klog_query.demo import DEMO_DATA, DEMO_FILE_NAME
from klog_query.parser import parse_text


@pytest.fixture()
def demo_text() -> str:
    return DEMO_DATA


@pytest.fixture()
def demo_records(demo_text):
    """The demo document parsed once per test."""
    return parse_text(demo_text, file_name=DEMO_FILE_NAME)
