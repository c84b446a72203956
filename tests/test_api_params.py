"""Tests for query-string parsing."""
from __future__ import annotations

import pytest
from flask import Flask, request

from iliad_analyzer.api.params import parse_blacklist, parse_book_range, parse_filter_spec
from iliad_analyzer.errors import InvalidFilterError
from iliad_analyzer.graph.models import BookRange, EntityTypeClass


@pytest.fixture
def flask_app():
    return Flask(__name__)


def qualify(key):
    return f"Entities/{key}"


@pytest.mark.unit
def test_missing_books_use_defaults(flask_app):
    with flask_app.test_request_context("/diameter"):
        assert parse_book_range(request, (1, 24)) == BookRange(1, 24)


@pytest.mark.unit
def test_partial_book_range(flask_app):
    with flask_app.test_request_context("/characterspeech?toBk=3"):
        assert parse_book_range(request, (1, 12)) == BookRange(1, 3)


@pytest.mark.unit
def test_non_integer_book_rejected(flask_app):
    with flask_app.test_request_context("/diameter?fromBk=one"):
        with pytest.raises(InvalidFilterError, match="fromBk must be an integer"):
            parse_book_range(request, (1, 24))


@pytest.mark.unit
def test_blacklist_is_trimmed_and_qualified(flask_app):
    with flask_app.test_request_context("/diameter?blacklist=hector,%20zeus,,"):
        assert parse_blacklist(request, qualify) == frozenset({"Entities/hector", "Entities/zeus"})


@pytest.mark.unit
def test_full_filter_spec(flask_app):
    url = "/closeness?fromBk=2&toBk=9&entityType=God&blacklist=athena"
    with flask_app.test_request_context(url):
        spec = parse_filter_spec(request, qualify=qualify, default_books=(1, 24))

    assert spec.book_range == BookRange(2, 9)
    assert spec.entity_type is EntityTypeClass.GOD
    assert spec.blacklist == frozenset({"Entities/athena"})


@pytest.mark.unit
def test_inverted_book_range_rejected_at_request_boundary(flask_app):
    with flask_app.test_request_context("/diameter?fromBk=9&toBk=2"):
        with pytest.raises(InvalidFilterError, match="fromBk must not exceed toBk"):
            parse_book_range(request, (1, 24))
