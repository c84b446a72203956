"""Query-string parsing for the metric and speech routes."""
from __future__ import annotations

from typing import Callable, FrozenSet, Tuple

from flask import Request

from iliad_analyzer.errors import InvalidFilterError
from iliad_analyzer.graph.models import BookRange, EntityTypeClass, FilterSpec


def parse_book(request: Request, name: str, default: int) -> int:
    """Integer book bound; missing means ``default``, anything non-integer is rejected."""
    raw = request.args.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise InvalidFilterError(f"{name} must be an integer; received '{raw}'") from exc


def parse_book_range(request: Request, default: Tuple[int, int]) -> BookRange:
    """Book window from ``fromBk``/``toBk``; an inverted window is rejected."""
    book_range = BookRange(
        parse_book(request, "fromBk", default[0]),
        parse_book(request, "toBk", default[1]),
    )
    if book_range.start > book_range.end:
        raise InvalidFilterError(
            f"fromBk must not exceed toBk; received {book_range.start} > {book_range.end}"
        )
    return book_range


def parse_blacklist(request: Request, qualify: Callable[[str], str]) -> FrozenSet[str]:
    """Comma-separated collection-local keys, expanded to full entity ids."""
    raw = request.args.get("blacklist") or ""
    keys = [part.strip() for part in raw.split(",")]
    return frozenset(qualify(key) for key in keys if key)


def parse_filter_spec(
    request: Request,
    *,
    qualify: Callable[[str], str],
    default_books: Tuple[int, int],
) -> FilterSpec:
    return FilterSpec(
        book_range=parse_book_range(request, default_books),
        entity_type=EntityTypeClass.parse(request.args.get("entityType")),
        blacklist=parse_blacklist(request, qualify),
    )
