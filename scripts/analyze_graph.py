#!/usr/bin/env python
"""CLI for running centrality metrics on the stored interaction corpus."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

from iliad_analyzer.api.services.response_assembler import assemble_ranking, assemble_scalar
from iliad_analyzer.config import DEFAULT_METRICS_BOOK_RANGE, get_log_dir, get_store_settings
from iliad_analyzer.data.corpus_store import get_corpus_store
from iliad_analyzer.errors import EmptyGraphError, InvalidFilterError
from iliad_analyzer.graph import (
    EntityTypeClass,
    FilterSpec,
    MetricKind,
    build_subgraph,
    compute_graph_metrics,
)
from iliad_analyzer.logging_utils import setup_cli_logging

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze the character interaction network")
    parser.add_argument(
        "--metric",
        choices=[kind.value for kind in MetricKind],
        default=MetricKind.BETWEENNESS.value,
        help="Metric to compute.",
    )
    parser.add_argument("--from-book", type=int, default=DEFAULT_METRICS_BOOK_RANGE[0])
    parser.add_argument("--to-book", type=int, default=DEFAULT_METRICS_BOOK_RANGE[1])
    parser.add_argument(
        "--entity-type",
        choices=[cls.value for cls in EntityTypeClass],
        default=EntityTypeClass.ALL.value,
        help="Restrict to mortals or gods.",
    )
    parser.add_argument(
        "--blacklist",
        default="",
        help="Comma-separated entity keys to exclude (collection prefix added automatically).",
    )
    parser.add_argument("--top", type=int, default=20, help="Rows to print for per-vertex metrics.")
    parser.add_argument("--output", type=Path, help="Write the full result as JSON instead of printing.")
    parser.add_argument("--quiet", action="store_true", help="Only log to file.")
    return parser.parse_args()


def _format_rows(rows: List[dict], key: str) -> str:
    lines = []
    for rank, row in enumerate(rows, start=1):
        value = row[key]
        shown = f"{value:.6f}" if isinstance(value, float) else str(value)
        lines.append(f"{rank:>4}. {row['name']:<30} {shown:>12}  ({row['id']})")
    return "\n".join(lines)


def main() -> int:
    args = parse_args()
    setup_cli_logging(quiet=args.quiet, log_dir=get_log_dir())

    settings = get_store_settings()
    kind = MetricKind(args.metric)
    try:
        spec = FilterSpec.create(
            from_book=args.from_book,
            to_book=args.to_book,
            entity_type=args.entity_type,
            blacklist=[settings.qualify(key.strip()) for key in args.blacklist.split(",") if key.strip()],
        )
    except InvalidFilterError as exc:
        logger.error("%s", exc)
        return 2

    if spec.book_range.start > spec.book_range.end:
        logger.warning("Book window %d-%d is inverted; no interactions will be selected", args.from_book, args.to_book)

    store = get_corpus_store(settings)
    subgraph = build_subgraph(store=store, spec=spec)
    logger.info("Subgraph: %d vertices, %d edges", len(subgraph.vertices), len(subgraph.edges))
    result = compute_graph_metrics(subgraph)

    if kind.is_scalar:
        try:
            payload = assemble_scalar(kind, result.scalar(kind))
        except EmptyGraphError:
            logger.warning("Filter selected no vertices; %s reported as 0", kind.value)
            payload = assemble_scalar(kind, 0)
    else:
        payload = assemble_ranking(result.per_vertex(kind), kind, store.get_entities)

    if args.output:
        args.output.write_text(json.dumps(payload, indent=2))
        logger.info("Wrote %s to %s", kind.value, args.output)
    elif kind.is_scalar:
        print(f"{kind.value}: {payload[kind.value]}")
    else:
        print(_format_rows(payload[: args.top], kind.value))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
