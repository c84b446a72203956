#!/usr/bin/env python
"""Load exported entity and interaction JSON into the corpus store.

Both files hold a JSON array of documents. Entities need ``id`` (or
``_id``/``_key``), ``name`` and ``type``; interactions need ``from``/``to``
(or ``_from``/``_to``), ``book``, ``type`` and, for verbal interactions,
``selection: {"from_line": .., "to_line": ..}``.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

from iliad_analyzer.config import get_log_dir, get_store_settings
from iliad_analyzer.data.corpus_store import entity_from_record, get_corpus_store, interaction_from_record
from iliad_analyzer.logging_utils import setup_cli_logging

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import an interaction corpus into SQLite")
    parser.add_argument("--entities", type=Path, required=True, help="JSON array of entity documents.")
    parser.add_argument("--interactions", type=Path, required=True, help="JSON array of interaction documents.")
    parser.add_argument(
        "--graph",
        action="append",
        default=[],
        help="Register a named graph resource (repeatable). Defaults to 'iliad'.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only log to file.")
    return parser.parse_args()


def _load_array(path: Path) -> list:
    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise SystemExit(f"{path} must contain a JSON array")
    return payload


def main() -> int:
    args = parse_args()
    setup_cli_logging(quiet=args.quiet, log_dir=get_log_dir())

    settings = get_store_settings()
    store = get_corpus_store(settings)

    entities = [
        entity_from_record(record, collection=settings.entity_collection)
        for record in _load_array(args.entities)
    ]
    interactions = [
        interaction_from_record(record, collection=settings.entity_collection)
        for record in _load_array(args.interactions)
    ]

    logger.info("Upserted %d entities", store.upsert_entities(entities))
    logger.info("Inserted %d interactions", store.insert_interactions(interactions))
    for name in args.graph or ["iliad"]:
        store.register_graph(name)
        logger.info("Registered graph '%s'", name)

    logger.info("Store %s now holds %s", settings.path, store.counts())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
