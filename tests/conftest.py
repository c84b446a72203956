"""Shared pytest configuration and fixtures for the test suite.

This module centralizes:
- Path setup (eliminates sys.path hacks in individual test files)
- Pytest markers for test categorization (unit, integration)
- A small interaction corpus, as DataFrames and as a temporary SQLite store
- Flask app/client fixtures wired to that store
"""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest
from sqlalchemy import create_engine


# ==============================================================================
# Path Setup - Ensures iliad_analyzer/ is importable
# ==============================================================================

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from iliad_analyzer.data.corpus_store import CorpusStore  # noqa: E402
from iliad_analyzer.graph.models import Entity, Interaction, Selection  # noqa: E402


# ==============================================================================
# Pytest Configuration
# ==============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "unit: Fast tests with no I/O",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests hitting SQLite or the Flask app",
    )


# ==============================================================================
# Sample corpus
# ==============================================================================
#
# achilles, patroclus, hector form a triangle; athena hangs off achilles and
# zeus hangs off athena (only in book 13). One self-loop and one duplicate
# edge must not change any distance.

ACHILLES = "Entities/achilles"
PATROCLUS = "Entities/patroclus"
HECTOR = "Entities/hector"
ATHENA = "Entities/athena"
ZEUS = "Entities/zeus"

SAMPLE_ENTITIES = [
    Entity(id=ACHILLES, name="Achilles", type="PER"),
    Entity(id=PATROCLUS, name="Patroclus", type="PER"),
    Entity(id=HECTOR, name="Hector", type=["PER"]),
    Entity(id=ATHENA, name="Athena", type="GOD"),
    Entity(id=ZEUS, name="Zeus", type=["GOD"]),
]

SAMPLE_INTERACTIONS = [
    Interaction(ACHILLES, PATROCLUS, 1, "verbal-near", Selection(0, 10)),
    Interaction(PATROCLUS, HECTOR, 2, "verbal-far", Selection(10, 14)),
    Interaction(HECTOR, ACHILLES, 3, "other"),
    Interaction(ATHENA, ACHILLES, 1, "verbal-near", Selection(20, 50)),
    Interaction(ZEUS, ATHENA, 13, "verbal-far", Selection(0, 5)),
    Interaction(ACHILLES, ACHILLES, 1, "other"),
    Interaction(ACHILLES, PATROCLUS, 1, "other"),
]


def entities_frame(entities) -> pd.DataFrame:
    return pd.DataFrame(
        [{"id": e.id, "name": e.name, "type": e.type} for e in entities],
        columns=["id", "name", "type"],
    )


def interactions_frame(interactions) -> pd.DataFrame:
    rows = []
    for i in interactions:
        rows.append({
            "from_id": i.from_id,
            "to_id": i.to_id,
            "book": i.book,
            "type": i.type,
            "from_line": i.selection.from_line if i.selection else None,
            "to_line": i.selection.to_line if i.selection else None,
        })
    return pd.DataFrame(
        rows, columns=["from_id", "to_id", "book", "type", "from_line", "to_line"]
    )


@pytest.fixture
def sample_entities() -> pd.DataFrame:
    return entities_frame(SAMPLE_ENTITIES)


@pytest.fixture
def sample_interactions() -> pd.DataFrame:
    return interactions_frame(SAMPLE_INTERACTIONS)


# ==============================================================================
# Temporary store and Flask fixtures
# ==============================================================================

@pytest.fixture
def empty_store(tmp_path) -> CorpusStore:
    engine = create_engine(f"sqlite:///{tmp_path / 'iliad.db'}", future=True)
    return CorpusStore(engine)


@pytest.fixture
def corpus_store(empty_store) -> CorpusStore:
    empty_store.upsert_entities(SAMPLE_ENTITIES)
    empty_store.insert_interactions(SAMPLE_INTERACTIONS)
    empty_store.register_graph("iliad")
    return empty_store


@pytest.fixture
def app(corpus_store, monkeypatch):
    monkeypatch.setenv("ENTITY_COLLECTION", "Entities")
    monkeypatch.delenv("API_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PROFILE_METRICS", raising=False)
    from iliad_analyzer.api.server import create_app

    return create_app({"TESTING": True}, store=corpus_store)


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client
