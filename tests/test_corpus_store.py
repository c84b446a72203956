"""Integration tests for the SQLite corpus store."""
from __future__ import annotations

import pytest

from conftest import ACHILLES, ATHENA, HECTOR, ZEUS
from iliad_analyzer.data.corpus_store import entity_from_record, interaction_from_record
from iliad_analyzer.errors import EntityNotFoundError, GraphNotFoundError
from iliad_analyzer.graph.models import BookRange, Entity, Selection


@pytest.mark.integration
def test_fetch_entities_round_trips_list_types(corpus_store):
    entities = corpus_store.fetch_entities()
    assert list(entities.columns) == ["id", "name", "type"]
    by_id = entities.set_index("id")["type"].to_dict()
    assert by_id[ACHILLES] == "PER"
    assert by_id[HECTOR] == ["PER"]


@pytest.mark.integration
def test_fetch_interactions_preserves_order_and_filters_books(corpus_store):
    everything = corpus_store.fetch_interactions()
    assert len(everything) == 7
    assert everything.iloc[0]["from_id"] == ACHILLES

    early = corpus_store.fetch_interactions(book_range=BookRange(1, 2))
    assert set(early["book"]) == {1, 2}


@pytest.mark.integration
def test_upsert_entities_updates_existing_rows(corpus_store):
    corpus_store.upsert_entities([Entity(ACHILLES, "Pelides", ["PER", "HERO"])])
    assert corpus_store.get_entity(ACHILLES) == Entity(ACHILLES, "Pelides", ["PER", "HERO"])
    assert corpus_store.counts()["entity"] == 5


@pytest.mark.integration
def test_get_entities_raises_for_unknown_id(corpus_store):
    assert set(corpus_store.get_entities([ATHENA, ZEUS])) == {ATHENA, ZEUS}
    with pytest.raises(EntityNotFoundError):
        corpus_store.get_entities([ATHENA, "Entities/ajax"])


@pytest.mark.integration
def test_graph_registry(corpus_store):
    assert corpus_store.has_graph("iliad")
    corpus_store.register_graph("iliad")
    assert corpus_store.list_graphs() == ["iliad"]
    with pytest.raises(GraphNotFoundError):
        corpus_store.require_graph("odyssey")


@pytest.mark.integration
def test_empty_store_returns_framed_snapshots(empty_store):
    assert empty_store.fetch_entities().empty
    assert list(empty_store.fetch_interactions().columns) == [
        "from_id", "to_id", "book", "type", "from_line", "to_line",
    ]
    assert empty_store.get_entities([]) == {}


@pytest.mark.unit
def test_records_from_document_exports_are_qualified():
    entity = entity_from_record({"_key": "hector", "name": "Hector", "type": "PER"}, collection="Entities")
    assert entity.id == "Entities/hector"

    edge = interaction_from_record(
        {"_from": "Entities/hector", "_to": "andromache", "book": "6", "type": "verbal-near",
         "selection": {"from_line": 390, "to_line": 502}},
        collection="Entities",
    )
    assert edge.to_id == "Entities/andromache"
    assert edge.book == 6
    assert edge.selection == Selection(390, 502)
    assert edge.is_verbal


@pytest.mark.unit
def test_interaction_record_requires_book():
    with pytest.raises(ValueError, match="needs from, to and book"):
        interaction_from_record({"from": "a", "to": "b"}, collection="Entities")
