"""Tests for induced-subgraph construction."""
from __future__ import annotations

import pandas as pd
import pytest

from conftest import ACHILLES, ATHENA, HECTOR, PATROCLUS, ZEUS
from iliad_analyzer.graph.builder import build_subgraph, build_subgraph_from_frames
from iliad_analyzer.graph.models import EntityTypeClass, FilterSpec


def _build(entities, interactions, **kwargs):
    return build_subgraph_from_frames(
        entities=entities, interactions=interactions, spec=FilterSpec.create(**kwargs)
    )


@pytest.mark.unit
def test_all_types_keeps_every_entity(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions)
    assert sub.vertices == {ACHILLES, PATROCLUS, HECTOR, ATHENA, ZEUS}
    assert len(sub.edges) == len(sample_interactions)


@pytest.mark.unit
def test_mortal_filter_drops_edges_to_gods(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, entity_type="mortal")
    assert sub.vertices == {ACHILLES, PATROCLUS, HECTOR}
    for source, target, _book in sub.edges:
        assert source in sub.vertices and target in sub.vertices
    assert all(ATHENA not in (s, t) for s, t, _ in sub.edges)


@pytest.mark.unit
def test_god_filter_matches_list_valued_types(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, entity_type=EntityTypeClass.GOD)
    assert sub.vertices == {ATHENA, ZEUS}
    assert sub.edges == ((ZEUS, ATHENA, 13),)


@pytest.mark.unit
def test_book_range_is_inclusive_on_both_ends(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, from_book=2, to_book=3)
    assert sorted(book for _, _, book in sub.edges) == [2, 3]
    # vertices are selected by entity filter only, so isolated characters remain
    assert ZEUS in sub.vertices


@pytest.mark.unit
def test_blacklist_removes_vertex_and_incident_edges(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, blacklist=[ACHILLES])
    assert ACHILLES not in sub.vertices
    assert all(ACHILLES not in (s, t) for s, t, _ in sub.edges)
    assert {(s, t) for s, t, _ in sub.edges} == {(PATROCLUS, HECTOR), (ZEUS, ATHENA)}


@pytest.mark.unit
def test_edges_to_unknown_entities_are_dropped(sample_entities):
    interactions = pd.DataFrame([
        {"from_id": ACHILLES, "to_id": "Entities/nobody", "book": 1},
        {"from_id": ACHILLES, "to_id": HECTOR, "book": 1},
    ])
    sub = _build(sample_entities, interactions)
    assert sub.edges == ((ACHILLES, HECTOR, 1),)


@pytest.mark.unit
def test_empty_inputs_give_empty_subgraph():
    entities = pd.DataFrame(columns=["id", "name", "type"])
    interactions = pd.DataFrame(columns=["from_id", "to_id", "book"])
    sub = _build(entities, interactions)
    assert sub.is_empty
    assert sub.edges == ()


@pytest.mark.unit
def test_filter_excluding_everything_is_valid(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, from_book=30, to_book=40)
    assert sub.edges == ()
    assert len(sub.vertices) == 5


@pytest.mark.unit
def test_inputs_are_not_mutated(sample_entities, sample_interactions):
    entities_before = sample_entities.copy()
    interactions_before = sample_interactions.copy()
    _build(sample_entities, sample_interactions, entity_type="mortal", blacklist=[HECTOR])
    pd.testing.assert_frame_equal(sample_entities, entities_before)
    pd.testing.assert_frame_equal(sample_interactions, interactions_before)


@pytest.mark.unit
def test_building_twice_is_idempotent(sample_entities, sample_interactions):
    first = _build(sample_entities, sample_interactions, entity_type="mortal", to_book=2)
    second = _build(sample_entities, sample_interactions, entity_type="mortal", to_book=2)
    assert first == second


@pytest.mark.integration
def test_build_subgraph_reads_from_store(corpus_store):
    sub = build_subgraph(store=corpus_store, spec=FilterSpec.create(to_book=12))
    assert sub.vertices == {ACHILLES, PATROCLUS, HECTOR, ATHENA, ZEUS}
    assert all(book <= 12 for _, _, book in sub.edges)
    assert (ZEUS, ATHENA, 13) not in sub.edges


@pytest.mark.unit
def test_inverted_book_window_keeps_vertices_without_edges(sample_entities, sample_interactions):
    sub = _build(sample_entities, sample_interactions, from_book=10, to_book=2)
    assert sub.vertices == {ACHILLES, PATROCLUS, HECTOR, ATHENA, ZEUS}
    assert sub.edges == ()
