"""Build filtered, induced subgraphs from corpus snapshots."""
from __future__ import annotations

import logging

import pandas as pd

from iliad_analyzer.graph.models import FilterSpec, Subgraph, type_label
from iliad_analyzer.performance_profiler import profile_phase

logger = logging.getLogger(__name__)


def build_subgraph_from_frames(
    *,
    entities: pd.DataFrame,
    interactions: pd.DataFrame,
    spec: FilterSpec,
) -> Subgraph:
    """Construct the induced subgraph selected by ``spec``.

    ``entities`` needs columns ``id`` and ``type``; ``interactions`` needs
    ``from_id``, ``to_id`` and ``book``. Neither frame is modified.
    """

    with profile_phase("select_vertices", {"entities": len(entities)}):
        vertices = _select_vertices(entities, spec)

    with profile_phase("select_edges", {"interactions": len(interactions)}):
        edges = _select_edges(interactions, vertices, spec)

    logger.debug(
        "Built subgraph: %d/%d vertices, %d/%d edges (books %d-%d, type=%s, blacklist=%d)",
        len(vertices),
        len(entities),
        len(edges),
        len(interactions),
        spec.book_range.start,
        spec.book_range.end,
        spec.entity_type.value,
        len(spec.blacklist),
    )
    return Subgraph(vertices=vertices, edges=edges)


def build_subgraph(*, store, spec: FilterSpec) -> Subgraph:
    """Fetch entity and interaction snapshots from ``store`` and build the subgraph."""

    with profile_phase("fetch_snapshot"):
        entities = store.fetch_entities()
        interactions = store.fetch_interactions(book_range=spec.book_range)

    return build_subgraph_from_frames(entities=entities, interactions=interactions, spec=spec)


def _select_vertices(entities: pd.DataFrame, spec: FilterSpec) -> frozenset:
    if entities.empty:
        return frozenset()

    ids = entities["id"].astype(str)
    keep = ~ids.isin(spec.blacklist)

    marker = spec.entity_type.marker
    if marker is not None:
        labels = entities["type"].map(type_label)
        keep &= labels.str.contains(marker, regex=False)

    return frozenset(ids[keep])


def _select_edges(interactions: pd.DataFrame, vertices: frozenset, spec: FilterSpec) -> tuple:
    if interactions.empty or not vertices:
        return ()

    books = pd.to_numeric(interactions["book"], errors="coerce")
    in_range = books.between(spec.book_range.start, spec.book_range.end)
    sources = interactions["from_id"].astype(str)
    targets = interactions["to_id"].astype(str)
    both_kept = in_range & sources.isin(vertices) & targets.isin(vertices)

    dropped = int(in_range.sum() - both_kept.sum())
    if dropped:
        logger.debug("Dropped %d in-range edge(s) with a filtered-out endpoint", dropped)

    return tuple(
        (source, target, int(book))
        for source, target, book in zip(sources[both_kept], targets[both_kept], books[both_kept])
    )
