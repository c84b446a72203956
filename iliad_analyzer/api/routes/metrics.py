"""Centrality metric routes over a filtered interaction subgraph.

All five routes share one path: parse the filter, build a request-local
subgraph, run the shared shortest-path pass, then either return the scalar
or join names onto the per-vertex ranking.
"""
from __future__ import annotations

import logging
from typing import Optional

from flask import Blueprint, current_app, jsonify, request

from iliad_analyzer.api.params import parse_filter_spec
from iliad_analyzer.api.services.response_assembler import assemble_ranking, assemble_scalar
from iliad_analyzer.config import DEFAULT_METRICS_BOOK_RANGE, StoreSettings
from iliad_analyzer.data.corpus_store import CorpusStore
from iliad_analyzer.errors import EmptyGraphError, EntityNotFoundError, GraphNotFoundError, InvalidFilterError
from iliad_analyzer.graph import MetricKind, build_subgraph, compute_graph_metrics
from iliad_analyzer.performance_profiler import profile_operation, profile_phase

logger = logging.getLogger(__name__)

metrics_bp = Blueprint("metrics", __name__)


@metrics_bp.route("/radius/<graph_name>", methods=["GET"])
def radius_route(graph_name):
    """Minimum eccentricity of the filtered subgraph."""
    return _metric_response(MetricKind.RADIUS, graph_name)


@metrics_bp.route("/diameter", methods=["GET"], defaults={"graph_name": None})
@metrics_bp.route("/diameter/<graph_name>", methods=["GET"])
def diameter_route(graph_name):
    """Maximum eccentricity of the filtered subgraph."""
    return _metric_response(MetricKind.DIAMETER, graph_name)


@metrics_bp.route("/closeness", methods=["GET"], defaults={"graph_name": None})
@metrics_bp.route("/closeness/<graph_name>", methods=["GET"])
def closeness_route(graph_name):
    return _metric_response(MetricKind.CLOSENESS, graph_name)


@metrics_bp.route("/betweenness", methods=["GET"], defaults={"graph_name": None})
@metrics_bp.route("/betweenness/<graph_name>", methods=["GET"])
def betweenness_route(graph_name):
    return _metric_response(MetricKind.BETWEENNESS, graph_name)


@metrics_bp.route("/eccentricity", methods=["GET"], defaults={"graph_name": None})
@metrics_bp.route("/eccentricity/<graph_name>", methods=["GET"])
def eccentricity_route(graph_name):
    return _metric_response(MetricKind.ECCENTRICITY, graph_name)


def _metric_response(kind: MetricKind, graph_name: Optional[str]):
    store: CorpusStore = current_app.config["CORPUS_STORE"]
    settings: StoreSettings = current_app.config["STORE_SETTINGS"]

    try:
        if graph_name is not None:
            store.require_graph(graph_name)
        spec = parse_filter_spec(
            request,
            qualify=settings.qualify,
            default_books=DEFAULT_METRICS_BOOK_RANGE,
        )
    except GraphNotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except InvalidFilterError as exc:
        return jsonify({"error": str(exc)}), 400

    with profile_operation(f"metric:{kind.value}", {
        "books": f"{spec.book_range.start}-{spec.book_range.end}",
        "entity_type": spec.entity_type.value,
        "blacklist": len(spec.blacklist),
    }):
        with profile_phase("build_subgraph"):
            subgraph = build_subgraph(store=store, spec=spec)
        with profile_phase("compute_metrics"):
            result = compute_graph_metrics(subgraph)

        if kind.is_scalar:
            try:
                value = result.scalar(kind)
            except EmptyGraphError:
                logger.info("Empty subgraph for %s; answering 0", kind.value)
                value = 0
            return jsonify(assemble_scalar(kind, value))

        try:
            with profile_phase("assemble_ranking"):
                rows = assemble_ranking(result.per_vertex(kind), kind, store.get_entities)
        except EntityNotFoundError as exc:
            logger.error("Metric %s produced an unresolvable id: %s", kind.value, exc.entity_id)
            return jsonify({"error": "internal consistency error", "details": str(exc)}), 500

    return jsonify(rows)
