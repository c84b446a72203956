"""Shortest-path centrality metrics over an induced subgraph.

All metrics for a request are computed from one networkx graph instance:
hop distances from ``all_pairs_shortest_path_length`` give eccentricity and
closeness, and ``betweenness_centrality`` gives betweenness. Unreachable
vertices never appear in a distance map, so cross-component pairs contribute
nothing to any metric.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union

import networkx as nx

from iliad_analyzer.errors import EmptyGraphError
from iliad_analyzer.graph.models import MetricKind, Subgraph
from iliad_analyzer.performance_profiler import profile_phase

logger = logging.getLogger(__name__)

MetricValue = Union[int, float]


@dataclass(frozen=True)
class GraphMetricsResult:
    """Per-vertex metrics for one subgraph; scalars are derived on access.

    Mappings iterate in sorted vertex-id order.
    """

    eccentricity: Dict[str, int] = field(default_factory=dict)
    closeness: Dict[str, float] = field(default_factory=dict)
    betweenness: Dict[str, float] = field(default_factory=dict)

    @property
    def vertex_count(self) -> int:
        return len(self.eccentricity)

    @property
    def radius(self) -> int:
        if not self.eccentricity:
            raise EmptyGraphError("radius is undefined for a graph with no vertices")
        return min(self.eccentricity.values())

    @property
    def diameter(self) -> int:
        if not self.eccentricity:
            raise EmptyGraphError("diameter is undefined for a graph with no vertices")
        return max(self.eccentricity.values())

    def center(self) -> List[str]:
        """Vertices whose eccentricity equals the radius."""
        radius = self.radius
        return [node for node, ecc in self.eccentricity.items() if ecc == radius]

    def periphery(self) -> List[str]:
        """Vertices whose eccentricity equals the diameter."""
        diameter = self.diameter
        return [node for node, ecc in self.eccentricity.items() if ecc == diameter]

    def scalar(self, kind: MetricKind) -> int:
        if kind is MetricKind.RADIUS:
            return self.radius
        if kind is MetricKind.DIAMETER:
            return self.diameter
        raise ValueError(f"{kind.value} is a per-vertex metric")

    def per_vertex(self, kind: MetricKind) -> Mapping[str, MetricValue]:
        if kind is MetricKind.ECCENTRICITY:
            return self.eccentricity
        if kind is MetricKind.CLOSENESS:
            return self.closeness
        if kind is MetricKind.BETWEENNESS:
            return self.betweenness
        raise ValueError(f"{kind.value} is a scalar metric")


def compute_graph_metrics(subgraph: Subgraph) -> GraphMetricsResult:
    """Compute eccentricity, closeness and betweenness for every vertex."""

    graph = subgraph.to_networkx()
    with profile_phase("shortest_path_pass", {
        "nodes": graph.number_of_nodes(),
        "edges": graph.number_of_edges(),
    }):
        result = compute_graph_metrics_nx(graph)

    logger.debug(
        "Metrics computed for %d vertices across %d component(s)",
        result.vertex_count,
        nx.number_connected_components(graph) if graph.number_of_nodes() else 0,
    )
    return result


def compute_graph_metrics_nx(graph: nx.Graph) -> GraphMetricsResult:
    """Fill a :class:`GraphMetricsResult` from one undirected, unweighted networkx graph.

    Eccentricity and closeness are taken per connected component from the
    all-pairs hop distances; betweenness counts ordered source/target pairs,
    i.e. twice networkx's unnormalized value.
    """

    if graph.is_directed():
        raise ValueError("metrics are defined over undirected graphs")

    nodes = sorted(graph.nodes)
    lengths = dict(nx.all_pairs_shortest_path_length(graph))

    eccentricity: Dict[str, int] = {}
    closeness: Dict[str, float] = {}
    for node in nodes:
        distances = lengths[node]
        eccentricity[node] = max(distances.values())
        total = sum(distances.values())
        closeness[node] = 1.0 / total if total > 0 else 0.0

    with profile_phase("compute_betweenness", {"nodes": len(nodes)}):
        raw = nx.betweenness_centrality(graph, normalized=False)
    betweenness: Dict[str, float] = {node: 2.0 * raw[node] for node in nodes}

    return GraphMetricsResult(
        eccentricity=eccentricity,
        closeness=closeness,
        betweenness=betweenness,
    )


def compute_metric(subgraph: Subgraph, kind: MetricKind) -> Union[int, Mapping[str, MetricValue]]:
    """Compute one metric, returning a scalar or a vertex-id mapping."""

    result = compute_graph_metrics(subgraph)
    if kind.is_scalar:
        return result.scalar(kind)
    return result.per_vertex(kind)
