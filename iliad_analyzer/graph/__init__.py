"""Subgraph construction and centrality metrics for the interaction network."""

from .builder import build_subgraph, build_subgraph_from_frames
from .metrics import GraphMetricsResult, compute_graph_metrics, compute_graph_metrics_nx, compute_metric
from .models import (
    VERBAL_INTERACTION_TYPES,
    BookRange,
    Entity,
    EntityTypeClass,
    FilterSpec,
    Interaction,
    MetricKind,
    Selection,
    Subgraph,
)
from .speech import SpeechTotal, aggregate_speech, speech_totals

__all__ = [
    "VERBAL_INTERACTION_TYPES",
    "BookRange",
    "Entity",
    "EntityTypeClass",
    "FilterSpec",
    "GraphMetricsResult",
    "Interaction",
    "MetricKind",
    "Selection",
    "SpeechTotal",
    "Subgraph",
    "aggregate_speech",
    "build_subgraph",
    "build_subgraph_from_frames",
    "compute_graph_metrics",
    "compute_graph_metrics_nx",
    "compute_metric",
    "speech_totals",
]
