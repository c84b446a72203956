"""Exception types shared by the graph core and the API boundary."""
from __future__ import annotations


class IliadAnalyzerError(Exception):
    """Base class for analyzer errors."""


class GraphNotFoundError(IliadAnalyzerError):
    """A named graph resource referenced by a request is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Graph not found: {name}")
        self.name = name


class EntityNotFoundError(IliadAnalyzerError):
    """An entity id produced by a metric cannot be resolved in the store.

    Metric results are only ever computed over ids drawn from the store, so
    this signals an inconsistency between the subgraph and the store rather
    than bad user input.
    """

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"Entity not found: {entity_id}")
        self.entity_id = entity_id


class EmptyGraphError(IliadAnalyzerError):
    """Radius/diameter requested on a subgraph with no vertices."""


class InvalidFilterError(IliadAnalyzerError, ValueError):
    """A filter parameter could not be parsed or is out of range."""
