"""Value types for the interaction network and request filters."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple, Union

import networkx as nx

from iliad_analyzer.config import DEFAULT_METRICS_BOOK_RANGE
from iliad_analyzer.errors import InvalidFilterError

VERBAL_INTERACTION_TYPES = ("verbal-near", "verbal-far")

EntityType = Union[str, Sequence[str], None]


def type_label(value: EntityType) -> str:
    """Flatten a string or multi-valued entity type into one searchable label."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(sorted(str(item) for item in value))
    return str(value)


class EntityTypeClass(str, Enum):
    """Coarse entity classes selectable by a filter."""

    ALL = "all"
    MORTAL = "mortal"
    GOD = "god"

    @property
    def marker(self) -> Optional[str]:
        """Substring an entity type must contain, ``None`` for no restriction."""
        return _TYPE_MARKERS[self]

    def matches(self, value: EntityType) -> bool:
        marker = self.marker
        if marker is None:
            return True
        return marker in type_label(value)

    @classmethod
    def parse(cls, raw: Optional[str]) -> "EntityTypeClass":
        if raw is None or raw.strip() == "":
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise InvalidFilterError(f"entityType must be one of {allowed}; received '{raw}'") from exc


_TYPE_MARKERS = {
    EntityTypeClass.ALL: None,
    EntityTypeClass.MORTAL: "PER",
    EntityTypeClass.GOD: "GOD",
}


class MetricKind(str, Enum):
    """Metrics derivable from one shortest-path pass."""

    RADIUS = "radius"
    DIAMETER = "diameter"
    CLOSENESS = "closeness"
    BETWEENNESS = "betweenness"
    ECCENTRICITY = "eccentricity"

    @property
    def is_scalar(self) -> bool:
        return self in (MetricKind.RADIUS, MetricKind.DIAMETER)


@dataclass(frozen=True)
class Entity:
    id: str
    name: str
    type: EntityType = None

    def is_class(self, entity_class: EntityTypeClass) -> bool:
        return entity_class.matches(self.type)


@dataclass(frozen=True)
class Selection:
    """Line range of a verbal interaction."""

    from_line: int
    to_line: int


@dataclass(frozen=True)
class Interaction:
    """Directed interaction record as stored; metrics treat it as undirected."""

    from_id: str
    to_id: str
    book: int
    type: str = "other"
    selection: Optional[Selection] = None

    @property
    def is_verbal(self) -> bool:
        return self.type in VERBAL_INTERACTION_TYPES


@dataclass(frozen=True)
class BookRange:
    """Inclusive book interval; an inverted interval selects no books."""

    start: int
    end: int

    def __contains__(self, book: object) -> bool:
        return isinstance(book, Integral) and self.start <= book <= self.end

    def as_tuple(self) -> Tuple[int, int]:
        return self.start, self.end


@dataclass(frozen=True)
class FilterSpec:
    """Per-request subgraph filter."""

    book_range: BookRange = field(default_factory=lambda: BookRange(*DEFAULT_METRICS_BOOK_RANGE))
    entity_type: EntityTypeClass = EntityTypeClass.ALL
    blacklist: FrozenSet[str] = frozenset()

    @classmethod
    def create(
        cls,
        *,
        from_book: int = DEFAULT_METRICS_BOOK_RANGE[0],
        to_book: int = DEFAULT_METRICS_BOOK_RANGE[1],
        entity_type: Union[EntityTypeClass, str] = EntityTypeClass.ALL,
        blacklist: Iterable[str] = (),
    ) -> "FilterSpec":
        if not isinstance(entity_type, EntityTypeClass):
            entity_type = EntityTypeClass.parse(entity_type)
        return cls(
            book_range=BookRange(from_book, to_book),
            entity_type=entity_type,
            blacklist=frozenset(blacklist),
        )

    def accepts_entity(self, entity_id: str, entity_type: EntityType) -> bool:
        return entity_id not in self.blacklist and self.entity_type.matches(entity_type)


Edge = Tuple[str, str, int]


@dataclass(frozen=True)
class Subgraph:
    """Induced subgraph owned by a single computation.

    ``edges`` keeps the stored direction and multiplicity; the undirected,
    simple view used for distances is produced by :meth:`to_networkx`.
    """

    vertices: FrozenSet[str]
    edges: Tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        for source, target, _book in self.edges:
            if source not in self.vertices or target not in self.vertices:
                raise ValueError(f"edge ({source}, {target}) has an endpoint outside the vertex set")

    @property
    def is_empty(self) -> bool:
        return not self.vertices

    def to_networkx(self) -> nx.Graph:
        """Return a fresh undirected simple graph (self-loops dropped)."""
        graph = nx.Graph()
        graph.add_nodes_from(sorted(self.vertices))
        graph.add_edges_from(
            (source, target) for source, target, _book in self.edges if source != target
        )
        return graph
