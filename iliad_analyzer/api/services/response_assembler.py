"""Join metric results with entity names for display."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Union

from iliad_analyzer.errors import EntityNotFoundError
from iliad_analyzer.graph.models import Entity, MetricKind

logger = logging.getLogger(__name__)

EntityLookup = Callable[[Iterable[str]], Mapping[str, Entity]]


def assemble_scalar(kind: MetricKind, value: Union[int, float]) -> Dict[str, Union[int, float]]:
    return {kind.value: value}


def assemble_ranking(
    values: Mapping[str, Union[int, float]],
    kind: MetricKind,
    lookup: EntityLookup,
) -> List[dict]:
    """Rows of ``{id, name, <metric>}`` sorted by value, largest first.

    The sort is stable, so equal values keep the order of ``values``.
    ``lookup`` raises :class:`~iliad_analyzer.errors.EntityNotFoundError`
    for ids it cannot resolve.
    """

    if not values:
        return []

    entities = lookup(values.keys())
    missing = [entity_id for entity_id in values if entity_id not in entities]
    if missing:
        logger.error("%d %s id(s) have no entity record, e.g. %s", len(missing), kind.value, missing[0])
        raise EntityNotFoundError(missing[0])

    rows = [
        {"id": entity_id, "name": entities[entity_id].name, kind.value: value}
        for entity_id, value in values.items()
    ]
    return sorted(rows, key=lambda row: row[kind.value], reverse=True)
