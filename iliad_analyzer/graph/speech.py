"""Speech volume per character from verbal interaction line ranges."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from iliad_analyzer.errors import EntityNotFoundError
from iliad_analyzer.graph.models import VERBAL_INTERACTION_TYPES, BookRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeechTotal:
    id: str
    name: str
    total_lines: int

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "speech": self.total_lines}


def aggregate_speech(
    *,
    interactions: pd.DataFrame,
    book_range: BookRange,
    resolve_names: Optional[Callable[[Iterable[str]], Mapping[str, str]]] = None,
) -> List[SpeechTotal]:
    """Rank speakers by the number of lines they speak within ``book_range``.

    Only ``verbal-near``/``verbal-far`` rows count. Each row contributes
    ``to_line - from_line``; rows without a selection or with a reversed
    range are dropped. Ties keep the order in which speakers first appear.
    Without ``resolve_names`` the id doubles as the name; with it, every
    speaker must resolve or :class:`EntityNotFoundError` is raised.
    """

    totals = speech_totals(interactions=interactions, book_range=book_range)
    if resolve_names is None or not totals:
        return [SpeechTotal(id=speaker, name=speaker, total_lines=lines) for speaker, lines in totals.items()]

    names = resolve_names(list(totals))
    missing = [speaker for speaker in totals if speaker not in names]
    if missing:
        raise EntityNotFoundError(missing[0])
    return [
        SpeechTotal(id=speaker, name=names[speaker], total_lines=lines)
        for speaker, lines in totals.items()
    ]


def speech_totals(*, interactions: pd.DataFrame, book_range: BookRange) -> Dict[str, int]:
    """Ordered mapping speaker id -> summed line count, largest first."""

    if interactions.empty:
        return {}

    books = pd.to_numeric(interactions["book"], errors="coerce")
    verbal = interactions[
        books.between(book_range.start, book_range.end)
        & interactions["type"].isin(VERBAL_INTERACTION_TYPES)
    ]

    from_line = pd.to_numeric(verbal["from_line"], errors="coerce")
    to_line = pd.to_numeric(verbal["to_line"], errors="coerce")
    lengths = to_line - from_line

    valid = lengths.notna() & (lengths >= 0)
    skipped = int((~valid).sum())
    if skipped:
        logger.warning(
            "Skipped %d verbal interaction(s) with a missing or reversed line selection", skipped
        )

    per_speaker = (
        pd.DataFrame({"speaker": verbal["from_id"][valid].astype(str), "lines": lengths[valid]})
        .groupby("speaker", sort=False)["lines"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    return {speaker: int(lines) for speaker, lines in per_speaker.items()}
