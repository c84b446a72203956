"""Persistence for the character-interaction corpus.

The store holds three tables: ``entity`` (characters), ``interaction``
(directed, book-tagged edges with an optional verbal line selection) and
``graph`` (named graph resources requests may refer to). The graph core only
reads from it; snapshots are handed out as pandas DataFrames.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    func,
    select,
)
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import Engine

from iliad_analyzer.config import StoreSettings, get_store_settings
from iliad_analyzer.errors import EntityNotFoundError, GraphNotFoundError
from iliad_analyzer.graph.models import BookRange, Entity, Interaction, Selection

logger = logging.getLogger(__name__)

ENTITY_COLUMNS = ["id", "name", "type"]
INTERACTION_COLUMNS = ["from_id", "to_id", "book", "type", "from_line", "to_line"]


class CorpusStore:
    """Typed wrapper around the SQLite corpus database."""

    ENTITY_TABLE = "entity"
    INTERACTION_TABLE = "interaction"
    GRAPH_TABLE = "graph"

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._metadata = MetaData()
        self._entity_table = Table(
            self.ENTITY_TABLE,
            self._metadata,
            Column("id", String, primary_key=True),
            Column("name", String, nullable=False),
            Column("type", JSON, nullable=True),
        )
        self._interaction_table = Table(
            self.INTERACTION_TABLE,
            self._metadata,
            Column("seq", Integer, primary_key=True, autoincrement=True),
            Column("from_id", String, nullable=False, index=True),
            Column("to_id", String, nullable=False, index=True),
            Column("book", Integer, nullable=False, index=True),
            Column("type", String, nullable=False),
            Column("from_line", Integer, nullable=True),
            Column("to_line", Integer, nullable=True),
        )
        self._graph_table = Table(
            self.GRAPH_TABLE,
            self._metadata,
            Column("name", String, primary_key=True),
            Column("created_at", DateTime(timezone=False), nullable=False),
        )
        self._metadata.create_all(self._engine, checkfirst=True)

    @property
    def engine(self) -> Engine:
        return self._engine

    # ------------------------------------------------------------------
    # Writes (import scripts and fixtures)
    # ------------------------------------------------------------------
    def upsert_entities(self, entities: Sequence[Entity]) -> int:
        if not entities:
            return 0
        rows = [{"id": e.id, "name": e.name, "type": e.type} for e in entities]
        stmt = insert(self._entity_table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._entity_table.c.id],
            set_={"name": stmt.excluded.name, "type": stmt.excluded.type},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
        return len(rows)

    def insert_interactions(self, interactions: Sequence[Interaction]) -> int:
        if not interactions:
            return 0
        rows = []
        for interaction in interactions:
            selection = interaction.selection
            rows.append(
                {
                    "from_id": interaction.from_id,
                    "to_id": interaction.to_id,
                    "book": interaction.book,
                    "type": interaction.type,
                    "from_line": selection.from_line if selection else None,
                    "to_line": selection.to_line if selection else None,
                }
            )
        with self._engine.begin() as conn:
            conn.execute(insert(self._interaction_table), rows)
        return len(rows)

    def register_graph(self, name: str) -> None:
        stmt = insert(self._graph_table).values(
            name=name, created_at=datetime.now(timezone.utc).replace(tzinfo=None)
        )
        with self._engine.begin() as conn:
            conn.execute(stmt.on_conflict_do_nothing(index_elements=[self._graph_table.c.name]))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def has_graph(self, name: str) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(self._graph_table.c.name).where(self._graph_table.c.name == name)
            ).first()
        return row is not None

    def require_graph(self, name: str) -> None:
        if not self.has_graph(name):
            raise GraphNotFoundError(name)

    def list_graphs(self) -> List[str]:
        with self._engine.connect() as conn:
            result = conn.execute(select(self._graph_table.c.name).order_by(self._graph_table.c.name))
            return [row.name for row in result]

    def fetch_entities(self) -> pd.DataFrame:
        """Snapshot of every entity (columns: id, name, type)."""

        stmt = select(self._entity_table).order_by(self._entity_table.c.id)
        with self._engine.connect() as conn:
            rows = [dict(row) for row in conn.execute(stmt).mappings()]
        return pd.DataFrame(rows, columns=ENTITY_COLUMNS)

    def fetch_interactions(self, book_range: Optional[BookRange] = None) -> pd.DataFrame:
        """Snapshot of interactions in stored order, optionally pre-filtered by book.

        Columns: from_id, to_id, book, type, from_line, to_line.
        """

        table = self._interaction_table
        stmt = select(*[table.c[name] for name in INTERACTION_COLUMNS]).order_by(table.c.seq)
        if book_range is not None:
            stmt = stmt.where(table.c.book.between(book_range.start, book_range.end))
        with self._engine.connect() as conn:
            rows = [dict(row) for row in conn.execute(stmt).mappings()]
        return pd.DataFrame(rows, columns=INTERACTION_COLUMNS)

    def get_entity(self, entity_id: str) -> Entity:
        entities = self.get_entities([entity_id])
        return entities[entity_id]

    def get_entities(self, entity_ids: Iterable[str]) -> Dict[str, Entity]:
        """Resolve ids to entities; every id must exist."""

        ids = list(dict.fromkeys(entity_ids))
        if not ids:
            return {}
        stmt = select(self._entity_table).where(self._entity_table.c.id.in_(ids))
        with self._engine.connect() as conn:
            found = {
                row["id"]: Entity(id=row["id"], name=row["name"], type=row["type"])
                for row in conn.execute(stmt).mappings()
            }
        for entity_id in ids:
            if entity_id not in found:
                raise EntityNotFoundError(entity_id)
        return found

    def counts(self) -> Dict[str, int]:
        with self._engine.connect() as conn:
            return {
                table.name: conn.execute(select(func.count()).select_from(table)).scalar_one()
                for table in (self._entity_table, self._interaction_table, self._graph_table)
            }


def get_corpus_store(settings: Optional[StoreSettings] = None) -> CorpusStore:
    """Open (creating if needed) the store configured for this process."""

    settings = settings or get_store_settings()
    settings.path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(settings.url, future=True)
    logger.debug("Opening corpus store at %s", settings.path)
    return CorpusStore(engine)


# ----------------------------------------------------------------------
# Record parsing for imported JSON exports
# ----------------------------------------------------------------------

def entity_from_record(record: Mapping[str, Any], *, collection: str) -> Entity:
    """Build an :class:`Entity` from an exported document.

    Accepts ``id`` or the document-store style ``_id``/``_key`` fields; bare
    keys are qualified with ``collection``.
    """
    entity_id = record.get("id") or record.get("_id")
    if not entity_id:
        key = record.get("_key")
        if not key:
            raise ValueError(f"entity record has no id: {dict(record)!r}")
        entity_id = f"{collection}/{key}"
    elif "/" not in str(entity_id):
        entity_id = f"{collection}/{entity_id}"
    return Entity(id=str(entity_id), name=str(record.get("name", entity_id)), type=record.get("type"))


def interaction_from_record(record: Mapping[str, Any], *, collection: str) -> Interaction:
    """Build an :class:`Interaction` from an exported edge document."""

    def _qualify(value: Any) -> str:
        text = str(value)
        return text if "/" in text else f"{collection}/{text}"

    source = record.get("from", record.get("_from"))
    target = record.get("to", record.get("_to"))
    if source is None or target is None or record.get("book") is None:
        raise ValueError(f"interaction record needs from, to and book: {dict(record)!r}")

    selection = None
    raw_selection = record.get("selection")
    if raw_selection:
        selection = Selection(
            from_line=int(raw_selection["from_line"]),
            to_line=int(raw_selection["to_line"]),
        )
    return Interaction(
        from_id=_qualify(source),
        to_id=_qualify(target),
        book=int(record["book"]),
        type=str(record.get("type", "other")),
        selection=selection,
    )
