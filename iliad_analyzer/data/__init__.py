"""Corpus persistence."""

from .corpus_store import CorpusStore, entity_from_record, get_corpus_store, interaction_from_record

__all__ = ["CorpusStore", "entity_from_record", "get_corpus_store", "interaction_from_record"]
