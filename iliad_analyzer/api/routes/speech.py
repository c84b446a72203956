"""Character speech volume route."""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from iliad_analyzer.api.params import parse_book_range
from iliad_analyzer.config import DEFAULT_SPEECH_BOOK_RANGE
from iliad_analyzer.data.corpus_store import CorpusStore
from iliad_analyzer.errors import EntityNotFoundError, InvalidFilterError
from iliad_analyzer.graph import aggregate_speech

logger = logging.getLogger(__name__)

speech_bp = Blueprint("speech", __name__)


@speech_bp.route("/characterspeech", methods=["GET"])
def character_speech_route():
    """Lines spoken per character in the book window, most talkative first."""
    store: CorpusStore = current_app.config["CORPUS_STORE"]

    try:
        book_range = parse_book_range(request, DEFAULT_SPEECH_BOOK_RANGE)
    except InvalidFilterError as exc:
        return jsonify({"error": str(exc)}), 400

    def _names(ids):
        return {entity_id: entity.name for entity_id, entity in store.get_entities(ids).items()}

    try:
        totals = aggregate_speech(
            interactions=store.fetch_interactions(book_range=book_range),
            book_range=book_range,
            resolve_names=_names,
        )
    except EntityNotFoundError as exc:
        logger.error("Speaker without an entity record: %s", exc.entity_id)
        return jsonify({"error": "internal consistency error", "details": str(exc)}), 500

    return jsonify([total.to_dict() for total in totals])
