"""Core health check routes."""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify

core_bp = Blueprint("core", __name__)


@core_bp.route("/health", methods=["GET"])
@core_bp.route("/api/health", methods=["GET"])
def health_check():
    """Simple health check."""
    return jsonify({"status": "ok", "service": "iliad-analyzer"})


@core_bp.route("/api/graphs", methods=["GET"])
def list_graphs():
    """Named graph resources accepted by the metric routes."""
    store = current_app.config["CORPUS_STORE"]
    return jsonify({"graphs": store.list_graphs(), "counts": store.counts()})
