"""Request-scoped context helpers for logging correlation.

A context-local request id (req_id) is set for every API request and a
logging Filter copies it onto each LogRecord, so one request's subgraph
build, metric pass and lookups can be grepped together.
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

_REQ_ID: ContextVar[str] = ContextVar("iliad_req_id", default="-")

REQUEST_ID_HEADER = "X-Request-ID"


def new_req_id(incoming: Optional[str] = None) -> str:
    """Reuse a sane caller-supplied id, otherwise mint a short random one."""
    if incoming:
        candidate = incoming.strip()
        if 0 < len(candidate) <= 64 and candidate.isprintable():
            return candidate
    return uuid.uuid4().hex[:12]


def set_req_id(req_id: str) -> None:
    _REQ_ID.set(req_id)


def get_req_id() -> str:
    return _REQ_ID.get()


def clear_req_id() -> None:
    _REQ_ID.set("-")


class RequestIdFilter(logging.Filter):
    """Inject `req_id` into log records (always present)."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 - required by logging.Filter
        record.req_id = get_req_id()
        return True
