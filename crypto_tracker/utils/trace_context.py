"""
Trace context for correlating log lines of one price refresh.

Every refresh (background or manual) runs inside new_cycle(), so the fetch,
decode and hand-off lines of that refresh share a 6-char hex id in the logs.
The id lives in a ContextVar, so the refresh thread and the UI thread each
see their own.

Usage:
    with new_cycle():
        snapshot = client.fetch_prices(api_key, names)

    logger.info(f"[{get_cycle_id()}] ...")
"""

from __future__ import annotations

import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

NO_CYCLE = "------"

_cycle_id: ContextVar[Optional[str]] = ContextVar("cycle_id", default=None)


def generate_cycle_id() -> str:
    """6-character hex string (e.g., "a7f3b2")."""
    return secrets.token_hex(3)


def get_cycle_id() -> str:
    """Current cycle id, or NO_CYCLE outside a refresh."""
    return _cycle_id.get() or NO_CYCLE


@contextmanager
def new_cycle() -> Generator[str, None, None]:
    """
    Run a block under a fresh cycle id, restoring the previous one on exit.

    Yields:
        The new cycle id.
    """
    cycle_id = generate_cycle_id()
    token = _cycle_id.set(cycle_id)
    try:
        yield cycle_id
    finally:
        _cycle_id.reset(token)
