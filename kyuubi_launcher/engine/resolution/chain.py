"""Ordered fallback chain.

Each candidate is a ``(label, producer)`` pair.  Producers return a value or
``None`` for "not found here"; the first non-``None`` value wins.  Producers
may raise to abort the whole chain.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

type Candidate[T] = tuple[str, Callable[[], T | None]]


def first_resolved[T](candidates: Iterable[Candidate[T]]) -> T | None:
    """Return the first value produced, or ``None`` if every candidate is empty."""
    for label, produce in candidates:
        value = produce()
        if value is not None:
            logger.debug("Resolved via {}: {}", label, value)
            return value
        logger.debug("Nothing found via {}", label)
    return None
