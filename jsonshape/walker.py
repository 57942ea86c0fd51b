#!/usr/bin/env python3
"""Recursive walk that folds one parsed JSON object into a StatsTable."""
import logging
from collections.abc import Mapping
from typing import Any

from jsonshape.errors import ParseFailure
from jsonshape.stats import StatsTable, ValueKind

logger = logging.getLogger(__name__)


def walk(value: Any, table: StatsTable) -> None:
    """Tally every field of ``value`` into ``table``, descending into nested objects.

    Fields of nested objects land in the same flat table keyed by their own
    name. Arrays are counted but their elements are not visited.
    """
    if not isinstance(value, Mapping):
        raise ParseFailure(f"expected a JSON object, got {type(value).__name__}")
    for key, val in value.items():
        kind = table.classify(val)
        table.record(key, kind)
        if kind is ValueKind.OBJECT:
            walk(val, table)
        elif kind is ValueKind.UNKNOWN:
            logger.info("Unknown value %r for field %r", val, key)
