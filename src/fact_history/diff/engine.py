"""Structural diff between two snapshot payloads.

The engine is field-agnostic: payloads are arbitrary mappings whose values
may be scalars, lists, or nested mappings. Comparison is by deep structural
equality, never by identity, and list equality is ordered.
"""

import copy
import logging
import math
from collections.abc import Mapping
from typing import Any

from fact_history.errors import DiffInputInvalid
from fact_history.models.snapshot import FieldChange, SnapshotDiff

logger = logging.getLogger(__name__)


def deep_copy_payload(value: Any) -> Any:
    """Return a deep copy of a payload so callers never share mutable state."""
    return copy.deepcopy(value)


def values_equal(a: Any, b: Any) -> bool:
    """Recursive structural equality.

    Mappings compare by key set and value, ignoring key order. Lists and
    tuples compare index-wise. Booleans never equal numbers, so ``True``
    differs from ``1``. NaN equals NaN, as two stored NaN values are the
    same field value.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(values_equal(a[key], b[key]) for key in a)
    if isinstance(a, list | tuple) and isinstance(b, list | tuple):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b, strict=True))
    if isinstance(a, Mapping | list | tuple) or isinstance(b, Mapping | list | tuple):
        return False
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return bool(a == b)


def _as_mapping(value: Any, side: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DiffInputInvalid(f"{side} payload is {type(value).__name__}, not a mapping")
    return value


def compute_diff(old: Any, new: Any) -> SnapshotDiff:
    """Compute the added/modified/removed delta from ``old`` to ``new``.

    ``added`` and ``modified`` follow the key order of ``new``; ``removed``
    follows the key order of ``old``. A key missing from ``old`` is absent,
    not ``None``, so absent -> ``None`` is reported as an addition.

    Non-mapping input yields an empty diff instead of raising.
    """
    try:
        old_map = _as_mapping(old, "old")
        new_map = _as_mapping(new, "new")
    except DiffInputInvalid as e:
        logger.debug("Returning empty diff: %s", e)
        return SnapshotDiff()

    added: dict[str, Any] = {}
    modified: dict[str, FieldChange] = {}
    removed: dict[str, Any] = {}

    for key, new_value in new_map.items():
        if key not in old_map:
            added[key] = deep_copy_payload(new_value)
        elif not values_equal(old_map[key], new_value):
            modified[key] = FieldChange(
                old_value=deep_copy_payload(old_map[key]),
                new_value=deep_copy_payload(new_value),
            )

    for key, old_value in old_map.items():
        if key not in new_map:
            removed[key] = deep_copy_payload(old_value)

    return SnapshotDiff(added=added, modified=modified, removed=removed)
