"""Structural diffing of snapshot payloads."""

from fact_history.diff.engine import compute_diff, deep_copy_payload, values_equal

__all__ = ["compute_diff", "deep_copy_payload", "values_equal"]
