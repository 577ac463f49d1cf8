"""Versioned strategic facts: snapshots, structural diffs, comparison, and revert."""
