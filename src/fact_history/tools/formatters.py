"""Compact output formatters for MCP tool responses."""

import json
from typing import Any

from fact_history.models.comparison import VersionComparison
from fact_history.models.fact import StrategicFact
from fact_history.models.snapshot import Snapshot, SnapshotAction, SnapshotDiff


def format_value(value: Any) -> str:
    """Render a field value as compact JSON."""
    return json.dumps(value, ensure_ascii=False, default=str)


def format_snapshot_header(snapshot: Snapshot) -> str:
    """Format: [v3.0] revert | alice | 2026-01-05 14:03."""
    parts = [f"[v{snapshot.label}] {snapshot.action.value}", snapshot.changed_by]
    if snapshot.created_at:
        parts.append(snapshot.created_at.strftime("%Y-%m-%d %H:%M"))
    return " | ".join(parts)


def format_snapshot_compact(snapshot: Snapshot) -> str:
    """Header + reason + change counts. For fact_history listings."""
    lines = [format_snapshot_header(snapshot)]
    if snapshot.change_reason:
        lines.append(f"  {snapshot.change_reason}")
    if snapshot.action == SnapshotAction.REVERT and snapshot.reverted_from is not None:
        lines.append(f"  ↳ content of v{snapshot.reverted_from}.0")
    changes = snapshot.changes
    lines.append(
        f"  +{len(changes.added)} ~{len(changes.modified)} -{len(changes.removed)}"
    )
    return "\n".join(lines)


def format_diff(diff: SnapshotDiff) -> str:
    """Added / Modified / Removed sections, one line per field."""
    if diff.is_empty:
        return "No changes"

    lines: list[str] = []
    if diff.added:
        lines.append("Added:")
        lines.extend(f"  + {key}: {format_value(v)}" for key, v in diff.added.items())
    if diff.modified:
        lines.append("Modified:")
        for key, change in diff.modified.items():
            lines.append(f"  ~ {key}:")
            lines.append(f"      - {format_value(change.old_value)}")
            lines.append(f"      + {format_value(change.new_value)}")
    if diff.removed:
        lines.append("Removed:")
        lines.extend(f"  - {key}: {format_value(v)}" for key, v in diff.removed.items())
    return "\n".join(lines)


def format_comparison(comparison: VersionComparison) -> str:
    """Version labels then the diff."""
    header = f"{comparison.record_id}: v{comparison.old_label} → v{comparison.new_label}"
    return f"{header}\n{format_diff(comparison.diff)}"


def format_fact(fact: StrategicFact) -> str:
    """Header + one line per field."""
    lines = [f"[{fact.record_id}] v{fact.version}.0"]
    lines.extend(f"  {key}: {format_value(value)}" for key, value in fact.fields.items())
    return "\n".join(lines)


def format_result_list(
    formatted_entries: list[str],
    header: str | None = None,
    note: str | None = None,
) -> str:
    """Header + count + note + entries joined by blank lines."""
    if not formatted_entries:
        return "No results found."

    lines: list[str] = []
    if header:
        lines.append(header)
    lines.append(f"{len(formatted_entries)} result(s)")
    if note:
        lines.append(f"Note: {note}")
    lines.append("")
    lines.append("\n\n".join(formatted_entries))
    return "\n".join(lines)
