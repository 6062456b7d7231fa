from __future__ import annotations

import copy
import json
from typing import Any, Mapping


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``patch`` over ``base`` into a new dict.

    Nested objects merge key by key. Arrays and scalars in ``patch`` replace
    the base value wholesale.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def changed_fields(before: Mapping[str, Any], after: Mapping[str, Any]) -> dict[str, tuple[Any, Any]]:
    """Top-level keys whose value differs, mapped to ``(old, new)``."""
    changes: dict[str, tuple[Any, Any]] = {}
    for key in list(before) + [key for key in after if key not in before]:
        old, new = before.get(key), after.get(key)
        if old != new:
            changes[key] = (old, new)
    return changes


def _render(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def format_changes(changes: Mapping[str, tuple[Any, Any]]) -> str:
    return "\n".join(f"{key}: {_render(old)} → {_render(new)}" for key, (old, new) in changes.items())


__all__ = ["changed_fields", "deep_merge", "format_changes"]
