"""Canonical JSON rendering.

Keys are sorted at every nesting level and indentation is fixed, so the same
value always renders to the same bytes.
"""

import json
from typing import Any


def canonicalize(value: Any, _active: set[int] | None = None) -> Any:
    """Return a copy of ``value`` with every mapping's keys sorted.

    A container that is already being copied further up (a cycle) is returned
    as-is instead of being descended into again.
    """
    if not isinstance(value, (dict, list, tuple)):
        return value

    active = set() if _active is None else _active
    marker = id(value)
    if marker in active:
        return value

    active.add(marker)
    try:
        if isinstance(value, dict):
            return {str(key): canonicalize(value[key], active) for key in sorted(value, key=str)}
        return [canonicalize(item, active) for item in value]
    finally:
        active.discard(marker)


def stable_dumps(value: Any) -> str:
    """Render ``value`` as canonical, 2-space indented JSON ending in a newline.

    Raises:
        ValueError: if ``value`` contains a reference cycle.
    """
    return json.dumps(canonicalize(value), indent=2, ensure_ascii=False, sort_keys=True) + "\n"
