"""Helpers for reading loosely typed values out of Ecowitt payloads."""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional

# Leading decimal number, as accepted by a browser's ``parseFloat``.
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def read_path(payload: Any, *keys: str) -> Optional[Any]:
    """Walk nested mappings by key, returning ``None`` if any step is missing."""
    node: Any = payload
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
        if node is None:
            return None
    return node


def extract_numeric(node: Any) -> Optional[float]:
    """Return the numeric ``value`` of an Ecowitt value object.

    Ecowitt reports readings as ``{"time": "...", "unit": "ºF", "value": "71.2"}``.
    Strings are read up to the end of their leading number, so ``"12.3 inHg"``
    gives ``12.3``. Missing objects, missing or empty values and strings without
    a leading number yield ``None`` so that a genuine reading of ``0`` is never
    confused with "no data".
    """
    if not isinstance(node, Mapping):
        return None

    raw = node.get("value")
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        parsed = float(raw)
    elif isinstance(raw, str):
        match = _LEADING_NUMBER.match(raw.strip())
        if match is None:
            return None
        parsed = float(match.group(0))
    else:
        return None

    if not math.isfinite(parsed):
        return None
    return parsed
