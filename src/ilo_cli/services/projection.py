"""Helpers for projecting decoded RIBCL nodes into typed values."""

from __future__ import annotations

from ilo_cli.errors import ParseError
from ilo_cli.protocol.nodes import DecodedNode

_TRUE_WORDS = frozenset({"y", "yes", "true", "on", "enable", "enabled"})


def require_node(root: DecodedNode, tag: str) -> DecodedNode:
    node = root.find(tag)
    if node is None:
        raise ParseError(f"Expected tag '{tag}' not found in response")
    return node


def coerce_flag(value: object | None, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_WORDS


def coerce_int(value: object | None, default: int) -> int:
    try:
        if value is None or value == "":
            return default
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def coerce_str(value: object | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_state(value: object | None) -> str:
    """Normalize ON/OFF style attributes to lower-case words."""

    return coerce_str(value).lower()
