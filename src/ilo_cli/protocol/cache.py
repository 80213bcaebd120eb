"""Per-target memo of decoded non-volatile query results."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.protocol.result import CommandResult, Ok

if TYPE_CHECKING:
    from ilo_cli.protocol.target import Target

VOLATILE_RESOURCES = frozenset({"power", "uid"})


def is_cacheable(resource_key: str) -> bool:
    return resource_key not in VOLATILE_RESOURCES


class SessionCache:
    """Decoded responses keyed by (target address, resource key).

    Entries have no expiry; they live until the address or username changes
    or a successful mutation invalidates the resource.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], DecodedNode] = {}

    def get(
        self,
        target: Target,
        resource_key: str,
        fetch: Callable[[], CommandResult],
    ) -> CommandResult:
        key = (target.address, resource_key)
        if is_cacheable(resource_key) and key in self._entries:
            return Ok(self._entries[key])

        result = fetch()
        if isinstance(result, Ok) and is_cacheable(resource_key):
            self._entries[key] = result.node
        return result

    def invalidate(self, target: Target, resource_key: str) -> None:
        self._entries.pop((target.address, resource_key), None)

    def invalidate_all(self, target: Target) -> None:
        for key in [key for key in self._entries if key[0] == target.address]:
            del self._entries[key]

    def keys(self, target: Target) -> list[str]:
        return [resource for address, resource in self._entries if address == target.address]

    def __len__(self) -> int:
        return len(self._entries)
