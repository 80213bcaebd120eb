"""Accessor-facing client: one protocol engine bound to one target."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from ilo_cli.protocol.commands import Dialect
from ilo_cli.protocol.engine import ProtocolEngine
from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.protocol.result import CommandResult, Failed
from ilo_cli.protocol.target import Target


class IloClientProtocol(Protocol):
    """Subset of client methods used by services and commands."""

    def execute(self, name: str, params: Mapping[str, object] | None = None) -> CommandResult: ...

    def fetch(self, name: str, params: Mapping[str, object] | None = None) -> DecodedNode: ...

    def dialect(self) -> Dialect: ...


class IloClient:
    def __init__(self, engine: ProtocolEngine, target: Target):
        self.engine = engine
        self.target = target

    def execute(self, name: str, params: Mapping[str, object] | None = None) -> CommandResult:
        return self.engine.execute(self.target, name, params)

    def fetch(self, name: str, params: Mapping[str, object] | None = None) -> DecodedNode:
        """Execute ``name`` and return the decoded root, raising the typed error on failure."""

        result = self.execute(name, params)
        if isinstance(result, Failed):
            result.raise_for_status()
        return result.node

    def dialect(self) -> Dialect:
        resolved = self.engine.get_dialect(self.target)
        if isinstance(resolved, Failed):
            resolved.raise_for_status()
        return resolved

    def invalidate(self, resource_key: str) -> None:
        self.engine.invalidate(self.target, resource_key)

    def invalidate_all(self) -> None:
        self.engine.invalidate_all(self.target)
