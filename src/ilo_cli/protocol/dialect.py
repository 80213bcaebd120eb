"""Dialect detection by probing the processor once per target."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from ilo_cli.errors import AuthError, ErrorKind, UnsupportedDeviceError
from ilo_cli.protocol.commands import PROBE_COMMAND, Command, Dialect, bind_command
from ilo_cli.protocol.decoder import is_auth_failure, is_unknown_command
from ilo_cli.protocol.result import CommandResult, Failed, Ok
from ilo_cli.protocol.target import Target

Exchange: TypeAlias = Callable[[Target, Command, Dialect], CommandResult]

_TRANSPORT_KINDS = frozenset(
    {ErrorKind.CONNECTION_ERROR, ErrorKind.TRANSMIT_ERROR, ErrorKind.NO_RESPONSE}
)


class DialectResolver:
    """Settle which RIBCL dialect a target speaks.

    A caller-chosen dialect is returned as is. Otherwise the firmware query is
    sent with the legacy envelope and, only if the processor answers with an
    unknown-command signature, once more with the current envelope. The
    winning dialect is stored on the target so later calls never re-probe.
    """

    def __init__(self, exchange: Exchange):
        self._exchange = exchange

    def resolve(self, target: Target) -> Dialect:
        if target.dialect != Dialect.UNKNOWN:
            return target.dialect

        probe = bind_command(PROBE_COMMAND)
        legacy = self._exchange(target, probe, Dialect.LEGACY)
        if isinstance(legacy, Ok):
            target.remember_dialect(Dialect.LEGACY)
            return Dialect.LEGACY

        self._raise_for_fatal(legacy)
        if not is_unknown_command(legacy):
            raise UnsupportedDeviceError(
                f"{target.address} rejected the legacy probe: {legacy.message}", legacy.status
            )

        current = self._exchange(target, probe, Dialect.CURRENT)
        if isinstance(current, Ok):
            target.remember_dialect(Dialect.CURRENT)
            return Dialect.CURRENT

        self._raise_for_fatal(current)
        raise UnsupportedDeviceError(
            f"{target.address} accepts neither RIBCL dialect: {current.message}", current.status
        )

    @staticmethod
    def _raise_for_fatal(result: Failed) -> None:
        if is_auth_failure(result):
            raise AuthError(result.message, result.status)
        if result.kind in _TRANSPORT_KINDS:
            result.raise_for_status()
