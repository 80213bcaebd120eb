"""Protocol engine: validate, resolve dialect, exchange, decode, cache."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ilo_cli.errors import ErrorKind, IloError
from ilo_cli.protocol.commands import Command, Dialect, bind_command
from ilo_cli.protocol.decoder import decode, is_auth_failure
from ilo_cli.protocol.dialect import DialectResolver
from ilo_cli.protocol.envelope import build_envelope, mask_password
from ilo_cli.protocol.result import CommandResult, Failed, Ok
from ilo_cli.protocol.target import Target
from ilo_cli.protocol.transport import TlsTransport, Transport

LOGGER = logging.getLogger(__name__)


class ProtocolEngine:
    """Run logical commands against targets.

    Every failure comes back as a ``Failed`` value; ``execute`` does not raise
    for protocol, transport or validation problems and never retries.
    Diagnostics are logged only for targets with a non-zero verbosity.
    """

    def __init__(self, transport: Transport | None = None):
        self.transport: Transport = transport if transport is not None else TlsTransport()
        self.resolver = DialectResolver(self._exchange)

    def execute(
        self,
        target: Target,
        name: str,
        params: Mapping[str, object] | None = None,
    ) -> CommandResult:
        try:
            command = bind_command(name, params)
        except IloError as exc:
            return Failed.from_error(exc)

        resource_key = command.resource_key
        if command.definition.mutating or resource_key is None:
            result = self._run(target, command)
            if isinstance(result, Ok):
                for key in command.invalidated_keys:
                    target.cache.invalidate(target, key)
            return result

        return target.cache.get(target, resource_key, lambda: self._run(target, command))

    def invalidate(self, target: Target, resource_key: str) -> None:
        target.cache.invalidate(target, resource_key)

    def invalidate_all(self, target: Target) -> None:
        target.cache.invalidate_all(target)

    def get_dialect(self, target: Target) -> Dialect | Failed:
        try:
            return self.resolver.resolve(target)
        except IloError as exc:
            return Failed.from_error(exc)

    def _run(self, target: Target, command: Command) -> CommandResult:
        dialect = self.get_dialect(target)
        if isinstance(dialect, Failed):
            return dialect
        return self._exchange(target, command, dialect)

    def _exchange(self, target: Target, command: Command, dialect: Dialect) -> CommandResult:
        try:
            document = build_envelope(command, target, dialect)
        except IloError as exc:
            return Failed.from_error(exc)

        _debug(
            target,
            1,
            "Sending %s (%s dialect) to %s:%d, %d bytes",
            command.name,
            dialect.value,
            target.address,
            target.port,
            len(document),
        )
        _debug(target, 2, "Request:\n%s", mask_password(document))

        try:
            raw = self.transport.send(document, target.address, target.port, target.timeout)
        except IloError as exc:
            _debug(target, 1, "Exchange with %s failed: %s", target.address, exc)
            return Failed.from_error(exc)

        _debug(target, 1, "Received %d bytes from %s", len(raw), target.address)
        _debug(target, 2, "Response:\n%s", raw.decode("utf-8", errors="replace"))

        result = decode(raw)
        if isinstance(result, Failed) and is_auth_failure(result):
            return Failed(ErrorKind.AUTH_ERROR, result.message, result.status)
        return result


def _debug(target: Target, level: int, message: str, *args: object) -> None:
    if target.verbosity >= level:
        LOGGER.debug(message, *args)
