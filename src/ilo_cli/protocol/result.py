"""Typed command results returned by the protocol engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NoReturn, TypeAlias

from ilo_cli.errors import ERRORS_BY_KIND, ErrorKind, IloError
from ilo_cli.protocol.nodes import DecodedNode


@dataclass(frozen=True, slots=True)
class Ok:
    """Successful exchange carrying the decoded response root."""

    node: DecodedNode
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class Failed:
    """Failed exchange with a programmatically inspectable error kind."""

    kind: ErrorKind
    message: str
    status: int | None = None
    ok: Literal[False] = False

    @classmethod
    def from_error(cls, error: IloError) -> Failed:
        return cls(kind=error.kind, message=error.message, status=error.status)

    def to_error(self) -> IloError:
        return ERRORS_BY_KIND[self.kind](self.message, self.status)

    def raise_for_status(self) -> NoReturn:
        raise self.to_error()


CommandResult: TypeAlias = Ok | Failed
