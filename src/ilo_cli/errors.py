"""Error kinds and exceptions for ilo-cli."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_PARAMETER = "InvalidParameter"
    CONNECTION_ERROR = "ConnectionError"
    TRANSMIT_ERROR = "TransmitError"
    NO_RESPONSE = "NoResponseError"
    PARSE_ERROR = "ParseError"
    REMOTE_ERROR = "RemoteError"
    UNSUPPORTED_DEVICE = "UnsupportedDeviceError"
    AUTH_ERROR = "AuthError"


class IloError(Exception):
    """Base error for ilo-cli."""

    kind: ErrorKind = ErrorKind.REMOTE_ERROR

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class InvalidParameterError(IloError):
    """Raised when a command parameter is outside its documented domain."""

    kind = ErrorKind.INVALID_PARAMETER


class IloConnectionError(IloError):
    """Raised when the TCP connect or TLS handshake fails."""

    kind = ErrorKind.CONNECTION_ERROR


class TransmitError(IloError):
    """Raised when the request could not be written completely."""

    kind = ErrorKind.TRANSMIT_ERROR


class NoResponseError(IloError):
    """Raised when the peer closed or timed out without sending anything."""

    kind = ErrorKind.NO_RESPONSE


class ParseError(IloError):
    """Raised when the response is not well-formed XML."""

    kind = ErrorKind.PARSE_ERROR


class RemoteError(IloError):
    """Raised when the processor reports a non-success status."""

    kind = ErrorKind.REMOTE_ERROR


class UnsupportedDeviceError(IloError):
    """Raised when neither protocol dialect is accepted by the peer."""

    kind = ErrorKind.UNSUPPORTED_DEVICE


class AuthError(IloError):
    """Raised when the processor rejects the login credentials."""

    kind = ErrorKind.AUTH_ERROR


ERRORS_BY_KIND: dict[ErrorKind, type[IloError]] = {
    error.kind: error
    for error in (
        InvalidParameterError,
        IloConnectionError,
        TransmitError,
        NoResponseError,
        ParseError,
        RemoteError,
        UnsupportedDeviceError,
        AuthError,
    )
}
