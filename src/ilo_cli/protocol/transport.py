"""TLS transport: one connection per request/response cycle."""

from __future__ import annotations

import socket
import ssl
from typing import Protocol

from ilo_cli.errors import IloConnectionError, NoResponseError, TransmitError

BLOCK_SIZE = 64 * 1024


class Transport(Protocol):
    def send(self, document: str, host: str, port: int, timeout: float) -> bytes:
        """Deliver ``document`` and return every byte the peer sent back."""
        ...


class TlsTransport:
    """Open a fresh TLS connection for every call; never retry."""

    def __init__(self, verify_ssl: bool = True, ssl_context: ssl.SSLContext | None = None):
        self.verify_ssl = verify_ssl
        self._ssl_context = ssl_context

    def send(self, document: str, host: str, port: int, timeout: float) -> bytes:
        try:
            raw_socket = socket.create_connection((host, port), timeout=timeout)
        except TimeoutError as exc:
            raise IloConnectionError(f"Timeout connecting to {host} port {port}") from exc
        except OSError as exc:
            raise IloConnectionError(f"Error connecting to {host} port {port}: {exc}") from exc

        try:
            try:
                tls_socket = self._context().wrap_socket(raw_socket, server_hostname=host)
            except OSError as exc:
                raise IloConnectionError(
                    f"Cannot establish TLS session with {host}:{port}: {exc}"
                ) from exc

            with tls_socket:
                self._write(tls_socket, document, host, port)
                data = self._read(tls_socket)
        finally:
            raw_socket.close()

        if not data:
            raise NoResponseError(f"No response from {host}:{port}")
        return data

    def _context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            context = ssl.create_default_context()
            if not self.verify_ssl:
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
            self._ssl_context = context
        return self._ssl_context

    @staticmethod
    def _write(tls_socket: ssl.SSLSocket, document: str, host: str, port: int) -> None:
        payload = document.encode("utf-8")
        # The declaration and the body have to arrive in separate writes.
        header, separator, body = payload.partition(b"?>")
        try:
            if separator and header.lstrip().startswith(b"<?xml"):
                tls_socket.sendall(header + separator)
                tls_socket.sendall(body)
            else:
                tls_socket.sendall(payload)
        except OSError as exc:
            raise TransmitError(f"Sending request to {host}:{port} failed: {exc}") from exc

    @staticmethod
    def _read(tls_socket: ssl.SSLSocket) -> bytes:
        chunks: list[bytes] = []
        while True:
            try:
                chunk = tls_socket.recv(BLOCK_SIZE)
            except OSError:
                # Timeouts and abrupt TLS shutdowns end the read; the caller
                # gets whatever arrived.
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)
