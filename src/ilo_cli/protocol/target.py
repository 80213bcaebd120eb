"""Connection target: address, credentials and protocol dialect."""

from __future__ import annotations

from ilo_cli.errors import InvalidParameterError
from ilo_cli.protocol.cache import SessionCache
from ilo_cli.protocol.commands import Dialect

DEFAULT_PORT = 443
DEFAULT_TIMEOUT = 60.0


class Target:
    """One management processor as seen by the engine.

    Changing ``address`` or ``username`` drops every cached result and forgets
    an auto-detected dialect. A dialect assigned by the caller is kept.
    """

    def __init__(
        self,
        address: str,
        username: str,
        password: str,
        port: int = DEFAULT_PORT,
        dialect: Dialect | str = Dialect.UNKNOWN,
        timeout: float = DEFAULT_TIMEOUT,
        verbosity: int = 0,
    ):
        self._address = address
        self._username = username
        self.password = password
        self.port = port
        self.timeout = timeout
        self.verbosity = verbosity
        self.cache = SessionCache()
        self._dialect = Dialect(dialect)
        self._dialect_explicit = self._dialect != Dialect.UNKNOWN

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
            raise InvalidParameterError(f"Invalid port {value!r}: expected 1-65535")
        self._port = value

    def __repr__(self) -> str:
        return f"Target({self._address!r}, port={self.port}, dialect={self._dialect.value!r})"

    @property
    def address(self) -> str:
        return self._address

    @address.setter
    def address(self, value: str) -> None:
        if value != self._address:
            self._reset()
            self._address = value

    @property
    def username(self) -> str:
        return self._username

    @username.setter
    def username(self, value: str) -> None:
        if value != self._username:
            self._reset()
            self._username = value

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @dialect.setter
    def dialect(self, value: Dialect | str) -> None:
        self._dialect = Dialect(value)
        self._dialect_explicit = self._dialect != Dialect.UNKNOWN

    @property
    def dialect_explicit(self) -> bool:
        return self._dialect_explicit

    def remember_dialect(self, dialect: Dialect) -> None:
        """Record a probed dialect without marking it as caller-chosen."""

        self._dialect = dialect
        self._dialect_explicit = False

    def _reset(self) -> None:
        self.cache.invalidate_all(self)
        if not self._dialect_explicit:
            self._dialect = Dialect.UNKNOWN
