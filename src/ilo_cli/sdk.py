"""Build an iLO client from resolved connection parameters."""

from ilo_cli.connection import ConnectionParams
from ilo_cli.ilo_client import IloClient, IloClientProtocol
from ilo_cli.protocol.engine import ProtocolEngine
from ilo_cli.protocol.target import Target
from ilo_cli.protocol.transport import TlsTransport


def create_client(connection: ConnectionParams) -> IloClientProtocol:
    """Create a client with its own target, session cache and TLS transport."""

    target = Target(
        address=connection.host,
        username=connection.username,
        password=connection.password,
        port=connection.port,
        dialect=connection.dialect,
        timeout=connection.timeout,
        verbosity=connection.verbosity,
    )
    engine = ProtocolEngine(TlsTransport(verify_ssl=connection.verify_ssl))
    return IloClient(engine, target)
