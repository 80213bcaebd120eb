"""Request envelope rendering."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import xmltodict

from ilo_cli.errors import InvalidParameterError
from ilo_cli.protocol.commands import RIBCL_VERSIONS, Command, Dialect
from ilo_cli.protocol.nodes import XML_DECLARATION

if TYPE_CHECKING:
    from ilo_cli.protocol.target import Target

_PASSWORD_RE = re.compile(r"""PASSWORD=("[^"]*"|'[^']*')""")


def build_envelope(command: Command, target: Target, dialect: Dialect) -> str:
    """Render the complete RIBCL document for one command.

    The login element carries the credentials; attribute values are escaped
    by the XML writer, otherwise passed through unchanged.
    """

    if dialect not in RIBCL_VERSIONS:
        raise InvalidParameterError(f"Cannot build an envelope for dialect '{dialect}'")

    element: dict[str, object] = {
        f"@{attribute}": value for attribute, value in command.attributes(dialect)
    }
    document: dict[str, object] = {
        "RIBCL": {
            "@VERSION": RIBCL_VERSIONS[dialect],
            "LOGIN": {
                "@USER_LOGIN": target.username,
                "@PASSWORD": target.password,
                command.definition.section: {
                    "@MODE": command.definition.mode,
                    command.tag(dialect): element or None,
                },
            },
        }
    }
    body = xmltodict.unparse(
        document,
        full_document=False,
        pretty=True,
        indent="  ",
        short_empty_elements=True,
    )
    return f"{XML_DECLARATION}\n{body}\n"


def mask_password(document: str) -> str:
    """Hide login passwords before a document is written to logs."""

    return _PASSWORD_RE.sub('PASSWORD="********"', document)
