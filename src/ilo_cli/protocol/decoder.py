"""Response decoding and status classification."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from ilo_cli.errors import ErrorKind, ParseError
from ilo_cli.protocol.nodes import DOCUMENTS_TAG, DecodedNode
from ilo_cli.protocol.result import CommandResult, Failed, Ok

_DECLARATION_RE = re.compile(r"<\?xml[^>]*\?>")

AUTH_FAILURE_CODES = frozenset({0x005F})
AUTH_FAILURE_MESSAGES = ("login failed", "login credentials rejected")
UNKNOWN_COMMAND_MESSAGES = ("syntax error", "unknown command", "not supported", "unrecognized")


def parse_response(raw: bytes) -> DecodedNode:
    """Parse one or more concatenated XML documents into a DecodedNode tree."""

    text = raw.decode("utf-8", errors="replace")
    documents = [chunk.strip() for chunk in _DECLARATION_RE.split(text)]
    documents = [chunk for chunk in documents if chunk]
    if not documents:
        raise ParseError("Response did not contain an XML document")

    roots: list[DecodedNode] = []
    for document in documents:
        try:
            element = ET.fromstring(document)
        except ET.ParseError as exc:
            raise ParseError(f"Malformed XML in response: {exc}") from exc
        roots.append(DecodedNode.from_element(element))

    if len(roots) == 1:
        return roots[0]
    return DecodedNode(tag=DOCUMENTS_TAG, children=roots)


def status_code(value: str) -> int | None:
    """Return the numeric protocol status, or None for descriptive values like "OK"."""

    text = value.strip()
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    except ValueError:
        return None


def first_failure(root: DecodedNode) -> Failed | None:
    """Return the first non-success status in document order."""

    for node in root.iter():
        value = node.attrs.get("STATUS")
        if value is None:
            continue
        code = status_code(value)
        if code is None or code == 0:
            continue
        message = node.attrs.get("MESSAGE") or f"{node.tag} returned status {value}"
        return Failed(kind=ErrorKind.REMOTE_ERROR, message=message, status=code)
    return None


def decode(raw: bytes) -> CommandResult:
    try:
        root = parse_response(raw)
    except ParseError as exc:
        return Failed.from_error(exc)

    failure = first_failure(root)
    if failure is not None:
        return failure
    return Ok(root)


def is_auth_failure(result: Failed) -> bool:
    if result.kind == ErrorKind.AUTH_ERROR:
        return True
    if result.kind != ErrorKind.REMOTE_ERROR:
        return False
    if result.status in AUTH_FAILURE_CODES:
        return True
    message = result.message.lower()
    return any(signature in message for signature in AUTH_FAILURE_MESSAGES)


def is_unknown_command(result: Failed) -> bool:
    if result.kind != ErrorKind.REMOTE_ERROR:
        return False
    message = result.message.lower()
    return any(signature in message for signature in UNKNOWN_COMMAND_MESSAGES)
