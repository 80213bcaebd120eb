"""Decoded response tree."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass, field

DOCUMENTS_TAG = "#documents"
XML_DECLARATION = '<?xml version="1.0"?>'


def _new_attrs() -> dict[str, str]:
    return {}


def _new_children() -> list[DecodedNode]:
    return []


@dataclass(slots=True)
class DecodedNode:
    """One XML element: tag, string attributes and ordered children.

    Several concatenated response documents are held under a synthetic
    root tagged ``#documents``.
    """

    tag: str
    attrs: dict[str, str] = field(default_factory=_new_attrs)
    children: list[DecodedNode] = field(default_factory=_new_children)
    text: str = ""

    @classmethod
    def from_element(cls, element: ET.Element) -> DecodedNode:
        return cls(
            tag=element.tag,
            attrs=dict(element.attrib),
            children=[cls.from_element(child) for child in element],
            text=(element.text or "").strip(),
        )

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def iter(self) -> Iterator[DecodedNode]:
        """Walk this node and its descendants in document order."""

        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, tag: str) -> DecodedNode | None:
        for node in self.iter():
            if node.tag == tag:
                return node
        return None

    def find_all(self, tag: str) -> list[DecodedNode]:
        return [node for node in self.iter() if node.tag == tag]

    def child_values(self) -> dict[str, str]:
        """Map child tags to their VALUE attribute, the common RIBCL setting shape."""

        values: dict[str, str] = {}
        for child in self.children:
            value = child.attrs.get("VALUE", child.attrs.get("value"))
            if value is not None:
                values[child.tag] = value
        return values

    def status_view(self) -> list[tuple[str, str, str | None]]:
        """Return (path, STATUS, MESSAGE) for every status-bearing node."""

        view: list[tuple[str, str, str | None]] = []
        self._collect_status(self.tag, view)
        return view

    def _collect_status(self, path: str, view: list[tuple[str, str, str | None]]) -> None:
        status = self.attrs.get("STATUS")
        if status is not None:
            view.append((path, status, self.attrs.get("MESSAGE")))
        for index, child in enumerate(self.children):
            child._collect_status(f"{path}/{index}:{child.tag}", view)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"tag": self.tag}
        if self.attrs:
            payload["attrs"] = dict(self.attrs)
        if self.text:
            payload["text"] = self.text
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload

    def to_element(self) -> ET.Element:
        element = ET.Element(self.tag, self.attrs)
        if self.text:
            element.text = self.text
        for child in self.children:
            element.append(child.to_element())
        return element

    def to_xml(self) -> str:
        if self.tag == DOCUMENTS_TAG:
            return "\n".join(child.to_xml() for child in self.children)
        body = ET.tostring(self.to_element(), encoding="unicode")
        return f"{XML_DECLARATION}\n{body}\n"
