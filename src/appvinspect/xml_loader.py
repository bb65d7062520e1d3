#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/xml_loader.py
"""XML loading and lookup helpers for App-V metadata files.

Parsing goes through ``defusedxml`` so that entity-expansion and external
entity tricks inside a package are rejected rather than resolved. Building
new trees (the merged summary document) uses the standard ElementTree
element types, which is what ``defusedxml`` itself returns.

App-V metadata mixes the default AppX namespace with the ``appv:`` namespace
and the exact placement varies between sequencer versions. Lookups in this
module therefore compare local names only and ignore case, and a missing
node simply yields an empty value.
"""

from __future__ import annotations

import copy
import logging
from typing import IO, Iterator, Optional, Union
from xml.etree.ElementTree import Element, tostring

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from appvinspect.exceptions import MalformedXmlError

logger = logging.getLogger(__name__)


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element or attribute name."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def _matches(tag: object, name: str) -> bool:
    return isinstance(tag, str) and local_name(tag).lower() == name.lower()


def iter_children(element: Optional[Element], name: Optional[str] = None) -> Iterator[Element]:
    """Yield direct child elements, optionally filtered by local name."""
    if element is None:
        return
    for child in element:
        if not isinstance(child.tag, str):
            continue
        if name is None or _matches(child.tag, name):
            yield child


def find_child(element: Optional[Element], name: str) -> Optional[Element]:
    """Return the first direct child with the given local name, or None."""
    return next(iter_children(element, name), None)


def find_path(element: Optional[Element], *names: str) -> Optional[Element]:
    """Descend through successive child names; None if any step is missing."""
    current = element
    for name in names:
        current = find_child(current, name)
        if current is None:
            return None
    return current


def element_text(element: Optional[Element]) -> str:
    """Return the whitespace-trimmed text content of an element, or ''."""
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def child_text(element: Optional[Element], *names: str) -> str:
    """Text of the element reached by ``names``, or '' when absent."""
    return element_text(find_path(element, *names))


def get_attribute(element: Optional[Element], name: str) -> str:
    """Return an attribute value by local name (any namespace), or ''."""
    if element is None:
        return ""
    if name in element.attrib:
        return element.attrib[name]
    for key, value in element.attrib.items():
        if _matches(key, name):
            return value
    return ""


class XmlDocument:
    """A parsed XML document.

    Parameters
    ----------
    root : Element
        Document root element

    """

    def __init__(self, root: Element):
        """Wrap an existing root element."""
        self._root = root

    @classmethod
    def create(cls, root_tag: str) -> XmlDocument:
        """Create an empty document with a new root element."""
        return cls(Element(root_tag))

    @property
    def root(self) -> Element:
        return self._root

    @staticmethod
    def import_node(element: Element) -> Element:
        """Return a deep copy of ``element`` detached from its source tree."""
        return copy.deepcopy(element)

    def append_imported(self, element: Element) -> Element:
        """Deep-copy ``element`` and append it as a direct child of the root."""
        imported = self.import_node(element)
        self._root.append(imported)
        return imported

    def to_bytes(self, xml_declaration: bool = True) -> bytes:
        """Serialize the document as UTF-8 encoded XML."""
        return tostring(self._root, encoding="utf-8", xml_declaration=xml_declaration)

    def __repr__(self) -> str:
        return f"<XmlDocument root={local_name(str(self._root.tag))!r}>"


def load_xml(source: Union[bytes, str, IO[bytes]], kind: Optional[str] = None) -> XmlDocument:
    """Parse XML content into an :class:`XmlDocument`.

    Parameters
    ----------
    source : bytes, str or IO[bytes]
        Raw XML content or a binary stream positioned at its start
    kind : str, optional
        Well-known identifier of the file, recorded on parse errors

    Returns
    -------
    XmlDocument
        The parsed document

    Raises
    ------
    MalformedXmlError
        If the content is not well-formed XML or uses forbidden constructs
        (DTD entities, external references)

    """
    if hasattr(source, "read"):
        data = source.read()  # type: ignore[union-attr]
    else:
        data = source

    label = f"{kind} " if kind else ""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedXmlError(f"{label}XML is not well-formed: {e}", kind=kind, original_error=e) from e
    except DefusedXmlException as e:
        raise MalformedXmlError(f"{label}XML uses forbidden constructs: {e!r}", kind=kind, original_error=e) from e

    logger.debug("Parsed %sXML document with root <%s>", label, local_name(root.tag))
    return XmlDocument(root)
