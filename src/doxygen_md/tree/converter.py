"""XML-to-tree conversion for Doxygen compound files.

Every XML element becomes an object node with exactly three fields, in this
order::

    {"name": <tag>, "attrs": {<attribute>: <value>, ...}, "children": [...]}

``children`` interleaves text runs (string nodes) and child elements in
document order. Whitespace-only text runs are kept as they are; Doxygen
places meaningful spaces between inline markup elements and the renderer
depends on them.

Parsing is strict. Unlike a browser-style parser there is no recovery: an
unterminated tag, a mismatched close tag, or an undefined entity reference
raises :class:`~doxygen_md.shared.errors.ConversionError`. Only the five
predefined XML entities and character references are expanded; DTDs are not
loaded and external resources are never fetched.
"""

import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree

from doxygen_md.shared import ConversionConfig, ConversionError, get_logger
from doxygen_md.tree.model import Node, make_array, make_object, make_string

XMLInput = Union[bytes, str, Path]

_NAME = "name"
_ATTRS = "attrs"
_CHILDREN = "children"
_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class XMLTreeConverter:
    """Convert XML documents into :class:`~doxygen_md.tree.model.Node` trees.

    The converter is stateless apart from its configuration and the lxml
    parser built from it, so one instance can convert any number of files.

    Example:
        >>> converter = XMLTreeConverter()
        >>> root = converter.convert(b'<a x="1">hi <b/></a>')
        >>> root.raw
        '{"name":"a","attrs":{"x":"1"},"children":["hi ",{"name":"b","attrs":{},"children":[]}]}'
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ConversionConfig()
        self.logger = get_logger(__name__, correlation_id, "converter")

    def _make_parser(self, encoding: Optional[str] = None) -> etree.XMLParser:
        # lxml parsers are not safe to share between threads; build one per call.
        return etree.XMLParser(
            encoding=encoding,
            resolve_entities=False,
            load_dtd=False,
            no_network=True,
            remove_blank_text=False,
            remove_comments=False,
            remove_pis=False,
            strip_cdata=True,
            huge_tree=self.config.huge_tree,
        )

    def convert(self, data: Union[bytes, str], source: Optional[str] = None) -> Node:
        """Convert one XML document to a tree.

        Args:
            data: Complete XML document as bytes (encoding taken from the XML
                declaration) or text
            source: Name used in error messages and logs

        Returns:
            Object node for the document's root element

        Raises:
            ConversionError: If the document is not well-formed XML
        """
        encoding = None
        if isinstance(data, str):
            # Text input is re-encoded, so any declared encoding no longer applies.
            data = data.encode("utf-8")
            encoding = "utf-8"
        if not data.strip():
            raise ConversionError("document is empty", source)

        start_time = time.time()
        try:
            root = etree.fromstring(data, self._make_parser(encoding))
        except etree.XMLSyntaxError as e:
            line, column = e.position if e.position else (None, None)
            raise ConversionError(e.msg or str(e), source, line, column) from e
        if root is None:
            raise ConversionError("document has no root element", source)

        node = self._convert_element(root, {})
        self.logger.debug(
            "Converted XML document",
            extra={
                "source": source,
                "bytes": len(data),
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return node

    def convert_file(self, path: Union[str, Path]) -> Node:
        """Read and convert one XML file.

        Raises:
            OSError: If the file cannot be read
            ConversionError: If the file is not well-formed XML
        """
        path = Path(path)
        return self.convert(path.read_bytes(), source=str(path))

    # ---------------- Internal helpers ---------------- #

    def _convert_element(self, element: etree._Element, parent_nsmap: Dict[Optional[str], str]) -> Node:
        nsmap = element.nsmap
        attrs: List[Tuple[str, Node]] = []
        for prefix, uri in nsmap.items():
            if parent_nsmap.get(prefix) != uri:
                attrs.append(("xmlns" if prefix is None else f"xmlns:{prefix}", make_string(uri)))
        for key, value in element.attrib.items():
            attrs.append((_prefixed_name(key, nsmap), make_string(value)))

        children: List[Node] = []
        pending_text: List[str] = []
        if element.text:
            pending_text.append(element.text)
        for child in element:
            if isinstance(child.tag, str):
                if pending_text:
                    children.append(make_string("".join(pending_text)))
                    pending_text = []
                children.append(self._convert_element(child, nsmap))
            elif not self.config.skip_comments and isinstance(child, etree._Comment):
                if pending_text:
                    children.append(make_string("".join(pending_text)))
                    pending_text = []
                children.append(_comment_node(child))
            # Processing instructions and unexpanded entities carry no content.
            if child.tail:
                pending_text.append(child.tail)
        if pending_text:
            children.append(make_string("".join(pending_text)))

        return make_object((
            (_NAME, make_string(_prefixed_name(element.tag, nsmap))),
            (_ATTRS, make_object(attrs)),
            (_CHILDREN, make_array(children)),
        ))


def _prefixed_name(qualified: str, nsmap: Dict[Optional[str], str]) -> str:
    """Turn lxml's ``{uri}local`` notation back into ``prefix:local``."""
    if not qualified.startswith("{"):
        return qualified
    uri, local = qualified[1:].split("}", 1)
    if uri == _XML_NAMESPACE:
        return f"xml:{local}"
    for prefix, mapped in nsmap.items():
        if mapped == uri and prefix is not None:
            return f"{prefix}:{local}"
    return local


def _comment_node(comment: etree._Comment) -> Node:
    return make_object((
        (_NAME, make_string("#comment")),
        (_ATTRS, make_object(())),
        (_CHILDREN, make_array([make_string(comment.text or "")])),
    ))


_DEFAULT_CONVERTER = XMLTreeConverter()


def convert_xml(data: XMLInput, source: Optional[str] = None) -> Node:
    """Convert XML bytes, text, or a file path with the default configuration.

    Raises:
        ConversionError: If the document is not well-formed XML
        OSError: If a path is given and cannot be read
    """
    if isinstance(data, Path):
        return _DEFAULT_CONVERTER.convert_file(data)
    return _DEFAULT_CONVERTER.convert(data, source)
