"""Generic tree model and XML conversion.

Key Components:
    Node: Immutable tagged-variant tree node (object, array, string, number, bool, null)
    XMLTreeConverter: Strict lxml-backed conversion of XML documents into nodes
    convert_xml: One-call conversion with the default configuration
"""

from .converter import XMLTreeConverter, convert_xml
from .model import (
    EMPTY_ARRAY,
    FALSE,
    NULL,
    TRUE,
    Node,
    NodeKind,
    make_array,
    make_bool,
    make_number,
    make_object,
    make_string,
)

__all__ = [
    "XMLTreeConverter",
    "convert_xml",
    "EMPTY_ARRAY",
    "FALSE",
    "NULL",
    "TRUE",
    "Node",
    "NodeKind",
    "make_array",
    "make_bool",
    "make_number",
    "make_object",
    "make_string",
]
