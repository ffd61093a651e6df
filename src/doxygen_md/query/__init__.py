"""Path query engine for tree nodes.

Key Components:
    QueryEngine: Interpreter for path expressions with an explicit transform table
    QueryResult: Outcome of one query, with canonical scalar views and chaining
    Transform: Named transform entry; STANDARD_TRANSFORMS is the default table
    parse_path: Strict parser producing a closed set of segment kinds
"""

from .engine import DEFAULT_ENGINE, QueryEngine, QueryResult, get
from .path import (
    Condition,
    Operator,
    Path,
    Segment,
    SegmentKind,
    escape_component,
    parse_path,
    quote_value,
)
from .transforms import STANDARD_TRANSFORMS, Transform, transform_table

__all__ = [
    "DEFAULT_ENGINE",
    "QueryEngine",
    "QueryResult",
    "get",
    "Condition",
    "Operator",
    "Path",
    "Segment",
    "SegmentKind",
    "escape_component",
    "parse_path",
    "quote_value",
    "STANDARD_TRANSFORMS",
    "Transform",
    "transform_table",
]
