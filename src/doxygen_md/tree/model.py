"""Generic tree model for converted XML documents.

A :class:`Node` is an immutable tagged variant holding one of six kinds of
value: object (ordered string-keyed mapping), array, string, number, boolean,
or null. Converted Doxygen XML, the merged compound index and the definition
records are all expressed in this model so that one query engine can walk any
of them.

Object key order is document order and is part of a node's identity: queries
such as "the first ``.h`` file listed under a name" depend on it, and two
objects with the same fields in a different order are not equal.
"""

import json
from dataclasses import dataclass
from enum import Enum, auto
from functools import cached_property
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

Number = Union[int, float]


class NodeKind(Enum):
    """Kinds of tree node."""

    OBJECT = auto()
    ARRAY = auto()
    STRING = auto()
    NUMBER = auto()
    BOOL = auto()
    NULL = auto()


@dataclass(frozen=True, eq=False)
class Node:
    """Single immutable tree node.

    ``value`` holds a ``dict`` of child nodes for objects, a ``tuple`` of
    nodes for arrays, and the plain Python scalar otherwise. The containers
    are never mutated after construction; build new nodes with the
    ``make_*`` helpers instead.
    """

    kind: NodeKind
    value: Any = None

    # ---------------- Kind checks ---------------- #

    @property
    def is_object(self) -> bool:
        return self.kind is NodeKind.OBJECT

    @property
    def is_array(self) -> bool:
        return self.kind is NodeKind.ARRAY

    @property
    def is_string(self) -> bool:
        return self.kind is NodeKind.STRING

    @property
    def is_container(self) -> bool:
        return self.kind in (NodeKind.OBJECT, NodeKind.ARRAY)

    # ---------------- Navigation ---------------- #

    def field(self, key: str) -> Optional["Node"]:
        """Return the named field of an object, or None."""
        if self.kind is NodeKind.OBJECT:
            return self.value.get(key)
        return None

    def index(self, position: int) -> Optional["Node"]:
        """Return the element of an array at ``position``, or None."""
        if self.kind is NodeKind.ARRAY and 0 <= position < len(self.value):
            return self.value[position]
        return None

    def items(self) -> Iterator[Tuple[str, "Node"]]:
        """Iterate ``(key, node)`` pairs of an object in document order."""
        if self.kind is NodeKind.OBJECT:
            yield from self.value.items()

    @property
    def elements(self) -> Tuple["Node", ...]:
        """Elements of an array (empty for every other kind)."""
        if self.kind is NodeKind.ARRAY:
            return self.value
        return ()

    @property
    def size(self) -> int:
        """Number of fields or elements; 0 for scalars."""
        if self.is_container:
            return len(self.value)
        return 0

    def children_nodes(self) -> Iterator["Node"]:
        """Direct child nodes of an object or array, in order."""
        if self.kind is NodeKind.OBJECT:
            yield from self.value.values()
        elif self.kind is NodeKind.ARRAY:
            yield from self.value

    # ---------------- Canonical scalar views ---------------- #

    def as_string(self) -> str:
        """Canonical string form used by filters and deduplication.

        Strings are returned unquoted, numbers as their JSON text, booleans as
        ``true``/``false``, null as the empty string, and containers as their
        compact JSON text.
        """
        if self.kind is NodeKind.STRING:
            return self.value
        if self.kind is NodeKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is NodeKind.NULL:
            return ""
        return self.raw

    def as_int(self) -> int:
        """Integer view; numeric strings parse, anything unparseable is 0."""
        if self.kind is NodeKind.NUMBER:
            return int(self.value)
        if self.kind is NodeKind.BOOL:
            return 1 if self.value else 0
        if self.kind is NodeKind.STRING:
            text = self.value.strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return int(float(text))
            except (ValueError, OverflowError):
                return 0
        return 0

    def as_bool(self) -> bool:
        if self.kind is NodeKind.BOOL:
            return self.value
        if self.kind is NodeKind.NUMBER:
            return self.value != 0
        if self.kind is NodeKind.STRING:
            return self.value.strip().lower() in ("1", "t", "true")
        return False

    # ---------------- Conversion ---------------- #

    def to_python(self) -> Any:
        """Convert to plain Python values (dict, list, str, int/float, bool, None)."""
        if self.kind is NodeKind.OBJECT:
            return {key: child.to_python() for key, child in self.value.items()}
        if self.kind is NodeKind.ARRAY:
            return [child.to_python() for child in self.value]
        return self.value

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to JSON text; ``indent`` selects pretty-printing."""
        if indent is None:
            return self.raw
        return json.dumps(self.to_python(), ensure_ascii=False, indent=indent)

    @cached_property
    def raw(self) -> str:
        """Compact JSON text of this node."""
        return json.dumps(self.to_python(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_python(cls, value: Any) -> "Node":
        """Build a node tree from plain Python values, preserving dict order.

        Raises:
            TypeError: If a value has no JSON equivalent
        """
        if value is None:
            return NULL
        if isinstance(value, Node):
            return value
        if isinstance(value, bool):
            return TRUE if value else FALSE
        if isinstance(value, (int, float)):
            return make_number(value)
        if isinstance(value, str):
            return make_string(value)
        if isinstance(value, Mapping):
            return make_object((str(key), cls.from_python(item)) for key, item in value.items())
        if isinstance(value, (list, tuple)):
            return make_array(cls.from_python(item) for item in value)
        raise TypeError(f"Cannot convert {type(value).__name__} to a tree node")

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Node":
        """Parse JSON text into a node tree.

        Raises:
            json.JSONDecodeError: If the text is not valid JSON
        """
        return cls.from_python(json.loads(text))

    # ---------------- Equality ---------------- #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self is other:
            return True
        if self.kind is not other.kind:
            return False
        if self.kind is NodeKind.OBJECT:
            return list(self.value.items()) == list(other.value.items())
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.raw))

    def __repr__(self) -> str:
        text = self.raw
        if len(text) > 60:
            text = text[:57] + "..."
        return f"Node({self.kind.name}, {text})"


def make_object(pairs: Union[Mapping[str, Node], Iterable[Tuple[str, Node]]]) -> Node:
    """Create an object node; later duplicate keys replace earlier values in place."""
    fields: Dict[str, Node] = dict(pairs.items() if isinstance(pairs, Mapping) else pairs)
    return Node(NodeKind.OBJECT, fields)


def make_array(items: Iterable[Node]) -> Node:
    return Node(NodeKind.ARRAY, tuple(items))


def make_string(text: str) -> Node:
    return Node(NodeKind.STRING, text)


def make_number(number: Number) -> Node:
    return Node(NodeKind.NUMBER, number)


def make_bool(flag: bool) -> Node:
    return TRUE if flag else FALSE


NULL = Node(NodeKind.NULL, None)
TRUE = Node(NodeKind.BOOL, True)
FALSE = Node(NodeKind.BOOL, False)
EMPTY_ARRAY = Node(NodeKind.ARRAY, ())
