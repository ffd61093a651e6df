"""Definition records and the definitions artifact.

A :class:`DefinitionRecord` is one documentable symbol: its name, kind and
refid plus the raw Doxygen definition it was resolved from. Member
definitions (functions, typedefs, enums, ...) travel as ``headerDef``;
compound definitions (structs, unions, groups) travel as ``compoundDef``.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from doxygen_md.query import get
from doxygen_md.shared import OutputError
from doxygen_md.tree import Node, make_bool, make_object, make_string

LOCATION_LINE_PATH = "children.#(name=location).attrs.line"


class DefinitionKind(Enum):
    """Symbol kinds that produce definition records."""

    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"
    FUNCTION = "function"
    TYPEDEF = "typedef"
    DEFINE = "define"
    VARIABLE = "variable"
    GROUP = "group"


@dataclass(frozen=True)
class DefinitionRecord:
    """One resolved symbol, immutable once emitted by the resolver."""

    name: str
    kind: DefinitionKind
    refid: str
    header_def: Optional[Node] = None
    compound_def: Optional[Node] = None
    show_full_layout: bool = False

    def __post_init__(self) -> None:
        """Validate the definition record."""
        if not self.name:
            raise ValueError("Definition name cannot be empty")
        if (self.header_def is None) == (self.compound_def is None):
            raise ValueError(f"{self.refid}: exactly one of header_def and compound_def is required")
        if self.kind is DefinitionKind.GROUP and self.compound_def is None:
            raise ValueError(f"{self.refid}: groups carry a compound definition")

    @property
    def definition(self) -> Node:
        return self.header_def if self.header_def is not None else self.compound_def

    @property
    def source_line(self) -> int:
        """Line of the first ``location`` element; 0 when there is none."""
        for definition in (self.header_def, self.compound_def):
            if definition is not None:
                line = get(definition, LOCATION_LINE_PATH)
                if line.exists:
                    return line.as_int()
        return 0

    def to_node(self) -> Node:
        fields = [
            ("name", make_string(self.name)),
            ("kind", make_string(self.kind.value)),
            ("refid", make_string(self.refid)),
        ]
        if self.header_def is not None:
            fields.append(("headerDef", self.header_def))
        if self.compound_def is not None:
            fields.append(("compoundDef", self.compound_def))
        fields.append(("showFullLayout", make_bool(self.show_full_layout)))
        return make_object(fields)

    def to_dict(self) -> Dict[str, Any]:
        return self.to_node().to_python()

    @classmethod
    def from_node(cls, node: Node) -> "DefinitionRecord":
        """Rebuild a record from its artifact form.

        Raises:
            ValueError: If a field is missing or the kind is not supported
        """
        if not node.is_object:
            raise ValueError("Definition record must be an object")
        kind = node.field("kind")
        show = node.field("showFullLayout")
        return cls(
            name=node.field("name").as_string() if node.field("name") else "",
            kind=DefinitionKind(kind.as_string() if kind else ""),
            refid=node.field("refid").as_string() if node.field("refid") else "",
            header_def=node.field("headerDef"),
            compound_def=node.field("compoundDef"),
            show_full_layout=show.as_bool() if show else False,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefinitionRecord":
        return cls.from_node(Node.from_python(data))


def write_definitions(
    records: Iterable[DefinitionRecord],
    output_path: Union[str, Path],
    indent: int = 2,
) -> Path:
    """Write records as a pretty-printed JSON array, in the given order.

    Raises:
        OutputError: If the artifact cannot be written
    """
    path = Path(output_path)
    payload = [record.to_dict() for record in records]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=indent) + "\n", encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Cannot write definitions artifact ({e.strerror or e})", path) from e
    return path


def load_definitions(input_path: Union[str, Path]) -> List[DefinitionRecord]:
    """Read a definitions artifact back into records.

    Raises:
        OutputError: If the artifact cannot be read or does not hold records
    """
    path = Path(input_path)
    try:
        document = Node.from_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise OutputError(f"Cannot read definitions artifact ({e.strerror or e})", path) from e
    except json.JSONDecodeError as e:
        raise OutputError(f"Definitions artifact is not valid JSON ({e.msg})", path) from e
    if not document.is_array:
        raise OutputError("Definitions artifact is not a JSON array", path)
    try:
        return [DefinitionRecord.from_node(item) for item in document.elements]
    except ValueError as e:
        raise OutputError(f"Invalid definition record ({e})", path) from e
