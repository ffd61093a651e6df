"""Rendering views over definition records.

Each view wraps one :class:`~doxygen_md.resolve.records.DefinitionRecord` and
knows how to print its C signature and its description.
"""

from typing import List, Optional, Tuple

from doxygen_md.query import DEFAULT_ENGINE, QueryEngine, QueryResult
from doxygen_md.render.description import BRIEF_PARA_PATH, markdown_desc, to_simple_text
from doxygen_md.resolve.records import DefinitionRecord
from doxygen_md.tree import Node

_DETAILED = "children.#(name=detaileddescription).children"
_BRIEF = "children.#(name=briefdescription).children"


class SymbolView:
    """Base view: name, anchor and description lookups shared by every kind."""

    is_function = False

    def __init__(self, record: DefinitionRecord, engine: Optional[QueryEngine] = None) -> None:
        self.record = record
        self.engine = engine or DEFAULT_ENGINE
        self.header = QueryResult(record.header_def, engine=self.engine)
        self.compound = QueryResult(record.compound_def, engine=self.engine)

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def refid(self) -> str:
        return self.record.refid

    def details_children(self) -> Optional[Node]:
        """Detailed description, falling back to the brief one."""
        for result in (
            self.header.get(_DETAILED),
            self.compound.get(_DETAILED),
            self.header.get(_BRIEF),
            self.compound.get(_BRIEF),
        ):
            if result.exists:
                return result.node
        return None

    def brief_children(self) -> Optional[Node]:
        for result in (self.header.get(_BRIEF), self.compound.get(_BRIEF)):
            if result.exists:
                return result.node
        return None

    def details_markdown(self, plain: bool = False) -> str:
        return markdown_desc(self.details_children(), plain)

    def brief_markdown(self, plain: bool = False) -> str:
        return markdown_desc(self.brief_children(), plain).strip()

    def signature(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StructView(SymbolView):
    """Struct; the member layout is printed only for public structs."""

    @property
    def has_includes(self) -> bool:
        return self.compound.get("children.#(name=includes)").exists

    def members(self) -> List[Tuple[str, str, str]]:
        """``(type, name, brief)`` for each member variable."""
        members = []
        for member in self.compound.get("children.#(name=sectiondef).children.#(name=memberdef)#"):
            members.append((
                to_simple_text(member.get("children.#(name=type).children").node),
                member.get("children.#(name=name).children.0").as_string(),
                to_simple_text(member.get(BRIEF_PARA_PATH).node),
            ))
        return members

    def signature(self) -> str:
        sig = f"struct {self.name}"
        if self.record.show_full_layout:
            members = self.members()
            labels = [f"{member_type} {member_name};" for member_type, member_name, _ in members]
            width = max((len(label) for label in labels), default=0)
            lines = [sig + " {"]
            for label, (_, _, brief) in zip(labels, members):
                line = "    " + label.ljust(width)
                if brief:
                    line += " // " + brief
                lines.append(line)
            sig = "\n".join(lines) + "\n}"
        return sig + ";"


class EnumView(SymbolView):
    """Enum with aligned value names, initializers and brief comments."""

    def members(self) -> List[Tuple[str, str, str]]:
        """``(name, initializer, brief)`` for each enum value."""
        members = []
        for value in self.header.get("children.#(name=enumvalue)#"):
            members.append((
                value.get("children.#(name=name).children.0").as_string(),
                value.get("children.#(name=initializer).children.0").as_string(),
                to_simple_text(value.get(BRIEF_PARA_PATH).node),
            ))
        return members

    def signature(self) -> str:
        members = self.members()
        name_width = max((len(name) for name, _, _ in members), default=0)
        init_width = max((len(init) for _, init, _ in members), default=0)
        lines = [f"enum {self.name} {{"]
        for name, initializer, brief in members:
            if init_width:
                label = f"{name.ljust(name_width)} {initializer},{' ' * (init_width - len(initializer))}"
            else:
                label = f"{name},{' ' * (name_width - len(name))}"
            if brief:
                label += " // " + brief
            lines.append("    " + label.strip())
        lines.append("};")
        return "\n".join(lines)


class FunctionView(SymbolView):
    """Function prototype; ``(void)`` is printed as ``()``."""

    is_function = True

    def signature(self) -> str:
        return_type = to_simple_text(self.header.get("children.#(name=type).children").node)
        name = self.header.get("children.#(name=name).children.0").as_string()
        args = self.header.get("children.#(name=argsstring).children.0").as_string().strip()
        if args == "(void)":
            args = "()"
        sig = return_type
        if not sig.endswith("*"):
            sig += " "
        return sig + name.strip() + args + ";"


class GroupView(SymbolView):
    """Doxygen group; only its title and description are rendered."""

    @property
    def title(self) -> str:
        return to_simple_text(self.compound.get("children.#(name=title).children").node)

    def signature(self) -> str:
        return ""
