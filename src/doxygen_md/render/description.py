"""Doxygen description markup to Markdown.

Doxygen descriptions are trees of inline and block elements (``para``,
``ref``, ``parameterlist``, ``simplesect``, ...) interleaved with text runs.
:func:`markdown_desc` renders them as Markdown; in plain mode every markup
wrapper and link target is dropped and only the text remains.
"""

from typing import Iterator, List, Optional

from doxygen_md.query import get
from doxygen_md.tree import Node

BRIEF_PARA_PATH = "children.#(name=briefdescription).children.#(name=para).children"

_PARAMETER_ITEMS = "children.#(name=parameteritem)#"
_PARAMETER_NAMES = "children.#(name=parameternamelist).children.#(name=parametername).children"
_PARAMETER_DESCRIPTION = "children.#(name=parameterdescription).children"

_WRAPPERS = {
    "computeroutput": ("`", "`"),
    "emphasis": ("*", "*"),
    "bold": ("**", "**"),
    "programlisting": ("```c\n", "```\n"),
}


def _items(node: Optional[Node]) -> Iterator[Node]:
    if node is None:
        return
    if node.is_array:
        yield from node.elements
    else:
        yield node


def to_simple_text(node: Optional[Node]) -> str:
    """Concatenate every text run under ``node``, ignoring markup."""
    parts: List[str] = []
    for item in _items(node):
        if item.is_string:
            parts.append(item.value)
        else:
            parts.append(to_simple_text(item.field("children")))
    return "".join(parts)


def _wrap(children: Optional[Node], start: str, end: str, plain: bool) -> str:
    if plain:
        return markdown_desc(children, plain)
    return start + markdown_desc(children, plain) + end


def _link(item: Node, target_attr: str, prefix: str, plain: bool) -> str:
    target = get(item, f"attrs.{target_attr}").as_string()
    text = get(item, "children.0").as_string()
    if not plain and target and text:
        return f"[{text}]({prefix}{target})"
    return text


def _parameter_list(item: Node, plain: bool) -> str:
    lines = ["\n\n**Parameters**\n\n"]
    for parameter in get(item, _PARAMETER_ITEMS):
        name = markdown_desc(parameter.get(_PARAMETER_NAMES).node, plain).strip()
        description = markdown_desc(parameter.get(_PARAMETER_DESCRIPTION).node, plain).strip()
        lines.append(f"- **{name}**: {description}\n")
    lines.append("\n")
    return "".join(lines)


def _section_title(kind: str) -> str:
    if not kind:
        return kind
    if kind == "see":
        kind = "See also"
    return kind[0].upper() + kind[1:]


def markdown_desc(node: Optional[Node], plain: bool = False) -> str:
    """Render a description element list as Markdown.

    Args:
        node: Array of description children (or a single node)
        plain: Drop Markdown markup and link targets, keeping only text

    Consecutive ``simplesect`` elements of the same kind share one heading.
    Unknown elements render their children.
    """
    parts: List[str] = []
    last_section = ""
    for item in _items(node):
        if not item.is_object:
            parts.append(item.as_string())
            continue

        name = get(item, "name").as_string()
        children = item.field("children")
        if name == "para":
            parts.append(markdown_desc(children, plain))
            parts.append("\n\n")
        elif name == "parameterlist":
            parts.append(_parameter_list(item, plain))
        elif name == "simplesect":
            section = _section_title(get(item, "attrs.kind").as_string())
            if section != last_section:
                parts.append(f"\n\n**{section}**\n\n")
            last_section = section
            parts.append(f"- {markdown_desc(children, plain).strip()}\n")
        elif name == "ref":
            parts.append(_link(item, "refid", "#", plain))
        elif name == "ulink":
            parts.append(_link(item, "url", "", plain))
        elif name in _WRAPPERS:
            start, end = _WRAPPERS[name]
            parts.append(_wrap(children, start, end, plain))
        elif name == "codeline":
            parts.append(markdown_desc(children, True) + "\n")
        elif name == "sp":
            parts.append(" ")
        else:
            parts.append(markdown_desc(children, plain))
    return "".join(parts)
