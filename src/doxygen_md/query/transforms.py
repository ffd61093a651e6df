"""Named transforms applied by ``@name`` path segments.

Transforms are plain table entries handed to a
:class:`~doxygen_md.query.engine.QueryEngine` when it is built. There is no
process-wide registry: an engine only knows the transforms it was given.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Mapping, Optional, Set

from doxygen_md.tree.model import Node, make_array

if TYPE_CHECKING:
    from doxygen_md.query.engine import QueryEngine

TransformFunc = Callable[["QueryEngine", Node, Optional[str]], Optional[Node]]


@dataclass(frozen=True)
class Transform:
    """A named transform.

    ``apply(engine, node, argument)`` returns the transformed node, or None
    for "not found". ``pretty_output`` marks transforms whose result should be
    serialized with indentation; it never changes the node itself.
    """

    name: str
    apply: TransformFunc
    pretty_output: bool = False


def _this(engine: "QueryEngine", node: Node, argument: Optional[str]) -> Optional[Node]:
    return node


def _flatten(engine: "QueryEngine", node: Node, argument: Optional[str]) -> Optional[Node]:
    if not node.is_array:
        return node
    items: List[Node] = []
    for element in node.elements:
        if element.is_array:
            items.extend(element.elements)
        else:
            items.append(element)
    return make_array(items)


def _dedup(engine: "QueryEngine", node: Node, argument: Optional[str]) -> Optional[Node]:
    # Keyed on the canonical string form, so "1" and 1 collapse into one entry.
    if not node.is_array:
        return None
    seen: Set[str] = set()
    items: List[Node] = []
    for element in node.elements:
        key = element.as_string()
        if key not in seen:
            seen.add(key)
            items.append(element)
    return make_array(items)


def _pretty(engine: "QueryEngine", node: Node, argument: Optional[str]) -> Optional[Node]:
    return node


def _dig(engine: "QueryEngine", node: Node, argument: Optional[str]) -> Optional[Node]:
    if not argument:
        return None
    return engine.dig(node, argument)


STANDARD_TRANSFORMS: Mapping[str, Transform] = {
    transform.name: transform
    for transform in (
        Transform("this", _this),
        Transform("flatten", _flatten),
        Transform("dedup", _dedup),
        Transform("pretty", _pretty, pretty_output=True),
        Transform("dig", _dig),
    )
}


def transform_table(
    extra: Iterable[Transform] = (),
    base: Mapping[str, Transform] = STANDARD_TRANSFORMS,
) -> Dict[str, Transform]:
    """Return a new table holding ``base`` plus ``extra`` (``extra`` wins on name clashes)."""
    table = dict(base)
    for transform in extra:
        table[transform.name] = transform
    return table
