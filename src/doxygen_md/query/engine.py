"""Path query evaluation over tree nodes.

:class:`QueryEngine` interprets compiled :class:`~doxygen_md.query.path.Path`
expressions against :class:`~doxygen_md.tree.model.Node` trees. Evaluation
fails soft: a missing field, an out-of-range index, a filter applied to a
non-array, or an unknown transform yields a "not found" result instead of an
exception, so long query chains compose without guarding every step.

Example:
    >>> from doxygen_md.tree import Node
    >>> doc = Node.from_python({"items": [{"k": "x", "v": 1}, {"k": "y", "v": 2}]})
    >>> get(doc, "items.#(k=x)#.v").raw
    '[1]'
    >>> get(doc, "items.#(k=y).v").as_int()
    2
"""

from functools import lru_cache
from typing import Iterator, List, Mapping, Optional, Sequence, Union

from doxygen_md.query.path import Condition, Operator, Path, SegmentKind, Stage, parse_path
from doxygen_md.query.transforms import STANDARD_TRANSFORMS, Transform, transform_table
from doxygen_md.shared import PathSyntaxError, get_logger
from doxygen_md.tree.model import Node, make_array, make_number

PathLike = Union[str, Path]


@lru_cache(maxsize=1024)
def _compile(text: str) -> Path:
    return parse_path(text)


class QueryResult:
    """Outcome of evaluating a path against a node.

    ``node`` is None when nothing matched. ``pretty`` is set when a
    pretty-printing transform ran; it only affects :attr:`raw`.
    """

    __slots__ = ("node", "path", "pretty", "_engine")

    def __init__(
        self,
        node: Optional[Node],
        path: str = "",
        pretty: bool = False,
        engine: Optional["QueryEngine"] = None,
    ) -> None:
        self.node = node
        self.path = path
        self.pretty = pretty
        self._engine = engine

    @property
    def exists(self) -> bool:
        return self.node is not None

    @property
    def raw(self) -> str:
        """JSON text of the matched node; empty when nothing matched."""
        if self.node is None:
            return ""
        if self.pretty:
            return self.node.to_json(indent=2)
        return self.node.raw

    def as_string(self) -> str:
        return self.node.as_string() if self.node is not None else ""

    def as_int(self) -> int:
        return self.node.as_int() if self.node is not None else 0

    def as_bool(self) -> bool:
        return self.node.as_bool() if self.node is not None else False

    def array(self) -> List[Node]:
        """Elements of an array result; a scalar or object becomes a one-element list."""
        if self.node is None:
            return []
        if self.node.is_array:
            return list(self.node.elements)
        return [self.node]

    def __iter__(self) -> Iterator["QueryResult"]:
        for element in self.array():
            yield QueryResult(element, self.path, engine=self._engine)

    def get(self, path: PathLike) -> "QueryResult":
        """Evaluate ``path`` relative to this result."""
        text = path if isinstance(path, str) else path.text
        if self.node is None:
            return QueryResult(None, text, engine=self._engine)
        return (self._engine or DEFAULT_ENGINE).get(self.node, path)

    def __repr__(self) -> str:
        return f"QueryResult(path={self.path!r}, node={self.node!r})"


class QueryEngine:
    """Interpreter for path expressions.

    The engine holds nothing but its transform table and a logger, so one
    instance can serve any number of threads concurrently.

    Args:
        transforms: Name to :class:`Transform` table; defaults to
            :data:`~doxygen_md.query.transforms.STANDARD_TRANSFORMS`
        correlation_id: Optional run correlation ID for logging
    """

    def __init__(
        self,
        transforms: Optional[Mapping[str, Transform]] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.transforms = dict(STANDARD_TRANSFORMS if transforms is None else transforms)
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "query")

    def with_transforms(self, *extra: Transform) -> "QueryEngine":
        """Return a new engine whose table also holds ``extra``."""
        return QueryEngine(transform_table(extra, self.transforms), self.correlation_id)

    @staticmethod
    def compile(path: str) -> Path:
        """Compile a path expression, memoizing the result.

        Raises:
            PathSyntaxError: If the expression is malformed
        """
        return _compile(path)

    def get(self, node: Node, path: PathLike) -> QueryResult:
        """Evaluate ``path`` against ``node``.

        A path that does not compile behaves like a path that matches
        nothing; use :meth:`compile` to surface the syntax error instead.
        """
        if isinstance(path, str):
            try:
                compiled = _compile(path)
            except PathSyntaxError as e:
                self.logger.debug("Path did not compile", extra={"path": path, "error": str(e)})
                return QueryResult(None, path, engine=self)
        else:
            compiled = path
        evaluation = _Evaluation(self)
        found = evaluation.run(node, compiled)
        return QueryResult(found, compiled.text, evaluation.pretty, self)

    def dig(self, node: Node, subpath: PathLike) -> Optional[Node]:
        """Evaluate ``subpath`` at every node of the tree, depth-first in document order.

        Returns:
            Array of every result that exists, or None if ``subpath`` does not compile
        """
        if isinstance(subpath, str):
            try:
                compiled = _compile(subpath)
            except PathSyntaxError as e:
                self.logger.debug("Dig path did not compile", extra={"path": subpath, "error": str(e)})
                return None
        else:
            compiled = subpath

        found: List[Node] = []
        stack = [node]
        while stack:
            current = stack.pop()
            result = _Evaluation(self).run(current, compiled)
            if result is not None:
                found.append(result)
            if current.is_container:
                stack.extend(reversed(tuple(current.children_nodes())))
        return make_array(found)


class _Evaluation:
    """State for a single :meth:`QueryEngine.get` call."""

    __slots__ = ("engine", "pretty")

    def __init__(self, engine: QueryEngine) -> None:
        self.engine = engine
        self.pretty = False

    def run(self, node: Node, path: Path) -> Optional[Node]:
        current: Optional[Node] = node
        for stage in path.stages:
            current = self._run_segments(current, stage, 0)
            if current is None:
                return None
        return current

    def _run_segments(self, node: Node, segments: Stage, start: int) -> Optional[Node]:
        current: Optional[Node] = node
        for position in range(start, len(segments)):
            segment = segments[position]
            kind = segment.kind
            if kind is SegmentKind.FIELD:
                current = current.field(segment.name)
            elif kind is SegmentKind.INDEX:
                if current.is_array:
                    current = current.index(segment.position)
                else:
                    current = current.field(segment.name)
            elif kind is SegmentKind.FILTER_FIRST:
                current = next(
                    (item for item in current.elements if self._matches(item, segment.condition)),
                    None,
                )
            elif kind is SegmentKind.FILTER_ALL:
                if not current.is_array:
                    return None
                matches = [item for item in current.elements if self._matches(item, segment.condition)]
                return self._map_rest(matches, segments, position + 1)
            elif kind is SegmentKind.PROJECT:
                if not current.is_array:
                    return None
                return self._map_rest(current.elements, segments, position + 1)
            elif kind is SegmentKind.COUNT:
                if not current.is_array:
                    return None
                current = make_number(current.size)
            elif kind is SegmentKind.TRANSFORM:
                transform = self.engine.transforms.get(segment.name)
                if transform is None:
                    self.engine.logger.debug("Unknown transform", extra={"transform": segment.name})
                    return None
                current = transform.apply(self.engine, current, segment.argument)
                if transform.pretty_output:
                    self.pretty = True
            if current is None:
                return None
        return current

    def _map_rest(self, elements: Sequence[Node], segments: Stage, start: int) -> Node:
        if start >= len(segments):
            return make_array(elements)
        results = []
        for element in elements:
            result = self._run_segments(element, segments, start)
            if result is not None:
                results.append(result)
        return make_array(results)

    def _matches(self, element: Node, condition: Condition) -> bool:
        found = _Evaluation(self.engine).run(element, condition.path)
        if found is None:
            return False
        operator = condition.operator
        if operator is Operator.EXISTS:
            return True
        if operator is Operator.EQ:
            return found.as_string() == condition.value
        if operator is Operator.NE:
            return found.as_string() != condition.value
        matched = _wildcard_matches(found, condition)
        return matched if operator is Operator.MATCH else not matched


def _wildcard_matches(found: Node, condition: Condition) -> bool:
    pattern = condition.pattern
    if found.is_array:
        # One level only: any scalar element may satisfy the pattern.
        return any(
            pattern.fullmatch(item.as_string()) is not None
            for item in found.elements
            if not item.is_container
        )
    return pattern.fullmatch(found.as_string()) is not None


DEFAULT_ENGINE = QueryEngine()


def get(node: Node, path: PathLike) -> QueryResult:
    """Evaluate ``path`` against ``node`` with the standard transforms."""
    return DEFAULT_ENGINE.get(node, path)
