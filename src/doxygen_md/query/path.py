"""Path expression parsing.

A path is one or more *stages* separated by ``|``; each stage is a sequence
of *segments* separated by ``.``. Segments come from a closed set:

=================  ===================  =========================================
Syntax             Kind                 Meaning
=================  ===================  =========================================
``name``           ``FIELD``            named field of an object
``3``              ``INDEX``            array element (or an object field "3")
``#(cond)``        ``FILTER_FIRST``     first array element matching ``cond``
``#(cond)#``       ``FILTER_ALL``       every matching element; the rest of the
                                        stage is mapped over each match
``#`` + more       ``PROJECT``          map the rest of the stage over elements
``#`` (last)       ``COUNT``            number of array elements
``@name[:arg]``    ``TRANSFORM``        named transform; ``arg`` runs to the
                                        end of the stage
=================  ===================  =========================================

Conditions take the form ``subpath``, ``subpath OP value`` with ``OP`` one of
``=``, ``==``, ``!=``, ``%`` (wildcard match), ``!%``. Values may be
double-quoted with JSON escapes; an unquoted ``=`` value containing ``*`` or
``?`` is a wildcard existence test. A backslash escapes ``.``, ``|``, ``#``,
``@`` and itself inside field names.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import List, Optional, Tuple

from doxygen_md.shared import PathSyntaxError

_WILDCARD_CHARS = ("*", "?")


class SegmentKind(Enum):
    """Closed set of path segment kinds."""

    FIELD = auto()
    INDEX = auto()
    FILTER_FIRST = auto()
    FILTER_ALL = auto()
    PROJECT = auto()
    COUNT = auto()
    TRANSFORM = auto()


class Operator(Enum):
    """Comparison operators available inside filter conditions."""

    EXISTS = ""
    EQ = "="
    NE = "!="
    MATCH = "%"
    NOT_MATCH = "!%"


@dataclass(frozen=True)
class Condition:
    """Filter condition evaluated against each array element."""

    path: "Path"
    operator: Operator = Operator.EXISTS
    value: str = ""

    @property
    def pattern(self) -> Optional["re.Pattern[str]"]:
        if self.operator in (Operator.MATCH, Operator.NOT_MATCH):
            return compile_wildcard(self.value)
        return None


@dataclass(frozen=True)
class Segment:
    """One parsed path segment.

    ``name`` holds the field name, index text, or transform name; ``argument``
    holds a transform argument; ``condition`` is set for filters.
    """

    kind: SegmentKind
    name: str = ""
    argument: Optional[str] = None
    condition: Optional[Condition] = None

    @property
    def position(self) -> int:
        return int(self.name) if self.kind is SegmentKind.INDEX else -1


Stage = Tuple[Segment, ...]


@dataclass(frozen=True)
class Path:
    """Compiled path: the original text and its stages."""

    text: str
    stages: Tuple[Stage, ...]


@lru_cache(maxsize=256)
def compile_wildcard(pattern: str) -> "re.Pattern[str]":
    """Compile a ``*``/``?`` wildcard into a regular expression for ``fullmatch``."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def escape_component(name: str) -> str:
    """Escape a literal field name (for example a refid) for use in a path."""
    return re.sub(r"([\\.|#@])", r"\\\1", name)


def parse_path(text: str) -> Path:
    """Parse a path expression.

    Raises:
        PathSyntaxError: If the expression is empty or malformed
    """
    if not text:
        raise PathSyntaxError("empty path", text)
    stages = tuple(
        _parse_stage(text, stage_text, offset)
        for stage_text, offset in _split_top_level(text, 0, len(text), "|")
    )
    return Path(text, stages)


# ---------------- Internal helpers ---------------- #


def _split_top_level(text: str, start: int, end: int, separator: str) -> List[Tuple[str, int]]:
    """Split ``text[start:end]`` on ``separator`` outside parentheses and quotes.

    A transform argument swallows separators up to the end of its stage, so
    ``.`` never splits inside ``@name:arg`` while ``@name.0`` still does.
    """
    pieces: List[Tuple[str, int]] = []
    depth = 0
    in_quote = False
    in_transform = False
    in_argument = False
    piece_start = start
    index = start
    while index < end:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if in_quote:
            if char == '"':
                in_quote = False
        elif char == '"' and depth > 0:
            in_quote = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise PathSyntaxError("unbalanced ')'", text, index)
        elif char == "@" and depth == 0 and index == piece_start and separator == ".":
            in_transform = True
        elif char == ":" and depth == 0 and in_transform:
            in_argument = True
        elif char == separator and depth == 0 and not in_argument:
            pieces.append((text[piece_start:index], piece_start))
            piece_start = index + 1
            in_transform = False
        index += 1
    if depth != 0:
        raise PathSyntaxError("unbalanced '('", text, start)
    if in_quote:
        raise PathSyntaxError("unterminated string", text, start)
    pieces.append((text[piece_start:end], piece_start))
    return pieces


def _parse_stage(text: str, stage_text: str, offset: int) -> Stage:
    if not stage_text:
        raise PathSyntaxError("empty stage", text, offset)
    tokens = _split_top_level(stage_text, 0, len(stage_text), ".")
    segments: List[Segment] = []
    for position, (token, token_offset) in enumerate(tokens):
        is_last = position == len(tokens) - 1
        segments.append(_parse_segment(text, token, offset + token_offset, is_last))
    return tuple(segments)


def _parse_segment(text: str, token: str, offset: int, is_last: bool) -> Segment:
    if not token:
        raise PathSyntaxError("empty segment", text, offset)
    if token.startswith("@"):
        name, _, argument = token[1:].partition(":")
        if not name:
            raise PathSyntaxError("missing transform name", text, offset)
        return Segment(SegmentKind.TRANSFORM, name, argument if ":" in token else None)
    if token == "#":
        return Segment(SegmentKind.COUNT if is_last else SegmentKind.PROJECT)
    if token.startswith("#("):
        if token.endswith(")#"):
            body, kind = token[2:-2], SegmentKind.FILTER_ALL
        elif token.endswith(")"):
            body, kind = token[2:-1], SegmentKind.FILTER_FIRST
        else:
            raise PathSyntaxError("filter must end with ')' or ')#'", text, offset)
        return Segment(kind, condition=_parse_condition(text, body, offset + 2))
    if token.isdigit():
        return Segment(SegmentKind.INDEX, token)
    return Segment(SegmentKind.FIELD, _unescape(token))


_OPERATORS = (
    ("!=", Operator.NE),
    ("!%", Operator.NOT_MATCH),
    ("==", Operator.EQ),
    ("=", Operator.EQ),
    ("%", Operator.MATCH),
)


def _parse_condition(text: str, body: str, offset: int) -> Condition:
    depth = 0
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\":
            index += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0:
            for symbol, operator in _OPERATORS:
                if body.startswith(symbol, index):
                    return _build_condition(
                        text, body[:index], operator, body[index + len(symbol):], offset
                    )
        index += 1
    return Condition(_parse_subpath(text, body, offset))


def _build_condition(
    text: str, left: str, operator: Operator, right: str, offset: int
) -> Condition:
    left = left.strip()
    right = right.strip()
    if right.startswith('"'):
        try:
            value = json.loads(right)
        except json.JSONDecodeError as e:
            raise PathSyntaxError(f"bad quoted value: {e.msg}", text, offset) from e
        if not isinstance(value, str):
            raise PathSyntaxError("quoted value must be a string", text, offset)
    else:
        value = right
        if operator is Operator.EQ and any(char in value for char in _WILDCARD_CHARS):
            operator = Operator.MATCH
    return Condition(_parse_subpath(text, left, offset), operator, value)


def _parse_subpath(text: str, subpath: str, offset: int) -> Path:
    if not subpath:
        raise PathSyntaxError("filter condition needs a field path", text, offset)
    stages = tuple(
        _parse_stage(text, stage_text, offset + stage_offset)
        for stage_text, stage_offset in _split_top_level(subpath, 0, len(subpath), "|")
    )
    return Path(subpath, stages)


def _unescape(token: str) -> str:
    return re.sub(r"\\(.)", r"\1", token)


def quote_value(value: str) -> str:
    """Quote a literal filter value (for example a refid or symbol name)."""
    return json.dumps(value, ensure_ascii=False)
