"""Lexical ordering of resolved definitions."""

from typing import Iterable, List

from doxygen_md.resolve.records import DefinitionRecord


def order_definitions(records: Iterable[DefinitionRecord]) -> List[DefinitionRecord]:
    """Sort records by source line, ascending.

    The sort is stable: records on the same line keep their resolution order,
    and records without a location (line 0) come first.
    """
    return sorted(records, key=lambda record: record.source_line)
