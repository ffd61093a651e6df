"""Markdown document assembly.

The document has two parts. The index lists enums, then functions grouped by
Doxygen group. The definitions part prints structs that have a header, then
opaque structs, then enums, then functions; each definition gets an anchor, a
heading, a C signature block and its description.
"""

import time
from typing import List, Optional, Sequence

from doxygen_md.query import DEFAULT_ENGINE, QueryEngine
from doxygen_md.render.symbols import EnumView, FunctionView, GroupView, StructView, SymbolView
from doxygen_md.resolve.records import DefinitionKind, DefinitionRecord
from doxygen_md.shared import get_logger

GROUP_REFID_PREFIX = "group__"
UNGROUPED_TITLE = "Functions"


class MarkdownRenderer:
    """Render ordered definition records as one Markdown document.

    Args:
        records: Definitions in display order (see
            :func:`~doxygen_md.resolve.ordering.order_definitions`)
        engine: Query engine used by the symbol views
        correlation_id: Optional run correlation ID for logging
    """

    def __init__(
        self,
        records: Sequence[DefinitionRecord],
        engine: Optional[QueryEngine] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.records = list(records)
        self.engine = engine or DEFAULT_ENGINE
        self.logger = get_logger(__name__, correlation_id, "renderer")

    def _of_kind(self, kind: DefinitionKind) -> List[DefinitionRecord]:
        return [record for record in self.records if record.kind is kind]

    def structs(self) -> List[StructView]:
        """Structs declared with an ``includes`` header."""
        views = [StructView(record, self.engine) for record in self._of_kind(DefinitionKind.STRUCT)]
        return [view for view in views if view.has_includes]

    def objects(self) -> List[StructView]:
        """Structs without an ``includes`` header (opaque objects)."""
        views = [StructView(record, self.engine) for record in self._of_kind(DefinitionKind.STRUCT)]
        return [view for view in views if not view.has_includes]

    def enums(self) -> List[EnumView]:
        return [EnumView(record, self.engine) for record in self._of_kind(DefinitionKind.ENUM)]

    def functions(self) -> List[FunctionView]:
        return [FunctionView(record, self.engine) for record in self._of_kind(DefinitionKind.FUNCTION)]

    def groups(self) -> List[GroupView]:
        return [GroupView(record, self.engine) for record in self._of_kind(DefinitionKind.GROUP)]

    @staticmethod
    def group_of(function: FunctionView, groups: Sequence[GroupView]) -> Optional[GroupView]:
        """The group whose refid is the longest prefix of the function's refid."""
        if not function.refid.startswith(GROUP_REFID_PREFIX):
            return None
        best: Optional[GroupView] = None
        for group in groups:
            if function.refid.startswith(group.refid) and (
                best is None or len(group.refid) > len(best.refid)
            ):
                best = group
        return best

    def render_index(self) -> str:
        parts: List[str] = []
        enums = self.enums()
        if enums:
            parts.append("## Enums\n\n")
            parts.extend(f"- [{enum.name}](#{enum.refid})\n" for enum in enums)
        parts.append("\n\n")

        groups = self.groups()
        current_group = ""
        in_section = 0
        for function in self.functions():
            group = self.group_of(function, groups)
            group_id = group.refid if group is not None else ""
            if group_id != current_group:
                if in_section:
                    parts.append("\n\n")
                if group is not None:
                    parts.append(f"<a name='{group.refid}'></a>\n")
                    parts.append(f"## {group.title}\n\n")
                    description = group.details_markdown()
                    if description:
                        parts.append(f"{description}\n\n")
                else:
                    parts.append(f"## {UNGROUPED_TITLE}\n\n")
                current_group = group_id
                in_section = 0
            parts.append(f"- [{function.name}()](#{function.refid})\n")
            in_section += 1
        parts.append("\n")
        return "".join(parts)

    @staticmethod
    def render_definition(view: SymbolView) -> str:
        suffix = "()" if view.is_function else ""
        return (
            f"<a name='{view.refid}'></a>\n"
            f"## {view.name}{suffix}\n"
            "```c\n"
            f"{view.signature()}\n"
            "```\n"
            f"{view.details_markdown()}\n"
        )

    def render_definitions(self) -> str:
        views: List[SymbolView] = []
        views.extend(self.structs())
        views.extend(self.objects())
        views.extend(self.enums())
        views.extend(self.functions())
        return "".join(self.render_definition(view) for view in views)

    def render(self) -> str:
        """Render the complete document: index, then definitions."""
        start_time = time.time()
        markdown = self.render_index() + self.render_definitions()
        self.logger.debug(
            "Rendered Markdown",
            extra={
                "definitions": len(self.records),
                "characters": len(markdown),
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return markdown


def render_markdown(records: Sequence[DefinitionRecord]) -> str:
    """Render ordered definition records with the default engine."""
    return MarkdownRenderer(records).render()
