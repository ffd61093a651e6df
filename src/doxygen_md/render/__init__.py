"""Markdown rendering of resolved definitions.

Key Components:
    MarkdownRenderer: Index plus per-symbol reference sections
    markdown_desc, to_simple_text: Doxygen description markup to Markdown or plain text
    StructView, EnumView, FunctionView, GroupView: Signature builders per symbol kind
"""

from .description import markdown_desc, to_simple_text
from .markdown import MarkdownRenderer, render_markdown
from .symbols import EnumView, FunctionView, GroupView, StructView, SymbolView

__all__ = [
    "markdown_desc",
    "to_simple_text",
    "MarkdownRenderer",
    "render_markdown",
    "EnumView",
    "FunctionView",
    "GroupView",
    "StructView",
    "SymbolView",
]
