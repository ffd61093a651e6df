"""Doxygen XML to Markdown.

Converts a directory of Doxygen-generated XML into one Markdown reference
document: an index of enums and grouped functions followed by per-symbol
sections with C signatures and descriptions.

Progressive API Disclosure:
- Level 1: Simple function - generate_markdown()
- Level 2: Configured pipeline - DoxygenMarkdownGenerator class
- Level 3: Individual stages - build_compound_index(), SymbolResolver, MarkdownRenderer
"""

__version__ = "0.1.0"

# Progressive API disclosure - Level 1 and 2
from .api import DoxygenMarkdownGenerator, GenerationResult, generate_markdown

# Level 3: individual pipeline stages
from .index import CompoundIndexBuilder, build_compound_index
from .query import QueryEngine, QueryResult, get
from .render import MarkdownRenderer
from .resolve import DefinitionKind, DefinitionRecord, SymbolResolver, order_definitions

# Configuration and errors
from .shared import DoxygenMarkdownError, GeneratorConfig
from .tree import Node, convert_xml

__all__ = [
    "__version__",

    # Level 1: one-call conversion
    "generate_markdown",

    # Level 2: configured pipeline
    "DoxygenMarkdownGenerator",
    "GenerationResult",

    # Level 3: pipeline stages
    "CompoundIndexBuilder",
    "build_compound_index",
    "QueryEngine",
    "QueryResult",
    "get",
    "MarkdownRenderer",
    "DefinitionKind",
    "DefinitionRecord",
    "SymbolResolver",
    "order_definitions",
    "Node",
    "convert_xml",

    # Configuration and errors
    "DoxygenMarkdownError",
    "GeneratorConfig",
]
