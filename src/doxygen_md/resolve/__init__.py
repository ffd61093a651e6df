"""Symbol resolution and ordering.

Key Components:
    SymbolResolver: Finds the public header, collects refids and resolves them in parallel
    DefinitionRecord: One documentable symbol with its raw Doxygen definition
    order_definitions: Stable sort by source line
    write_definitions, load_definitions: The definitions JSON artifact
"""

from .ordering import order_definitions
from .records import (
    DefinitionKind,
    DefinitionRecord,
    load_definitions,
    write_definitions,
)
from .resolver import SymbolResolver, resolve_definitions

__all__ = [
    "order_definitions",
    "DefinitionKind",
    "DefinitionRecord",
    "load_definitions",
    "write_definitions",
    "SymbolResolver",
    "resolve_definitions",
]
