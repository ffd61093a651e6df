"""Public generation API.

Key Components:
    generate_markdown: One-call conversion of a Doxygen XML directory
    DoxygenMarkdownGenerator: Configured pipeline with per-stage methods
    GenerationResult: Markdown, ordered definitions, metrics and diagnostics
"""

from .generator import DoxygenMarkdownGenerator, GenerationResult, generate_markdown

__all__ = [
    "DoxygenMarkdownGenerator",
    "GenerationResult",
    "generate_markdown",
]
