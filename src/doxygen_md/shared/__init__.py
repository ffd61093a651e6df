"""Shared configuration, errors, diagnostics, and logging.

This module provides the ambient pieces used by every pipeline stage:
configuration objects, the exception hierarchy, result metadata types, and
correlation-aware logging.
"""

from .config import (
    ConversionConfig,
    GeneratorConfig,
    OutputConfig,
    ResolverConfig,
)
from .errors import (
    ConfigError,
    ConfigValidationError,
    ConversionError,
    DoxygenMarkdownError,
    HeaderResolutionError,
    IndexBuildError,
    OutputError,
    PathSyntaxError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    new_correlation_id,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    RunMetrics,
    SkipReason,
)

__all__ = [
    "ConversionConfig",
    "GeneratorConfig",
    "OutputConfig",
    "ResolverConfig",
    "ConfigError",
    "ConfigValidationError",
    "ConversionError",
    "DoxygenMarkdownError",
    "HeaderResolutionError",
    "IndexBuildError",
    "OutputError",
    "PathSyntaxError",
    "CorrelationLogger",
    "get_logger",
    "new_correlation_id",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "RunMetrics",
    "SkipReason",
]
