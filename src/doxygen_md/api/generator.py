"""Generation API with progressive disclosure.

- Level 1: :func:`generate_markdown` converts a Doxygen XML directory in one call.
- Level 2: :class:`DoxygenMarkdownGenerator` exposes each pipeline stage
  (index, resolution, rendering) for callers that need the intermediate
  artifacts or want to reuse one configuration across runs.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from doxygen_md.index import CompoundIndexBuilder
from doxygen_md.query import QueryEngine
from doxygen_md.render import MarkdownRenderer
from doxygen_md.resolve import (
    DefinitionRecord,
    SymbolResolver,
    order_definitions,
    write_definitions,
)
from doxygen_md.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    GeneratorConfig,
    RunMetrics,
    get_logger,
    new_correlation_id,
)
from doxygen_md.tree import Node

PathType = Union[str, Path]


@dataclass
class GenerationResult:
    """Everything one generation run produced."""

    markdown: str
    definitions: List[DefinitionRecord]
    metrics: RunMetrics
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    index_path: Optional[Path] = None
    definitions_path: Optional[Path] = None
    correlation_id: Optional[str] = None

    @property
    def definition_count(self) -> int:
        return len(self.definitions)

    @property
    def has_warnings(self) -> bool:
        return any(entry.severity is DiagnosticSeverity.WARNING for entry in self.diagnostics)

    def summary(self) -> Dict[str, Any]:
        """Serializable run summary (no Markdown, no raw definitions)."""
        return {
            "correlation_id": self.correlation_id,
            "definitions": self.definition_count,
            "index_path": str(self.index_path) if self.index_path else None,
            "definitions_path": str(self.definitions_path) if self.definitions_path else None,
            "metrics": self.metrics.to_dict(),
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
        }


class DoxygenMarkdownGenerator:
    """Configured Doxygen-to-Markdown pipeline.

    Attributes:
        config: Complete generator configuration
        correlation_id: Correlation ID shared by every stage of every run

    Examples:
        One run with intermediate artifacts in a work directory:
        >>> config = GeneratorConfig.strict("neco_").override(output__work_dir="build")
        >>> result = DoxygenMarkdownGenerator(config).run("docs/xml")
        >>> result.index_path
        PosixPath('build/index.json')

        Stage by stage:
        >>> generator = DoxygenMarkdownGenerator(GeneratorConfig.lenient("neco_"))
        >>> document = generator.build_index("docs/xml")
        >>> records = generator.resolve_definitions(document)
        >>> markdown = generator.render(records)
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or GeneratorConfig()
        self.correlation_id = self.config.correlation_id or new_correlation_id()
        self.engine = QueryEngine(correlation_id=self.correlation_id)
        self.builder = CompoundIndexBuilder(
            self.config.conversion,
            self.correlation_id,
            json_indent=self.config.output.json_indent,
        )
        self.logger = get_logger(__name__, self.correlation_id, "generator")

    def build_index(self, xml_dir: PathType, metrics: Optional[RunMetrics] = None) -> Node:
        """Build the merged compound document.

        When artifacts are enabled the index is written to the work directory
        and the re-parsed artifact is returned as the query root.

        Raises:
            IndexBuildError: If the directory or the artifact cannot be read or written
            ConversionError: If a compound file is not well-formed XML
        """
        document = self.builder.build(xml_dir, metrics)
        if not self.config.output.write_artifacts:
            return document
        path = self.builder.write(document, self.config.output.index_path)
        return self.builder.load(path)

    def resolve_definitions(
        self,
        document: Node,
        metrics: Optional[RunMetrics] = None,
        diagnostics: Optional[List[DiagnosticEntry]] = None,
    ) -> List[DefinitionRecord]:
        """Resolve and order the namespace's definitions.

        Resolver warnings are appended to ``diagnostics`` when a list is given.

        Raises:
            HeaderResolutionError: If the public header is missing or ambiguous
                under a strict configuration
            OutputError: If the definitions artifact cannot be written
        """
        resolver = SymbolResolver(
            document,
            self.config.resolver,
            engine=self.engine,
            correlation_id=self.correlation_id,
            metrics=metrics,
        )
        records = order_definitions(resolver.resolve())
        if diagnostics is not None:
            diagnostics.extend(resolver.diagnostics)
        if self.config.output.write_artifacts:
            write_definitions(records, self.config.output.definitions_path, self.config.output.json_indent)
        return records

    def render(self, records: List[DefinitionRecord]) -> str:
        """Render ordered definitions as Markdown."""
        return MarkdownRenderer(records, self.engine, self.correlation_id).render()

    def run(self, xml_dir: PathType) -> GenerationResult:
        """Run the whole pipeline on ``xml_dir``.

        Raises:
            DoxygenMarkdownError: On any unrecoverable input, resolution or output failure
        """
        start_time = time.time()
        metrics = RunMetrics()
        diagnostics: List[DiagnosticEntry] = []

        self.logger.info(
            "Starting generation",
            extra={"xml_dir": str(xml_dir), "namespace": self.config.resolver.namespace},
        )
        document = self.build_index(xml_dir, metrics)
        records = self.resolve_definitions(document, metrics, diagnostics)
        markdown = self.render(records)

        metrics.processing_time_ms = (time.time() - start_time) * 1000
        metrics.sample_memory()
        output = self.config.output
        self.logger.info("Generation completed", extra=metrics.to_dict())
        return GenerationResult(
            markdown=markdown,
            definitions=records,
            metrics=metrics,
            diagnostics=diagnostics,
            index_path=output.index_path if output.write_artifacts else None,
            definitions_path=output.definitions_path if output.write_artifacts else None,
            correlation_id=self.correlation_id,
        )


def generate_markdown(
    xml_dir: PathType,
    namespace: str = "",
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """Convert a Doxygen XML directory to Markdown in one call.

    Args:
        xml_dir: Directory of Doxygen compound XML files
        namespace: Symbol name prefix to document (groups are always included)
        config: Optional configuration; its namespace is replaced by ``namespace``

    Returns:
        GenerationResult with the Markdown text, ordered definitions and metrics

    Examples:
        >>> result = generate_markdown("docs/xml", "neco_")
        >>> result.definition_count > 0
        True
    """
    config = (config or GeneratorConfig()).override(resolver__namespace=namespace)
    return DoxygenMarkdownGenerator(config).run(xml_dir)
