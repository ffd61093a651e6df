"""Symbol resolution over the merged compound document.

The resolver finds the project's public header in the compound index, gathers
every refid reachable from it (plus every group), and resolves each refid to a
:class:`~doxygen_md.resolve.records.DefinitionRecord` on a thread pool. Refids
that name nothing documentable, name a file, or fall outside the configured
namespace are dropped and counted, never raised.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

import psutil

from doxygen_md.query import QueryEngine, QueryResult, quote_value
from doxygen_md.resolve.records import DefinitionKind, DefinitionRecord
from doxygen_md.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    HeaderResolutionError,
    ResolverConfig,
    RunMetrics,
    SkipReason,
    get_logger,
)
from doxygen_md.tree import EMPTY_ARRAY, Node, make_array

FILE_COMPOUNDS_PATH = "index.children.#(name=compound)#|#(attrs.kind=file)#"
GROUP_REFIDS_PATH = "index.children.#(name=compound)#|#(attrs.kind=group)#|#.attrs.refid"
INNERCLASS_PATH = "children.#(name=compounddef)#|#.children.#(name=innerclass)#|@flatten"
MEMBERDEFS_PATH = "@dig:#(name=memberdef)#|@flatten"

ResolveOutcome = Tuple[Optional[DefinitionRecord], Optional[SkipReason]]


class SymbolResolver:
    """Resolve the documentable symbols of one namespace.

    Args:
        document: Merged compound document (see :mod:`doxygen_md.index`)
        config: Namespace, header selection and worker settings
        engine: Query engine; a standard one is built when omitted
        correlation_id: Optional run correlation ID for logging and diagnostics
        metrics: Metrics object to update; a fresh one is created when omitted

    Example:
        >>> resolver = SymbolResolver(root, ResolverConfig(namespace="neco_"))
        >>> [record.name for record in resolver.resolve()][:2]
        ['neco_start', 'neco_sleep']
    """

    def __init__(
        self,
        document: Node,
        config: Optional[ResolverConfig] = None,
        engine: Optional[QueryEngine] = None,
        correlation_id: Optional[str] = None,
        metrics: Optional[RunMetrics] = None,
    ) -> None:
        self.document = document
        self.config = config or ResolverConfig()
        self.engine = engine or QueryEngine(correlation_id=correlation_id)
        self.correlation_id = correlation_id
        self.metrics = metrics or RunMetrics()
        self.diagnostics: List[DiagnosticEntry] = []
        self.public_types: Dict[str, str] = {}
        self.logger = get_logger(__name__, correlation_id, "resolver")
        self._member_defs: Optional[Node] = None

    # ---------------- Header discovery ---------------- #

    def find_public_header(self) -> Optional[Node]:
        """Return the index entry of the project's public header.

        The header is a file compound whose first child is its ``name`` and
        whose name ends in the configured header suffix (or equals
        ``header_name`` when one is configured).

        Raises:
            HeaderResolutionError: If no header, or more than one, qualifies
                while ``require_unique_header`` is set
        """
        files = self.engine.get(self.document, FILE_COMPOUNDS_PATH)
        named = files.get("#(children.0.name=name)#")
        if self.config.header_name is not None:
            candidates = named.get(f"#(children.0.children.0={quote_value(self.config.header_name)})#")
        else:
            pattern = quote_value(f"*{self.config.header_suffix}")
            candidates = named.get(f"#(children.0.children.0%{pattern})#")

        headers = candidates.array()
        names = [self.engine.get(header, "children.0.children.0").as_string() for header in headers]
        if len(headers) == 1:
            self.logger.debug("Found public header", extra={"header": names[0]})
            return headers[0]

        if not headers:
            message = "No public header compound found in the index"
            if self.config.require_unique_header:
                raise HeaderResolutionError(message)
            self._warn(message + "; resolving groups only", {"header_suffix": self.config.header_suffix})
            return None

        message = "Several public header compounds qualify"
        if self.config.require_unique_header:
            raise HeaderResolutionError(message + "; set header_name to choose one", names)
        self._warn(f"{message}; using {names[0]}", {"candidates": names})
        return headers[0]

    def header_details(self, header: Optional[Node]) -> Optional[Node]:
        """Look up the header's own compound file by its refid."""
        if header is None:
            return None
        refid = self.engine.get(header, "attrs.refid").as_string()
        return self.document.field(refid) if refid else None

    def collect_public_types(self, details: Optional[Node]) -> Dict[str, str]:
        """Map each struct declared in the header to its protection level."""
        public_types: Dict[str, str] = {}
        if details is None:
            return public_types
        for innerclass in self.engine.get(details, INNERCLASS_PATH):
            name = innerclass.get("children.0").as_string()
            if name and name not in public_types:
                public_types[name] = innerclass.get("attrs.prot").as_string()
        return public_types

    def collect_refids(self, header: Optional[Node], details: Optional[Node]) -> List[str]:
        """Gather refids from the header entry, its details and every group, deduplicated."""
        sources = [
            self._dig_refids(header),
            self._dig_refids(details),
            self.engine.get(self.document, GROUP_REFIDS_PATH).node or EMPTY_ARRAY,
        ]
        refids = self.engine.get(make_array(sources), "@flatten|@dedup")
        return [refid.as_string() for refid in refids]

    def member_definitions(self) -> Node:
        """Every ``memberdef`` element anywhere in the document."""
        if self._member_defs is None:
            self._member_defs = self.engine.get(self.document, MEMBERDEFS_PATH).node or EMPTY_ARRAY
        return self._member_defs

    # ---------------- Resolution ---------------- #

    def resolve_refid(self, refid: str) -> ResolveOutcome:
        """Resolve one refid.

        Returns:
            ``(record, None)`` for a documentable symbol, or ``(None, reason)``
            when the refid is deliberately skipped
        """
        member = self.engine.get(self.member_definitions(), f"#(attrs.id={quote_value(refid)})")
        compound_file = self.document.field(refid)
        compound = (
            self.engine.get(compound_file, "children.#(name=compounddef)")
            if compound_file is not None
            else QueryResult(None)
        )

        if member.exists:
            name = member.get("children.#(name=name)|children.0").as_string()
            kind = member.get("attrs.kind").as_string()
        elif compound.exists:
            name = compound.get("children.#(name=compoundname)|children.0").as_string()
            kind = compound.get("attrs.kind").as_string()
        else:
            name = kind = ""

        if not name:
            return None, SkipReason.UNNAMED
        if kind == "file":
            return None, SkipReason.FILE
        if kind != DefinitionKind.GROUP.value and not name.startswith(self.config.namespace):
            return None, SkipReason.NAMESPACE
        try:
            definition_kind = DefinitionKind(kind)
        except ValueError:
            return None, SkipReason.UNSUPPORTED_KIND

        return (
            DefinitionRecord(
                name=name,
                kind=definition_kind,
                refid=refid,
                header_def=member.node,
                compound_def=None if member.exists else compound.node,
                show_full_layout=self.public_types.get(name) == "public",
            ),
            None,
        )

    def resolve(self) -> List[DefinitionRecord]:
        """Resolve every collected refid, returned in refid collection order.

        Blocks until all refids are resolved. Exceptions raised by a worker
        propagate to the caller.

        Raises:
            HeaderResolutionError: See :meth:`find_public_header`
        """
        start_time = time.time()
        header = self.find_public_header()
        details = self.header_details(header)
        self.public_types = self.collect_public_types(details)
        refids = self.collect_refids(header, details)
        self.member_definitions()

        workers = self._worker_count(len(refids))
        self.metrics.refids_collected = len(refids)
        self.metrics.workers = workers

        resolved: Dict[str, DefinitionRecord] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolver") as executor:
            future_to_refid = {executor.submit(self.resolve_refid, refid): refid for refid in refids}
            # Only this loop writes to ``resolved``.
            for future in as_completed(future_to_refid):
                record, reason = future.result()
                if record is None:
                    self.metrics.record_skip(reason)
                else:
                    resolved[record.refid] = record

        records = [resolved[refid] for refid in refids if refid in resolved]
        self.metrics.definitions_resolved = len(records)
        self.logger.info(
            "Resolved definitions",
            extra={
                "namespace": self.config.namespace,
                "refids": len(refids),
                "definitions": len(records),
                "skipped": dict(self.metrics.skipped),
                "workers": workers,
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return records

    # ---------------- Internal helpers ---------------- #

    def _dig_refids(self, node: Optional[Node]) -> Node:
        if node is None:
            return EMPTY_ARRAY
        return self.engine.get(node, "@dig:refid").node or EMPTY_ARRAY

    def _worker_count(self, jobs: int) -> int:
        workers = self.config.max_workers or psutil.cpu_count(logical=True) or 1
        return max(1, min(workers, jobs))

    def _warn(self, message: str, details: Dict[str, object]) -> None:
        self.logger.warning(message, extra=details)
        self.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=message,
                component="resolver",
                details=details,
                correlation_id=self.correlation_id,
            )
        )


def resolve_definitions(
    document: Node,
    namespace: str,
    config: Optional[ResolverConfig] = None,
) -> List[DefinitionRecord]:
    """Resolve the symbols of ``namespace`` in ``document``, in collection order."""
    if config is None:
        config = ResolverConfig(namespace=namespace)
    elif config.namespace != namespace:
        config = replace(config, namespace=namespace)
    return SymbolResolver(document, config).resolve()
