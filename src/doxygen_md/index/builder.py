"""Compound index construction.

Doxygen writes one XML file per compound (``index.xml``, ``neco_8h.xml``,
``structfoo.xml``, ...). The builder converts each file and merges them into
a single object keyed by the file's logical name, so that every later lookup
is an absolute ``refid`` key on one root rather than a search across files.
Files are merged in sorted filename order, which becomes the key order of the
merged document.
"""

import json
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from doxygen_md.shared import (
    ConversionConfig,
    IndexBuildError,
    RunMetrics,
    get_logger,
)
from doxygen_md.tree import Node, XMLTreeConverter, make_object

PathType = Union[str, Path]


class CompoundIndexBuilder:
    """Merge a directory of Doxygen compound files into one keyed document.

    Args:
        config: Conversion settings (file suffix, lxml limits)
        correlation_id: Optional run correlation ID for logging
        json_indent: Indentation of the written index artifact
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        correlation_id: Optional[str] = None,
        json_indent: int = 2,
    ) -> None:
        self.config = config or ConversionConfig()
        self.converter = XMLTreeConverter(self.config, correlation_id)
        self.json_indent = json_indent
        self.logger = get_logger(__name__, correlation_id, "index_builder")

    def discover(self, xml_dir: PathType) -> List[Path]:
        """List compound files in ``xml_dir`` in sorted filename order.

        Raises:
            IndexBuildError: If the directory cannot be read
        """
        directory = Path(xml_dir)
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            raise IndexBuildError(f"Cannot read compound directory ({e.strerror or e})", directory) from e
        suffix = self.config.file_suffix
        return [entry for entry in entries if entry.name.endswith(suffix) and entry.is_file()]

    def compound_name(self, path: Path) -> str:
        """Logical compound name: the filename without the compound suffix."""
        return path.name[: -len(self.config.file_suffix)]

    def convert_file(self, path: PathType) -> Tuple[Node, int]:
        """Convert one compound file.

        Returns:
            The converted tree and the number of bytes read

        Raises:
            IndexBuildError: If the file cannot be read
            ConversionError: If the file is not well-formed XML
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise IndexBuildError(f"Cannot read compound file ({e.strerror or e})", path) from e
        return self.converter.convert(data, source=str(path)), len(data)

    def build(self, xml_dir: PathType, metrics: Optional[RunMetrics] = None) -> Node:
        """Convert every compound file in ``xml_dir`` and merge the results.

        One malformed file aborts the whole build.

        Raises:
            IndexBuildError: If the directory or a file cannot be read
            ConversionError: If a file is not well-formed XML
        """
        start_time = time.time()
        files = self.discover(xml_dir)
        if not files:
            self.logger.warning("No compound files found", extra={"xml_dir": str(xml_dir)})

        compounds = []
        total_bytes = 0
        for path in files:
            tree, size = self.convert_file(path)
            compounds.append((self.compound_name(path), tree))
            total_bytes += size

        if metrics is not None:
            metrics.files_converted += len(compounds)
            metrics.bytes_read += total_bytes

        self.logger.info(
            "Built compound index",
            extra={
                "xml_dir": str(xml_dir),
                "files": len(compounds),
                "bytes": total_bytes,
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return make_object(compounds)

    def write(self, document: Node, output_path: PathType) -> Path:
        """Write the merged document as pretty-printed JSON.

        Raises:
            IndexBuildError: If the artifact cannot be written
        """
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(document.to_json(indent=self.json_indent) + "\n", encoding="utf-8")
        except OSError as e:
            raise IndexBuildError(f"Cannot write index artifact ({e.strerror or e})", path) from e
        self.logger.debug("Wrote index artifact", extra={"path": str(path)})
        return path

    def load(self, index_path: PathType) -> Node:
        """Re-read a written index artifact as the canonical query root.

        Raises:
            IndexBuildError: If the artifact cannot be read or is not valid JSON
        """
        path = Path(index_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise IndexBuildError(f"Cannot read index artifact ({e.strerror or e})", path) from e
        try:
            document = Node.from_json(text)
        except json.JSONDecodeError as e:
            raise IndexBuildError(f"Index artifact is not valid JSON ({e.msg})", path) from e
        if not document.is_object:
            raise IndexBuildError("Index artifact is not a JSON object", path)
        return document


def build_compound_index(
    xml_dir: PathType,
    output_path: Optional[PathType] = None,
    config: Optional[ConversionConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Build the merged compound document for ``xml_dir``.

    With ``output_path`` the document is written pretty-printed and the
    returned root is the re-parsed artifact.

    Example:
        >>> root = build_compound_index("docs/xml", "index.json")
        >>> root.field("index").field("name").as_string()
        'doxygenindex'
    """
    builder = CompoundIndexBuilder(config, correlation_id)
    document = builder.build(xml_dir)
    if output_path is None:
        return document
    return builder.load(builder.write(document, output_path))
