#!/usr/bin/env python3
"""
Quick Start Guide for doxygen-md.

Converts a Doxygen XML directory to Markdown three ways: in one call, stage
by stage, and by querying the merged compound index directly.

Usage:
    python examples/quick_start_guide.py path/to/xml [namespace]
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from doxygen_md import DoxygenMarkdownGenerator, GeneratorConfig, generate_markdown, get


def one_call(xml_dir: Path, namespace: str) -> None:
    """Level 1: everything in one call."""
    print("Step 1: generate_markdown()")
    print("-" * 30)

    config = GeneratorConfig.lenient(namespace).override(output__write_artifacts=False)
    result = generate_markdown(xml_dir, namespace, config)

    print(f"Definitions: {result.definition_count}")
    for entry in result.diagnostics:
        print(f"Warning: {entry.message}")
    print(result.markdown[:400])


def stage_by_stage(xml_dir: Path, namespace: str) -> None:
    """Level 2: index, resolve and render separately."""
    print("\nStep 2: stage by stage")
    print("-" * 30)

    config = GeneratorConfig.lenient(namespace).override(output__write_artifacts=False)
    generator = DoxygenMarkdownGenerator(config)
    document = generator.build_index(xml_dir)
    records = generator.resolve_definitions(document)

    for record in records:
        print(f"{record.source_line:>6}  {record.kind.value:<9} {record.name}")

    markdown = generator.render(records)
    print(f"Rendered {len(markdown)} characters")


def query_index(xml_dir: Path) -> None:
    """Level 3: path queries over the merged index."""
    print("\nStep 3: querying the index")
    print("-" * 30)

    document = DoxygenMarkdownGenerator(
        GeneratorConfig().override(output__write_artifacts=False)
    ).build_index(xml_dir)

    files = get(document, "index.children.#(name=compound)#|#(attrs.kind=file)#|#.children.0.children.0")
    groups = get(document, "index.children.#(name=compound)#|#(attrs.kind=group)#|#")
    print(f"File compounds: {[name.as_string() for name in files]}")
    print(f"Groups: {groups.as_int()}")


def main() -> int:
    if len(sys.argv) < 2:
        print(__doc__)
        return 1
    xml_dir = Path(sys.argv[1])
    namespace = sys.argv[2] if len(sys.argv) > 2 else ""

    one_call(xml_dir, namespace)
    stage_by_stage(xml_dir, namespace)
    query_index(xml_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
