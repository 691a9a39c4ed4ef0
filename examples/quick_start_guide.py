#!/usr/bin/env python3
"""
Quick Start Guide for LRG report XML.

Builds a small LRG report, reorders a section, writes it out, reads it back
and runs a few path queries.
"""

import tempfile
from pathlib import Path

from lrg_report import ParserConfig, new_document, parse_file


def build_report(output_path: Path):
    """Assemble a report the way the annotation import scripts do."""
    document = new_document(output_path)
    lrg = document.add_node("lrg", {"schema_version": "1.9"})

    fixed = lrg.add_node("fixed_annotation")
    fixed.add_node("id").content = "LRG_1"
    fixed.add_node("hgnc_id").content = "2197"
    fixed.add_empty_node("sequence_source", {"type": "RefSeqGene"})

    transcript = fixed.add_node("transcript", {"name": "t1"})
    for exon_label, (start, end) in enumerate([(5001, 5284), (11101, 11254)], start=1):
        exon = transcript.add_node("exon", {"label": str(exon_label)})
        exon.add_empty_node("coordinates", {
            "coord_system": "LRG_1",
            "start": str(start),
            "end": str(end),
        })

    updatable = lrg.add_node("updatable_annotation")
    updatable.add_node("annotation_set", {"type": "lrg"})

    # Schema order puts hgnc_id before id
    fixed.find_node("hgnc_id").move_to(0)
    return document


def quick_start_example() -> None:
    """Quick start example showing basic usage."""
    print("QUICK START - LRG report XML")
    print("=" * 45)

    with tempfile.TemporaryDirectory() as tmp:
        output_path = Path(tmp) / "LRG_1.xml"

        print("\nStep 1: Building and writing a report")
        print("-" * 30)
        document = build_report(output_path)
        document.write()
        print(output_path.read_text())

        print("Step 2: Reading it back")
        print("-" * 30)
        result = parse_file(output_path, config=ParserConfig.default())
        print(f"Nodes: {result.node_count}, diagnostics: {len(result.diagnostics)}")

        print("\nStep 3: Path queries")
        print("-" * 30)
        tree = result.tree
        print("id:", tree.find_node("lrg/fixed_annotation/id").content)
        exon = tree.find_node("exon", {"label": "2"})
        print("exon 2 coordinates:", exon.find_node("coordinates").attributes)
        print("missing:", tree.find_node("lrg/fixed_annotation/exon"))


if __name__ == "__main__":
    quick_start_example()
