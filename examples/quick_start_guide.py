#!/usr/bin/env python3
"""
Quick Start Guide for Robust Datafile.

Walks through the three API levels: json-style functions, results with
diagnostics, and the configured processor.
"""

import sys
import tempfile
from pathlib import Path

import robust_datafile as rdf
from robust_datafile.shared import DiagnosticSeverity

SETTINGS = """\
# Window settings
window
{
\ttitle = Robust Datafile Demo
\tsize = 800, 600
\tscale = 1.5
}

recent = "notes, draft.txt", todo.txt
"""


def quick_start_example():
    """Level 1: read, query, modify and write a document."""

    print("🚀 QUICK START - Robust Datafile")
    print("=" * 45)

    # Step 1: Parse text
    print("\n📄 Step 1: Reading a Document")
    print("-" * 30)

    root = rdf.loads(SETTINGS)
    window = root["window"]

    print(f"✅ Title: {window['title'].get_text()}")
    print(f"📏 Size: {window['size'].get_integer(0)} x {window['size'].get_integer(1)}")
    print(f"🔍 Scale: {window['scale'].get_real()}")
    print(f"📋 Recent files: {list(root['recent'].values)}")

    # Step 2: Modify the tree
    print("\n🔧 Step 2: Modifying Values")
    print("-" * 30)

    window["size"].set_integer(1024, 0)
    window["size"].set_integer(768, 1)
    root.get_or_create_path("window.theme.name").set_text("dark")
    root.get_or_create_indexed_path("slot", 0).set_text("empty")

    print(f"✅ New size: {list(window['size'].values)}")
    print(f"🎨 Theme: {root.get_or_create_path('window.theme.name').get_text()}")

    # Step 3: Write it back
    print("\n💾 Step 3: Writing the Document")
    print("-" * 30)

    print(rdf.dumps(root))

    with tempfile.TemporaryDirectory() as directory:
        path = Path(directory) / "settings.txt"
        rdf.dump(root, path)
        reloaded = rdf.load(path)
        print(f"✅ Reloaded from {path.name}: {reloaded.to_dict() == root.to_dict()}")

    print("\n🎉 Quick start complete!")


def diagnostics_example():
    """Level 2: inspect what the reader skipped."""

    print("\n\n🔍 DIAGNOSTICS EXAMPLE")
    print("=" * 40)

    messy = "name =\nblock\n{\n\tvalue = 1\n}\n}\nlost = 2\n"
    result = rdf.parse(messy)

    print(f"Success: {result.success}")
    print(f"Has warnings: {result.has_warnings()}")
    for diagnostic in result.diagnostics:
        location = f"line {diagnostic.line_number}: " if diagnostic.line_number else ""
        print(f"  - {diagnostic.severity.name}: {location}{diagnostic.message}")

    warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
    print(f"Warnings: {len(warnings)}")
    print(f"Lines processed: {result.performance.lines_processed}")


def processor_example():
    """Level 3: a reusable processor with custom formatting."""

    print("\n\n⚙️  PROCESSOR EXAMPLE")
    print("=" * 35)

    config = rdf.DatafileConfig.space_indented(2).override(format__list_separator=";")
    processor = rdf.DatafileProcessor(config, correlation_id="quick-start")

    result = processor.read_text("colors = red; green, blue\nbox\n{\nwidth = 3\n}\n")
    print(processor.serialize(result.root))
    print(f"Statistics: {processor.statistics}")


def main():
    """Main function."""
    try:
        quick_start_example()
        diagnostics_example()
        processor_example()
    except rdf.DatafileError as e:
        print(f"\n❌ Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
