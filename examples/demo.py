"""Compile the bundled diagrams and print a short summary of each.

Usage:
    python examples/demo.py
"""

from pathlib import Path

from drakon import compile_diagram
from drakon.backend.graphviz import GraphvizExporter
from drakon.core.serialization import JsonSerializer

EXAMPLES = Path(__file__).parent
BUILD = EXAMPLES.parent / "build"


def main():
    BUILD.mkdir(exist_ok=True)
    for source in sorted(EXAMPLES.glob("*.drakon")):
        result = compile_diagram(source.read_text(encoding="utf-8"))
        for message in result.errors:
            print(f"  {source.name}: {message}")
        diagram = result.diagram
        if diagram is None:
            continue

        print(f"{diagram.title}: {len(diagram.nodes)} nodes, {len(diagram.edges)} edges")
        for column in result.layout.columns:
            print(f"  column {column.index} at x={column.x:.0f}: {', '.join(column.nodes)}")

        (BUILD / f"{source.stem}.json").write_text(
            JsonSerializer.to_json(diagram, result.layout), encoding="utf-8"
        )
        (BUILD / f"{source.stem}.dot").write_text(
            GraphvizExporter.to_dot(diagram, result.layout), encoding="utf-8"
        )


if __name__ == "__main__":
    main()
