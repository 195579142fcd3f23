"""
Command-line interface for Drakon.

Usage:
    drakon ./examples/order.drakon -o ./build/
    drakon ./examples/order.drakon -o ./build/ --format dot
    drakon ./examples/order.drakon -o ./build/ --format svg
    drakon ./examples/order.drakon --check
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from drakon import config
from drakon.backend.graphviz import GraphvizExporter
from drakon.backend.svg import SvgExporter
from drakon.core.ir import Diagram
from drakon.core.serialization import JsonSerializer
from drakon.layout.engine import LayoutResult
from drakon.pipeline import compile_diagram

FORMATS = ["json", "graphviz", "dot", "svg"]


def export_diagram(
    diagram: Diagram,
    layout: Optional[LayoutResult],
    output_path: Path,
    format: str
) -> Path:
    """Export a diagram to the specified format."""

    if format == "graphviz" or format == "dot":
        content = GraphvizExporter.to_dot(diagram, layout)
        ext = ".dot"
    elif format == "svg":
        content = SvgExporter.to_svg(diagram, layout)
        ext = ".svg"
    elif format == "json":
        content = JsonSerializer.to_json(diagram, layout)
        ext = ".json"
    else:
        raise ValueError(f"Unknown format: {format}. Use: json, graphviz, dot, svg")

    # Sanitize the diagram title for use as filename
    safe_name = diagram.title.lower().replace(" ", "_").replace("/", "_")
    safe_name = "".join(c for c in safe_name if c.isalnum() or c == "_") or "diagram"

    output_file = output_path / f"{safe_name}{ext}"
    output_file.write_text(content, encoding="utf-8")

    return output_file


def main(argv: List[str] = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="drakon",
        description="Compile DRAKON diagram sources and export them.",
        epilog="Example: drakon ./examples/order.drakon -o ./build/"
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Diagram source file"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("."),
        help="Output directory (default: current directory)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default=config.DEFAULT_FORMAT if config.DEFAULT_FORMAT in FORMATS else "json",
        help="Output format (default: json)"
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Report errors and counts without exporting"
    )

    parser.add_argument(
        "--no-layout",
        action="store_true",
        help="Skip layout; exports carry no positions"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any error was reported"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate input file
    if not args.input.exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1

    if not args.input.is_file():
        print(f"Error: Not a file: {args.input}", file=sys.stderr)
        return 1

    try:
        text = args.input.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1

    result = compile_diagram(text, layout=not args.no_layout)
    for message in result.errors:
        print(f"{args.input}: {message}", file=sys.stderr)

    if result.diagram is None:
        print(f"No diagram found in {args.input}", file=sys.stderr)
        return 1

    failed = args.strict and bool(result.errors)

    if args.check:
        diagram = result.diagram
        print(f"\"{diagram.title}\" ({len(diagram.nodes)} nodes, {len(diagram.edges)} edges, "
              f"{len(result.errors)} errors)")
        return 1 if failed else 0

    args.output.mkdir(parents=True, exist_ok=True)

    try:
        output_file = export_diagram(result.diagram, result.layout, args.output, args.format)
    except Exception as e:
        print(f"Error exporting {result.diagram.title}: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Exported '{result.diagram.title}' -> {output_file}")
    else:
        print(f"{output_file}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
