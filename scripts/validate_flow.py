"""Validate a flow graph JSON file and print its diagnostics."""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from flowform.engine.validator import check_publishable
from flowform.models.graph import FlowGraph
from flowform.utils.logging import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate a flow graph before publishing")
    parser.add_argument("path", help="JSON file with 'nodes' and 'edges'")
    args = parser.parse_args()

    setup_logging(log_level="WARNING", log_format="console")

    with open(args.path) as f:
        raw = json.load(f)

    try:
        graph = FlowGraph.model_validate(raw)
    except ValidationError as exc:
        print(f"Invalid graph file: {exc}")
        sys.exit(2)

    check = check_publishable(graph.nodes, graph.edges)
    for diagnostic in [*check.errors, *check.warnings]:
        where = f" [{diagnostic.node_id}]" if diagnostic.node_id else ""
        print(f"{diagnostic.severity.upper():8}{where} {diagnostic.message}")

    print(f"Nodes: {len(graph.nodes)}  Edges: {len(graph.edges)}")
    print("Publishable" if check.publishable else "Not publishable")
    sys.exit(0 if check.publishable else 1)


if __name__ == "__main__":
    main()
