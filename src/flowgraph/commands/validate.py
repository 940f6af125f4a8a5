"""
flowgraph.commands.validate - Validate a flow file.

Loads an exchange-format JSON file and runs the save-time checks.
"""

import argparse
import json
import sys

from flowgraph.graph.deserializer import load_flow_file
from flowgraph.graph.model import FlowDataError, FlowGraph
from flowgraph.validation import format_status, validate

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_BAD_INPUT = 2


def run(args: argparse.Namespace) -> int:
    """
    Run the validate command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 if the flow is valid, 1 on validation failure,
        2 if the file cannot be read or parsed)
    """
    try:
        nodes, edges = load_flow_file(args.file)
    except OSError as e:
        print(f"Error: Cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except FlowDataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    graph = FlowGraph.from_parts(nodes, edges)
    result = validate(graph)

    if args.json:
        payload = result.to_dict()
        payload["nodes"] = graph.node_count()
        payload["edges"] = graph.edge_count()
        print(json.dumps(payload, indent=2))
    elif not (args.quiet and result.ok):
        if not args.quiet:
            print(f"Validating {args.file}: {graph.node_count()} nodes, {graph.edge_count()} edges")
        print(format_status(result))

    return EXIT_OK if result.ok else EXIT_INVALID
