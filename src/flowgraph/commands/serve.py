"""
flowgraph.commands.serve - Serve the flow editor REST API.
"""

import argparse
import sys

from flowgraph.config import ConfigError, load_config
from flowgraph.graph.deserializer import load_flow_file
from flowgraph.graph.editor import EditorConfig, FlowEditor
from flowgraph.graph.model import FlowDataError


def build_editor(args: argparse.Namespace, config: dict) -> FlowEditor:
    """Create the editing session, pre-loaded from ``args.file`` if given.

    The initial load is not an undoable step.

    Raises:
        OSError: If the file cannot be read.
        FlowDataError: If the file is not a valid flow.
    """
    editor = FlowEditor(config=EditorConfig.from_dict(config))
    if getattr(args, "file", None):
        nodes, edges = load_flow_file(args.file)
        editor.replace_graph(nodes, edges)
        editor.history.clear()
    return editor


def run(args: argparse.Namespace) -> int:
    """
    Run the serve command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        editor = build_editor(args, config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return 1
    except FlowDataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    from flowgraph.server import create_app

    server_config = config.get("server", {})
    host = args.host or server_config.get("host", "127.0.0.1")
    port = args.port or int(server_config.get("port", 5001))

    app = create_app(editor, config)
    if not args.quiet:
        print(f"Serving flow editor API on http://{host}:{port}/api/graph")
    app.run(host=host, port=port, debug=False)
    return 0
