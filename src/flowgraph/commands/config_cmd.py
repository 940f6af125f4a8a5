"""
flowgraph.commands.config_cmd - Inspect configuration.
"""

import argparse
import json
import sys
from pathlib import Path

from flowgraph.config import ConfigError, find_config_file, load_config


def run(args: argparse.Namespace) -> int:
    """
    Run the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    if args.config_action == "path":
        path = args.config or find_config_file(Path.cwd())
        if path is None:
            print("No .flowgraph.toml found (using defaults)", file=sys.stderr)
            return 1
        print(path)
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(config, indent=2))
    return 0
