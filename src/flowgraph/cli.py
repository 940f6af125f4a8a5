"""
flowgraph.cli - Command-line interface.

Main entry point for the flowgraph CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from flowgraph import __version__
from flowgraph.commands import config_cmd, serve, validate


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="flowgraph",
        description="Flow graph authoring and validation tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flowgraph validate flow.json        # Run the save-time checks on a flow
  flowgraph validate flow.json -j     # Output JSON for tooling
  flowgraph serve flow.json           # Edit a flow through the REST API
  flowgraph serve --port 8080         # Start with an empty flow

Configuration:
  flowgraph config path               # Show config file location
  flowgraph config show               # View all settings

For detailed command help: flowgraph <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"flowgraph {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a flow file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  Flow saved successfully
  1  Flow failed a structural check
  2  File could not be read or is not a valid flow document
""",
    )
    validate_parser.add_argument(
        "file",
        type=Path,
        help="Flow JSON file ({nodes, edges})",
    )
    validate_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output result as JSON",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the flow editor REST API",
    )
    serve_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="Flow JSON file to load at startup",
    )
    serve_parser.add_argument(
        "--host",
        help="Bind address (default from [server] config)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Port (default from [server] config)",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_parser.add_argument(
        "config_action",
        choices=["show", "path"],
        nargs="?",
        default="show",
        help="show: print effective settings; path: print config file location",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        # Dispatch to command handlers
        if args.command == "validate":
            return validate.run(args)
        elif args.command == "serve":
            return serve.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
