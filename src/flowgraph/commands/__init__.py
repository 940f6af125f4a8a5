"""
flowgraph.commands - CLI command implementations
"""

from flowgraph.commands import config_cmd, serve, validate

__all__ = [
    "config_cmd",
    "serve",
    "validate",
]
