"""flowgraph.server - Flask REST API server for the flow editor.

Provides a thin REST wrapper over the handler functions, exposing one
editing session via HTTP endpoints for the browser canvas.
"""

from flowgraph.server.app import create_app

__all__ = ["create_app"]
