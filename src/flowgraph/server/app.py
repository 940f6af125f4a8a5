"""flowgraph.server.app - Flask app factory and REST API routes.

This is a THIN REST wrapper: every route delegates to one function in
``flowgraph.server.handlers``. No graph logic is duplicated here.

Requests are handled one at a time against the editor, so no client
ever observes a graph mid-mutation.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from flask import Flask, jsonify, request
from flask_cors import CORS

from flowgraph.graph.editor import FlowEditor
from flowgraph.graph.model import FlowDataError
from flowgraph.server import handlers
from flowgraph.server.handlers import RequestError

logger = logging.getLogger(__name__)


def create_app(editor: FlowEditor, config: dict[str, Any] | None = None) -> Flask:
    """Create the Flask application with REST API routes.

    Args:
        editor: The editing session served by this app.
        config: flowgraph configuration dict.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    app.config["FLOWGRAPH"] = config or {}

    CORS(app)

    # Disable browser caching so the canvas always sees the live graph
    @app.after_request
    def _no_cache(response):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return response

    lock = threading.Lock()

    def _run(fn: Callable[..., dict[str, Any]], *args: Any, **kwargs: Any):
        """Run one handler under the editor lock, mapping bad input to 400."""
        try:
            with lock:
                return jsonify(fn(editor, *args, **kwargs))
        except FlowDataError as e:
            logger.info("Rejected import: %s", e.detail)
            return jsonify({"success": False, "error": str(e)}), 400
        except RequestError as e:
            return jsonify({"success": False, "error": str(e)}), 400

    def _body() -> dict[str, Any]:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise RequestError("Request body must be a JSON object")
        return data

    def _with_body(fn: Callable[[dict[str, Any]], Any]):
        try:
            data = _body()
        except RequestError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        return fn(data)

    # ─────────────────────────────────────────────────────────────────
    # Read-only endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/graph")
    def api_graph():
        """GET /api/graph - Graph, selection and undo/redo availability."""
        return _run(handlers.get_state)

    @app.route("/api/export")
    def api_export():
        """GET /api/export - Graph in exchange format."""
        return _run(handlers.export_flow)

    @app.route("/api/save", methods=["POST"])
    def api_save():
        """POST /api/save - Validate the flow and report the status message."""
        return _run(handlers.save)

    # ─────────────────────────────────────────────────────────────────
    # Node endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/nodes", methods=["POST"])
    def api_add_node():
        """POST /api/nodes - Add a node. Body: {kind, position?, text?}."""
        return _with_body(
            lambda d: _run(handlers.add_node, d.get("kind"), d.get("position"), d.get("text"))
        )

    @app.route("/api/nodes/<node_id>/text", methods=["PUT"])
    def api_update_text(node_id: str):
        """PUT /api/nodes/<id>/text - Replace node text. Body: {text}."""
        return _with_body(lambda d: _run(handlers.update_text, node_id, d.get("text")))

    @app.route("/api/nodes/<node_id>/duplicate", methods=["POST"])
    def api_duplicate(node_id: str):
        """POST /api/nodes/<id>/duplicate - Duplicate a node."""
        return _run(handlers.duplicate, node_id)

    @app.route("/api/nodes/<node_id>", methods=["DELETE"])
    def api_delete_node(node_id: str):
        """DELETE /api/nodes/<id> - Delete a node and its edges."""
        return _run(handlers.delete_node, node_id)

    # ─────────────────────────────────────────────────────────────────
    # Selection endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/selection", methods=["PUT"])
    def api_select():
        """PUT /api/selection - Select a node. Body: {id} (null clears)."""
        return _with_body(lambda d: _run(handlers.select, d.get("id")))

    @app.route("/api/selection", methods=["DELETE"])
    def api_delete_selected():
        """DELETE /api/selection - Delete the selected node."""
        return _run(handlers.delete_selected)

    @app.route("/api/selection/duplicate", methods=["POST"])
    def api_duplicate_selected():
        """POST /api/selection/duplicate - Duplicate the selected node."""
        return _run(handlers.duplicate_selected)

    # ─────────────────────────────────────────────────────────────────
    # Edge and gesture endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/edges", methods=["POST"])
    def api_connect():
        """POST /api/edges - Connect nodes. Body: {source, sourceHandle?, target}."""
        return _with_body(
            lambda d: _run(handlers.connect, d.get("source"), d.get("sourceHandle"), d.get("target"))
        )

    @app.route("/api/edges/<edge_id>", methods=["DELETE"])
    def api_delete_edge(edge_id: str):
        """DELETE /api/edges/<id> - Delete an edge."""
        return _run(handlers.delete_edge, edge_id)

    @app.route("/api/changes", methods=["POST"])
    def api_changes():
        """POST /api/changes - Apply one gesture. Body: {nodes?: [...], edges?: [...]}."""
        return _with_body(lambda d: _run(handlers.apply_changes, d.get("nodes"), d.get("edges")))

    # ─────────────────────────────────────────────────────────────────
    # History and import
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/undo", methods=["POST"])
    def api_undo():
        """POST /api/undo - Undo the last mutation."""
        return _run(handlers.undo)

    @app.route("/api/redo", methods=["POST"])
    def api_redo():
        """POST /api/redo - Redo the last undone mutation."""
        return _run(handlers.redo)

    @app.route("/api/import", methods=["POST"])
    def api_import():
        """POST /api/import - Replace the graph with an exchange-format document."""
        data = request.get_json(silent=True)
        return _run(handlers.import_flow, data)

    return app
