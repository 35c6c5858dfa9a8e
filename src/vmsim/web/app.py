"""Flask application factory for the simulator's JSON API.

The ``create_app`` function returns a Flask app holding one simulator
session and serving four endpoints:

- ``POST /api/vm`` — create (or replace) the simulator from a config.
- ``DELETE /api/vm`` — destroy the simulator.
- ``POST /api/access`` — perform one read or write and return JSON.
- ``GET /api/stats`` — return the statistics counters.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from vmsim.config import ConfigError, VMConfig
from vmsim.engine import TranslationEngine
from vmsim.memory.store import AddressError

_HTTP_CREATED = 201
_HTTP_BAD_REQUEST = 400
_HTTP_CONFLICT = 409

_OPS = ("read", "write")


def _number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    session: dict[str, TranslationEngine] = {}

    app = Flask(__name__)

    @app.route("/api/vm", methods=["POST"])
    def create_vm() -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Create the simulator.

        Expects the six configuration fields as a JSON object.

        Returns:
            JSON echo of the geometry, or an ``error`` with its ``kind``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object"}), _HTTP_BAD_REQUEST
        try:
            engine = TranslationEngine.create(VMConfig.from_mapping(data))
        except ConfigError as e:
            return jsonify({"error": str(e), "kind": str(e.kind)}), _HTTP_BAD_REQUEST

        previous = session.pop("engine", None)
        if previous is not None:
            previous.destroy()
        session["engine"] = engine
        config = engine.config
        return jsonify(
            {
                "virtual_pages": config.virtual_pages,
                "physical_frames": config.physical_frames,
                "page_size": config.page_size,
                "tlb_entries": config.tlb_entries,
                "page_policy": config.page_policy.name,
                "tlb_policy": config.tlb_policy.name,
                "page_table_size": config.page_table_size,
            }
        ), _HTTP_CREATED

    @app.route("/api/vm", methods=["DELETE"])
    def destroy_vm() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Destroy the simulator and return its final counters."""
        engine = session.pop("engine", None)
        if engine is None:
            return jsonify({"error": "No simulator"}), _HTTP_CONFLICT
        engine.destroy()
        return jsonify(engine.counters.as_dict())

    @app.route("/api/access", methods=["POST"])
    def access() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Perform one memory access.

        Expects JSON body: ``{"op": "read"|"write", "address": n, "value": v}``
        (``value`` only for writes).

        Returns:
            JSON with ``value``, ``page``, ``frame`` and ``outcome`` fields.

        """
        engine = session.get("engine")
        if engine is None:
            return jsonify({"error": "No simulator; POST /api/vm first"}), _HTTP_CONFLICT

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or data.get("op") not in _OPS:
            return jsonify({"error": "Missing or invalid 'op' field"}), _HTTP_BAD_REQUEST
        address = data.get("address")
        if not isinstance(address, int) or isinstance(address, bool):
            return jsonify({"error": "Missing or invalid 'address' field"}), _HTTP_BAD_REQUEST

        write = data["op"] == "write"
        value = data.get("value")
        if write and not _number(value):
            return jsonify({"error": "Missing or invalid 'value' field"}), _HTTP_BAD_REQUEST

        try:
            translation, value = engine.access(address, value if write else None, write=write)
        except AddressError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST

        return jsonify(
            {
                "value": value,
                "page": translation.page,
                "frame": translation.frame,
                "outcome": str(translation.outcome),
            }
        )

    @app.route("/api/stats")
    def stats() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the statistics counters."""
        engine = session.get("engine")
        if engine is None:
            return jsonify({"error": "No simulator"}), _HTTP_CONFLICT
        return jsonify(engine.counters.as_dict())

    return app


def main() -> None:
    """Run the web API on Flask's development server.

    This is the ``vmsim-web`` console entry point.  It starts Werkzeug's
    built-in server with the debugger enabled, which is for local
    experiments only; to serve the API for real, hand ``create_app()``
    to a WSGI server instead.
    """
    app = create_app()
    app.run(debug=True, port=8080)
