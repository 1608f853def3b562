"""
Flask server exposing the instrumenter over HTTP.

Usage:
    python -m goinstrument.server

POST a Go file (multipart field ``file``) or JSON ``{"source": "...", "app": "..."}``
to /api/instrument.
"""

import os

from flask import Blueprint, Flask, jsonify, request

from .errors import InstrumentError
from .pipeline import instrument_source

bp = Blueprint("instrument", __name__)

ALLOWED_EXTENSIONS = {".go"}


def _make_error(stage, message, status=400):
    return jsonify({"success": False, "error": {"stage": stage, "message": message}}), status


def _flag(value):
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    return bool(value)


def _read_request():
    """Return (code_bytes, options) from an upload or a JSON body."""
    if "file" in request.files:
        file = request.files["file"]
        if not file.filename:
            raise ValueError("No file selected")
        ext = os.path.splitext(file.filename)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValueError(f"Unsupported file type '{ext}'. Only .go files are accepted.")
        return file.read(), request.form

    data = request.get_json(silent=True)
    if not data or not isinstance(data.get("source"), str):
        raise ValueError("No source provided")
    return data["source"].encode("utf-8"), data


@bp.route("/api/instrument", methods=["POST"])
def instrument():
    try:
        code_bytes, options = _read_request()
    except ValueError as e:
        return _make_error("request", str(e))

    try:
        result = instrument_source(
            code_bytes,
            app=options.get("app") or "app",
            instrumenter=options.get("instrumenter") or "otel",
            skip_generated=_flag(options.get("skip_generated")),
        )
    except InstrumentError as e:
        return _make_error(e.stage, str(e))

    return jsonify({
        "success": True,
        "skipped": result.skipped,
        "functions": result.functions,
        "code": result.code,
    })


def create_app() -> Flask:
    app = Flask(__name__)
    app.register_blueprint(bp)
    return app


if __name__ == "__main__":
    print(" goinstrument server running at http://localhost:5000")
    create_app().run(debug=True, port=5000)
