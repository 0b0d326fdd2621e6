#!/usr/bin/env python3
"""
TaskBoard API Server
--------------------
JSON API over the SQLite task store. The board client talks to it through
taskboard.client.TaskClient.

Usage:
    taskboard-server --port 3000 --db ./tasks.db

    # or
    python -m taskboard.server

API:
    GET    /tasks        → { tasks: [...] }   (insertion order)
    POST   /tasks        → JSON body: { title, description?, status? }
                           Returns 201 { task }
    GET    /tasks/<id>   → { task }
    PUT    /tasks/<id>   → JSON body: any of { title, description, status }
                           Returns { task }
    DELETE /tasks/<id>   → { deleted: <id> }
    GET    /health       → { status, db, counts }

Mutating routes need an X-API-Key header when api_secret is configured.
"""

import argparse
import hmac
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, current_app

from .config import Settings, ConfigError, setup_logging
from .schema import TaskStatus, ValidationError
from .store import TaskStore


# ── Auth ─────────────────────────────────────────────────────────────────────

def require_api_key(f):
    """Decorator: when a secret is configured, reject requests without a valid X-API-Key header."""
    @wraps(f)
    def decorated(*args, **kwargs):
        secret = current_app.config.get("API_SECRET", "")
        if secret:
            provided = request.headers.get("X-API-Key", "").strip()
            if not hmac.compare_digest(provided, secret):
                code = 401 if not provided else 403
                return jsonify({"error": "Unauthorized"}), code
        return f(*args, **kwargs)
    return decorated


def _store() -> TaskStore:
    return current_app.config["TASK_STORE"]


def _json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _not_found():
    return jsonify({"error": "Task not found"}), 404


# ── App factory ──────────────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> Flask:
    settings = settings or Settings.load()
    app = Flask(__name__)
    app.config["TASK_STORE"] = store or TaskStore(settings.db_path)
    app.config["API_SECRET"] = settings.api_secret

    @app.route("/tasks", methods=["GET"])
    def api_list_tasks():
        return jsonify({"tasks": [t.to_dict() for t in _store().list_all()]})

    @app.route("/tasks/<task_id>", methods=["GET"])
    def api_get_task(task_id):
        task = _store().get(task_id)
        if not task:
            return _not_found()
        return jsonify({"task": task.to_dict()})

    @app.route("/tasks", methods=["POST"])
    @require_api_key
    def api_create_task():
        """Create a new task."""
        data = _json_body()
        try:
            status = TaskStatus.from_str(data.get("status") or TaskStatus.TODO.value)
            task = _store().create(
                title=data.get("title", ""),
                description=data.get("description", ""),
                status=status,
            )
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"task": task.to_dict()}), 201

    @app.route("/tasks/<task_id>", methods=["PUT"])
    @require_api_key
    def api_update_task(task_id):
        """Partial update of title, description and/or status."""
        data = _json_body()
        try:
            task = _store().update(task_id, data)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        if not task:
            return _not_found()
        return jsonify({"task": task.to_dict()})

    @app.route("/tasks/<task_id>", methods=["DELETE"])
    @require_api_key
    def api_delete_task(task_id):
        if not _store().delete(task_id):
            return _not_found()
        return jsonify({"deleted": task_id})

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "db": _store().db_path,
            "counts": _store().count_by_status(),
        })

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        # Let Flask render its own 404/405 etc.
        code = getattr(e, "code", None)
        if isinstance(code, int):
            return jsonify({"error": getattr(e, "description", str(e))}), code
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": str(e)}), 500

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="TaskBoard API Server")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--db", help="Path to tasks.db (overrides TASKBOARD_DB env var)")
    parser.add_argument("--config", help="Path to taskboard.yaml")
    args = parser.parse_args(argv)

    try:
        settings = Settings.load(args.config)
    except ConfigError as e:
        parser.error(str(e))
    if args.db:
        settings.db_path = args.db
        settings.resolve_paths()
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port

    setup_logging(settings.log_level)
    app = create_app(settings)

    print(f"""
╔═══════════════════════════════════════╗
║  TaskBoard API Server                 ║
╠═══════════════════════════════════════╣
║  URL:  http://{settings.host}:{settings.port:<20}║
║  DB:   {settings.db_path:<31}║
║  Auth: {"api key" if settings.api_secret else "open":<31}║
╚═══════════════════════════════════════╝
""")

    app.run(host=settings.host, port=settings.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
