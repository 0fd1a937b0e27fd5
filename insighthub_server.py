#!/usr/bin/env python3
"""
InsightHub Server
-----------------
Serves the dashboard page and a JSON API backed by a single JSON data file.

Usage:
    pip install -e .
    python insighthub_server.py --port 3000

Access:
    http://localhost:3000

API:
    GET    /api/health         → { status, message }
    GET    /api/tasks          → { success, tasks }
    POST   /api/tasks          → body { text }            → { success, task }
    PUT    /api/tasks/<id>     → body { done }            → { success, task }
    DELETE /api/tasks/<id>     → { success, message }
    GET    /api/stats          → { success, stats }
    POST   /api/stats          → body { type }            → { success, stats }
    POST   /api/reset          → clears tasks and stats
    POST   /api/ai/summarize   → body { text }            → { success, summary }
    POST   /api/ai/sentiment   → body { text }            → { success, score, label }
    POST   /api/ai/tasks       → body { text, save? }     → { success, tasks[, saved] }
    POST   /api/ai/ideas       → body { topic }           → { success, ideas }
    POST   /api/ai/chat        → body { message }         → { success, reply }
    POST   /api/auth/register  → body { email, password } → { success, user }
    POST   /api/auth/login     → body { email, password } → { success, user }

Every failure answers { success: false, message }.
"""

import logging
import os
import sys
from pathlib import Path

from flask import Blueprint, Flask, current_app, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from pkg.insighthub import heuristics
from pkg.insighthub.auth import AccountManager
from pkg.insighthub.config import Config
from pkg.insighthub.errors import CorruptData, InsightHubError, InvalidInput
from pkg.insighthub.store import JsonStore

UI_FILE = Path(__file__).parent / "insighthub_ui.html"
BANNER_WIDTH = 31

api = Blueprint("insighthub", __name__)


def create_app(cfg: Config) -> Flask:
    """Build the Flask app for one resolved config (CORS origins are fixed here)."""
    flask_app = Flask(__name__)
    flask_app.config["INSIGHTHUB"] = cfg
    flask_app.register_blueprint(api)
    CORS(flask_app, origins=cfg.cors_origins)
    return flask_app


# ── Config ───────────────────────────────────────────────────────────────────

def get_config() -> Config:
    return current_app.config["INSIGHTHUB"]


def get_data_path(cfg: Config = None) -> Path:
    env = os.environ.get("INSIGHTHUB_DATA")
    if env:
        return Path(env).expanduser()
    return Path((cfg or get_config()).data_path)


def get_store() -> JsonStore:
    return JsonStore(str(get_data_path()))


def get_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def ok(**payload):
    return jsonify({"success": True, **payload})


def fail(message: str, code: int):
    return jsonify({"success": False, "message": message}), code


# ── Errors ───────────────────────────────────────────────────────────────────

@api.app_errorhandler(InsightHubError)
def handle_app_error(e: InsightHubError):
    if isinstance(e, CorruptData):
        current_app.logger.error(f"Data file problem: {e.message}")
    return fail(e.message, e.status_code)


@api.app_errorhandler(HTTPException)
def handle_http_error(e: HTTPException):
    return fail(e.description or e.name, e.code or 500)


@api.app_errorhandler(Exception)
def handle_unexpected(e: Exception):
    current_app.logger.exception(f"Unhandled error on {request.method} {request.path}")
    return fail("Internal server error", 500)


# ── Routes ───────────────────────────────────────────────────────────────────

@api.route("/")
def index():
    ui_file = get_config().ui_file
    html_path = Path(ui_file) if ui_file else UI_FILE
    if not html_path.exists():
        return fail("Dashboard page not found. Place insighthub_ui.html alongside insighthub_server.py", 404)
    return send_file(html_path)


@api.route("/api/health")
def health():
    return jsonify({"status": "OK", "message": "Server is running!"})


@api.route("/api/tasks", methods=["GET"])
def api_list_tasks():
    tasks = get_store().list_tasks()
    return ok(tasks=[t.to_dict() for t in tasks])


@api.route("/api/tasks", methods=["POST"])
def api_add_task():
    task = get_store().add_task(get_body().get("text"))
    return ok(task=task.to_dict())


@api.route("/api/tasks/<int:task_id>", methods=["PUT"])
def api_update_task(task_id):
    task = get_store().set_task_done(task_id, get_body().get("done"))
    return ok(task=task.to_dict())


@api.route("/api/tasks/<int:task_id>", methods=["DELETE"])
def api_delete_task(task_id):
    get_store().remove_task(task_id)
    return ok(message="Task deleted")


@api.route("/api/stats", methods=["GET"])
def api_get_stats():
    return ok(stats=get_store().get_stats().to_dict())


@api.route("/api/stats", methods=["POST"])
def api_record_stat():
    stats = get_store().record_event(get_body().get("type"))
    return ok(stats=stats.to_dict())


@api.route("/api/reset", methods=["POST"])
def api_reset():
    get_store().reset_all()
    return ok(message="Tasks and stats reset")


# ── Text tools ───────────────────────────────────────────────────────────────

def _text_field(data: dict, key: str = "text") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


@api.route("/api/ai/summarize", methods=["POST"])
def api_summarize():
    return ok(summary=heuristics.summarize(_text_field(get_body())))


@api.route("/api/ai/sentiment", methods=["POST"])
def api_sentiment():
    return ok(**heuristics.analyze_sentiment(_text_field(get_body())))


@api.route("/api/ai/tasks", methods=["POST"])
def api_extract_tasks():
    data = get_body()
    tasks = heuristics.extract_tasks(_text_field(data))
    if data.get("save") is True and tasks:
        saved = get_store().add_tasks(tasks)
        return ok(tasks=tasks, saved=[t.to_dict() for t in saved])
    return ok(tasks=tasks)


@api.route("/api/ai/ideas", methods=["POST"])
def api_ideas():
    topic = _text_field(get_body(), "topic").strip()
    if not topic:
        raise InvalidInput("Topic is required")
    return ok(ideas=heuristics.generate_ideas(topic))


@api.route("/api/ai/chat", methods=["POST"])
def api_chat():
    message = _text_field(get_body(), "message").strip()
    if not message:
        raise InvalidInput("Message is required")
    return ok(reply=heuristics.chat_reply(message))


# ── Auth ─────────────────────────────────────────────────────────────────────

@api.route("/api/auth/register", methods=["POST"])
def api_register():
    data = get_body()
    user = AccountManager(get_store()).register(data.get("email"), data.get("password"))
    return ok(user=user)


@api.route("/api/auth/login", methods=["POST"])
def api_login():
    data = get_body()
    user = AccountManager(get_store()).login(data.get("email"), data.get("password"))
    return ok(user=user)


# ── Main ─────────────────────────────────────────────────────────────────────

app = create_app(Config.load())


def _fit(value: str, width: int = BANNER_WIDTH) -> str:
    """Pad to the banner column, keeping the tail of values that are too long."""
    if len(value) > width:
        value = "…" + value[-(width - 1):]
    return f"{value:<{width}}"


def banner(url: str, data_path) -> str:
    return f"""
╔═══════════════════════════════════════╗
║  InsightHub Server                    ║
╠═══════════════════════════════════════╣
║  URL:  {_fit(url)}║
║  Data: {_fit(str(data_path))}║
╚═══════════════════════════════════════╝
"""


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="InsightHub Server")
    parser.add_argument("--host", default=None,
                        help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--data", help="Path to data.json (overrides INSIGHTHUB_DATA env var)")
    parser.add_argument("--config", help="Path to config.yaml (overrides INSIGHTHUB_CONFIG env var)")
    args = parser.parse_args()

    if args.data:
        os.environ["INSIGHTHUB_DATA"] = args.data
    config = Config.load(args.config)
    app = create_app(config)

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s [insighthub] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    host = args.host or config.host
    port = args.port or config.port
    data_path = get_data_path(config)

    # A corrupt data file at startup is fatal; later requests can recover via /api/reset
    try:
        JsonStore(str(data_path)).load()
    except CorruptData as e:
        app.logger.error(f"Cannot start: {e.message}")
        sys.exit(1)

    print(banner(f"http://{host}:{port}", data_path))

    app.run(host=host, port=port, debug=False, threaded=True)
