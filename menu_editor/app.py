from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from flask import Flask, Response, jsonify, render_template, request

from .codec import MenuFile, check_shape, document_from_data, dump_data
from .errors import MenuEditorError
from .hierarchy import build, count_nodes, walk
from .integrity import analyze
from .store import MenuStore

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

app = Flask(__name__, template_folder=str(BASE_DIR / "templates"))

EMPTY_DOCUMENT: dict[str, Any] = {"menu": {"main": []}}
DEFAULT_DOWNLOAD_NAME = "main.en.yaml"
DEFAULT_MAX_CONTENT_LENGTH = 50 * 1024 * 1024


def _resolve_menu_path() -> Path | None:
    """Optional YAML file used to seed the store, from MENU_PATH."""
    env_path = os.environ.get("MENU_PATH")
    if not env_path:
        return None
    candidate = Path(env_path)
    return candidate if candidate.is_absolute() else Path.cwd() / candidate


def _resolve_max_content_length() -> int:
    raw = os.environ.get("MENU_MAX_CONTENT_LENGTH")
    try:
        return int(raw) if raw else DEFAULT_MAX_CONTENT_LENGTH
    except ValueError:
        logger.warning("Ignoring invalid MENU_MAX_CONTENT_LENGTH=%r", raw)
        return DEFAULT_MAX_CONTENT_LENGTH


MENU_PATH = _resolve_menu_path()
DOWNLOAD_NAME = os.environ.get("MENU_DOWNLOAD_NAME") or DEFAULT_DOWNLOAD_NAME
app.config["MAX_CONTENT_LENGTH"] = _resolve_max_content_length()

STORE = MenuStore()


def _seed_store(store: MenuStore, path: Path | None) -> bool:
    if path is None or not path.exists():
        return False
    try:
        data = MenuFile(path).load_data()
    except MenuEditorError as exc:
        logger.warning("Not seeding from %s: %s", path, exc)
        return False
    store.set(data)
    logger.info("Seeded menu store from %s", path)
    return True


_seed_store(STORE, MENU_PATH)


def _json_error(message: str, status: int = 400, **extra: Any):
    payload: dict[str, Any] = {"error": message}
    payload.update(extra)
    return jsonify(payload), status


def _derived_view(data: Any) -> dict[str, Any]:
    document = document_from_data(data)
    forest = build(document.entries)
    return {
        "tree": [node.to_dict() for node in forest],
        "count": count_nodes(forest),
        "integrity": analyze(document.entries).to_dict(),
    }


@app.route("/")
def index() -> str:
    data = STORE.get() or EMPTY_DOCUMENT
    document = document_from_data(data)
    return render_template(
        "index.html",
        nodes=list(walk(build(document.entries))),
        report=analyze(document.entries),
        stored=not STORE.is_empty(),
    )


@app.route("/health", methods=["GET"])
def healthcheck():
    return jsonify({
        "status": "ok",
        "stored": not STORE.is_empty(),
        "menu_path": str(MENU_PATH) if MENU_PATH else None,
    })


@app.route("/menu-data", methods=["GET"])
def get_menu_data():
    return jsonify(STORE.get() or EMPTY_DOCUMENT)


@app.route("/menu-data", methods=["POST"])
def post_menu_data():
    payload = request.get_json(silent=True)
    try:
        main = check_shape(payload)
    except MenuEditorError as exc:
        return _json_error(f"Invalid menu data structure: {exc}", 400)
    STORE.set(payload)
    logger.info("Stored menu data with %d items", len(main))
    return jsonify({"status": "ok", "items": len(main)})


@app.route("/menu-tree", methods=["GET"])
def get_menu_tree():
    return jsonify(_derived_view(STORE.get() or EMPTY_DOCUMENT))


@app.route("/download-yaml", methods=["GET"])
def download_yaml():
    data = STORE.get()
    if data is None:
        return _json_error("No menu data stored.", 404)
    return Response(
        dump_data(data),
        mimetype="text/yaml",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_NAME}"'},
    )


@app.route("/reset", methods=["POST"])
def reset_menu_data():
    STORE.clear()
    return jsonify({"status": "ok"})
