"""
Braindrop - Web API

A small Flask JSON API over the idea store, for the capture and browse
screens of a front end.

Run with: python -m web.app
"""

import logging
import sys
import threading
from datetime import date
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, Response, current_app, jsonify, request

from braindrop.config import LOG_LEVEL, WEB_HOST, WEB_PORT
from braindrop.errors import (
    BraindropError,
    DecodeError,
    NotFoundError,
    StorageUnavailable,
    StoreNotReadyError,
    ValidationError,
)
from braindrop.logging_config import setup_logging
from braindrop.models import ATTRIBUTE_NAMES, IdeaType, NewIdea
from braindrop.query import IdeaFilter, distinct_tags, filter_ideas, sort_by_created_at
from braindrop.store import IdeaStore, create_store

logger = logging.getLogger(__name__)

app = Flask(__name__)

_store_lock = threading.Lock()


def get_store() -> IdeaStore:
    """
    Get the app's idea store, creating and loading the configured one on
    first use. Tests inject their own via app.config["IDEA_STORE"].
    """
    store = current_app.config.get("IDEA_STORE")
    if store is None:
        with _store_lock:
            store = current_app.config.get("IDEA_STORE")
            if store is None:
                store = create_store(initialize=False)
                current_app.config["IDEA_STORE"] = store

    if not store.ready:
        with _store_lock:
            if not store.ready:
                store.initialize()
    return store


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(["request body must be a JSON object"])
    return data


def _parse_bool(value: str) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Error Handling
# =============================================================================

def _error(exc: Exception, status: int, **extra):
    body = {"error": str(exc), "type": exc.__class__.__name__}
    body.update(extra)
    return jsonify(body), status


@app.errorhandler(ValidationError)
def handle_validation_error(exc: ValidationError):
    return _error(exc, 400, details=exc.problems)


@app.errorhandler(NotFoundError)
def handle_not_found(exc: NotFoundError):
    return _error(exc, 404)


@app.errorhandler(StorageUnavailable)
def handle_storage_unavailable(exc: StorageUnavailable):
    logger.error("Storage unavailable: %s", exc)
    return _error(exc, 503)


@app.errorhandler(StoreNotReadyError)
def handle_not_ready(exc: StoreNotReadyError):
    return _error(exc, 503)


@app.errorhandler(DecodeError)
def handle_decode_error(exc: DecodeError):
    logger.error("Stored collection is corrupt: %s", exc)
    return _error(exc, 500)


@app.errorhandler(BraindropError)
def handle_braindrop_error(exc: BraindropError):
    return _error(exc, 500)


# =============================================================================
# Idea Endpoints
# =============================================================================

@app.route("/api/ideas", methods=["GET"])
def api_list_ideas():
    """
    List ideas matching the query parameters.

    Query params: type, favorites, tag (repeatable or comma separated),
    q, date (YYYY-MM-DD), order ("newest" or "oldest").
    """
    idea_type = request.args.get("type", "").strip().lower() or None
    if idea_type == "all":
        idea_type = None
    if idea_type and idea_type not in {t.value for t in IdeaType}:
        return jsonify({"error": f"Unknown idea type {idea_type!r}"}), 400

    tags = []
    for value in request.args.getlist("tag"):
        tags.extend(part for part in value.split(",") if part.strip())

    created_on = None
    if request.args.get("date"):
        try:
            created_on = date.fromisoformat(request.args["date"])
        except ValueError:
            return jsonify({"error": "Query parameter 'date' must be YYYY-MM-DD"}), 400

    order = request.args.get("order", "newest")
    if order not in ("newest", "oldest"):
        return jsonify({"error": "Query parameter 'order' must be 'newest' or 'oldest'"}), 400

    criteria = IdeaFilter(
        type=idea_type,
        favorites_only=_parse_bool(request.args.get("favorites")),
        tags=tags,
        search_query=request.args.get("q", ""),
        created_on=created_on,
    )

    all_ideas = get_store().list()
    ideas = sort_by_created_at(filter_ideas(all_ideas, criteria), ascending=(order == "oldest"))

    return jsonify({
        "success": True,
        "count": len(ideas),
        "total": len(all_ideas),
        "results": [idea.to_dict() for idea in ideas],
    })


@app.route("/api/ideas", methods=["POST"])
def api_create_idea():
    """Capture a new idea."""
    data = _json_body()

    unknown = sorted(
        key for key in data
        if ATTRIBUTE_NAMES.get(key, key) not in NewIdea.__dataclass_fields__
    )
    if unknown:
        raise ValidationError([f"unknown field {key!r}" for key in unknown])

    fields = {ATTRIBUTE_NAMES.get(key, key): value for key, value in data.items()}
    fields.setdefault("title", "")
    if fields.get("content") is None:
        fields["content"] = ""
    if fields.get("tags") is None:
        fields["tags"] = []

    idea = get_store().create(NewIdea(**fields))
    return jsonify(idea.to_dict()), 201


@app.route("/api/ideas/<idea_id>", methods=["GET"])
def api_get_idea(idea_id):
    return jsonify(get_store().get(idea_id).to_dict())


@app.route("/api/ideas/<idea_id>", methods=["PATCH"])
def api_update_idea(idea_id):
    """Change fields of an idea. Keys may be camelCase or snake_case."""
    data = _json_body()
    idea = get_store().update(idea_id, **data)
    return jsonify(idea.to_dict())


@app.route("/api/ideas/<idea_id>", methods=["DELETE"])
def api_delete_idea(idea_id):
    """Delete an idea. Deleting an unknown id still succeeds."""
    get_store().delete(idea_id)
    return "", 204


@app.route("/api/ideas/<idea_id>/favorite", methods=["POST"])
def api_toggle_favorite(idea_id):
    return jsonify(get_store().toggle_favorite(idea_id).to_dict())


@app.route("/api/ideas", methods=["DELETE"])
def api_clear_ideas():
    """Delete every idea."""
    get_store().clear_all()
    return "", 204


# =============================================================================
# Collection Endpoints
# =============================================================================

@app.route("/api/tags")
def api_tags():
    return jsonify({"tags": distinct_tags(get_store().list())})


@app.route("/api/stats")
def api_stats():
    """Counters for the capture and settings screens."""
    return jsonify(get_store().stats().to_dict())


@app.route("/api/export")
def api_export():
    """Download the whole collection in its persisted JSON form."""
    return Response(
        get_store().export_json(),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=braindrop_ideas.json"},
    )


if __name__ == "__main__":
    setup_logging(LOG_LEVEL)
    print("=" * 50)
    print("💡 Braindrop API")
    print("=" * 50)
    print(f"Listening on http://{WEB_HOST}:{WEB_PORT}")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(host=WEB_HOST, port=WEB_PORT)
