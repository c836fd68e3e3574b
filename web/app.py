"""
Idea Swipe - Web API

A Flask JSON API over the Idea Swipe engine: submit ideas, pull a user's
feed, record swipes and ratings, and read feedback statistics.

User identity comes from the caller (an upstream authenticator); image
uploads go to a blob store whose reference is passed as image_ref.

Run with: python -m web.app
Or: cd web && python app.py
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify

from ideaswipe.config import WEB_PORT, DEBUG, configure_logging
from ideaswipe.engine import IdeaEngine
from ideaswipe.errors import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from ideaswipe.storage import get_storage

logger = logging.getLogger(__name__)

app = Flask(__name__)


# =============================================================================
# Engine access
# =============================================================================

_engine: Optional[IdeaEngine] = None


def get_engine() -> IdeaEngine:
    """Get the engine over the configured storage backend, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = IdeaEngine.from_storage(get_storage())
    return _engine


# =============================================================================
# Error handling
# =============================================================================

@app.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    return jsonify({"error": str(e), "details": e.errors}), 400


@app.errorhandler(NotFoundError)
def handle_not_found(e: NotFoundError):
    return jsonify({"error": str(e)}), 404


@app.errorhandler(ConflictError)
def handle_conflict(e: ConflictError):
    return jsonify({"error": str(e)}), 409


@app.errorhandler(StoreUnavailableError)
def handle_store_unavailable(e: StoreUnavailableError):
    logger.error("Store unavailable: %s", e)
    return jsonify({"error": "Storage is unavailable, try again later"}), 503


# =============================================================================
# Ideas
# =============================================================================

@app.route("/api/health")
def api_health():
    """Report which storage backend is serving requests."""
    engine = get_engine()
    return jsonify({"status": "ok", "storage": engine.idea_store.name})


@app.route("/api/ideas", methods=["GET"])
def api_list_ideas():
    """
    List ideas.

    - ?userId=<id>: that user's feed (ideas they have not judged yet)
    - ?authorId=<id>: that author's ideas, each with feedback stats
    - neither: every idea
    All lists are newest first.
    """
    engine = get_engine()

    user_id = request.args.get("userId", "").strip()
    author_id = request.args.get("authorId", "").strip()

    if author_id:
        return jsonify([item.to_dict() for item in engine.list_author_ideas(author_id)])

    if user_id:
        ideas = engine.get_feed(user_id)
    else:
        ideas = engine.list_ideas()

    return jsonify([idea.to_dict() for idea in ideas])


@app.route("/api/ideas", methods=["POST"])
def api_create_idea():
    """Submit a new idea."""
    data = request.get_json(silent=True)

    if not data:
        return jsonify({"error": "No data provided"}), 400

    idea = get_engine().submit_idea(data)
    return jsonify(idea.to_dict()), 201


@app.route("/api/ideas/<idea_id>", methods=["GET"])
def api_get_idea(idea_id):
    """One idea with its feedback stats."""
    return jsonify(get_engine().get_idea(idea_id).to_dict())


# =============================================================================
# Interactions
# =============================================================================

@app.route("/api/interactions", methods=["POST"])
def api_record_interaction():
    """Record (or update) a user's swipe and optional rating on an idea."""
    data = request.get_json(silent=True)

    if not data or not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400

    user_id = data.get("user_id")
    idea_id = data.get("idea_id")
    swipe = data.get("swipe")

    if not user_id or not idea_id or swipe is None:
        return jsonify({"error": "Missing required fields: user_id, idea_id, swipe"}), 400

    interaction = get_engine().record_interaction(
        user_id,
        idea_id,
        swipe,
        data.get("rating"),
    )
    return jsonify(interaction.to_dict())


@app.route("/api/interactions", methods=["GET"])
def api_get_interactions():
    """
    Feedback for an idea.

    - ?ideaId=<id>&userId=<id>: that user's interaction, or null
    - ?ideaId=<id>: stats plus every interaction for the idea
    """
    idea_id = request.args.get("ideaId", "").strip()
    user_id = request.args.get("userId", "").strip()

    if not idea_id:
        return jsonify({"error": "Idea ID is required"}), 400

    engine = get_engine()

    if user_id:
        interaction = engine.get_interaction(idea_id, user_id)
        return jsonify(interaction.to_dict() if interaction else None)

    stats, interactions = engine.get_feedback(idea_id)

    response = {"idea_id": idea_id}
    response.update(stats.to_dict())
    response["interactions"] = [interaction.to_dict() for interaction in interactions]
    return jsonify(response)


if __name__ == "__main__":
    configure_logging()
    print("=" * 50)
    print("Idea Swipe API")
    print("=" * 50)
    print(f"Listening on http://localhost:{WEB_PORT}")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=DEBUG, port=WEB_PORT)
