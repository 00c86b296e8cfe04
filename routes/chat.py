"""
Chat endpoints as a Flask Blueprint.

POST /api/chat      one conversation turn
POST /api/clear     drop a session's history
GET  /api/session/  inspect a session's history
"""

import time
import uuid

from flask import Blueprint, request, jsonify

from app_config import LOG_MESSAGE_PREVIEW
from chat_logger import get_logger, sanitize_log_string
from markdown_lite import render_markdown
from services import run_chat_turn
from . import get_store, get_provider, get_system_prompt

logger = get_logger()

chat_bp = Blueprint("chat", __name__)


def _new_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


@chat_bp.route("/api/chat", methods=["POST"])
def chat():
    """
    Main chat endpoint.

    Request:
        POST /api/chat
        {"message": "Let's start with a research question", "sessionId": "session_xxx"}

    Response:
        {"message": "...", "html": "<p>...</p>", "sessionId": "session_xxx"}
        or {"error": "..."} with status 400 / 500
    """
    start_time = time.time()

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        logger.warning("POST /api/chat | Invalid JSON body")
        return jsonify({"error": "Invalid request. Send JSON with 'message' and 'sessionId'."}), 400

    message = body.get("message")
    if not isinstance(message, str):
        logger.warning("POST /api/chat | Missing or non-string message")
        return jsonify({"error": "Field 'message' must be a string."}), 400

    session_id = body.get("sessionId")
    if not session_id:
        session_id = _new_session_id()
        logger.info(f"POST /api/chat | No sessionId supplied, using {session_id}")
    session_id = str(session_id)

    logger.info(
        f'POST /api/chat | session={sanitize_log_string(session_id)} | '
        f'message="{sanitize_log_string(message, LOG_MESSAGE_PREVIEW)}"'
    )

    try:
        reply = run_chat_turn(
            get_store(), get_provider(), session_id, message, get_system_prompt()
        )
    except Exception as e:
        logger.error(f"POST /api/chat | session={sanitize_log_string(session_id)} | Chat error: {e!r}")
        return jsonify({"error": "Failed to get response"}), 500

    elapsed_ms = round((time.time() - start_time) * 1000)
    logger.info(f"POST /api/chat | session={sanitize_log_string(session_id)} | ok | response_time_ms={elapsed_ms}")
    return jsonify({
        "message": reply,
        "html": render_markdown(reply),
        "sessionId": session_id,
    })


@chat_bp.route("/api/clear", methods=["POST"])
def clear():
    """Remove a session. Unknown or missing ids are not an error."""
    body = request.get_json(silent=True) or {}
    session_id = body.get("sessionId") if isinstance(body, dict) else None
    if session_id:
        get_store().clear(str(session_id))
        logger.info(f"POST /api/clear | session={sanitize_log_string(str(session_id))}")
    return jsonify({"success": True})


@chat_bp.route("/api/session/<session_id>", methods=["GET"])
def get_session(session_id):
    """Get session history."""
    history = get_store().get(session_id)
    if history is None:
        return jsonify({"error": "Session not found"}), 404
    return jsonify({
        "sessionId": session_id,
        "messages": [m.to_dict() for m in history],
    })
