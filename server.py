"""
Survey Assistant: Chat API Backend

Usage:
    python server.py

Endpoints:
    POST /api/chat                          {"message": "...", "sessionId": "..."}
    POST /api/clear                         {"sessionId": "..."}
    POST /api/export/<summary|transcript>/<word|pdf>   {"sessionId": "..."}
    GET  /api/session/<session_id>
    GET  /health
    GET  /                                  chat page (public/index.html)
"""

from datetime import datetime, timezone
from pathlib import Path

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import app_config
from chat_logger import get_logger, mask_secret
from llm_client import LLMClient
from prompts import load_system_prompt
from routes import EXTENSION_KEY, chat_bp, export_bp
from session_store import SessionStore

logger = get_logger()

PUBLIC_DIR = Path(__file__).resolve().parent / "public"


def create_app(store=None, provider=None, system_prompt=None) -> Flask:
    """
    Build the Flask app.

    store, provider and system_prompt default to a configured SessionStore,
    LLMClient and the configured system prompt; tests pass their own.
    """
    app = Flask(__name__, static_folder=str(PUBLIC_DIR), static_url_path="")
    CORS(
        app,
        supports_credentials=True,
        methods=["GET", "OPTIONS", "PATCH", "DELETE", "POST", "PUT"],
        allow_headers=["Content-Type"],
    )

    app.extensions[EXTENSION_KEY] = {
        "store": store if store is not None else SessionStore(
            ttl_seconds=app_config.SESSION_TTL_SECONDS,
            max_sessions=app_config.MAX_SESSIONS,
        ),
        "provider": provider if provider is not None else LLMClient(),
        "system_prompt": system_prompt if system_prompt is not None else load_system_prompt(),
    }

    app.register_blueprint(chat_bp)
    app.register_blueprint(export_bp)

    @app.route("/", methods=["GET"])
    def index():
        return send_from_directory(app.static_folder, "index.html")

    @app.route("/health", methods=["GET"])
    def health():
        """Health check endpoint."""
        deps = app.extensions[EXTENSION_KEY]
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sessions": len(deps["store"]),
            "model": getattr(deps["provider"], "model", None),
        })

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def unhandled_error(e):
        logger.exception(f"Unhandled error: {e!r}")
        return jsonify({"error": "Internal server error"}), 500

    return app


if __name__ == "__main__":
    print("=" * 60)
    print(f"  {app_config.ASSISTANT_NAME} Chat API Server")
    print("=" * 60)

    app = create_app()
    provider = app.extensions[EXTENSION_KEY]["provider"]
    logger.info(
        f"Starting on port {app_config.PORT} | provider={provider.provider} | "
        f"model={provider.model} | api_key={mask_secret(provider.api_key)}"
    )

    print(f"🚀 {app_config.ASSISTANT_NAME} running at http://localhost:{app_config.PORT}")
    print(f"   POST http://localhost:{app_config.PORT}/api/chat")
    print(f"   POST http://localhost:{app_config.PORT}/api/clear")
    print(f"   POST http://localhost:{app_config.PORT}/api/export/<summary|transcript>/<word|pdf>")
    print(f"   GET  http://localhost:{app_config.PORT}/health")
    print()

    app.run(
        host="0.0.0.0",
        port=app_config.PORT,
        debug=app_config.DEBUG,
    )
