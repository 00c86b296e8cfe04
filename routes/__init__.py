"""
HTTP routes as Flask Blueprints.

Handlers never import the session store or provider directly; create_app()
registers them under app.extensions[EXTENSION_KEY] and the helpers below
read them back for the current request.
"""

from flask import current_app

EXTENSION_KEY = "survey_assistant"


def get_store():
    return current_app.extensions[EXTENSION_KEY]["store"]


def get_provider():
    return current_app.extensions[EXTENSION_KEY]["provider"]


def get_system_prompt() -> str:
    return current_app.extensions[EXTENSION_KEY]["system_prompt"]


from .chat import chat_bp  # noqa: E402
from .export import export_bp  # noqa: E402

__all__ = ["chat_bp", "export_bp", "get_store", "get_provider", "get_system_prompt", "EXTENSION_KEY"]
