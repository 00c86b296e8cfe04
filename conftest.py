"""
Pytest configuration and fixtures for the Survey Assistant tests.

Provides a scripted fake completion provider, a fresh SessionStore and a
Flask test client wired to both through create_app().
"""

import os
import tempfile

# Keep test runs from writing into the working tree's logs/ folder
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "survey_assistant_test_logs"))

import pytest
from typing import Dict, List, Optional

from llm_client import CompletionError
from session_store import SessionStore


class FakeProvider:
    """
    Stand-in for LLMClient.

    Replies are taken from `replies` in order (falling back to a numbered
    default); every call is recorded in `calls` for assertions.
    Set `fail_with` to an exception to make the next calls raise it.
    """

    model = "fake-model"

    def __init__(self, replies: Optional[List[str]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict] = []
        self.fail_with: Optional[Exception] = None

    def complete(self, system_prompt, messages, temperature=None, max_tokens=None):
        self.calls.append({
            "system_prompt": system_prompt,
            "messages": [dict(m) for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.fail_with is not None:
            raise self.fail_with
        if self.replies:
            return self.replies.pop(0)
        return f"reply {len(self.calls)}"


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def failing_provider():
    fake = FakeProvider()
    fake.fail_with = CompletionError("openai request failed: 503 Service Unavailable")
    return fake


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def app(store, provider):
    from server import create_app
    app = create_app(store=store, provider=provider, system_prompt="TEST SYSTEM PROMPT")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def send_chat(client, message, session_id="session_test"):
    return client.post("/api/chat", json={"message": message, "sessionId": session_id})
