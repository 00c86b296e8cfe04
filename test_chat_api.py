"""
Test the /api/chat, /api/clear, /api/session and /health endpoints
through the Flask test client with a fake completion provider.
"""

import pytest

from conftest import send_chat
from models import Message, Role


class TestChatTurn:

    def test_chat_returns_reply_and_html(self, client, provider):
        provider.replies = ["**Balanced** wording"]
        resp = send_chat(client, "Review my question")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["message"] == "**Balanced** wording"
        assert data["html"] == "<p><strong>Balanced</strong> wording</p>"
        assert data["sessionId"] == "session_test"

    def test_prompt_is_system_plus_full_history(self, client, provider):
        send_chat(client, "first")
        send_chat(client, "second")
        last_call = provider.calls[-1]
        assert last_call["system_prompt"] == "TEST SYSTEM PROMPT"
        assert last_call["messages"] == [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "reply 1"},
            {"role": "user", "content": "second"},
        ]

    def test_chat_uses_chat_settings(self, client, provider):
        import app_config
        send_chat(client, "hi")
        assert provider.calls[0]["temperature"] == app_config.CHAT_TEMPERATURE
        assert provider.calls[0]["max_tokens"] == app_config.CHAT_MAX_TOKENS

    def test_sequential_turns_preserve_order(self, client, store):
        for i in range(3):
            send_chat(client, f"q{i}")
        history = store.get("session_test")
        assert [(m.role, m.content) for m in history] == [
            (Role.USER, "q0"), (Role.ASSISTANT, "reply 1"),
            (Role.USER, "q1"), (Role.ASSISTANT, "reply 2"),
            (Role.USER, "q2"), (Role.ASSISTANT, "reply 3"),
        ]

    def test_message_appended_verbatim(self, client, store):
        send_chat(client, "  spaced <b>raw</b>  ")
        assert store.get("session_test")[0] == Message.user("  spaced <b>raw</b>  ")

    def test_missing_session_id_gets_generated(self, client, store):
        resp = client.post("/api/chat", json={"message": "hello"})
        assert resp.status_code == 200
        session_id = resp.get_json()["sessionId"]
        assert session_id.startswith("session_")
        assert session_id in store

    def test_invalid_json_body(self, client, provider):
        resp = client.post("/api/chat", data="not json", content_type="application/json")
        assert resp.status_code == 400
        assert "error" in resp.get_json()
        assert provider.calls == []

    def test_non_string_message_rejected(self, client, store):
        resp = client.post("/api/chat", json={"message": 42, "sessionId": "s"})
        assert resp.status_code == 400
        assert "s" not in store


class TestProviderFailure:

    @pytest.fixture
    def provider(self, failing_provider):
        return failing_provider

    def test_failure_returns_generic_error(self, client):
        resp = send_chat(client, "hello")
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to get response"}

    def test_user_message_kept_after_failure(self, client, store):
        send_chat(client, "hello")
        send_chat(client, "hello")
        # No rollback: the retried turn is stored twice
        assert store.get("session_test") == [Message.user("hello"), Message.user("hello")]


class TestClear:

    def test_clear_drops_history(self, client, store, provider):
        send_chat(client, "first")
        resp = client.post("/api/clear", json={"sessionId": "session_test"})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True}
        assert "session_test" not in store

        send_chat(client, "after clear")
        assert provider.calls[-1]["messages"] == [{"role": "user", "content": "after clear"}]

    def test_clear_during_provider_call_drops_reply(self, client, store, provider):
        original_complete = provider.complete

        def clearing_complete(*args, **kwargs):
            store.clear("session_test")
            return original_complete(*args, **kwargs)

        provider.complete = clearing_complete
        resp = send_chat(client, "in flight")
        assert resp.status_code == 200
        assert store.get("session_test") is None

        provider.complete = original_complete
        send_chat(client, "next turn")
        assert provider.calls[-1]["messages"] == [{"role": "user", "content": "next turn"}]

    def test_clear_twice_and_unknown_session(self, client):
        for _ in range(2):
            resp = client.post("/api/clear", json={"sessionId": "nobody"})
            assert resp.status_code == 200
            assert resp.get_json() == {"success": True}

    def test_clear_without_body(self, client):
        resp = client.post("/api/clear")
        assert resp.status_code == 200


class TestSessionAndHealth:

    def test_get_session_history(self, client):
        send_chat(client, "hi")
        resp = client.get("/api/session/session_test")
        assert resp.status_code == 200
        assert resp.get_json()["messages"] == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "reply 1"},
        ]

    def test_unknown_session_404(self, client):
        resp = client.get("/api/session/missing")
        assert resp.status_code == 404

    def test_health(self, client):
        send_chat(client, "hi")
        data = client.get("/health").get_json()
        assert data["status"] == "ok"
        assert data["sessions"] == 1
        assert data["model"] == "fake-model"

    def test_cors_headers(self, client):
        resp = client.post(
            "/api/clear",
            json={"sessionId": "x"},
            headers={"Origin": "http://example.com"},
        )
        assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "http://example.com")
        assert resp.headers.get("Access-Control-Allow-Credentials") == "true"

    def test_index_page_served(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"/api/chat" in resp.data
        resp.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
