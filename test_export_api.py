"""
Test the /api/export/<kind>/<fmt> endpoint.

Covers:
- Empty-history precondition (400, never a file)
- Transcript and summary exports in Word and PDF
- Summary call settings and prompt
- Generic 500 on provider or builder failure
- Unknown kind / format
"""

from io import BytesIO
from unittest.mock import patch

import pytest
from docx import Document

import app_config
from conftest import send_chat
from llm_client import CompletionError
from models import ExportFormat
from prompts import SUMMARY_SYSTEM_PROMPT


EXPORT_URLS = [
    "/api/export/summary/word",
    "/api/export/summary/pdf",
    "/api/export/transcript/word",
    "/api/export/transcript/pdf",
]


def _docx_text(data: bytes) -> str:
    return "\n".join(p.text for p in Document(BytesIO(data)).paragraphs)


class TestPrecondition:

    @pytest.mark.parametrize("url", EXPORT_URLS)
    def test_no_history_is_client_error(self, client, provider, store, url):
        resp = client.post(url, json={"sessionId": "never-chatted"})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "No conversation to export"}
        assert provider.calls == []
        assert "never-chatted" not in store

    @pytest.mark.parametrize("url", EXPORT_URLS)
    def test_missing_session_id(self, client, url):
        resp = client.post(url, json={})
        assert resp.status_code == 400

    def test_cleared_session_cannot_export(self, client):
        send_chat(client, "hi")
        client.post("/api/clear", json={"sessionId": "session_test"})
        resp = client.post("/api/export/transcript/pdf", json={"sessionId": "session_test"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("url", [
        "/api/export/minutes/word",
        "/api/export/summary/html",
    ])
    def test_unknown_kind_or_format(self, client, url):
        resp = client.post(url, json={"sessionId": "session_test"})
        assert resp.status_code == 404
        assert "error" in resp.get_json()


class TestTranscriptExport:

    def test_transcript_word(self, client, provider):
        provider.replies = ["## Checks\n- **Bias** check"]
        send_chat(client, "Do you support X?")
        resp = client.post("/api/export/transcript/word", json={"sessionId": "session_test"})

        assert resp.status_code == 200
        assert resp.mimetype == app_config.DOCX_MIMETYPE
        assert "attachment" in resp.headers["Content-Disposition"]
        assert f"{app_config.EXPORT_FILENAME_PREFIX}-transcript.docx" in resp.headers["Content-Disposition"]

        text = _docx_text(resp.data)
        assert f"{app_config.ASSISTANT_NAME} - Full Transcript" in text
        assert "Generated on" in text
        assert "You:" in text
        assert "Do you support X?" in text
        assert f"{app_config.ASSISTANT_NAME}:" in text
        assert "Bias check" in text
        # Transcript export never calls the provider again
        assert len(provider.calls) == 1

    @pytest.mark.parametrize("url", ["/api/export/transcript/word", "/api/export/transcript/pdf"])
    def test_pasted_control_characters_export(self, client, url):
        send_chat(client, "Q1\x0bsoft break from Word")
        resp = client.post(url, json={"sessionId": "session_test"})
        assert resp.status_code == 200

    def test_transcript_pdf(self, client):
        send_chat(client, "hello")
        resp = client.post("/api/export/transcript/pdf", json={"sessionId": "session_test"})
        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert resp.data.startswith(b"%PDF")
        assert f"{app_config.EXPORT_FILENAME_PREFIX}-transcript.pdf" in resp.headers["Content-Disposition"]


class TestSummaryExport:

    def test_summary_word_uses_provider_summary(self, client, provider):
        provider.replies = ["assistant answer", "# Research question\nDo people support X?"]
        send_chat(client, "my topic")
        resp = client.post("/api/export/summary/word", json={"sessionId": "session_test"})

        assert resp.status_code == 200
        text = _docx_text(resp.data)
        assert f"{app_config.ASSISTANT_NAME} - Summary" in text
        assert "Research question" in text
        assert "Do people support X?" in text

        summary_call = provider.calls[-1]
        assert summary_call["system_prompt"] == SUMMARY_SYSTEM_PROMPT
        assert summary_call["temperature"] == app_config.SUMMARY_TEMPERATURE
        assert summary_call["max_tokens"] == app_config.SUMMARY_MAX_TOKENS
        assert summary_call["messages"] == [{
            "role": "user",
            "content": "Please summarize this conversation:\n\nUser: my topic\n\nAssistant: assistant answer",
        }]

    def test_summary_pdf(self, client, provider):
        provider.replies = ["answer", "Summary text"]
        send_chat(client, "topic")
        resp = client.post("/api/export/summary/pdf", json={"sessionId": "session_test"})
        assert resp.status_code == 200
        assert resp.data.startswith(b"%PDF")
        assert f"{app_config.EXPORT_FILENAME_PREFIX}-summary.pdf" in resp.headers["Content-Disposition"]

    def test_summary_provider_failure(self, client, provider):
        send_chat(client, "topic")
        provider.fail_with = CompletionError("rate limited")
        resp = client.post("/api/export/summary/word", json={"sessionId": "session_test"})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to export summary"}


class TestBuilderFailure:

    def test_builder_exception_returns_no_file(self, client):
        send_chat(client, "topic")

        def broken(title, sections):
            raise RuntimeError("layout failed halfway")

        from routes import export as export_routes
        with patch.dict(export_routes._BUILDERS, {ExportFormat.PDF: (broken, app_config.PDF_MIMETYPE)}):
            resp = client.post("/api/export/transcript/pdf", json={"sessionId": "session_test"})

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to export transcript"}
        assert not resp.data.startswith(b"%PDF")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
