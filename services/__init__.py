"""Services package - conversation logic and export document builders."""

from .conversation import run_chat_turn, summarize_history
from .documents import (
    build_word_document,
    build_pdf_document,
    transcript_sections,
    summary_sections,
)

__all__ = [
    "run_chat_turn",
    "summarize_history",
    "build_word_document",
    "build_pdf_document",
    "transcript_sections",
    "summary_sections",
]
