"""
Application configuration module for the Survey Assistant chat service.
Contains environment variables, constants, and settings.
"""

import os
import re
from dotenv import load_dotenv

load_dotenv()

# ═══════════════════════════════════════════
# ENVIRONMENT VARIABLES
# ═══════════════════════════════════════════

PORT = int(os.getenv("PORT", 3000))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ═══════════════════════════════════════════
# ASSISTANT IDENTITY
# ═══════════════════════════════════════════

ASSISTANT_NAME = os.getenv("ASSISTANT_NAME", "Survey Assistant")
EXPORT_FILENAME_PREFIX = os.getenv(
    "EXPORT_FILENAME_PREFIX",
    re.sub(r"[^a-z0-9]+", "-", ASSISTANT_NAME.lower()).strip("-"),
)

# Optional path to a text file that replaces the built-in system prompt
SYSTEM_PROMPT_FILE = os.getenv("SYSTEM_PROMPT_FILE", "")

# ═══════════════════════════════════════════
# LLM PROVIDER CONFIGURATION
# ═══════════════════════════════════════════

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")  # openai, azure_openai, anthropic
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o")
LLM_API_KEY = os.getenv("LLM_API_KEY", "") or os.getenv("OPENAI_API_KEY", "")
LLM_API_BASE_URL = os.getenv("LLM_API_BASE_URL", "")
LLM_TIMEOUT_SECONDS = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# Chat turn settings
CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.7"))
CHAT_MAX_TOKENS = int(os.getenv("CHAT_MAX_TOKENS", "1000"))

# Summary export settings
SUMMARY_TEMPERATURE = float(os.getenv("SUMMARY_TEMPERATURE", "0.3"))
SUMMARY_MAX_TOKENS = int(os.getenv("SUMMARY_MAX_TOKENS", "1500"))

# Cost estimation (USD per 1000 tokens)
LLM_COST_PER_1K_INPUT = float(os.getenv("LLM_COST_PER_1K_INPUT", "0.0025"))
LLM_COST_PER_1K_OUTPUT = float(os.getenv("LLM_COST_PER_1K_OUTPUT", "0.01"))

# ═══════════════════════════════════════════
# SESSION STORE
# ═══════════════════════════════════════════

# 0 disables the limit
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "0"))
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "0"))

# ═══════════════════════════════════════════
# EXPORT DOCUMENTS
# ═══════════════════════════════════════════

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIMETYPE = "application/pdf"

# Truncation length for user text in log lines
LOG_MESSAGE_PREVIEW = 100
