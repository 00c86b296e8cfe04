"""
Conversation service: one chat turn and the summary call used by exports.

`provider` is anything with complete(system_prompt, messages, temperature=,
max_tokens=) -> str; in production that is llm_client.LLMClient.
"""

from typing import List

import app_config
from chat_logger import get_logger
from models import Message
from prompts import SUMMARY_SYSTEM_PROMPT, build_summary_request
from session_store import SessionStore

logger = get_logger()


def run_chat_turn(
    store: SessionStore,
    provider,
    session_id: str,
    user_message: str,
    system_prompt: str,
) -> str:
    """
    Append the user message, ask the provider for a reply, append the reply.

    The user message is stored before the provider is called and is NOT
    removed when the call fails, so a retry replays it twice. The reply goes
    onto the history captured before the call; if the session is cleared or
    evicted meanwhile, the reply is dropped with it.
    """
    history = store.get_or_create(session_id)
    history.append(Message.user(user_message))

    reply = provider.complete(
        system_prompt,
        [m.to_dict() for m in history],
        temperature=app_config.CHAT_TEMPERATURE,
        max_tokens=app_config.CHAT_MAX_TOKENS,
    )

    history.append(Message.assistant(reply))
    logger.info(f"Chat turn complete | session={session_id} | history_len={len(history)}")
    return reply


def summarize_history(provider, history: List[Message]) -> str:
    """Ask the provider for a condensed write-up of the conversation."""
    return provider.complete(
        SUMMARY_SYSTEM_PROMPT,
        [{"role": "user", "content": build_summary_request(history)}],
        temperature=app_config.SUMMARY_TEMPERATURE,
        max_tokens=app_config.SUMMARY_MAX_TOKENS,
    )
