"""
Completion provider: a thin HTTP client over chat-completion APIs.

The rest of the app only calls complete(system_prompt, messages) and gets
text back or a CompletionError. Provider, model and credentials come from
app_config so the same handler serves every deployment.
"""

import time
import requests
from typing import Any, Dict, List, Optional

from chat_logger import get_logger, mask_secret
import app_config

logger = get_logger()

DEFAULT_API_URLS = {
    "openai": "https://api.openai.com/v1/chat/completions",
    "anthropic": "https://api.anthropic.com/v1/messages",
}

ANTHROPIC_VERSION = "2023-06-01"


class CompletionError(Exception):
    """Raised when the provider cannot produce a reply (network, auth, quota, bad payload)."""


class LLMClient:
    """
    Abstraction over LLM providers, configurable via environment variables.

    Supported providers:
    - openai: OpenAI Chat Completions API
    - azure_openai: Azure OpenAI deployment (LLM_API_BASE_URL required)
    - anthropic: Anthropic Messages API
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.provider = (provider or app_config.LLM_PROVIDER).lower()
        self.model = model or app_config.LLM_MODEL
        self.api_key = app_config.LLM_API_KEY if api_key is None else api_key
        self.timeout = timeout or app_config.LLM_TIMEOUT_SECONDS

        if self.provider == "azure_openai":
            self.api_url = api_url or app_config.LLM_API_BASE_URL
            if not self.api_url:
                raise ValueError("azure_openai requires LLM_API_BASE_URL")
        elif self.provider in DEFAULT_API_URLS:
            self.api_url = api_url or app_config.LLM_API_BASE_URL or DEFAULT_API_URLS[self.provider]
        else:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")

        self.http = session or requests.Session()

    def __repr__(self) -> str:
        return (
            f"LLMClient(provider={self.provider!r}, model={self.model!r}, "
            f"api_key={mask_secret(self.api_key)!r})"
        )

    def complete(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Return the assistant reply text for system_prompt + messages."""
        return self.chat_completion(system_prompt, messages, temperature, max_tokens)["content"]

    def chat_completion(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Send a chat completion request to the configured provider.

        Args:
            system_prompt: System instructions
            messages: Conversation so far as [{"role", "content"}, ...]
            temperature: Sampling temperature (defaults to CHAT_TEMPERATURE)
            max_tokens: Reply token cap (defaults to CHAT_MAX_TOKENS)

        Returns:
            Dict with content, input_tokens, output_tokens, total_tokens,
            model and latency_ms.

        Raises:
            CompletionError: If the request fails or the payload is malformed
        """
        if temperature is None:
            temperature = app_config.CHAT_TEMPERATURE
        if max_tokens is None:
            max_tokens = app_config.CHAT_MAX_TOKENS

        start_time = time.time()
        try:
            if self.provider == "anthropic":
                result = self._anthropic_completion(system_prompt, messages, temperature, max_tokens)
            else:
                result = self._openai_style_completion(system_prompt, messages, temperature, max_tokens)
        except requests.RequestException as e:
            logger.error(f"LLM API call failed | provider={self.provider} | error={e}")
            raise CompletionError(f"{self.provider} request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"LLM API returned unexpected payload | provider={self.provider} | error={e!r}")
            raise CompletionError(f"{self.provider} returned an unexpected response") from e

        result["latency_ms"] = int((time.time() - start_time) * 1000)
        self._log_usage(result)
        return result

    def _post(self, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self.http.post(
            self.api_url,
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def _openai_style_completion(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Dict[str, Any]:
        """
        OpenAI-compatible API call (works for OpenAI and Azure OpenAI).
        """
        headers = {"Content-Type": "application/json"}
        if self.provider == "azure_openai":
            headers["api-key"] = self.api_key
        else:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        data = self._post(headers, payload)
        content = data["choices"][0]["message"]["content"]
        if content is None:
            raise ValueError("empty message content")
        usage = data.get("usage") or {}

        return {
            "content": content,
            "input_tokens": usage.get("prompt_tokens", 0),
            "output_tokens": usage.get("completion_tokens", 0),
            "total_tokens": usage.get("total_tokens", 0),
            "model": data.get("model", self.model),
        }

    def _anthropic_completion(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Dict[str, Any]:
        """
        Anthropic Messages API call. The system prompt is a top-level field.
        """
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

        payload = {
            "model": self.model,
            "system": system_prompt,
            "messages": list(messages),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        data = self._post(headers, payload)
        content = "".join(
            part.get("text", "") for part in data["content"] if part.get("type", "text") == "text"
        )
        usage = data.get("usage") or {}

        return {
            "content": content,
            "input_tokens": usage.get("input_tokens", 0),
            "output_tokens": usage.get("output_tokens", 0),
            "total_tokens": usage.get("input_tokens", 0) + usage.get("output_tokens", 0),
            "model": data.get("model", self.model),
        }

    def _log_usage(self, result: Dict[str, Any]) -> None:
        input_cost = (result["input_tokens"] / 1000) * app_config.LLM_COST_PER_1K_INPUT
        output_cost = (result["output_tokens"] / 1000) * app_config.LLM_COST_PER_1K_OUTPUT
        logger.info(
            f"LLM API call | provider={self.provider} | model={result['model']} | "
            f"input_tokens={result['input_tokens']} | "
            f"output_tokens={result['output_tokens']} | "
            f"total_tokens={result['total_tokens']} | "
            f"latency_ms={result['latency_ms']} | "
            f"cost_estimate=${input_cost + output_cost:.4f}"
        )
