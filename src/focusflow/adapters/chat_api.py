"""Chat-completions adapter - HTTP client for text generation."""

import logging

import requests

from focusflow.core.errors import EnrichmentError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"
SYSTEM_PROMPT = "You are a productivity assistant. Respond only with valid JSON."


class ChatCompletionsService:
    """
    OpenAI-compatible chat-completions adapter.

    Implements LLMService protocol. Every failure surfaces as EnrichmentError
    so callers can fall back without caring about the transport.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: int = 30,
        temperature: float = 0.5,
        max_tokens: int = 1000,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        if not self.api_key:
            raise EnrichmentError("No API key configured for the chat service")

        try:
            resp = self._session.post(
                f"{self.base_url}/v1/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    "temperature": self.temperature,
                    "max_tokens": self.max_tokens,
                    "stream": False,
                },
                timeout=self.timeout,
            )
        except requests.Timeout:
            raise EnrichmentError(f"Chat service timed out after {self.timeout}s")
        except requests.RequestException as e:
            raise EnrichmentError(f"Chat service request failed: {e}")

        if resp.status_code != 200:
            logger.error(f"Chat service returned {resp.status_code}: {resp.text}")
            raise EnrichmentError(f"Chat service returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            raise EnrichmentError("Chat service returned a non-JSON payload")

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message", "API error") if isinstance(error, dict) else str(error)
            raise EnrichmentError(f"Chat service error: {message}")

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise EnrichmentError("Chat service response missing choices[0].message.content")

        if not isinstance(content, str):
            raise EnrichmentError(f"Chat service returned non-text content: {type(content).__name__}")
        return content
