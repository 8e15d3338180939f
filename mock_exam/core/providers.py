# mock_exam/core/providers.py
"""
Provider clients for external question generation.

Each client issues exactly one blocking request per call and returns the raw
completion text. Every failure mode (non-2xx, transport error, timeout, empty
completion) is raised as ProviderError so the orchestrator can treat them alike.
"""

import logging
from typing import List, Optional

import groq
import openai
import requests
from groq import Groq

from .config import config
from .exceptions import ProviderError

logger = logging.getLogger(__name__)


class ProviderClient:
    """Base class for a content-generation provider"""

    name = "provider"

    def __init__(self, api_key: str, models: List[str], timeout: Optional[int] = None):
        self.api_key = api_key
        self.models = list(models)
        self.timeout = timeout or config.PROVIDER_TIMEOUT

    def complete(self, system: str, user: str, model: str,
                 max_tokens: int, temperature: float) -> str:
        raise NotImplementedError

    def _require_text(self, text: Optional[str], model: str) -> str:
        if not text or not text.strip():
            raise ProviderError(self.name, model, "empty completion")
        return text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(models={self.models})"


class AnthropicProvider(ProviderClient):
    """Anthropic Messages API over plain HTTP"""

    name = "anthropic"

    def __init__(self, api_key: str, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[int] = None):
        super().__init__(api_key, [model or config.ANTHROPIC_MODEL], timeout)
        self.base_url = (base_url or config.ANTHROPIC_BASE_URL).rstrip("/")

    def complete(self, system: str, user: str, model: str,
                 max_tokens: int, temperature: float) -> str:
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system,
            "messages": [{"role": "user", "content": user}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": config.ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

        try:
            response = requests.post(
                f"{self.base_url}/v1/messages",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError(self.name, model, f"request timed out: {e}")
        except requests.exceptions.RequestException as e:
            raise ProviderError(self.name, model, f"transport error: {e}")

        if not response.ok:
            raise ProviderError(
                self.name, model, response.text[:300] or response.reason,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError(self.name, model, "response body is not JSON",
                                status_code=response.status_code)

        blocks = data.get("content") if isinstance(data, dict) else None
        text = None
        if isinstance(blocks, list):
            for block in blocks:
                if isinstance(block, dict) and block.get("type") == "text":
                    text = block.get("text")
                    break

        return self._require_text(text, model)


class OpenRouterProvider(ProviderClient):
    """OpenRouter through its OpenAI-compatible chat completions endpoint"""

    name = "openrouter"

    def __init__(self, api_key: str, models: Optional[List[str]] = None,
                 base_url: Optional[str] = None, timeout: Optional[int] = None):
        super().__init__(api_key, models or config.OPENROUTER_MODELS, timeout)
        self.client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url or config.OPENROUTER_BASE_URL,
            timeout=self.timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": config.OPENROUTER_REFERER,
                "X-Title": config.OPENROUTER_TITLE,
            },
        )

    def complete(self, system: str, user: str, model: str,
                 max_tokens: int, temperature: float) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            raise ProviderError(self.name, model, str(e), status_code=e.status_code)
        except openai.OpenAIError as e:
            raise ProviderError(self.name, model, f"transport error: {e}")

        if not completion.choices:
            raise ProviderError(self.name, model, "no choices returned")

        return self._require_text(completion.choices[0].message.content, model)


class GroqProvider(ProviderClient):
    """Groq chat completions"""

    name = "groq"

    def __init__(self, api_key: str, model: Optional[str] = None,
                 timeout: Optional[int] = None):
        super().__init__(api_key, [model or config.GROQ_MODEL], timeout)
        self.client = Groq(api_key=api_key, timeout=self.timeout, max_retries=0)

    def complete(self, system: str, user: str, model: str,
                 max_tokens: int, temperature: float) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_completion_tokens=max_tokens,
            )
        except groq.APIStatusError as e:
            raise ProviderError(self.name, model, str(e), status_code=e.status_code)
        except groq.GroqError as e:
            raise ProviderError(self.name, model, f"transport error: {e}")

        if not completion.choices:
            raise ProviderError(self.name, model, "no choices returned")

        return self._require_text(completion.choices[0].message.content, model)


def build_configured_providers() -> List[ProviderClient]:
    """Providers with credentials present, primary first"""
    providers: List[ProviderClient] = []

    if config.ANTHROPIC_API_KEY:
        providers.append(AnthropicProvider(config.ANTHROPIC_API_KEY))
    if config.OPENROUTER_API_KEY:
        providers.append(OpenRouterProvider(config.OPENROUTER_API_KEY))
    if config.GROQ_API_KEY:
        providers.append(GroqProvider(config.GROQ_API_KEY))

    if providers:
        logger.info(f"✅ Configured providers: {[p.name for p in providers]}")
    else:
        logger.info("🔧 No provider credentials configured - local generation only")

    return providers
