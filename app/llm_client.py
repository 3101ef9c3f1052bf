"""
LLM client abstraction layer to support multiple providers.

This module provides a unified interface for the text-generation providers
(Cohere's generate endpoint, OpenAI and Ollama chat models) so the rest of
the application only ever calls `generate(prompt, ...)`.

Every provider error is translated into NetworkError / ValidationError so
callers can handle one taxonomy.
"""

from __future__ import annotations
import getpass
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

import ollama
import openai
import requests
from openai import OpenAI

import config
from credentials import CredentialStore, default_store, ensure_api_key
from errors import NetworkError, ValidationError

logger = logging.getLogger(__name__)


class LLMResponse:
    """Unified response object for LLM responses."""

    def __init__(self, text: str, raw: Dict[str, Any] | None = None):
        self.text = text
        self.raw = raw or {}


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(self, model: str | None = None):
        self.model = model

    @abstractmethod
    def generate(self, prompt: str, max_tokens: int, temperature: float) -> LLMResponse:
        """Send a single prompt to the provider and return its completion."""


class CohereClient(LLMClient):
    """Cohere `generate` endpoint over plain HTTP."""

    def __init__(self, api_key: str, model: str | None = None, url: str | None = None):
        super().__init__(model or config.get_model_for_provider("cohere"))
        if not api_key:
            raise ValueError("A Cohere API key is required for CohereClient")
        self.api_key = api_key
        self.url = url or config.COHERE_API_URL
        self.session = requests.Session()

    def generate(self, prompt: str, max_tokens: int, temperature: float) -> LLMResponse:
        body = {
            "model": self.model,
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stop_sequences": [],
            "return_likelihoods": "NONE",
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.debug("POST %s (model=%s, max_tokens=%d)", self.url, self.model, max_tokens)
        try:
            response = self.session.post(self.url, json=body, headers=headers)
        except requests.RequestException as e:
            raise NetworkError(f"Cohere API unreachable: {e}") from e

        if not response.ok:
            raise NetworkError(f"Cohere API error: {response.status_code}", response.status_code)

        try:
            data = response.json()
            text = data["generations"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ValidationError("Cohere API returned no generations") from e
        return LLMResponse(text, data)


class OpenAIClient(LLMClient):
    """OpenAI client implementation."""

    def __init__(self, api_key: str, model: str | None = None):
        super().__init__(model or config.get_model_for_provider("openai"))
        if not api_key:
            raise ValueError("An OpenAI API key is required for OpenAIClient")
        self.client = OpenAI(api_key=api_key)

    def generate(self, prompt: str, max_tokens: int, temperature: float) -> LLMResponse:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            raise NetworkError(f"OpenAI API error: {e.status_code}", e.status_code) from e
        except openai.OpenAIError as e:
            raise NetworkError(f"OpenAI API unreachable: {e}") from e

        return LLMResponse(response.choices[0].message.content or "")


class OllamaClient(LLMClient):
    """Ollama client implementation."""

    def __init__(self, model: str | None = None, host: str | None = None):
        super().__init__(model or config.get_model_for_provider("ollama"))
        self.client = ollama.Client(host=host or config.OLLAMA_BASE_URL)

    def generate(self, prompt: str, max_tokens: int, temperature: float) -> LLMResponse:
        try:
            response = self.client.chat(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                options={"temperature": temperature, "num_predict": max_tokens},
            )
        except ollama.ResponseError as e:
            raise NetworkError(f"Ollama error: {e.error}", e.status_code) from e
        except ConnectionError as e:
            raise NetworkError(f"Ollama unreachable: {e}") from e

        return LLMResponse(response.message.content or "")


def get_llm_client(provider: str | None = None, api_key: str | None = None) -> LLMClient:
    """Factory function to get the appropriate LLM client based on configuration."""
    provider = (provider or config.LLM_PROVIDER).lower()

    if provider == "cohere":
        return CohereClient(api_key)
    elif provider == "openai":
        return OpenAIClient(api_key)
    elif provider == "ollama":
        return OllamaClient()
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")


def provider_needs_key(provider: str | None = None) -> bool:
    return (provider or config.LLM_PROVIDER).lower() != "ollama"


def client_from_credentials(
    store: CredentialStore | None = None,
    provider: str | None = None,
    prompt: Callable[[str], str] | None = getpass.getpass,
) -> LLMClient:
    """Build the configured client, asking for an API key if none is stored."""
    if not provider_needs_key(provider):
        return get_llm_client(provider)
    key = ensure_api_key(store or default_store(provider), prompt)
    return get_llm_client(provider, api_key=key)
