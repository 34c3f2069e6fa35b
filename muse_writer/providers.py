"""Route model selections to DeepSeek, Qwen, Kimi, OpenRouter or Gemini."""

import time
from typing import Any, Dict, NamedTuple, Optional

from loguru import logger

from .config import Config, ProviderConfig

OPENROUTER_HEADERS = {
    "HTTP-Referer": "http://localhost:3000",
    "X-Title": "MuseAI",
}


class ProviderError(Exception):
    """Base error for model routing problems."""


class UnsupportedModelError(ProviderError, ValueError):
    pass


class ProviderNotConfiguredError(ProviderError):
    pass


class ModelRoute(NamedTuple):
    provider: str
    model: str


def resolve_model(selection: str) -> ModelRoute:
    """Map a user-facing model selection onto (provider, vendor model id)."""
    selection = (selection or "").strip()

    if selection.startswith("Google"):
        if "pro" in selection.lower():
            return ModelRoute("gemini", "gemini-2.0-pro-exp-02-05")
        return ModelRoute("gemini", "gemini-2.0-flash")
    if selection == "DeepSeek R1":
        return ModelRoute("deepseek", "deepseek-reasoner")
    if selection == "DeepSeek V3.2":
        return ModelRoute("deepseek", "deepseek-chat")
    if selection.startswith("Qwen"):
        return ModelRoute("qwen", "qwen-max" if "Max" in selection else "qwen-plus")
    if selection == "Kimi":
        return ModelRoute("kimi", "moonshot-v1-8k")
    if selection.startswith("OpenRouter"):
        if "Opus 4.6" in selection:
            return ModelRoute("openrouter", "anthropic/claude-opus-4.6")
        return ModelRoute("openrouter", "anthropic/claude-4.5-sonnet")

    raise UnsupportedModelError(f"Unsupported model: {selection}")


class ModelRouter:
    """Send chat prompts to whichever provider a selection resolves to.

    Vendor clients are created on first use and reused afterwards.
    """

    def __init__(self, config: Config):
        self.config = config
        self._clients: Dict[str, Any] = {}

    def _provider_config(self, provider: str) -> ProviderConfig:
        provider_config = getattr(self.config.providers, provider)
        if not provider_config.configured:
            raise ProviderNotConfiguredError(f"{provider} API key not configured.")
        return provider_config

    def _openai_client(self, provider: str):
        if provider not in self._clients:
            provider_config = self._provider_config(provider)
            from openai import OpenAI

            kwargs = {"api_key": provider_config.api_key, "base_url": provider_config.base_url}
            if provider == "openrouter":
                kwargs["default_headers"] = OPENROUTER_HEADERS
            self._clients[provider] = OpenAI(**kwargs)
        return self._clients[provider]

    def _gemini_client(self):
        if "gemini" not in self._clients:
            provider_config = self._provider_config("gemini")
            from google import genai

            self._clients["gemini"] = genai.Client(api_key=provider_config.api_key)
        return self._clients["gemini"]

    def complete(
        self,
        system: str,
        prompt: str,
        selection: str,
        temperature: Optional[float] = None,
    ) -> str:
        route = resolve_model(selection)
        # A model pinned in config wins over the selection's default
        model = getattr(self.config.providers, route.provider).model or route.model

        logger.info(f"Calling {route.provider}:{model}")
        start = time.time()

        if route.provider == "gemini":
            result = self._call_gemini(system, prompt, model, temperature)
        else:
            result = self._call_openai(route.provider, system, prompt, model, temperature)

        logger.info(
            f"{route.provider}:{model} returned {len(result)} chars in {time.time() - start:.1f}s"
        )
        return result

    def _call_openai(
        self,
        provider: str,
        system: str,
        prompt: str,
        model: str,
        temperature: Optional[float],
    ) -> str:
        client = self._openai_client(provider)
        kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        response = client.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""

    def _call_gemini(
        self,
        system: str,
        prompt: str,
        model: str,
        temperature: Optional[float],
    ) -> str:
        client = self._gemini_client()
        from google.genai import types

        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system,
                temperature=temperature,
            ),
        )
        return response.text or ""
