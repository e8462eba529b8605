"""Build gateway adapters from provider configurations."""

from __future__ import annotations

import logging

from specforge.domain.entities import LlmConfiguration, LlmProvider
from specforge.domain.exceptions import UnsupportedProviderError
from specforge.domain.ports.llm_gateway import LlmGateway
from specforge.infrastructure.llm.gemini_adapter import GeminiAdapter
from specforge.infrastructure.llm.ollama_adapter import OllamaAdapter
from specforge.infrastructure.llm.openai_adapter import OpenAIAdapter

logger = logging.getLogger(__name__)


def create_gateway(config: LlmConfiguration) -> LlmGateway:
    """Return the adapter matching ``config.provider``.

    Raises
    ------
    UnsupportedProviderError
        When no adapter exists for the provider.
    ClientConstructionError
        When the Gemini SDK client cannot be created.
    """
    provider = config.provider
    logger.debug("Creating %s gateway for model %s", provider, config.model)

    if provider == LlmProvider.OPENAI:
        return OpenAIAdapter(
            api_key=config.api_key or "",
            model=config.model,
            base_url=config.base_url,
        )
    if provider == LlmProvider.OLLAMA:
        return OllamaAdapter(base_url=config.base_url or "", model=config.model)
    if provider == LlmProvider.GEMINI:
        return GeminiAdapter(api_key=config.api_key or "", model=config.model)

    name = provider.value if isinstance(provider, LlmProvider) else provider
    raise UnsupportedProviderError(f"unsupported LLM provider: {name}")
