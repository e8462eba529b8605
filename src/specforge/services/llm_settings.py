"""LLM settings use case — active provider configuration and connection checks.

Holds the single active :class:`LlmConfiguration` in memory.  Clients only
ever see the API key masked; when they send the mask (or nothing) back for
the same provider and base URL, the stored key is reused.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from specforge.domain.entities import LlmConfiguration
from specforge.domain.exceptions import (
    ConnectionTestError,
    LlmError,
    NoActiveConfigurationError,
)
from specforge.domain.ports.llm_gateway import LlmGateway

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[LlmConfiguration], LlmGateway]


class LlmSettingsService:
    """Manage the active LLM configuration and build gateways from it.

    Parameters
    ----------
    factory:
        Builds a gateway adapter from a configuration.
    active:
        Initial active configuration, typically derived from the environment.
    """

    def __init__(
        self, factory: GatewayFactory, active: LlmConfiguration | None = None
    ) -> None:
        self._factory = factory
        self._active = active

    def get_active_config(self) -> LlmConfiguration | None:
        return self._active

    def update_config(self, config: LlmConfiguration) -> LlmConfiguration:
        """Replace the active configuration, keeping the stored key if masked."""
        self._active = self._resolve_key(config)
        logger.info(
            "Active LLM configuration set to %s/%s",
            self._active.provider.value,
            self._active.model,
        )
        return self._active

    def open_client(self) -> LlmGateway:
        """Build a gateway for the active configuration; caller must close it."""
        if self._active is None:
            raise NoActiveConfigurationError("no active llm configuration found")
        return self._factory(self._active)

    async def test_configuration(self, config: LlmConfiguration) -> None:
        """Check *config* with a ping generation."""
        try:
            async with self._gateway(self._resolve_key(config)) as gateway:
                await gateway.test_connection()
        except LlmError as exc:
            logger.warning("LLM connection test failed: %s", exc)
            raise ConnectionTestError(f"Connection failed: {exc}") from exc

    async def list_models(self, config: LlmConfiguration) -> list[str]:
        """Return the models advertised by the provider behind *config*."""
        async with self._gateway(self._resolve_key(config)) as gateway:
            return await gateway.list_models()

    # ── Internal helpers ────────────────────────────────────────────────

    def _resolve_key(self, config: LlmConfiguration) -> LlmConfiguration:
        """Fill a blank or masked key from the active config of the same endpoint.

        The stored key is only ever sent to the provider and base URL it was
        configured for.
        """
        if config.has_usable_key:
            return config
        if self._active is not None and _same_endpoint(config, self._active):
            return config.with_api_key(self._active.api_key)
        return config.with_api_key(None)

    @asynccontextmanager
    async def _gateway(self, config: LlmConfiguration) -> AsyncIterator[LlmGateway]:
        gateway = self._factory(config)
        try:
            yield gateway
        finally:
            await gateway.close()


def _same_endpoint(a: LlmConfiguration, b: LlmConfiguration) -> bool:
    def _url(config: LlmConfiguration) -> str:
        return (config.base_url or "").rstrip("/")

    return a.provider == b.provider and _url(a) == _url(b)
