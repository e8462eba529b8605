"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

import asyncio
from typing import Protocol


class LlmGateway(Protocol):
    """Uniform contract over every LLM provider adapter.

    Cancellation and deadlines come from the calling task: cancel it, or wrap
    the call in ``asyncio.timeout``.  Adapters install no timeouts of their
    own and never retry.
    """

    async def generate(self, prompt: str) -> str:
        """Return the full text completion of the first candidate."""
        ...

    async def stream_generate(self, prompt: str, sink: asyncio.Queue[str]) -> None:
        """Put completion fragments into *sink* in arrival order.

        The sink belongs to the caller; adapters only ``put`` into it.
        """
        ...

    async def test_connection(self) -> None:
        """Run a minimal ``"ping"`` generation; raise on failure."""
        ...

    async def list_models(self) -> list[str]:
        """Return the model identifiers the provider advertises."""
        ...

    async def close(self) -> None:
        """Release underlying client resources."""
        ...
