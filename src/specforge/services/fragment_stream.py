"""Bridge a sink-based streaming gateway into an async iterator.

``LlmGateway.stream_generate`` pushes fragments into a caller-owned queue.
HTTP handlers want to ``async for`` over them instead, so this module runs
the producer as a task and relays the queue until the producer finishes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

from specforge.domain.ports.llm_gateway import LlmGateway

logger = logging.getLogger(__name__)

_END = object()


async def stream_fragments(
    gateway: LlmGateway, prompt: str, *, maxsize: int = 16
) -> AsyncIterator[str]:
    """Yield completion fragments for *prompt* in arrival order.

    Errors raised by the gateway surface from the iterator after every
    fragment produced before them.  Closing the iterator early cancels the
    producer.
    """
    sink: asyncio.Queue[Any] = asyncio.Queue(maxsize=maxsize)

    async def _produce() -> None:
        await gateway.stream_generate(prompt, sink)
        await sink.put(_END)

    producer = asyncio.create_task(_produce())
    getter: asyncio.Task[Any] | None = None
    try:
        while True:
            getter = asyncio.create_task(sink.get())
            await asyncio.wait({getter, producer}, return_when=asyncio.FIRST_COMPLETED)

            if getter.done():
                item = getter.result()
                if item is _END:
                    break
                yield item
                continue

            # Producer is finished; whatever it queued must still go out first.
            getter.cancel()
            while not sink.empty():
                item = sink.get_nowait()
                if item is _END:
                    break
                yield item
            exc = producer.exception()
            if exc is not None:
                raise exc
            break
        await producer
    finally:
        if getter is not None and not getter.done():
            getter.cancel()
        if not producer.done():
            logger.debug("Cancelling fragment producer before completion")
            producer.cancel()
            await asyncio.gather(producer, return_exceptions=True)
