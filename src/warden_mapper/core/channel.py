"""Ordered single-producer/single-consumer channel between pipeline stages."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """The other side of the channel has gone away."""


class Channel(Generic[T]):
    """Unbounded FIFO on top of ``asyncio.Queue`` with an explicit close.

    Items sent before ``close()`` are still delivered; after they are drained,
    receivers get ``ChannelClosed``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosed("send on closed channel")
        self._queue.put_nowait(item)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def try_recv(self) -> T | None:
        """Return the next item, or None when nothing is pending."""
        try:
            item = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        if item is _CLOSED:
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosed("channel closed")
        return item  # type: ignore[return-value]

    async def recv(self) -> T:
        item = await self._queue.get()
        if item is _CLOSED:
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosed("channel closed")
        return item  # type: ignore[return-value]

    def __aiter__(self) -> Channel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.recv()
        except ChannelClosed:
            raise StopAsyncIteration from None
