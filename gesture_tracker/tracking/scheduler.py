"""Cooperative next-frame scheduling on an asyncio event loop."""

import asyncio
from typing import Callable, Optional


class FrameScheduler:
    """
    Runs a callback on the next turn of the event loop.

    Each cycle schedules its successor, so the loop yields to other tasks
    (window events, key polling) between frames and never builds a backlog.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request(self, callback: Callable[[], None]) -> asyncio.Handle:
        return self.loop.call_soon(callback)

    def cancel(self, handle: asyncio.Handle) -> None:
        handle.cancel()
