"""
Expiration Scheduler Module

Schedulers arm one-shot timers for TTL expiration. Each call to
schedule() returns a handle with a cancel() method, so the store can
replace or drop a pending expiration when a key is set again, deleted
or cleared.

Two implementations are provided:
- ThreadingScheduler: one threading.Timer per task (default, needs no event loop)
- AsyncioScheduler: loop.call_later() on an asyncio event loop

Timers fire "at least" after the requested delay; there is no upper
bound on the lateness.
"""

import asyncio
import threading
from typing import Callable, Optional


class ExpirationScheduler:
    """Base class for TTL timer backends."""

    def schedule(self, delay: float, callback: Callable[[], None]):
        """
        Run callback once after delay seconds.

        Args:
            delay: Seconds to wait (always positive when called by the store)
            callback: Zero-argument function to invoke

        Returns:
            A handle exposing cancel()
        """
        raise NotImplementedError


class ThreadingScheduler(ExpirationScheduler):
    """
    Scheduler backed by threading.Timer.

    Timers run as daemon threads so pending expirations never keep the
    interpreter alive at exit.
    """

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler(ExpirationScheduler):
    """
    Scheduler backed by an asyncio event loop.

    Without an explicit loop, set() must be called from a coroutine
    running on the loop that should own the timers.

    Usage:
        store = HierarchicalStore(scheduler=AsyncioScheduler())
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            return asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
