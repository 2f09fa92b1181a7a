"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

from typing import Callable, List

import pytest

from treecache.cache.index import KeyIndex
from treecache.cache.scheduler import ExpirationScheduler
from treecache.cache.store import HierarchicalStore
from treecache.cache.tree import ValueTree


# ============================================================================
# Simulated Clock
# ============================================================================

class ManualTimer:
    """Handle returned by ManualScheduler.schedule()."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(ExpirationScheduler):
    """
    Scheduler driven by a simulated clock.

    Timers only fire when a test calls advance(), in due-time order.

    Usage:
        scheduler.advance(1.0)   # fire everything due within the next second
    """

    def __init__(self):
        self.now = 0.0
        self.timers: List[ManualTimer] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers that were not cancelled."""
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    def fire_cancelled(self) -> None:
        """Run callbacks of cancelled timers, as if cancel() lost a race."""
        stale = [t for t in self.timers if t.cancelled]
        for timer in stale:
            self.timers.remove(timer)
            timer.callback()

    @property
    def pending(self) -> int:
        """Number of armed, non-cancelled timers."""
        return sum(1 for t in self.timers if not t.cancelled)


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a scheduler with a simulated clock."""
    return ManualScheduler()


@pytest.fixture
def store(scheduler: ManualScheduler) -> HierarchicalStore:
    """Create a fresh store with no default TTL on the simulated clock."""
    return HierarchicalStore(default_ttl=0, debug=False, scheduler=scheduler)


@pytest.fixture
def ttl_store(scheduler: ManualScheduler) -> HierarchicalStore:
    """Create a store with a 5 second default TTL on the simulated clock."""
    return HierarchicalStore(default_ttl=5, debug=False, scheduler=scheduler)


@pytest.fixture
def debug_store(scheduler: ManualScheduler) -> HierarchicalStore:
    """Create a store with debug tracing enabled."""
    return HierarchicalStore(default_ttl=0, debug=True, scheduler=scheduler)


# ============================================================================
# Structure Fixtures
# ============================================================================

@pytest.fixture
def index() -> KeyIndex:
    """Create an empty key index."""
    return KeyIndex()


@pytest.fixture
def tree() -> ValueTree:
    """Create an empty value tree."""
    return ValueTree()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# Configure asyncio mode for pytest-asyncio
pytest_plugins = ['pytest_asyncio']
