"""Shared fixtures: a controllable clock and helpers that drive the scheduler."""

from __future__ import annotations

import asyncio
import random

import pytest

from effectors import LoggingPresentation, TileEnvironment
from engine import EventLog, TickScheduler


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.time = start

    def __call__(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds


@pytest.fixture
def clock():
    """Create a fake clock starting at 0."""
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    """Create a scheduler reading the fake clock."""
    return TickScheduler(clock=clock)


@pytest.fixture
def event_log():
    """Create an event log with the default capacity."""
    return EventLog()


@pytest.fixture
def environment():
    """Create a small tile environment."""
    return TileEnvironment(bounds_min=(-10.0, -10.0), bounds_max=(10.0, 10.0))


@pytest.fixture
def presentation():
    """Create a recording presentation."""
    return LoggingPresentation()


@pytest.fixture
def rng():
    """Create a seeded random source."""
    return random.Random(1234)


async def _settle() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    """Let every routine resumed by a tick run up to its next suspension."""
    return _settle


@pytest.fixture
def pump(clock, scheduler):
    """
    Advance the clock and tick the scheduler.

    Usage:
        await pump(ticks=5, step_ms=50)
    """

    async def _pump(ticks: int = 1, step_ms: float = 50.0) -> None:
        for _ in range(ticks):
            clock.advance(step_ms / 1000.0)
            scheduler.tick()
            await _settle()

    return _pump


@pytest.fixture
def drive(pump):
    """
    Pump until a task finishes.

    Usage:
        result = await drive(task)
    """

    async def _drive(task: asyncio.Task, step_ms: float = 50.0, max_ticks: int = 2000):
        await _settle()
        for _ in range(max_ticks):
            if task.done():
                break
            await pump(1, step_ms)
        assert task.done(), f"Task did not finish within {max_ticks} ticks"
        return task.result()

    return _drive
