"""
Unit tests for the TickScheduler.
"""

import asyncio
import logging

import pytest

from engine import TickScheduler


class TestTicking:
    """Tests for tick counting and next_tick."""

    def test_tick_counts(self, scheduler):
        """Test each tick bumps the counter."""
        assert scheduler.tick_count == 0
        assert scheduler.tick() == 1
        assert scheduler.tick() == 2
        assert scheduler.tick_count == 2

    def test_now_reads_clock(self, clock, scheduler):
        """Test the scheduler reports the injected clock."""
        clock.advance(1.5)
        assert scheduler.now == 1.5

    @pytest.mark.asyncio
    async def test_next_tick_resumes_on_tick(self, scheduler, settle):
        """Test a routine waiting on next_tick resumes after tick()."""
        task = asyncio.create_task(scheduler.next_tick())
        await settle()
        assert not task.done()

        scheduler.tick()
        await settle()
        assert task.result() is True

    @pytest.mark.asyncio
    async def test_next_tick_after_close(self, scheduler):
        """Test next_tick returns False immediately once closed."""
        await scheduler.close()
        assert await scheduler.next_tick() is False


class TestRunTimed:
    """Tests for progress-driven timed actions."""

    @pytest.mark.asyncio
    async def test_progress_sequence(self, scheduler, pump, settle):
        """Test progress starts at 0, follows the clock, and ends at exactly 1."""
        progress: list[float] = []
        task = scheduler.spawn(scheduler.run_timed(200, progress.append))
        await settle()
        assert progress == [0.0]

        await pump(ticks=1, step_ms=50)
        assert progress[-1] == pytest.approx(0.25)

        await pump(ticks=1, step_ms=50)
        assert progress[-1] == pytest.approx(0.5)

        await pump(ticks=3, step_ms=50)
        assert task.result() is True
        assert progress[-1] == 1.0
        assert progress.count(1.0) == 1
        assert progress == sorted(progress)

    @pytest.mark.asyncio
    async def test_zero_duration_completes_without_ticks(self, scheduler):
        """Test a zero-length action reports 0 then 1 and returns at once."""
        progress: list[float] = []
        assert await scheduler.run_timed(0, progress.append) is True
        assert progress == [0.0, 1.0]

    @pytest.mark.asyncio
    async def test_overshooting_tick_clamps_to_one(self, scheduler, pump, settle):
        """Test a long tick jumps straight to the final callback."""
        progress: list[float] = []
        task = scheduler.spawn(scheduler.run_timed(100, progress.append))
        await settle()

        await pump(ticks=1, step_ms=500)
        assert task.result() is True
        assert progress == [0.0, 1.0]

    @pytest.mark.asyncio
    async def test_close_mid_run_stops_callbacks(self, scheduler, pump, settle):
        """Test closing the scheduler ends an action without reaching 1."""
        progress: list[float] = []
        task = asyncio.create_task(scheduler.run_timed(1000, progress.append))
        await settle()
        await pump(ticks=2, step_ms=50)

        await scheduler.close()
        await settle()

        assert task.result() is False
        assert 1.0 not in progress


class TestWait:
    """Tests for tick-based waiting."""

    @pytest.mark.asyncio
    async def test_wait_spans_ticks(self, scheduler, pump, settle):
        """Test wait only finishes once the duration has elapsed."""
        task = scheduler.spawn(scheduler.wait(150))
        await settle()

        await pump(ticks=2, step_ms=50)
        assert not task.done()

        await pump(ticks=2, step_ms=50)
        assert task.result() is True

    @pytest.mark.asyncio
    async def test_zero_wait(self, scheduler):
        """Test a zero wait returns immediately."""
        assert await scheduler.wait(0) is True


class TestSpawnAndClose:
    """Tests for routine tracking and teardown."""

    @pytest.mark.asyncio
    async def test_spawn_tracks_until_done(self, scheduler, pump, settle):
        """Test spawned routines are tracked while running."""
        task = scheduler.spawn(scheduler.wait(50), name="short")
        assert scheduler.active_tasks == 1
        assert task.get_name() == "short"

        await settle()
        await pump(ticks=2, step_ms=50)
        await settle()
        assert task.done()
        assert scheduler.active_tasks == 0

    @pytest.mark.asyncio
    async def test_close_cancels_routines(self, scheduler, pump, settle):
        """Test close cancels tracked routines without raising."""
        progress: list[float] = []
        task = scheduler.spawn(scheduler.run_timed(10_000, progress.append))
        await settle()
        await pump(ticks=1)

        await scheduler.close()

        assert task.done()
        assert scheduler.is_closed
        assert scheduler.active_tasks == 0
        assert 1.0 not in progress

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, scheduler):
        """Test closing twice is harmless."""
        await scheduler.close()
        await scheduler.close()
        assert scheduler.is_closed

    @pytest.mark.asyncio
    async def test_tick_after_close_does_nothing(self, scheduler):
        """Test ticks stop counting once closed."""
        scheduler.tick()
        await scheduler.close()
        assert scheduler.tick() == 1

    @pytest.mark.asyncio
    async def test_spawn_after_close_raises(self, scheduler):
        """Test spawning on a closed scheduler fails loudly."""
        await scheduler.close()
        with pytest.raises(RuntimeError):
            scheduler.spawn(scheduler.wait(10))

    @pytest.mark.asyncio
    async def test_failing_routine_is_logged(self, scheduler, caplog, settle):
        """Test an exception inside a routine is logged, not lost."""

        async def broken():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="engine.scheduler"):
            scheduler.spawn(broken(), name="broken")
            await settle()

        assert "Routine 'broken' failed: boom" in caplog.text
        assert scheduler.active_tasks == 0

    def test_default_clock(self):
        """Test the scheduler falls back to a real monotonic clock."""
        scheduler = TickScheduler()
        first = scheduler.now
        assert scheduler.now >= first
