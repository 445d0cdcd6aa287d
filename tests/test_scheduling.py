import asyncio
import logging

import discord
import pytest

from reactpager.scheduling import InactivityTimer, create_task

pytestmark = pytest.mark.anyio


class TestCreateTask:
    async def test_logs_unexpected_errors(self, caplog):
        async def boom():
            raise RuntimeError("boom")

        with caplog.at_level(logging.DEBUG, logger="reactpager.scheduling"):
            task = create_task(boom(), name="boom-task")
            await asyncio.gather(task, return_exceptions=True)
            await asyncio.sleep(0)

        assert "Error in task boom-task" in caplog.text

    async def test_suppressed_errors_are_quiet(self, caplog, create_http_exception):
        async def fail():
            raise create_http_exception(discord.NotFound, status=404)

        with caplog.at_level(logging.ERROR, logger="reactpager.scheduling"):
            task = create_task(fail(), suppressed_exceptions=(discord.HTTPException,))
            await asyncio.gather(task, return_exceptions=True)
            await asyncio.sleep(0)

        assert not caplog.records

    async def test_returns_result(self):
        async def value():
            return 42

        assert await create_task(value()) == 42


class TestInactivityTimer:
    async def test_fires_once(self):
        fired = asyncio.Event()
        calls = []

        async def on_timeout():
            calls.append(1)
            fired.set()

        timer = InactivityTimer(0.01, on_timeout)
        timer.start()
        await asyncio.wait_for(fired.wait(), timeout=1)
        await asyncio.sleep(0.03)

        assert calls == [1]
        assert not timer.active

    async def test_reset_pushes_deadline(self):
        async def on_timeout():
            pass

        timer = InactivityTimer(10, on_timeout)
        timer.start()
        before = timer.deadline
        await asyncio.sleep(0.01)
        timer.reset()

        assert timer.deadline > before
        timer.cancel()

    async def test_cancel_prevents_firing(self):
        calls = []

        async def on_timeout():
            calls.append(1)

        timer = InactivityTimer(0.01, on_timeout)
        timer.start()
        timer.cancel()
        timer.reset()
        await asyncio.sleep(0.03)

        assert calls == []
        assert not timer.active
