"""Unit tests for the Flask <-> asyncio bridge."""

import asyncio

import pytest
from linguavision.api.handlers import BackgroundLoop


class TestBackgroundLoop:
    """Test BackgroundLoop."""

    def test_run_returns_result(self):
        loop = BackgroundLoop().start()
        try:
            async def add(a, b):
                await asyncio.sleep(0)
                return a + b

            assert loop.is_running
            assert loop.run(add(2, 3), timeout=5) == 5
        finally:
            loop.stop()

    def test_run_propagates_exceptions(self):
        loop = BackgroundLoop().start()
        try:
            async def boom():
                raise ValueError("boom")

            with pytest.raises(ValueError):
                loop.run(boom(), timeout=5)
        finally:
            loop.stop()

    def test_tasks_outlive_the_submitting_call(self):
        """A task scheduled by one call keeps running for the next."""
        loop = BackgroundLoop().start()
        try:
            async def schedule():
                return asyncio.ensure_future(asyncio.sleep(0.01, result="done"))

            task = loop.run(schedule(), timeout=5)

            async def wait(t):
                return await t

            assert loop.run(wait(task), timeout=5) == "done"
        finally:
            loop.stop()

    def test_submit_before_start(self):
        loop = BackgroundLoop()
        coroutine = asyncio.sleep(0)
        try:
            with pytest.raises(RuntimeError):
                loop.submit(coroutine)
        finally:
            coroutine.close()

    def test_start_is_idempotent_and_stop(self):
        loop = BackgroundLoop()
        assert loop.start() is loop.start()
        loop.stop()
        assert not loop.is_running
        loop.stop()
