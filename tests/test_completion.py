"""
Tests for the single-assignment login completion
"""

import asyncio

import pytest

from oauth.completion import OneShot


class TestOneShot:
    @pytest.mark.asyncio
    async def test_first_resolve_wins(self):
        completion = OneShot()

        assert completion.resolve("tokens") is True
        assert completion.resolve("other") is False
        assert completion.reject(RuntimeError("late")) is False
        assert await completion.wait() == "tokens"

    @pytest.mark.asyncio
    async def test_first_reject_wins(self):
        completion = OneShot()

        assert completion.reject(ValueError("bad")) is True
        assert completion.resolve("tokens") is False
        with pytest.raises(ValueError, match="bad"):
            await completion.wait()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_keeps_outcome(self):
        completion = OneShot()
        waiter = asyncio.ensure_future(completion.wait())
        await asyncio.sleep(0)
        waiter.cancel()

        assert completion.resolve("tokens") is True
        assert await completion.wait() == "tokens"
        assert completion.done
