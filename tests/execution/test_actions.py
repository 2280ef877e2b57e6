"""Tests for CallbackAction and DelayAction."""

from __future__ import annotations

import asyncio
import time

import pytest

from ufkit.core.protocols import Queueable
from ufkit.execution.actions import (
    CallbackAction,
    DelayAction,
    get_progress,
    get_progress_weight,
)
from ufkit.execution.cancellation import CancellationTokenSource


class FlagToken:
    """Token offering only the flag, no ``register``."""

    is_cancellation_requested = False


class TestCallbackAction:
    @pytest.mark.asyncio
    async def test_calls_callback(self):
        calls = []
        action = CallbackAction(lambda: calls.append(1))
        assert action.progress == 0.0
        assert await action.run() is True
        assert calls == [1]
        assert action.progress == 1.0

    @pytest.mark.asyncio
    async def test_awaits_coroutine_callback(self):
        calls = []

        async def _callback():
            await asyncio.sleep(0)
            calls.append("async")

        assert await CallbackAction(_callback).run() is True
        assert calls == ["async"]

    @pytest.mark.asyncio
    async def test_exception_propagates(self):
        def _boom():
            raise ValueError("boom")

        action = CallbackAction(_boom)
        with pytest.raises(ValueError, match="boom"):
            await action.run()
        assert action.progress == 0.0

    def test_is_queueable(self):
        assert isinstance(CallbackAction(lambda: None), Queueable)


class TestDelayAction:
    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            DelayAction(-1)

    @pytest.mark.asyncio
    async def test_waits(self):
        action = DelayAction(0.05)
        start = time.monotonic()
        assert await action.run() is True
        assert time.monotonic() - start >= 0.04
        assert action.progress == 1.0

    @pytest.mark.asyncio
    async def test_already_cancelled(self):
        source = CancellationTokenSource()
        source.cancel()
        action = DelayAction(10)
        assert await action.run(source.token) is False
        assert action.progress == 0.0

    @pytest.mark.asyncio
    async def test_cancel_during_wait_returns_early(self):
        source = CancellationTokenSource()
        action = DelayAction(10)
        task = asyncio.create_task(action.run(source.token))
        await asyncio.sleep(0.02)
        source.cancel()
        assert await asyncio.wait_for(task, timeout=1) is False
        assert action.progress == 0.0

    @pytest.mark.asyncio
    async def test_flag_only_token_completes(self):
        action = DelayAction(0)
        assert await action.run(FlagToken()) is True
        assert action.progress == 1.0

    @pytest.mark.asyncio
    async def test_flag_only_token_cancel_is_polled(self):
        token = FlagToken()
        action = DelayAction(10)
        task = asyncio.create_task(action.run(token))
        await asyncio.sleep(0.02)
        token.is_cancellation_requested = True
        assert await asyncio.wait_for(task, timeout=1) is False
        assert action.progress == 0.0


class TestProgressHelpers:
    def test_defaults_for_plain_objects(self):
        assert get_progress(object()) == 0.0
        assert get_progress_weight(object()) == 1.0

    def test_reads_attributes(self):
        action = DelayAction(0)
        assert get_progress_weight(action) == 1.0
        assert get_progress(action) == 0.0
