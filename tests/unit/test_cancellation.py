import asyncio

import pytest

from scriptflow.cancellation import CancellationToken
from scriptflow.errors import OperationCancelled


@pytest.mark.asyncio
async def test_guard_returns_result():
    token = CancellationToken()

    async def work():
        return 42

    assert await token.guard(work()) == 42


@pytest.mark.asyncio
async def test_guard_stops_work_when_token_fires():
    token = CancellationToken()
    started = asyncio.Event()
    stopped = []

    async def work():
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            stopped.append(True)
            raise

    guarded = asyncio.ensure_future(token.guard(work()))
    await started.wait()
    token.cancel("stop")

    with pytest.raises(OperationCancelled) as exc_info:
        await guarded
    assert exc_info.value.reason == "stop"
    assert stopped == [True]


@pytest.mark.asyncio
async def test_cancelled_token_refuses_new_work():
    token = CancellationToken()
    token.cancel("first")
    token.cancel("second")

    assert token.cancelled
    assert token.reason == "first"
    with pytest.raises(OperationCancelled):
        token.raise_if_cancelled()
