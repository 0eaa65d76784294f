"""Tests for the pydantic-ai backed generation port."""

import asyncio

import pytest
from pydantic_ai.messages import ModelResponse, TextPart
from pydantic_ai.models.function import FunctionModel
from pydantic_ai.models.test import TestModel

from scriptflow.cancellation import CancellationToken
from scriptflow.contracts import HeadlineTopicScript, ItemSummary
from scriptflow.errors import GenerationError, GenerationTimeout, OperationCancelled
from scriptflow.generation import AgentGenerationPort


@pytest.mark.asyncio
async def test_returns_structured_output():
    port = AgentGenerationPort(TestModel())

    summary = await port.generate(
        "Summarize this", ItemSummary, instructions="You are an editor"
    )

    assert isinstance(summary, ItemSummary)


@pytest.mark.asyncio
async def test_model_name_string_is_accepted():
    port = AgentGenerationPort("test", name="script_writer")

    script = await port.generate("Write the script", HeadlineTopicScript)

    assert isinstance(script, HeadlineTopicScript)


@pytest.mark.asyncio
@pytest.mark.parametrize("output_retries", [0, 1, 3])
async def test_unstructured_reply_is_retried_then_raises(output_retries):
    attempts = []

    def reply_with_text(messages, info):
        attempts.append(messages)
        return ModelResponse(parts=[TextPart("just some prose")])

    port = AgentGenerationPort(
        FunctionModel(reply_with_text), output_retries=output_retries
    )

    with pytest.raises(GenerationError):
        await port.generate("Summarize this", ItemSummary)
    assert len(attempts) == output_retries + 1


@pytest.mark.asyncio
async def test_slow_model_raises_generation_timeout():
    async def stall(messages, info):
        await asyncio.sleep(5)
        return ModelResponse(parts=[TextPart("late")])

    port = AgentGenerationPort(FunctionModel(stall), timeout=0.05)

    with pytest.raises(GenerationTimeout):
        await port.generate("Summarize this", ItemSummary)


@pytest.mark.asyncio
async def test_cancel_token_stops_in_flight_call():
    started = asyncio.Event()

    async def stall(messages, info):
        started.set()
        await asyncio.sleep(5)
        return ModelResponse(parts=[TextPart("late")])

    token = CancellationToken()
    port = AgentGenerationPort(FunctionModel(stall))
    call = asyncio.ensure_future(
        port.generate("Summarize this", ItemSummary, cancel_token=token)
    )

    await asyncio.wait_for(started.wait(), 1)
    token.cancel("sibling failed")

    with pytest.raises(OperationCancelled) as exc_info:
        await asyncio.wait_for(call, 1)
    assert exc_info.value.reason == "sibling failed"


@pytest.mark.asyncio
async def test_cancelled_token_skips_the_call():
    calls = []

    def reply(messages, info):
        calls.append(messages)
        return ModelResponse(parts=[TextPart("never")])

    token = CancellationToken()
    token.cancel("run aborted")
    port = AgentGenerationPort(FunctionModel(reply))

    with pytest.raises(OperationCancelled):
        await port.generate("Summarize this", ItemSummary, cancel_token=token)
    assert calls == []
