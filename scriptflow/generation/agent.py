"""Generation backend built on pydantic-ai agents."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Type, TypeVar, Union

from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, UnexpectedModelBehavior, UserError
from pydantic_ai.models import Model

from ..cancellation import CancellationToken
from ..constants import DEFAULT_OUTPUT_RETRIES
from ..errors import GenerationError, GenerationTimeout
from .base import GenerationPort

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT")


class AgentGenerationPort(GenerationPort):
    """Run one pydantic-ai agent per call with ``output_type`` as its structured output."""

    def __init__(
        self,
        model: Union[str, Model],
        timeout: Optional[float] = None,
        output_retries: int = DEFAULT_OUTPUT_RETRIES,
        name: Optional[str] = None,
    ) -> None:
        self.model = model
        self.timeout = timeout
        self.output_retries = output_retries
        self.name = name or "scriptflow"

    def _build_agent(
        self, output_type: Type[OutputT], instructions: Optional[str]
    ) -> Agent:
        return Agent(
            self.model,
            output_type=output_type,
            instructions=instructions,
            retries=self.output_retries,
            name=self.name,
        )

    async def generate(
        self,
        prompt: str,
        output_type: Type[OutputT],
        *,
        instructions: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> OutputT:
        agent = self._build_agent(output_type, instructions)
        call = agent.run(prompt)
        if self.timeout is not None:
            call = asyncio.wait_for(call, self.timeout)

        logger.debug(
            f"Generating {getattr(output_type, '__name__', output_type)} with agent {self.name}"
        )
        try:
            if cancel_token is not None:
                result = await cancel_token.guard(call)
            else:
                result = await call
        except asyncio.TimeoutError as e:
            raise GenerationTimeout(
                f"Generation with agent {self.name} timed out after {self.timeout}s"
            ) from e
        except UnexpectedModelBehavior as e:
            raise GenerationError(
                f"Agent {self.name} returned output that does not match "
                f"{getattr(output_type, '__name__', output_type)}: {e}"
            ) from e
        except (AgentRunError, UserError) as e:
            raise GenerationError(f"Agent {self.name} failed: {e}") from e

        return result.output
