"""Base interface for structured text generation backends."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Optional, Type, TypeVar

if TYPE_CHECKING:
    from ..cancellation import CancellationToken

OutputT = TypeVar("OutputT")


class GenerationPort(metaclass=abc.ABCMeta):
    """Abstract text generation capability returning schema-validated output."""

    @abc.abstractmethod
    async def generate(
        self,
        prompt: str,
        output_type: Type[OutputT],
        *,
        instructions: Optional[str] = None,
        cancel_token: Optional["CancellationToken"] = None,
    ) -> OutputT:
        """Generate a value of ``output_type`` for ``prompt``.

        Args:
            prompt: User prompt sent to the model.
            output_type: Expected output shape; the result is validated against it.
            instructions: Optional system instructions for this call only.
            cancel_token: Token of the owning run. Implementations must stop
                the call and raise ``OperationCancelled`` once it fires.

        Raises:
            GenerationError: On provider errors, timeouts or invalid output.
        """
        raise NotImplementedError
