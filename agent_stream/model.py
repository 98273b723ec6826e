from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from agent_stream.execution import Message, ToolCall

FinishReason = Optional[Literal["stop", "tool_calls", "length"]]

ChunkHandler = Callable[[str], None]


@dataclass
class CompletionResult:
    text: Optional[str]
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: FinishReason = None


class CompletionClient:
    async def complete(
        self,
        messages: list[Message],
        tools: list[dict],
        on_chunk: Optional[ChunkHandler] = None,
    ) -> CompletionResult:
        """Run one model round-trip and return the finalized result.

        Text fragments are forwarded to ``on_chunk`` as they arrive.
        """
        raise NotImplementedError
