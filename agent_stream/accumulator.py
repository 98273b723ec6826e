"""Reassembly of streamed tool-call fragments."""

import logging
from dataclasses import dataclass
from typing import Any

from agent_stream.execution import ToolCall

logger = logging.getLogger(__name__)


@dataclass
class PendingToolCall:
    index: int
    id: str = ""
    type: str = "function"
    name: str = ""
    arguments: str = ""


class ToolCallAccumulator:
    """Accumulate tool calls from streaming ``delta`` objects.

    OpenAI-compatible providers send each tool call as a run of fragments
    sharing an integer ``index``. The first fragment carries ``id``, ``type``
    and the start of ``function.name``/``function.arguments``; later ones
    carry more text to append.

    ``finalize`` returns calls in the order their index was first seen, not
    sorted by index.
    """

    def __init__(self):
        self._pending: dict[int, PendingToolCall] = {}

    def merge(self, delta: dict[str, Any]) -> None:
        """Process ``delta.tool_calls`` from a single stream event.

        Fragments that are not objects are skipped.
        """
        fragments = delta.get("tool_calls")
        if not fragments:
            return
        if not isinstance(fragments, list):
            logger.debug("Skipping malformed tool_calls delta: %r", fragments)
            return

        for fragment in fragments:
            if not isinstance(fragment, dict):
                logger.debug("Skipping malformed tool-call fragment: %r", fragment)
                continue
            index = fragment.get("index", 0)
            if not isinstance(index, int):
                logger.debug("Skipping tool-call fragment with bad index: %r", index)
                continue
            function = fragment.get("function") or {}
            if not isinstance(function, dict):
                function = {}
            fragment_id = _text(fragment.get("id"))
            name = _text(function.get("name"))
            arguments = _text(function.get("arguments"))
            pending = self._pending.get(index)

            if pending is None:
                self._pending[index] = PendingToolCall(
                    index=index,
                    id=fragment_id,
                    type=_text(fragment.get("type")) or "function",
                    name=name,
                    arguments=arguments,
                )
                continue

            if fragment_id:
                pending.id = fragment_id
            pending.name += name
            pending.arguments += arguments

    def finalize(self) -> list[ToolCall]:
        """Convert pending fragments into ToolCalls and reset the accumulator."""
        tool_calls = [
            ToolCall(
                id=pending.id,
                name=pending.name,
                arguments=pending.arguments,
                type=pending.type,
            )
            for pending in self._pending.values()
        ]
        self._pending.clear()
        return tool_calls

    def __len__(self) -> int:
        return len(self._pending)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""
