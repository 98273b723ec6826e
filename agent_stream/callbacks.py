"""Callback interface for observing an agent execution.

Subclass ``AgentCallbacks`` and implement the required methods;
``on_iteration_start`` is optional. Callbacks are plain synchronous calls
made from the execution's control flow.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agent_stream.execution import Execution, ToolCall, ToolResult


class AgentCallbacks(ABC):
    @abstractmethod
    def on_chunk(self, text: str) -> None:
        """A text fragment arrived from the model."""

    @abstractmethod
    def on_tool_call(self, tool_call: "ToolCall") -> None:
        """The model requested a tool; called before it runs."""

    @abstractmethod
    def on_tool_result(self, result: "ToolResult", tool_name: str) -> None:
        """A tool finished (successfully or with an error payload)."""

    @abstractmethod
    def on_complete(self, execution: "Execution") -> None:
        """The execution reached a terminal state. Called exactly once."""

    @abstractmethod
    def on_error(self, error: Exception) -> None:
        """The execution was aborted by an exception."""

    def on_iteration_start(self, iteration: int) -> None:
        pass


class NullCallbacks(AgentCallbacks):
    """Callbacks that ignore every event."""

    def on_chunk(self, text: str) -> None:
        pass

    def on_tool_call(self, tool_call: "ToolCall") -> None:
        pass

    def on_tool_result(self, result: "ToolResult", tool_name: str) -> None:
        pass

    def on_complete(self, execution: "Execution") -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass
