import time
import uuid
from dataclasses import FrozenInstanceError, dataclass, field
from enum import Enum
from typing import Literal, Optional, Union


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: str  # raw JSON string as streamed by the provider
    type: str = "function"


@dataclass
class ToolResult:
    tool_call_id: str
    content: str  # JSON payload


@dataclass
class Message:
    role: str  # "system" | "user" | "assistant" | "tool"
    content: Optional[str]
    tool_call_id: Optional[str] = None
    tool_calls: Optional[list[ToolCall]] = None  # For assistant messages with tool calls


@dataclass
class ToolCallStep:
    step_number: int
    tool_call: ToolCall
    timestamp: float = field(default_factory=time.time)
    type: Literal["tool_call"] = "tool_call"


@dataclass
class ToolResultStep:
    step_number: int
    tool_result: ToolResult
    tool_name: str
    duration_ms: float
    timestamp: float = field(default_factory=time.time)
    type: Literal["tool_result"] = "tool_result"


@dataclass
class ResponseStep:
    step_number: int
    content: str
    timestamp: float = field(default_factory=time.time)
    type: Literal["response"] = "response"


Step = Union[ToolCallStep, ToolResultStep, ResponseStep]


class ExecutionState(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    MAX_ITERATIONS = "max_iterations"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass
class Execution:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    steps: list[Step] = field(default_factory=list)
    final_response: Optional[str] = None
    total_duration_ms: float = 0.0
    tools_used: list[str] = field(default_factory=list)
    iteration_count: int = 0
    success: bool = False
    error: Optional[str] = None
    state: ExecutionState = ExecutionState.RUNNING
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise FrozenInstanceError(f"cannot assign to field '{name}' of a sealed Execution")
        super().__setattr__(name, value)

    def add_tool_call(self, tool_call: ToolCall) -> ToolCallStep:
        step = ToolCallStep(step_number=self._next_step_number(), tool_call=tool_call)
        self.steps.append(step)
        return step

    def add_tool_result(
        self, result: ToolResult, tool_name: str, duration_ms: float
    ) -> ToolResultStep:
        step = ToolResultStep(
            step_number=self._next_step_number(),
            tool_result=result,
            tool_name=tool_name,
            duration_ms=duration_ms,
        )
        self.steps.append(step)
        return step

    def add_response(self, content: str) -> ResponseStep:
        step = ResponseStep(step_number=self._next_step_number(), content=content)
        self.steps.append(step)
        return step

    def record_tool(self, name: str) -> None:
        if name not in self.tools_used:
            self.tools_used.append(name)

    def seal(self) -> None:
        """Freeze the execution; steps and tools_used become tuples."""
        self.steps = tuple(self.steps)
        self.tools_used = tuple(self.tools_used)
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _next_step_number(self) -> int:
        return len(self.steps) + 1
