from agent_stream.accumulator import ToolCallAccumulator
from agent_stream.adaptors.openai import OpenAICompatibleAdaptor
from agent_stream.agent import Agent, execute
from agent_stream.callbacks import AgentCallbacks, NullCallbacks
from agent_stream.config import (
    AgentConfig,
    ProviderSettings,
    resolve_provider,
    supports_agent_mode,
)
from agent_stream.exceptions import (
    AgentStreamError,
    AgentTimeoutError,
    ConfigurationError,
    ToolArgumentError,
    TransportError,
    UnknownToolError,
)
from agent_stream.execution import (
    Execution,
    ExecutionState,
    Message,
    ResponseStep,
    Step,
    ToolCall,
    ToolCallStep,
    ToolResult,
    ToolResultStep,
)
from agent_stream.model import CompletionClient, CompletionResult
from agent_stream.parsing import JsonParseResult, parse_json
from agent_stream.streaming import decode_stream
from agent_stream.tools import Tool, ToolExecutor, ToolInput, ToolRegistry

__all__ = [
    # Core
    "Agent",
    "execute",
    "AgentConfig",
    "ProviderSettings",
    "resolve_provider",
    "supports_agent_mode",
    "CompletionClient",
    "CompletionResult",
    "OpenAICompatibleAdaptor",
    "Tool",
    "ToolInput",
    "ToolExecutor",
    "ToolRegistry",
    # Callbacks
    "AgentCallbacks",
    "NullCallbacks",
    # Execution trace
    "Execution",
    "ExecutionState",
    "Message",
    "Step",
    "ToolCall",
    "ToolCallStep",
    "ToolResult",
    "ToolResultStep",
    "ResponseStep",
    # Streaming
    "decode_stream",
    "ToolCallAccumulator",
    "JsonParseResult",
    "parse_json",
    # Exceptions
    "AgentStreamError",
    "AgentTimeoutError",
    "ConfigurationError",
    "ToolArgumentError",
    "TransportError",
    "UnknownToolError",
]
