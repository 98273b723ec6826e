from typing import Optional


class AgentStreamError(Exception):
    """Base exception for agent-stream errors."""


class ConfigurationError(AgentStreamError):
    """Raised when a provider is unsupported or its credentials are missing."""


class TransportError(AgentStreamError):
    """Raised when the completion endpoint answers non-2xx or the network fails."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ToolArgumentError(AgentStreamError):
    """Raised when tool arguments are not valid JSON or fail validation."""


class UnknownToolError(AgentStreamError):
    """Raised when the model calls a tool that isn't registered or enabled."""

    def __init__(self, name: str, available: list[str]):
        super().__init__(f"Unknown tool: {name}")
        self.name = name
        self.available = available


class AgentTimeoutError(AgentStreamError):
    """Raised when an execution exceeds its wall-clock budget."""
