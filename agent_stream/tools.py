import json
import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from agent_stream.exceptions import ToolArgumentError, UnknownToolError

logger = logging.getLogger(__name__)


class ToolInput(BaseModel):
    """Subclass this for tool-specific input validation."""


class Tool:
    name: str
    description: str
    input_model: type[BaseModel]

    def schema(self) -> dict:
        """Return JSON schema from Pydantic model."""
        return self.input_model.model_json_schema()

    def definition(self) -> dict:
        """Return the function definition sent to the completion endpoint."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.schema(),
            },
        }

    async def execute(self, **kwargs) -> str:
        """Execute tool and return a JSON string.

        Pydantic validates inputs before this is called.
        """
        raise NotImplementedError


class ToolExecutor:
    """Boundary between the agent loop and whatever performs tool work."""

    def tool_names(self) -> list[str]:
        raise NotImplementedError

    def definitions(self, names: Optional[list[str]] = None) -> list[dict]:
        raise NotImplementedError

    async def execute(self, name: str, arguments: str) -> str:
        """Run tool ``name`` with a JSON ``arguments`` string; return a JSON string."""
        raise NotImplementedError


class ToolRegistry(ToolExecutor):
    """ToolExecutor backed by in-process Tool instances."""

    def __init__(self, tools: list[Tool]):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name '{tool.name}'")
            self._tools[tool.name] = tool

    def tool_names(self) -> list[str]:
        return list(self._tools)

    def definitions(self, names: Optional[list[str]] = None) -> list[dict]:
        return [
            tool.definition()
            for tool in self._tools.values()
            if names is None or tool.name in names
        ]

    def find(self, name: str) -> Tool:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name, self.tool_names())
        return tool

    async def execute(self, name: str, arguments: str) -> str:
        tool = self.find(name)

        try:
            raw = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as e:
            raise ToolArgumentError(f"Invalid arguments for '{name}': {e}") from e
        if not isinstance(raw, dict):
            raise ToolArgumentError(f"Arguments for '{name}' must be a JSON object")

        try:
            validated = tool.input_model(**raw)
        except ValidationError as e:
            raise ToolArgumentError(f"Validation error for '{name}': {e}") from e

        return await tool.execute(**validated.model_dump())
