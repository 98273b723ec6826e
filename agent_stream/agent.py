import asyncio
import json
import logging
import time
from typing import Optional

import httpx

from agent_stream.adaptors.openai import OpenAICompatibleAdaptor
from agent_stream.callbacks import AgentCallbacks, NullCallbacks
from agent_stream.config import AgentConfig, resolve_provider
from agent_stream.exceptions import (
    AgentTimeoutError,
    ToolArgumentError,
    UnknownToolError,
)
from agent_stream.execution import (
    Execution,
    ExecutionState,
    Message,
    ToolCall,
    ToolResult,
)
from agent_stream.model import CompletionClient
from agent_stream.parsing import parse_json
from agent_stream.tools import ToolExecutor

logger = logging.getLogger(__name__)


class Agent:
    """Tool-calling agent loop.

    Alternates between asking the model and running the tools it requests
    until the model answers, the iteration cap is reached, the time budget
    runs out or an error aborts the run.

    Args:
        config: Settings for this agent; never shared with other agents.
        tools: Executor that performs tool calls.
        client: Completion client. Defaults to an OpenAI-compatible streaming
            client for ``config.provider``.
        http_client: Shared ``httpx.AsyncClient`` for the default client.

    Raises:
        ConfigurationError: If no client is given and the provider cannot be
            resolved.
    """

    def __init__(
        self,
        config: AgentConfig,
        tools: ToolExecutor,
        client: Optional[CompletionClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.tools = tools
        if client is None:
            client = OpenAICompatibleAdaptor(
                resolve_provider(config),
                temperature=config.temperature,
                http_client=http_client,
            )
        self.client = client

    @property
    def enabled_tools(self) -> list[str]:
        names = self.tools.tool_names()
        if self.config.enabled_tools is None:
            return names
        return [name for name in names if name in self.config.enabled_tools]

    def run(
        self, messages: list[Message], callbacks: Optional[AgentCallbacks] = None
    ) -> Execution:
        """Run agent synchronously."""
        return asyncio.run(self.execute(messages, callbacks))

    async def execute(
        self, messages: list[Message], callbacks: Optional[AgentCallbacks] = None
    ) -> Execution:
        """Run the agent loop over ``messages`` and return the sealed Execution."""
        callbacks = callbacks or NullCallbacks()
        max_iterations = self.config.max_iterations
        timeout_ms = self.config.timeout_ms

        start_time = time.monotonic()
        execution = Execution()

        history: list[Message] = []
        if self.config.system_prompt:
            history.append(Message(role="system", content=self.config.system_prompt))
        history.extend(messages)

        enabled = self.enabled_tools
        definitions = self.tools.definitions(enabled)

        def on_chunk(text: str) -> None:
            self._notify(callbacks.on_chunk, text)

        try:
            while True:
                elapsed_ms = (time.monotonic() - start_time) * 1000
                if elapsed_ms > timeout_ms:
                    raise AgentTimeoutError(
                        f"Timeout: execution exceeded {timeout_ms}ms"
                    )

                if execution.iteration_count >= max_iterations:
                    execution.error = (
                        f"Maximum number of iterations reached ({max_iterations})"
                    )
                    execution.state = ExecutionState.MAX_ITERATIONS
                    logger.warning(execution.error)
                    break

                execution.iteration_count += 1
                self._notify(callbacks.on_iteration_start, execution.iteration_count)
                logger.info(
                    "Iteration %d/%d", execution.iteration_count, max_iterations
                )

                completion = await self.client.complete(
                    history, definitions, on_chunk=on_chunk
                )

                if completion.finish_reason == "stop" or not completion.tool_calls:
                    execution.final_response = completion.text or ""
                    execution.add_response(execution.final_response)
                    execution.success = True
                    execution.state = ExecutionState.SUCCESS
                    break

                history.append(
                    Message(
                        role="assistant",
                        content=completion.text,
                        tool_calls=completion.tool_calls,
                    )
                )

                # Sequential on purpose: tool messages must follow request order.
                for tool_call in completion.tool_calls:
                    self._notify(callbacks.on_tool_call, tool_call)
                    execution.add_tool_call(tool_call)

                    tool_start = time.monotonic()
                    result = await self._dispatch(tool_call, enabled)
                    duration_ms = (time.monotonic() - tool_start) * 1000

                    execution.add_tool_result(result, tool_call.name, duration_ms)
                    self._notify(callbacks.on_tool_result, result, tool_call.name)
                    execution.record_tool(tool_call.name)

                    history.append(
                        Message(
                            role="tool",
                            content=result.content,
                            tool_call_id=result.tool_call_id,
                        )
                    )

        except asyncio.CancelledError as e:
            execution.error = "Execution cancelled"
            execution.success = False
            execution.state = ExecutionState.ERROR
            logger.warning("Execution %s cancelled", execution.id)
            self._notify(callbacks.on_error, e)
            self._finish(execution, start_time, callbacks)
            raise

        except Exception as e:
            execution.error = str(e) or e.__class__.__name__
            execution.success = False
            execution.state = (
                ExecutionState.TIMEOUT
                if isinstance(e, AgentTimeoutError)
                else ExecutionState.ERROR
            )
            logger.error("Execution %s aborted: %s", execution.id, execution.error)
            self._notify(callbacks.on_error, e)

        self._finish(execution, start_time, callbacks)
        return execution

    def _finish(
        self, execution: Execution, start_time: float, callbacks: AgentCallbacks
    ) -> None:
        execution.total_duration_ms = (time.monotonic() - start_time) * 1000
        execution.seal()
        self._notify(callbacks.on_complete, execution)

        logger.info(
            "Execution finished in %.0fms, %d iteration(s), %d tool(s) used",
            execution.total_duration_ms,
            execution.iteration_count,
            len(execution.tools_used),
        )

    async def _dispatch(self, tool_call: ToolCall, enabled: list[str]) -> ToolResult:
        """Run one tool call; every failure becomes a JSON error payload."""
        name = tool_call.name

        if name not in enabled:
            return self._error_result(
                tool_call,
                f"Unknown tool: {name}",
                available_tools=enabled,
            )

        parsed = parse_json(tool_call.arguments)
        if not parsed.ok:
            return self._error_result(
                tool_call, f"Invalid arguments for '{name}': {parsed.error}"
            )
        if not isinstance(parsed.value, dict):
            return self._error_result(
                tool_call, f"Arguments for '{name}' must be a JSON object"
            )

        start = time.monotonic()
        try:
            content = await self.tools.execute(name, json.dumps(parsed.value))
        except UnknownToolError as e:
            return self._error_result(tool_call, str(e), available_tools=e.available)
        except ToolArgumentError as e:
            logger.warning("Tool %s rejected its arguments: %s", name, e)
            return self._error_result(tool_call, str(e))
        except Exception as e:
            logger.warning("Tool %s failed: %s", name, e)
            return self._error_result(tool_call, str(e) or e.__class__.__name__)

        logger.debug("Tool %s executed in %.0fms", name, (time.monotonic() - start) * 1000)
        return ToolResult(tool_call_id=tool_call.id, content=content)

    def _error_result(self, tool_call: ToolCall, error: str, **extra) -> ToolResult:
        payload = {"success": False, "error": error, **extra}
        return ToolResult(tool_call_id=tool_call.id, content=json.dumps(payload))

    def _notify(self, handler, *args) -> None:
        try:
            handler(*args)
        except Exception as e:
            # Log but don't fail execution
            name = getattr(handler, "__name__", repr(handler))
            logger.warning(f"Callback '{name}' raised exception: {e}")


async def execute(
    messages: list[Message],
    config: AgentConfig,
    callbacks: Optional[AgentCallbacks],
    tools: ToolExecutor,
    client: Optional[CompletionClient] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Execution:
    """Build an Agent for ``config`` and run it once."""
    agent = Agent(config, tools, client=client, http_client=http_client)
    return await agent.execute(messages, callbacks)
