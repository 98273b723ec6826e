"""OpenAI-compatible streaming adaptor for agent-stream."""

import logging
from typing import Optional

import httpx

from agent_stream.accumulator import ToolCallAccumulator
from agent_stream.config import ProviderSettings
from agent_stream.exceptions import TransportError
from agent_stream.execution import Message, ToolCall
from agent_stream.model import ChunkHandler, CompletionClient, CompletionResult
from agent_stream.streaming import decode_stream

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 60.0


class OpenAICompatibleAdaptor(CompletionClient):
    """Streaming chat-completions client for OpenAI-compatible endpoints.

    Works with OpenAI, Mistral and any proxy speaking the same SSE protocol.

    Args:
        settings: Resolved provider endpoint, API key and model.
        temperature: Sampling temperature sent with every request.
        http_client: Optional shared ``httpx.AsyncClient``. When omitted a
            client is created for each request.
        request_timeout: Per-request httpx timeout in seconds.
    """

    def __init__(
        self,
        settings: ProviderSettings,
        temperature: float = 0.7,
        http_client: Optional[httpx.AsyncClient] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.settings = settings
        self.temperature = temperature
        self.http_client = http_client
        self.request_timeout = request_timeout

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict],
        on_chunk: Optional[ChunkHandler] = None,
    ) -> CompletionResult:
        """Issue one streaming request and assemble the result.

        Args:
            messages: Conversation history.
            tools: Function definitions in OpenAI format.
            on_chunk: Called with every text fragment as soon as it arrives.

        Returns:
            CompletionResult with text, finalized tool calls and finish reason.

        Raises:
            TransportError: On a non-2xx status or a network failure.
        """
        payload = self._build_payload(messages, tools)

        try:
            if self.http_client is not None:
                return await self._stream(self.http_client, payload, on_chunk)
            async with httpx.AsyncClient() as client:
                return await self._stream(client, payload, on_chunk)
        except httpx.HTTPError as e:
            raise TransportError(
                f"API error ({self.settings.name}): {e}",
                provider=self.settings.name,
            ) from e

    async def _stream(
        self,
        client: httpx.AsyncClient,
        payload: dict,
        on_chunk: Optional[ChunkHandler],
    ) -> CompletionResult:
        async with client.stream(
            "POST",
            self.settings.endpoint,
            json=payload,
            headers={
                "Authorization": f"Bearer {self.settings.api_key}",
                "Content-Type": "application/json",
                "Accept": "text/event-stream",
            },
            timeout=self.request_timeout,
        ) as response:
            if not response.is_success:
                body = await response.aread()
                raise TransportError(
                    f"API error ({self.settings.name}): {response.status_code} "
                    f"{body.decode('utf-8', errors='replace')}",
                    provider=self.settings.name,
                    status_code=response.status_code,
                )
            return await self._parse_stream(response.aiter_bytes(), on_chunk)

    async def _parse_stream(self, chunks, on_chunk: Optional[ChunkHandler]) -> CompletionResult:
        """Fold decoded stream events into a CompletionResult."""
        text_parts: list[str] = []
        finish_reason = None
        accumulator = ToolCallAccumulator()

        async for event in decode_stream(chunks):
            choices = event.get("choices")
            if not choices:
                continue
            choice = choices[0] if isinstance(choices, list) else None
            if not isinstance(choice, dict):
                logger.debug("Skipping stream event with malformed choices: %r", choices)
                continue
            delta = choice.get("delta") or {}
            if not isinstance(delta, dict):
                logger.debug("Skipping stream event with malformed delta: %r", delta)
                continue

            content = delta.get("content")
            if isinstance(content, str) and content:
                text_parts.append(content)
                if on_chunk is not None:
                    on_chunk(content)
            elif content:
                logger.debug("Skipping non-text content fragment: %r", content)

            accumulator.merge(delta)

            if isinstance(choice.get("finish_reason"), str):
                finish_reason = choice["finish_reason"]

        text = "".join(text_parts)
        tool_calls = accumulator.finalize()

        logger.debug(
            "Stream parsed: content_length=%d tool_calls=%d finish_reason=%s",
            len(text),
            len(tool_calls),
            finish_reason,
        )

        return CompletionResult(
            text=text or None,
            tool_calls=tool_calls,
            finish_reason=finish_reason,
        )

    def _build_payload(self, messages: list[Message], tools: list[dict]) -> dict:
        payload = {
            "model": self.settings.model,
            "messages": self._convert_messages(messages),
            "temperature": self.temperature,
            "stream": True,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"
        return payload

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert agent-stream Message objects to OpenAI format."""
        openai_messages = []
        for msg in messages:
            openai_msg = {"role": msg.role, "content": msg.content}

            # Handle tool messages - include tool_call_id
            if msg.tool_call_id:
                openai_msg["tool_call_id"] = msg.tool_call_id

            # Handle assistant messages with tool calls
            if msg.role == "assistant" and msg.tool_calls:
                openai_msg["tool_calls"] = self._format_tool_calls(msg.tool_calls)

            openai_messages.append(openai_msg)
        return openai_messages

    def _format_tool_calls(self, tool_calls: list[ToolCall]) -> list[dict]:
        # Arguments are forwarded exactly as the model streamed them.
        return [
            {
                "id": tool_call.id,
                "type": tool_call.type,
                "function": {
                    "name": tool_call.name,
                    "arguments": tool_call.arguments,
                },
            }
            for tool_call in tool_calls
        ]
