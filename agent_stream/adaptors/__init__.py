"""Completion client adaptors for agent-stream."""

from agent_stream.adaptors.openai import OpenAICompatibleAdaptor

__all__ = ["OpenAICompatibleAdaptor"]
