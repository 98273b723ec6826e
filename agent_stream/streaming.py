"""Server-Sent-Events decoding for streaming chat completions."""

import codecs
import json
import logging
from typing import AsyncIterable, AsyncIterator, Optional, Union

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class SSELineBuffer:
    """Split a chunked body into complete lines.

    Bytes go through an incremental UTF-8 decoder and the trailing partial
    line of each chunk is held back until the next chunk completes it.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: Union[bytes, str]) -> list[str]:
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        text = self._pending + chunk
        lines = text.split("\n")
        self._pending = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> list[str]:
        text = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return [text.rstrip("\r")] if text else []


def parse_data_line(line: str) -> tuple[bool, Optional[dict]]:
    """Interpret one SSE line.

    Returns:
        ``(done, event)``. ``done`` is True for the ``[DONE]`` sentinel;
        ``event`` is the decoded JSON payload or None when the line carries
        nothing usable.
    """
    if not line.startswith(DATA_PREFIX):
        return False, None

    data = line[len(DATA_PREFIX):].strip()
    if data == DONE_SENTINEL:
        return True, None

    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        logger.debug("Dropping malformed SSE payload: %r", data[:200])
        return False, None

    if not isinstance(event, dict):
        return False, None
    return False, event


async def decode_stream(
    chunks: AsyncIterable[Union[bytes, str]],
) -> AsyncIterator[dict]:
    """Yield parsed JSON delta events from an SSE response body.

    The sequence ends at the ``[DONE]`` sentinel or when the body is exhausted.
    Malformed payloads are dropped so one bad fragment cannot abort the
    response.
    """
    buffer = SSELineBuffer()

    async for chunk in chunks:
        if not chunk:
            continue
        for line in buffer.feed(chunk):
            done, event = parse_data_line(line)
            if done:
                return
            if event is not None:
                yield event

    for line in buffer.flush():
        done, event = parse_data_line(line)
        if done:
            return
        if event is not None:
            yield event
