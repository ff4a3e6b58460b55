import codecs
import json
import logging
from typing import Any, List, Optional, Union

# Configure logging
logger = logging.getLogger("stream_decoder")

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_delta_content(payload: Any) -> Optional[str]:
    """
    Pull ``choices[0].delta.content`` out of one decoded stream event.

    Args:
        payload: The JSON-decoded event payload

    Returns:
        The content string, or None when the event does not carry one
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


class StreamDecoder:
    """
    Incremental decoder for an event-stream completion response.

    The network layer pushes each read into ``feed`` and gets back the text
    deltas completed by that read, in arrival order. A trailing partial line is
    held back until the next read, so the produced deltas do not depend on
    where the reads were split.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False
        self.skipped_lines = 0

    def feed(self, chunk: Union[bytes, str]) -> List[str]:
        """
        Consume one read of the response body.

        Args:
            chunk: Raw bytes (or already-decoded text) from the response

        Returns:
            The non-empty deltas completed by this read
        """
        if self.done:
            return []

        if isinstance(chunk, bytes):
            self._buffer += self._decoder.decode(chunk)
        else:
            self._buffer += chunk

        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return self._process_lines(lines)

    def finish(self) -> List[str]:
        """
        Signal end of input. Reaching the end without the sentinel is a normal
        termination; a final line without a trailing newline is still decoded.
        """
        if self.done:
            return []

        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        deltas = self._process_lines([tail]) if tail else []
        self.done = True
        return deltas

    def _process_lines(self, lines: List[str]) -> List[str]:
        deltas = []
        for line in lines:
            if not line.startswith(DATA_PREFIX):
                continue

            data = line[len(DATA_PREFIX):].strip()
            if data == DONE_SENTINEL:
                logger.debug("✅ STREAM SENTINEL RECEIVED")
                self.done = True
                break

            try:
                payload = json.loads(data)
            except json.JSONDecodeError as e:
                self.skipped_lines += 1
                logger.error(f"❌ ERROR PARSING STREAM CHUNK: data={data[:200]!r}, error={str(e)}")
                continue

            content = extract_delta_content(payload)
            if content:
                deltas.append(content)

        return deltas


def decode_event_stream(chunks) -> List[str]:
    """Decode a complete sequence of reads in one go."""
    decoder = StreamDecoder()
    deltas = []
    for chunk in chunks:
        deltas.extend(decoder.feed(chunk))
        if decoder.done:
            break
    deltas.extend(decoder.finish())
    return deltas
