"""Reassembles newline-delimited lines from raw socket reads.

Reads from the event socket are arbitrary byte slices: one read can carry
several events, half an event, or half of a multi-byte character. The
reassembler keeps whatever follows the last newline until the next read
completes it.
"""

import codecs
import logging
from enum import Enum
from typing import Iterator, List, Optional

from .errors import EncodingError, ErrorCode, LineTooLongError

logger = logging.getLogger(__name__)

# Longest unterminated line kept between reads
DEFAULT_MAX_LINE_LENGTH = 64 * 1024


class PartialLinePolicy(str, Enum):
    """What to do with an unterminated line when the stream ends."""

    DISCARD = "discard"  # Drop it (logged as a warning)
    FLUSH = "flush"  # Deliver it as a final line


class StreamReassembler:
    """Splits a UTF-8 byte stream into complete lines."""

    def __init__(self, encoding: str = "utf-8", max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
        self._buffer = ""
        self.max_line_length = max_line_length

    @property
    def has_pending(self) -> bool:
        """True if bytes of an unterminated line are buffered."""
        return bool(self._buffer) or bool(self._decoder.getstate()[0])

    def feed(self, data: bytes) -> Iterator[str]:
        """Add a chunk and return the lines it completes, in order.

        The buffer is updated before returning, so lines are never lost if
        the caller stops iterating early.

        Args:
            data: Raw bytes from one read

        Returns:
            Iterator over complete lines, trimmed of surrounding whitespace;
            blank lines are skipped

        Raises:
            EncodingError: If the bytes are not valid UTF-8
            LineTooLongError: If the unterminated line kept from earlier reads
                exceeds max_line_length
        """
        self._check_remainder()

        try:
            text = self._decoder.decode(data)
        except UnicodeDecodeError as e:
            raise EncodingError(str(e))

        if "\n" not in text:
            self._buffer += text
            return iter(())

        *complete, self._buffer = (self._buffer + text).split("\n")
        return iter(self._clean(complete))

    def finish(self, policy: PartialLinePolicy = PartialLinePolicy.DISCARD) -> Optional[str]:
        """Close out the stream.

        Args:
            policy: Whether an unterminated final line is flushed or discarded

        Returns:
            The final line under FLUSH when one is pending, else None

        Raises:
            EncodingError: If the stream ended inside a multi-byte character
        """
        try:
            tail = self._buffer + self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise EncodingError(str(e), code=ErrorCode.TRUNCATED_UTF8)
        finally:
            self._buffer = ""
            self._decoder.reset()

        lines = self._clean([tail])
        if not lines:
            return None

        if policy is PartialLinePolicy.FLUSH:
            logger.debug(f"Flushing unterminated final line: {lines[0]!r}")
            return lines[0]

        logger.warning(f"Discarding unterminated line at end of stream: {lines[0]!r}")
        return None

    def _check_remainder(self) -> None:
        if len(self._buffer) > self.max_line_length:
            prefix = self._buffer[:80]
            self._buffer = ""
            raise LineTooLongError(prefix, self.max_line_length)

    @staticmethod
    def _clean(lines: List[str]) -> List[str]:
        """Trim surrounding whitespace (including CR) and drop blank lines.

        Text fields at the end of a line lose trailing spaces; the line
        format has no quoting to preserve them.
        """
        cleaned = []
        for line in lines:
            line = line.strip()
            if line:
                cleaned.append(line)
        return cleaned
