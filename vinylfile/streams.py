"""Stream adapters for virtual file contents.

CloneableStream lets several consumers read the same source stream
independently. Every consumer owns a read cursor into one shared buffer.
Bytes are pulled from the source only when the consumer furthest ahead
needs them. They are dropped once every live consumer has read past them.
"""

from __future__ import annotations

import io
import logging
import weakref
from typing import Any

from .config import DEFAULT_CHUNK_SIZE
from .errors import InvalidState

logger = logging.getLogger(__name__)


class _Tee:
    """Shared buffer between the consumers of one source stream."""

    def __init__(self, source: Any, chunk_size: int):
        self.source = source
        self.chunk_size = chunk_size
        self._buffer = bytearray()
        self._start = 0  # absolute offset of _buffer[0]
        self._eof = False
        self._consumers: weakref.WeakSet[CloneableStream] = weakref.WeakSet()

    @property
    def end(self) -> int:
        return self._start + len(self._buffer)

    def attach(self, consumer: "CloneableStream", position: int) -> None:
        consumer._position = position
        self._consumers.add(consumer)

    def release(self, consumer: "CloneableStream") -> None:
        self._consumers.discard(consumer)
        self._trim()

    def read(self, consumer: "CloneableStream", size: int) -> bytes | None:
        while consumer._position >= self.end and not self._eof:
            if not self._fill():
                return None

        offset = consumer._position - self._start
        if size < 0:
            data = bytes(self._buffer[offset:])
        else:
            data = bytes(self._buffer[offset:offset + size])
        consumer._position += len(data)
        self._trim()
        return data

    def _fill(self) -> bool:
        chunk = self.source.read(self.chunk_size)
        if chunk is None:
            # Non-blocking source with nothing ready yet.
            return False
        if isinstance(chunk, str):
            raise TypeError("Cloneable streams carry bytes, got str from source")
        if not chunk:
            self._eof = True
        else:
            self._buffer += chunk
        return True

    def _trim(self) -> None:
        positions = [c._position for c in self._consumers if not c.closed]
        low = min(positions) if positions else self.end
        drop = low - self._start
        if drop > 0:
            del self._buffer[:drop]
            self._start = low


class CloneableStream(io.RawIOBase):
    """Readable stream that can be cloned into independent consumers.

    Attributes:
        original: The wrapped source stream.
    """

    def __init__(
        self,
        source: Any,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        _tee: _Tee | None = None,
    ):
        """Wrap a readable byte stream.

        Args:
            source: Object with a ``read(size)`` method returning bytes.
            chunk_size: Bytes requested from ``source`` per read.
        """
        super().__init__()
        self._position = 0
        if _tee is None:
            _tee = _Tee(source, chunk_size)
            _tee.attach(self, 0)
        self._tee = _tee

    @property
    def original(self) -> Any:
        return self._tee.source

    def clone(self) -> "CloneableStream":
        """Return a new consumer starting at this consumer's position.

        Raises:
            InvalidState: If this consumer is closed.
        """
        if self.closed:
            raise InvalidState("Can not clone a closed stream.")
        twin = type(self)(self._tee.source, self._tee.chunk_size, _tee=self._tee)
        self._tee.attach(twin, self._position)
        return twin

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int | None:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        data = self._tee.read(self, len(b))
        if data is None:
            return None
        n = len(data)
        b[:n] = data
        return n

    def readall(self) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        chunks = []
        while True:
            data = self._tee.read(self, -1)
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks)

    def close(self) -> None:
        if not self.closed:
            self._tee.release(self)
        super().close()


def is_cloneable(obj: Any) -> bool:
    """Return True if ``obj`` is already a CloneableStream."""
    return isinstance(obj, CloneableStream)


def cloneable(stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CloneableStream:
    """Wrap ``stream`` for duplication unless it is already wrapped."""
    if is_cloneable(stream):
        return stream
    logger.debug("Wrapping %s for duplication", type(stream).__name__)
    return CloneableStream(stream, chunk_size)


class Transform(io.RawIOBase):
    """Duplex stream whose written bytes become readable after transform().

    Subclasses override transform(). Reads return whatever has been written
    so far, so an empty read means nothing is pending rather than end of
    stream.
    """

    def __init__(self) -> None:
        super().__init__()
        self._pending = bytearray()

    def transform(self, chunk: bytes) -> bytes:
        raise NotImplementedError

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        data = bytes(b)
        self._pending += self.transform(data)
        return len(data)

    def readinto(self, b: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        n = min(len(b), len(self._pending))
        b[:n] = self._pending[:n]
        del self._pending[:n]
        return n


class PassThrough(Transform):
    """Transform that forwards bytes unchanged."""

    def transform(self, chunk: bytes) -> bytes:
        return chunk
