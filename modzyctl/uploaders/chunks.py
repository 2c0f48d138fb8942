"""Bounded-size chunk reading for input uploads.

A ``ChunkSource`` is a single-pass cursor over one data item. In-memory
buffers are sliced; paths and binary file objects are read one bounded
``read()`` per chunk.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import IO, Any, Union

from modzyctl.core.exceptions import ChunkReadError, ValidationError
from modzyctl.core.validation import validate_chunk_size

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]
ChunkInput = Union[BytesLike, str, "os.PathLike[str]", IO[bytes]]


def is_in_memory(source: Any) -> bool:
    """Return True if the source is a bytes-like buffer."""
    return isinstance(source, (bytes, bytearray, memoryview))


def source_name(source: Any) -> str:
    """Human-readable name of a source for logs and errors."""
    if is_in_memory(source):
        return f"<{len(source)} bytes in memory>"
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return str(getattr(source, "name", repr(source)))


class ChunkSource:
    """Single-pass cursor producing chunks of at most ``max_chunk_size`` bytes.

    The source yields ``ceil(size / max_chunk_size)`` chunks; every chunk but
    the last is exactly ``max_chunk_size`` bytes and an empty source yields
    none. Once iteration has begun the cursor cannot be rewound; build a new
    ``ChunkSource`` from the same source to read it again.

    Paths are opened on the first pull and closed when the source is exhausted,
    closed explicitly, or fails. Caller-supplied file objects are never closed.

    Args:
        source: Bytes-like buffer, filesystem path, or binary file object.
        max_chunk_size: Maximum chunk length in bytes, must be positive.

    Raises:
        ValidationError: If the chunk size or source type is invalid.
    """

    def __init__(self, source: ChunkInput, max_chunk_size: int) -> None:
        self.max_chunk_size = validate_chunk_size(max_chunk_size)
        self.name = source_name(source)
        self._offset = 0
        self._exhausted = False
        self._handle: IO[bytes] | None = None
        self._owns_handle = False
        self._buffer: memoryview | None = None
        self._path: Path | None = None

        if is_in_memory(source):
            self._buffer = memoryview(source).cast("B")
            self.total_size: int | None = len(self._buffer)
        elif isinstance(source, (str, os.PathLike)):
            self._path = Path(source).expanduser()
            try:
                self.total_size = self._path.stat().st_size
            except OSError as e:
                raise ChunkReadError(self.name, 0, str(e)) from e
        elif hasattr(source, "read"):
            self._handle = source
            self.total_size = _remaining_size(source)
        else:
            raise ValidationError(
                "Input must be bytes, a file path or a binary file object",
                field="source",
                value=type(source).__name__,
            )

    @property
    def offset(self) -> int:
        """Number of bytes produced so far."""
        return self._offset

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def chunk_count(self) -> int | None:
        """Total number of chunks, or None if the size is unknown."""
        if self.total_size is None:
            return None
        return -(-self.total_size // self.max_chunk_size)

    def next_chunk(self) -> bytes | None:
        """Pull the next chunk.

        Returns:
            The next chunk, or None once the source is exhausted.

        Raises:
            ChunkReadError: If reading from the underlying file fails.
        """
        if self._exhausted:
            return None
        if self.total_size == 0:
            self._finish()
            return None

        if self._buffer is not None:
            chunk = self._buffer[self._offset : self._offset + self.max_chunk_size].tobytes()
        else:
            chunk = self._read()

        if not chunk:
            self._finish()
            return None

        self._offset += len(chunk)
        if self.total_size is not None and self._offset >= self.total_size:
            self._finish()
        return chunk

    def _read(self) -> bytes:
        try:
            if self._handle is None:
                self._handle = open(self._path, "rb")  # type: ignore[arg-type]
                self._owns_handle = True
            data = self._handle.read(self.max_chunk_size)
        except OSError as e:
            self._finish()
            raise ChunkReadError(self.name, self._offset, str(e)) from e
        if not data:
            return b""
        if not is_in_memory(data):
            self._finish()
            raise ChunkReadError(
                self.name,
                self._offset,
                f"read() returned {type(data).__name__}, expected bytes (open files in binary mode)",
            )
        return bytes(data)

    def _finish(self) -> None:
        self._exhausted = True
        self._buffer = None
        self.close()

    def close(self) -> None:
        """Release the file handle if this source opened it."""
        if self._owns_handle and self._handle is not None:
            self._handle.close()
            self._handle = None
            self._owns_handle = False

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        chunk = self.next_chunk()
        if chunk is None:
            raise StopIteration
        return chunk

    def __enter__(self) -> ChunkSource:
        return self

    def __exit__(self, *args: Any) -> None:
        self._finish()

    def __repr__(self) -> str:
        return (
            f"ChunkSource(name={self.name!r}, max_chunk_size={self.max_chunk_size}, "
            f"offset={self._offset}, total_size={self.total_size})"
        )


def iter_chunks(source: ChunkInput, max_chunk_size: int) -> Iterator[bytes]:
    """Yield the chunks of a source, closing it when done.

    Args:
        source: Bytes-like buffer, filesystem path, or binary file object.
        max_chunk_size: Maximum chunk length in bytes.

    Yields:
        Chunks in source order.
    """
    with ChunkSource(source, max_chunk_size) as chunks:
        yield from chunks


def _remaining_size(handle: IO[bytes]) -> int | None:
    """Bytes left between the handle's position and its end, if seekable."""
    try:
        if not handle.seekable():
            return None
        position = handle.tell()
        end = handle.seek(0, os.SEEK_END)
        handle.seek(position)
    except (AttributeError, OSError, ValueError):
        return None
    return end - position
