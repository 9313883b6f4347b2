"""Chunked byte source over a local wordlist file."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import IO, Union

from .exceptions import OpenError

logger = logging.getLogger(__name__)


def _probe(file: IO[bytes]) -> bytes:
    """Read one byte at offset 0, then rewind."""
    file.seek(0)
    data = file.read(1)
    file.seek(0)
    return data


class ByteSource:
    """Binary file handle read in fixed-size chunks off the event loop.

    Use ByteSource.open() rather than the constructor: it opens the file
    and performs the one-byte probe that tells an empty file apart from
    one with content.

    Example:
        >>> source = await ByteSource.open("rockyou.txt", chunk_size=65536)
        >>> try:
        ...     while chunk := await source.read_chunk():
        ...         handle(chunk)
        ... finally:
        ...     source.close()
    """

    def __init__(self, path: Union[str, Path], chunk_size: int) -> None:
        self._path = Path(path)
        self._chunk_size = chunk_size
        self._file: IO[bytes] | None = None
        self._empty = False
        self._closed = False
        self.bytes_read = 0

    @classmethod
    async def open(cls, path: Union[str, Path], chunk_size: int) -> "ByteSource":
        """Open path and probe its first byte.

        Raises:
            OpenError: If the file cannot be opened or read
        """
        source = cls(path, chunk_size)
        await source._open()
        return source

    async def _open(self) -> None:
        try:
            self._file = await asyncio.to_thread(open, self._path, "rb")
            self._empty = not await asyncio.to_thread(_probe, self._file)
        except OSError as e:
            self.close()
            raise OpenError(self._path) from e

        logger.debug(
            "Opened %s (%s)", self._path, "empty" if self._empty else "has content"
        )

    def _read(self) -> bytes:
        file = self._file
        if file is None:
            return b""
        try:
            return file.read(self._chunk_size)
        except ValueError:
            # closed from the loop while this thread was reading
            if self._closed:
                return b""
            raise

    async def read_chunk(self) -> bytes:
        """Return the next chunk of at most chunk_size bytes (b"" at EOF)."""
        if self._closed or self._empty:
            return b""
        chunk = await asyncio.to_thread(self._read)
        self.bytes_read += len(chunk)
        return chunk

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.debug("Closed %s after %d bytes", self._path, self.bytes_read)

    @property
    def path(self) -> Path:
        """Path of the wordlist."""
        return self._path

    @property
    def chunk_size(self) -> int:
        """Bytes requested per read."""
        return self._chunk_size

    @property
    def empty(self) -> bool:
        """True if the probe found a zero-length file."""
        return self._empty

    @property
    def closed(self) -> bool:
        """Whether the file handle has been released."""
        return self._closed
