"""Batch flow control between the byte source and the consumer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Union

from .models import Batch
from .source import ByteSource
from .splitter import LineSplitter

logger = logging.getLogger(__name__)


class _Failure:
    """Carries a producer exception through the channel."""

    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error


class FlowController:
    """Produce one batch of lines at a time, only when asked for it.

    A producer task reads chunks and splits them into lines. After every
    chunk that completes at least one line it hands the batch over through
    a single-slot channel and pauses until the consumer calls resume()
    again, so at most one batch is ever held in memory.

    The controller owns its ByteSource. aclose() may be called at any point,
    including before the source was opened, in which case it never will be.

    Example:
        >>> flow = FlowController("words.txt", chunk_size=65536)
        >>> try:
        ...     while True:
        ...         batch = await flow.next_batch()
        ...         consume(batch.lines)
        ...         if batch.final:
        ...             break
        ... finally:
        ...     await flow.aclose()
    """

    def __init__(self, path: Union[str, Path], chunk_size: int) -> None:
        self._path = Path(path)
        self._chunk_size = chunk_size
        self._source: ByteSource | None = None
        self._channel: asyncio.Queue[Batch | _Failure] = asyncio.Queue(maxsize=1)
        self._resume = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._lines_decoded = 0
        self._eof = False
        self._closed = False

    async def open(self) -> bool:
        """Open the source and probe it.

        Returns:
            True if the file has content, False if it is empty (the source
            is then already released) or the controller was closed meanwhile

        Raises:
            OpenError: If the file cannot be opened
        """
        if self._closed:
            return False
        source = await ByteSource.open(self._path, self._chunk_size)
        if self._closed:
            # closed while the open was in flight
            source.close()
            return False
        self._source = source
        if source.empty:
            self._eof = True
            source.close()
            return False
        return True

    def resume(self) -> None:
        """Let the producer decode the next batch."""
        if self._closed or self._eof:
            return
        if self._source is None:
            raise RuntimeError("FlowController.open() must be awaited first")
        if self._task is None:
            self._task = asyncio.create_task(
                self._produce(self._source),
                name=f"wordlist-producer:{self._path.name}",
            )
        self._resume.set()

    async def next_batch(self) -> Batch:
        """Resume the producer and wait for the next batch.

        After a batch with final=True no further batches are produced;
        calling again returns an empty final batch.
        """
        if self._closed or self._eof:
            return Batch([], self._lines_decoded, final=True)
        if self._source is None:
            raise RuntimeError("FlowController.open() must be awaited first")

        self.resume()
        item = await self._channel.get()
        if isinstance(item, _Failure):
            self._eof = True
            raise item.error
        if item.final:
            self._eof = True
        return item

    async def _produce(self, source: ByteSource) -> None:
        splitter = LineSplitter()

        try:
            while True:
                await self._resume.wait()
                self._resume.clear()

                lines: list[str] = []
                final = False
                while not lines:
                    chunk = await source.read_chunk()
                    if not chunk:
                        lines = splitter.finish()
                        final = True
                        break
                    lines = splitter.feed(chunk)

                batch = Batch(lines, self._lines_decoded, final)
                self._lines_decoded += len(lines)
                logger.debug(
                    "Batch of %d line(s) at index %d%s",
                    len(lines),
                    batch.first_index,
                    " (final)" if final else "",
                )
                await self._channel.put(batch)
                if final:
                    source.close()
                    return
        except Exception as e:
            await self._channel.put(_Failure(e))

    async def aclose(self) -> None:
        """Stop the producer and release the source. Idempotent."""
        if self._closed:
            return
        self._closed = True

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._source is not None:
            self._source.close()

        # wake a consumer still waiting on the channel
        if self._channel.empty():
            self._channel.put_nowait(Batch([], self._lines_decoded, final=True))

    @property
    def source(self) -> ByteSource | None:
        """The owned byte source, once opened."""
        return self._source

    @property
    def lines_decoded(self) -> int:
        """Lines decoded so far, across all batches."""
        return self._lines_decoded

    @property
    def closed(self) -> bool:
        """Whether aclose() has been called."""
        return self._closed
