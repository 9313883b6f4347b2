"""Ranged, cancellable async iteration over wordlist lines."""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import Any, AsyncIterator, NoReturn, Union

from .exceptions import OpenError
from .flow import FlowController
from .models import IteratorState
from .options import IteratorOptions, normalize_options
from .range_filter import filter_batches

logger = logging.getLogger(__name__)


class WordlistIterator:
    """Async iterator over the lines of a wordlist within [start, end).

    The file is opened lazily on the first pull and read one batch at a
    time, so memory use does not depend on the file size. Every way of
    stopping (exhaustion, close(), aclose(), fail(), a finish signal sent
    with asend(), leaving an ``async with`` block) releases the file handle
    exactly once.

    Example:
        >>> async with wordlist_iterator("rockyou.txt", start=1000) as words:
        ...     async for word in words:
        ...         if await try_password(word):
        ...             break
        ...     print(f"Tried {words.yielded_count} candidates")
        ... # File handle guaranteed closed here
    """

    def __init__(self, path: Union[str, Path], options: IteratorOptions) -> None:
        """Create an iterator. Prefer the wordlist_iterator() factory.

        Args:
            path: Path of the wordlist file
            options: Already validated options
        """
        self._path = Path(path)
        self._options = options

        self._state = IteratorState.INIT
        self._flow: FlowController | None = None
        self._lines: AsyncIterator[tuple[int, str]] | None = None
        self._terminated = False
        self._position = options.start
        self._yielded_count = 0

    def __aiter__(self) -> "WordlistIterator":
        return self

    async def __anext__(self) -> str:
        """Return the next line in the window."""
        return await self.asend(None)

    async def asend(self, finish: Any) -> str:
        """Return the next line, or stop early when finish is truthy.

        A truthy finish is the consumer saying it is done: the pipeline is
        closed and StopAsyncIteration raised, exactly like close().

        Raises:
            StopAsyncIteration: When the window or the file is exhausted,
                or after a finish signal
            OpenError: On the first pull, if the file cannot be opened
        """
        if finish:
            await self._terminate(IteratorState.CANCELLED)
            raise StopAsyncIteration
        if self._terminated:
            raise StopAsyncIteration

        if self._lines is None:
            await self._start()
            if self._lines is None:
                raise StopAsyncIteration

        self._state = IteratorState.STREAMING
        try:
            index, line = await self._lines.__anext__()
        except StopAsyncIteration:
            await self._terminate(IteratorState.EXHAUSTED)
            raise
        except asyncio.CancelledError:
            await self._terminate(IteratorState.CANCELLED)
            raise
        except Exception:
            await self._terminate(IteratorState.ERRORED)
            raise

        self._position = index + 1
        self._yielded_count += 1
        if self._flow is not None and self._flow.closed:
            # last line of the window; the filter already released the file
            await self._terminate(IteratorState.EXHAUSTED)
        if not self._terminated:
            self._state = IteratorState.PAUSED
        return line

    async def _start(self) -> None:
        """Open the file and build the pipeline, unless already stopped."""
        if self._terminated:
            return

        self._state = IteratorState.OPENING
        self._flow = FlowController(self._path, self._options.high_water_mark)
        try:
            has_content = await self._flow.open()
        except OpenError:
            await self._terminate(IteratorState.ERRORED)
            raise

        if self._terminated:
            return
        self._state = IteratorState.EMPTY_CHECK
        if not has_content:
            logger.debug("Wordlist %s is empty", self._path)
            await self._terminate(IteratorState.CLOSED)
            return

        self._lines = filter_batches(
            self._flow, self._options.start, self._options.end
        )

    async def close(self, finish: Any = True) -> bool:
        """Stop iterating, or just report whether iteration is over.

        Args:
            finish: When truthy (the default) the iterator is closed at
                once, however much of the window is left. When falsy
                nothing is closed; the call only probes liveness.

        Returns:
            True if the iterator is done, False if it is still live
        """
        if not finish:
            return self._terminated
        await self._terminate(IteratorState.CANCELLED)
        return True

    async def aclose(self) -> None:
        """Close the iterator (standard async iterator protocol)."""
        await self._terminate(IteratorState.CANCELLED)

    async def fail(self, error: BaseException) -> NoReturn:
        """Close the iterator and raise error as its terminal error."""
        await self._terminate(IteratorState.ERRORED)
        raise error

    async def athrow(self, error: BaseException | type[BaseException]) -> NoReturn:
        """Async generator compatible alias of fail()."""
        if isinstance(error, type):
            error = error()
        await self.fail(error)

    async def _terminate(self, state: IteratorState) -> bool:
        """Release the pipeline once; later calls are no-ops.

        Returns:
            True if this call did the release
        """
        if self._terminated:
            return False
        self._terminated = True
        self._state = state

        lines, self._lines = self._lines, None
        if lines is not None and not getattr(lines, "ag_running", False):
            await lines.aclose()
        if self._flow is not None:
            await self._flow.aclose()

        logger.debug(
            "Wordlist %s %s after %d line(s)",
            self._path,
            state.value,
            self._yielded_count,
        )
        return True

    async def __aenter__(self) -> "WordlistIterator":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context, ensuring cleanup."""
        await self.aclose()

    @property
    def path(self) -> Path:
        """Path of the wordlist."""
        return self._path

    @property
    def options(self) -> IteratorOptions:
        """Validated options in effect."""
        return self._options

    @property
    def state(self) -> IteratorState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        """Whether the iterator has terminated and released the file."""
        return self._terminated

    @property
    def position(self) -> float:
        """Global index of the next line the window would yield."""
        return self._position

    @property
    def yielded_count(self) -> int:
        """Number of lines yielded so far."""
        return self._yielded_count

    def __repr__(self) -> str:
        return (
            f"WordlistIterator({str(self._path)!r}, start={self._options.start}, "
            f"end={self._options.end}, state={self._state.value})"
        )


def wordlist_iterator(
    path: Union[str, Path],
    *,
    high_water_mark: Any = None,
    start: Any = 0,
    end: Any = math.inf,
) -> WordlistIterator:
    """Iterate the lines of a wordlist whose 0-indexed number is in [start, end).

    Options are validated here, before any I/O; the file itself is opened
    on the first pull.

    Args:
        path: Wordlist file path
        high_water_mark: Bytes read per chunk (default 64 KiB)
        start: First line to yield; negative values mean 0
        end: Line to stop before; a value below start means "to the end"

    Returns:
        WordlistIterator yielding lines without their line terminators

    Raises:
        ValidationError: If start, end or high_water_mark is not a number

    Example:
        >>> words = wordlist_iterator("words.txt", start=1, end=4)
        >>> [word async for word in words]
        ['b', 'c', 'd']
    """
    options = normalize_options(high_water_mark=high_water_mark, start=start, end=end)
    return WordlistIterator(path, options)


def iter_words(
    path: Union[str, Path], *, high_water_mark: Any = None
) -> WordlistIterator:
    """Iterate every line of a wordlist."""
    return wordlist_iterator(path, high_water_mark=high_water_mark)
