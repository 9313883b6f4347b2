"""Tests for window arithmetic and option normalisation."""

import math

import pytest

from wordlist_iterator import (
    DEFAULT_HIGH_WATER_MARK,
    Batch,
    ValidationError,
    WordlistError,
    normalize_options,
)
from wordlist_iterator.range_filter import batch_window, filter_batches, window_passed


class FakeFlow:
    """Serves prepared batches and records how many were pulled."""

    def __init__(self, batches: list[list[str]]):
        self._batches = []
        first = 0
        for i, lines in enumerate(batches):
            self._batches.append(Batch(lines, first, final=i == len(batches) - 1))
            first += len(lines)
        self.pulled = 0
        self.closed = False

    async def next_batch(self) -> Batch:
        batch = self._batches[self.pulled]
        self.pulled += 1
        return batch

    async def aclose(self) -> None:
        self.closed = True


async def collect(flow: FakeFlow, start: float, end: float) -> list[tuple[int, str]]:
    return [item async for item in filter_batches(flow, start, end)]


# ─────────────────────────────────────────────────────────────────────
# Window Arithmetic
# ─────────────────────────────────────────────────────────────────────


class TestBatchWindow:
    """Tests for batch_window()."""

    def test_window_inside_batch(self):
        """Window strictly inside one batch."""
        assert batch_window(0, 5, 1, 4) == range(1, 4)

    def test_batch_before_start(self):
        """Batch entirely before start contributes nothing."""
        assert batch_window(0, 3, 10, math.inf) is None

    def test_batch_after_end(self):
        """Batch starting at end contributes nothing."""
        assert batch_window(10, 5, 0, 10) is None

    def test_window_starts_mid_batch(self):
        """Start falls inside a later batch."""
        assert batch_window(5, 5, 7, math.inf) == range(2, 5)

    def test_window_ends_mid_batch(self):
        """End falls inside the batch."""
        assert batch_window(5, 5, 0, 7) == range(0, 2)

    def test_unbounded_end(self):
        """Infinite end takes the whole batch."""
        assert batch_window(100, 4, 0, math.inf) == range(0, 4)

    def test_empty_batch(self):
        """Empty batches never contribute."""
        assert batch_window(3, 0, 0, math.inf) is None


class TestWindowPassed:
    """Tests for window_passed()."""

    def test_reaches_end(self):
        """Batch holding index end - 1 closes the window."""
        assert window_passed(0, 5, 5)
        assert window_passed(0, 5, 4)

    def test_before_end(self):
        """Batch ending before end - 1 does not."""
        assert not window_passed(0, 3, 5)

    def test_infinite_end(self):
        """An unbounded window is never passed."""
        assert not window_passed(0, 10**9, math.inf)


# ─────────────────────────────────────────────────────────────────────
# Batch Filtering
# ─────────────────────────────────────────────────────────────────────


class TestFilterBatches:
    """Tests for filter_batches()."""

    async def test_indexes_are_global(self):
        """Yielded indexes count lines across batches."""
        flow = FakeFlow([["a", "b"], ["c", "d"], ["e"]])
        assert await collect(flow, 1, 4) == [(1, "b"), (2, "c"), (3, "d")]

    async def test_stops_pulling_after_window(self):
        """No batch is requested once end - 1 has been reached."""
        flow = FakeFlow([["a", "b"], ["c", "d"], ["e", "f"]])
        assert await collect(flow, 0, 3) == [(0, "a"), (1, "b"), (2, "c")]
        assert flow.pulled == 2

    async def test_flow_closed_before_last_line(self):
        """The flow is released before index end - 1 reaches the consumer."""
        flow = FakeFlow([["a", "b"], ["c", "d"], ["e", "f"]])
        lines = filter_batches(flow, 1, 3)

        assert await lines.__anext__() == (1, "b")
        assert not flow.closed
        assert await lines.__anext__() == (2, "c")
        assert flow.closed
        await lines.aclose()

    async def test_flow_closed_on_final_batch(self):
        """The last line of the file also releases the flow first."""
        flow = FakeFlow([["a"], ["b"]])
        lines = filter_batches(flow, 0, math.inf)

        assert await lines.__anext__() == (0, "a")
        assert not flow.closed
        assert await lines.__anext__() == (1, "b")
        assert flow.closed
        await lines.aclose()

    async def test_skipped_batches_still_counted(self):
        """Batches before start are counted, not yielded."""
        flow = FakeFlow([["a", "b"], ["c", "d"], ["e", "f"]])
        assert await collect(flow, 5, math.inf) == [(5, "f")]
        assert flow.pulled == 3

    async def test_start_past_end_of_file(self):
        """Start beyond the last line yields nothing."""
        flow = FakeFlow([["a"], ["b", "c"]])
        assert await collect(flow, 10, math.inf) == []

    async def test_empty_final_batch(self):
        """An empty final batch ends iteration cleanly."""
        flow = FakeFlow([["a", "b"], []])
        assert await collect(flow, 0, math.inf) == [(0, "a"), (1, "b")]


# ─────────────────────────────────────────────────────────────────────
# Option Normalisation
# ─────────────────────────────────────────────────────────────────────


class TestNormalizeOptions:
    """Tests for normalize_options()."""

    def test_defaults(self):
        """No arguments give the whole file with the default chunk size."""
        options = normalize_options()
        assert options.start == 0
        assert options.end == math.inf
        assert options.unbounded
        assert options.high_water_mark == DEFAULT_HIGH_WATER_MARK

    def test_numeric_strings_coerced(self):
        """Strings holding numbers are accepted."""
        options = normalize_options(start="2", end="7", high_water_mark="16")
        assert (options.start, options.end, options.high_water_mark) == (2, 7, 16)

    def test_none_means_default(self):
        """None falls back to the default value."""
        options = normalize_options(start=None, end=None)
        assert options.start == 0
        assert options.end == math.inf

    def test_negative_start_clamped(self):
        """Negative start becomes 0."""
        assert normalize_options(start=-5).start == 0

    def test_end_before_start_unbounded(self):
        """end < start widens the window instead of emptying it."""
        options = normalize_options(start=5, end=2)
        assert options.start == 5
        assert options.end == math.inf

    def test_end_equal_start_kept(self):
        """end == start is an empty window, not an unbounded one."""
        assert normalize_options(start=3, end=3).end == 3

    def test_fractional_bounds_round_up(self):
        """Fractional bounds select whole line indexes."""
        options = normalize_options(start=1.2, end=3.5)
        assert (options.start, options.end) == (2, 4)

    @pytest.mark.parametrize("option", ["start", "end"])
    @pytest.mark.parametrize("value", ["abc", "nan", float("nan"), [1], object()])
    def test_not_a_number(self, option: str, value):
        """Non-numeric values are rejected."""
        with pytest.raises(ValidationError) as exc:
            normalize_options(**{option: value})
        assert exc.value.option == option
        assert option in str(exc.value)

    @pytest.mark.parametrize("value", [0, -1, "x", math.inf])
    def test_bad_high_water_mark(self, value):
        """Chunk size must be a positive finite number."""
        with pytest.raises(ValidationError):
            normalize_options(high_water_mark=value)

    def test_validation_error_hierarchy(self):
        """ValidationError is both a WordlistError and a ValueError."""
        with pytest.raises(ValueError):
            normalize_options(start="oops")
        with pytest.raises(WordlistError):
            normalize_options(end="oops")


# ─────────────────────────────────────────────────────────────────────
# Batch Model
# ─────────────────────────────────────────────────────────────────────


class TestBatch:
    """Tests for the Batch model."""

    def test_len_and_last_index(self):
        """A batch knows its size and the global index of its last line."""
        batch = Batch(["x", "y", "z"], first_index=7)
        assert len(batch) == 3
        assert batch.last_index == 9
        assert Batch([], first_index=7).last_index == 6

    def test_annotations_are_deferred(self):
        """Field annotations are kept as strings, like the other modules."""
        assert Batch.__annotations__ == {
            "lines": "list[str]",
            "first_index": "int",
            "final": "bool",
        }
