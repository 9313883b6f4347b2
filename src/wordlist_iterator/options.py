"""Option normalisation for wordlist iterators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationError

# Chunk size used when the caller gives no high_water_mark
DEFAULT_HIGH_WATER_MARK = 64 * 1024


@dataclass(frozen=True, slots=True)
class IteratorOptions:
    """Validated options for a WordlistIterator.

    Attributes:
        high_water_mark: Bytes read from the file per chunk
        start: First global line index to yield (>= 0)
        end: Global line index to stop before (> start, or inf)
    """

    high_water_mark: int = DEFAULT_HIGH_WATER_MARK
    start: float = 0
    end: float = math.inf

    @property
    def unbounded(self) -> bool:
        """Whether the window runs to the end of the file."""
        return math.isinf(self.end)


def _coerce_number(option: str, value: Any, default: float) -> float:
    """Coerce value to a number, treating None as the default."""
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(option, value) from e
    if math.isnan(number):
        raise ValidationError(option, value)
    return number


def normalize_options(
    high_water_mark: Any = None,
    start: Any = 0,
    end: Any = math.inf,
) -> IteratorOptions:
    """Validate and normalise raw iterator options.

    Negative start is clamped to 0. An end before start widens the window
    to the end of the file instead of emptying it.

    Args:
        high_water_mark: Chunk size in bytes, or None for the default
        start: First line index to yield; anything float() accepts
        end: Line index to stop before; anything float() accepts

    Returns:
        Frozen IteratorOptions

    Raises:
        ValidationError: If a value is not a number (or is NaN), or if
            high_water_mark is not a positive integer
    """
    start = _coerce_number("start", start, 0)
    end = _coerce_number("end", end, math.inf)

    if start < 0:
        start = 0
    if end < start:
        end = math.inf

    # line indexes are whole numbers; round fractional bounds up
    if math.isfinite(start):
        start = math.ceil(start)
    if math.isfinite(end):
        end = math.ceil(end)

    if high_water_mark is None:
        chunk_size = DEFAULT_HIGH_WATER_MARK
    else:
        size = _coerce_number("high_water_mark", high_water_mark, DEFAULT_HIGH_WATER_MARK)
        if math.isinf(size) or size < 1:
            raise ValidationError("high_water_mark", high_water_mark, "must be a positive number")
        chunk_size = int(size)

    return IteratorOptions(high_water_mark=chunk_size, start=start, end=end)
