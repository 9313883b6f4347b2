"""wordlist-iterator: lazy, ranged, cancellable iteration over huge wordlists.

Example:
    >>> from wordlist_iterator import wordlist_iterator
    >>>
    >>> # Every line, one batch in memory at a time
    >>> async for word in wordlist_iterator("rockyou.txt"):
    ...     await try_password(word)
    >>>
    >>> # Only lines 1000..1999 (0-indexed, end exclusive)
    >>> async with wordlist_iterator("rockyou.txt", start=1000, end=2000) as words:
    ...     async for word in words:
    ...         if await try_password(word):
    ...             break
    >>>
    >>> # Stop from inside the loop and release the file at once
    >>> words = wordlist_iterator("rockyou.txt")
    >>> word = await words.asend(None)
    >>> await words.asend(True)  # raises StopAsyncIteration, file closed
"""

from pathlib import Path

from .exceptions import OpenError, ValidationError, WordlistError
from .iterator import WordlistIterator, iter_words, wordlist_iterator
from .models import Batch, IteratorState
from .options import DEFAULT_HIGH_WATER_MARK, IteratorOptions, normalize_options

# Small wordlist shipped for tests and examples
TEST_WORDLIST = Path(__file__).parent / "data" / "test_wordlist.txt"

__version__ = "0.3.0"
__all__ = [
    # Core
    "wordlist_iterator",
    "iter_words",
    "WordlistIterator",
    "IteratorState",
    "Batch",
    # Options
    "IteratorOptions",
    "normalize_options",
    "DEFAULT_HIGH_WATER_MARK",
    "TEST_WORDLIST",
    # Exceptions
    "WordlistError",
    "ValidationError",
    "OpenError",
]
