"""Custom exceptions for wordlist-iterator."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class WordlistError(Exception):
    """Base class for wordlist iteration errors.

    Everything the library raises on its own inherits from this, allowing
    users to catch all of it with a single except.
    """


class ValidationError(WordlistError, ValueError):
    """An iterator option could not be coerced to a usable number.

    Raised synchronously by the factory, before any file is touched.

    Attributes:
        option: Name of the offending keyword argument
        value: The value that was passed in
    """

    def __init__(self, option: str, value: Any, reason: str = "must be number") -> None:
        self.option = option
        self.value = value
        super().__init__(f'"{option}" {reason} (got {value!r})')


class OpenError(WordlistError, OSError):
    """The wordlist could not be opened or probed.

    Covers missing files, permission problems and any other OS-level
    failure uniformly. The underlying OSError is chained as __cause__.

    Attributes:
        path: Path of the wordlist that failed to open
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Cant open file at wordlist path: {self.path}")
