"""Incremental line splitting for chunked byte input."""

from __future__ import annotations

import codecs


class LineSplitter:
    """Turn a stream of byte chunks into complete lines.

    Accepts "\\n", "\\r\\n" and a bare "\\r" as line terminators; "\\r\\n"
    is one line even when the two bytes land in different chunks. A partial
    line is buffered until its terminator arrives or finish() is called.

    Example:
        >>> splitter = LineSplitter()
        >>> splitter.feed(b"alpha\\r")
        ['alpha']
        >>> splitter.feed(b"\\nbeta\\ngam")
        ['beta']
        >>> splitter.finish()
        ['gam']
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._partial: list[str] = []
        self._pending_cr = False
        self._finished = False
        self.lines_emitted = 0

    def feed(self, chunk: bytes) -> list[str]:
        """Consume a chunk and return the lines it completed."""
        if self._finished:
            raise RuntimeError("LineSplitter.feed() called after finish()")
        return self._split(self._decoder.decode(chunk))

    def finish(self) -> list[str]:
        """Flush the decoder and emit the unterminated last line, if any.

        Only the first call does anything; later calls return [].
        """
        if self._finished:
            return []
        lines = self._split(self._decoder.decode(b"", final=True))
        self._finished = True
        self._pending_cr = False
        if self._partial:
            lines.append("".join(self._partial))
            self._partial = []
            self.lines_emitted += 1
        return lines

    @property
    def finished(self) -> bool:
        """Whether finish() has been called."""
        return self._finished

    def _split(self, text: str) -> list[str]:
        lines: list[str] = []
        pos = 0
        length = len(text)

        if self._pending_cr and length:
            # the line ending in "\r" went out with the previous chunk
            self._pending_cr = False
            if text[0] == "\n":
                pos = 1

        # next terminator positions at or after pos; -1 means none left
        nl = text.find("\n", pos)
        cr = text.find("\r", pos)
        while pos < length:
            if nl == -1 and cr == -1:
                self._partial.append(text[pos:])
                break

            if cr == -1 or (nl != -1 and nl < cr):
                cut, nxt = nl, nl + 1
            elif cr + 1 == length:
                cut, nxt = cr, length
                self._pending_cr = True
            elif text[cr + 1] == "\n":
                cut, nxt = cr, cr + 2
            else:
                cut, nxt = cr, cr + 1

            self._partial.append(text[pos:cut])
            lines.append("".join(self._partial))
            self._partial = []
            pos = nxt
            if 0 <= nl < pos:
                nl = text.find("\n", pos)
            if 0 <= cr < pos:
                cr = text.find("\r", pos)

        self.lines_emitted += len(lines)
        return lines
