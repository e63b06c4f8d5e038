# core/emitter.py

from typing import List, Tuple

from .errors import CursorError


class Emitter:
    """
    Copies the original text to an output buffer, in order, except for the
    ranges that are explicitly skipped.

    `cursor` is the offset up to which the source has been handled; it never
    decreases. Every handled range is recorded in `segments` as
    `(start, end, emitted)`, so after `flush()` the segments partition the
    whole source.
    """

    def __init__(self, source: str):
        self.source = source
        self.cursor = 0
        self.segments: List[Tuple[int, int, bool]] = []
        self._parts: List[str] = []

    def _check(self, offset: int):
        if offset < self.cursor:
            raise CursorError(
                f"Cannot move cursor back from {self.cursor} to {offset}",
                self._excerpt(offset),
            )
        if offset > len(self.source):
            raise CursorError(
                f"Cannot move cursor to {offset}, past the end of the text ({len(self.source)})",
                self._excerpt(len(self.source)),
            )

    def _excerpt(self, offset: int) -> str:
        start = max(0, min(offset, self.cursor) - 20)
        end = min(len(self.source), max(offset, self.cursor) + 20)
        return repr(self.source[start:end])

    def emit_through(self, offset: int):
        """Appends the source text from the cursor up to `offset` to the output."""
        self._check(offset)
        if offset > self.cursor:
            self._parts.append(self.source[self.cursor:offset])
            self.segments.append((self.cursor, offset, True))
        self.cursor = offset

    def skip_to(self, offset: int):
        """Drops the source text from the cursor up to `offset`."""
        self._check(offset)
        if offset > self.cursor:
            self.segments.append((self.cursor, offset, False))
        self.cursor = offset

    def skip_char(self, char: str) -> bool:
        if self.cursor < len(self.source) and self.source[self.cursor] == char:
            self.skip_to(self.cursor + 1)
            return True
        return False

    def flush(self) -> str:
        """Emits the rest of the source and returns the complete output."""
        self.emit_through(len(self.source))
        return "".join(self._parts)
