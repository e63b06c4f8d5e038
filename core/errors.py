# core/errors.py

from typing import Optional


class ConfigurationError(Exception):
    """Raised for invalid settings (badge patterns, encodings, replacements) before any rewrite starts."""


class RewriteError(Exception):
    """
    An internal invariant of a rewrite pass was violated.

    The pass is aborted and no output is produced. `context` names the
    offending document and/or shows an excerpt of the text around the failure.
    """

    def __init__(self, message: str, context: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def with_context(self, context: str) -> "RewriteError":
        if self.context:
            self.context = f"{context}: {self.context}"
        else:
            self.context = context
        return self

    def __str__(self):
        if self.context:
            return f"{self.message} ({self.context})"
        return self.message


class SpanError(RewriteError):
    """A node has no source spans, or a span is malformed."""


class CursorError(RewriteError):
    """The emitter cursor was asked to move backwards or past the end of the text."""


class TaskError(Exception):
    """A command could not be completed, e.g. because a file could not be read or written."""


class LicenseError(TaskError):
    """The license file could not be located."""
