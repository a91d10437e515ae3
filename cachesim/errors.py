from __future__ import annotations


class CacheSimError(ValueError):
    """Base class for every user-facing simulator error."""


class ConfigurationError(CacheSimError):
    """Raised when a cache geometry or simulator config is invalid."""


class TraceError(CacheSimError):
    """A fatal problem with a single trace record.

    ``line_number`` and ``text`` are filled in by whoever knows where the
    record came from; the decoder itself only knows the offending text.
    """

    def __init__(self, message: str, text: str | None = None, line_number: int | None = None):
        super().__init__(message)
        self.message = message
        self.text = text
        self.line_number = line_number

    def with_context(self, line_number: int, text: str) -> TraceError:
        """Attaches record location to the error and returns it for re-raising."""
        self.line_number = line_number
        self.text = text
        return self

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message} (record: {self.text!r})"


class FormatError(TraceError):
    """Address contains a non-hex digit, or the record is malformed."""


class PrefixError(TraceError):
    """Address does not start with the literal '0x' prefix."""


class LengthMismatch(TraceError):
    """Decoded address is not exactly 32 bits wide."""


class UnrecognizedOperation(TraceError):
    """Operation token is neither 'l' nor 's'."""
