"""Domain exceptions for the tabular codec.

Only whole-file failures are exceptions. Individual rows that cannot be
used are dropped and counted, never raised.
"""


class TabularError(Exception):
    """Base exception for all tabular codec errors."""


class ParseError(TabularError):
    """Raised when a tabular source cannot be read as rows at all."""

    def __init__(self, source: str, reason: str) -> None:
        """Initialize the parse error.

        Args:
            source: Description of the source (file path or "<text>").
            reason: Human-readable cause.
        """
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read CSV from {source}: {reason}")


class ExportError(TabularError):
    """Raised when an export file cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize the export error.

        Args:
            path: Target file path.
            reason: Human-readable cause.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write CSV to {path}: {reason}")
