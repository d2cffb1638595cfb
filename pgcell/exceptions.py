"""pgcell exception hierarchy.

Decoding itself never raises; these are reserved for configuration and
row-source seams.
"""


class PgCellError(Exception):
    """Base exception for all pgcell operations."""

    def __init__(self, message: str, code: int | None = None, detail: str | None = None):
        self.message = message
        self.code = code
        self.detail = detail
        super().__init__(message)


class ThresholdError(PgCellError):
    """Decoder thresholds are missing, malformed or inconsistent."""
    pass


class RowShapeError(PgCellError):
    """A row handed to the mapper is malformed (e.g. duplicate column names)."""
    pass


class SourceError(PgCellError):
    """The row source failed to produce cells (connection lost, bad query, etc.)."""
    pass
