"""
Exception hierarchy for expression-matrix.

Two families:
- Structural errors (OutOfRangeError, DimensionMismatchError) are contract
  violations raised directly to the caller.
- Loader errors (FetchError, ParseError, AssembleError) are recoverable and
  delivered through the DatasetLoader callback. Each one names the stage that
  failed.
"""

from typing import Optional

from .types import Stage


class OutOfRangeError(IndexError):
    """Index outside ``[0, size)`` for a vector or matrix access."""

    def __init__(self, index, size: int, what: str = 'index'):
        self.index = index
        self.size = size
        super().__init__(f"{what} {index} out of range [0, {size})")


class DimensionMismatchError(ValueError):
    """Row/column counts disagree with the value grid or metadata."""


class LoaderError(Exception):
    """Base class for failures reported through the loader callback.

    Attributes:
        stage: Stage that failed (see Stage)
        identifier: Dataset identifier being loaded
    """

    stage: str = ''

    def __init__(self, message: str, identifier: Optional[str] = None):
        self.identifier = identifier
        self.message = message
        super().__init__(self._format())

    def bind(self, identifier: str) -> 'LoaderError':
        """Attach identifier if none was set; returns self."""
        if self.identifier is None:
            self.identifier = identifier
            self.args = (self._format(),)
        return self

    def _format(self) -> str:
        target = f" {self.identifier}" if self.identifier else ''
        return f"[{self.stage}]{target}: {self.message}"


class FetchError(LoaderError):
    """Network-layer failure: unreachable host, timeout, non-200 status."""

    stage = Stage.FETCH

    def __init__(self, message: str, identifier: Optional[str] = None,
                 status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, identifier)


class ParseError(LoaderError):
    """Malformed or unexpected payload."""

    stage = Stage.PARSE


class AssembleError(LoaderError):
    """Parsed records could not be assembled into a consistent Matrix."""

    stage = Stage.ASSEMBLE
