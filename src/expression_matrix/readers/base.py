"""
Base reader interface for expression-matrix.

This module defines the abstract base class for payload readers and the
ParsedTable record they produce.
"""

import gzip
import io
import zlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from ..core.exceptions import ParseError


@dataclass
class ParsedTable:
    """Structured records decoded from one payload.

    Attributes:
        name: Dataset name (e.g. 'GSE53986' or 'GSE123-GPL96')
        row_ids: One identifier per row (probe ids)
        column_ids: One identifier per column (sample accessions)
        values: Value grid with shape (len(row_ids), len(column_ids))
        row_annotations: name -> one value per row
        column_annotations: name -> one value per column
        attributes: Dataset-level attributes (title, platform, ...)
    """
    name: str
    row_ids: List[str]
    column_ids: List[str]
    values: np.ndarray
    row_annotations: Dict[str, List[Any]] = field(default_factory=dict)
    column_annotations: Dict[str, List[Any]] = field(default_factory=dict)
    attributes: Dict[str, str] = field(default_factory=dict)


class BaseReader(ABC):
    """Abstract base class for payload readers.

    All readers (SeriesMatrixReader, GdsSoftReader, ...) must implement this
    interface. The `read` method takes a raw payload and the file name it
    was fetched as, and returns one ParsedTable per dataset in the payload.

    Example:
        >>> class CustomReader(BaseReader):
        ...     def read(self, payload: bytes, name: str) -> List[ParsedTable]:
        ...         text = self.decode(payload, name)
        ...         return [...]
    """

    #: File suffixes stripped from file names to form dataset names
    suffixes = ('.gz',)

    @abstractmethod
    def read(self, payload: bytes, name: str) -> List[ParsedTable]:
        """Parse a raw payload.

        Args:
            payload: Raw bytes as fetched (gzip-compressed if name ends in .gz)
            name: File name the payload was fetched as

        Returns:
            List of ParsedTable, one per dataset contained in the payload

        Raises:
            ParseError: If the payload is malformed
        """
        pass

    def decode(self, payload: bytes, name: str) -> str:
        """Decompress (for .gz names) and decode a payload to text.

        Raises:
            ParseError: If the compressed stream is corrupt or truncated
        """
        if name.endswith('.gz'):
            try:
                payload = gzip.decompress(payload)
            except (OSError, EOFError, zlib.error) as e:
                raise ParseError(f"Corrupt gzip payload in {name}: {e}") from e
        return payload.decode('utf-8', errors='replace')

    def dataset_name(self, name: str) -> str:
        """Strip known file suffixes from a file name.

        Example:
            >>> SeriesMatrixReader().dataset_name('GSE1-GPL2_series_matrix.txt.gz')
            'GSE1-GPL2'
        """
        stripped = True
        while stripped:
            stripped = False
            for suffix in self.suffixes:
                if suffix and name.endswith(suffix):
                    name = name[:-len(suffix)]
                    stripped = True
        return name

    def read_table(self, lines: List[str], name: str) -> pd.DataFrame:
        """Read tab-separated table lines (header first) as strings.

        The first column becomes the index. Quoted fields are unquoted and
        empty fields stay as ''.

        Raises:
            ParseError: If there is no header or rows are malformed
        """
        if not lines:
            raise ParseError(f"Table in {name} has no header line")
        try:
            frame = pd.read_csv(
                io.StringIO('\n'.join(lines)),
                sep='\t',
                index_col=0,
                dtype=str,
                keep_default_na=False,
                quotechar='"'
            )
        except ValueError as e:
            raise ParseError(f"Malformed table in {name}: {e}") from e
        frame.index = frame.index.astype(str)
        return frame

    @staticmethod
    def numeric_grid(frame: pd.DataFrame) -> np.ndarray:
        """Convert a string frame to a float grid; non-numeric cells become NaN."""
        rows, columns = frame.shape
        grid = np.empty((rows, columns), dtype=float)
        for j in range(columns):
            grid[:, j] = pd.to_numeric(frame.iloc[:, j], errors='coerce').to_numpy(dtype=float)
        return grid
