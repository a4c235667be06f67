"""
Matrix - expression grid exposed as row and column vectors

A Matrix wraps a read-only (row_count, column_count) float grid. Each row is
available as a RowVector and each column as a ColumnVector; the vectors are
created once, so their property bags persist for the life of the matrix.

Row and column annotations (probe ids, sample titles, characteristics) are
kept as metadata: ArrayVectors holding one value per row or per column.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import xarray as xr

from .exceptions import DimensionMismatchError
from .vector import AbstractVector, ArrayVector, ColumnVector, RowVector, check_index

ID_FIELD = 'id'


def _as_grid(values, column_count: int) -> np.ndarray:
    """Convert values to a 2-D float array without guessing shapes.

    Nested sequences must be rectangular; an empty sequence becomes a
    (0, column_count) grid.
    """
    if isinstance(values, pd.DataFrame):
        values = values.to_numpy()

    if isinstance(values, np.ndarray):
        return np.array(values, dtype=float)

    rows = [np.asarray(row, dtype=float) for row in values]
    if not rows:
        return np.empty((0, column_count), dtype=float)

    widths = {row.shape for row in rows}
    if len(widths) != 1 or rows[0].ndim != 1:
        raise DimensionMismatchError(
            f"Value grid is not rectangular: row shapes {sorted(widths)}"
        )
    return np.vstack(rows)


def _as_metadata(metadata: Optional[Mapping[str, Any]], expected: int,
                 axis: str) -> Dict[str, ArrayVector]:
    """Copy metadata values into new ArrayVectors and check their sizes."""
    result: Dict[str, ArrayVector] = {}
    for name, values in (metadata or {}).items():
        if isinstance(values, AbstractVector):
            values = list(values)
        vector = ArrayVector(name, values)
        if vector.size() != expected:
            raise DimensionMismatchError(
                f"{axis} metadata '{name}' has {vector.size()} values, "
                f"expected {expected}"
            )
        result[name] = vector
    return result


class Matrix:
    """Rectangular expression grid with row/column vectors and metadata.

    Args:
        values: 2-D numpy array, nested sequences, or DataFrame
        row_count: Declared number of rows
        column_count: Declared number of columns
        name: Dataset name (e.g. 'GSE53986')
        row_metadata: Mapping of name -> one value per row
        column_metadata: Mapping of name -> one value per column
        properties: Dataset-level properties (series title, platform, ...)

    Raises:
        DimensionMismatchError: If the grid or any metadata disagrees with
            the declared counts

    Example:
        >>> m = Matrix([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]], 3, 2,
        ...            column_metadata={'id': ['GSM1', 'GSM2']})
        >>> m.get_column(1).get_name()
        'GSM2'
        >>> m.get_row(2).get_value(0)
        5.0
    """

    def __init__(
        self,
        values,
        row_count: int,
        column_count: int,
        name: str = '',
        row_metadata: Optional[Mapping[str, Any]] = None,
        column_metadata: Optional[Mapping[str, Any]] = None,
        properties: Optional[Dict[str, Any]] = None
    ):
        if row_count < 0 or column_count < 0:
            raise DimensionMismatchError(
                f"Counts must be non-negative, got ({row_count}, {column_count})"
            )

        grid = _as_grid(values, column_count)
        if grid.ndim != 2 or grid.shape != (row_count, column_count):
            raise DimensionMismatchError(
                f"Value grid has shape {grid.shape}, "
                f"expected ({row_count}, {column_count})"
            )
        grid.setflags(write=False)

        self._name = '' if name is None else str(name)
        self._grid = grid
        self._row_count = row_count
        self._column_count = column_count
        self._row_metadata = _as_metadata(row_metadata, row_count, 'Row')
        self._column_metadata = _as_metadata(column_metadata, column_count, 'Column')
        self._properties: Dict[str, Any] = dict(properties or {})

        row_ids = self.get_row_ids()
        column_ids = self.get_column_ids()
        self._rows = tuple(RowVector(grid, i, row_ids[i]) for i in range(row_count))
        self._columns = tuple(
            ColumnVector(grid, j, column_ids[j]) for j in range(column_count)
        )

    def get_name(self) -> str:
        return self._name

    def get_properties(self) -> Dict[str, Any]:
        """Return the dataset-level property bag by reference."""
        return self._properties

    def get_row_count(self) -> int:
        return self._row_count

    def get_column_count(self) -> int:
        return self._column_count

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._row_count, self._column_count)

    @property
    def rows(self) -> Tuple[RowVector, ...]:
        return self._rows

    @property
    def columns(self) -> Tuple[ColumnVector, ...]:
        return self._columns

    def get_row(self, index: int) -> RowVector:
        """Return the row vector at index (size == column count)."""
        return self._rows[check_index(index, self._row_count, 'row')]

    def get_column(self, index: int) -> ColumnVector:
        """Return the column vector at index (size == row count)."""
        return self._columns[check_index(index, self._column_count, 'column')]

    def get_value(self, row: int, column: int) -> float:
        i = check_index(row, self._row_count, 'row')
        j = check_index(column, self._column_count, 'column')
        return self._grid[i, j].item()

    def get_row_metadata(self) -> Dict[str, ArrayVector]:
        return dict(self._row_metadata)

    def get_column_metadata(self) -> Dict[str, ArrayVector]:
        return dict(self._column_metadata)

    def get_row_ids(self) -> List[str]:
        """Return row ids from the 'id' metadata, or positional strings."""
        return self._ids(self._row_metadata, self._row_count)

    def get_column_ids(self) -> List[str]:
        """Return column ids from the 'id' metadata, or positional strings."""
        return self._ids(self._column_metadata, self._column_count)

    @staticmethod
    def _ids(metadata: Dict[str, ArrayVector], count: int) -> List[str]:
        if ID_FIELD in metadata:
            return [str(v) for v in metadata[ID_FIELD]]
        return [str(i) for i in range(count)]

    def to_numpy(self) -> np.ndarray:
        """Return a writable copy of the value grid."""
        return self._grid.copy()

    def slice(
        self,
        row_indices: Optional[Sequence[int]] = None,
        column_indices: Optional[Sequence[int]] = None
    ) -> 'Matrix':
        """Return a new Matrix restricted to the given rows and columns.

        Indices keep the order given; None keeps every row (or column).
        Metadata is sliced along; vector property bags are not carried over.

        Raises:
            OutOfRangeError: If any index is outside the matrix
        """
        rows = self._select(row_indices, self._row_count, 'row')
        columns = self._select(column_indices, self._column_count, 'column')

        grid = self._grid[np.ix_(rows, columns)]
        row_metadata = {
            name: [vector.get_value(i) for i in rows]
            for name, vector in self._row_metadata.items()
        }
        column_metadata = {
            name: [vector.get_value(j) for j in columns]
            for name, vector in self._column_metadata.items()
        }

        return Matrix(
            grid,
            len(rows),
            len(columns),
            name=self._name,
            row_metadata=row_metadata,
            column_metadata=column_metadata,
            properties=self._properties
        )

    @staticmethod
    def _select(indices: Optional[Sequence[int]], count: int, what: str) -> List[int]:
        if indices is None:
            return list(range(count))
        return [check_index(i, count, what) for i in indices]

    def to_dataframe(self) -> pd.DataFrame:
        """Return the grid as a DataFrame indexed by row ids, columns by column ids."""
        return pd.DataFrame(
            self._grid.copy(),
            index=pd.Index(self.get_row_ids(), name='row'),
            columns=pd.Index(self.get_column_ids(), name='column')
        )

    def to_xarray(self) -> xr.DataArray:
        """Return the grid as an xarray.DataArray with dims ('row', 'column').

        Metadata other than 'id' is attached as non-index coordinates named
        'row_<name>' / 'column_<name>'.
        """
        coords: Dict[str, Any] = {
            'row': self.get_row_ids(),
            'column': self.get_column_ids(),
        }
        for name, vector in self._row_metadata.items():
            if name != ID_FIELD:
                coords[f'row_{name}'] = ('row', vector.to_numpy())
        for name, vector in self._column_metadata.items():
            if name != ID_FIELD:
                coords[f'column_{name}'] = ('column', vector.to_numpy())

        return xr.DataArray(
            self._grid.copy(),
            dims=['row', 'column'],
            coords=coords,
            name=self._name or None,
            attrs=dict(self._properties)
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"(name={self._name!r}, "
            f"shape={self.shape}, "
            f"row_metadata={list(self._row_metadata)}, "
            f"column_metadata={list(self._column_metadata)})"
        )
