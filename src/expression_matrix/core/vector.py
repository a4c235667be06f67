"""
Vector - named, fixed-size, ordered scalar containers

A Vector represents one row or one column of an expression matrix, or a
per-row/per-column annotation (sample titles, probe ids, ...). All variants
share the contract {size, get_name, get_value, get_properties}; they differ
only in how get_value resolves an index.

Variants:
- AbstractVector: the contract itself, get_value is not implemented
- ArrayVector: owns a copy of its values
- RowVector / ColumnVector: views on one row/column of a Matrix grid
- ComputedVector: values computed per index
"""

from typing import Any, Callable, Dict, Iterator, Optional, Sequence

import numpy as np

from .exceptions import OutOfRangeError


def check_index(index, size: int, what: str = 'index') -> int:
    """Validate ``0 <= index < size`` and return the index as int.

    Negative indices are rejected rather than wrapped.

    Raises:
        OutOfRangeError: If index is outside [0, size)
    """
    if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
        raise TypeError(f"{what} must be an integer, got {type(index).__name__}")
    if index < 0 or index >= size:
        raise OutOfRangeError(index, size, what)
    return int(index)


class AbstractVector:
    """Base vector with a name, a fixed size and a property bag.

    Subclasses must implement get_value.

    Args:
        name: Vector name (None is stored as '')
        size: Number of elements, fixed for the vector's lifetime
    """

    def __init__(self, name: Optional[str], size: int):
        if isinstance(size, (bool, np.bool_)) or not isinstance(size, (int, np.integer)):
            raise TypeError(f"Vector size must be an integer, got {type(size).__name__}")
        if size < 0:
            raise ValueError(f"Vector size must be non-negative, got {size}")
        self._name = '' if name is None else str(name)
        self._size = int(size)
        self._properties: Dict[str, Any] = {}

    def get_value(self, index: int):
        raise NotImplementedError('Not implemented')

    def get_properties(self) -> Dict[str, Any]:
        """Return the property bag by reference."""
        return self._properties

    def size(self) -> int:
        return self._size

    def get_name(self) -> str:
        return self._name

    def to_numpy(self) -> np.ndarray:
        """Return the values as a new numpy array."""
        return np.array([self.get_value(i) for i in range(self._size)])

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator:
        for i in range(self._size):
            yield self.get_value(i)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, size={self._size})"


class ArrayVector(AbstractVector):
    """Vector backed by its own copy of a sequence.

    Used for row and column annotations, where one value describes each row
    (or column) of a matrix.

    Example:
        >>> titles = ArrayVector('title', ['liver 1', 'liver 2'])
        >>> titles.get_value(1)
        'liver 2'
    """

    def __init__(self, name: Optional[str], values: Sequence):
        values = tuple(values)
        super().__init__(name, len(values))
        self._values = values

    def get_value(self, index: int):
        return self._values[check_index(index, self._size)]

    def to_numpy(self) -> np.ndarray:
        return np.array(self._values)


class _GridVector(AbstractVector):
    """Vector reading from a 1-D slice of a matrix grid."""

    def __init__(self, name: Optional[str], values: np.ndarray):
        super().__init__(name, values.shape[0])
        self._values = values

    def get_value(self, index: int):
        return self._values[check_index(index, self._size)].item()

    def to_numpy(self) -> np.ndarray:
        return self._values.copy()


class RowVector(_GridVector):
    """One row of a matrix grid; size equals the matrix column count.

    Args:
        grid: 2-D value grid of the owning matrix
        row_index: Row this vector exposes
        name: Vector name (usually the row id)
    """

    def __init__(self, grid: np.ndarray, row_index: int, name: Optional[str] = None):
        super().__init__(name, grid[row_index, :])
        self.row_index = row_index


class ColumnVector(_GridVector):
    """One column of a matrix grid; size equals the matrix row count.

    Args:
        grid: 2-D value grid of the owning matrix
        column_index: Column this vector exposes
        name: Vector name (usually the sample id)
    """

    def __init__(self, grid: np.ndarray, column_index: int, name: Optional[str] = None):
        super().__init__(name, grid[:, column_index])
        self.column_index = column_index


class ComputedVector(AbstractVector):
    """Vector whose values are computed on access.

    Args:
        name: Vector name
        size: Number of elements
        func: Callable mapping a valid index to its value

    Example:
        >>> squares = ComputedVector('squares', 4, lambda i: i * i)
        >>> squares.get_value(3)
        9
    """

    def __init__(self, name: Optional[str], size: int, func: Callable[[int], Any]):
        super().__init__(name, size)
        self._func = func

    @classmethod
    def from_vector(cls, source: AbstractVector, transform: Callable[[Any], Any],
                    name: Optional[str] = None) -> 'ComputedVector':
        """Derive a vector by applying transform to each value of source.

        The derived vector has its own property bag; source is read lazily.
        """
        if name is None:
            name = source.get_name()
        return cls(name, source.size(), lambda i: transform(source.get_value(i)))

    def get_value(self, index: int):
        return self._func(check_index(index, self._size))
