"""Core components for expression-matrix"""

from .types import LoaderState, PayloadKind, Stage
from .exceptions import (
    AssembleError,
    DimensionMismatchError,
    FetchError,
    LoaderError,
    OutOfRangeError,
    ParseError,
)
from .vector import AbstractVector, ArrayVector, ColumnVector, ComputedVector, RowVector
from .matrix import Matrix
from .config_manager import ConfigManager
from .matrix_builder import MatrixBuilder
from .fetcher import FetchedFile, GeoFetcher
from .dataset_loader import DatasetLoader, ReadHandle

__all__ = [
    'LoaderState',
    'PayloadKind',
    'Stage',
    'AssembleError',
    'DimensionMismatchError',
    'FetchError',
    'LoaderError',
    'OutOfRangeError',
    'ParseError',
    'AbstractVector',
    'ArrayVector',
    'ColumnVector',
    'ComputedVector',
    'RowVector',
    'Matrix',
    'ConfigManager',
    'MatrixBuilder',
    'FetchedFile',
    'GeoFetcher',
    'DatasetLoader',
    'ReadHandle',
]
