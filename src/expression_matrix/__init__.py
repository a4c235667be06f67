"""
expression-matrix: Gene-expression matrices loaded from NCBI GEO.

This package provides:
- Vector: named, fixed-size value containers with a property bag
- Matrix: expression grid exposed as row and column vectors, with
  per-row/per-column annotations
- DatasetLoader: asynchronous GEO loader with (error, result) callbacks

Usage:
    import asyncio
    from expression_matrix import DatasetLoader

    async def main():
        loader = DatasetLoader()
        matrices = await loader.load('GSE53986')
        print(matrices[0].get_row_count(), matrices[0].get_column_count())

    asyncio.run(main())
"""

from .core.dataset_loader import DatasetLoader, ReadHandle
from .core.exceptions import (
    AssembleError,
    DimensionMismatchError,
    FetchError,
    LoaderError,
    OutOfRangeError,
    ParseError,
)
from .core.matrix import Matrix
from .core.vector import AbstractVector, ArrayVector, ComputedVector

__version__ = "0.1.0"

__all__ = [
    'DatasetLoader',
    'ReadHandle',
    'Matrix',
    'AbstractVector',
    'ArrayVector',
    'ComputedVector',
    'LoaderError',
    'FetchError',
    'ParseError',
    'AssembleError',
    'OutOfRangeError',
    'DimensionMismatchError',
]
