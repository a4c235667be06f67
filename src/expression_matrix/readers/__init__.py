"""
Payload readers for expression-matrix.
"""

from .base import BaseReader, ParsedTable
from .series_matrix import SeriesMatrixReader
from .gds_soft import GdsSoftReader

__all__ = ['BaseReader', 'ParsedTable', 'SeriesMatrixReader', 'GdsSoftReader']
