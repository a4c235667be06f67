"""Mock objects for expression-matrix tests."""

from .mock_fetcher import MockFetcher, run_read
from .payloads import gds_soft_payload, series_matrix_payload

__all__ = ['MockFetcher', 'run_read', 'gds_soft_payload', 'series_matrix_payload']
