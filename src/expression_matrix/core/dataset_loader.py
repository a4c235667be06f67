"""
DatasetLoader facade for expression-matrix.

This module provides the main user-facing API for loading GEO datasets into
Matrix instances, with callback-style completion on top of asyncio.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from .config_manager import ConfigManager
from .exceptions import (
    AssembleError,
    DimensionMismatchError,
    FetchError,
    LoaderError,
    ParseError,
)
from .fetcher import GeoFetcher
from .matrix import Matrix
from .matrix_builder import MatrixBuilder
from .types import LoaderState, PayloadKind
from ..readers.base import BaseReader
from ..readers.gds_soft import GdsSoftReader
from ..readers.series_matrix import SeriesMatrixReader

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[LoaderError], Optional[List[Matrix]]], None]


class ReadHandle:
    """Per-invocation view of a read: its state and a cancellation switch.

    A handle drives exactly one read. Cancelling it before the read finishes
    suppresses the callback; network I/O already in flight still completes.

    Example:
        >>> handle = ReadHandle()
        >>> loader.read('GSE53986', callback, handle=handle)
        >>> handle.state  # fetching starts once the event loop runs the task
        'idle'
        >>> handle.cancel()
        True
    """

    def __init__(self):
        self.identifier: Optional[str] = None
        self._state = LoaderState.IDLE
        self._cancelled = False

    @property
    def state(self) -> str:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._state in LoaderState.TERMINAL

    def cancel(self) -> bool:
        """Suppress the eventual callback. Returns False if already finished."""
        if self.done:
            return False
        self._cancelled = True
        return True

    def _start(self, identifier: str):
        if self._state != LoaderState.IDLE:
            raise RuntimeError(
                f"ReadHandle already used for {self.identifier!r} (state={self._state})"
            )
        self.identifier = identifier

    def _advance(self, target: str):
        if not LoaderState.can_transition(self._state, target):
            raise RuntimeError(f"Illegal loader transition {self._state} -> {target}")
        logger.debug(f"{self.identifier}: {self._state} -> {target}")
        self._state = target

    def __repr__(self) -> str:
        return (
            f"ReadHandle(identifier={self.identifier!r}, "
            f"state={self._state}, cancelled={self._cancelled})"
        )


class DatasetLoader:
    """Facade for loading GEO datasets as matrices.

    DatasetLoader coordinates the fetcher, the payload readers and the matrix
    builder:

        read(identifier, callback)
            fetching: GeoFetcher downloads the raw files
            parsing:  a reader per payload kind decodes ParsedTables,
                      MatrixBuilder assembles them into Matrices
            completed: callback(None, matrices)
            failed:    callback(error, None), error.stage in
                       {'fetch', 'parse', 'assemble'}

    Key Features:
    - Callback fires exactly once per read, after fetch and parse finish
    - No retries; callers re-invoke read on failure
    - Concurrent reads are independent; each owns its matrices
    - Extensible: custom readers can be registered per payload kind

    Args:
        fetcher: Object with ``async fetch(identifier) -> List[FetchedFile]``;
            defaults to a GeoFetcher built from config_manager
        config_manager: Settings source (default: ConfigManager('config'))
        builder: MatrixBuilder instance

    Example:
        >>> async def main():
        ...     loader = DatasetLoader()
        ...     done = asyncio.get_running_loop().create_future()
        ...     loader.read('GSE53986', lambda err, res: done.set_result((err, res)))
        ...     err, matrices = await done
        ...     print(matrices[0].get_row_count())  # 45101
    """

    def __init__(
        self,
        fetcher=None,
        config_manager: Optional[ConfigManager] = None,
        builder: Optional[MatrixBuilder] = None
    ):
        if fetcher is None:
            config_manager = config_manager if config_manager is not None else ConfigManager()
            fetcher = GeoFetcher.from_config(config_manager)
        self._fetcher = fetcher
        self._builder = builder if builder is not None else MatrixBuilder()

        # Register core readers
        self._readers: Dict[str, BaseReader] = {
            PayloadKind.SERIES_MATRIX: SeriesMatrixReader(),
            PayloadKind.GDS_SOFT: GdsSoftReader(),
        }
        self._tasks = set()

    def register_reader(self, kind: str, reader: BaseReader):
        """Register a reader for a payload kind, replacing any existing one.

        Args:
            kind: Payload kind produced by the fetcher (see PayloadKind)
            reader: Reader instance implementing BaseReader
        """
        self._readers[kind] = reader

    def read(self, identifier: str, callback: Callback,
             handle: Optional[ReadHandle] = None) -> None:
        """Load identifier in the background and report through callback.

        Must be called from a running event loop. Returns immediately; the
        callback is invoked exactly once with ``(None, matrices)`` on success
        or ``(error, None)`` on failure, unless the handle is cancelled first.

        Args:
            identifier: GEO accession (e.g. 'GSE53986', 'GDS507')
            callback: Completion callback ``(error, result)``
            handle: Optional ReadHandle to observe state or cancel

        Raises:
            RuntimeError: If no event loop is running or the handle was used
        """
        loop = asyncio.get_running_loop()
        handle = handle if handle is not None else ReadHandle()
        handle._start(identifier)

        task = loop.create_task(self._run(identifier, callback, handle))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, identifier: str, callback: Callback, handle: ReadHandle):
        try:
            matrices = await self._load(identifier, handle)
        except LoaderError as e:
            error, result = e, None
        else:
            error, result = None, matrices

        if handle.cancelled:
            logger.warning(f"{identifier}: read cancelled, callback suppressed")
            return
        callback(error, result)

    async def load(self, identifier: str, handle: Optional[ReadHandle] = None) -> List[Matrix]:
        """Coroutine form of read: return the matrices or raise.

        Raises:
            FetchError, ParseError, AssembleError: Tagged with the failing stage
        """
        handle = handle if handle is not None else ReadHandle()
        handle._start(identifier)
        return await self._load(identifier, handle)

    async def _load(self, identifier: str, handle: ReadHandle) -> List[Matrix]:
        handle._advance(LoaderState.FETCHING)
        try:
            files = await self._fetcher.fetch(identifier)
        except LoaderError as e:
            self._mark_failed(handle, e.bind(identifier))
            raise
        except Exception as e:
            error = FetchError(f"Fetch failed: {type(e).__name__}: {e}", identifier)
            self._mark_failed(handle, error)
            raise error from e

        handle._advance(LoaderState.PARSING)
        matrices: List[Matrix] = []
        try:
            for fetched in files:
                tables = self._parse(fetched, identifier)
                matrices.extend(self._assemble(tables, identifier))
        except LoaderError as e:
            self._mark_failed(handle, e.bind(identifier))
            raise

        handle._advance(LoaderState.COMPLETED)
        logger.info(
            f"{identifier}: loaded {len(matrices)} matrices "
            f"{[m.shape for m in matrices]}"
        )
        return matrices

    def _parse(self, fetched, identifier: str):
        reader = self._readers.get(fetched.kind)
        if reader is None:
            raise ParseError(
                f"No reader registered for payload kind '{fetched.kind}'. "
                f"Available readers: {list(self._readers.keys())}",
                identifier
            )
        try:
            return reader.read(fetched.payload, fetched.name)
        except LoaderError:
            raise
        except Exception as e:
            raise ParseError(f"Could not parse {fetched.name}: {e}", identifier) from e

    def _assemble(self, tables, identifier: str) -> List[Matrix]:
        try:
            return self._builder.build_all(tables)
        except DimensionMismatchError as e:
            raise AssembleError(str(e), identifier) from e
        except Exception as e:
            raise AssembleError(f"Could not assemble matrix: {e}", identifier) from e

    def _mark_failed(self, handle: ReadHandle, error: LoaderError):
        handle._advance(LoaderState.FAILED)
        logger.error(f"Load failed: {error}")
