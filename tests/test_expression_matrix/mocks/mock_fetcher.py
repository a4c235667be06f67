"""MockFetcher for testing DatasetLoader without network access."""

import asyncio
from typing import Dict, List

from expression_matrix.core.exceptions import FetchError
from expression_matrix.core.fetcher import FetchedFile


class MockFetcher:
    """Mock GeoFetcher serving in-memory payloads.

    Mimics the interface of expression_matrix.core.fetcher.GeoFetcher but
    returns registered files instead of issuing HTTP requests.

    Usage:
        fetcher = MockFetcher()
        fetcher.register('GSE1', [FetchedFile(...)])
        files = await fetcher.fetch('GSE1')
    """

    def __init__(self):
        """Initialize mock fetcher with empty registry."""
        self._files: Dict[str, List[FetchedFile]] = {}
        self._errors: Dict[str, Exception] = {}
        self._delays: Dict[str, float] = {}
        self.calls: List[str] = []

    def register(self, identifier: str, files: List[FetchedFile], delay: float = 0.0):
        """Register the files fetch() returns for identifier.

        Args:
            identifier: Dataset identifier
            files: Files to return
            delay: Seconds to suspend before returning
        """
        self._files[identifier] = list(files)
        self._delays[identifier] = delay

    def register_error(self, identifier: str, error: Exception):
        """Make fetch() raise error for identifier."""
        self._errors[identifier] = error

    async def fetch(self, identifier: str) -> List[FetchedFile]:
        """Return registered files (mimics GeoFetcher.fetch).

        Raises:
            FetchError: If identifier is not registered
        """
        self.calls.append(identifier)
        await asyncio.sleep(self._delays.get(identifier, 0.0))

        if identifier in self._errors:
            raise self._errors[identifier]
        if identifier not in self._files:
            raise FetchError("Non-200 status code 404", identifier, status_code=404)
        return list(self._files[identifier])


async def run_read(loader, identifier: str, timeout: float = 5.0, handle=None):
    """Drive loader.read and wait for its callback.

    The timeout bounds this call only; nothing global is changed.

    Returns:
        Tuple (error, result, calls) where calls lists every callback
        invocation seen, including any after the first.
    """
    loop = asyncio.get_running_loop()
    first = loop.create_future()
    calls = []

    def callback(error, result):
        calls.append((error, result))
        if not first.done():
            first.set_result((error, result))

    loader.read(identifier, callback, handle=handle)
    error, result = await asyncio.wait_for(first, timeout)

    # Give a stray second invocation the chance to show up
    for _ in range(5):
        await asyncio.sleep(0)
    return error, result, calls
