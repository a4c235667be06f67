"""
GeoFetcher - asynchronous access to the NCBI GEO repository

Resolves a GEO identifier to the raw files holding its expression data:

- GSE53986         -> series/GSE53nnn/GSE53986/matrix/ listing, then every
                      *_series_matrix.txt.gz file in it (one per platform)
- GSE12345-GPL96   -> only that platform's series matrix file
- GDS507           -> datasets/GDSnnn/GDS507/soft/GDS507.soft.gz

Requests go through curl_cffi's AsyncSession with browser impersonation, one
request at a time per fetch call.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from curl_cffi.requests import AsyncSession

from .config_manager import ConfigManager
from .exceptions import FetchError
from .types import PayloadKind

logger = logging.getLogger(__name__)

ACCESSION_PATTERN = re.compile(r'^(GSE|GDS)(\d+)(?:-(GPL\d+))?$', re.IGNORECASE)
SERIES_MATRIX_LINK = re.compile(r'href="(GSE\d+(?:-GPL\d+)?_series_matrix\.txt\.gz)"')


@dataclass
class FetchedFile:
    """Raw payload of one fetched file.

    Attributes:
        name: File name (e.g. 'GSE53986_series_matrix.txt.gz')
        payload: Body as received, still compressed
        kind: PayloadKind selecting the reader
    """
    name: str
    payload: bytes
    kind: str


def parse_accession(identifier: str) -> Tuple[str, str, Optional[str]]:
    """Split a GEO identifier into (prefix, accession, platform).

    Example:
        >>> parse_accession('gse123-gpl96')
        ('GSE', 'GSE123', 'GPL96')

    Raises:
        FetchError: If the identifier is not a GSE or GDS accession
    """
    match = ACCESSION_PATTERN.match(identifier.strip()) if identifier else None
    if match is None:
        raise FetchError(
            "Unsupported identifier, expected GSE<n>, GSE<n>-GPL<n> or GDS<n>",
            identifier
        )
    prefix, digits, platform = match.groups()
    prefix = prefix.upper()
    return prefix, f"{prefix}{digits}", platform.upper() if platform else None


def accession_stub(accession: str) -> str:
    """Return the GEO directory stub: last three digits replaced by 'nnn'.

    Example:
        >>> accession_stub('GSE53986')
        'GSE53nnn'
        >>> accession_stub('GDS507')
        'GDSnnn'
    """
    prefix, digits = accession[:3], accession[3:]
    return f"{prefix}{digits[:-3]}nnn"


class GeoFetcher:
    """Fetches raw GEO payloads over HTTP.

    Args:
        base_url: GEO root URL (no trailing slash needed)
        timeout: Per-request timeout in seconds
        impersonate: curl_cffi browser profile
        session_factory: Callable returning an async context manager with an
            awaitable ``get(url, **kwargs)``; defaults to AsyncSession

    Example:
        >>> fetcher = GeoFetcher()
        >>> files = await fetcher.fetch('GSE53986')
        >>> [f.name for f in files]
        ['GSE53986_series_matrix.txt.gz']
    """

    def __init__(
        self,
        base_url: str = 'https://ftp.ncbi.nlm.nih.gov/geo',
        timeout: float = 60,
        impersonate: Optional[str] = 'chrome',
        session_factory: Callable = AsyncSession
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.impersonate = impersonate
        self._session_factory = session_factory

    @classmethod
    def from_config(cls, config_manager: ConfigManager, **kwargs) -> 'GeoFetcher':
        """Create a fetcher from the 'geo' settings."""
        return cls(
            base_url=config_manager.get_setting('geo.base_url'),
            timeout=config_manager.get_setting('geo.timeout'),
            impersonate=config_manager.get_setting('geo.impersonate'),
            **kwargs
        )

    def series_matrix_url(self, accession: str) -> str:
        return f"{self.base_url}/series/{accession_stub(accession)}/{accession}/matrix/"

    def gds_soft_url(self, accession: str) -> str:
        return f"{self.base_url}/datasets/{accession_stub(accession)}/{accession}/soft/{accession}.soft.gz"

    async def fetch(self, identifier: str) -> List[FetchedFile]:
        """Fetch every payload file for identifier.

        Returns:
            List of FetchedFile, one per dataset file

        Raises:
            FetchError: Unsupported identifier, transport failure, non-200
                status, or no matrix files for the series
        """
        prefix, accession, platform = parse_accession(identifier)

        async with self._session_factory() as session:
            if prefix == 'GDS':
                url = self.gds_soft_url(accession)
                payload = await self._get(session, url, identifier)
                return [FetchedFile(f"{accession}.soft.gz", payload, PayloadKind.GDS_SOFT)]

            listing_url = self.series_matrix_url(accession)
            listing = await self._get(session, listing_url, identifier)
            names = self._matrix_file_names(listing, accession, platform)
            if not names:
                target = f"{accession}-{platform}" if platform else accession
                raise FetchError(f"No series matrix files listed for {target}", identifier)

            files = []
            for name in names:
                payload = await self._get(session, listing_url + name, identifier)
                files.append(FetchedFile(name, payload, PayloadKind.SERIES_MATRIX))
            return files

    @staticmethod
    def _matrix_file_names(listing: bytes, accession: str,
                           platform: Optional[str]) -> List[str]:
        """Extract this accession's series matrix file names from an index page."""
        html = listing.decode('utf-8', errors='replace')
        names = []
        for name in SERIES_MATRIX_LINK.findall(html):
            base = name[:-len('_series_matrix.txt.gz')]
            series, _, file_platform = base.partition('-')
            if series.upper() != accession:
                continue
            if platform is not None and file_platform.upper() != platform:
                continue
            if name not in names:
                names.append(name)
        return sorted(names)

    async def _get(self, session, url: str, identifier: str) -> bytes:
        """Issue one GET and return the body.

        Raises:
            FetchError: On transport failure or non-200 status
        """
        logger.info(f"Fetching {url}")
        try:
            response = await session.get(url, impersonate=self.impersonate, timeout=self.timeout)
        except Exception as e:
            raise FetchError(f"Request to {url} failed: {e}", identifier) from e

        logger.info(f"  Status: {response.status_code}")
        if response.status_code != 200:
            raise FetchError(
                f"Non-200 status code {response.status_code} for {url}",
                identifier,
                status_code=response.status_code
            )
        return response.content
