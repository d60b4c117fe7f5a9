from __future__ import annotations

from http.client import HTTPException
from pathlib import Path
from typing import Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from .errors import DownloadError, ErrorKind


DEFAULT_TIMEOUT = 30.0

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


class DataSupplier(Protocol):
    def fetch(self, url: str) -> Optional[bytes]:
        """Return the file body, or None when nothing was published for the URL.

        Transport failures raise DownloadError with kind NETWORK.
        """
        ...


class UrllibDataSupplier:
    """Plain HTTPS GET per file."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = USER_AGENT) -> None:
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch(self, url: str) -> Optional[bytes]:
        req = Request(url, method="GET", headers={"User-Agent": self.user_agent})
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                payload = resp.read()
        except HTTPError as e:
            try:
                # 404 means no ticks were recorded during that hour
                if e.code == 404:
                    return None
                raise DownloadError(ErrorKind.NETWORK, e, url=url) from e
            finally:
                # The error carries the open response; release it here
                e.close()
        except (URLError, HTTPException, OSError) as e:
            raise DownloadError(ErrorKind.NETWORK, e, url=url) from e
        return payload or None


class InMemoryDataSupplier:
    """Serves the same buffer for every URL."""

    def __init__(self, data: Optional[bytes]) -> None:
        self.data = data

    def fetch(self, url: str) -> Optional[bytes]:
        return self.data or None


class DirectoryDataSupplier:
    """Serves `<root>/<file name of the URL>`; a missing file counts as no data."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def fetch(self, url: str) -> Optional[bytes]:
        name = Path(urlparse(url).path).name
        path = self.root / name
        if not path.is_file():
            return None
        return path.read_bytes() or None
