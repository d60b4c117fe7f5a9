from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    # Payload was fetched but is not a valid compressed stream
    DECODE = "decode"
    # Transport failed for a reason other than "not found" / empty body
    NETWORK = "network"


class DownloadError(Exception):
    """Failure of a single hour's fetch or decode.

    Yielded by the tick stream in place of that hour's ticks; `cause` holds the
    underlying decoder or transport exception.
    """

    def __init__(
        self,
        kind: ErrorKind,
        cause: Optional[BaseException] = None,
        *,
        url: Optional[str] = None,
        hour: Optional[datetime] = None,
    ) -> None:
        self.kind = kind
        self.cause = cause
        self.url = url
        self.hour = hour
        super().__init__(kind, cause)

    def __str__(self) -> str:
        where = f" hour={self.hour.isoformat()}" if self.hour is not None else ""
        if self.url:
            where += f" url={self.url}"
        return f"{self.kind.value} error{where}: {self.cause}"
