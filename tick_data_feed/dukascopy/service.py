from __future__ import annotations

import sys
from datetime import datetime
from typing import Generator, List, Optional, Union

import pandas as pd

from .api import DEFAULT_BASE_URL, Tick, build_tick_url, hour_range, ticks_to_dataframe
from .decode import decompress_bi5, parse_ticks
from .errors import DownloadError
from .supplier import DataSupplier, UrllibDataSupplier


TickItem = Union[Tick, DownloadError]
TickStream = Generator[TickItem, None, None]


class DukascopyService:
    """Streams decoded ticks for an instrument, one vendor hour file at a time."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        data_supplier: Optional[DataSupplier] = None,
        debug: bool = False,
    ) -> None:
        self.base_url = base_url
        self.data_supplier = data_supplier if data_supplier is not None else UrllibDataSupplier()
        self.debug = debug

    def download_ticks(self, instrument: str, start: datetime, end: datetime) -> TickStream:
        """Return a lazy iterator over ticks in [start, end).

        `start` and `end` must be whole UTC hours (naive values are read as UTC);
        otherwise ValueError is raised here, before anything is fetched.

        Items are Tick, or a DownloadError standing in for an hour that could
        not be fetched or decoded. Hours without published data yield nothing.
        Each hour is fetched only when the consumer asks for the next item.
        """
        hours = hour_range(start, end)
        return self._iter_ticks(instrument, hours)

    def _iter_ticks(self, instrument: str, hours: List[datetime]) -> TickStream:
        for hour in hours:
            url = build_tick_url(self.base_url, instrument, hour)
            try:
                payload = self.data_supplier.fetch(url)
                buf = decompress_bi5(payload)
            except DownloadError as e:
                e.hour = hour
                e.url = url
                self._log(f"[DEBUG] {url} failed: {e}")
                yield e
                continue
            ticks = parse_ticks(hour, buf)
            if payload is None:
                self._log(f"[DEBUG] {url} no data")
            else:
                self._log(f"[DEBUG] {url} ticks={len(ticks)}")
            yield from ticks

    def download_dataframe(
        self, instrument: str, start: datetime, end: datetime, strict: bool = True
    ) -> pd.DataFrame:
        """Collect a range into a DataFrame (see ticks_to_dataframe).

        With `strict` the first failed hour is raised; otherwise it is reported
        on stderr and skipped.
        """
        ticks: List[Tick] = []
        for item in self.download_ticks(instrument, start, end):
            if isinstance(item, DownloadError):
                if strict:
                    raise item
                print(f"[WARN] skipping {item}", file=sys.stderr)
                continue
            ticks.append(item)
        return ticks_to_dataframe(ticks)

    def _log(self, msg: str) -> None:
        if self.debug:
            print(msg, file=sys.stderr)


def download_ticks(
    instrument: str,
    start: datetime,
    end: datetime,
    *,
    base_url: str = DEFAULT_BASE_URL,
    data_supplier: Optional[DataSupplier] = None,
) -> TickStream:
    service = DukascopyService(base_url=base_url, data_supplier=data_supplier)
    return service.download_ticks(instrument, start, end)
