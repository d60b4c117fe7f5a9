"""Decoding of Dukascopy .bi5 hour files.

A .bi5 file is an LZMA "alone" stream whose payload is a flat run of 20-byte
big-endian records:

    u32 time offset | u32 ask * 1e5 | u32 bid * 1e5 | f32 ask volume | f32 bid volume
"""

from __future__ import annotations

import lzma
from datetime import datetime
from typing import List, Optional

import numpy as np

from .api import Tick, unix_seconds
from .errors import DownloadError, ErrorKind


RECORD_DTYPE = np.dtype(
    [
        ("time_offset", ">u4"),
        ("ask", ">u4"),
        ("bid", ">u4"),
        ("ask_volume", ">f4"),
        ("bid_volume", ">f4"),
    ]
)
RECORD_SIZE = RECORD_DTYPE.itemsize

PRICE_SCALE = 100_000.0


def decompress_bi5(payload: Optional[bytes]) -> bytes:
    """Inflate a fetched hour file; absent or empty input gives an empty buffer."""
    if not payload:
        return b""
    try:
        return lzma.decompress(payload, format=lzma.FORMAT_ALONE)
    except (lzma.LZMAError, EOFError) as e:
        raise DownloadError(ErrorKind.DECODE, e) from e


def parse_ticks(hour: datetime, buffer: bytes) -> List[Tick]:
    """Decode every whole record in `buffer`; a trailing partial record is dropped.

    The record offset is added to the hour's epoch seconds as is, without
    converting it from milliseconds. Existing tick dumps and regression counts
    depend on this; keep it until the vendor format says otherwise.
    """
    n = len(buffer) // RECORD_SIZE
    if n == 0:
        return []
    records = np.frombuffer(buffer, dtype=RECORD_DTYPE, count=n)

    base = unix_seconds(hour)
    times = (records["time_offset"].astype(np.int64) + base).tolist()
    asks = (records["ask"].astype(np.float64) / PRICE_SCALE).tolist()
    bids = (records["bid"].astype(np.float64) / PRICE_SCALE).tolist()
    ask_volumes = records["ask_volume"].astype(np.float64).tolist()
    bid_volumes = records["bid_volume"].astype(np.float64).tolist()

    return [Tick(*row) for row in zip(times, asks, bids, ask_volumes, bid_volumes)]
