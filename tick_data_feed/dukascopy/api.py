from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd


DEFAULT_BASE_URL = "https://datafeed.dukascopy.com/datafeed"

TICK_COLUMNS = ["timestamp", "time", "ask", "bid", "ask_volume", "bid_volume"]


@dataclass(frozen=True)
class Tick:
    time: int
    ask: float
    bid: float
    ask_volume: float
    bid_volume: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def __str__(self) -> str:
        """Console line for the tick, e.g.

        `2020-03-12 1:03:38.0\\t\\t1.11815          1.11812          ...`

        Hours are not zero padded, whole seconds carry a `.0` fraction and
        prices print in shortest positional form (`1` rather than `1.0`).
        """
        dt = datetime.fromtimestamp(self.time, tz=timezone.utc)
        ask, bid, ask_vol, bid_vol = (
            _plain_float(v) for v in (self.ask, self.bid, self.ask_volume, self.bid_volume)
        )
        return (
            f"{dt.date()} {dt.hour}:{dt.minute:02d}:{dt.second:02d}.0\t\t"
            f"{ask:<16} {bid:<16} {ask_vol:<26} {bid_vol:<26}"
        )


def _plain_float(value: float) -> str:
    return np.format_float_positional(value, trim="-")


def to_utc_hour(value: datetime) -> datetime:
    """Normalize an hour bound to an aware UTC datetime.

    Naive values are taken as UTC. Raises ValueError if the value carries
    minutes, seconds or sub-second components.
    """
    dt = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    if dt.minute or dt.second or dt.microsecond or getattr(dt, "nanosecond", 0):
        raise ValueError(f"hour bound must be aligned to a full UTC hour, got {value!r}")
    return dt


def hour_range(start: datetime, end: datetime) -> List[datetime]:
    """Hours from start (inclusive) to end (exclusive), one per vendor file."""
    start_h = to_utc_hour(start)
    end_h = to_utc_hour(end)
    if end_h < start_h:
        raise ValueError(f"end {end!r} is before start {start!r}")
    out: List[datetime] = []
    cur = start_h
    while cur < end_h:
        out.append(cur)
        cur += timedelta(hours=1)
    return out


def unix_seconds(hour: datetime) -> int:
    return int(to_utc_hour(hour).timestamp())


def build_tick_url(base_url: str, instrument: str, hour: datetime) -> str:
    # Vendor months are zero-indexed: January is "00"
    h = to_utc_hour(hour)
    return f"{base_url}/{instrument}/{h.year}/{h.month - 1:02d}/{h.day:02d}/{h.hour:02d}h_ticks.bi5"


def ticks_to_dataframe(ticks: Iterable[Tick]) -> pd.DataFrame:
    """Map ticks into a DataFrame: timestamp, time, ask, bid, ask_volume, bid_volume.

    - timestamp: pandas datetime64[ns] (UTC, naive by convention)
    - time: raw integer seconds as decoded
    - rows keep the order they were yielded in
    """
    rows = [t.to_dict() for t in ticks]
    if not rows:
        return pd.DataFrame(columns=TICK_COLUMNS).astype(
            {
                "timestamp": "datetime64[ns]",
                "time": "int64",
                "ask": float,
                "bid": float,
                "ask_volume": float,
                "bid_volume": float,
            }
        )
    df = pd.DataFrame(rows)
    df.insert(0, "timestamp", pd.to_datetime(df["time"], unit="s", utc=True).dt.tz_convert(None))
    return df.loc[:, TICK_COLUMNS]
