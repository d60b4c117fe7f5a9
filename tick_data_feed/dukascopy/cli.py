from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .api import DEFAULT_BASE_URL, Tick, hour_range, ticks_to_dataframe
from .errors import DownloadError
from .service import DukascopyService
from .supplier import DEFAULT_TIMEOUT, UrllibDataSupplier
from .validation import validate_ticks


@dataclass
class RunConfig:
    instrument: str
    start: datetime
    end: datetime
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    output_format: str = "text"
    csv_path: Optional[Path] = None
    limit: Optional[int] = None
    strict: bool = False
    validate: bool = False
    debug: bool = False


def _format_tick(tick: Tick, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(tick.to_dict())
    return str(tick)


def run_once(cfg: RunConfig, service: Optional[DukascopyService] = None) -> int:
    if service is None:
        service = DukascopyService(
            base_url=cfg.base_url,
            data_supplier=UrllibDataSupplier(timeout=cfg.timeout),
            debug=cfg.debug,
        )

    ticks: List[Tick] = []
    failed_hours = 0
    stream = service.download_ticks(cfg.instrument, cfg.start, cfg.end)
    try:
        # A zero limit never pulls from the stream, so nothing is fetched
        if cfg.limit is None or cfg.limit > 0:
            for item in stream:
                if isinstance(item, DownloadError):
                    failed_hours += 1
                    print(f"[ERROR] {item}", file=sys.stderr)
                    if cfg.strict:
                        break
                    continue
                ticks.append(item)
                print(_format_tick(item, cfg.output_format))
                if cfg.limit is not None and len(ticks) >= cfg.limit:
                    break
    finally:
        stream.close()

    df = ticks_to_dataframe(ticks)
    if cfg.csv_path is not None:
        cfg.csv_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(cfg.csv_path, index=False)

    valid = True
    if cfg.validate:
        v = validate_ticks(df)
        valid = v.ok
        if not v.ok:
            print(f"[WARN] validation failed: {v.reason}", file=sys.stderr)

    print(
        f"[INFO] instrument={cfg.instrument} ticks={len(ticks)} failed_hours={failed_hours} "
        f"start={cfg.start.isoformat()} end={cfg.end.isoformat()}"
        + (f" csv={cfg.csv_path}" if cfg.csv_path is not None else ""),
        file=sys.stderr,
    )
    return 0 if (failed_hours == 0 and valid) else 1


def _parse_hour(value: str) -> datetime:
    return pd.Timestamp(value).to_pydatetime()


def parse_args(argv: Optional[list[str]] = None) -> RunConfig:
    p = argparse.ArgumentParser(description="Download Dukascopy historical ticks for whole UTC hours")
    p.add_argument("instrument", help="Vendor instrument code, e.g. EURGBP")
    p.add_argument("--start", required=True, help="Start hour (inclusive), e.g. 2020-03-12T13:00")
    p.add_argument("--end", required=True, help="End hour (exclusive), e.g. 2020-03-12T15:00")
    p.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Datafeed root URL")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Network timeout per file in seconds")
    p.add_argument("--format", dest="output_format", choices=["text", "json"], default="text")
    p.add_argument("--csv", type=Path, default=None, help="Also write ticks to this CSV file")
    p.add_argument("--limit", type=int, default=None, help="Stop after this many ticks")
    p.add_argument("--strict", action="store_true", help="Stop at the first failed hour")
    p.add_argument("--validate", action="store_true", help="Sanity check the downloaded ticks")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    args = p.parse_args(argv)
    if args.limit is not None and args.limit < 0:
        p.error("--limit must be zero or positive")

    return RunConfig(
        instrument=args.instrument,
        start=_parse_hour(args.start),
        end=_parse_hour(args.end),
        base_url=args.base_url,
        timeout=args.timeout,
        output_format=args.output_format,
        csv_path=args.csv,
        limit=args.limit,
        strict=args.strict,
        validate=args.validate,
        debug=args.debug,
    )


def main(argv: Optional[list[str]] = None) -> int:
    try:
        cfg = parse_args(argv)
        hour_range(cfg.start, cfg.end)
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    try:
        return run_once(cfg)
    except Exception as e:  # surface clear error message
        print(f"[ERROR] {e}", file=sys.stderr)
        if cfg.debug:
            raise
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
