from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


REQUIRED_COLUMNS = ["time", "ask", "bid", "ask_volume", "bid_volume"]


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str
    validated_rows: int


def _is_non_decreasing(df: pd.DataFrame) -> bool:
    if df.empty:
        return True
    diffs = df["time"].diff().dropna()
    return bool((diffs >= 0).all())


def validate_ticks(df: pd.DataFrame) -> ValidationResult:
    """Sanity check a frame produced by ticks_to_dataframe.

    - Required columns are present and free of NaN.
    - Prices are strictly positive, volumes non-negative.
    - `time` never goes backwards (rows are expected in download order).
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        return ValidationResult(False, f"missing columns {missing}", 0)
    if df.empty:
        return ValidationResult(True, "no ticks to validate", 0)

    for col in REQUIRED_COLUMNS:
        if df[col].isna().any():
            return ValidationResult(False, f"NaN in column {col}", 0)

    for col in ["ask", "bid"]:
        if not (df[col] > 0).all():
            return ValidationResult(False, f"non-positive price in {col}", 0)

    for col in ["ask_volume", "bid_volume"]:
        if not (df[col] >= 0).all():
            return ValidationResult(False, f"negative volume in {col}", 0)

    if not _is_non_decreasing(df):
        return ValidationResult(False, "tick times go backwards", 0)

    return ValidationResult(True, "validated", len(df))
