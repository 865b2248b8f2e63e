"""Read recorded position fixes from CSV for replay.

Expected columns (case-insensitive): ``timestamp``, ``latitude``,
``longitude`` and optionally ``altitude`` (metres) and ``speed`` (m/s).
Timestamps may be ISO strings or epoch milliseconds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

import pandas as pd

from .models import PositionFix

LOGGER = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"timestamp", "latitude", "longitude"}


@dataclass(frozen=True, slots=True)
class FixReadSummary:
    rows_total: int
    rows_parsed: int
    rows_skipped: int


def _parse_timestamps(series: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(series, errors="coerce")
    if numeric.notna().all():
        return pd.to_datetime(numeric, unit="ms", utc=True)
    return pd.to_datetime(series, errors="coerce", utc=True, format="ISO8601")


def _optional(value: object) -> float | None:
    if value is None:
        return None
    number = float(value)
    return None if math.isnan(number) else number


def read_fixes(csv_path: str | Path) -> tuple[List[PositionFix], FixReadSummary]:
    """Load fixes in file order.

    Rows without a parseable timestamp or coordinate are skipped and counted.

    Raises:
        FileNotFoundError: If ``csv_path`` does not exist.
        ValueError: If a required column is missing.
    """

    path = Path(csv_path)
    if not path.is_file():
        raise FileNotFoundError(f"Fix file not found: {path}")
    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(
            f"Fix file {path} missing columns: {', '.join(sorted(missing))}"
        )
    rows_total = len(df)
    df["timestamp"] = _parse_timestamps(df["timestamp"])
    for col in ("latitude", "longitude", "altitude", "speed"):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        else:
            df[col] = float("nan")
    df = df.dropna(subset=["timestamp", "latitude", "longitude"])

    fixes: List[PositionFix] = []
    for row in df.itertuples(index=False):
        timestamp: datetime = row.timestamp.to_pydatetime()
        fixes.append(
            PositionFix(
                latitude=float(row.latitude),
                longitude=float(row.longitude),
                timestamp=timestamp,
                altitude_m=_optional(row.altitude),
                speed_mps=_optional(row.speed),
            )
        )
    summary = FixReadSummary(
        rows_total=rows_total,
        rows_parsed=len(fixes),
        rows_skipped=rows_total - len(fixes),
    )
    if summary.rows_skipped > 0:
        LOGGER.warning(
            "Skipped %s of %s rows in %s (missing timestamp/coordinates)",
            summary.rows_skipped,
            rows_total,
            path,
        )
    return fixes, summary


__all__ = ["FixReadSummary", "read_fixes"]
