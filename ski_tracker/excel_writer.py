"""Excel export of ride history."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Any, Mapping, Sequence

import pandas as pd
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .history_aggregation import aggregate
from .utils import format_time

RIDES_SHEET = "Rides"
TOTALS_SHEET = "Totals"
EXCEL_DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(patternType="solid", fgColor="FFDBEAFE")
HEADER_BORDER = Border(
    left=Side(style="thin", color="000000"),
    right=Side(style="thin", color="000000"),
    top=Side(style="thin", color="000000"),
    bottom=Side(style="thin", color="000000"),
)

LOGGER = logging.getLogger(__name__)

PathInput = str | Path | PathLike[str]


def _coerce_path(pathlike: PathInput) -> str:
    return str(Path(pathlike))


def _autosize(ws: Worksheet) -> None:
    from .config import (
        EXCEL_AUTOSIZE_COLUMNS,
        EXCEL_AUTOSIZE_MAX_WIDTH,
        EXCEL_AUTOSIZE_MIN_WIDTH,
        EXCEL_AUTOSIZE_PADDING,
        EXCEL_AUTOSIZE_MAX_ROWS,
    )

    if not EXCEL_AUTOSIZE_COLUMNS:
        return
    try:
        if ws.max_row > EXCEL_AUTOSIZE_MAX_ROWS:
            return
        for col_cells in ws.columns:
            max_len = 0
            col_letter = getattr(col_cells[0], "column_letter", None)
            for cell in col_cells:
                if cell.value is None:
                    continue
                max_len = max(max_len, len(str(cell.value)))
            width = min(
                EXCEL_AUTOSIZE_MAX_WIDTH,
                max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
            )
            if col_letter:
                ws.column_dimensions[col_letter].width = width
    except Exception as exc:  # pragma: no cover - autosize is best-effort
        LOGGER.debug("Autosize failed for sheet %s: %s", getattr(ws, "title", "?"), exc)


def _style_header_row(ws: Worksheet, max_col: int) -> None:
    for col_idx in range(1, max_col + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER


def build_rides_frame(payloads: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    """Tabulate stored ride payloads; unparseable numbers become 0."""

    from .config import HISTORY_COLUMN_ORDER

    rows = []
    for ride in payloads:
        coordinates = ride.get("coordinates")
        rows.append(
            {
                "Ride ID": str(ride.get("id", "")),
                "Date": ride.get("date"),
                "Duration": ride.get("duration"),
                "Distance (mi)": ride.get("distance"),
                "Max Speed (mph)": ride.get("maxSpeed"),
                "Vertical (ft)": ride.get("elevation"),
                "Route Points": len(coordinates) if isinstance(coordinates, list) else 0,
            }
        )
    df = pd.DataFrame(rows, columns=HISTORY_COLUMN_ORDER)
    if df.empty:
        return df
    df["Date"] = pd.to_datetime(df["Date"], errors="coerce", utc=True).dt.tz_localize(None)
    for col in ("Distance (mi)", "Max Speed (mph)", "Vertical (ft)"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)
    durations = pd.to_numeric(df["Duration"], errors="coerce").fillna(0).astype(int)
    df["Duration"] = durations.map(format_time)
    return df


def build_totals_frame(payloads: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    totals = aggregate(payloads)
    return pd.DataFrame(
        [
            {
                "Total Rides": totals.total_rides,
                "Total Distance (mi)": round(totals.total_distance_miles, 1),
                "Total Vertical (ft)": round(totals.total_vertical_ft),
            }
        ]
    )


def write_history(filepath: PathInput, payloads: Sequence[Mapping[str, Any]]) -> None:
    """Write a workbook with a per-ride sheet and a lifetime totals sheet."""

    filepath = _coerce_path(filepath)
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    rides_df = build_rides_frame(payloads)
    totals_df = build_totals_frame(payloads)
    with pd.ExcelWriter(
        filepath, engine="openpyxl", datetime_format=EXCEL_DATETIME_FORMAT
    ) as writer:
        for sheet_name, df in ((RIDES_SHEET, rides_df), (TOTALS_SHEET, totals_df)):
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            ws = writer.sheets[sheet_name]
            _style_header_row(ws, len(df.columns))
            _autosize(ws)
    LOGGER.info("Wrote ride history to %s (rides=%d)", filepath, len(rides_df))


__all__ = ["build_rides_frame", "build_totals_frame", "write_history"]
