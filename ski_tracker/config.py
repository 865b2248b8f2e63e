"""Central configuration for the ski ride tracker.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Overrides are read from environment variables
(optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Ride storage
# ---------------------------------------------------------------------------
# JSON file holding saved rides, newest first. Paths can be absolute or
# relative to the working directory.
RIDE_STORE_FILE = _env_str("SKI_TRACKER_RIDE_STORE_FILE", "rides.json")


# ---------------------------------------------------------------------------
# History export
# ---------------------------------------------------------------------------
HISTORY_EXPORT_FILE = _env_str("SKI_TRACKER_HISTORY_EXPORT_FILE", "ride_history")

# Append _YYYYMMDD_HHMMSS to the export name when True.
HISTORY_EXPORT_TIMESTAMP_ENABLED = _env_bool(
    "SKI_TRACKER_HISTORY_EXPORT_TIMESTAMP_ENABLED", True
)

# Column order for the rides sheet. Missing columns are ignored.
HISTORY_COLUMN_ORDER = [
    "Ride ID",
    "Date",
    "Duration",
    "Distance (mi)",
    "Max Speed (mph)",
    "Vertical (ft)",
    "Route Points",
]


# ---------------------------------------------------------------------------
# Excel formatting
# ---------------------------------------------------------------------------
# Automatically size columns after writing each sheet (openpyxl only).
EXCEL_AUTOSIZE_COLUMNS = _env_bool("SKI_TRACKER_EXCEL_AUTOSIZE_COLUMNS", True)
EXCEL_AUTOSIZE_MAX_WIDTH = 50  # characters
EXCEL_AUTOSIZE_MIN_WIDTH = 6  # characters
EXCEL_AUTOSIZE_PADDING = 2  # extra characters added to the detected max
EXCEL_AUTOSIZE_MAX_ROWS = (
    5000  # skip autosize for very large sheets (performance guard)
)


# ---------------------------------------------------------------------------
# Route maps
# ---------------------------------------------------------------------------
# Directory where rendered ride maps are written when no output path is given.
RIDE_MAP_DIR = _env_str("SKI_TRACKER_RIDE_MAP_DIR", "ride_maps")

# Initial Leaflet zoom level for ride maps.
MAP_ZOOM_START = _env_int("SKI_TRACKER_MAP_ZOOM_START", 15)
