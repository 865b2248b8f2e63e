"""End-to-end tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from ski_tracker.main import main
from ski_tracker.storage import RideStore

FIXES_CSV = (
    "timestamp,latitude,longitude,altitude,speed\n"
    "2025-01-15T09:30:00Z,37.6308,-119.0326,3000,0\n"
    "2025-01-15T09:30:05Z,37.6318,-119.0336,2990,5.0\n"
    "2025-01-15T09:30:10Z,95.0,-119.0340,2970,9.0\n"
    "2025-01-15T09:30:15Z,37.6328,-119.0346,2950,3.0\n"
)


def _replay(tmp_path: Path, store: Path) -> str:
    csv_path = tmp_path / "fixes.csv"
    csv_path.write_text(FIXES_CSV, encoding="utf-8")
    assert main(["replay", str(csv_path), "--store", str(store)]) == 0
    return RideStore(store).ride_ids()[0]


def test_replay_saves_ride(tmp_path: Path) -> None:
    store = tmp_path / "rides.json"
    ride_id = _replay(tmp_path, store)
    payload = RideStore(store).get(ride_id)
    assert payload["duration"] == 15
    assert payload["elevation"] == round(50 * 3.281)
    assert payload["maxSpeed"] == round(5.0 * 2.237, 1)
    # Out-of-range fix is dropped from the route.
    assert len(payload["coordinates"]) == 3
    assert payload["date"] == "2025-01-15T09:30:15.000Z"


def test_history_delete_export_and_map(tmp_path: Path, capsys) -> None:
    store = tmp_path / "rides.json"
    ride_id = _replay(tmp_path, store)
    capsys.readouterr()

    assert main(["history", "--store", str(store)]) == 0
    out = capsys.readouterr().out
    assert "Total rides: 1" in out
    assert ride_id in out

    workbook = tmp_path / "history.xlsx"
    assert main(["export", "--store", str(store), "--output", str(workbook)]) == 0
    assert pd.read_excel(workbook, sheet_name="Totals").loc[0, "Total Rides"] == 1

    html = tmp_path / "map.html"
    assert main(["map", ride_id, "--store", str(store), "--output", str(html)]) == 0
    assert html.exists()

    assert main(["delete", ride_id, "--store", str(store)]) == 0
    assert main(["delete", ride_id, "--store", str(store)]) == 1
    assert RideStore(store).load_all() == []


def test_history_on_empty_store(tmp_path: Path, capsys) -> None:
    assert main(["history", "--store", str(tmp_path / "none.json")]) == 0
    out = capsys.readouterr().out
    assert "Total rides: 0" in out
    assert "No rides yet!" in out


def test_replay_missing_file_fails(tmp_path: Path) -> None:
    assert main(["replay", str(tmp_path / "absent.csv"), "--store", str(tmp_path / "r.json")]) == 1


def test_corrupt_store_reports_error(tmp_path: Path) -> None:
    store = tmp_path / "rides.json"
    store.write_text("[oops", encoding="utf-8")
    assert main(["history", "--store", str(store)]) == 1
