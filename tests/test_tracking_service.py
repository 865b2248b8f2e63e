"""Tests for the ride tracking and history services."""

from __future__ import annotations

import json
import logging
from datetime import timedelta

import pandas as pd
import pytest

from ski_tracker.errors import RideStoreError
from ski_tracker.services import (
    HistoryService,
    HistoryServiceConfig,
    RideTrackingService,
    RideTrackingServiceConfig,
)


@pytest.fixture
def tracking_service(ride_store, t0):
    return RideTrackingService(
        RideTrackingServiceConfig(store=ride_store, clock=lambda: t0)
    )


def test_stop_and_save_persists_ride(tracking_service, ride_store, mammoth_fixes, t0, caplog) -> None:
    tracking_service.start(t0)
    assert tracking_service.record(mammoth_fixes) == 3
    assert tracking_service.elapsed_seconds(t0 + timedelta(seconds=7)) == 7

    with caplog.at_level(logging.INFO, logger="RideTrackingService"):
        record = tracking_service.stop_and_save(t0 + timedelta(seconds=10))

    assert record is not None
    assert record.duration_s == 10
    assert ride_store.ride_ids() == [record.id]
    assert "ride saved" in caplog.text.lower()
    assert not tracking_service.is_recording


def test_stop_without_session_saves_nothing(tracking_service, ride_store) -> None:
    assert tracking_service.stop_and_save() is None
    assert ride_store.load_all() == []


def test_fix_before_start_is_ignored(tracking_service, mammoth_fixes) -> None:
    assert tracking_service.on_fix(mammoth_fixes[0]) is False
    assert tracking_service.state is None


def test_same_instant_rides_do_not_collide(tracking_service, ride_store, mammoth_fixes, t0) -> None:
    ids = []
    for _ in range(2):
        tracking_service.start(t0)
        tracking_service.record(mammoth_fixes)
        ids.append(tracking_service.stop_and_save(t0 + timedelta(seconds=10)).id)
    assert len(set(ids)) == 2
    assert sorted(ride_store.ride_ids()) == sorted(ids)


def test_history_service_totals_and_delete(ride_store, ride_payload_factory) -> None:
    payloads = [
        ride_payload_factory("2", 2.25, 750),
        ride_payload_factory("1", 1.5, 500),
    ]
    ride_store.path.write_text(json.dumps(payloads), encoding="utf-8")
    service = HistoryService(HistoryServiceConfig(store=ride_store))

    totals = service.totals()
    assert (totals.total_rides, totals.total_distance_miles, totals.total_vertical_ft) == (
        2,
        pytest.approx(3.75),
        pytest.approx(1250),
    )
    assert service.delete_ride("2") is True
    assert service.totals().total_rides == 1


def test_history_service_export(tmp_path, ride_store, ride_payload_factory) -> None:
    ride_store.path.write_text(
        json.dumps([ride_payload_factory("1", "bad", 500)]), encoding="utf-8"
    )
    service = HistoryService(HistoryServiceConfig(store=ride_store))
    out = service.export(tmp_path / "history.xlsx")
    book = pd.read_excel(out, sheet_name=None)
    assert book["Totals"].loc[0, "Total Rides"] == 1
    assert book["Rides"].loc[0, "Distance (mi)"] == 0.0


def test_unreadable_store_keeps_session_recording(tracking_service, ride_store, mammoth_fixes, t0) -> None:
    tracking_service.start(t0)
    tracking_service.record(mammoth_fixes)
    ride_store.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RideStoreError):
        tracking_service.stop_and_save(t0 + timedelta(seconds=10))
    assert tracking_service.is_recording

    ride_store.path.write_text("[]", encoding="utf-8")
    record = tracking_service.stop_and_save(t0 + timedelta(seconds=10))
    assert record is not None
    assert len(record.route) == 3
    assert ride_store.ride_ids() == [record.id]


def test_failed_save_is_retried_on_next_stop(
    tracking_service, ride_store, mammoth_fixes, t0, monkeypatch, caplog
) -> None:
    tracking_service.start(t0)
    tracking_service.record(mammoth_fixes)
    real_save = ride_store.save

    def failing_save(record):
        raise RideStoreError("disk full")

    monkeypatch.setattr(ride_store, "save", failing_save)
    with caplog.at_level(logging.ERROR, logger="RideTrackingService"):
        with pytest.raises(RideStoreError):
            tracking_service.stop_and_save(t0 + timedelta(seconds=10))
    pending = tracking_service.pending_ride
    assert pending is not None
    assert "not saved" in caplog.text

    monkeypatch.setattr(ride_store, "save", real_save)
    record = tracking_service.stop_and_save(t0 + timedelta(seconds=30))
    assert record is pending
    assert record.duration_s == 10
    assert tracking_service.pending_ride is None
    assert ride_store.ride_ids() == [record.id]
    assert tracking_service.stop_and_save() is None
