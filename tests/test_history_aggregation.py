"""Tests for lifetime history totals."""

from __future__ import annotations

import logging

import pytest

from ski_tracker.history_aggregation import aggregate
from ski_tracker.models import HistoryTotals, RideRecord


def _record(ride_id: str, distance: float, vertical: int) -> RideRecord:
    return RideRecord(
        id=ride_id,
        date="2025-01-15T10:00:00.000Z",
        duration_s=300,
        distance_miles=distance,
        max_speed_mph=20.0,
        vertical_drop_ft=vertical,
    )


def test_empty_history_is_zero() -> None:
    assert aggregate([]) == HistoryTotals(
        total_rides=0, total_distance_miles=0.0, total_vertical_ft=0.0
    )


def test_records_are_summed() -> None:
    totals = aggregate([_record("1", 1.5, 500), _record("2", 2.25, 750)])
    assert totals.total_rides == 2
    assert totals.total_distance_miles == pytest.approx(3.75)
    assert totals.total_vertical_ft == pytest.approx(1250)


def test_raw_payloads_with_string_numbers(ride_payload_factory) -> None:
    # Older app versions stored distance as a formatted string.
    payloads = [
        ride_payload_factory("1", "1.50", 500),
        ride_payload_factory("2", "2.25", "750"),
    ]
    totals = aggregate(payloads)
    assert totals == HistoryTotals(2, 3.75, 1250.0)


def test_malformed_distance_counts_ride_but_adds_zero(ride_payload_factory, caplog) -> None:
    payloads = [
        ride_payload_factory("1", "abc", 400),
        ride_payload_factory("2", 2.0, 100),
    ]
    with caplog.at_level(logging.WARNING, logger="ski_tracker.history_aggregation"):
        totals = aggregate(payloads)
    assert totals.total_rides == 2
    assert totals.total_distance_miles == pytest.approx(2.0)
    assert totals.total_vertical_ft == pytest.approx(500)
    assert "malformed" in caplog.text.lower()


@pytest.mark.parametrize("bad", [None, "", "NaN", "inf", {"x": 1}])
def test_malformed_vertical_treated_as_zero(ride_payload_factory, bad) -> None:
    totals = aggregate([ride_payload_factory("1", 1.0, bad)])
    assert totals.total_rides == 1
    assert totals.total_distance_miles == pytest.approx(1.0)
    assert totals.total_vertical_ft == 0.0


def test_mixed_records_and_payloads(ride_payload_factory) -> None:
    totals = aggregate([_record("1", 1.0, 100), ride_payload_factory("2", 0.5, 50)])
    assert totals == HistoryTotals(2, 1.5, 150.0)
