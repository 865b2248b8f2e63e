"""Render a saved ride's route on an interactive map."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import folium  # Using folium to build an interactive Leaflet map.

from ..config import MAP_ZOOM_START, RIDE_MAP_DIR
from ..errors import SkiTrackerError
from ..geo import path_distance_miles
from ..models import RideRecord
from ..storage import RideStore
from ..utils import format_time

PathLike = Union[str, Path]

_ROUTE_COLOR = "#2563eb"
_START_COLOR = "green"

LOGGER = logging.getLogger(__name__)


def create_ride_map(
    record: RideRecord,
    *,
    output_html_path: Optional[PathLike] = None,
    zoom_start: int = MAP_ZOOM_START,
) -> folium.Map:
    """Create a map showing the ride route with a start marker.

    Args:
        record: Ride to plot.
        output_html_path: Optional path to persist the map as an HTML file.
        zoom_start: Initial Leaflet zoom level.

    Returns:
        A :class:`folium.Map` instance containing the route overlay.

    Raises:
        ValueError: If the ride has no route points.
    """

    if not record.route:
        raise ValueError(f"Ride {record.id} has no route to plot")

    route = [tuple(point) for point in record.route]
    start = route[0]
    folium_map = folium.Map(location=start, zoom_start=zoom_start, control_scale=True)
    if len(route) > 1:
        folium.PolyLine(
            route,
            color=_ROUTE_COLOR,
            weight=4,
            opacity=0.9,
            tooltip="Ride route",
        ).add_to(folium_map)
        lats = [lat for lat, _ in route]
        lons = [lon for _, lon in route]
        folium_map.fit_bounds([(min(lats), min(lons)), (max(lats), max(lons))])

    popup = folium.Popup(
        html=(
            f"<strong>{record.date}</strong><br>"
            f"Distance: {record.distance_miles:.1f} mi "
            f"(route {path_distance_miles(route):.2f} mi)<br>"
            f"Max speed: {record.max_speed_mph:.1f} mph<br>"
            f"Vertical: {record.vertical_drop_ft} ft<br>"
            f"Time: {format_time(record.duration_s)}"
        ),
        max_width=300,
    )
    folium.Marker(
        location=start,
        tooltip="Start",
        popup=popup,
        icon=folium.Icon(color=_START_COLOR),
    ).add_to(folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


def build_ride_map(
    store: RideStore,
    ride_id: str,
    output_html: Optional[PathLike] = None,
) -> Path:
    """Look up ``ride_id`` in ``store`` and write its map; return the HTML path.

    Raises:
        KeyError: If the ride is not stored.
        MalformedHistoryRecordError: If the stored payload cannot be parsed.
        ValueError: If the ride has no route.
    """

    payload = store.get(ride_id)
    if payload is None:
        raise KeyError(ride_id)
    record = RideRecord.from_dict(payload)
    path = Path(output_html) if output_html else Path(RIDE_MAP_DIR) / f"ride_{record.id}.html"
    create_ride_map(record, output_html_path=path)
    LOGGER.info("Wrote map for ride %s to %s", record.id, path)
    return path


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a saved ride on a map")
    parser.add_argument("ride_id", help="Identifier of the saved ride")
    parser.add_argument("--store", help="Ride store file (defaults to RIDE_STORE_FILE)")
    parser.add_argument("--output", help="HTML output path")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.INFO, format="[%(asctime)s] %(levelname)s %(message)s"
        )
    try:
        build_ride_map(RideStore(args.store), args.ride_id, args.output)
    except KeyError:
        LOGGER.error("Ride %s not found", args.ride_id)
        return 1
    except (SkiTrackerError, ValueError) as exc:
        LOGGER.error("Unable to map ride %s: %s", args.ride_id, exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
