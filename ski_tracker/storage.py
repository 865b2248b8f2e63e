"""JSON file store for saved rides.

The file holds a single JSON array of ride payloads (see
:meth:`RideRecord.to_dict`), newest first. Payloads are returned raw so that
history aggregation can cope with rows written by older schema versions.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List

from .config import RIDE_STORE_FILE
from .errors import RideStoreError
from .models import RideRecord

_LOGGER = logging.getLogger(__name__)

RidePayload = Dict[str, Any]


def _is_payload(item: Any) -> bool:
    return isinstance(item, dict)


class RideStore:
    """Persistent mapping of ride id -> ride payload."""

    def __init__(self, path: str | Path | None = None) -> None:
        base = Path(path) if path is not None else Path(RIDE_STORE_FILE)
        self._path = base if base.is_absolute() else Path.cwd() / base
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> List[Any]:
        """Raw array entries, unknown ones included so rewrites keep them."""

        if not self._path.exists():
            return []
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise RideStoreError(f"Ride store {self._path} is corrupt: {exc}") from exc
        except OSError as exc:
            raise RideStoreError(f"Unable to read ride store {self._path}: {exc}") from exc
        if not isinstance(data, list):
            raise RideStoreError(
                f"Ride store {self._path} must contain a JSON array, got {type(data).__name__}"
            )
        return data

    def _write(self, rides: List[Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(rides, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise RideStoreError(f"Unable to write ride store {self._path}: {exc}") from exc

    def load_all(self) -> List[RidePayload]:
        """Return every stored payload, newest first."""

        with self._lock:
            entries = self._read()
        rides = [item for item in entries if _is_payload(item)]
        if len(rides) != len(entries):
            _LOGGER.warning(
                "Ignoring %d non-object entries in %s (kept on disk)",
                len(entries) - len(rides),
                self._path,
            )
        return rides

    def ride_ids(self) -> List[str]:
        return [str(ride.get("id")) for ride in self.load_all() if "id" in ride]

    def get(self, ride_id: str) -> RidePayload | None:
        for ride in self.load_all():
            if str(ride.get("id")) == str(ride_id):
                return ride
        return None

    def save(self, record: RideRecord) -> None:
        with self._lock:
            rides = self._read()
            rides.insert(0, record.to_dict())
            self._write(rides)
        _LOGGER.info("Saved ride %s to %s (total=%d)", record.id, self._path, len(rides))

    def delete(self, ride_id: str) -> bool:
        """Remove a ride; return False when the id is unknown."""

        with self._lock:
            rides = self._read()
            remaining = [
                r for r in rides if not (_is_payload(r) and str(r.get("id")) == str(ride_id))
            ]
            if len(remaining) == len(rides):
                _LOGGER.info("Ride %s not found in %s", ride_id, self._path)
                return False
            self._write(remaining)
        _LOGGER.info("Deleted ride %s from %s", ride_id, self._path)
        return True


__all__ = ["RidePayload", "RideStore"]
