"""Utility entry points for supplementary ride tooling."""

from .ride_map import build_ride_map, create_ride_map

__all__ = ["build_ride_map", "create_ride_map"]
