"""Per-call accumulation of geometry counts and path lengths."""

from __future__ import annotations


class Aggregator:
    """Collects per-type feature counts and cumulative line length.

    One instance serves a single summarize call. Both mappings keep the order
    in which each type label was first seen.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lengths_km: dict[str, float] = {}

    def count_type(self, geometry_type: str) -> None:
        self._counts[geometry_type] = self._counts.get(geometry_type, 0) + 1

    def add_length(self, geometry_type: str, km: float) -> None:
        self._lengths_km[geometry_type] = self._lengths_km.get(geometry_type, 0.0) + km

    def snapshot(self) -> tuple[dict[str, int], dict[str, float]]:
        """Return copies of the counts and lengths accumulated so far."""
        return dict(self._counts), dict(self._lengths_km)
