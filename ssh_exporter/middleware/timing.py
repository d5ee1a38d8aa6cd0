"""Request duration statistics."""

from collections import defaultdict
from dataclasses import dataclass


@dataclass
class TimingStats:
    """Statistics for a timed operation."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        """Average duration in milliseconds."""
        return self.total_ms / self.count if self.count > 0 else 0.0

    def record(self, duration_ms: float) -> None:
        """Record a new timing measurement."""
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)

    def to_dict(self) -> dict[str, float | int]:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "total_ms": round(self.total_ms, 2),
            "avg_ms": round(self.avg_ms, 2),
            "min_ms": round(self.min_ms, 2) if self.min_ms != float("inf") else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


class TimingRegistry:
    """Per-route timing statistics shared by middleware and /metrics."""

    def __init__(self) -> None:
        self._stats: dict[str, TimingStats] = defaultdict(TimingStats)

    def record(self, key: str, duration_ms: float) -> None:
        """Record a duration under ``key``."""
        self._stats[key].record(duration_ms)

    def get_timing_stats(self) -> dict[str, dict[str, float | int]]:
        """Get timing statistics for all routes, sorted by key."""
        return {key: self._stats[key].to_dict() for key in sorted(self._stats)}
