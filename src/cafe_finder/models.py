from dataclasses import dataclass


@dataclass
class CacheMetrics:
    """Track hit/miss counters for the result cache."""

    hits: int = 0
    misses: int = 0
    writes: int = 0
    errors: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.lookups == 0:
            return 0.0
        return self.hits / self.lookups

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_write(self) -> None:
        self.writes += 1

    def record_error(self) -> None:
        """Record a swallowed storage error (counted as a miss)."""
        self.errors += 1
        self.misses += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "writes": self.writes,
            "errors": self.errors,
            "hit_rate": round(self.hit_rate, 4),
        }
