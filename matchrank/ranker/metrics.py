"""Metrics collection for the ranker module."""

from dataclasses import dataclass, field


@dataclass
class RankerMetrics:
    """Metrics for ranker operations.

    One instance is injected per ranker; nothing is shared at module level.

    Attributes:
        passes: Number of completed ranking passes.
        candidates_in: Total input candidates.
        candidates_out: Total candidates in the diversified sequences.
        excluded_total: Candidates excluded for bad data.
        excluded_by_factor: Exclusions per failing factor.
        dropped_total: Candidates dropped by the diversity cap.
        score_values: All scores for percentile calculation.
        scoring_duration_ms: Time spent scoring in the last pass.
        diversity_duration_ms: Time spent diversifying in the last pass.
    """

    passes: int = 0
    candidates_in: int = 0
    candidates_out: int = 0
    excluded_total: int = 0
    excluded_by_factor: dict[str, int] = field(default_factory=dict)
    dropped_total: int = 0
    score_values: list[float] = field(default_factory=list)
    scoring_duration_ms: float = 0.0
    diversity_duration_ms: float = 0.0

    def record_pass(self, candidates_in: int, candidates_out: int) -> None:
        """Record a completed ranking pass.

        Args:
            candidates_in: Number of input candidates.
            candidates_out: Length of the diversified sequence.
        """
        self.passes += 1
        self.candidates_in += candidates_in
        self.candidates_out += candidates_out

    def record_exclusion(self, factor: str | None) -> None:
        """Record a candidate excluded for bad data.

        Args:
            factor: Factor that failed, if known.
        """
        self.excluded_total += 1
        key = factor or "unknown"
        self.excluded_by_factor[key] = self.excluded_by_factor.get(key, 0) + 1

    def record_drops(self, count: int) -> None:
        self.dropped_total += count

    def record_score(self, score: float) -> None:
        self.score_values.append(score)

    def record_scoring_duration(self, duration_ms: float) -> None:
        self.scoring_duration_ms = duration_ms

    def record_diversity_duration(self, duration_ms: float) -> None:
        self.diversity_duration_ms = duration_ms

    def get_score_percentiles(self) -> dict[str, float]:
        """Calculate score percentiles (p50/p90/p99).

        Returns:
            Dictionary with p50, p90, p99 values.
        """
        if not self.score_values:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        sorted_scores = sorted(self.score_values)
        n = len(sorted_scores)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return sorted_scores[min(idx, n - 1)]

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "passes": self.passes,
            "candidates_in": self.candidates_in,
            "candidates_out": self.candidates_out,
            "excluded_total": self.excluded_total,
            "excluded_by_factor": dict(self.excluded_by_factor),
            "dropped_total": self.dropped_total,
            "scoring_duration_ms": self.scoring_duration_ms,
            "diversity_duration_ms": self.diversity_duration_ms,
            "score_percentiles": self.get_score_percentiles(),
        }
