"""Unit tests for the ranker orchestrator."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from matchrank.data_model import PostCandidate
from matchrank.errors import ConfigurationError, PaginationError
from matchrank.ranker import Ranker, RankerMetrics, Scorer
from matchrank.signals import DEFAULT_REGISTRY, SignalRegistry

from tests.helpers.factories import make_post, make_profile, make_viewer
from tests.helpers.time import FIXED_NOW, hours_ago


def _feed(n: int = 12) -> list[PostCandidate]:
    """Posts from four authors with varied age and engagement."""
    return [
        make_post(
            candidate_id=f"p{i:02d}",
            author_id=f"author-{i % 4}",
            created_at=hours_ago(i * 2),
            likes=(i * 7) % 30,
            comments=i % 5,
            content="community story" if i % 3 == 0 else "update",
        )
        for i in range(n)
    ]


class TestRanking:
    """Tests for the full score, sort, diversify, page flow."""

    def test_items_sorted_by_score(self) -> None:
        ranker = Ranker(diversity_cap=50)
        page = ranker.rank(_feed(), make_viewer(), make_profile(), page_size=50, now=FIXED_NOW)
        scores = [item.score for item in page.items]
        assert len(page.items) == page.total == 12
        assert scores == sorted(scores, reverse=True)

    def test_deterministic_output(self) -> None:
        viewer = make_viewer(following=frozenset({"author-1"}))
        first = Ranker().rank(_feed(), viewer, make_profile(), page_size=5, now=FIXED_NOW)
        second = Ranker().rank(
            list(reversed(_feed())), viewer, make_profile(), page_size=5, now=FIXED_NOW
        )
        assert first.model_dump_json() == second.model_dump_json()

    def test_parallel_scoring_matches_serial(self) -> None:
        viewer = make_viewer()
        serial = Ranker().rank(_feed(), viewer, make_profile(), page_size=20, now=FIXED_NOW)
        with ThreadPoolExecutor(max_workers=4) as executor:
            parallel = Ranker(executor=executor).rank(
                _feed(), viewer, make_profile(), page_size=20, now=FIXED_NOW
            )
        assert parallel.model_dump_json() == serial.model_dump_json()

    def test_pages_concatenate(self) -> None:
        """Walking the cursors reproduces the single-page sequence."""
        ranker = Ranker()
        viewer = make_viewer()
        full = ranker.rank(_feed(), viewer, make_profile(), page_size=100, now=FIXED_NOW)

        collected: list[str] = []
        cursor = None
        while True:
            page = ranker.rank(
                _feed(), viewer, make_profile(), page_size=5, cursor=cursor, now=FIXED_NOW
            )
            collected.extend(page.candidate_ids)
            if not page.has_more:
                assert page.next_cursor is None
                break
            cursor = page.next_cursor

        assert collected == full.candidate_ids

    def test_diversity_cap_applied(self) -> None:
        posts = [make_post(f"a{i}", author_id="alice", likes=50 - i) for i in range(4)]
        posts.append(make_post("b0", author_id="bob"))
        page = Ranker(diversity_cap=2).rank(
            posts, make_viewer(), make_profile(), page_size=10, now=FIXED_NOW
        )
        assert page.candidate_ids == ["a0", "a1", "b0", "a2", "a3"]
        assert page.total == 5

    def test_diversity_cap_override(self) -> None:
        posts = [make_post(f"a{i}", author_id="alice") for i in range(3)]
        page = Ranker(diversity_cap=1).rank(
            posts, make_viewer(), make_profile(), page_size=10, now=FIXED_NOW, diversity_cap=3
        )
        assert page.total == 3

    def test_empty_candidates(self) -> None:
        page = Ranker().rank([], make_viewer(), make_profile(), page_size=10, now=FIXED_NOW)
        assert page.items == []
        assert page.total == 0
        assert page.has_more is False
        assert page.profile_id == "test_profile"
        assert len(page.checksum) == 64


class TestExclusion:
    """Tests for malformed candidate handling."""

    def test_malformed_candidate_is_excluded(self) -> None:
        bad = PostCandidate.model_construct(
            candidate_id="bad", author_id="a", created_at="not-a-date"
        )
        metrics = RankerMetrics()
        page = Ranker(metrics=metrics).rank(
            [*_feed(3), bad], make_viewer(), make_profile(), page_size=10, now=FIXED_NOW
        )
        assert page.excluded_ids == ["bad"]
        assert "bad" not in page.candidate_ids
        assert page.total == 3
        assert metrics.excluded_total == 1
        assert metrics.excluded_by_factor == {"recency_decay": 1}


class TestValidation:
    """Tests for caller errors."""

    def test_invalid_cursor(self) -> None:
        with pytest.raises(PaginationError):
            Ranker().rank(_feed(), make_viewer(), make_profile(), page_size=5, cursor="junk!")

    def test_invalid_page_size(self) -> None:
        with pytest.raises(PaginationError):
            Ranker().rank(_feed(), make_viewer(), make_profile(), page_size=0)

    def test_naive_now_rejected(self) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            Ranker().rank(
                _feed(), make_viewer(), make_profile(), page_size=5, now=datetime(2026, 1, 1)
            )

    def test_invalid_diversity_cap(self) -> None:
        with pytest.raises(ValueError, match="diversity_cap"):
            Ranker(diversity_cap=0)

    def test_profile_needs_registered_factors(self) -> None:
        scorer = Scorer(registry=SignalRegistry({"engagement": DEFAULT_REGISTRY["engagement"]}))
        with pytest.raises(ConfigurationError):
            Ranker(scorer=scorer).rank(_feed(), make_viewer(), make_profile(), page_size=5)


class TestMetrics:
    """Tests for per-instance metrics."""

    def test_records_pass(self) -> None:
        metrics = RankerMetrics()
        Ranker(metrics=metrics).rank(_feed(), make_viewer(), make_profile(), page_size=5)
        data = metrics.to_dict()
        assert data["passes"] == 1
        assert data["candidates_in"] == 12
        assert data["candidates_out"] == 12
        assert len(metrics.score_values) == 12
        percentiles = metrics.get_score_percentiles()
        assert percentiles["p50"] <= percentiles["p90"] <= percentiles["p99"]

    def test_instances_are_independent(self) -> None:
        first = RankerMetrics()
        Ranker(metrics=first).rank(_feed(), make_viewer(), make_profile(), page_size=5)
        assert RankerMetrics().passes == 0

    def test_empty_percentiles(self) -> None:
        assert RankerMetrics().get_score_percentiles() == {"p50": 0.0, "p90": 0.0, "p99": 0.0}
