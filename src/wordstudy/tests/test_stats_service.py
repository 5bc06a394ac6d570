"""Tests for catalog statistics."""
from datetime import datetime, timedelta

import pytest

from wordstudy.models.study_models import ProgressState, Stats
from wordstudy.services.catalog_service import normalize
from wordstudy.services.stats_service import compute_stats, percentage


def test_empty_catalog_has_zero_percentages(now: datetime):
    """No division by zero for an empty catalog."""
    assert compute_stats([], {}, now) == Stats()


def test_counts(now: datetime):
    """Known, studied and due are counted over the whole catalog."""
    catalog = normalize([{"value": "a"}, {"value": "b"}, {"value": "c"}])
    progress = {
        "a": ProgressState(known=True, seen_count=2, next_due=now + timedelta(minutes=10)),
        "b": ProgressState(seen_count=1, next_due=now - timedelta(seconds=1)),
    }

    stats = compute_stats(catalog, progress, now)

    assert stats == Stats(total=3, known=1, studied=2, due=2, pct_known=33, pct_studied=67)


def test_duplicate_headwords_share_progress(now: datetime):
    """Entries with the same headword read the same record."""
    catalog = normalize([{"value": "bank"}, {"value": "bank"}])
    stats = compute_stats(catalog, {"bank": ProgressState(known=True)}, now)

    assert stats.known == 2
    assert stats.pct_known == 100


def test_stale_progress_is_ignored(now: datetime):
    """Progress of words missing from the catalog does not count."""
    catalog = normalize([{"value": "a"}])
    stats = compute_stats(catalog, {"gone": ProgressState(known=True, seen_count=3)}, now)

    assert stats.known == 0
    assert stats.studied == 0


@pytest.mark.parametrize(
    "count,total,expected",
    [(0, 0, 0), (1, 8, 13), (1, 200, 1), (1, 3, 33), (2, 3, 67), (5, 5, 100)],
)
def test_percentage_rounds_half_up(count, total, expected):
    """Percentages round half up."""
    assert percentage(count, total) == expected


if __name__ == "__main__":
    pytest.main([__file__])
