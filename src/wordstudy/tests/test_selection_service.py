"""Tests for filtering and ordering the active set."""
from datetime import datetime, timedelta

import pytest

from wordstudy.models.study_models import ProgressState, SelectionFilters, SortKey
from wordstudy.services.catalog_service import normalize
from wordstudy.services.selection_service import collation_key, select, with_progress


@pytest.fixture
def catalog():
    """A small catalog with tags, ranks and ratings."""
    return normalize([
        {"value": "cherry", "translation": "вишня", "tag": "fruit red", "bnc": 3000, "frq": 0, "collins": 2},
        {"value": "Apple", "translation": "яблуко", "tag": "fruit", "bnc": 800, "collins": 5},
        {"value": "banana", "translation": "банан", "tag": "fruit yellow", "frq": 1200},
        {"value": "carrot", "translation": "морква", "tag": "vegetable", "bnc": 800, "frq": 50},
    ])


def values(items):
    return [item.value for item in items]


def test_with_progress_defaults_missing(catalog):
    """Entries without progress get the default state."""
    items = with_progress(catalog, {"banana": ProgressState(streak=2)})

    assert [item.progress.streak for item in items] == [0, 0, 2, 0]


def test_alphabetic_sort_is_stable():
    """Equal headwords keep their catalog order."""
    entries = normalize([{"value": "b"}, {"value": "a"}, {"value": "a"}])
    items = select(entries, {}, sort_key=SortKey.ALPHA)

    assert values(items) == ["a", "a", "b"]
    assert [item.id for item in items] == ["a-1", "a-2", "b-0"]


def test_alphabetic_sort_ignores_case(catalog, now: datetime):
    """Case does not separate words."""
    assert values(select(catalog, {}, sort_key=SortKey.ALPHA, now=now)) == ["Apple", "banana", "carrot", "cherry"]


def test_collation_key():
    """Accented letters sort with their base letter and lowercase comes first."""
    words = ["f", "é", "E", "e", "d"]

    assert sorted(words, key=collation_key) == ["d", "e", "E", "é", "f"]


def test_collation_key_ignores_punctuation():
    """Hyphens do not separate related words."""
    words = ["cop", "coop", "co-op", "coo", "copy"]

    assert sorted(words, key=collation_key) == ["coo", "co-op", "coop", "cop", "copy"]


def test_select_is_idempotent(catalog, now: datetime):
    """Same input and settings give the same order."""
    filters = SelectionFilters(tag="fruit")

    assert select(catalog, {}, filters, SortKey.COLLINS, now) == select(catalog, {}, filters, SortKey.COLLINS, now)


def test_bnc_sort_puts_missing_last(catalog, now: datetime):
    """Lower ranks first, missing ranks last, ties in catalog order."""
    assert values(select(catalog, {}, sort_key=SortKey.BNC, now=now)) == ["Apple", "carrot", "cherry", "banana"]


def test_frq_sort_treats_zero_as_missing(catalog, now: datetime):
    """A zero rank counts as missing."""
    assert values(select(catalog, {}, sort_key=SortKey.FRQ, now=now)) == ["carrot", "banana", "cherry", "Apple"]


def test_collins_sort_descending(catalog, now: datetime):
    """Higher ratings first, unrated last."""
    assert values(select(catalog, {}, sort_key=SortKey.COLLINS, now=now)) == ["Apple", "cherry", "banana", "carrot"]


def test_progress_sort_by_streak(catalog, now: datetime):
    """Longest streak first."""
    progress = {"banana": ProgressState(streak=4), "carrot": ProgressState(streak=1)}

    assert values(select(catalog, progress, sort_key=SortKey.PROGRESS, now=now)) == [
        "banana", "carrot", "cherry", "Apple",
    ]


def test_sort_key_by_value(catalog, now: datetime):
    """Sort keys may be given as strings."""
    assert values(select(catalog, {}, sort_key="collins", now=now))[0] == "Apple"


def test_unknown_sort_key_falls_back_to_alpha(catalog, now: datetime):
    """An unknown key sorts alphabetically."""
    assert values(select(catalog, {}, sort_key="random", now=now)) == ["Apple", "banana", "carrot", "cherry"]


def test_query_matches_value_or_translation(catalog, now: datetime):
    """The text query is a case-insensitive substring search."""
    assert values(select(catalog, {}, SelectionFilters(query="  AN "), now=now)) == ["banana"]
    assert values(select(catalog, {}, SelectionFilters(query="ЯБЛ"), now=now)) == ["Apple"]
    assert values(select(catalog, {}, SelectionFilters(query="r"), now=now)) == ["carrot", "cherry"]


def test_tag_filter(catalog, now: datetime):
    """Tags match whole whitespace-separated tokens; "all" matches everything."""
    assert values(select(catalog, {}, SelectionFilters(tag="red"), now=now)) == ["cherry"]
    assert values(select(catalog, {}, SelectionFilters(tag="fru"), now=now)) == []
    assert len(select(catalog, {}, SelectionFilters(tag="all"), now=now)) == 4


def test_favorite_filter(catalog, now: datetime):
    """Only favorites remain."""
    progress = {"carrot": ProgressState(favorite=True)}

    assert values(select(catalog, progress, SelectionFilters(only_favorites=True), now=now)) == ["carrot"]


def test_due_filter(catalog, now: datetime):
    """Words scheduled in the future are dropped."""
    progress = {
        "Apple": ProgressState(next_due=now + timedelta(minutes=10)),
        "banana": ProgressState(next_due=now - timedelta(seconds=1)),
    }

    assert values(select(catalog, progress, SelectionFilters(only_due=True), now=now)) == [
        "banana", "carrot", "cherry",
    ]


def test_filters_combine(catalog, now: datetime):
    """All filters must pass."""
    progress = {
        "cherry": ProgressState(favorite=True),
        "banana": ProgressState(favorite=True, next_due=now + timedelta(hours=1)),
        "carrot": ProgressState(favorite=True),
    }
    filters = SelectionFilters(tag="fruit", only_favorites=True, only_due=True)

    assert values(select(catalog, progress, filters, now=now)) == ["cherry"]


def test_select_empty_catalog(now: datetime):
    """An empty catalog selects nothing."""
    assert select([], {}, SelectionFilters(only_due=True), now=now) == []


if __name__ == "__main__":
    pytest.main([__file__])
