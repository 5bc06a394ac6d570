"""Selection of the active study set: filtering and ordering."""
import logging
import math
import unicodedata
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from wordstudy.models.study_models import (
    DEFAULT_PROGRESS,
    CatalogEntry,
    ProgressState,
    SelectionFilters,
    SortKey,
    WordWithProgress,
)
from wordstudy.services.review_scheduler import utc_now

logger = logging.getLogger(__name__)


def with_progress(
    entries: Sequence[CatalogEntry], progress_by_word: Mapping[str, ProgressState]
) -> List[WordWithProgress]:
    """Join catalog entries with their progress, defaulting missing ones."""
    return [
        WordWithProgress(entry=entry, progress=progress_by_word.get(entry.value, DEFAULT_PROGRESS))
        for entry in entries
    ]


def collation_key(text: str) -> Tuple[str, str, str]:
    """Dictionary order: punctuation, accents and case only break ties, lowercase first."""
    folded = text.casefold()
    base = "".join(char for char in unicodedata.normalize("NFKD", folded) if char.isalnum())
    return base, folded, text.swapcase()


def _rank(value: Optional[int]) -> float:
    # Missing (or zero) ranks go last
    return value or math.inf


SORT_KEYS: Dict[SortKey, Callable[[WordWithProgress], Any]] = {
    SortKey.ALPHA: lambda item: collation_key(item.value),
    SortKey.BNC: lambda item: _rank(item.word.bnc),
    SortKey.FRQ: lambda item: _rank(item.word.frq),
    SortKey.COLLINS: lambda item: -(item.word.collins or 0),
    SortKey.PROGRESS: lambda item: -(item.progress.streak or 0),
}


def matches(item: WordWithProgress, filters: SelectionFilters, now: datetime) -> bool:
    """Whether an item passes every filter."""
    query = filters.query.strip().lower()
    if query and query not in item.value.lower() and query not in (item.word.translation or "").lower():
        return False
    if filters.tag != "all" and filters.tag not in item.word.tags:
        return False
    if filters.only_favorites and not item.progress.favorite:
        return False
    if filters.only_due and not item.progress.is_due(now):
        return False
    return True


def sort_items(items: Sequence[WordWithProgress], sort_key: SortKey) -> List[WordWithProgress]:
    """Stable sort; unknown keys fall back to alphabetic order."""
    try:
        key = SORT_KEYS[SortKey(sort_key)]
    except ValueError:
        logger.warning(f"Unknown sort key {sort_key!r}, sorting alphabetically")
        key = SORT_KEYS[SortKey.ALPHA]
    return sorted(items, key=key)


def select(
    catalog: Sequence[CatalogEntry],
    progress_by_word: Mapping[str, ProgressState],
    filters: Optional[SelectionFilters] = None,
    sort_key: SortKey = SortKey.ALPHA,
    now: Optional[datetime] = None,
) -> List[WordWithProgress]:
    """Filter and order a catalog into the active study set."""
    filters = filters or SelectionFilters()
    now = now or utc_now()
    items = [item for item in with_progress(catalog, progress_by_word) if matches(item, filters, now)]
    selected = sort_items(items, sort_key)
    logger.debug(f"Selected {len(selected)} of {len(catalog)} words with {filters} by {sort_key}")
    return selected
