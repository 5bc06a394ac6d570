"""Summary statistics over a catalog and its progress."""
import math
from datetime import datetime
from typing import Mapping, Optional, Sequence

from wordstudy.models.study_models import DEFAULT_PROGRESS, CatalogEntry, ProgressState, Stats
from wordstudy.services.review_scheduler import utc_now


def percentage(count: int, total: int) -> int:
    """Whole percentage rounded half up; 0 for an empty catalog."""
    if not total:
        return 0
    return math.floor(count * 100 / total + 0.5)


def compute_stats(
    catalog: Sequence[CatalogEntry],
    progress_by_word: Mapping[str, ProgressState],
    now: Optional[datetime] = None,
) -> Stats:
    """Count known, studied and due entries of the whole catalog."""
    now = now or utc_now()
    total = len(catalog)
    known = studied = due = 0
    for entry in catalog:
        progress = progress_by_word.get(entry.value, DEFAULT_PROGRESS)
        if progress.known:
            known += 1
        if progress.seen_count > 0:
            studied += 1
        if progress.is_due(now):
            due += 1
    return Stats(
        total=total,
        known=known,
        studied=studied,
        due=due,
        pct_known=percentage(known, total),
        pct_studied=percentage(studied, total),
    )
