"""Review scheduler: fixed-interval transitions of word progress."""
import logging
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, Optional

from wordstudy.config import settings
from wordstudy.models.study_models import Outcome, ProgressState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def default_intervals() -> Dict[Outcome, timedelta]:
    """Review intervals from settings."""
    return {
        Outcome.AGAIN: timedelta(seconds=settings.scheduling.again_seconds),
        Outcome.GOOD: timedelta(minutes=settings.scheduling.good_minutes),
        Outcome.EASY: timedelta(minutes=settings.scheduling.easy_minutes),
    }


class ReviewScheduler:
    """Computes the next progress state from a review outcome.

    Every review counts as seen. "good" and "easy" extend the streak and the
    correct count; "again" resets the streak and leaves the correct count as
    it is. The next review is due after a fixed interval per outcome.
    """

    def __init__(self, now: Optional[Clock] = None, intervals: Optional[Dict[Outcome, timedelta]] = None):
        self.now = now or utc_now
        self.intervals = intervals or default_intervals()

    def interval_for(self, outcome: Outcome) -> timedelta:
        return self.intervals[outcome]

    def grade(self, progress: ProgressState, outcome: Outcome) -> ProgressState:
        """Apply a flashcard grade."""
        outcome = Outcome(outcome)
        current_time = self.now()
        remembered = outcome != Outcome.AGAIN
        return replace(
            progress,
            seen_count=progress.seen_count + 1,
            correct_count=progress.correct_count + 1 if remembered else progress.correct_count,
            streak=progress.streak + 1 if remembered else 0,
            last_reviewed=current_time,
            next_due=current_time + self.interval_for(outcome),
        )

    def grade_quiz(self, progress: ProgressState, correct: bool) -> ProgressState:
        """A correct quiz answer counts as "good", a wrong one as "again"."""
        return self.grade(progress, Outcome.GOOD if correct else Outcome.AGAIN)

    def transition(self, outcome: Outcome) -> Callable[[ProgressState], ProgressState]:
        """Grade as a transition for ProgressStore.apply."""
        return lambda progress: self.grade(progress, outcome)

    def quiz_transition(self, correct: bool) -> Callable[[ProgressState], ProgressState]:
        return lambda progress: self.grade_quiz(progress, correct)

    def is_due(self, progress: ProgressState, now: Optional[datetime] = None) -> bool:
        return progress.is_due(now or self.now())


def toggle_known(progress: ProgressState) -> ProgressState:
    return replace(progress, known=not progress.known)


def toggle_favorite(progress: ProgressState) -> ProgressState:
    return replace(progress, favorite=not progress.favorite)
