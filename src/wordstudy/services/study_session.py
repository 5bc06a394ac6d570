"""Study session: the active catalog, progress and study state of one learner."""
import logging
import random
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from wordstudy import monitoring
from wordstudy.config import settings
from wordstudy.errors import InvalidCatalogError
from wordstudy.models.study_models import (
    Catalog,
    Outcome,
    ProgressExport,
    QuizDirection,
    QuizQuestion,
    SelectionFilters,
    SortKey,
    Stats,
    StudyMode,
    Variant,
    WordWithProgress,
)
from wordstudy.services.catalog_service import available_tags, empty_catalog, parse_catalog
from wordstudy.services.progress_store import (
    ProgressBackend,
    ProgressStore,
    dump_progress,
    parse_progress,
)
from wordstudy.services.pronunciation_service import YoudaoPronouncer
from wordstudy.services.quiz_service import QuizService
from wordstudy.services.review_scheduler import Clock, ReviewScheduler, toggle_favorite, toggle_known, utc_now
from wordstudy.services.selection_service import select, with_progress
from wordstudy.services.stats_service import compute_stats

logger = logging.getLogger(__name__)


class StudySession:
    """Explicit session context tying the study components together.

    The catalog owns word content and the progress store owns learning state.
    Everything else here (words with progress, the active set, the current
    flashcard and quiz question) is derived from those two and is reset when
    the selection it depends on changes.
    """

    def __init__(
        self,
        backend: ProgressBackend,
        catalog: Optional[Catalog] = None,
        now: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        pronouncer: Optional[YoudaoPronouncer] = None,
    ):
        self.now = now or utc_now
        self.scheduler = ReviewScheduler(now=self.now)
        self.quiz_service = QuizService(rng=rng)
        self.pronouncer = pronouncer
        self.catalog = catalog or empty_catalog()
        self.store = ProgressStore(backend)
        self.store.load(self.catalog.name)

        self.filters = SelectionFilters()
        try:
            self.sort_key = SortKey(settings.study.default_sort)
        except ValueError:
            self.sort_key = SortKey.ALPHA
        self.mode = StudyMode.LIST
        self.quiz_direction = QuizDirection.WORD_TO_TRANSLATION

        self.flash_index = 0
        self.flash_revealed = False
        self.question: Optional[QuizQuestion] = None
        self._active_size = len(self.active_set())

    # Catalog

    def import_catalog(self, document: Mapping[str, Any]) -> Catalog:
        """Replace the catalog; a malformed document leaves the session untouched."""
        try:
            catalog = parse_catalog(document)
        except InvalidCatalogError as e:
            logger.warning(f"Rejected catalog import: {e}")
            monitoring.catalog_imports.labels(status="rejected").inc()
            raise
        self.catalog = catalog
        self.store.load(catalog.name)
        monitoring.catalog_imports.labels(status="accepted").inc()
        logger.info(f"Switched to catalog {catalog.name!r} ({len(catalog)} words)")
        self._reset_selection()
        return catalog

    def tags(self) -> List[str]:
        return available_tags(self.catalog.entries)

    # Derived views

    def words(self) -> List[WordWithProgress]:
        """Every catalog entry joined with its current progress."""
        return with_progress(self.catalog.entries, self.store.snapshot())

    def active_set(self) -> List[WordWithProgress]:
        return select(
            self.catalog.entries,
            self.store.snapshot(),
            self.filters,
            self.sort_key,
            now=self.now(),
        )

    def stats(self) -> Stats:
        return compute_stats(self.catalog.entries, self.store.snapshot(), now=self.now())

    # Selection

    def set_filters(
        self,
        query: Optional[str] = None,
        tag: Optional[str] = None,
        only_favorites: Optional[bool] = None,
        only_due: Optional[bool] = None,
    ) -> List[WordWithProgress]:
        changes = {
            name: value
            for name, value in (
                ("query", query),
                ("tag", tag),
                ("only_favorites", only_favorites),
                ("only_due", only_due),
            )
            if value is not None
        }
        self.filters = replace(self.filters, **changes)
        self._reset_selection()
        return self.active_set()

    def set_sort(self, sort_key: SortKey) -> List[WordWithProgress]:
        self.sort_key = SortKey(sort_key)
        self._reset_selection()
        return self.active_set()

    def set_mode(self, mode: StudyMode) -> None:
        self.mode = StudyMode(mode)
        self._reset_selection()

    def set_quiz_direction(self, direction: QuizDirection) -> None:
        self.quiz_direction = QuizDirection(direction)
        if self.question is not None:
            self.question.direction = self.quiz_direction

    def _reset_selection(self) -> None:
        self.flash_index = 0
        self.flash_revealed = False
        self.question = None
        self._active_size = len(self.active_set())
        if self.mode == StudyMode.QUIZ:
            self.next_question()

    def _after_progress_change(self) -> None:
        # Grading can move words out of a due-only selection
        size = len(self.active_set())
        if size != self._active_size:
            logger.debug(f"Active set changed from {self._active_size} to {size} words")
            self._reset_selection()

    # Flashcards

    def current_card(self) -> Optional[WordWithProgress]:
        active = self.active_set()
        if not active:
            return None
        return active[self.flash_index % len(active)]

    def reveal(self) -> bool:
        self.flash_revealed = not self.flash_revealed
        return self.flash_revealed

    def next_card(self) -> Optional[WordWithProgress]:
        self.flash_index = (self.flash_index + 1) % max(1, len(self.active_set()))
        self.flash_revealed = False
        return self.current_card()

    def previous_card(self) -> Optional[WordWithProgress]:
        size = max(1, len(self.active_set()))
        self.flash_index = (self.flash_index - 1 + size) % size
        self.flash_revealed = False
        return self.current_card()

    def grade_card(self, outcome: Outcome) -> Optional[WordWithProgress]:
        """Grade the current flashcard and move on; no-op without a card."""
        card = self.current_card()
        if card is None:
            return None
        outcome = Outcome(outcome)
        self.store.apply(card.value, self.scheduler.transition(outcome))
        monitoring.reviews.labels(outcome=outcome.value).inc()
        logger.info(f"Graded {card.value!r} as {outcome.value}")
        self.flash_revealed = False
        self.flash_index = (self.flash_index + 1) % max(1, len(self.active_set()))
        self._after_progress_change()
        return self.current_card()

    # Quiz

    def next_question(self) -> Optional[QuizQuestion]:
        self.question = self.quiz_service.generate(
            self.active_set(),
            fallback=self.words(),
            direction=self.quiz_direction,
        )
        return self.question

    def answer(self, option_index: int) -> Optional[bool]:
        """Answer the current question; only the first answer counts."""
        question = self.question
        correct = self.quiz_service.answer(question, option_index)
        if correct is None:
            return None
        self.store.apply(question.target.value, self.scheduler.quiz_transition(correct))
        monitoring.quiz_answers.labels(result="correct" if correct else "incorrect").inc()
        logger.info(f"Quiz answer for {question.target.value!r} was {'correct' if correct else 'incorrect'}")
        self._after_progress_change()
        return correct

    # Flags

    def toggle_known(self, word: str) -> bool:
        progress = self.store.apply(word, toggle_known)
        self._after_progress_change()
        return progress.known

    def toggle_favorite(self, word: str) -> bool:
        progress = self.store.apply(word, toggle_favorite)
        self._after_progress_change()
        return progress.favorite

    # Import / export

    def export_progress(self) -> ProgressExport:
        name = self.catalog.name or "default"
        return ProgressExport(
            filename=f"{name}-progress.json",
            content=dump_progress(self.store.snapshot(), indent=2),
        )

    def import_progress(self, text: str) -> int:
        """Replace the active progress with an exported document."""
        progress = parse_progress(text)
        self.store.replace(progress)
        self._reset_selection()
        return len(progress)

    # Audio

    def pronounce(self, word: str, variant: Variant = Variant.US) -> bool:
        if self.pronouncer is None:
            logger.debug(f"No pronouncer configured, skipping {word!r}")
            return False
        return self.pronouncer.pronounce(word, variant)
