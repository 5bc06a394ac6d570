"""Multiple-choice question generation and answer registration."""
import logging
import random
from typing import Optional, Sequence

from wordstudy.config import settings
from wordstudy.models.study_models import QuizDirection, QuizQuestion, WordWithProgress

logger = logging.getLogger(__name__)


class QuizService:
    """Builds quiz questions from the active set."""

    def __init__(self, rng: Optional[random.Random] = None, option_count: Optional[int] = None):
        self.rng = rng or random.Random()
        self.option_count = option_count or settings.study.quiz_option_count

    def generate(
        self,
        active_set: Sequence[WordWithProgress],
        fallback: Sequence[WordWithProgress] = (),
        direction: QuizDirection = QuizDirection.WORD_TO_TRANSLATION,
    ) -> Optional[QuizQuestion]:
        """Pick a target and distractors; None when there is nothing to ask."""
        base = list(active_set) if active_set else list(fallback)
        if not base:
            logger.debug("No words to build a quiz question from")
            return None

        target_index = self.rng.randrange(len(base))
        target = base[target_index]
        pool = [item for i, item in enumerate(base) if i != target_index]
        distractors = self.rng.sample(pool, min(self.option_count - 1, len(pool)))
        options = distractors + [target]
        self.rng.shuffle(options)

        logger.debug(f"Quiz question for {target.value!r} with {len(options)} options")
        return QuizQuestion(
            target_index=target_index,
            target=target,
            options=options,
            direction=direction,
        )

    @staticmethod
    def answer(question: Optional[QuizQuestion], option_index: int) -> Optional[bool]:
        """Register the first answer to a question.

        Returns whether it was correct, or None if the answer is ignored because
        there is no question, the index is out of range, or it was already answered.
        """
        if question is None or not question.options:
            return None
        if question.answered is not None:
            return None
        if not 0 <= option_index < len(question.options):
            return None
        question.answered = option_index
        return question.is_correct(option_index)
