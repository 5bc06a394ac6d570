"""Tests for quiz question generation."""
import random

import pytest

from wordstudy.models.study_models import QuizDirection, WordRecord
from wordstudy.services.catalog_service import normalize
from wordstudy.services.quiz_service import QuizService
from wordstudy.services.selection_service import with_progress


@pytest.fixture
def quiz_service() -> QuizService:
    """Create a quiz service with a seeded random source."""
    return QuizService(rng=random.Random(1234))


def active_set(records):
    return with_progress(normalize(records), {})


@pytest.mark.parametrize("seed", range(20))
def test_ten_words_give_four_options(word_list, seed):
    """A large set yields four distinct options with exactly one correct."""
    items = active_set(word_list(10))
    question = QuizService(rng=random.Random(seed)).generate(items)

    assert len(question.options) == 4
    assert len({option.id for option in question.options}) == 4
    assert question.target is items[question.target_index]
    assert sum(question.is_correct(i) for i in range(4)) == 1


def test_two_words_give_two_options(quiz_service: QuizService, word_list):
    """Small sets use every word."""
    items = active_set(word_list(2))
    question = quiz_service.generate(items)

    assert len(question.options) == 2
    assert {option.id for option in question.options} == {item.id for item in items}


def test_single_word(quiz_service: QuizService, word_list):
    """A single word is its own only option."""
    items = active_set(word_list(1))
    question = quiz_service.generate(items)

    assert question.options == items
    assert question.is_correct(0)


def test_empty_set_without_fallback(quiz_service: QuizService):
    """No words, no question."""
    assert quiz_service.generate([]) is None


def test_empty_set_uses_fallback(quiz_service: QuizService, word_list):
    """An empty active set falls back to the whole catalog."""
    catalog = active_set(word_list(6))
    question = quiz_service.generate([], fallback=catalog)

    assert question is not None
    assert question.target in catalog


def test_same_seed_same_question(word_list):
    """Generation is reproducible with a seeded random source."""
    items = active_set(word_list(8))
    first = QuizService(rng=random.Random(7)).generate(items)
    second = QuizService(rng=random.Random(7)).generate(items)

    assert first.target_index == second.target_index
    assert [option.id for option in first.options] == [option.id for option in second.options]


def test_option_count_setting(word_list):
    """The number of options is configurable."""
    question = QuizService(rng=random.Random(3), option_count=3).generate(active_set(word_list(10)))

    assert len(question.options) == 3


def test_duplicate_headword_counts_as_correct(quiz_service: QuizService):
    """Options are compared by headword, not identity."""
    items = active_set([{"value": "bank", "translation": "берег"}, {"value": "bank", "translation": "банк"}])
    question = quiz_service.generate(items)

    assert question.is_correct(0)
    assert question.is_correct(1)


def test_first_answer_wins(quiz_service: QuizService, word_list):
    """Answers after the first are ignored."""
    question = quiz_service.generate(active_set(word_list(5)))
    correct_index = next(i for i in range(4) if question.is_correct(i))
    wrong_index = (correct_index + 1) % 4

    assert QuizService.answer(question, wrong_index) is False
    assert QuizService.answer(question, correct_index) is None
    assert question.answered == wrong_index


def test_answer_ignores_invalid_input(quiz_service: QuizService, word_list):
    """Out of range indexes and missing questions are ignored."""
    question = quiz_service.generate(active_set(word_list(3)))

    assert QuizService.answer(None, 0) is None
    assert QuizService.answer(question, 3) is None
    assert QuizService.answer(question, -1) is None
    assert question.answered is None


def test_prompt_and_labels_follow_direction(quiz_service: QuizService):
    """Word-to-translation asks for meanings; translation-to-word asks for headwords."""
    items = active_set([
        {"value": "apple", "translation": "яблуко"},
        {"value": "pear", "definition": "a sweet fruit"},
    ])
    question = quiz_service.generate(items)
    target = question.target

    assert question.prompt == target.value
    assert sorted(question.labels) == sorted(["яблуко", "a sweet fruit"])

    question.direction = QuizDirection.TRANSLATION_TO_WORD
    assert question.prompt == target.word.meaning
    assert sorted(question.labels) == ["apple", "pear"]


def test_meaning_placeholder():
    """A word without translation or definition has an empty meaning."""
    assert WordRecord(value="zyx").meaning == ""


if __name__ == "__main__":
    pytest.main([__file__])
