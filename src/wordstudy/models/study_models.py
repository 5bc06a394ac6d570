"""Models for catalog entries, learning progress and study views."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class Outcome(Enum):
    """Flashcard grades."""
    AGAIN = "again"  # Forgot the word, show it again shortly
    GOOD = "good"  # Remembered it
    EASY = "easy"  # Remembered it without effort


class SortKey(Enum):
    """Orderings available for the active set."""
    ALPHA = "alpha"
    BNC = "bnc"
    FRQ = "frq"
    COLLINS = "collins"
    PROGRESS = "progress"  # By streak, longest first


class StudyMode(Enum):
    """Ways of studying the active set."""
    LIST = "list"
    FLASH = "flash"
    QUIZ = "quiz"


class QuizDirection(Enum):
    """What a quiz question shows and what it asks for."""
    WORD_TO_TRANSLATION = "w2t"
    TRANSLATION_TO_WORD = "t2w"


class Variant(Enum):
    """Pronunciation variants."""
    US = "us"
    UK = "uk"


@dataclass(frozen=True)
class WordRecord:
    """A headword as it comes from an imported word list."""
    value: str
    usphone: Optional[str] = None
    ukphone: Optional[str] = None
    translation: Optional[str] = None
    definition: Optional[str] = None
    pos: Optional[str] = None
    collins: Optional[int] = None
    oxford: Optional[bool] = None
    tag: Optional[str] = None  # space separated tags
    bnc: Optional[int] = None  # British National Corpus frequency rank
    frq: Optional[int] = None  # COCA frequency rank

    @property
    def tags(self) -> List[str]:
        return (self.tag or "").split()

    @property
    def meaning(self) -> str:
        """Text shown as the word's meaning."""
        return self.translation or self.definition or ""


@dataclass(frozen=True)
class CatalogEntry:
    """A word record with an id unique within its catalog."""
    id: str
    word: WordRecord

    @property
    def value(self) -> str:
        return self.word.value


@dataclass
class Catalog:
    """A named, normalized word list."""
    name: str
    entries: List[CatalogEntry] = field(default_factory=list)
    type: str = "DOCUMENT"
    language: str = ""

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ProgressState:
    """Learning state of a single word."""
    known: bool = False
    favorite: bool = False
    seen_count: int = 0
    correct_count: int = 0
    streak: int = 0
    last_reviewed: Optional[datetime] = None
    next_due: Optional[datetime] = None

    def is_due(self, now: datetime) -> bool:
        """A word is due when it was never scheduled or its time has come."""
        return self.next_due is None or self.next_due <= now


DEFAULT_PROGRESS = ProgressState()


@dataclass(frozen=True)
class WordWithProgress:
    """Transient join of a catalog entry with its progress."""
    entry: CatalogEntry
    progress: ProgressState

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def value(self) -> str:
        return self.entry.value

    @property
    def word(self) -> WordRecord:
        return self.entry.word


@dataclass(frozen=True)
class SelectionFilters:
    """Filters narrowing the catalog down to the active set."""
    query: str = ""
    tag: str = "all"
    only_favorites: bool = False
    only_due: bool = False


@dataclass
class QuizQuestion:
    """A multiple-choice question built from the active set."""
    target_index: int
    target: WordWithProgress
    options: List[WordWithProgress]
    direction: QuizDirection = QuizDirection.WORD_TO_TRANSLATION
    answered: Optional[int] = None

    @property
    def prompt(self) -> str:
        if self.direction == QuizDirection.WORD_TO_TRANSLATION:
            return self.target.value
        return self.target.word.meaning

    @property
    def labels(self) -> List[str]:
        if self.direction == QuizDirection.WORD_TO_TRANSLATION:
            return [option.word.meaning for option in self.options]
        return [option.value for option in self.options]

    def is_correct(self, option_index: int) -> bool:
        """Options are matched by headword, so a duplicate of the target also counts."""
        return self.options[option_index].value == self.target.value


@dataclass(frozen=True)
class Stats:
    """Summary counts over a whole catalog."""
    total: int = 0
    known: int = 0
    studied: int = 0
    due: int = 0
    pct_known: int = 0
    pct_studied: int = 0


@dataclass(frozen=True)
class ProgressExport:
    """A progress mapping serialized as a standalone document."""
    filename: str
    content: str
