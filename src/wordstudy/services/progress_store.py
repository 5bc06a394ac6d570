"""Progress store: per-word learning state and its persistence."""
import json
import logging
import math
from datetime import UTC, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordstudy import monitoring
from wordstudy.config import settings
from wordstudy.errors import InvalidProgressError
from wordstudy.models.models import StoredProgress
from wordstudy.models.study_models import DEFAULT_PROGRESS, ProgressState

logger = logging.getLogger(__name__)

ProgressMap = Dict[str, ProgressState]
Transition = Callable[[ProgressState], ProgressState]


def progress_key(catalog_name: Optional[str]) -> str:
    """Storage key of a catalog's progress."""
    return f"{settings.study.progress_key_prefix}{catalog_name or settings.study.default_catalog_name}"


def _to_millis(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    return round(value.timestamp() * 1000)


def _from_millis(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidProgressError(f"Invalid timestamp: {value!r}")
    try:
        return datetime.fromtimestamp(value / 1000, UTC)
    except (OverflowError, ValueError, OSError) as e:
        raise InvalidProgressError(f"Timestamp out of range: {value!r}") from e


def _to_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidProgressError(f"Invalid counter: {value!r}")
    if not math.isfinite(value):
        raise InvalidProgressError(f"Counter is not finite: {value!r}")
    return int(value)


def progress_to_dict(progress: ProgressState) -> Dict[str, Any]:
    """Wire form of a progress state; timestamps are epoch milliseconds."""
    return {
        "known": progress.known,
        "favorite": progress.favorite,
        "seenCount": progress.seen_count,
        "correctCount": progress.correct_count,
        "streak": progress.streak,
        "lastReviewed": _to_millis(progress.last_reviewed),
        "nextDue": _to_millis(progress.next_due),
    }


def progress_from_dict(data: Mapping[str, Any]) -> ProgressState:
    """Read a stored progress state, filling missing fields with defaults."""
    if not isinstance(data, Mapping):
        raise InvalidProgressError("Progress entry must be an object")
    merged = {**progress_to_dict(DEFAULT_PROGRESS), **data}
    return ProgressState(
        known=bool(merged["known"]),
        favorite=bool(merged["favorite"]),
        seen_count=_to_count(merged["seenCount"]),
        correct_count=_to_count(merged["correctCount"]),
        streak=_to_count(merged["streak"]),
        last_reviewed=_from_millis(merged["lastReviewed"]),
        next_due=_from_millis(merged["nextDue"]),
    )


def dump_progress(progress: Mapping[str, ProgressState], indent: Optional[int] = None) -> str:
    """Serialize a progress mapping to JSON."""
    return json.dumps(
        {word: progress_to_dict(state) for word, state in progress.items()},
        ensure_ascii=False,
        indent=indent,
    )


def parse_progress(text: str) -> ProgressMap:
    """Parse a serialized progress mapping, raising InvalidProgressError if malformed."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidProgressError(f"Progress is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidProgressError("Progress document must be an object keyed by word")
    return {str(word): progress_from_dict(entry) for word, entry in data.items()}


class ProgressBackend(Protocol):
    """Durable key/value storage for serialized progress."""

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, payload: str) -> None:
        ...


class MemoryProgressBackend:
    """Backend keeping payloads in a dictionary."""

    def __init__(self, payloads: Optional[Dict[str, str]] = None):
        self.payloads = payloads if payloads is not None else {}

    def read(self, key: str) -> Optional[str]:
        return self.payloads.get(key)

    def write(self, key: str, payload: str) -> None:
        self.payloads[key] = payload


class SqlProgressBackend:
    """Backend storing payloads in the stored_progress table."""

    def __init__(self, db: Session):
        """Initialize the backend with a database session."""
        self.db = db

    def read(self, key: str) -> Optional[str]:
        stored = self.db.query(StoredProgress).filter(StoredProgress.key == key).first()
        return stored.payload if stored else None

    def write(self, key: str, payload: str) -> None:
        try:
            stored = self.db.query(StoredProgress).filter(StoredProgress.key == key).first()
            if stored:
                stored.payload = payload
            else:
                self.db.add(StoredProgress(key=key, payload=payload))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise


class ProgressStore:
    """Active mapping from headword to progress for one catalog.

    Progress is keyed by headword rather than catalog entry id, so repeated
    headwords share a single record. Every change is written through to the
    backend immediately; backend failures are logged and never reach the caller.
    """

    def __init__(self, backend: ProgressBackend, catalog_name: Optional[str] = None):
        self.backend = backend
        self.catalog_name = catalog_name or settings.study.default_catalog_name
        self._progress: ProgressMap = {}

    @property
    def key(self) -> str:
        return progress_key(self.catalog_name)

    def load(self, catalog_name: Optional[str] = None) -> ProgressMap:
        """Make a catalog's progress active, falling back to empty progress on failure."""
        self.catalog_name = catalog_name or settings.study.default_catalog_name
        key = self.key
        try:
            payload = self.backend.read(key)
            progress = parse_progress(payload) if payload else {}
        except (SQLAlchemyError, OSError, InvalidProgressError) as e:
            logger.warning(f"Could not load progress {key!r}, starting empty: {e}")
            monitoring.progress_errors.labels(operation="load").inc()
            progress = {}
        self._progress = progress
        logger.info(f"Loaded progress {key!r} with {len(progress)} words")
        return dict(progress)

    def save(self, catalog_name: Optional[str] = None, progress: Optional[Mapping[str, ProgressState]] = None) -> None:
        """Persist a progress mapping; failures are logged and swallowed."""
        key = progress_key(catalog_name or self.catalog_name)
        if progress is None:
            progress = self._progress
        try:
            self.backend.write(key, dump_progress(progress))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Could not save progress {key!r}: {e}")
            monitoring.progress_errors.labels(operation="save").inc()

    def get(self, word: str) -> ProgressState:
        return self._progress.get(word, DEFAULT_PROGRESS)

    def apply(self, word: str, transition: Transition) -> ProgressState:
        """Replace a word's progress with transition(current) and persist."""
        updated = transition(self.get(word))
        self._progress = {**self._progress, word: updated}
        logger.debug(f"Progress of {word!r} is now {updated}")
        self.save()
        return updated

    def replace(self, progress: Mapping[str, ProgressState]) -> None:
        """Swap in a whole mapping, e.g. an imported export, and persist it."""
        self._progress = dict(progress)
        logger.info(f"Replaced progress {self.key!r} with {len(self._progress)} words")
        self.save()

    def snapshot(self) -> ProgressMap:
        return dict(self._progress)

    def __len__(self) -> int:
        return len(self._progress)

    def __contains__(self, word: object) -> bool:
        return word in self._progress
