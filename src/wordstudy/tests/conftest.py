"""Test configuration."""
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="wordstudy-test-"))

# Load test environment variables
test_env_path = Path(__file__).resolve().parents[3] / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from wordstudy.config import ensure_directories
from wordstudy.models.base import init_db

fake = Faker()

NOW = datetime(2026, 1, 15, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield
    fake.unique.clear()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh in-memory database session for each test."""
    engine = create_engine("sqlite://")
    init_db(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def now() -> datetime:
    """Fixed point in time used as the session clock."""
    return NOW


@pytest.fixture
def word_list() -> Callable[..., List[Dict[str, Any]]]:
    """Factory of random word lists with distinct headwords and translations."""

    def make(count: int, **extra: Any) -> List[Dict[str, Any]]:
        return [
            {"value": fake.unique.word(), "translation": fake.unique.word(), **extra}
            for _ in range(count)
        ]

    return make
