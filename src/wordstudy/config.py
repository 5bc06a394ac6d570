"""Configuration settings for the study engine."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
CATALOGS_DIR = DATA_DIR / "catalogs"
EXPORTS_DIR = DATA_DIR / "exports"
MEDIA_DIR = DATA_DIR / "media"
PRONUNCIATIONS_DIR = MEDIA_DIR / "pronunciations"

# Review intervals
AGAIN_INTERVAL_SECONDS = 10
GOOD_INTERVAL_MINUTES = 10
EASY_INTERVAL_MINUTES = 60


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        CATALOGS_DIR,
        EXPORTS_DIR,
        MEDIA_DIR,
        PRONUNCIATIONS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    catalogs_dir: Path = CATALOGS_DIR
    exports_dir: Path = EXPORTS_DIR
    media_dir: Path = MEDIA_DIR
    pronunciations_dir: Path = PRONUNCIATIONS_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///wordstudy.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SchedulingSettings:
    """Fixed review intervals applied after each grade."""
    again_seconds: int = int(os.getenv("AGAIN_INTERVAL_SECONDS", str(AGAIN_INTERVAL_SECONDS)))
    good_minutes: int = int(os.getenv("GOOD_INTERVAL_MINUTES", str(GOOD_INTERVAL_MINUTES)))
    easy_minutes: int = int(os.getenv("EASY_INTERVAL_MINUTES", str(EASY_INTERVAL_MINUTES)))


@dataclass
class StudySettings:
    """Study session settings."""
    default_catalog_name: str = os.getenv("DEFAULT_CATALOG_NAME", "Default")
    progress_key_prefix: str = os.getenv("PROGRESS_KEY_PREFIX", "word-progress-")
    quiz_option_count: int = int(os.getenv("QUIZ_OPTION_COUNT", "4"))
    default_sort: str = os.getenv("DEFAULT_SORT", "alpha")


@dataclass
class PronunciationSettings:
    """Pronunciation provider settings."""
    base_url: str = os.getenv("PRONUNCIATION_BASE_URL", "https://dict.youdao.com/dictvoice")
    timeout: float = float(os.getenv("PRONUNCIATION_TIMEOUT", "5.0"))


@dataclass
class MonitoringSettings:
    """Metrics exporter settings."""
    enabled: bool = os.getenv("MONITORING_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("MONITORING_PORT", "9090"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_scheduling_settings() -> SchedulingSettings:
    """Get scheduling settings."""
    return SchedulingSettings()


def get_study_settings() -> StudySettings:
    """Get study settings."""
    return StudySettings()


def get_pronunciation_settings() -> PronunciationSettings:
    """Get pronunciation settings."""
    return PronunciationSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    scheduling: SchedulingSettings = field(default_factory=get_scheduling_settings)
    study: StudySettings = field(default_factory=get_study_settings)
    pronunciation: PronunciationSettings = field(default_factory=get_pronunciation_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.scheduling.again_seconds <= 0:
            raise ValueError("AGAIN_INTERVAL_SECONDS must be positive")

        if self.scheduling.good_minutes <= 0 or self.scheduling.easy_minutes <= 0:
            raise ValueError("GOOD_INTERVAL_MINUTES and EASY_INTERVAL_MINUTES must be positive")

        if self.study.quiz_option_count < 2:
            raise ValueError("QUIZ_OPTION_COUNT must be at least 2")

        if not self.study.progress_key_prefix:
            raise ValueError("PROGRESS_KEY_PREFIX cannot be empty")

        if self.pronunciation.timeout <= 0:
            raise ValueError("PRONUNCIATION_TIMEOUT must be positive")


# Create global settings instance
settings = Settings()
settings.validate()
