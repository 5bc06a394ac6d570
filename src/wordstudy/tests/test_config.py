"""Tests for configuration settings."""
from dataclasses import replace

import pytest

from wordstudy.config import (
    DATA_DIR,
    EXPORTS_DIR,
    PRONUNCIATIONS_DIR,
    SchedulingSettings,
    Settings,
    StudySettings,
    settings,
)


def test_directories_exist():
    """ensure_directories runs before each test."""
    assert DATA_DIR.exists()
    assert EXPORTS_DIR.exists()
    assert PRONUNCIATIONS_DIR.exists()


def test_settings_defaults():
    """Default values of the study settings."""
    assert settings.scheduling.again_seconds == 10
    assert settings.scheduling.good_minutes == 10
    assert settings.scheduling.easy_minutes == 60
    assert settings.study.default_catalog_name == "Default"
    assert settings.study.progress_key_prefix == "word-progress-"
    assert settings.study.quiz_option_count == 4
    assert settings.pronunciation.base_url == "https://dict.youdao.com/dictvoice"


def test_default_settings_are_valid():
    Settings().validate()


@pytest.mark.parametrize(
    "changes",
    [
        {"scheduling": SchedulingSettings(again_seconds=0)},
        {"scheduling": SchedulingSettings(easy_minutes=-1)},
        {"study": StudySettings(quiz_option_count=1)},
        {"study": StudySettings(progress_key_prefix="")},
    ],
)
def test_invalid_settings(changes):
    """Invalid values raise ValueError."""
    with pytest.raises(ValueError):
        replace(Settings(), **changes).validate()


if __name__ == "__main__":
    pytest.main([__file__])
