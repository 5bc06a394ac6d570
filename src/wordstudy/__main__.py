"""Main entry point for the study tool."""
import sys

from wordstudy.cli import run
from wordstudy.config import ensure_directories, settings
from wordstudy.logging_config import setup_logging
from wordstudy.monitoring import start_monitoring


def main() -> None:
    """Console script entrypoint."""
    ensure_directories()
    setup_logging("Starting wordstudy ...")
    if settings.monitoring.enabled:
        start_monitoring(settings.monitoring.port)
    raise SystemExit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
