"""Monitoring configuration for the study engine."""
from prometheus_client import Counter, start_http_server

# Review metrics
reviews = Counter(
    "wordstudy_reviews_total",
    "Total number of flashcard grades applied",
    ["outcome"],
)

quiz_answers = Counter(
    "wordstudy_quiz_answers_total",
    "Total number of quiz answers registered",
    ["result"],
)

# Catalog metrics
catalog_imports = Counter(
    "wordstudy_catalog_imports_total",
    "Total number of catalog import attempts",
    ["status"],
)

# Error metrics
progress_errors = Counter(
    "wordstudy_progress_errors_total",
    "Total number of recovered progress persistence failures",
    ["operation"],
)

pronunciation_failures = Counter(
    "wordstudy_pronunciation_failures_total",
    "Total number of words that could not be pronounced",
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
