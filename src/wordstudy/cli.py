"""Command-line shell over a study session."""
import argparse
import logging
import random
from pathlib import Path
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from wordstudy.config import ensure_directories, settings
from wordstudy.errors import InvalidCatalogError, InvalidProgressError
from wordstudy.models.base import get_db, init_db
from wordstudy.models.study_models import QuizDirection, SortKey, StudyMode, Variant
from wordstudy.services.catalog_service import load_catalog_text
from wordstudy.services.progress_store import ProgressBackend, SqlProgressBackend
from wordstudy.services.pronunciation_service import AudioDownloader, YoudaoPronouncer
from wordstudy.services.study_session import StudySession

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
QUIT_COMMANDS = {"q", ":q", "quit"}


def _backend(db: Session) -> ProgressBackend:
    """Progress backend on the configured database."""
    init_db()
    return SqlProgressBackend(db)


def resolve_catalog_path(catalog: str) -> Path:
    """A catalog is given as a file path or as a file name under the catalogs directory."""
    path = Path(catalog)
    if path.exists():
        return path
    catalogs_dir = settings.paths.catalogs_dir
    for candidate in (catalogs_dir / catalog, catalogs_dir / f"{catalog}.json"):
        if candidate.is_file():
            return candidate
    return path


def _open_session(catalog: str, db: Session, seed: Optional[int] = None) -> StudySession:
    text = resolve_catalog_path(catalog).read_text(encoding="utf-8")
    return StudySession(_backend(db), catalog=load_catalog_text(text), rng=random.Random(seed))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordstudy", description="Vocabulary study with fixed-interval reviews")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser("stats", help="Show progress summary of a catalog")
    stats.add_argument("catalog")

    due = subparsers.add_parser("due", help="List words due for review")
    due.add_argument("catalog")
    due.add_argument("--sort", choices=[key.value for key in SortKey], default=settings.study.default_sort)
    due.add_argument("--tag", default="all")
    due.add_argument("--limit", type=int, default=20)

    quiz = subparsers.add_parser("quiz", help="Answer multiple-choice questions")
    quiz.add_argument("catalog")
    quiz.add_argument("--rounds", type=int, default=10)
    quiz.add_argument("--direction", choices=[direction.value for direction in QuizDirection], default="w2t")
    quiz.add_argument("--only-due", action="store_true")
    quiz.add_argument("--seed", type=int)

    export = subparsers.add_parser("export", help="Write the catalog's progress to a JSON file")
    export.add_argument("catalog")
    export.add_argument("--output")

    import_progress = subparsers.add_parser("import-progress", help="Replace progress from an exported file")
    import_progress.add_argument("catalog")
    import_progress.add_argument("progress")

    pronounce = subparsers.add_parser("pronounce", help="Download the pronunciation of a word")
    pronounce.add_argument("word")
    pronounce.add_argument("--variant", choices=[variant.value for variant in Variant], default="us")

    return parser


def run(argv: Optional[List[str]] = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run one command; returns the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        if args.command == "pronounce":
            return pronounce_command(args.word, Variant(args.variant), print_fn)

        with get_db() as db:
            session = _open_session(args.catalog, db, seed=getattr(args, "seed", None))
            if args.command == "stats":
                return stats_command(session, print_fn)
            if args.command == "due":
                return due_command(session, SortKey(args.sort), args.tag, args.limit, print_fn)
            if args.command == "quiz":
                return quiz_command(
                    session, args.rounds, QuizDirection(args.direction), args.only_due, input_fn, print_fn
                )
            if args.command == "export":
                return export_command(session, args.output, print_fn)
            if args.command == "import-progress":
                return import_progress_command(session, args.progress, print_fn)
    except (InvalidCatalogError, InvalidProgressError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print_fn(f"Error: {e}")
        return 1
    return 0


def stats_command(session: StudySession, print_fn: PrintFn = print) -> int:
    stats = session.stats()
    print_fn(f"Catalog: {session.catalog.name}")
    print_fn(f"Words: {stats.total}")
    print_fn(f"Studied: {stats.studied} ({stats.pct_studied}%)")
    print_fn(f"Known: {stats.known} ({stats.pct_known}%)")
    print_fn(f"Due: {stats.due}")
    return 0


def due_command(
    session: StudySession, sort_key: SortKey, tag: str, limit: int, print_fn: PrintFn = print
) -> int:
    session.set_sort(sort_key)
    words = session.set_filters(tag=tag, only_due=True)
    if not words:
        print_fn("Nothing is due. Adjust the filters or import a catalog.")
        return 0
    for item in words[:limit]:
        meaning = item.word.meaning
        print_fn(f"{item.value} - {meaning}" if meaning else item.value)
    if len(words) > limit:
        print_fn(f"... and {len(words) - limit} more")
    return 0


def quiz_command(
    session: StudySession,
    rounds: int,
    direction: QuizDirection,
    only_due: bool,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
) -> int:
    session.set_quiz_direction(direction)
    session.set_filters(only_due=only_due)
    session.set_mode(StudyMode.QUIZ)

    asked = correct = 0
    for _ in range(rounds):
        question = session.question or session.next_question()
        if question is None:
            print_fn("No words to quiz. Adjust the filters or import a catalog.")
            break
        print_fn(f"\n{question.prompt}")
        for number, label in enumerate(question.labels, start=1):
            print_fn(f"  {number}) {label}")

        choice = input_fn("Answer: ").strip().lower()
        if choice in QUIT_COMMANDS:
            break
        if not choice.isdigit():
            print_fn(f"Please enter a number between 1 and {len(question.options)}")
            continue

        target = question.target
        result = session.answer(int(choice) - 1)
        if result is None:
            print_fn(f"Please enter a number between 1 and {len(question.options)}")
            continue
        asked += 1
        if result:
            correct += 1
            print_fn("Correct.")
        else:
            print_fn(f"Incorrect. {target.value} - {target.word.meaning}")
        session.next_question()

    print_fn(f"\nQuiz finished: {correct}/{asked} correct")
    return 0


def export_command(session: StudySession, output: Optional[str], print_fn: PrintFn = print) -> int:
    export = session.export_progress()
    if output:
        path = Path(output)
    else:
        ensure_directories()
        path = settings.paths.exports_dir / export.filename
    path.write_text(export.content, encoding="utf-8")
    print_fn(f"Progress written to {path}")
    return 0


def import_progress_command(session: StudySession, progress_path: str, print_fn: PrintFn = print) -> int:
    count = session.import_progress(Path(progress_path).read_text(encoding="utf-8"))
    print_fn(f"Imported progress for {count} words into {session.catalog.name}")
    return 0


def pronounce_command(word: str, variant: Variant, print_fn: PrintFn = print) -> int:
    downloader = AudioDownloader()
    try:
        if YoudaoPronouncer(downloader).pronounce(word, variant):
            print_fn(f"Saved {downloader.saved[-1]}")
            return 0
    finally:
        downloader.close()
    print_fn(f"Could not pronounce {word}")
    return 1
