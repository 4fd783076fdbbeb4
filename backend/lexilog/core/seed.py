from datetime import date

import structlog

from .errors import PersistenceError
from .schemas import WordInsert
from .storage import DatabaseStorage

logger = structlog.get_logger(__name__)


SAMPLE_WORDS = [
    WordInsert(
        word="Ephemeral",
        definition="Lasting for a very short time; short-lived; transitory.",
        example="The ephemeral nature of cherry blossoms makes them all the more appreciated.",
        tags=["language", "philosophy"],
        date_learned=date(2023, 6, 15),
    ),
    WordInsert(
        word="Eloquent",
        definition="Fluent or persuasive in speaking or writing; having the power of expression.",
        example="Her eloquent speech moved the audience to tears.",
        tags=["language", "communication"],
        date_learned=date(2023, 6, 17),
    ),
    WordInsert(
        word="Ubiquitous",
        definition="Present, appearing, or found everywhere; omnipresent.",
        example="Smartphones have become ubiquitous in modern society.",
        tags=["tech", "language"],
        date_learned=date(2023, 6, 20),
    ),
    WordInsert(
        word="Serendipity",
        definition="The occurrence and development of events by chance in a happy or beneficial way.",
        example="Finding this book was pure serendipity\u2014I wasn't looking for it, but it's exactly what I needed.",
        tags=["philosophy", "life"],
        date_learned=date(2023, 6, 22),
    ),
    WordInsert(
        word="Algorithm",
        definition=(
            "A process or set of rules to be followed in calculations or other "
            "problem-solving operations, especially by a computer."
        ),
        example="The search engine uses a complex algorithm to rank web pages.",
        tags=["tech", "computer science"],
        date_learned=date(2023, 6, 25),
    ),
    WordInsert(
        word="Pragmatic",
        definition=(
            "Dealing with things sensibly and realistically in a way that is based "
            "on practical considerations."
        ),
        example="We need a pragmatic approach to solving this problem.",
        tags=["philosophy", "business"],
        date_learned=date(2023, 6, 27),
    ),
]


def seed_sample_words(storage: DatabaseStorage) -> int:
    """
    Insert the sample words if the words table is empty.
    Returns how many were inserted. Store failures are logged and swallowed
    so startup always continues.

    Count-then-insert is not guarded: two processes starting on an empty
    database at the same moment can both seed.
    """
    try:
        existing = storage.count_words()
        if existing > 0:
            logger.info("seed_skipped", existing=existing)
            return 0

        logger.info("seed_started", count=len(SAMPLE_WORDS))
        inserted = storage.create_words(SAMPLE_WORDS)
    except PersistenceError as exc:
        logger.error("seed_failed", error=str(exc))
        return 0

    logger.info("seed_finished", inserted=len(inserted))
    return len(inserted)
