"""
Storage gateway: the only component that talks to the database.

Each public method runs in its own session and transaction and returns
plain schema objects, never live ORM rows. Any SQLAlchemy failure is rolled
back, logged with full detail and re-raised as ``PersistenceError``.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

import structlog
from fastapi import Request
from sqlalchemy import any_, delete, desc, exists, func, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..models import User, Word
from .errors import PersistenceError
from .schemas import UserCreate, UserOut, WordInsert, WordOut, WordUpdate

logger = structlog.get_logger(__name__)


class DatabaseStorage:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("storage_failed", operation=operation, error=str(exc), exc_info=True)
            raise PersistenceError(f"{operation} failed") from exc
        finally:
            db.close()

    @staticmethod
    def _ordered(stmt):
        # Most recently learned first; id breaks ties deterministically
        return stmt.order_by(desc(Word.date_learned), desc(Word.id))

    @staticmethod
    def _records(rows: Iterable[Word]) -> List[WordOut]:
        return [WordOut.model_validate(w) for w in rows]

    # ---------- Users ----------

    def get_user(self, user_id: int) -> Optional[UserOut]:
        with self._session("get_user") as db:
            u = db.get(User, user_id)
            return UserOut.model_validate(u) if u else None

    def get_user_by_username(self, username: str) -> Optional[UserOut]:
        with self._session("get_user_by_username") as db:
            u = db.scalars(select(User).where(User.username == username)).first()
            return UserOut.model_validate(u) if u else None

    def create_user(self, data: UserCreate) -> UserOut:
        """Insert a user; a taken username surfaces as PersistenceError."""
        with self._session("create_user") as db:
            u = User(username=data.username, password=data.password)
            db.add(u)
            db.commit()
            return UserOut.model_validate(u)

    # ---------- Words ----------

    def get_all_words(self) -> List[WordOut]:
        with self._session("get_all_words") as db:
            return self._records(db.scalars(self._ordered(select(Word))))

    def get_word(self, word_id: int) -> Optional[WordOut]:
        with self._session("get_word") as db:
            w = db.get(Word, word_id)
            return WordOut.model_validate(w) if w else None

    def count_words(self) -> int:
        with self._session("count_words") as db:
            return db.scalar(select(func.count()).select_from(Word))

    def create_word(self, data: WordInsert) -> WordOut:
        with self._session("create_word") as db:
            w = Word(**data.model_dump())
            db.add(w)
            db.commit()
            return WordOut.model_validate(w)

    def create_words(self, items: Iterable[WordInsert]) -> List[WordOut]:
        """Insert several words in one transaction: all or nothing."""
        with self._session("create_words") as db:
            rows = [Word(**item.model_dump()) for item in items]
            db.add_all(rows)
            db.commit()
            return self._records(rows)

    def update_word(self, word_id: int, patch: WordUpdate) -> Optional[WordOut]:
        with self._session("update_word") as db:
            w = db.get(Word, word_id)
            if w is None:
                return None

            for field, value in patch.changes().items():
                setattr(w, field, value)

            db.commit()
            return WordOut.model_validate(w)

    def delete_word(self, word_id: int) -> bool:
        with self._session("delete_word") as db:
            result = db.execute(delete(Word).where(Word.id == word_id))
            db.commit()
            return result.rowcount > 0

    def search_words(self, term: Optional[str]) -> List[WordOut]:
        """Case-insensitive substring match on word, definition or example."""
        if not term:
            return self.get_all_words()

        condition = or_(
            Word.word.icontains(term, autoescape=True),
            Word.definition.icontains(term, autoescape=True),
            func.coalesce(Word.example, "").icontains(term, autoescape=True),
        )
        with self._session("search_words") as db:
            return self._records(db.scalars(self._ordered(select(Word).where(condition))))

    def filter_words_by_tag(self, tag: Optional[str]) -> List[WordOut]:
        """Words whose tag list holds exactly ``tag`` (case-sensitive, no substring)."""
        if not tag:
            return self.get_all_words()

        with self._session("filter_words_by_tag") as db:
            if db.get_bind().dialect.name == "postgresql":
                condition = literal(tag) == any_(Word.tags)
            else:
                tag_values = func.json_each(Word.tags).table_valued("value")
                condition = exists(
                    select(1).select_from(tag_values).where(tag_values.c.value == tag)
                )
            return self._records(db.scalars(self._ordered(select(Word).where(condition))))


# FastAPI dependency
def get_storage(request: Request) -> DatabaseStorage:
    return request.app.state.storage
