from datetime import date, datetime
from sqlalchemy import JSON, Column, Date, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY

from ..core.database import Base


# JSON list on SQLite, native text[] on PostgreSQL
TagList = JSON().with_variant(ARRAY(String), "postgresql")


class Word(Base):
    __tablename__ = "words"
    # SQLite would otherwise hand a deleted max id to the next insert
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    word = Column(String, nullable=False)
    definition = Column(String, nullable=False)
    example = Column(String, nullable=True)

    # Stored exactly as submitted: order and duplicates are kept
    tags = Column(TagList, nullable=False, default=list)

    date_learned = Column(Date, nullable=False, default=date.today, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
