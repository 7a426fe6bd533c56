from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, TIMESTAMP, SmallInteger, Integer, Boolean, Date, UniqueConstraint, CheckConstraint, Index
from datetime import datetime, date


class Base(DeclarativeBase):
    pass


# Table: mood_entry
class MoodEntry(Base):
    __tablename__ = "mood_entry"
    __table_args__ = (
        UniqueConstraint("user_id", "entry_date", name="uq_mood_entry_user_date"),
        CheckConstraint("mood_rating BETWEEN 1 AND 10", name="mood_entry_rating_chk"),
        Index("ix_mood_entry_user_id", "user_id"),
        {"sqlite_autoincrement": True},
    )

    # insertion order
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    mood_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    exercised: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
