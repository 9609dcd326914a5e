"""SQLAlchemy tables: users, movies (catalog cache) and likes (edges)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    def as_dict(self) -> dict:
        return {c.key: getattr(self, c.key) for c in self.__table__.columns}


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True,
                                    default=new_id)
    session_id: Mapped[str] = mapped_column(String(255), unique=True,
                                            nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_users_session", "session_id"),
    )


class MovieRow(Base):
    """Local mirror of the external catalog; id is the catalog's id."""

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True,
                                    autoincrement=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    overview: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    poster_path: Mapped[Optional[str]] = mapped_column(String(500),
                                                       nullable=True)
    release_date: Mapped[Optional[str]] = mapped_column(String(10),
                                                        nullable=True)
    vote_average: Mapped[Optional[float]] = mapped_column(Float,
                                                          nullable=True)
    vote_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # JSON text: [{"id": 28, "name": "Action"}, ...]
    genres: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_movies_title", "title"),
    )


class LikeRow(Base):
    """One edge per (user, movie); no row means neutral."""

    __tablename__ = "likes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True,
                                    default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    movie_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_liked: Mapped[bool] = mapped_column(Boolean, nullable=False,
                                           default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_likes_user_movie"),
        Index("idx_likes_user_id", "user_id"),
        Index("idx_likes_movie_id", "movie_id"),
        Index("idx_likes_user_movie", "user_id", "movie_id"),
    )
