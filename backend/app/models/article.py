"""
Blog Backend — Article SQLAlchemy Model
=========================================

What:  ORM model representing the `articles` table.
Who:   Used by ArticleService / CategoryService for queries and by Alembic.

Table Design:
    - article_id: integer surrogate key, autoincrement
    - title / content: required text
    - author: optional free text (no user model exists)
    - publish_date: naive wall-clock time in the fixed local offset; see
      app/localtime.py for how it is rendered
    Articles are never deleted through the API.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.localtime import now_local

# Column widths; request schemas enforce the same limits
TITLE_MAX_LENGTH = 255
AUTHOR_MAX_LENGTH = 100


class Article(Base):
    """
    A blog article.

    Query Patterns:
        - List all: SELECT ... FROM articles (storage order)
        - Get single: SELECT ... WHERE article_id = :id (primary key)
        - By category: ... ORDER BY publish_date DESC (idx_articles_publish_date)
    """

    __tablename__ = "articles"

    article_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[Optional[str]] = mapped_column(
        String(AUTHOR_MAX_LENGTH),
        nullable=True,
        default=None,
    )

    # Python-side default so the local offset is applied regardless of the
    # database session time zone
    publish_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_local,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_articles_publish_date", publish_date.desc()),
    )

    def __repr__(self) -> str:
        return f"<Article(article_id={self.article_id}, title='{self.title}')>"
