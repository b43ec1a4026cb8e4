"""
Blog Backend — Category Model and Article/Category Association
================================================================

What:  ORM model for `categories` plus the `article_categories` join table.
Why:   Articles and categories are many-to-many; the join rows have no
       identity beyond the (article_id, category_id) pair, so they are a
       plain Table rather than a mapped class.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

NAME_MAX_LENGTH = 100


class Category(Base):
    """A named category. Created through the API; never updated or deleted."""

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(category_id={self.category_id}, name='{self.name}')>"


article_categories = Table(
    "article_categories",
    Base.metadata,
    Column(
        "article_id",
        Integer,
        ForeignKey("articles.article_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.category_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
