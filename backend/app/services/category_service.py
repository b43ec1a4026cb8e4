"""
Blog Backend — Category Service
=================================

What:  Category listing/creation and the article views joined with
       category names.
Who:   Called by the /api/categories route handlers.

Category aggregation:
    The joined views aggregate category names per article in SQL
    (json_array_agg, see app/database.py). Depending on the driver the
    aggregate arrives as a JSON string, an already-decoded list, or NULL;
    a LEFT JOIN with no matches aggregates to `[null]`. Every shape goes
    through normalize_category_names() so the API always emits a list of
    strings and never a null entry.
"""

import json
import logging
from typing import Any, List

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import json_array_agg
from app.exceptions import ConflictError, DatabaseError, ValidationError
from app.models.article import Article
from app.models.category import Category, article_categories
from app.schemas.article import ArticleOut, ArticleWithCategoriesOut
from app.schemas.category import CategoryCreate, CategoryOut

logger = logging.getLogger(__name__)


def normalize_category_names(value: Any) -> List[str]:
    """
    Coerce an aggregated category column into a sorted list of names.

    >>> normalize_category_names('["b", "a"]')
    ['a', 'b']
    >>> normalize_category_names('[null]')
    []
    >>> normalize_category_names(None)
    []
    """
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, list):
        return []
    return sorted(str(name) for name in value if name is not None)


def _articles_with_categories() -> Select:
    return (
        select(Article, json_array_agg(Category.name).label("categories"))
        .select_from(Article)
        .outerjoin(article_categories, article_categories.c.article_id == Article.article_id)
        .outerjoin(Category, Category.category_id == article_categories.c.category_id)
        .group_by(Article.article_id)
    )


def _to_output(article: Article, categories: Any) -> ArticleWithCategoriesOut:
    base = ArticleOut.model_validate(article)
    return ArticleWithCategoriesOut(
        **base.model_dump(),
        categories=normalize_category_names(categories),
    )


class CategoryService:
    """Stateless; receives the request's session on every call."""

    async def list_categories(self, db: AsyncSession) -> List[CategoryOut]:
        """All categories, ordered by name ascending."""
        try:
            result = await db.execute(select(Category).order_by(Category.name.asc()))
            return [CategoryOut.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error retrieving categories",
                context={"detail": str(e)},
            ) from e

    async def list_articles_with_categories(
        self, db: AsyncSession
    ) -> List[ArticleWithCategoriesOut]:
        try:
            result = await db.execute(_articles_with_categories())
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing articles with categories: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error retrieving articles with categories",
                context={"detail": str(e)},
            ) from e
        return [_to_output(article, categories) for article, categories in rows]

    async def list_articles_by_category(
        self, db: AsyncSession, name: str
    ) -> List[ArticleWithCategoriesOut]:
        """
        Articles linked to the named category, newest first.

        Each article carries all of its categories, not only `name`.
        An unknown name yields an empty list.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError(message="Category name is required", field="name")

        in_category = (
            select(article_categories.c.article_id)
            .join(Category, Category.category_id == article_categories.c.category_id)
            .where(Category.name == name)
        )
        query = (
            _articles_with_categories()
            .where(Article.article_id.in_(in_category))
            .order_by(Article.publish_date.desc())
        )
        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing articles for category %r: %s", name, e, exc_info=True)
            raise DatabaseError(
                message="Error retrieving articles for category",
                context={"category": name, "detail": str(e)},
            ) from e
        return [_to_output(article, categories) for article, categories in rows]

    async def create_category(self, db: AsyncSession, payload: CategoryCreate) -> CategoryOut:
        """
        Raises:
            ValidationError: name missing/blank
            ConflictError:   a category with this name exists (→ 400)
            DatabaseError:   insert failed for another reason
        """
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError(message="Category name is required", field="name")

        try:
            existing = await db.execute(
                select(Category.category_id).where(Category.name == name)
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message="Category already exists",
                    context={"name": name},
                )

            category = Category(name=name)
            db.add(category)
            await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same name
            await db.rollback()
            logger.warning("Category %r inserted concurrently: %s", name, e)
            raise ConflictError(
                message="Category already exists",
                context={"name": name},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error creating category %r: %s", name, e, exc_info=True)
            raise DatabaseError(
                message="Error creating category",
                context={"detail": str(e)},
            ) from e

        logger.info("Category %s created: %r", category.category_id, name)
        return CategoryOut.model_validate(category)


category_service = CategoryService()
