"""
Blog Backend — Article Service
================================

What:  Business logic for listing, reading, creating and partially updating
       articles, including their category associations.
Who:   Called by the /api/articles route handlers.

Write Semantics:
    Each step of a write commits on its own:

        create:  INSERT article ─commit─▶ INSERT association per matching name
        update:  UPDATE columns ─commit─▶ DELETE associations ─commit─▶ INSERT ...

    An association insert that fails is rolled back alone and logged; the
    article row written before it stays. A failure between the DELETE and
    the INSERTs therefore leaves the article with no categories.

    Category names with no matching `categories` row are skipped silently.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.localtime import now_local
from app.models.article import Article
from app.models.category import Category, article_categories
from app.schemas.article import ArticleCreate, ArticleOut, ArticleUpdate

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"[0-9]+")

# Largest value an INTEGER primary key can hold
_MAX_ID = 2_147_483_647


def parse_article_id(raw: str) -> int:
    """
    Validate a path identifier.

    Raises:
        ValidationError: not a positive integer ("Invalid article ID")
    """
    text = (raw or "").strip()
    if not _ID_PATTERN.fullmatch(text) or int(text) < 1:
        raise ValidationError(message="Invalid article ID", field="id")
    return int(text)


class ArticleService:
    """
    Stateless; receives the request's session on every call.

    Database failures are wrapped in DatabaseError whose message names the
    operation; the driver message travels in context["detail"].
    """

    async def list_articles(self, db: AsyncSession) -> List[ArticleOut]:
        try:
            result = await db.execute(select(Article))
            return [ArticleOut.model_validate(a) for a in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing articles: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error retrieving data from database",
                context={"detail": str(e)},
            ) from e

    async def get_article(self, db: AsyncSession, raw_id: str) -> ArticleOut:
        """
        Raises:
            ValidationError: malformed ID (→ 400)
            NotFoundError:   no such article (→ 404)
            DatabaseError:   query failed (→ 500)
        """
        article_id = parse_article_id(raw_id)
        try:
            article = await self._load(db, article_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching article %s: %s", article_id, e, exc_info=True)
            raise DatabaseError(
                message="Error retrieving article from database",
                context={"article_id": article_id, "detail": str(e)},
            ) from e
        if article is None:
            raise NotFoundError(resource="Article", resource_id=article_id)
        return ArticleOut.model_validate(article)

    async def create_article(self, db: AsyncSession, payload: ArticleCreate) -> ArticleOut:
        """
        Insert an article and link it to the named categories.

        Raises:
            ValidationError: title or content missing/blank
            DatabaseError:   the article insert or the re-fetch failed
        """
        if not (payload.title or "").strip() or not (payload.content or "").strip():
            raise ValidationError(message="Title and content are required")

        try:
            article = Article(
                title=payload.title,
                content=payload.content,
                author=payload.author,
                publish_date=payload.publish_date or now_local(),
            )
            db.add(article)
            await db.flush()
            # Read before any rollback below expires the instance
            article_id = article.article_id
            await db.commit()
            logger.info("Article %s created", article_id)

            if payload.categories:
                await self._link_categories(db, article_id, payload.categories)

            created = await self._load(db, article_id)
        except SQLAlchemyError as e:
            logger.error("Database error creating article: %s", e, exc_info=True)
            raise DatabaseError(
                message="Error creating article",
                context={"detail": str(e)},
            ) from e

        return ArticleOut.model_validate(created)

    async def update_article(
        self, db: AsyncSession, raw_id: str, payload: ArticleUpdate
    ) -> ArticleOut:
        """
        Apply a partial update.

        Only fields present in the body change. `categories`, when present,
        replaces every association of the article; an empty list clears them.

        Raises:
            ValidationError: malformed ID, or no recognized field in the body
            NotFoundError:   no such article
            DatabaseError:   a column update or the association delete failed
        """
        article_id = parse_article_id(raw_id)
        changes = payload.scalar_changes()
        if not changes and not payload.replaces_categories:
            raise ValidationError(message="Nothing to update: at least one field required")

        for field in ("title", "content"):
            if field in changes and not changes[field].strip():
                raise ValidationError(message=f"{field.capitalize()} cannot be empty", field=field)

        try:
            article = await self._load(db, article_id)
            if article is None:
                raise NotFoundError(resource="Article", resource_id=article_id)

            if changes:
                for column, value in changes.items():
                    setattr(article, column, value)
                await db.flush()
                await db.commit()
                logger.info("Article %s updated: %s", article_id, ", ".join(sorted(changes)))

            if payload.replaces_categories:
                await db.execute(
                    delete(article_categories).where(
                        article_categories.c.article_id == article_id
                    )
                )
                await db.commit()
                if payload.categories:
                    await self._link_categories(db, article_id, payload.categories)

            updated = await self._load(db, article_id)
        except SQLAlchemyError as e:
            logger.error("Database error updating article %s: %s", article_id, e, exc_info=True)
            raise DatabaseError(
                message="Error updating article",
                context={"article_id": article_id, "detail": str(e)},
            ) from e

        return ArticleOut.model_validate(updated)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, article_id: int) -> Optional[Article]:
        if article_id > _MAX_ID:
            return None
        # populate_existing re-reads rows already in the identity map
        result = await db.execute(
            select(Article)
            .where(Article.article_id == article_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _link_categories(
        self, db: AsyncSession, article_id: int, names: List[str]
    ) -> int:
        """
        Insert one association per name that matches an existing category.

        Returns the number of associations written. Unknown names are skipped;
        a failed insert is rolled back, logged, and does not stop the others.
        """
        result = await db.execute(
            select(Category.name, Category.category_id).where(Category.name.in_(names))
        )
        ids_by_name = {name: category_id for name, category_id in result.all()}

        linked = 0
        for name in names:
            category_id = ids_by_name.get(name)
            if category_id is None:
                logger.debug("Article %s: no category named %r, skipped", article_id, name)
                continue
            try:
                await db.execute(
                    insert(article_categories).values(
                        article_id=article_id, category_id=category_id
                    )
                )
                await db.commit()
                linked += 1
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(
                    "Failed to link article %s to category %r: %s", article_id, name, e
                )
        return linked


article_service = ArticleService()
