"""
Blog Backend — Article Request/Response Schemas
=================================================

What:  Pydantic models for the article endpoints.
How:   Request payloads declare every field optional; required-field rules
       (title and content on create, at least one field on update) are
       enforced by ArticleService so they answer 400 with the API's own
       messages instead of FastAPI's 422.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from app.localtime import format_timestamp, parse_timestamp
from app.models.article import AUTHOR_MAX_LENGTH, TITLE_MAX_LENGTH


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ArticlePayload(BaseModel):
    """Fields accepted by both create and update."""

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = None
    author: Optional[str] = Field(default=None, max_length=AUTHOR_MAX_LENGTH)
    publish_date: Optional[datetime] = Field(
        default=None,
        description="YYYY-MM-DD HH:MM:SS in local time, or ISO 8601 with offset",
    )
    categories: Optional[List[str]] = Field(
        default=None,
        description="Category names; names without a matching category are ignored",
    )

    model_config = {"extra": "ignore"}

    @field_validator("publish_date", mode="before")
    @classmethod
    def parse_publish_date(cls, v: Any) -> Optional[datetime]:
        if v is None:
            return None
        if not isinstance(v, (str, datetime)):
            raise ValueError("publish_date must be a string")
        return parse_timestamp(v)

    @field_validator("categories")
    @classmethod
    def clean_categories(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Strip names, drop blanks and repeats, keep first-seen order."""
        if v is None:
            return None
        seen: List[str] = []
        for name in v:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class ArticleCreate(ArticlePayload):
    pass


class ArticleUpdate(ArticlePayload):
    """
    Partial update. Only keys present in the request body are applied.

    A key sent as null counts as absent, except `author`, where null clears
    the column.
    """

    SCALAR_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "content", "author", "publish_date")

    def scalar_changes(self) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        for name in self.SCALAR_FIELDS:
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if value is None and name != "author":
                continue
            changes[name] = value
        return changes

    @property
    def replaces_categories(self) -> bool:
        return "categories" in self.model_fields_set and self.categories is not None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ArticleOut(BaseModel):
    """An article row with its timestamp rendered as local time."""

    article_id: int
    title: str
    content: str
    author: Optional[str] = None
    publish_date: Optional[str] = Field(
        default=None,
        description="YYYY-MM-DD HH:MM:SS, local time",
    )

    model_config = {"from_attributes": True}

    @field_validator("publish_date", mode="before")
    @classmethod
    def render_publish_date(cls, v: Any) -> Optional[str]:
        if isinstance(v, datetime):
            return format_timestamp(v)
        return v


class ArticleWithCategoriesOut(ArticleOut):
    categories: List[str] = Field(default_factory=list)


class ArticleResponse(BaseModel):
    status: str = "success"
    data: ArticleOut


class ArticleListResponse(BaseModel):
    status: str = "success"
    data: List[ArticleOut]
    count: int


class ArticleWithCategoriesListResponse(BaseModel):
    status: str = "success"
    data: List[ArticleWithCategoriesOut]
    count: int
