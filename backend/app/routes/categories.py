"""
Blog Backend — Category Route Handlers
========================================

What:  GET/POST /api/categories plus the article views joined with
       category names.

Route order:
    /articles-with-categories does not end in /articles, so it never matches
    /{name:path}/articles. The path converter lets a name carry a decoded
    slash: /api/categories/a%2Fb/articles lists category "a/b".
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.payload import body_of
from app.schemas.article import ArticleWithCategoriesListResponse
from app.schemas.category import CategoryCreate, CategoryListResponse, CategoryResponse
from app.schemas.common import ErrorResponse
from app.services.category_service import category_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List categories ordered by name",
)
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
) -> CategoryListResponse:
    categories = await category_service.list_categories(db)
    return CategoryListResponse(data=categories, count=len(categories))


@router.get(
    "/articles-with-categories",
    response_model=ArticleWithCategoriesListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List every article with its category names",
    description="Articles without categories carry an empty `categories` list.",
)
async def list_articles_with_categories(
    db: AsyncSession = Depends(get_db_session),
) -> ArticleWithCategoriesListResponse:
    articles = await category_service.list_articles_with_categories(db)
    return ArticleWithCategoriesListResponse(data=articles, count=len(articles))


@router.get(
    "/{name:path}/articles",
    response_model=ArticleWithCategoriesListResponse,
    responses={
        400: {"description": "Empty category name", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List articles in a category, newest first",
    description=(
        "An unknown category name returns an empty list, not 404. "
        "The name may contain an encoded slash (%2F)."
    ),
)
async def list_articles_by_category(
    name: str,
    db: AsyncSession = Depends(get_db_session),
) -> ArticleWithCategoriesListResponse:
    articles = await category_service.list_articles_by_category(db, name)
    return ArticleWithCategoriesListResponse(data=articles, count=len(articles))


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or duplicate name", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a category",
)
async def create_category(
    payload: CategoryCreate = Depends(body_of(CategoryCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    category = await category_service.create_category(db, payload)
    return CategoryResponse(data=category)
