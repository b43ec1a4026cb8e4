"""
Blog Backend — Article Route Handlers
=======================================

What:  GET/POST /api/articles, GET/PUT /api/articles/{article_id}.
How:   Thin handlers: bind the body, delegate to ArticleService, wrap the
       result in the success envelope. Errors propagate to the global
       handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.payload import body_of
from app.schemas.article import (
    ArticleCreate,
    ArticleListResponse,
    ArticleResponse,
    ArticleUpdate,
)
from app.schemas.common import ErrorResponse
from app.services.article_service import article_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["Articles"])


@router.get(
    "",
    response_model=ArticleListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all articles",
)
async def list_articles(
    db: AsyncSession = Depends(get_db_session),
) -> ArticleListResponse:
    articles = await article_service.list_articles(db)
    return ArticleListResponse(data=articles, count=len(articles))


@router.get(
    "/{article_id}",
    response_model=ArticleResponse,
    responses={
        400: {"description": "Invalid article ID", "model": ErrorResponse},
        404: {"description": "Article not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single article by ID",
)
async def get_article(
    article_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ArticleResponse:
    """
    article_id is taken as a string so a non-numeric value answers 400
    "Invalid article ID" instead of FastAPI's 422.
    """
    article = await article_service.get_article(db, article_id)
    return ArticleResponse(data=article)


@router.post(
    "",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Title or content missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an article",
    description=(
        "Creates an article and links it to the named categories. "
        "Names that match no existing category are ignored."
    ),
)
async def create_article(
    payload: ArticleCreate = Depends(body_of(ArticleCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> ArticleResponse:
    article = await article_service.create_article(db, payload)
    return ArticleResponse(data=article)


@router.put(
    "/{article_id}",
    response_model=ArticleResponse,
    responses={
        400: {"description": "Invalid ID or no fields supplied", "model": ErrorResponse},
        404: {"description": "Article not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Partially update an article",
    description=(
        "Updates only the supplied fields. When `categories` is present, "
        "all existing category links are replaced; an empty list clears them."
    ),
)
async def update_article(
    article_id: str,
    payload: ArticleUpdate = Depends(body_of(ArticleUpdate)),
    db: AsyncSession = Depends(get_db_session),
) -> ArticleResponse:
    article = await article_service.update_article(db, article_id, payload)
    return ArticleResponse(data=article)
