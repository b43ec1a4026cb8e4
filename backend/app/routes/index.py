"""
Blog Backend — Index Routes
=============================

What:  GET / (welcome document with the endpoint map) and GET /api (smoke test).
"""

from fastapi import APIRouter

from app import __version__
from app.schemas.common import MessageResponse

router = APIRouter(tags=["Index"])

ENDPOINTS = {
    "articles": {
        "list": "GET /api/articles",
        "detail": "GET /api/articles/:id",
        "create": "POST /api/articles",
        "update": "PUT /api/articles/:id",
    },
    "categories": {
        "list": "GET /api/categories",
        "create": "POST /api/categories",
        "articlesWithCategories": "GET /api/categories/articles-with-categories",
        "articlesByCategory": "GET /api/categories/:name/articles",
    },
}


@router.get("/", summary="API welcome document")
async def index() -> dict:
    return {
        "message": "Welcome to the Blog API",
        "version": __version__,
        "description": "Backend API service for the blog",
        "endpoints": ENDPOINTS,
        "documentation": "/docs",
    }


@router.get("/api", response_model=MessageResponse, summary="API smoke test")
async def hello() -> MessageResponse:
    return MessageResponse(message="Hello, World!")
