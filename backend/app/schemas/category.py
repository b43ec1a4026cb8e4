"""
Blog Backend — Category Request/Response Schemas
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.category import NAME_MAX_LENGTH


class CategoryCreate(BaseModel):
    # Surrounding whitespace is dropped before the length check
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)

    model_config = {"extra": "ignore", "str_strip_whitespace": True}


class CategoryOut(BaseModel):
    category_id: int
    name: str

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    status: str = "success"
    data: CategoryOut


class CategoryListResponse(BaseModel):
    status: str = "success"
    data: List[CategoryOut]
    count: int
