"""
Blog Backend — Request Body Binding
=====================================

What:  FastAPI dependencies that read a POST/PUT body and bind it to a
       pydantic payload model.
Why:   Bodies may arrive as JSON or as application/x-www-form-urlencoded,
       and binding failures must answer 400 through ValidationError rather
       than FastAPI's default 422.

Form bodies:
    Every key keeps its last value, except list fields (`categories`,
    also accepted as `categories[]`), which collect every occurrence.
"""

import json
from typing import Any, Callable, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
LIST_FIELDS = ("categories",)


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Decode the request body into a dict.

    An empty body decodes to {}. Anything that is not a JSON object or a
    form body raises ValidationError("Invalid request body").
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPE):
        form = await request.form()
        data: Dict[str, Any] = {}
        for key in form.keys():
            values = form.getlist(key)
            field = key[:-2] if key.endswith("[]") else key
            if field in LIST_FIELDS:
                data.setdefault(field, []).extend(values)
            else:
                data[field] = values[-1]
        return data

    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except ValueError:
        raise ValidationError(message="Invalid request body") from None
    if not isinstance(data, dict):
        raise ValidationError(message="Invalid request body")
    return data


def bind_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate `data` against `model`, turning the first field error into a 400."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "__root__")
        message = first.get("msg", "Invalid value")
        raise ValidationError(
            message=f"Invalid value for '{field}': {message}" if field else message,
            field=field or None,
        ) from None


def body_of(model: Type[ModelT]) -> Callable[[Request], Any]:
    """
    Build a dependency yielding the request body bound to `model`.

    Usage:
        async def create(payload: ArticleCreate = Depends(body_of(ArticleCreate))):
    """

    async def dependency(request: Request) -> ModelT:
        return bind_payload(model, await read_payload(request))

    return dependency
