"""
Blog Backend — Shared Response Schemas
========================================

What:  The envelope pieces every endpoint shares.
How:   Every response body carries `status`: "success" or "error".
       List responses add `count`.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error envelope returned by the global exception handlers.

    Example:
        {"status": "error", "message": "Article not found"}
        {"status": "error", "message": "Error retrieving articles",
         "error": "Internal server error"}
    """
    status: str = Field(default="error")
    message: str = Field(description="Human-readable error description")
    error: Optional[str] = Field(
        default=None,
        description="Underlying error in diagnostic mode, a generic string otherwise",
    )


class MessageResponse(BaseModel):
    status: str = Field(default="success")
    message: str


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
