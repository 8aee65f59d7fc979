"""
HotTakes API: Shared Response Schemas
======================================

What:  Response models shared by every router: the error envelope and the
       health report.
Who:   ErrorResponse is documented on routes through `responses=`;
       HealthResponse is the response_model of GET /health.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldError(BaseModel):
    """One violation reported by the validator."""

    location: str = Field(description="Where the value came from: body or params")
    param: str = Field(description="Property or path parameter name")
    message: str = Field(description="Human-readable description of the violation")


class ErrorBody(BaseModel):
    """
    Body of every error response.

    Kind-specific properties are added next to the three common ones:
        - fields:    validation_failed
        - expiredAt: token_expired
        - date:      token_not_active
        - field:     file_missing, invalid_file_type, file_too_large
    """

    type: str = Field(description="Machine-readable error tag, e.g. validation_failed")
    name: str = Field(description="Error class name")
    message: str = Field(description="Human-readable error description")
    fields: Optional[List[FieldError]] = None

    model_config = ConfigDict(extra="allow")


class ErrorResponse(BaseModel):
    """
    Example:
        {
            "error": {
                "type": "resource_not_found",
                "name": "NotFoundError",
                "message": "Sauce 64b7f0c2e4b0a1a2b3c4d5e6 not found"
            }
        }
    """

    error: ErrorBody


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
