"""
Generic response schemas for the auth service.
"""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    Error response schema with a consistent structure.
    """
    error: Dict[str, Any] = Field(
        ...,
        description="Error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "message": "Invalid email or password",
                    "type": "UNAUTHENTICATED",
                    "request_id": "550e8400-e29b-41d4-a716-446655440000"
                }
            }
        }
    )


class HealthCheckResponse(BaseModel):
    """
    Health check response schema.
    """
    status: str = Field(
        ...,
        description="Health status"
    )
    timestamp: datetime = Field(
        ...,
        description="Check timestamp"
    )
    version: str = Field(
        ...,
        description="API version"
    )
    service: str = Field(
        ...,
        description="Service name"
    )
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Per-dependency health"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:00:00Z",
                "version": "1.0.0",
                "service": "authservice",
                "details": {"redis": "healthy", "database": "healthy"}
            }
        }
    )
