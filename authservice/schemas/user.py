"""
User schemas for the auth service.
Only the public summary of a user ever leaves the service.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """
    Public view of a user. Never carries the password hash.
    """
    id: str = Field(
        ...,
        description="User ID"
    )
    email: str = Field(
        ...,
        description="User email address"
    )
    first_name: str = Field(
        ...,
        description="First name"
    )
    last_name: str = Field(
        ...,
        description="Last name"
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "email": "user@example.com",
                "first_name": "Jane",
                "last_name": "O'Neil"
            }
        }
    )
