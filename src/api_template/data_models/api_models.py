from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
#   Authentication
# =============================================================================
class TokenClaims(BaseModel):
    """Claims of a validated bearer token. Unknown claims are kept."""

    model_config = ConfigDict(extra="allow", frozen=True)

    sub: str
    iss: Optional[str] = None
    aud: Optional[Union[str, List[str]]] = None
    exp: Optional[int] = None
    iat: Optional[int] = None
    email: Optional[str] = None
    name: Optional[str] = None
    roles: List[str] = []


class UserResponse(BaseModel):
    """Caller identity as returned to clients."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    roles: List[str] = []


# =============================================================================
#   Samples
# =============================================================================
class Priority(str, Enum):
    """Serialized by value, e.g. "low"."""

    low = "low"
    normal = "normal"
    high = "high"


class SampleRequest(BaseModel):
    """
    Body of the echo endpoint.

    Field rules play the part of request validators: every failure is
    reported per field in the 400 error envelope.
    """

    name: str = Field(min_length=1, max_length=100, description="Display name.")
    email: str = Field(
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Contact e-mail address.",
    )
    quantity: int = Field(ge=1, le=100, description="Between 1 and 100.")
    priority: Priority = Priority.normal
    tags: List[str] = Field(default=[], max_length=10)

    @field_validator("name")
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank.")
        return v.strip()

    @field_validator("tags")
    def tags_must_be_unique(cls, v: List[str]) -> List[str]:
        if len(v) != len(set(v)):
            duplicates = sorted({t for t in v if v.count(t) > 1})
            raise ValueError(f"Duplicate tags: {duplicates}")
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "name": "Widget",
                "email": "owner@example.com",
                "quantity": 3,
                "priority": "high",
                "tags": ["blue", "small"],
            }]
        }
    }


class SampleResponse(BaseModel):
    """Echoed sample plus who sent it."""

    name: str
    email: str
    quantity: int
    priority: Priority
    tags: List[str]
    submittedBy: str
    apiVersion: str
    note: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
    apiVersion: Optional[str] = None


# =============================================================================
#   Health
# =============================================================================
class HealthResponse(BaseModel):
    status: str
    environment: str
    databaseConfigured: bool
    supportedVersions: List[str]


class DatabaseTimeResponse(BaseModel):
    serverTime: datetime
