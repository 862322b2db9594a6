"""Base Pydantic schemas and helpers for reqspec models."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Utility Functions
# =============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a prefixed UUID.

    Args:
        prefix: Optional prefix for the ID (e.g., "req_", "draft_")

    Returns:
        Prefixed UUID string
    """
    uid = str(uuid.uuid4())
    return f"{prefix}{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


# =============================================================================
# Pydantic Base Classes
# =============================================================================


class ReqSpecBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        # Allow conversion from plain objects
        from_attributes=True,
        # Validate on assignment
        validate_assignment=True,
        # Use enum values instead of enum members
        use_enum_values=True,
        str_strip_whitespace=True,
    )


class FrozenSchema(ReqSpecBaseModel):
    """Immutable schema; assignment after construction raises."""

    model_config = ConfigDict(frozen=True)


class TimestampSchema(ReqSpecBaseModel):
    """Schema with timestamp fields."""

    created_at: datetime = Field(default_factory=utc_now)


class VersionedSchema(ReqSpecBaseModel):
    """Schema with versioning."""

    schema_version: str = Field(default="1.0.0", description="Schema version")


class IdentifiedSchema(ReqSpecBaseModel):
    """Schema with UUID identifier."""

    id: str = Field(default_factory=generate_id, description="Unique identifier")
