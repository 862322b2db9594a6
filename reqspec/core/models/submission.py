"""Submission receipts and outcomes (Pydantic only)."""

from typing import Any

from pydantic import Field

from .base import IdentifiedSchema, ReqSpecBaseModel, TimestampSchema, VersionedSchema
from .enums import Region, SubmissionErrorCategory
from .requirement import RequirementSpec
from .validation import ValidationIssue


class SubmissionReceipt(IdentifiedSchema, TimestampSchema, VersionedSchema):
    """Record of a requirement accepted by the backend."""

    requirement_id: str | None = Field(None, description="Backend requirement ID, if returned")
    region: Region = Field(Region.DEFAULT, description="Originating dashboard")
    title: str = Field(..., description="Requirement title")
    payload: dict[str, Any] = Field(default_factory=dict, description="Payload that was sent")
    message: str | None = Field(None, description="Backend message")


class DraftRecord(IdentifiedSchema, TimestampSchema, VersionedSchema):
    """A finalized spec saved locally before (or instead of) submission."""

    spec: RequirementSpec = Field(..., description="Finalized requirement")
    note: str | None = Field(None, description="Free-form note")


class SubmissionOutcome(ReqSpecBaseModel):
    """Result of finalize + submit, with every failure mode made explicit."""

    success: bool = Field(..., description="Whether the backend accepted the requirement")
    receipt: SubmissionReceipt | None = Field(None, description="Receipt on success")
    validation_errors: list[ValidationIssue] = Field(
        default_factory=list, description="Finalize-time issues (nothing was sent)"
    )
    error_category: SubmissionErrorCategory | None = Field(
        None, description="Category of a backend failure"
    )
    error_title: str | None = Field(None, description="User-facing failure title")
    error_message: str | None = Field(None, description="User-facing failure message")
