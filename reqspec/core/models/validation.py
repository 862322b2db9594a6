"""Finalize results and validation issues (Pydantic only)."""

from pydantic import Field

from .base import ReqSpecBaseModel
from .enums import ValidationCode
from .requirement import RequirementSpec


class ValidationIssue(ReqSpecBaseModel):
    """A single user-input problem found at finalize time."""

    code: ValidationCode = Field(..., description="Issue kind")
    field: str = Field(..., description="Field or range name the issue refers to")
    message: str = Field(..., description="Human-readable message")


class FinalizeResult(ReqSpecBaseModel):
    """Outcome of ``RequirementBuilder.finalize()``.

    Exactly one of ``spec`` (on success) or a non-empty ``errors`` list
    (on failure) is populated.
    """

    success: bool = Field(..., description="Whether the spec is valid")
    spec: RequirementSpec | None = Field(None, description="Finalized spec")
    errors: list[ValidationIssue] = Field(default_factory=list, description="All issues found")

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    @property
    def missing_fields(self) -> list[str]:
        return [
            issue.field
            for issue in self.errors
            if issue.code == ValidationCode.MISSING_REQUIRED_FIELD
        ]

    @property
    def invalid_ranges(self) -> list[str]:
        return [
            issue.field for issue in self.errors if issue.code == ValidationCode.INVALID_RANGE
        ]

    def unwrap(self) -> RequirementSpec:
        """Return the spec or raise ``ValueError`` listing every issue."""
        if not self.success or self.spec is None:
            raise ValueError("; ".join(self.messages) or "Requirement is not valid")
        return self.spec
