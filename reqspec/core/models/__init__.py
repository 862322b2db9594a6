"""reqspec data models for requirement specs, candidates and submissions."""

from .base import (
    FrozenSchema,
    IdentifiedSchema,
    ReqSpecBaseModel,
    TimestampSchema,
    VersionedSchema,
    generate_id,
    utc_now,
)
from .candidate import CandidateMatch, CandidateRecord
from .enums import (
    Currency,
    DiversityOption,
    JobType,
    NoticePeriod,
    RangeKind,
    Region,
    RemoteWork,
    SubmissionErrorCategory,
    ValidationCode,
)
from .requirement import RequirementSpec
from .submission import DraftRecord, SubmissionOutcome, SubmissionReceipt
from .validation import FinalizeResult, ValidationIssue

__all__ = [
    # Base
    "ReqSpecBaseModel",
    "FrozenSchema",
    "IdentifiedSchema",
    "TimestampSchema",
    "VersionedSchema",
    "generate_id",
    "utc_now",
    # Enums
    "Region",
    "Currency",
    "JobType",
    "NoticePeriod",
    "RemoteWork",
    "DiversityOption",
    "RangeKind",
    "ValidationCode",
    "SubmissionErrorCategory",
    # Requirement
    "RequirementSpec",
    "FinalizeResult",
    "ValidationIssue",
    # Candidates
    "CandidateRecord",
    "CandidateMatch",
    # Submission
    "SubmissionReceipt",
    "SubmissionOutcome",
    "DraftRecord",
]
