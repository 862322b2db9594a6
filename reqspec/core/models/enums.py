"""Enumeration types for reqspec models."""

from enum import Enum


class Region(str, Enum):
    """Dashboard the requirement is created from."""

    DEFAULT = "default"
    GULF = "gulf"


class Currency(str, Enum):
    """Salary currency codes accepted by the requirement forms."""

    INR = "INR"
    AED = "AED"
    SAR = "SAR"
    QAR = "QAR"
    KWD = "KWD"
    BHD = "BHD"
    OMR = "OMR"


class JobType(str, Enum):
    """Employment type of the posting."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"
    FREELANCE = "Freelance"


class NoticePeriod(str, Enum):
    """Accepted notice periods."""

    IMMEDIATELY = "Immediately"
    DAYS_15 = "15 days"
    DAYS_30 = "30 days"
    DAYS_60 = "60 days"
    DAYS_90 = "90 days"


class RemoteWork(str, Enum):
    """Work arrangement."""

    ON_SITE = "On-site"
    REMOTE = "Remote"
    HYBRID = "Hybrid"


class DiversityOption(str, Enum):
    """Gender diversity preference values."""

    ALL = "all"
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class RangeKind(str, Enum):
    """Numeric range filters."""

    EXPERIENCE = "experience"
    SALARY = "salary"


class ValidationCode(str, Enum):
    """Finalize-time validation failure kinds."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_RANGE = "invalid_range"
    INVALID_VALUE = "invalid_value"


class SubmissionErrorCategory(str, Enum):
    """User-facing categories for backend submission failures."""

    QUOTA_EXCEEDED = "quota_exceeded"
    PERMISSION_DENIED = "permission_denied"
    DUPLICATE = "duplicate"
    INVALID_INPUT = "invalid_input"
    GENERIC = "generic"
