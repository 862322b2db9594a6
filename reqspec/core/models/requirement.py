"""Finalized requirement filter spec (Pydantic only)."""

from datetime import date

from pydantic import Field

from .base import FrozenSchema
from .enums import (
    Currency,
    DiversityOption,
    JobType,
    NoticePeriod,
    Region,
    RemoteWork,
)


class RequirementSpec(FrozenSchema):
    """Normalized, conflict-free filter criteria for one candidate search.

    Instances are produced by ``RequirementBuilder.finalize()`` and are
    immutable. Collections are tuples in insertion order.
    """

    # Posting
    title: str = Field(..., min_length=1, description="Requirement title")
    description: str = Field(..., min_length=1, description="Requirement description")
    job_location: str = Field(..., min_length=1, description="Work location of the posting")
    region: Region = Field(Region.DEFAULT, description="Originating dashboard")
    job_type: JobType = Field(JobType.FULL_TIME, description="Employment type")
    valid_till: date | None = Field(None, description="Listing expiry date")

    # Skills
    include_skills: tuple[str, ...] = Field(default=(), description="Skills candidates must have")
    exclude_skills: tuple[str, ...] = Field(default=(), description="Skills candidates must not have")
    key_skills: tuple[str, ...] = Field(default=(), description="Highlighted skills")
    skills: tuple[str, ...] = Field(default=(), description="Popular skill picks")

    # Locations
    include_locations: tuple[str, ...] = Field(default=(), description="Accepted candidate locations")
    exclude_locations: tuple[str, ...] = Field(default=(), description="Rejected candidate locations")

    # Profile filters
    candidate_designations: tuple[str, ...] = Field(default=(), description="Designations")
    current_designation: str | None = Field(None, description="Current designation")
    education: str | None = Field(None, description="Education")
    industry: str | None = Field(None, description="Industry")
    department: str | None = Field(None, description="Department")
    institute: str | None = Field(None, description="Institute")
    current_company: str | None = Field(None, description="Current company")

    # Numeric ranges
    experience_min: float | None = Field(None, ge=0, description="Minimum years of experience")
    experience_max: float | None = Field(None, ge=0, description="Maximum years of experience")
    salary_min: float | None = Field(None, ge=0, description="Minimum current salary")
    salary_max: float | None = Field(None, ge=0, description="Maximum current salary")
    currency: Currency = Field(Currency.INR, description="Salary currency")

    # Work preferences
    notice_period: NoticePeriod = Field(NoticePeriod.IMMEDIATELY, description="Notice period")
    remote_work: RemoteWork = Field(RemoteWork.HYBRID, description="Work arrangement")
    travel_required: bool | None = Field(None, description="Travel required (None = not stated)")
    benefits: tuple[str, ...] = Field(default=(), description="Benefits offered")

    # Matching switches
    include_willing_to_relocate: bool = Field(False, description="Accept relocatable candidates")
    include_not_mentioned: bool = Field(
        False, description="Pass candidates with missing values for a filtered field"
    )

    # Recency
    resume_freshness: date | None = Field(None, description="Oldest acceptable resume update")
    last_active_days: int | None = Field(None, ge=0, description="Maximum days since last activity")

    diversity_preference: tuple[DiversityOption, ...] = Field(
        default=(), description="Gender diversity preference"
    )

    @property
    def is_gulf(self) -> bool:
        return self.region == Region.GULF
