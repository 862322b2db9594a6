"""Candidate records consumed by evaluators and the matches they return."""

from datetime import date, datetime

from pydantic import Field

from .base import ReqSpecBaseModel


class CandidateRecord(ReqSpecBaseModel):
    """Jobseeker profile fields that requirement filters inspect.

    Every filterable attribute is optional; a missing value is handled
    according to the requirement's ``include_not_mentioned`` switch.
    """

    candidate_id: str = Field(..., description="Candidate identifier")
    name: str | None = Field(None, description="Display name")

    skills: list[str] = Field(default_factory=list, description="Listed skills")
    key_skills: list[str] = Field(default_factory=list, description="Key skills")
    headline: str | None = Field(None, description="Profile headline")
    designation: str | None = Field(None, description="Current designation")
    current_company: str | None = Field(None, description="Current employer")
    institute: str | None = Field(None, description="Institute attended")
    education: str | None = Field(None, description="Highest education")

    current_location: str | None = Field(None, description="Current location")
    preferred_locations: list[str] = Field(default_factory=list, description="Preferred locations")
    willing_to_relocate: bool = Field(False, description="Open to relocation")

    experience_years: float | None = Field(None, ge=0, description="Total experience in years")
    current_salary: float | None = Field(None, ge=0, description="Current salary")
    notice_period_days: int | None = Field(None, ge=0, description="Notice period in days")
    gender: str | None = Field(None, description="Gender")

    last_active_at: datetime | None = Field(None, description="Last activity timestamp")
    resume_updated_on: date | None = Field(None, description="Last resume update")


class CandidateMatch(ReqSpecBaseModel):
    """A candidate that passed every filter, with its relevance score."""

    candidate_id: str = Field(..., description="Candidate identifier")
    score: float = Field(0.0, ge=0.0, description="Relevance score (higher is better)")
    matched_skills: list[str] = Field(default_factory=list, description="Include skills matched")
    matched_designation: str | None = Field(None, description="Designation filter matched")
    candidate: CandidateRecord = Field(..., description="Matched record")
