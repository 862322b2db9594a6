"""Serialization of finalized requirement specs into the backend submission payload."""

from typing import Any, Mapping

from ..models.enums import Region
from ..models.requirement import RequirementSpec
from .requirement_builder import RequirementBuilder


def _number(value: float | None) -> int | float | None:
    """Render integral floats as ints so payloads match form input."""
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


def to_payload(spec: RequirementSpec) -> dict[str, Any]:
    """Serialize a finalized spec into the ``POST /requirements`` body.

    Optional values that are unset are omitted rather than sent as null,
    ``diversityPreference`` is omitted when empty and ``region`` is only
    present for Gulf requirements.

    Args:
        spec: Finalized requirement

    Returns:
        JSON-ready payload dictionary
    """
    payload: dict[str, Any] = {
        "title": spec.title,
        "description": spec.description,
        "location": spec.job_location,
        "workExperienceMin": _number(spec.experience_min),
        "workExperienceMax": _number(spec.experience_max),
        "currentSalaryMin": _number(spec.salary_min),
        "currentSalaryMax": _number(spec.salary_max),
        "currency": spec.currency,
        "jobType": spec.job_type,
        "skills": list(spec.skills),
        "keySkills": list(spec.key_skills),
        "includeSkills": list(spec.include_skills),
        "excludeSkills": list(spec.exclude_skills),
        "education": spec.education,
        "industry": spec.industry,
        "department": spec.department,
        "validTill": spec.valid_till.isoformat() if spec.valid_till else None,
        "noticePeriod": spec.notice_period,
        "remoteWork": spec.remote_work,
        "travelRequired": spec.travel_required,
        "candidateLocations": list(spec.include_locations),
        "excludeLocations": list(spec.exclude_locations),
        "candidateDesignations": list(spec.candidate_designations),
        "currentDesignation": spec.current_designation,
        "includeWillingToRelocate": spec.include_willing_to_relocate,
        "includeNotMentioned": spec.include_not_mentioned,
        "benefits": list(spec.benefits),
        "institute": spec.institute,
        "resumeFreshness": spec.resume_freshness.isoformat() if spec.resume_freshness else None,
        "currentCompany": spec.current_company,
        "lastActive": spec.last_active_days,
        "diversityPreference": list(spec.diversity_preference) or None,
        "region": Region.GULF.value if spec.is_gulf else None,
    }
    return {key: value for key, value in payload.items() if value is not None}


def spec_from_payload(payload: Mapping[str, Any]) -> RequirementSpec:
    """Rebuild a spec from a submission payload.

    The payload is replayed through the builder, so the same normalization
    and conflict rules apply on the receiving side.

    Raises:
        ValueError: If the payload does not describe a valid requirement
    """
    return RequirementBuilder.from_form(payload).finalize().unwrap()
