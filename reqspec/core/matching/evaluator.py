"""Evaluators run a finalized RequirementSpec against a pool of candidates."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable

from ..builder.normalize import location_key, skill_key
from ..models.candidate import CandidateMatch, CandidateRecord
from ..models.enums import DiversityOption
from ..models.requirement import RequirementSpec
from ...observability.logger import get_logger

logger = get_logger(__name__)

SKILL_WEIGHT = 1.0
DESIGNATION_WEIGHT = 0.5


class Evaluator(ABC):
    """Contract every candidate search backend must honor.

    Given a finalized spec, implementations must:
    - drop candidates with no include-skill overlap (unless no include skills)
    - drop candidates with any exclude skill, even if they match includes
    - drop candidates outside every include location, unless the spec has no
      include locations or accepts relocatable candidates who are relocatable
    - drop candidates in any exclude location, regardless of relocation
    - apply numeric ranges with inclusive bounds, a missing bound being open
    - let ``include_not_mentioned`` decide, per field, whether a missing
      candidate value passes that field's filter
    - return results in a deterministic order (ties broken by candidate id)
    """

    @abstractmethod
    def evaluate(self, spec: RequirementSpec) -> list[CandidateMatch]:
        """Return the candidates matching ``spec``, best first."""


class InMemoryEvaluator(Evaluator):
    """Reference evaluator over an in-memory candidate pool."""

    def __init__(
        self,
        candidates: Iterable[CandidateRecord],
        now: datetime | None = None,
    ):
        """Initialize evaluator.

        Args:
            candidates: Candidate pool
            now: Reference time for recency filters (defaults to current UTC time)
        """
        self.candidates = list(candidates)
        self.now = now

    def evaluate(self, spec: RequirementSpec) -> list[CandidateMatch]:
        now = _as_utc(self.now) if self.now else datetime.now(timezone.utc)
        matches: list[CandidateMatch] = []

        for candidate in self.candidates:
            rejected_by = self._rejection(spec, candidate, now)
            if rejected_by:
                logger.debug(
                    "candidate_rejected",
                    candidate_id=candidate.candidate_id,
                    filter=rejected_by,
                )
                continue
            matches.append(self._score(spec, candidate))

        matches.sort(key=lambda m: (-m.score, m.candidate_id))

        logger.info(
            "evaluation_complete",
            title=spec.title,
            total_candidates=len(self.candidates),
            matched=len(matches),
        )
        return matches

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def _rejection(
        self, spec: RequirementSpec, candidate: CandidateRecord, now: datetime
    ) -> str | None:
        """Name of the first filter the candidate fails, or None."""
        lenient = spec.include_not_mentioned
        candidate_skills = _skill_keys(candidate)

        if spec.include_skills and not any(
            skill_key(skill) in candidate_skills for skill in spec.include_skills
        ):
            return "include_skills"

        if any(skill_key(skill) in candidate_skills for skill in spec.exclude_skills):
            return "exclude_skills"

        places = _candidate_places(candidate)
        if any(_mentions_any(places, location) for location in spec.exclude_locations):
            return "exclude_locations"

        if spec.include_locations:
            in_area = any(_mentions_any(places, location) for location in spec.include_locations)
            relocates = spec.include_willing_to_relocate and candidate.willing_to_relocate
            if not (in_area or relocates):
                return "include_locations"

        if not _in_range(
            candidate.experience_years, spec.experience_min, spec.experience_max, lenient
        ):
            return "experience"

        if not _in_range(candidate.current_salary, spec.salary_min, spec.salary_max, lenient):
            return "salary"

        if spec.candidate_designations:
            titles = [t for t in (candidate.designation, candidate.headline) if t]
            if not titles:
                if not lenient:
                    return "candidate_designations"
            elif _matched_designation(spec, titles) is None:
                return "candidate_designations"

        for field, wanted, actual in (
            ("current_company", spec.current_company, candidate.current_company),
            ("institute", spec.institute, candidate.institute),
            ("education", _education_filter(spec.education), candidate.education),
        ):
            if not wanted:
                continue
            if not actual:
                if not lenient:
                    return field
            elif not _mentions(actual, wanted):
                return field

        if spec.last_active_days is not None:
            if candidate.last_active_at is None:
                if not lenient:
                    return "last_active"
            elif (now - _as_utc(candidate.last_active_at)).days > spec.last_active_days:
                return "last_active"

        if spec.resume_freshness is not None:
            if candidate.resume_updated_on is None:
                if not lenient:
                    return "resume_freshness"
            elif candidate.resume_updated_on < spec.resume_freshness:
                return "resume_freshness"

        genders = _requested_genders(spec)
        if genders:
            if not candidate.gender:
                if not lenient:
                    return "diversity_preference"
            elif candidate.gender.strip().lower() not in genders:
                return "diversity_preference"

        return None

    def _score(self, spec: RequirementSpec, candidate: CandidateRecord) -> CandidateMatch:
        candidate_skills = _skill_keys(candidate)
        matched_skills = [
            skill for skill in spec.include_skills if skill_key(skill) in candidate_skills
        ]
        titles = [t for t in (candidate.designation, candidate.headline) if t]
        matched_designation = _matched_designation(spec, titles) if titles else None

        score = SKILL_WEIGHT * len(matched_skills)
        if matched_designation:
            score += DESIGNATION_WEIGHT

        return CandidateMatch(
            candidate_id=candidate.candidate_id,
            score=score,
            matched_skills=matched_skills,
            matched_designation=matched_designation,
            candidate=candidate,
        )


# =============================================================================
# Helpers
# =============================================================================


def _skill_keys(candidate: CandidateRecord) -> set[str]:
    return {skill_key(skill) for skill in [*candidate.skills, *candidate.key_skills] if skill}


def _candidate_places(candidate: CandidateRecord) -> list[str]:
    places = [candidate.current_location, *candidate.preferred_locations]
    return [location_key(place) for place in places if place and place.strip()]


def _mentions(text: str, needle: str) -> bool:
    """Case-insensitive containment, as the backend's ILIKE '%needle%'."""
    return location_key(needle) in text.lower()


def _mentions_any(places: list[str], location: str) -> bool:
    return any(_mentions(place, location) for place in places)


def _matched_designation(spec: RequirementSpec, titles: list[str]) -> str | None:
    for designation in spec.candidate_designations:
        if any(_mentions(title, designation) for title in titles):
            return designation
    return None


def _in_range(
    value: float | None, low: float | None, high: float | None, lenient: bool
) -> bool:
    if low is None and high is None:
        return True
    if value is None:
        return lenient
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _education_filter(education: str | None) -> str | None:
    """Treat "Any Graduate" as no education restriction."""
    if education and education.strip().lower() == "any graduate":
        return None
    return education


def _requested_genders(spec: RequirementSpec) -> set[str]:
    prefs = set(spec.diversity_preference)
    if DiversityOption.ALL.value in prefs:
        return set()
    return prefs


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
