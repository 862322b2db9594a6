"""RequirementBuilder - accumulates filter criteria and finalizes them into a RequirementSpec."""

import math
from datetime import date, datetime
from typing import Any, Iterable, Mapping

from ..models.enums import (
    Currency,
    DiversityOption,
    JobType,
    NoticePeriod,
    RangeKind,
    Region,
    RemoteWork,
    ValidationCode,
)
from ..models.requirement import RequirementSpec
from ..models.validation import FinalizeResult, ValidationIssue
from ...observability.logger import get_logger
from .normalize import (
    dedupe,
    format_skill_text,
    location_key,
    normalize_locations,
    skill_key,
)

logger = get_logger(__name__)

NumericInput = str | int | float | None
DateInput = str | date | None

# Required-field name -> (builder attribute, label shown to the user)
REQUIRED_FIELDS: dict[str, tuple[str, str]] = {
    "title": ("title", "Job Title"),
    "description": ("description", "Job Description"),
    "jobLocation": ("job_location", "Location"),
}

# Fields that may additionally be made mandatory through configuration
OPTIONAL_REQUIRABLE_FIELDS: dict[str, tuple[str, str]] = {
    "industry": ("industry", "Industry"),
    "department": ("department", "Department"),
    "education": ("education", "Education"),
    "institute": ("institute", "Institute"),
    "currentCompany": ("current_company", "Current Company"),
}

RANGE_PAYLOAD_PREFIX: dict[RangeKind, str] = {
    RangeKind.EXPERIENCE: "workExperience",
    RangeKind.SALARY: "currentSalary",
}

DEFAULT_CURRENCY: dict[Region, Currency] = {
    Region.DEFAULT: Currency.INR,
    Region.GULF: Currency.AED,
}


class RequirementBuilder:
    """Mutable, single-session accumulator of requirement filter criteria.

    Field-level operations never fail on user input; every problem is
    reported together by :meth:`finalize`. Passing a value outside a fixed
    vocabulary (currency, notice period, diversity option, ...) is a
    programming error and raises ``ValueError`` immediately.
    """

    def __init__(
        self,
        region: Region | str = Region.DEFAULT,
        currency: Currency | str | None = None,
        extra_required_fields: Iterable[str] = (),
    ):
        """Initialize an empty builder.

        Args:
            region: Dashboard the requirement is created from
            currency: Salary currency (defaults per region)
            extra_required_fields: Payload names of optional fields to treat
                as mandatory, e.g. ``["industry", "department"]``
        """
        self.region = Region(region)
        self.currency = DEFAULT_CURRENCY[self.region]
        if currency:
            self.set_currency(currency)

        self.required_fields = dict(REQUIRED_FIELDS)
        for name in extra_required_fields:
            if name in self.required_fields:
                continue
            if name not in OPTIONAL_REQUIRABLE_FIELDS:
                raise ValueError(f"Field cannot be made required: {name}")
            self.required_fields[name] = OPTIONAL_REQUIRABLE_FIELDS[name]

        self.title = ""
        self.description = ""
        self.job_location = ""
        self.job_type = JobType.FULL_TIME
        self.valid_till: DateInput = None

        self._include_skills: list[str] = []
        self._exclude_skills: list[str] = []
        self._key_skills: list[str] = []
        self._skills: list[str] = []
        self._include_locations: list[str] = []
        self._exclude_locations: list[str] = []
        # Location key -> casing first entered for it
        self._location_labels: dict[str, str] = {}
        self._candidate_designations: list[str] = []
        self._benefits: list[str] = []
        self._diversity: list[DiversityOption] = []

        self.current_designation = ""
        self.education = ""
        self.industry = ""
        self.department = ""
        self.institute = ""
        self.current_company = ""

        self._ranges: dict[RangeKind, tuple[NumericInput, NumericInput]] = {
            RangeKind.EXPERIENCE: (None, None),
            RangeKind.SALARY: (None, None),
        }

        self.notice_period = NoticePeriod.IMMEDIATELY
        self.remote_work = RemoteWork.HYBRID
        self.travel_required: bool | None = None
        self.include_willing_to_relocate = False
        self.include_not_mentioned = False
        self.resume_freshness: DateInput = None
        self.last_active_days: NumericInput = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def include_skills(self) -> tuple[str, ...]:
        return tuple(self._include_skills)

    @property
    def exclude_skills(self) -> tuple[str, ...]:
        return tuple(self._exclude_skills)

    @property
    def key_skills(self) -> tuple[str, ...]:
        return tuple(self._key_skills)

    @property
    def skills(self) -> tuple[str, ...]:
        return tuple(self._skills)

    @property
    def include_locations(self) -> tuple[str, ...]:
        return tuple(self._include_locations)

    @property
    def exclude_locations(self) -> tuple[str, ...]:
        return tuple(self._exclude_locations)

    @property
    def candidate_designations(self) -> tuple[str, ...]:
        return tuple(self._candidate_designations)

    @property
    def benefits(self) -> tuple[str, ...]:
        return tuple(self._benefits)

    @property
    def diversity_preference(self) -> tuple[DiversityOption, ...]:
        return tuple(self._diversity)

    def numeric_range(self, which: RangeKind | str) -> tuple[NumericInput, NumericInput]:
        """Raw (min, max) inputs stored for a range."""
        return self._ranges[RangeKind(which)]

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------
    @staticmethod
    def _add_formatted(target: list[str], raw: str) -> None:
        formatted = format_skill_text(raw or "")
        if formatted and formatted not in target:
            target.append(formatted)

    @staticmethod
    def _remove_exact(target: list[str], value: str) -> None:
        if value in target:
            target.remove(value)

    def add_include_skill(self, raw: str) -> None:
        self._add_formatted(self._include_skills, raw)

    def remove_include_skill(self, skill: str) -> None:
        self._remove_exact(self._include_skills, skill)

    def add_exclude_skill(self, raw: str) -> None:
        self._add_formatted(self._exclude_skills, raw)

    def remove_exclude_skill(self, skill: str) -> None:
        self._remove_exact(self._exclude_skills, skill)

    def add_key_skill(self, raw: str) -> None:
        self._add_formatted(self._key_skills, raw)

    def remove_key_skill(self, skill: str) -> None:
        self._remove_exact(self._key_skills, skill)

    def add_skill(self, skill: str) -> None:
        """Add a popular-skill pick as-is."""
        if skill and skill not in self._skills:
            self._skills.append(skill)

    def remove_skill(self, skill: str) -> None:
        self._remove_exact(self._skills, skill)

    def add_candidate_designation(self, raw: str) -> None:
        self._add_formatted(self._candidate_designations, raw)

    def remove_candidate_designation(self, designation: str) -> None:
        self._remove_exact(self._candidate_designations, designation)

    def add_benefit(self, raw: str) -> None:
        benefit = (raw or "").strip()
        if benefit and benefit not in self._benefits:
            self._benefits.append(benefit)

    def remove_benefit(self, benefit: str) -> None:
        self._remove_exact(self._benefits, benefit)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------
    def _add_location(self, raw: str, target: list[str], other: list[str]) -> None:
        label = (raw or "").strip()
        if not label:
            return
        key = location_key(label)
        label = self._location_labels.setdefault(key, label)

        if all(location_key(existing) != key for existing in target):
            target.append(label)
        other[:] = [existing for existing in other if location_key(existing) != key]

    def _remove_location(self, location: str, target: list[str]) -> None:
        key = location_key(location or "")
        target[:] = [existing for existing in target if location_key(existing) != key]
        if not any(
            location_key(existing) == key
            for existing in self._include_locations + self._exclude_locations
        ):
            self._location_labels.pop(key, None)

    def add_include_location(self, raw: str) -> None:
        """Add an accepted candidate location, evicting it from the exclude set."""
        self._add_location(raw, self._include_locations, self._exclude_locations)

    def add_exclude_location(self, raw: str) -> None:
        """Add a rejected candidate location, evicting it from the include set."""
        self._add_location(raw, self._exclude_locations, self._include_locations)

    def remove_include_location(self, location: str) -> None:
        self._remove_location(location, self._include_locations)

    def remove_exclude_location(self, location: str) -> None:
        self._remove_location(location, self._exclude_locations)

    # ------------------------------------------------------------------
    # Ranges and diversity
    # ------------------------------------------------------------------
    def set_numeric_range(
        self,
        which: RangeKind | str,
        min: NumericInput = None,
        max: NumericInput = None,
    ) -> None:
        """Store raw range bounds; parsing and ordering are checked at finalize."""
        self._ranges[RangeKind(which)] = (min, max)

    def set_diversity_preference(self, value: DiversityOption | str, checked: bool) -> None:
        """Toggle a diversity option; "all" and specific options are exclusive."""
        option = DiversityOption(value)

        if option is DiversityOption.ALL:
            self._diversity = [DiversityOption.ALL] if checked else []
            return

        current = [d for d in self._diversity if d is not DiversityOption.ALL]
        if checked:
            if option not in current:
                current.append(option)
        else:
            current = [d for d in current if d is not option]
        self._diversity = current

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------
    def set_title(self, value: Any) -> None:
        self.title = _text(value)

    def set_description(self, value: Any) -> None:
        self.description = _text(value)

    def set_job_location(self, value: Any) -> None:
        self.job_location = _text(value)

    def set_currency(self, value: Currency | str) -> None:
        if isinstance(value, Currency):
            self.currency = value
        else:
            self.currency = Currency(str(value).strip().upper())

    def set_job_type(self, value: JobType | str) -> None:
        self.job_type = JobType(value)

    def set_notice_period(self, value: NoticePeriod | str) -> None:
        self.notice_period = NoticePeriod(value)

    def set_remote_work(self, value: RemoteWork | str) -> None:
        self.remote_work = RemoteWork(value)

    def set_travel_required(self, value: bool | str | None) -> None:
        """Set the tri-state travel flag from a bool or a Yes/No selection."""
        if value is None or isinstance(value, bool):
            self.travel_required = value
            return
        if not isinstance(value, str):
            raise ValueError(f"Unsupported travel requirement: {value!r}")
        choice = value.strip().lower()
        if choice == "":
            self.travel_required = None
        elif choice == "yes":
            self.travel_required = True
        elif choice == "no":
            self.travel_required = False
        else:
            raise ValueError(f"Unsupported travel requirement: {value!r}")

    def set_education(self, value: Any) -> None:
        self.education = _text(value)

    def set_industry(self, value: Any) -> None:
        self.industry = _text(value)

    def set_department(self, value: Any) -> None:
        self.department = _text(value)

    def set_institute(self, value: Any) -> None:
        self.institute = _text(value)

    def set_current_company(self, value: Any) -> None:
        self.current_company = _text(value)

    def set_current_designation(self, value: Any) -> None:
        self.current_designation = _text(value)

    def set_valid_till(self, value: DateInput) -> None:
        self.valid_till = value

    def set_resume_freshness(self, value: DateInput) -> None:
        self.resume_freshness = value

    def set_last_active_days(self, value: NumericInput) -> None:
        self.last_active_days = value

    def set_include_willing_to_relocate(self, value: bool) -> None:
        self.include_willing_to_relocate = bool(value)

    def set_include_not_mentioned(self, value: bool) -> None:
        self.include_not_mentioned = bool(value)

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------
    def finalize(self) -> FinalizeResult:
        """Validate and normalize the accumulated state.

        Runs the required-field check, numeric parsing and range ordering,
        location reconciliation and skill reconciliation. Every issue is
        collected before returning; the builder itself is not modified, so
        repeated calls yield equal results.

        Returns:
            FinalizeResult with the immutable spec or the full issue list
        """
        issues: list[ValidationIssue] = []

        # (a) Required fields
        for name, (attribute, label) in self.required_fields.items():
            if not str(getattr(self, attribute) or "").strip():
                issues.append(
                    ValidationIssue(
                        code=ValidationCode.MISSING_REQUIRED_FIELD,
                        field=name,
                        message=f"{label} is required",
                    )
                )

        # (b) Numeric ranges and other numeric/date inputs
        bounds: dict[RangeKind, tuple[float | None, float | None]] = {}
        for kind, (raw_min, raw_max) in self._ranges.items():
            prefix = RANGE_PAYLOAD_PREFIX[kind]
            low = _parse_amount(raw_min, f"{prefix}Min", f"Minimum {kind.value}", issues)
            high = _parse_amount(raw_max, f"{prefix}Max", f"Maximum {kind.value}", issues)
            if low is not None and high is not None and low > high:
                issues.append(
                    ValidationIssue(
                        code=ValidationCode.INVALID_RANGE,
                        field=kind.value,
                        message=(
                            f"Minimum {kind.value} cannot be greater than maximum {kind.value}"
                        ),
                    )
                )
            bounds[kind] = (low, high)

        last_active = _parse_days(self.last_active_days, "lastActive", "Last active days", issues)
        resume_freshness = _parse_date(
            self.resume_freshness, "resumeFreshness", "Resume freshness", issues
        )
        valid_till = _parse_date(self.valid_till, "validTill", "Valid till", issues)

        if issues:
            logger.info(
                "requirement_validation_failed",
                region=self.region.value,
                issues=[f"{issue.code}:{issue.field}" for issue in issues],
            )
            return FinalizeResult(success=False, errors=issues)

        # (c) Locations: job location is an implicit include; exclude wins overlaps
        include_locations = normalize_locations(self._include_locations)
        exclude_locations = normalize_locations(self._exclude_locations)
        job_location = self.job_location.strip()
        include_locations = normalize_locations([*include_locations, job_location])

        excluded_keys = {location_key(loc) for loc in exclude_locations}
        if location_key(job_location) in excluded_keys:
            logger.warning("job_location_excluded", job_location=job_location)
        include_locations = [
            loc for loc in include_locations if location_key(loc) not in excluded_keys
        ]

        # (d) Skills: key skills join the include set; exclude wins overlaps
        exclude_skills = dedupe(self._exclude_skills, key=skill_key)
        excluded_skill_keys = {skill_key(skill) for skill in exclude_skills}
        include_skills = dedupe([*self._include_skills, *self._key_skills], key=skill_key)
        overlap = [skill for skill in include_skills if skill_key(skill) in excluded_skill_keys]
        if overlap:
            logger.warning("include_exclude_skill_overlap", skills=overlap)
            include_skills = [
                skill for skill in include_skills if skill_key(skill) not in excluded_skill_keys
            ]

        experience_min, experience_max = bounds[RangeKind.EXPERIENCE]
        salary_min, salary_max = bounds[RangeKind.SALARY]

        spec = RequirementSpec(
            title=self.title.strip(),
            description=self.description.strip(),
            job_location=job_location,
            region=self.region,
            job_type=self.job_type,
            valid_till=valid_till,
            include_skills=tuple(include_skills),
            exclude_skills=tuple(exclude_skills),
            key_skills=tuple(dedupe(self._key_skills, key=skill_key)),
            skills=tuple(dedupe(self._skills)),
            include_locations=tuple(include_locations),
            exclude_locations=tuple(exclude_locations),
            candidate_designations=tuple(dedupe(self._candidate_designations, key=skill_key)),
            current_designation=_optional_text(self.current_designation),
            education=_optional_text(self.education),
            industry=_optional_text(self.industry),
            department=_optional_text(self.department),
            institute=_optional_text(self.institute),
            current_company=_optional_text(self.current_company),
            experience_min=experience_min,
            experience_max=experience_max,
            salary_min=salary_min,
            salary_max=salary_max,
            currency=self.currency,
            notice_period=self.notice_period,
            remote_work=self.remote_work,
            travel_required=self.travel_required,
            benefits=tuple(dedupe(self._benefits)),
            include_willing_to_relocate=self.include_willing_to_relocate,
            include_not_mentioned=self.include_not_mentioned,
            resume_freshness=resume_freshness,
            last_active_days=last_active,
            diversity_preference=tuple(dedupe(self._diversity)),
        )

        logger.info(
            "requirement_finalized",
            region=self.region.value,
            include_skills=len(spec.include_skills),
            exclude_skills=len(spec.exclude_skills),
            include_locations=len(spec.include_locations),
            exclude_locations=len(spec.exclude_locations),
        )
        return FinalizeResult(success=True, spec=spec)

    # ------------------------------------------------------------------
    # Form replay
    # ------------------------------------------------------------------
    @classmethod
    def from_form(
        cls,
        data: Mapping[str, Any],
        region: Region | str | None = None,
        extra_required_fields: Iterable[str] = (),
    ) -> "RequirementBuilder":
        """Build a requirement from a form-shaped mapping.

        Keys follow the submission payload names (``title``, ``location``,
        ``includeSkills``, ``candidateLocations``, ...). Values are replayed
        through the field-level operations, include locations before exclude
        locations, so conflicts resolve exactly as in the interactive form.

        Raises:
            ValueError: On unknown keys or out-of-vocabulary enum values
        """
        unknown = sorted(str(key) for key in set(data) - FORM_KEYS)
        if unknown:
            raise ValueError(f"Unknown requirement fields: {', '.join(unknown)}")

        builder = cls(
            region=region or data.get("region") or Region.DEFAULT,
            currency=data.get("currency"),
            extra_required_fields=extra_required_fields,
        )

        builder.set_title(data.get("title", ""))
        builder.set_description(data.get("description", ""))
        builder.set_job_location(data.get("location") or data.get("jobLocation") or "")

        for value in _form_list(data, "skills"):
            builder.add_skill(value)
        for value in _form_list(data, "keySkills"):
            builder.add_key_skill(value)
        for value in _form_list(data, "includeSkills"):
            builder.add_include_skill(value)
        for value in _form_list(data, "excludeSkills"):
            builder.add_exclude_skill(value)
        for value in _form_list(data, "candidateLocations"):
            builder.add_include_location(value)
        for value in _form_list(data, "excludeLocations"):
            builder.add_exclude_location(value)
        for value in _form_list(data, "candidateDesignations"):
            builder.add_candidate_designation(value)
        for value in _form_list(data, "benefits"):
            builder.add_benefit(value)
        for value in _form_list(data, "diversityPreference"):
            builder.set_diversity_preference(value, True)

        builder.set_numeric_range(
            RangeKind.EXPERIENCE, data.get("workExperienceMin"), data.get("workExperienceMax")
        )
        builder.set_numeric_range(
            RangeKind.SALARY, data.get("currentSalaryMin"), data.get("currentSalaryMax")
        )

        if data.get("jobType"):
            builder.set_job_type(data["jobType"])
        if data.get("noticePeriod"):
            builder.set_notice_period(data["noticePeriod"])
        if data.get("remoteWork"):
            builder.set_remote_work(data["remoteWork"])
        builder.set_travel_required(data.get("travelRequired"))

        builder.set_education(data.get("education"))
        builder.set_industry(data.get("industry"))
        builder.set_department(data.get("department"))
        builder.set_institute(data.get("institute"))
        builder.set_current_company(data.get("currentCompany"))
        builder.set_current_designation(data.get("currentDesignation"))
        builder.set_valid_till(data.get("validTill"))
        builder.set_resume_freshness(data.get("resumeFreshness"))
        builder.set_last_active_days(data.get("lastActive"))
        builder.set_include_willing_to_relocate(data.get("includeWillingToRelocate", False))
        builder.set_include_not_mentioned(data.get("includeNotMentioned", False))

        return builder


FORM_KEYS = frozenset(
    {
        "title",
        "description",
        "location",
        "jobLocation",
        "workExperienceMin",
        "workExperienceMax",
        "currentSalaryMin",
        "currentSalaryMax",
        "currency",
        "jobType",
        "skills",
        "keySkills",
        "includeSkills",
        "excludeSkills",
        "education",
        "industry",
        "department",
        "validTill",
        "noticePeriod",
        "remoteWork",
        "travelRequired",
        "candidateLocations",
        "excludeLocations",
        "candidateDesignations",
        "currentDesignation",
        "includeWillingToRelocate",
        "includeNotMentioned",
        "benefits",
        "institute",
        "resumeFreshness",
        "currentCompany",
        "lastActive",
        "diversityPreference",
        "region",
    }
)


# =============================================================================
# Input parsing helpers
# =============================================================================


def _text(value: Any) -> str:
    """Form text as a string; YAML may hand over numbers for fields like a title."""
    return "" if value is None else str(value)


def _optional_text(value: str | None) -> str | None:
    text = (value or "").strip()
    return text or None


def _form_list(data: Mapping[str, Any], key: str) -> list[str]:
    """Read a list field of a form; an empty value is no entries, a bare value is one.

    Raises:
        ValueError: If the value or one of its entries is a mapping or nested list
    """
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]

    entries: list[str] = []
    for entry in value:
        if entry is None:
            continue
        if isinstance(entry, (dict, list, tuple)):
            raise ValueError(f"{key} entries must be plain values, got {entry!r}")
        entries.append(str(entry))
    return entries


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _invalid(issues: list[ValidationIssue], field: str, message: str) -> None:
    issues.append(ValidationIssue(code=ValidationCode.INVALID_VALUE, field=field, message=message))


def _parse_amount(
    raw: NumericInput, field: str, label: str, issues: list[ValidationIssue]
) -> float | None:
    """Parse a non-negative number; blank input means the bound is absent."""
    if _is_blank(raw):
        return None
    if isinstance(raw, bool):
        _invalid(issues, field, f"{label} must be a number")
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        _invalid(issues, field, f"{label} must be a number")
        return None
    if not math.isfinite(value) or value < 0:
        _invalid(issues, field, f"{label} must be a non-negative number")
        return None
    return value


def _parse_days(
    raw: NumericInput, field: str, label: str, issues: list[ValidationIssue]
) -> int | None:
    value = _parse_amount(raw, field, label, issues)
    if value is None:
        return None
    if not value.is_integer():
        _invalid(issues, field, f"{label} must be a whole number of days")
        return None
    return int(value)


def _parse_date(
    raw: DateInput, field: str, label: str, issues: list[ValidationIssue]
) -> date | None:
    if _is_blank(raw):
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        _invalid(issues, field, f"{label} must be a date in YYYY-MM-DD format")
        return None
