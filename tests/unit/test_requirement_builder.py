"""Field-level operations and finalize rules of the requirement builder."""

import random

import pytest
from pydantic import ValidationError

from reqspec.core.builder.normalize import location_key
from reqspec.core.builder.requirement_builder import RequirementBuilder
from reqspec.core.models.enums import (
    Currency,
    DiversityOption,
    RangeKind,
    Region,
    ValidationCode,
)


def _builder(**kwargs) -> RequirementBuilder:
    builder = RequirementBuilder(**kwargs)
    builder.set_title("Backend Engineer")
    builder.set_description("Build and run the matching APIs.")
    builder.set_job_location("Dubai")
    return builder


# ----------------------------------------------------------------------
# Skills
# ----------------------------------------------------------------------


def test_include_skill_is_trimmed_and_title_cased():
    builder = RequirementBuilder()
    builder.add_include_skill("  react   native ")
    assert builder.include_skills == ("React Native",)


def test_include_skill_duplicates_and_blanks_are_ignored():
    builder = RequirementBuilder()
    builder.add_include_skill("python")
    builder.add_include_skill("PYTHON")
    builder.add_include_skill("   ")
    builder.add_include_skill("")
    assert builder.include_skills == ("Python",)


def test_remove_skill_requires_exact_match():
    builder = RequirementBuilder()
    builder.add_include_skill("django")
    builder.remove_include_skill("django")
    assert builder.include_skills == ("Django",)

    builder.remove_include_skill("Django")
    assert builder.include_skills == ()

    builder.remove_exclude_skill("Missing")
    assert builder.exclude_skills == ()


def test_skill_may_sit_in_both_sets_until_finalize():
    builder = _builder()
    builder.add_include_skill("php")
    builder.add_include_skill("go")
    builder.add_exclude_skill("PHP")
    assert builder.include_skills == ("Php", "Go")
    assert builder.exclude_skills == ("Php",)

    spec = builder.finalize().unwrap()
    assert spec.include_skills == ("Go",)
    assert spec.exclude_skills == ("Php",)


def test_key_skills_join_include_skills_on_finalize():
    builder = _builder()
    builder.add_include_skill("python")
    builder.add_key_skill("fastapi")
    builder.add_key_skill("PYTHON")

    spec = builder.finalize().unwrap()
    assert spec.include_skills == ("Python", "Fastapi")
    assert spec.key_skills == ("Fastapi", "Python")


def test_key_skills_popular_picks_and_designations_can_be_removed():
    builder = RequirementBuilder()
    builder.add_key_skill("rust")
    builder.add_skill("Kotlin")
    builder.add_skill("Kotlin")
    builder.add_candidate_designation("tech lead")

    assert builder.skills == ("Kotlin",)

    builder.remove_key_skill("Rust")
    builder.remove_skill("Kotlin")
    builder.remove_candidate_designation("Tech Lead")

    assert builder.key_skills == ()
    assert builder.skills == ()
    assert builder.candidate_designations == ()


def test_designations_and_benefits():
    builder = _builder()
    builder.add_candidate_designation("senior   software engineer")
    builder.add_candidate_designation("Senior Software Engineer")
    builder.add_benefit("  Health insurance ")
    builder.add_benefit("Health insurance")
    builder.add_benefit("Stock options")
    builder.remove_benefit("Stock options")

    spec = builder.finalize().unwrap()
    assert spec.candidate_designations == ("Senior Software Engineer",)
    assert spec.benefits == ("Health insurance",)


# ----------------------------------------------------------------------
# Locations
# ----------------------------------------------------------------------


def test_locations_dedupe_case_insensitively():
    builder = RequirementBuilder()
    builder.add_include_location("Dubai")
    builder.add_include_location("dubai")
    builder.add_include_location("  DUBAI ")
    assert builder.include_locations == ("Dubai",)


def test_exclude_after_include_moves_location():
    builder = RequirementBuilder()
    builder.add_include_location("Dubai")
    builder.add_exclude_location("dubai")
    assert builder.include_locations == ()
    assert builder.exclude_locations == ("Dubai",)


def test_include_after_exclude_moves_location_back():
    builder = RequirementBuilder()
    builder.add_exclude_location("Sharjah")
    builder.add_include_location("SHARJAH")
    assert builder.exclude_locations == ()
    assert builder.include_locations == ("Sharjah",)


def test_removed_location_forgets_its_casing():
    builder = RequirementBuilder()
    builder.add_include_location("abu dhabi")
    builder.remove_include_location("Abu Dhabi")
    assert builder.include_locations == ()

    builder.add_include_location("Abu Dhabi")
    assert builder.include_locations == ("Abu Dhabi",)


def test_blank_location_is_ignored():
    builder = RequirementBuilder()
    builder.add_include_location("   ")
    builder.add_exclude_location("")
    assert builder.include_locations == ()
    assert builder.exclude_locations == ()


def test_location_sets_never_share_a_key():
    names = ["Dubai", "dubai", "Doha", "DOHA ", "Muscat", " muscat", "Riyadh"]
    rng = random.Random(7)
    builder = RequirementBuilder()

    for _ in range(200):
        name = rng.choice(names)
        op = rng.choice(
            [
                builder.add_include_location,
                builder.add_exclude_location,
                builder.remove_include_location,
                builder.remove_exclude_location,
            ]
        )
        op(name)
        included = {location_key(loc) for loc in builder.include_locations}
        excluded = {location_key(loc) for loc in builder.exclude_locations}
        assert not included & excluded
        assert len(included) == len(builder.include_locations)
        assert len(excluded) == len(builder.exclude_locations)


def test_job_location_is_an_implicit_include():
    builder = RequirementBuilder(region=Region.GULF)
    builder.set_title("Site Engineer")
    builder.set_description("Supervise construction.")
    builder.set_job_location("Riyadh")

    spec = builder.finalize().unwrap()
    assert spec.include_locations == ("Riyadh",)


def test_job_location_keeps_existing_casing_and_order():
    builder = _builder()
    builder.add_include_location("Doha")
    builder.add_include_location("DUBAI")

    spec = builder.finalize().unwrap()
    assert spec.include_locations == ("Doha", "DUBAI")


def test_excluded_job_location_is_dropped_from_includes():
    builder = _builder()
    builder.add_exclude_location("dubai")

    spec = builder.finalize().unwrap()
    assert spec.include_locations == ()
    assert spec.exclude_locations == ("dubai",)


# ----------------------------------------------------------------------
# Diversity
# ----------------------------------------------------------------------


def test_specific_diversity_value_clears_all():
    builder = RequirementBuilder()
    builder.set_diversity_preference("all", True)
    builder.set_diversity_preference("male", True)
    assert builder.diversity_preference == (DiversityOption.MALE,)


def test_all_replaces_specific_values():
    builder = RequirementBuilder()
    builder.set_diversity_preference("male", True)
    builder.set_diversity_preference("female", True)
    builder.set_diversity_preference("all", True)
    assert builder.diversity_preference == (DiversityOption.ALL,)

    builder.set_diversity_preference("all", False)
    assert builder.diversity_preference == ()


def test_unchecking_specific_value_removes_it():
    builder = RequirementBuilder()
    builder.set_diversity_preference("female", True)
    builder.set_diversity_preference("other", True)
    builder.set_diversity_preference("female", False)
    assert builder.diversity_preference == (DiversityOption.OTHER,)


def test_unknown_diversity_value_is_a_programming_error():
    builder = RequirementBuilder()
    with pytest.raises(ValueError):
        builder.set_diversity_preference("nonbinary-ish", True)


# ----------------------------------------------------------------------
# Finalize validation
# ----------------------------------------------------------------------


def test_empty_builder_reports_every_required_field():
    result = RequirementBuilder().finalize()

    assert not result.success
    assert result.spec is None
    assert result.missing_fields == ["title", "description", "jobLocation"]
    assert len(result.errors) == 3


def test_whitespace_only_required_fields_are_missing():
    builder = RequirementBuilder()
    builder.set_title("   ")
    builder.set_description("Some description")
    builder.set_job_location("\t")

    result = builder.finalize()
    assert result.missing_fields == ["title", "jobLocation"]


def test_inverted_experience_range_is_reported():
    builder = _builder()
    builder.set_numeric_range(RangeKind.EXPERIENCE, 5, 3)

    result = builder.finalize()
    assert not result.success
    assert result.invalid_ranges == ["experience"]
    assert "experience" in result.messages[0]


def test_both_inverted_ranges_are_reported_with_missing_fields():
    builder = RequirementBuilder()
    builder.set_numeric_range("experience", "10", "2")
    builder.set_numeric_range("salary", 90000, 40000)

    result = builder.finalize()
    assert result.invalid_ranges == ["experience", "salary"]
    assert result.missing_fields == ["title", "description", "jobLocation"]


def test_equal_bounds_and_open_bounds_are_valid():
    builder = _builder()
    builder.set_numeric_range("experience", "3", "3")
    builder.set_numeric_range("salary", "", 50000)
    assert builder.numeric_range(RangeKind.SALARY) == ("", 50000)

    spec = builder.finalize().unwrap()
    assert spec.experience_min == 3
    assert spec.experience_max == 3
    assert spec.salary_min is None
    assert spec.salary_max == 50000


def test_non_numeric_and_negative_inputs_are_invalid_values():
    builder = _builder()
    builder.set_numeric_range("experience", "five", None)
    builder.set_numeric_range("salary", -1, None)
    builder.set_last_active_days("2.5")
    builder.set_resume_freshness("31/12/2024")

    result = builder.finalize()
    codes = {(ValidationCode(issue.code), issue.field) for issue in result.errors}
    assert codes == {
        (ValidationCode.INVALID_VALUE, "workExperienceMin"),
        (ValidationCode.INVALID_VALUE, "currentSalaryMin"),
        (ValidationCode.INVALID_VALUE, "lastActive"),
        (ValidationCode.INVALID_VALUE, "resumeFreshness"),
    }


def test_extra_required_fields():
    builder = _builder(extra_required_fields=["industry", "department"])
    builder.set_industry("Information Technology")

    result = builder.finalize()
    assert result.missing_fields == ["department"]


def test_unknown_extra_required_field_is_rejected():
    with pytest.raises(ValueError):
        RequirementBuilder(extra_required_fields=["salary"])


def test_finalize_is_repeatable_and_leaves_builder_untouched():
    builder = _builder()
    builder.add_include_location("doha")
    builder.add_include_skill("sql")
    builder.add_exclude_skill("sql")

    first = builder.finalize().unwrap()
    second = builder.finalize().unwrap()

    assert first == second
    assert builder.include_locations == ("doha",)
    assert builder.include_skills == ("Sql",)


def test_finalized_spec_is_immutable():
    spec = _builder().finalize().unwrap()
    with pytest.raises(ValidationError):
        spec.title = "Changed"


def test_unwrap_on_failure_raises_with_all_messages():
    result = RequirementBuilder().finalize()
    with pytest.raises(ValueError, match="Job Title is required"):
        result.unwrap()


# ----------------------------------------------------------------------
# Scalar fields
# ----------------------------------------------------------------------


def test_currency_defaults_per_region():
    assert RequirementBuilder().currency == Currency.INR
    assert RequirementBuilder(region="gulf").currency == Currency.AED
    assert RequirementBuilder(region="gulf", currency="sar").currency == Currency.SAR


def test_unknown_currency_is_a_programming_error():
    builder = RequirementBuilder()
    with pytest.raises(ValueError):
        builder.set_currency("USDT")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Yes", True), ("no", False), ("", None), (None, None), (True, True), (False, False)],
)
def test_travel_required_is_tri_state(value, expected):
    builder = RequirementBuilder()
    builder.set_travel_required(value)
    assert builder.travel_required is expected


def test_unsupported_travel_value_raises():
    builder = RequirementBuilder()
    with pytest.raises(ValueError):
        builder.set_travel_required("Occasionally")


def test_optional_text_fields_are_trimmed_or_dropped():
    builder = _builder()
    builder.set_institute("  IIT Bombay ")
    builder.set_current_company("   ")
    builder.set_last_active_days("30")
    builder.set_valid_till("2026-12-31")

    spec = builder.finalize().unwrap()
    assert spec.institute == "IIT Bombay"
    assert spec.current_company is None
    assert spec.last_active_days == 30
    assert spec.valid_till.isoformat() == "2026-12-31"


# ----------------------------------------------------------------------
# Form replay
# ----------------------------------------------------------------------


def test_from_form_replays_operations_in_order():
    builder = RequirementBuilder.from_form(
        {
            "title": "Data Analyst",
            "description": "Dashboards and reporting.",
            "location": "Doha",
            "candidateLocations": ["Dubai", "Muscat"],
            "excludeLocations": ["dubai"],
            "includeSkills": ["power bi"],
            "diversityPreference": ["all", "female"],
            "workExperienceMin": "2",
            "workExperienceMax": "6",
            "travelRequired": "No",
            "region": "gulf",
        }
    )

    spec = builder.finalize().unwrap()
    assert spec.region == Region.GULF
    assert spec.currency == Currency.AED
    assert spec.include_locations == ("Muscat", "Doha")
    assert spec.exclude_locations == ("Dubai",)
    assert spec.include_skills == ("Power Bi",)
    assert spec.diversity_preference == ("female",)
    assert spec.experience_min == 2
    assert spec.travel_required is False


def test_from_form_rejects_unknown_fields():
    with pytest.raises(ValueError, match="salaryRange"):
        RequirementBuilder.from_form({"title": "X", "salaryRange": "1-2"})


def test_from_form_treats_empty_list_fields_as_no_entries():
    builder = RequirementBuilder.from_form(
        {
            "title": "Cashier",
            "description": "Front counter.",
            "location": "Kochi",
            "includeSkills": None,
            "candidateLocations": None,
            "diversityPreference": None,
        }
    )

    spec = builder.finalize().unwrap()
    assert spec.include_skills == ()
    assert spec.include_locations == ("Kochi",)
    assert spec.diversity_preference == ()


def test_from_form_treats_a_bare_value_as_one_entry():
    builder = RequirementBuilder.from_form(
        {
            "title": "Cashier",
            "description": "Front counter.",
            "location": "Kochi",
            "includeSkills": "python",
            "excludeLocations": "Kollam",
            "benefits": 401,
        }
    )

    assert builder.include_skills == ("Python",)
    assert builder.exclude_locations == ("Kollam",)
    assert builder.benefits == ("401",)


def test_from_form_rejects_nested_list_entries():
    with pytest.raises(ValueError, match="includeSkills"):
        RequirementBuilder.from_form({"title": "X", "includeSkills": [{"name": "python"}]})


def test_numeric_text_fields_finalize_as_strings():
    builder = RequirementBuilder.from_form(
        {
            "title": 2024,
            "description": 7,
            "location": 560001,
            "institute": 42,
        }
    )

    result = builder.finalize()
    assert result.success, result.messages
    assert result.spec.title == "2024"
    assert result.spec.description == "7"
    assert result.spec.job_location == "560001"
    assert result.spec.institute == "42"


def test_non_text_travel_value_is_rejected():
    builder = RequirementBuilder()
    with pytest.raises(ValueError):
        builder.set_travel_required(1)
