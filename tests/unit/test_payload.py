"""Submission payload serialization."""

import json

import pytest

from reqspec.core.builder.payload import spec_from_payload, to_payload
from reqspec.core.builder.requirement_builder import RequirementBuilder


def _spec(region="default", **setup):
    builder = RequirementBuilder(region=region)
    builder.set_title("QA Lead")
    builder.set_description("Own the release test plan.")
    builder.set_job_location(setup.pop("location", "Pune"))
    for name, value in setup.items():
        args = value if isinstance(value, tuple) else (value,)
        getattr(builder, name)(*args)
    return builder.finalize().unwrap()


def test_minimal_payload_omits_unset_optionals():
    payload = to_payload(_spec())

    assert payload["title"] == "QA Lead"
    assert payload["location"] == "Pune"
    assert payload["currency"] == "INR"
    assert payload["candidateLocations"] == ["Pune"]
    assert payload["includeWillingToRelocate"] is False
    assert payload["includeNotMentioned"] is False
    for key in (
        "workExperienceMin",
        "currentSalaryMax",
        "education",
        "validTill",
        "travelRequired",
        "resumeFreshness",
        "lastActive",
        "diversityPreference",
        "region",
    ):
        assert key not in payload


def test_region_and_currency_for_gulf_requirements():
    payload = to_payload(_spec(region="gulf", location="Riyadh"))

    assert payload["region"] == "gulf"
    assert payload["currency"] == "AED"
    assert payload["candidateLocations"] == ["Riyadh"]


def test_integral_amounts_render_as_ints():
    spec = _spec(
        set_numeric_range=("experience", "2", "7.5"),
    )
    payload = to_payload(spec)

    assert payload["workExperienceMin"] == 2
    assert isinstance(payload["workExperienceMin"], int)
    assert payload["workExperienceMax"] == 7.5


@pytest.mark.parametrize(("travel", "expected"), [("Yes", True), ("No", False)])
def test_stated_travel_requirement_is_sent(travel, expected):
    payload = to_payload(_spec(set_travel_required=travel))
    assert payload["travelRequired"] is expected


def test_diversity_dates_and_filters_are_serialized():
    spec = _spec(
        set_diversity_preference=("female", True),
        set_resume_freshness="2025-01-15",
        set_valid_till="2025-03-31",
        set_last_active_days=14,
        add_exclude_location="Mumbai",
        add_exclude_skill="cobol",
    )
    payload = to_payload(spec)

    assert payload["diversityPreference"] == ["female"]
    assert payload["resumeFreshness"] == "2025-01-15"
    assert payload["validTill"] == "2025-03-31"
    assert payload["lastActive"] == 14
    assert payload["excludeLocations"] == ["Mumbai"]
    assert payload["excludeSkills"] == ["Cobol"]


def test_payload_is_json_serializable():
    spec = _spec(
        set_notice_period="30 days",
        set_remote_work="Remote",
        set_job_type="Contract",
    )
    body = json.loads(json.dumps(to_payload(spec)))

    assert body["noticePeriod"] == "30 days"
    assert body["remoteWork"] == "Remote"
    assert body["jobType"] == "Contract"


def test_payload_replays_into_an_equal_spec():
    spec = _spec(
        region="gulf",
        location="Dubai",
        add_include_skill="kubernetes",
        add_key_skill="terraform",
        add_exclude_skill="kubernetes",
        add_include_location="Abu Dhabi",
        add_exclude_location="Sharjah",
        add_candidate_designation="devops engineer",
        set_numeric_range=("salary", 10000, 25000),
        set_include_not_mentioned=True,
    )

    assert spec_from_payload(to_payload(spec)) == spec


def test_invalid_payload_cannot_be_replayed():
    with pytest.raises(ValueError, match="Location is required"):
        spec_from_payload({"title": "X", "description": "Y"})
