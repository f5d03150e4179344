import pytest
from structlog.testing import capture_logs

from internet_timeline.validator import (
    DocumentKind,
    JSONValidator,
    json_type,
    parse_and_validate,
    quick_validate,
)


@pytest.fixture
def validator():
    return JSONValidator()


def test_minimal_document_is_valid(validator, historical):
    result = validator.validate(historical, "historical_events")
    assert result.success is True
    assert result.errors == []
    assert result.data == "Valid"


def test_enum_and_string_kinds_are_equivalent(validator, historical):
    assert validator.validate(historical, DocumentKind.HISTORICAL_EVENTS) == validator.validate(
        historical, "historical_events"
    )


def test_validation_is_idempotent(validator, historical):
    del historical["foundationEra"]["yearlyStats"]
    historical["heroStats"][0].pop("icon")

    first = validator.validate(historical, "historical_events")
    second = validator.validate(historical, "historical_events")

    assert first == second
    assert first.success is False


def test_null_and_non_object_documents(validator):
    assert validator.validate(None, "historical_events").errors == ["JSON data is null or undefined"]
    assert validator.validate([1, 2], "historical_events").errors == ["JSON data must be an object"]
    assert validator.validate("text", "companies").data is None


def test_unknown_kind(validator):
    result = validator.validate({}, "weather")
    assert result.success is False
    assert result.errors == ["Unknown data type: weather"]


def test_missing_nested_section_names_the_path(validator, historical):
    del historical["foundationEra"]["yearlyStats"]
    result = validator.validate(historical, "historical_events")
    assert result.success is False
    assert "foundationEra.yearlyStats must be an array" in result.errors


def test_missing_top_level_sections_are_all_reported(validator):
    result = validator.validate({}, "historical_events")
    assert result.errors == [
        "heroStats must be an array",
        "foundationEra must be an object",
        "mobileEra must be an object",
        "fintechEra must be an object",
    ]


def test_missing_required_field(validator, historical):
    del historical["heroStats"][1]["icon"]
    result = validator.validate(historical, "historical_events")
    assert "heroStats[1] missing required field: icon" in result.errors


def test_wrong_field_type(validator, historical):
    historical["heroStats"][0]["value"] = 116
    result = validator.validate(historical, "historical_events")
    assert "heroStats[0].value must be string, got: number" in result.errors


def test_optional_field_type_is_checked_when_present(validator, historical):
    historical["foundationEra"]["events"][0]["impact"] = ["a"]
    result = validator.validate(historical, "historical_events")
    assert "historicalEvents[0].impact must be string, got: array" in result.errors


def test_unknown_extra_fields_are_accepted(validator, historical):
    historical["heroStats"][0]["color"] = "green"
    historical["mobileEra"]["notes"] = "anything"
    assert validator.validate(historical, "historical_events").success is True


def test_element_must_be_object(validator, historical):
    historical["heroStats"] = ["not a card"]
    result = validator.validate(historical, "historical_events")
    assert result.errors == ["heroStats[0] must be an object"]


def test_fintech_collections_are_shape_checked(validator, historical):
    del historical["fintechEra"]["mobileBanking"]
    historical["fintechEra"]["investmentBoom"] = {"company": "Tag"}
    result = validator.validate(historical, "historical_events")
    assert "fintechEra.mobileBanking must be an array" in result.errors
    assert "fintechEra.investmentBoom must be an array" in result.errors


def test_errors_accumulate_across_sections(validator, historical):
    del historical["heroStats"][0]["title"]
    del historical["mobileEra"]["socialMediaGrowth"]
    historical["fintechEra"]["events"][0]["date"] = 2021
    result = validator.validate(historical, "historical_events")
    assert len(result.errors) >= 3


@pytest.mark.parametrize("share", [45.5, 12, "45%"])
def test_market_share_accepts_string_or_number(validator, share):
    doc = {"companies": [{"name": "Jazz", "marketShare": share, "subscribers": "70M"}]}
    result = validator.validate(doc, "companies")
    assert result.success is True


@pytest.mark.parametrize("share", [True, False])
def test_market_share_rejects_boolean(validator, share):
    doc = {"companies": [{"name": "Jazz", "marketShare": share, "subscribers": "70M"}]}
    result = validator.validate(doc, "companies")
    assert result.success is False
    assert "companies[0].marketShare must be one of: string, number, got: boolean" in result.errors


def test_policies_year_union(validator):
    doc = {
        "policies": [
            {"title": "Telecom Policy", "year": 2015, "target": "Broadband", "achievement": "Partial"},
            {"title": "Digital Pakistan", "year": "2018", "target": "e-Gov", "achievement": "Ongoing"},
        ]
    }
    assert validator.validate(doc, "policies").success is True


def test_social_media_requires_platforms(validator):
    assert validator.validate({}, "social_media").errors == ["platforms must be an array"]


def test_infrastructure_empty_specifications_is_not_an_error(validator):
    doc = {"infrastructure": [{"name": "Fiber", "icon": "🔌", "specifications": []}]}
    with capture_logs() as logs:
        result = validator.validate(doc, "infrastructure")

    assert result.success is True
    warnings = [e for e in logs if e["event"] == "empty_array"]
    assert warnings
    assert warnings[0]["field"] == "infrastructure[0].specifications"
    assert warnings[0]["log_level"] == "warning"


def test_infrastructure_specifications_type(validator):
    doc = {"infrastructure": [{"name": "Fiber", "icon": "🔌", "specifications": "10 Gbps"}]}
    result = validator.validate(doc, "infrastructure")
    assert "infrastructure[0].specifications must be array, got: string" in result.errors


def test_statistics(validator):
    assert validator.validate({}, "statistics").success is True
    assert validator.validate({"yearlyStats": "x"}, "statistics").errors == ["yearlyStats must be an array"]
    ok = {"yearlyStats": [{"year": "2020", "users": "100M", "penetration": "45%"}]}
    assert validator.validate(ok, "statistics").success is True


def test_internal_fault_becomes_failure_result(validator):
    def explode(data, errors):
        raise RuntimeError("boom")

    validator._dispatch[DocumentKind.COMPANIES] = explode
    result = validator.validate({"companies": []}, "companies")
    assert result.success is False
    assert result.errors == ["Validation error: boom"]


def test_json_type_names():
    assert json_type(True) == "boolean"
    assert json_type(3) == "number"
    assert json_type(2.5) == "number"
    assert json_type("x") == "string"
    assert json_type([]) == "array"
    assert json_type({}) == "object"
    assert json_type(None) == "null"


def test_parse_and_validate():
    ok = parse_and_validate('{"heroStats": []}')
    assert ok.success is True
    assert ok.data == {"heroStats": []}
    assert ok.error is None

    empty = parse_and_validate("")
    assert empty.success is False
    assert empty.error == "JSON string is empty or not a string"

    assert parse_and_validate(None).success is False

    bad = parse_and_validate('{"heroStats": [}')
    assert bad.success is False
    assert bad.error.startswith("JSON parse error:")
    assert bad.data is None


def test_quick_validate():
    assert quick_validate({"a": 1}, "test") is True
    assert quick_validate(None, "test") is False
    assert quick_validate([1], "test") is False
