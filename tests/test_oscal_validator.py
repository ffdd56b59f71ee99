"""Tests for schema validation, lint rules and result formatting."""

import pytest

from sspbridge.mappers import build_ssp
from sspbridge.validation import (
    LINT_RULES,
    OSCALValidator,
    format_validation_errors,
    format_validation_warnings,
    get_validation_summary,
    validate_ssp,
)


def _assert_stats_consistent(result):
    stats = result["stats"]
    assert stats["error_count"] == len(result["errors"])
    assert stats["warning_count"] == len(result["warnings"])
    assert stats["total_checks"] == 1 + len(LINT_RULES)
    assert 0 <= stats["passed_checks"] <= stats["total_checks"]


@pytest.mark.parametrize("candidate", [None, "ssp", 42, [], {}, {"system-security-plan": []}])
def test_malformed_candidates_are_invalid_without_raising(validator, candidate):
    result = validator.validate(candidate)

    assert result["valid"] is False
    assert result["errors"]
    _assert_stats_consistent(result)


def test_validate_none_reports_root_type_error():
    result = validate_ssp(None)
    assert result["errors"][0]["path"] == "/"
    assert result["errors"][0]["keyword"] == "type"
    assert result["warnings"] == []


@pytest.mark.parametrize("flat_name", ["empty", "minimal", "complete"])
def test_built_documents_have_no_schema_errors(validator, flat_name, minimal_flat, complete_flat):
    flat = {"empty": {}, "minimal": minimal_flat, "complete": complete_flat}[flat_name]
    result = validator.validate(build_ssp(flat))

    assert result["errors"] == []
    assert result["valid"] is True
    _assert_stats_consistent(result)


def test_missing_root_warning(validator):
    result = validator.validate({"not-an-ssp": {}})

    assert result["valid"] is False
    assert result["warnings"] == [{
        "path": "/",
        "message": "Missing system-security-plan root element",
        "severity": "warning",
    }]


def test_error_entries_carry_pointer_keyword_and_schema_path(validator, minimal_flat):
    doc = build_ssp(minimal_flat)
    doc["system-security-plan"]["uuid"] = "not-a-uuid"

    result = validator.validate(doc)
    error = result["errors"][0]

    assert error["path"] == "/system-security-plan/uuid"
    assert error["keyword"] == "pattern"
    assert error["schema_path"].startswith("#/")


def test_required_and_enum_violations(validator, complete_flat):
    doc = build_ssp(complete_flat)
    ssp = doc["system-security-plan"]
    del ssp["metadata"]["title"]
    requirement = ssp["control-implementation"]["implemented-requirements"][0]
    requirement["by-components"][0]["implementation-status"]["state"] = "done"

    result = validator.validate(doc)
    keywords = {(e["path"], e["keyword"]) for e in result["errors"]}

    assert ("/system-security-plan/metadata", "required") in keywords
    assert (
        "/system-security-plan/control-implementation/implemented-requirements/0"
        "/by-components/0/implementation-status/state",
        "enum",
    ) in keywords


def test_empty_arrays_are_rejected(validator, minimal_flat):
    doc = build_ssp(minimal_flat)
    doc["system-security-plan"]["metadata"]["parties"] = []

    result = validator.validate(doc)

    assert any(e["keyword"] == "minItems" for e in result["errors"])
    assert any("parties" in w["message"] for w in result["warnings"])


def test_errors_inside_nested_structures_are_reported(validator, complete_flat):
    doc = build_ssp(complete_flat)
    ssp = doc["system-security-plan"]
    ssp["metadata"]["revisions"] = [{"title": "Initial release"}]
    ssp["metadata"]["locations"] = [{"uuid": "dc-1"}]
    ssp["metadata"]["parties"][0]["external-ids"] = [{"id": "0000-0002"}]
    ssp["system-implementation"]["components"][0]["responsible-roles"] = [
        {"party-uuids": ["not-a-uuid"], "extra": True}
    ]
    ssp["system-implementation"]["leveraged-authorizations"] = [{"uuid": "bad", "title": "IaaS"}]
    requirement = ssp["control-implementation"]["implemented-requirements"][0]
    requirement["set-parameters"] = [{"param-id": "ac-1_prm_1", "values": []}]
    requirement["by-components"][0]["inherited"] = [{"uuid": requirement["uuid"]}]
    ssp["back-matter"] = {"resources": [{"title": "Policy"}]}

    result = validator.validate(doc)
    keywords = {(e["path"], e["keyword"]) for e in result["errors"]}

    component_role = "/system-security-plan/system-implementation/components/0/responsible-roles/0"
    requirement_path = "/system-security-plan/control-implementation/implemented-requirements/0"
    assert result["valid"] is False
    assert {
        ("/system-security-plan/metadata/revisions/0", "required"),
        ("/system-security-plan/metadata/locations/0/uuid", "pattern"),
        ("/system-security-plan/metadata/parties/0/external-ids/0", "required"),
        (component_role, "required"),
        (component_role, "additionalProperties"),
        (f"{component_role}/party-uuids/0", "pattern"),
        ("/system-security-plan/system-implementation/leveraged-authorizations/0", "required"),
        (f"{requirement_path}/set-parameters/0/values", "minItems"),
        (f"{requirement_path}/by-components/0/inherited/0", "required"),
        ("/system-security-plan/back-matter/resources/0", "required"),
    } <= keywords


def test_missing_import_profile_warns_about_baseline_profile(validator, minimal_flat):
    doc = build_ssp(minimal_flat)
    del doc["system-security-plan"]["import-profile"]

    result = validator.validate(doc)

    assert not result["valid"]
    assert any("baseline profile" in w["message"] for w in result["warnings"])


def test_control_coverage_lint(validator, complete_flat):
    result = validator.validate(build_ssp(complete_flat))
    coverage = [w for w in result["warnings"] if "controls implemented" in w["message"]]

    assert coverage == [{
        "path": "/system-security-plan/control-implementation",
        "message": "Only 6 controls implemented - consider documenting more",
        "severity": "info",
    }]


def test_no_control_implementations_lint(validator, minimal_flat):
    doc = build_ssp(minimal_flat)
    doc["system-security-plan"]["control-implementation"]["implemented-requirements"] = []

    result = validator.validate(doc)

    assert any(w["message"] == "No control implementations documented" for w in result["warnings"])


def test_metadata_lint_rules(validator, minimal_flat):
    doc = build_ssp(minimal_flat)
    metadata = doc["system-security-plan"]["metadata"]
    del metadata["version"]
    del metadata["last-modified"]

    messages = {w["message"]: w["severity"] for w in validator.validate(doc)["warnings"]}

    assert messages["No version specified for the document"] == "info"
    assert messages["Missing last-modified timestamp in metadata"] == "info"


def test_passed_checks_counts_clean_rules(validator):
    flat = {"ctrlData": {"AC": {f"AC-{n}": {"status": "implemented"} for n in range(1, 11)}}}
    result = validator.validate(build_ssp(flat))

    assert result["warnings"] == []
    assert result["stats"]["passed_checks"] == result["stats"]["total_checks"]


def test_unreadable_schema_becomes_an_error(tmp_path):
    result = OSCALValidator(tmp_path / "missing.json").validate({})

    assert result["valid"] is False
    assert result["errors"][0]["keyword"] == "exception"
    _assert_stats_consistent(result)


def test_format_validation_errors():
    result = {"errors": [
        {"path": "/system-security-plan/metadata/parties/0/uuid", "message": "bad uuid"},
        {"path": "/", "message": "None is not of type 'object'"},
    ]}

    assert format_validation_errors(result) == [
        "SSP > Metadata > parties > 0 > uuid: bad uuid",
        "Root: None is not of type 'object'",
    ]


def test_format_validation_warnings():
    result = {"warnings": [
        {"path": "/system-security-plan/metadata/parties", "message": "No parties", "severity": "warning"},
        {"path": "/", "message": "Root issue", "severity": "info"},
    ]}

    assert format_validation_warnings(result) == [
        "⚠️ SSP > metadata > parties: No parties",
        "ℹ️ General: Root issue",
    ]


def test_validation_summaries():
    assert get_validation_summary({"valid": True, "errors": [], "warnings": []}) == \
        "✅ OSCAL document is valid and follows best practices"
    assert get_validation_summary({"valid": True, "errors": [], "warnings": [{}, {}]}) == \
        "✅ OSCAL document is valid with 2 suggestion(s)"
    assert get_validation_summary({"valid": False, "errors": [{}], "warnings": []}) == \
        "❌ OSCAL validation failed with 1 error(s)"
