#!/usr/bin/env python3
"""Tests for parameter value validation and parameter definition checks."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from docfill.exceptions import DuplicateParameterNameError, InvalidParameterDefinitionError
from docfill.validation import (
    INVALID_FORMAT,
    MISSING_REQUIRED,
    ParameterValidator,
    check_parameter_definitions,
    is_valid_email,
    is_valid_number,
    render_value,
)
from docfill.validation.models import ParameterType, TemplateParameter


@pytest.fixture
def validator():
    return ParameterValidator()


class TestRenderValue:
    """Canonical string forms of submitted values"""

    def test_none_renders_empty(self):
        assert render_value(None) == ""

    def test_booleans_render_lowercase(self):
        assert render_value(True) == "true"
        assert render_value(False) == "false"

    def test_integral_float_drops_fraction(self):
        assert render_value(3.0) == "3"

    def test_other_values_use_str(self):
        assert render_value(2.5) == "2.5"
        assert render_value(7) == "7"
        assert render_value("Acme") == "Acme"
        assert render_value("") == ""


class TestEmailFormat:
    @pytest.mark.parametrize(
        "value",
        ["alice@example.com", "first.last+tag@mail.example.co.uk", "x_y@a-b.org"],
    )
    def test_accepts_standard_addresses(self, value):
        assert is_valid_email(value)

    @pytest.mark.parametrize(
        "value",
        ["not-an-email", "a@localhost", "@example.com", "a@", "a..b@example.com", ".a@example.com",
         "a b@example.com"],
    )
    def test_rejects_malformed_addresses(self, value):
        assert not is_valid_email(value)


class TestNumberFormat:
    @pytest.mark.parametrize("value", ["42", "-3.5", "+7", "1e3", ".5", "4.", "0"])
    def test_accepts_finite_decimals(self, value):
        assert is_valid_number(value)

    @pytest.mark.parametrize("value", ["abc", "1,000", "inf", "nan", "1e999", "12abc", "--1"])
    def test_rejects_non_numbers(self, value):
        assert not is_valid_number(value)


class TestParameterValidator:
    """Value map checks against an ordered schema"""

    def test_all_present_and_well_typed_is_valid(self, validator, claim_parameters):
        result = validator.validate(
            claim_parameters,
            {"company_name": "Acme", "claim_id": "42", "contact_email": "ops@acme.com"},
        )
        assert result.is_valid
        assert result.errors == []
        assert result.first_error is None

    def test_missing_required_reported_with_label(self, validator, claim_parameters):
        result = validator.validate(claim_parameters, {"claim_id": "42"})

        assert not result.is_valid
        issue = result.first_error
        assert issue.kind == MISSING_REQUIRED
        assert issue.parameter == "company_name"
        assert issue.message == "Missing required parameter: Company name"

    def test_whitespace_only_counts_as_missing(self, validator, claim_parameters):
        result = validator.validate(claim_parameters, {"company_name": "   ", "claim_id": "1"})
        assert result.first_error.kind == MISSING_REQUIRED

    def test_invalid_email_reports_invalid_format(self, validator):
        parameters = [TemplateParameter(name="email", label="email", type=ParameterType.EMAIL)]
        result = validator.validate(parameters, {"email": "not-an-email"})

        issue = result.first_error
        assert issue.kind == INVALID_FORMAT
        assert issue.parameter == "email"
        assert issue.expected == "email"

    def test_invalid_number_reports_invalid_format(self, validator, claim_parameters):
        result = validator.validate(claim_parameters, {"company_name": "Acme", "claim_id": "forty"})

        assert result.first_error.kind == INVALID_FORMAT
        assert result.first_error.expected == "number"
        assert result.first_error.message == "Claim ID must be a number"

    def test_numeric_values_are_rendered_before_checking(self, validator, claim_parameters):
        result = validator.validate(claim_parameters, {"company_name": "Acme", "claim_id": 42})
        assert result.is_valid

    def test_blank_optional_value_is_skipped(self, validator, claim_parameters):
        result = validator.validate(
            claim_parameters, {"company_name": "Acme", "claim_id": "1", "contact_email": ""}
        )
        assert result.is_valid

    def test_date_and_text_only_need_presence(self, validator):
        parameters = [
            TemplateParameter(name="when", label="When", type=ParameterType.DATE),
            TemplateParameter(name="notes", label="Notes", type=ParameterType.TEXTAREA),
        ]
        result = validator.validate(parameters, {"when": "someday", "notes": "anything {{at}} all"})
        assert result.is_valid

    def test_all_issues_collected_in_declaration_order(self, validator, claim_parameters):
        result = validator.validate(
            claim_parameters, {"claim_id": "x", "contact_email": "nope"}
        )

        assert [issue.parameter for issue in result.errors] == [
            "company_name",
            "claim_id",
            "contact_email",
        ]
        assert "company_name" in result.get_error_summary()

    def test_first_error_is_stable_across_value_ordering(self, validator, claim_parameters):
        values_a = {"claim_id": "x", "contact_email": "nope"}
        values_b = {"contact_email": "nope", "claim_id": "x"}

        first_a = validator.validate(claim_parameters, values_a).first_error
        first_b = validator.validate(claim_parameters, values_b).first_error
        assert first_a == first_b

    def test_unknown_keys_are_ignored(self, validator, claim_parameters):
        result = validator.validate(
            claim_parameters, {"company_name": "Acme", "claim_id": "1", "unrelated": "zzz"}
        )
        assert result.is_valid


class TestParameterDefinitions:
    """Checks run when a template is created"""

    def test_valid_definitions_pass(self, claim_parameters):
        check_parameter_definitions(claim_parameters)

    def test_duplicate_name_rejected(self):
        parameters = [
            TemplateParameter(name="name", label="Name"),
            TemplateParameter(name="name", label="Other name"),
        ]
        with pytest.raises(DuplicateParameterNameError) as exc_info:
            check_parameter_definitions(parameters)
        assert exc_info.value.code == "DUPLICATE_PARAMETER_NAME"

    @pytest.mark.parametrize("name", ["bad-name", "with space", "dollar$", ""])
    def test_malformed_name_rejected(self, name):
        with pytest.raises(InvalidParameterDefinitionError):
            check_parameter_definitions([TemplateParameter(name=name, label="Label")])

    def test_overlong_name_rejected(self):
        with pytest.raises(InvalidParameterDefinitionError):
            check_parameter_definitions([TemplateParameter(name="a" * 101, label="Label")])

    def test_missing_label_rejected(self):
        with pytest.raises(InvalidParameterDefinitionError):
            check_parameter_definitions([TemplateParameter(name="ok", label="  ")])
