"""
Unit tests for UserValidator (schema check plus field rules).
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from userdesk.core.user_validator import SCHEMA_ERROR_MESSAGE, UserValidator

from conftest import make_user


@pytest.fixture
def validator():
    return UserValidator()


class TestValidate:
    """Tests for UserValidator.validate"""

    def test_valid_draft(self, validator, valid_draft):
        outcome = validator.validate(valid_draft)

        assert outcome.valid is True
        assert outcome.schema_valid is True
        assert outcome.field_errors == {}

    def test_accepts_user_record(self, validator):
        assert validator.validate(make_user()).valid is True

    def test_company_optional(self, validator, valid_draft):
        del valid_draft["company"]
        assert validator.is_valid(valid_draft) is True

    @pytest.mark.parametrize("age,valid", [(1, True), (100, True), (0, False), (101, False)])
    def test_age_boundaries(self, validator, valid_draft, age, valid):
        valid_draft["age"] = age
        assert validator.validate(valid_draft).valid is valid

    @pytest.mark.parametrize("length,valid", [(2, True), (50, True), (1, False), (51, False)])
    def test_name_boundaries(self, validator, valid_draft, length, valid):
        valid_draft["name"] = "x" * length
        outcome = validator.validate(valid_draft)

        assert outcome.valid is valid
        if not valid:
            assert outcome.error_for("name") == "Name must be between 2 and 50 characters long"

    @pytest.mark.parametrize("email,valid", [
        ("a@b.c", True),
        ("user@example.com", True),
        ("@example.com", False),
        ("plainstring", False),
    ])
    def test_email_boundaries(self, validator, valid_draft, email, valid):
        valid_draft["email"] = email
        assert validator.validate(valid_draft).valid is valid

    def test_schema_failure_without_field_failure(self, validator, valid_draft):
        """Test an unknown role fails only the schema check"""
        valid_draft["role"] = "superuser"
        outcome = validator.validate(valid_draft)

        assert outcome.valid is False
        assert outcome.schema_valid is False
        assert outcome.schema_error == SCHEMA_ERROR_MESSAGE
        assert outcome.field_errors == {}

    def test_missing_role_fails_schema(self, validator, valid_draft):
        del valid_draft["role"]
        outcome = validator.validate(valid_draft)

        assert outcome.valid is False
        assert outcome.schema_valid is False

    def test_string_age_fails_both(self, validator, valid_draft):
        valid_draft["age"] = "25"
        outcome = validator.validate(valid_draft)

        assert outcome.schema_valid is False
        assert outcome.error_for("age") == "Age must be an integer"

    def test_empty_draft(self, validator):
        outcome = validator.validate({})

        assert outcome.valid is False
        assert set(outcome.field_errors) == {"name", "age", "email"}
        assert outcome.field_errors["age"] == "Age is required"

    @pytest.mark.parametrize("candidate", [None, [], "user", 42, object()])
    def test_non_mapping_input(self, validator, candidate):
        """Test inputs of the wrong shape produce an outcome instead of raising"""
        outcome = validator.validate(candidate)

        assert outcome.valid is False
        assert outcome.schema_error == SCHEMA_ERROR_MESSAGE

    def test_draft_not_mutated(self, validator, valid_draft):
        before = dict(valid_draft)
        validator.validate(valid_draft)
        assert valid_draft == before


class TestPartialChecks:
    """Tests for validate_schema and validate_fields"""

    def test_validate_fields_ignores_schema(self, validator, valid_draft):
        valid_draft["role"] = "superuser"
        assert validator.validate_fields(valid_draft).valid is True

    def test_validate_schema_ignores_field_rules(self, validator, valid_draft):
        valid_draft["age"] = 200
        assert validator.validate_schema(valid_draft).valid is True
        assert validator.validate(valid_draft).valid is False


class TestRulesFile:
    """Tests for UserValidator.from_rules_file"""

    def test_custom_rules(self, tmp_path, valid_draft):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("""
rules:
  company:
    - type: required_field
      message: Company is required
""")
        validator = UserValidator.from_rules_file(rules_file)

        del valid_draft["company"]
        outcome = validator.validate(valid_draft)

        assert outcome.valid is False
        assert outcome.field_errors == {"company": "Company is required"}


draft_values = st.one_of(
    st.none(), st.booleans(), st.integers(), st.floats(allow_nan=True),
    st.text(max_size=60), st.lists(st.integers(), max_size=3),
)

drafts = st.one_of(
    st.dictionaries(
        st.sampled_from(["name", "age", "email", "role", "company", "avatar", "_id", "extra"]),
        draft_values,
    ),
    draft_values,
)


@given(drafts)
@settings(max_examples=200)
def test_property_validate_is_total_and_deterministic(candidate):
    """Property test: validate never raises and gives the same answer twice"""
    validator = UserValidator()

    first = validator.validate(candidate)
    second = validator.validate(candidate)

    assert first == second
    assert first.valid == (first.schema_valid and not first.failed_rules)
