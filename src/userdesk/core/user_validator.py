"""
Validation of draft and incoming user records.

Combines the structural schema check (UserRecord) with the field rules
applied while a draft is being edited.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from userdesk.core.models import UserRecord, ValidationOutcome
from userdesk.core.rules import RuleConfigLoader, RuleEngine, default_user_rules
from userdesk.observability.logger import get_logger

logger = get_logger(__name__)

SCHEMA_ERROR_MESSAGE = "Invalid user record"


class UserValidator:
    """
    Validates candidate user records.

    validate() never raises: invalid input of any shape (None, lists,
    partial dicts, wrong types) is reported through the returned outcome.
    """

    def __init__(self, rules: list[dict[str, Any]] | None = None):
        """
        Args:
            rules: Field rule configurations; defaults to default_user_rules()
        """
        self.engine = RuleEngine(rules if rules is not None else default_user_rules())

    @classmethod
    def from_rules_file(cls, path: str | Path) -> "UserValidator":
        """Build a validator whose field rules come from a YAML file."""
        return cls(RuleConfigLoader(path).load_rules())

    def validate(self, candidate: Any) -> ValidationOutcome:
        """
        Run the schema check and every field rule.

        Args:
            candidate: A mapping of draft fields or a UserRecord

        Returns:
            ValidationOutcome; valid only if the schema check and all field rules pass
        """
        payload = _as_payload(candidate)
        schema = self.validate_schema(candidate)
        fields = self.engine.validate_payload(payload if payload is not None else {})

        return ValidationOutcome(
            valid=schema.schema_valid and fields.valid,
            schema_valid=schema.schema_valid,
            schema_error=schema.schema_error,
            field_errors=fields.field_errors,
            passed_rules=fields.passed_rules,
            failed_rules=fields.failed_rules,
            warnings=fields.warnings,
        )

    def validate_schema(self, candidate: Any) -> ValidationOutcome:
        """
        Structural check only: field types, required fields, closed role set.

        A failure carries one generic message and no per-field detail.
        """
        payload = _as_payload(candidate)
        if payload is not None:
            try:
                UserRecord.model_validate(payload)
                return ValidationOutcome(valid=True)
            except (SchemaValidationError, TypeError, ValueError) as e:
                logger.debug(f"Schema check failed: {e}")

        return ValidationOutcome(valid=False, schema_valid=False, schema_error=SCHEMA_ERROR_MESSAGE)

    def validate_fields(self, candidate: Any) -> ValidationOutcome:
        """Field rules only, as used while a draft is being typed in."""
        payload = _as_payload(candidate)
        return self.engine.validate_payload(payload if payload is not None else {})

    def is_valid(self, candidate: Any) -> bool:
        return self.validate(candidate).valid


def _as_payload(candidate: Any) -> dict[str, Any] | None:
    if isinstance(candidate, UserRecord):
        return candidate.to_wire()
    if isinstance(candidate, Mapping):
        return dict(candidate)
    return None
