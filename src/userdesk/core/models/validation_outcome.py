"""
ValidationOutcome model representing the result of validating a draft user (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator


class ValidationOutcome(BaseModel):
    """
    Outcome of validating a draft user record.

    Note: ValidationOutcome is a pure projection of the draft it was computed
    from. It is recomputed on every change and never updated in place.

    Attributes:
        valid: Overall validity (schema check and every field rule passed)
        schema_valid: Whether the structural schema check passed
        schema_error: Generic message when the schema check failed
        field_errors: Message per failing field; passing fields have no entry
        passed_rules: Field rules that succeeded
        failed_rules: Field rules that failed
        warnings: Warning-severity rules that failed (do not affect validity)
    """

    valid: bool
    schema_valid: bool = True
    schema_error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    passed_rules: list[str] = Field(default_factory=list)
    failed_rules: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @field_validator('failed_rules')
    @classmethod
    def check_valid_consistency(cls, v, info):
        """Validate that valid=True implies failed_rules is empty."""
        if info.data.get('valid') and len(v) > 0:
            raise ValueError("valid=True but failed_rules is not empty")
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "valid": False,
                "schema_valid": True,
                "schema_error": None,
                "field_errors": {
                    "email": "Email must be formatted properly"
                },
                "passed_rules": ["name_required", "name_length", "age_required"],
                "failed_rules": ["email_regex"]
            }
        }

    def error_for(self, field_name: str) -> str | None:
        """Return the message for a field, or None if it passed."""
        return self.field_errors.get(field_name)
