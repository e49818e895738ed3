"""
RequiredFieldValidator - the field must be present with a usable value.
"""

from typing import Any

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Rejects a draft field that is absent, None, or blank.

    Whitespace-only strings count as blank unless ``allow_empty_string`` is set.
    """

    rule_type = "required_field"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_empty_string = bool(self.parameters.get("allow_empty_string", False))

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record:
            raise self.fail("Field is missing from record")
        if value is None:
            raise self.fail("Field value is null")
        blank = isinstance(value, str) and not value.strip()
        if blank and not self.allow_empty_string:
            raise self.fail("Field value is empty string")
