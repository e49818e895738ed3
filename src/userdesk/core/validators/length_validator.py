"""
LengthValidator - validates the length of string values.
"""

from typing import Any

from .base_validator import BaseValidator


class LengthValidator(BaseValidator):
    """
    Validates that a string field has a length within bounds.

    Parameters:
    - min_length: Minimum number of characters (inclusive)
    - max_length: Maximum number of characters (inclusive)
    """

    rule_type = "length"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = self.parameters.get("min_length")
        self.max_length = self.parameters.get("max_length")

        if self.min_length is None and self.max_length is None:
            raise ValueError("LengthValidator requires at least one of: min_length, max_length")

        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) cannot exceed max_length ({self.max_length})"
            )

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        # Skip validation for None (handled by required_field validator)
        if value is None:
            return

        length = len(self.require_str(value))

        if self.min_length is not None and length < self.min_length:
            raise self.fail(f"Length {length} is less than minimum {self.min_length}")

        if self.max_length is not None and length > self.max_length:
            raise self.fail(f"Length {length} exceeds maximum {self.max_length}")
