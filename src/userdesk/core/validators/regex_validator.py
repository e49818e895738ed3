"""
RegexValidator - string values must match a pattern.
"""

import re
from typing import Any

from .base_validator import BaseValidator

# local@domain, where the domain has at least one dot and no empty labels
EMAIL_PATTERN = r"^[^\s@]+@[^\s@.]+(\.[^\s@.]+)+$"


class RegexValidator(BaseValidator):
    """
    Matches a string field against ``pattern`` (text or compiled), anchored at
    the start. ``flags`` applies when the pattern is given as text.
    """

    rule_type = "regex"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.pattern = self._compile(self.parameters.get("pattern"), self.parameters.get("flags", 0))

    @staticmethod
    def _compile(pattern: Any, flags: int) -> re.Pattern:
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")
        if isinstance(pattern, re.Pattern):
            return pattern
        if not isinstance(pattern, str):
            raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern).__name__}")
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}") from e

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if value is None:
            return
        if self.pattern.match(self.require_str(value)) is None:
            raise self.fail(f"Value '{value}' does not match pattern '{self.pattern.pattern}'")
