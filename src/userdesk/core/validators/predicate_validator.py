"""
PredicateValidator - validates using an arbitrary Python predicate.
"""

from typing import Any

from .base_validator import BaseValidator


class PredicateValidator(BaseValidator):
    """
    Validates using a caller-supplied predicate over the field value.

    Parameters:
    - predicate: A callable taking (value, record) and returning a truthy
                 value when the field is acceptable
    - error_message: Optional message used when the predicate fails

    A predicate that raises is treated as failing; the exception text is
    appended to the error message.
    """

    rule_type = "predicate"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.predicate = self.parameters.get("predicate")
        if not self.predicate:
            raise ValueError("PredicateValidator requires 'predicate' parameter")

        if not callable(self.predicate):
            raise ValueError("predicate must be callable")

        self.error_message = self.parameters.get("error_message", "Predicate validation failed")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        try:
            accepted = self.predicate(value, record)
        except Exception as e:
            raise self.fail(f"{self.error_message}: {str(e)}")

        if not accepted:
            raise self.fail(self.error_message)
