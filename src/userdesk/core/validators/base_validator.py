"""
Field rule base class.

A rule inspects one field of a draft user and raises ValidationError when the
value is not acceptable. Rules never mutate the draft.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """One field rule rejected a value."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    A configured check of one draft field.

    Subclasses set ``rule_type`` to the name rule definitions use for them
    and implement ``validate``.
    """

    rule_type: str = ""

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Check ``value``, the draft's ``field_name`` entry.

        ``record`` is the whole draft, for rules that compare fields.
        Raises ValidationError on failure.
        """

    def fail(self, message: str) -> ValidationError:
        return ValidationError(rule_name=self.rule_type, field_name=self.field_name, message=message)

    def require_str(self, value: Any) -> str:
        if not isinstance(value, str):
            raise self.fail(f"Value must be a string, got {type(value).__name__}")
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name!r}, {self.parameters!r})"
