"""
TypeValidator - the field must hold, or be convertible to, a given type.
"""

from typing import Any

from .base_validator import BaseValidator

TYPE_NAMES = {
    "int": int,
    "integer": int,
    "float": float,
    "decimal": float,
    "double": float,
    "str": str,
    "string": str,
    "bool": bool,
    "boolean": bool,
}

BOOL_WORDS = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}


def _to_bool(value: Any) -> bool:
    if not isinstance(value, str):
        return bool(value)
    try:
        return BOOL_WORDS[value.lower()]
    except KeyError:
        raise ValueError(f"Cannot parse '{value}' as boolean") from None


def _to_int(value: Any) -> int:
    # int(25.5) would truncate
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value} is not a whole number")
    return int(value)


class TypeValidator(BaseValidator):
    """
    Checks a field's type, converting when ``coerce`` is on (the default).

    Form inputs arrive as text, so "25" passes an int rule unless coercion is
    disabled. ``bool`` values never pass for numbers or strings. Types are
    given by name ("int", "integer", "decimal", ...) or as a class.
    """

    rule_type = "type_check"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected = self.parameters.get("expected_type")
        if not expected:
            raise ValueError("TypeValidator requires 'expected_type' parameter")
        if isinstance(expected, str):
            if expected.lower() not in TYPE_NAMES:
                raise ValueError(f"Unsupported type: {expected}")
            expected = TYPE_NAMES[expected.lower()]

        self.expected_type: type = expected
        self.coerce = self.parameters.get("coerce", True)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if value is None or self._matches(value):
            return

        expected = self.expected_type.__name__
        actual = type(value).__name__
        if not self.coerce:
            raise self.fail(f"Expected {expected}, got {actual}")

        try:
            self._convert(value)
        except (ValueError, TypeError, OverflowError) as e:
            raise self.fail(f"Cannot coerce {actual} to {expected}: {e}") from e

    def _matches(self, value: Any) -> bool:
        if isinstance(value, bool):
            return self.expected_type is bool
        return isinstance(value, self.expected_type)

    def _convert(self, value: Any) -> Any:
        if self.expected_type is bool:
            return _to_bool(value)
        if isinstance(value, bool):
            raise TypeError("booleans are not coerced to numbers or strings")
        if self.expected_type is int:
            return _to_int(value)
        return self.expected_type(value)
