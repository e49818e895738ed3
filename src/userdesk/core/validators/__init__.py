"""
Field rule implementations.

Provides validators for required fields, type checking, ranges, string
lengths, regex patterns, and arbitrary predicates.
"""

from .base_validator import BaseValidator, ValidationError
from .length_validator import LengthValidator
from .predicate_validator import PredicateValidator
from .range_validator import RangeValidator
from .regex_validator import EMAIL_PATTERN, RegexValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "TypeValidator",
    "RangeValidator",
    "LengthValidator",
    "RegexValidator",
    "PredicateValidator",
    "EMAIL_PATTERN",
]
