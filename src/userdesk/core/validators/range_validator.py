"""
RangeValidator - numeric bounds, inclusive or exclusive.
"""

import math
import operator
from typing import Any

from .base_validator import BaseValidator

# parameter -> (comparison that must hold, failure message template)
BOUNDS = {
    "min": (operator.ge, "Value {value} is less than minimum {bound}"),
    "min_exclusive": (operator.gt, "Value {value} must be greater than {bound}"),
    "max": (operator.le, "Value {value} exceeds maximum {bound}"),
    "max_exclusive": (operator.lt, "Value {value} must be less than {bound}"),
}


class RangeValidator(BaseValidator):
    """
    Checks a number against any of ``min``, ``max``, ``min_exclusive`` and
    ``max_exclusive``. None is left to the required_field rule; booleans and
    NaN are rejected.
    """

    rule_type = "range"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.bounds = {key: self.parameters[key] for key in BOUNDS if self.parameters.get(key) is not None}
        if not self.bounds:
            raise ValueError(f"RangeValidator requires at least one of: {', '.join(BOUNDS)}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if value is None:
            return

        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self.fail(f"Value must be numeric, got {type(value).__name__}")
        if isinstance(value, float) and math.isnan(value):
            raise self.fail("Value is not a number")

        for key, bound in self.bounds.items():
            holds, template = BOUNDS[key]
            if not holds(value, bound):
                raise self.fail(template.format(value=value, bound=bound))
