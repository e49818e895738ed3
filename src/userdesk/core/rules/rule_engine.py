"""
Rule engine for draft users.

Turns rule definitions (from YAML, the builder, or the built-in defaults)
into validators and runs every one of them over a draft payload.
"""

from collections import Counter
from collections.abc import Mapping
from typing import Any, NamedTuple

from userdesk.core.models import ValidationOutcome
from userdesk.core.validators import (
    BaseValidator,
    LengthValidator,
    PredicateValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
)


class BoundRule(NamedTuple):
    """A rule definition with its validator built."""

    name: str
    severity: str
    message: str | None
    validator: BaseValidator


class RuleEngine:
    """
    Applies field rules to draft users.

    Rules are evaluated independently and in definition order. A field that
    fails several rules reports the message of the first one. Rules with
    severity "warning" never make a draft invalid.

    Each rule definition is a dict with ``rule_name``, ``rule_type`` and
    ``field_name``, plus optional ``parameters``, ``message`` (replaces the
    validator's own text), ``severity`` and ``enabled``.
    """

    VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
        cls.rule_type: cls
        for cls in (
            RequiredFieldValidator,
            TypeValidator,
            RangeValidator,
            LengthValidator,
            RegexValidator,
            PredicateValidator,
        )
    }

    def __init__(self, rules: list[dict[str, Any]]):
        self.rules = rules
        self.bound_rules = [self._bind(rule) for rule in rules if rule.get("enabled", True)]

    def _bind(self, rule: dict[str, Any]) -> BoundRule:
        name = rule["rule_name"]
        validator_class = self.VALIDATOR_REGISTRY.get(rule["rule_type"])
        if validator_class is None:
            raise ValueError(f"Unknown rule type: {rule['rule_type']}")

        try:
            validator = validator_class(rule["field_name"], rule.get("parameters") or {})
        except (ValueError, TypeError) as e:
            raise ValueError(f"Failed to create validator for rule '{name}': {e}") from e

        return BoundRule(name, rule.get("severity", "error"), rule.get("message"), validator)

    def validate_payload(self, payload: Mapping[str, Any]) -> ValidationOutcome:
        """
        Run every rule over a draft payload.

        Only the rule fields of the outcome are filled; structural checks
        belong to the caller.
        """
        record = dict(payload)
        outcome: dict[str, Any] = {
            "passed_rules": [],
            "failed_rules": [],
            "warnings": [],
            "field_errors": {},
        }

        for rule in self.bound_rules:
            field_name = rule.validator.field_name
            try:
                rule.validator.validate(record.get(field_name), record)
            except ValidationError as e:
                if rule.severity != "error":
                    outcome["warnings"].append(rule.name)
                    continue
                outcome["failed_rules"].append(rule.name)
                outcome["field_errors"].setdefault(field_name, rule.message or e.message)
            else:
                outcome["passed_rules"].append(rule.name)

        return ValidationOutcome(valid=not outcome["failed_rules"], **outcome)

    def get_rule_summary(self) -> dict[str, Any]:
        """Rule counts by type, field and severity."""
        return {
            "total_rules": len(self.bound_rules),
            "rules_by_type": dict(Counter(r.validator.rule_type for r in self.bound_rules)),
            "rules_by_field": dict(Counter(r.validator.field_name for r in self.bound_rules)),
            "rules_by_severity": dict(Counter(r.severity for r in self.bound_rules)),
        }
