"""
Where field rules come from.

Rules are plain dicts consumed by RuleEngine. They can be read from a YAML
file (RuleConfigLoader), assembled in code (RuleConfigBuilder), or taken
from default_user_rules(), the set the add-user form uses.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from userdesk.core.validators import EMAIL_PATTERN

SEVERITIES = ("error", "warning")


def rule_definition(
    rule_name: str,
    rule_type: str,
    field_name: str,
    parameters: dict[str, Any] | None = None,
    message: str | None = None,
    severity: str = "error",
    enabled: bool = True,
) -> dict[str, Any]:
    """The dict shape RuleEngine accepts."""
    if severity not in SEVERITIES:
        raise ValueError(f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'")
    return {
        "rule_name": rule_name,
        "rule_type": rule_type,
        "field_name": field_name,
        "parameters": parameters or {},
        "message": message,
        "severity": severity,
        "enabled": enabled,
    }


def _given(**params) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


class RuleConfigLoader:
    """
    Reads field rules from a YAML file, grouped by field:

    ```yaml
    rules:
      name:
        - type: required_field
          message: Name is required
        - type: length
          params: {min_length: 2, max_length: 50}
      age:
        - type: type_check
          name: age_is_int
          params: {expected_type: int, coerce: false}
        - type: range
          severity: warning
          params: {min: 1, max: 100}
    ```

    Unnamed rules are called ``<field>_<type>_<position>``. ``parameters`` is
    accepted as a synonym for ``params``.
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Parse the file into rule dicts.

        Raises:
            ValueError: If the file has no rules section or a rule is malformed
        """
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Rule configuration is not valid YAML: {e}") from e

        if not isinstance(config, dict) or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        rules = []
        for field_name, entries in (config["rules"] or {}).items():
            if not isinstance(entries, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")
            rules.extend(self._parse_rule(field_name, entry, position) for position, entry in enumerate(entries))
        return rules

    def _parse_rule(self, field_name: str, entry: Any, position: int) -> dict[str, Any]:
        if not isinstance(entry, dict) or "type" not in entry:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = entry["type"]
        return rule_definition(
            rule_name=entry.get("name", f"{field_name}_{rule_type}_{position}"),
            rule_type=rule_type,
            field_name=field_name,
            parameters=entry.get("params", entry.get("parameters")),
            message=entry.get("message"),
            severity=entry.get("severity", "error"),
            enabled=entry.get("enabled", True),
        )


class RuleConfigBuilder:
    """
    Fluent construction of rule dicts. Rule names are ``<field>_<kind>``.
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(self, kind: str, rule_type: str, field_name: str, parameters, message) -> "RuleConfigBuilder":
        self.rules.append(rule_definition(f"{field_name}_{kind}", rule_type, field_name, parameters, message))
        return self

    def add_required_field(
        self, field_name: str, allow_empty_string: bool = False, message: str | None = None
    ) -> "RuleConfigBuilder":
        return self._add("required", "required_field", field_name,
                         {"allow_empty_string": allow_empty_string}, message)

    def add_type_check(
        self, field_name: str, expected_type: str, coerce: bool = True, message: str | None = None
    ) -> "RuleConfigBuilder":
        return self._add("type_check", "type_check", field_name,
                         {"expected_type": expected_type, "coerce": coerce}, message)

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None,
        message: str | None = None,
    ) -> "RuleConfigBuilder":
        """Inclusive numeric bounds; either may be omitted."""
        return self._add("range", "range", field_name, _given(min=min_value, max=max_value), message)

    def add_length(
        self,
        field_name: str,
        min_length: int | None = None,
        max_length: int | None = None,
        message: str | None = None,
    ) -> "RuleConfigBuilder":
        return self._add("length", "length", field_name,
                         _given(min_length=min_length, max_length=max_length), message)

    def add_regex(self, field_name: str, pattern: str, message: str | None = None) -> "RuleConfigBuilder":
        return self._add("regex", "regex", field_name, {"pattern": pattern}, message)

    def add_predicate(
        self,
        field_name: str,
        predicate: Callable[[Any, dict[str, Any]], bool],
        message: str,
        rule_name: str | None = None,
    ) -> "RuleConfigBuilder":
        """Rule backed by ``predicate(value, draft)``."""
        self.rules.append(rule_definition(
            rule_name or f"{field_name}_predicate", "predicate", field_name,
            {"predicate": predicate, "error_message": message}, message,
        ))
        return self

    def build(self) -> list[dict[str, Any]]:
        return self.rules


def default_user_rules() -> list[dict[str, Any]]:
    """
    Field rules applied to a draft user while it is being edited.

    Company and role carry no rule: company is optional and role is picked
    from a closed list.
    """
    return (
        RuleConfigBuilder()
        .add_required_field("name", message="Name is required")
        .add_length("name", min_length=2, max_length=50,
                    message="Name must be between 2 and 50 characters long")
        .add_required_field("age", message="Age is required")
        .add_type_check("age", "int", coerce=False, message="Age must be an integer")
        .add_range("age", min_value=1, max_value=100, message="Age must be between 1 and 100")
        .add_required_field("email", message="Email is required")
        .add_regex("email", EMAIL_PATTERN, message="Email must be formatted properly")
        .build()
    )
