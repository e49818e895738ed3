"""
Field rule engine and configuration management.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, default_user_rules
from .rule_engine import RuleEngine

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "default_user_rules",
]
