"""
Validation rule engine, default rule sets and rule configuration.
"""

from .defaults import default_rules_for
from .rule_config import RuleConfigBuilder, RuleConfigLoader
from .rule_engine import RuleEngine

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "default_rules_for",
]
