"""Errors raised while building or loading framework rule sets."""
from typing import Optional


class RuleSetError(ValueError):
    """Raised when rule data is malformed (bad YAML, missing keys, wrong types)."""


class InvalidImportPatternError(RuleSetError):
    """Raised when an import pattern cannot be used for matching.

    Carries the offending pattern and the framework that declared it so a
    broken rules file can be fixed without hunting for the entry.
    """

    def __init__(self, pattern: object, framework: Optional[str], reason: str):
        self.pattern = pattern
        self.framework = framework
        self.reason = reason
        owner = f" (framework '{framework}')" if framework else ""
        super().__init__(f"Invalid import pattern {pattern!r}{owner}: {reason}")
