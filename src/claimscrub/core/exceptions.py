"""
Custom exceptions for ClaimScrub.
"""


class ClaimScrubError(Exception):
    """Base exception for all ClaimScrub errors."""

    pass


# =============================================================================
# Rule Engine Exceptions
# =============================================================================


class RuleEngineError(ClaimScrubError):
    """Base exception for rule engine errors."""

    pass


class RuleDefinitionError(RuleEngineError):
    """Raised when a rule class is declared inconsistently."""

    pass


class DuplicateRuleError(RuleEngineError):
    """Raised when two rules in one catalog share an id."""

    pass


# =============================================================================
# AutoFix Exceptions
# =============================================================================


class AutoFixError(ClaimScrubError):
    """Base exception for AutoFix errors."""

    pass


class PatchApplicationError(AutoFixError):
    """Raised when patch application fails."""

    pass
