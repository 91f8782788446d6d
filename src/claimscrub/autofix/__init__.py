"""
AutoFix module for ClaimScrub.

Describes, applies and audits field-level repairs for rule violations.
"""

from claimscrub.autofix.models import (
    AuditEntry,
    AutoFixOutcome,
    FieldChange,
    FixAttempt,
    FixResult,
    Patch,
    PatchOperation,
)
from claimscrub.autofix.applier import (
    ApplyMode,
    PatchApplier,
    apply_patch,
    export_fix_log_yaml,
)
from claimscrub.autofix.diff import ClaimDiff, compare_claims
from claimscrub.autofix.executor import AutoFixExecutor, auto_fix

__all__ = [
    "Patch", "PatchOperation", "FieldChange", "FixAttempt", "FixResult", "AuditEntry", "AutoFixOutcome",
    "PatchApplier", "ApplyMode", "apply_patch", "export_fix_log_yaml",
    "ClaimDiff", "compare_claims",
    "AutoFixExecutor", "auto_fix",
]
