"""Patch Applier for ClaimScrub."""

import copy, logging, uuid
from enum import Enum
from pathlib import Path
from typing import Any
import yaml
from claimscrub.autofix.models import AuditEntry, FieldChange, FixResult, Patch, PatchOperation
from claimscrub.claims.access import claim_identifier, set_path

logger = logging.getLogger(__name__)

class ApplyMode(str, Enum): DRY_RUN = "dry-run"; COMMIT = "commit"

class PatchApplier:
    """Applies described patches to claims, with an optional YAML audit trail."""

    def __init__(self, audit_dir: Path | None = None, user: str = "system"):
        self.audit_dir = audit_dir
        self.user = user
        self._applied_patches: list[AuditEntry] = []

    @property
    def applied_patches(self) -> list[AuditEntry]:
        return list(self._applied_patches)

    def apply(self, patch: Patch, claim: Any, mode: ApplyMode | str = ApplyMode.COMMIT) -> Any:
        """Write every change of the patch; COMMIT mutates claim, DRY_RUN returns a modified copy."""
        mode = ApplyMode(mode)
        working = copy.deepcopy(claim) if mode == ApplyMode.DRY_RUN else claim

        for op in patch.changes: self._apply_op(op, working)
        logger.debug("Applied patch %s (%s)", patch.rule_id, mode.value)
        if mode == ApplyMode.COMMIT: self.create_audit(patch, claim_identifier(working))
        return working

    def _apply_op(self, op: PatchOperation, claim: Any) -> None:
        if op.op == "set": set_path(claim, op.field, op.value)

    def create_audit(self, patch: Patch, claim_id: str) -> AuditEntry:
        entry = AuditEntry(patch_id=str(uuid.uuid4())[:8], claim_id=claim_id, rule_id=patch.rule_id, user=self.user, changes=patch.changes)
        self._applied_patches.append(entry)
        if self.audit_dir:
            p = Path(self.audit_dir) / f"audit_{entry.applied_at.strftime('%Y%m%d_%H%M%S')}_{entry.patch_id}.yaml"
            try: p.parent.mkdir(parents=True, exist_ok=True); p.write_text(yaml.dump(entry.model_dump(mode='json'), allow_unicode=True))
            except OSError as e: logger.error("Audit save failed: %s", e)
        return entry

def changes_of(patch: Patch) -> dict[str, FieldChange]:
    return {op.field: FieldChange(from_value=op.old_value, to_value=op.value) for op in patch.changes}

def apply_patch(patch: Patch, claim: Any, mode: str = "dry-run") -> Any:
    return PatchApplier().apply(patch, claim, mode)

def export_fix_log_yaml(fix_log: list[FixResult], output_path: Path | str) -> Path:
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(yaml.dump([f.to_yaml_dict() for f in fix_log], allow_unicode=True, sort_keys=False), encoding="utf-8")
    logger.info("Exported %d fixes to %s", len(fix_log), out)
    return out
