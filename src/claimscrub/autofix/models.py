"""Autofix Models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PatchOperation(BaseModel):
    op: Literal["set"] = "set"
    field: str
    value: Any = None
    old_value: Any | None = None


class Patch(BaseModel):
    """Described repair for one rule: what to write where, not yet applied."""

    rule_id: str
    changes: list[PatchOperation]
    rationale: str

    @property
    def fields(self) -> list[str]:
        return [c.field for c in self.changes]

    def to_yaml_dict(self) -> dict:
        return self.model_dump(mode="json")


class FieldChange(BaseModel):
    from_value: Any = Field(None, alias="from")
    to_value: Any = Field(None, alias="to")
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FixAttempt(BaseModel):
    fixed: bool
    changes: dict[str, FieldChange] = Field(default_factory=dict)
    message: str = ""


class FixResult(BaseModel):
    rule_id: str
    rule_name: str
    changes: dict[str, FieldChange]
    message: str

    def to_yaml_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AuditEntry(BaseModel):
    patch_id: str; claim_id: str; rule_id: str; user: str
    changes: list[PatchOperation] = Field(default_factory=list)
    applied_at: datetime = Field(default_factory=datetime.now)


@dataclass(slots=True)
class AutoFixOutcome:
    """Claim after fixes (the input object in commit mode, a copy in dry-run) plus its fix log."""

    claim: Any
    fix_log: list[FixResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def fixed_count(self) -> int:
        return len(self.fix_log)

    @property
    def fixed_rule_ids(self) -> list[str]:
        return [f.rule_id for f in self.fix_log]
