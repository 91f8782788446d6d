"""Field-level comparison of two claim snapshots."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from claimscrub.autofix.models import FieldChange
from claimscrub.claims.access import as_dict

logger = logging.getLogger(__name__)


class ClaimDiff(BaseModel):
    changes: dict[str, FieldChange] = Field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def change_count(self) -> int:
        return len(self.changes)


def compare_claims(before: Any, after: Any) -> ClaimDiff:
    """
    Diff two claims leaf by leaf.

    Nested mappings are walked; lists and scalars compare as whole values.
    Keys present on either side are reported.
    """
    changes: dict[str, FieldChange] = {}
    _walk(as_dict(before), as_dict(after), "", changes)
    return ClaimDiff(changes=changes)


def _walk(old: Mapping, new: Mapping, prefix: str, out: dict[str, FieldChange]) -> None:
    for key in list(old) + [k for k in new if k not in old]:
        path = f"{prefix}.{key}" if prefix else str(key)
        a, b = old.get(key), new.get(key)
        if isinstance(a, Mapping) and isinstance(b, Mapping):
            _walk(a, b, path, out)
        elif isinstance(b, Mapping) and a is None:
            _walk({}, b, path, out)
        elif a != b:
            out[path] = FieldChange(from_value=a, to_value=b)
