"""
Defensive field access for claim snapshots.

Claims arrive either as plain mappings or as objects exposing the same names
as attributes (e.g. pydantic models). Reads never raise: anything missing
along a dotted path reads as None.
"""

import copy
import logging
import math
from collections.abc import Mapping, MutableMapping
from datetime import date, datetime
from typing import Any

from claimscrub.core.constants import DATE_PARSE_FORMATS
from claimscrub.core.exceptions import PatchApplicationError

logger = logging.getLogger(__name__)

MIN_VALID_YEAR = 1900
MAX_VALID_YEAR = 2100


def _get_child(node: Any, key: str) -> Any:
    if node is None:
        return None
    if isinstance(node, Mapping):
        return node.get(key)
    if isinstance(node, (list, tuple)):
        if key.isdigit() and int(key) < len(node):
            return node[int(key)]
        return None
    return getattr(node, key, None)


def get_path(claim: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted path ("patient.address.zip_code") against a claim."""
    node = claim
    for part in path.split("."):
        node = _get_child(node, part)
        if node is None:
            return default
    return node


def set_path(claim: Any, path: str, value: Any) -> None:
    """Assign a leaf value, creating intermediate mappings where a dict claim lacks them."""
    parts = path.split(".")
    target = claim
    for part in parts[:-1]:
        child = _get_child(target, part)
        if child is None:
            if not isinstance(target, MutableMapping):
                raise PatchApplicationError(f"Cannot create '{part}' on {type(target).__name__} for path {path}")
            child = target[part] = {}
        target = child

    key = parts[-1]
    if isinstance(target, MutableMapping):
        target[key] = value
    else:
        try:
            setattr(target, key, value)
        except (AttributeError, TypeError, ValueError) as e:
            raise PatchApplicationError(f"Cannot set {path}: {e}") from e


def get_text(claim: Any, path: str) -> str | None:
    """Read a string field, trimmed; blank or non-string values read as None."""
    value = get_path(claim, path)
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def get_list(claim: Any, path: str) -> list[Any]:
    value = get_path(claim, path)
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_number(value: Any) -> float | None:
    """Numeric view of a charge-like value (bools, NaN, infinities and junk are not numbers)."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_date(value: Any) -> date | None:
    """
    Parse a claim date.

    Accepts date and datetime objects, ISO 8601 strings (with or without a
    time part) and the formats in DATE_PARSE_FORMATS.
    Returns None for anything unparseable or outside 1900-2100.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        parsed = _parse_date_string(value.strip())
    else:
        return None

    if parsed is None or not MIN_VALID_YEAR <= parsed.year <= MAX_VALID_YEAR:
        return None
    return parsed


def _parse_date_string(text: str) -> date | None:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DATE_PARSE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def as_dict(claim: Any) -> dict[str, Any]:
    """Detached dict snapshot of a claim."""
    if hasattr(claim, "model_dump"):
        return claim.model_dump()
    if isinstance(claim, Mapping):
        return copy.deepcopy(dict(claim))
    return copy.deepcopy(vars(claim))


def claim_identifier(claim: Any) -> str:
    return str(get_path(claim, "claim_id") or get_path(claim, "id") or "unknown")
