"""
Claims module for ClaimScrub.

Claim schemas and defensive field access helpers.
"""

from claimscrub.claims.access import (
    as_dict,
    as_number,
    claim_identifier,
    get_list,
    get_path,
    get_text,
    parse_date,
    set_path,
)
from claimscrub.claims.schemas import (
    Address,
    ClaimRecord,
    InsuranceInfo,
    PatientInfo,
    ProcedureLine,
    ProviderInfo,
)

__all__ = [
    # Schemas
    "Address",
    "ClaimRecord",
    "InsuranceInfo",
    "PatientInfo",
    "ProcedureLine",
    "ProviderInfo",
    # Access
    "as_dict",
    "as_number",
    "claim_identifier",
    "get_list",
    "get_path",
    "get_text",
    "parse_date",
    "set_path",
]
