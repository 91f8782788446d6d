"""
Pytest configuration and shared fixtures for ClaimScrub tests.
"""

import copy
from datetime import date
from typing import Any

import pytest

from claimscrub.claims.schemas import ClaimRecord
from claimscrub.core.config import Settings
from claimscrub.rules.catalog import RuleCatalog, default_catalog
from claimscrub.rules.engine import ScrubEngine, ScrubOptions
from claimscrub.rules.models import RuleContext

AS_OF = date(2024, 3, 1)


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def context(settings: Settings) -> RuleContext:
    """Rule context pinned to a fixed evaluation date."""
    return RuleContext.from_settings(settings, as_of=AS_OF)


@pytest.fixture
def options() -> ScrubOptions:
    """Full-catalog scrub options pinned to AS_OF."""
    return ScrubOptions(as_of=AS_OF)


# =============================================================================
# Engine
# =============================================================================


@pytest.fixture
def catalog() -> RuleCatalog:
    return default_catalog()


@pytest.fixture
def engine(catalog: RuleCatalog, settings: Settings) -> ScrubEngine:
    return ScrubEngine(catalog, settings=settings)


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
def clean_claim_dict() -> dict[str, Any]:
    """Claim that passes every built-in rule as of AS_OF."""
    return {
        "claim_id": "CLM-1001",
        "patient": {
            "first_name": "Jane",
            "last_name": "Doe",
            "date_of_birth": "1980-05-15",
            "gender": "F",
            "address": {
                "street": "1 Main St",
                "city": "Springfield",
                "state": "IL",
                "zip_code": "62701",
            },
        },
        "insurance": {
            "payer_id": "AETNA",
            "policy_number": "POL123456",
            "group_number": "GRP001",
            "coverage_start": "2024-01-01",
            "coverage_end": "2024-12-31",
        },
        "provider": {"npi": "1234567890", "tax_id": "12-3456789"},
        "diagnosis_codes": ["J18.9", "E11.9"],
        "procedures": [
            {"code": "99213", "charge": 100.0, "diagnosis_pointers": [1]},
            {"code": "J1100", "charge": 50.25, "diagnosis_pointers": [1, 2]},
        ],
        "service_date": "2024-02-15",
        "place_of_service": "11",
        "total_charges": 150.25,
    }


@pytest.fixture
def claim_factory(clean_claim_dict: dict):
    """Build a fresh clean claim; keyword names use "__" between nested keys."""

    def _make(**overrides: Any) -> dict[str, Any]:
        claim = copy.deepcopy(clean_claim_dict)
        for dotted, value in overrides.items():
            parts = dotted.split("__")
            target = claim
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            target[parts[-1]] = value
        return claim

    return _make


@pytest.fixture
def clean_claim_record(clean_claim_dict: dict) -> ClaimRecord:
    """Clean claim as Pydantic model."""
    return ClaimRecord(**clean_claim_dict)
