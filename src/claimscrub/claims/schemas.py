"""
Claim Schemas for ClaimScrub.

Typed, lenient pydantic view of a claim. Every field is optional and
unknown keys are kept: the scrubber has to see malformed data to report
it, so nothing here rejects a value the rules are meant to flag.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Component Models
# =============================================================================


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


class Address(_Lenient):
    """Postal address."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


class PatientInfo(_Lenient):
    """Patient demographics."""

    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | str | None = None
    gender: str | None = None
    address: Address | None = None


class InsuranceInfo(_Lenient):
    """Primary insurance coverage."""

    payer_id: str | None = None
    policy_number: str | None = None
    group_number: str | None = None
    coverage_start: date | str | None = None
    coverage_end: date | str | None = None
    timely_filing_limit: int | None = Field(None, ge=1, description="Payer filing limit in days")


class ProviderInfo(_Lenient):
    """Rendering provider."""

    npi: str | None = None
    tax_id: str | None = None


class ProcedureLine(_Lenient):
    """One service line (CPT/HCPCS)."""

    code: str | None = None
    charge: float | None = None
    diagnosis_pointers: list[int] = Field(default_factory=list)

    @field_validator("diagnosis_pointers", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Treat a null pointer list as empty."""
        return [] if v is None else v


# =============================================================================
# Main Claim Record
# =============================================================================


class ClaimRecord(_Lenient):
    """
    Professional claim snapshot as handed to the scrubber.

    Field names match the dotted paths used by rules and patches.
    """

    claim_id: str | None = None
    patient: PatientInfo | None = None
    insurance: InsuranceInfo | None = None
    provider: ProviderInfo | None = None
    diagnosis_codes: list[str] = Field(default_factory=list)
    procedures: list[ProcedureLine] = Field(default_factory=list)
    service_date: date | str | None = None
    place_of_service: str | None = None
    total_charges: float | None = None

    @field_validator("place_of_service", mode="before")
    @classmethod
    def pos_to_string(cls, v):
        """Place of service codes arrive as ints from some sources."""
        if isinstance(v, int) and not isinstance(v, bool):
            return f"{v:02d}"
        return v
