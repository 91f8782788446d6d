"""Claim scrubbing rules organized by category."""

from __future__ import annotations

from .billing_rules import BILLING_RULES, PlaceOfServiceRequired, TotalChargesMatch
from .date_rules import DATE_RULES, ServiceDateNotFuture, ServiceDateRequired, TimelyFilingLimit
from .diagnosis_rules import DIAGNOSIS_RULES, DiagnosisRequired, Icd10Format, MaxDiagnosisCodes
from .insurance_rules import (
    INSURANCE_INFO_RULES,
    CoverageActive,
    GroupNumberForPayer,
    PayerIdRequired,
    PolicyNumberRequired,
)
from .patient_rules import (
    PATIENT_INFO_RULES,
    PatientAddressRequired,
    PatientDobRequired,
    PatientGenderRequired,
    PatientNameRequired,
    ZipCodeFormat,
)
from .procedure_rules import (
    PROCEDURE_RULES,
    CptHcpcsFormat,
    DiagnosisPointerValid,
    ProcedureChargeRequired,
    ProcedureRequired,
)
from .provider_rules import PROVIDER_INFO_RULES, ProviderNpiRequired, ProviderTaxIdRequired, TaxIdFormat

# Catalog order: patient, insurance, provider, diagnosis, procedure, dates, billing
CATEGORY_RULE_SETS = (
    PATIENT_INFO_RULES,
    INSURANCE_INFO_RULES,
    PROVIDER_INFO_RULES,
    DIAGNOSIS_RULES,
    PROCEDURE_RULES,
    DATE_RULES,
    BILLING_RULES,
)

__all__ = [
    "CATEGORY_RULE_SETS",
    # Patient rules
    "PATIENT_INFO_RULES",
    "PatientNameRequired",
    "PatientDobRequired",
    "PatientGenderRequired",
    "PatientAddressRequired",
    "ZipCodeFormat",
    # Insurance rules
    "INSURANCE_INFO_RULES",
    "PolicyNumberRequired",
    "GroupNumberForPayer",
    "CoverageActive",
    "PayerIdRequired",
    # Provider rules
    "PROVIDER_INFO_RULES",
    "ProviderNpiRequired",
    "ProviderTaxIdRequired",
    "TaxIdFormat",
    # Diagnosis rules
    "DIAGNOSIS_RULES",
    "DiagnosisRequired",
    "Icd10Format",
    "MaxDiagnosisCodes",
    # Procedure rules
    "PROCEDURE_RULES",
    "ProcedureRequired",
    "CptHcpcsFormat",
    "ProcedureChargeRequired",
    "DiagnosisPointerValid",
    # Date rules
    "DATE_RULES",
    "ServiceDateRequired",
    "ServiceDateNotFuture",
    "TimelyFilingLimit",
    # Billing rules
    "BILLING_RULES",
    "PlaceOfServiceRequired",
    "TotalChargesMatch",
]
