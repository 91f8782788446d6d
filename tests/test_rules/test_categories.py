"""Tests for the built-in rule bodies, one class per category."""

from datetime import date

import pytest

from claimscrub.rules.categories import (
    CoverageActive,
    CptHcpcsFormat,
    DiagnosisPointerValid,
    DiagnosisRequired,
    GroupNumberForPayer,
    Icd10Format,
    MaxDiagnosisCodes,
    PatientAddressRequired,
    PatientDobRequired,
    PatientGenderRequired,
    PatientNameRequired,
    PayerIdRequired,
    PlaceOfServiceRequired,
    PolicyNumberRequired,
    ProcedureChargeRequired,
    ProcedureRequired,
    ProviderNpiRequired,
    ProviderTaxIdRequired,
    ServiceDateNotFuture,
    ServiceDateRequired,
    TaxIdFormat,
    TimelyFilingLimit,
    TotalChargesMatch,
    ZipCodeFormat,
)
from claimscrub.rules.categories.patient_rules import format_zip
from claimscrub.rules.categories.provider_rules import format_tax_id
from claimscrub.rules.models import RuleContext


class TestPatientRules:
    """Tests for patient demographic rules."""

    def test_name_requires_both_parts(self, claim_factory, context):
        """Test blank last name fails after trimming."""
        outcome = PatientNameRequired().validate(claim_factory(patient__last_name="   "), context)

        assert not outcome.valid
        assert outcome.field == "patient.name"
        assert outcome.value == "Jane"

    def test_name_missing_patient_does_not_raise(self, context):
        """Test missing nested patient reads as absent."""
        outcome = PatientNameRequired().validate({}, context)

        assert not outcome.valid

    def test_dob_missing(self, claim_factory, context):
        """Test missing DOB gets the 'required' message."""
        rule = PatientDobRequired()
        claim = claim_factory(patient__date_of_birth=None)
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Patient date of birth is required"

    def test_dob_unparseable(self, claim_factory, context):
        """Test garbage DOB is invalid."""
        rule = PatientDobRequired()
        claim = claim_factory(patient__date_of_birth="not-a-date")
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Patient date of birth is invalid"

    def test_dob_in_future(self, claim_factory, context):
        """Test DOB after the evaluation date is rejected."""
        rule = PatientDobRequired()
        claim = claim_factory(patient__date_of_birth="2030-01-01")
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Date of birth cannot be in the future"

    def test_dob_accepts_date_object(self, claim_factory, context):
        """Test date objects are accepted as well as strings."""
        outcome = PatientDobRequired().validate(claim_factory(patient__date_of_birth=date(1980, 5, 15)), context)

        assert outcome.valid

    @pytest.mark.parametrize("gender", ["M", "F", "U", "male", "female", "unknown"])
    def test_gender_valid_values(self, claim_factory, context, gender):
        """Test every accepted gender value."""
        assert PatientGenderRequired().validate(claim_factory(patient__gender=gender), context).valid

    @pytest.mark.parametrize("gender", [None, "", "X", "Male", ["M"]])
    def test_gender_invalid_values(self, claim_factory, context, gender):
        """Test values outside the accepted set."""
        assert not PatientGenderRequired().validate(claim_factory(patient__gender=gender), context).valid

    def test_address_lists_missing_parts(self, claim_factory, context):
        """Test the message names each missing address part."""
        rule = PatientAddressRequired()
        claim = claim_factory(patient__address={"street": "1 Main St", "state": "IL"})
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Patient address missing: city, ZIP code"

    @pytest.mark.parametrize("zip_code", ["62701", "627011234", "62701-1234", "62701 1234", "627-01", None])
    def test_zip_valid(self, claim_factory, context, zip_code):
        """Test five or nine digits pass whatever the separators (and absent ZIP)."""
        assert ZipCodeFormat().validate(claim_factory(patient__address__zip_code=zip_code), context).valid

    @pytest.mark.parametrize("zip_code,digits", [("1234", 4), ("1234567", 7), ("62701-12", 7), ("ABCDE", 0)])
    def test_zip_invalid(self, claim_factory, context, zip_code, digits):
        """Test only the digit count decides."""
        outcome = ZipCodeFormat().validate(claim_factory(patient__address__zip_code=zip_code), context)

        assert not outcome.valid
        assert outcome.field == "patient.address.zip_code"
        assert outcome.details == {"digits": digits}

    def test_separated_zip_is_not_reported_by_engine(self, engine, options, claim_factory):
        """Test a separated nine-digit ZIP raises no violation, so nothing is auto-fixed."""
        report = engine.scrub(claim_factory(patient__address__zip_code="62701 1234"), options)

        assert not report.has_violation("PI005")
        assert report.auto_fixable_count == 0

    def test_format_zip(self):
        """Test ZIP formatting helper."""
        assert format_zip("62701 1234") == "62701-1234"
        assert format_zip("627-01") == "62701"
        assert format_zip("1234") is None

    def test_zip_fix_reformats(self, claim_factory, context):
        """Test fix describes the canonical value without mutating."""
        claim = claim_factory(patient__address__zip_code="62701 1234")
        patch = ZipCodeFormat().fix(claim, context)

        assert patch is not None
        assert patch.changes[0].field == "patient.address.zip_code"
        assert patch.changes[0].value == "62701-1234"
        assert patch.changes[0].old_value == "62701 1234"
        assert claim["patient"]["address"]["zip_code"] == "62701 1234"

    def test_zip_fix_wrong_length_is_noop(self, claim_factory, context):
        """Test no patch for a ZIP with the wrong digit count."""
        assert ZipCodeFormat().fix(claim_factory(patient__address__zip_code="1234"), context) is None


class TestInsuranceRules:
    """Tests for insurance rules."""

    def test_policy_number_blank(self, claim_factory, context):
        """Test whitespace policy number fails."""
        outcome = PolicyNumberRequired().validate(claim_factory(insurance__policy_number="  "), context)

        assert not outcome.valid
        assert outcome.field == "insurance.policy_number"

    def test_group_number_required_for_listed_payer(self, claim_factory, context):
        """Test group number missing for a payer that requires it."""
        rule = GroupNumberForPayer()
        claim = claim_factory(insurance__group_number=None, insurance__payer_id="CIGNA")
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Group number may be required for CIGNA"

    def test_group_number_payer_match_is_case_insensitive(self, claim_factory, context):
        """Test lower-case payer ids still match."""
        claim = claim_factory(insurance__group_number=None, insurance__payer_id="uhc")

        assert not GroupNumberForPayer().validate(claim, context).valid

    def test_group_number_not_required_for_other_payer(self, claim_factory, context):
        """Test unlisted payers do not need a group number."""
        claim = claim_factory(insurance__group_number=None, insurance__payer_id="MEDICARE")

        assert GroupNumberForPayer().validate(claim, context).valid

    def test_coverage_before_start(self, claim_factory, context):
        """Test service before coverage start."""
        rule = CoverageActive()
        claim = claim_factory(insurance__coverage_start="2024-03-01")
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert outcome.field == "insurance.coverage_start"
        assert rule.message(claim, outcome) == "Service date is before coverage start date"

    def test_coverage_after_end(self, claim_factory, context):
        """Test service after coverage end."""
        outcome = CoverageActive().validate(claim_factory(insurance__coverage_end="2024-01-31"), context)

        assert not outcome.valid
        assert outcome.field == "insurance.coverage_end"

    def test_coverage_window_unset(self, claim_factory, context):
        """Test no window means nothing to check."""
        claim = claim_factory(insurance__coverage_start=None, insurance__coverage_end=None)

        assert CoverageActive().validate(claim, context).valid

    def test_payer_id_required(self, claim_factory, context):
        """Test missing payer id."""
        assert not PayerIdRequired().validate(claim_factory(insurance__payer_id=""), context).valid


class TestProviderRules:
    """Tests for provider rules."""

    def test_npi_five_digits(self, claim_factory, context):
        """Test short NPI is an error with the length message."""
        rule = ProviderNpiRequired()
        claim = claim_factory(provider__npi="12345")
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert outcome.field == "provider.npi"
        assert rule.message(claim, outcome) == "NPI must be 10 digits"

    def test_npi_missing(self, claim_factory, context):
        """Test missing NPI message."""
        rule = ProviderNpiRequired()
        claim = claim_factory(provider__npi=None)
        outcome = rule.validate(claim, context)

        assert rule.message(claim, outcome) == "Provider NPI is required"

    def test_tax_id_required(self, claim_factory, context):
        """Test missing tax id."""
        assert not ProviderTaxIdRequired().validate(claim_factory(provider__tax_id=None), context).valid

    @pytest.mark.parametrize("tax_id", ["12-3456789", "123456789", "123-45-6789", "12 3456789"])
    def test_tax_id_format_valid(self, claim_factory, context, tax_id):
        """Test any nine-digit tax id passes whatever the separators."""
        assert TaxIdFormat().validate(claim_factory(provider__tax_id=tax_id), context).valid

    @pytest.mark.parametrize("tax_id,digits", [("12345678", 8), ("1234567890", 10), ("12-345", 5)])
    def test_tax_id_format_invalid(self, claim_factory, context, tax_id, digits):
        """Test wrong digit counts."""
        outcome = TaxIdFormat().validate(claim_factory(provider__tax_id=tax_id), context)

        assert not outcome.valid
        assert outcome.details == {"digits": digits}

    def test_tax_id_fix_still_reformats(self, claim_factory, context):
        """Test fix rewrites a passing nine-digit tax id to the dashed form."""
        patch = TaxIdFormat().fix(claim_factory(provider__tax_id="123-45-6789"), context)

        assert patch.changes[0].value == "12-3456789"
        assert TaxIdFormat().fix(claim_factory(provider__tax_id="12-3456789"), context) is None

    def test_format_tax_id(self):
        """Test tax id formatting helper."""
        assert format_tax_id("123-45-6789") == "12-3456789"
        assert format_tax_id("12345678") is None


class TestDiagnosisRules:
    """Tests for diagnosis rules."""

    def test_diagnosis_required(self, claim_factory, context):
        """Test empty diagnosis list."""
        assert not DiagnosisRequired().validate(claim_factory(diagnosis_codes=[]), context).valid

    @pytest.mark.parametrize("code", ["J18.9", "E11", "S72.001A", "Z3A.01"])
    def test_icd10_valid(self, claim_factory, context, code):
        """Test well-formed ICD-10 codes."""
        assert Icd10Format().validate(claim_factory(diagnosis_codes=[code]), context).valid

    def test_icd10_collects_invalid_codes(self, claim_factory, context):
        """Test all malformed codes are reported together."""
        rule = Icd10Format()
        claim = claim_factory(diagnosis_codes=["J18.9", "123", "j18.9", "E11.12345"])
        outcome = rule.validate(claim, context)

        assert outcome.value == ["123", "j18.9", "E11.12345"]
        assert rule.message(claim, outcome) == "Invalid ICD-10 codes: 123, j18.9, E11.12345"

    @pytest.mark.parametrize("code", ["J06.9\n", "J06.9 ", " J06.9"])
    def test_icd10_whole_value_must_match(self, claim_factory, context, code):
        """Test surrounding whitespace, including a trailing newline, is not accepted."""
        assert not Icd10Format().validate(claim_factory(diagnosis_codes=[code]), context).valid

    def test_max_diagnosis_codes(self, claim_factory, context):
        """Test more than twelve codes warns."""
        rule = MaxDiagnosisCodes()
        claim = claim_factory(diagnosis_codes=["J18.9"] * 13)
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert rule.message(claim, outcome) == "Too many diagnosis codes: 13 (maximum 12)"
        assert rule.validate(claim_factory(diagnosis_codes=["J18.9"] * 12), context).valid


class TestProcedureRules:
    """Tests for procedure rules."""

    def test_procedure_required(self, claim_factory, context):
        """Test claim without lines."""
        assert not ProcedureRequired().validate(claim_factory(procedures=[]), context).valid

    def test_cpt_hcpcs_format(self, claim_factory, context):
        """Test CPT and HCPCS shapes."""
        claim = claim_factory(procedures=[
            {"code": "99213", "charge": 1, "diagnosis_pointers": [1]},
            {"code": "G0008", "charge": 1, "diagnosis_pointers": [1]},
            {"code": "9921", "charge": 1, "diagnosis_pointers": [1]},
            {"code": "GG008", "charge": 1, "diagnosis_pointers": [1]},
        ])
        outcome = CptHcpcsFormat().validate(claim, context)

        assert outcome.value == ["9921", "GG008"]
        assert outcome.field == "procedures.code"

    def test_cpt_trailing_newline_rejected(self, claim_factory, context):
        """Test a code followed by a newline is malformed."""
        claim = claim_factory(procedures=[{"code": "99213\n", "charge": 1, "diagnosis_pointers": [1]}])

        assert CptHcpcsFormat().validate(claim, context).value == ["99213\n"]

    def test_charge_required_positions(self, claim_factory, context):
        """Test zero, missing and non-numeric charges are reported 1-based."""
        rule = ProcedureChargeRequired()
        claim = claim_factory(procedures=[
            {"code": "99213", "charge": 10, "diagnosis_pointers": [1]},
            {"code": "99213", "charge": 0, "diagnosis_pointers": [1]},
            {"code": "99213", "diagnosis_pointers": [1]},
            {"code": "99213", "charge": "abc", "diagnosis_pointers": [1]},
        ])
        outcome = rule.validate(claim, context)

        assert outcome.value == [1, 2, 3]
        assert rule.message(claim, outcome) == "Procedures missing charges at positions: 2, 3, 4"

    @pytest.mark.parametrize("charge", ["inf", "nan", float("nan"), float("inf")])
    def test_non_finite_charge_is_missing(self, claim_factory, context, charge):
        """Test NaN and infinite charges are reported like missing ones."""
        claim = claim_factory(procedures=[{"code": "99213", "charge": charge, "diagnosis_pointers": [1]}])

        assert ProcedureChargeRequired().validate(claim, context).value == [0]

    @pytest.mark.parametrize("pointer,valid", [(0, False), (1, True), (2, True), (3, False), (-1, False), ("1", False)])
    def test_pointer_bounds(self, claim_factory, context, pointer, valid):
        """Test pointers must fall in 1..N for N diagnosis codes."""
        claim = claim_factory(procedures=[{"code": "99213", "charge": 10, "diagnosis_pointers": [pointer]}])

        assert DiagnosisPointerValid().validate(claim, context).valid is valid

    def test_pointer_messages(self, claim_factory, context):
        """Test missing and invalid pointers are described per line."""
        rule = DiagnosisPointerValid()
        claim = claim_factory(procedures=[
            {"code": "99213", "charge": 10, "diagnosis_pointers": []},
            {"code": "99213", "charge": 10, "diagnosis_pointers": [1, 5]},
        ])
        outcome = rule.validate(claim, context)

        assert rule.message(claim, outcome) == (
            "Procedure 1: missing diagnosis pointer; Procedure 2: invalid pointer 5"
        )


class TestDateRules:
    """Tests for service date rules."""

    @pytest.mark.parametrize("service_date", [None, "", "2024-13-45"])
    def test_service_date_required(self, claim_factory, context, service_date):
        """Test missing or unparseable service date."""
        assert not ServiceDateRequired().validate(claim_factory(service_date=service_date), context).valid

    def test_service_date_us_format(self, claim_factory, context):
        """Test MM/DD/YYYY is accepted."""
        assert ServiceDateRequired().validate(claim_factory(service_date="02/15/2024"), context).valid

    def test_service_date_future(self, claim_factory, context):
        """Test service after the evaluation date."""
        assert not ServiceDateNotFuture().validate(claim_factory(service_date="2024-03-02"), context).valid
        assert ServiceDateNotFuture().validate(claim_factory(service_date="2024-03-01"), context).valid

    def test_timely_filing_default_limit(self, claim_factory, context):
        """Test 90-day default filing limit."""
        rule = TimelyFilingLimit()
        late = claim_factory(service_date="2023-11-01")
        outcome = rule.validate(late, context)

        assert not outcome.valid
        assert outcome.expected_value == 90
        assert rule.message(late, outcome) == "Service date was 121 days ago (limit: 90 days)"

    def test_timely_filing_payer_limit(self, claim_factory, context):
        """Test payer-specific limit overrides the default."""
        claim = claim_factory(service_date="2023-11-01", insurance__timely_filing_limit=365)

        assert TimelyFilingLimit().validate(claim, context).valid

    def test_timely_filing_boundary(self, claim_factory):
        """Test exactly at the limit still passes."""
        context = RuleContext(as_of=date(2024, 3, 31))
        claim = claim_factory(service_date="2024-01-01")

        assert TimelyFilingLimit().validate(claim, context).valid
        assert not TimelyFilingLimit().validate(claim, RuleContext(as_of=date(2024, 4, 1))).valid


class TestBillingRules:
    """Tests for billing rules."""

    @pytest.mark.parametrize(
        "pos,valid",
        [("11", True), (11, True), ("1", False), ("111", False), ("AB", False), ("11\n", False), (None, False)],
    )
    def test_place_of_service(self, claim_factory, context, pos, valid):
        """Test two-digit place of service."""
        assert PlaceOfServiceRequired().validate(claim_factory(place_of_service=pos), context).valid is valid

    def test_total_charges_match(self, claim_factory, context):
        """Test matching total passes."""
        claim = claim_factory(
            total_charges=100.0,
            procedures=[{"code": "99213", "charge": 100.0, "diagnosis_pointers": [1]}],
        )

        assert TotalChargesMatch().validate(claim, context).valid

    def test_total_charges_within_tolerance(self, claim_factory, context):
        """Test a sub-cent rounding gap is tolerated."""
        assert TotalChargesMatch().validate(claim_factory(total_charges=150.255), context).valid

    @pytest.mark.parametrize("total", [float("nan"), "nan", float("inf")])
    def test_non_finite_total_is_mismatch(self, claim_factory, context, total):
        """Test a NaN or infinite total never slips through the tolerance check."""
        rule = TotalChargesMatch()
        claim = claim_factory(total_charges=total)
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert outcome.value == 0.0
        assert outcome.expected_value == 150.25
        assert rule.fix(claim, context).changes[0].value == 150.25

    def test_total_charges_mismatch(self, claim_factory, context):
        """Test mismatch reports the computed sum as expected value."""
        rule = TotalChargesMatch()
        claim = claim_factory(total_charges=100.0)
        outcome = rule.validate(claim, context)

        assert not outcome.valid
        assert outcome.value == 100.0
        assert outcome.expected_value == 150.25
        assert rule.message(claim, outcome) == "Total charges ($100.00) doesn't match sum of procedures ($150.25)"

    def test_total_charges_fix(self, claim_factory, context):
        """Test fix targets only total_charges."""
        patch = TotalChargesMatch().fix(claim_factory(total_charges=100.0), context)

        assert patch.fields == ["total_charges"]
        assert patch.changes[0].value == 150.25
        assert patch.changes[0].old_value == 100.0
