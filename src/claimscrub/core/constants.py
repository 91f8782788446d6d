"""Domain constants for ClaimScrub."""

# Thresholds
DEFAULT_TIMELY_FILING_DAYS: int = 90
DEFAULT_MAX_DIAGNOSIS_CODES: int = 12
DEFAULT_CHARGE_TOLERANCE: float = 0.01

# Payers that reject claims without a group number
GROUP_NUMBER_REQUIRED_PAYERS: tuple[str, ...] = ("BCBS", "AETNA", "CIGNA", "UHC")

VALID_GENDERS: frozenset[str] = frozenset({"M", "F", "U", "male", "female", "unknown"})

DATE_PARSE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y", "%Y%m%d")

# Code formats, applied with re.fullmatch
ICD10_PATTERN: str = r"[A-Z][0-9][0-9A-Z](\.[0-9A-Z]{1,4})?"
CPT_HCPCS_PATTERN: str = r"(\d{5}|[A-Z]\d{4})"
NPI_PATTERN: str = r"\d{10}"
PLACE_OF_SERVICE_PATTERN: str = r"\d{2}"

# Digit counts after stripping separators
ZIP_DIGIT_COUNTS: tuple[int, ...] = (5, 9)
TAX_ID_DIGITS: int = 9

# Report recommendations
WARNING_REVIEW_THRESHOLD: int = 5
