"""
Configuration: column schema, alias tables, role table, KPI registry, constants.

COLUMN_LABEL_MAP maps raw export headers to the canonical policy columns.
KPI_REGISTRY maps each ratio KPI to its display unit, evaluation direction,
threshold and amber-band tolerance.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: adjust these if source files move
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

POLICY_BOOK_FILE = DATA_DIR / "policy_book.csv"

# ---------------------------------------------------------------------------
# Canonical policy schema
# ---------------------------------------------------------------------------
TEXT_COLUMNS = [
    "srl", "policy_name", "broker", "cedant",
    "ext_type", "class_name", "sub_class", "arrangement",
    "office", "hub", "region", "country",
    "uy", "com_date", "renewal_date", "policy_status", "bp_scope",
]

MONEY_COLUMNS = [
    "gross_premium", "acquisition_cost",
    "paid_claims", "outstanding_claims", "incurred_claims",
    "sign_share_pct", "written_share_pct",
]

# Kept nullable: a missing max liability is excluded from its average
NULLABLE_MONEY_COLUMNS = ["max_liability"]

PERIOD_COLUMNS = [
    "inception_day", "inception_month", "inception_quarter", "inception_year",
    "expiry_day", "expiry_month", "expiry_quarter", "expiry_year",
    "renewal_day", "renewal_month", "renewal_quarter", "renewal_year",
]

POLICY_COLUMNS = TEXT_COLUMNS + MONEY_COLUMNS + NULLABLE_MONEY_COLUMNS + PERIOD_COLUMNS

# Raw export headers (snake_cased by the loader) -> canonical column
COLUMN_LABEL_MAP: dict[str, str] = {
    "srl": "srl",
    "serial_no": "srl",
    "org_insured_trty_name": "policy_name",
    "policy_name": "policy_name",
    "brk_name": "broker",
    "broker": "broker",
    "ced_name": "cedant",
    "cedant": "cedant",
    "ext_type": "ext_type",
    "uw_class": "class_name",
    "class": "class_name",
    "sub_class": "sub_class",
    "arrangement": "arrangement",
    "policy_nature": "arrangement",
    "office": "office",
    "loc": "office",
    "hub": "hub",
    "region": "region",
    "country": "country",
    "country_name": "country",
    "uy": "uy",
    "com_date": "com_date",
    "renewal_date": "renewal_date",
    "policy_status": "policy_status",
    "bp_scope": "bp_scope",
    "grs_prem_kd": "gross_premium",
    "gross_uw_prem": "gross_premium",
    "acq_cost_kd": "acquisition_cost",
    "gross_actual_acq": "acquisition_cost",
    "paid_claims_kd": "paid_claims",
    "gross_paid_claims": "paid_claims",
    "os_claim_kd": "outstanding_claims",
    "gross_os_loss": "outstanding_claims",
    "inc_claim_kd": "incurred_claims",
    "max_liability_kd": "max_liability",
    "max_liability_fc": "max_liability",
    "sign_share_pct": "sign_share_pct",
    "written_share_pct": "written_share_pct",
    "inception_day": "inception_day",
    "inception_month": "inception_month",
    "inception_quarter": "inception_quarter",
    "inception_year": "inception_year",
    "expiry_day": "expiry_day",
    "expiry_month": "expiry_month",
    "expiry_quarter": "expiry_quarter",
    "expiry_year": "expiry_year",
    "renewal_day": "renewal_day",
    "renewal_month": "renewal_month",
    "renewal_quarter": "renewal_quarter",
    "renewal_year": "renewal_year",
}

# Sub-class placeholders in the export that mean "no sub-class"
SUB_CLASS_PLACEHOLDERS = {"", "0", "0.0"}
SUB_CLASS_DEFAULT = "Other"

# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------
MIN_YEAR = 1900
MAX_YEAR = 2100

MONTH_NAMES = [
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
]

MONTH_LOOKUP: dict[str, int] = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}

QUARTER_LABELS = ["Q1", "Q2", "Q3", "Q4"]

# Spreadsheet day 0; serials >= 60 carry the phantom 1900-02-29
EXCEL_EPOCH = "1899-12-30"
EXCEL_LEAP_BUG_SERIAL = 60

# ---------------------------------------------------------------------------
# Country normalisation
# ---------------------------------------------------------------------------
UNKNOWN_COUNTRY = "Unknown"

COUNTRY_ALIASES: dict[str, str] = {
    # Middle East
    "ksa": "Saudi Arabia",
    "saudi": "Saudi Arabia",
    "saudi arabia": "Saudi Arabia",
    "kingdom of saudi arabia": "Saudi Arabia",
    "uae": "United Arab Emirates",
    "united arab emirates": "United Arab Emirates",
    "kurdistan": "Iraq",
    "state of qatar": "Qatar",
    # Americas / Europe
    "usa": "United States of America",
    "us": "United States of America",
    "united states": "United States of America",
    "united states of america": "United States of America",
    "america": "United States of America",
    "uk": "United Kingdom",
    "united kingdom": "United Kingdom",
    "england": "United Kingdom",
    # Other common shorthands
    "ivory coast": "Côte d'Ivoire",
    "cote divoire": "Côte d'Ivoire",
    "cote d ivoire": "Côte d'Ivoire",
    "drc": "Democratic Republic of the Congo",
    "congo": "Republic of the Congo",
    "south korea": "South Korea",
    "korea republic of": "South Korea",
    "north korea": "North Korea",
    "peoples republic of china": "China",
    "hongkong": "Hong Kong",
    "hk": "Hong Kong",
    "burma": "Myanmar",
}

# Leading numeric code of the business-partner scope ("1-GCC", "13") -> region/hub label
BP_SCOPE_CODES: dict[str, str] = {
    "1": "GCC",
    "3": "North Africa",
    "8": "CEE Region",
    "11": "World-Wide",
    "13": "Middle East",
    "14": "Arab",
}

# (substring of lowercased bp scope, label), checked in order when no code matches
BP_SCOPE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("gcc",), "GCC"),
    (("world",), "World-Wide"),
    (("arab",), "Arab"),
    (("north",), "North Africa"),
    (("cee",), "CEE Region"),
]

COUNTRY_REGIONS: list[tuple[tuple[str, ...], str]] = [
    (("kuwait", "saudi arabia", "uae", "united arab emirates", "qatar", "bahrain", "oman"), "GCC"),
    (("jordan", "lebanon", "syria", "iraq", "yemen"), "Middle East"),
    (("algeria", "egypt", "morocco", "tunisia", "libya"), "North Africa"),
    (("turkey", "czech", "poland", "germany", "france", "united kingdom", "spain", "italy"), "Europe"),
    (("china", "india", "japan", "singapore", "malaysia", "thailand", "indonesia"), "Asia"),
]

UNKNOWN_REGION = "Unknown"

# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------
ADMIN_ROLE = "admin"
SUPER_USER_ROLE = "super user"

# Business role -> class tokens found in the UW class column
ROLE_CLASS_TOKENS: dict[str, tuple[str, ...]] = {
    "fi": ("FI", "Property", "FI Property"),
    "eg": ("EG", "Energy", "EG Energy"),
    "ca": ("CA", "Cargo", "CA Cargo"),
    "hu": ("HU", "Hull", "HU Hull"),
    "marine": ("CA", "HU", "Cargo", "Hull", "Marine", "CA Cargo", "HU Hull"),
    "ac": ("AC", "Casualty", "AC Casualty"),
    "en": ("EN", "Engineering", "EN Engineering"),
    "li": ("LI", "Life", "LI Life"),
}

ROLE_DISPLAY_NAMES: dict[str, str] = {
    "li": "LIFE",
    "fi": "PROPERTY",
    "eg": "ENERGY",
    "ca": "CARGO",
    "hu": "HULL",
    "marine": "MARINE",
    "ac": "CASUALTY",
    "en": "ENGINEERING",
    "admin": "Main Admin",
    "super user": "Super User",
}

# ---------------------------------------------------------------------------
# Renewals
# ---------------------------------------------------------------------------
FRONTING_KEYWORD = "fronting"

STATUS_RENEWED = "renewed"
STATUS_NOT_RENEWED = "not-renewed"
STATUS_UPCOMING = "upcoming-renewal"
RENEWAL_STATUSES = [STATUS_RENEWED, STATUS_NOT_RENEWED, STATUS_UPCOMING]

# ---------------------------------------------------------------------------
# KPI Registry
# ---------------------------------------------------------------------------
# direction: "higher_is_better" or "lower_is_better"
# threshold: break-even level the ratio is judged against
# amber_band: tolerance past the threshold, as a % of the threshold, that is still amber
KPI_REGISTRY: dict[str, dict] = {
    "loss_ratio": {
        "direction": "lower_is_better",
        "unit": "%",
        "threshold": 70.0,
        "amber_band": 10.0,
    },
    "expense_ratio": {
        "direction": "lower_is_better",
        "unit": "%",
        "threshold": 30.0,
        "amber_band": 5.0,
    },
    "combined_ratio": {
        "direction": "lower_is_better",
        "unit": "%",
        "threshold": 100.0,
        "amber_band": 5.0,
    },
}

KPI_FIELDS = [
    "premium", "paid_claims", "outstanding_claims", "incurred_claims",
    "expense", "loss_ratio", "expense_ratio", "combined_ratio",
    "number_of_accounts", "avg_max_liability",
]
