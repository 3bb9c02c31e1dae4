"""
Simulated policy book generator for the reinsurance dashboard.

Generates a raw export-shaped policy frame (export headers, text cells, mixed
date formats) so the full pipeline can run without a real export.
All values are synthetic — no real portfolio data is used.
"""

import numpy as np
import pandas as pd

from .config import MONTH_NAMES

# ---------------------------------------------------------------------------
# Typical portfolio parameters
# ---------------------------------------------------------------------------
_CLASSES = {
    "FI Property": ["Fire", "Engineering All Risks", "0"],
    "EG Energy": ["Onshore", "Offshore"],
    "CA Cargo": ["Open Cover", "Single Transit"],
    "HU Hull": ["Hull & Machinery", "War"],
    "AC Casualty": ["Motor", "General Liability", ""],
    "EN Engineering": ["CAR", "Machinery Breakdown"],
    "LI Life": ["Group Life", "Credit Life"],
}

# (country as typed in the export, business-partner scope)
_COUNTRIES = [
    ("KSA", "1-GCC"),
    ("Kuwait", "1-GCC"),
    ("U.A.E.", "1-GCC"),
    ("qatar", ""),
    ("Jordan", "13"),
    ("Egypt", "3-North Africa"),
    ("Turkey", "8-CEE"),
    ("India", "11-World-Wide"),
    ("UK", ""),
    ("", ""),
]

_BROKERS = ["Aon Re", "Guy Carpenter", "Howden Re", "Willis Re", "Direct"]
_CEDANTS = ["Gulf Insurance", "Arab Orient", "Tawuniya", "Al Ahleia", "Direct"]
_OFFICES = ["Kuwait", "Dubai", "Cairo"]
_EXT_TYPES = ["Treaty", "Facultative"]
_ARRANGEMENTS = ["Proportional", "Non-Proportional"]
_STATUSES = ["Renewed", "Not Renewed", "Upcoming Renewal", "not_renewed", "Expired", ""]

_UW_YEARS = [2021, 2022, 2023, 2024, 2025]


def _date_text(rng: np.random.Generator, ts: pd.Timestamp) -> str:
    """Render a date the way a mixed export would: D/M/Y, ISO, or a serial."""
    style = rng.integers(0, 3)
    if style == 0:
        return ts.strftime("%d/%m/%Y")
    if style == 1:
        return ts.strftime("%Y-%m-%d")
    serial = (ts - pd.Timestamp("1899-12-30")).days + 1
    return str(serial)


def generate_policy_book(n_policies: int = 200, seed: int = 42) -> pd.DataFrame:
    """Generate a simulated raw policy book.

    Produces ``n_policies`` rows with export headers. A few rows are
    fronting arrangements, a few have blank classes or placeholder
    sub-classes, and some carry only a year in free text, so the cleaning
    and resolution rules all get exercised.
    """
    rng = np.random.default_rng(seed)
    class_names = list(_CLASSES)
    rows = []

    for i in range(1, n_policies + 1):
        uy = int(rng.choice(_UW_YEARS))
        inception = pd.Timestamp(uy, int(rng.integers(1, 13)), int(rng.integers(1, 29)))
        expiry = inception + pd.DateOffset(years=1, days=-1)
        renewal = expiry + pd.DateOffset(days=1)

        class_name = str(rng.choice(class_names)) if rng.random() > 0.03 else ""
        sub_class = str(rng.choice(_CLASSES[class_name])) if class_name else ""
        country, scope = _COUNTRIES[int(rng.integers(0, len(_COUNTRIES)))]

        broker = str(rng.choice(_BROKERS))
        cedant = broker if broker == "Direct" else str(rng.choice(_CEDANTS))
        name = f"{cedant} {class_name or 'Misc'} {'Fronting ' if rng.random() < 0.04 else ''}Treaty {uy}"

        premium = round(float(rng.lognormal(11, 1.1)), 2)
        # Loss ratio mostly between 30% and 110%
        paid = round(premium * float(rng.uniform(0.1, 0.7)), 2)
        outstanding = round(premium * float(rng.uniform(0.0, 0.4)), 2)
        acquisition = round(premium * float(rng.uniform(0.15, 0.35)), 2)
        max_liability = round(premium * float(rng.uniform(5, 40)), 2) if rng.random() > 0.1 else ""

        # Some rows lose their structured UY and keep only a year in text
        uy_text = str(uy) if rng.random() > 0.05 else f"UY {uy}/{uy + 1}"

        rows.append({
            "SRL": f"P{i:05d}",
            "ORG_INSURED_TRTY_NAME": name,
            "BRK_NAME": broker,
            "CED_NAME": cedant,
            "EXT_TYPE": str(rng.choice(_EXT_TYPES)),
            "UW_CLASS": class_name,
            "SUB_CLASS": sub_class,
            "ARRANGEMENT": str(rng.choice(_ARRANGEMENTS)),
            "LOC": str(rng.choice(_OFFICES)),
            "HUB": "",
            "REGION": "",
            "COUNTRY_NAME": country,
            "BP_SCOPE": scope,
            "UY": uy_text,
            "COM_DATE": _date_text(rng, inception),
            "RENEWAL_DATE": _date_text(rng, renewal),
            "POLICY_STATUS": str(rng.choice(_STATUSES)),
            "GRS_PREM_KD": f"{premium:,.2f}",
            "ACQ_COST_KD": f"{acquisition:.2f}",
            "PAID_CLAIMS_KD": f"{paid:.2f}",
            "OS_CLAIM_KD": f"{outstanding:.2f}",
            "MAX_LIABILITY_KD": f"{max_liability}",
            "SIGN_SHARE%": f"{float(rng.choice([5, 10, 12.5, 25, 50])):.1f}%",
            "INCEPTION_DAY": str(inception.day),
            "INCEPTION_MONTH": MONTH_NAMES[inception.month - 1],
            "INCEPTION_YEAR": str(inception.year),
            "EXPIRY_DAY": str(expiry.day),
            "EXPIRY_MONTH": str(expiry.month),
            "EXPIRY_YEAR": str(expiry.year),
            "RENEWAL_MONTH": MONTH_NAMES[renewal.month - 1],
            "RENEWAL_YEAR": str(renewal.year),
        })

    return pd.DataFrame(rows)
