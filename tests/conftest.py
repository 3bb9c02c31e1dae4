from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

# Allow `import reinsurance_dashboard` without requiring `pip install -e .`
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from reinsurance_dashboard.transforms import build_policy_frame

_HEADERS = [
    "SRL", "ORG_INSURED_TRTY_NAME", "BRK_NAME", "CED_NAME", "EXT_TYPE", "UW_CLASS",
    "SUB_CLASS", "ARRANGEMENT", "LOC", "COUNTRY_NAME", "BP_SCOPE", "UY", "COM_DATE",
    "RENEWAL_DATE", "POLICY_STATUS", "GRS_PREM_KD", "ACQ_COST_KD", "PAID_CLAIMS_KD",
    "OS_CLAIM_KD", "MAX_LIABILITY_KD", "INCEPTION_MONTH", "INCEPTION_YEAR", "RENEWAL_YEAR",
]

_ROWS = [
    ["P001", "Gulf Property Treaty", "Aon Re", "Gulf Insurance", "Treaty", "FI Property",
     "Fire", "Proportional", "Kuwait", "KSA", "1-GCC", "2023", "15/03/2023",
     "2024-03-15", "Renewed", "1,000", "200", "300", "100", "5000", "", "", "2024"],
    ["P002", "Emirates Energy XL", "Howden Re", "Arab Orient", "Facultative", "EG Energy",
     "0", "Non-Proportional", "Dubai", "uae", "", "2023", "2023-07-01",
     "2024-07-01", "Not Renewed", "2000", "500", "1000", "500", "", "", "", "2024"],
    ["P003", "Nile Hull Cover", "Willis Re", "Al Ahleia", "Treaty", "HU Hull",
     "War", "Proportional", "Cairo", "Egypt", "", "", "45000",
     "2099-01-01", "Upcoming Renewal", "500", "50", "0", "0", "1500", "MAR", "2024", "2025"],
    ["P004", "Tawuniya Fronting Arrangement", "Aon Re", "Tawuniya", "Facultative", "AC Casualty",
     "", "Proportional", "Kuwait", "Kuwait", "1-GCC", "2024", "01/01/2024",
     "2025-01-01", "expired", "300", "30", "30", "0", "", "", "", "2025"],
    ["P005", "Direct Misc Account", "Direct", "direct", "Treaty", "",
     "", "Proportional", "Kuwait", "", "", "2022", "2022-06-30",
     "2023-06-30", "", "100", "10", "0", "0", "", "", "", "2023"],
    ["P006", "Levant Life Quota Share", "Guy Carpenter", "Arab Orient", "Treaty", "LI Life",
     "Group Life", "Proportional", "Dubai", "Lebanon", "13", "n/a", "",
     "", "renewed", "400", "40", "100", "0", "abc", "", "", ""],
]


@pytest.fixture
def raw_policies() -> pd.DataFrame:
    """Export-shaped raw rows, every cell a string."""
    return pd.DataFrame(_ROWS, columns=_HEADERS)


@pytest.fixture
def policies(raw_policies: pd.DataFrame) -> pd.DataFrame:
    return build_policy_frame(raw_policies)
