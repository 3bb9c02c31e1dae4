"""
Loader for the policy book export.

Source: one CSV or Excel (.xlsx) export with one row per underwriting line.

The Excel export may carry a title block above the header, so the header
row is located by signature rather than assumed to be row 1. All values are
read as raw text/cells; cleaning happens in transforms.build_policy_frame.
"""

import logging
from pathlib import Path

import openpyxl
import pandas as pd

from ..config import COLUMN_LABEL_MAP
from .. import transforms
from .utils import find_header_row, to_snake_case

logger = logging.getLogger(__name__)

_HEADER_SIGNATURE = set(COLUMN_LABEL_MAP)


def _load_csv(path: Path) -> pd.DataFrame:
    return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)


def _load_xlsx(path: Path, sheet_name: str | None) -> pd.DataFrame:
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb[sheet_name] if sheet_name else wb.worksheets[0]

        header_row = find_header_row(ws, _HEADER_SIGNATURE)
        if header_row is None:
            raise ValueError(f"No policy header row found in {path} [{ws.title}]")

        rows = ws.iter_rows(min_row=header_row, values_only=True)
        header = [str(v).strip() if v is not None else "" for v in next(rows)]
        keep = [i for i, name in enumerate(header) if name]

        records = []
        for row in rows:
            if row is None or all(v is None for v in row):
                continue
            records.append([row[i] if i < len(row) else None for i in keep])
    finally:
        wb.close()

    return pd.DataFrame(records, columns=[header[i] for i in keep])


def load_policy_book(path: str | Path, sheet_name: str | None = None) -> pd.DataFrame:
    """Load and enrich the policy book export.

    Parameters
    ----------
    path : Path to a .csv or .xlsx export.
    sheet_name : Worksheet to read for Excel files (default: first sheet).

    Returns
    -------
    Canonical policy frame from transforms.build_policy_frame().

    Raises
    ------
    FileNotFoundError if the file does not exist; ValueError for unsupported
    extensions or an Excel sheet with no recognisable header.
    """
    path = Path(path)
    if not path.exists():
        logger.error("Policy book not found: %s", path)
        raise FileNotFoundError(path)

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            raw = _load_csv(path)
        elif suffix in (".xlsx", ".xlsm"):
            raw = _load_xlsx(path, sheet_name)
        else:
            raise ValueError(f"Unsupported policy book format: {suffix}")
    except Exception:
        logger.exception("Failed to read policy book: %s", path)
        raise

    known = sum(1 for col in raw.columns if to_snake_case(col) in COLUMN_LABEL_MAP)
    logger.info(
        "Loaded %d raw rows (%d/%d recognised columns) from %s",
        len(raw), known, len(raw.columns), path,
    )
    return transforms.build_policy_frame(raw)


class FilePolicySource:
    """Record source backed by a policy book file.

    ``version()`` returns the file's modification time so a RecordCache can
    tell when the export has been replaced.
    """

    def __init__(self, path: str | Path, sheet_name: str | None = None):
        self.path = Path(path)
        self.sheet_name = sheet_name

    def load(self) -> pd.DataFrame:
        return load_policy_book(self.path, self.sheet_name)

    def version(self) -> float | None:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None

    def __repr__(self) -> str:
        return f"FilePolicySource({str(self.path)!r})"
