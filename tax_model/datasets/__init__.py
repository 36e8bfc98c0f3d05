"""
Tax-year dataset registry.

Each supported year lives in its own module (y2024.py, ...) and exposes a
validated DATASET. The engine never reads the clock except here, to pick the
year a return filed today would use.

Example usage:
    >>> from tax_model.datasets import get_dataset
    >>> ds = get_dataset(2024)
    >>> ds.standard_deduction("MFJ")
    29200
"""

import logging
import os
from datetime import date
from typing import Optional

from ..dataset import TaxYearDataset
from . import y2024

logger = logging.getLogger(__name__)

# Environment variable that pins the year used by current_dataset()
YEAR_ENV_VAR = "TAX_MODEL_YEAR"

_DATASETS = {
    y2024.YEAR: y2024.DATASET,
}


def available_years() -> list[int]:
    return sorted(_DATASETS)


def get_dataset(year: int) -> TaxYearDataset:
    """Dataset for a tax year; unsupported years raise ValueError."""
    try:
        return _DATASETS[int(year)]
    except KeyError:
        raise ValueError(
            f"Unsupported tax year: {year} (available: {available_years()})"
        ) from None


def dataset_for_date(day: date) -> TaxYearDataset:
    """
    Dataset for a return filed on `day`.

    Returns are filed the year after the tax year. If that year has no
    dataset yet, the most recent earlier year is used.
    """
    tax_year = day.year - 1
    if tax_year in _DATASETS:
        return _DATASETS[tax_year]

    earlier = [y for y in available_years() if y <= tax_year]
    if not earlier:
        raise ValueError(
            f"No dataset for tax year {tax_year} or earlier (available: {available_years()})"
        )
    fallback = max(earlier)
    logger.warning(f"No dataset for tax year {tax_year}; falling back to {fallback}")
    return _DATASETS[fallback]


def current_dataset(today: Optional[date] = None) -> TaxYearDataset:
    """
    Dataset for returns filed today.

    The TAX_MODEL_YEAR environment variable pins a specific year.
    """
    pinned = os.environ.get(YEAR_ENV_VAR)
    if pinned:
        try:
            year = int(pinned)
        except ValueError:
            raise ValueError(f"{YEAR_ENV_VAR} must be a year, got {pinned!r}") from None
        logger.info(f"Using tax year {year} from {YEAR_ENV_VAR}")
        return get_dataset(year)

    return dataset_for_date(today or date.today())


__all__ = [
    "YEAR_ENV_VAR",
    "available_years",
    "get_dataset",
    "dataset_for_date",
    "current_dataset",
]
