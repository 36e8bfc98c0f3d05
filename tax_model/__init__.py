"""
Federal Tax Model

Bracket/threshold evaluation engine and piecewise-linear credit curves,
driven by immutable tax-year datasets that are swapped out every year
without touching the engine.
"""

from .errors import MalformedTableError, ExemptionWorksheetRequired
from .filing_status import FilingStatus
from .brackets import BracketTable, Tier, TieredTable, marginal_tax, select_tier
from .thresholds import ThresholdSchedule
from .piecewise import PiecewiseFunction, Segment, build_curve, evaluate
from .dataset import TaggedAmount, TaxYearDataset
from .datasets import available_years, current_dataset, dataset_for_date, get_dataset
from .calculator import FederalTaxCalculator, TaxLiability, TaxUnit

__version__ = "1.0.0"
__all__ = [
    "MalformedTableError",
    "ExemptionWorksheetRequired",
    "FilingStatus",
    "BracketTable",
    "Tier",
    "TieredTable",
    "marginal_tax",
    "select_tier",
    "ThresholdSchedule",
    "PiecewiseFunction",
    "Segment",
    "build_curve",
    "evaluate",
    "TaggedAmount",
    "TaxYearDataset",
    "available_years",
    "current_dataset",
    "dataset_for_date",
    "get_dataset",
    "FederalTaxCalculator",
    "TaxLiability",
    "TaxUnit",
]
