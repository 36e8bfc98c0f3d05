"""
Threshold schedules: filing status -> numeric cutoff.

Surtax thresholds (Additional Medicare Tax, NIIT) and the AMT 26%/28% cap
are lookup tables, not conditional logic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import MalformedTableError
from .filing_status import FilingStatus, by_status


@dataclass(frozen=True)
class ThresholdSchedule:
    """Immutable mapping from every filing status to a cutoff."""
    values: Mapping[FilingStatus, float]
    name: str = "threshold schedule"

    def __post_init__(self):
        values = by_status(self.values, self.name)
        for status, value in values.items():
            if not math.isfinite(value):
                raise MalformedTableError(f"{self.name}: non-finite threshold for {status.value}")
        object.__setattr__(self, "values", values)

    @classmethod
    def with_overrides(
        cls,
        default: float,
        overrides: Optional[Mapping[FilingStatus, float]] = None,
        name: str = "threshold schedule",
    ) -> ThresholdSchedule:
        """Same cutoff for every status except the ones overridden."""
        overrides = overrides or {}
        return cls({s: float(overrides.get(s, default)) for s in FilingStatus}, name=name)

    def __call__(self, filing_status: FilingStatus) -> float:
        return self.values[FilingStatus.parse(filing_status)]
