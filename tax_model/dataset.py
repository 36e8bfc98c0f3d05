"""
Tax-Year Dataset

Immutable value object holding every jurisdiction-published number for one
tax year: bracket tables, deduction tiers, surtax thresholds, AMT exemption
tiers and the Earned Income Credit curves.

A dataset is built once per year (see tax_model.datasets) and injected into
the stateless calculators. Every table is validated when the dataset is
built, so a transcription error in a new year's data fails at import time
rather than at evaluation time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from .brackets import BracketTable, TieredTable
from .errors import MalformedTableError
from .filing_status import FilingStatus, by_status
from .piecewise import PiecewiseFunction, build_curve
from .thresholds import ThresholdSchedule


@dataclass(frozen=True)
class TaggedAmount:
    """Named amount from a published table (deductions, exemptions)."""
    name: str
    amount: float


# =============================================================================
# PAYROLL AND SURTAX PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class FicaParameters:
    """Social Security and Medicare (employee share)."""
    ss_tax_rate: float
    max_ss_tax: float
    max_income_ss_tax_applies: float
    regular_medicare_tax_rate: float
    additional_medicare_tax_rate: float
    additional_medicare_tax_threshold: ThresholdSchedule


@dataclass(frozen=True)
class NetInvestmentIncomeTaxParameters:
    """Form 8960 rate and MAGI thresholds."""
    tax_rate: float
    tax_threshold: ThresholdSchedule


# =============================================================================
# ALTERNATIVE MINIMUM TAX
# =============================================================================

@dataclass(frozen=True)
class AMTParameters:
    """
    AMT exemption tiers and the 26%/28% rate split.

    Attributes:
        exemptions: Per-status tiers; income above the last threshold (or any
            income for a status with no tiers) needs the Exemption Worksheet
        cap: AMTI (after exemption) taxed at the lower rate
        rates_pct: Lower and upper AMT rates, whole-number percentages
    """
    exemptions: Mapping[FilingStatus, TieredTable]
    cap: ThresholdSchedule
    rates_pct: tuple[float, float] = (26, 28)
    rate_tables: Mapping[FilingStatus, BracketTable] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "exemptions", by_status(self.exemptions, "AMT exemptions"))
        tables = {
            status: BracketTable.from_percentages(
                [self.cap(status)], self.rates_pct, name=f"AMT rates ({status.value})"
            )
            for status in FilingStatus
        }
        object.__setattr__(self, "rate_tables", by_status(tables, "AMT rate tables"))

    def exemption(self, filing_status: FilingStatus, income: float) -> Optional[float]:
        """Exemption amount, or None when the Exemption Worksheet applies."""
        return self.exemptions[FilingStatus.parse(filing_status)].select(income)


# =============================================================================
# EARNED INCOME CREDIT
# =============================================================================

@dataclass(frozen=True)
class EICParameters:
    """
    Earned Income Credit schedules indexed by qualifying-child count.

    Index 0..len-1; the last index covers that many children or more.
    A status mapped to None cannot claim the credit.
    """
    caps: Mapping[FilingStatus, Optional[tuple[float, ...]]]
    curves: Mapping[FilingStatus, Optional[tuple[PiecewiseFunction, ...]]]
    max_investment_income: float

    def __post_init__(self):
        caps = by_status(self.caps, "EIC caps")
        curves = by_status(self.curves, "EIC curves")
        for status in FilingStatus:
            c, f = caps[status], curves[status]
            if (c is None) != (f is None):
                raise MalformedTableError(
                    f"EIC caps and curves must both be defined or both be None ({status.value})"
                )
            if c is not None and len(c) != len(f):
                raise MalformedTableError(
                    f"EIC ({status.value}): {len(c)} caps for {len(f)} curves"
                )
        object.__setattr__(self, "caps", caps)
        object.__setattr__(self, "curves", curves)

    @classmethod
    def from_points(
        cls,
        caps: Mapping[FilingStatus, Optional[Sequence[float]]],
        points: Mapping[FilingStatus, Optional[Sequence[Sequence[tuple[float, float]]]]],
        max_investment_income: float,
    ) -> EICParameters:
        """Build curves from control points, one point list per child count."""
        curves = {
            status: None if pts is None else tuple(build_curve(p) for p in pts)
            for status, pts in points.items()
        }
        return cls(
            caps={s: None if c is None else tuple(c) for s, c in caps.items()},
            curves=curves,
            max_investment_income=max_investment_income,
        )

    @staticmethod
    def _index(schedules, children: int) -> int:
        if children < 0:
            raise ValueError(f"qualifying children must be >= 0, got {children}")
        return min(children, len(schedules) - 1)

    def curve(self, filing_status: FilingStatus, children: int) -> Optional[PiecewiseFunction]:
        curves = self.curves[FilingStatus.parse(filing_status)]
        if curves is None:
            return None
        return curves[self._index(curves, children)]

    def cap(self, filing_status: FilingStatus, children: int) -> Optional[float]:
        caps = self.caps[FilingStatus.parse(filing_status)]
        if caps is None:
            return None
        return caps[self._index(caps, children)]

    def phase_out_start(self, filing_status: FilingStatus, children: int) -> Optional[float]:
        """Income where the plateau ends (x of the second-to-last control point)."""
        curve = self.curve(filing_status, children)
        if curve is None:
            return None
        return curve.points[-2][0]


# =============================================================================
# OTHER PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class HSAContributionLimits:
    self_only: float
    family: float

    def limit(self, coverage: str) -> float:
        if coverage == "self-only":
            return self.self_only
        if coverage == "family":
            return self.family
        raise ValueError(f"Unknown HSA coverage type: {coverage!r}")


@dataclass(frozen=True)
class QualifyingDependents:
    child_max_age: int
    qualifying_dependent_max_age: int
    qualifying_student_max_age: int


@dataclass(frozen=True)
class SocialSecurityBenefitsBase:
    """Social Security Benefits Worksheet base amounts (lines 8 and 10)."""
    l8: float
    l10: float


# =============================================================================
# DATASET
# =============================================================================

@dataclass(frozen=True)
class TaxYearDataset:
    """All published figures for one tax year."""
    year: int
    ordinary: Mapping[FilingStatus, BracketTable]
    long_term_capital_gains: Mapping[FilingStatus, BracketTable]
    deductions: Mapping[FilingStatus, tuple[TaggedAmount, ...]]
    exemptions: Mapping[FilingStatus, tuple[TaggedAmount, ...]]
    fica: FicaParameters
    net_investment_income_tax: NetInvestmentIncomeTaxParameters
    amt: AMTParameters
    eic: EICParameters
    hsa_contribution_limits: HSAContributionLimits
    qualifying_dependents: QualifyingDependents
    social_security_benefits: Mapping[FilingStatus, SocialSecurityBenefitsBase]

    def __post_init__(self):
        for attr in ("ordinary", "long_term_capital_gains", "social_security_benefits"):
            object.__setattr__(self, attr, by_status(getattr(self, attr), f"{self.year} {attr}"))

        for attr in ("deductions", "exemptions"):
            table = {s: tuple(amounts) for s, amounts in getattr(self, attr).items()}
            object.__setattr__(self, attr, by_status(table, f"{self.year} {attr}"))

        for status, amounts in self.deductions.items():
            if not amounts:
                raise MalformedTableError(
                    f"{self.year} deductions: no standard deduction for {status.value}"
                )

    def ordinary_brackets(self, filing_status: FilingStatus) -> BracketTable:
        return self.ordinary[FilingStatus.parse(filing_status)]

    def capital_gains_brackets(self, filing_status: FilingStatus) -> BracketTable:
        return self.long_term_capital_gains[FilingStatus.parse(filing_status)]

    def standard_deduction(self, filing_status: FilingStatus, allowances: int = 0) -> float:
        """
        Standard deduction for the number of age/blindness allowances.

        The tier is picked by exact index, so an allowance count the table
        does not list (3 for a single filer) is an error, not a clamp.
        """
        status = FilingStatus.parse(filing_status)
        amounts = self.deductions[status]
        if not 0 <= allowances < len(amounts):
            raise ValueError(
                f"{status.label} allows 0-{len(amounts) - 1} age/blindness "
                f"allowances, got {allowances}"
            )
        return amounts[allowances].amount

    def standard_exemption(self, filing_status: FilingStatus) -> float:
        amounts = self.exemptions[FilingStatus.parse(filing_status)]
        return amounts[0].amount if amounts else 0.0

    def eic_curve(self, filing_status: FilingStatus, children: int) -> Optional[PiecewiseFunction]:
        return self.eic.curve(filing_status, children)

    def eic_cap(self, filing_status: FilingStatus, children: int) -> Optional[float]:
        return self.eic.cap(filing_status, children)
