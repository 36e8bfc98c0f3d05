"""
Progressive Bracket Evaluation

Turns a set of ascending breakpoints and per-segment rates into the tax owed
on an income figure, and selects discrete tiers for threshold-based lookups
(standard deduction tiers, AMT exemption tiers).

Table layout:
- N breakpoints, strictly increasing, first one >= 0
- N + 1 rates: one below the first breakpoint, one between each consecutive
  pair, one above the last

Published tables give rates as whole-number percentages (22 meaning 22%).
They are converted to fractions once, in BracketTable.from_percentages, and
every evaluation works on fractions.

Example:
    >>> table = BracketTable.from_percentages([11600, 47150], [10, 12, 22])
    >>> table.tax(50_000)
    6053.0
"""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .errors import MalformedTableError

logger = logging.getLogger(__name__)


def _check_income(income: float) -> float:
    income = float(income)
    if math.isnan(income):
        raise ValueError("income must be a number, got NaN")
    return income


@dataclass(frozen=True)
class BracketTable:
    """
    Immutable progressive bracket table.

    Attributes:
        breakpoints: Ascending incomes separating adjacent brackets
        rates: Marginal rate for each bracket as a fraction (0.22, not 22)
        name: Label used in error messages
    """
    breakpoints: tuple[float, ...]
    rates: tuple[float, ...]
    name: str = "bracket table"

    def __post_init__(self):
        object.__setattr__(self, "breakpoints", tuple(float(b) for b in self.breakpoints))
        object.__setattr__(self, "rates", tuple(float(r) for r in self.rates))
        self._validate()

    @classmethod
    def from_percentages(
        cls,
        breakpoints: Iterable[float],
        rates_pct: Iterable[float],
        name: str = "bracket table",
    ) -> BracketTable:
        """Build a table from published whole-number percentage rates."""
        return cls(
            breakpoints=tuple(breakpoints),
            rates=tuple(float(r) / 100 for r in rates_pct),
            name=name,
        )

    def _validate(self):
        bps, rates = self.breakpoints, self.rates

        if len(rates) != len(bps) + 1:
            raise MalformedTableError(
                f"{self.name}: expected {len(bps) + 1} rates for {len(bps)} "
                f"breakpoints, got {len(rates)}"
            )
        if not all(math.isfinite(b) for b in bps):
            raise MalformedTableError(f"{self.name}: breakpoints must be finite, got {bps}")
        if bps and bps[0] < 0:
            raise MalformedTableError(f"{self.name}: first breakpoint must be >= 0, got {bps[0]}")
        for lo, hi in zip(bps, bps[1:]):
            if hi <= lo:
                raise MalformedTableError(
                    f"{self.name}: breakpoints must be strictly increasing, "
                    f"got {hi} after {lo}"
                )
        for r in rates:
            if not math.isfinite(r) or r < 0:
                raise MalformedTableError(f"{self.name}: invalid rate {r}")
            if r > 1:
                # 22 instead of 0.22: use from_percentages for published tables
                raise MalformedTableError(
                    f"{self.name}: rate {r} exceeds 100%; rates must be fractions"
                )

    @property
    def rates_pct(self) -> tuple[float, ...]:
        return tuple(r * 100 for r in self.rates)

    def _bounds(self):
        """(lower, upper, rate) for each bracket, the top one unbounded."""
        lowers = (0.0,) + self.breakpoints
        uppers = self.breakpoints + (math.inf,)
        return zip(lowers, uppers, self.rates)

    def tax(self, income: float) -> float:
        """
        Tax owed on income under progressive-bracket semantics.

        Income at or below zero owes nothing. The result is continuous at
        every breakpoint and non-decreasing in income.
        """
        income = _check_income(income)
        if income <= 0:
            return 0.0

        tax = 0.0
        for lower, upper, rate in self._bounds():
            if income <= lower:
                break
            tax += (min(income, upper) - lower) * rate
        return tax

    def tax_array(self, incomes) -> np.ndarray:
        """Vectorized tax(), same arithmetic per element."""
        incomes = np.asarray(incomes, dtype=float)
        if np.isnan(incomes).any():
            raise ValueError("incomes must not contain NaN")

        tax = np.zeros_like(incomes)
        for lower, upper, rate in self._bounds():
            tax += np.maximum(np.minimum(incomes, upper) - lower, 0.0) * rate
        return tax

    def rate_at(self, income: float) -> float:
        """Marginal rate on the next dollar above income."""
        income = max(_check_income(income), 0.0)
        return self.rates[bisect.bisect_right(self.breakpoints, income)]


def marginal_tax(income: float, breakpoints: Sequence[float], rates: Sequence[float]) -> float:
    """
    Tax owed on income for a published bracket table.

    Args:
        income: Taxable income (values <= 0 owe nothing)
        breakpoints: Strictly increasing bracket edges
        rates: Whole-number percentage rates, len(breakpoints) + 1 of them

    Raises:
        MalformedTableError: If the table is malformed (checked before
            any evaluation)
    """
    return BracketTable.from_percentages(breakpoints, rates).tax(income)


# =============================================================================
# TIERED LOOKUPS
# =============================================================================

@dataclass(frozen=True)
class Tier:
    """An amount that applies while income does not exceed threshold."""
    threshold: float
    amount: float


TierLike = Union[Tier, tuple[float, float]]


@dataclass(frozen=True)
class TieredTable:
    """
    Step function of tiers, most restrictive (lowest threshold) first.

    Selection is a scan, never an interpolation. An empty table is valid and
    never matches.
    """
    tiers: tuple[Tier, ...] = ()
    name: str = "tiered table"

    def __post_init__(self):
        tiers = tuple(t if isinstance(t, Tier) else Tier(*t) for t in self.tiers)
        object.__setattr__(self, "tiers", tiers)

        for t in tiers:
            if not (math.isfinite(t.threshold) and math.isfinite(t.amount)):
                raise MalformedTableError(f"{self.name}: non-finite tier {t}")
        for lo, hi in zip(tiers, tiers[1:]):
            if hi.threshold <= lo.threshold:
                raise MalformedTableError(
                    f"{self.name}: tier thresholds must be strictly increasing, "
                    f"got {hi.threshold} after {lo.threshold}"
                )

    def select(self, income: float) -> Optional[float]:
        income = _check_income(income)
        for tier in self.tiers:
            if income <= tier.threshold:
                return tier.amount
        return None


def select_tier(income: float, tiered_table: Union[TieredTable, Sequence[TierLike]]) -> Optional[float]:
    """
    Amount of the first tier whose threshold is not exceeded by income.

    Returns None when income exceeds every threshold. None means "no tier
    applies" and the caller must take its own fallback path; it is never a
    stand-in for zero.
    """
    if not isinstance(tiered_table, TieredTable):
        tiered_table = TieredTable(tuple(tiered_table))
    amount = tiered_table.select(income)
    if amount is None:
        logger.debug("No tier in %s covers income %s", tiered_table.name, income)
    return amount
