"""
Federal Tax Calculator

Liability-relevant figures for a single tax unit, computed from an injected
tax-year dataset:
- Ordinary income tax and the Qualified Dividends and Capital Gain Tax
  Worksheet
- Earned Income Credit (piecewise phase-in / plateau / phase-out)
- Social Security, Additional Medicare Tax and Net Investment Income Tax
- Alternative Minimum Tax (tentative minimum tax over regular tax)
- Taxable Social Security benefits

The calculator is stateless apart from the dataset it is given; swapping
years means constructing a new calculator with another dataset.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from .dataset import TaxYearDataset
from .datasets import current_dataset
from .errors import ExemptionWorksheetRequired
from .filing_status import FilingStatus

logger = logging.getLogger(__name__)

# Social Security Benefits Worksheet inclusion rates
SS_LOWER_INCLUSION = 0.50
SS_UPPER_INCLUSION = 0.85


@dataclass(frozen=True)
class TaxUnit:
    """
    Income and household facts for one return.

    qualified_income is qualified dividends plus net long-term capital gain.
    amti is alternative minimum taxable income; when None the AMT is not
    computed.
    """
    filing_status: FilingStatus
    wages: float = 0.0
    other_ordinary_income: float = 0.0
    qualified_income: float = 0.0
    net_investment_income: float = 0.0
    social_security_benefits: float = 0.0
    itemized_deductions: float = 0.0
    allowances: int = 0  # Age 65+ / blindness
    qualifying_children: int = 0
    amti: Optional[float] = None


@dataclass(frozen=True)
class TaxLiability:
    """Computed figures for one TaxUnit."""
    filing_status: FilingStatus
    agi: float
    deduction: float
    taxable_income: float
    taxable_social_security: float
    regular_tax: float
    alternative_minimum_tax: float
    earned_income_credit: float
    social_security_tax: float
    additional_medicare_tax: float
    net_investment_income_tax: float
    marginal_rate: float

    @property
    def income_tax(self) -> float:
        """Regular tax plus AMT less the (refundable) EIC."""
        return self.regular_tax + self.alternative_minimum_tax - self.earned_income_credit

    @property
    def total_tax(self) -> float:
        """Income tax plus surtaxes; negative means a refund."""
        return self.income_tax + self.additional_medicare_tax + self.net_investment_income_tax

    @property
    def effective_tax_rate(self) -> float:
        if self.agi <= 0:
            return 0.0
        return self.total_tax / self.agi

    def to_dict(self) -> dict:
        result = asdict(self)
        result["filing_status"] = self.filing_status.value
        result.update({
            "income_tax": self.income_tax,
            "total_tax": self.total_tax,
            "effective_tax_rate": self.effective_tax_rate,
        })
        return result


class FederalTaxCalculator:
    """
    Computes federal liability figures from a TaxYearDataset.

    Args:
        dataset: Year to compute for. Defaults to current_dataset().

    Example:
        >>> from tax_model import FederalTaxCalculator, FilingStatus, get_dataset
        >>> calc = FederalTaxCalculator(get_dataset(2024))
        >>> calc.ordinary_income_tax(50_000, FilingStatus.S)
        6053.0
    """

    def __init__(self, dataset: Optional[TaxYearDataset] = None):
        self.dataset = dataset if dataset is not None else current_dataset()

    @property
    def year(self) -> int:
        return self.dataset.year

    # -------------------------------------------------------------------------
    # Deductions and ordinary tax
    # -------------------------------------------------------------------------

    def standard_deduction(self, filing_status: FilingStatus, allowances: int = 0) -> float:
        return self.dataset.standard_deduction(filing_status, allowances)

    def taxable_income(
        self,
        agi: float,
        filing_status: FilingStatus,
        allowances: int = 0,
        itemized: float = 0.0,
    ) -> float:
        """AGI less the larger of the standard and itemized deductions, floored at 0."""
        deduction = max(self.standard_deduction(filing_status, allowances), itemized)
        return max(0.0, agi - deduction)

    def ordinary_income_tax(self, taxable_income: float, filing_status: FilingStatus) -> float:
        return self.dataset.ordinary_brackets(filing_status).tax(taxable_income)

    def capital_gains_tax(
        self,
        taxable_income: float,
        qualified_income: float,
        filing_status: FilingStatus,
    ) -> float:
        """
        Qualified Dividends and Capital Gain Tax Worksheet.

        The ordinary part of taxable income is taxed on the ordinary brackets;
        the qualified part is stacked on top of it and taxed on the capital
        gains brackets. The result never exceeds ordinary tax on everything.
        """
        ordinary = self.dataset.ordinary_brackets(filing_status)
        preferential = self.dataset.capital_gains_brackets(filing_status)

        taxable = max(taxable_income, 0.0)
        qualified = min(max(qualified_income, 0.0), taxable)
        ordinary_part = taxable - qualified

        tax = ordinary.tax(ordinary_part) + (
            preferential.tax(taxable) - preferential.tax(ordinary_part)
        )
        return min(tax, ordinary.tax(taxable))

    # -------------------------------------------------------------------------
    # Credits
    # -------------------------------------------------------------------------

    def earned_income_credit(
        self,
        earned_income: float,
        agi: float,
        filing_status: FilingStatus,
        qualifying_children: int,
        investment_income: float = 0.0,
    ) -> float:
        """
        Earned Income Credit from the dataset's piecewise schedule.

        Zero for statuses without a schedule, when investment income exceeds
        the limit, or when earned income or AGI reaches the cap. When AGI is
        past the start of the phase-out the smaller of the credit at earned
        income and at AGI applies.
        """
        eic = self.dataset.eic
        curve = eic.curve(filing_status, qualifying_children)
        if curve is None:
            return 0.0
        if investment_income > eic.max_investment_income:
            return 0.0

        cap = eic.cap(filing_status, qualifying_children)
        if earned_income >= cap or agi >= cap:
            return 0.0

        credit = curve(earned_income)
        if agi >= eic.phase_out_start(filing_status, qualifying_children):
            credit = min(credit, curve(agi))
        # Curves extrapolate below zero outside their anchors
        return max(credit, 0.0)

    # -------------------------------------------------------------------------
    # Payroll and surtaxes
    # -------------------------------------------------------------------------

    def social_security_tax(self, wages: float) -> float:
        """Employee Social Security tax, capped at the wage base."""
        fica = self.dataset.fica
        taxable_wages = min(max(wages, 0.0), fica.max_income_ss_tax_applies)
        return min(taxable_wages * fica.ss_tax_rate, fica.max_ss_tax)

    def additional_medicare_tax(self, medicare_wages: float, filing_status: FilingStatus) -> float:
        fica = self.dataset.fica
        threshold = fica.additional_medicare_tax_threshold(filing_status)
        return fica.additional_medicare_tax_rate * max(0.0, medicare_wages - threshold)

    def net_investment_income_tax(
        self,
        net_investment_income: float,
        magi: float,
        filing_status: FilingStatus,
    ) -> float:
        """Form 8960: rate on the smaller of NII and MAGI over the threshold."""
        niit = self.dataset.net_investment_income_tax
        excess = max(0.0, magi - niit.tax_threshold(filing_status))
        return niit.tax_rate * max(0.0, min(net_investment_income, excess))

    # -------------------------------------------------------------------------
    # Alternative Minimum Tax
    # -------------------------------------------------------------------------

    def amt_exemption(self, amti: float, filing_status: FilingStatus) -> float:
        """
        AMT exemption for the tier that covers amti.

        Raises:
            ExemptionWorksheetRequired: If no tier applies
        """
        exemption = self.dataset.amt.exemption(filing_status, amti)
        if exemption is None:
            raise ExemptionWorksheetRequired(FilingStatus.parse(filing_status), amti)
        return exemption

    def tentative_minimum_tax(self, amti: float, filing_status: FilingStatus) -> float:
        """26% up to the status cap, 28% above, on AMTI less the exemption."""
        status = FilingStatus.parse(filing_status)
        base = max(0.0, amti - self.amt_exemption(amti, status))
        return self.dataset.amt.rate_tables[status].tax(base)

    def alternative_minimum_tax(
        self,
        amti: float,
        regular_tax: float,
        filing_status: FilingStatus,
    ) -> float:
        return max(0.0, self.tentative_minimum_tax(amti, filing_status) - regular_tax)

    # -------------------------------------------------------------------------
    # Social Security benefits
    # -------------------------------------------------------------------------

    def taxable_social_security(
        self,
        benefits: float,
        other_income: float,
        filing_status: FilingStatus,
    ) -> float:
        """
        Social Security Benefits Worksheet.

        Up to 50% of benefits become taxable once other income plus half the
        benefits passes the line 8 base, and up to 85% past the line 10 band.
        """
        if benefits <= 0:
            return 0.0
        bases = self.dataset.social_security_benefits[FilingStatus.parse(filing_status)]

        half = benefits * SS_LOWER_INCLUSION
        combined = other_income + half
        if combined <= bases.l8:
            return 0.0

        over_base = combined - bases.l8
        over_band = max(0.0, over_base - bases.l10)
        lower_tier = min(half, min(over_base, bases.l10) * SS_LOWER_INCLUSION)
        return min(lower_tier + over_band * SS_UPPER_INCLUSION, benefits * SS_UPPER_INCLUSION)

    # -------------------------------------------------------------------------
    # Full computation
    # -------------------------------------------------------------------------

    def compute(self, unit: TaxUnit) -> TaxLiability:
        """Compute every liability figure for one tax unit."""
        status = FilingStatus.parse(unit.filing_status)

        other_income = unit.wages + unit.other_ordinary_income + unit.qualified_income
        taxable_ss = self.taxable_social_security(unit.social_security_benefits, other_income, status)
        agi = other_income + taxable_ss

        deduction = max(self.standard_deduction(status, unit.allowances), unit.itemized_deductions)
        taxable = max(0.0, agi - deduction)

        if unit.qualified_income > 0:
            regular_tax = self.capital_gains_tax(taxable, unit.qualified_income, status)
        else:
            regular_tax = self.ordinary_income_tax(taxable, status)

        amt = 0.0
        if unit.amti is not None:
            amt = self.alternative_minimum_tax(unit.amti, regular_tax, status)

        liability = TaxLiability(
            filing_status=status,
            agi=agi,
            deduction=deduction,
            taxable_income=taxable,
            taxable_social_security=taxable_ss,
            regular_tax=regular_tax,
            alternative_minimum_tax=amt,
            earned_income_credit=self.earned_income_credit(
                unit.wages, agi, status, unit.qualifying_children, unit.net_investment_income
            ),
            social_security_tax=self.social_security_tax(unit.wages),
            additional_medicare_tax=self.additional_medicare_tax(unit.wages, status),
            net_investment_income_tax=self.net_investment_income_tax(
                unit.net_investment_income, agi, status
            ),
            marginal_rate=self.dataset.ordinary_brackets(status).rate_at(taxable),
        )
        logger.debug(
            "%s %s: taxable income %.2f, total tax %.2f",
            self.year, status.value, taxable, liability.total_tax,
        )
        return liability
