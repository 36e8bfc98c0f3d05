
import logging
from typing import Optional

import numpy as np
import pandas as pd

from ..dataset import TaxYearDataset
from ..datasets import current_dataset
from ..filing_status import FilingStatus

logger = logging.getLogger(__name__)


class MicroTaxCalculator:
    """
    Vectorized tax calculator that processes individual tax units.

    Rows are grouped by filing status so each group is evaluated on its own
    bracket tables and credit curves. Results match FederalTaxCalculator
    row for row (Social Security benefits and AMT are not modeled here).
    """

    REQUIRED_COLUMNS = ("filing_status", "wages")
    OPTIONAL_COLUMNS = {
        "other_ordinary_income": 0.0,
        "qualified_income": 0.0,
        "net_investment_income": 0.0,
        "itemized_deductions": 0.0,
        "allowances": 0,
        "children": 0,
    }
    OUTPUT_COLUMNS = (
        "agi",
        "std_deduction",
        "taxable_income",
        "income_tax_before_credits",
        "eic",
        "additional_medicare_tax",
        "niit",
        "final_tax",
        "effective_tax_rate",
    )

    def __init__(self, dataset: Optional[TaxYearDataset] = None):
        self.dataset = dataset if dataset is not None else current_dataset()
        self.year = self.dataset.year

    def calculate(self, pop: pd.DataFrame) -> pd.DataFrame:
        """
        Calculate tax liability for the population.
        """
        missing = [c for c in self.REQUIRED_COLUMNS if c not in pop.columns]
        if missing:
            raise ValueError(f"Population is missing required columns: {missing}")

        df = pop.copy()
        for col, default in self.OPTIONAL_COLUMNS.items():
            if col not in df.columns:
                df[col] = default

        statuses = df["filing_status"].map(FilingStatus.parse)

        # 1. AGI
        df["agi"] = df["wages"] + df["other_ordinary_income"] + df["qualified_income"]

        for col in self.OUTPUT_COLUMNS[1:-2]:
            df[col] = 0.0

        # 2-5. Each filing status on its own tables
        for status in FilingStatus:
            mask = (statuses == status).to_numpy()
            if not mask.any():
                continue
            group = df.loc[mask]
            for col, values in self._calculate_group(status, group).items():
                df.loc[mask, col] = values

        # 6. Final tax (EIC is refundable, so this can be negative)
        df["final_tax"] = (
            df["income_tax_before_credits"]
            - df["eic"]
            + df["additional_medicare_tax"]
            + df["niit"]
        )

        # Metrics
        df["effective_tax_rate"] = np.where(
            df["agi"] > 0, df["final_tax"] / df["agi"].where(df["agi"] > 0, 1.0), 0.0
        )

        logger.debug("Calculated %d tax units for %d", len(df), self.year)
        return df

    def _calculate_group(self, status: FilingStatus, group: pd.DataFrame) -> dict:
        ds = self.dataset
        wages = group["wages"].to_numpy(dtype=float)
        agi = group["agi"].to_numpy(dtype=float)

        # 2. Standard deduction by exact allowance index
        std_amounts = np.array([d.amount for d in ds.deductions[status]], dtype=float)
        allowances = group["allowances"].to_numpy(dtype=int)
        if (allowances < 0).any() or (allowances >= len(std_amounts)).any():
            raise ValueError(
                f"{status.label} allows 0-{len(std_amounts) - 1} age/blindness allowances"
            )
        std_deduction = std_amounts[allowances]

        # 3. Taxable income
        deduction = np.maximum(std_deduction, group["itemized_deductions"].to_numpy(dtype=float))
        taxable = np.maximum(0.0, agi - deduction)

        # 4. Regular tax with qualified income stacked on top
        ordinary = ds.ordinary_brackets(status)
        preferential = ds.capital_gains_brackets(status)
        qualified = np.clip(group["qualified_income"].to_numpy(dtype=float), 0.0, taxable)
        ordinary_part = taxable - qualified
        regular_tax = ordinary.tax_array(ordinary_part) + (
            preferential.tax_array(taxable) - preferential.tax_array(ordinary_part)
        )
        regular_tax = np.minimum(regular_tax, ordinary.tax_array(taxable))

        # 5. Credits and surtaxes
        investment = group["net_investment_income"].to_numpy(dtype=float)
        eic = self._earned_income_credit(
            status, wages, agi, group["children"].to_numpy(dtype=int), investment
        )

        fica = ds.fica
        additional_medicare = fica.additional_medicare_tax_rate * np.maximum(
            0.0, wages - fica.additional_medicare_tax_threshold(status)
        )

        niit = ds.net_investment_income_tax
        excess = np.maximum(0.0, agi - niit.tax_threshold(status))
        niit_tax = niit.tax_rate * np.maximum(0.0, np.minimum(investment, excess))

        return {
            "std_deduction": std_deduction,
            "taxable_income": taxable,
            "income_tax_before_credits": regular_tax,
            "eic": eic,
            "additional_medicare_tax": additional_medicare,
            "niit": niit_tax,
        }

    def _earned_income_credit(self, status, earned, agi, children, investment) -> np.ndarray:
        """Vectorized FederalTaxCalculator.earned_income_credit for one status."""
        eic = self.dataset.eic
        credit = np.zeros(len(earned))
        curves = eic.curves[status]
        if curves is None:
            return credit
        if (children < 0).any():
            raise ValueError("qualifying children must be >= 0")

        schedule = np.minimum(children, len(curves) - 1)
        for idx, curve in enumerate(curves):
            m = schedule == idx
            if not m.any():
                continue
            cap = eic.caps[status][idx]
            phase_out_start = curve.points[-2][0]

            value = curve.evaluate_array(earned[m])
            value = np.where(
                agi[m] >= phase_out_start, np.minimum(value, curve.evaluate_array(agi[m])), value
            )
            eligible = (
                (investment[m] <= eic.max_investment_income)
                & (earned[m] < cap)
                & (agi[m] < cap)
            )
            credit[m] = np.where(eligible, np.maximum(value, 0.0), 0.0)
        return credit

    def run_reform(self, pop: pd.DataFrame, reform: TaxYearDataset) -> pd.DataFrame:
        """
        Run the population under a reform dataset and compare to this one.

        The reform is a separate dataset object (e.g. built with
        dataclasses.replace); neither dataset is modified.
        """
        baseline = self.calculate(pop)
        reformed = MicroTaxCalculator(reform).calculate(pop)

        result = reformed.copy()
        result["baseline_final_tax"] = baseline["final_tax"]
        result["tax_change"] = reformed["final_tax"] - baseline["final_tax"]
        return result
