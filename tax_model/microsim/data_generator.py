
import numpy as np
import pandas as pd
from dataclasses import dataclass

from ..filing_status import FilingStatus


@dataclass
class SyntheticPopulation:
    """
    Generates synthetic tax units (taxpayers) for microsimulation.
    In a production system, this would load CPS ASEC or IRS PUF data.
    """
    size: int = 10_000
    seed: int = 42

    def generate(self) -> pd.DataFrame:
        """
        Generate a synthetic population of tax units with realistic(ish)
        distributions of income types and household composition.
        """
        rng = np.random.RandomState(self.seed)
        n = self.size

        # 1. Wages (Log-normal distribution to capture inequality)
        # Shifted to ensure some zero-wage filers
        wages = rng.lognormal(mean=10.5, sigma=1.0, size=n)
        wages = np.where(rng.random_sample(n) < 0.15, 0, wages)  # 15% have no wages

        # 2. Qualified dividends / long-term gains (Highly concentrated)
        gains = rng.lognormal(mean=10, sigma=2.5, size=n)
        wage_percentiles = pd.Series(wages).rank(pct=True).to_numpy()
        # Higher probability of gains if higher wages (correlation)
        gains_mask = rng.random_sample(n) > (0.95 - 0.5 * wage_percentiles)
        gains = np.where(gains_mask, gains, 0)

        interest = wages * rng.uniform(0, 0.05, n)

        # 3. Demographics
        married = rng.choice([0, 1], size=n, p=[0.5, 0.5])
        children = rng.choice([0, 1, 2, 3, 4], size=n, p=[0.6, 0.15, 0.15, 0.08, 0.02])
        age = rng.randint(18, 90, n)

        # Married couples mostly file jointly; unmarried parents file as
        # head of household; a few surviving spouses keep joint rates
        draw = rng.random_sample(n)
        filing_status = np.where(
            married == 1,
            np.where(draw < 0.05, FilingStatus.MFS.value, FilingStatus.MFJ.value),
            np.where(
                children > 0,
                np.where(draw < 0.03, FilingStatus.W.value, FilingStatus.HOH.value),
                FilingStatus.S.value,
            ),
        )
        allowances = (age >= 65).astype(int)

        # 4. Weights
        # Each record represents X actual households.
        # Simple version: equal weights summing to US population (~150M filers)
        total_filers = 150_000_000
        weight = total_filers / n

        df = pd.DataFrame({
            'id': range(n),
            'weight': weight,
            'filing_status': filing_status,
            'wages': wages,
            'other_ordinary_income': interest,
            'qualified_income': gains,
            'net_investment_income': interest + gains,
            'children': children,
            'allowances': allowances,
            'age': age,
        })

        return df


if __name__ == "__main__":
    pop = SyntheticPopulation()
    df = pop.generate()
    print(df.describe())
