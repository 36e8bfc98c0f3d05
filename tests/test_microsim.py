"""
Tests for the vectorized microsimulation engine.
"""

import dataclasses

import numpy as np
import pandas as pd
import pytest

from tax_model import BracketTable, FederalTaxCalculator, FilingStatus, TaxUnit
from tax_model.microsim import MicroTaxCalculator, SyntheticPopulation


def test_population_shape(synthetic_population):
    assert len(synthetic_population) == 500
    for col in ("filing_status", "wages", "qualified_income", "children", "allowances", "weight"):
        assert col in synthetic_population.columns
    statuses = set(synthetic_population["filing_status"])
    assert statuses <= {s.value for s in FilingStatus}


def test_population_is_reproducible():
    a = SyntheticPopulation(size=200, seed=11).generate()
    b = SyntheticPopulation(size=200, seed=11).generate()
    pd.testing.assert_frame_equal(a, b)


def test_matches_single_return_calculator(micro_calculator, calculator, synthetic_population):
    result = micro_calculator.calculate(synthetic_population)

    for row in result.itertuples():
        unit = TaxUnit(
            filing_status=row.filing_status,
            wages=row.wages,
            other_ordinary_income=row.other_ordinary_income,
            qualified_income=row.qualified_income,
            net_investment_income=row.net_investment_income,
            allowances=row.allowances,
            qualifying_children=row.children,
        )
        expected = calculator.compute(unit)
        assert row.taxable_income == pytest.approx(expected.taxable_income, abs=1e-6)
        assert row.income_tax_before_credits == pytest.approx(expected.regular_tax, abs=1e-6)
        assert row.eic == pytest.approx(expected.earned_income_credit, abs=1e-6)
        assert row.niit == pytest.approx(expected.net_investment_income_tax, abs=1e-6)
        assert row.final_tax == pytest.approx(expected.total_tax, abs=1e-6)


def test_input_not_modified(micro_calculator, synthetic_population):
    before = synthetic_population.copy()
    micro_calculator.calculate(synthetic_population)
    pd.testing.assert_frame_equal(synthetic_population, before)


def test_minimal_columns(micro_calculator):
    pop = pd.DataFrame({"filing_status": ["S", "MFJ"], "wages": [60_000.0, 0.0]})
    result = micro_calculator.calculate(pop)

    assert result["income_tax_before_credits"].iloc[0] == pytest.approx(5_216.0)
    assert result["final_tax"].iloc[1] == 0.0
    assert result["effective_tax_rate"].iloc[1] == 0.0


def test_missing_required_columns(micro_calculator):
    with pytest.raises(ValueError, match="wages"):
        micro_calculator.calculate(pd.DataFrame({"filing_status": ["S"]}))


def test_allowance_out_of_range(micro_calculator):
    pop = pd.DataFrame({"filing_status": ["S"], "wages": [50_000.0], "allowances": [3]})
    with pytest.raises(ValueError):
        micro_calculator.calculate(pop)


def test_unknown_filing_status(micro_calculator):
    pop = pd.DataFrame({"filing_status": ["married"], "wages": [50_000.0]})
    with pytest.raises(ValueError):
        micro_calculator.calculate(pop)


def test_run_reform(dataset_2024, micro_calculator, synthetic_population):
    higher = {
        s: BracketTable.from_percentages(t.breakpoints, [r + 1 for r in t.rates_pct])
        for s, t in dataset_2024.ordinary.items()
    }
    reform = dataclasses.replace(dataset_2024, ordinary=higher)

    result = micro_calculator.run_reform(synthetic_population, reform)

    assert (result["tax_change"] >= -1e-9).all()
    assert result["tax_change"].sum() > 0
    np.testing.assert_allclose(
        result["baseline_final_tax"],
        micro_calculator.calculate(synthetic_population)["final_tax"],
    )
    # Baseline dataset untouched
    assert micro_calculator.dataset.ordinary_brackets(FilingStatus.S).rates[0] == pytest.approx(0.10)


def test_default_dataset(monkeypatch):
    monkeypatch.setenv("TAX_MODEL_YEAR", "2024")
    assert MicroTaxCalculator().year == 2024


def test_agrees_with_calculator_at_breakpoints(calculator):
    ds = calculator.dataset
    incomes = np.array(ds.ordinary_brackets(FilingStatus.HOH).breakpoints) + 21_900
    pop = pd.DataFrame({"filing_status": FilingStatus.HOH, "wages": incomes})
    result = MicroTaxCalculator(ds).calculate(pop)
    for wages, tax in zip(incomes, result["income_tax_before_credits"]):
        assert tax == pytest.approx(calculator.ordinary_income_tax(wages - 21_900, "HOH"))


def test_output_columns_present(micro_calculator, synthetic_population):
    result = micro_calculator.calculate(synthetic_population)
    for col in MicroTaxCalculator.OUTPUT_COLUMNS:
        assert col in result.columns


def test_empty_population(micro_calculator):
    pop = pd.DataFrame({"filing_status": [], "wages": []})
    result = micro_calculator.calculate(pop)

    assert len(result) == 0
    for col in MicroTaxCalculator.OUTPUT_COLUMNS:
        assert col in result.columns


def test_empty_population_reform(dataset_2024, micro_calculator):
    pop = pd.DataFrame({"filing_status": [], "wages": []})
    result = micro_calculator.run_reform(pop, dataset_2024)

    assert len(result) == 0
    assert "tax_change" in result.columns


def test_population_fields():
    assert {f.name for f in dataclasses.fields(SyntheticPopulation)} == {"size", "seed"}
