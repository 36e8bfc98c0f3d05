"""
Pytest fixtures for tax model tests.
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tax_model import FederalTaxCalculator, build_curve, get_dataset
from tax_model.microsim import MicroTaxCalculator, SyntheticPopulation


# =============================================================================
# DATASET FIXTURES
# =============================================================================

@pytest.fixture
def dataset_2024():
    """Published 2024 federal figures."""
    return get_dataset(2024)


@pytest.fixture
def ordinary_2024_single():
    """2024 single-filer ordinary brackets as published (percent rates)."""
    return (
        [11600, 47150, 100525, 191950, 243725, 609350],
        [10, 12, 22, 24, 32, 35, 37],
    )


# =============================================================================
# CURVE FIXTURES
# =============================================================================

@pytest.fixture
def eic_no_children_curve():
    """Phase-in / plateau / phase-out EIC curve, unmarried, no children."""
    return build_curve([(0, 0), (8510, 600), (10640, 600), (19130, 0)])


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def calculator(dataset_2024):
    """Single-return calculator on 2024 data."""
    return FederalTaxCalculator(dataset_2024)


@pytest.fixture
def micro_calculator(dataset_2024):
    """Vectorized calculator on 2024 data."""
    return MicroTaxCalculator(dataset_2024)


@pytest.fixture
def synthetic_population():
    """Small reproducible synthetic population."""
    return SyntheticPopulation(size=500, seed=7).generate()
