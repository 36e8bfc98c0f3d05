"""Microsimulation engine for evaluating tax-year datasets over populations."""

from .engine import MicroTaxCalculator
from .data_generator import SyntheticPopulation

__all__ = ["MicroTaxCalculator", "SyntheticPopulation"]
