"""
Federal figures for tax year 2024.

Sources:
- Ordinary and long-term capital gains brackets: Rev. Proc. 2023-34
- Standard deduction with age/blindness allowances: end of Form 1040-SR
- EITC: IRS Earned Income and EITC Tables
"""

from ..brackets import BracketTable, TieredTable
from ..dataset import (
    AMTParameters,
    EICParameters,
    FicaParameters,
    HSAContributionLimits,
    NetInvestmentIncomeTaxParameters,
    QualifyingDependents,
    SocialSecurityBenefitsBase,
    TaggedAmount,
    TaxYearDataset,
)
from ..filing_status import FilingStatus
from ..thresholds import ThresholdSchedule

YEAR = 2024

S, MFJ, MFS, HOH, W = (
    FilingStatus.S,
    FilingStatus.MFJ,
    FilingStatus.MFS,
    FilingStatus.HOH,
    FilingStatus.W,
)


# =============================================================================
# ORDINARY INCOME
# =============================================================================

ORDINARY_RATES = [10, 12, 22, 24, 32, 35, 37]

ORDINARY_BRACKETS = {
    S: [11600, 47150, 100525, 191950, 243725, 609350],
    MFJ: [23200, 94300, 201050, 383900, 487450, 731200],
    W: [23200, 94300, 201050, 383900, 487450, 731200],
    MFS: [11600, 47150, 100525, 191950, 243725, 365600],
    HOH: [16550, 63100, 100500, 191950, 243700, 609350],
}

# Index = number of age/blindness allowances
STANDARD_DEDUCTIONS = {
    S: [14600, 16550, 18500],
    MFJ: [29200, 30800, 32400, 34000, 35600],
    W: [29200, 30800, 32400],
    MFS: [14600, 16200, 17800, 19400, 21000],
    HOH: [21900, 23850, 25800],
}

# Personal exemptions are zero through 2025
STANDARD_EXEMPTIONS = {S: 0, MFJ: 0, W: 0, MFS: 0, HOH: 0}

_LABELS = {
    S: "Single",
    MFJ: "Married",
    W: "Widowed",
    MFS: "Married Filing Separately",
    HOH: "Head of Household",
}


def _deduction_name(status: FilingStatus, allowances: int) -> str:
    name = f"Standard Deduction ({_LABELS[status]})"
    if allowances == 1:
        return f"{name} with 1 age or blindness allowance"
    if allowances > 1:
        return f"{name} with {allowances} age or blindness allowances"
    return name


# =============================================================================
# LONG-TERM CAPITAL GAINS
# =============================================================================

LTCG_RATES = [0, 15, 20]

LTCG_BRACKETS = {
    S: [47025, 518900],
    MFJ: [94050, 583750],
    W: [94050, 583750],
    MFS: [47025, 291850],
    HOH: [63000, 551350],
}


# =============================================================================
# PAYROLL, SURTAXES, AMT
# =============================================================================

FICA = {
    "ss_tax_rate": 6.2 / 100,
    # Published as is; the wage base binds first (168600 * 6.2% = 10453.2)
    "max_ss_tax": 10459.2,
    "max_income_ss_tax_applies": 168600,
    "regular_medicare_tax_rate": 1.45 / 100,
    "additional_medicare_tax_rate": 0.9 / 100,
}

# Single, Head of Household and Qualifying Surviving Spouse use the default
ADDITIONAL_MEDICARE_THRESHOLD = (200000, {MFJ: 250000, MFS: 125000})

NIIT_RATE = 0.038
NIIT_THRESHOLD = (200000, {MFJ: 250000, W: 250000, MFS: 125000})

# (income ceiling, exemption). Statuses without tiers always go through the
# Exemption Worksheet.
AMT_EXEMPTIONS = {
    S: [(609350, 85700)],
    MFJ: [(1218700, 133300)],
    MFS: [(609350, 66650)],
    HOH: [],
    W: [],
}
AMT_CAP = (232600, {MFS: 116300})


# =============================================================================
# EARNED INCOME CREDIT
# =============================================================================

# Line 11 caps for 0, 1, 2, 3+ qualifying children
EIC_CAPS = [19130, 48436, 53622, 57784]
EIC_MFJ_CAPS = [25760, 55529, 60411, 64573]

# Phase-in, plateau, phase-out control points for 0, 1, 2, 3+ children
EIC_UNMARRIED_POINTS = [
    [(0, 0), (8510, 600), (10640, 600), (19130, 0)],
    [(0, 0), (12750, 4168), (23390, 4168), (48436, 0)],
    [(0, 0), (17910, 6892), (23390, 6892), (53622, 0)],
    [(0, 0), (17910, 7754), (23390, 7754), (57784, 0)],
]
EIC_MARRIED_POINTS = [
    [(0, 0), (8510, 600), (17750, 600), (25760, 0)],
    [(0, 0), (12750, 4168), (30520, 4168), (55529, 0)],
    [(0, 0), (17910, 6892), (30520, 6892), (60411, 0)],
    [(0, 0), (17910, 7754), (30520, 7754), (64573, 0)],
]
EIC_MAX_INVESTMENT_INCOME = 11600


# =============================================================================
# OTHER
# =============================================================================

HSA_LIMITS = {"self-only": 4150, "family": 8300}

QUALIFYING_DEPENDENTS = {
    "child_max_age": 17,
    "qualifying_dependent_max_age": 19,
    "qualifying_student_max_age": 24,
}

# Social Security Benefits Worksheet lines 8 and 10
SS_BENEFITS_BASES = {
    S: (25000, 9000),
    W: (25000, 9000),
    HOH: (25000, 9000),
    MFS: (25000, 9000),
    MFJ: (32000, 12000),
}


def build() -> TaxYearDataset:
    """Assemble (and validate) the 2024 dataset."""
    return TaxYearDataset(
        year=YEAR,
        ordinary={
            s: BracketTable.from_percentages(bps, ORDINARY_RATES, name=f"{YEAR} ordinary ({s.value})")
            for s, bps in ORDINARY_BRACKETS.items()
        },
        long_term_capital_gains={
            s: BracketTable.from_percentages(bps, LTCG_RATES, name=f"{YEAR} LTCG ({s.value})")
            for s, bps in LTCG_BRACKETS.items()
        },
        deductions={
            s: tuple(TaggedAmount(_deduction_name(s, i), amt) for i, amt in enumerate(amounts))
            for s, amounts in STANDARD_DEDUCTIONS.items()
        },
        exemptions={
            s: (TaggedAmount(f"Standard Exemption ({_LABELS[s]})", amt),)
            for s, amt in STANDARD_EXEMPTIONS.items()
        },
        fica=FicaParameters(
            additional_medicare_tax_threshold=ThresholdSchedule.with_overrides(
                *ADDITIONAL_MEDICARE_THRESHOLD, name="Additional Medicare Tax threshold"
            ),
            **FICA,
        ),
        net_investment_income_tax=NetInvestmentIncomeTaxParameters(
            tax_rate=NIIT_RATE,
            tax_threshold=ThresholdSchedule.with_overrides(*NIIT_THRESHOLD, name="NIIT threshold"),
        ),
        amt=AMTParameters(
            exemptions={
                s: TieredTable(tuple(tiers), name=f"{YEAR} AMT exemption ({s.value})")
                for s, tiers in AMT_EXEMPTIONS.items()
            },
            cap=ThresholdSchedule.with_overrides(*AMT_CAP, name="AMT 26% cap"),
        ),
        eic=EICParameters.from_points(
            caps={S: EIC_CAPS, W: EIC_CAPS, HOH: EIC_CAPS, MFS: None, MFJ: EIC_MFJ_CAPS},
            points={
                S: EIC_UNMARRIED_POINTS,
                W: EIC_UNMARRIED_POINTS,
                HOH: EIC_UNMARRIED_POINTS,
                MFS: None,
                MFJ: EIC_MARRIED_POINTS,
            },
            max_investment_income=EIC_MAX_INVESTMENT_INCOME,
        ),
        hsa_contribution_limits=HSAContributionLimits(
            self_only=HSA_LIMITS["self-only"], family=HSA_LIMITS["family"]
        ),
        qualifying_dependents=QualifyingDependents(**QUALIFYING_DEPENDENTS),
        social_security_benefits={
            s: SocialSecurityBenefitsBase(l8=l8, l10=l10) for s, (l8, l10) in SS_BENEFITS_BASES.items()
        },
    )


DATASET = build()
