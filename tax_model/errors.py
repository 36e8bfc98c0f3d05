"""
Error types raised by the tax engine.

Malformed tables are configuration errors and fail loudly when a table is
built. A tier lookup that finds no tier is not an error at the engine level
(it returns None); callers that have no fallback raise
ExemptionWorksheetRequired.
"""


class MalformedTableError(ValueError):
    """A bracket, tier or curve table violates its construction invariants."""


class ExemptionWorksheetRequired(NotImplementedError):
    """
    Income is above every AMT exemption tier.

    The published instructions route these filers through the Exemption
    Worksheet, which is not implemented.
    """

    def __init__(self, filing_status, income: float):
        self.filing_status = filing_status
        self.income = income
        super().__init__(
            f"No AMT exemption tier applies to {filing_status} at income "
            f"${income:,.2f}; the Exemption Worksheet is not implemented"
        )
