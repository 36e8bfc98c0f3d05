"""
Filing status enumeration.

Filing status is a lookup key only: every per-status table in a tax-year
dataset is keyed by these five members and nothing in the engine branches
on a particular member.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, TypeVar

from .errors import MalformedTableError

T = TypeVar("T")


class FilingStatus(Enum):
    """Household/marital category that selects which tables apply."""
    S = "S"  # Single
    MFJ = "MFJ"  # Married filing jointly
    MFS = "MFS"  # Married filing separately
    HOH = "HOH"  # Head of household
    W = "W"  # Qualifying surviving spouse

    @property
    def label(self) -> str:
        return FILING_STATUS_LABELS[self]

    @classmethod
    def parse(cls, value) -> "FilingStatus":
        """Accept an enum member, its value ("MFJ") or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unknown filing status: {value!r}") from None


FILING_STATUS_LABELS = {
    FilingStatus.S: "Single",
    FilingStatus.MFJ: "Married Filing Jointly",
    FilingStatus.MFS: "Married Filing Separately",
    FilingStatus.HOH: "Head of Household",
    FilingStatus.W: "Qualifying Surviving Spouse",
}


def by_status(table: Mapping[FilingStatus, T], name: str = "table") -> Mapping[FilingStatus, T]:
    """
    Freeze a per-status table after checking it covers every filing status.

    Adding or removing a FilingStatus member makes every dataset table that
    was not updated fail here, when the dataset is built.
    """
    keys = set(table)
    missing = set(FilingStatus) - keys
    extra = keys - set(FilingStatus)
    if missing or extra:
        raise MalformedTableError(
            f"{name} must cover every filing status exactly once "
            f"(missing: {sorted(s.value for s in missing)}, "
            f"unexpected: {sorted(map(repr, extra))})"
        )
    return MappingProxyType({status: table[status] for status in FilingStatus})
