"""Order totals and the CGST/SGST breakdown.

Menu prices are tax inclusive, so the grand total equals the subtotal and
the two GST components are informational: each is 2.5% of the grand total.
They are not added on top, which means subtotal + cgst + sgst shown on a
receipt will not equal the grand total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

CGST_RATE = 0.025
SGST_RATE = 0.025


class _PricedLine(Protocol):
    @property
    def line_total(self) -> float: ...


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: float
    cgst: float
    sgst: float
    grand_total: float


def calculate_totals(lines: Iterable[_PricedLine]) -> PriceBreakdown:
    """Derive subtotal, taxes and grand total from priced lines at full precision."""
    subtotal = sum((line.line_total for line in lines), 0.0)
    grand_total = subtotal
    return PriceBreakdown(
        subtotal=subtotal,
        cgst=grand_total * CGST_RATE,
        sgst=grand_total * SGST_RATE,
        grand_total=grand_total,
    )


def format_amount(value: float) -> str:
    """Rupee amount rounded to two decimals for display."""
    return f"₹{value:.2f}"
