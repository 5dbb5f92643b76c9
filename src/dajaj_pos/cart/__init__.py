"""Cart aggregation and pricing."""

from .cart import AddonCharge, Cart, LineItem
from .pricing import CGST_RATE, SGST_RATE, PriceBreakdown, calculate_totals, format_amount

__all__ = [
    "AddonCharge",
    "Cart",
    "LineItem",
    "CGST_RATE",
    "SGST_RATE",
    "PriceBreakdown",
    "calculate_totals",
    "format_amount",
]
