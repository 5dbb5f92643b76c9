"""Plain-text receipt for a finalized bill."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from ..cart.pricing import CGST_RATE, SGST_RATE, format_amount
from .models import Bill

RESTAURANT_NAME = "DAJAJ"
TAGLINE = "Real Grill Taste"
LOCATION = "Kundapura"
FOOTER = "Thank you. Visit Again."

_WIDTH = 44


def _boxed(lines: List[str]) -> List[str]:
    inner_width = max(len(line) for line in lines) + 2
    out = ["┌" + "─" * inner_width + "┐"]
    for line in lines:
        out.append(f"│ {line.ljust(inner_width - 2)} │")
    out.append("└" + "─" * inner_width + "┘")
    return out


def _row(label: str, value: str, width: int = _WIDTH) -> str:
    return f"{label}{value.rjust(width - len(label))}"


def _local(created_at: Optional[datetime]) -> datetime:
    if created_at is None:
        return datetime.now()
    if created_at.tzinfo is not None:
        return created_at.astimezone()
    return created_at


def render_receipt(bill: Bill) -> str:
    """Render a bill as fixed-width text suitable for terminals and printers."""
    when = _local(bill.created_at)
    lines: List[str] = []

    lines.extend(_boxed([RESTAURANT_NAME.center(_WIDTH - 4), TAGLINE.center(_WIDTH - 4), LOCATION.center(_WIDTH - 4)]))

    details: List[Tuple[str, str]] = [
        ("Bill No", bill.bill_no),
        ("Date", when.strftime("%d %b %Y")),
        ("Time", when.strftime("%I:%M %p")),
        ("Customer", bill.customer.name),
    ]
    if bill.customer.mobile:
        details.append(("Mobile", bill.customer.mobile))
    label_width = max(len(label) for label, _ in details)
    for label, value in details:
        lines.append(f"{label.ljust(label_width)} : {value}")

    lines.append("-" * _WIDTH)
    lines.append(f"{'Item':<28}{'Qty':>5}{'Price':>11}")
    lines.append("-" * _WIDTH)
    for item in bill.items:
        lines.append(f"{item.name[:28]:<28}{item.qty:>5}{format_amount(item.item_total):>11}")
        lines.append(f"  {item.variant}")
        lines.append(f"  {item.sku}")
        for addon in item.addons:
            lines.append(f"    + {addon.name} ({format_amount(addon.price)})")
    lines.append("-" * _WIDTH)

    lines.append(_row("Subtotal:", format_amount(bill.subtotal)))
    lines.append(_row(f"CGST ({CGST_RATE * 100:g}%):", format_amount(bill.cgst)))
    lines.append(_row(f"SGST ({SGST_RATE * 100:g}%):", format_amount(bill.sgst)))
    lines.append("=" * _WIDTH)
    lines.append(_row("Grand Total:", format_amount(bill.grand_total)))
    lines.append(_row("Payment Mode:", bill.payment_mode))
    lines.append("")
    lines.append(FOOTER.center(_WIDTH))
    return "\n".join(lines)
