"""WhatsApp share links for finalized bills."""

from __future__ import annotations

import re
from urllib.parse import quote

from ..cart.pricing import format_amount
from ..errors import InvalidMobileNumberError
from .access import bill_url

COUNTRY_CODE = "91"
WHATSAPP_BASE_URL = "https://wa.me"

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def normalize_mobile(mobile: str) -> str:
    """
    Reduce a mobile number to its 10 national digits.

    Separators are dropped and a leading ``+91`` / ``91`` country code is
    removed from 12-digit input.

    Raises:
        InvalidMobileNumberError: The result is not exactly 10 digits
    """
    digits = re.sub(r"\D", "", mobile or "")
    if len(digits) == 12 and digits.startswith(COUNTRY_CODE):
        digits = digits[len(COUNTRY_CODE):]
    if len(digits) != 10:
        raise InvalidMobileNumberError("Invalid mobile number. Please enter a 10-digit mobile number.")
    return digits


def build_bill_message(bill_no: str, grand_total: float, link: str) -> str:
    return (
        "Thank you for ordering from DAJAJ 🍗\n"
        f"Bill No: {bill_no}\n"
        f"Total: {format_amount(grand_total)}\n"
        "\n"
        "View & Download Bill:\n"
        f"{link}"
    )


def build_whatsapp_link(
    mobile: str,
    bill_no: str,
    grand_total: float,
    public_token: str,
    base_url: str,
) -> str:
    """
    Build a wa.me link that opens a chat with the bill message pre-filled.

    Args:
        mobile: Recipient mobile number, with or without country code
        bill_no: Finalized bill number
        grand_total: Bill grand total
        public_token: Bill public token
        base_url: Public base URL of the bill viewer

    Returns:
        The WhatsApp URL

    Raises:
        InvalidMobileNumberError: Mobile number is not valid
        ValueError: Bill number or token is missing
    """
    clean_mobile = normalize_mobile(mobile)
    if not bill_no:
        raise ValueError("Bill number is required")
    if not public_token:
        raise ValueError("Bill token is required")

    message = build_bill_message(bill_no, grand_total, bill_url(base_url, bill_no, public_token))
    return f"{WHATSAPP_BASE_URL}/{COUNTRY_CODE}{clean_mobile}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"
