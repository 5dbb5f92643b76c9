"""Bill lookup and the token check that gates unauthenticated viewing."""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional
from urllib.parse import quote, unquote

from ..utils.logging import get_logger
from .models import Bill
from .repository import BillStore

logger = get_logger(__name__)

INVALID_LINK_MESSAGE = "Invalid or expired link"
NOT_FOUND_MESSAGE = "Bill not found"


class DenialReason(str, Enum):
    MISSING_TOKEN = "missing token"
    TOKEN_MISMATCH = "token mismatch"


class ViewStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    DENIED = "denied"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[DenialReason] = None


@dataclass(frozen=True)
class BillView:
    """Outcome of opening a bill link."""

    status: ViewStatus
    bill: Optional[Bill] = None
    message: str = ""


def get_bill(store: BillStore, bill_no: str) -> Optional[Bill]:
    """Fetch a bill by number; None when no such bill exists."""
    doc = store.find_bill_by_number(bill_no)
    if doc is None:
        return None
    return Bill.from_document(doc)


def authorize_view(bill: Bill, is_operator: bool, provided_token: Optional[str]) -> AccessDecision:
    """
    Decide whether a requester may view a bill.

    Operators are always allowed. Anyone else needs the bill's public token;
    the provided value is URL-decoded once and must match exactly.
    """
    if is_operator:
        return AccessDecision(allowed=True)
    if not provided_token:
        return AccessDecision(allowed=False, reason=DenialReason.MISSING_TOKEN)
    decoded = unquote(provided_token)
    if not hmac.compare_digest(decoded.encode("utf-8"), bill.public_token.encode("utf-8")):
        return AccessDecision(allowed=False, reason=DenialReason.TOKEN_MISMATCH)
    return AccessDecision(allowed=True)


class BillViewer:
    """Resolves ``/bill/{billNo}?token=...`` requests against a store."""

    def __init__(self, store: BillStore) -> None:
        self.store = store

    def open(self, bill_no: str, is_operator: bool = False, token: Optional[str] = None) -> BillView:
        bill_no = (bill_no or "").strip()
        if not bill_no:
            return BillView(status=ViewStatus.NOT_FOUND, message="Invalid bill number")

        bill = get_bill(self.store, bill_no)
        if bill is None:
            logger.info(f"Bill {bill_no} not found")
            return BillView(status=ViewStatus.NOT_FOUND, message=NOT_FOUND_MESSAGE)

        decision = authorize_view(bill, is_operator, token)
        if not decision.allowed:
            # The reason is for diagnostics only; users see one generic message.
            logger.info(f"Access to bill {bill_no} denied: {decision.reason.value}")
            return BillView(status=ViewStatus.DENIED, message=INVALID_LINK_MESSAGE)
        return BillView(status=ViewStatus.OK, bill=bill)


def list_bills_for_date(store: BillStore, day: date) -> List[Bill]:
    """Bills created on a calendar day (server local time), newest first."""
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day, time.max).astimezone()
    docs = store.find_bills_created_between(start, end)
    bills = [Bill.from_document(doc) for doc in docs]
    bills.sort(key=lambda b: b.created_at or start, reverse=True)
    return bills


def bill_url(base_url: str, bill_no: str, public_token: str) -> str:
    """Public link to a bill, token URL-encoded."""
    return f"{base_url.rstrip('/')}/bill/{quote(bill_no, safe='')}?token={quote(public_token, safe='')}"
