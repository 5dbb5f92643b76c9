"""Bill issuance, storage and access module entry point."""

from .access import BillViewer, authorize_view, bill_url, get_bill, list_bills_for_date
from .issuance import BillIssuer, format_bill_no
from .memory import InMemoryBillRepository
from .models import Bill, BillAddon, BillItem, Customer, IssuedBill
from .repository import BillRepository

__all__ = [
    "Bill",
    "BillAddon",
    "BillItem",
    "BillIssuer",
    "BillRepository",
    "BillViewer",
    "Customer",
    "InMemoryBillRepository",
    "IssuedBill",
    "authorize_view",
    "bill_url",
    "format_bill_no",
    "get_bill",
    "list_bills_for_date",
]
