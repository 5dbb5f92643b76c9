"""Bill issuance: sequential numbering, token allocation and persistence."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..errors import BillAllocationError, OrderValidationError
from ..utils.logging import get_logger
from .models import Bill, BillItem, Customer, IssuedBill
from .repository import BillStore
from .tokens import DEFAULT_MAX_ATTEMPTS, allocate_public_token, generate_token

if TYPE_CHECKING:
    from ..cart.cart import Cart

logger = get_logger(__name__)

BILL_NO_PREFIX = "DAJAJ-"
DEFAULT_PAYMENT_MODE = "Cash"


def format_bill_no(sequence: int) -> str:
    """Render a counter value as a bill number, e.g. 7 -> ``DAJAJ-000007``."""
    return f"{BILL_NO_PREFIX}{sequence:06d}"


class BillIssuer:
    """Issues bills against a store.

    Nothing is written before the counter increment commits, and the counter
    is never rolled back: a failure after numbering leaves a gap, never a
    duplicate.
    """

    def __init__(
        self,
        store: BillStore,
        max_token_attempts: int = DEFAULT_MAX_ATTEMPTS,
        token_generator: Callable[[], str] = generate_token,
    ) -> None:
        self.store = store
        self.max_token_attempts = max_token_attempts
        self.token_generator = token_generator

    def issue_bill(
        self,
        customer: Customer,
        items: Sequence[BillItem],
        subtotal: float,
        cgst: float,
        sgst: float,
        grand_total: float,
        payment_mode: str = DEFAULT_PAYMENT_MODE,
    ) -> IssuedBill:
        """Issue a bill and return its number and public token."""
        bill = self.create_bill(customer, items, subtotal, cgst, sgst, grand_total, payment_mode)
        return IssuedBill(bill_no=bill.bill_no, public_token=bill.public_token)

    def create_bill(
        self,
        customer: Customer,
        items: Sequence[BillItem],
        subtotal: float,
        cgst: float,
        sgst: float,
        grand_total: float,
        payment_mode: str = DEFAULT_PAYMENT_MODE,
    ) -> Bill:
        """
        Allocate a bill number and public token, then store the bill.

        Args:
            customer: Customer name and optional mobile
            items: Frozen line items
            subtotal: Sum of line totals
            cgst: Central GST component
            sgst: State GST component
            grand_total: Amount payable
            payment_mode: Payment method label

        Returns:
            The stored bill including its creation time

        Raises:
            BillAllocationError: Counter or token could not be allocated
            BillPersistenceError: The bill document could not be written
        """
        bill_no = format_bill_no(self.store.next_bill_sequence())
        logger.info(f"Allocated bill number {bill_no}")

        allocation = allocate_public_token(
            self.store.token_exists, self.max_token_attempts, self.token_generator
        )
        if not allocation.ok:
            logger.error(f"Token generation exhausted for {bill_no} after {allocation.attempts} attempts")
            raise BillAllocationError(
                f"Could not allocate bill: no unique token after {allocation.attempts} attempts"
            )

        bill = Bill(
            bill_no=bill_no,
            public_token=allocation.token,
            customer=customer,
            items=tuple(items),
            subtotal=subtotal,
            cgst=cgst,
            sgst=sgst,
            grand_total=grand_total,
            payment_mode=payment_mode,
        )
        try:
            created_at = self.store.insert_bill(bill.to_document())
        except Exception:
            logger.error(f"Failed to persist bill {bill_no}; number left unused")
            raise
        logger.info(f"Stored bill {bill_no} total {grand_total:.2f}")
        return replace(bill, created_at=created_at)

    def checkout(
        self,
        cart: "Cart",
        customer_name: str,
        mobile: Optional[str] = None,
        payment_mode: str = DEFAULT_PAYMENT_MODE,
    ) -> Bill:
        """Finalize the cart into a bill and reset the cart on success."""
        name = (customer_name or "").strip()
        if not name:
            raise OrderValidationError("Please enter customer name")
        if cart.is_empty:
            raise OrderValidationError("Please add items to cart")

        totals = cart.totals()
        bill = self.create_bill(
            customer=Customer(name=name, mobile=(mobile or "").strip() or None),
            items=cart.snapshot(),
            subtotal=totals.subtotal,
            cgst=totals.cgst,
            sgst=totals.sgst,
            grand_total=totals.grand_total,
            payment_mode=payment_mode,
        )
        cart.clear()
        return bill
