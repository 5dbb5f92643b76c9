"""Bill documents as stored in the ``bills`` collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Customer:
    name: str
    mobile: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"name": self.name}
        if self.mobile:
            doc["mobile"] = self.mobile
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Customer":
        return cls(name=doc.get("name", ""), mobile=doc.get("mobile") or None)


@dataclass(frozen=True)
class BillAddon:
    name: str
    price: float


@dataclass(frozen=True)
class BillItem:
    """Frozen copy of a cart line taken when the bill is finalized."""

    sku: str
    name: str
    variant: str
    qty: int
    base_price: float
    addons: Tuple[BillAddon, ...] = ()
    item_total: float = 0.0

    def to_document(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "name": self.name,
            "variant": self.variant,
            "qty": self.qty,
            "basePrice": self.base_price,
            "addons": [{"name": a.name, "price": a.price} for a in self.addons],
            "itemTotal": self.item_total,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "BillItem":
        return cls(
            sku=doc.get("sku", ""),
            name=doc.get("name", ""),
            variant=doc.get("variant", ""),
            qty=int(doc.get("qty", 0)),
            base_price=float(doc.get("basePrice", 0.0)),
            addons=tuple(
                BillAddon(name=a.get("name", ""), price=float(a.get("price", 0.0)))
                for a in doc.get("addons", [])
            ),
            item_total=float(doc.get("itemTotal", 0.0)),
        )


@dataclass(frozen=True)
class Bill:
    """A finalized order. Never updated or deleted once stored."""

    bill_no: str
    public_token: str
    customer: Customer
    items: Tuple[BillItem, ...]
    subtotal: float
    cgst: float
    sgst: float
    grand_total: float
    payment_mode: str
    created_at: Optional[datetime] = field(default=None)

    def to_document(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names used in MongoDB."""
        doc: Dict[str, Any] = {
            "billNo": self.bill_no,
            "publicToken": self.public_token,
            "customer": self.customer.to_document(),
            "items": [item.to_document() for item in self.items],
            "subtotal": self.subtotal,
            "cgst": self.cgst,
            "sgst": self.sgst,
            "grandTotal": self.grand_total,
            "paymentMode": self.payment_mode,
        }
        if self.created_at is not None:
            doc["createdAt"] = self.created_at
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Bill":
        return cls(
            bill_no=doc["billNo"],
            public_token=doc["publicToken"],
            customer=Customer.from_document(doc.get("customer", {})),
            items=tuple(BillItem.from_document(item) for item in doc.get("items", [])),
            subtotal=float(doc.get("subtotal", 0.0)),
            cgst=float(doc.get("cgst", 0.0)),
            sgst=float(doc.get("sgst", 0.0)),
            grand_total=float(doc.get("grandTotal", 0.0)),
            payment_mode=doc.get("paymentMode", ""),
            created_at=doc.get("createdAt"),
        )


@dataclass(frozen=True)
class IssuedBill:
    """What the issuance protocol hands back to the caller."""

    bill_no: str
    public_token: str
