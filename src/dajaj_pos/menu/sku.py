"""Cart keys and human-readable stock codes for menu selections."""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

_SHAWARMA_FLAVOURS = (
    ("reg", "REG"),
    ("peri", "PERI"),
    ("tandoori", "TANDOORI"),
    ("wm", "WM"),
)

_FIXED_CODES = (
    ("khubbus", "BREAD-KHUBBUS"),
    ("rumali", "BREAD-RUMALI"),
    ("garlic-mayo", "DIP-GARLIC"),
    ("peri-mayo", "DIP-PERI"),
    ("tandoori-mayo", "DIP-TANDOORI"),
)

_ADDON_CODES = {
    "extra-spicy": "SPICY",
    "fries": "FRIES",
    "cheese": "CHEESE",
}


class CartKey(NamedTuple):
    """Merge identity of a cart line: product, variant and normalized add-on set.

    Build instances with :func:`cart_key` so ``addon_ids`` is always sorted
    and free of duplicates.
    """

    product_id: str
    variant: str
    addon_ids: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.product_id}-{self.variant}-{','.join(self.addon_ids)}"


def cart_key(product_id: str, variant: str, addon_ids: Iterable[str] = ()) -> CartKey:
    """Return the cart key for a selection; add-on order and repeats are ignored."""
    return CartKey(product_id, variant, tuple(sorted(set(addon_ids))))


def generate_sku(product_id: str, variant: str, addon_ids: Iterable[str] = ()) -> str:
    """
    Build the stock code printed on bills.

    Add-on tokens follow selection order. Ids the rules do not recognise add
    no token.

    Args:
        product_id: Menu product id (e.g. ``shw-reg``)
        variant: Variant label, empty for variant-less products
        addon_ids: Selected add-on ids in the order they were picked

    Returns:
        Dash-joined code such as ``SHW-REG-ROLL-CHEESE``
    """
    parts: List[str] = []

    if product_id.startswith("shw-"):
        parts.append("SHW")
        for fragment, code in _SHAWARMA_FLAVOURS:
            if fragment in product_id:
                parts.append(code)
                break
        if "jumbo" in product_id:
            parts.append("JUMBO")
    elif product_id.startswith("grill-"):
        parts.append("GRILL")
        parts.append("SPCL" if "spcl" in product_id else "CHICKEN")
    else:
        for fragment, code in _FIXED_CODES:
            if fragment in product_id:
                parts.append(code)
                break
        else:
            logger.debug(f"No SKU prefix rule for product {product_id}")

    if variant:
        parts.append(variant.upper())

    for addon_id in addon_ids:
        code = _ADDON_CODES.get(addon_id)
        if code is None:
            logger.debug(f"No SKU token for add-on {addon_id}")
            continue
        parts.append(code)

    return "-".join(parts)
