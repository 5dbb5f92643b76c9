"""In-progress order: line items keyed by product, variant and add-on set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..billing.models import BillAddon, BillItem
from ..errors import AddonNotApplicableError, UnknownMenuItemError
from ..menu.catalog import (
    STANDARD_VARIANT_LABEL,
    MenuProduct,
    addon_price,
    get_addon,
    variant_price,
)
from ..menu.sku import CartKey, cart_key, generate_sku
from ..utils.logging import get_logger
from .pricing import PriceBreakdown, calculate_totals

logger = get_logger(__name__)


@dataclass(frozen=True)
class AddonCharge:
    name: str
    unit_price: float


@dataclass
class LineItem:
    """One distinct configuration in the cart.

    ``line_total`` is derived from the unit prices and quantity on every
    read, so it can never drift from them.
    """

    key: CartKey
    product: MenuProduct
    sku: str
    variant_label: str
    quantity: int
    unit_base_price: float
    addons_applied: Tuple[AddonCharge, ...] = field(default_factory=tuple)
    selected_addon_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def product_name(self) -> str:
        return self.product.name

    @property
    def unit_price(self) -> float:
        return self.unit_base_price + sum(addon.unit_price for addon in self.addons_applied)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_bill_item(self) -> BillItem:
        return BillItem(
            sku=self.sku,
            name=self.product_name,
            variant=self.variant_label,
            qty=self.quantity,
            base_price=self.unit_base_price,
            addons=tuple(BillAddon(name=a.name, price=a.unit_price) for a in self.addons_applied),
            item_total=self.line_total,
        )


class Cart:
    """Mapping of cart key to line item, in insertion order.

    A key that is absent has quantity zero; there is no zero-quantity line.
    Updating an existing line keeps its position, removing it and adding the
    same key again appends it at the end.
    """

    def __init__(self) -> None:
        self._lines: Dict[CartKey, LineItem] = {}

    def __iter__(self) -> Iterator[LineItem]:
        return iter(list(self._lines.values()))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, key: object) -> bool:
        return key in self._lines

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def lines(self) -> List[LineItem]:
        return list(self._lines.values())

    def clear(self) -> None:
        self._lines.clear()

    def quantity_of(self, product_id: str, variant: str, addon_ids: Iterable[str] = ()) -> int:
        line = self._lines.get(cart_key(product_id, variant, addon_ids))
        return line.quantity if line else 0

    def set_line_quantity(
        self,
        product: MenuProduct,
        variant: str,
        addon_ids: Sequence[str],
        quantity: int,
    ) -> Optional[LineItem]:
        """
        Set the quantity of one configuration, replacing its prices from the menu.

        A quantity of zero or less removes the line.

        Args:
            product: Resolved menu product
            variant: Variant label, ``""`` for variant-less products
            addon_ids: Selected add-on ids, in selection order
            quantity: New quantity

        Returns:
            The stored line, or None when the line was removed
        """
        key = cart_key(product.id, variant, addon_ids)
        if quantity <= 0:
            if self._lines.pop(key, None) is not None:
                logger.debug(f"Removed cart line {key}")
            return None

        # The SKU follows the add-on order of the latest selection.
        line = self._build_line(key, product, variant, _ordered_unique(addon_ids), quantity)
        self._lines[key] = line
        return line

    def increment_line(
        self,
        product: MenuProduct,
        variant: str,
        addon_ids: Sequence[str] = (),
        delta: int = 1,
    ) -> Optional[LineItem]:
        current = self.quantity_of(product.id, variant, addon_ids)
        return self.set_line_quantity(product, variant, addon_ids, current + delta)

    def update_line_quantity(self, key: CartKey, quantity: int) -> Optional[LineItem]:
        """Quantity edit for an existing line addressed by key; no-op if absent.

        Zero or negative quantities remove the line, as in set_line_quantity.
        """
        line = self._lines.get(key)
        if line is None:
            return None
        return self.set_line_quantity(line.product, key.variant, line.selected_addon_ids, quantity)

    def remove_line(self, key: CartKey) -> None:
        self._lines.pop(key, None)

    def quantity_for_variant(self, product_id: str, variant: str) -> int:
        """Total quantity of a product variant across all add-on combinations."""
        return sum(
            line.quantity
            for key, line in self._lines.items()
            if key.product_id == product_id and key.variant == variant
        )

    def aggregate_quantity(self, product_id: str) -> int:
        """Total quantity of a product across all variants."""
        return sum(line.quantity for key, line in self._lines.items() if key.product_id == product_id)

    def decrement_variant(self, product: MenuProduct, variant: str) -> Optional[LineItem]:
        """
        Take one unit off a variant shown as a single aggregated stepper.

        The add-on-free line is decremented when present; otherwise the first
        matching line in cart order is.

        Returns:
            The line after decrementing, or None if it was removed or nothing matched
        """
        plain = self._lines.get(cart_key(product.id, variant))
        if plain is not None:
            target = plain
        else:
            target = next(
                (
                    line
                    for key, line in self._lines.items()
                    if key.product_id == product.id and key.variant == variant
                ),
                None,
            )
        if target is None:
            return None
        return self.set_line_quantity(product, variant, target.selected_addon_ids, target.quantity - 1)

    def totals(self) -> PriceBreakdown:
        return calculate_totals(self._lines.values())

    def snapshot(self) -> List[BillItem]:
        """Frozen copies of the current lines for a bill."""
        return [line.to_bill_item() for line in self._lines.values()]

    def _build_line(
        self,
        key: CartKey,
        product: MenuProduct,
        variant: str,
        addon_ids: Tuple[str, ...],
        quantity: int,
    ) -> LineItem:
        if variant not in product.variants:
            raise UnknownMenuItemError(f"Product {product.id} has no variant {variant!r}")

        charges = []
        for addon_id in addon_ids:
            addon = get_addon(addon_id)
            if not addon.applies_to(variant):
                raise AddonNotApplicableError(
                    f"Add-on {addon_id} is not available for {product.id} {variant or STANDARD_VARIANT_LABEL}"
                )
            charges.append(AddonCharge(name=addon.name, unit_price=addon_price(addon, variant)))

        return LineItem(
            key=key,
            product=product,
            sku=generate_sku(product.id, variant, addon_ids),
            variant_label=variant or STANDARD_VARIANT_LABEL,
            quantity=quantity,
            unit_base_price=variant_price(product, variant),
            addons_applied=tuple(charges),
            selected_addon_ids=addon_ids,
        )


def _ordered_unique(addon_ids: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(addon_ids))
