"""Static menu catalog: products, variant prices and add-on price tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

from ..errors import UnknownMenuItemError

# Display label for products sold without a variant.
STANDARD_VARIANT_LABEL = "Standard"


class Category(str, Enum):
    SHAWARMAS = "Shawarmas"
    GRILL_CHICKEN = "Grill Chicken"
    BREADS_AND_DIPS = "Breads & Dips"


@dataclass(frozen=True)
class MenuProduct:
    """A sellable product and its price per variant label.

    The empty label ``""`` is the single entry of a variant-less product.
    """

    id: str
    name: str
    category: Category
    variants: Mapping[str, float] = field(hash=False)

    def __post_init__(self) -> None:
        if not self.variants:
            raise ValueError(f"Product {self.id} must define at least one variant")
        if "" in self.variants and len(self.variants) > 1:
            raise ValueError(f"Product {self.id} mixes an empty variant label with named variants")
        if any(price < 0 for price in self.variants.values()):
            raise ValueError(f"Product {self.id} has a negative price")
        object.__setattr__(self, "variants", MappingProxyType(dict(self.variants)))

    @property
    def has_variants(self) -> bool:
        return "" not in self.variants

    @property
    def variant_labels(self) -> List[str]:
        return list(self.variants)


@dataclass(frozen=True)
class AddonDefinition:
    """An optional extra whose price depends on the product variant.

    ``""`` in ``price_by_variant`` is the fallback for any variant.
    """

    id: str
    name: str
    price_by_variant: Mapping[str, float] = field(hash=False)

    def __post_init__(self) -> None:
        if any(price < 0 for price in self.price_by_variant.values()):
            raise ValueError(f"Add-on {self.id} has a negative price")
        object.__setattr__(self, "price_by_variant", MappingProxyType(dict(self.price_by_variant)))

    def applies_to(self, variant: str) -> bool:
        return variant in self.price_by_variant or "" in self.price_by_variant


_PRODUCTS: Sequence[MenuProduct] = (
    # Shawarmas
    MenuProduct("shw-reg", "Regular Shawarma", Category.SHAWARMAS, {"Roll": 50, "Plate": 100}),
    MenuProduct("shw-peri", "Peri Peri Shawarma", Category.SHAWARMAS, {"Roll": 60, "Plate": 110}),
    MenuProduct("shw-tandoori", "Tandoori Shawarma", Category.SHAWARMAS, {"Roll": 60, "Plate": 110}),
    MenuProduct("shw-wm", "Whole Meat Shawarma", Category.SHAWARMAS, {"Roll": 80, "Plate": 140}),
    MenuProduct("shw-wm-peri", "Whole Meat Peri Peri Shawarma", Category.SHAWARMAS, {"Roll": 90, "Plate": 150}),
    MenuProduct("shw-wm-tandoori", "Whole Meat Tandoori Shawarma", Category.SHAWARMAS, {"Roll": 90, "Plate": 150}),
    MenuProduct("shw-jumbo", "Jumbo Shawarma", Category.SHAWARMAS, {"Roll": 130}),
    # Grill Chicken
    MenuProduct("grill-chicken", "Grill Chicken", Category.GRILL_CHICKEN, {"Qtr": 120, "Half": 210, "Full": 399}),
    MenuProduct("grill-spcl", "Spcl Grilled Dajaj", Category.GRILL_CHICKEN, {"Qtr": 140, "Half": 250, "Full": 449}),
    # Breads & Dips
    MenuProduct("khubbus", "Khubbus", Category.BREADS_AND_DIPS, {"": 10}),
    MenuProduct("rumali", "Rumali Roti", Category.BREADS_AND_DIPS, {"": 15}),
    MenuProduct("garlic-mayo", "Garlic Mayo", Category.BREADS_AND_DIPS, {"": 20}),
    MenuProduct("peri-mayo", "Peri Peri Mayo", Category.BREADS_AND_DIPS, {"": 20}),
    MenuProduct("tandoori-mayo", "Tandoori Mayo", Category.BREADS_AND_DIPS, {"": 20}),
)

_ADDONS: Sequence[AddonDefinition] = (
    AddonDefinition("extra-spicy", "Extra Spicy", {"": 5}),
    AddonDefinition("fries", "French Fries", {"Roll": 10, "Plate": 15}),
    AddonDefinition("cheese", "Cheese", {"Roll": 20, "Plate": 30}),
)

_PRODUCTS_BY_ID: Dict[str, MenuProduct] = {product.id: product for product in _PRODUCTS}
_ADDONS_BY_ID: Dict[str, AddonDefinition] = {addon.id: addon for addon in _ADDONS}


def list_products() -> List[MenuProduct]:
    """Return all products in menu order."""
    return list(_PRODUCTS)


def list_addons() -> List[AddonDefinition]:
    return list(_ADDONS)


def products_by_category() -> Dict[Category, List[MenuProduct]]:
    """Group products by category, keeping menu order within each group."""
    grouped: Dict[Category, List[MenuProduct]] = {}
    for product in _PRODUCTS:
        grouped.setdefault(product.category, []).append(product)
    return grouped


def get_product(product_id: str) -> MenuProduct:
    """Resolve a product id, raising UnknownMenuItemError if the menu lacks it."""
    try:
        return _PRODUCTS_BY_ID[product_id]
    except KeyError:
        raise UnknownMenuItemError(f"Unknown product id: {product_id}") from None


def get_addon(addon_id: str) -> AddonDefinition:
    """Resolve an add-on id, raising UnknownMenuItemError if the menu lacks it."""
    try:
        return _ADDONS_BY_ID[addon_id]
    except KeyError:
        raise UnknownMenuItemError(f"Unknown add-on id: {addon_id}") from None


def addons_for_variant(variant: str) -> List[AddonDefinition]:
    """Add-ons that can be ordered with the given variant label."""
    return [addon for addon in _ADDONS if addon.applies_to(variant)]


def variant_price(product: MenuProduct, variant: str) -> float:
    """Price of a product variant, or 0 when the variant is not sold."""
    return product.variants.get(variant, 0)


def addon_price(addon: AddonDefinition, variant: str) -> float:
    """Price of an add-on for a variant.

    Resolution order: exact variant entry, then the ``""`` fallback, then 0.
    """
    if variant in addon.price_by_variant:
        return addon.price_by_variant[variant]
    return addon.price_by_variant.get("", 0)
