"""Menu catalog and item identity helpers."""

from .catalog import (
    STANDARD_VARIANT_LABEL,
    AddonDefinition,
    Category,
    MenuProduct,
    addon_price,
    addons_for_variant,
    get_addon,
    get_product,
    list_addons,
    list_products,
    products_by_category,
    variant_price,
)
from .sku import CartKey, cart_key, generate_sku

__all__ = [
    "STANDARD_VARIANT_LABEL",
    "AddonDefinition",
    "CartKey",
    "Category",
    "MenuProduct",
    "addon_price",
    "addons_for_variant",
    "cart_key",
    "generate_sku",
    "get_addon",
    "get_product",
    "list_addons",
    "list_products",
    "products_by_category",
    "variant_price",
]
