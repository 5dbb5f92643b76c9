"""
Command-line interface for DAJAJ POS.
"""

import argparse
import sys
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .billing.access import BillViewer, ViewStatus, bill_url, list_bills_for_date
from .billing.issuance import BillIssuer
from .billing.receipt import render_receipt
from .billing.repository import BillRepository
from .billing.whatsapp import build_whatsapp_link, normalize_mobile
from .cart.cart import Cart
from .cart.pricing import format_amount
from .errors import PosError
from .menu.catalog import MenuProduct, get_product, list_addons, products_by_category
from .utils.config import Config
from .utils.logging import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="DAJAJ POS - order pricing and bill issuance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dajaj-pos menu
  dajaj-pos quote --item shw-reg:Roll:2:cheese --item khubbus::3
  dajaj-pos issue --customer "Asha" --mobile 9876543210 --item grill-chicken:Half
  dajaj-pos show DAJAJ-000042 --token 5f0c...
  dajaj-pos history --date 2026-10-19 --operator
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"DAJAJ POS {__version__}",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        help="Log file path",
    )

    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file with DB_CONNECTION_URL and friends (default: .env)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    subparsers.add_parser("menu", help="Show the menu with prices and add-ons")

    item_help = "Item as PRODUCT[:VARIANT[:QTY[:ADDON,ADDON]]], e.g. shw-reg:Roll:2:cheese or khubbus::3"

    quote_parser = subparsers.add_parser("quote", help="Price an order without saving it")
    quote_parser.add_argument("--item", action="append", required=True, help=item_help)

    issue_parser = subparsers.add_parser("issue", help="Finalize an order into a bill")
    issue_parser.add_argument("--item", action="append", required=True, help=item_help)
    issue_parser.add_argument("--customer", required=True, help="Customer name")
    issue_parser.add_argument("--mobile", help="Customer mobile number (for the WhatsApp link)")
    issue_parser.add_argument("--payment-mode", default="Cash", help="Payment mode (default: Cash)")

    show_parser = subparsers.add_parser("show", help="Show a bill receipt")
    show_parser.add_argument("bill_no", help="Bill number, e.g. DAJAJ-000001")
    show_parser.add_argument("--token", help="Public token from the bill link")
    show_parser.add_argument(
        "--operator",
        action="store_true",
        help="Request comes from an authenticated operator (no token needed)",
    )

    history_parser = subparsers.add_parser("history", help="List bills for a day")
    history_parser.add_argument("--date", help="Day as YYYY-MM-DD (default: today)")
    history_parser.add_argument(
        "--operator",
        action="store_true",
        help="Request comes from an authenticated operator",
    )

    return parser


def parse_item_spec(spec: str) -> Tuple[MenuProduct, str, int, List[str]]:
    """
    Parse an item argument.

    Args:
        spec: ``PRODUCT[:VARIANT[:QTY[:ADDON,ADDON]]]``

    Returns:
        Tuple of (product, variant, quantity, add-on ids)
    """
    parts = spec.split(":")
    if len(parts) > 4 or not parts[0]:
        raise argparse.ArgumentTypeError(f"Invalid item spec: {spec}")
    product = get_product(parts[0].strip())
    variant = parts[1].strip() if len(parts) > 1 else ""
    try:
        quantity = int(parts[2]) if len(parts) > 2 and parts[2].strip() else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid quantity in item spec: {spec}") from None
    addon_ids = [a.strip() for a in parts[3].split(",") if a.strip()] if len(parts) > 3 else []
    return product, variant, quantity, addon_ids


def parse_day(value: str) -> date:
    """Parse a --date value given as YYYY-MM-DD."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value} (expected YYYY-MM-DD)") from None


def build_cart(item_specs: Sequence[str]) -> Cart:
    """Add each item spec to a fresh cart, merging repeats of the same configuration."""
    cart = Cart()
    for spec in item_specs:
        product, variant, quantity, addon_ids = parse_item_spec(spec)
        cart.increment_line(product, variant, addon_ids, delta=quantity)
    return cart


def print_menu() -> None:
    for category, products in products_by_category().items():
        print(f"\n{category.value.upper()}")
        print("=" * 60)
        for product in products:
            prices = "  ".join(
                f"{label or 'Standard'} {format_amount(price)}" for label, price in product.variants.items()
            )
            print(f"  {product.id:<18} {product.name:<32} {prices}")

    print("\nADD-ONS")
    print("=" * 60)
    for addon in list_addons():
        prices = "  ".join(
            f"{label or 'Any'} {format_amount(price)}" for label, price in addon.price_by_variant.items()
        )
        print(f"  {addon.id:<18} {addon.name:<32} {prices}")


def print_cart(cart: Cart) -> None:
    print(f"{'Item':<36}{'Qty':>5}{'Total':>12}")
    print("-" * 53)
    for line in cart:
        label = f"{line.product_name} ({line.variant_label})"
        print(f"{label:<36}{line.quantity:>5}{format_amount(line.line_total):>12}")
        for addon in line.addons_applied:
            print(f"    + {addon.name} ({format_amount(addon.unit_price)})")
    totals = cart.totals()
    print("-" * 53)
    print(f"{'Subtotal':<41}{format_amount(totals.subtotal):>12}")
    print(f"{'CGST (2.5%)':<41}{format_amount(totals.cgst):>12}")
    print(f"{'SGST (2.5%)':<41}{format_amount(totals.sgst):>12}")
    print(f"{'Grand Total':<41}{format_amount(totals.grand_total):>12}")


def issue_order(
    item_specs: Sequence[str],
    customer: str,
    mobile: Optional[str],
    payment_mode: str,
    config: Config,
) -> None:
    cart = build_cart(item_specs)
    if mobile:
        # Reject a bad number before a bill number is spent on it.
        normalize_mobile(mobile)
    with BillRepository(config=config) as repo:
        repo.ensure_indexes()
        issuer = BillIssuer(repo, max_token_attempts=config.get("token_max_attempts", 10))
        bill = issuer.checkout(cart, customer, mobile=mobile, payment_mode=payment_mode)

    print(render_receipt(bill))
    print(f"\nBill link: {bill_url(config.get('app_url'), bill.bill_no, bill.public_token)}")
    if bill.customer.mobile:
        link = build_whatsapp_link(
            mobile=bill.customer.mobile,
            bill_no=bill.bill_no,
            grand_total=bill.grand_total,
            public_token=bill.public_token,
            base_url=config.get("app_url"),
        )
        print(f"WhatsApp: {link}")


def show_bill(bill_no: str, token: Optional[str], is_operator: bool, config: Config) -> int:
    with BillRepository(config=config) as repo:
        view = BillViewer(repo).open(bill_no, is_operator=is_operator, token=token)

    if view.status is ViewStatus.OK:
        print(render_receipt(view.bill))
        return 0
    if view.status is ViewStatus.DENIED:
        print(f"{view.message}. Please request a new bill link.")
    else:
        print(f"{view.message}. The requested bill could not be found.")
    return 1


def show_history(day: date, config: Config) -> None:
    with BillRepository(config=config) as repo:
        bills = list_bills_for_date(repo, day)

    print(f"\nBILLS FOR {day.strftime('%d %b %Y').upper()}")
    print("=" * 60)
    if not bills:
        print("   No bills found")
        return
    for bill in bills:
        created = bill.created_at.astimezone().strftime("%I:%M %p") if bill.created_at else "--:--"
        print(f"   {bill.bill_no:<14} {created:<9} {bill.customer.name[:20]:<20} {format_amount(bill.grand_total):>12}")
    total = sum(bill.grand_total for bill in bills)
    print("-" * 60)
    print(f"   {len(bills)} bills, total {format_amount(total)}")


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    config = Config(parsed_args.env_file)
    log_level = "DEBUG" if parsed_args.verbose else config.get("log_level", "INFO")
    logger = setup_logging(level=log_level, log_file=parsed_args.log_file)

    try:
        if parsed_args.command == "menu":
            print_menu()

        elif parsed_args.command == "quote":
            print_cart(build_cart(parsed_args.item))

        elif parsed_args.command == "issue":
            issue_order(
                item_specs=parsed_args.item,
                customer=parsed_args.customer,
                mobile=parsed_args.mobile,
                payment_mode=parsed_args.payment_mode,
                config=config,
            )

        elif parsed_args.command == "show":
            return show_bill(parsed_args.bill_no, parsed_args.token, parsed_args.operator, config)

        elif parsed_args.command == "history":
            if not parsed_args.operator:
                print("Bill history is only available to operators (use --operator)")
                return 1
            day = parse_day(parsed_args.date) if parsed_args.date else date.today()
            show_history(day, config)

        elif not parsed_args.command:
            parser.print_help()
            return 1

    except (PosError, argparse.ArgumentTypeError) as e:
        logger.error(f"Error: {e}")
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
