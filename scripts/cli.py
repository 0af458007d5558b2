#!/usr/bin/env python3
"""Command-line interface for the Packing List Dispatch API.

Usage examples:
    python scripts/cli.py products
    python scripts/cli.py products --query B24
    python scripts/cli.py create-product --name "Paracetamol 500" --mfg-date 2024-05-01 \
        --exp-date 2026-04-30 --qty-per-box 10x10 --gross-weight 5.2 --net-weight 4.8 \
        --batch B24001:1:20 --batch B24002:1:40
    python scripts/cli.py available 1
    python scripts/cli.py generate 1 --date 2024-06-01 --batch B24001:12
    python scripts/cli.py packing-lists --query 24-25
    python scripts/cli.py show QMP/PL/24-25/001
    python scripts/cli.py pdf QMP/PL/24-25/001 --output packing_list.pdf
    python scripts/cli.py delete-packing-list QMP/PL/24-25/001
"""

import argparse
import json
import sys
from datetime import date

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0


def format_output(data: object) -> None:
    """Pretty-print a JSON-serialisable object."""
    print(json.dumps(data, indent=2, default=str))


def handle_response(response: httpx.Response) -> dict:
    """Return the JSON body or exit with an error message."""
    try:
        body = response.json()
    except ValueError:
        body = {"detail": response.text}

    if response.status_code >= 400:
        print(
            f"Error {response.status_code}: {body.get('detail', 'Unknown error')}",
            file=sys.stderr,
        )
        sys.exit(1)

    return body


def parse_batch_range(value: str) -> dict[str, object]:
    """``B24001:1:20`` -> batch number with its box range."""
    try:
        batch_no, box_from, box_to = value.rsplit(":", 2)
        return {"batch_no": batch_no, "box_from": int(box_from), "box_to": int(box_to)}
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected BATCH:FROM:TO, got '{value}'")


def parse_batch_qty(value: str) -> dict[str, object]:
    """``B24001:12`` -> batch number with the quantity to dispatch."""
    try:
        batch_no, qty = value.rsplit(":", 1)
        return {"batch_no": batch_no, "qty": int(qty)}
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected BATCH:QTY, got '{value}'")


def cmd_products(args: argparse.Namespace, base_url: str) -> None:
    """Search products by name or batch number."""
    resp = httpx.get(
        f"{base_url}/api/products/",
        params={"q": args.query},
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_product(args: argparse.Namespace, base_url: str) -> None:
    """Retrieve a single product by ID."""
    resp = httpx.get(f"{base_url}/api/products/{args.id}", timeout=DEFAULT_TIMEOUT)
    format_output(handle_response(resp))


def cmd_create_product(args: argparse.Namespace, base_url: str) -> None:
    """Create a product with its batches."""
    data = {
        "name": args.name,
        "mfg_date": args.mfg_date,
        "exp_date": args.exp_date,
        "quantity_per_box": args.qty_per_box,
        "gross_weight": args.gross_weight,
        "net_weight": args.net_weight,
        "shipping_marks": args.shipping_marks,
        "shipper_size": args.shipper_size,
        "batches": args.batch,
    }
    resp = httpx.post(f"{base_url}/api/products/", json=data, timeout=DEFAULT_TIMEOUT)
    format_output(handle_response(resp))


def cmd_delete_product(args: argparse.Namespace, base_url: str) -> None:
    """Delete a product and everything dispatched from it."""
    resp = httpx.delete(f"{base_url}/api/products/{args.id}", timeout=DEFAULT_TIMEOUT)
    if resp.status_code == 204:
        print(f"Product {args.id} deleted successfully.")
    else:
        handle_response(resp)


def cmd_available(args: argparse.Namespace, base_url: str) -> None:
    """Show free box ranges of a product's batches."""
    resp = httpx.get(
        f"{base_url}/api/products/{args.id}/available-batches",
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_generate(args: argparse.Namespace, base_url: str) -> None:
    """Generate a packing list."""
    data = {
        "product_id": args.product_id,
        "pl_date": args.date or date.today().isoformat(),
        "batches": args.batch,
    }
    resp = httpx.post(f"{base_url}/api/packing-lists/", json=data, timeout=DEFAULT_TIMEOUT)
    format_output(handle_response(resp))


def cmd_packing_lists(args: argparse.Namespace, base_url: str) -> None:
    """Search packing lists by number."""
    resp = httpx.get(
        f"{base_url}/api/packing-lists/",
        params={"q": args.query},
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_show(args: argparse.Namespace, base_url: str) -> None:
    """Show the printable layout of a packing list."""
    resp = httpx.get(
        f"{base_url}/api/packing-lists/{args.pl_no}/document",
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_pdf(args: argparse.Namespace, base_url: str) -> None:
    """Download a packing list as PDF."""
    resp = httpx.get(f"{base_url}/api/packing-lists/{args.pl_no}/pdf", timeout=DEFAULT_TIMEOUT)
    if resp.status_code != 200:
        handle_response(resp)
        return
    output = args.output or "PackingList_{}.pdf".format(args.pl_no.replace("/", "_"))
    with open(output, "wb") as fh:
        fh.write(resp.content)
    print(f"Saved {output}")


def cmd_delete_packing_list(args: argparse.Namespace, base_url: str) -> None:
    """Delete a packing list, making its boxes available again."""
    resp = httpx.delete(f"{base_url}/api/packing-lists/{args.pl_no}", timeout=DEFAULT_TIMEOUT)
    if resp.status_code == 204:
        print(f"Packing list {args.pl_no} deleted successfully.")
    else:
        handle_response(resp)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cli.py",
        description="Packing List Dispatch CLI",
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"API base URL (default: {DEFAULT_BASE_URL})",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- products ---
    p_products = sub.add_parser("products", help="Search products")
    p_products.add_argument("--query", default="", help="Product name or batch number")

    # --- product ---
    p_product = sub.add_parser("product", help="Get product by ID")
    p_product.add_argument("id", type=int, help="Product ID")

    # --- create-product ---
    p_create = sub.add_parser("create-product", help="Create a product with batches")
    p_create.add_argument("--name", required=True, help="Product name")
    p_create.add_argument("--mfg-date", required=True, help="Manufacture date (YYYY-MM-DD)")
    p_create.add_argument("--exp-date", required=True, help="Expiry date (YYYY-MM-DD)")
    p_create.add_argument("--qty-per-box", required=True, help="Quantity per box")
    p_create.add_argument("--gross-weight", type=float, required=True, help="Gross kg per box")
    p_create.add_argument("--net-weight", type=float, required=True, help="Net kg per box")
    p_create.add_argument("--shipping-marks", default="", help="Shipping marks")
    p_create.add_argument("--shipper-size", default="", help="Shipper carton size")
    p_create.add_argument(
        "--batch",
        type=parse_batch_range,
        action="append",
        required=True,
        help="Batch as BATCH:FROM:TO (repeatable)",
    )

    # --- delete-product ---
    p_del_product = sub.add_parser("delete-product", help="Delete a product")
    p_del_product.add_argument("id", type=int, help="Product ID")

    # --- available ---
    p_available = sub.add_parser("available", help="Free box ranges of a product")
    p_available.add_argument("id", type=int, help="Product ID")

    # --- generate ---
    p_generate = sub.add_parser("generate", help="Generate a packing list")
    p_generate.add_argument("product_id", type=int, help="Product ID")
    p_generate.add_argument("--date", help="Packing list date (default: today)")
    p_generate.add_argument(
        "--batch",
        type=parse_batch_qty,
        action="append",
        required=True,
        help="Boxes to dispatch as BATCH:QTY (repeatable)",
    )

    # --- packing-lists ---
    p_lists = sub.add_parser("packing-lists", help="Search packing lists")
    p_lists.add_argument("--query", default="", help="Part of the packing list number")

    # --- show ---
    p_show = sub.add_parser("show", help="Show a packing list document")
    p_show.add_argument("pl_no", help="Packing list number")

    # --- pdf ---
    p_pdf = sub.add_parser("pdf", help="Save a packing list as PDF")
    p_pdf.add_argument("pl_no", help="Packing list number")
    p_pdf.add_argument("--output", help="Output file (default: PackingList_<number>.pdf)")

    # --- delete-packing-list ---
    p_del_list = sub.add_parser("delete-packing-list", help="Delete a packing list")
    p_del_list.add_argument("pl_no", help="Packing list number")

    return parser


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    base_url: str = args.base_url

    dispatch = {
        "products": cmd_products,
        "product": cmd_product,
        "create-product": cmd_create_product,
        "delete-product": cmd_delete_product,
        "available": cmd_available,
        "generate": cmd_generate,
        "packing-lists": cmd_packing_lists,
        "show": cmd_show,
        "pdf": cmd_pdf,
        "delete-packing-list": cmd_delete_packing_list,
    }

    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    handler(args, base_url)


if __name__ == "__main__":
    main()
