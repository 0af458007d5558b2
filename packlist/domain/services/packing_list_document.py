"""Printable packing list document."""

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from packlist.domain.models import PackingList, Product
from packlist.domain.value_objects import BoxRange

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_month_year(value: date) -> str:
    """``date(2024, 6, 1)`` -> ``Jun-2024``."""
    return f"{_MONTHS[value.month - 1]}-{value.year}"


def format_day(value: date) -> str:
    """``date(2024, 6, 1)`` -> ``01/06/2024``."""
    return value.strftime("%d/%m/%Y")


@dataclass(frozen=True)
class DocumentRow:
    """One dispatched box range as printed on the packing list."""

    box_numbers: str
    boxes: int
    batch_no: str
    mfg_date: str
    exp_date: str
    quantity_per_box: str
    gross_weight_per_box: str
    net_weight_per_box: str


@dataclass(frozen=True)
class PackingListDocument:
    """Everything needed to print or export a packing list."""

    organization_name: str
    pl_no: str
    date: str
    product_name: str
    total_boxes: int
    total_gross_weight: str
    total_net_weight: str
    shipping_marks: str
    shipper_size: str
    rows: tuple[DocumentRow, ...]

    @property
    def filename(self) -> str:
        return "PackingList_{}.pdf".format(self.pl_no.replace("/", "_").replace("\\", "_"))


def build_packing_list_document(
    packing_list: PackingList,
    product: Product,
    segments: Sequence[tuple[str, BoxRange]],
    organization_name: str,
) -> PackingListDocument:
    """
    Lay out a packing list.

    Args:
        packing_list: The packing list being printed
        product: The product it dispatches
        segments: ``(batch_no, range)`` pairs in dispatch order
        organization_name: Printed in the header and signature block

    Returns:
        Document with one row per segment and weight totals
    """
    rows: list[DocumentRow] = []
    total_boxes = 0
    total_gross = 0.0
    total_net = 0.0

    for batch_no, box_range in segments:
        boxes = box_range.size
        total_boxes += boxes
        total_gross += product.gross_weight * boxes
        total_net += product.net_weight * boxes
        rows.append(
            DocumentRow(
                box_numbers=f"{box_range.box_from} - {box_range.box_to}",
                boxes=boxes,
                batch_no=batch_no,
                mfg_date=format_month_year(product.mfg_date),
                exp_date=format_month_year(product.exp_date),
                quantity_per_box=product.quantity_per_box,
                gross_weight_per_box=f"{product.gross_weight:.3f}",
                net_weight_per_box=f"{product.net_weight:.3f}",
            )
        )

    return PackingListDocument(
        organization_name=organization_name,
        pl_no=packing_list.pl_no,
        date=format_day(packing_list.pl_date),
        product_name=product.name,
        total_boxes=total_boxes,
        total_gross_weight=f"{total_gross:.2f}",
        total_net_weight=f"{total_net:.2f}",
        shipping_marks=product.shipping_marks or "",
        shipper_size=product.shipper_size or "",
        rows=tuple(rows),
    )
