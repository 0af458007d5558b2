"""
PDF rendering of packing list documents using ReportLab.
"""

from __future__ import annotations

from io import BytesIO
from typing import Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from packlist.domain.services.packing_list_document import PackingListDocument

_MAIN_HEADERS = (
    "Box No.",
    "Total Boxes",
    "Batch No.",
    "Mfg. Date",
    "Exp. Date",
    "Qty/Box",
    "Gr.Wt/Box",
    "Net Wt/Box",
)
_MAIN_WIDTHS = (26 * mm, 20 * mm, 26 * mm, 22 * mm, 22 * mm, 20 * mm, 22 * mm, 22 * mm)


def _build_table(data: Sequence[Sequence[str]], column_widths: Sequence[float]) -> Table:
    table = Table(data, colWidths=column_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F1F1F1")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("SPAN", (2, -1), (4, -1)),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ]
        )
    )
    return table


def _details_table(document: PackingListDocument, style: ParagraphStyle) -> Table:
    left = [
        ("Date:", document.date),
        ("Name of Product:", document.product_name),
        ("Total Boxes:", f"{document.total_boxes} Boxes"),
        ("Total Gross Wt.:", f"{document.total_gross_weight} Kg"),
        ("Total Net Wt.:", f"{document.total_net_weight} Kg"),
        ("Shipping Marks:", document.shipping_marks),
    ]
    rows = [
        [Paragraph(f"<b>{label}</b>", style), Paragraph(escape(value), style), "", ""]
        for label, value in left
    ]
    rows[0][2] = Paragraph("<b>Packing List No.:</b>", style)
    rows[0][3] = Paragraph(escape(document.pl_no), style)
    rows[1][2] = Paragraph("<b>Shipper Size:</b>", style)
    rows[1][3] = Paragraph(escape(document.shipper_size), style)

    table = Table(rows, colWidths=(35 * mm, 60 * mm, 35 * mm, 50 * mm))
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return table


def _main_rows(document: PackingListDocument) -> list[list[str]]:
    rows = [list(_MAIN_HEADERS)]
    for row in document.rows:
        rows.append(
            [
                row.box_numbers,
                str(row.boxes),
                row.batch_no,
                row.mfg_date,
                row.exp_date,
                row.quantity_per_box,
                row.gross_weight_per_box,
                row.net_weight_per_box,
            ]
        )
    rows.append(
        [
            "Total",
            str(document.total_boxes),
            "Master Cartons",
            "",
            "",
            "",
            document.total_gross_weight,
            document.total_net_weight,
        ]
    )
    return rows


def render_packing_list_pdf(document: PackingListDocument) -> bytes:
    """
    Render a packing list on A4 portrait pages.

    Returns:
        The PDF file contents
    """
    buffer = BytesIO()
    pdf = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title=f"Packing List {document.pl_no}",
    )

    styles = getSampleStyleSheet()
    heading = ParagraphStyle("PLHeading", parent=styles["Heading1"], alignment=TA_CENTER)
    subheading = ParagraphStyle("PLSubHeading", parent=styles["Heading2"], alignment=TA_CENTER)
    body = ParagraphStyle("PLBody", parent=styles["Normal"], fontSize=10)
    signature = ParagraphStyle("PLSignature", parent=body, alignment=TA_RIGHT)

    story = [
        Paragraph(escape(document.organization_name), heading),
        Paragraph("PACKING LIST", subheading),
        Spacer(1, 4 * mm),
        _details_table(document, body),
        Spacer(1, 6 * mm),
        _build_table(_main_rows(document), _MAIN_WIDTHS),
        Spacer(1, 14 * mm),
        Paragraph("FOR", signature),
        Paragraph(f"<b>{escape(document.organization_name)}</b>", signature),
        Spacer(1, 14 * mm),
        Paragraph("Authorized Signatory", signature),
    ]

    pdf.build(story)
    return buffer.getvalue()
