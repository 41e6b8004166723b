"""ReportLab PDF Generation Service Implementation

Renders distribution receipts using the ReportLab library.
"""

from io import BytesIO
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.distribution import Distribution, DistributionItem, PaymentStatus
from src.domain.money import ZERO

_STATUS_COLORS = {
    PaymentStatus.PAID: "#27AE60",
    PaymentStatus.PARTIAL: "#E67E22",
    PaymentStatus.UNPAID: "#E74C3C",
}


def _amount(value) -> str:
    return f"${value:,.2f}"


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    One page per receipt: header, settlement details, a fee table with one
    row per released package, then the funding breakdown.
    """

    def generate_distribution_receipt(
        self,
        distribution: Distribution,
        items: List[DistributionItem],
        company_name: str = "Package Forwarding Co.",
        company_address: str = "1 Harbour Road, Kingston",
    ) -> bytes:
        """
        Generate a distribution receipt PDF

        Args:
            distribution: Settled Distribution
            items: Per-package fee snapshots
            company_name: Company name to display on receipt
            company_address: Company address to display on receipt

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Receipt {distribution.receipt_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=22,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        label_style = ParagraphStyle(
            "ReceiptLabel",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor(_STATUS_COLORS.get(distribution.payment_status, "#2C3E50")),
            spaceAfter=16,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )

        elements.append(Paragraph(company_name, title_style))
        elements.append(Paragraph(company_address, header_style))
        elements.append(Spacer(1, 8 * mm))
        elements.append(
            Paragraph(
                f"PACKAGE RELEASE RECEIPT - {distribution.payment_status.value.upper()}",
                label_style,
            )
        )

        details = [
            ["Receipt Number:", distribution.receipt_number],
            ["Customer ID:", str(distribution.customer_id)],
            ["Released:", distribution.distributed_at.strftime("%Y-%m-%d %H:%M:%S UTC")],
            ["Released By:", str(distribution.distributed_by)],
        ]
        details_table = Table(details, colWidths=[40 * mm, 100 * mm])
        details_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(details_table)
        elements.append(Spacer(1, 8 * mm))

        fee_data = [["Package", "Freight", "Clearance", "Storage", "Delivery", "Total"]]
        for item in items:
            fee_data.append(
                [
                    f"#{item.package_id}",
                    _amount(item.freight_price),
                    _amount(item.clearance_fee),
                    _amount(item.storage_fee),
                    _amount(item.delivery_fee),
                    _amount(item.total_cost),
                ]
            )

        fee_table = Table(
            fee_data, colWidths=[30 * mm, 28 * mm, 28 * mm, 28 * mm, 28 * mm, 28 * mm]
        )
        fee_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )
        elements.append(fee_table)
        elements.append(Spacer(1, 6 * mm))

        summary = [["Subtotal:", _amount(distribution.total_amount)]]
        if distribution.write_off_amount > ZERO:
            reason = f" ({distribution.write_off_reason})" if distribution.write_off_reason else ""
            summary.append([f"Write-off{reason}:", f"-{_amount(distribution.write_off_amount)}"])
        summary.append(["Amount Due:", _amount(distribution.net_amount)])
        summary.append(["Cash Received:", _amount(distribution.amount_collected)])
        if distribution.credit_applied > ZERO:
            summary.append(["Credit Applied:", _amount(distribution.credit_applied)])
        if distribution.account_balance_applied > ZERO:
            summary.append(["Charged to Account:", _amount(distribution.account_balance_applied)])
        if distribution.overpayment > ZERO:
            summary.append(["Added to Credit:", _amount(distribution.overpayment)])

        summary_table = Table(summary, colWidths=[130 * mm, 40 * mm])
        summary_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("LINEABOVE", (0, 0), (-1, 0), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(summary_table)

        if distribution.notes:
            elements.append(Spacer(1, 8 * mm))
            elements.append(Paragraph(f"Notes: {distribution.notes}", normal_style))

        elements.append(Spacer(1, 12 * mm))
        elements.append(
            Paragraph(
                "<i>Thank you. Keep this receipt as proof of collection.</i>",
                ParagraphStyle(
                    "FooterNote",
                    parent=styles["Normal"],
                    fontSize=9,
                    textColor=colors.HexColor("#95A5A6"),
                ),
            )
        )

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
