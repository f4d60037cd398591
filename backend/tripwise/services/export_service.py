"""Export service: PDF and CSV renderings of the forecast and settlement."""

import csv
import io
import logging
import uuid
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from tripwise.data.currency import format_price
from tripwise.errors import NotFound
from tripwise.services.cost_forecast_service import cost_forecast_service, load_trip
from tripwise.services.expense_actuals_service import expense_actuals_service

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "module",
    "description",
    "status",
    "cost_type",
    "headcount",
    "amount",
    "currency_code",
    "exchange_rate",
    "converted_amount",
    "base_currency",
]

HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4F46E5")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
]


def _table(data: list[list], col_widths: list[float], numeric_from: int | None = None) -> Table:
    table = Table(data, colWidths=col_widths)
    style = list(HEADER_STYLE)
    if numeric_from is not None:
        style.append(("ALIGN", (numeric_from, 1), (-1, -1), "RIGHT"))
    table.setStyle(TableStyle(style))
    return table


class ExportService:
    """Generates PDF and CSV reports."""

    async def forecast_pdf(self, db: AsyncSession, trip_id: uuid.UUID) -> bytes:
        """Forecast report PDF: totals per module, line items, FX and shares."""
        trip = await load_trip(db, trip_id)
        report = await cost_forecast_service.get_report(db, trip_id)
        base = report["base_currency"]

        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph("TripWise Cost Forecast", styles["Title"]))
        elements.append(Spacer(1, 12))
        info = [
            f"<b>Trip:</b> {escape(trip.title)}",
            f"<b>Destination:</b> {escape(trip.destination_city or '-')}",
            f"<b>Statuses:</b> {', '.join(report['status_filter'])}",
            f"<b>Collected:</b> {report['generated_at'][:19]}",
            f"<b>Generated:</b> {date.today().isoformat()}",
        ]
        for line in info:
            elements.append(Paragraph(line, styles["Normal"]))
        elements.append(Spacer(1, 12))

        elements.append(Paragraph("<b>Summary</b>", styles["Heading2"]))
        summary = [["Module", "Items", f"Total ({base})"]]
        for module in report["module_breakdown"]:
            summary.append([
                module["module"].title(),
                str(module["items_count"]),
                format_price(module["total"], base),
            ])
        summary.append(["Total", "", format_price(report["total_cost"], base)])
        elements.append(_table(summary, [3 * inch, 1 * inch, 2 * inch], numeric_from=1))
        elements.append(Spacer(1, 12))

        for module in report["module_breakdown"]:
            if not module["items"]:
                continue
            elements.append(Paragraph(f"<b>{module['module'].title()}</b>", styles["Heading3"]))
            rows = [["Description", "Original", f"Amount ({base})"]]
            for item in module["items"]:
                rows.append([
                    Paragraph(escape(item["description"]), styles["Normal"]),
                    format_price(item["amount"], item["currency_code"]),
                    format_price(item["converted_amount"], base),
                ])
            elements.append(_table(rows, [3.5 * inch, 1.25 * inch, 1.25 * inch], numeric_from=1))
            elements.append(Spacer(1, 8))

        if report["fx_items"]:
            elements.append(Paragraph("<b>Currency Conversions</b>", styles["Heading2"]))
            rows = [["Item", "Original", "Rate", "Converted"]]
            for fx in report["fx_items"]:
                rows.append([
                    Paragraph(escape(fx["description"]), styles["Normal"]),
                    format_price(fx["original_amount"], fx["original_currency"]),
                    f"{fx['exchange_rate']:.6f}",
                    format_price(fx["converted_amount"], fx["converted_currency"]),
                ])
            elements.append(_table(rows, [2.7 * inch, 1.2 * inch, 0.9 * inch, 1.2 * inch], numeric_from=1))
            elements.append(Spacer(1, 12))

        elements.append(Paragraph("<b>Traveler Shares</b>", styles["Heading2"]))
        rows = [["Traveler", "Share"]]
        for share in report["traveler_shares"]:
            name = share["traveler_name"] + (" (primary)" if share["is_primary"] else "")
            rows.append([name, format_price(share["share_amount"], share["share_currency"])])
        elements.append(_table(rows, [4 * inch, 2 * inch], numeric_from=1))

        doc.build(elements)
        logger.info(f"Rendered forecast PDF for trip {trip_id}")
        return buf.getvalue()

    async def forecast_csv(self, db: AsyncSession, trip_id: uuid.UUID) -> str:
        """One CSV row per forecast line item."""
        report = await cost_forecast_service.get_report(db, trip_id)
        base = report["base_currency"]

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for module in report["module_breakdown"]:
            for item in module["items"]:
                writer.writerow({
                    "module": item["module"],
                    "description": item["description"],
                    "status": item["status"] or "",
                    "cost_type": item["cost_type"],
                    "headcount": item["headcount"],
                    "amount": f"{item['amount']:.2f}",
                    "currency_code": item["currency_code"],
                    "exchange_rate": item["exchange_rate"],
                    "converted_amount": f"{item['converted_amount']:.2f}",
                    "base_currency": base,
                })
        return output.getvalue()

    async def settlement_pdf(self, db: AsyncSession, trip_id: uuid.UUID) -> bytes:
        trip = await load_trip(db, trip_id)
        summary = await expense_actuals_service.settlement_summary(db, trip_id)
        try:
            report = await cost_forecast_service.get_report(db, trip_id)
            currency = report["base_currency"]
        except NotFound:
            currency = trip.currency

        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph("TripWise Settlement", styles["Title"]))
        elements.append(Paragraph(f"Trip: {escape(trip.title)}", styles["Normal"]))
        elements.append(Paragraph(f"Generated: {date.today().isoformat()}", styles["Normal"]))
        elements.append(Spacer(1, 12))

        totals = [
            ["Metric", f"Amount ({currency})"],
            ["Estimated", format_price(summary["total_estimated"], currency)],
            ["Actual", format_price(summary["total_actual"], currency)],
            ["Variance", format_price(summary["variance"], currency)],
        ]
        elements.append(_table(totals, [3 * inch, 3 * inch], numeric_from=1))
        elements.append(Spacer(1, 12))

        elements.append(Paragraph("<b>Balances</b>", styles["Heading2"]))
        rows = [["Traveler", "Should pay", "Paid", "Balance"]]
        for t in summary["travelers"]:
            rows.append([
                t["traveler_name"],
                format_price(t["should_pay"], currency),
                format_price(t["actually_paid"], currency),
                format_price(t["balance"], currency),
            ])
        elements.append(_table(rows, [2.4 * inch, 1.2 * inch, 1.2 * inch, 1.2 * inch], numeric_from=1))
        elements.append(Spacer(1, 12))

        elements.append(Paragraph("<b>Transfers</b>", styles["Heading2"]))
        if summary["settlements"]:
            rows = [["From", "To", "Amount"]]
            for s in summary["settlements"]:
                rows.append([s["from_name"], s["to_name"], format_price(s["amount"], currency)])
            elements.append(_table(rows, [2.4 * inch, 2.4 * inch, 1.2 * inch], numeric_from=2))
        else:
            elements.append(Paragraph("Everyone is settled up.", styles["Normal"]))

        doc.build(elements)
        logger.info(f"Rendered settlement PDF for trip {trip_id}")
        return buf.getvalue()


export_service = ExportService()
