# ecogest/utils/bulletin_pdf.py
"""Report cards and receipts rendered with reportlab platypus.

Tables repeat their header row, so long classes flow onto extra pages.
"""
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

HEADER_COLOR = colors.HexColor("#0E6BA8")


def _fmt(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.2f}"


def _table(data: List[List[str]], col_widths=None) -> Table:
    table = Table(data, repeatRows=1, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F3F4F6")]),
    ]))
    return table


def _header(school: Dict[str, Any], title: str, subtitle: str, styles) -> list:
    elements = [
        Paragraph(escape(school.get("name", "")), styles["Heading1"]),
    ]
    if school.get("slogan"):
        elements.append(Paragraph(f"<i>{escape(school['slogan'])}</i>", styles["Normal"]))
    elements += [
        Paragraph(escape(title), styles["Heading2"]),
        Paragraph(escape(subtitle), styles["Normal"]),
        Spacer(1, 8),
    ]
    return elements


def _footer(styles) -> list:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return [Spacer(1, 12), Paragraph(f"Generated: {stamp}", styles["Italic"])]


def _build(elements: list, pagesize=A4) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=pagesize, leftMargin=10 * mm, rightMargin=10 * mm,
                            topMargin=10 * mm, bottomMargin=10 * mm)
    doc.build(elements)
    return buffer.getvalue()


def class_bulletin_pdf(school: Dict[str, Any], class_name: str, period: str,
                       subjects: Sequence[Dict[str, Any]], results: Dict[str, Any]) -> bytes:
    """One row per student: subject averages, overall average, rank, appreciation."""
    styles = getSampleStyleSheet()
    elements = _header(school, f"Class report: {class_name}", f"Period: {period}", styles)

    header = ["Rank", "Student"] + [s.get("abbreviation") or s["name"] for s in subjects] + ["Average", "Appreciation"]
    data = [header]
    for row in results["students"]:
        data.append(
            [str(row["rank"] or "-"), row["name"]]
            + [_fmt(row["subjects"].get(s["id"])) for s in subjects]
            + [_fmt(row["average"]), row["appreciation"]]
        )
    if len(data) == 1:
        data.append(["", "No students"] + [""] * (len(header) - 2))

    elements.append(_table(data))
    elements.append(Spacer(1, 8))
    elements.append(Paragraph(
        f"Class average: {_fmt(results.get('class_average')) or '-'}"
        f" | Graded students: {results.get('graded_count', 0)}/{len(results['students'])}",
        styles["Normal"],
    ))
    elements += _footer(styles)
    pagesize = landscape(A4) if len(subjects) > 8 else A4
    return _build(elements, pagesize)


def student_bulletin_pdf(school: Dict[str, Any], student: Dict[str, Any], class_name: str, period: str,
                         subject_rows: Sequence[Dict[str, Any]], summary: Dict[str, Any]) -> bytes:
    styles = getSampleStyleSheet()
    elements = _header(school, "Report card", f"Class: {class_name} | Period: {period}", styles)
    elements.append(Paragraph(
        f"<b>Student:</b> {escape(student['name'])} &nbsp; <b>Number:</b> {escape(student.get('student_number') or '')}",
        styles["Normal"],
    ))
    elements.append(Spacer(1, 8))

    data = [["Subject", "Coefficient", "Average /20", "Weighted", "Appreciation"]]
    for row in subject_rows:
        weighted = row["average"] * row["coefficient"] if row["average"] is not None else None
        data.append([row["name"], f"{row['coefficient']:g}", _fmt(row["average"]), _fmt(weighted), row["appreciation"]])
    elements.append(_table(data, col_widths=[60 * mm, 25 * mm, 30 * mm, 30 * mm, 40 * mm]))
    elements.append(Spacer(1, 10))

    rank = summary.get("rank")
    elements.append(Paragraph(f"<b>General average:</b> {_fmt(summary.get('average')) or '-'}", styles["Normal"]))
    elements.append(Paragraph(
        f"<b>Rank:</b> {rank if rank else '-'} / {summary.get('class_size', 0)}"
        f" &nbsp; <b>Class average:</b> {_fmt(summary.get('class_average')) or '-'}",
        styles["Normal"],
    ))
    elements.append(Paragraph(f"<b>Appreciation:</b> {escape(summary.get('appreciation') or '')}", styles["Normal"]))
    elements += _footer(styles)
    return _build(elements)


def annual_bulletin_pdf(school: Dict[str, Any], class_name: str, academic_year: str,
                        period_labels: Sequence[str], rows: Sequence[Dict[str, Any]]) -> bytes:
    styles = getSampleStyleSheet()
    elements = _header(school, f"Annual results: {class_name}", f"Academic year: {academic_year}", styles)

    data = [["Rank", "Student"] + list(period_labels) + ["Annual", "Decision"]]
    for row in rows:
        data.append(
            [str(row["rank"] or "-"), row["name"]]
            + [_fmt(avg) for avg in row["periods"]]
            + [_fmt(row["average"]), row.get("decision") or ""]
        )
    if len(data) == 1:
        data.append(["", "No students"] + [""] * (len(period_labels) + 2))
    elements.append(_table(data))
    elements += _footer(styles)
    return _build(elements)


def payment_receipt_pdf(school: Dict[str, Any], payment: Dict[str, Any], student: Dict[str, Any]) -> bytes:
    styles = getSampleStyleSheet()
    elements = _header(school, "Payment receipt", f"Receipt no. {payment['id']}", styles)

    currency = school.get("currency", "XOF")
    data = [
        ["Field", "Value"],
        ["Student", student["name"]],
        ["Student number", student.get("student_number") or ""],
        ["Payment type", payment.get("payment_type") or ""],
        ["Month", payment.get("payment_month") or ""],
        ["Method", payment.get("payment_method") or ""],
        ["Date", str(payment.get("payment_date") or "")],
        ["Paid by", payment.get("paid_by") or ""],
        ["Amount", f"{float(payment['amount']):,.0f} {currency}"],
    ]
    elements.append(_table(data, col_widths=[50 * mm, 110 * mm]))
    elements += _footer(styles)
    return _build(elements)
