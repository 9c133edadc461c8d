"""Targeting summary export."""
from __future__ import annotations
import io
from typing import Any, Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from unitgrid.catalog import as_lookup
from unitgrid.models import Bank, MortgageProgram

TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _check_override(warnings: List[Dict[str, Any]], override_reason: Optional[str]) -> None:
    if any(w.get("severity") == "critical" for w in warnings) and not override_reason:
        raise ValueError("override_reason required when critical warnings exist")


def _development_rows(program: MortgageProgram, catalogs) -> List[List[str]]:
    lookup = as_lookup(catalogs) if catalogs is not None else None
    rows = []
    for dev_id, ids in sorted(program.target_units.items()):
        total = lookup(dev_id).unit_count() if lookup is not None else None
        if not ids:
            scope = "all units"
        elif total is not None:
            scope = f"{len(ids)} of {total} units"
        else:
            scope = f"{len(ids)} units"
        rows.append([dev_id, scope, ", ".join(sorted(ids))])
    return rows


def build_targeting_summary(
    bank: Bank,
    program: MortgageProgram,
    catalogs=None,
    warnings: Optional[List[Dict[str, Any]]] = None,
    override_reason: Optional[str] = None,
) -> bytes:
    """Plain-text summary of where a program applies.

    ``catalogs`` is an optional ``development_id -> BuildingCatalog`` lookup
    used to show totals.  Critical warnings require an ``override_reason``.
    """

    warnings = warnings or []
    _check_override(warnings, override_reason)

    lines = [f"Bank: {bank.name}", f"Program: {program.name} ({program.rate:.2f}%)", "Targeting:"]
    rows = _development_rows(program, catalogs)
    if not rows:
        lines.append("  not targeted")
    for dev_id, scope, ids in rows:
        lines.append(f"  {dev_id}: {scope}")
        if ids:
            lines.append(f"    {ids}")

    if warnings:
        lines.append("Warnings:")
        for w in warnings:
            lines.append(f"{w.get('severity','')}: {w.get('message','')}")

    if override_reason:
        lines.append(f"Override Reason: {override_reason}")
    return "\n".join(lines).encode()


def build_targeting_pdf(
    bank: Bank,
    program: MortgageProgram,
    catalogs=None,
    warnings: Optional[List[Dict[str, Any]]] = None,
    override_reason: Optional[str] = None,
) -> bytes:
    warnings = warnings or []
    _check_override(warnings, override_reason)

    buf = io.BytesIO()
    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = [
        Paragraph(f"<b>{bank.name}: {program.name}</b>", styles["Title"]),
        Spacer(1, 6),
        Paragraph(
            f"Rate {program.rate:.2f}%  |  Term {program.min_term}-{program.max_term} years  |  "
            f"Down payment from {program.min_down_payment:.0f}%",
            styles["Normal"],
        ),
        Spacer(1, 12),
    ]
    rows = _development_rows(program, catalogs)
    if rows:
        # long id lists would overflow the page; the text summary carries them
        t = Table([["Development", "Scope"]] + [r[:2] for r in rows], hAlign="LEFT", colWidths=[200, 320])
        t.setStyle(TABLE_STYLE)
        story += [Paragraph("<b>Targeting</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]
    else:
        story += [Paragraph("Program is not targeted at any development.", styles["Normal"]), Spacer(1, 12)]
    if warnings:
        w_rows = [["Code", "Severity", "Message"]] + [
            [w.get("code", ""), w.get("severity", ""), w.get("message", "")] for w in warnings
        ]
        t = Table(w_rows, hAlign="LEFT")
        t.setStyle(TABLE_STYLE)
        story += [Paragraph("<b>Warnings</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]
    if override_reason:
        story.append(Paragraph(f"Override reason: {override_reason}", styles["Normal"]))
    doc.build(story)
    return buf.getvalue()
