from __future__ import annotations

import io
from datetime import datetime, timezone

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from app.core.errors import StatusConflictError
from app.models.booking import Booking

_MARGIN = 40
_LINE = 14


def render_agreement_pdf_bytes(*, booking_id: str, company_name: str, contact_person: str,
                               items: list[tuple[str, str]], total_cost: int, terms: str,
                               sent_at: str = "") -> bytes:
    """Return A4 PDF bytes. Pure function."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    w, h = A4
    y = h - 60

    def line(text: str, font: str = "Helvetica", size: int = 11):
        nonlocal y
        if y < 60:
            c.showPage()
            y = h - 60
        c.setFont(font, size)
        c.drawString(_MARGIN, y, text)
        y -= _LINE

    line("Oromia Education Center", "Helvetica-Bold", 18)
    y -= 4
    line("Facility Rental Agreement", "Helvetica-Bold", 13)
    line(f"Booking: {booking_id}")
    if sent_at:
        line(f"Issued: {sent_at}")
    y -= 10

    line("Client", "Helvetica-Bold", 12)
    line(company_name or "(Not provided)")
    if contact_person:
        line(f"Contact: {contact_person}")
    y -= 10

    line("Booked facilities", "Helvetica-Bold", 12)
    for day, name in items:
        line(f"{day}  {name}")
    line(f"Total: {total_cost} ETB", "Helvetica-Bold", 11)
    y -= 10

    line("Terms and conditions", "Helvetica-Bold", 12)
    for paragraph in (terms or "").splitlines() or [""]:
        for chunk in simpleSplit(paragraph, "Helvetica", 10, w - 2 * _MARGIN) or [""]:
            line(chunk, "Helvetica", 10)

    y -= 30
    line("Signature (client): ______________________    Date: ____________")

    c.setFont("Helvetica", 9)
    c.drawString(_MARGIN, 26, f"Generated: {datetime.now(timezone.utc).isoformat()}")
    c.showPage()
    c.save()
    return buf.getvalue()


def agreement_pdf_for_booking(b: Booking) -> bytes:
    if b.category != "facility":
        raise StatusConflictError("agreements only exist for facility bookings")
    if b.agreement_status in (None, "pending_admin_action") or not b.agreement_terms:
        raise StatusConflictError("the agreement has not been sent yet")
    items = [(i.day.isoformat() if i.day else "", i.name) for i in b.items]
    return render_agreement_pdf_bytes(
        booking_id=b.id,
        company_name=b.company_name or "",
        contact_person=b.contact_person or "",
        items=items,
        total_cost=b.total_cost,
        terms=b.agreement_terms,
        sent_at=b.agreement_sent_at.isoformat() if b.agreement_sent_at else "",
    )
