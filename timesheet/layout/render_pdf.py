from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Union

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .document import Document, DrawOp, Image, Line, Rect, Text


def _y(page_h: float, y: float) -> float:
    # top-down millimetres -> bottom-up points
    return (page_h - y) * mm


def _draw_op(canv: canvas.Canvas, op: DrawOp, page_h: float) -> None:
    if isinstance(op, Rect):
        stroke = op.stroke_color is not None
        fill = op.fill_color is not None
        if stroke:
            canv.setStrokeColor(op.stroke_color)
            canv.setLineWidth(op.line_width * mm)
        if fill:
            canv.setFillColor(op.fill_color)
        canv.rect(op.x * mm, _y(page_h, op.y + op.h), op.w * mm, op.h * mm, stroke=int(stroke), fill=int(fill))
        return

    if isinstance(op, Line):
        canv.setStrokeColor(op.color or colors.black)
        canv.setLineWidth(op.line_width * mm)
        canv.line(op.x1 * mm, _y(page_h, op.y1), op.x2 * mm, _y(page_h, op.y2))
        return

    if isinstance(op, Text):
        canv.setFont(op.font, op.size)
        canv.setFillColor(op.color or colors.black)
        x, y = op.x * mm, _y(page_h, op.y)
        if op.align == "center":
            canv.drawCentredString(x, y, op.text)
        elif op.align == "right":
            canv.drawRightString(x, y, op.text)
        else:
            canv.drawString(x, y, op.text)
        return

    if isinstance(op, Image):
        canv.drawImage(
            ImageReader(io.BytesIO(op.data)),
            op.x * mm,
            _y(page_h, op.y + op.h),
            width=op.w * mm,
            height=op.h * mm,
            mask="auto",
        )
        return

    raise TypeError(f"Unsupported draw operation: {type(op).__name__}")


def render_pdf(document: Document, output: Union[Path, BinaryIO]) -> None:
    target = str(output) if isinstance(output, Path) else output
    canv = canvas.Canvas(target, pagesize=(document.width * mm, document.height * mm))
    canv.setTitle(document.filename or "Timesheet")

    for page in document.pages:
        for op in page.ops:
            _draw_op(canv, op, document.height)
        # footer last so content never covers it
        for op in page.footer:
            _draw_op(canv, op, document.height)
        canv.showPage()

    canv.save()


def pdf_bytes(document: Document) -> bytes:
    buffer = io.BytesIO()
    render_pdf(document, buffer)
    return buffer.getvalue()

