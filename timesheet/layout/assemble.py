from __future__ import annotations

import logging
import re
from datetime import date as date_cls
from functools import partial
from typing import List, Optional, Tuple

from .. import config
from ..models import TimesheetRecord
from .blocks import Block, Layout, RenderItem, RowCell, SignatureCell, render_blocks
from .chrome import draw_footers, draw_header
from .cursor import PageMetrics
from .document import AssetResult, Document, decode_data_url


logger = logging.getLogger(__name__)

ROW_SPACING = 1.2
CUSTOMER_ROW_SPACING = 1.8
SIGNATURE_IMAGE_H = 12.0

_JOB_REF_STRIP = re.compile(r"[^a-zA-Z0-9_-]+")


def notes_for_display(notes: str) -> str:
    if len(notes) > config.NOTES_MAX_LENGTH:
        return notes[: config.NOTES_MAX_LENGTH] + "..."
    return notes


def booking_items(record: TimesheetRecord) -> Tuple[List[RenderItem], List[RenderItem]]:
    left = [
        RenderItem("Date:", record.date, ROW_SPACING),
        RenderItem("Start time:", record.start_time, ROW_SPACING),
        RenderItem("End time:", record.actual_finish_time, ROW_SPACING),
        RenderItem("Duration:", record.estimated_duration, ROW_SPACING),
        RenderItem("Language:", record.language, ROW_SPACING),
        RenderItem("Subject:", record.subject, ROW_SPACING),
        RenderItem("Location:", record.location, ROW_SPACING),
        RenderItem("Booking made by:", record.booking_made_by, ROW_SPACING),
        RenderItem("Service user name:", record.service_user_name, ROW_SPACING),
        RenderItem("Notes to interpreter:", notes_for_display(record.notes_to_interpreter), ROW_SPACING),
    ]
    right = [
        RenderItem("Name:", record.interpreter_name, ROW_SPACING),
        RenderItem("Job Ref No:", record.job_reference_no, ROW_SPACING),
        RenderItem("Reports to:", record.interpreter_reports_to, ROW_SPACING),
        RenderItem("Contact number:", record.reports_to_contact_number, ROW_SPACING),
    ]
    return left, right


def signature_image(payload: str, who: str) -> AssetResult:
    if not payload:
        return AssetResult.failed("no image")
    result = decode_data_url(payload)
    if not result.ok:
        logger.warning("Using text for %s signature: %s", who, result.error)
    return result


def booking_blocks(record: TimesheetRecord) -> List[Block]:
    left, right = booking_items(record)
    return [
        Block(
            "two_column",
            {"left": left, "right": right, "title": "BOOKING DETAILS", "right_heading": "INTERPRETER PROFILE"},
        ),
    ]


def _half_cell(label: str, value: str, x: float, label_w: float, metrics: PageMetrics, spacing: float) -> RowCell:
    return RowCell(label, value, x, label_w, metrics.half_w - label_w - 6, spacing)


def customer_blocks(record: TimesheetRecord, layout: Layout) -> List[Block]:
    m = layout.metrics
    left_x = m.margin_x
    right_x = m.right_half_x
    signature = SignatureCell(
        "Customer's Signature:",
        record.customer_signature,
        signature_image(record.customer_signature_image, "customer"),
        left_x,
        42,
        m.half_w - 42 - 6,
        SIGNATURE_IMAGE_H,
        CUSTOMER_ROW_SPACING,
    )
    return [
        Block("section_title", {"title": "TO BE COMPLETED BY THE CUSTOMER"}),
        Block(
            "pair",
            {
                "left": _half_cell("Start Time:", record.actual_start_time, left_x, 24, m, ROW_SPACING),
                "right": _half_cell("Finish Time:", record.actual_finish_time, right_x, 24, m, ROW_SPACING),
                "gap_after": layout.lh.block_gap,
            },
        ),
        Block("yes_no", {"question": "Did the service user attend?", "selected": record.service_user_attended}),
        Block("yes_no", {"question": "Did the interpreter arrive on time?", "selected": record.interpreter_on_time}),
        Block("yes_no", {"question": "Was it easy to arrange the interpreter?", "selected": record.easy_to_arrange}),
        Block("rating", {"selected": record.performance_rating}),
        Block("instruction", {}),
        Block(
            "row",
            {
                "label": "Customer Full Name:",
                "value": record.customer_full_name,
                "label_w": 40,
                "extra_spacing": CUSTOMER_ROW_SPACING,
            },
        ),
        Block(
            "row",
            {
                "label": "Department:",
                "value": record.department,
                "label_w": 28,
                "extra_spacing": CUSTOMER_ROW_SPACING,
            },
        ),
        Block(
            "pair",
            {
                "left": signature,
                "right": _half_cell("Date:", record.customer_date, right_x, 14, m, CUSTOMER_ROW_SPACING),
                "gap_after": layout.lh.section_gap,
            },
        ),
    ]


def declaration_blocks(record: TimesheetRecord, layout: Layout) -> List[Block]:
    m = layout.metrics
    signature = SignatureCell(
        "Interpreter's Signature:",
        record.interpreter_signature,
        signature_image(record.interpreter_signature_image, "interpreter"),
        m.margin_x,
        44,
        m.half_w - 44 - 6,
        SIGNATURE_IMAGE_H,
        CUSTOMER_ROW_SPACING,
    )
    return [
        Block("section_title", {"title": "INTERPRETER'S DECLARATION"}),
        Block("paragraph", {"text": record.custom_declaration, "gap_after": layout.lh.section_gap + 3.6}),
        Block(
            "pair",
            {
                "left": signature,
                "right": _half_cell("Date:", record.interpreter_date, m.right_half_x, 14, m, ROW_SPACING),
                "gap_after": layout.lh.small * 1.2,
            },
        ),
    ]


# fixed section order
def timesheet_blocks(record: TimesheetRecord, layout: Layout) -> List[Block]:
    return (
        booking_blocks(record)
        + customer_blocks(record, layout)
        + declaration_blocks(record, layout)
    )


def document_filename(record: TimesheetRecord, blank: bool = False, today: Optional[date_cls] = None) -> str:
    if blank:
        return config.TEMPLATE_FILENAME
    day = record.date or (today or date_cls.today()).isoformat()
    safe_date = day.replace("/", "-")
    safe_job = _JOB_REF_STRIP.sub("", record.job_reference_no or "")[: config.JOB_REF_MAX_LENGTH]
    suffix = f"_{safe_job}" if safe_job else ""
    return f"{config.FILENAME_PREFIX}_{safe_date}{suffix}.pdf"


def build_document(
    record: TimesheetRecord,
    blank: bool = False,
    logo: Optional[AssetResult] = None,
    metrics: Optional[PageMetrics] = None,
    today: Optional[date_cls] = None,
) -> Document:
    """
    Lay out a timesheet. In blank mode every field renders as a placeholder
    except the declaration text.
    """
    data = record.blank() if blank else record
    logo = logo if logo is not None else AssetResult.failed("no logo loaded")

    layout = Layout(metrics=metrics, header=partial(draw_header, logo=logo))
    layout.start_page()
    render_blocks(layout, timesheet_blocks(data, layout))
    draw_footers(layout)

    document = layout.document
    document.filename = document_filename(record, blank=blank, today=today)
    logger.info("Laid out %s on %d page(s)", document.filename, document.page_count)
    return document
