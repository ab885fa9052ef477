from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from timesheet.layout.blocks import Layout
from timesheet.layout.document import AssetResult
from timesheet.models import TimesheetRecord


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (120, 40), (20, 20, 120, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def no_logo() -> AssetResult:
    return AssetResult.failed("offline")


@pytest.fixture
def layout() -> Layout:
    layout = Layout()
    layout.start_page()
    return layout


@pytest.fixture
def filled_record() -> TimesheetRecord:
    return TimesheetRecord(
        date="2024-01-05",
        start_time="09:00",
        estimated_duration="1 hour 30 minutes",
        language="Swahili",
        subject="Housing appointment",
        location="Leeds City Council, Merrion House",
        booking_made_by="A. Patel",
        service_user_name="Amani Odhiambo",
        notes_to_interpreter="Please report to reception ten minutes early and ask for the duty officer.",
        interpreter_name="Zawadi Mwangi",
        job_reference_no="JR-99!",
        interpreter_reports_to="Duty Officer",
        reports_to_contact_number="0113 000 0000",
        actual_start_time="09:05",
        actual_finish_time="10:30",
        service_user_attended="yes",
        interpreter_on_time="no",
        easy_to_arrange="yes",
        performance_rating="good",
        customer_full_name="ANITA PATEL",
        department="HOUSING",
        customer_signature="A. Patel",
        customer_date="2024-01-05",
        interpreter_signature="Z. Mwangi",
        interpreter_date="2024-01-05",
    )
