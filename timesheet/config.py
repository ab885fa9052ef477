from __future__ import annotations

from pathlib import Path
from typing import List
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = Path(os.environ.get("TIMESHEET_OUT_DIR", BASE_DIR / "out"))
DB_PATH = OUT_DIR / "form.db"

LOGO_URL = os.environ.get("TIMESHEET_LOGO_URL", "https://jambolinguists.com/logo-purple.jpeg")
LOGO_TIMEOUT = 10.0

NOTES_MAX_LENGTH = 150
JOB_REF_MAX_LENGTH = 24
PLACEHOLDER = "_________________"

FILENAME_PREFIX = "Jambo_Timesheet"
TEMPLATE_FILENAME = f"{FILENAME_PREFIX}_Template.pdf"

COMPANY_NAME = "Jambo Linguists Ltd"
COMPANY_TAGLINE = "The Home Of Swahili"
COMPANY_NUMBER = "Company No. 15333696"
COMPANY_BUILDING = "Radley House"
COMPANY_HEADER_LINES: List[str] = [
    "Richardshaw Rd, Pudsey, LS28 6LE",
    COMPANY_NUMBER,
]
COMPANY_CONTACT_LINES: List[str] = [
    "jamii@jambolinguists.com",
    "+44 7938 065717",
]
COMPANY_ADDRESS_LINES: List[str] = [
    "Radley House, Richardshaw Rd",
    "Pudsey, LS28 6LE",
]

DEFAULT_DECLARATION = (
    "I am an authorised signatory for my department. I am signing to confirm that the "
    "Interpreter and the hours that I am authorising are accurate and I approve payment. "
    "I am signing to confirm that I have checked and verified the photo identification of "
    "the interpreter with the timesheet. I understand that if I knowingly provide false "
    "information this may result in disciplinary action and I may be liable to prosecution "
    "and civil recovery proceedings. I consent to the disclosure of information from this "
    "form to and by the Participating Authority for the purpose of verification of this "
    "claim and the investigation, prevention, detection and prosecution of fraud."
)

NOTES_TOO_LONG_MESSAGE = (
    "Notes to interpreter exceed 150 characters. "
    "Please shorten the text to prevent overflow issues in the PDF."
)


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "form.db"
