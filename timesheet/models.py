from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


@dataclass(frozen=True)
class TimesheetRecord:
    date: str = ""
    start_time: str = ""
    estimated_duration: str = ""
    language: str = ""
    subject: str = ""
    location: str = ""
    booking_made_by: str = ""
    service_user_name: str = ""
    notes_to_interpreter: str = ""
    interpreter_name: str = ""
    job_reference_no: str = ""
    interpreter_reports_to: str = ""
    reports_to_contact_number: str = ""
    actual_start_time: str = ""
    actual_finish_time: str = ""
    service_user_attended: str = ""
    interpreter_on_time: str = ""
    easy_to_arrange: str = ""
    performance_rating: str = ""
    customer_full_name: str = ""
    department: str = ""
    customer_signature: str = ""
    customer_signature_image: str = ""
    customer_date: str = ""
    interpreter_signature: str = ""
    interpreter_signature_image: str = ""
    interpreter_date: str = ""
    custom_declaration: str = config.DEFAULT_DECLARATION

    @classmethod
    def from_dict(cls, data: dict) -> "TimesheetRecord":
        """Build a record from form-state keys (camelCase); unknown keys are ignored."""
        values = {}
        for key, value in (data or {}).items():
            name = FIELD_NAMES.get(key)
            if name is None:
                continue
            values[name] = "" if value is None else str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, name) for key, name in FIELD_NAMES.items()}

    def blank(self) -> "TimesheetRecord":
        # only the declaration survives into the template
        return TimesheetRecord(custom_declaration=self.custom_declaration)

    def with_value(self, key: str, value: str) -> "TimesheetRecord":
        return replace(self, **{field_name(key): value})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


FIELD_NAMES: Dict[str, str] = {_camel(f.name): f.name for f in fields(TimesheetRecord)}


def field_name(key: str) -> str:
    """Map a form key (camelCase) or attribute name to the record attribute."""
    if key in FIELD_NAMES:
        return FIELD_NAMES[key]
    if key in FIELD_NAMES.values():
        return key
    raise KeyError(f"Unknown timesheet field: {key}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FormEntry(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=utc_now)


engine = create_engine(f"sqlite:///{config.DB_PATH}")


def reset_engine() -> None:
    global engine
    engine = create_engine(f"sqlite:///{config.DB_PATH}")


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)


def get_entry(session: Session, key: str) -> Optional[FormEntry]:
    return session.get(FormEntry, key)
