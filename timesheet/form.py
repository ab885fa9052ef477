from __future__ import annotations

import base64
import json
import mimetypes
from datetime import datetime
from pathlib import Path

from .config import NOTES_MAX_LENGTH, NOTES_TOO_LONG_MESSAGE
from .models import TimesheetRecord, field_name


INVALID_RANGE = "Invalid time range"

DURATION_TRIGGERS = {"start_time", "actual_finish_time"}


class NotesTooLongError(ValueError):
    pass


def _parse_time(value: str) -> datetime:
    text = value.strip()
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    return datetime.strptime(text, fmt)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def compute_duration(start: str, end: str) -> str:
    """
    Human-readable length of a booking, e.g. "1 hour 30 minutes".
    Returns "" until both times are known.
    """
    if not start or not end:
        return ""
    try:
        start_at = _parse_time(start)
        end_at = _parse_time(end)
    except ValueError:
        return INVALID_RANGE
    if end_at <= start_at:
        return INVALID_RANGE

    total_minutes = int((end_at - start_at).total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    parts = []
    if hours > 0:
        parts.append(_plural(hours, "hour"))
    if minutes > 0:
        parts.append(_plural(minutes, "minute"))
    return " ".join(parts)


def apply_field_change(record: TimesheetRecord, key: str, value: str) -> TimesheetRecord:
    """Apply one edit the way the form does: duration is derived, notes are capped."""
    name = field_name(key)
    if name == "notes_to_interpreter" and len(value) > NOTES_MAX_LENGTH:
        value = value[:NOTES_MAX_LENGTH]
    updated = record.with_value(name, value)
    if name in DURATION_TRIGGERS:
        duration = compute_duration(updated.start_time, updated.actual_finish_time)
        updated = updated.with_value("estimated_duration", duration)
    return updated


def validate_for_render(record: TimesheetRecord, blank: bool = False) -> None:
    if blank:
        return
    if len(record.notes_to_interpreter) > NOTES_MAX_LENGTH:
        raise NotesTooLongError(NOTES_TOO_LONG_MESSAGE)


def image_file_to_data_url(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Signature image not found: {path}")
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"


def load_record_file(path: Path) -> TimesheetRecord:
    if not path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Record file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Record file must contain a JSON object")
    return TimesheetRecord.from_dict(data)
