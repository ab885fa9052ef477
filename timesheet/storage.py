from __future__ import annotations

from pathlib import Path
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from . import config
from .models import FormEntry, TimesheetRecord, get_entry, get_session, init_db, utc_now


FORM_DATA_KEY = "timesheetFormData"
PREVIEW_OPEN_KEY = "isPreviewOpen"

logger = logging.getLogger(__name__)


def output_dir(base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    root.mkdir(parents=True, exist_ok=True)
    return root


def artifact_path(filename: str, base_dir: Path | None = None) -> Path:
    return output_dir(base_dir) / filename


def preview_dir(filename: str, base_dir: Path | None = None) -> Path:
    path = output_dir(base_dir) / f"{Path(filename).stem}_preview"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _read(key: str) -> str | None:
    try:
        init_db()
        with get_session() as session:
            entry = get_entry(session, key)
            return entry.value if entry is not None else None
    except SQLAlchemyError:
        logger.warning("Could not read %s from form store", key, exc_info=True)
        return None


def _write(key: str, value: str) -> bool:
    try:
        init_db()
        with get_session() as session:
            entry = get_entry(session, key)
            if entry is None:
                entry = FormEntry(key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = utc_now()
            session.add(entry)
            session.commit()
        return True
    except SQLAlchemyError:
        logger.warning("Could not write %s to form store", key, exc_info=True)
        return False


def load_form() -> TimesheetRecord:
    """Restore the last saved form, merged over the initial (empty) form."""
    raw = _read(FORM_DATA_KEY)
    if not raw:
        return TimesheetRecord()
    try:
        saved = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable saved form")
        return TimesheetRecord()
    if not isinstance(saved, dict):
        return TimesheetRecord()
    merged = {**TimesheetRecord().to_dict(), **saved}
    return TimesheetRecord.from_dict(merged)


def save_form(record: TimesheetRecord) -> bool:
    return _write(FORM_DATA_KEY, json.dumps(record.to_dict()))


def load_preview_open(default: bool = True) -> bool:
    raw = _read(PREVIEW_OPEN_KEY)
    if raw is None:
        return default
    return raw == "true"


def save_preview_open(is_open: bool) -> bool:
    return _write(PREVIEW_OPEN_KEY, "true" if is_open else "false")
