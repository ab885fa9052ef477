from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..export import ExportMode, ExportResult, ShareHandler, export_document
from ..form import validate_for_render
from ..models import TimesheetRecord
from .assemble import build_document
from .chrome import fetch_logo
from .document import AssetResult
from .render_preview import render_previews


logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    export: ExportResult
    page_count: int
    previews: List[Path] = field(default_factory=list)

    @property
    def path(self) -> Path:
        return self.export.path


def generate_timesheet(
    record: TimesheetRecord,
    blank: bool = False,
    mode: ExportMode = ExportMode.DOWNLOAD,
    base_dir: Path | None = None,
    logo: Union[AssetResult, str, Path, None] = None,
    share: Optional[ShareHandler] = None,
    preview: bool = False,
) -> GenerateResult:
    """Validate, lay out and export one timesheet. Nothing is written if validation fails."""
    validate_for_render(record, blank=blank)

    logo_asset = logo if isinstance(logo, AssetResult) else fetch_logo(logo)
    document = build_document(record, blank=blank, logo=logo_asset)
    exported = export_document(document, mode=mode, base_dir=base_dir, share=share)
    logger.info("Exported %s (%s)", exported.path, exported.mode.value)

    previews: List[Path] = []
    if preview and exported.mode == ExportMode.DOWNLOAD:
        previews = render_previews(exported.path, base_dir=base_dir)
    return GenerateResult(export=exported, page_count=document.page_count, previews=previews)
