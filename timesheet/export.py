from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .layout.document import Document
from .layout.render_pdf import pdf_bytes
from .storage import artifact_path


logger = logging.getLogger(__name__)

ShareHandler = Callable[[str, bytes], Path]


class ExportMode(str, Enum):
    DOWNLOAD = "download"
    SHARE = "share"


@dataclass(frozen=True)
class ExportResult:
    path: Path
    mode: ExportMode


def download(filename: str, data: bytes, base_dir: Path | None = None) -> Path:
    path = artifact_path(filename, base_dir=base_dir)
    path.write_bytes(data)
    return path


def export_document(
    document: Document,
    mode: ExportMode = ExportMode.DOWNLOAD,
    base_dir: Path | None = None,
    share: Optional[ShareHandler] = None,
) -> ExportResult:
    """
    Save the finished PDF. Share mode hands the bytes to `share`; when no share
    handler is available or it fails, the file is downloaded instead.
    """
    data = pdf_bytes(document)
    if mode == ExportMode.SHARE:
        if share is None:
            logger.info("No share handler available, saving %s instead", document.filename)
        else:
            try:
                return ExportResult(path=share(document.filename, data), mode=ExportMode.SHARE)
            except Exception as exc:
                logger.warning("Share failed for %s, saving instead: %s", document.filename, exc)
    path = download(document.filename, data, base_dir=base_dir)
    return ExportResult(path=path, mode=ExportMode.DOWNLOAD)
