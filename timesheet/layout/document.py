"""
Finished-document model.

Pages hold drawing operations in millimetres with a top-down y axis. Nothing is
drawn onto a PDF canvas until the whole document (footer pass included) exists,
so the footer overlay can be added to every page after content is laid out.
"""
from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    stroke_color: Optional[colors.Color] = None
    fill_color: Optional[colors.Color] = None
    line_width: float = 0.3
    tag: str = ""


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Optional[colors.Color] = None
    line_width: float = 0.3
    tag: str = ""


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    font: str = "Helvetica"
    size: float = 10.0
    color: Optional[colors.Color] = None
    align: str = "left"  # left | center | right
    tag: str = ""


@dataclass(frozen=True)
class Image:
    x: float
    y: float
    w: float
    h: float
    data: bytes = field(repr=False)
    tag: str = ""


DrawOp = Union[Rect, Line, Text, Image]


@dataclass
class Page:
    number: int
    ops: List[DrawOp] = field(default_factory=list)
    footer: List[DrawOp] = field(default_factory=list)

    def add(self, op: DrawOp) -> None:
        self.ops.append(op)

    def tagged(self, tag: str) -> List[DrawOp]:
        return [op for op in self.ops + self.footer if op.tag == tag]

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, Text)]


@dataclass
class Document:
    width: float
    height: float
    pages: List[Page] = field(default_factory=list)
    filename: str = ""

    def new_page(self) -> Page:
        page = Page(number=len(self.pages) + 1)
        self.pages.append(page)
        return page

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def tagged(self, tag: str) -> List[DrawOp]:
        return [op for page in self.pages for op in page.tagged(tag)]


@dataclass(frozen=True)
class AssetResult:
    """Outcome of loading an image asset: either bytes or the reason it failed."""

    data: Optional[bytes] = field(default=None, repr=False)
    size: Tuple[int, int] = (0, 0)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.data is not None

    @classmethod
    def failed(cls, reason: str) -> "AssetResult":
        return cls(error=reason)


def load_image(data: bytes) -> AssetResult:
    try:
        reader = ImageReader(io.BytesIO(data))
        size = reader.getSize()
        # decode the pixels too; a truncated file still has a valid header
        reader.getRGBData()
    except Exception as exc:
        return AssetResult.failed(f"unreadable image: {exc}")
    return AssetResult(data=data, size=(int(size[0]), int(size[1])))


def decode_data_url(value: str) -> AssetResult:
    """Decode a base64 `data:` URL (or bare base64) into a checked image."""
    text = (value or "").strip()
    if not text:
        return AssetResult.failed("no image")
    if text.startswith("data:"):
        header, _, text = text.partition(",")
        if ";base64" not in header:
            return AssetResult.failed("data URL is not base64 encoded")
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        return AssetResult.failed(f"bad base64 payload: {exc}")
    return load_image(raw)
