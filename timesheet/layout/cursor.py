from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm


@dataclass(frozen=True)
class PageMetrics:
    """Fixed page geometry in millimetres (A4 portrait unless told otherwise)."""

    page_w: float = A4[0] / mm
    page_h: float = A4[1] / mm
    margin_x: float = 15.0
    margin_y: float = 15.0
    header_h: float = 30.0
    footer_h: float = 18.0
    safety: float = 3.0
    gutter: float = 8.0
    content_offset: float = 35.0

    @property
    def content_w(self) -> float:
        return self.page_w - 2 * self.margin_x

    @property
    def column_w(self) -> float:
        return (self.content_w - self.gutter) / 2

    @property
    def half_w(self) -> float:
        return self.content_w / 2

    @property
    def right_half_x(self) -> float:
        return self.margin_x + self.content_w / 2 + 6

    @property
    def bottom_y(self) -> float:
        return self.page_h - self.margin_y - self.footer_h

    @property
    def usable_bottom(self) -> float:
        # the footer band is reserved on top of the bottom boundary
        return self.bottom_y - self.footer_h - self.safety

    @property
    def top_of_content(self) -> float:
        return self.margin_y + self.content_offset

    @property
    def usable_height(self) -> float:
        return self.usable_bottom - self.top_of_content


@dataclass(frozen=True)
class Typography:
    header_size: float = 17.0
    section_size: float = 11.0
    label_size: float = 10.0
    value_size: float = 10.0
    small_size: float = 9.0
    paragraph_size: float = 8.0


@dataclass(frozen=True)
class LineHeights:
    small: float = 3.0
    normal: float = 4.2
    section_gap: float = 3.6
    block_gap: float = 4.8
    paragraph: float = 3.0


@dataclass
class LayoutCursor:
    y: float
    page: int = 1

    def advance(self, height: float) -> float:
        self.y += height
        return self.y
