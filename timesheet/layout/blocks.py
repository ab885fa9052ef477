from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from ..config import DEFAULT_DECLARATION, PLACEHOLDER
from .cursor import LayoutCursor, LineHeights, PageMetrics, Typography
from .document import AssetResult, Document, DrawOp, Image, Line, Page, Rect, Text


FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

RULE_COLOR = colors.Color(200 / 255, 200 / 255, 200 / 255)
FAINT_RULE_COLOR = colors.Color(230 / 255, 230 / 255, 230 / 255)

CHECKBOX_SIZE = 3.0
CHECKBOX_GAP = 3.0
QUESTION_GAP = 8.0
YES_NO_GAP = 12.0
RATING_GAP = 10.0

RATING_OPTIONS: List[Tuple[str, str]] = [
    ("Excellent", "excellent"),
    ("Good", "good"),
    ("Fair", "fair"),
    ("Poor", "poor"),
    ("Very Poor", "very poor"),
]

RATING_QUESTION = "How would you rate their performance?"
BLOCK_CAPITALS_TEXT = "Please complete the following fields in BLOCK CAPITALS:"


class BlockTooTallError(ValueError):
    pass


def is_empty(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def display_value(value: Optional[str]) -> str:
    return PLACEHOLDER if is_empty(value) else str(value)


def text_width(text: str, font_name: str, font_size: float) -> float:
    """Width of `text` in millimetres."""
    return stringWidth(text, font_name, font_size) / mm


def wrap_words(text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """
    Word wrap against the real font metrics. Explicit newlines are kept;
    a single word wider than `max_width` goes on a line of its own.
    """
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        cur: List[str] = []
        for w in words:
            test = " ".join(cur + [w])
            if text_width(test, font_name, font_size) <= max_width:
                cur.append(w)
                continue
            if cur:
                lines.append(" ".join(cur))
                cur = [w]
            else:
                lines.append(w)
        if cur:
            lines.append(" ".join(cur))
    return lines or [""]


@dataclass(frozen=True)
class RenderItem:
    label: str
    value: str
    extra_spacing: float = 0.0


@dataclass(frozen=True)
class RowCell:
    label: str
    value: str
    x: float
    label_w: float
    value_w: float
    extra_spacing: float = 0.0


@dataclass(frozen=True)
class SignatureCell:
    label: str
    text: str
    image: AssetResult
    x: float
    label_w: float
    value_w: float
    image_h: float = 12.0
    extra_spacing: float = 1.8


Cell = Union[RowCell, SignatureCell]


class Layout:
    """
    Owns the write cursor and the document for a single render.

    `header` is called on every new page before content continues at the
    top-of-content offset.
    """

    def __init__(
        self,
        metrics: Optional[PageMetrics] = None,
        typography: Optional[Typography] = None,
        line_heights: Optional[LineHeights] = None,
        header: Optional[Callable[["Layout"], None]] = None,
    ) -> None:
        self.metrics = metrics or PageMetrics()
        self.font = typography or Typography()
        self.lh = line_heights or LineHeights()
        self.header = header
        self.document = Document(width=self.metrics.page_w, height=self.metrics.page_h)
        self.cursor = LayoutCursor(y=self.metrics.top_of_content, page=0)

    @property
    def y(self) -> float:
        return self.cursor.y

    @y.setter
    def y(self, value: float) -> None:
        self.cursor.y = value

    @property
    def page(self) -> Page:
        return self.document.pages[-1]

    def start_page(self) -> Page:
        page = self.document.new_page()
        self.cursor.page = page.number
        if self.header is not None:
            self.header(self)
        self.cursor.y = self.metrics.top_of_content
        return page

    def ensure_space(self, required: float) -> bool:
        """Break to a new page unless `required` mm still fit; True when a page was added."""
        if required > self.metrics.usable_height:
            raise BlockTooTallError(
                f"Block of {required:.1f} mm does not fit on a page "
                f"({self.metrics.usable_height:.1f} mm usable)"
            )
        if not self.document.pages:
            self.start_page()
            return True
        if self.cursor.y + required <= self.metrics.usable_bottom:
            return False
        self.start_page()
        return True

    def draw(self, op: DrawOp) -> None:
        self.page.add(op)

    def text(self, x: float, y: float, value: str, font_name: str = FONT, size: float = 10.0, **kwargs) -> None:
        self.draw(Text(x=x, y=y, text=value, font=font_name, size=size, **kwargs))

    def line(self, x1: float, y1: float, x2: float, y2: float, **kwargs) -> None:
        self.draw(Line(x1=x1, y1=y1, x2=x2, y2=y2, **kwargs))


# -------------------- Label / value rows --------------------
def measure_row(layout: Layout, value: str, value_w: float, extra_spacing: float = 0.0) -> float:
    wrapped = wrap_words(display_value(value), FONT, layout.font.value_size, max(value_w, 0))
    value_h = max(layout.lh.normal, len(wrapped) * layout.lh.small)
    return value_h + extra_spacing


def draw_label_value(
    layout: Layout,
    label: str,
    value: str,
    x: float,
    label_w: float,
    value_w: float,
    extra_spacing: float = 0.0,
) -> float:
    y = layout.y
    if label:
        layout.text(x, y, label, FONT_BOLD, layout.font.label_size)

    tag = "placeholder" if is_empty(value) else "value"
    wrapped = wrap_words(display_value(value), FONT, layout.font.value_size, max(value_w, 0))
    for i, line in enumerate(wrapped):
        layout.text(x + label_w, y + i * layout.lh.small, line, FONT, layout.font.value_size, tag=tag)

    row_h = measure_row(layout, value, value_w, extra_spacing)
    layout.cursor.advance(row_h)
    return row_h


def measure_row_block(
    layout: Layout,
    label: str,
    value: str,
    label_w: float,
    extra_spacing: float = 0.0,
    x: Optional[float] = None,
    value_w: Optional[float] = None,
) -> float:
    width = value_w if value_w is not None else layout.metrics.content_w - label_w
    return measure_row(layout, value, width, extra_spacing)


def draw_row_block(
    layout: Layout,
    label: str,
    value: str,
    label_w: float,
    extra_spacing: float = 0.0,
    x: Optional[float] = None,
    value_w: Optional[float] = None,
) -> float:
    """Full-width label/value row starting at the left margin unless `x` is given."""
    left = x if x is not None else layout.metrics.margin_x
    width = value_w if value_w is not None else layout.metrics.content_w - label_w
    return draw_label_value(layout, label, value, left, label_w, width, extra_spacing)


# -------------------- Section titles --------------------
def measure_section_title(layout: Layout, title: str) -> float:
    return 2 + layout.lh.section_gap


def draw_section_title(layout: Layout, title: str) -> float:
    m = layout.metrics
    start = layout.y
    layout.text(m.margin_x, layout.y, title, FONT_BOLD, layout.font.section_size, tag="section")
    layout.cursor.advance(2)
    layout.line(m.margin_x, layout.y, m.margin_x + m.content_w, layout.y, color=RULE_COLOR, line_width=0.4)
    layout.cursor.advance(layout.lh.section_gap)
    return layout.y - start


# -------------------- Two-column key/value --------------------
COLUMN_LABEL_W = 40.0


def measure_column(layout: Layout, items: Sequence[RenderItem], column_w: float, label_w: float = COLUMN_LABEL_W) -> float:
    return sum(measure_row(layout, it.value, column_w - label_w, it.extra_spacing) for it in items)


def _draw_column(layout: Layout, items: Sequence[RenderItem], x: float, start_y: float, column_w: float, label_w: float) -> float:
    layout.y = start_y
    for it in items:
        draw_label_value(layout, it.label, it.value, x, label_w, column_w - label_w, it.extra_spacing)
    return layout.y


def measure_two_column(
    layout: Layout,
    left: Sequence[RenderItem],
    right: Sequence[RenderItem],
    right_heading: str = "",
    title: str = "",
) -> float:
    column_w = layout.metrics.column_w
    title_h = measure_section_title(layout, title) if title or right_heading else 0.0
    columns_h = max(measure_column(layout, left, column_w), measure_column(layout, right, column_w))
    return title_h + columns_h + layout.lh.block_gap


def draw_two_column(
    layout: Layout,
    left: Sequence[RenderItem],
    right: Sequence[RenderItem],
    right_heading: str = "",
    title: str = "",
) -> float:
    """
    Left and right key/value columns from the same y. `title` is drawn as a
    section title first, on the same row as `right_heading`, so the headings
    and the columns always share a page.
    """
    m = layout.metrics
    top = layout.y
    if title:
        draw_section_title(layout, title)
    elif right_heading:
        layout.cursor.advance(measure_section_title(layout, right_heading))
    start = layout.y
    left_x = m.margin_x
    right_x = m.margin_x + m.column_w + m.gutter

    left_end = _draw_column(layout, left, left_x, start, m.column_w, COLUMN_LABEL_W)

    if right_heading:
        heading_y = top - 1
        layout.text(right_x, heading_y, right_heading, FONT_BOLD, layout.font.section_size, tag="section")
        layout.line(right_x, heading_y + 3, right_x + m.column_w, heading_y + 3, color=RULE_COLOR, line_width=0.4)

    right_end = _draw_column(layout, right, right_x, start, m.column_w, COLUMN_LABEL_W)

    layout.y = max(left_end, right_end) + layout.lh.block_gap
    return layout.y - top


# -------------------- Checkboxes --------------------
def draw_tick(layout: Layout, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> None:
    layout.line(x1, y1, x2, y2, color=colors.black, line_width=0.5, tag="tick")
    layout.line(x2, y2, x3, y3, color=colors.black, line_width=0.5, tag="tick")


def draw_checkbox(layout: Layout, x: float, baseline: float, label: str, checked: bool) -> float:
    """Box + label at `x`; returns the horizontal space used."""
    size = CHECKBOX_SIZE
    box_y = baseline - size + 1
    layout.draw(Rect(x=x, y=box_y, w=size, h=size, stroke_color=colors.black, line_width=0.2, tag=f"checkbox:{label}"))
    if checked:
        draw_tick(
            layout,
            x + 0.7, box_y + size * 0.55,
            x + size * 0.45, box_y + size - 0.7,
            x + size - 0.6, box_y + 0.7,
        )
    layout.text(x + size + CHECKBOX_GAP, baseline, label, FONT, layout.font.value_size)
    return size + CHECKBOX_GAP + text_width(label, FONT, layout.font.value_size)


def measure_yes_no(layout: Layout, question: str, selected: str) -> float:
    return layout.lh.block_gap * 1.2


def draw_yes_no(layout: Layout, question: str, selected: str) -> float:
    x = layout.metrics.margin_x
    y = layout.y
    size = layout.font.value_size
    layout.text(x, y, question, FONT, size)
    cur = x + text_width(question, FONT, size) + QUESTION_GAP
    cur += draw_checkbox(layout, cur, y, "Yes", selected == "yes") + YES_NO_GAP
    draw_checkbox(layout, cur, y, "No", selected == "no")
    height = measure_yes_no(layout, question, selected)
    layout.cursor.advance(height)
    return height


def measure_rating(layout: Layout, selected: str) -> float:
    return layout.lh.block_gap * 1.2 * 2


def draw_rating(layout: Layout, selected: str) -> float:
    x = layout.metrics.margin_x
    start = layout.y
    layout.text(x, layout.y, RATING_QUESTION, FONT, layout.font.value_size)
    layout.cursor.advance(layout.lh.block_gap * 1.2)
    for label, key in RATING_OPTIONS:
        x += draw_checkbox(layout, x, layout.y, label, selected == key) + RATING_GAP
    layout.cursor.advance(layout.lh.block_gap * 1.2)
    return layout.y - start


# -------------------- Instruction line --------------------
def measure_instruction(layout: Layout, text: str = BLOCK_CAPITALS_TEXT) -> float:
    return layout.lh.small + (layout.lh.section_gap + 2) * 1.2


def draw_instruction(layout: Layout, text: str = BLOCK_CAPITALS_TEXT) -> float:
    m = layout.metrics
    start = layout.y
    layout.line(m.margin_x, layout.y, m.margin_x + m.content_w, layout.y, color=FAINT_RULE_COLOR)
    layout.cursor.advance(layout.lh.small)
    layout.text(m.margin_x, layout.y, text, FONT_ITALIC, layout.font.small_size)
    layout.cursor.advance((layout.lh.section_gap + 2) * 1.2)
    return layout.y - start


# -------------------- Paragraph --------------------
def paragraph_lines(layout: Layout, text: str) -> List[str]:
    body = text if not is_empty(text) else DEFAULT_DECLARATION
    return wrap_words(body, FONT, layout.font.paragraph_size, layout.metrics.content_w)


def measure_paragraph(layout: Layout, text: str, gap_after: float = 0.0) -> float:
    return len(paragraph_lines(layout, text)) * layout.lh.paragraph + gap_after


def draw_paragraph(layout: Layout, text: str, gap_after: float = 0.0) -> float:
    x = layout.metrics.margin_x
    start = layout.y
    for i, line in enumerate(paragraph_lines(layout, text)):
        layout.text(x, start + i * layout.lh.paragraph, line, FONT, layout.font.paragraph_size, tag="paragraph")
    layout.cursor.advance(measure_paragraph(layout, text, gap_after))
    return layout.y - start


# -------------------- Signature / side-by-side cells --------------------
def measure_cell(layout: Layout, cell: Cell) -> float:
    if isinstance(cell, SignatureCell):
        if cell.image.ok:
            return cell.image_h + 2
        return measure_row(layout, cell.text, cell.value_w, cell.extra_spacing)
    return measure_row(layout, cell.value, cell.value_w, cell.extra_spacing)


def draw_signature(layout: Layout, cell: SignatureCell) -> float:
    y = layout.y
    layout.text(cell.x, y, cell.label, FONT_BOLD, layout.font.label_size)
    if cell.image.ok:
        layout.draw(
            Image(
                x=cell.x + cell.label_w,
                y=y - (cell.image_h - 3),
                w=cell.value_w,
                h=cell.image_h,
                data=cell.image.data,
                tag="signature",
            )
        )
        height = cell.image_h + 2
        layout.cursor.advance(height)
        return height
    return draw_label_value(layout, "", cell.text, cell.x, cell.label_w, cell.value_w, cell.extra_spacing)


def draw_cell(layout: Layout, cell: Cell) -> float:
    if isinstance(cell, SignatureCell):
        return draw_signature(layout, cell)
    return draw_label_value(layout, cell.label, cell.value, cell.x, cell.label_w, cell.value_w, cell.extra_spacing)


def measure_pair(layout: Layout, left: Cell, right: Cell, gap_after: float = 0.0) -> float:
    return max(measure_cell(layout, left), measure_cell(layout, right)) + gap_after


def draw_pair(layout: Layout, left: Cell, right: Cell, gap_after: float = 0.0) -> float:
    start = layout.y
    draw_cell(layout, left)
    left_end = layout.y
    layout.y = start
    draw_cell(layout, right)
    layout.y = max(left_end, layout.y) + gap_after
    return layout.y - start


# -------------------- Block registry --------------------
@dataclass(frozen=True)
class Block:
    kind: str
    params: Dict[str, object] = field(default_factory=dict)


BLOCK_RENDERERS: Dict[str, Tuple[Callable[..., float], Callable[..., float]]] = {
    "section_title": (measure_section_title, draw_section_title),
    "row": (measure_row_block, draw_row_block),
    "two_column": (measure_two_column, draw_two_column),
    "pair": (measure_pair, draw_pair),
    "yes_no": (measure_yes_no, draw_yes_no),
    "rating": (measure_rating, draw_rating),
    "instruction": (measure_instruction, draw_instruction),
    "paragraph": (measure_paragraph, draw_paragraph),
}


def measure_block(layout: Layout, block: Block) -> float:
    measure, _ = BLOCK_RENDERERS[block.kind]
    return measure(layout, **block.params)


def render_blocks(layout: Layout, blocks: Sequence[Block]) -> None:
    """Single pass: check space for each block, then draw it."""
    for block in blocks:
        measure, draw = BLOCK_RENDERERS[block.kind]
        layout.ensure_space(measure(layout, **block.params))
        draw(layout, **block.params)
