from __future__ import annotations

import pytest

from timesheet.config import DEFAULT_DECLARATION, PLACEHOLDER
from timesheet.layout.blocks import (
    FONT,
    RATING_OPTIONS,
    Block,
    BlockTooTallError,
    Layout,
    RenderItem,
    RowCell,
    SignatureCell,
    draw_label_value,
    draw_pair,
    draw_paragraph,
    draw_rating,
    draw_section_title,
    draw_two_column,
    draw_yes_no,
    measure_block,
    measure_column,
    measure_paragraph,
    render_blocks,
    wrap_words,
)
from timesheet.layout.document import AssetResult, Rect, Text


def _box(layout: Layout, label: str) -> Rect:
    boxes = layout.page.tagged(f"checkbox:{label}")
    assert len(boxes) == 1
    return boxes[0]


def _ticked(layout: Layout, label: str) -> bool:
    box = _box(layout, label)
    return any(box.x <= tick.x1 <= box.x + box.w for tick in layout.page.tagged("tick"))


def test_wrap_words_respects_width() -> None:
    text = "one two three four five six seven eight nine ten eleven twelve"
    lines = wrap_words(text, FONT, 10, 30)
    assert len(lines) > 1
    assert " ".join(lines) == text


def test_empty_value_renders_placeholder(layout: Layout) -> None:
    for value in ("", "   ", "\t"):
        draw_label_value(layout, "Language:", value, 15, 40, 46)
    placeholders = layout.page.tagged("placeholder")
    assert len(placeholders) == 3
    assert all(op.text == PLACEHOLDER for op in placeholders)


@pytest.mark.parametrize(
    "value, extra",
    [
        ("short", 0.0),
        ("short", 1.2),
        ("a considerably longer value that has to wrap over several lines in a narrow column", 1.2),
        ("word " * 60, 1.8),
    ],
)
def test_row_height_formula(layout: Layout, value: str, extra: float) -> None:
    width = 46
    lines = wrap_words(value, FONT, layout.font.value_size, width)
    expected = max(layout.lh.normal, len(lines) * layout.lh.small) + extra
    start = layout.y

    height = draw_label_value(layout, "Notes:", value, 15, 40, width, extra)

    assert height == pytest.approx(expected)
    assert layout.y == pytest.approx(start + expected)


@pytest.mark.parametrize(
    "left_values, right_values",
    [
        (["a"] * 10, ["b"] * 4),
        (["a"], ["long value " * 12, "b"]),
        ([], ["b"]),
        (["word " * 40, "a", "a"], ["b", "word " * 25]),
    ],
)
def test_two_column_end_is_max_plus_gap(layout: Layout, left_values, right_values) -> None:
    left = [RenderItem("Left:", v, 1.2) for v in left_values]
    right = [RenderItem("Right:", v, 1.2) for v in right_values]
    column_w = layout.metrics.column_w
    start = layout.y

    draw_two_column(layout, left, right, "INTERPRETER PROFILE")

    start += 2 + layout.lh.section_gap
    left_end = start + measure_column(layout, left, column_w)
    right_end = start + measure_column(layout, right, column_w)
    assert layout.y == pytest.approx(max(left_end, right_end) + layout.lh.block_gap)


def test_two_column_starts_both_columns_at_same_y(layout: Layout) -> None:
    start = layout.y
    draw_two_column(layout, [RenderItem("Date:", "2024-01-05")], [RenderItem("Name:", "Zawadi")])
    values = [op for op in layout.page.ops if isinstance(op, Text) and op.tag == "value"]
    assert {op.y for op in values} == {start}
    assert len({op.x for op in values}) == 2


@pytest.mark.parametrize("selected, yes, no", [("yes", True, False), ("no", False, True)])
def test_yes_no_marks_matching_box(layout: Layout, selected: str, yes: bool, no: bool) -> None:
    draw_yes_no(layout, "Did the service user attend?", selected)
    assert len(layout.page.tagged("tick")) == 2
    assert _ticked(layout, "Yes") is yes
    assert _ticked(layout, "No") is no


@pytest.mark.parametrize("selected", ["", "Yes", "NO", "maybe", " yes"])
def test_yes_no_marks_nothing_for_other_values(layout: Layout, selected: str) -> None:
    draw_yes_no(layout, "Did the interpreter arrive on time?", selected)
    assert layout.page.tagged("tick") == []


def test_yes_no_boxes_laid_out_left_to_right(layout: Layout) -> None:
    draw_yes_no(layout, "Was it easy to arrange the interpreter?", "")
    assert _box(layout, "Yes").x < _box(layout, "No").x


@pytest.mark.parametrize("label, key", RATING_OPTIONS)
def test_rating_marks_exactly_one(layout: Layout, label: str, key: str) -> None:
    draw_rating(layout, key)
    assert len(layout.page.tagged("tick")) == 2
    assert _ticked(layout, label)
    for other, _ in RATING_OPTIONS:
        if other != label:
            assert not _ticked(layout, other)


@pytest.mark.parametrize("selected", ["", "Good", "excellent ", "verypoor", "average"])
def test_rating_marks_none_without_exact_key(layout: Layout, selected: str) -> None:
    draw_rating(layout, selected)
    assert layout.page.tagged("tick") == []
    assert len([op for op in layout.page.ops if op.tag.startswith("checkbox:")]) == 5


def test_paragraph_falls_back_to_default_declaration(layout: Layout) -> None:
    draw_paragraph(layout, "  ")
    drawn = " ".join(op.text for op in layout.page.tagged("paragraph"))
    assert drawn == " ".join(DEFAULT_DECLARATION.split())


def test_paragraph_height(layout: Layout) -> None:
    start = layout.y
    lines = wrap_words(DEFAULT_DECLARATION, FONT, layout.font.paragraph_size, layout.metrics.content_w)
    draw_paragraph(layout, DEFAULT_DECLARATION)
    assert layout.y == pytest.approx(start + len(lines) * layout.lh.paragraph)
    assert measure_paragraph(layout, DEFAULT_DECLARATION, 2.0) == pytest.approx(len(lines) * layout.lh.paragraph + 2.0)


def test_signature_image_reserves_fixed_height(layout: Layout, png_bytes: bytes) -> None:
    cell = SignatureCell("Customer's Signature:", "A. Patel", AssetResult(data=png_bytes, size=(120, 40)), 15, 42, 42)
    date = RowCell("Date:", "2024-01-05", 111, 14, 70, 1.8)
    start = layout.y

    draw_pair(layout, cell, date)

    images = layout.page.tagged("signature")
    assert len(images) == 1
    assert images[0].h == 12.0 and images[0].w == 42
    assert "A. Patel" not in layout.page.texts()
    assert layout.y == pytest.approx(start + 14.0)


def test_signature_without_image_falls_back_to_text(layout: Layout) -> None:
    cell = SignatureCell("Customer's Signature:", "A. Patel", AssetResult.failed("corrupt"), 15, 42, 42)
    start = layout.y

    draw_pair(layout, cell, RowCell("Date:", "", 111, 14, 70, 1.8))

    assert layout.page.tagged("signature") == []
    assert "A. Patel" in layout.page.texts()
    assert layout.y == pytest.approx(start + layout.lh.normal + 1.8)


def test_section_title_advances_cursor(layout: Layout) -> None:
    start = layout.y
    draw_section_title(layout, "BOOKING DETAILS")
    assert layout.y == pytest.approx(start + 2 + layout.lh.section_gap)


def test_page_break_moves_block_to_top_of_new_page() -> None:
    headers = []
    layout = Layout(header=lambda lay: headers.append(lay.cursor.page))
    layout.start_page()
    layout.y = layout.metrics.usable_bottom - 2.0

    block = Block("yes_no", {"question": "Did the service user attend?", "selected": "yes"})
    assert measure_block(layout, block) > 2.0
    render_blocks(layout, [block])

    assert layout.document.page_count == 2
    assert headers == [1, 2]
    first = layout.document.pages[0]
    assert "Did the service user attend?" not in first.texts()
    question = [op for op in layout.page.ops if isinstance(op, Text) and op.text == "Did the service user attend?"]
    assert question[0].y == pytest.approx(layout.metrics.top_of_content)


def test_block_that_fits_stays_on_page(layout: Layout) -> None:
    layout.y = layout.metrics.usable_bottom - 10.0
    render_blocks(layout, [Block("section_title", {"title": "TO BE COMPLETED BY THE CUSTOMER"})])
    assert layout.document.page_count == 1
    assert layout.y <= layout.metrics.usable_bottom


def test_ensure_space_breaks_only_when_block_overflows(layout: Layout) -> None:
    layout.y = layout.metrics.usable_bottom - 5.0
    assert layout.ensure_space(4.99) is False
    assert layout.ensure_space(5.01) is True
    assert layout.y == layout.metrics.top_of_content


def test_block_taller_than_page_is_rejected(layout: Layout) -> None:
    with pytest.raises(BlockTooTallError):
        layout.ensure_space(layout.metrics.usable_height + 0.5)
    with pytest.raises(BlockTooTallError):
        render_blocks(layout, [Block("paragraph", {"text": "word " * 6000})])


def test_two_column_title_moves_with_its_columns() -> None:
    layout = Layout(header=lambda lay: None)
    layout.start_page()
    layout.y = layout.metrics.usable_bottom - 10.0
    block = Block(
        "two_column",
        {
            "left": [RenderItem("Date:", "2024-01-05", 1.2)] * 3,
            "right": [RenderItem("Name:", "Zawadi", 1.2)],
            "title": "BOOKING DETAILS",
            "right_heading": "INTERPRETER PROFILE",
        },
    )
    start = layout.y

    render_blocks(layout, [block])

    assert layout.document.page_count == 2
    assert layout.document.pages[0].tagged("section") == []
    headings = {op.text: op for op in layout.page.tagged("section")}
    assert set(headings) == {"BOOKING DETAILS", "INTERPRETER PROFILE"}
    top = layout.metrics.top_of_content
    assert headings["BOOKING DETAILS"].y == pytest.approx(top)
    # clear of the header band
    assert headings["INTERPRETER PROFILE"].y > layout.metrics.margin_y + layout.metrics.header_h
    assert layout.y - top == pytest.approx(measure_block(layout, block))
    assert start > top
