from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import httpx
from reportlab.lib import colors

from .. import config
from .blocks import FONT, FONT_BOLD, FONT_ITALIC, Layout, RULE_COLOR
from .document import AssetResult, Line, Page, Rect, Text, Image, load_image


logger = logging.getLogger(__name__)

LOGO_W = 45.0
LOGO_H = 12.0
TITLE = "TIMESHEET"

BAND_FILL = colors.Color(248 / 255, 250 / 255, 252 / 255)
SLATE = colors.Color(51 / 255, 65 / 255, 85 / 255)
SLATE_LIGHT = colors.Color(71 / 255, 85 / 255, 105 / 255)
SLATE_DARK = colors.Color(30 / 255, 41 / 255, 59 / 255)
PLACEHOLDER_PURPLE = colors.Color(128 / 255, 0, 128 / 255)


def fetch_logo(
    source: Union[str, Path, None] = None,
    client: Optional[httpx.Client] = None,
) -> AssetResult:
    """
    Load the header logo from a local path or an http(s) URL.
    Failures come back as a failed AssetResult; the header then draws a placeholder.
    """
    source = config.LOGO_URL if source is None else source
    if not source:
        return AssetResult.failed("no logo configured")

    text = str(source)
    if not text.startswith(("http://", "https://")):
        path = Path(text)
        if not path.exists():
            logger.warning("Logo file not found: %s", path)
            return AssetResult.failed(f"logo file not found: {path}")
        result = load_image(path.read_bytes())
    else:
        try:
            if client is not None:
                response = client.get(text, timeout=config.LOGO_TIMEOUT)
            else:
                response = httpx.get(text, timeout=config.LOGO_TIMEOUT, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Logo loading failed: %s", exc)
            return AssetResult.failed(f"logo fetch failed: {exc}")
        result = load_image(response.content)

    if not result.ok:
        logger.warning("Logo loading failed: %s", result.error)
    return result


def draw_header(layout: Layout, logo: AssetResult) -> None:
    m = layout.metrics
    band_w = m.page_w - 2 * m.margin_x

    layout.draw(
        Rect(
            x=m.margin_x, y=m.margin_y, w=band_w, h=m.header_h,
            stroke_color=RULE_COLOR, fill_color=BAND_FILL, line_width=0.3, tag="header",
        )
    )

    logo_x = m.margin_x + 5
    logo_y = m.margin_y + 5
    if logo.ok:
        layout.draw(Image(x=logo_x, y=logo_y, w=LOGO_W, h=LOGO_H, data=logo.data, tag="logo"))
    else:
        layout.draw(Rect(x=logo_x, y=logo_y, w=LOGO_W, h=LOGO_H, fill_color=PLACEHOLDER_PURPLE, tag="logo_placeholder"))
        cx = logo_x + LOGO_W / 2
        cy = logo_y + LOGO_H / 2
        layout.text(cx, cy - 2, "COMPANY", FONT_BOLD, 8, color=colors.white, align="center")
        layout.text(cx, cy + 2, "LOGO", FONT_BOLD, 8, color=colors.white, align="center")

    right_x = m.page_w - m.margin_x - 5
    layout.text(right_x, m.margin_y + 8, config.COMPANY_BUILDING, FONT_BOLD, 9, color=SLATE, align="right")
    yy = m.margin_y + 12
    for line in config.COMPANY_HEADER_LINES:
        layout.text(right_x, yy, line, FONT, 7, color=SLATE_LIGHT, align="right")
        yy += 3

    layout.text(
        m.page_w / 2, m.margin_y + m.header_h - 8, TITLE,
        FONT_BOLD, layout.font.header_size + 2, color=SLATE_DARK, align="center", tag="title",
    )
    underline_y = m.margin_y + m.header_h - 5
    layout.line(m.margin_x + 10, underline_y, m.page_w - m.margin_x - 10, underline_y, color=RULE_COLOR, line_width=0.5)


def draw_footer(layout: Layout, page: Page) -> None:
    m = layout.metrics
    footer_y = m.page_h - m.margin_y - m.footer_h
    band_w = m.page_w - 2 * m.margin_x
    left_x = m.margin_x + 5
    right_x = m.page_w - m.margin_x - 5
    center = m.page_w / 2

    ops = [
        Rect(
            x=m.margin_x, y=footer_y, w=band_w, h=m.footer_h,
            stroke_color=RULE_COLOR, fill_color=BAND_FILL, line_width=0.3, tag="footer",
        ),
        Line(m.margin_x, footer_y, m.page_w - m.margin_x, footer_y, color=RULE_COLOR, line_width=0.3),
        Text(center, footer_y + 6, config.COMPANY_NAME, FONT_BOLD, 8, color=SLATE, align="center"),
        Text(center, footer_y + 10, config.COMPANY_TAGLINE, FONT_ITALIC, 6, color=SLATE_LIGHT, align="center"),
    ]
    for i, line in enumerate(config.COMPANY_CONTACT_LINES):
        ops.append(Text(left_x, footer_y + 14 + 3 * i, line, FONT, 5, color=SLATE_LIGHT))
    for i, line in enumerate(config.COMPANY_ADDRESS_LINES):
        ops.append(Text(right_x, footer_y + 14 + 3 * i, line, FONT, 5, color=SLATE_LIGHT, align="right"))
    ops.append(Text(center, footer_y + 18, config.COMPANY_NUMBER, FONT, 4, color=SLATE_LIGHT, align="center"))

    page.footer = ops


def draw_footers(layout: Layout) -> None:
    """Second pass: overlay the footer on every page once all content exists."""
    for page in layout.document.pages:
        draw_footer(layout, page)
