from __future__ import annotations

from pathlib import Path

from timesheet.layout.render_preview import render_previews


class DummyRect:
    width = 595.0
    height = 842.0


class DummyPixmap:
    def save(self, path: str) -> None:
        Path(path).write_text("preview", encoding="utf-8")


class DummyPage:
    rect = DummyRect()

    def get_pixmap(self, matrix=None, alpha=True) -> DummyPixmap:  # noqa: ARG002 - signature matches fitz
        return DummyPixmap()


class DummyDoc:
    def __init__(self, page_count: int = 3) -> None:
        self.page_count = page_count
        self.closed = False

    def __enter__(self) -> "DummyDoc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001 - test helper
        self.closed = True

    def load_page(self, index: int) -> DummyPage:  # noqa: ARG002 - test helper
        return DummyPage()


def test_render_previews_closes_document(monkeypatch, tmp_path: Path) -> None:
    doc = DummyDoc()
    monkeypatch.setattr("timesheet.layout.render_preview.fitz.open", lambda path: doc)

    previews = render_previews(Path("Jambo_Timesheet_2024-01-05.pdf"), base_dir=tmp_path)

    assert doc.closed is True
    assert [path.name for path in previews] == ["page_1.png", "page_2.png", "page_3.png"]
    assert all(path.parent.name == "Jambo_Timesheet_2024-01-05_preview" for path in previews)
    assert all(path.exists() for path in previews)

