"""Pytest fixtures for Word Stamp tests."""

import pytest
from pathlib import Path

from word_stamp import config
from word_stamp.export.capture import CaptureError, CaptureOptions
from word_stamp.export.surface import RenderSurface


class FakeCapture:
    """Capture backend that records what it saw instead of drawing.

    Returns ``b"png:<surface text>"``. Raises CaptureError for any
    surface text listed in ``fail_on``.
    """

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.fail_on = set(fail_on)
        self.texts: list[str] = []
        self.runs: list[tuple] = []
        self.settled: list[bool] = []
        self.presentations: list = []
        self.options: list[CaptureOptions] = []

    @property
    def calls(self) -> int:
        return len(self.texts)

    def __call__(self, surface: RenderSurface, options: CaptureOptions) -> bytes:
        self.texts.append(surface.text)
        self.runs.append(surface.runs)
        self.settled.append(surface.is_settled)
        self.presentations.append(surface.presentation)
        self.options.append(options)
        if surface.text in self.fail_on:
            raise CaptureError(f"cannot capture {surface.text!r}")
        return f"png:{surface.text}".encode("utf-8")


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Give every test fresh default settings."""
    for name in (
        "WORD_STAMP_MARKER",
        "WORD_STAMP_DELIMITER",
        "WORD_STAMP_ARCHIVE_FOLDER",
        "WORD_STAMP_SINGLE_FILENAME",
        "WORD_STAMP_ARCHIVE_FILENAME",
        "WORD_STAMP_SCALE",
        "WORD_STAMP_WIDTH",
        "WORD_STAMP_HEIGHT",
        "WORD_STAMP_CAPTURE_ATTEMPTS",
        "WORD_STAMP_COLOR",
        "WORD_STAMP_FONT_WEIGHT",
        "WORD_STAMP_FONT_FAMILY",
        "WORD_STAMP_FONT_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_settings", None)
    yield
    config._settings = None


@pytest.fixture
def fake_capture() -> FakeCapture:
    """A capture backend that always succeeds."""
    return FakeCapture()


@pytest.fixture
def capture_factory():
    """Build fake capture backends with failing texts."""
    return FakeCapture


@pytest.fixture
def sample_text() -> str:
    """Sample text for style rule tests."""
    return "I was running and eating while spending $5.00 on #lunch and #coffee."


@pytest.fixture
def ing_rule_document() -> str:
    """Rule document matching words ending in 'ing'."""
    return """
type: regex
pattern: '\\b\\w+ing\\b'
style:
  color: purple
"""


@pytest.fixture
def tmp_words_file(tmp_path: Path) -> Path:
    """Create a temporary word list file."""
    file_path = tmp_path / "names.words"
    file_path.write_text("Ann, Bo, Zoë", encoding="utf-8")
    return file_path
