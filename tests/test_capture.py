"""Tests for the Pillow capture backend."""

import io

import pytest
from PIL import Image, ImageDraw

from word_stamp.export.capture import CaptureError, CaptureOptions, PillowCapture
from word_stamp.export.surface import Presentation, RenderSurface
from word_stamp.formatting.ir import StyleDeclaration, StyledRun
from word_stamp.formatting.renderer import StyledRenderer


def open_png(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data)).convert("RGBA")


def pixels(image: Image.Image) -> list[tuple[int, ...]]:
    width, height = image.size
    return [image.getpixel((x, y)) for y in range(height) for x in range(width)]


class TestPillowCapture:
    """Tests for the PillowCapture class."""

    @pytest.fixture
    def capture(self) -> PillowCapture:
        return PillowCapture()

    @pytest.fixture
    def surface(self) -> RenderSurface:
        surface = RenderSurface(width=120, height=60)
        surface.render([StyledRun("Hi"), StyledRun(" "), StyledRun("there")])
        return surface

    def test_png_of_scaled_size(self, capture: PillowCapture, surface: RenderSurface):
        """Test that the image is a PNG of width*scale by height*scale."""
        data = capture(surface, CaptureOptions(scale=2, width=120, height=60))

        assert data.startswith(b"\x89PNG")
        assert open_png(data).size == (240, 120)

    def test_transparent_background_during_capture(
        self, capture: PillowCapture, surface: RenderSurface
    ):
        """Test that the neutral capture presentation gives a clear background."""
        with surface.prepared_for_capture():
            data = capture(surface, CaptureOptions(scale=1, width=120, height=60))

        assert open_png(data).getpixel((0, 0))[3] == 0

    def test_surface_background(self, capture: PillowCapture, surface: RenderSurface):
        """Test that the surface background fills the image."""
        data = capture(surface, CaptureOptions(scale=1, width=120, height=60))

        assert open_png(data).getpixel((0, 0)) == (255, 255, 255, 255)

    def test_run_color_is_drawn(self, capture: PillowCapture):
        """Test that styled runs are drawn in their color."""
        surface = RenderSurface(width=200, height=100)
        surface.render([StyledRun("WWW", StyleDeclaration(color="#ff0000", font_size=60))])

        image = open_png(capture(surface, CaptureOptions(scale=1, width=200, height=100)))

        red = [
            px for px in pixels(image)
            if px[0] > 200 and px[1] < 80 and px[2] < 80
        ]
        assert red

    def test_base_style_applies_to_unstyled_runs(self, capture: PillowCapture):
        """Test that unstyled runs use the renderer's base style."""
        renderer = StyledRenderer(base_style=StyleDeclaration(color="#0000ff", font_size=60))
        surface = RenderSurface(renderer=renderer, width=200, height=100)
        surface.render([StyledRun("WWW")])

        image = open_png(capture(surface, CaptureOptions(scale=1, width=200, height=100)))

        blue = [px for px in pixels(image) if px[2] > 200 and px[0] < 80]
        assert blue

    def test_long_text_wraps(self, capture: PillowCapture):
        """Test that text wider than the surface is broken into lines."""
        surface = RenderSurface(width=80, height=200)
        words = ["word"] * 12
        runs = []
        for i, word in enumerate(words):
            if i:
                runs.append(StyledRun(" "))
            runs.append(StyledRun(word))
        surface.render(runs)

        canvas_lines = capture._layout(
            ImageDraw.Draw(Image.new("RGBA", (1, 1))),
            surface,
            CaptureOptions(scale=1, width=80, height=200),
            max_width=80,
        )

        assert len(canvas_lines) > 1
        assert sum(len(line) for line in canvas_lines) == 12

    def test_invalid_color(self, capture: PillowCapture):
        """Test that an unknown color raises CaptureError."""
        surface = RenderSurface()
        surface.render([StyledRun("x", StyleDeclaration(color="not-a-color"))])

        with pytest.raises(CaptureError, match="color"):
            capture(surface, CaptureOptions())

    def test_invalid_font_size(self, capture: PillowCapture):
        """Test that a non-numeric font size raises CaptureError."""
        surface = RenderSurface()
        surface.render([StyledRun("x", StyleDeclaration(font_size="huge"))])

        with pytest.raises(CaptureError, match="font size"):
            capture(surface, CaptureOptions())

    def test_invalid_background(self, capture: PillowCapture):
        """Test that an unknown background raises CaptureError."""
        surface = RenderSurface(presentation=Presentation(background="plaid"))

        with pytest.raises(CaptureError, match="background"):
            capture(surface, CaptureOptions())

    def test_pixel_suffix_font_size(self, capture: PillowCapture):
        """Test that CSS-style '24px' sizes are accepted."""
        surface = RenderSurface()
        surface.render([StyledRun("x", StyleDeclaration(font_size="24px", font_weight="bold"))])

        assert capture(surface, CaptureOptions(scale=1)).startswith(b"\x89PNG")
