"""Capture capability: turn a rendered surface into PNG bytes.

The export pipeline only depends on the ``CaptureBackend`` contract. The
Pillow backend below is a plain rasterizer for command line use; it wraps
words naively and does not aim for typographic fidelity.
"""

import io
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, Protocol, Union

from PIL import Image, ImageColor, ImageDraw, ImageFont

from word_stamp.export.surface import RenderSurface
from word_stamp.formatting.ir import StyleDeclaration


class CaptureError(Exception):
    """The surface could not be captured."""

    pass


@dataclass(frozen=True)
class CaptureOptions:
    """Options passed to a capture backend.

    Attributes:
        scale: Device pixel ratio of the output image
        width: Surface width in CSS pixels
        height: Surface height in CSS pixels
    """

    scale: float = 2.0
    width: int = 500
    height: int = 300

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (round(self.width * self.scale), round(self.height * self.scale))


class CaptureBackend(Protocol):
    """Callable returning image bytes, or an awaitable of them."""

    def __call__(
        self, surface: RenderSurface, options: CaptureOptions
    ) -> Union[bytes, Awaitable[bytes]]:
        ...


# Line height as a multiple of the font size
LINE_HEIGHT = 1.2
BOLD_WEIGHT = 600


@dataclass
class _Piece:
    text: str
    style: StyleDeclaration
    font: Any
    width: float
    space_before: float


class PillowCapture:
    """Rasterize a surface's styled runs with Pillow."""

    def __init__(self, font_paths: Optional[dict[str, str]] = None) -> None:
        """Initialize the backend.

        Args:
            font_paths: Optional mapping of font family name to font file
        """
        self.font_paths = font_paths or {}
        self._font_cache: dict[tuple[str, int], Any] = {}

    def __call__(self, surface: RenderSurface, options: CaptureOptions) -> bytes:
        try:
            image = self.draw(surface, options)
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            return buffer.getvalue()
        except CaptureError:
            raise
        except (OSError, ValueError, TypeError) as e:
            raise CaptureError(f"Rendering failed: {e}") from e

    def draw(self, surface: RenderSurface, options: CaptureOptions) -> Image.Image:
        """Draw the surface onto a new RGBA image."""
        size = options.pixel_size
        image = Image.new("RGBA", size, self._background(surface.presentation.background))
        canvas = ImageDraw.Draw(image)

        lines = self._layout(canvas, surface, options, max_width=size[0])
        heights = [self._line_height(line, options) for line in lines]
        y = (size[1] - sum(heights)) / 2

        for line, height in zip(lines, heights):
            line_width = sum(p.space_before + p.width for p in line)
            x = (size[0] - line_width) / 2
            for piece in line:
                x += piece.space_before
                self._draw_piece(canvas, piece, x, y, height)
                x += piece.width
            y += height

        return image

    def _layout(
        self,
        canvas: ImageDraw.ImageDraw,
        surface: RenderSurface,
        options: CaptureOptions,
        max_width: int,
    ) -> list[list[_Piece]]:
        """Break runs into centered lines, wrapping on whitespace."""
        lines: list[list[_Piece]] = [[]]
        line_width = 0.0
        pending_space = 0.0

        for run in surface.runs:
            style = surface.renderer.resolve(run)
            font = self._font(style, options)
            if run.text.isspace():
                breaks = run.text.count("\n")
                if breaks:
                    lines.extend([] for _ in range(breaks))
                    line_width = 0.0
                    pending_space = 0.0
                else:
                    pending_space += canvas.textlength(run.text, font=font)
                continue

            width = canvas.textlength(run.text, font=font)
            current = lines[-1]
            if current and line_width + pending_space + width > max_width:
                current = []
                lines.append(current)
                line_width = 0.0
                pending_space = 0.0

            space = pending_space if current else 0.0
            current.append(_Piece(run.text, style, font, width, space))
            line_width += space + width
            pending_space = 0.0

        return lines

    def _line_height(self, line: list[_Piece], options: CaptureOptions) -> float:
        base = self._font_size(StyleDeclaration(), options)
        sizes = [self._font_size(p.style, options) for p in line] or [base]
        return max(sizes) * LINE_HEIGHT

    def _draw_piece(
        self,
        canvas: ImageDraw.ImageDraw,
        piece: _Piece,
        x: float,
        y: float,
        line_height: float,
    ) -> None:
        style = piece.style
        color = self._color(style.color, default="#000000")
        font_size = piece.font.size if hasattr(piece.font, "size") else line_height

        if style.background_color is not None:
            canvas.rectangle(
                [x, y, x + piece.width, y + line_height],
                fill=self._color(style.background_color, default="#ffffff"),
            )

        stroke = max(1, round(font_size / 25)) if _is_bold(style.font_weight) else 0
        text_y = y + (line_height - font_size) / 2
        canvas.text(
            (x, text_y),
            piece.text,
            font=piece.font,
            fill=color,
            stroke_width=stroke,
            stroke_fill=color,
        )

        decoration = str(style.text_decoration or "")
        if "underline" in decoration:
            underline_y = text_y + font_size
            canvas.line([x, underline_y, x + piece.width, underline_y], fill=color)
        if "line-through" in decoration:
            strike_y = text_y + font_size / 2
            canvas.line([x, strike_y, x + piece.width, strike_y], fill=color)

    def _font(self, style: StyleDeclaration, options: CaptureOptions) -> Any:
        size = self._font_size(style, options)
        family = str(style.font_family or "")
        key = (family, size)
        if key not in self._font_cache:
            self._font_cache[key] = self._load_font(family, size)
        return self._font_cache[key]

    def _load_font(self, family: str, size: int) -> Any:
        candidates = [self.font_paths[family]] if family in self.font_paths else []
        if family:
            candidates.append(f"{family}.ttf")
        for candidate in candidates:
            try:
                return ImageFont.truetype(candidate, size)
            except OSError:
                continue
        return ImageFont.load_default(size=size)

    @staticmethod
    def _font_size(style: StyleDeclaration, options: CaptureOptions) -> int:
        raw = style.font_size if style.font_size is not None else 20
        try:
            value = float(str(raw).strip().removesuffix("px"))
        except ValueError:
            raise CaptureError(f"Invalid font size: {raw!r}") from None
        return max(1, round(value * options.scale))

    @staticmethod
    def _color(value: Any, default: str) -> tuple[int, ...]:
        try:
            return ImageColor.getrgb(str(value or default))
        except ValueError:
            raise CaptureError(f"Invalid color: {value!r}") from None

    @staticmethod
    def _background(value: str) -> tuple[int, int, int, int]:
        if not value or value == "transparent":
            return (0, 0, 0, 0)
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError:
            raise CaptureError(f"Invalid background: {value!r}") from None
        if len(rgb) == 4:
            return rgb
        return (*rgb, 255)


def _is_bold(weight: Any) -> bool:
    if weight is None:
        return False
    text = str(weight).strip().lower()
    if text in ("bold", "bolder"):
        return True
    try:
        return float(text) >= BOLD_WEIGHT
    except ValueError:
        return False
