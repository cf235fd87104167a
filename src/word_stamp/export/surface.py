"""The shared visual surface that rendering mutates and capture reads."""

import asyncio
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from word_stamp.config import get_settings
from word_stamp.formatting.ir import StyledRun
from word_stamp.formatting.renderer import StyledRenderer


@dataclass(frozen=True)
class Presentation:
    """Placement and decoration of the surface.

    The defaults describe the on-screen preview box: centered with a
    transform, white background and a thin border.
    """

    transform: str = "translateX(-50%)"
    position: str = "absolute"
    left: str = "50%"
    background: str = "white"
    border: str = "1px solid rgba(0, 0, 0, 0.1)"


# Presentation used while capturing, so the image is neither clipped nor tinted
CAPTURE_PRESENTATION = Presentation(
    transform="none",
    position="relative",
    left="0",
    background="transparent",
    border="none",
)


class RenderSurface:
    """A single mutable surface shared by every render of an export.

    Only one writer may use a surface at a time; the export pipeline
    guarantees this by rendering items strictly one after another.
    """

    def __init__(
        self,
        renderer: Optional[StyledRenderer] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        presentation: Optional[Presentation] = None,
    ) -> None:
        """Initialize the surface.

        Args:
            renderer: Renderer whose base style applies to unstyled runs
            width: Surface width in pixels
            height: Surface height in pixels
            presentation: Initial presentation
        """
        settings = get_settings()
        self.renderer = renderer or StyledRenderer()
        self.width = width or settings.surface_width
        self.height = height or settings.surface_height
        self.presentation = presentation or Presentation()
        self.runs: tuple[StyledRun, ...] = ()
        self.revision = 0
        self.settled_revision = 0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_settled(self) -> bool:
        """Check if the latest render has become observable."""
        return self.settled_revision == self.revision

    def render(self, runs: Sequence[StyledRun]) -> None:
        """Replace the surface content."""
        self.runs = tuple(runs)
        self.revision += 1

    async def settle(self) -> None:
        """Yield to the event loop so the latest render completes.

        This is the only suspension point between rendering and capture.
        """
        target = self.revision
        await asyncio.sleep(0)
        self.settled_revision = target

    @contextmanager
    def prepared_for_capture(self) -> Iterator["RenderSurface"]:
        """Neutralize presentation for capture and restore it afterwards.

        Content rendered inside the block is also rolled back on exit.
        """
        saved_presentation = self.presentation
        saved_runs = self.runs
        self.presentation = CAPTURE_PRESENTATION
        try:
            yield self
        finally:
            self.presentation = saved_presentation
            if self.runs != saved_runs:
                self.render(saved_runs)
                self.settled_revision = self.revision
