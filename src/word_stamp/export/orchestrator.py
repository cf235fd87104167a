"""Export orchestrator: render, capture and package content."""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from word_stamp.config import get_settings
from word_stamp.export.archive import ArchiveBuilder, ArchiveEncodingError
from word_stamp.export.capture import (
    CaptureBackend,
    CaptureError,
    CaptureOptions,
    PillowCapture,
)
from word_stamp.export.surface import RenderSurface
from word_stamp.formatting.ir import (
    ArchiveExport,
    BatchItem,
    ExportResult,
    ItemFailure,
    SingleExport,
    StyleRule,
)
from word_stamp.formatting.renderer import RuleSource, StyledRenderer
from word_stamp.formatting.rules import InvalidStyleRuleError, coerce_rules
from word_stamp.words.placeholder import contains_marker, expand_all, validate_marker

logger = logging.getLogger(__name__)

ItemCallback = Callable[[BatchItem, bool], None]


class ExportState(str, Enum):
    """States of a single export invocation."""

    IDLE = "idle"
    PREPARING = "preparing"
    SINGLE = "single"
    BATCH = "batch"
    DONE = "done"
    FAILED = "failed"


class BatchExportOrchestrator:
    """Drives the render -> capture -> package sequence.

    Pipeline:
    1. Validate the marker and choose single or batch mode
    2. Neutralize the surface presentation for capture
    3. Single mode: render the template once and capture it
    4. Batch mode: for each term, expand, render, settle, capture
    5. Package batch captures into an archive
    6. Restore the surface, whatever happened

    Batch items are processed strictly one at a time because every item
    renders into the same surface.
    """

    def __init__(
        self,
        capture: Optional[CaptureBackend] = None,
        renderer: Optional[StyledRenderer] = None,
        surface: Optional[RenderSurface] = None,
        marker: Optional[str] = None,
        options: Optional[CaptureOptions] = None,
        capture_attempts: Optional[int] = None,
        on_item: Optional[ItemCallback] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            capture: Capture backend (Pillow rasterizer by default)
            renderer: Renderer producing styled runs
            surface: Surface rendered into and captured from
            marker: Placeholder marker (default from settings)
            options: Capture options (default from settings and surface size)
            capture_attempts: Tries per item before it counts as failed
            on_item: Called after each batch item with its success flag

        Raises:
            ValueError: If capture_attempts is less than 1
        """
        settings = get_settings()
        if renderer is None:
            renderer = surface.renderer if surface is not None else StyledRenderer()
        self.renderer = renderer
        self.surface = surface or RenderSurface(renderer=self.renderer)
        # Capture resolves base styles through the surface's renderer
        self.surface.renderer = self.renderer
        self.capture = capture or PillowCapture()
        self.marker = marker if marker is not None else settings.marker
        self.options = options or CaptureOptions(
            scale=settings.capture_scale,
            width=self.surface.width,
            height=self.surface.height,
        )
        if capture_attempts is None:
            capture_attempts = settings.capture_attempts
        if capture_attempts < 1:
            raise ValueError(f"capture_attempts must be at least 1, got {capture_attempts}")
        self.capture_attempts = capture_attempts
        self.on_item = on_item
        self.single_filename = settings.single_filename
        self.archive_filename = settings.archive_filename
        self.state = ExportState.IDLE

    def select_mode(self, template: str, terms: Sequence[str]) -> ExportState:
        """Batch mode needs both a marker in the template and some terms."""
        if terms and contains_marker(template, self.marker):
            return ExportState.BATCH
        return ExportState.SINGLE

    async def export(
        self,
        template: str,
        terms: Iterable[str] = (),
        rules: RuleSource = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ExportResult:
        """Export the template as one image or an archive of images.

        Args:
            template: Text to render, possibly containing the marker
            terms: Normalized word list
            rules: Rule document text, or rules, or None
            cancel: Event checked between batch items

        Returns:
            SingleExport or ArchiveExport

        Raises:
            InvalidMarkerError: If the marker is empty
            CaptureError: If the single-image capture fails
            ArchiveEncodingError: If no batch item could be captured
        """
        self.state = ExportState.PREPARING
        try:
            validate_marker(self.marker)
            term_list = list(terms)
            mode = self.select_mode(template, term_list)
            style_rules = self._prepare_rules(rules)

            self.state = mode
            with self.surface.prepared_for_capture():
                if mode is ExportState.BATCH:
                    result: ExportResult = await self._export_batch(
                        template, term_list, style_rules, cancel
                    )
                else:
                    result = await self._export_single(template, style_rules)
        except Exception:
            self.state = ExportState.FAILED
            raise

        self.state = ExportState.DONE
        return result

    def _prepare_rules(self, rules: RuleSource) -> Optional[list[StyleRule]]:
        """Parse rules once per export; malformed rules mean no styling."""
        try:
            loaded = self.renderer.load_rules(rules)
            return coerce_rules(loaded) if loaded is not None else None
        except InvalidStyleRuleError as e:
            logger.warning("Ignoring invalid style rules: %s", e)
            return None

    async def _render(self, text: str, rules: Optional[list[StyleRule]]) -> None:
        self.surface.render(self.renderer.render(text, rules))
        await self.surface.settle()

    async def _capture(self) -> bytes:
        """Capture the settled surface, retrying on CaptureError."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.capture_attempts),
            retry=retry_if_exception_type(CaptureError),
            reraise=True,
        ):
            with attempt:
                data = self.capture(self.surface, self.options)
                if inspect.isawaitable(data):
                    data = await data
                if not isinstance(data, (bytes, bytearray)):
                    raise CaptureError(
                        f"Capture returned {type(data).__name__}, expected bytes"
                    )
        return bytes(data)

    async def _export_single(
        self, template: str, rules: Optional[list[StyleRule]]
    ) -> SingleExport:
        await self._render(template, rules)
        data = await self._capture()
        return SingleExport(image_bytes=data, filename=self.single_filename)

    async def _export_batch(
        self,
        template: str,
        terms: list[str],
        rules: Optional[list[StyleRule]],
        cancel: Optional[asyncio.Event],
    ) -> ArchiveExport:
        builder = ArchiveBuilder()
        failures: list[ItemFailure] = []
        cancelled = False

        for item in expand_all(template, terms, self.marker):
            if cancel is not None and cancel.is_set():
                cancelled = True
                logger.info(
                    "Export cancelled after %d of %d items",
                    len(builder.entries) + len(failures),
                    len(terms),
                )
                break

            await self._render(item.expanded_text, rules)
            try:
                data = await self._capture()
            except CaptureError as e:
                logger.warning("Skipping %r: %s", item.key, e)
                failures.append(ItemFailure(key=item.key, message=str(e)))
                self._notify(item, False)
                continue

            builder.add(item.key, data)
            self._notify(item, True)

        if failures:
            logger.info(
                "Captured %d of %d items", len(builder.entries), len(terms)
            )

        if cancelled and not builder.entries and not failures:
            return ArchiveExport(
                failures=tuple(failures),
                cancelled=True,
                filename=self.archive_filename,
            )

        try:
            data = builder.build()
        except ArchiveEncodingError as e:
            if failures and not builder.entries:
                raise ArchiveEncodingError(
                    f"All {len(failures)} captures failed"
                ) from e
            raise

        return ArchiveExport(
            entries=tuple(builder.entries),
            data=data,
            failures=tuple(failures),
            cancelled=cancelled,
            filename=self.archive_filename,
        )

    def _notify(self, item: BatchItem, success: bool) -> None:
        if self.on_item is not None:
            self.on_item(item, success)
