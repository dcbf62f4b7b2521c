"""Event consumer: keeps per-window state across generations."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .events import (
    ContentEvent,
    ErrorEvent,
    ImageSpanEvent,
    InputRequestEvent,
    SpanEvent,
    TextSpanEvent,
    UIEvent,
    WindowEvent,
)
from .models import ContentKind, WindowDescriptor

if TYPE_CHECKING:
    from .protocol import ImageResolver


class WindowStateConsumer:
    """Applies UI events to a plain-text model of every window.

    Buffer windows are a list of lines (one per paragraph, with append
    continuing the last line). Grid windows are rows keyed by line number,
    so a later update of the same line overwrites it. Graphics windows
    keep their pending drawing directives.
    """

    def __init__(self) -> None:
        self.windows: dict[int, WindowDescriptor] = {}
        self.buffers: dict[int, list[list[SpanEvent]]] = {}
        self.grids: dict[int, dict[int, list[SpanEvent]]] = {}
        self.graphics: dict[int, list[SpanEvent]] = {}
        self.pending_input: dict[int, InputRequestEvent] = {}
        self.last_error: str | None = None

    def handle(self, event: UIEvent) -> None:
        """Process a single event."""
        if isinstance(event, WindowEvent):
            self._apply_windows(event)
        elif isinstance(event, ContentEvent):
            self._apply_content(event)
        elif isinstance(event, InputRequestEvent):
            self.pending_input[event.window_id] = event
        elif isinstance(event, ErrorEvent):
            self.last_error = event.message

    def handle_update(self, events: Iterable[UIEvent]) -> None:
        """Apply all events of one generation.

        When the generation carries input requests they replace the pending
        set; a generation without any leaves it unchanged.
        """
        events = list(events)
        if any(isinstance(e, InputRequestEvent) for e in events):
            self.pending_input.clear()
        for event in events:
            self.handle(event)

    def _apply_windows(self, event: WindowEvent) -> None:
        self.windows = {w.id: w for w in event.windows}
        for store in (self.buffers, self.grids, self.graphics, self.pending_input):
            for window_id in [wid for wid in store if wid not in self.windows]:
                del store[window_id]

    def _apply_content(self, event: ContentEvent) -> None:
        window_id = event.window_id

        if event.kind is ContentKind.GRID:
            rows = self.grids.setdefault(window_id, {})
            if event.clear:
                rows.clear()
            for line in event.lines or []:
                rows[line.line_number] = list(line.spans)

        elif event.kind is ContentKind.GRAPHICS:
            ops = self.graphics.setdefault(window_id, [])
            if event.clear:
                ops.clear()
            ops.extend(event.spans)

        elif event.kind is ContentKind.NONE:
            if event.clear:
                for store in (self.buffers, self.grids, self.graphics):
                    if window_id in store:
                        store[window_id].clear()

        else:
            lines = self.buffers.setdefault(window_id, [])
            if event.clear:
                lines.clear()
            for paragraph in event.paragraphs or []:
                if paragraph.append and lines:
                    lines[-1].extend(paragraph.spans)
                else:
                    lines.append(list(paragraph.spans))

    def render_window(self, window_id: int) -> str:
        """Render a window's current content as plain text."""
        if window_id in self.grids:
            rows = self.grids[window_id]
            if not rows:
                return ""
            height = max(rows) + 1
            window = self.windows.get(window_id)
            if window is not None and window.gridheight is not None:
                height = max(height, window.gridheight)
            text = "\n".join(_spans_text(rows.get(n, [])).rstrip() for n in range(height))
            return text.rstrip("\n")
        if window_id in self.graphics:
            return f"[graphics: {len(self.graphics[window_id])} operations]"
        return "\n".join(_spans_text(line) for line in self.buffers.get(window_id, []))

    def to_text(self) -> str:
        """Render every window with content, in layout order.

        Windows are separated by a blank line. A pending error is appended.
        """
        order = [wid for wid, w in self.windows.items() if w.type != "pair"]
        for store in (self.grids, self.buffers, self.graphics):
            order.extend(wid for wid in store if wid not in order)

        parts = [text for text in (self.render_window(wid) for wid in order) if text]
        if self.last_error is not None:
            parts.append(f"[error] {self.last_error}")
        return "\n\n".join(parts)


def _spans_text(spans: Iterable[SpanEvent]) -> str:
    parts: list[str] = []
    for span in spans:
        if isinstance(span, TextSpanEvent):
            parts.append(span.text)
        elif isinstance(span, ImageSpanEvent):
            parts.append(f"[{span.alt_text}]" if span.alt_text else f"[image {span.image_number}]")
    return "".join(parts)


def replay_transcript(
    documents: Iterable[dict],
    image_resolver: ImageResolver | None = None,
) -> str:
    """Convenience function for replaying a full RemGlk transcript.

    Args:
        documents: Decoded update documents in generation order.
        image_resolver: Optional image id to URL lookup.

    Returns:
        Plain text of every window after the last generation.
    """
    from .processor import parse_update

    consumer = WindowStateConsumer()
    for document in documents:
        consumer.handle_update(parse_update(document, image_resolver))
    return consumer.to_text()
