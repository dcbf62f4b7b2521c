"""Update processor: converts RemGlk update documents to UI events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .events import (
    ClientDirectives,
    ContentEvent,
    ErrorEvent,
    FillSpanEvent,
    FlowBreakSpanEvent,
    GridLineSpans,
    ImageSpanEvent,
    InputRequestEvent,
    ParagraphSpans,
    SetColorSpanEvent,
    SpanEvent,
    TextSpanEvent,
    UIEvent,
    UnknownSpecialSpanEvent,
    WindowEvent,
)
from .images import normalize_alignment, resolve_image_url
from .models import (
    ContentBlock,
    ContentKind,
    ContentSpan,
    DrawOperation,
    InputRequest,
    PlainText,
    SpecialContent,
    StyledText,
    UpdateDocument,
)
from .parser import DocumentType, classify_document

if TYPE_CHECKING:
    from .protocol import ImageResolver

logger = logging.getLogger(__name__)


def parse_update(
    document: dict | UpdateDocument,
    image_resolver: ImageResolver | None = None,
) -> list[UIEvent]:
    """Convert one update document into an ordered list of UI events.

    Args:
        document: A decoded RemGlk document (raw dict or UpdateDocument).
        image_resolver: Lookup from image id to URL, consulted for every
            image span. Optional; without it images carry no URL.

    Returns:
        [ErrorEvent] for error documents. Otherwise a WindowEvent if the
        document has windows, then one ContentEvent per content block and
        one InputRequestEvent per input request, in document order.
    """
    if isinstance(document, dict):
        doc_type = classify_document(document)
        if doc_type is DocumentType.ERROR:
            return [_error_event(document.get("message"))]
        document = UpdateDocument.from_dict(document)
    elif not isinstance(document, UpdateDocument):
        logger.warning("Expected update document, got %s", type(document).__name__)
        return []

    if document.is_error:
        return [_error_event(document.message)]

    events: list[UIEvent] = []

    if document.windows is not None:
        events.append(WindowEvent(windows=tuple(document.windows)))

    for block in document.content or []:
        events.append(_process_content_block(block, image_resolver))

    for request in document.input or []:
        events.append(_process_input_request(request))

    logger.debug(
        "update_parsed",
        extra={
            "generation": document.generation,
            "event_count": len(events),
            "content_blocks": len(document.content or []),
            "input_requests": len(document.input or []),
        },
    )
    return events


def normalize_content(
    block: dict | ContentBlock,
    image_resolver: ImageResolver | None = None,
) -> list[SpanEvent]:
    """Flatten a content block into its ordered span events.

    Buffer paragraphs, grid lines and graphics draw operations all collapse
    into the same span event types. No per-line or per-paragraph markers
    are inserted; see ContentEvent.paragraphs / ContentEvent.lines for the
    grouped form.
    """
    if isinstance(block, dict):
        block = ContentBlock.from_dict(block)
    return list(_process_content_block(block, image_resolver).spans)


def extract_directives(document: dict | UpdateDocument) -> ClientDirectives:
    """Collect the top-level fields the client acts on (timer, exit, ...)."""
    if isinstance(document, dict):
        document = UpdateDocument.from_dict(document)
    return ClientDirectives(
        generation=document.generation,
        timer=document.timer,
        timer_set=document.has_timer,
        special_input=document.special_input,
        disable=bool(document.disable),
        exit=bool(document.exit),
        debug_output=tuple(document.debug_output or ()),
    )


def _error_event(message: str | None) -> ErrorEvent:
    return ErrorEvent(message=message if message is not None else "")


# ---------------------------------------------------------------------------
# Content blocks
# ---------------------------------------------------------------------------


def _process_content_block(
    block: ContentBlock, image_resolver: ImageResolver | None
) -> ContentEvent:
    """Build the ContentEvent for one block, branching on its representation."""
    kind = block.kind

    if kind is ContentKind.BUFFER:
        paragraphs = []
        for paragraph in block.paragraphs:
            spans: list[SpanEvent] = []
            # The paragraph-level flowbreak comes before its content
            if paragraph.flowbreak:
                spans.append(FlowBreakSpanEvent())
            spans.extend(_span_event(span, image_resolver) for span in paragraph.content)
            paragraphs.append(
                ParagraphSpans(
                    append=paragraph.append, flowbreak=paragraph.flowbreak, spans=tuple(spans)
                )
            )
        return ContentEvent(
            window_id=block.id,
            clear=block.clear,
            spans=tuple(span for p in paragraphs for span in p.spans),
            kind=kind,
            paragraphs=tuple(paragraphs),
        )

    if kind is ContentKind.GRID:
        # Document order, not line order: a repeated line number is an overwrite
        lines = tuple(
            GridLineSpans(
                line_number=line.line,
                spans=tuple(_span_event(span, image_resolver) for span in line.content),
            )
            for line in block.lines
        )
        return ContentEvent(
            window_id=block.id,
            clear=block.clear,
            spans=tuple(span for line in lines for span in line.spans),
            kind=kind,
            lines=lines,
        )

    if kind is ContentKind.GRAPHICS:
        spans = []
        for op in block.draw:
            event = _draw_event(op, image_resolver)
            if event is not None:
                spans.append(event)
        return ContentEvent(window_id=block.id, clear=block.clear, spans=tuple(spans), kind=kind)

    logger.warning("Content block for window %r has no text, lines or draw", block.id)
    return ContentEvent(window_id=block.id, clear=block.clear, kind=kind)


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------


def _span_event(span: ContentSpan, image_resolver: ImageResolver | None) -> SpanEvent:
    """Map one decoded content span to exactly one span event."""
    if isinstance(span, PlainText):
        return TextSpanEvent(text=span.text)
    if isinstance(span, StyledText):
        return TextSpanEvent(text=span.text, style=span.style, hyperlink=span.hyperlink)
    return _special_event(span, image_resolver)


def _special_event(span: SpecialContent, image_resolver: ImageResolver | None) -> SpanEvent:
    if span.type == "image":
        return ImageSpanEvent(
            image_number=span.image,
            image_url=resolve_image_url(image_resolver, span.image) or span.url,
            width=span.width,
            height=span.height,
            alignment=normalize_alignment(span.alignment),
            alt_text=span.alttext,
            hyperlink=span.hyperlink,
        )
    if span.type == "flowbreak":
        return FlowBreakSpanEvent()
    if span.type == "setcolor":
        return SetColorSpanEvent(color=span.color)
    if span.type == "fill":
        return FillSpanEvent(
            color=span.color,
            x=span.x,
            y=span.y,
            width=span.width,
            height=span.height,
        )
    data = span.to_dict()
    del data["type"]
    return UnknownSpecialSpanEvent(special_type=span.type, data=data)


def _draw_event(op: DrawOperation, image_resolver: ImageResolver | None) -> SpanEvent | None:
    """Map a graphics window draw operation to a span event."""
    if op.special == "setcolor":
        return SetColorSpanEvent(color=op.color)
    if op.special == "fill":
        return FillSpanEvent(color=op.color, x=op.x, y=op.y, width=op.width, height=op.height)
    if op.special == "image":
        return ImageSpanEvent(
            image_number=op.image,
            image_url=resolve_image_url(image_resolver, op.image) or op.url,
            width=op.width,
            height=op.height,
            x=op.x,
            y=op.y,
        )
    logger.warning("Unknown draw operation %r", op.special)
    return None


# ---------------------------------------------------------------------------
# Input requests
# ---------------------------------------------------------------------------


def _process_input_request(request: InputRequest) -> InputRequestEvent:
    """Copy an input request into an event, keeping absent fields absent."""
    return InputRequestEvent(
        window_id=request.id,
        input_type=request.type,
        generation=request.gen,
        max_length=request.maxlen,
        initial=request.initial,
        xpos=request.xpos,
        ypos=request.ypos,
        terminators=tuple(request.terminators) if request.terminators is not None else None,
        mouse=request.mouse,
        hyperlink=request.hyperlink,
    )
