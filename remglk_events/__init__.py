"""RemGlk Events — turn RemGlk/GlkOte update documents into UI events."""

from remglk_events.consumer import WindowStateConsumer, replay_transcript
from remglk_events.events import (
    ClientDirectives,
    ContentEvent,
    ErrorEvent,
    EventType,
    FillSpanEvent,
    FlowBreakSpanEvent,
    GridLineSpans,
    ImageSpanEvent,
    InputRequestEvent,
    ParagraphSpans,
    SetColorSpanEvent,
    SpanEvent,
    SpanType,
    TextSpanEvent,
    UIEvent,
    UnknownSpecialSpanEvent,
    WindowEvent,
    event_from_dict,
)
from remglk_events.images import StaticImageResolver
from remglk_events.models import ContentKind, UpdateDocument, WindowDescriptor
from remglk_events.parser import DocumentType, classify_document, iter_documents, read_updates
from remglk_events.processor import extract_directives, normalize_content, parse_update

__version__ = "0.1.0"

__all__ = [
    # Events module
    "EventType",
    "SpanType",
    "SpanEvent",
    "TextSpanEvent",
    "ImageSpanEvent",
    "FlowBreakSpanEvent",
    "SetColorSpanEvent",
    "FillSpanEvent",
    "UnknownSpecialSpanEvent",
    "ParagraphSpans",
    "GridLineSpans",
    "UIEvent",
    "WindowEvent",
    "ContentEvent",
    "InputRequestEvent",
    "ErrorEvent",
    "ClientDirectives",
    "event_from_dict",
    # Models module
    "UpdateDocument",
    "WindowDescriptor",
    "ContentKind",
    # Processor module
    "parse_update",
    "normalize_content",
    "extract_directives",
    # Parser module
    "DocumentType",
    "classify_document",
    "iter_documents",
    "read_updates",
    # Images module
    "StaticImageResolver",
    # Consumer module
    "WindowStateConsumer",
    "replay_transcript",
]
