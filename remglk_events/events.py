"""UI event data model.

This module defines what the parser hands to rendering front ends:
- SpanEvent: TextSpanEvent, ImageSpanEvent, FlowBreakSpanEvent,
  SetColorSpanEvent, FillSpanEvent, UnknownSpecialSpanEvent
- UIEvent: WindowEvent, ContentEvent, InputRequestEvent, ErrorEvent
- ParagraphSpans / GridLineSpans: grouped views over a content event's spans
- ClientDirectives: top-level fields the surrounding client acts on

Events are immutable, with tuples for their sequences, and serialize to
dictionaries with the field names renderers use (windowId, imageNumber, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .models import ContentKind, SpecialInput, WindowDescriptor


class SpanType(Enum):
    """Types of normalized span events."""

    TEXT = "text"
    IMAGE = "image"
    FLOWBREAK = "flowbreak"
    SETCOLOR = "setcolor"
    FILL = "fill"
    SPECIAL = "special"


class EventType(Enum):
    """Types of UI events."""

    WINDOW = "window-event"
    CONTENT = "content-event"
    INPUT_REQUEST = "input-request-event"
    ERROR = "error-event"


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


# --- Span events ---


@dataclass(frozen=True)
class TextSpanEvent:
    """A run of text with its style and optional hyperlink."""

    text: str
    style: str = "normal"
    hyperlink: int | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return _drop_none({
            "type": "text",
            "text": self.text,
            "style": self.style,
            "hyperlink": self.hyperlink,
        })

    @classmethod
    def from_dict(cls, data: dict) -> TextSpanEvent:
        """Deserialize from dictionary."""
        return cls(
            text=data["text"],
            style=data.get("style", "normal"),
            hyperlink=data.get("hyperlink"),
        )


@dataclass(frozen=True)
class ImageSpanEvent:
    """An image reference. image_url is None until the image is available."""

    image_number: int
    image_url: str | None = None
    width: int | None = None
    height: int | None = None
    alignment: str | None = None
    alt_text: str | None = None
    hyperlink: int | None = None
    x: int | None = None  # graphics windows only
    y: int | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return _drop_none({
            "type": "image",
            "imageNumber": self.image_number,
            "imageUrl": self.image_url,
            "width": self.width,
            "height": self.height,
            "alignment": self.alignment,
            "altText": self.alt_text,
            "hyperlink": self.hyperlink,
            "x": self.x,
            "y": self.y,
        })

    @classmethod
    def from_dict(cls, data: dict) -> ImageSpanEvent:
        """Deserialize from dictionary."""
        return cls(
            image_number=data["imageNumber"],
            image_url=data.get("imageUrl"),
            width=data.get("width"),
            height=data.get("height"),
            alignment=data.get("alignment"),
            alt_text=data.get("altText"),
            hyperlink=data.get("hyperlink"),
            x=data.get("x"),
            y=data.get("y"),
        )


@dataclass(frozen=True)
class FlowBreakSpanEvent:
    """Marker: following content starts below any margin images."""

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "flowbreak"}

    @classmethod
    def from_dict(cls, data: dict) -> FlowBreakSpanEvent:
        """Deserialize from dictionary."""
        return cls()


@dataclass(frozen=True)
class SetColorSpanEvent:
    """Opaque drawing directive: set the graphics window background color."""

    color: str | int | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return _drop_none({"type": "setcolor", "color": self.color})

    @classmethod
    def from_dict(cls, data: dict) -> SetColorSpanEvent:
        """Deserialize from dictionary."""
        return cls(color=data.get("color"))


@dataclass(frozen=True)
class FillSpanEvent:
    """Opaque drawing directive: fill a rectangle (whole window if no rect)."""

    color: str | int | None = None
    x: int | None = None
    y: int | None = None
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return _drop_none({
            "type": "fill",
            "color": self.color,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        })

    @classmethod
    def from_dict(cls, data: dict) -> FillSpanEvent:
        """Deserialize from dictionary."""
        return cls(
            color=data.get("color"),
            x=data.get("x"),
            y=data.get("y"),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass(frozen=True)
class UnknownSpecialSpanEvent:
    """A special span of a type this library does not model.

    The wire fields (everything but "type") are passed through in data.
    Renderers that do not recognize special_type should skip it.
    """

    special_type: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "special", "specialType": self.special_type, "data": dict(self.data)}

    @classmethod
    def from_dict(cls, data: dict) -> UnknownSpecialSpanEvent:
        """Deserialize from dictionary."""
        return cls(special_type=data["specialType"], data=dict(data.get("data", {})))


# Union type for all span events
SpanEvent = Union[
    TextSpanEvent,
    ImageSpanEvent,
    FlowBreakSpanEvent,
    SetColorSpanEvent,
    FillSpanEvent,
    UnknownSpecialSpanEvent,
]


def span_from_dict(data: dict) -> SpanEvent:
    """Deserialize a SpanEvent using its "type" discriminator.

    Raises:
        KeyError: If "type" field is missing or unknown.
    """
    type_map = {
        "text": TextSpanEvent.from_dict,
        "image": ImageSpanEvent.from_dict,
        "flowbreak": FlowBreakSpanEvent.from_dict,
        "setcolor": SetColorSpanEvent.from_dict,
        "fill": FillSpanEvent.from_dict,
        "special": UnknownSpecialSpanEvent.from_dict,
    }
    return type_map[data["type"]](data)


# --- Grouped views ---


@dataclass(frozen=True)
class ParagraphSpans:
    """The span events produced by one buffer paragraph."""

    append: bool
    flowbreak: bool
    spans: tuple[SpanEvent, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "append": self.append,
            "flowbreak": self.flowbreak,
            "spans": [s.to_dict() for s in self.spans],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ParagraphSpans:
        """Deserialize from dictionary."""
        return cls(
            append=data.get("append", False),
            flowbreak=data.get("flowbreak", False),
            spans=tuple(span_from_dict(s) for s in data.get("spans", [])),
        )


@dataclass(frozen=True)
class GridLineSpans:
    """The span events produced by one grid line, with its line number."""

    line_number: int
    spans: tuple[SpanEvent, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "lineNumber": self.line_number,
            "spans": [s.to_dict() for s in self.spans],
        }

    @classmethod
    def from_dict(cls, data: dict) -> GridLineSpans:
        """Deserialize from dictionary."""
        return cls(
            line_number=data["lineNumber"],
            spans=tuple(span_from_dict(s) for s in data.get("spans", [])),
        )


# --- UI events ---


@dataclass(frozen=True)
class WindowEvent:
    """The full window layout for this generation."""

    windows: tuple[WindowDescriptor, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "type": EventType.WINDOW.value,
            "windows": [w.to_dict() for w in self.windows],
        }

    @classmethod
    def from_dict(cls, data: dict) -> WindowEvent:
        """Deserialize from dictionary."""
        return cls(windows=tuple(WindowDescriptor.from_dict(w) for w in data.get("windows", [])))


@dataclass(frozen=True)
class ContentEvent:
    """New content for one window.

    spans is the flat, ordered list of everything the block produced.
    paragraphs (buffer blocks) and lines (grid blocks) group the same span
    events by their source paragraph or grid line.
    """

    window_id: int
    clear: bool = False
    spans: tuple[SpanEvent, ...] = ()
    kind: ContentKind = ContentKind.NONE
    paragraphs: tuple[ParagraphSpans, ...] | None = None
    lines: tuple[GridLineSpans, ...] | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        result: dict = {
            "type": EventType.CONTENT.value,
            "windowId": self.window_id,
            "clear": self.clear,
            "kind": self.kind.value,
            "spans": [s.to_dict() for s in self.spans],
        }
        if self.paragraphs is not None:
            result["paragraphs"] = [p.to_dict() for p in self.paragraphs]
        if self.lines is not None:
            result["lines"] = [line.to_dict() for line in self.lines]
        return result

    @classmethod
    def from_dict(cls, data: dict) -> ContentEvent:
        """Deserialize from dictionary."""
        paragraphs = data.get("paragraphs")
        lines = data.get("lines")
        return cls(
            window_id=data["windowId"],
            clear=data.get("clear", False),
            spans=tuple(span_from_dict(s) for s in data.get("spans", [])),
            kind=ContentKind(data.get("kind", "none")),
            paragraphs=tuple(ParagraphSpans.from_dict(p) for p in paragraphs) if paragraphs is not None else None,
            lines=tuple(GridLineSpans.from_dict(line) for line in lines) if lines is not None else None,
        )


@dataclass(frozen=True)
class InputRequestEvent:
    """A window is waiting for input.

    Optional fields stay None when the interpreter did not send them, so a
    renderer can tell "not specified" from "explicitly disabled".
    """

    window_id: int
    input_type: str
    generation: int | None = None
    max_length: int | None = None
    initial: str | None = None
    xpos: int | None = None
    ypos: int | None = None
    terminators: tuple[str, ...] | None = None
    mouse: bool | None = None
    hyperlink: bool | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary, omitting unspecified fields."""
        return _drop_none({
            "type": EventType.INPUT_REQUEST.value,
            "windowId": self.window_id,
            "inputType": self.input_type,
            "gen": self.generation,
            "maxLength": self.max_length,
            "initial": self.initial,
            "xpos": self.xpos,
            "ypos": self.ypos,
            "terminators": list(self.terminators) if self.terminators is not None else None,
            "mouse": self.mouse,
            "hyperlink": self.hyperlink,
        })

    @classmethod
    def from_dict(cls, data: dict) -> InputRequestEvent:
        """Deserialize from dictionary."""
        terminators = data.get("terminators")
        return cls(
            window_id=data["windowId"],
            input_type=data["inputType"],
            generation=data.get("gen"),
            max_length=data.get("maxLength"),
            initial=data.get("initial"),
            xpos=data.get("xpos"),
            ypos=data.get("ypos"),
            terminators=tuple(terminators) if terminators is not None else None,
            mouse=data.get("mouse"),
            hyperlink=data.get("hyperlink"),
        )


@dataclass(frozen=True)
class ErrorEvent:
    """The interpreter reported an error."""

    message: str = ""

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": EventType.ERROR.value, "message": self.message}

    @classmethod
    def from_dict(cls, data: dict) -> ErrorEvent:
        """Deserialize from dictionary."""
        return cls(message=data.get("message", ""))


# Union type for all UI events
UIEvent = Union[WindowEvent, ContentEvent, InputRequestEvent, ErrorEvent]


def event_from_dict(data: dict) -> UIEvent:
    """Deserialize a UIEvent using its "type" discriminator.

    Raises:
        KeyError: If "type" field is missing or unknown.
    """
    type_map = {
        EventType.WINDOW.value: WindowEvent.from_dict,
        EventType.CONTENT.value: ContentEvent.from_dict,
        EventType.INPUT_REQUEST.value: InputRequestEvent.from_dict,
        EventType.ERROR.value: ErrorEvent.from_dict,
    }
    return type_map[data["type"]](data)


# --- ClientDirectives ---


@dataclass(frozen=True)
class ClientDirectives:
    """Top-level update fields for the surrounding client.

    timer_set is True when the document carried a "timer" key; with timer
    None that means "cancel the timer".
    """

    generation: int | None = None
    timer: int | None = None
    timer_set: bool = False
    special_input: SpecialInput | None = None
    disable: bool = False
    exit: bool = False
    debug_output: tuple[str, ...] = ()

    @property
    def cancels_timer(self) -> bool:
        return self.timer_set and self.timer is None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        result: dict = {
            "gen": self.generation,
            "disable": self.disable,
            "exit": self.exit,
            "debugOutput": list(self.debug_output),
        }
        if self.timer_set:
            result["timer"] = self.timer
        if self.special_input is not None:
            result["specialInput"] = self.special_input.to_dict()
        return result
