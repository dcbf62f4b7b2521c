"""Wire-side data models for RemGlk/GlkOte update documents.

Raw JSON is decoded into these dataclasses exactly once. Downstream code
matches on the Python types and never re-inspects the original dicts:
- UpdateDocument: one generation of interpreter output
- WindowDescriptor: a window in the layout
- ContentBlock: new content for one window (paragraphs, grid lines or draws)
- ContentSpan: PlainText, StyledText or SpecialContent
- InputRequest, SpecialInput: what the interpreter is waiting for

Decoding is best effort. Missing optional fields become None, and values of
the wrong shape are logged and treated as absent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _list_field(data: dict, key: str) -> list | None:
    """Return data[key] if it is a list, None if absent or malformed."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        logger.warning("Field %r: expected list, got %s", key, type(value).__name__)
        return None
    return value


def _decode_list(items: list | None, key: str, decode) -> list | None:
    """Decode each object entry of a wire list, keeping None for absent lists."""
    if items is None:
        return None
    return [decode(item) for item in _dicts(items, key)]


def _dicts(items: list, key: str) -> list[dict]:
    """Keep only dict entries of a wire list, warning about the rest."""
    result: list[dict] = []
    for index, item in enumerate(items):
        if isinstance(item, dict):
            result.append(item)
        else:
            logger.warning(
                "%s[%d]: expected object, got %s", key, index, type(item).__name__
            )
    return result


# ---------------------------------------------------------------------------
# Content spans
# ---------------------------------------------------------------------------


SPECIAL_TYPES = frozenset({"image", "flowbreak", "setcolor", "fill"})


@dataclass(frozen=True)
class PlainText:
    """A bare string span (rendered in the normal style)."""

    text: str


@dataclass(frozen=True)
class StyledText:
    """A text span with a style name and optional hyperlink value."""

    text: str
    style: str = "normal"
    hyperlink: int | None = None


_SPECIAL_KEYS = (
    "image",
    "url",
    "alignment",
    "width",
    "height",
    "alttext",
    "color",
    "x",
    "y",
    "hyperlink",
)


@dataclass(frozen=True)
class SpecialContent:
    """A special span: image, flowbreak, setcolor or fill.

    Specials of any other type are kept too, with their unmodeled keys in
    extra, so that they can be passed through untouched.
    """

    type: str
    image: int | None = None
    url: str | None = None
    alignment: str | int | None = None
    width: int | None = None
    height: int | None = None
    alttext: str | None = None
    color: str | int | None = None
    x: int | None = None
    y: int | None = None
    hyperlink: int | None = None
    extra: dict = field(default_factory=dict)

    @property
    def is_known(self) -> bool:
        return self.type in SPECIAL_TYPES

    def to_dict(self) -> dict:
        """Serialize back to the wire shape."""
        result: dict = {"type": self.type}
        for key in _SPECIAL_KEYS:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        result.update(self.extra)
        return result

    @classmethod
    def from_dict(cls, data: dict) -> SpecialContent:
        """Deserialize from the object under a span's "special" key."""
        known = {"type", *_SPECIAL_KEYS}
        return cls(
            type=data["type"],
            image=data.get("image"),
            url=data.get("url"),
            alignment=data.get("alignment"),
            width=data.get("width"),
            height=data.get("height"),
            alttext=data.get("alttext"),
            color=data.get("color"),
            x=data.get("x"),
            y=data.get("y"),
            hyperlink=data.get("hyperlink"),
            extra={k: v for k, v in data.items() if k not in known},
        )


ContentSpan = Union[PlainText, StyledText, SpecialContent]


def decode_span(raw: Any) -> ContentSpan | None:
    """Decide which span variant a wire element is.

    Returns None (after logging a warning) for elements that are not a
    string or an object, and for "special" values without a string type.
    A special of a type outside SPECIAL_TYPES is still decoded, so it can
    be passed through. Text that is not a string decodes as "".
    """
    if isinstance(raw, str):
        return PlainText(text=raw)

    if not isinstance(raw, dict):
        logger.warning("Content span: expected string or object, got %s", type(raw).__name__)
        return None

    special = raw.get("special")
    if special is not None:
        if not isinstance(special, dict) or not isinstance(special.get("type"), str):
            logger.warning("Content span: malformed special %r", special)
            return None
        if special["type"] not in SPECIAL_TYPES:
            logger.warning("Content span: unknown special type %r, passing through", special["type"])
        return SpecialContent.from_dict(special)

    text = raw.get("text", "")
    if not isinstance(text, str):
        logger.warning("Content span: expected string text, got %s", type(text).__name__)
        text = ""
    style = raw.get("style")
    return StyledText(
        text=text,
        style=style if isinstance(style, str) else "normal",
        hyperlink=raw.get("hyperlink"),
    )


def decode_spans(raw: Any) -> list[ContentSpan]:
    """Decode a wire content list, skipping elements that cannot be decoded."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Content: expected list, got %s", type(raw).__name__)
        return []
    spans: list[ContentSpan] = []
    for item in raw:
        span = decode_span(item)
        if span is not None:
            spans.append(span)
    return spans


# ---------------------------------------------------------------------------
# Content block parts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Paragraph:
    """A buffer window paragraph."""

    append: bool = False
    flowbreak: bool = False
    content: list[ContentSpan] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Paragraph:
        """Deserialize from dictionary."""
        return cls(
            append=bool(data.get("append", False)),
            flowbreak=bool(data.get("flowbreak", False)),
            content=decode_spans(data.get("content")),
        )


@dataclass(frozen=True)
class GridLine:
    """A grid window line, addressed by its (sparse) line number."""

    line: int
    content: list[ContentSpan] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> GridLine:
        """Deserialize from dictionary. A missing or non-integer line is line 0."""
        line = data.get("line", 0)
        if isinstance(line, bool) or not isinstance(line, int):
            logger.warning("Grid line: expected integer line number, got %r; using 0", line)
            line = 0
        return cls(
            line=line,
            content=decode_spans(data.get("content")),
        )


@dataclass(frozen=True)
class DrawOperation:
    """A graphics window draw operation."""

    special: str
    color: str | int | None = None
    x: int | None = None
    y: int | None = None
    width: int | None = None
    height: int | None = None
    image: int | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> DrawOperation:
        """Deserialize from dictionary."""
        return cls(
            special=data.get("special", ""),
            color=data.get("color"),
            x=data.get("x"),
            y=data.get("y"),
            width=data.get("width"),
            height=data.get("height"),
            image=data.get("image"),
            url=data.get("url"),
        )


class ContentKind(Enum):
    """Which representation a content block carries."""

    BUFFER = "buffer"
    GRID = "grid"
    GRAPHICS = "graphics"
    NONE = "none"


@dataclass(frozen=True)
class ContentBlock:
    """Content update for a single window.

    Exactly one of paragraphs, lines or draw is expected to be set. The
    block never says which kind of window it targets, so kind is inferred
    from which field is present.
    """

    id: int
    clear: bool = False
    paragraphs: list[Paragraph] | None = None
    lines: list[GridLine] | None = None
    draw: list[DrawOperation] | None = None

    @property
    def kind(self) -> ContentKind:
        if self.lines is not None:
            return ContentKind.GRID
        if self.paragraphs is not None:
            return ContentKind.BUFFER
        if self.draw is not None:
            return ContentKind.GRAPHICS
        return ContentKind.NONE

    @classmethod
    def from_dict(cls, data: dict) -> ContentBlock:
        """Deserialize from a wire content entry."""
        text = _list_field(data, "text")
        lines = _list_field(data, "lines")
        draw = _list_field(data, "draw")

        candidates = (("lines", lines), ("text", text), ("draw", draw))
        present = [key for key, value in candidates if value is not None]
        if len(present) > 1:
            logger.warning(
                "Content block %r has %s; using %r",
                data.get("id"),
                " and ".join(present),
                present[0],
            )

        return cls(
            id=data.get("id"),
            clear=bool(data.get("clear", False)),
            paragraphs=_decode_list(text, "text", Paragraph.from_dict),
            lines=_decode_list(lines, "lines", GridLine.from_dict),
            draw=_decode_list(draw, "draw", DrawOperation.from_dict),
        )


# ---------------------------------------------------------------------------
# Windows and input
# ---------------------------------------------------------------------------

_WINDOW_OPTIONAL_KEYS = (
    "left",
    "top",
    "gridwidth",
    "gridheight",
    "graphwidth",
    "graphheight",
)


@dataclass(frozen=True)
class WindowDescriptor:
    """A window in the current layout. Geometry is passed through as given."""

    id: int
    type: str
    rock: int = 0
    width: int | float = 0
    height: int | float = 0
    left: int | float | None = None
    top: int | float | None = None
    gridwidth: int | None = None
    gridheight: int | None = None
    graphwidth: int | None = None
    graphheight: int | None = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize back to the wire shape."""
        result: dict = {
            "id": self.id,
            "type": self.type,
            "rock": self.rock,
            "width": self.width,
            "height": self.height,
        }
        for key in _WINDOW_OPTIONAL_KEYS:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        result.update(self.extra)
        return result

    @classmethod
    def from_dict(cls, data: dict) -> WindowDescriptor:
        """Deserialize from a wire window entry."""
        known = {"id", "type", "rock", "width", "height", *_WINDOW_OPTIONAL_KEYS}
        return cls(
            id=data.get("id"),
            type=data.get("type", ""),
            rock=data.get("rock", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
            left=data.get("left"),
            top=data.get("top"),
            gridwidth=data.get("gridwidth"),
            gridheight=data.get("gridheight"),
            graphwidth=data.get("graphwidth"),
            graphheight=data.get("graphheight"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class InputRequest:
    """A window waiting for line or character input."""

    id: int
    type: str
    gen: int | None = None
    maxlen: int | None = None
    initial: str | None = None
    mouse: bool | None = None
    hyperlink: bool | None = None
    xpos: int | None = None
    ypos: int | None = None
    terminators: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> InputRequest:
        """Deserialize from a wire input entry."""
        terminators = data.get("terminators")
        return cls(
            id=data.get("id"),
            type=data.get("type", ""),
            gen=data.get("gen"),
            maxlen=data.get("maxlen"),
            initial=data.get("initial"),
            mouse=data.get("mouse"),
            hyperlink=data.get("hyperlink"),
            xpos=data.get("xpos"),
            ypos=data.get("ypos"),
            terminators=list(terminators) if terminators is not None else None,
        )


@dataclass(frozen=True)
class SpecialInput:
    """A file dialog request."""

    type: str
    filemode: str
    filetype: str
    gameid: str | None = None

    def to_dict(self) -> dict:
        """Serialize to the wire shape."""
        result = {"type": self.type, "filemode": self.filemode, "filetype": self.filetype}
        if self.gameid is not None:
            result["gameid"] = self.gameid
        return result

    @classmethod
    def from_dict(cls, data: dict) -> SpecialInput:
        """Deserialize from dictionary."""
        return cls(
            type=data.get("type", "fileref_prompt"),
            filemode=data.get("filemode", ""),
            filetype=data.get("filetype", ""),
            gameid=data.get("gameid"),
        )


# ---------------------------------------------------------------------------
# UpdateDocument
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpdateDocument:
    """One generation of interpreter output."""

    type: str = "update"
    generation: int | None = None
    windows: list[WindowDescriptor] | None = None
    content: list[ContentBlock] | None = None
    input: list[InputRequest] | None = None
    message: str | None = None
    timer: int | None = None
    has_timer: bool = False  # distinguishes "timer": null (cancel) from absent
    special_input: SpecialInput | None = None
    disable: bool | None = None
    exit: bool | None = None
    debug_output: list[str] | None = None

    @property
    def is_error(self) -> bool:
        return self.type == "error"

    @classmethod
    def from_dict(cls, data: dict) -> UpdateDocument:
        """Deserialize a raw update document.

        Error documents only carry their message; nothing else is decoded.
        """
        doc_type = data.get("type", "update")
        if doc_type == "error":
            return cls(type="error", generation=data.get("gen"), message=data.get("message"))

        windows = _list_field(data, "windows")
        content = _list_field(data, "content")
        input_requests = _list_field(data, "input")
        special = data.get("specialinput")
        debug_output = _list_field(data, "debugoutput")

        return cls(
            type="update",
            generation=data.get("gen"),
            windows=_decode_list(windows, "windows", WindowDescriptor.from_dict),
            content=_decode_list(content, "content", ContentBlock.from_dict),
            input=_decode_list(input_requests, "input", InputRequest.from_dict),
            message=data.get("message"),
            timer=data.get("timer"),
            has_timer="timer" in data,
            special_input=SpecialInput.from_dict(special) if isinstance(special, dict) else None,
            disable=data.get("disable"),
            exit=data.get("exit"),
            debug_output=[str(line) for line in debug_output] if debug_output is not None else None,
        )
