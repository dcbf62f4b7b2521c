"""Client-to-interpreter input events.

These are the input-direction counterparts of InputRequestEvent. Each
dataclass serializes to the exact wire shape RemGlk reads on stdin. The
builder functions answer a specific InputRequestEvent and refuse to build
an event the request does not allow.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .events import InputRequestEvent


class InputRequestError(ValueError):
    """An input event does not match the window's pending request."""


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@dataclass
class Metrics:
    """Display metrics used by RemGlk for window layout."""

    width: int
    height: int
    charwidth: float | None = None
    charheight: float | None = None
    outspacingx: int | None = None
    outspacingy: int | None = None
    inspacingx: int | None = None
    inspacingy: int | None = None
    gridcharwidth: float | None = None
    gridcharheight: float | None = None
    gridmarginx: int | None = None
    gridmarginy: int | None = None
    buffercharwidth: float | None = None
    buffercharheight: float | None = None
    buffermarginx: int | None = None
    buffermarginy: int | None = None
    graphicsmarginx: int | None = None
    graphicsmarginy: int | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary, omitting unset metrics."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: dict) -> Metrics:
        """Deserialize from dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


# ---------------------------------------------------------------------------
# Input events
# ---------------------------------------------------------------------------


@dataclass
class InitInput:
    """First event of a session."""

    gen: int
    metrics: Metrics
    support: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        result = {"type": "init", "gen": self.gen, "metrics": self.metrics.to_dict()}
        if self.support:
            result["support"] = list(self.support)
        return result


@dataclass
class LineInput:
    """A line of text entered in a window."""

    gen: int
    window: int
    value: str
    terminator: str | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        result = {"type": "line", "gen": self.gen, "window": self.window, "value": self.value}
        if self.terminator is not None:
            result["terminator"] = self.terminator
        return result


@dataclass
class CharInput:
    """A single keystroke (a character or a special key name)."""

    gen: int
    window: int
    value: str

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "char", "gen": self.gen, "window": self.window, "value": self.value}


@dataclass
class TimerInput:
    gen: int

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "timer", "gen": self.gen}


@dataclass
class ArrangeInput:
    """The display was resized."""

    gen: int
    metrics: Metrics

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "arrange", "gen": self.gen, "metrics": self.metrics.to_dict()}


@dataclass
class MouseInput:
    gen: int
    window: int
    x: int
    y: int

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "mouse", "gen": self.gen, "window": self.window, "x": self.x, "y": self.y}


@dataclass
class HyperlinkInput:
    """A hyperlink was selected; value is the link number from the text span."""

    gen: int
    window: int
    value: int

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"type": "hyperlink", "gen": self.gen, "window": self.window, "value": self.value}


@dataclass
class SpecialResponseInput:
    """Answer to a file dialog; value None means the dialog was cancelled."""

    gen: int
    value: str | None = None
    response: str = "fileref_prompt"

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "type": "specialresponse",
            "gen": self.gen,
            "response": self.response,
            "value": self.value,
        }


InputEvent = Union[
    InitInput,
    LineInput,
    CharInput,
    TimerInput,
    ArrangeInput,
    MouseInput,
    HyperlinkInput,
    SpecialResponseInput,
]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _require_type(request: InputRequestEvent, input_type: str) -> None:
    if request.input_type != input_type:
        raise InputRequestError(
            f"window {request.window_id} is waiting for {request.input_type!r} input, "
            f"not {input_type!r}"
        )


def line_input(
    request: InputRequestEvent,
    generation: int,
    value: str,
    terminator: str | None = None,
) -> LineInput:
    """Answer a line input request.

    The value is cut to the request's max_length when one was given.
    """
    _require_type(request, "line")
    if terminator is not None and terminator not in (request.terminators or ()):
        raise InputRequestError(
            f"window {request.window_id} does not accept terminator {terminator!r}"
        )
    if request.max_length is not None:
        value = value[: request.max_length]
    return LineInput(gen=generation, window=request.window_id, value=value, terminator=terminator)


def char_input(request: InputRequestEvent, generation: int, value: str) -> CharInput:
    """Answer a character input request."""
    _require_type(request, "char")
    if not value:
        raise InputRequestError("character input needs a character or key name")
    return CharInput(gen=generation, window=request.window_id, value=value)


def mouse_input(request: InputRequestEvent, generation: int, x: int, y: int) -> MouseInput:
    """Report a click in a window that enabled mouse input."""
    if request.mouse is not True:
        raise InputRequestError(f"window {request.window_id} did not request mouse input")
    return MouseInput(gen=generation, window=request.window_id, x=x, y=y)


def hyperlink_input(request: InputRequestEvent, generation: int, link: int) -> HyperlinkInput:
    """Report a hyperlink selection in a window that enabled hyperlink input."""
    if request.hyperlink is not True:
        raise InputRequestError(f"window {request.window_id} did not request hyperlink input")
    return HyperlinkInput(gen=generation, window=request.window_id, value=link)
