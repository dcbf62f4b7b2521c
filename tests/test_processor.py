"""Tests for parse_update, normalize_content and extract_directives."""

from __future__ import annotations

import copy
import logging

import pytest

from remglk_events.events import (
    ContentEvent,
    ErrorEvent,
    FillSpanEvent,
    FlowBreakSpanEvent,
    GridLineSpans,
    ImageSpanEvent,
    InputRequestEvent,
    SetColorSpanEvent,
    TextSpanEvent,
    UnknownSpecialSpanEvent,
    WindowEvent,
)
from remglk_events.images import StaticImageResolver
from remglk_events.models import ContentKind, UpdateDocument
from remglk_events.processor import extract_directives, normalize_content, parse_update


# ===================================================================
# Top-level dispatch
# ===================================================================


class TestErrorDocuments:
    """Error documents produce exactly one ErrorEvent."""

    def test_error_message(self, error_update: dict) -> None:
        assert parse_update(error_update) == [ErrorEvent(message="Something went wrong")]

    def test_error_without_message(self) -> None:
        assert parse_update({"type": "error", "gen": 3}) == [ErrorEvent(message="")]

    def test_error_ignores_other_fields(self) -> None:
        document = {
            "type": "error",
            "message": "boom",
            "windows": [{"id": 1, "type": "buffer"}],
            "content": [{"id": 1, "text": [{"content": ["x"]}]}],
        }
        events = parse_update(document)
        assert len(events) == 1
        assert isinstance(events[0], ErrorEvent)

    def test_error_from_update_document(self) -> None:
        document = UpdateDocument.from_dict({"type": "error", "message": "bad gen"})
        assert parse_update(document) == [ErrorEvent(message="bad gen")]


class TestUpdateDocuments:
    """Event kinds and order for update documents."""

    def test_empty_update(self) -> None:
        assert parse_update({"type": "update", "gen": 5}) == []

    def test_update_with_only_directives(self) -> None:
        document = {"type": "update", "gen": 5, "timer": 1000, "disable": True}
        assert parse_update(document) == []

    def test_non_dict_document(self) -> None:
        assert parse_update(["not", "a", "document"]) == []

    def test_event_order(self, startup_update: dict) -> None:
        events = parse_update(startup_update)
        assert [type(e) for e in events] == [
            WindowEvent,
            ContentEvent,
            ContentEvent,
            InputRequestEvent,
        ]

    def test_window_event_passes_geometry(self, startup_update: dict) -> None:
        window_event = parse_update(startup_update)[0]
        assert [w.id for w in window_event.windows] == [12, 13]
        grid = window_event.windows[0]
        assert grid.type == "grid"
        assert grid.gridwidth == 80
        assert grid.to_dict() == startup_update["windows"][0]

    def test_empty_window_list_still_emits(self) -> None:
        events = parse_update({"type": "update", "windows": []})
        assert events == [WindowEvent(windows=())]

    def test_content_blocks_keep_order(self) -> None:
        document = {
            "type": "update",
            "content": [
                {"id": 3, "text": [{"content": ["c"]}]},
                {"id": 1, "text": [{"content": ["a"]}]},
                {"id": 2, "lines": [{"line": 0, "content": ["b"]}]},
            ],
        }
        events = parse_update(document)
        assert [e.window_id for e in events] == [3, 1, 2]

    def test_missing_type_treated_as_update(self) -> None:
        events = parse_update({"content": [{"id": 1, "text": [{"content": ["hi"]}]}]})
        assert len(events) == 1
        assert events[0].spans == (TextSpanEvent(text="hi"),)

    def test_malformed_block_does_not_stop_others(self) -> None:
        document = {
            "type": "update",
            "content": [
                {"id": 1},
                "garbage",
                {"id": 2, "text": [{"content": ["ok"]}]},
            ],
        }
        events = parse_update(document)
        assert [e.window_id for e in events] == [1, 2]
        assert events[0].spans == ()
        assert events[1].spans == (TextSpanEvent(text="ok"),)

    def test_does_not_mutate_input(self, startup_update: dict) -> None:
        original = copy.deepcopy(startup_update)
        parse_update(startup_update)
        assert startup_update == original

    def test_idempotent(self, startup_update: dict, image_resolver: StaticImageResolver) -> None:
        first = parse_update(startup_update, image_resolver)
        second = parse_update(startup_update, image_resolver)
        assert first == second
        assert [e.to_dict() for e in first] == [e.to_dict() for e in second]

    def test_accepts_decoded_document(self, startup_update: dict) -> None:
        decoded = UpdateDocument.from_dict(startup_update)
        assert parse_update(decoded) == parse_update(startup_update)


class TestInputRequests:
    """Input requests are copied verbatim, absent fields stay absent."""

    def test_line_request(self, startup_update: dict) -> None:
        request = parse_update(startup_update)[-1]
        assert request == InputRequestEvent(
            window_id=13, input_type="line", generation=1, max_length=255
        )

    def test_absent_fields_omitted(self) -> None:
        events = parse_update({"type": "update", "input": [{"id": 2, "type": "char"}]})
        assert events[0].to_dict() == {
            "type": "input-request-event",
            "windowId": 2,
            "inputType": "char",
        }
        assert events[0].mouse is None
        assert events[0].hyperlink is None

    def test_explicit_false_kept(self) -> None:
        events = parse_update(
            {"type": "update", "input": [{"id": 2, "type": "char", "mouse": False}]}
        )
        assert events[0].mouse is False
        assert events[0].to_dict()["mouse"] is False

    def test_all_fields(self) -> None:
        document = {
            "type": "update",
            "input": [
                {
                    "id": 4,
                    "type": "line",
                    "gen": 9,
                    "maxlen": 80,
                    "initial": "go ",
                    "xpos": 3,
                    "ypos": 1,
                    "terminators": ["escape", "func1"],
                    "mouse": True,
                    "hyperlink": True,
                }
            ],
        }
        event = parse_update(document)[0]
        assert event.initial == "go "
        assert (event.xpos, event.ypos) == (3, 1)
        assert event.terminators == ("escape", "func1")
        assert event.to_dict()["terminators"] == ["escape", "func1"]
        assert event.mouse is True
        assert event.hyperlink is True

    def test_multiple_requests_keep_order(self) -> None:
        document = {
            "type": "update",
            "input": [{"id": 2, "type": "char"}, {"id": 1, "type": "line"}],
        }
        assert [e.window_id for e in parse_update(document)] == [2, 1]


# ===================================================================
# Content normalization
# ===================================================================


class TestBufferContent:
    """Paragraph lists (buffer windows)."""

    def test_bare_and_styled_text(self) -> None:
        block = {"id": 1, "text": [{"content": ["plain", {"style": "emphasized", "text": "bold"}]}]}
        assert normalize_content(block) == [
            TextSpanEvent(text="plain"),
            TextSpanEvent(text="bold", style="emphasized"),
        ]

    def test_hyperlink_kept(self) -> None:
        block = {"id": 1, "text": [{"content": [{"style": "normal", "text": "click here", "hyperlink": 42}]}]}
        assert normalize_content(block) == [
            TextSpanEvent(text="click here", style="normal", hyperlink=42)
        ]

    def test_paragraph_flowbreak_without_content(self) -> None:
        block = {"id": 1, "text": [{"flowbreak": True}]}
        assert normalize_content(block) == [FlowBreakSpanEvent()]

    def test_paragraph_flowbreak_precedes_content(self) -> None:
        block = {"id": 1, "text": [{"flowbreak": True, "content": ["after"]}]}
        assert normalize_content(block) == [FlowBreakSpanEvent(), TextSpanEvent(text="after")]

    def test_special_flowbreak(self) -> None:
        block = {"id": 1, "text": [{"content": ["a", {"special": {"type": "flowbreak"}}, "b"]}]}
        assert normalize_content(block) == [
            TextSpanEvent(text="a"),
            FlowBreakSpanEvent(),
            TextSpanEvent(text="b"),
        ]

    def test_empty_paragraph_yields_nothing(self) -> None:
        assert normalize_content({"id": 1, "text": [{}, {"content": []}]}) == []

    def test_clear_only_block(self) -> None:
        event = parse_update({"type": "update", "content": [{"id": 1, "clear": True, "text": []}]})[0]
        assert event.clear is True
        assert event.spans == ()
        assert event.kind is ContentKind.BUFFER

    def test_clear_defaults_false(self) -> None:
        event = parse_update({"type": "update", "content": [{"id": 1, "text": [{"content": ["x"]}]}]})[0]
        assert event.clear is False

    def test_paragraph_groups(self, startup_update: dict) -> None:
        event = parse_update(startup_update)[2]
        assert event.kind is ContentKind.BUFFER
        assert event.lines is None
        assert len(event.paragraphs) == 4
        assert event.paragraphs[0].spans == (TextSpanEvent(text="ZORK I", style="header"),)
        assert event.paragraphs[2].spans == ()
        assert tuple(span for p in event.paragraphs for span in p.spans) == event.spans

    def test_append_flag_preserved(self) -> None:
        block = {"id": 1, "text": [{"append": True, "content": ["more"]}, {"content": ["new"]}]}
        event = parse_update({"type": "update", "content": [block]})[0]
        assert [p.append for p in event.paragraphs] == [True, False]

    def test_setcolor_and_fill_specials(self) -> None:
        block = {"id": 1, "text": [{"content": [
            {"special": {"type": "setcolor", "color": 255}},
            {"special": {"type": "fill", "color": 0, "x": 1, "y": 2, "width": 3, "height": 4}},
        ]}]}
        assert normalize_content(block) == [
            SetColorSpanEvent(color=255),
            FillSpanEvent(color=0, x=1, y=2, width=3, height=4),
        ]

    def test_undecodable_spans_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        block = {"id": 1, "text": [{"content": ["ok", 42, {"special": "sound"}]}]}
        with caplog.at_level(logging.WARNING):
            assert normalize_content(block) == [TextSpanEvent(text="ok")]
        assert "expected string or object" in caplog.text
        assert "malformed special" in caplog.text

    def test_unknown_special_passed_through(self, caplog: pytest.LogCaptureFixture) -> None:
        block = {"id": 1, "text": [{"content": [
            "a",
            {"special": {"type": "sound", "sound": 3, "volume": 50}},
            "b",
        ]}]}
        with caplog.at_level(logging.WARNING):
            spans = normalize_content(block)
        assert spans == [
            TextSpanEvent(text="a"),
            UnknownSpecialSpanEvent(special_type="sound", data={"sound": 3, "volume": 50}),
            TextSpanEvent(text="b"),
        ]
        assert spans[1].to_dict() == {
            "type": "special",
            "specialType": "sound",
            "data": {"sound": 3, "volume": 50},
        }
        assert "unknown special type" in caplog.text

    def test_null_text_becomes_empty_span(self) -> None:
        block = {"id": 1, "text": [{"content": [{"style": "normal", "text": None}]}]}
        spans = normalize_content(block)
        assert spans == [TextSpanEvent(text="", style="normal")]
        assert spans[0].to_dict() == {"type": "text", "text": "", "style": "normal"}


class TestGridContent:
    """Line lists (grid windows)."""

    def test_grid_line(self, grid_update: dict) -> None:
        event = parse_update(grid_update)[0]
        assert event.kind is ContentKind.GRID
        assert event.spans == (
            TextSpanEvent(text=" At End Of Road                     Score: 36    Moves: 1"),
        )

    def test_sparse_lines_keep_numbers_and_order(self) -> None:
        block = {"id": 2, "lines": [
            {"line": 5, "content": ["five"]},
            {"line": 1, "content": ["one"]},
            {"line": 5, "content": ["five again"]},
        ]}
        event = parse_update({"type": "update", "content": [block]})[0]
        assert event.lines == (
            GridLineSpans(line_number=5, spans=(TextSpanEvent(text="five"),)),
            GridLineSpans(line_number=1, spans=(TextSpanEvent(text="one"),)),
            GridLineSpans(line_number=5, spans=(TextSpanEvent(text="five again"),)),
        )
        assert [s.text for s in event.spans] == ["five", "one", "five again"]

    def test_null_line_number_is_zero(self, caplog: pytest.LogCaptureFixture) -> None:
        block = {"id": 2, "lines": [
            {"line": None, "content": ["x"]},
            {"line": 1, "content": ["y"]},
        ]}
        with caplog.at_level(logging.WARNING):
            event = parse_update({"type": "update", "content": [block]})[0]
        assert [line.line_number for line in event.lines] == [0, 1]
        assert "expected integer line number" in caplog.text

    def test_empty_line_yields_no_spans(self) -> None:
        block = {"id": 2, "lines": [{"line": 3}]}
        event = parse_update({"type": "update", "content": [block]})[0]
        assert event.spans == ()
        assert event.lines == (GridLineSpans(line_number=3),)

    def test_grid_buffer_duality(self) -> None:
        grid = normalize_content({"id": 1, "lines": [{"line": 0, "content": ["X"]}]})
        buffer = normalize_content({"id": 1, "text": [{"append": True, "content": ["X"]}]})
        assert grid == buffer == [TextSpanEvent(text="X")]

    def test_lines_win_over_text(self, caplog: pytest.LogCaptureFixture) -> None:
        block = {"id": 1, "lines": [{"line": 0, "content": ["grid"]}], "text": [{"content": ["buf"]}]}
        with caplog.at_level(logging.WARNING):
            assert normalize_content(block) == [TextSpanEvent(text="grid")]
        assert "using 'lines'" in caplog.text


class TestGraphicsContent:
    """Draw lists (graphics windows)."""

    def test_draw_operations(
        self, graphics_update: dict, image_resolver: StaticImageResolver
    ) -> None:
        event = parse_update(graphics_update, image_resolver)[0]
        assert event.kind is ContentKind.GRAPHICS
        assert event.spans == (
            SetColorSpanEvent(color="#FFFFFF"),
            FillSpanEvent(),
            FillSpanEvent(color="#FF0000", x=10, y=20, width=30, height=40),
            ImageSpanEvent(
                image_number=5,
                image_url="blob:test-image-5",
                width=64,
                height=48,
                x=1,
                y=2,
            ),
        )

    def test_unknown_draw_operation_skipped(self) -> None:
        block = {"id": 3, "draw": [{"special": "line"}, {"special": "fill"}]}
        assert normalize_content(block) == [FillSpanEvent()]


class TestBlockWithoutRepresentation:
    """Blocks with neither text, lines nor draw."""

    def test_emits_empty_content_event(self) -> None:
        event = parse_update({"type": "update", "content": [{"id": 9, "clear": True}]})[0]
        assert event == ContentEvent(window_id=9, clear=True, spans=(), kind=ContentKind.NONE)

    def test_non_list_text_treated_as_absent(self) -> None:
        assert normalize_content({"id": 1, "text": "oops"}) == []


# ===================================================================
# Images
# ===================================================================


class TestImages:
    """Image spans and URL resolution."""

    def test_resolved_image(self, image_update: dict, image_resolver: StaticImageResolver) -> None:
        spans = parse_update(image_update, image_resolver)[0].spans
        assert spans[0] == ImageSpanEvent(
            image_number=5, image_url="blob:test-image-5", width=100, height=80
        )
        assert spans[0].to_dict() == {
            "type": "image",
            "imageNumber": 5,
            "imageUrl": "blob:test-image-5",
            "width": 100,
            "height": 80,
        }

    def test_unresolved_image_kept(self, image_update: dict, image_resolver: StaticImageResolver) -> None:
        spans = parse_update(image_update, image_resolver)[0].spans
        assert spans[1] == ImageSpanEvent(image_number=6, image_url=None, width=100, height=80)
        assert "imageUrl" not in spans[1].to_dict()

    def test_no_resolver(self, image_update: dict) -> None:
        spans = parse_update(image_update)[0].spans
        assert [s.image_url for s in spans] == [None, None]

    def test_wire_url_used_when_unresolved(self) -> None:
        block = {"id": 1, "text": [{"content": [
            {"special": {"type": "image", "image": 6, "url": "pict-6.png"}},
        ]}]}
        assert normalize_content(block, lambda image_id: None)[0].image_url == "pict-6.png"

    def test_resolver_error_degrades(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(image_id: int) -> str | None:
            raise RuntimeError("storage offline")

        block = {"id": 1, "text": [{"content": [
            {"special": {"type": "image", "image": 5, "width": 10, "height": 10}},
            "still here",
        ]}]}
        with caplog.at_level(logging.ERROR):
            spans = normalize_content(block, broken)
        assert spans == [
            ImageSpanEvent(image_number=5, width=10, height=10),
            TextSpanEvent(text="still here"),
        ]
        assert "image_resolve_failed" in caplog.text

    def test_alignment_and_alt_text(self) -> None:
        block = {"id": 1, "text": [{"content": [
            {"special": {"type": "image", "image": 2, "alignment": "marginleft", "alttext": "a map"}},
            {"special": {"type": "image", "image": 3, "alignment": 3}},
        ]}]}
        spans = normalize_content(block)
        assert spans[0].alignment == "marginleft"
        assert spans[0].alt_text == "a map"
        assert spans[1].alignment == "inlinecenter"


# ===================================================================
# Directives
# ===================================================================


class TestExtractDirectives:
    """Top-level fields for the surrounding client."""

    def test_defaults(self) -> None:
        directives = extract_directives({"type": "update", "gen": 2})
        assert directives.generation == 2
        assert directives.timer_set is False
        assert directives.cancels_timer is False
        assert directives.disable is False
        assert directives.exit is False
        assert directives.debug_output == ()
        assert directives.special_input is None

    def test_timer_interval(self) -> None:
        directives = extract_directives({"type": "update", "gen": 12, "timer": 1000})
        assert directives.timer == 1000
        assert directives.timer_set is True
        assert directives.cancels_timer is False

    def test_timer_null_cancels(self) -> None:
        directives = extract_directives({"type": "update", "gen": 13, "timer": None})
        assert directives.timer is None
        assert directives.cancels_timer is True
        assert directives.to_dict()["timer"] is None

    def test_special_input_and_flags(self) -> None:
        document = {
            "type": "update",
            "gen": 20,
            "specialinput": {"type": "fileref_prompt", "filemode": "write", "filetype": "save"},
            "disable": True,
            "exit": True,
            "debugoutput": ["hello", "world"],
        }
        directives = extract_directives(document)
        assert directives.special_input.filemode == "write"
        assert directives.special_input.filetype == "save"
        assert directives.disable is True
        assert directives.exit is True
        assert directives.debug_output == ("hello", "world")
        assert directives.to_dict()["debugOutput"] == ["hello", "world"]
        assert directives.to_dict()["specialInput"] == {
            "type": "fileref_prompt",
            "filemode": "write",
            "filetype": "save",
        }
