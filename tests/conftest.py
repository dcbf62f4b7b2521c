"""Shared test fixtures for remglk-events."""

import pytest

from remglk_events.images import StaticImageResolver


# ---------------------------------------------------------------------------
# Image resolvers
# ---------------------------------------------------------------------------


@pytest.fixture
def image_resolver() -> StaticImageResolver:
    """Resolves image 5 only."""
    return StaticImageResolver({5: "blob:test-image-5"})


# ---------------------------------------------------------------------------
# Update documents
# ---------------------------------------------------------------------------


@pytest.fixture
def startup_update() -> dict:
    """First generation of a typical game: status grid above a story buffer."""
    return {
        "type": "update",
        "gen": 1,
        "windows": [
            {"id": 12, "type": "grid", "rock": 202, "left": 0, "top": 0,
             "width": 800, "height": 20, "gridwidth": 80, "gridheight": 1},
            {"id": 13, "type": "buffer", "rock": 201, "left": 0, "top": 20,
             "width": 800, "height": 580},
        ],
        "content": [
            {"id": 12, "lines": [
                {"line": 0, "content": [{"style": "normal", "text": " West of House"}]},
            ]},
            {"id": 13, "clear": True, "text": [
                {"content": [{"style": "header", "text": "ZORK I"}]},
                {"content": ["An Interactive Fiction"]},
                {},
                {"content": [{"style": "normal", "text": "You are standing in an open field."}]},
            ]},
        ],
        "input": [
            {"id": 13, "gen": 1, "type": "line", "maxlen": 255},
        ],
    }


@pytest.fixture
def grid_update() -> dict:
    return {
        "type": "update",
        "gen": 10,
        "content": [
            {"id": 2, "lines": [
                {"line": 0, "content": [" At End Of Road                     Score: 36    Moves: 1"]},
            ]},
        ],
    }


@pytest.fixture
def image_update() -> dict:
    return {
        "type": "update",
        "gen": 4,
        "content": [
            {"id": 1, "text": [
                {"content": [
                    {"special": {"type": "image", "image": 5, "width": 100, "height": 80}},
                    {"special": {"type": "image", "image": 6, "width": 100, "height": 80}},
                ]},
            ]},
        ],
    }


@pytest.fixture
def graphics_update() -> dict:
    return {
        "type": "update",
        "gen": 7,
        "content": [
            {"id": 3, "draw": [
                {"special": "setcolor", "color": "#FFFFFF"},
                {"special": "fill"},
                {"special": "fill", "color": "#FF0000", "x": 10, "y": 20, "width": 30, "height": 40},
                {"special": "image", "image": 5, "x": 1, "y": 2, "width": 64, "height": 48},
            ]},
        ],
    }


@pytest.fixture
def error_update() -> dict:
    return {"type": "error", "gen": 0, "message": "Something went wrong"}


@pytest.fixture
def transcript_text(startup_update: dict) -> str:
    """Two generations as RemGlk writes them: pretty objects, blank line between."""
    import json

    second = {
        "type": "update",
        "gen": 2,
        "content": [
            {"id": 12, "lines": [
                {"line": 0, "content": [" North of House"]},
            ]},
            {"id": 13, "text": [
                {"content": [{"style": "input", "text": "north"}]},
                {"content": ["You are facing the north side of a white house."]},
            ]},
        ],
        "input": [{"id": 13, "gen": 2, "type": "line", "maxlen": 255}],
    }
    return json.dumps(startup_update, indent=1) + "\n\n" + json.dumps(second) + "\n"
