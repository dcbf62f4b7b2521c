"""RemGlk output stream reading and document classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from enum import Enum, auto
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Document classification
# ---------------------------------------------------------------------------


class DocumentType(Enum):
    UPDATE = auto()
    ERROR = auto()
    UNKNOWN = auto()


def classify_document(document: object) -> DocumentType:
    """Classify a decoded document by its top-level shape.

    Only "error" is special; any other dict (including one with no "type")
    is an update.
    """
    if not isinstance(document, dict):
        return DocumentType.UNKNOWN
    if document.get("type") == "error":
        return DocumentType.ERROR
    return DocumentType.UPDATE


# ---------------------------------------------------------------------------
# Stream reader
# ---------------------------------------------------------------------------

_WHITESPACE = " \t\r\n"


def iter_documents(text: str) -> Iterator[dict]:
    """Yield each JSON object in a RemGlk output stream.

    RemGlk writes one object per generation separated by arbitrary
    whitespace (usually a blank line), and objects may span many lines.
    Undecodable data is skipped up to the next newline with a warning.
    """
    decoder = json.JSONDecoder()
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos] in _WHITESPACE:
            pos += 1
        if pos >= end:
            return
        try:
            obj, next_pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            line_num = text.count("\n", 0, pos) + 1
            logger.warning("Line %d: failed to parse JSON: %s", line_num, exc)
            newline = text.find("\n", pos)
            if newline == -1:
                return
            pos = newline + 1
            continue
        if isinstance(obj, dict):
            yield obj
        else:
            line_num = text.count("\n", 0, pos) + 1
            logger.warning("Line %d: expected dict, got %s", line_num, type(obj).__name__)
        pos = next_pos


def read_updates(path: str | Path) -> list[dict]:
    """Read a RemGlk output file and return the list of decoded documents."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        text = f.read()
    documents = list(iter_documents(text))
    logger.debug("updates_read", extra={"path": str(path), "count": len(documents)})
    return documents
