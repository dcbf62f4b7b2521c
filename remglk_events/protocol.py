"""Protocol for the image lookup injected into the parser."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageResolver(Protocol):
    """Pure lookup from image id to URL.

    Must be synchronous and safe to call concurrently. Returning None means
    the image has no URL yet; that is a normal outcome, not an error.
    """

    def __call__(self, image_id: int) -> str | None:
        ...
