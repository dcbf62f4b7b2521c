"""Image reference resolution and alignment normalization."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol import ImageResolver

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------

IMAGE_ALIGNMENT_VALUES: dict[int, str] = {
    1: "inlineup",
    2: "inlinedown",
    3: "inlinecenter",
    4: "marginleft",
    5: "marginright",
}

_ALIGNMENT_NAMES = frozenset(IMAGE_ALIGNMENT_VALUES.values())


def normalize_alignment(value: str | int | None) -> str | None:
    """Map a wire alignment (name or Glk constant) to its name.

    Unknown values return None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return IMAGE_ALIGNMENT_VALUES.get(value)
    if value in _ALIGNMENT_NAMES:
        return value
    logger.warning("Unknown image alignment %r", value)
    return None


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def resolve_image_url(resolver: ImageResolver | None, image_id: int | None) -> str | None:
    """Look up an image URL without letting resolver failures escape.

    A missing resolver, a missing id, an empty result or a raising resolver
    all mean "no URL yet".
    """
    if resolver is None or image_id is None:
        return None
    try:
        url = resolver(image_id)
    except Exception:
        logger.exception("image_resolve_failed", extra={"image_id": image_id})
        return None
    return url or None


class StaticImageResolver:
    """Resolves image ids from a fixed mapping, then an optional URL template.

    Example:
        resolver = StaticImageResolver({5: "blob:test-image-5"}, "images/{image}.png")
        resolver(5)  # "blob:test-image-5"
        resolver(7)  # "images/7.png"
    """

    def __init__(
        self,
        images: Mapping[int, str] | None = None,
        url_template: str | None = None,
    ) -> None:
        self._images: dict[int, str] = dict(images or {})
        self._url_template = url_template

    def __call__(self, image_id: int) -> str | None:
        url = self._images.get(image_id)
        if url is not None:
            return url
        if self._url_template is not None:
            return self._url_template.format(image=image_id)
        return None

    def __len__(self) -> int:
        return len(self._images)
