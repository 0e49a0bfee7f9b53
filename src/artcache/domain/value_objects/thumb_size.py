"""Size tags and thumbnail presets.

A size tag is either "original" or "<width>x<height>". Presets map the small
integer "thumb" parameter used by clients to explicit pixel boxes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ORIGINAL = "original"

_SIZE_TAG_RE = re.compile(r"^(\d+)x(\d+)$")


@dataclass(frozen=True)
class ThumbSize:
    """Target thumbnail box in pixels."""

    width: int
    height: int

    @property
    def tag(self) -> str:
        """Size tag used as the store key for this box."""
        return size_tag(self.width, self.height)


DEFAULT_THUMB = ThumbSize(width=275, height=275)

# Hey future me - these numbers are what the players/pages were built around,
# don't "tidy" them. Note 6 and 7 are portrait boxes (video posters).
THUMB_PRESETS: dict[int, ThumbSize] = {
    1: ThumbSize(75, 75),  # now playing
    2: ThumbSize(128, 128),
    3: ThumbSize(80, 80),  # embedded player
    4: ThumbSize(200, 200),  # web player
    5: ThumbSize(32, 32),  # web player playlist
    6: ThumbSize(width=100, height=150),  # video browsing
    7: ThumbSize(width=200, height=300),  # video page
}


def size_tag(width: int, height: int) -> str:
    """Format a "<width>x<height>" size tag."""
    return f"{int(width)}x{int(height)}"


def parse_size_tag(tag: str) -> tuple[int, int] | None:
    """Parse a size tag; None for "original" or garbage."""
    match = _SIZE_TAG_RE.match(tag or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def get_thumb_size(thumb: int | str | None) -> ThumbSize:
    """Resolve a thumb preset, falling back to the 275x275 default."""
    try:
        return THUMB_PRESETS.get(int(thumb), DEFAULT_THUMB)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_THUMB
