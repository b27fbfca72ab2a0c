"""Input adapters feeding the region model.

Each adapter maps one kind of input to region model calls and can be
enabled or disabled on its own, depending on what the editing surface
supports.
"""

from .drag_selection import DragSelectionAdapter
from .numeric_field import END, START, NumericFieldAdapter, parse_seconds
from .pixel_overlay import PixelOverlayAdapter
from .playback_position import PlaybackPositionAdapter

__all__ = [
    "DragSelectionAdapter",
    "END",
    "NumericFieldAdapter",
    "PixelOverlayAdapter",
    "PlaybackPositionAdapter",
    "START",
    "parse_seconds",
]
