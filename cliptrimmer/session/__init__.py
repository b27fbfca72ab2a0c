"""Session state for ClipTrimmer.

This module provides the clip session and the editing surface variants
the input adapters switch on.
"""

from .clip_session import (
    ClipSession,
    DurationSource,
    EditingSurface,
    EditorState,
    ManualOverlay,
    SessionStatus,
    Unavailable,
    WaveformBacked,
)

__all__ = [
    "ClipSession",
    "DurationSource",
    "EditingSurface",
    "EditorState",
    "ManualOverlay",
    "SessionStatus",
    "Unavailable",
    "WaveformBacked",
]
