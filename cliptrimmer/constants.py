"""Constants for the ClipTrimmer application.

This module defines all constant values used throughout the application,
organized into logical groups for region editing, networking, user
interface, file handling, and keyboard bindings.
"""

from enum import Enum


class MsgType(Enum):
    """Status message categories for the status line."""

    DEFAULT = "default"
    TEMPORARY = "temporary"
    ERROR = "error"


class RegionConstants:
    """Region editing related constants.

    All time values are in seconds.
    """

    # Placeholder end used until the real clip duration is known
    DEFAULT_PROVISIONAL_END = 30.0

    # Keyboard fine adjustment and minimum start/end distance
    NUDGE_STEP = 0.1
    MIN_GAP = 0.1

    # Readout formatting
    DISPLAY_DECIMALS = 2


class NetworkConstants:
    """Backend communication constants."""

    LOCAL_BACKEND_URL = "http://localhost:3000"
    REMOTE_BACKEND_URL = "https://twitch-clip-downloader-backend.onrender.com"

    ENDPOINT_CLIP_URL = "/get-clip-url"
    ENDPOINT_AUDIO_METADATA = "/get-audio-metadata"
    ENDPOINT_DOWNLOAD = "/download"

    # Seconds
    REQUEST_TIMEOUT = 30.0
    METADATA_TIMEOUT = 10.0
    DOWNLOAD_TIMEOUT = 300.0

    MAX_WORKERS = 4


class UIConstants:
    """User interface related constants.

    Defines visual appearance settings, timing parameters and
    display configuration for the graphical user interface.
    """

    # Colors
    COLOR_BACKGROUND = "#18181b"
    COLOR_WAVEFORM = "#dddddd"
    COLOR_PROGRESS = "#6441a5"
    COLOR_CURSOR = "#ffffff"
    COLOR_REGION = "#6441a5"
    REGION_ALPHA = 0.3
    COLOR_OVERLAY_HINT = "#888888"
    COLOR_STATUS_ERROR = "red"
    COLOR_STATUS_NORMAL = "gray"

    # Waveform display
    WAVEFORM_WIDTH_INCHES = 8
    WAVEFORM_HEIGHT_INCHES = 1.2
    WAVEFORM_DPI = 100
    WAVEFORM_PEAK_COUNT = 800

    # Drag handling (pixels)
    DRAG_SLOP_PX = 5
    EDGE_GRAB_PX = 6

    # Timing (milliseconds)
    PLAYBACK_POLL_MS = 100
    DISPATCH_POLL_MS = 20
    STATUS_RESET_DELAY_MS = 3000
    FOCUS_DELAY_MS = 100

    # Decode deadline (seconds)
    DEFAULT_DECODE_TIMEOUT = 2.0

    # Padding
    MAIN_FRAME_PADDING = 20
    FRAME_SPACING = 10

    DEFAULT_WINDOW_GEOMETRY = "900x480"


class FileConstants:
    """File and path related constants."""

    SETTINGS_FILE_NAME = ".cliptrimmer_settings"
    DOWNLOAD_PREFIX = "clip"
    DOWNLOAD_EXTENSION = ".mp3"
    TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


class KeyBindings:
    """Keyboard shortcuts.

    Most keys use lowercase; special keys use Tkinter notation.
    """

    SUBMIT = "Return"
    PLAY_PAUSE = "Control-space"
    NUDGE_START_BACK = "Control-Left"
    NUDGE_START_FORWARD = "Control-Right"
    NUDGE_END_BACK = "Alt-Left"
    NUDGE_END_FORWARD = "Alt-Right"
    FIELD_STEP_UP = "Up"
    FIELD_STEP_DOWN = "Down"
    DOWNLOAD = "Control-s"
    QUIT = "Control-q"
