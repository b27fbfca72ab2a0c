"""Controllers for ClipTrimmer."""

from .display_controller import DisplayController
from .session_controller import SessionController

__all__ = ["DisplayController", "SessionController"]
