"""Display controller for managing UI updates."""

from typing import TYPE_CHECKING, Optional

from ..constants import MsgType, UIConstants
from ..session import EditingSurface, ManualOverlay, WaveformBacked

if TYPE_CHECKING:
    from ..app import ClipTrimmer
    from ..adapters import PixelOverlayAdapter


class DisplayController:
    """Handles display updates and UI state management.

    This controller manages:
    - Status messages and error dialogs
    - The loading indicator
    - Editor visibility and which editing surface is shown
    - Language switching
    """

    def __init__(self, app: "ClipTrimmer"):
        """Initialize the display controller.

        Args:
            app: Reference to the main application instance
        """
        self.app = app

    @property
    def window(self):
        return self.app.window

    def set_status(self, status: str, msg_type: MsgType = MsgType.TEMPORARY) -> None:
        """Set the status bar text.

        Args:
            status: Status text to display
            msg_type: Type of status message
        """
        if self.window:
            self.window.set_status(status, msg_type)

    def show_error(self, message: str) -> None:
        """Report an error in the status bar and a dialog."""
        if self.app.debug:
            print(f"[DisplayController] Error shown: {message}")
        if self.window:
            self.window.set_status(message, MsgType.ERROR)
            self.window.show_error(self.app.translator.get("error"), message)

    def show_loading(self, text: str) -> None:
        if self.window:
            self.window.show_loading(text)

    def hide_loading(self) -> None:
        if self.window:
            self.window.hide_loading()

    def show_editor(
        self,
        surface: EditingSurface,
        overlay_adapter: Optional["PixelOverlayAdapter"] = None,
    ) -> None:
        """Show the editor with the given editing surface.

        Args:
            surface: Active editing surface variant
            overlay_adapter: Overlay adapter for manual fallback mode
        """
        if not self.window:
            return

        view = self.window.waveform_view
        if isinstance(surface, WaveformBacked):
            view.show_waveform(surface.handle)
        elif isinstance(surface, ManualOverlay):
            view.show_overlay(overlay_adapter)
        else:
            view.clear()
        self.window.show_editor()

    def hide_editor(self) -> None:
        if self.window:
            self.window.waveform_view.clear()
            self.window.hide_editor()

    def set_editing_enabled(self, enabled: bool) -> None:
        if self.window:
            self.window.set_editing_enabled(enabled)

    def get_overlay_width(self) -> int:
        """Width of the editing surface in pixels."""
        if not self.window:
            return 0
        return self.window.waveform_view.get_width_px()

    def set_language(self, language: str) -> None:
        """Switch the UI language and remember it."""
        if not self.app.translator.set_language(language):
            return
        if self.window:
            self.window.apply_language(self.app.translator)
        self.app.settings_manager.update_setting("language", language)

    def schedule_status_reset(self) -> None:
        if self.window:
            self.app.dispatcher.schedule(
                UIConstants.STATUS_RESET_DELAY_MS,
                lambda: self.window.set_status("", MsgType.DEFAULT),
            )
