"""Main application for ClipTrimmer"""

# Set matplotlib backend before any matplotlib imports
import matplotlib

matplotlib.use("TkAgg")

import argparse
import sys
import tkinter as tk
import traceback
from pathlib import Path

from .backend import BackendClient
from .constants import KeyBindings, NetworkConstants, UIConstants
from .controllers import DisplayController, SessionController
from .adapters import END, START
from .region import SyncBroadcaster
from .ui.i18n import SUPPORTED_LANGUAGES, Translator
from .ui.main_window import MainWindow
from .utils.config import AppConfig, load_config
from .utils.file_manager import DownloadFileManager
from .utils.main_loop import MainLoopDispatcher
from .utils.settings_manager import SettingsManager


class ClipTrimmer:
    """Main application class for ClipTrimmer.

    Wires the window, the background dispatcher, the backend client and
    the controllers together.

    Attributes:
        config: Application configuration
        dispatcher: Bridge between worker threads and the Tk event loop
        backend: HTTP client for the conversion backend
        broadcaster: Pushes region changes to readouts and the waveform view
        session_controller: Runs the get clip / edit / download cycle
        display_controller: Manages UI updates
    """

    def __init__(
        self,
        config: AppConfig,
        settings_manager: SettingsManager,
        debug: bool = False,
    ):
        """Initialize the application.

        Args:
            config: Application configuration object
            settings_manager: Persisted user settings
            debug: Enable debug output
        """
        self.config = config
        self.debug = debug
        self.settings_manager = settings_manager

        self.backend = BackendClient(
            config.network.backend_url, config.network.request_timeout, debug=debug
        )
        self.file_manager = DownloadFileManager(config.ui.download_dir)
        self.translator = Translator(config.ui.language)
        self.broadcaster = SyncBroadcaster()

        # Initialize UI
        self.root = tk.Tk()
        self.root.withdraw()  # Hide until ready

        self.dispatcher = MainLoopDispatcher(self.root, debug=debug)

        # Populated after controllers are initialized
        self.app_callbacks = {}
        self.window = MainWindow(
            self.root,
            self.translator,
            self.app_callbacks,
            config.ui.window_geometry,
        )

        self._init_controllers()
        self._populate_app_callbacks()

        self.broadcaster.register_readout(
            self.window.start_field.set_text, self.window.end_field.set_text
        )
        self.broadcaster.register_surface(self.window.waveform_view)

        self._bind_keys()

        self.root.deiconify()
        self.dispatcher.start()

        if self.debug:
            print(f"[ClipTrimmer] Backend: {config.network.backend_url}")
            print(f"[ClipTrimmer] Downloads: {config.ui.download_dir}")

    def _init_controllers(self):
        """Initialize all controllers."""
        self.display_controller = DisplayController(self)
        self.session_controller = SessionController(self)

    def _populate_app_callbacks(self):
        """Populate app_callbacks dictionary with controller methods."""
        self.app_callbacks["quit"] = self._quit
        self.app_callbacks["submit_url"] = lambda: self.session_controller.submit_url(
            self.window.get_url()
        )
        self.app_callbacks["download"] = self.session_controller.download
        self.app_callbacks["play_pause"] = self.session_controller.play_pause
        self.app_callbacks["commit_field"] = self.session_controller.commit_field
        self.app_callbacks["step_field"] = self.session_controller.step_field
        self.app_callbacks["set_language"] = self.display_controller.set_language

    def _bind_keys(self):
        """Bind keyboard shortcuts."""
        self.root.bind(
            f"<{KeyBindings.PLAY_PAUSE}>",
            lambda e: self.session_controller.play_pause(),
        )
        self.root.bind(
            f"<{KeyBindings.NUDGE_START_BACK}>",
            lambda e: self.session_controller.step_field(START, -1),
        )
        self.root.bind(
            f"<{KeyBindings.NUDGE_START_FORWARD}>",
            lambda e: self.session_controller.step_field(START, 1),
        )
        self.root.bind(
            f"<{KeyBindings.NUDGE_END_BACK}>",
            lambda e: self.session_controller.step_field(END, -1),
        )
        self.root.bind(
            f"<{KeyBindings.NUDGE_END_FORWARD}>",
            lambda e: self.session_controller.step_field(END, 1),
        )
        self.root.bind(
            f"<{KeyBindings.DOWNLOAD}>", lambda e: self.session_controller.download()
        )
        self.root.bind(f"<{KeyBindings.QUIT}>", lambda e: self._quit())

    def _quit(self):
        """Quit the application."""
        self.settings_manager.update_setting("window_geometry", self.root.geometry())

        # Cleanup
        self.session_controller.shutdown()
        self.dispatcher.shutdown()

        # Close UI
        try:
            self.root.destroy()
        except (AttributeError, RuntimeError, tk.TclError):
            pass

        sys.exit(0)

    def run(self):
        """Run the application."""
        self.root.after(UIConstants.FOCUS_DELAY_MS, self.window.focus_url)
        self.root.mainloop()


def parse_arguments() -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="ClipTrimmer - Trim Twitch clips to MP3",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    backend = parser.add_argument_group("backend")
    backend.add_argument(
        "--backend-url", type=str, default=None, help="conversion backend URL"
    )
    backend.add_argument(
        "--remote",
        action="store_true",
        help=f"use the hosted backend ({NetworkConstants.REMOTE_BACKEND_URL})",
    )

    editor = parser.add_argument_group("editor")
    editor.add_argument(
        "--decode-timeout",
        type=float,
        default=None,
        help="seconds to wait for audio decoding before manual selection",
    )

    ui = parser.add_argument_group("user interface")
    ui.add_argument(
        "--language", choices=SUPPORTED_LANGUAGES, default=None, help="UI language"
    )
    ui.add_argument(
        "--download-dir", type=str, default=None, help="where trimmed MP3s are saved"
    )

    # Debug options
    parser.add_argument("--debug", action="store_true", help="enable debug output")

    return parser.parse_args()


def _apply_saved_settings(settings_manager: SettingsManager, config: AppConfig) -> None:
    """Apply persisted user settings to configuration.

    Args:
        settings_manager: Loaded settings
        config: Application configuration to modify
    """
    settings = settings_manager.settings
    if settings.backend_url:
        config.network.backend_url = settings.backend_url
    if settings.decode_timeout_s and settings.decode_timeout_s > 0:
        config.editor.decode_timeout_s = settings.decode_timeout_s
    if settings.language in SUPPORTED_LANGUAGES:
        config.ui.language = settings.language
    if settings.download_dir:
        config.ui.download_dir = Path(settings.download_dir).expanduser()
    if settings.window_geometry:
        config.ui.window_geometry = settings.window_geometry


def _apply_command_line_overrides(args, config: AppConfig) -> None:
    """Apply command line arguments to configuration.

    Args:
        args: Parsed command line arguments
        config: Application configuration to modify
    """
    if args.remote:
        config.network.backend_url = NetworkConstants.REMOTE_BACKEND_URL
    if args.backend_url:
        config.network.backend_url = args.backend_url
    if args.decode_timeout is not None:
        if args.decode_timeout <= 0:
            print("Error: --decode-timeout must be positive")
            sys.exit(1)
        config.editor.decode_timeout_s = args.decode_timeout
    if args.language:
        config.ui.language = args.language
    if args.download_dir:
        config.ui.download_dir = Path(args.download_dir).expanduser()


def main():
    """Main entry point for the application."""
    args = parse_arguments()

    config = load_config()
    settings_manager = SettingsManager()
    _apply_saved_settings(settings_manager, config)
    _apply_command_line_overrides(args, config)

    # Create and run application
    try:
        app = ClipTrimmer(config, settings_manager, debug=args.debug)
        app.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}")
        if args.debug:
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
