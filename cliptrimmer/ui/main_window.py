"""Main window UI for ClipTrimmer."""

import tkinter as tk
from typing import Callable, Dict, Optional

from ..adapters import END, START
from ..constants import MsgType, UIConstants
from ..utils.tk_compat import deferred_error
from .i18n import SUPPORTED_LANGUAGES, Translator
from .time_field import TimeField
from .waveform_view import WaveformView


class MainWindow:
    """Main application window.

    Layout, top to bottom:
    - URL entry, Get Clip button and language buttons
    - Loading indicator
    - Editor: waveform view, start/end fields, Play/Pause and Download
    - Status line

    The window holds no editing logic; every user action goes through
    ``app_callbacks``.

    Attributes:
        root: Tkinter root window
        translator: Active translator
        waveform_view: Waveform / overlay selection surface
        start_field: Start time field
        end_field: End time field
    """

    def __init__(
        self,
        root: tk.Tk,
        translator: Translator,
        app_callbacks: Optional[Dict[str, Callable]] = None,
        geometry: Optional[str] = None,
    ):
        """Initialize the main window.

        Args:
            root: Tkinter root window
            translator: Translator for all labels
            app_callbacks: Application callbacks
            geometry: Initial window geometry
        """
        self.root = root
        self.window = root
        self.translator = translator
        self.app_callbacks = app_callbacks if app_callbacks is not None else {}

        self._setup_window(geometry or UIConstants.DEFAULT_WINDOW_GEOMETRY)
        self._create_ui()
        self.apply_language(translator)
        self.hide_loading()
        self.hide_editor()
        self.set_editing_enabled(False)

    def _callback(self, name: str, *args) -> None:
        callback = self.app_callbacks.get(name)
        if callback:
            callback(*args)

    def _setup_window(self, geometry: str) -> None:
        self.root.geometry(geometry)
        self.root.configure(bg=UIConstants.COLOR_BACKGROUND)
        self.root.protocol("WM_DELETE_WINDOW", lambda: self._callback("quit"))

    # --- Layout ---

    def _create_ui(self) -> None:
        self.main_frame = tk.Frame(self.root, bg=UIConstants.COLOR_BACKGROUND)
        self.main_frame.pack(
            fill=tk.BOTH,
            expand=True,
            padx=UIConstants.MAIN_FRAME_PADDING,
            pady=UIConstants.MAIN_FRAME_PADDING,
        )

        self._create_url_bar()

        self.loading_var = tk.StringVar(value="")
        self.loading_label = tk.Label(
            self.main_frame,
            textvariable=self.loading_var,
            fg=UIConstants.COLOR_WAVEFORM,
            bg=UIConstants.COLOR_BACKGROUND,
        )

        self._create_editor()

        self.status_var = tk.StringVar(value="")
        self.status_label = tk.Label(
            self.main_frame,
            textvariable=self.status_var,
            fg=UIConstants.COLOR_STATUS_NORMAL,
            bg=UIConstants.COLOR_BACKGROUND,
            anchor=tk.W,
        )
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X)

    def _create_url_bar(self) -> None:
        self.url_frame = tk.Frame(self.main_frame, bg=UIConstants.COLOR_BACKGROUND)
        self.url_frame.pack(fill=tk.X, pady=(0, UIConstants.FRAME_SPACING))

        self.url_var = tk.StringVar(value="")
        self.url_entry = tk.Entry(self.url_frame, textvariable=self.url_var)
        self.url_entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.url_entry.bind("<Return>", lambda e: self._callback("submit_url"))

        self.get_clip_button = tk.Button(
            self.url_frame, command=lambda: self._callback("submit_url")
        )
        self.get_clip_button.pack(side=tk.LEFT, padx=(UIConstants.FRAME_SPACING, 0))

        self.language_buttons = {}
        for language in SUPPORTED_LANGUAGES:
            button = tk.Button(
                self.url_frame,
                text=language.upper(),
                command=lambda lang=language: self._callback("set_language", lang),
            )
            button.pack(side=tk.RIGHT, padx=(4, 0))
            self.language_buttons[language] = button

    def _create_editor(self) -> None:
        self.editor_frame = tk.Frame(self.main_frame, bg=UIConstants.COLOR_BACKGROUND)

        self.waveform_view = WaveformView(self.editor_frame)
        self.waveform_view.pack(fill=tk.X, pady=(0, UIConstants.FRAME_SPACING))

        controls = tk.Frame(self.editor_frame, bg=UIConstants.COLOR_BACKGROUND)
        controls.pack(fill=tk.X)

        self.start_field = TimeField(
            controls,
            "",
            on_commit=lambda: self._callback("commit_field", START),
            on_step=lambda direction: self._callback("step_field", START, direction),
        )
        self.start_field.pack(side=tk.LEFT)

        self.end_field = TimeField(
            controls,
            "",
            on_commit=lambda: self._callback("commit_field", END),
            on_step=lambda direction: self._callback("step_field", END, direction),
        )
        self.end_field.pack(side=tk.LEFT, padx=(UIConstants.FRAME_SPACING, 0))

        self.download_button = tk.Button(
            controls, command=lambda: self._callback("download")
        )
        self.download_button.pack(side=tk.RIGHT)

        self.play_button = tk.Button(
            controls, command=lambda: self._callback("play_pause")
        )
        self.play_button.pack(side=tk.RIGHT, padx=(0, UIConstants.FRAME_SPACING))

    # --- Language ---

    def apply_language(self, translator: Translator) -> None:
        """Relabel every widget with ``translator``."""
        self.translator = translator
        self.root.title(translator.get("title"))
        self.get_clip_button.config(text=translator.get("getClip"))
        self.play_button.config(text=translator.get("playPause"))
        self.download_button.config(text=translator.get("download"))
        self.start_field.set_label(translator.get("start"))
        self.end_field.set_label(translator.get("end"))
        self.waveform_view.set_hint(translator.get("overlayHint"))
        for language, button in self.language_buttons.items():
            button.config(relief=tk.SUNKEN if language == translator.language else tk.RAISED)

    # --- Window interface used by the controllers ---

    def get_url(self) -> str:
        return self.url_var.get()

    def set_status(self, message: str, msg_type: MsgType = MsgType.TEMPORARY) -> None:
        """Set status message.

        Args:
            message: Status text
            msg_type: Error messages are shown in red
        """
        color = (
            UIConstants.COLOR_STATUS_ERROR
            if msg_type == MsgType.ERROR
            else UIConstants.COLOR_STATUS_NORMAL
        )
        self.status_label.config(fg=color)
        self.status_var.set(message)

    def show_error(self, title: str, message: str) -> None:
        deferred_error(self.root, title, message)

    def show_loading(self, text: str) -> None:
        self.loading_var.set(text)
        self.loading_label.pack(fill=tk.X, after=self.url_frame)

    def hide_loading(self) -> None:
        self.loading_var.set("")
        self.loading_label.pack_forget()

    def show_editor(self) -> None:
        self.editor_frame.pack(fill=tk.BOTH, expand=True, before=self.status_label)

    def hide_editor(self) -> None:
        self.editor_frame.pack_forget()

    def set_editing_enabled(self, enabled: bool) -> None:
        state = tk.NORMAL if enabled else tk.DISABLED
        self.start_field.set_enabled(enabled)
        self.end_field.set_enabled(enabled)
        self.play_button.config(state=state)
        self.download_button.config(state=state)

    def focus_url(self) -> None:
        self.url_entry.focus_set()
