"""Labelled entry for a start or end time."""

import tkinter as tk
from typing import Callable, Optional

from ..constants import KeyBindings, UIConstants


class TimeField:
    """A label plus entry holding a time in seconds.

    Implements the text field interface used by the numeric field
    adapter (get_text, set_text, has_focus).
    """

    ENTRY_WIDTH = 8

    def __init__(
        self,
        parent: tk.Widget,
        label_text: str,
        on_commit: Optional[Callable[[], None]] = None,
        on_step: Optional[Callable[[int], None]] = None,
    ):
        """Initialize the field.

        Args:
            parent: Parent widget
            label_text: Text of the label in front of the entry
            on_commit: Called on Return and when the entry loses focus
            on_step: Called with +1 or -1 on Up/Down
        """
        self.on_commit = on_commit
        self.on_step = on_step

        self.frame = tk.Frame(parent, bg=UIConstants.COLOR_BACKGROUND)
        self.label = tk.Label(
            self.frame,
            text=label_text,
            fg=UIConstants.COLOR_WAVEFORM,
            bg=UIConstants.COLOR_BACKGROUND,
        )
        self.label.pack(side=tk.LEFT, padx=(0, 4))

        self.var = tk.StringVar(value="")
        self.entry = tk.Entry(
            self.frame, textvariable=self.var, width=self.ENTRY_WIDTH, justify=tk.RIGHT
        )
        self.entry.pack(side=tk.LEFT)

        self.entry.bind(f"<{KeyBindings.SUBMIT}>", self._on_commit)
        self.entry.bind("<FocusOut>", self._on_commit)
        self.entry.bind(f"<{KeyBindings.FIELD_STEP_UP}>", lambda e: self._on_step(1))
        self.entry.bind(f"<{KeyBindings.FIELD_STEP_DOWN}>", lambda e: self._on_step(-1))

    def pack(self, **kwargs) -> None:
        self.frame.pack(**kwargs)

    # --- Text field interface ---

    def get_text(self) -> str:
        return self.var.get()

    def set_text(self, text: str) -> None:
        self.var.set(text)

    def has_focus(self) -> bool:
        try:
            return self.entry.focus_get() is self.entry
        except (KeyError, tk.TclError):
            # focus_get fails while a dialog from another toplevel has focus
            return False

    # --- Configuration ---

    def set_label(self, text: str) -> None:
        self.label.config(text=text)

    def set_enabled(self, enabled: bool) -> None:
        self.entry.config(state=tk.NORMAL if enabled else tk.DISABLED)

    def _on_commit(self, event=None) -> str:
        if self.on_commit:
            self.on_commit()
        return "break"

    def _on_step(self, direction: int) -> str:
        if self.on_step:
            self.on_step(direction)
        return "break"
