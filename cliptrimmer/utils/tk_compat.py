"""Tkinter helpers."""

import tkinter as tk
from tkinter import messagebox


def deferred_error(parent: tk.Misc, title: str, message: str) -> None:
    """Show an error messagebox on the next event loop cycle.

    Errors are often reported from inside event callbacks or while the
    editor is being torn down; deferring keeps the modal dialog out of
    that callback.

    Args:
        parent: The parent widget (typically the main window)
        title: Dialog title
        message: Error message text
    """
    parent.after(0, lambda: messagebox.showerror(title, message, parent=parent))
