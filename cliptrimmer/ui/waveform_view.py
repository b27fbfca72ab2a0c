"""Waveform display and selection surface.

The view has three modes:
- empty: nothing loaded
- waveform: decoded peaks with a draggable region
- overlay: a plain bar mapped linearly from pixels to seconds, used
  when the audio could not be decoded
"""

import tkinter as tk
from typing import TYPE_CHECKING, Optional

import numpy as np
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from ..constants import UIConstants

if TYPE_CHECKING:
    from ..adapters import PixelOverlayAdapter
    from ..audio import Waveform, WaveformRegion

MODE_EMPTY = "empty"
MODE_WAVEFORM = "waveform"
MODE_OVERLAY = "overlay"


class WaveformView:
    """Matplotlib canvas embedded in Tk that shows the clip and the selection.

    In waveform mode mouse gestures are turned into region events on the
    Waveform instance (create, resize, move); the drag selection adapter
    picks them up from there. In overlay mode raw pixel positions go to
    the pixel overlay adapter.
    """

    def __init__(self, parent: tk.Widget):
        self.parent = parent
        self.mode = MODE_EMPTY
        self.waveform: Optional["Waveform"] = None
        self.overlay: Optional["PixelOverlayAdapter"] = None
        self.hint_text = ""

        self.fig = Figure(
            figsize=(
                UIConstants.WAVEFORM_WIDTH_INCHES,
                UIConstants.WAVEFORM_HEIGHT_INCHES,
            ),
            dpi=UIConstants.WAVEFORM_DPI,
            facecolor=UIConstants.COLOR_BACKGROUND,
        )
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        self.canvas = FigureCanvasTkAgg(self.fig, master=parent)
        self.canvas_widget = self.canvas.get_tk_widget()
        self.canvas_widget.config(highlightthickness=0)

        self._region_patch = None
        self._preview_patch = None

        # Gesture state
        self._press_x: Optional[float] = None
        self._press_time: Optional[float] = None
        self._grab_region: Optional["WaveformRegion"] = None
        self._grab_edge: Optional[str] = None  # "start", "end" or "body"

        self._setup_event_bindings()
        self.clear()

    def pack(self, **kwargs) -> None:
        self.canvas_widget.pack(**kwargs)

    def _setup_event_bindings(self) -> None:
        self.canvas_widget.bind("<ButtonPress-1>", self._on_press)
        self.canvas_widget.bind("<B1-Motion>", self._on_drag)
        self.canvas_widget.bind("<ButtonRelease-1>", self._on_release)
        self.canvas_widget.bind("<Configure>", self._on_resize)

    # --- Geometry ---

    def get_width_px(self) -> int:
        """Current drawing width in pixels."""
        width = self.canvas_widget.winfo_width()
        if width <= 1:
            # Not mapped yet; fall back to the requested figure size
            width = int(self.fig.get_figwidth() * self.fig.get_dpi())
        return width

    def _duration(self) -> float:
        if self.mode == MODE_WAVEFORM and self.waveform is not None:
            return self.waveform.get_duration()
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            return self.overlay.duration
        return 0.0

    def _pixel_to_time(self, pixel_x: float) -> Optional[float]:
        width = self.get_width_px()
        duration = self._duration()
        if width <= 0 or duration <= 0:
            return None
        return max(0.0, min(pixel_x / width, 1.0)) * duration

    def _edge_tolerance_s(self) -> float:
        width = self.get_width_px()
        if width <= 0:
            return 0.0
        return UIConstants.EDGE_GRAB_PX / width * self._duration()

    # --- Modes ---

    def show_waveform(self, waveform: "Waveform") -> None:
        """Draw decoded peaks and route gestures to ``waveform``."""
        self.mode = MODE_WAVEFORM
        self.waveform = waveform
        self.overlay = None
        self._reset_axes()

        peaks = waveform.peaks
        if len(peaks):
            x = np.linspace(0.0, waveform.get_duration(), len(peaks))
            self.ax.fill_between(
                x, -peaks, peaks, color=UIConstants.COLOR_WAVEFORM, linewidth=0
            )
        self.ax.set_xlim(0.0, waveform.get_duration())
        self._redraw_region()

    def show_overlay(self, adapter: "PixelOverlayAdapter") -> None:
        """Show the manual selection bar driven by ``adapter``."""
        self.mode = MODE_OVERLAY
        self.waveform = None
        self.overlay = adapter
        adapter.set_width(self.get_width_px())
        self._reset_axes()

        self.ax.set_xlim(0.0, adapter.duration)
        self.ax.axhspan(-0.2, 0.2, color=UIConstants.COLOR_OVERLAY_HINT, alpha=0.3)
        if self.hint_text:
            self.ax.text(
                0.5,
                0.75,
                self.hint_text,
                transform=self.ax.transAxes,
                ha="center",
                color=UIConstants.COLOR_OVERLAY_HINT,
            )
        self._redraw_region()

    def clear(self) -> None:
        self.mode = MODE_EMPTY
        self.waveform = None
        self.overlay = None
        self._clear_gesture()
        self._reset_axes()
        self.canvas.draw_idle()

    def set_hint(self, text: str) -> None:
        self.hint_text = text
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            self.show_overlay(self.overlay)

    def _reset_axes(self) -> None:
        self.ax.clear()
        self.ax.set_facecolor(UIConstants.COLOR_BACKGROUND)
        self.ax.set_ylim(-1.05, 1.05)
        self.ax.set_axis_off()
        self._region_patch = None
        self._preview_patch = None

    # --- Region drawing ---

    def show_region(self, start: float, end: float) -> None:
        """Region surface hook called by the sync broadcaster."""
        waveform = self.waveform
        if self.mode == MODE_WAVEFORM and waveform is not None:
            if not waveform.is_destroyed:
                waveform.update_region(start, end)
        self._remove_patch("_preview_patch")
        self._draw_span("_region_patch", start, end)

    def show_preview(self, start: float, end: float) -> None:
        """Draw the selection being dragged before it is committed."""
        self._draw_span("_preview_patch", start, end)

    def _redraw_region(self) -> None:
        if self.mode == MODE_WAVEFORM and self.waveform is not None:
            regions = self.waveform.regions
            if regions:
                self._draw_span("_region_patch", regions[-1].start, regions[-1].end)
                return
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            model = self.overlay.model
            self._draw_span("_region_patch", model.start, model.end)
            return
        self.canvas.draw_idle()

    def _draw_span(self, attr: str, start: float, end: float) -> None:
        self._remove_patch(attr)
        if self.mode != MODE_EMPTY:
            patch = self.ax.axvspan(
                start,
                end,
                color=UIConstants.COLOR_REGION,
                alpha=UIConstants.REGION_ALPHA,
            )
            setattr(self, attr, patch)
        self.canvas.draw_idle()

    def _remove_patch(self, attr: str) -> None:
        patch = getattr(self, attr)
        if patch is not None:
            patch.remove()
            setattr(self, attr, None)

    # --- Mouse handling ---

    def _on_resize(self, event) -> None:
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            self.overlay.set_width(event.width)

    def _on_press(self, event) -> None:
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            self.overlay.press(event.x)
            return
        if self.mode != MODE_WAVEFORM or self.waveform is None:
            return

        time_seconds = self._pixel_to_time(event.x)
        if time_seconds is None:
            return
        self._press_x = event.x
        self._press_time = time_seconds
        self._grab_region, self._grab_edge = self._hit_test(time_seconds)

    def _hit_test(self, time_seconds: float):
        tolerance = self._edge_tolerance_s()
        for region in reversed(self.waveform.regions):
            if abs(time_seconds - region.start) <= tolerance:
                return region, "start"
            if abs(time_seconds - region.end) <= tolerance:
                return region, "end"
        region = self.waveform.region_at(time_seconds)
        if region is not None:
            return region, "body"
        return None, None

    def _on_drag(self, event) -> None:
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            self.overlay.move(event.x)
            return
        if self._press_x is None or self.waveform is None:
            return

        time_seconds = self._pixel_to_time(event.x)
        if time_seconds is None:
            return

        region = self._grab_region
        if self._grab_edge in ("start", "end"):
            self._drag_edge(region, time_seconds)
        elif self._grab_edge == "body":
            self.waveform.move_region(region, time_seconds - self._press_time)
            self._press_time = time_seconds
        elif abs(event.x - self._press_x) >= UIConstants.DRAG_SLOP_PX:
            self.show_preview(
                min(self._press_time, time_seconds), max(self._press_time, time_seconds)
            )

    def _drag_edge(self, region: "WaveformRegion", time_seconds: float) -> None:
        if self._grab_edge == "start":
            start, end = time_seconds, region.end
        else:
            start, end = region.start, time_seconds
        # Crossing the opposite edge swaps the bounds, so the pointer now
        # holds the other edge
        if start > end:
            self._grab_edge = "end" if self._grab_edge == "start" else "start"
        self.waveform.resize_region(region, start, end)

    def _on_release(self, event) -> None:
        if self.mode == MODE_OVERLAY and self.overlay is not None:
            self.overlay.release(event.x)
            self._remove_patch("_preview_patch")
            self._redraw_region()
            return
        if self._press_x is None or self.waveform is None:
            self._clear_gesture()
            return

        time_seconds = self._pixel_to_time(event.x)
        dragged = abs(event.x - self._press_x) >= UIConstants.DRAG_SLOP_PX
        if self._grab_edge is None and time_seconds is not None:
            if dragged:
                self.waveform.create_region_from_drag(self._press_time, time_seconds)
            else:
                self.waveform.seek(time_seconds)

        self._clear_gesture()
        self._remove_patch("_preview_patch")
        self._redraw_region()

    def _clear_gesture(self) -> None:
        self._press_x = None
        self._press_time = None
        self._grab_region = None
        self._grab_edge = None
