"""Tests for WaveformView gesture handling."""

import unittest
from unittest.mock import Mock

from cliptrimmer.audio import Waveform
from cliptrimmer.ui.waveform_view import MODE_WAVEFORM, WaveformView

from fakes import FakePlayer, make_audio


class TestEdgeDrag(unittest.TestCase):
    """Gestures on a 10 second clip, 10 pixels per second."""

    def setUp(self):
        self.waveform = Waveform(player_factory=lambda audio: FakePlayer())
        self.waveform.load(make_audio(10.0))
        self.region = self.waveform.add_region(2.0, 6.0)

        # Skip the canvas; only the gesture state is exercised
        self.view = WaveformView.__new__(WaveformView)
        self.view.mode = MODE_WAVEFORM
        self.view.overlay = None
        self.view.waveform = self.waveform
        self.view._pixel_to_time = lambda x: x / 10.0
        self.view._clear_gesture()

    def _grab(self, pixel_x, edge):
        self.view._press_x = pixel_x
        self.view._press_time = pixel_x / 10.0
        self.view._grab_region = self.region
        self.view._grab_edge = edge

    def test_resize_end(self):
        self._grab(60, "end")
        self.view._on_drag(Mock(x=75))
        self.assertEqual((self.region.start, self.region.end), (2.0, 7.5))

    def test_start_dragged_past_end_keeps_following_pointer(self):
        self._grab(20, "start")

        self.view._on_drag(Mock(x=80))
        self.assertEqual((self.region.start, self.region.end), (6.0, 8.0))
        self.assertEqual(self.view._grab_edge, "end")

        self.view._on_drag(Mock(x=90))
        self.assertEqual((self.region.start, self.region.end), (6.0, 9.0))

    def test_end_dragged_past_start(self):
        self._grab(60, "end")

        self.view._on_drag(Mock(x=10))
        self.assertEqual((self.region.start, self.region.end), (1.0, 2.0))
        self.assertEqual(self.view._grab_edge, "start")

        self.view._on_drag(Mock(x=5))
        self.assertEqual((self.region.start, self.region.end), (0.5, 2.0))

    def test_move_body(self):
        self._grab(30, "body")
        self.view._on_drag(Mock(x=50))
        self.assertEqual((self.region.start, self.region.end), (4.0, 8.0))


if __name__ == "__main__":
    unittest.main()
