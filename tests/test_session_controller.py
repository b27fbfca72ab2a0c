"""Tests for the SessionController."""

import unittest
from unittest.mock import patch

from cliptrimmer.adapters import END, START
from cliptrimmer.audio import DecodeError, Waveform
from cliptrimmer.backend import BackendError, TransportError
from cliptrimmer.region import Region
from cliptrimmer.session import (
    DurationSource,
    EditorState,
    ManualOverlay,
    SessionStatus,
    Unavailable,
    WaveformBacked,
)

from fakes import FakePlayer, make_app, make_audio

CLIP = "https://clips.twitch.tv/SomeClip"
MEDIA_URL = "https://media.example/clip.mp4"


class SessionControllerTestCase(unittest.TestCase):
    """Base with a wired app; decoding is patched per test."""

    def setUp(self):
        self.app = make_app(width_px=200)
        self.controller = self.app.session_controller
        self.dispatcher = self.app.dispatcher
        self.backend = self.app.backend
        self.backend.get_clip_url.return_value = MEDIA_URL
        self.backend.fetch_media.return_value = b"media"

        self.players = []

        def waveform_factory():
            def player_factory(audio):
                player = FakePlayer()
                self.players.append(player)
                return player

            return Waveform(player_factory=player_factory)

        self.controller.waveform_factory = waveform_factory

        self.probe_patcher = patch(
            "cliptrimmer.controllers.session_controller.probe_duration",
            return_value=None,
        )
        self.decode_patcher = patch(
            "cliptrimmer.controllers.session_controller.decode_audio"
        )
        self.mock_probe = self.probe_patcher.start()
        self.mock_decode = self.decode_patcher.start()

    def tearDown(self):
        self.probe_patcher.stop()
        self.decode_patcher.stop()

    def _run_clip_url_task(self):
        # Task order after submit: clip URL first, backend metadata second
        self.dispatcher.run_task(0)

    def _load_waveform(self, duration=37.2):
        self.mock_decode.return_value = make_audio(duration)
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()
        self.dispatcher.run_all_tasks()
        return self.controller.session

    def _load_fallback(self, error=None):
        self.mock_decode.side_effect = error or DecodeError("unsupported format")
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()
        self.dispatcher.run_all_tasks()
        return self.controller.session


class TestSubmitUrl(SessionControllerTestCase):
    def test_empty_url_is_rejected(self):
        self.assertFalse(self.controller.submit_url("   "))
        self.assertIsNone(self.controller.session)
        self.app.window.show_error.assert_called_once()
        self.assertEqual(self.controller.editor_state, EditorState.AWAITING_CLIP)

    def test_submit_enters_loading(self):
        self.assertTrue(self.controller.submit_url(CLIP))

        session = self.controller.session
        self.assertEqual(session.status, SessionStatus.LOADING)
        self.assertEqual(self.controller.editor_state, EditorState.LOADING)
        self.assertIsInstance(session.surface, Unavailable)
        self.app.window.show_loading.assert_called_once_with("Loading clip...")
        self.assertEqual(len(self.dispatcher.tasks), 2)

    def test_fields_show_provisional_region(self):
        self.controller.submit_url(CLIP)
        self.assertEqual(self.app.window.start_field.text, "0.00")
        self.assertEqual(self.app.window.end_field.text, "30.00")


class TestWaveformMode(SessionControllerTestCase):
    def test_waveform_ready(self):
        session = self._load_waveform(37.2)

        self.assertEqual(self.controller.editor_state, EditorState.WAVEFORM_READY)
        self.assertEqual(session.status, SessionStatus.READY)
        self.assertIsInstance(session.surface, WaveformBacked)
        self.assertEqual(session.region.duration, 37.2)
        self.assertEqual(session.region.region, Region(0.0, 37.2))
        self.assertEqual(session.duration_source, DurationSource.DECODED)
        self.assertEqual(self.app.window.end_field.text, "37.20")
        self.app.window.hide_loading.assert_called()
        self.app.window.waveform_view.show_waveform.assert_called_once_with(
            session.surface.handle
        )

    def test_one_region_on_waveform(self):
        session = self._load_waveform()
        waveform = session.surface.handle
        self.assertEqual(len(waveform.regions), 1)

        waveform.create_region_from_drag(0.0, 5.0)
        waveform.create_region_from_drag(10.0, 15.0)
        self.assertEqual(len(waveform.regions), 1)
        self.assertEqual(session.region.region, Region(10.0, 15.0))

    def test_end_to_end_download(self):
        session = self._load_waveform(37.2)
        session.surface.handle.create_region_from_drag(5.0, 20.0)
        self.assertEqual(self.app.window.start_field.text, "5.00")
        self.assertEqual(self.app.window.end_field.text, "20.00")

        self.backend.download.return_value = b"mp3"
        self.app.file_manager.save_clip.return_value = "/tmp/clip.mp3"
        self.assertTrue(self.controller.download())
        self.dispatcher.run_all_tasks()

        self.backend.download.assert_called_once_with(CLIP, 5.0, 20.0)
        self.app.file_manager.save_clip.assert_called_once_with(b"mp3")
        self.app.window.set_status.assert_called_with(
            "Saved /tmp/clip.mp3", unittest.mock.ANY
        )
        self.assertFalse(self.controller.is_downloading)

    def test_playback_moves_start(self):
        session = self._load_waveform(37.2)
        player = self.players[-1]
        player.is_playing = True
        player.position = 3.5

        self.dispatcher.fire_all()

        self.assertEqual(session.region.start, 3.5)
        self.assertEqual(self.app.window.start_field.text, "3.50")

    def test_play_pause(self):
        self._load_waveform()
        self.controller.play_pause()
        self.players[-1].play_pause.assert_called_once()

    def test_field_commit(self):
        session = self._load_waveform(37.2)
        self.app.window.end_field.set_text("25")
        self.assertTrue(self.controller.commit_field(END))
        self.assertEqual(session.region.end, 25.0)

        self.app.window.start_field.set_text("30")
        self.assertFalse(self.controller.commit_field(START))
        self.assertEqual(self.app.window.start_field.text, "0.00")

    def test_step_field(self):
        session = self._load_waveform(37.2)
        self.assertTrue(self.controller.step_field(START, 1))
        self.assertAlmostEqual(session.region.start, 0.1)
        self.assertFalse(self.controller.step_field(END, 1))


class TestPlayerUnavailable(SessionControllerTestCase):
    def test_missing_audio_backend_opens_overlay(self):
        created = []

        def waveform_factory():
            def player_factory(audio):
                raise OSError("PortAudio library not found")

            waveform = Waveform(player_factory=player_factory)
            created.append(waveform)
            return waveform

        self.controller.waveform_factory = waveform_factory
        self.mock_decode.return_value = make_audio(37.2)
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()
        self.dispatcher.run_all_tasks()
        self.dispatcher.fire_all()

        session = self.controller.session
        self.assertEqual(self.controller.editor_state, EditorState.MANUAL_FALLBACK)
        self.assertIsInstance(session.surface, ManualOverlay)
        self.assertIsNone(self.controller.drag_adapter)
        self.assertTrue(created[0].is_destroyed)
        self.app.window.hide_loading.assert_called()
        self.app.window.set_editing_enabled.assert_called_with(True)

    def test_unexpected_load_error_opens_overlay(self):
        self.mock_decode.return_value = make_audio(37.2)
        with patch.object(Waveform, "load", side_effect=RuntimeError("boom")):
            self.controller.submit_url(CLIP)
            self._run_clip_url_task()
            self.dispatcher.run_all_tasks()

        self.assertEqual(self.controller.editor_state, EditorState.MANUAL_FALLBACK)
        self.assertIsNotNone(self.controller.overlay_adapter)

    def test_loading_progress_is_shown(self):
        self._load_waveform(37.2)
        self.app.window.show_loading.assert_any_call("Loading waveform... 50%")
        self.app.window.hide_loading.assert_called()


class TestManualFallback(SessionControllerTestCase):
    def test_decode_failure_opens_overlay(self):
        session = self._load_fallback()

        self.assertEqual(self.controller.editor_state, EditorState.MANUAL_FALLBACK)
        self.assertEqual(session.status, SessionStatus.READY)
        self.assertIsInstance(session.surface, ManualOverlay)
        self.assertEqual(session.surface.width_px, 200)
        self.assertIsNone(self.controller.drag_adapter)
        self.app.window.waveform_view.show_overlay.assert_called_once_with(
            self.controller.overlay_adapter
        )

    def test_provisional_duration_keeps_end_open(self):
        session = self._load_fallback()
        self.assertEqual(session.region.region, Region(0.0, 30.0))
        self.assertIsNone(session.region.duration)
        self.assertEqual(session.duration_source, DurationSource.PROVISIONAL)

    def test_timeout_switches_to_overlay(self):
        self.mock_decode.return_value = make_audio(37.2)
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()

        # Decode is still pending; the deadline fires first
        self.dispatcher.fire_all()
        session = self.controller.session
        self.assertEqual(self.controller.editor_state, EditorState.MANUAL_FALLBACK)

        # The late decode result must not bring the waveform back
        self.dispatcher.run_all_tasks()
        self.assertEqual(self.controller.editor_state, EditorState.MANUAL_FALLBACK)
        self.assertIsInstance(session.surface, ManualOverlay)
        self.assertIsNone(self.controller.drag_adapter)
        self.assertEqual(self.players, [])

        overlay = self.controller.overlay_adapter
        overlay.press(50)
        self.assertTrue(overlay.release(150))
        self.assertEqual(session.region.region, Region(7.5, 22.5))

    def test_backend_metadata_preferred(self):
        self.backend.get_audio_metadata.return_value = 40.0
        self.mock_decode.side_effect = DecodeError("unsupported")
        self.mock_probe.return_value = 35.0
        self.controller.submit_url(CLIP)
        self.dispatcher.run_task(1)  # backend metadata first
        self.dispatcher.run_all_tasks()

        session = self.controller.session
        self.assertEqual(session.duration_source, DurationSource.BACKEND)
        self.assertEqual(session.region.region, Region(0.0, 40.0))

        overlay = self.controller.overlay_adapter
        overlay.press(50)
        overlay.release(150)
        self.assertEqual(session.region.region, Region(10.0, 30.0))

    def test_media_metadata_used_without_backend(self):
        self.mock_probe.return_value = 35.0
        session = self._load_fallback()
        self.assertEqual(session.duration_source, DurationSource.MEDIA)
        self.assertEqual(session.region.region, Region(0.0, 35.0))

    def test_late_metadata_refines_untouched_region(self):
        self.backend.get_audio_metadata.return_value = 40.0
        self.mock_decode.side_effect = DecodeError("unsupported")
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()
        self.dispatcher.run_task(1)  # decode fails before metadata arrives

        session = self.controller.session
        self.assertEqual(session.duration_source, DurationSource.PROVISIONAL)

        self.dispatcher.run_all_tasks()
        self.assertEqual(session.duration_source, DurationSource.BACKEND)
        self.assertEqual(session.region.region, Region(0.0, 40.0))
        self.assertEqual(self.controller.overlay_adapter.duration, 40.0)

    def test_late_metadata_keeps_user_selection(self):
        self.backend.get_audio_metadata.return_value = 40.0
        self.mock_decode.side_effect = DecodeError("unsupported")
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()
        self.dispatcher.run_task(1)

        session = self.controller.session
        session.region.set_region(5.0, 12.0)
        self.dispatcher.run_all_tasks()

        self.assertEqual(session.region.region, Region(5.0, 12.0))
        self.assertEqual(session.region.duration, 40.0)

    def test_play_pause_not_available(self):
        self._load_fallback()
        self.controller.play_pause()
        self.app.window.set_status.assert_called_with(
            "Playback is not available for this clip.", unittest.mock.ANY
        )

    def test_download_uses_overlay_region(self):
        session = self._load_fallback()
        overlay = self.controller.overlay_adapter
        overlay.press(20)
        overlay.release(100)

        self.backend.download.return_value = b"mp3"
        self.controller.download()
        self.dispatcher.run_all_tasks()
        self.backend.download.assert_called_once_with(CLIP, 3.0, 15.0)
        self.assertEqual(session.region.region, Region(3.0, 15.0))


class TestLoadFailures(SessionControllerTestCase):
    def _assert_back_to_awaiting(self):
        self.assertEqual(self.controller.editor_state, EditorState.AWAITING_CLIP)
        self.assertEqual(self.controller.session.status, SessionStatus.FAILED)
        self.assertTrue(self.controller.session.is_closed)
        self.app.window.hide_loading.assert_called()
        self.app.window.set_editing_enabled.assert_called_with(False)

    def test_backend_error(self):
        self.backend.get_clip_url.side_effect = BackendError(404, "Clip not found")
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()

        self._assert_back_to_awaiting()
        self.app.window.show_error.assert_called_with(
            "Error", "Backend Error: Clip not found"
        )

    def test_transport_error(self):
        self.backend.get_clip_url.side_effect = TransportError("refused")
        self.controller.submit_url(CLIP)
        self._run_clip_url_task()

        self._assert_back_to_awaiting()
        message = self.app.window.show_error.call_args[0][1]
        self.assertIn("Cannot connect", message)


class TestStaleSessions(SessionControllerTestCase):
    def test_resubmit_during_loading(self):
        self.mock_decode.return_value = make_audio(37.2)
        self.controller.submit_url(CLIP)
        first = self.controller.session
        stale_tasks = list(self.dispatcher.tasks)

        self.controller.submit_url("https://clips.twitch.tv/Other")
        second = self.controller.session
        self.assertTrue(first.is_closed)

        # Complete the first session's requests; nothing may change
        for task in stale_tasks:
            self.dispatcher.run_task(self.dispatcher.tasks.index(task))
        self.assertEqual(self.controller.editor_state, EditorState.LOADING)
        self.assertIsInstance(second.surface, Unavailable)
        self.assertEqual(second.region.region, Region(0.0, 30.0))

    def test_new_session_releases_waveform(self):
        first = self._load_waveform(37.2)
        waveform = first.surface.handle
        player = self.players[-1]

        self.controller.submit_url("https://clips.twitch.tv/Other")

        self.assertTrue(waveform.is_destroyed)
        player.close.assert_called_once()
        self.assertIsNone(first.playback_adapter)
        self.assertEqual(self.controller.editor_state, EditorState.LOADING)

    def test_old_region_no_longer_drives_fields(self):
        first = self._load_waveform(37.2)
        self.controller.submit_url("https://clips.twitch.tv/Other")
        first.region.set_region(1.0, 2.0)
        self.assertEqual(self.app.window.start_field.text, "0.00")


class TestDownload(SessionControllerTestCase):
    def test_without_session(self):
        self.assertFalse(self.controller.download())
        self.app.window.show_error.assert_called_with(
            "Error", "Please enter a Twitch clip URL."
        )

    def test_while_loading(self):
        self.controller.submit_url(CLIP)
        self.assertFalse(self.controller.download())
        self.backend.download.assert_not_called()

    def test_single_download_at_a_time(self):
        self._load_waveform()
        self.assertTrue(self.controller.download())
        self.assertFalse(self.controller.download())

    def test_backend_error_is_shown_verbatim(self):
        self._load_waveform()
        self.backend.download.side_effect = BackendError(500, "ffmpeg failed")
        self.controller.download()
        self.dispatcher.run_all_tasks()
        self.app.window.show_error.assert_called_with("Error", "Error: ffmpeg failed")
        self.app.file_manager.save_clip.assert_not_called()

    def test_transport_error(self):
        self._load_waveform()
        self.backend.download.side_effect = TransportError("reset")
        self.controller.download()
        self.dispatcher.run_all_tasks()
        self.app.window.show_error.assert_called_with(
            "Error", "An error occurred while downloading the file."
        )

    def test_save_failure(self):
        self._load_waveform()
        self.backend.download.return_value = b"mp3"
        self.app.file_manager.save_clip.side_effect = OSError("disk full")
        self.controller.download()
        self.dispatcher.run_all_tasks()
        message = self.app.window.show_error.call_args[0][1]
        self.assertIn("disk full", message)


if __name__ == "__main__":
    unittest.main()
