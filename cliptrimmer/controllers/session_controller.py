"""Session controller for the clip editing cycle."""

from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable, Optional

from ..adapters import (
    END,
    START,
    DragSelectionAdapter,
    NumericFieldAdapter,
    PixelOverlayAdapter,
    PlaybackPositionAdapter,
)
from ..audio import DecodeAttempt, DecodedAudio, Waveform, decode_audio, probe_duration
from ..backend import BackendError, TransportError
from ..constants import MsgType
from ..session import (
    ClipSession,
    DurationSource,
    EditorState,
    ManualOverlay,
    SessionStatus,
    WaveformBacked,
)

if TYPE_CHECKING:
    from ..app import ClipTrimmer

# Fallback duration ranking, higher wins
_SOURCE_RANK = {
    DurationSource.PROVISIONAL: 0,
    DurationSource.MEDIA: 1,
    DurationSource.BACKEND: 2,
    DurationSource.DECODED: 3,
}

EDITING_STATES = (EditorState.WAVEFORM_READY, EditorState.MANUAL_FALLBACK)


class SessionController:
    """Handles the "get clip -> edit -> download" cycle.

    This controller manages:
    - Creating and tearing down the single live ClipSession
    - The editor state machine (loading, waveform, manual fallback)
    - Wiring input adapters to the session's region model
    - Duration resolution from decoded audio, backend and media metadata
    - Requesting and saving the trimmed MP3

    Background results are applied only if their session is still the
    current one; anything else is stale and dropped.
    """

    def __init__(self, app: "ClipTrimmer"):
        """Initialize the session controller.

        Args:
            app: Reference to the main application instance
        """
        self.app = app
        self.session: Optional[ClipSession] = None
        self.editor_state = EditorState.AWAITING_CLIP
        self.waveform_factory: Callable[[], Waveform] = Waveform

        self.drag_adapter: Optional[DragSelectionAdapter] = None
        self.overlay_adapter: Optional[PixelOverlayAdapter] = None
        self.start_field_adapter: Optional[NumericFieldAdapter] = None
        self.end_field_adapter: Optional[NumericFieldAdapter] = None

        self.is_downloading = False

    # --- Helpers ---

    def _t(self, key: str, **kwargs) -> str:
        return self.app.translator.get(key, **kwargs)

    def _debug(self, message: str) -> None:
        if self.app.debug:
            print(f"[SessionController] {message}")

    def _is_current(self, session: ClipSession) -> bool:
        current = session is self.session and not session.is_closed
        if not current:
            self._debug(f"Ignoring stale result for session {session.session_id}")
        return current

    def _set_state(self, state: EditorState) -> None:
        self._debug(f"Editor state {self.editor_state.name} -> {state.name}")
        self.editor_state = state
        self.app.display_controller.set_editing_enabled(state in EDITING_STATES)

    # --- Clip loading ---

    def submit_url(self, url: Optional[str]) -> bool:
        """Start a new session for ``url``.

        Any previous session is torn down first, including one that is
        still loading.

        Args:
            url: Clip URL entered by the user

        Returns:
            True if loading started
        """
        url = (url or "").strip()
        if not url:
            self.app.display_controller.show_error(self._t("enterUrl"))
            return False

        self._teardown_session()

        editor = self.app.config.editor
        session = ClipSession(url, editor.provisional_end)
        session.status = SessionStatus.LOADING
        self.session = session
        self._debug(f"Session {session.session_id} started for {url}")

        self.app.broadcaster.attach(session.region)
        self._bind_field_adapters(session)

        self._set_state(EditorState.LOADING)
        self.app.display_controller.hide_editor()
        self.app.display_controller.show_loading(self._t("loadingClip"))

        backend = self.app.backend
        dispatcher = self.app.dispatcher
        dispatcher.submit(
            lambda: backend.get_clip_url(url),
            lambda future: self._on_clip_url(session, future),
        )
        dispatcher.submit(
            lambda: backend.get_audio_metadata(url),
            lambda future: self._on_backend_metadata(session, future),
        )
        return True

    def _on_clip_url(self, session: ClipSession, future: Future) -> None:
        if not self._is_current(session):
            return

        try:
            clip_url = future.result()
        except BackendError as e:
            self._fail_load(session, self._t("backendError", message=e.message))
            return
        except TransportError as e:
            self._debug(f"Transport error: {e}")
            self._fail_load(session, self._t("cannotConnect"))
            return
        except Exception as e:
            self._fail_load(session, self._t("downloadError", message=e))
            return

        session.clip_url = clip_url
        self._debug(f"Clip URL resolved: {clip_url}")

        attempt = DecodeAttempt(
            self.app.dispatcher,
            lambda: self._fetch_and_decode(session, clip_url),
            self.app.config.editor.decode_timeout_s,
            on_success=lambda audio: self._on_decoded(session, audio),
            on_failure=lambda error: self._on_decode_failed(session, error),
        )
        session.decode_attempt = attempt
        attempt.start()

    def _fetch_and_decode(self, session: ClipSession, clip_url: str) -> DecodedAudio:
        # Runs on a worker thread; results go back through the dispatcher
        payload = self.app.backend.fetch_media(clip_url)
        media_duration = probe_duration(payload)
        if media_duration is not None:
            self.app.dispatcher.post(self._on_media_metadata, session, media_duration)
        return decode_audio(payload)

    def _on_decoded(self, session: ClipSession, audio: DecodedAudio) -> None:
        if not self._is_current(session):
            return

        waveform = self.waveform_factory()
        waveform.on("loading", lambda percent: self._on_waveform_loading(session, percent))
        waveform.on("ready", lambda duration: self._on_waveform_ready(session, waveform, duration))
        waveform.on("error", lambda error: self._on_waveform_error(session, waveform, error))
        try:
            waveform.load(audio)
        except Exception as e:
            waveform.destroy()
            self._on_decode_failed(session, e)

    def _on_waveform_loading(self, session: ClipSession, percent: int) -> None:
        if session is not self.session or self.editor_state != EditorState.LOADING:
            return
        self._debug(f"Waveform loading {percent}%")
        self.app.display_controller.show_loading(
            self._t("loadingProgress", percent=percent)
        )

    def _on_waveform_ready(
        self, session: ClipSession, waveform: Waveform, duration: float
    ) -> None:
        if not self._is_current(session):
            waveform.destroy()
            return

        session.record_duration(DurationSource.DECODED, duration)
        session.surface = WaveformBacked(waveform)
        session.decode_attempt = None

        waveform.clear_regions()
        waveform.add_region(0.0, duration)
        self._apply_initial_duration(session, duration, DurationSource.DECODED)

        self.drag_adapter = DragSelectionAdapter(
            session.region, waveform, self.app.broadcaster
        )
        self.drag_adapter.enable()
        self.overlay_adapter = None

        playback = PlaybackPositionAdapter(
            session.region,
            waveform,
            self.app.dispatcher,
            self.app.window.start_field.has_focus,
            self.app.config.editor.playback_poll_ms,
        )
        session.playback_adapter = playback
        playback.enable()

        self._open_editor(session, EditorState.WAVEFORM_READY)
        self.app.display_controller.set_status(self._t("editorReady"))

    def _on_waveform_error(
        self, session: ClipSession, waveform: Waveform, error: Exception
    ) -> None:
        waveform.destroy()
        if not self._is_current(session):
            return
        self._on_decode_failed(session, error)

    def _on_decode_failed(self, session: ClipSession, error: Exception) -> None:
        if not self._is_current(session) or self.editor_state != EditorState.LOADING:
            return
        self._debug(f"Decoding failed, using manual overlay: {error}")
        session.decode_attempt = None

        duration, source = session.best_fallback_duration()
        self._apply_initial_duration(session, duration, source)

        width = self.app.display_controller.get_overlay_width()
        view = self.app.window.waveform_view if self.app.window else None
        self.overlay_adapter = PixelOverlayAdapter(
            session.region,
            width,
            assumed_duration=duration,
            on_preview=view.show_preview if view is not None else None,
        )
        self.overlay_adapter.enable()
        self.drag_adapter = None
        session.surface = ManualOverlay(width)

        self._open_editor(session, EditorState.MANUAL_FALLBACK)
        self.app.display_controller.set_status(
            self._t("fallbackNotice", reason=error), MsgType.DEFAULT
        )

    def _open_editor(self, session: ClipSession, state: EditorState) -> None:
        session.status = SessionStatus.READY
        self.start_field_adapter.enable()
        self.end_field_adapter.enable()
        self._set_state(state)
        self.app.display_controller.hide_loading()
        self.app.display_controller.show_editor(session.surface, self.overlay_adapter)
        self.app.broadcaster.refresh()

    def _fail_load(self, session: ClipSession, message: str) -> None:
        session.status = SessionStatus.FAILED
        self._set_state(EditorState.LOAD_FAILED)
        session.close()
        self.app.display_controller.hide_loading()
        self.app.display_controller.hide_editor()
        self.app.display_controller.show_error(message)
        self._set_state(EditorState.AWAITING_CLIP)

    # --- Duration resolution ---

    def _apply_initial_duration(
        self, session: ClipSession, duration: float, source: DurationSource
    ) -> None:
        """Open the region over the whole clip."""
        if source != DurationSource.PROVISIONAL:
            session.region.set_duration(duration)
        session.region.set_region(0.0, duration)
        session.duration_source = source
        session.applied_duration = duration
        self._debug(f"Duration {duration:.2f}s from {source.value}")

    def _on_backend_metadata(self, session: ClipSession, future: Future) -> None:
        try:
            duration = future.result()
        except (BackendError, TransportError, ValueError) as e:
            self._debug(f"Metadata lookup failed: {e}")
            return
        if duration is None or not self._is_current(session):
            return
        session.record_duration(DurationSource.BACKEND, duration)
        self._refine_duration(session, DurationSource.BACKEND, duration)

    def _on_media_metadata(self, session: ClipSession, duration: float) -> None:
        if not self._is_current(session):
            return
        session.record_duration(DurationSource.MEDIA, duration)
        self._refine_duration(session, DurationSource.MEDIA, duration)

    def _refine_duration(
        self, session: ClipSession, source: DurationSource, duration: float
    ) -> None:
        """Apply a better duration that arrived after the fallback opened.

        While loading, candidates are only recorded; the editor picks the
        best one when it opens.
        """
        if self.editor_state != EditorState.MANUAL_FALLBACK:
            return
        if _SOURCE_RANK[source] <= _SOURCE_RANK[session.duration_source]:
            return

        region = session.region
        untouched = region.start == 0.0 and region.end == session.applied_duration
        region.set_duration(duration)
        if untouched:
            region.set_region(0.0, duration)
        session.duration_source = source
        session.applied_duration = duration
        if self.overlay_adapter is not None:
            self.overlay_adapter.assumed_duration = duration
        self._debug(f"Duration refined to {duration:.2f}s from {source.value}")

    # --- Teardown ---

    def _teardown_session(self) -> None:
        """Release the current session before a new one starts."""
        if self.drag_adapter is not None:
            self.drag_adapter.disable()
            self.drag_adapter = None
        if self.overlay_adapter is not None:
            self.overlay_adapter.disable()
            self.overlay_adapter = None
        for adapter in (self.start_field_adapter, self.end_field_adapter):
            if adapter is not None:
                adapter.disable()

        if self.session is not None:
            self._debug(f"Closing session {self.session.session_id}")
            self.session.close()

    def shutdown(self) -> None:
        self._teardown_session()
        self.app.broadcaster.detach()
        self.session = None

    # --- Editing ---

    def _bind_field_adapters(self, session: ClipSession) -> None:
        window = self.app.window
        step = self.app.config.editor.nudge_step
        self.start_field_adapter = NumericFieldAdapter(
            session.region, window.start_field, START, step
        )
        self.end_field_adapter = NumericFieldAdapter(
            session.region, window.end_field, END, step
        )

    def commit_field(self, bound: str) -> bool:
        """Apply the typed value of the start or end field."""
        adapter = self._field_adapter(bound)
        if adapter is None:
            return False
        accepted = adapter.commit()
        if not accepted and adapter.enabled:
            self.app.display_controller.set_status(
                self._t("invalidTime"), MsgType.ERROR
            )
        return accepted

    def step_field(self, bound: str, direction: int) -> bool:
        """Nudge the start or end by one step in ``direction``."""
        adapter = self._field_adapter(bound)
        if adapter is None:
            return False
        return adapter.step(direction)

    def _field_adapter(self, bound: str) -> Optional[NumericFieldAdapter]:
        if self.session is None or not self.session.is_editable:
            return None
        return self.start_field_adapter if bound == START else self.end_field_adapter

    def play_pause(self) -> None:
        """Toggle playback in waveform mode."""
        session = self.session
        if session is not None and isinstance(session.surface, WaveformBacked):
            session.surface.handle.play_pause()
        else:
            self._debug("Waveform not ready")
            self.app.display_controller.set_status(self._t("notReady"))

    # --- Download ---

    def download(self) -> bool:
        """Request the trimmed MP3 for the current region.

        Returns:
            True if the request was sent
        """
        session = self.session
        if session is None or not session.source_url:
            self.app.display_controller.show_error(self._t("enterUrl"))
            return False

        region = session.region.region
        if not session.is_editable or region.start >= region.end:
            self.app.display_controller.show_error(self._t("invalidRegion"))
            return False

        if self.is_downloading:
            return False

        self.is_downloading = True
        self._debug(f"Downloading with region {region}")
        self.app.display_controller.show_loading(self._t("loading"))

        url = session.source_url
        self.app.dispatcher.submit(
            lambda: self.app.backend.download(url, region.start, region.end),
            self._on_download_done,
        )
        return True

    def _on_download_done(self, future: Future) -> None:
        self.is_downloading = False
        self.app.display_controller.hide_loading()

        try:
            payload = future.result()
        except BackendError as e:
            self.app.display_controller.show_error(
                self._t("downloadError", message=e.message)
            )
            return
        except TransportError as e:
            self._debug(f"Download transport error: {e}")
            self.app.display_controller.show_error(self._t("downloadFailed"))
            return

        try:
            path = self.app.file_manager.save_clip(payload)
        except OSError as e:
            self.app.display_controller.show_error(self._t("saveFailed", message=e))
            return

        self.app.display_controller.set_status(self._t("saved", path=path))
        self.app.display_controller.schedule_status_reset()
