"""Application configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..constants import NetworkConstants, RegionConstants, UIConstants


@dataclass
class NetworkConfig:
    """Backend connection settings."""

    backend_url: str = NetworkConstants.LOCAL_BACKEND_URL
    request_timeout: float = NetworkConstants.REQUEST_TIMEOUT


@dataclass
class EditorConfig:
    """Region editing settings.

    Attributes:
        provisional_end: Placeholder region end before the duration is known
        nudge_step: Keyboard adjustment step in seconds
        decode_timeout_s: Deadline for decoding the clip audio
        playback_poll_ms: Playback position polling interval
    """

    provisional_end: float = RegionConstants.DEFAULT_PROVISIONAL_END
    nudge_step: float = RegionConstants.NUDGE_STEP
    decode_timeout_s: float = UIConstants.DEFAULT_DECODE_TIMEOUT
    playback_poll_ms: int = UIConstants.PLAYBACK_POLL_MS

    def __post_init__(self):
        if self.provisional_end <= 0:
            raise ValueError("provisional_end must be positive")
        if self.nudge_step <= 0:
            raise ValueError("nudge_step must be positive")
        if self.decode_timeout_s <= 0:
            raise ValueError("decode_timeout_s must be positive")


@dataclass
class UIConfig:
    """User interface settings."""

    language: str = "en"
    download_dir: Path = field(default_factory=lambda: Path.home() / "Downloads")
    window_geometry: Optional[str] = None


@dataclass
class AppConfig:
    """Complete application configuration."""

    network: NetworkConfig = field(default_factory=NetworkConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def load_config() -> AppConfig:
    """Create the default configuration.

    User settings and command line arguments are applied on top of it
    by the application entry point.
    """
    return AppConfig()
