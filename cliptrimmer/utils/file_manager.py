"""File management for downloaded clips."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..constants import FileConstants


class DownloadFileManager:
    """Stores trimmed MP3 files in the download directory.

    File Naming Convention:
        clip-<UTC timestamp>.mp3, e.g. clip-2024-05-01T12-30-45.mp3
        A name that already exists gets a numeric suffix: clip-...-1.mp3

    Attributes:
        download_dir: Target directory for downloaded clips
    """

    def __init__(self, download_dir: Path):
        """Initialize the file manager.

        Args:
            download_dir: Directory for downloads (created on first save)
        """
        self.download_dir = Path(download_dir)

    @staticmethod
    def build_filename(now: Optional[datetime] = None) -> str:
        """Build the timestamped file name for a download.

        Args:
            now: Timestamp to use, defaults to the current UTC time

        Returns:
            File name like ``clip-2024-05-01T12-30-45.mp3``
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        timestamp = now.strftime(FileConstants.TIMESTAMP_FORMAT)
        return (
            f"{FileConstants.DOWNLOAD_PREFIX}-{timestamp}"
            f"{FileConstants.DOWNLOAD_EXTENSION}"
        )

    def get_download_path(self, now: Optional[datetime] = None) -> Path:
        """Get a free path for a new download.

        Returns:
            Path: Full path that does not exist yet
        """
        path = self.download_dir / self.build_filename(now)
        stem = path.stem
        counter = 1
        while path.exists():
            path = self.download_dir / (
                f"{stem}-{counter}{FileConstants.DOWNLOAD_EXTENSION}"
            )
            counter += 1
        return path

    def save_clip(self, payload: bytes, now: Optional[datetime] = None) -> Path:
        """Write an MP3 payload to the download directory.

        Args:
            payload: MP3 bytes returned by the backend
            now: Timestamp for the file name

        Returns:
            Path of the written file

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.download_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_download_path(now)
        path.write_bytes(payload)
        return path
