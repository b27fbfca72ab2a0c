"""HTTP client for the clip conversion backend.

The backend resolves Twitch clip URLs to media URLs, optionally reports
the audio duration, and renders the trimmed MP3. It is reached with
JSON POST requests; errors come back as plain text bodies.
"""

import math
from typing import Optional

import requests

from ..constants import NetworkConstants


class BackendError(Exception):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class TransportError(Exception):
    """The backend could not be reached at all."""


class BackendClient:
    """Talks to the clip conversion backend.

    Attributes:
        base_url: Backend root URL without trailing slash
        timeout: Default request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = NetworkConstants.REQUEST_TIMEOUT,
        http: Optional[requests.Session] = None,
        debug: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()
        self.debug = debug

    def get_clip_url(self, url: str) -> str:
        """Resolve a Twitch clip page URL to its media URL.

        Args:
            url: Clip URL entered by the user

        Returns:
            Direct media URL of the clip

        Raises:
            BackendError: Non-200 answer or no clip URL in the response
            TransportError: Backend unreachable
        """
        response = self._post(NetworkConstants.ENDPOINT_CLIP_URL, {"url": url})
        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError:
            raise BackendError(response.status_code, "Invalid response from backend")

        clip_url = data.get("clipUrl") if isinstance(data, dict) else None
        if not clip_url:
            raise BackendError(
                response.status_code, "No clip URL received from backend"
            )
        return clip_url

    def get_audio_metadata(self, url: str) -> Optional[float]:
        """Ask the backend for the clip duration.

        The endpoint is optional; any failure yields None.

        Args:
            url: Clip URL entered by the user

        Returns:
            Duration in seconds or None if unavailable
        """
        try:
            response = self._post(
                NetworkConstants.ENDPOINT_AUDIO_METADATA,
                {"url": url},
                timeout=NetworkConstants.METADATA_TIMEOUT,
            )
        except TransportError as e:
            if self.debug:
                print(f"[BackendClient] Metadata request failed: {e}")
            return None

        if response.status_code != 200:
            if self.debug:
                print(f"[BackendClient] Metadata unavailable: {response.status_code}")
            return None

        try:
            duration = float(response.json()["duration"])
        except (ValueError, KeyError, TypeError):
            return None
        return duration if math.isfinite(duration) and duration > 0 else None

    def download(self, url: str, start: float, end: float) -> bytes:
        """Request the trimmed MP3 for ``[start, end]``.

        Args:
            url: Clip URL entered by the user
            start: Region start in seconds
            end: Region end in seconds

        Returns:
            MP3 payload

        Raises:
            BackendError: Non-200 answer, message is the backend's text
            TransportError: Backend unreachable
        """
        response = self._post(
            NetworkConstants.ENDPOINT_DOWNLOAD,
            {"url": url, "start": start, "end": end},
            timeout=NetworkConstants.DOWNLOAD_TIMEOUT,
        )
        self._raise_for_status(response)
        return response.content

    def fetch_media(self, clip_url: str) -> bytes:
        """Fetch the clip media itself for local decoding.

        Raises:
            BackendError: Non-200 answer from the media host
            TransportError: Media host unreachable
        """
        try:
            response = self.http.get(clip_url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e
        self._raise_for_status(response)
        return response.content

    def _post(self, endpoint: str, payload: dict, timeout: Optional[float] = None):
        if self.debug:
            print(f"[BackendClient] POST {endpoint} {payload}")
        try:
            return self.http.post(
                f"{self.base_url}{endpoint}",
                json=payload,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

    @staticmethod
    def _raise_for_status(response) -> None:
        if response.status_code != 200:
            raise BackendError(response.status_code, response.text)
