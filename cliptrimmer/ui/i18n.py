"""User-facing strings in English and Japanese."""

from typing import Dict

DEFAULT_LANGUAGE = "en"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "title": "Twitch Clip to MP3 Downloader",
        "getClip": "Get Clip",
        "download": "Download MP3",
        "loading": "Downloading and converting, please wait...",
        "loadingClip": "Loading clip...",
        "loadingProgress": "Loading waveform... {percent}%",
        "playPause": "Play / Pause",
        "start": "Start",
        "end": "End",
        "enterUrl": "Please enter a Twitch clip URL.",
        "invalidRegion": "Please select a valid region to trim.",
        "invalidTime": "Invalid time value.",
        "backendError": "Backend Error: {message}",
        "cannotConnect": "Cannot connect to backend server. Please check if the backend is running.",
        "downloadError": "Error: {message}",
        "downloadFailed": "An error occurred while downloading the file.",
        "saved": "Saved {path}",
        "saveFailed": "Could not save the file: {message}",
        "fallbackNotice": "Waveform unavailable ({reason}). Drag over the bar to select a range.",
        "editorReady": "Editor ready",
        "notReady": "Playback is not available for this clip.",
        "overlayHint": "Drag to select a range",
        "error": "Error",
    },
    "jp": {
        "title": "TwitchクリップMP3ダウンローダー",
        "getClip": "クリップを取得",
        "download": "MP3をダウンロード",
        "loading": "ダウンロードと変換中です、お待ちください...",
        "loadingClip": "クリップを読み込み中...",
        "loadingProgress": "波形を読み込み中... {percent}%",
        "playPause": "再生/一時停止",
        "start": "開始",
        "end": "終了",
        "enterUrl": "TwitchクリップのURLを入力してください。",
        "invalidRegion": "トリミングする範囲を正しく選択してください。",
        "invalidTime": "時間の値が正しくありません。",
        "backendError": "バックエンドエラー: {message}",
        "cannotConnect": "バックエンドサーバーに接続できません。バックエンドが起動しているか確認してください。",
        "downloadError": "エラー: {message}",
        "downloadFailed": "ファイルのダウンロード中にエラーが発生しました。",
        "saved": "{path} に保存しました",
        "saveFailed": "ファイルを保存できませんでした: {message}",
        "fallbackNotice": "波形を表示できません ({reason})。バーをドラッグして範囲を選択してください。",
        "editorReady": "編集の準備ができました",
        "notReady": "このクリップは再生できません。",
        "overlayHint": "ドラッグして範囲を選択",
        "error": "エラー",
    },
}

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)


class Translator:
    """Looks up strings for the active language.

    Missing keys fall back to English, then to the key itself.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = DEFAULT_LANGUAGE
        self.set_language(language)

    def set_language(self, language: str) -> bool:
        """Switch the active language.

        Returns:
            True if the language is supported and now active
        """
        if language not in TRANSLATIONS:
            return False
        self.language = language
        return True

    def get(self, key: str, **kwargs) -> str:
        text = TRANSLATIONS[self.language].get(key)
        if text is None:
            text = TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
        return text.format(**kwargs) if kwargs else text
