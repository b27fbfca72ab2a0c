"""ClipTrimmer - trim Twitch clips and download them as MP3."""

__version__ = "1.0.0"
