"""YouTube URL parsing and identifier validation utilities."""
import re
from typing import Optional, List, Tuple

from app.core.exceptions import MissingInputError, InvalidURLFormatError
from app.models.thumbnail import VideoSession

VIDEO_ID_PATTERN = r'[a-zA-Z0-9_-]{11}'

class URLValidator:
    """URL parsing utilities for YouTube video links."""

    # Tried in order; the first pattern that matches wins
    URL_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
        ("watch", re.compile(rf'(?:https?://)?(?:www\.)?youtube\.com/watch\?v=({VIDEO_ID_PATTERN})')),
        ("embed", re.compile(rf'(?:https?://)?(?:www\.)?youtube\.com/embed/({VIDEO_ID_PATTERN})')),
        ("v", re.compile(rf'(?:https?://)?(?:www\.)?youtube\.com/v/({VIDEO_ID_PATTERN})')),
        ("short_link", re.compile(rf'(?:https?://)?youtu\.be/({VIDEO_ID_PATTERN})')),
        ("shorts", re.compile(rf'(?:https?://)?(?:www\.)?youtube\.com/shorts/({VIDEO_ID_PATTERN})')),
    ]

    URL_TEMPLATES = {
        "watch": "https://www.youtube.com/watch?v={video_id}",
        "embed": "https://www.youtube.com/embed/{video_id}",
        "v": "https://www.youtube.com/v/{video_id}",
        "short_link": "https://youtu.be/{video_id}",
        "shorts": "https://www.youtube.com/shorts/{video_id}",
    }

    _IDENTIFIER = re.compile(rf'^{VIDEO_ID_PATTERN}$')

    @staticmethod
    def extract_video_id(url: str) -> Optional[str]:
        """Extract the 11-character video identifier, or None if no pattern matches."""
        if not url:
            return None

        for _, pattern in URLValidator.URL_PATTERNS:
            match = pattern.search(url)
            if match:
                return match.group(1)

        return None

    @staticmethod
    def parse_video_url(raw_input: Optional[str]) -> VideoSession:
        """Parse user input into a video session.

        Raises:
            MissingInputError: If the input is empty after trimming
            InvalidURLFormatError: If no YouTube URL pattern matches
        """
        url = (raw_input or "").strip()
        if not url:
            raise MissingInputError()

        video_id = URLValidator.extract_video_id(url)
        if video_id is None:
            raise InvalidURLFormatError(url)

        return VideoSession(video_id=video_id, source_url=url)

    @staticmethod
    def validate_identifier(video_id: str) -> VideoSession:
        """Build a session from a bare identifier, e.g. one taken from a request path."""
        candidate = (video_id or "").strip()
        if not candidate:
            raise MissingInputError()
        if not URLValidator._IDENTIFIER.match(candidate):
            raise InvalidURLFormatError(candidate)
        return VideoSession(video_id=candidate)

    @staticmethod
    def build_video_url(video_id: str, form: str = "watch") -> str:
        """Compose a YouTube URL of the given form for an identifier."""
        template = URLValidator.URL_TEMPLATES.get(form)
        if template is None:
            raise ValueError(f"Unknown URL form: {form}")
        return template.format(video_id=video_id)

    @staticmethod
    def get_url_forms() -> List[str]:
        """Get the URL forms in matching priority order."""
        return [name for name, _ in URLValidator.URL_PATTERNS]
