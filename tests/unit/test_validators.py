"""Unit tests for URL parsing utilities."""
import pytest
from app.utils.validators import URLValidator
from app.core.exceptions import MissingInputError, InvalidURLFormatError

VIDEO_ID = "dQw4w9WgXcQ"

class TestExtractVideoId:
    """Test identifier extraction from the supported URL forms."""

    def test_supported_url_forms(self):
        """Every supported form yields the identifier."""
        urls = [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"http://youtube.com/watch?v={VIDEO_ID}&t=42s",
            f"youtube.com/watch?v={VIDEO_ID}",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/v/{VIDEO_ID}?version=3",
            f"https://youtu.be/{VIDEO_ID}",
            f"youtu.be/{VIDEO_ID}?si=abc",
            f"https://www.youtube.com/shorts/{VIDEO_ID}",
        ]

        for url in urls:
            assert URLValidator.extract_video_id(url) == VIDEO_ID

    def test_identifier_alphabet(self):
        """Dashes and underscores are part of the identifier alphabet."""
        assert URLValidator.extract_video_id("https://youtu.be/a-b_c-d_e-f") == "a-b_c-d_e-f"

    def test_not_found(self):
        """Strings without a recognizable pattern return None."""
        for url in ["not a url", "https://vimeo.com/123456", "https://youtu.be/short", "", None]:
            assert URLValidator.extract_video_id(url) is None

    def test_pattern_priority(self):
        """The watch form wins over a short link appearing earlier in the string."""
        text = "https://youtu.be/AAAAAAAAAAA and https://www.youtube.com/watch?v=BBBBBBBBBBB"
        assert URLValidator.extract_video_id(text) == "BBBBBBBBBBB"

    def test_first_match_within_pattern(self):
        """Within the winning pattern the first occurrence is used."""
        text = "youtu.be/AAAAAAAAAAA youtu.be/BBBBBBBBBBB"
        assert URLValidator.extract_video_id(text) == "AAAAAAAAAAA"

    def test_longer_identifier_truncated(self):
        """Only the first 11 identifier characters are taken."""
        assert URLValidator.extract_video_id("https://youtu.be/dQw4w9WgXcQXYZ") == VIDEO_ID

class TestParseVideoUrl:
    """Test parsing of raw user input."""

    def test_trims_whitespace(self):
        session = URLValidator.parse_video_url(f"   https://youtu.be/{VIDEO_ID}  \n")

        assert session.video_id == VIDEO_ID
        assert session.source_url == f"https://youtu.be/{VIDEO_ID}"

    def test_empty_input_is_missing(self):
        """Empty and whitespace-only input raise the missing-input error."""
        for raw in ["", "   ", "\t\n", None]:
            with pytest.raises(MissingInputError) as exc_info:
                URLValidator.parse_video_url(raw)
            assert exc_info.value.error_code == "MISSING_INPUT"

    def test_invalid_format(self):
        """Unrecognized input raises the invalid-format error."""
        with pytest.raises(InvalidURLFormatError) as exc_info:
            URLValidator.parse_video_url("not a url")

        assert exc_info.value.error_code == "INVALID_URL_FORMAT"
        assert exc_info.value.details["url"] == "not a url"

    def test_errors_are_distinct(self):
        with pytest.raises(MissingInputError) as missing:
            URLValidator.parse_video_url(" ")
        with pytest.raises(InvalidURLFormatError) as invalid:
            URLValidator.parse_video_url("hello")

        assert missing.value.message != invalid.value.message

class TestIdentifierHelpers:
    """Test identifier validation and URL composition."""

    def test_validate_identifier(self):
        session = URLValidator.validate_identifier(VIDEO_ID)
        assert session.video_id == VIDEO_ID
        assert session.source_url is None

    def test_validate_identifier_rejects_bad_ids(self):
        for bad in ["short", "dQw4w9WgXcQ1", "dQw4w9WgXc!"]:
            with pytest.raises(InvalidURLFormatError):
                URLValidator.validate_identifier(bad)

    def test_build_video_url_round_trip(self):
        """Every composed form parses back to the same identifier."""
        for form in URLValidator.get_url_forms():
            url = URLValidator.build_video_url(VIDEO_ID, form)
            assert URLValidator.extract_video_id(url) == VIDEO_ID

    def test_build_video_url_unknown_form(self):
        with pytest.raises(ValueError):
            URLValidator.build_video_url(VIDEO_ID, "playlist")
