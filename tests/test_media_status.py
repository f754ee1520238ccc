import pytest

from review_app.core.media import classify_media_link, media_label, parse_media_links
from review_app.core.models import MediaLink
from review_app.core.status import format_status, normalize_severity, normalize_task_status


@pytest.mark.parametrize(
    "url,kind",
    [
        ("https://www.youtube.com/watch?v=abc", "youtube"),
        ("https://youtu.be/abc", "youtube"),
        ("https://drive.google.com/file/d/1", "google_drive"),
        ("https://i.imgur.com/x.png", "imgur"),
        ("https://example.com/clip.mp4", "generic"),
    ],
)
def test_classify_media_link(url, kind):
    assert classify_media_link(url) == kind


def test_parse_media_links_skips_blank_lines():
    links = parse_media_links("  https://youtu.be/a \n\n\thttps://example.com/b\n   ")
    assert [link.url for link in links] == ["https://youtu.be/a", "https://example.com/b"]
    assert parse_media_links("") == []
    assert parse_media_links(None) == []


def test_media_label():
    assert media_label(MediaLink("https://youtu.be/a", "youtube")) == "YouTube Video"
    assert media_label(MediaLink("https://example.com/b")) == "https://example.com/b"


def test_severity_and_status_normalization():
    assert normalize_severity(" HIGH ") == "high"
    assert normalize_severity("Blocker") == "critical"
    assert normalize_severity("null") is None
    assert normalize_task_status(None) == "open"
    assert normalize_task_status("Done") == "completed"
    assert normalize_task_status("In-Progress") == "in-progress"
    assert format_status("in-progress") == "In Progress"
