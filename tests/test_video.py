from __future__ import annotations

import pytest

from wikidown.video import (
    VideoProvider,
    extract_vimeo_id,
    extract_youtube_id,
    render_mp4,
    render_video,
    render_vimeo,
    render_youtube,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("https://www.youtube.com/watch?v=abc12345678", "abc12345678"),
        ("https://www.youtube.com/watch?v=abc12345678&t=42", "abc12345678"),
        ("https://youtu.be/abc12345678", "abc12345678"),
        ("https://youtu.be/abc12345678?si=xyz", "abc12345678"),
        ("https://www.youtube.com/embed/abc12345678", "abc12345678"),
        ("https://www.youtube.com/v/abc12345678", "abc12345678"),
        ("abc12345678", "abc12345678"),
        ("  abc12345678\n", "abc12345678"),
    ],
)
def test_extract_youtube_id(value: str, expected: str):
    assert extract_youtube_id(value) == expected


@pytest.mark.parametrize("value", ["", "short", "https://example.com/watch", "not.an.id.value"])
def test_extract_youtube_id_returns_empty_when_missing(value: str):
    assert extract_youtube_id(value) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("92060047", "92060047"),
        ("https://vimeo.com/92060047", "92060047"),
        ("https://vimeo.com/video/92060047", "92060047"),
        ("https://player.vimeo.com/video/92060047", "92060047"),
    ],
)
def test_extract_vimeo_id(value: str, expected: str):
    assert extract_vimeo_id(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "https://vimeo.com/channels/staff"])
def test_extract_vimeo_id_returns_empty_when_missing(value: str):
    assert extract_vimeo_id(value) == ""


def test_render_youtube_embeds_player_and_print_link():
    html = render_youtube("abc12345678")

    assert 'src="https://www.youtube.com/embed/abc12345678"' in html
    assert '<div class="video-print-placeholder">' in html
    assert "https://www.youtube.com/watch?v=abc12345678" in html


def test_render_vimeo_embeds_player_and_print_link():
    html = render_vimeo("92060047")

    assert 'src="https://player.vimeo.com/video/92060047"' in html
    assert '<a href="https://vimeo.com/92060047">' in html


def test_render_mp4_names_file_in_placeholder():
    html = render_mp4("/api/files/intro/demo.mp4")

    assert '<source src="/api/files/intro/demo.mp4" type="video/mp4">' in html
    assert "This embedded video (demo.mp4) is not available in print." in html


def test_render_escapes_markup_in_ids():
    html = render_mp4('clip".mp4')

    assert 'clip&quot;.mp4' in html
    assert 'clip".mp4' not in html


def test_render_video_dispatches_by_provider():
    assert render_video(VideoProvider.YOUTUBE, "abc12345678") == render_youtube("abc12345678")
    assert render_video(VideoProvider.VIMEO, "1") == render_vimeo("1")
    assert render_video(VideoProvider.LOCAL, "a.mp4") == render_mp4("a.mp4")


def test_video_provider_values_match_fence_tags():
    assert [provider.value for provider in VideoProvider] == ["youtube", "vimeo", "mp4"]
