# File: tests/test_utils.py
import pytest

from sitemap_scout.utils import in_scope, is_page_url, normalize_url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://x.com/a/", "https://x.com/a"),
        ("https://x.com/a", "https://x.com/a"),
        ("https://x.com/a#frag", "https://x.com/a"),
        ("https://x.com/", "https://x.com"),
        ("https://x.com", "https://x.com"),
        ("  https://x.com/a  ", "https://x.com/a"),
        ("https://x.com/a/?q=1", "https://x.com/a/?q=1"),
        ("https://x.com/a?next=/", "https://x.com/a?next="),
    ],
)
def test_normalize_examples(raw, expected):
    assert normalize_url(raw) == expected


def test_normalize_is_shallow():
    # host case, default ports and parameter order all survive
    assert normalize_url("https://X.com/Path") == "https://X.com/Path"
    assert normalize_url("https://x.com:443/a") == "https://x.com:443/a"
    assert normalize_url("https://x.com/a?b=2&a=1") == "https://x.com/a?b=2&a=1"
    assert normalize_url("https://x.com/a?a=1&b=2") != normalize_url("https://x.com/a?b=2&a=1")


@pytest.mark.parametrize(
    "raw",
    [
        "https://x.com/a/",
        "https://x.com/a//",
        "https://x.com?/",
        "https://x.com/a/?/",
        "http://x.com:8080/p?x=1#y",
        "https://x.com/a%20b/",
        "https://games.x.com/games",
    ],
)
def test_normalize_idempotent(raw):
    once = normalize_url(raw)
    assert once is not None
    assert normalize_url(once) == once
    assert normalize_url(raw) == once


@pytest.mark.parametrize(
    "raw",
    ["not a url", "/relative/path", "mailto:someone@x.com", "http://[::1", "http://x.com:99999/", "", None, 42],
)
def test_normalize_invalid(raw):
    assert normalize_url(raw) is None


def test_normalize_encodes_control_characters():
    assert normalize_url("https://x.com/bad\x01link") == "https://x.com/bad%01link"
    assert normalize_url("https://x.com/a?q=\x1b\x7f") == "https://x.com/a?q=%1B%7F"
    assert normalize_url("https://x.com/bad%01link") == "https://x.com/bad%01link"


@pytest.mark.parametrize("raw", ["https://x\x01.com/a", "https://x.com/\ud800", "https://x.com/\ufffe"])
def test_normalize_rejects_xml_unsafe_urls(raw):
    assert normalize_url(raw) is None


def test_in_scope_ignores_scheme():
    assert in_scope("https://x.com/p", "http://x.com")
    assert in_scope("http://x.com/p", "https://x.com/")


def test_in_scope_rejects_other_hosts():
    assert not in_scope("https://sub.x.com/p", "https://x.com")
    assert not in_scope("https://x.com/p", "https://www.x.com")
    assert not in_scope("https://y.com/p", "https://x.com")


def test_in_scope_invalid():
    assert not in_scope(None, "https://x.com")
    assert not in_scope(normalize_url("garbage"), "https://x.com")
    assert not in_scope("http://[::1", "https://x.com")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://x.com/about", True),
        ("https://x.com/blog/post.html", True),
        ("https://x.com", True),
        ("https://x.com/logo.PNG", False),
        ("https://x.com/static/app.js", False),
        ("https://x.com/static/site.css", False),
        ("https://x.com/files/report.pdf", False),
        ("https://x.com/dl/archive.tar.gz", False),
        ("https://x.com/img/photo.webp?size=2", False),
    ],
)
def test_is_page_url(url, expected):
    assert is_page_url(url) is expected
