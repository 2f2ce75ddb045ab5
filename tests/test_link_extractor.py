# File: tests/test_link_extractor.py
import pytest
from bs4.builder import ParserRejectedMarkup

import sitemap_scout.crawler.link_extractor as extractor_module
from sitemap_scout.crawler.link_extractor import extract_links
from sitemap_scout.crawler.models import PageData

PAGE_URL = "https://a.test/section/"


def page(html: str, url: str = PAGE_URL) -> PageData:
    return PageData(url=url, content=html)


def test_anchor_links_resolved_against_page():
    result = extract_links(
        page(
            '<a href="/about">About</a>'
            '<a href="child">Child</a>'
            '<a href="https://b.test/y">External</a>'
            '<a href="mailto:me@a.test">Mail</a>'
            '<a href="javascript:void(0)">JS</a>'
            '<a href="tel:+100">Call</a>'
        )
    )
    assert result.structural == {
        "https://a.test/about",
        "https://a.test/section/child",
        "https://b.test/y",
    }


def test_other_href_elements_need_absolute_url():
    result = extract_links(
        page(
            '<link rel="alternate" href="https://a.test/feed-page">'
            '<link rel="stylesheet" href="/static/site.css">'
            '<map><area href="https://a.test/area" alt="x"></map>'
        )
    )
    assert "https://a.test/feed-page" in result.structural
    assert "https://a.test/area" in result.structural
    assert "https://a.test/static/site.css" not in result.structural


def test_data_attributes():
    result = extract_links(
        page(
            '<div data-href="/card">x</div>'
            '<button data-url="https://a.test/buy">Buy</button>'
            '<li data-link="/menu/item">Item</li>'
        )
    )
    assert result.structural == {
        "https://a.test/card",
        "https://a.test/buy",
        "https://a.test/menu/item",
    }


def test_inline_scripts_and_handlers():
    html = (
        "<button onclick=\"location.href='/go'\">Go</button>"
        "<span onmouseover=\"window.open('/popup')\">Hover</span>"
        "<script>var next = 'https://a.test/spa/route'; location.assign(\"/assigned\");</script>"
        '<script src="https://a.test/bundle.js">ignored body https://a.test/never</script>'
    )
    result = extract_links(page(html))
    assert {
        "https://a.test/go",
        "https://a.test/popup",
        "https://a.test/spa/route",
        "https://a.test/assigned",
    } <= result.scripted
    assert "https://a.test/never" not in result.scripted
    assert result.structural == set()


def test_raw_scan_finds_same_host_literals():
    html = (
        "<div data-state='{\"next\":\"https://a.test/hidden\"}'></div>"
        "<p>see https://www.a.test/mirror) and https://b.test/other</p>"
    )
    result = extract_links(page(html))
    assert "https://a.test/hidden" in result.scraped
    assert "https://www.a.test/mirror" in result.scraped
    assert all("b.test" not in url for url in result.scraped)
    assert "https://a.test/hidden" not in result.structural


def test_raw_scan_can_be_disabled():
    result = extract_links(page("<p>https://a.test/hidden</p>"), scan_raw=False)
    assert result.scraped == set()
    assert len(result) == 0


def test_all_is_union_of_channels():
    html = '<a href="/a">A</a><script>go("https://a.test/b")</script>'
    result = extract_links(page(html))
    assert result.all() == result.structural | result.scripted | result.scraped
    assert {"https://a.test/a", "https://a.test/b"} <= result.all()


def test_unparseable_markup_yields_no_links(monkeypatch):
    def reject(*args, **kwargs):
        raise ParserRejectedMarkup("boom")

    monkeypatch.setattr(extractor_module, "BeautifulSoup", reject)
    result = extract_links(page('<a href="/x">x</a> https://a.test/y'))
    assert result.all() == set()


@pytest.mark.parametrize("html", ["", "<<<>>>", "<a href>broken", "\x00\x01binary"])
def test_garbage_markup_does_not_raise(html):
    extract_links(page(html))
