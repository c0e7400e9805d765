import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

import requests
from bs4 import BeautifulSoup

from cmo_importer.parsers.embeds import normalize_embed_url, resolve_embed
from fakes import no_network


def _wrapper(inner):
    soup = BeautifulSoup(f'<div class="embed-wrapper">{inner}</div>', "html.parser")
    return soup.div


def test_instagram_permalink_wins_over_iframe_fallback():
    node = _wrapper(
        '<blockquote class="instagram-media" data-instgrm-permalink="https://www.instagram.com/p/abc/">'
        '<a href="https://www.instagram.com/p/other/">post</a></blockquote>'
        '<iframe src="https://example.com/frame"></iframe>'
    )
    assert resolve_embed(node, fetch_html=no_network) == "https://www.instagram.com/p/abc/"


def test_instagram_without_permalink_uses_anchor():
    node = _wrapper('<blockquote class="instagram-media"><a href="https://www.instagram.com/p/xyz/">x</a></blockquote>')
    assert resolve_embed(node, fetch_html=no_network) == "https://www.instagram.com/p/xyz/"


def test_twitter_uses_last_anchor():
    node = _wrapper(
        '<blockquote class="twitter-tweet"><p>Hello <a href="https://t.co/1">#tag</a></p>'
        '&mdash; Someone <a href="https://twitter.com/someone/status/42">June 1, 2016</a></blockquote>'
    )
    assert resolve_embed(node, fetch_html=no_network) == "https://twitter.com/someone/status/42"


def test_spark_link():
    node = _wrapper('<a class="asp-embed-link" href="https://spark.adobe.com/page/abc/">Spark</a>')
    assert resolve_embed(node, fetch_html=no_network) == "https://spark.adobe.com/page/abc/"


def test_giphy_image():
    node = _wrapper('<img src="https://media.giphy.com/media/abc/giphy.gif">')
    assert resolve_embed(node, fetch_html=no_network) == "https://media.giphy.com/media/abc/giphy.gif"


def test_iframe_fallback_uses_lazy_source():
    node = _wrapper('<iframe data-src="https://www.youtube.com/embed/abc"></iframe>')
    assert resolve_embed(node, fetch_html=no_network) == "https://www.youtube.com/embed/abc"


def test_soundcloud_resolves_canonical_link():
    src = "https://w.soundcloud.com/player/?url=https%3A//api.soundcloud.com/tracks/1"
    node = _wrapper(f'<iframe src="{src}"></iframe>')
    seen = []

    def fetch_html(url):
        seen.append(url)
        return '<html><head><link rel="canonical" href="https://soundcloud.com/cmo/track"></head></html>'

    assert resolve_embed(node, fetch_html=fetch_html) == "https://soundcloud.com/cmo/track"
    assert seen == [src]


def test_soundcloud_falls_back_to_player_url_on_fetch_error():
    src = "https://w.soundcloud.com/player/?url=x"
    node = _wrapper(f'<iframe src="{src}"></iframe>')

    def fetch_html(url):
        raise requests.Timeout("too slow")

    assert resolve_embed(node, fetch_html=fetch_html) == src


def test_soundcloud_protocol_relative_player_is_fetched_over_https():
    node = _wrapper('<iframe src="//w.soundcloud.com/player/?url=x"></iframe>')
    seen = []

    def fetch_html(url):
        seen.append(url)
        return '<link rel="canonical" href="https://soundcloud.com/cmo/other">'

    assert resolve_embed(node, fetch_html=fetch_html) == "https://soundcloud.com/cmo/other"
    assert seen == ["https://w.soundcloud.com/player/?url=x"]


def test_first_matching_pattern_decides_even_without_result():
    node = _wrapper('<a class="asp-embed-link">Spark</a><iframe src="https://example.com/frame"></iframe>')
    assert resolve_embed(node, fetch_html=no_network) is None


def test_unknown_markup_is_not_resolved():
    node = _wrapper("<p>just text</p>")
    assert resolve_embed(node, fetch_html=no_network) is None


def test_protocol_relative_url_is_made_https():
    assert normalize_embed_url("//example.com/x") == "https://example.com/x"
    assert normalize_embed_url("http://example.com/x") == "http://example.com/x"
