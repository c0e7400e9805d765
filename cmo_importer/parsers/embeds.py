"""
Resolution of third-party embeds to canonical media urls.

Each :class:`EmbedPattern` pairs a ``matches`` predicate with an ``extract``
function.  Patterns are evaluated in declaration order against an embed
wrapper node; the first pattern that matches decides the result, even when
its extractor comes back empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import requests
from bs4 import BeautifulSoup, Tag

from cmo_importer.utils.logs import log_message

# The player page only exposes its canonical link to browser user agents.
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_14_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/80.0.3987.132 Safari/537.36"
)
EMBED_FETCH_TIMEOUT = 60

FetchHtml = Callable[[str], str]


def fetch_embed_html(url: str) -> str:
    resp = requests.get(url, timeout=EMBED_FETCH_TIMEOUT, headers={"User-Agent": BROWSER_USER_AGENT})
    return resp.text or ""


@dataclass(frozen=True)
class EmbedPattern:
    kind: str
    matches: Callable[[Tag], bool]
    extract: Callable[[Tag, FetchHtml], Optional[str]]


def _iframe_src(node: Tag) -> Optional[str]:
    iframe = node.find("iframe")
    if not isinstance(iframe, Tag):
        return None
    return iframe.get("src") or iframe.get("data-src") or None


def _soundcloud_matches(node: Tag) -> bool:
    iframe = node.find("iframe")
    src = iframe.get("src") if isinstance(iframe, Tag) else None
    return bool(src and re.search(r"w\.soundcloud\.com/player", src))


def _soundcloud_extract(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    src = normalize_embed_url(node.find("iframe").get("src"))
    try:
        html = fetch_html(src)
    except requests.RequestException as e:
        log_message(f"Cannot resolve soundcloud embed {src}: {e}", level="WARNING")
        return src
    if not html:
        return src
    link = BeautifulSoup(html, "html.parser").select_one('link[rel="canonical"]')
    return (link.get("href") if link else None) or src


def _instagram_permalink(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    media = node.select_one(".instagram-media[data-instgrm-permalink]")
    return media.get("data-instgrm-permalink") if media else None


def _instagram_anchor(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    anchor = node.select_one(".instagram-media a")
    return anchor.get("href") if anchor else None


def _twitter_last_anchor(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    # the last anchor of the blockquote links to the tweet itself
    anchors = node.select(".twitter-tweet a")
    return anchors[-1].get("href") if anchors else None


def _spark_link(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    anchor = node.select_one("a.asp-embed-link")
    return anchor.get("href") if anchor else None


def _giphy_matches(node: Tag) -> bool:
    img = node.find("img")
    src = img.get("src") if isinstance(img, Tag) else None
    return bool(src and re.search(r"media\.giphy\.com", src))


def _giphy_extract(node: Tag, fetch_html: FetchHtml) -> Optional[str]:
    return node.find("img").get("src")


EMBED_PATTERNS: Sequence[EmbedPattern] = (
    EmbedPattern("soundcloud", _soundcloud_matches, _soundcloud_extract),
    EmbedPattern(
        "instagram",
        lambda node: node.select_one(".instagram-media[data-instgrm-permalink]") is not None,
        _instagram_permalink,
    ),
    # older instagram markup without the permalink attribute
    EmbedPattern(
        "instagram-anchor",
        lambda node: node.select_one(".instagram-media a") is not None,
        _instagram_anchor,
    ),
    EmbedPattern(
        "twitter",
        lambda node: node.select_one(".twitter-tweet a") is not None,
        _twitter_last_anchor,
    ),
    EmbedPattern(
        "spark",
        lambda node: node.select_one("a.asp-embed-link") is not None,
        _spark_link,
    ),
    EmbedPattern("giphy", _giphy_matches, _giphy_extract),
    EmbedPattern(
        "iframe",
        lambda node: _iframe_src(node) is not None,
        lambda node, fetch_html: _iframe_src(node),
    ),
)


def resolve_embed(
    node: Tag,
    *,
    fetch_html: FetchHtml = fetch_embed_html,
    patterns: Sequence[EmbedPattern] = EMBED_PATTERNS,
) -> Optional[str]:
    """Return the canonical url of the embed wrapped by ``node``, if any."""
    for pattern in patterns:
        if pattern.matches(node):
            return pattern.extract(node, fetch_html) or None
    return None


def normalize_embed_url(src: str) -> str:
    if src.startswith("//"):
        return f"https:{src}"
    return src
