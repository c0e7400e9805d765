import os
import sys
from datetime import date

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from bs4 import BeautifulSoup

from cmo_importer.extractors.authors import extract_byline, handle_author
from cmo_importer.models.taxonomy import LanguageMappings, TaxonomyMappings
from cmo_importer.parsers.article import NOT_AVAILABLE, ArticleContext, ArticleTransformer, fix_images
from fakes import FakeDocumentStore, no_network

URL = "https://cmo.adobe.com/articles/2016/6/think-and-act-like-the-underdog-fast"

PAGE = """
<html><head><meta name="keywords" content="AI"></head><body>
<div class="container">
  <div class="position"><div class="hero"><img src="/img/hero"></div></div>
  <div class="position">
    <div class="title"><h1>The Title</h1></div>
    <hr>
    <div class="taglabel"><span class="tag-Label">Marketing</span></div>
    <p>Some <em>great</em><em> text</em> here</p>
    <div class="embed-wrapper"><iframe src="//player.example.com/x"></iframe></div>
    <iframe data-src="https://video.example.com/v"></iframe>
    <img src="data:image/gif;base64,R0l" data-src="/img/lazy.png">
    <img alt="broken">
    <div class="socialmediashare">share me</div>
  </div>
  <div class="articleAuthor">
    <div class="authorData"><span itemprop="givenName">Jane</span> <span itemprop="familyName">Doe</span>
    <span itemprop="jobTitle">Editor</span></div>
    <p>Jane writes about brands.</p>
  </div>
</div>
</body></html>
"""

MAPPINGS = TaxonomyMappings(
    languages={
        "en": LanguageMappings(
            categories={"marketing": ["Digital Marketing"], "ai": ["Artificial Intelligence"]},
            products={"marketing": ["Experience Cloud"]},
        )
    }
)


def _transform(html=PAGE, store=None, check=False):
    store = store if store is not None else FakeDocumentStore()
    transformer = ArticleTransformer(store, MAPPINGS, check_if_related_exists=check, fetch_html=no_network)
    result = transformer.transform(ArticleContext.from_url(URL), html)
    return result, store


def test_context_from_url():
    context = ArticleContext.from_url("https://cmo.adobe.com/de/articles/2017/11/von-bing-wird-erwartet.html")
    assert context.output_path == "de"
    assert context.date == "2017/11/01"
    assert context.origin == "https://cmo.adobe.com"
    assert context.name == "von-bing-wird-erwartet"


def test_context_without_date_falls_back_to_today():
    context = ArticleContext.from_url("https://cmo.adobe.com/about", today=date(2020, 3, 4))
    assert context.date == "2020/03/04"


def test_fix_images():
    soup = BeautifulSoup(
        '<img id="a" src="/img/foo">'
        '<img id="b" src="/img/bar.png">'
        '<img id="c" src="data:image/png;base64,xx" data-src="https://cdn.example.com/lazy.jpg">'
        '<img id="d" data-src="/img/lazy">'
        '<img id="e" src="https://cdn.example.com/abs.jpg">'
        '<img id="f">',
        "html.parser",
    )
    fix_images(soup, "https://example.com")
    sources = {img["id"]: img.get("src") for img in soup.find_all("img")}
    assert sources == {
        "a": "https://example.com/img/foo.jpeg",
        "b": "https://example.com/img/bar.png",
        "c": "https://cdn.example.com/lazy.jpg",
        "d": "https://example.com/img/lazy",
        "e": "https://cdn.example.com/abs.jpg",
    }


def test_empty_page_is_not_available_and_writes_nothing():
    result, store = _transform(html="")
    assert result == NOT_AVAILABLE
    assert store.created == {}


def test_article_document_is_written():
    result, store = _transform()
    assert result == "2016/06/01"
    body = store.created[("en/publish/2016/06/01", "think-and-act-like-the-underdog-fast")]

    assert 'src="https://cmo.adobe.com/img/hero.jpeg"' in body
    assert 'src="https://cmo.adobe.com/img/lazy.png"' in body
    assert 'alt="broken"' not in body
    assert "<em>great text</em> here" in body
    assert "<hlxembed>https://player.example.com/x</hlxembed>" in body
    assert "<hlxembed>https://video.example.com/v</hlxembed>" in body
    assert "<iframe" not in body
    assert "socialmediashare" not in body
    assert "taglabel" not in body
    assert "articleAuthor" not in body
    assert "Topics: Digital Marketing, Artificial Intelligence, CMOByAdobe" in body
    assert "Products: Experience Cloud" in body


def test_article_skeleton_order():
    _, store = _transform()
    body = store.created[("en/publish/2016/06/01", "think-and-act-like-the-underdog-fast")]

    # title, break, hero, break, byline, break, content, break, taxonomy
    assert body.count("<hr/>") == 4
    positions = [
        body.index("The Title"),
        body.index("hero.jpeg"),
        body.index("by Jane Doe"),
        body.index("posted on 2016/06/01"),
        body.index("Some "),
        body.index("Topics:"),
    ]
    assert positions == sorted(positions)
    assert body.index("<hr/>") < body.index("hero.jpeg")
    between_hero_and_byline = body[body.index("hero.jpeg"):body.index("by Jane Doe")]
    assert between_hero_and_byline.count("<hr/>") == 1


def test_author_and_topic_pages_are_written():
    _, store = _transform()
    author = store.created[("en/authors", "jane-doe")]
    assert "<h2>Jane Doe</h2>" in author
    assert "<p>Editor</p>" in author
    assert "Jane writes about brands." in author
    assert "itemprop" not in author
    assert ("en/topics", "digital-marketing") in store.created
    assert ("en/topics", "cmobyadobe") in store.created


def test_existing_related_pages_are_kept():
    store = FakeDocumentStore(existing={("en/authors", "jane-doe"), ("en/topics", "cmobyadobe")})
    _transform(store=store, check=True)
    assert ("en/authors", "jane-doe") not in store.created
    assert ("en/topics", "cmobyadobe") not in store.created
    assert ("en/topics", "digital-marketing") in store.created


def test_page_without_hero_or_author_still_converts():
    html = '<div class="container"><p>Only text</p><div class="embed-wrapper"><p>?</p></div></div>'
    result, store = _transform(html=html)
    assert result == "2016/06/01"
    body = store.created[("en/publish/2016/06/01", "think-and-act-like-the-underdog-fast")]
    assert body.index("by ") < body.index("Only text")
    assert '<div class="embed-wrapper"><p>?</p></div>' in body
    assert "Topics: CMOByAdobe" in body
    assert not any(path == "en/authors" for path, _ in store.created)


def test_byline_paragraphs_are_returned_without_author_block():
    soup = BeautifulSoup(
        '<span itemprop="givenName"> Max </span><span itemprop="familyName">Müller</span>', "html.parser"
    )
    store = FakeDocumentStore()
    nodes = handle_author(soup, store, "de", "posted on 2019/01/01", True)
    assert extract_byline(soup) == "Max Müller"
    assert [str(n) for n in nodes] == ["<p>by Max Müller</p>", "<p>posted on 2019/01/01</p>"]
    assert store.created == {}
