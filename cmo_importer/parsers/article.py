"""
Rewriting of a legacy article page into the normalized document.

:class:`ArticleTransformer` takes the fetched html of one article and runs
the fixed sequence of rewrites: image fixes, hero reordering with the
thematic-break skeleton, byline, taxonomy summary, embed placeholders and
inline clean-up.  The inner markup of the main container is then stored as
the article document.  Unexpected page structure only produces warnings;
errors raised by the document store propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from cmo_importer.extractors.authors import handle_author
from cmo_importer.extractors.taxonomy import handle_topics_and_products
from cmo_importer.models.taxonomy import TaxonomyMappings
from cmo_importer.utils.logs import log_message
from cmo_importer.utils.urls import (
    article_name,
    format_publish_date,
    language_for_url,
    origin_of,
    publish_date_from_url,
)
from .embeds import fetch_embed_html, normalize_embed_url, resolve_embed
from .inline import review_inline_elements
from .markdown import EMBED_TAG

TYPE_POST = "publish"
NOT_AVAILABLE = "N/A"
DEFAULT_IMAGE_EXTENSION = ".jpeg"

EMBED_WRAPPERS = ".embed-wrapper, .spotify-wrapper"
LEFTOVER_BLOCKS = (".taglabel", ".socialmediashare", ".articleAuthor")


@dataclass(frozen=True)
class ArticleContext:
    url: str
    output_path: str
    date: str
    origin: str
    name: str

    @classmethod
    def from_url(cls, url: str, today: Optional[date] = None) -> "ArticleContext":
        published = publish_date_from_url(url)
        if published is None:
            published = today or date.today()
            log_message(f"No publish date in {url}, using {published.isoformat()}", level="WARNING")
        return cls(
            url=url,
            output_path=language_for_url(url),
            date=format_publish_date(published),
            origin=origin_of(url),
            name=article_name(url),
        )


def _is_root_relative(src: str) -> bool:
    return src.startswith("/") and not src.startswith("//")


def fix_images(soup: BeautifulSoup, origin: str) -> None:
    """Make every image source absolute, promoting lazy-load sources."""
    for img in soup.find_all("img"):
        src = img.get("src") or ""
        data_src = img.get("data-src") or ""
        if _is_root_relative(src):
            if "." not in src:
                # some legacy images are served without extension
                src += DEFAULT_IMAGE_EXTENSION
            img["src"] = f"{origin}{src}"
        elif (not src or src.startswith("data:")) and data_src:
            img["src"] = f"{origin}{data_src}" if _is_root_relative(data_src) else data_src
        elif not src:
            img.decompose()


def _new_paragraph(soup: BeautifulSoup, text: str) -> Tag:
    p = soup.new_tag("p")
    p.string = text
    return p


def _new_embed(soup: BeautifulSoup, src: str) -> Tag:
    embed = soup.new_tag(EMBED_TAG)
    embed.string = normalize_embed_url(src)
    return embed


class ArticleTransformer:
    def __init__(
        self,
        store,
        mappings: Optional[TaxonomyMappings],
        *,
        check_if_related_exists: bool = True,
        fetch_html: Callable[[str], str] = fetch_embed_html,
    ) -> None:
        self.store = store
        self.mappings = mappings
        self.check_if_related_exists = check_if_related_exists
        self.fetch_html = fetch_html

    def _main_container(self, soup: BeautifulSoup, url: str):
        main = soup.select_one(".container")
        if main is None:
            log_message(f"No main container in {url}, using the whole page", level="WARNING")
            main = soup.body or soup
        return main

    def _reorder_hero(self, soup: BeautifulSoup, main, url: str) -> Tag:
        """
        Move the title block in front of the hero banner and surround the
        hero with thematic breaks.  Returns the break the byline goes after.
        """
        hero = soup.select_one(".container > div.position:nth-of-type(1)")
        if hero is None:
            log_message(f"No hero banner found in {url}", level="WARNING")
            anchor = soup.new_tag("hr")
            main.insert(0, anchor)
            anchor.insert_after(soup.new_tag("hr"))
            return anchor

        for title in soup.select(".container > div.position:nth-of-type(2) .title"):
            hero.insert_before(title.extract())
        hero.insert_before(soup.new_tag("hr"))

        hero_hr = soup.new_tag("hr")
        hero.insert_after(hero_hr)
        hero_hr.insert_after(soup.new_tag("hr"))
        return hero_hr

    def _replace_embeds(self, soup: BeautifulSoup, url: str) -> None:
        for node in soup.select(EMBED_WRAPPERS):
            src = resolve_embed(node, fetch_html=self.fetch_html)
            if not src:
                log_message(f"Unsupported embed - could not resolve embed src in {url}", level="WARNING")
                continue
            node.clear()
            node.append(_new_embed(soup, src))

        # remaining raw iframes become embeds of their own source
        for iframe in soup.find_all("iframe"):
            src = iframe.get("src") or iframe.get("data-src")
            if src:
                iframe.insert_after(_new_embed(soup, src))
            iframe.decompose()

    def transform(self, context: ArticleContext, html: str) -> str:
        if not html:
            return NOT_AVAILABLE

        soup = BeautifulSoup(html, "html.parser")
        posted_on = f"posted on {context.date}"

        fix_images(soup, context.origin)

        for hr in soup.select(".container hr"):
            hr.decompose()

        main = self._main_container(soup, context.url)
        previous = self._reorder_hero(soup, main, context.url)

        for node in handle_author(soup, self.store, context.output_path, posted_on, self.check_if_related_exists):
            previous.insert_after(node)
            previous = node

        language_mappings = self.mappings.for_language(context.output_path) if self.mappings else None
        summary = handle_topics_and_products(
            soup, self.store, context.output_path, self.check_if_related_exists, language_mappings
        )
        main.append(soup.new_tag("hr"))
        main.append(_new_paragraph(soup, f"Topics: {summary.topics}"))
        main.append(_new_paragraph(soup, f"Products: {summary.products}"))

        self._replace_embeds(soup, context.url)
        review_inline_elements(soup)

        for selector in LEFTOVER_BLOCKS:
            for block in soup.select(selector):
                block.decompose()

        self.store.create(f"{context.output_path}/{TYPE_POST}/{context.date}", context.name, main.decode_contents())
        return context.date
