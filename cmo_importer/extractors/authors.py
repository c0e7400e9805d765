from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup, Tag

from cmo_importer.utils.filenames import sanitize_filename
from cmo_importer.utils.logs import log_message

TYPE_AUTHOR = "authors"


def _joined_text(soup: BeautifulSoup, selector: str) -> str:
    return "".join(el.get_text() for el in soup.select(selector))


def _paragraph(soup: BeautifulSoup, text: str) -> Tag:
    p = soup.new_tag("p")
    p.string = text
    return p


def extract_byline(soup: BeautifulSoup) -> str:
    given_name = _joined_text(soup, '[itemprop="givenName"]').strip()
    family_name = _joined_text(soup, '[itemprop="familyName"]').strip()
    return " ".join(part for part in (given_name, family_name) if part)


def handle_author(soup: BeautifulSoup, store, output_path: str, posted_on: str, check_if_exists: bool) -> List[Tag]:
    """
    Build the byline paragraphs of the article and create the author page.

    The two returned ``<p>`` nodes ("by {byline}" and ``posted_on``) are
    meant to be spliced into the article.  The author page is built from the
    ``.articleAuthor`` block, enriched with a heading and the job title, and
    written to ``{output_path}/authors`` unless ``check_if_exists`` is set and
    the page is already there.
    """
    byline = extract_byline(soup)
    nodes = [_paragraph(soup, f"by {byline}"), _paragraph(soup, posted_on)]

    author_name = sanitize_filename(byline)
    if not author_name:
        log_message("No author found in page", level="WARNING")
        return nodes

    path = f"{output_path}/{TYPE_AUTHOR}"
    if check_if_exists and store.exists(path, author_name):
        return nodes

    block = soup.select_one(".articleAuthor")
    if block is None:
        log_message(f"No author block found for {byline}, author page not created", level="WARNING")
        return nodes

    heading = soup.new_tag("h2")
    heading.string = byline
    block.append(heading)
    block.append(_paragraph(soup, _joined_text(soup, '[itemprop="jobTitle"]').strip()))

    for data in soup.select(".authorData"):
        data.decompose()

    store.create(path, author_name, block.decode_contents())
    return nodes
