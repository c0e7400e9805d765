"""
Topic and product classification of an article.

The legacy page carries one primary label (``.tag-Label``) plus a list of
keywords in the ``keywords`` meta tag.  Each of them is looked up in the
language's mapping table; mapped labels are replaced by their canonical
topic / product, unmapped labels are kept as topics verbatim.  Every article
also gets the provenance topic :data:`CMO_TOPIC`.
"""

from __future__ import annotations

from html import escape
from typing import Iterable, List, NamedTuple, Optional

from bs4 import BeautifulSoup

from cmo_importer.models.taxonomy import LanguageMappings
from cmo_importer.utils.filenames import sanitize_filename
from cmo_importer.utils.logs import log_message

TYPE_TOPIC = "topics"
CMO_TOPIC = "CMOByAdobe"


class TaxonomySummary(NamedTuple):
    topics: str
    products: str


def _dedupe(labels: Iterable[Optional[str]]) -> List[str]:
    seen = set()
    result: List[str] = []
    for label in labels:
        if not label or label in seen:
            continue
        seen.add(label)
        label = label.strip()
        if label:
            result.append(label)
    return result


def read_labels(soup: BeautifulSoup) -> List[str]:
    """Primary label first, then the meta keywords."""
    main_topic = "".join(el.get_text() for el in soup.select(".tag-Label"))
    main_topic = main_topic.strip().replace("&amp;", "&")
    meta = soup.select_one('[name="keywords"]')
    keywords = meta.get("content", "") if meta else ""
    return [main_topic] + keywords.split(",")


def classify(labels: List[str], mappings: Optional[LanguageMappings]) -> tuple:
    """
    Map ``labels`` (primary label first) to ``(topics, products)`` lists.

    A mapped primary label goes to the front of its list, every other label
    is appended in order.
    """
    main_topic = labels[0].strip() if labels else ""
    topics: List[str] = []
    products: List[str] = []
    for raw in labels:
        topic = raw.strip()
        if not topic:
            continue
        category = mappings.category_for(topic) if mappings else None
        if category:
            if topic == main_topic:
                topics.insert(0, category)
            else:
                topics.append(category)
            # only labels known to the topic map contribute products
            product = mappings.product_for(topic)
            if product:
                if topic == main_topic:
                    products.insert(0, product)
                else:
                    products.append(product)
        else:
            log_message(f"Found an unmapped topic: {topic}", level="WARNING")
            topics.append(topic)

    topics.append(CMO_TOPIC)
    return _dedupe(topics), _dedupe(products)


def handle_topics_and_products(
    soup: BeautifulSoup,
    store,
    output_path: str,
    check_if_exists: bool,
    mappings: Optional[LanguageMappings],
) -> TaxonomySummary:
    if mappings is None:
        log_message(f"No taxonomy mappings for '{output_path}', keeping legacy labels", level="WARNING")

    topics, products = classify(read_labels(soup), mappings)

    path = f"{output_path}/{TYPE_TOPIC}"
    for topic in topics:
        topic_name = sanitize_filename(topic)
        if not topic_name:
            continue
        if not check_if_exists or not store.exists(path, topic_name):
            log_message(f"Found a new topic: {topic_name}")
            store.create(path, topic_name, f"<h1>{escape(topic)}</h1>")

    return TaxonomySummary(topics=", ".join(topics), products=", ".join(products))
