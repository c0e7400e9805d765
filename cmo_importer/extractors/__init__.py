"""
Extractors reading data out of the legacy article pages.

This subpackage fetches the pages, derives the byline (and the author page)
and classifies articles against the topic/product mapping table.
"""

from .authors import handle_author
from .page_fetcher import PageFetcher
from .taxonomy import CMO_TOPIC, TaxonomySummary, handle_topics_and_products

__all__ = ["handle_author", "PageFetcher", "CMO_TOPIC", "TaxonomySummary", "handle_topics_and_products"]
