"""
HTML rewrites applied to legacy article pages.

The entry point is :class:`~cmo_importer.parsers.article.ArticleTransformer`;
embed resolution, inline clean-up and the markdown rendering used by the
document store live in their own modules.
"""

from .article import NOT_AVAILABLE, ArticleContext, ArticleTransformer
from .embeds import EMBED_PATTERNS, resolve_embed
from .inline import INLINE_TAGS, review_inline_element

__all__ = [
    "NOT_AVAILABLE",
    "ArticleContext",
    "ArticleTransformer",
    "EMBED_PATTERNS",
    "resolve_embed",
    "INLINE_TAGS",
    "review_inline_element",
]
