"""
HTML → markdown rendering for persisted documents.

Articles are stored as markdown.  Embed placeholders (``<hlxembed>``) become
a standalone line holding the resolved media url so that the content
pipeline can turn them into embeds.
"""

from __future__ import annotations

import re

from markdownify import MarkdownConverter

EMBED_TAG = "hlxembed"


class ImporterMarkdownConverter(MarkdownConverter):
    def convert_hlxembed(self, el, text, parent_tags):
        url = (el.get_text() or "").strip()
        if not url:
            return ""
        return f"\n\n{url}\n\n"


def html_to_markdown(html: str) -> str:
    markdown = ImporterMarkdownConverter(heading_style="ATX", bullets="-").convert(html or "")
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    return markdown.strip() + "\n"
