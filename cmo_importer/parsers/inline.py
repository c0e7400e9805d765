"""
Inline markup clean-up ahead of the markdown conversion.

Two adjacent ``<em>`` (or ``<strong>``, ``<a>`` ...) elements render as
``*a**b*`` and emphasis that starts or ends with a space renders as
``* a*``; both break the markdown.  :func:`review_inline_element` collapses
adjacent same-tag siblings and moves a boundary space out of the element.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

INLINE_TAGS = (
    "a",
    "b",
    "code",
    "em",
    "i",
    "label",
    "s",
    "small",
    "span",
    "strong",
    "sub",
    "sup",
    "u",
    "var",
)


def _text_nodes(tag: Tag) -> List[NavigableString]:
    return [
        s
        for s in tag.descendants
        if isinstance(s, NavigableString) and not isinstance(s, PreformattedString) and str(s)
    ]


def _trim_string(node: NavigableString, text: str) -> None:
    if text:
        node.replace_with(NavigableString(text))
    else:
        node.extract()


def _move_trailing_space(tag: Tag) -> bool:
    if not tag.get_text().endswith(" "):
        return False
    last = _text_nodes(tag)[-1]
    _trim_string(last, str(last)[:-1])
    tag.insert_after(NavigableString(" "))
    return True


def _move_leading_space(tag: Tag) -> bool:
    if not tag.get_text().startswith(" "):
        return False
    first = _text_nodes(tag)[0]
    _trim_string(first, str(first)[1:])
    tag.insert_before(NavigableString(" "))
    return True


def _merge_into_previous(tag: Tag, tag_name: str) -> Optional[Tag]:
    previous = tag.previous_sibling
    if not isinstance(previous, Tag) or previous.name != tag_name:
        return None
    for child in list(tag.contents):
        previous.append(child.extract())
    tag.decompose()
    return previous


def review_inline_element(soup: Union[BeautifulSoup, Tag], tag_name: str) -> None:
    """
    Collapse consecutive ``<tag_name>`` siblings and move a single leading
    or trailing space of each element outside of it.

    Elements are visited last to first so that a merge only ever touches an
    element that has not been visited yet.
    """
    tags = soup.find_all(tag_name)
    for i in range(len(tags) - 1, -1, -1):
        tag = tags[i]
        merged = _merge_into_previous(tag, tag_name)
        if merged is not None:
            tag = merged
        _move_trailing_space(tag)
        _move_leading_space(tag)


def review_inline_elements(soup: Union[BeautifulSoup, Tag], tag_names=INLINE_TAGS) -> None:
    for tag_name in tag_names:
        review_inline_element(soup, tag_name)
