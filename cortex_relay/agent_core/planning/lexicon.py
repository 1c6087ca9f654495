"""Keyword tables and intent membership tests.

Every test is a plain substring check against an already lower-cased goal
fragment. There is no tokenization, so ``"reopen"`` counts as a navigation
fragment because it contains ``"open"``.
"""

from __future__ import annotations

from typing import Iterable, Tuple

NAVIGATION_KEYWORDS: Tuple[str, ...] = ("navigate", "go to", "visit", "open", "browse to")
CONTENT_KEYWORDS: Tuple[str, ...] = (
    "get content",
    "page content",
    "read page",
    "extract content",
    "analyze page",
)
SEARCH_KEYWORDS: Tuple[str, ...] = ("search", "find", "look for", "type")
CLICK_KEYWORDS: Tuple[str, ...] = ("click", "press", "tap", "select")
URL_MARKERS: Tuple[str, ...] = (".com", ".org", ".net", ".edu", ".gov", "http", "www.")


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def is_navigation(fragment: str) -> bool:
    return _contains_any(fragment, NAVIGATION_KEYWORDS)


def is_content_read(fragment: str) -> bool:
    return _contains_any(fragment, CONTENT_KEYWORDS)


def is_search(fragment: str) -> bool:
    return _contains_any(fragment, SEARCH_KEYWORDS)


def is_click(fragment: str) -> bool:
    return _contains_any(fragment, CLICK_KEYWORDS)


def looks_like_url(fragment: str) -> bool:
    return _contains_any(fragment, URL_MARKERS)
