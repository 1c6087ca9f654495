"""
Page Content Analysis.

Turns the HTML snapshot the extension sends with ``PAGE_CONTENT`` into a
``CONTENT_ANALYSIS`` answer: a selector for every interactive element, a coarse
page type and a few human-readable suggestions.
"""

from typing import List

from bs4 import BeautifulSoup, Tag

from cortex_relay.agent_core.schemas.messages import ContentAnalysisPayload
from cortex_relay.core.logging_config import get_logger

logger = get_logger(__name__)

INTERACTIVE_ELEMENTS = "input, button, a, select, textarea"
SEARCH_PAGE_MARKERS = "input[type='search'], input[name='q'], [role='searchbox']"
SEARCH_BOX_MARKERS = "input[type='search'], input[name='q']"
NAVIGATION_MARKERS = "nav, .navigation, .menu"
BUTTON_ELEMENTS = "button, input[type='submit'], input[type='button']"


def selector_for(element: Tag) -> str:
    """Build the most specific simple selector available for ``element``.

    Preference order: id, name, a lone class, role, tag with type, bare tag.
    """
    element_id = element.get("id")
    if element_id:
        return f"#{element_id}"

    name = element.get("name")
    if name:
        return f"[name='{name}']"

    # bs4 exposes ``class`` as a list of tokens
    classes = element.get("class") or []
    if len(classes) == 1:
        return f".{classes[0]}"

    role = element.get("role")
    if role:
        return f"[role='{role}']"

    element_type = element.get("type")
    if element_type:
        return f"{element.name}[type='{element_type}']"

    return element.name


def classify_page(soup: BeautifulSoup) -> str:
    if soup.select_one(SEARCH_PAGE_MARKERS) is not None:
        return "search"
    if soup.find("form") is not None:
        return "form"
    if soup.select_one(NAVIGATION_MARKERS) is not None:
        return "navigation"
    return "general"


def suggest_actions(soup: BeautifulSoup) -> List[str]:
    suggestions: List[str] = []

    if soup.select_one(SEARCH_BOX_MARKERS) is not None:
        suggestions.append("Search for something")

    link_count = len(soup.select("a[href]"))
    if link_count:
        suggestions.append(f"Click on one of {link_count} links")

    button_count = len(soup.select(BUTTON_ELEMENTS))
    if button_count:
        suggestions.append(f"Click on one of {button_count} buttons")

    return suggestions


class ContentAnalyzer:
    """Analyze HTML snapshots with BeautifulSoup's stdlib ``html.parser`` backend."""

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def analyze(self, html: str) -> ContentAnalysisPayload:
        """
        Analyze one HTML document.

        Args:
            html: Raw page HTML. May be empty.

        Returns:
            Selectors in document order, the page type and action suggestions.
        """
        soup = BeautifulSoup(html or "", self.parser)
        selectors = [selector_for(element) for element in soup.select(INTERACTIVE_ELEMENTS)]
        result = ContentAnalysisPayload(
            selectors=[selector for selector in selectors if selector],
            suggestions=suggest_actions(soup),
            content_type=classify_page(soup),
        )
        logger.debug(
            f"Analyzed page: {len(result.selectors)} selectors, type={result.content_type}, "
            f"{len(result.suggestions)} suggestions"
        )
        return result
