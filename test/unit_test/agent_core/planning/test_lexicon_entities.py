from __future__ import annotations

import pytest

from cortex_relay.agent_core.planning import lexicon
from cortex_relay.agent_core.planning.entities import (
    ANY_SELECTOR,
    BUTTON_SELECTOR,
    DEFAULT_URL,
    LINK_SELECTOR,
    extract_search_term,
    extract_selector,
    extract_url,
)


@pytest.mark.parametrize(
    "fragment",
    ["navigate to github", "go to github.com", "visit python.org", "open youtube", "browse to news", "reopen tab"],
)
def test_is_navigation_is_a_substring_match(fragment: str) -> None:
    assert lexicon.is_navigation(fragment)


def test_keyword_tests_do_not_overlap_for_plain_phrases() -> None:
    assert lexicon.is_content_read("read page please")
    assert lexicon.is_search("look for shoes")
    assert lexicon.is_click("press the button")
    assert not lexicon.is_click("scroll down")
    assert lexicon.looks_like_url("www.python.org")
    assert not lexicon.looks_like_url("hello world")


@pytest.mark.parametrize(
    "fragment,expected",
    [
        ("go to github.com", "https://github.com"),
        ("go to https://python.org/downloads", "https://python.org/downloads"),
        ("visit www.wikipedia.org/wiki/python", "https://www.wikipedia.org/wiki/python"),
        ("open pypi.io", "https://pypi.io"),
        ("open youtube", "https://youtube.com"),
        ("go to my favorite site", DEFAULT_URL),
    ],
)
def test_extract_url(fragment: str, expected: str) -> None:
    assert extract_url(fragment) == expected


def test_extract_url_falls_back_to_marker_word() -> None:
    # no dotted domain, but the word carries the "http" marker
    assert extract_url("open http://localhost:8000") == "http://localhost:8000"


def test_extract_url_site_table_order() -> None:
    # both names present; "google" comes first in the table
    assert extract_url("open github or google") == "https://google.com"


def test_extract_selector() -> None:
    assert extract_selector("click the submit button") == BUTTON_SELECTOR
    assert extract_selector("click the first link") == LINK_SELECTOR
    assert extract_selector("click somewhere") == ANY_SELECTOR


@pytest.mark.parametrize(
    "fragment,expected",
    [
        ("search for Cats", "cats"),
        ("search pydantic docs", "pydantic docs"),
        ("find cheap flights", "cheap flights"),
        ("look for a red bike", "a red bike"),
        ("type hello world", "type hello world"),
    ],
)
def test_extract_search_term(fragment: str, expected: str) -> None:
    assert extract_search_term(fragment) == expected


def test_extract_search_term_prefers_introducer_order_over_position() -> None:
    # "search for " is tried before "find " even though "find" appears first
    assert extract_search_term("find and search for owls") == "owls"
