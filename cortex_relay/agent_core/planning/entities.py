from __future__ import annotations

"""Entity extraction for goal fragments.

These helpers pull the one argument a command needs out of a fragment: a URL
for ``navigate``, a selector for ``click`` and the text for ``input``.

They never fail. When nothing useful is found they return a coarse default
(the default search engine, the ``*`` selector, the whole fragment) and leave
it to the extension to cope with an imprecise target.
"""

import re
from typing import Dict, Tuple

from .lexicon import looks_like_url

DEFAULT_URL = "https://google.com"

_DOMAIN_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?[a-zA-Z0-9-]+\.(?:com|org|net|edu|gov|io|co)(?:/\S*)?",
    re.IGNORECASE,
)

# Ordered: the first site name contained in the fragment wins.
KNOWN_SITES: Dict[str, str] = {
    "google": "https://google.com",
    "github": "https://github.com",
    "youtube": "https://youtube.com",
    "facebook": "https://facebook.com",
    "twitter": "https://twitter.com",
    "linkedin": "https://linkedin.com",
}

BUTTON_SELECTOR = "button"
LINK_SELECTOR = "a"
ANY_SELECTOR = "*"

SEARCH_INTRODUCERS: Tuple[str, ...] = ("search for ", "search ", "find ", "look for ")


def _with_scheme(candidate: str) -> str:
    if candidate.startswith("http"):
        return candidate
    return "https://" + candidate


def extract_url(fragment: str) -> str:
    """Return the navigation target mentioned in ``fragment``.

    Lookup order:

    1. the first domain-like match (``github.com``, ``www.python.org/doc``);
    2. the first whitespace-separated word carrying a URL marker;
    3. a known site name (``youtube`` -> ``https://youtube.com``);
    4. ``DEFAULT_URL``.
    """
    match = _DOMAIN_PATTERN.search(fragment)
    if match:
        return _with_scheme(match.group(0))

    for word in fragment.split():
        if looks_like_url(word):
            return _with_scheme(word)

    for site, url in KNOWN_SITES.items():
        if site in fragment:
            return url

    return DEFAULT_URL


def extract_selector(fragment: str) -> str:
    if "button" in fragment:
        return BUTTON_SELECTOR
    if "link" in fragment:
        return LINK_SELECTOR
    return ANY_SELECTOR


def extract_search_term(fragment: str) -> str:
    """Return the text after the first matching search introducer.

    Introducers are tried in ``SEARCH_INTRODUCERS`` order, not by position in
    the fragment. Without any introducer the whole fragment is the term.
    """
    lowered = fragment.lower()
    for introducer in SEARCH_INTRODUCERS:
        idx = lowered.find(introducer)
        if idx != -1:
            return lowered[idx + len(introducer):].strip()
    return lowered.strip()
