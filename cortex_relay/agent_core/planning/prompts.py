"""Prompt construction for the LLM planner."""

from __future__ import annotations

from typing import Optional

from ..schemas.domain import PageContext

PAGE_TEXT_PREVIEW_CHARS = 2000

GOAL_PARSING_PROMPT = """You are a browser automation assistant. Turn the user's goal into browser commands.

Return exactly ONE JSON object. All steps go into its "steps" array; never return several objects.

Shape:
{{
  "intent": "multi_step",
  "steps": [
    {{"action": "navigate", "url": "https://google.com"}},
    {{"action": "input", "selector": "textarea[name='q']", "text": "search term"}},
    {{"action": "click", "selector": "button[type='submit']"}}
  ],
  "confidence": 0.9
}}

Available actions (no others exist):
- "navigate": open a URL (needs "url")
- "input": type text into a field (needs "selector" and "text")
- "click": click an element (needs "selector")
- "get_content": read the current page (no extra fields)

Rules:
- "find X" / "search for X" / "look for X" without a site: navigate to google.com, input X, click the search button.
- "search for X on Y.com": navigate to Y.com, input X into its search box, click its search button.
- Plain navigation goals: use the URL or the well-known domain of the site that is named.
- Google: search box input[name='q'] or textarea[name='q'], button button[name='btnK'] or input[type='submit'].
- Amazon: search box input[name='field-keywords'], button input[type='submit'][value='Go'].
- Never invent placeholder hosts or selectors such as example.com.
- When page context is given, build selectors from elements that actually appear in it.

User goal: "{goal}"
"""


def build_goal_prompt(goal: str, context: Optional[PageContext] = None) -> str:
    prompt = GOAL_PARSING_PROMPT.format(goal=goal)

    if context is not None and context.url:
        prompt += (
            "\nCURRENT PAGE (the browser is showing this page):\n"
            f"- URL: {context.url}\n"
            f"- Title: {context.title}\n"
            f"- Content type: {context.content_type}\n"
        )
        if context.text:
            preview = context.text
            if len(preview) > PAGE_TEXT_PREVIEW_CHARS:
                preview = preview[:PAGE_TEXT_PREVIEW_CHARS] + "..."
            prompt += f"- Page text: {preview}\n"
        prompt += (
            "Use the page above to pick selectors for items the goal mentions "
            "(for example a product name to click on).\n"
        )

    prompt += "\nReturn JSON:"
    return prompt
