"""{{Title}} placeholders in post bodies.

List views show the bare title; detail views turn each placeholder into a link
to that post's page. Referenced titles are not checked for existence.
"""

import html
import re
from urllib.parse import quote

PLACEHOLDER_RE = re.compile(r"\{\{(.+?)\}\}")


def strip_placeholders(text: str) -> str:
    """Replace every {{Title}} with Title."""
    return PLACEHOLDER_RE.sub(r"\1", text)


def referenced_titles(text: str) -> list[str]:
    """Titles referenced by placeholders, in order of appearance."""
    return PLACEHOLDER_RE.findall(text)


def post_href(title: str) -> str:
    return "/posts/" + quote(title, safe="")


def render_placeholder_links(text: str) -> str:
    """
    Render body text as HTML: text is escaped, placeholders become links and
    newlines become <br>.
    """
    parts: list[str] = []
    pos = 0
    for match in PLACEHOLDER_RE.finditer(text):
        parts.append(html.escape(text[pos : match.start()]))
        title = match.group(1)
        parts.append(f'<a href="{html.escape(post_href(title))}">{html.escape(title)}</a>')
        pos = match.end()
    parts.append(html.escape(text[pos:]))
    return "".join(parts).replace("\n", "<br>\n")
