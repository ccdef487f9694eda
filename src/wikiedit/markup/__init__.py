"""Markup conversion between wikitext, RichDocument and WYSIWYG HTML."""

from ..adapters.html_codec import parse_html, render_html
from .wikitext import to_rich_text, to_wikitext


def wikitext_to_html(wikitext: str, link_target: bool = True) -> str:
    """Convert wikitext to the HTML a WYSIWYG surface edits."""
    if not wikitext:
        return ""
    return render_html(to_rich_text(wikitext), link_target=link_target)


def html_to_wikitext(html: str) -> str:
    """Convert WYSIWYG HTML back to wikitext."""
    if not html:
        return ""
    return to_wikitext(parse_html(html))


__all__ = [
    "to_rich_text",
    "to_wikitext",
    "parse_html",
    "render_html",
    "wikitext_to_html",
    "html_to_wikitext",
]
