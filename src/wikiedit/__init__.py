"""Wikitext, rich-text and reference-template conversion for wiki article editors."""

__version__ = "0.1.0"

from .core.locator import find_section_range, find_template_range, iter_template_ranges, section_pattern
from .markup import html_to_wikitext, to_rich_text, to_wikitext, wikitext_to_html
from .references import ReferenceCodec, clean_params, parse_references, serialize_references

__all__ = [
    "__version__",
    "find_template_range",
    "iter_template_ranges",
    "find_section_range",
    "section_pattern",
    "to_rich_text",
    "to_wikitext",
    "wikitext_to_html",
    "html_to_wikitext",
    "ReferenceCodec",
    "parse_references",
    "serialize_references",
    "clean_params",
]
