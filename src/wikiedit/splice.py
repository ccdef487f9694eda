"""Splicing new content into located templates and sections.

The locator only reports spans; these helpers build the new document text
around them. Nothing here mutates its input.
"""

import logging
import re

from .core.locator import find_section_range, find_template_range, section_pattern
from .core.model import TemplateSpan

log = logging.getLogger(__name__)


def splice(text: str, span: TemplateSpan, replacement: str) -> str:
    """Replace text[span.start:span.end] with replacement."""
    return text[:span.start] + replacement + text[span.end:]


def replace_template(text: str, template_name: str, replacement: str) -> str | None:
    """Replace the first `template_name` template; None when it is missing."""
    span = find_template_range(text, template_name)
    if span is None:
        return None
    return splice(text, span, replacement)


def remove_template(text: str, template_name: str) -> str | None:
    """Drop the first `template_name` template; None when it is missing."""
    return replace_template(text, template_name, "")


def replace_section(text: str, title: str | re.Pattern[str], body: str) -> str:
    """
    Replace the body of a section, keeping its header line.

    `title` is a plain section title or a header pattern. A missing section
    is appended at the end as `== title ==` (only possible for plain titles;
    a missing pattern leaves the text unchanged).
    """
    pattern = section_pattern(title) if isinstance(title, str) else title
    body = body.strip("\n")
    span = find_section_range(text, pattern)

    if span is None:
        if not isinstance(title, str):
            log.debug("Section %r not found, nothing to replace", pattern.pattern)
            return text
        sep = "\n" if text and not text.endswith("\n") else ""
        lead = "\n" if text else ""
        return f"{text}{sep}{lead}== {title.strip()} ==\n{body}\n"

    header_end = span.content.find("\n")
    if header_end == -1:
        header = span.content
    else:
        header = span.content[:header_end]

    tail = "\n" if span.end < len(text) else ""
    new_section = f"{header}\n{body}\n{tail}"
    return text[:span.start] + new_section + text[span.end:]
