"""Locating templates and sections inside a wikitext document."""

import logging
import re
from typing import Iterator

from .model import TemplateSpan

log = logging.getLogger(__name__)

# Any header line: N "=" + non-empty title + the same N "=". Greedy so the
# longest marker run is tried first. Text after the closing run (comments)
# is allowed.
HEADER_LINE_RE = re.compile(r"^(={2,6})[ \t]*([^=\n]+?)[ \t]*\1", re.MULTILINE)
LEADING_EQ_RE = re.compile(r"^(=+)")


def _template_start_re(template_name: str) -> re.Pattern[str]:
    return re.compile(r"\{\{\s*" + re.escape(template_name), re.IGNORECASE)


def _balanced_end(text: str, start: int) -> int | None:
    """
    Scan forward from `start` counting {{ / }} tokens.

    Returns the offset just past the `}}` that brings depth back to zero, or
    None if the braces never balance.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        pair = text[i:i + 2]
        if pair == "{{":
            depth += 1
            i += 2
        elif pair == "}}":
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return None


def find_template_range(text: str, template_name: str) -> TemplateSpan | None:
    """
    Find the first `{{template_name ...}}` in text, nested templates included.

    The name match is case-insensitive and literal. Only the first textual
    occurrence is considered; returns None when the name is missing or its
    braces never balance.
    """
    m = _template_start_re(template_name).search(text)
    if m is None:
        log.debug("Template %r not found", template_name)
        return None

    start = m.start()
    end = _balanced_end(text, start)
    if end is None:
        log.debug("Template %r at %d is unterminated", template_name, start)
        return None

    return TemplateSpan(start=start, end=end, content=text[start:end])


def iter_template_ranges(text: str, template_name: str) -> Iterator[TemplateSpan]:
    """
    Yield every occurrence of a template, in document order.

    Occurrences nested inside an earlier match are skipped; an unterminated
    occurrence ends the scan.
    """
    pattern = _template_start_re(template_name)
    pos = 0
    while True:
        m = pattern.search(text, pos)
        if m is None:
            return
        start = m.start()
        end = _balanced_end(text, start)
        if end is None:
            return
        yield TemplateSpan(start=start, end=end, content=text[start:end])
        pos = end


def section_pattern(title: str) -> re.Pattern[str]:
    """Header-line pattern for a plain section title (any level, any case)."""
    return re.compile(r"^={2,6}\s*" + re.escape(title.strip()) + r"\s*={2,6}", re.IGNORECASE | re.MULTILINE)


def header_level(header: str) -> int:
    """Count the leading `=` run of a header; 2 when there is none."""
    m = LEADING_EQ_RE.match(header)
    return len(m.group(1)) if m else 2


def find_section_range(text: str, header_pattern: str | re.Pattern[str]) -> TemplateSpan | None:
    """
    Find a header-delimited section.

    Returns from the matched header to the next header of same/higher level
    (fewer or equal `=`), or to the end of text. Deeper headers are part of
    the section.
    """
    if isinstance(header_pattern, str):
        header_pattern = re.compile(header_pattern, re.MULTILINE)

    m = header_pattern.search(text)
    if m is None:
        log.debug("Section %r not found", header_pattern.pattern)
        return None

    start = m.start()
    level = header_level(m.group(0))

    end = len(text)
    for hm in HEADER_LINE_RE.finditer(text, m.end()):
        if hm.start() > start and len(hm.group(1)) <= level:
            end = hm.start()
            break

    if end <= start:
        return None
    return TemplateSpan(start=start, end=end, content=text[start:end])
