"""Utilities for locating templates and sections with precise character and line positions."""

import re
from typing import Any

from .core.locator import find_section_range, find_template_range, section_pattern
from .core.model import TemplateSpan


def char_offset_to_line(text: str, offset: int) -> int:
    """
    Convert character offset to line number (1-based).

    Args:
        text: The full text
        offset: Character offset (0-based)

    Returns:
        Line number (1-based)
    """
    if offset <= 0:
        return 1
    return text.count("\n", 0, min(offset, len(text))) + 1


def _location(
    text: str,
    span: TemplateSpan | None,
    kind: str,
    name: str,
    format_type: str,
) -> dict[str, Any] | str:
    if span is None:
        return {}

    start_line = char_offset_to_line(text, span.start)
    end_line = char_offset_to_line(text, span.end)

    if format_type == "tsv":
        return f"{kind}\t{name}\t{span.start}\t{span.end}\t{start_line}\t{end_line}"

    return {
        "kind": kind,
        "name": name,
        "range": {"start": span.start, "end": span.end},
        "lines": {"start": start_line, "end": end_line},
    }


def locate_template(text: str, name: str, format_type: str = "json") -> dict[str, Any] | str:
    """
    Get location information for the first `name` template in text.

    Args:
        text: Wikitext document
        name: Template name (case-insensitive)
        format_type: Output format ("json" or "tsv")

    Returns:
        Location dict (for JSON), TSV line, or {} when not found
    """
    return _location(text, find_template_range(text, name), "template", name, format_type)


def locate_section(
    text: str,
    title: str,
    regex: bool = False,
    format_type: str = "json",
) -> dict[str, Any] | str:
    """
    Get location information for a section.

    `title` is a plain section title, or with `regex` a header-line pattern
    (compiled multiline, case-insensitive).
    """
    if regex:
        pattern = re.compile(title, re.MULTILINE | re.IGNORECASE)
    else:
        pattern = section_pattern(title)
    return _location(text, find_section_range(text, pattern), "section", title, format_type)
