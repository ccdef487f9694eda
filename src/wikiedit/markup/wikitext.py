"""Wikitext <-> RichDocument conversion.

`to_rich_text` works in three passes over the input:

1. `<pre>` / `<blockquote>` bodies are lifted out as verbatim blocks.
2. The remaining text is split on blank lines into candidates.
3. Each candidate is split into header lines and runs of other lines; a run
   is a list when its first line carries a `* ` / `# ` marker, otherwise a
   paragraph.

Inline markup inside each line is handled by `markup.inline`.
"""

import logging
import re

from ..core.model import Block, Inline, RichDocument
from ..core.utils import normalize_newlines
from .inline import parse_inline, render_inline

log = logging.getLogger(__name__)

VERBATIM_RE = re.compile(r"<(pre|blockquote)(?:\s[^>]*)?>(.*?)</\1\s*>", re.IGNORECASE | re.DOTALL)
BLANK_LINES_RE = re.compile(r"\n{2,}")
EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

# Longest marker first so "======" is never read as "==".
HEADER_RES = [
    (level, re.compile(r"^={%d}\s*(.*?)\s*={%d}$" % (level, level)))
    for level in range(6, 1, -1)
]

_LIST_KINDS = {"*": "unordered_list", "#": "ordered_list"}
_LIST_MARKERS = {"unordered_list": "* ", "ordered_list": "# "}


def _match_header(line: str) -> tuple[int, str] | None:
    # Indented lines are never headers.
    stripped = line.rstrip()
    for level, pattern in HEADER_RES:
        m = pattern.match(stripped)
        if m:
            return level, m.group(1)
    return None


def _list_marker(line: str) -> tuple[str, str] | None:
    """Return (marker, item text) for a list line, or None."""
    stripped = line.strip()
    if stripped in ("*", "#"):
        return stripped, ""
    if stripped[:2] in ("* ", "# "):
        return stripped[0], stripped[2:].strip()
    return None


def _paragraph(lines: list[str]) -> Block:
    inlines: list[Inline] = []
    for i, line in enumerate(lines):
        if i:
            inlines.append(Inline("break"))
        inlines.extend(parse_inline(line))
    return Block("paragraph", inlines=inlines)


def _list_blocks(lines: list[str]) -> list[Block]:
    """
    Build sibling list blocks from a run of lines.

    A change of marker closes the current list and opens one of the other
    kind; lines without a marker become paragraphs between lists.
    """
    blocks: list[Block] = []
    current: Block | None = None
    loose: list[str] = []

    for line in lines:
        marker = _list_marker(line)
        if marker is None:
            if line.strip():
                loose.append(line.strip())
            current = None
            continue

        if loose:
            blocks.append(_paragraph(loose))
            loose = []
        kind = _LIST_KINDS[marker[0]]
        if current is None or current.kind != kind:
            current = Block(kind)
            blocks.append(current)
        current.items.append(parse_inline(marker[1]))

    if loose:
        blocks.append(_paragraph(loose))
    return blocks


def _run_blocks(lines: list[str]) -> list[Block]:
    while lines and not lines[0].strip():
        lines = lines[1:]
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    if not lines:
        return []
    if _list_marker(lines[0]) is not None:
        return _list_blocks(lines)
    return [_paragraph(lines)]


def _candidate_blocks(candidate: str) -> list[Block]:
    blocks: list[Block] = []
    run: list[str] = []
    for line in candidate.split("\n"):
        header = _match_header(line)
        if header is None:
            run.append(line)
            continue
        blocks.extend(_run_blocks(run))
        run = []
        level, title = header
        blocks.append(Block("heading", inlines=parse_inline(title), level=level))
    blocks.extend(_run_blocks(run))
    return blocks


def _flow_blocks(text: str) -> list[Block]:
    blocks: list[Block] = []
    for candidate in BLANK_LINES_RE.split(text):
        candidate = candidate.strip("\n")
        if candidate.strip():
            blocks.extend(_candidate_blocks(candidate))
    return blocks


def to_rich_text(wikitext: str) -> RichDocument:
    """Parse wikitext into a RichDocument."""
    doc = RichDocument()
    if not wikitext:
        return doc

    text = normalize_newlines(wikitext)
    pos = 0
    for m in VERBATIM_RE.finditer(text):
        doc.blocks.extend(_flow_blocks(text[pos:m.start()]))
        kind = "preformatted" if m.group(1).lower() == "pre" else "blockquote"
        doc.blocks.append(Block(kind, inlines=[Inline("text", text=m.group(2))]))
        pos = m.end()
    doc.blocks.extend(_flow_blocks(text[pos:]))

    log.debug("Parsed wikitext into %d block(s)", len(doc.blocks))
    return doc


def _render_block(block: Block) -> str:
    if block.kind == "heading":
        marks = "=" * (block.level or 2)
        return f"{marks} {render_inline(block.inlines).strip()} {marks}"
    if block.is_list:
        marker = _LIST_MARKERS[block.kind]
        return "\n".join(marker + render_inline(item).strip() for item in block.items)
    if block.kind == "blockquote":
        return f"<blockquote>{render_inline(block.inlines)}</blockquote>"
    if block.kind == "preformatted":
        return f"<pre>{render_inline(block.inlines)}</pre>"
    return render_inline(block.inlines)


def to_wikitext(document: RichDocument) -> str:
    """
    Render a RichDocument as wikitext.

    Blocks are separated by a blank line, except that a list is followed by
    a single line break. Runs of 3+ line breaks collapse to 2 and the result
    is trimmed.
    """
    parts: list[str] = []
    for i, block in enumerate(document.blocks):
        rendered = _render_block(block)
        if i < len(document.blocks) - 1:
            rendered += "\n" if block.is_list else "\n\n"
        parts.append(rendered)

    result = EXCESS_NEWLINES_RE.sub("\n\n", "".join(parts))
    return result.strip()
