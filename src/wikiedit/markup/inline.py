"""Inline wikitext scanner: one line of markup to Inline spans and back."""

import re

from ..core.model import Inline
from ..core.utils import is_external

# Rules are tried in this order at every position where one could start.
BOLD_ITALIC_RE = re.compile(r"'''''(.+?)'''''")
BOLD_RE = re.compile(r"'''(.+?)'''")
TAG_RE = re.compile(r"<(u|ins|s|strike|del|code)(?:\s[^>]*)?>(.*?)</\1\s*>", re.IGNORECASE)
BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
EXTERNAL_LINK_RE = re.compile(r"\[(https?://[^\s\]]+)(?:\s+([^\]]+))?\]")
INTERNAL_LINK_RE = re.compile(r"\[\[([^|\]]+)\|?([^\]]*)\]\]")

# Characters that can open a rule; everything else is plain text.
_SPECIAL_RE = re.compile(r"['<\[]")


_TAG_KINDS = {
    "u": "underline",
    "ins": "underline",
    "s": "strike",
    "strike": "strike",
    "del": "strike",
    "code": "code",
}


def _italic_close(text: str, start: int) -> int | None:
    """
    Offset of the `''` closing an italic run whose content begins at `start`.

    Complete `'''bold'''` runs inside the italic are skipped, so their
    quotes never close it. Content must be non-empty.
    """
    pos = start
    while True:
        i = text.find("''", pos)
        if i == -1:
            return None
        if text.startswith("'''", i):
            m = BOLD_RE.match(text, i)
            if m:
                pos = m.end()
                continue
        if i > start:
            return i
        pos = i + 1


def _match_rule(text: str, pos: int) -> tuple[Inline, int] | None:
    ch = text[pos]

    if ch == "'":
        m = BOLD_ITALIC_RE.match(text, pos)
        if m:
            inner = Inline("italic", children=parse_inline(m.group(1)))
            return Inline("bold", children=[inner]), m.end()
        m = BOLD_RE.match(text, pos)
        if m:
            return Inline("bold", children=parse_inline(m.group(1))), m.end()
        if text.startswith("''", pos):
            close = _italic_close(text, pos + 2)
            if close is not None:
                return Inline("italic", children=parse_inline(text[pos + 2:close])), close + 2
        return None

    if ch == "<":
        m = TAG_RE.match(text, pos)
        if m:
            kind = _TAG_KINDS[m.group(1).lower()]
            if kind == "code":
                return Inline("code", text=m.group(2)), m.end()
            return Inline(kind, children=parse_inline(m.group(2))), m.end()
        m = BR_RE.match(text, pos)
        if m:
            return Inline("break"), m.end()
        return None

    if ch == "[":
        m = EXTERNAL_LINK_RE.match(text, pos)
        if m:
            url = m.group(1)
            label = m.group(2)
            children = parse_inline(label.strip()) if label else [Inline("text", text=url)]
            return Inline("link", href=url, children=children), m.end()
        m = INTERNAL_LINK_RE.match(text, pos)
        if m:
            page = m.group(1).strip()
            label = m.group(2).strip() or page
            return Inline("link", href=page, children=parse_inline(label)), m.end()
        return None

    return None


def parse_inline(text: str) -> list[Inline]:
    """Scan a single line of wikitext into inline spans."""
    spans: list[Inline] = []
    buf: list[str] = []
    pos = 0
    n = len(text)

    def flush() -> None:
        if buf:
            spans.append(Inline("text", text="".join(buf)))
            buf.clear()

    while pos < n:
        m = _SPECIAL_RE.search(text, pos)
        if m is None:
            buf.append(text[pos:])
            break
        if m.start() > pos:
            buf.append(text[pos:m.start()])
            pos = m.start()

        matched = _match_rule(text, pos)
        if matched is None:
            buf.append(text[pos])
            pos += 1
            continue

        span, pos = matched
        flush()
        spans.append(span)

    flush()
    return spans


def render_inline(spans: list[Inline]) -> str:
    """Render inline spans back to wikitext."""
    out: list[str] = []
    for span in spans:
        kind = span.kind
        if kind == "text":
            out.append(span.text)
        elif kind == "break":
            out.append("\n")
        elif kind == "bold":
            out.append(f"'''{render_inline(span.children)}'''")
        elif kind == "italic":
            out.append(f"''{render_inline(span.children)}''")
        elif kind == "underline":
            out.append(f"<u>{render_inline(span.children)}</u>")
        elif kind == "strike":
            out.append(f"<s>{render_inline(span.children)}</s>")
        elif kind == "code":
            out.append(f"<code>{span.text}</code>")
        elif kind == "link":
            out.append(_render_link(span))
    return "".join(out)


def _render_link(span: Inline) -> str:
    href = (span.href or "").strip()
    label = render_inline(span.children).strip()
    if is_external(href):
        if not label or label == href:
            return f"[{href}]"
        return f"[{href} {label}]"
    return f"[[{href}|{label or href}]]"
