"""HTML side of the markup codec, as produced/consumed by a WYSIWYG surface."""

import html as _html
import logging

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..core.model import Block, Inline, RichDocument
from ..core.ports import HtmlCodec
from ..core.utils import is_external

log = logging.getLogger(__name__)

INLINE_TAGS = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "u": "underline",
    "ins": "underline",
    "s": "strike",
    "strike": "strike",
    "del": "strike",
}
PARAGRAPH_TAGS = {"p", "div", "h1"}
HEADING_TAGS = {"h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
LIST_TAGS = {"ul": "unordered_list", "ol": "ordered_list"}
BLOCK_TAGS = PARAGRAPH_TAGS | set(HEADING_TAGS) | set(LIST_TAGS) | {"blockquote", "pre"}

_RENDER_TAGS = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "strike": "s",
}
_RENDER_LISTS = {"unordered_list": "ul", "ordered_list": "ol"}


def _text(value: str) -> str:
    return value.replace("\xa0", " ")


def _inlines(node: Tag, in_list: bool = False) -> list[Inline]:
    """
    Convert the children of a tag into inline spans, stripping unknown tags.

    With `in_list`, nested lists are skipped; their items are collected as
    siblings by `_block`.
    """
    spans: list[Inline] = []
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            if str(child):
                spans.append(Inline("text", text=_text(str(child))))
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name.lower()
        if name == "br":
            spans.append(Inline("break"))
        elif name in INLINE_TAGS:
            spans.append(Inline(INLINE_TAGS[name], children=_inlines(child, in_list)))
        elif name == "code":
            spans.append(Inline("code", text=_text(child.get_text())))
        elif name == "a":
            href = child.get("href")
            if href:
                spans.append(Inline("link", href=_text(str(href)), children=_inlines(child, in_list)))
            else:
                spans.extend(_inlines(child, in_list))
        elif in_list and name in LIST_TAGS:
            continue
        elif name in BLOCK_TAGS:
            # Block nested inside inline content: keep it on its own line.
            if spans:
                spans.append(Inline("break"))
            spans.extend(_inlines(child, in_list))
        else:
            spans.extend(_inlines(child, in_list))
    return spans


def _block(node: Tag) -> list[Block]:
    name = node.name.lower()
    if name in HEADING_TAGS:
        return [Block("heading", inlines=_inlines(node), level=HEADING_TAGS[name])]
    if name in LIST_TAGS:
        block = Block(LIST_TAGS[name])
        for li in node.find_all("li"):
            block.items.append(_trim_breaks(_inlines(li, in_list=True)))
        return [block]
    if name == "blockquote":
        return [Block("blockquote", inlines=_trim_breaks(_inlines(node)))]
    if name == "pre":
        return [Block("preformatted", inlines=[Inline("text", text=_text(node.get_text()))])]
    return [Block("paragraph", inlines=_inlines(node))]


def _trim_breaks(spans: list[Inline]) -> list[Inline]:
    while spans and spans[-1].kind == "break":
        spans = spans[:-1]
    return spans


def parse_html(html: str) -> RichDocument:
    """
    Parse WYSIWYG HTML into a RichDocument.

    Inline content outside any block tag is gathered into an implicit
    paragraph. Whitespace-only text between blocks is dropped.
    """
    doc = RichDocument()
    if not html:
        return doc

    soup = BeautifulSoup(html, "html.parser")
    loose = soup.new_tag("p")

    def flush() -> None:
        nonlocal loose
        if loose.contents:
            doc.blocks.append(Block("paragraph", inlines=_inlines(loose)))
            loose = soup.new_tag("p")

    for child in list(soup.contents):
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            if str(child).strip() or loose.contents:
                loose.append(child.extract())
            continue
        if isinstance(child, Tag) and child.name.lower() in BLOCK_TAGS:
            flush()
            doc.blocks.extend(_block(child))
        else:
            loose.append(child.extract())
    flush()

    log.debug("Parsed HTML into %d block(s)", len(doc.blocks))
    return doc


def _render_inlines(spans: list[Inline], link_target: bool) -> str:
    out: list[str] = []
    for span in spans:
        kind = span.kind
        if kind == "text":
            out.append(_html.escape(span.text, quote=False))
        elif kind == "break":
            out.append("<br>")
        elif kind == "code":
            out.append(f"<code>{_html.escape(span.text, quote=False)}</code>")
        elif kind == "link":
            href = span.href or ""
            attrs = f'href="{_html.escape(href)}"'
            if link_target and is_external(href):
                attrs += ' rel="noopener noreferrer" target="_blank"'
            out.append(f"<a {attrs}>{_render_inlines(span.children, link_target)}</a>")
        elif kind in _RENDER_TAGS:
            tag = _RENDER_TAGS[kind]
            out.append(f"<{tag}>{_render_inlines(span.children, link_target)}</{tag}>")
    return "".join(out)


def render_html(document: RichDocument, link_target: bool = True) -> str:
    """Render a RichDocument as WYSIWYG HTML."""
    out: list[str] = []
    for block in document.blocks:
        inner = _render_inlines(block.inlines, link_target)
        if block.kind == "heading":
            level = block.level or 2
            out.append(f"<h{level}>{inner}</h{level}>")
        elif block.is_list:
            tag = _RENDER_LISTS[block.kind]
            items = "".join(f"<li>{_render_inlines(item, link_target)}</li>" for item in block.items)
            out.append(f"<{tag}>{items}</{tag}>")
        elif block.kind == "blockquote":
            out.append(f"<blockquote>{inner}</blockquote>")
        elif block.kind == "preformatted":
            out.append(f"<pre>{inner}</pre>")
        else:
            out.append(f"<p>{inner}</p>")
    return "".join(out)


class SoupHtmlCodec(HtmlCodec):
    def __init__(self, link_target: bool = True):
        self.link_target = link_target

    def render_html(self, document: RichDocument) -> str:
        return render_html(document, link_target=self.link_target)

    def parse_html(self, html: str) -> RichDocument:
        return parse_html(html)
