"""Reference/citation templates: {{Refcheck}}, {{Refurl}} and {{cn}}.

A reference field holds a short run of wikitext mixing prose with these
templates. `ReferenceCodec.parse` splits it into typed `ReferenceItem`s for a
field editor, `ReferenceCodec.serialize` writes them back.
"""

import logging
import re
from typing import Iterable, Mapping

from .adapters.idgen import HexId
from .core.model import REFERENCE_TYPES, TEXT_TYPE, ReferenceItem
from .core.ports import IdGenerator

log = logging.getLogger(__name__)

# Tail runs to the first "}}"; nested templates are not supported here.
REFERENCE_RE = re.compile(
    r"\{\{(" + "|".join(re.escape(t) for t in REFERENCE_TYPES) + r")(?=[\s|}])((?:(?!\}\}).)*)\}\}",
    re.DOTALL,
)


def clean_params(params: Mapping[str, str | None]) -> dict[str, str]:
    """Keep only keys whose trimmed value is non-empty, with values trimmed."""
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is not None and str(value).strip():
            cleaned[key] = str(value).strip()
    return cleaned


def parse_params(tail: str) -> dict[str, str]:
    """
    Parse a template parameter tail such as `|user=Bob|date=2024`.

    Pieces without `=` are dropped (no positional parameters); each piece is
    split at its first `=` and both sides are trimmed.
    """
    params: dict[str, str] = {}
    for piece in tail.split("|"):
        if not piece.strip():
            continue
        key, sep, value = piece.partition("=")
        if not sep or not key.strip():
            continue
        params[key.strip()] = value.strip()
    return params


def render_reference(item: ReferenceItem) -> str:
    if item.is_text:
        return item.content or ""
    pairs = [f"{k}={v}" for k, v in item.params.items() if v is not None and v != ""]
    if not pairs:
        return f"{{{{{item.type}}}}}"
    return f"{{{{{item.type}|{'|'.join(pairs)}}}}}"


class ReferenceCodec:
    def __init__(self, idgen: IdGenerator | None = None):
        self.idgen = idgen or HexId()

    def text_item(self, content: str) -> ReferenceItem:
        return ReferenceItem(id=self.idgen.new_id(), type=TEXT_TYPE, params={}, content=content)

    def template_item(self, type_: str, params: dict[str, str] | None = None) -> ReferenceItem:
        return ReferenceItem(id=self.idgen.new_id(), type=type_, params=params or {})

    def parse(self, text: str) -> list[ReferenceItem]:
        """
        Split text into an ordered list of reference items.

        Text without any `{{` is a single text item holding the input as is.
        Otherwise recognized templates and the trimmed text between them
        alternate; text runs that are only whitespace are dropped. Unknown or
        unterminated templates stay inside the surrounding text.
        """
        if not text:
            return []
        if "{{" not in text:
            return [self.text_item(text)]

        items: list[ReferenceItem] = []
        pos = 0
        for m in REFERENCE_RE.finditer(text):
            self._add_text(items, text[pos:m.start()])
            items.append(self.template_item(m.group(1), parse_params(m.group(2))))
            pos = m.end()
        self._add_text(items, text[pos:])

        log.debug("Parsed %d reference item(s)", len(items))
        return items

    def _add_text(self, items: list[ReferenceItem], chunk: str) -> None:
        # Trimmed so the single-space join in serialize() stays stable.
        if chunk.strip():
            items.append(self.text_item(chunk.strip()))

    def serialize(self, items: Iterable[ReferenceItem]) -> str:
        """Render items back to wikitext, joined with single spaces."""
        return " ".join(render_reference(item) for item in items)


_default_codec = ReferenceCodec()


def parse_references(text: str) -> list[ReferenceItem]:
    return _default_codec.parse(text)


def serialize_references(items: Iterable[ReferenceItem]) -> str:
    return _default_codec.serialize(items)
