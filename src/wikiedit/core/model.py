from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

REFERENCE_TYPES = ("Refcheck", "Refurl", "cn")
TEXT_TYPE = "text"

LIST_KINDS = ("unordered_list", "ordered_list")


@dataclass(frozen=True)
class TemplateSpan:
    start: int  # char offsets into the host str, half-open
    end: int
    content: str  # always text[start:end]


@dataclass
class Inline:
    kind: str  # "text" | "bold" | "italic" | "underline" | "strike" | "code" | "link" | "break"
    text: str = ""  # "text" and "code" only
    children: list[Inline] = field(default_factory=list)
    href: str | None = None  # "link" only


@dataclass
class Block:
    kind: str  # "paragraph" | "heading" | "blockquote" | "preformatted" | one of LIST_KINDS
    inlines: list[Inline] = field(default_factory=list)
    level: int | None = None  # headings only, 2..6
    items: list[list[Inline]] = field(default_factory=list)  # list blocks only

    @property
    def is_list(self) -> bool:
        return self.kind in LIST_KINDS


@dataclass
class RichDocument:
    blocks: list[Block] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.blocks)


@dataclass
class ReferenceItem:
    id: str  # UI identity only, no meaning
    type: str  # "text" or one of REFERENCE_TYPES
    params: dict[str, str] = field(default_factory=dict)
    content: str | None = None  # "text" items only

    @property
    def is_text(self) -> bool:
        return self.type == TEXT_TYPE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "type": self.type, "params": dict(self.params)}
        if self.is_text:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], id: str = "") -> ReferenceItem:
        type_ = data.get("type", TEXT_TYPE)
        if type_ != TEXT_TYPE and type_ not in REFERENCE_TYPES:
            raise ValueError(f"Unknown reference type: {type_}")
        params = {str(k): "" if v is None else str(v) for k, v in (data.get("params") or {}).items()}
        content = data.get("content") if type_ == TEXT_TYPE else None
        return cls(
            id=str(data.get("id") or id),
            type=type_,
            params=params if type_ != TEXT_TYPE else {},
            content=content,
        )
