from typing import Protocol
from .model import RichDocument


class IdGenerator(Protocol):
    def new_id(self) -> str:
        pass


class HtmlCodec(Protocol):
    """
    The WYSIWYG side of the markup codec: RichDocument <-> HTML.
    """

    def render_html(self, document: RichDocument) -> str:
        pass

    def parse_html(self, html: str) -> RichDocument:
        pass
