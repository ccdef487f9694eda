"""Runtime wiring helper for CLI and API applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.html_codec import SoupHtmlCodec
from .adapters.idgen import HexId
from .config import WikieditConfig, load_config
from .markup.wikitext import to_rich_text, to_wikitext
from .references import ReferenceCodec


@dataclass
class Runtime:
    """Container for all wired components."""
    html: SoupHtmlCodec
    references: ReferenceCodec
    config: WikieditConfig

    def wikitext_to_html(self, wikitext: str) -> str:
        if not wikitext:
            return ""
        return self.html.render_html(to_rich_text(wikitext))

    def html_to_wikitext(self, html: str) -> str:
        if not html:
            return ""
        return to_wikitext(self.html.parse_html(html))


def build_runtime(
    config_path: Path | None = None,
    config: WikieditConfig | None = None,
) -> Runtime:
    """Build and wire all components."""
    if config is None:
        config = load_config(config_path=config_path)

    html = SoupHtmlCodec(link_target=config.markup.external_link_target)
    references = ReferenceCodec(HexId(nbytes=config.references.id_bytes))

    return Runtime(
        html=html,
        references=references,
        config=config,
    )
