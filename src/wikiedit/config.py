"""Configuration loader for wikiedit.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "wikiedit.toml"


@dataclass
class ReferencesConfig:
    """Reference item settings."""
    id_bytes: int = 8


@dataclass
class MarkupConfig:
    """Markup conversion settings."""
    external_link_target: bool = True


@dataclass
class ApiConfig:
    """Local JSON API settings."""
    host: str = "127.0.0.1"
    port: int = 8765
    cors: bool = False


@dataclass
class WikieditConfig:
    """Complete wikiedit configuration."""
    references: ReferencesConfig = field(default_factory=ReferencesConfig)
    markup: MarkupConfig = field(default_factory=MarkupConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    path: Path | None = None


def load_config(config_path: Path | None = None) -> WikieditConfig:
    """
    Load configuration from wikiedit.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/wikiedit.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        WikieditConfig with resolved settings (defaults when no file exists)
    """
    toml_data: dict[str, Any] = {}
    found: Path | None = None

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            found = path
            break

    refs_data = toml_data.get("references", {})
    references = ReferencesConfig(
        id_bytes=int(refs_data.get("id_bytes", 8)),
    )

    markup_data = toml_data.get("markup", {})
    markup = MarkupConfig(
        external_link_target=bool(markup_data.get("external_link_target", True)),
    )

    api_data = toml_data.get("api", {})
    api = ApiConfig(
        host=api_data.get("host", "127.0.0.1"),
        port=int(api_data.get("port", 8765)),
        cors=bool(api_data.get("cors", False)),
    )

    return WikieditConfig(
        references=references,
        markup=markup,
        api=api,
        path=found,
    )
