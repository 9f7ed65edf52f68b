"""Configuration loader for scholia.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

CONFIG_NAME = "scholia.toml"
LATEX_STYLES = ("marginpar", "todonote", "footnote", "highlight")
TAG_MATCH_MODES = ("substring", "token")


@dataclass
class DisplayConfig:
    """How occurrences are shown."""
    placeholder: str = "[no text]"


@dataclass
class QueryConfig:
    """Hashtag query behaviour."""
    tag_match: str = "substring"
    ambient: bool = False


@dataclass
class ExportConfig:
    """Defaults for the built-in export formats."""
    latex: str = "marginpar"
    author: str = ""
    html_class: str = "note"


@dataclass
class ScholiaConfig:
    """Complete scholia configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    source: Path | None = None


def _choice(value: Any, choices: tuple[str, ...], key: str) -> str:
    if value not in choices:
        raise ConfigError(
            f"Invalid value {value!r} for {key} (expected one of {', '.join(choices)})",
            {"key": key, "value": value},
        )
    return value


def load_config(config_path: Path | None = None, document_path: Path | None = None) -> ScholiaConfig:
    """
    Load configuration from scholia.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/scholia.toml
    3. scholia.toml beside the document

    Args:
        config_path: Explicit path to config file
        document_path: Document being worked on, for the fallback search

    Returns:
        ScholiaConfig with defaults for everything not set
    """
    toml_data: dict[str, Any] = {}
    source = None

    search_paths = []
    if config_path:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}", {"path": str(config_path)})
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if document_path:
        search_paths.append(document_path.parent / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                try:
                    toml_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Invalid TOML in {path}: {e}", {"path": str(path)}) from e
            source = path
            break

    display_data = toml_data.get("display", {})
    display = DisplayConfig(
        placeholder=str(display_data.get("placeholder", "[no text]")),
    )

    query_data = toml_data.get("query", {})
    query = QueryConfig(
        tag_match=_choice(query_data.get("tag_match", "substring"), TAG_MATCH_MODES, "query.tag_match"),
        ambient=bool(query_data.get("ambient", False)),
    )

    export_data = toml_data.get("export", {})
    export = ExportConfig(
        latex=_choice(export_data.get("latex", "marginpar"), LATEX_STYLES, "export.latex"),
        author=str(export_data.get("author", "")),
        html_class=str(export_data.get("html_class", "note")),
    )

    return ScholiaConfig(display=display, query=query, export=export, source=source)
