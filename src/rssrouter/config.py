"""Configuration models and helpers for the RSS Router service."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Dict

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rssrouter.errors import ConfigLoadError, SiteNotFoundError

__all__ = [
    "AppConfig",
    "SiteConfig",
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "resolve_config_path",
]

#: Environment variable that overrides :data:`DEFAULT_CONFIG_PATH`.
CONFIG_PATH_ENV = "RSSROUTER_CONFIG"

#: Configuration is read from the working directory unless overridden.
DEFAULT_CONFIG_PATH = Path("config.yaml")

_KEPT_RESOLVERS = {"tag:yaml.org,2002:null", "tag:yaml.org,2002:merge"}


class _TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars as text.

    ``date_format: 2006-01-02`` or ``date_format: 15:04`` would otherwise load
    as a date or a base-60 integer. Only ``null`` and merge keys are resolved.
    """


_TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag in _KEPT_RESOLVERS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Return the configuration path, honouring :data:`CONFIG_PATH_ENV`."""

    if path is not None:
        return Path(path)
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def _scalar_text(value: object) -> object:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class SiteConfig(BaseModel):
    """Configuration for a single site exposed as a feed.

    Nothing is checked for presence: a passthrough site needs only
    ``existing_rss_url`` and a scraped site with missing selectors simply
    yields empty fields.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Page to scrape; also the prefix for relative links")
    title: str = Field(default="", description="Feed title")
    description: str = Field(default="", description="Feed description")
    article_selector: str = Field(default="", description="CSS selector for each article node")
    title_selector: str = Field(default="", description="CSS selector for the title inside an article")
    link_selector: str = Field(default="", description="CSS selector for the link inside an article")
    date_selector: str = Field(
        default="",
        description="CSS selector for the element carrying a ``datetime`` attribute",
    )
    content_selector: str = Field(default="", description="CSS selector for the article body")
    date_format: str = Field(
        default="",
        description="strptime format or reference layout such as ``2006-01-02T15:04:05Z07:00``",
    )
    link_attribute_name: str = Field(
        default="href", description="Attribute of the link node that holds the article URL"
    )
    existing_rss_url: str | None = Field(
        default=None,
        description="When set, this feed is served verbatim and the selectors are ignored",
    )

    @field_validator(
        "url",
        "title",
        "description",
        "article_selector",
        "title_selector",
        "link_selector",
        "date_selector",
        "content_selector",
        "date_format",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value: object) -> object:
        # YAML keys left without a value load as ``None``.
        return "" if value is None else _scalar_text(value)

    @field_validator("link_attribute_name", mode="before")
    @classmethod
    def _link_attribute_text(cls, value: object) -> object:
        return "href" if value is None else _scalar_text(value)

    @field_validator("existing_rss_url", mode="before")
    @classmethod
    def _existing_feed_text(cls, value: object) -> object:
        return _scalar_text(value)

    @property
    def uses_existing_feed(self) -> bool:
        """Return ``True`` when the site proxies an upstream feed instead of scraping."""

        return bool(self.existing_rss_url)


class AppConfig(BaseModel):
    """Mapping of site keys to :class:`SiteConfig` entries."""

    model_config = ConfigDict(frozen=True)

    sites: Dict[str, SiteConfig] = Field(default_factory=dict)

    @field_validator("sites", mode="before")
    @classmethod
    def _no_sites_is_empty(cls, value: object) -> object:
        return {} if value is None else value

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "AppConfig":
        """Load configuration data from a YAML file."""

        config_path = resolve_config_path(path)
        try:
            raw = config_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigLoadError(f"Configuration file not found: {config_path}") from exc
        except OSError as exc:
            raise ConfigLoadError(f"Error reading config file {config_path}: {exc}") from exc

        return cls.from_yaml(raw, source=str(config_path))

    @classmethod
    def from_yaml(cls, document: str, *, source: str = "<string>") -> "AppConfig":
        """Parse and validate a YAML configuration document."""

        try:
            data = yaml.load(document, Loader=_TextScalarLoader)  # noqa: S506 - SafeLoader subclass
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML in configuration file: {source}\n{exc}") from exc

        if data is None:
            data = {}

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigLoadError(f"Configuration file is invalid: {source}\n{exc}") from exc

    def site(self, key: str) -> SiteConfig:
        """Return the configuration registered under ``key``."""

        try:
            return self.sites[key]
        except KeyError:
            raise SiteNotFoundError(key) from None
