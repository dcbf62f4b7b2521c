"""YAML configuration for the remglk-events command line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .images import StaticImageResolver

DEFAULT_CONFIG_PATH = Path("~/.remglk-events/config.yaml").expanduser()

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigError(ValueError):
    """The configuration file has an invalid shape."""


@dataclass
class ClientConfig:
    """Settings for reading transcripts and resolving images.

    images maps image numbers to URLs. url_template, if set, is used for
    numbers not in the map, with "{image}" replaced by the number.
    """

    log_level: str = "WARNING"
    images: dict[int, str] = field(default_factory=dict)
    image_url_template: str | None = None

    def image_resolver(self) -> StaticImageResolver:
        """Build the image resolver described by this config."""
        return StaticImageResolver(self.images, self.image_url_template)

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def to_dict(self) -> dict:
        """Serialize to dict for YAML storage."""
        result: dict = {"log_level": self.log_level}
        if self.images:
            result["images"] = dict(self.images)
        if self.image_url_template is not None:
            result["image_url_template"] = self.image_url_template
        return result

    @classmethod
    def from_dict(cls, data: dict) -> ClientConfig:
        """Deserialize from dict.

        Raises:
            ConfigError: If a field has the wrong type or value.
        """
        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

        raw_images = data.get("images") or {}
        if not isinstance(raw_images, dict):
            raise ConfigError("images must be a mapping of image number to URL")
        images: dict[int, str] = {}
        for key, url in raw_images.items():
            try:
                images[int(key)] = str(url)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"image number must be an integer, got {key!r}") from exc

        template = data.get("image_url_template")
        if template is not None and "{image}" not in str(template):
            raise ConfigError("image_url_template must contain {image}")

        return cls(
            log_level=log_level,
            images=images,
            image_url_template=str(template) if template is not None else None,
        )


def load_config(path: Path | None = None) -> ClientConfig:
    """Load configuration from a YAML file.

    Returns defaults if the file doesn't exist or is empty.

    Raises:
        ConfigError: If the file content is not a mapping or has bad fields.
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return ClientConfig()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return ClientConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return ClientConfig.from_dict(data)


def save_config(config: ClientConfig, path: Path) -> None:
    """Write configuration to a YAML file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
