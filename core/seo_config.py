# ABOUTME: INI configuration layered over snapshot settings (defaults < snapshot < file < CLI)
# ABOUTME: Reuses the snapshot coercion rules so bad values warn and fall back instead of failing

import configparser
import dataclasses
import logging
import os
from typing import Any

from core.content_models import ContentSnapshot
from core.errors import ConfigError
from core.snapshot_loader import load_quality_settings, load_site_settings, load_sitemap_settings

logger = logging.getLogger(__name__)

SECTION_SITE = "site"
SECTION_QUALITY = "quality"
SECTION_SITEMAP = "sitemap"
SECTION_SITEMAP_PRIORITY = "sitemap.priority"
SECTION_ROBOTS = "robots"

KNOWN_SECTIONS = (SECTION_SITE, SECTION_QUALITY, SECTION_SITEMAP, SECTION_SITEMAP_PRIORITY, SECTION_ROBOTS)


def read_config(path: str) -> configparser.ConfigParser:
    """
    Parse an INI configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    except configparser.Error as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    for section in parser.sections():
        if section not in KNOWN_SECTIONS:
            logger.warning(f"Ignoring unknown config section [{section}] in {path}")

    return parser


def _section(parser: configparser.ConfigParser, name: str) -> dict[str, Any]:
    if not parser.has_section(name):
        return {}
    return dict(parser.items(name))


def _read_robots_file(path: str, config_dir: str) -> str:
    resolved = path if os.path.isabs(path) else os.path.join(config_dir, path)
    try:
        with open(resolved, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ConfigError(f"Failed to read custom robots.txt {resolved}: {e}") from e


def apply_config(
    snapshot: ContentSnapshot, parser: configparser.ConfigParser, config_dir: str = ""
) -> ContentSnapshot:
    """
    Return a copy of ``snapshot`` with settings overridden by the config file.

    Args:
        snapshot: Snapshot whose settings act as the base layer
        parser: Parsed configuration
        config_dir: Directory relative robots file paths resolve against

    Returns:
        ContentSnapshot: New snapshot; content collections are shared
    """
    site_raw = _section(parser, SECTION_SITE)
    robots_raw = _section(parser, SECTION_ROBOTS)
    if "block_ai_crawlers" in robots_raw:
        site_raw["block_ai_crawlers"] = robots_raw["block_ai_crawlers"]
    if robots_raw.get("custom_file"):
        site_raw["robots_txt_content"] = _read_robots_file(robots_raw["custom_file"], config_dir)

    sitemap_raw: dict[str, Any] = _section(parser, SECTION_SITEMAP)
    priorities = _section(parser, SECTION_SITEMAP_PRIORITY)
    if priorities:
        sitemap_raw["priority"] = priorities

    return dataclasses.replace(
        snapshot,
        quality=load_quality_settings(_section(parser, SECTION_QUALITY), snapshot.quality),
        sitemap=load_sitemap_settings(sitemap_raw, snapshot.sitemap),
        site=load_site_settings(site_raw, snapshot.site),
    )


def load_config_file(snapshot: ContentSnapshot, path: str) -> ContentSnapshot:
    parser = read_config(path)
    return apply_config(snapshot, parser, os.path.dirname(os.path.abspath(path)))


def apply_cli_overrides(
    snapshot: ContentSnapshot, base_url: str | None = None, block_ai_crawlers: bool | None = None
) -> ContentSnapshot:
    """Final override layer from command-line flags; None leaves a setting untouched."""
    changes: dict[str, Any] = {}
    if base_url is not None:
        changes["base_url"] = base_url
    if block_ai_crawlers is not None:
        changes["block_ai_crawlers"] = block_ai_crawlers
    if not changes:
        return snapshot
    return dataclasses.replace(snapshot, site=dataclasses.replace(snapshot.site, **changes))
