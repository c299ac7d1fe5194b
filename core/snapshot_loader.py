# ABOUTME: Builds a ContentSnapshot from the CMS's JSON export (camelCase or snake_case keys)
# ABOUTME: Coerces malformed fields to their safest value instead of failing the whole snapshot

import logging
import os
from collections.abc import Callable, Iterable
from typing import Any

import orjson

from core.content_models import (
    DEFAULT_SITEMAP_PRIORITIES,
    POST_STATUS_DRAFT,
    Author,
    Category,
    ContentSnapshot,
    Hub,
    PillarPage,
    Post,
    ProgrammaticPage,
    QualitySettings,
    ResourcePage,
    SitemapSettings,
    SiteSettings,
    Tag,
)
from core.errors import SnapshotError
from utils.simple_json_utils import load_json_file

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


# =============================================================================
# FIELD COERCION
# =============================================================================


def _pick(record: dict[str, Any], *keys: str) -> Any:
    """Return the first present key (camelCase and snake_case spellings)."""
    for key in keys:
        if key in record:
            return record[key]
    return None


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _as_optional_str(value: Any) -> str | None:
    text = _as_str(value)
    return text or None


def _as_flag(value: Any, default: bool, unparseable: bool) -> bool:
    """
    Coerce a boolean flag.

    Args:
        value: Raw value from the snapshot
        default: Value used when the flag is absent
        unparseable: Value used when the flag is present but not understood;
            callers pass whichever value leads to NoIndex

    Returns:
        bool: Coerced flag
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    logger.warning(f"Unparseable flag value {value!r}, using {unparseable}")
    return unparseable


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if not isinstance(value, (list, tuple)):
        logger.warning(f"Expected a list of strings, got {type(value).__name__}; treating as empty")
        return []
    return [_as_str(v) for v in value if _as_str(v)]


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Unparseable integer {value!r}, using {default}")
        return default


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable number {value!r}, using {default}")
        return default


def _timestamps(record: dict[str, Any]) -> dict[str, str | None]:
    return {
        "created_at": _as_optional_str(_pick(record, "createdAt", "created_at")),
        "updated_at": _as_optional_str(_pick(record, "updatedAt", "updated_at")),
    }


# =============================================================================
# ENTITY BUILDERS
# =============================================================================


def _build_post(record: dict[str, Any]) -> Post:
    status = _as_str(record.get("status"), POST_STATUS_DRAFT).strip().lower() or POST_STATUS_DRAFT
    return Post(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        title=_as_str(record.get("title")),
        content=_as_str(record.get("content")),
        status=status,
        excerpt=_as_str(record.get("excerpt")),
        meta_description=_as_str(_pick(record, "metaDescription", "meta_description")),
        author=_as_str(record.get("author")),
        author_id=_as_optional_str(_pick(record, "authorId", "author_id")),
        publish_date=_as_optional_str(_pick(record, "publishDate", "publish_date")),
        categories=_as_str_list(record.get("categories")),
        tags=_as_str_list(record.get("tags")),
        featured_image=_as_optional_str(_pick(record, "featuredImage", "featured_image")),
        no_index=_as_flag(_pick(record, "noIndex", "no_index"), default=False, unparseable=True),
        focus_keyword=_as_str(_pick(record, "focusKeyword", "focus_keyword")),
        seo_title=_as_str(_pick(record, "seoTitle", "seo_title")),
        **_timestamps(record),
    )


def _build_hub(record: dict[str, Any]) -> Hub:
    return Hub(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        name=_as_str(record.get("name")),
        description=_as_str(record.get("description")),
        meta_description=_as_str(_pick(record, "metaDescription", "meta_description")),
        linked_pillars=_as_str_list(_pick(record, "linkedPillars", "linked_pillars")),
        no_index=_as_flag(_pick(record, "noIndex", "no_index"), default=False, unparseable=True),
        **_timestamps(record),
    )


def _build_pillar(record: dict[str, Any]) -> PillarPage:
    return PillarPage(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        title=_as_str(record.get("title")),
        content=_as_str(record.get("content")),
        meta_description=_as_str(_pick(record, "metaDescription", "meta_description")),
        linked_hubs=_as_str_list(_pick(record, "linkedHubs", "linked_hubs")),
        linked_clusters=_as_str_list(_pick(record, "linkedClusters", "linked_clusters")),
        no_index=_as_flag(_pick(record, "noIndex", "no_index"), default=False, unparseable=True),
        **_timestamps(record),
    )


def _build_programmatic(record: dict[str, Any]) -> ProgrammaticPage:
    return ProgrammaticPage(
        id=_as_str(record.get("id")),
        template_id=_as_str(_pick(record, "templateId", "template_id")),
        genre_slug=_as_str(_pick(record, "genreSlug", "genre_slug")),
        genre=_as_str(record.get("genre")),
        title=_as_str(record.get("title")),
        content=_as_str(record.get("content")),
        meta_description=_as_str(_pick(record, "metaDescription", "meta_description")),
        has_content=_as_flag(_pick(record, "hasContent", "has_content"), default=False, unparseable=False),
        no_index=_as_flag(_pick(record, "noIndex", "no_index"), default=False, unparseable=True),
        **_timestamps(record),
    )


def _build_resource(record: dict[str, Any]) -> ResourcePage:
    return ResourcePage(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        title=_as_str(record.get("title")),
        description=_as_str(record.get("description")),
        meta_description=_as_str(_pick(record, "metaDescription", "meta_description")),
        download_url=_as_optional_str(_pick(record, "downloadUrl", "download_url")),
        resource_type=_as_str(_pick(record, "resourceType", "resource_type")),
        no_index=_as_flag(_pick(record, "noIndex", "no_index"), default=False, unparseable=True),
        **_timestamps(record),
    )


def _build_author(record: dict[str, Any]) -> Author:
    return Author(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        name=_as_str(record.get("name")),
        is_active=_as_flag(_pick(record, "isActive", "is_active"), default=True, unparseable=False),
        **_timestamps(record),
    )


def _build_category(record: dict[str, Any]) -> Category:
    return Category(
        id=_as_str(record.get("id")),
        slug=_as_str(record.get("slug")),
        name=_as_str(record.get("name")),
        description=_as_str(record.get("description")),
    )


def _build_tag(record: dict[str, Any]) -> Tag:
    return Tag(id=_as_str(record.get("id")), slug=_as_str(record.get("slug")), name=_as_str(record.get("name")))


def _build_collection(records: Any, builder: Callable[[dict[str, Any]], Any], label: str) -> list[Any]:
    """Build one collection, skipping records that are not mappings."""
    if records is None:
        return []
    if not isinstance(records, Iterable) or isinstance(records, (str, bytes, dict)):
        logger.warning(f"Snapshot collection '{label}' is not a list; ignoring it")
        return []

    items = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Skipping malformed {label} record at index {index}: {type(record).__name__}")
            continue
        items.append(builder(record))
    return items


# =============================================================================
# SETTINGS
# =============================================================================


def load_quality_settings(raw: dict[str, Any] | None, base: QualitySettings | None = None) -> QualitySettings:
    base = base or QualitySettings()
    raw = raw or {}
    return QualitySettings(
        min_content_length=_as_int(
            _pick(raw, "minContentLength", "min_content_length"), base.min_content_length
        ),
        auto_noindex_empty=_as_flag(
            _pick(raw, "autoNoIndexEmpty", "auto_noindex_empty"),
            default=base.auto_noindex_empty,
            unparseable=True,
        ),
    )


def load_sitemap_settings(raw: dict[str, Any] | None, base: SitemapSettings | None = None) -> SitemapSettings:
    base = base or SitemapSettings()
    raw = raw or {}
    changefreq = _as_str(_pick(raw, "sitemapChangefreq", "changefreq"), base.changefreq) or base.changefreq

    priority = dict(DEFAULT_SITEMAP_PRIORITIES)
    priority.update(base.priority)
    raw_priority = _pick(raw, "sitemapPriority", "priority")
    if isinstance(raw_priority, dict):
        for page_type, value in raw_priority.items():
            priority[page_type] = _as_float(value, priority.get(page_type, 0.5))

    return SitemapSettings(changefreq=changefreq, priority=priority)


def load_site_settings(raw: dict[str, Any] | None, base: SiteSettings | None = None) -> SiteSettings:
    base = base or SiteSettings()
    raw = raw or {}
    return SiteSettings(
        site_title=_as_str(_pick(raw, "siteTitle", "site_title"), base.site_title) or base.site_title,
        tagline=_as_str(raw.get("tagline"), base.tagline),
        base_url=_as_str(_pick(raw, "defaultCanonicalBase", "baseUrl", "base_url"), base.base_url),
        robots_txt_content=_as_str(
            _pick(raw, "robotsTxtContent", "robots_txt_content"), base.robots_txt_content
        ),
        block_ai_crawlers=_as_flag(
            _pick(raw, "blockAiCrawlers", "block_ai_crawlers"), default=base.block_ai_crawlers, unparseable=False
        ),
    )


# =============================================================================
# PUBLIC API
# =============================================================================


def load_snapshot(data: dict[str, Any]) -> ContentSnapshot:
    """
    Build a ContentSnapshot from decoded JSON.

    Args:
        data: Mapping with optional keys posts, hubs, pillars, programmatic,
            resources, authors, categories, tags and settings

    Returns:
        ContentSnapshot: Snapshot with every collection coerced
    """
    if not isinstance(data, dict):
        logger.warning(f"Snapshot root is {type(data).__name__}, expected an object; using an empty snapshot")
        data = {}

    settings = data.get("settings") if isinstance(data.get("settings"), dict) else {}

    snapshot = ContentSnapshot(
        posts=_build_collection(data.get("posts"), _build_post, "post"),
        hubs=_build_collection(data.get("hubs"), _build_hub, "hub"),
        pillars=_build_collection(_pick(data, "pillars", "pillarPages"), _build_pillar, "pillar"),
        programmatic_pages=_build_collection(
            _pick(data, "programmatic", "programmaticPages", "programmatic_pages"), _build_programmatic, "programmatic"
        ),
        resources=_build_collection(data.get("resources"), _build_resource, "resource"),
        authors=_build_collection(data.get("authors"), _build_author, "author"),
        categories=_build_collection(data.get("categories"), _build_category, "category"),
        tags=_build_collection(data.get("tags"), _build_tag, "tag"),
        quality=load_quality_settings(settings),
        sitemap=load_sitemap_settings(settings),
        site=load_site_settings(settings),
    )

    logger.debug(
        f"Loaded snapshot: {len(snapshot.posts)} posts, {len(snapshot.hubs)} hubs, "
        f"{len(snapshot.pillars)} pillars, {len(snapshot.programmatic_pages)} programmatic, "
        f"{len(snapshot.resources)} resources, {len(snapshot.authors)} authors"
    )
    return snapshot


def load_snapshot_file(path: str) -> ContentSnapshot:
    """
    Read and decode a JSON snapshot file.

    Raises:
        SnapshotError: If the file is missing, unreadable or not valid JSON
    """
    if not os.path.exists(path):
        raise SnapshotError(f"Snapshot file not found: {path}")

    try:
        data = load_json_file(path)
    except OSError as e:
        raise SnapshotError(f"Failed to read snapshot {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    return load_snapshot(data)
