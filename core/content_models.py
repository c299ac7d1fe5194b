# ABOUTME: Read-only content entities and settings consumed by the SEO content graph engine
# ABOUTME: Closed set of dataclasses standing in for the CMS snapshot (posts, hubs, pillars, ...)

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

POST_STATUS_DRAFT = "draft"
POST_STATUS_PUBLISHED = "published"

CHANGEFREQ_VALUES = ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")

DEFAULT_SITEMAP_PRIORITIES = {
    "home": 1.0,
    "hub": 0.9,
    "pillar": 0.9,
    "blog": 0.7,
    "programmatic": 0.6,
    "resource": 0.8,
    "author": 0.5,
}


# =============================================================================
# CONTENT ENTITIES
# =============================================================================


@dataclass
class Post:
    """Blog post. Only posts carry a publication status and taxonomy."""

    id: str
    slug: str
    title: str = ""
    content: str = ""
    status: str = POST_STATUS_DRAFT
    excerpt: str = ""
    meta_description: str = ""
    author: str = ""
    author_id: str | None = None
    publish_date: str | None = None
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    featured_image: str | None = None
    no_index: bool = False
    focus_keyword: str = ""
    seo_title: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_published(self) -> bool:
        return self.status == POST_STATUS_PUBLISHED


@dataclass
class Hub:
    """Category-level landing page aggregating posts and pillars."""

    id: str
    slug: str
    name: str = ""
    description: str = ""
    meta_description: str = ""
    linked_pillars: list[str] = field(default_factory=list)
    no_index: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def title(self) -> str:
        return self.name


@dataclass
class PillarPage:
    id: str
    slug: str
    title: str = ""
    content: str = ""
    meta_description: str = ""
    linked_hubs: list[str] = field(default_factory=list)
    linked_clusters: list[str] = field(default_factory=list)
    no_index: bool = False
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class ProgrammaticPage:
    """Generated page for a (template x genre) combination."""

    id: str
    template_id: str
    genre_slug: str
    genre: str = ""
    title: str = ""
    content: str = ""
    meta_description: str = ""
    has_content: bool = False
    no_index: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def slug(self) -> str:
        return self.genre_slug


@dataclass
class ResourcePage:
    id: str
    slug: str
    title: str = ""
    description: str = ""
    meta_description: str = ""
    download_url: str | None = None
    resource_type: str = ""
    no_index: bool = False
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class Author:
    id: str
    slug: str
    name: str = ""
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class Category:
    id: str
    slug: str
    name: str = ""
    description: str = ""


@dataclass
class Tag:
    id: str
    slug: str
    name: str = ""


# Closed union evaluated by the indexability rule engine
ContentItem = Post | PillarPage | Hub | ProgrammaticPage | ResourcePage


# =============================================================================
# SETTINGS
# =============================================================================


@dataclass(frozen=True)
class QualitySettings:
    """Content quality thresholds, immutable for one computation pass."""

    min_content_length: int = 300
    auto_noindex_empty: bool = True


@dataclass(frozen=True)
class SitemapSettings:
    changefreq: str = "weekly"
    priority: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_SITEMAP_PRIORITIES))

    def priority_for(self, page_type: str) -> float:
        return self.priority.get(page_type, DEFAULT_SITEMAP_PRIORITIES.get(page_type, 0.5))


@dataclass(frozen=True)
class SiteSettings:
    site_title: str = "Blog"
    tagline: str = ""
    base_url: str = ""
    robots_txt_content: str = ""
    block_ai_crawlers: bool = False


# =============================================================================
# DERIVED STRUCTURES
# =============================================================================

LINK_TYPES = ("pillar", "hub", "related", "cluster")


@dataclass
class InternalLink:
    """Suggested internal link. Derived on demand, never persisted."""

    target_url: str
    anchor_text: str
    relevance_score: int
    link_type: str


@dataclass
class ContentSnapshot:
    """Immutable view of all content and settings for one computation."""

    posts: list[Post] = field(default_factory=list)
    hubs: list[Hub] = field(default_factory=list)
    pillars: list[PillarPage] = field(default_factory=list)
    programmatic_pages: list[ProgrammaticPage] = field(default_factory=list)
    resources: list[ResourcePage] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    quality: QualitySettings = field(default_factory=QualitySettings)
    sitemap: SitemapSettings = field(default_factory=SitemapSettings)
    site: SiteSettings = field(default_factory=SiteSettings)


# =============================================================================
# TIMESTAMP HELPERS
# =============================================================================


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a CMS timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings (date-only, ``Z`` suffix, offsets) and epoch
    seconds. Returns None for anything empty or unparseable so callers can
    fall back to their own safe default.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def last_modified(item: Any) -> str | None:
    """Raw ``updated_at`` falling back to ``created_at`` (either may be None)."""
    return getattr(item, "updated_at", None) or getattr(item, "created_at", None)
