# ABOUTME: XML sitemap assembler - indexable content to prioritized, validated <url> entries
# ABOUTME: Includes the time-bounded cache for the rendered document, owned by SitemapAssembler

import logging
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.content_models import CHANGEFREQ_VALUES, ContentSnapshot, last_modified, parse_timestamp
from seo_modules.canonical import CanonicalResolver
from seo_modules.indexability import (
    is_eligible_post,
    should_noindex_hub,
    should_noindex_pillar,
    should_noindex_programmatic,
    should_noindex_resource,
)
from seo_modules.jinja_env import render_template

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
DEFAULT_CACHE_SECONDS = 60 * 60
ABOUT_PRIORITY = 0.5

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


@dataclass
class SitemapEntry:
    loc: str
    lastmod: Any
    changefreq: str
    priority: float
    page_type: str = ""


@dataclass
class SitemapIssue:
    loc: str
    page_type: str
    errors: list[str]


@dataclass
class SitemapBuild:
    xml: str
    entries: list[SitemapEntry] = field(default_factory=list)
    issues: list[SitemapIssue] = field(default_factory=list)


# =============================================================================
# ENTRY COLLECTION
# =============================================================================


def _loc(resolver: CanonicalResolver, page_type: str, slug: str, extra: str = "") -> str:
    # An item without a slug has no addressable page; validation reports it
    if not slug:
        return ""
    return resolver.canonical_for_type(page_type, slug, extra)


def collect_sitemap_entries(snapshot: ContentSnapshot, now: datetime | None = None) -> list[SitemapEntry]:
    """
    Walk every content collection and build sitemap entries.

    Static home and about entries come first, then hubs, pillars, eligible
    posts, programmatic pages, resources and active authors. Only items
    passing their indexability rules are included. Items with no timestamp
    at all are stamped with ``now``.

    Args:
        snapshot: Content snapshot with quality and sitemap settings
        now: Reference time (defaults to the current UTC time)

    Returns:
        list[SitemapEntry]: Unvalidated entries in emission order
    """
    now_iso = (now or datetime.now(timezone.utc)).isoformat()
    quality = snapshot.quality
    settings = snapshot.sitemap
    resolver = CanonicalResolver(snapshot.site.base_url)

    def stamp(item: Any) -> Any:
        return last_modified(item) or now_iso

    entries = [
        SitemapEntry(resolver.canonical_for_type("home"), now_iso, "daily", settings.priority_for("home"), "home"),
        SitemapEntry(resolver.canonical_for_type("about"), now_iso, "monthly", ABOUT_PRIORITY, "about"),
    ]

    for hub in snapshot.hubs:
        if should_noindex_hub(hub, quality):
            continue
        entries.append(
            SitemapEntry(_loc(resolver, "hub", hub.slug), stamp(hub), "weekly", settings.priority_for("hub"), "hub")
        )

    for pillar in snapshot.pillars:
        if should_noindex_pillar(pillar, quality):
            continue
        entries.append(
            SitemapEntry(
                _loc(resolver, "pillar", pillar.slug), stamp(pillar), "weekly", settings.priority_for("pillar"), "pillar"
            )
        )

    for post in snapshot.posts:
        if not is_eligible_post(post, quality):
            continue
        entries.append(
            SitemapEntry(
                _loc(resolver, "post", post.slug), stamp(post), settings.changefreq, settings.priority_for("blog"), "blog"
            )
        )

    for page in snapshot.programmatic_pages:
        if should_noindex_programmatic(page, quality):
            continue
        entries.append(
            SitemapEntry(
                _loc(resolver, "programmatic", page.genre_slug, page.template_id),
                stamp(page),
                "monthly",
                settings.priority_for("programmatic"),
                "programmatic",
            )
        )

    for resource in snapshot.resources:
        if should_noindex_resource(resource, quality):
            continue
        entries.append(
            SitemapEntry(
                _loc(resolver, "resource", resource.slug),
                stamp(resource),
                "monthly",
                settings.priority_for("resource"),
                "resource",
            )
        )

    for author in snapshot.authors:
        if not author.is_active:
            continue
        entries.append(
            SitemapEntry(
                _loc(resolver, "author", author.slug), stamp(author), "monthly", settings.priority_for("author"), "author"
            )
        )

    return entries


# =============================================================================
# VALIDATION AND RENDERING
# =============================================================================


def validate_sitemap_entry(entry: SitemapEntry) -> list[str]:
    """Return the list of problems with an entry (empty when valid)."""
    errors = []

    if not entry.loc:
        errors.append("URL location is required")

    priority = entry.priority
    if isinstance(priority, bool) or not isinstance(priority, (int, float)) or not 0.0 <= priority <= 1.0:
        errors.append("Priority must be between 0.0 and 1.0")

    if parse_timestamp(entry.lastmod) is None:
        errors.append("Invalid lastmod date")

    if entry.changefreq not in CHANGEFREQ_VALUES:
        errors.append(f"Invalid changefreq: {entry.changefreq!r}")

    return errors


def format_lastmod(value: Any) -> str:
    """W3C date (YYYY-MM-DD) for a timestamp that already passed validation."""
    if isinstance(value, str) and _DATE_PREFIX_RE.match(value.strip()):
        return value.strip()[:10]
    return parse_timestamp(value).date().isoformat()


def render_sitemap_xml(entries: list[SitemapEntry]) -> str:
    rows = [
        {
            "loc": entry.loc,
            "lastmod": format_lastmod(entry.lastmod),
            "changefreq": entry.changefreq,
            "priority": f"{entry.priority:.1f}",
        }
        for entry in entries
    ]
    return render_template("sitemap.xml.j2", namespace=SITEMAP_NAMESPACE, entries=rows)


def build_sitemap(snapshot: ContentSnapshot, now: datetime | None = None) -> SitemapBuild:
    """
    Collect, validate and render the sitemap.

    Invalid entries are reported in ``issues`` and left out of the XML.
    """
    valid: list[SitemapEntry] = []
    issues: list[SitemapIssue] = []

    for entry in collect_sitemap_entries(snapshot, now):
        errors = validate_sitemap_entry(entry)
        if errors:
            issues.append(SitemapIssue(loc=entry.loc, page_type=entry.page_type, errors=errors))
        else:
            valid.append(entry)

    return SitemapBuild(xml=render_sitemap_xml(valid), entries=valid, issues=issues)


def sitemap_stats(snapshot: ContentSnapshot) -> dict[str, Any]:
    entries = collect_sitemap_entries(snapshot)
    by_type = {"posts": 0, "hubs": 0, "pillars": 0, "programmatic": 0, "resources": 0, "authors": 0}
    type_keys = {
        "blog": "posts",
        "hub": "hubs",
        "pillar": "pillars",
        "programmatic": "programmatic",
        "resource": "resources",
        "author": "authors",
    }
    for entry in entries:
        key = type_keys.get(entry.page_type)
        if key:
            by_type[key] += 1
    return {"total": len(entries), "by_type": by_type}


# =============================================================================
# CACHE
# =============================================================================


class SitemapCache:
    """
    One rendered sitemap plus the time it was generated.

    Reads and writes of the slot are guarded by a lock so a reader never
    sees a document paired with another document's timestamp. Concurrent
    misses may each regenerate; the last store wins.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_CACHE_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._document: str | None = None
        self._generated_at: float | None = None

    def get(self) -> str | None:
        """Cached document if younger than the TTL, else None."""
        with self._lock:
            if self._document is None or self._generated_at is None:
                return None
            if self._clock() - self._generated_at >= self.ttl_seconds:
                return None
            return self._document

    def store(self, document: str) -> None:
        with self._lock:
            self._document = document
            self._generated_at = self._clock()

    def invalidate(self) -> None:
        with self._lock:
            self._document = None
            self._generated_at = None

    def age(self) -> float | None:
        with self._lock:
            if self._generated_at is None:
                return None
            return self._clock() - self._generated_at


class SitemapAssembler:
    """Serves the sitemap from its cache, rebuilding once the TTL has passed."""

    def __init__(self, cache: SitemapCache | None = None):
        self.cache = cache if cache is not None else SitemapCache()
        self.last_build: SitemapBuild | None = None

    def render(self, snapshot: ContentSnapshot, now: datetime | None = None) -> str:
        cached = self.cache.get()
        if cached is not None:
            return cached

        build = build_sitemap(snapshot, now)
        if build.issues:
            logger.warning(f"Sitemap: {len(build.issues)} invalid entries left out")
            for issue in build.issues:
                logger.debug(f"Sitemap entry {issue.loc or '<no loc>'} ({issue.page_type}): {'; '.join(issue.errors)}")

        self.cache.store(build.xml)
        self.last_build = build
        logger.debug(f"Sitemap regenerated with {len(build.entries)} URLs")
        return build.xml
