# ABOUTME: Site-wide SEO statistics and per-page audits built on the classifier, rule engine and link checks
# ABOUTME: Produces the data behind seo-report.json; never raises on malformed content

import logging
from dataclasses import dataclass, field
from typing import Any

from core.content_models import ContentSnapshot, Hub, PillarPage, Post, ProgrammaticPage, ResourcePage
from seo_modules.canonical import page_path
from seo_modules.content_quality import check_seo_readiness, is_empty_content, is_thin_content
from seo_modules.indexability import PILLAR_DEPTH_FACTOR, REASON_EXPLICIT, IndexVerdict, evaluate_indexability
from seo_modules.internal_links import all_internal_urls, broken_links

logger = logging.getLogger(__name__)

ISSUE_ERROR = "error"
ISSUE_WARNING = "warning"
ISSUE_INFO = "info"

# Score lost per broken internal link found on a page
BROKEN_LINK_PENALTY = 10

_PAGE_TYPES = {
    Post: "post",
    PillarPage: "pillar",
    Hub: "hub",
    ProgrammaticPage: "programmatic",
    ResourcePage: "resource",
}

# Readiness message prefix -> audited field (longest prefix first)
_FIELD_PREFIXES = (
    ("SEO title", "seo_title"),
    ("Meta description", "meta_description"),
    ("Title", "title"),
    ("Content", "content"),
)


@dataclass
class SeoIssue:
    type: str
    message: str
    field: str


@dataclass
class SeoAuditItem:
    page_id: str
    page_type: str
    url: str
    title: str
    issues: list[SeoIssue] = field(default_factory=list)
    score: int = 100


@dataclass
class SeoStats:
    total_pages: int = 0
    indexed_pages: int = 0
    no_index_pages: int = 0
    empty_pages: int = 0
    thin_pages: int = 0
    missing_meta: int = 0
    broken_links: int = 0
    hub_count: int = 0
    pillar_count: int = 0
    programmatic_count: int = 0


# =============================================================================
# HELPERS
# =============================================================================


def page_type_of(item: Any) -> str:
    return _PAGE_TYPES.get(type(item), "unknown")


def body_of(item: Any) -> str:
    """Main text of a page: content for posts, pillars and programmatic pages, description otherwise."""
    if isinstance(item, (Hub, ResourcePage)):
        return item.description or ""
    return getattr(item, "content", "") or ""


def url_of(item: Any) -> str:
    page_type = page_type_of(item)
    if page_type == "programmatic":
        return page_path("programmatic", item.genre_slug, item.template_id)
    return page_path(page_type, getattr(item, "slug", ""))


def _thin_threshold(item: Any, snapshot: ContentSnapshot) -> int:
    min_length = snapshot.quality.min_content_length
    if isinstance(item, PillarPage):
        return min_length * PILLAR_DEPTH_FACTOR
    return min_length


def _has_text_body(item: Any) -> bool:
    return isinstance(item, (Post, PillarPage, ProgrammaticPage))


def page_verdict(item: Any, snapshot: ContentSnapshot) -> IndexVerdict:
    """Rule engine verdict, with a post's explicit noindex flag applied on top."""
    verdict = evaluate_indexability(item, snapshot.quality)
    if verdict.indexable and isinstance(item, Post) and item.no_index:
        return IndexVerdict(False, REASON_EXPLICIT)
    return verdict


def _field_for(message: str) -> str:
    for prefix, field_name in _FIELD_PREFIXES:
        if message.startswith(prefix):
            return field_name
    return "content"


def iter_pages(snapshot: ContentSnapshot) -> list[Any]:
    """Every auditable page in a stable order: posts, pillars, hubs, programmatic, resources."""
    return [
        *snapshot.posts,
        *snapshot.pillars,
        *snapshot.hubs,
        *snapshot.programmatic_pages,
        *snapshot.resources,
    ]


# =============================================================================
# PUBLIC API
# =============================================================================


def audit_page(item: Any, snapshot: ContentSnapshot, known_urls: list[str] | None = None) -> SeoAuditItem:
    """
    Audit one page for editorial and indexing problems.

    Readiness issues become errors, readiness warnings become warnings, and a
    noindex verdict is reported as info. Each broken internal link is an
    error costing ``BROKEN_LINK_PENALTY`` points.

    Args:
        item: Content item from the snapshot
        snapshot: Content snapshot (settings and link targets)
        known_urls: Precomputed internal URL list (computed when omitted)

    Returns:
        SeoAuditItem: Issues and a 0-100 score for the page
    """
    if known_urls is None:
        known_urls = all_internal_urls(snapshot)

    body = body_of(item)
    readiness = check_seo_readiness(
        getattr(item, "title", "") or "",
        getattr(item, "seo_title", "") or "",
        getattr(item, "meta_description", "") or "",
        body,
        snapshot.quality,
    )

    issues = [SeoIssue(ISSUE_ERROR, message, _field_for(message)) for message in readiness.issues]
    issues.extend(SeoIssue(ISSUE_WARNING, message, _field_for(message)) for message in readiness.warnings)

    verdict = page_verdict(item, snapshot)
    if not verdict.indexable:
        issues.append(SeoIssue(ISSUE_INFO, f"Page is excluded from search ({verdict.reason})", "indexing"))

    broken = broken_links(body, known_urls)
    for url in broken:
        issues.append(SeoIssue(ISSUE_ERROR, f"Broken internal link: {url}", "content"))

    return SeoAuditItem(
        page_id=getattr(item, "id", ""),
        page_type=page_type_of(item),
        url=url_of(item),
        title=getattr(item, "title", "") or "",
        issues=issues,
        score=max(0, readiness.score - BROKEN_LINK_PENALTY * len(broken)),
    )


def audit_site(snapshot: ContentSnapshot) -> list[SeoAuditItem]:
    known_urls = all_internal_urls(snapshot)
    return [audit_page(item, snapshot, known_urls) for item in iter_pages(snapshot)]


def build_seo_stats(snapshot: ContentSnapshot) -> SeoStats:
    """
    Aggregate counts across every page in the snapshot.

    Empty pages have no text in their body. Thin pages have some text but
    fall below the word threshold; only pages with a full content body
    (posts, pillars, programmatic) are checked for thinness.
    """
    stats = SeoStats(
        hub_count=len(snapshot.hubs),
        pillar_count=len(snapshot.pillars),
        programmatic_count=len(snapshot.programmatic_pages),
    )
    known_urls = all_internal_urls(snapshot)

    for item in iter_pages(snapshot):
        stats.total_pages += 1

        if page_verdict(item, snapshot).indexable:
            stats.indexed_pages += 1
        else:
            stats.no_index_pages += 1

        body = body_of(item)
        if is_empty_content(body):
            stats.empty_pages += 1
        elif _has_text_body(item) and is_thin_content(body, _thin_threshold(item, snapshot)):
            stats.thin_pages += 1

        if not (getattr(item, "meta_description", "") or "").strip():
            stats.missing_meta += 1

        stats.broken_links += len(broken_links(body, known_urls))

    logger.debug(f"SEO stats: {stats.indexed_pages}/{stats.total_pages} pages indexable")
    return stats
