# ABOUTME: Indexability rule engine - ordered per-type rules deciding index vs noindex
# ABOUTME: Dispatches over the closed ContentItem union; unknown input resolves to noindex

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from core.content_models import (
    Hub,
    PillarPage,
    Post,
    ProgrammaticPage,
    QualitySettings,
    ResourcePage,
)
from seo_modules.content_quality import is_empty_content, is_thin_content

logger = logging.getLogger(__name__)

# Verdict reasons
REASON_INDEXABLE = "indexable"
REASON_DRAFT = "draft"
REASON_UNPUBLISHED = "unpublished"
REASON_EXPLICIT = "explicit-noindex"
REASON_EMPTY = "empty-content"
REASON_THIN = "thin-content"
REASON_NO_CONTENT = "no-content"
REASON_MISSING_DOWNLOAD = "missing-download"
REASON_UNKNOWN_TYPE = "unknown-type"

# Pillar pages must carry this multiple of the minimum word count
PILLAR_DEPTH_FACTOR = 2


@dataclass(frozen=True)
class IndexVerdict:
    """Terminal state of the rule engine for one content item."""

    indexable: bool
    reason: str

    @property
    def robots_meta(self) -> str:
        return "index, follow" if self.indexable else "noindex, follow"


INDEXABLE = IndexVerdict(True, REASON_INDEXABLE)


def _noindex(reason: str) -> IndexVerdict:
    return IndexVerdict(False, reason)


# =============================================================================
# PER-TYPE RULES (first matching rule wins)
# =============================================================================


def _post_verdict(post: Post, settings: QualitySettings) -> IndexVerdict:
    if post.status == "draft":
        return _noindex(REASON_DRAFT)
    if not post.is_published:
        return _noindex(REASON_UNPUBLISHED)
    if settings.auto_noindex_empty and is_empty_content(post.content):
        return _noindex(REASON_EMPTY)
    if is_thin_content(post.content, settings.min_content_length):
        return _noindex(REASON_THIN)
    return INDEXABLE


def _pillar_verdict(pillar: PillarPage, settings: QualitySettings) -> IndexVerdict:
    if pillar.no_index:
        return _noindex(REASON_EXPLICIT)
    if settings.auto_noindex_empty and is_empty_content(pillar.content):
        return _noindex(REASON_EMPTY)
    if is_thin_content(pillar.content, settings.min_content_length * PILLAR_DEPTH_FACTOR):
        return _noindex(REASON_THIN)
    return INDEXABLE


def _hub_verdict(hub: Hub, settings: QualitySettings) -> IndexVerdict:
    if hub.no_index:
        return _noindex(REASON_EXPLICIT)
    if settings.auto_noindex_empty and is_empty_content(hub.description):
        return _noindex(REASON_EMPTY)
    return INDEXABLE


def _programmatic_verdict(page: ProgrammaticPage, settings: QualitySettings) -> IndexVerdict:
    if page.no_index:
        return _noindex(REASON_EXPLICIT)
    if not page.has_content:
        return _noindex(REASON_NO_CONTENT)
    if settings.auto_noindex_empty and is_empty_content(page.content):
        return _noindex(REASON_EMPTY)
    if is_thin_content(page.content, settings.min_content_length):
        return _noindex(REASON_THIN)
    return INDEXABLE


def _resource_verdict(resource: ResourcePage, settings: QualitySettings) -> IndexVerdict:
    if resource.no_index:
        return _noindex(REASON_EXPLICIT)
    if settings.auto_noindex_empty:
        if not resource.download_url:
            return _noindex(REASON_MISSING_DOWNLOAD)
        if is_empty_content(resource.description):
            return _noindex(REASON_EMPTY)
    return INDEXABLE


_RULES = {
    Post: _post_verdict,
    PillarPage: _pillar_verdict,
    Hub: _hub_verdict,
    ProgrammaticPage: _programmatic_verdict,
    ResourcePage: _resource_verdict,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def evaluate_indexability(item: Any, settings: QualitySettings) -> IndexVerdict:
    """
    Decide whether a content item may appear in search results.

    Args:
        item: One of Post, PillarPage, Hub, ProgrammaticPage, ResourcePage
        settings: Quality thresholds for this computation pass

    Returns:
        IndexVerdict: Indexable or NoIndex with the reason of the first
            matching rule. Anything outside the known content types is
            NoIndex rather than an error.
    """
    rule = _RULES.get(type(item))
    if rule is None:
        logger.debug(f"No indexability rule for {type(item).__name__}; treating as noindex")
        return _noindex(REASON_UNKNOWN_TYPE)
    return rule(item, settings)


def is_indexable(item: Any, settings: QualitySettings) -> bool:
    return evaluate_indexability(item, settings).indexable


def should_noindex_post(post: Post, settings: QualitySettings) -> bool:
    return not _post_verdict(post, settings).indexable


def should_noindex_pillar(pillar: PillarPage, settings: QualitySettings) -> bool:
    return not _pillar_verdict(pillar, settings).indexable


def should_noindex_hub(hub: Hub, settings: QualitySettings) -> bool:
    return not _hub_verdict(hub, settings).indexable


def should_noindex_programmatic(page: ProgrammaticPage, settings: QualitySettings) -> bool:
    return not _programmatic_verdict(page, settings).indexable


def should_noindex_resource(resource: ResourcePage, settings: QualitySettings) -> bool:
    return not _resource_verdict(resource, settings).indexable


def is_eligible_post(post: Post, settings: QualitySettings) -> bool:
    """Published, not explicitly noindexed, and passing the post rules."""
    return post.is_published and not post.no_index and _post_verdict(post, settings).indexable


def filter_indexable(items: Iterable[Any], settings: QualitySettings) -> list[Any]:
    """Keep indexable items in their original order."""
    return [item for item in items if is_indexable(item, settings)]
