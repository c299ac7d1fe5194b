# ABOUTME: Link suggestion assembler - ranked internal link suggestions and link validation per post
# ABOUTME: Combines the relevance scorer with anchor text generation; never mutates content

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from bs4 import BeautifulSoup

from core.content_models import ContentSnapshot, InternalLink, PillarPage, Post
from seo_modules.anchor_text import generate_anchor_text
from seo_modules.canonical import page_path
from seo_modules.relevance import best_hub, best_pillar, related_posts

# Related posts embedded in the suggestion list
SUGGESTED_RELATED_COUNT = 2

# Scores attached to editorially declared pillar links
DECLARED_HUB_SCORE = 50
DECLARED_CLUSTER_SCORE = 30


# =============================================================================
# LINK EXTRACTION
# =============================================================================


class LinkExtractor(Protocol):
    def extract(self, content: str) -> list[str]:
        """Return every href value in ``content``, in document order."""
        ...


class RegexHrefExtractor:
    """Narrow regex over ``href="..."`` / ``href='...'`` attributes."""

    _HREF_RE = re.compile(r"""href=["']([^"']+)["']""")

    def extract(self, content: str) -> list[str]:
        if not content:
            return []
        return self._HREF_RE.findall(content)


class SoupHrefExtractor:
    """HTML-parser based extractor; handles unquoted and oddly spaced attributes."""

    def extract(self, content: str) -> list[str]:
        if not content:
            return []
        soup = BeautifulSoup(content, "html.parser")
        return [tag.get("href", "").strip() for tag in soup.find_all(href=True) if tag.get("href", "").strip()]


_default_extractor = RegexHrefExtractor()


def is_internal_href(url: str) -> bool:
    return url.startswith("/") and not url.startswith("//")


# =============================================================================
# SUGGESTIONS
# =============================================================================


def suggested_links(post: Post, snapshot: ContentSnapshot) -> list[InternalLink]:
    """
    Suggest internal links for a post.

    Order is fixed: best pillar, best hub, then up to two related posts.
    Candidates scoring 0 never appear. Anchors are derived from the target
    title (the hub name for hubs).

    Args:
        post: Source post
        snapshot: Content snapshot providing candidate pillars, hubs and posts

    Returns:
        list[InternalLink]: Suggestions (possibly empty)
    """
    links: list[InternalLink] = []

    pillar_match = best_pillar(post, snapshot.pillars)
    if pillar_match:
        pillar = pillar_match.item
        links.append(
            InternalLink(
                target_url=page_path("pillar", pillar.slug),
                anchor_text=generate_anchor_text("", pillar.title),
                relevance_score=pillar_match.score,
                link_type="pillar",
            )
        )

    hub_match = best_hub(post, snapshot.hubs)
    if hub_match:
        hub = hub_match.item
        links.append(
            InternalLink(
                target_url=page_path("hub", hub.slug),
                anchor_text=generate_anchor_text("", hub.name),
                relevance_score=hub_match.score,
                link_type="hub",
            )
        )

    for match in related_posts(post, snapshot.posts, SUGGESTED_RELATED_COUNT):
        related = match.item
        links.append(
            InternalLink(
                target_url=page_path("post", related.slug),
                anchor_text=generate_anchor_text("", related.title),
                relevance_score=match.score,
                link_type="related",
            )
        )

    return links


def pillar_outbound_links(pillar: PillarPage, snapshot: ContentSnapshot) -> list[InternalLink]:
    """
    Links a pillar page should carry to its hubs and supporting cluster posts.

    Declared links carry a fixed score per relationship type. Unknown ids
    and unpublished cluster posts are skipped.
    """
    hubs_by_id = {hub.id: hub for hub in snapshot.hubs}
    posts_by_id = {post.id: post for post in snapshot.posts}
    links: list[InternalLink] = []

    for hub_id in pillar.linked_hubs:
        hub = hubs_by_id.get(hub_id)
        if hub is None:
            continue
        links.append(
            InternalLink(
                target_url=page_path("hub", hub.slug),
                anchor_text=generate_anchor_text("", hub.name),
                relevance_score=DECLARED_HUB_SCORE,
                link_type="hub",
            )
        )

    for post_id in pillar.linked_clusters:
        post = posts_by_id.get(post_id)
        if post is None or not post.is_published:
            continue
        links.append(
            InternalLink(
                target_url=page_path("post", post.slug),
                anchor_text=generate_anchor_text(post.focus_keyword, post.title),
                relevance_score=DECLARED_CLUSTER_SCORE,
                link_type="cluster",
            )
        )

    return links


# =============================================================================
# VALIDATION
# =============================================================================


@dataclass(frozen=True)
class LinkCheck:
    url: str
    valid: bool


def validate_internal_links(
    content: str, known_urls: Iterable[str], extractor: LinkExtractor | None = None
) -> list[LinkCheck]:
    """
    Check every site-relative link in ``content`` against the known URL set.

    Only hrefs starting with a single ``/`` are checked. A link is valid if
    it, or its form without one trailing slash, is a known URL.
    """
    extractor = extractor or _default_extractor
    known = set(known_urls)
    results = []

    for url in extractor.extract(content):
        if not is_internal_href(url):
            continue
        stripped = url[:-1] if url.endswith("/") else url
        results.append(LinkCheck(url=url, valid=url in known or stripped in known))

    return results


def broken_links(content: str, known_urls: Iterable[str], extractor: LinkExtractor | None = None) -> list[str]:
    return [check.url for check in validate_internal_links(content, known_urls, extractor) if not check.valid]


@dataclass
class LinkCoverage:
    has_pillar_link: bool
    has_hub_link: bool
    has_related_links: bool
    suggested_links: list[InternalLink] = field(default_factory=list)


def check_link_coverage(post: Post, snapshot: ContentSnapshot) -> LinkCoverage:
    """Report which suggested links the post's content already contains."""
    suggested = suggested_links(post, snapshot)
    content = (post.content or "").lower()

    def embedded(link_type: str) -> list[InternalLink]:
        return [link for link in suggested if link.link_type == link_type and link.target_url.lower() in content]

    return LinkCoverage(
        has_pillar_link=bool(embedded("pillar")),
        has_hub_link=bool(embedded("hub")),
        has_related_links=len(embedded("related")) >= 1,
        suggested_links=suggested,
    )


def all_internal_urls(snapshot: ContentSnapshot) -> list[str]:
    """Every site-relative URL the engine knows about, used for link validation."""
    urls = [page_path("home"), page_path("about")]
    urls.extend(page_path("hub", hub.slug) for hub in snapshot.hubs)
    urls.extend(page_path("pillar", pillar.slug) for pillar in snapshot.pillars)
    urls.extend(page_path("post", post.slug) for post in snapshot.posts if post.is_published)
    urls.extend(
        page_path("programmatic", page.genre_slug, page.template_id) for page in snapshot.programmatic_pages
    )
    urls.extend(page_path("resource", resource.slug) for resource in snapshot.resources)
    urls.extend(page_path("author", author.slug) for author in snapshot.authors)
    return urls
