# ABOUTME: Deterministic relevance scoring between a post and candidate hubs, pillars and sibling posts
# ABOUTME: Additive taxonomy/title overlap weights drive best-match and related-post selection

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from core.content_models import Hub, PillarPage, Post

# Hub signals
HUB_CATEGORY_WEIGHT = 50
HUB_NAME_IN_TITLE_WEIGHT = 30
HUB_TAG_WEIGHT = 20

# Pillar signals
PILLAR_KEYWORD_WEIGHT = 15
PILLAR_KEYWORD_MIN_LENGTH = 4
PILLAR_LINKED_HUBS_BONUS = 10

# Sibling post signals
RELATED_CATEGORY_WEIGHT = 30
RELATED_TAG_WEIGHT = 20

DEFAULT_RELATED_COUNT = 3


@dataclass(frozen=True)
class ScoredMatch:
    item: Any
    score: int


def _tokens(values: Iterable[str]) -> list[str]:
    """Lower-cased, non-empty taxonomy tokens."""
    return [value.strip().lower() for value in values if value and value.strip()]


def _overlaps(tokens: Iterable[str], slug: str) -> bool:
    return any(token in slug or slug in token for token in tokens)


def _unique(values: Iterable[str]) -> list[str]:
    seen = set()
    ordered = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# =============================================================================
# PAIRWISE SCORES
# =============================================================================


def score_hub(post: Post, hub: Hub) -> int:
    """
    Score a hub against a post.

    +50 when a category token and the hub slug contain one another, +30 when
    the hub name appears in the post title, +20 when a tag and the hub slug
    contain one another. All comparisons are case-insensitive.
    """
    score = 0
    hub_slug = hub.slug.strip().lower()
    hub_name = hub.name.strip().lower()
    title = post.title.lower()

    if hub_slug and _overlaps(_tokens(post.categories), hub_slug):
        score += HUB_CATEGORY_WEIGHT

    if hub_name and hub_name in title:
        score += HUB_NAME_IN_TITLE_WEIGHT

    if hub_slug and _overlaps(_tokens(post.tags), hub_slug):
        score += HUB_TAG_WEIGHT

    return score


def score_pillar(post: Post, pillar: PillarPage) -> int:
    """+15 per pillar title keyword (4+ chars) found in the post title, +10 if the pillar links hubs."""
    title = post.title.lower()
    keywords = pillar.title.lower().split()
    matched = [kw for kw in keywords if len(kw) >= PILLAR_KEYWORD_MIN_LENGTH and kw in title]

    score = len(matched) * PILLAR_KEYWORD_WEIGHT
    if pillar.linked_hubs:
        score += PILLAR_LINKED_HUBS_BONUS
    return score


def score_related(post: Post, candidate: Post) -> int:
    """+30 per shared category id, +20 per shared tag."""
    candidate_categories = set(candidate.categories)
    candidate_tags = set(candidate.tags)

    shared_categories = [c for c in _unique(post.categories) if c in candidate_categories]
    shared_tags = [t for t in _unique(post.tags) if t in candidate_tags]

    return len(shared_categories) * RELATED_CATEGORY_WEIGHT + len(shared_tags) * RELATED_TAG_WEIGHT


# =============================================================================
# SELECTION
# =============================================================================


def _best(post: Post, candidates: Iterable[Any], scorer) -> ScoredMatch | None:
    best_match = None
    for candidate in candidates:
        score = scorer(post, candidate)
        # Strictly greater: the first candidate keeps an exact tie
        if score > 0 and (best_match is None or score > best_match.score):
            best_match = ScoredMatch(candidate, score)
    return best_match


def best_hub(post: Post, hubs: Iterable[Hub]) -> ScoredMatch | None:
    return _best(post, hubs, score_hub)


def best_pillar(post: Post, pillars: Iterable[PillarPage]) -> ScoredMatch | None:
    return _best(post, pillars, score_pillar)


def related_posts(post: Post, posts: Sequence[Post], count: int = DEFAULT_RELATED_COUNT) -> list[ScoredMatch]:
    """
    Rank sibling posts by shared taxonomy.

    Args:
        post: Source post
        posts: All posts in the snapshot
        count: Maximum number of matches to return

    Returns:
        list[ScoredMatch]: Published posts other than the source with a
            positive score, highest first (ties keep snapshot order)
    """
    scored = []
    for candidate in posts:
        if candidate is post or (post.id and candidate.id == post.id):
            continue
        if not candidate.is_published:
            continue
        score = score_related(post, candidate)
        if score > 0:
            scored.append(ScoredMatch(candidate, score))

    # sorted() is stable, so equal scores stay in snapshot order
    scored = sorted(scored, key=lambda match: match.score, reverse=True)
    return scored[: max(0, count)]
