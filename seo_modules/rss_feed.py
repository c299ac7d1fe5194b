# ABOUTME: RSS 2.0 feed generator for site-wide, category, tag and author scopes
# ABOUTME: Emits only eligible posts (published, not noindexed, passing quality rules), newest first

import mimetypes
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any

from core.content_models import Category, ContentSnapshot, Post, QualitySettings, parse_timestamp
from seo_modules.canonical import CanonicalResolver
from seo_modules.indexability import is_eligible_post
from seo_modules.jinja_env import render_template

RSS_NAMESPACES = {
    "content": "http://purl.org/rss/1.0/modules/content/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "media": "http://search.yahoo.com/mrss/",
    "atom": "http://www.w3.org/2005/Atom",
}

FEED_LANGUAGE = "en-us"
DEFAULT_IMAGE_TYPE = "image/jpeg"
MAIN_FEED_PATH = "/rss.xml"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class FeedOptions:
    """Inputs shared by every feed scope."""

    snapshot: ContentSnapshot
    feed_title: str | None = None
    feed_description: str | None = None
    feed_path: str | None = None
    now: datetime | None = None

    def current_time(self) -> datetime:
        return self.now or datetime.now(timezone.utc)


# =============================================================================
# HELPERS
# =============================================================================


def format_rfc822_date(value: Any, default: datetime | None = None) -> str:
    """RFC 822 date in GMT; unparseable input falls back to ``default`` or now."""
    parsed = parse_timestamp(value)
    if parsed is None:
        parsed = default or datetime.now(timezone.utc)
    return format_datetime(parsed.astimezone(timezone.utc), usegmt=True)


def slugify_label(label: str) -> str:
    return re.sub(r"\s+", "-", label.lower())


def title_from_slug(slug: str) -> str:
    """Display name for a slug, e.g. hip-hop-production -> Hip Hop Production"""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), slug.replace("-", " "))


def _publish_key(post: Post) -> datetime:
    return parse_timestamp(post.publish_date) or _OLDEST


def eligible_posts(posts: list[Post], settings: QualitySettings) -> list[Post]:
    """Eligible posts, newest publish date first; unparseable dates sort last."""
    eligible = [post for post in posts if is_eligible_post(post, settings)]
    return sorted(eligible, key=_publish_key, reverse=True)


# =============================================================================
# SCOPE FILTERS
# =============================================================================


def filter_posts_by_category(posts: list[Post], category_slug: str, categories: list[Category]) -> list[Post]:
    """
    Posts filed under the category with ``category_slug``.

    Post category tokens are normally category ids; a token that is not a
    known id matches when it equals the slug itself.
    """
    category = next((c for c in categories if c.slug == category_slug), None)
    if category is None:
        return []

    categories_by_id = {c.id: c for c in categories}

    def matches(token: str) -> bool:
        known = categories_by_id.get(token)
        if known is not None:
            return known.slug == category_slug or known.id == category.id
        return token == category_slug

    return [post for post in posts if any(matches(token) for token in post.categories)]


def filter_posts_by_tag(posts: list[Post], tag_slug: str) -> list[Post]:
    return [post for post in posts if any(slugify_label(tag) == tag_slug for tag in post.tags)]


def filter_posts_by_author(posts: list[Post], author_slug: str) -> list[Post]:
    return [
        post
        for post in posts
        if slugify_label(post.author) == author_slug or (post.author_id is not None and post.author_id == author_slug)
    ]


# =============================================================================
# RENDERING
# =============================================================================


def _category_names(post: Post, categories: list[Category]) -> list[str]:
    by_id = {c.id: c for c in categories}
    by_slug = {c.slug: c for c in categories}
    names = []
    for token in post.categories:
        category = by_id.get(token) or by_slug.get(token)
        if category is not None and category.name:
            names.append(category.name)
    return names


def _image_type(url: str) -> str:
    guessed, _ = mimetypes.guess_type(url.split("?", 1)[0])
    if guessed and guessed.startswith("image/"):
        return guessed
    return DEFAULT_IMAGE_TYPE


def _feed_item(post: Post, categories: list[Category], resolver: CanonicalResolver, now: datetime) -> dict[str, Any]:
    link = resolver.canonical_for_type("post", post.slug)
    image_url = resolver.absolute(post.featured_image) if post.featured_image else None
    return {
        "title": post.title,
        "link": link,
        "pub_date": format_rfc822_date(post.publish_date, now),
        "description": post.excerpt or post.meta_description or "",
        "content": post.content or "",
        "creator": post.author,
        "categories": _category_names(post, categories),
        "image_url": image_url,
        "image_type": _image_type(image_url) if image_url else "",
    }


def _render_feed(
    title: str,
    description: str,
    feed_path: str,
    posts: list[Post],
    snapshot: ContentSnapshot,
    now: datetime,
) -> str:
    resolver = CanonicalResolver(snapshot.site.base_url)
    site_url = resolver.base_url
    last_build_date = format_rfc822_date(posts[0].publish_date, now) if posts else format_rfc822_date(now)

    return render_template(
        "rss.xml.j2",
        namespaces=RSS_NAMESPACES,
        title=title,
        description=description,
        site_url=site_url,
        feed_url=f"{site_url}{feed_path}",
        language=FEED_LANGUAGE,
        last_build_date=last_build_date,
        items=[_feed_item(post, snapshot.categories, resolver, now) for post in posts],
    )


def generate_empty_feed(title: str, feed_path: str, options: FeedOptions) -> str:
    return _render_feed(title, "No content available", feed_path, [], options.snapshot, options.current_time())


# =============================================================================
# PUBLIC API
# =============================================================================


def generate_main_feed(options: FeedOptions) -> str:
    """Site-wide feed of every eligible post."""
    snapshot = options.snapshot
    site = snapshot.site
    posts = eligible_posts(snapshot.posts, snapshot.quality)

    title = options.feed_title or site.site_title or "Blog"
    description = options.feed_description or site.tagline or "Blog Feed"
    return _render_feed(
        title, description, options.feed_path or MAIN_FEED_PATH, posts, snapshot, options.current_time()
    )


def generate_category_feed(category_slug: str, options: FeedOptions) -> str:
    """
    Feed scoped to one category.

    An unknown category, like a category with no eligible posts, renders a
    valid channel with no items.
    """
    snapshot = options.snapshot
    feed_path = options.feed_path or f"/rss/{category_slug}.xml"

    category = next((c for c in snapshot.categories if c.slug == category_slug), None)
    if category is None:
        return generate_empty_feed(f"Category: {category_slug}", feed_path, options)

    site_title = snapshot.site.site_title
    posts = eligible_posts(filter_posts_by_category(snapshot.posts, category_slug, snapshot.categories), snapshot.quality)

    title = options.feed_title or f"{category.name} - {site_title}"
    description = (
        options.feed_description or category.description or f"{category.name} articles from {site_title}"
    )
    return _render_feed(title, description, feed_path, posts, snapshot, options.current_time())


def generate_tag_feed(tag_slug: str, options: FeedOptions) -> str:
    snapshot = options.snapshot
    feed_path = options.feed_path or f"/rss/tag/{tag_slug}.xml"
    site_title = snapshot.site.site_title
    posts = eligible_posts(filter_posts_by_tag(snapshot.posts, tag_slug), snapshot.quality)

    tag_name = title_from_slug(tag_slug)
    title = options.feed_title or f"{tag_name} - {site_title}"
    description = options.feed_description or f"Articles tagged with {tag_name} from {site_title}"
    return _render_feed(title, description, feed_path, posts, snapshot, options.current_time())


def generate_author_feed(author_slug: str, options: FeedOptions) -> str:
    snapshot = options.snapshot
    feed_path = options.feed_path or f"/rss/author/{author_slug}.xml"
    site_title = snapshot.site.site_title
    posts = eligible_posts(filter_posts_by_author(snapshot.posts, author_slug), snapshot.quality)

    author_name = title_from_slug(author_slug)
    title = options.feed_title or f"Articles by {author_name} - {site_title}"
    description = options.feed_description or f"Articles written by {author_name}"
    return _render_feed(title, description, feed_path, posts, snapshot, options.current_time())


def available_category_feeds(categories: list[Category]) -> list[dict[str, str]]:
    return [{"title": f"{c.name} RSS Feed", "href": f"/rss/{c.slug}.xml"} for c in categories]
