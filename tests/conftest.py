#!/usr/bin/env python
"""
ABOUTME: Shared pytest fixtures for the SEO content graph engine test suite
ABOUTME: Provides a small music-production site snapshot covering every content type
"""

from datetime import datetime, timezone

import pytest

from core.content_models import (
    Author,
    Category,
    ContentSnapshot,
    Hub,
    PillarPage,
    Post,
    ProgrammaticPage,
    QualitySettings,
    ResourcePage,
    SiteSettings,
    Tag,
)


def words_html(count: int, word: str = "word") -> str:
    """Paragraph of ``count`` identical words."""
    return "<p>" + " ".join([word] * count) + "</p>"


@pytest.fixture
def make_words():
    return words_html


@pytest.fixture
def quality():
    return QualitySettings(min_content_length=300, auto_noindex_empty=True)


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_posts():
    return [
        Post(
            id="post-1",
            slug="mixing-vocals-like-a-pro",
            title="Mixing Vocals Like a Pro",
            content=words_html(400) + '<p>See the <a href="/mixing">mixing hub</a> and <a href="/missing-page">this</a></p>',
            status="published",
            excerpt="How to mix vocals",
            meta_description="A practical walkthrough of vocal mixing: compression, EQ and space for modern productions.",
            author="Jane Doe",
            author_id="author-1",
            publish_date="2024-03-01T10:00:00Z",
            categories=["cat-mixing"],
            tags=["vocals", "eq"],
            featured_image="/images/vocals.png",
            focus_keyword="mixing vocals",
            seo_title="Mixing Vocals Like a Pro: A Step by Step Guide",
            created_at="2024-02-28T09:00:00Z",
            updated_at="2024-03-05T00:00:00Z",
        ),
        Post(
            id="post-2",
            slug="eq-basics",
            title="EQ Basics for Beginners",
            content=words_html(350),
            status="published",
            meta_description="Learn the fundamentals of equalization and how to carve space for every instrument in a mix.",
            author="Jane Doe",
            author_id="author-1",
            publish_date="2024-02-01",
            categories=["cat-mixing"],
            tags=["eq"],
            created_at="2024-02-01T00:00:00Z",
        ),
        Post(
            id="post-3",
            slug="draft-post",
            title="Draft Post",
            content=words_html(400),
            status="draft",
            meta_description="Unfinished article about sidechain compression that is not yet ready for readers.",
            categories=["cat-mixing"],
            created_at="2024-05-01T00:00:00Z",
        ),
        Post(
            id="post-4",
            slug="hidden-post",
            title="Hidden Post",
            content=words_html(400),
            status="published",
            meta_description="A published article that editors have explicitly excluded from search engines.",
            publish_date="2024-01-15",
            categories=["cat-mixing"],
            no_index=True,
            created_at="2024-01-15T00:00:00Z",
        ),
        Post(
            id="post-5",
            slug="short-note",
            title="Short Note",
            content=words_html(20),
            status="published",
            publish_date="2024-01-20",
            categories=["cat-mixing"],
            created_at="2024-01-20T00:00:00Z",
        ),
        Post(
            id="post-6",
            slug="mastering-loudness",
            title="Mastering Loudness",
            content=words_html(500),
            status="published",
            meta_description="Understanding loudness targets, LUFS and limiting when mastering for streaming platforms.",
            author="John Smith",
            publish_date="2024-04-01T08:30:00Z",
            categories=["cat-mastering"],
            tags=["loudness"],
            created_at="2024-04-01T08:30:00Z",
        ),
    ]


@pytest.fixture
def sample_hubs():
    return [
        Hub(
            id="hub-mixing",
            slug="mixing",
            name="Mixing",
            description="<p>Everything about mixing music.</p>",
            meta_description="Guides, tutorials and techniques for mixing music at home and in the studio.",
            created_at="2024-01-10T00:00:00Z",
        ),
        Hub(
            id="hub-mastering",
            slug="mastering",
            name="Mastering",
            description="",
            created_at="2024-01-10T00:00:00Z",
        ),
    ]


@pytest.fixture
def sample_pillars():
    return [
        PillarPage(
            id="pillar-1",
            slug="mixing-vocals-guide",
            title="Complete Guide to Mixing Vocals",
            content=words_html(700),
            meta_description="The complete guide to mixing vocals, from gain staging to final automation passes.",
            linked_hubs=["hub-mixing", "hub-unknown"],
            linked_clusters=["post-1", "post-3", "post-missing"],
            created_at="2024-01-05T00:00:00Z",
            updated_at="2024-05-20T00:00:00Z",
        ),
        PillarPage(
            id="pillar-2",
            slug="mastering-overview",
            title="Mastering Overview",
            content=words_html(400),
            meta_description="An overview of mastering: what it is, when you need it and how it is done well.",
            created_at="2024-01-05T00:00:00Z",
        ),
    ]


@pytest.fixture
def sample_programmatic():
    return [
        ProgrammaticPage(
            id="prog-1",
            template_id="best-plugins",
            genre_slug="hip-hop",
            genre="Hip Hop",
            title="Best Plugins for Hip Hop",
            content=words_html(400),
            meta_description="Our pick of the best plugins for producing, mixing and mastering hip hop tracks.",
            has_content=True,
            created_at="2024-03-10T00:00:00Z",
        ),
        ProgrammaticPage(
            id="prog-2",
            template_id="best-plugins",
            genre_slug="jazz",
            genre="Jazz",
            title="Best Plugins for Jazz",
            content="",
            has_content=False,
        ),
    ]


@pytest.fixture
def sample_resources():
    return [
        ResourcePage(
            id="res-1",
            slug="mixing-checklist",
            title="Mixing Checklist",
            description="Printable checklist for every mix session.",
            meta_description="A printable checklist to run through before you bounce any mix for a client or release.",
            download_url="/files/mixing-checklist.pdf",
            resource_type="checklist",
            created_at="2024-02-15T00:00:00Z",
        ),
        ResourcePage(
            id="res-2",
            slug="coming-soon",
            title="Coming Soon",
            description="Template pack in progress.",
            meta_description="A template pack for mixing sessions that will be available for download soon.",
            download_url=None,
            created_at="2024-02-15T00:00:00Z",
        ),
    ]


@pytest.fixture
def sample_snapshot(sample_posts, sample_hubs, sample_pillars, sample_programmatic, sample_resources, quality):
    """Complete snapshot; see the individual fixtures for what is indexable."""
    return ContentSnapshot(
        posts=sample_posts,
        hubs=sample_hubs,
        pillars=sample_pillars,
        programmatic_pages=sample_programmatic,
        resources=sample_resources,
        authors=[
            Author(id="author-1", slug="jane-doe", name="Jane Doe", created_at="2024-01-01T00:00:00Z"),
            Author(id="author-2", slug="old-writer", name="Old Writer", is_active=False),
        ],
        categories=[
            Category(id="cat-mixing", slug="mixing", name="Mixing", description="Mixing tutorials"),
            Category(id="cat-mastering", slug="mastering", name="Mastering"),
        ],
        tags=[Tag(id="tag-eq", slug="eq", name="EQ"), Tag(id="tag-vocals", slug="vocals", name="Vocals")],
        quality=quality,
        site=SiteSettings(site_title="Studio Blog", tagline="Music production tips", base_url="https://example.com"),
    )


@pytest.fixture
def snapshot_dict():
    """Raw CMS export in camelCase, as written by the content API."""
    return {
        "posts": [
            {
                "id": "p1",
                "slug": "first-post",
                "title": "First Post",
                "content": "<p>hello world</p>",
                "status": "published",
                "metaDescription": "First post description",
                "publishDate": "2024-01-01",
                "categories": ["c1"],
                "tags": ["news"],
                "noIndex": False,
                "createdAt": "2024-01-01T00:00:00Z",
            },
            {"id": "p2", "slug": "second", "title": "Second", "noIndex": "maybe"},
            "not-a-record",
        ],
        "hubs": [{"id": "h1", "slug": "news", "name": "News", "linkedPillars": ["pl1"]}],
        "pillarPages": [{"id": "pl1", "slug": "guide", "title": "Guide", "linkedHubs": ["h1"], "linkedClusters": ["p1"]}],
        "programmaticPages": [
            {"id": "g1", "templateId": "tips", "genreSlug": "rock", "genre": "Rock", "hasContent": "yes"}
        ],
        "resources": [{"id": "r1", "slug": "kit", "title": "Kit", "downloadUrl": "/kit.zip"}],
        "authors": [{"id": "a1", "slug": "ann", "name": "Ann", "isActive": False}],
        "categories": [{"id": "c1", "slug": "news", "name": "News"}],
        "tags": [{"id": "t1", "slug": "news", "name": "News"}],
        "settings": {
            "minContentLength": 150,
            "autoNoIndexEmpty": False,
            "sitemapChangefreq": "daily",
            "sitemapPriority": {"blog": 0.8},
            "siteTitle": "My Site",
            "defaultCanonicalBase": "https://site.test",
            "blockAiCrawlers": True,
        },
    }
