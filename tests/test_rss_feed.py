#!/usr/bin/env python
"""
ABOUTME: Tests for RSS 2.0 feed generation across main, category, tag and author scopes
ABOUTME: Every feed is parsed with ElementTree; namespaced elements use the declared URIs
"""

import xml.etree.ElementTree as ET

from core.content_models import ContentSnapshot, Post, SiteSettings
from seo_modules.rss_feed import (
    RSS_NAMESPACES,
    FeedOptions,
    available_category_feeds,
    eligible_posts,
    format_rfc822_date,
    generate_author_feed,
    generate_category_feed,
    generate_main_feed,
    generate_tag_feed,
    title_from_slug,
)


def parse_channel(xml: str) -> ET.Element:
    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == "rss"
    assert root.get("version") == "2.0"
    return root.find("channel")


def item_links(channel: ET.Element) -> list[str]:
    return [item.find("link").text for item in channel.findall("item")]


class TestMainFeed:
    """Tests for the site-wide feed"""

    def test_eligible_posts_newest_first(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_main_feed(FeedOptions(sample_snapshot, now=fixed_now)))

        assert channel.find("title").text == "Studio Blog"
        assert channel.find("description").text == "Music production tips"
        assert item_links(channel) == [
            "https://example.com/mastering-loudness",
            "https://example.com/mixing-vocals-like-a-pro",
            "https://example.com/eq-basics",
        ]

    def test_item_fields(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_main_feed(FeedOptions(sample_snapshot, now=fixed_now)))
        item = channel.findall("item")[1]

        assert item.find("title").text == "Mixing Vocals Like a Pro"
        assert item.find("guid").get("isPermaLink") == "true"
        assert item.find("pubDate").text == "Fri, 01 Mar 2024 10:00:00 GMT"
        assert item.find("description").text == "How to mix vocals"
        assert item.find(f"{{{RSS_NAMESPACES['dc']}}}creator").text == "Jane Doe"
        assert item.find("category").text == "Mixing"
        assert "<a href=\"/mixing\">" in item.find(f"{{{RSS_NAMESPACES['content']}}}encoded").text

        media = item.find(f"{{{RSS_NAMESPACES['media']}}}content")
        assert media.get("url") == "https://example.com/images/vocals.png"
        assert item.find("enclosure").get("type") == "image/png"

    def test_last_build_date_is_newest_post(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_main_feed(FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.find("lastBuildDate").text == "Mon, 01 Apr 2024 08:30:00 GMT"

    def test_self_link(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_main_feed(FeedOptions(sample_snapshot, now=fixed_now)))
        atom_link = channel.find(f"{{{RSS_NAMESPACES['atom']}}}link")
        assert atom_link.get("href") == "https://example.com/rss.xml"
        assert atom_link.get("rel") == "self"

    def test_markup_in_titles_is_escaped(self, fixed_now, make_words):
        post = Post(
            id="p",
            slug="rock-roll",
            title='Rock & Roll <Live> "Set"',
            content=make_words(300) + "<p>]]> trailing</p>",
            status="published",
            publish_date="2024-05-01",
        )
        snapshot = ContentSnapshot(posts=[post], site=SiteSettings(base_url="https://example.com"))
        xml = generate_main_feed(FeedOptions(snapshot, now=fixed_now))

        assert "Rock &amp; Roll &lt;Live&gt; &quot;Set&quot;" in xml
        channel = parse_channel(xml)
        item = channel.find("item")
        assert item.find("title").text == 'Rock & Roll <Live> "Set"'
        assert item.find(f"{{{RSS_NAMESPACES['content']}}}encoded").text.endswith("<p>]]> trailing</p>")


class TestScopedFeeds:
    """Tests for category, tag and author feeds"""

    def test_category_feed(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_category_feed("mixing", FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.find("title").text == "Mixing - Studio Blog"
        assert channel.find("description").text == "Mixing tutorials"
        assert item_links(channel) == [
            "https://example.com/mixing-vocals-like-a-pro",
            "https://example.com/eq-basics",
        ]

    def test_category_without_posts_is_empty_but_valid(self, sample_snapshot, fixed_now):
        sample_snapshot.posts = [p for p in sample_snapshot.posts if "cat-mastering" not in p.categories]
        channel = parse_channel(generate_category_feed("mastering", FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.findall("item") == []
        assert channel.find("title").text == "Mastering - Studio Blog"

    def test_unknown_category(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_category_feed("nope", FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.find("title").text == "Category: nope"
        assert channel.find("description").text == "No content available"
        assert channel.findall("item") == []

    def test_tag_feed(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_tag_feed("eq", FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.find("title").text == "Eq - Studio Blog"
        assert item_links(channel) == [
            "https://example.com/mixing-vocals-like-a-pro",
            "https://example.com/eq-basics",
        ]

    def test_author_feed(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_author_feed("john-smith", FeedOptions(sample_snapshot, now=fixed_now)))
        assert channel.find("title").text == "Articles by John Smith - Studio Blog"
        assert item_links(channel) == ["https://example.com/mastering-loudness"]

    def test_author_feed_by_id(self, sample_snapshot, fixed_now):
        channel = parse_channel(generate_author_feed("author-1", FeedOptions(sample_snapshot, now=fixed_now)))
        assert len(channel.findall("item")) == 2

    def test_custom_path_and_title(self, sample_snapshot, fixed_now):
        options = FeedOptions(sample_snapshot, feed_title="Custom", feed_path="/feeds/eq.xml", now=fixed_now)
        channel = parse_channel(generate_tag_feed("eq", options))
        assert channel.find("title").text == "Custom"
        assert channel.find(f"{{{RSS_NAMESPACES['atom']}}}link").get("href") == "https://example.com/feeds/eq.xml"


class TestFeedHelpers:
    """Tests for date formatting and feed discovery helpers"""

    def test_rfc822_fallback(self, fixed_now):
        assert format_rfc822_date("garbage", fixed_now) == "Sat, 01 Jun 2024 12:00:00 GMT"
        assert format_rfc822_date("2024-01-02") == "Tue, 02 Jan 2024 00:00:00 GMT"

    def test_unparseable_publish_dates_sort_last(self, quality, make_words):
        posts = [
            Post(id="a", slug="a", content=make_words(300), status="published", publish_date="soon"),
            Post(id="b", slug="b", content=make_words(300), status="published", publish_date="2024-01-01"),
        ]
        assert [p.id for p in eligible_posts(posts, quality)] == ["b", "a"]

    def test_title_from_slug(self):
        assert title_from_slug("hip-hop-production") == "Hip Hop Production"

    def test_available_category_feeds(self, sample_snapshot):
        assert available_category_feeds(sample_snapshot.categories) == [
            {"title": "Mixing RSS Feed", "href": "/rss/mixing.xml"},
            {"title": "Mastering RSS Feed", "href": "/rss/mastering.xml"},
        ]
