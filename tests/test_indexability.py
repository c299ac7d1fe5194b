#!/usr/bin/env python
"""
ABOUTME: Tests for the indexability rule engine
ABOUTME: Verifies per-type rule ordering, eligibility and filtering over the closed content union
"""

import pytest

from core.content_models import Author, Hub, PillarPage, Post, ProgrammaticPage, QualitySettings, ResourcePage
from seo_modules.indexability import (
    REASON_DRAFT,
    REASON_EMPTY,
    REASON_EXPLICIT,
    REASON_INDEXABLE,
    REASON_MISSING_DOWNLOAD,
    REASON_NO_CONTENT,
    REASON_THIN,
    REASON_UNKNOWN_TYPE,
    REASON_UNPUBLISHED,
    evaluate_indexability,
    filter_indexable,
    is_eligible_post,
    is_indexable,
    should_noindex_hub,
    should_noindex_pillar,
    should_noindex_post,
    should_noindex_programmatic,
    should_noindex_resource,
)


class TestPostRules:
    """Tests for post indexability"""

    @pytest.mark.parametrize("auto_noindex_empty", [True, False])
    @pytest.mark.parametrize("min_length", [0, 300, 5000])
    def test_draft_is_never_indexable(self, make_words, auto_noindex_empty, min_length):
        post = Post(id="p", slug="p", content=make_words(10000), status="draft")
        settings = QualitySettings(min_content_length=min_length, auto_noindex_empty=auto_noindex_empty)
        verdict = evaluate_indexability(post, settings)
        assert not verdict.indexable
        assert verdict.reason == REASON_DRAFT

    def test_other_statuses_are_unpublished(self, make_words, quality):
        post = Post(id="p", slug="p", content=make_words(400), status="scheduled")
        assert evaluate_indexability(post, quality).reason == REASON_UNPUBLISHED

    def test_empty_published_post(self, quality):
        post = Post(id="p", slug="p", content="<p> </p>", status="published")
        assert evaluate_indexability(post, quality).reason == REASON_EMPTY

    def test_empty_post_with_auto_noindex_off_is_still_thin(self, quality):
        settings = QualitySettings(min_content_length=300, auto_noindex_empty=False)
        post = Post(id="p", slug="p", content="", status="published")
        assert evaluate_indexability(post, settings).reason == REASON_THIN

    def test_thin_post(self, make_words, quality):
        post = Post(id="p", slug="p", content=make_words(299), status="published")
        assert evaluate_indexability(post, quality).reason == REASON_THIN

    def test_published_post_at_threshold_is_indexable(self, make_words, quality):
        post = Post(id="p", slug="p", content=make_words(300), status="published")
        verdict = evaluate_indexability(post, quality)
        assert verdict.indexable
        assert verdict.reason == REASON_INDEXABLE
        assert verdict.robots_meta == "index, follow"

    def test_should_noindex_post_ignores_flag(self, make_words, quality):
        post = Post(id="p", slug="p", content=make_words(300), status="published", no_index=True)
        assert not should_noindex_post(post, quality)
        assert not is_eligible_post(post, quality)


class TestPillarRules:
    """Tests for pillar pages and their stricter depth threshold"""

    def test_pillar_needs_twice_the_minimum(self, make_words, quality):
        assert should_noindex_pillar(PillarPage(id="x", slug="x", content=make_words(599)), quality)
        assert not should_noindex_pillar(PillarPage(id="x", slug="x", content=make_words(600)), quality)

    def test_explicit_flag_wins(self, make_words, quality):
        pillar = PillarPage(id="x", slug="x", content=make_words(1000), no_index=True)
        assert evaluate_indexability(pillar, quality).reason == REASON_EXPLICIT


class TestHubRules:
    """Tests for hub pages"""

    def test_hub_with_description(self, quality):
        assert not should_noindex_hub(Hub(id="h", slug="h", description="Short but present"), quality)

    def test_hub_without_description(self, quality):
        hub = Hub(id="h", slug="h", description="")
        assert evaluate_indexability(hub, quality).reason == REASON_EMPTY

    def test_empty_description_allowed_when_auto_noindex_off(self):
        settings = QualitySettings(auto_noindex_empty=False)
        assert not should_noindex_hub(Hub(id="h", slug="h"), settings)


class TestProgrammaticRules:
    """Tests for programmatic pages"""

    def test_generation_flag_required(self, make_words, quality):
        page = ProgrammaticPage(id="g", template_id="t", genre_slug="rock", content=make_words(400), has_content=False)
        assert evaluate_indexability(page, quality).reason == REASON_NO_CONTENT

    def test_generated_and_deep_enough(self, make_words, quality):
        page = ProgrammaticPage(id="g", template_id="t", genre_slug="rock", content=make_words(400), has_content=True)
        assert not should_noindex_programmatic(page, quality)

    def test_generated_but_thin(self, make_words, quality):
        page = ProgrammaticPage(id="g", template_id="t", genre_slug="rock", content=make_words(10), has_content=True)
        assert evaluate_indexability(page, quality).reason == REASON_THIN


class TestResourceRules:
    """Tests for downloadable resources"""

    def test_missing_download(self, quality):
        resource = ResourcePage(id="r", slug="r", description="A kit", download_url=None)
        assert evaluate_indexability(resource, quality).reason == REASON_MISSING_DOWNLOAD

    def test_missing_description(self, quality):
        resource = ResourcePage(id="r", slug="r", description="", download_url="/kit.zip")
        assert evaluate_indexability(resource, quality).reason == REASON_EMPTY

    def test_auto_noindex_off_skips_checks(self):
        settings = QualitySettings(auto_noindex_empty=False)
        assert not should_noindex_resource(ResourcePage(id="r", slug="r"), settings)


class TestDispatch:
    """Tests for the public dispatch helpers"""

    def test_unknown_type_is_noindex(self, quality):
        verdict = evaluate_indexability(Author(id="a", slug="a"), quality)
        assert not verdict.indexable
        assert verdict.reason == REASON_UNKNOWN_TYPE
        assert verdict.robots_meta == "noindex, follow"
        assert not is_indexable({"slug": "x"}, quality)

    def test_filter_keeps_order(self, sample_posts, quality):
        kept = filter_indexable(sample_posts, quality)
        assert [p.id for p in kept] == ["post-1", "post-2", "post-4", "post-6"]

    def test_eligibility_excludes_explicit_noindex(self, sample_posts, quality):
        eligible = [p.id for p in sample_posts if is_eligible_post(p, quality)]
        assert eligible == ["post-1", "post-2", "post-6"]
