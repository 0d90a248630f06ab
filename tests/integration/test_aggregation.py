import logging

import pytest

from core.aggregation import (
    ContentAggregator,
    GENERIC_INSIGHTS,
    TrendExtractor,
    content_cache_key,
    curated_content,
    deduplicate_by_url,
    extract_trends,
)
from core.cache import FileCache
from core.models.content import AggregatedContent
from core.tracks import Track
from fakes import FakeSource, make_article


def build_aggregator(cache, keyword=None, web=None, feed=None, ttl=3600):
    return ContentAggregator(
        cache=cache,
        keyword_source=keyword or FakeSource("newsapi"),
        web_source=web or FakeSource("serpapi"),
        feed_source=feed or FakeSource("feed"),
        ttl_seconds=ttl,
    )


# --- deduplication -------------------------------------------------------

def test_dedup_keeps_one_record_per_url_last_seen_wins():
    """Test that duplicate URLs collapse to the last article seen."""
    articles = [
        make_article("https://a.example.com", title="A first"),
        make_article("https://b.example.com", title="B"),
        make_article("https://a.example.com", title="A second"),
        make_article("https://a.example.com", title="A third"),
    ]

    unique = deduplicate_by_url(articles)

    by_url = {a.url: a.title for a in unique}
    assert len(unique) == 2
    assert by_url == {"https://a.example.com": "A third", "https://b.example.com": "B"}


def test_dedup_treats_urls_as_exact_keys():
    """Test that URLs differing only in query string are kept apart."""
    unique = deduplicate_by_url([
        make_article("https://a.example.com/post"),
        make_article("https://a.example.com/post?utm_source=x"),
    ])

    assert len(unique) == 2


# --- trends --------------------------------------------------------------

def test_trends_rank_by_article_count():
    """Test trend ranking by number of mentioning articles."""
    articles = [
        make_article("https://1", title="Kubernetes and AI", summary="cloud native"),
        make_article("https://2", title="Cloud costs rising"),
        make_article("https://3", title="AI agents in the cloud"),
    ]

    assert extract_trends(articles, vocabulary=["Kubernetes", "Cloud", "AI", "Rust"]) == ["Cloud", "AI", "Kubernetes"]


def test_trend_ties_follow_vocabulary_order():
    """Test that equal counts keep vocabulary order."""
    articles = [make_article("https://1", title="python and rust and security")]

    assert extract_trends(articles, vocabulary=["Security", "Rust", "Python"]) == ["Security", "Rust", "Python"]
    assert extract_trends(articles, vocabulary=["Python", "Security", "Rust"]) == ["Python", "Security", "Rust"]


def test_trends_are_capped_at_five_and_exclude_unmentioned_terms():
    """Test the five-trend cap and exclusion of zero counts."""
    text = "ai data cloud python rust security testing"
    articles = [make_article("https://1", title=text)]
    vocabulary = ["AI", "Data", "Cloud", "Python", "Rust", "Security", "Testing", "Kubernetes"]

    assert extract_trends(articles, vocabulary=vocabulary) == ["AI", "Data", "Cloud", "Python", "Rust"]
    assert extract_trends([make_article("https://2", title="gardening tips")], vocabulary=vocabulary) == []


def test_trend_matching_is_whole_word():
    """Test that terms only match whole words."""
    extractor = TrendExtractor(vocabulary=["AI", "LLM"])
    counts = extractor.count_terms([
        make_article("https://1", title="The minister said it was fair"),
        make_article("https://2", title="Comparing open LLMs"),
    ])

    assert counts == {"AI": 0, "LLM": 1}


def test_trend_extraction_is_deterministic():
    """Test that repeated extraction gives the same trends."""
    articles = [make_article(f"https://{i}", title=t) for i, t in enumerate(
        ["Data and AI", "AI security", "Security data", "Python data"]
    )]

    results = {tuple(extract_trends(articles)) for _ in range(5)}
    assert len(results) == 1


# --- curated fallback ----------------------------------------------------

def test_curated_content_for_unlisted_track_uses_generic_default():
    """Test the generic curated trends for an unknown track."""
    content = curated_content("Underwater Basket Weaving")

    assert content.is_fallback
    assert content.trends == ["Automation", "AI assistants", "Open source tooling"]
    assert len(content.insights) == 3


def test_fallback_is_structurally_identical_to_live_content(memory_cache, data_science_track):
    """Test that live and curated content share one shape."""
    live = build_aggregator(
        memory_cache,
        keyword=FakeSource("newsapi", default=[make_article("https://x", title="AI news", summary="ml")]),
    ).get_content(data_science_track)
    fallback = curated_content(data_science_track.name)

    assert set(live.to_dict()) == set(fallback.to_dict()) == {"trends", "insights"}
    assert set(live.to_dict()["insights"][0]) == set(fallback.to_dict()["insights"][0])
    assert type(live.insights[0]) is type(fallback.insights[0])


# --- aggregator ----------------------------------------------------------

def test_all_sources_empty_yields_curated_data_science_content(memory_cache, data_science_track):
    """Test curated Data Science content when every source is empty."""
    keyword = FakeSource("newsapi")
    web = FakeSource("serpapi")
    feed = FakeSource("feed", default=[])
    aggregator = build_aggregator(memory_cache, keyword, web, feed)

    content = aggregator.get_content(data_science_track)

    assert content.trends == ["AutoML", "Explainable AI (XAI)", "Edge ML"]
    assert [i.headline for i in content.insights] == [i.headline for i in GENERIC_INSIGHTS]
    assert content.is_fallback


def test_only_first_two_queries_and_feeds_are_used(memory_cache, data_science_track):
    """Test that only the first two queries and feeds are fetched."""
    keyword = FakeSource("newsapi")
    web = FakeSource("serpapi")
    feed = FakeSource("feed")

    build_aggregator(memory_cache, keyword, web, feed).get_content(data_science_track)

    assert keyword.queries == ["machine learning", "data science"]
    assert web.queries == ["machine learning", "data science"]
    assert feed.queries == ["https://feeds.example.com/ml.xml", "https://feeds.example.com/ds.xml"]


def test_mixed_duplicates_across_sources(memory_cache, data_science_track):
    """Test dedup of one URL returned by two different sources."""
    shared = "https://shared.example.com/story"
    keyword = FakeSource("newsapi", results={
        "machine learning": [
            make_article(shared, title="Keyword version", summary="from newsapi"),
            make_article("https://k.example.com/1", title="Keyword only"),
        ],
    })
    web = FakeSource("serpapi", results={
        "data science": [make_article(shared, title="Web version", summary="from serpapi", source="Serp")],
    })
    feed = FakeSource("feed", results={
        "https://feeds.example.com/ml.xml": [make_article("https://f.example.com/1", title="Feed only")],
    })
    aggregator = build_aggregator(memory_cache, keyword, web, feed)

    collected = aggregator.collect_articles(data_science_track)
    unique = deduplicate_by_url(collected)

    assert len(collected) == 4
    assert len(unique) == 3
    winner = next(a for a in unique if a.url == shared)
    assert winner.title == "Web version"

    content = aggregator.get_content(data_science_track)
    assert not content.is_fallback
    assert "Web version" in [i.headline for i in content.insights]
    assert "Keyword version" not in [i.headline for i in content.insights]


def test_insights_are_first_three_articles_with_defaults(memory_cache, data_science_track):
    """Test insight defaults for missing summary and source."""
    articles = [make_article(f"https://{i}.example.com", title=f"Story {i}", summary="") for i in range(5)]
    aggregator = build_aggregator(memory_cache, keyword=FakeSource("newsapi", results={"machine learning": articles}))

    content = aggregator.get_content(data_science_track)

    assert [i.headline for i in content.insights] == ["Story 0", "Story 1", "Story 2"]
    assert all(i.source == "Web" for i in content.insights)
    assert all(i.takeaway == "" for i in content.insights)


def test_failing_source_does_not_block_others(memory_cache, data_science_track):
    """Test that a raising source does not stop the others."""
    keyword = FakeSource("newsapi", error=RuntimeError("boom"))
    feed = FakeSource("feed", default=[make_article("https://f.example.com/1", title="Python data tips")])
    aggregator = build_aggregator(memory_cache, keyword=keyword, feed=feed)

    content = aggregator.get_content(data_science_track)

    assert not content.is_fallback
    assert content.insights[0].headline == "Python data tips"
    assert "Python" in content.trends


def test_result_is_cached_and_cache_hit_skips_sources(memory_cache, clock, data_science_track):
    """Test that a fresh cache entry skips the sources until it expires."""
    keyword = FakeSource("newsapi", default=[make_article("https://k.example.com", title="Cloud AI")])
    aggregator = build_aggregator(memory_cache, keyword=keyword, ttl=3600)

    first = aggregator.get_content(data_science_track)
    calls_after_first = len(keyword.queries)
    second = aggregator.get_content(data_science_track)

    assert memory_cache.get(content_cache_key(data_science_track)) == first.to_cache_dict()
    assert len(keyword.queries) == calls_after_first
    assert second.to_dict() == first.to_dict()

    clock.advance(3600)
    aggregator.get_content(data_science_track)
    assert len(keyword.queries) > calls_after_first


def test_unusable_cache_entry_is_refetched(memory_cache, data_science_track):
    """Test that a malformed cache entry is treated as a miss."""
    memory_cache.put(content_cache_key(data_science_track), {"unexpected": True}, ttl_seconds=100)
    keyword = FakeSource("newsapi", default=[make_article("https://k.example.com", title="AI")])

    content = build_aggregator(memory_cache, keyword=keyword).get_content(data_science_track)

    assert keyword.queries
    assert content.trends == ["AI"]


def test_cache_key_is_per_track():
    """Test cache keys are derived from the track slug."""
    a = Track(name="Cloud & DevOps", subtopics=("x",), queries=(), feeds=())
    b = Track(name="Software Engineering", subtopics=("x",), queries=(), feeds=())

    assert content_cache_key(a) == "content:cloud-devops"
    assert content_cache_key(a) != content_cache_key(b)


def test_aggregated_content_bounds():
    """Test trend and insight size limits."""
    content = AggregatedContent(trends=list("abcdefg"), insights=list(GENERIC_INSIGHTS) * 2)

    assert len(content.trends) == 5
    assert len(content.insights) == 3

    with pytest.raises(ValueError):
        AggregatedContent.from_dict({"trends": "AI"})


def test_cached_curated_content_stays_marked_as_fallback(memory_cache, data_science_track):
    """Test that curated content read back from the cache is still flagged as fallback."""
    keyword = FakeSource("newsapi")
    aggregator = build_aggregator(memory_cache, keyword=keyword)

    first = aggregator.get_content(data_science_track)
    calls_after_first = len(keyword.queries)
    second = aggregator.get_content(data_science_track)

    assert first.is_fallback is True
    assert second.is_fallback is True
    assert len(keyword.queries) == calls_after_first
    assert second.to_dict() == first.to_dict()


def test_cached_live_content_is_not_marked_as_fallback(memory_cache, data_science_track):
    """Test that live content read back from the cache keeps is_fallback False."""
    keyword = FakeSource("newsapi", default=[make_article("https://k.example.com", title="Cloud AI")])
    aggregator = build_aggregator(memory_cache, keyword=keyword)

    aggregator.get_content(data_science_track)

    assert aggregator.get_content(data_science_track).is_fallback is False


def test_cache_dict_carries_flag_but_content_shape_does_not():
    """Test that only the cache form includes the fallback flag."""
    content = curated_content("Cloud & DevOps")

    assert set(content.to_dict()) == {"trends", "insights"}
    assert content.to_cache_dict()["is_fallback"] is True
    assert AggregatedContent.from_dict(content.to_cache_dict()).is_fallback is True
    assert AggregatedContent.from_dict(content.to_dict()).is_fallback is False


def test_cache_write_failure_keeps_live_content(tmp_path, clock, data_science_track, caplog):
    """Test that an unwritable cache file does not discard freshly fetched content."""
    caplog.set_level(logging.WARNING, logger="core.aggregation.aggregator")
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("a regular file", encoding="utf-8")
    cache = FileCache(blocker / "cache.json", clock=clock)
    keyword = FakeSource("newsapi", default=[make_article("https://k.example.com", title="Serverless data pipelines")])

    content = build_aggregator(cache, keyword=keyword).get_content(data_science_track)

    assert content.is_fallback is False
    assert content.insights[0].headline == "Serverless data pipelines"
    assert "Could not cache content" in caplog.text
