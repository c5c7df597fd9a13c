"""Tests for primary topic grouping."""

from collections.abc import Callable

from finfeed.data import Article, TopicGroup
from finfeed.topics import group_primary_topics

ArticleFactory = Callable[..., Article]


def _with_topics(make_article: ArticleFactory, *topics: str | None) -> list[Article]:
    return [make_article(primary_topic=topic) for topic in topics]


def test_reordered_variants_collapse(make_article: ArticleFactory) -> None:
    articles = _with_topics(
        make_article,
        "Retirement Planning Strategies",
        "Strategies for Retirement Planning",
    )
    groups = group_primary_topics(articles)
    assert groups == [
        TopicGroup(
            main="Retirement Planning",
            subtopics=("Retirement Planning Strategies",),
            count=2,
        )
    ]


def test_subset_and_superset_variants_collapse(make_article: ArticleFactory) -> None:
    articles = _with_topics(
        make_article,
        "Social Security Benefits Cuts",
        "Social Security",
        "Social Security Benefits",
        "Social Security COLA Adjustment",
    )
    [group] = group_primary_topics(articles)
    assert group.main == "Social Security"
    assert group.count == 4
    # "Benefits" wins over its superset; the bare bucket name adds no variant.
    assert group.subtopics == ("Social Security Benefits", "Social Security COLA Adjustment")


def test_groups_sorted_by_count_then_label(make_article: ArticleFactory) -> None:
    articles = _with_topics(
        make_article,
        "Tariffs on steel",
        "Inflation data surprises",
        "Bitcoin ETF approval",
        "Inflation expectations",
    )
    groups = group_primary_topics(articles)
    assert [(g.main, g.count) for g in groups] == [
        ("Inflation", 2),
        ("Cryptocurrency", 1),
        ("Trade Policy", 1),
    ]


def test_subtopics_sorted_case_insensitively(make_article: ArticleFactory) -> None:
    articles = _with_topics(make_article, "Inflation in housing", "inflation and wages")
    [group] = group_primary_topics(articles)
    assert group.subtopics == ("inflation and wages", "Inflation in housing")


def test_articles_without_primary_topic_are_skipped(make_article: ArticleFactory) -> None:
    articles = _with_topics(make_article, None, "", "Inflation data")
    groups = group_primary_topics(articles)
    assert len(groups) == 1
    assert groups[0].count == 1


def test_count_matches_articles_per_group(make_article: ArticleFactory) -> None:
    articles = _with_topics(make_article, "Inflation data", "Inflation data", "Inflation data")
    [group] = group_primary_topics(articles)
    assert group.count == 3
    assert group.subtopics == ("Inflation data",)


def test_empty_input() -> None:
    assert group_primary_topics([]) == []
