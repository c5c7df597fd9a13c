"""Tests for category and topic canonicalization."""

from collections.abc import Callable

import pytest

from finfeed.data import Article
from finfeed.topics import (
    canonicalize_primary_topic,
    canonicalize_token,
    extract_category_tokens,
    normalize_primary_subtopic,
    split_composite,
    tokenize_primary_subtopic,
    topic_rule,
)

ArticleFactory = Callable[..., Article]


class TestCanonicalizeToken:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Markets", "Markets"),
            ("  markets ", "Markets"),
            ("tech", "Technology"),
            ("TECH", "Technology"),
            ("econ", "Economics"),
            ("Economy", "Economics"),
            ("market", "Markets"),
            ("political", "Politics"),
            ("healthcare", "Health"),
        ],
    )
    def test_known_tokens(self, raw: str, expected: str) -> None:
        assert canonicalize_token(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "Sports", "AI"])
    def test_unknown_tokens(self, raw: str | None) -> None:
        assert canonicalize_token(raw) is None


def test_split_composite() -> None:
    assert split_composite("Finance/Markets & Policy") == ["Finance", "Markets", "Policy"]
    assert split_composite("Science and Technology") == ["Science", "Technology"]
    assert split_composite("Business, Economy") == ["Business", "Economy"]
    assert split_composite(None) == []


def test_extract_category_tokens_uses_aliases(make_article: ArticleFactory) -> None:
    article = make_article(category="Tech", topics=("AI",))
    assert extract_category_tokens(article) == {"Technology"}


def test_extract_category_tokens_merges_category_and_topics(make_article: ArticleFactory) -> None:
    article = make_article(category="Finance/Markets", topics=("economy", "Rates", "healthcare"))
    assert extract_category_tokens(article) == {"Finance", "Markets", "Economics", "Health"}


def test_extract_category_tokens_empty(make_article: ArticleFactory) -> None:
    article = make_article(category="", topics=())
    assert extract_category_tokens(article) == set()


class TestCanonicalizePrimaryTopic:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("How Social Security Benefits Change in 2025", "Social Security"),
            ("Retirement Planning Strategies", "Retirement Planning"),
            ("Strategies for Retirement Planning", "Retirement Planning"),
            ("Fed Signals Rate Cuts", "Interest Rates"),
            ("Consumer prices climb again", "Inflation"),
            ("New tariffs on steel imports", "Trade Policy"),
            ("Bitcoin hits record", "Cryptocurrency"),
        ],
    )
    def test_rule_table(self, raw: str, expected: str) -> None:
        assert canonicalize_primary_topic(raw) == expected

    def test_fallback_strips_geography_and_stopwords(self) -> None:
        assert canonicalize_primary_topic("Semiconductor Supply Chains in the U.S.") == (
            "Semiconductor Supply Chains"
        )

    def test_fallback_takes_first_three_words(self) -> None:
        assert canonicalize_primary_topic("the future of electric vehicle batteries") == (
            "Future Electric Vehicle"
        )

    def test_fallback_keeps_acronyms(self) -> None:
        assert canonicalize_primary_topic("ETF flows", rules=()) == "ETF Flows"

    def test_unmatched_phrasing_falls_through(self) -> None:
        # Known false negative: no rule covers wage growth phrased this way.
        assert canonicalize_primary_topic("Paychecks shrink") == "Paychecks Shrink"

    def test_custom_rules(self) -> None:
        rules = (topic_rule(r"\bwidgets?\b", "Widgets"),)
        assert canonicalize_primary_topic("Widget demand surges", rules=rules) == "Widgets"
        assert canonicalize_primary_topic("Social Security", rules=rules) == "Social Security"

    def test_first_rule_wins(self) -> None:
        rules = (topic_rule("inflation", "First"), topic_rule("inflation", "Second"))
        assert canonicalize_primary_topic("inflation", rules=rules) == "First"

    @pytest.mark.parametrize("raw", [None, "", "   ", "the of and"])
    def test_empty(self, raw: str | None) -> None:
        assert canonicalize_primary_topic(raw) is None


class TestNormalizePrimarySubtopic:
    def test_word_order_is_irrelevant(self) -> None:
        assert normalize_primary_subtopic("rate hike") == normalize_primary_subtopic("hike rate")

    def test_stemmed_variants_match(self) -> None:
        a = normalize_primary_subtopic("Retirement Planning Strategies")
        b = normalize_primary_subtopic("Strategies for Retirement Planning")
        assert a == b == "plan retire strategy"

    def test_us_variants_and_boilerplate(self) -> None:
        a = normalize_primary_subtopic("The current state of retirement in the US")
        b = normalize_primary_subtopic("Retirement in the United States")
        c = normalize_primary_subtopic("Retirement in the U.S.")
        assert a == b == c == "retire us"

    def test_duplicate_tokens_collapse(self) -> None:
        assert normalize_primary_subtopic("benefits benefit") == "benefit"

    @pytest.mark.parametrize("raw", [None, "", "the of"])
    def test_empty(self, raw: str | None) -> None:
        assert normalize_primary_subtopic(raw) is None


def test_tokenize_drops_bucket_words() -> None:
    assert tokenize_primary_subtopic("Social Security Benefits") == ["benefit"]
    assert tokenize_primary_subtopic("Social Security") == []
    assert tokenize_primary_subtopic("COLA adjustments for 2025") == ["2025", "adj", "cola"]
