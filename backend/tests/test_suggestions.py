import random

from genie.suggestions import (
    DEFAULT_CUSTOM_SUGGESTIONS,
    analyze_measurement_context,
    describe_keyword_reasoning,
    merge_selection,
    score_measurements,
)

SAAS_CANDIDATES = {"Monthly Recurring Revenue", "Churn Rate", "Feature Adoption Rate"}


def test_keywords_match_whole_words_only() -> None:
    assert score_measurements("clicks and emails everywhere") == {}
    assert score_measurements("email campaign click") == {
        "Click-Through Rate (CTR)": 3,
        "Email Open/Click Rates": 2,
    }


def test_ties_keep_measurement_table_order() -> None:
    suggestions = analyze_measurement_context(
        "We are launching a new SaaS product",
        "Generate leads and grow website traffic",
        rng=random.Random(7),
    )
    assert suggestions.suggested_options == ["Website Traffic", "Lead Generation"]
    assert suggestions.scores == {"Website Traffic": 2, "Lead Generation": 2}


def test_context_categories_contribute_custom_suggestions() -> None:
    suggestions = analyze_measurement_context(
        "We are launching a new SaaS product",
        "Generate leads and grow website traffic",
        rng=random.Random(7),
    )
    assert suggestions.matched_categories == ["saas", "launch"]
    assert len(suggestions.custom_suggestions) == 2
    assert set(suggestions.custom_suggestions) <= SAAS_CANDIDATES


def test_suggestions_are_capped_at_three() -> None:
    suggestions = analyze_measurement_context(
        "Brand awareness and website traffic with social engagement",
        "Increase revenue, sales and conversion of visitors",
        rng=random.Random(1),
    )
    assert len(suggestions.suggested_options) == 3


def test_no_context_falls_back_to_default_custom_suggestions() -> None:
    suggestions = analyze_measurement_context("", None)
    assert suggestions.suggested_options == []
    assert suggestions.custom_suggestions == DEFAULT_CUSTOM_SUGGESTIONS
    assert describe_keyword_reasoning(suggestions).startswith("No measurement keywords found")


def test_reasoning_lists_scores_and_categories() -> None:
    suggestions = analyze_measurement_context("Run a webinar", "Drive website traffic", rng=random.Random(3))
    reasoning = describe_keyword_reasoning(suggestions)
    assert "Website Traffic (2)" in reasoning
    assert "Context detected: webinar." in reasoning


def test_merge_selection_keeps_existing_order_without_duplicates() -> None:
    assert merge_selection(["Brand Awareness", "Lead Generation"], ["Lead Generation", "Website Traffic"]) == [
        "Brand Awareness",
        "Lead Generation",
        "Website Traffic",
    ]
    assert merge_selection(None, ["Website Traffic"]) == ["Website Traffic"]
