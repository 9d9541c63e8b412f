from __future__ import annotations

import random
import re

from pydantic import BaseModel, Field

from genie.forms.options import OBJECTIVE_MEASUREMENT_OPTIONS

MAX_SUGGESTED_OPTIONS = 3
MAX_CUSTOM_SUGGESTIONS = 2
PICKS_PER_CATEGORY = 2

MEASUREMENT_KEYWORDS: dict[str, list[str]] = {
    "Website Traffic": ["traffic", "visitors", "pageviews", "visits", "website"],
    "Lead Generation": ["leads", "generate", "prospects", "qualified", "pipeline"],
    "Revenue/Sales": ["revenue", "sales", "profit", "income", "purchase", "buy"],
    "Brand Awareness": ["awareness", "brand", "recognition", "visibility", "reach"],
    "Engagement Rate": ["engagement", "interact", "participate", "social", "likes"],
    "Conversion Rate": ["conversion", "convert", "signup", "register", "download"],
    "Click-Through Rate (CTR)": ["click", "ctr", "email", "ad", "campaign"],
    "Social Media Metrics": ["social", "facebook", "twitter", "instagram", "linkedin", "followers"],
    "Email Open/Click Rates": ["email", "newsletter", "open", "click", "subscribe"],
}

# (category, trigger substrings, candidate metrics)
CONTEXT_CATEGORIES: list[tuple[str, tuple[str, ...], list[str]]] = [
    ("ecommerce", ("ecommerce", "shop", "store"), ["Cart Abandonment Rate", "Average Order Value", "Customer Lifetime Value"]),
    ("saas", ("saas", "software", "subscription"), ["Monthly Recurring Revenue", "Churn Rate", "Feature Adoption Rate"]),
    ("content", ("content", "blog", "article"), ["Time on Page", "Bounce Rate", "Content Shares"]),
    ("b2b", ("b2b", "enterprise", "business"), ["Sales Qualified Leads", "Demo Requests", "Pipeline Velocity"]),
    ("webinar", ("webinar", "event", "demo"), ["Registration Rate", "Attendance Rate", "Post-Event Engagement"]),
    ("launch", ("launch", "product", "new"), ["Pre-Launch Signups", "Launch Day Conversions", "Post-Launch Retention"]),
]

DEFAULT_CUSTOM_SUGGESTIONS = ["Cost Per Acquisition", "Return on Investment (ROI)"]

_KEYWORD_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    measurement: [re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE) for keyword in keywords]
    for measurement, keywords in MEASUREMENT_KEYWORDS.items()
}

if set(MEASUREMENT_KEYWORDS) != set(OBJECTIVE_MEASUREMENT_OPTIONS):
    raise RuntimeError("Measurement keyword table is out of sync with the measurement options.")


class MeasurementSuggestions(BaseModel):
    suggested_options: list[str] = Field(default_factory=list)
    custom_suggestions: list[str] = Field(default_factory=list)
    matched_categories: list[str] = Field(default_factory=list)
    scores: dict[str, int] = Field(default_factory=dict)


def score_measurements(text: str) -> dict[str, int]:
    scores: dict[str, int] = {}
    for measurement, patterns in _KEYWORD_PATTERNS.items():
        score = sum(len(pattern.findall(text)) for pattern in patterns)
        if score > 0:
            scores[measurement] = score
    return scores


def analyze_measurement_context(
    background: str | None,
    objectives: str | None,
    *,
    rng: random.Random | None = None,
) -> MeasurementSuggestions:
    picker = rng or random.Random()
    text = f"{background or ''} {objectives or ''}".lower()

    scores = score_measurements(text)
    # sorted() is stable, so ties keep the keyword table order.
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    suggested_options = [measurement for measurement, _ in ranked[:MAX_SUGGESTED_OPTIONS]]

    custom: list[str] = []
    matched_categories: list[str] = []
    for category, triggers, candidates in CONTEXT_CATEGORIES:
        if any(trigger in text for trigger in triggers):
            matched_categories.append(category)
            custom.extend(picker.sample(candidates, PICKS_PER_CATEGORY))

    if not custom:
        custom = list(DEFAULT_CUSTOM_SUGGESTIONS)

    unique_custom = list(dict.fromkeys(custom))[:MAX_CUSTOM_SUGGESTIONS]
    return MeasurementSuggestions(
        suggested_options=suggested_options,
        custom_suggestions=unique_custom,
        matched_categories=matched_categories,
        scores=scores,
    )


def merge_selection(current: list[str] | None, suggested: list[str]) -> list[str]:
    return list(dict.fromkeys([*(current or []), *suggested]))


def describe_keyword_reasoning(suggestions: MeasurementSuggestions) -> str:
    if not suggestions.suggested_options:
        return "No measurement keywords found in the background or objectives; showing general suggestions."
    ranked = ", ".join(
        f"{option} ({suggestions.scores.get(option, 0)})" for option in suggestions.suggested_options
    )
    reasoning = f"Keyword analysis of the background and objectives matched: {ranked}."
    if suggestions.matched_categories:
        reasoning += f" Context detected: {', '.join(suggestions.matched_categories)}."
    return reasoning
