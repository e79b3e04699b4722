"""
Cultural Signal Analyzer - Festival Context Analyzer
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

An explicit festival mention carries the festival's full importance.
Without one, whatever festival season we're currently in still counts,
at 70% weight.
"""

from datetime import date
from typing import Optional

from knowledge_base import KnowledgeBase
from models import FestivalAnalysis
from text_matching import contains_term, matched_terms

IMPLICIT_SEASON_WEIGHT = 0.7
HIGH_OPPORTUNITY_THRESHOLD = 0.7
MEDIUM_OPPORTUNITY_THRESHOLD = 0.3


def assess_commercial_opportunity(seasonal_relevance: float, gifting_intent: bool) -> str:
    if seasonal_relevance >= HIGH_OPPORTUNITY_THRESHOLD or gifting_intent:
        return "high"
    if seasonal_relevance >= MEDIUM_OPPORTUNITY_THRESHOLD:
        return "medium"
    return "low"


def analyze_festival_context(text: str, kb: KnowledgeBase, today: Optional[date] = None) -> FestivalAnalysis:
    """
    Festival relevance for `text`.

    Args:
        text: Text to analyze
        kb: Knowledge base snapshot
        today: Date used for the seasonal check (defaults to today)
    """
    current_month = (today or date.today()).month

    active_festival = None
    seasonal_relevance = 0.0
    festival_sentiment_boost = 0.0

    mentioned = [f for f in kb.festivals if contains_term(text, f.name)]
    if mentioned:
        # Several mentions: the most important festival wins, calendar order breaks ties
        festival = max(mentioned, key=lambda f: f.importance)
        active_festival = festival.name
        seasonal_relevance = festival.importance
        festival_sentiment_boost = festival.sentiment_boost
    else:
        for festival in kb.festivals:
            if current_month in festival.applicable_months:
                seasonal_relevance = max(seasonal_relevance, festival.importance * IMPLICIT_SEASON_WEIGHT)

    gifting_intent = bool(matched_terms(text, kb.lexicon("gifting")))
    family_gathering_intent = bool(matched_terms(text, kb.lexicon("family_gathering")))

    return FestivalAnalysis(
        active_festival=active_festival,
        seasonal_relevance=round(seasonal_relevance, 3),
        commercial_opportunity=assess_commercial_opportunity(seasonal_relevance, gifting_intent),
        festival_sentiment_boost=festival_sentiment_boost,
        gifting_intent=gifting_intent,
        family_gathering_intent=family_gathering_intent,
    )
