"""
Cultural Signal Analyzer - Political Neutrality Assessor
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Lean, government sentiment, national pride, social causes and activism.
A lean is only reported when one side leads by more than 20 points;
anything closer is neutral.
"""

from knowledge_base import KnowledgeBase
from models import PoliticalAnalysis
from text_matching import clamp, matched_terms

LEAN_POINTS = 10
LEAN_MARGIN = 20
GOVERNMENT_BASE = 50
GOVERNMENT_POINTS = 10
PRIDE_BASE = 50
PRIDE_POINTS = 15
ACTIVISM_BASE = 10
ACTIVISM_POINTS = 20


def assess_government_sentiment(text: str, kb: KnowledgeBase) -> float:
    """Neutral 50 unless the text actually talks about the government."""
    if not matched_terms(text, kb.lexicon("government")):
        return GOVERNMENT_BASE
    positive = len(matched_terms(text, kb.lexicon("government_positive")))
    negative = len(matched_terms(text, kb.lexicon("government_negative")))
    return clamp(GOVERNMENT_BASE + GOVERNMENT_POINTS * (positive - negative))


def assess_activism_level(text: str, kb: KnowledgeBase) -> float:
    return clamp(ACTIVISM_BASE + ACTIVISM_POINTS * len(matched_terms(text, kb.lexicon("activism"))))


def analyze_political_neutrality(text: str, kb: KnowledgeBase) -> PoliticalAnalysis:
    left_score = LEAN_POINTS * len(matched_terms(text, kb.lexicon("political_left")))
    right_score = LEAN_POINTS * len(matched_terms(text, kb.lexicon("political_right")))

    if left_score > right_score + LEAN_MARGIN:
        political_lean = "slightly_left"
    elif right_score > left_score + LEAN_MARGIN:
        political_lean = "slightly_right"
    else:
        political_lean = "neutral"

    national_pride = clamp(PRIDE_BASE + PRIDE_POINTS * len(matched_terms(text, kb.lexicon("national_pride"))))

    return PoliticalAnalysis(
        political_lean=political_lean,
        government_sentiment=assess_government_sentiment(text, kb),
        national_pride=national_pride,
        social_cause=matched_terms(text, kb.lexicon("social_causes")),
        activism_level=assess_activism_level(text, kb),
    )
