"""
Cultural Signal Analyzer - Virality Predictor
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Keyword-driven estimate of how shareable a post is, plus three secondary
scores (meme potential, influencer appeal, cross-platform reach).
"""

import re

from knowledge_base import KnowledgeBase
from models import ViralityPrediction
from text_matching import clamp, matched_terms

# --- Scoring constants ---
VIRAL_BASE_SCORE = 20
VIRAL_KEYWORD_POINTS = 15
EMOTIONAL_TRIGGER_POINTS = 8
QUESTION_POINTS = 10
CULTURAL_PRIDE_POINTS = 12

MEME_BASE_SCORE = 30
MEME_KEYWORD_POINTS = 12
MEME_EMOTION_POINTS = 4
MEME_EXCLAMATION_POINTS = 5

INFLUENCER_BASE_SCORE = 40
INFLUENCER_KEYWORD_POINTS = 10
INFLUENCER_VIRAL_POINTS = 5

CROSS_PLATFORM_BASE_SCORE = 50
CROSS_PLATFORM_TAG_POINTS = 5      # per hashtag or @mention, capped below
CROSS_PLATFORM_MAX_TAG_BONUS = 20
CROSS_PLATFORM_VIRAL_BONUS = 10
CROSS_PLATFORM_LONG_TEXT = 500     # chars; longer posts travel badly to short-form platforms
CROSS_PLATFORM_LONG_PENALTY = 15

HASHTAG_PATTERN = re.compile(r"#\w+")
MENTION_PATTERN = re.compile(r"@\w+")


def assess_meme_potential(text: str, kb: KnowledgeBase) -> float:
    score = MEME_BASE_SCORE
    score += MEME_KEYWORD_POINTS * len(matched_terms(text, kb.lexicon("meme")))
    score += MEME_EMOTION_POINTS * len(matched_terms(text, kb.lexicon("emotional_triggers")))
    if "!" in text:
        score += MEME_EXCLAMATION_POINTS
    return clamp(score)


def assess_influencer_appeal(text: str, kb: KnowledgeBase) -> float:
    score = INFLUENCER_BASE_SCORE
    score += INFLUENCER_KEYWORD_POINTS * len(matched_terms(text, kb.lexicon("influencer")))
    score += INFLUENCER_VIRAL_POINTS * len(matched_terms(text, kb.lexicon("viral")))
    return clamp(score)


def assess_cross_platform_appeal(text: str, kb: KnowledgeBase) -> float:
    score = CROSS_PLATFORM_BASE_SCORE
    tags = len(HASHTAG_PATTERN.findall(text)) + len(MENTION_PATTERN.findall(text))
    score += min(CROSS_PLATFORM_MAX_TAG_BONUS, tags * CROSS_PLATFORM_TAG_POINTS)
    if matched_terms(text, kb.lexicon("viral")):
        score += CROSS_PLATFORM_VIRAL_BONUS
    if len(text) > CROSS_PLATFORM_LONG_TEXT:
        score -= CROSS_PLATFORM_LONG_PENALTY
    return clamp(score)


def predict_virality(text: str, kb: KnowledgeBase) -> ViralityPrediction:
    viral_potential = VIRAL_BASE_SCORE
    shareability_factors = []

    for indicator in matched_terms(text, kb.lexicon("viral")):
        viral_potential += VIRAL_KEYWORD_POINTS
        shareability_factors.append(f"Contains viral keyword: {indicator}")

    detected_triggers = matched_terms(text, kb.lexicon("emotional_triggers"))
    viral_potential += EMOTIONAL_TRIGGER_POINTS * len(detected_triggers)

    # Questions drive replies
    if "?" in text:
        viral_potential += QUESTION_POINTS
        shareability_factors.append("Contains engagement question")

    for keyword in matched_terms(text, kb.lexicon("virality_pride")):
        viral_potential += CULTURAL_PRIDE_POINTS
        shareability_factors.append(f"Triggers cultural pride: {keyword}")

    return ViralityPrediction(
        viral_potential=clamp(viral_potential),
        shareability_factors=shareability_factors,
        emotional_triggers=detected_triggers,
        meme_potential=assess_meme_potential(text, kb),
        influencer_appeal=assess_influencer_appeal(text, kb),
        cross_platform_score=assess_cross_platform_appeal(text, kb),
    )
