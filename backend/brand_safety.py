"""
Cultural Signal Analyzer - Brand Safety Screener
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Starts every text at a perfect 100 and deducts the risk weight of each
sensitive topic it touches. The score never drops below zero.
"""

import logging

from knowledge_base import KnowledgeBase
from models import BrandSafetyAnalysis
from text_matching import contains_term, matched_terms

logger = logging.getLogger(__name__)

BASE_SAFETY_SCORE = 100
AGE_INAPPROPRIATE_PENALTY = 20
LOW_RISK_THRESHOLD = 80
MEDIUM_RISK_THRESHOLD = 60


def assess_age_appropriateness(text: str, kb: KnowledgeBase) -> bool:
    return not matched_terms(text, kb.lexicon("age_inappropriate"))


def classify_corporate_risk(overall_safety: float) -> str:
    if overall_safety >= LOW_RISK_THRESHOLD:
        return "low"
    if overall_safety >= MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "high"


def assess_brand_safety(text: str, kb: KnowledgeBase) -> BrandSafetyAnalysis:
    overall_safety = float(BASE_SAFETY_SCORE)
    conflicts: dict[str, list[str]] = {"religious": [], "political": [], "social": []}

    for topic in kb.sensitive_topics:
        if contains_term(text, topic.term):
            overall_safety = max(0.0, overall_safety - topic.risk_weight)
            conflicts[topic.category].append(topic.description)
            logger.debug(f"🚩 Sensitive topic [{topic.category}] '{topic.term}' (-{topic.risk_weight})")

    age_appropriate = assess_age_appropriateness(text, kb)
    if not age_appropriate:
        overall_safety = max(0.0, overall_safety - AGE_INAPPROPRIATE_PENALTY)

    return BrandSafetyAnalysis(
        overall_safety=overall_safety,
        religious_conflicts=conflicts["religious"],
        political_sensitivity=conflicts["political"],
        social_taboos=conflicts["social"],
        age_appropriate=age_appropriate,
        corporate_risk=classify_corporate_risk(overall_safety),
    )
