"""
Cultural Signal Analyzer - Economic Signal Extractor
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Purchase intent, price sensitivity, brand loyalty, income tier and
economic anxiety from keyword tallies.
"""

from knowledge_base import KnowledgeBase
from models import EconomicIndicators
from text_matching import clamp, matched_terms

PURCHASE_POINTS = 15
PRICE_POINTS = 12
BRAND_POINTS = 10
ANXIETY_BASE = 20
ANXIETY_POINTS = 15


def assess_economic_anxiety(text: str, kb: KnowledgeBase) -> float:
    return clamp(ANXIETY_BASE + ANXIETY_POINTS * len(matched_terms(text, kb.lexicon("economic_anxiety"))))


def classify_disposable_income(text: str, kb: KnowledgeBase) -> str:
    # Luxury wins over budget when both show up
    if matched_terms(text, kb.lexicon("luxury")):
        return "high"
    if matched_terms(text, kb.lexicon("budget")):
        return "low"
    return "medium"


def extract_economic_indicators(text: str, kb: KnowledgeBase) -> EconomicIndicators:
    return EconomicIndicators(
        purchase_intent=clamp(PURCHASE_POINTS * len(matched_terms(text, kb.lexicon("purchase")))),
        price_consciousness=clamp(PRICE_POINTS * len(matched_terms(text, kb.lexicon("price")))),
        brand_loyalty=clamp(BRAND_POINTS * len(matched_terms(text, kb.lexicon("brand")))),
        disposable_income_indicator=classify_disposable_income(text, kb),
        economic_anxiety=assess_economic_anxiety(text, kb),
    )
