"""
Cultural Signal Analyzer - Regional Nuance Analyzer
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Finds regional slang and cultural markers, guesses the dialect, and
scores religious/caste/gender neutrality by deducting the weight of
each sensitive phrase from a perfect 100.
"""

from knowledge_base import KnowledgeBase, WeightedTerm
from models import RegionalAnalysis
from text_matching import clamp, contains_term

# Used only when the knowledge base ships no table for that dimension
DEFAULT_RELIGION_NEUTRALITY = 85
DEFAULT_CASTE_NEUTRALITY = 90
DEFAULT_GENDER_SENSITIVITY = 80

DEFAULT_DIALECT = "standard"


def neutrality_score(text: str, terms: tuple[WeightedTerm, ...], fallback: float) -> float:
    """100 minus the weight of every matched term, clamped to [0, 100]."""
    if not terms:
        return fallback
    score = 100.0
    for entry in terms:
        if contains_term(text, entry.term):
            score -= entry.weight
    return clamp(score)


def detect_dialect_variation(text: str, region: str, kb: KnowledgeBase) -> str:
    """Dialect of `region` with the most marker hits; ties go to the first listed."""
    best, best_hits = DEFAULT_DIALECT, 0
    for dialect, markers in kb.dialect_markers.get(region, {}).items():
        hits = sum(1 for marker in markers if contains_term(text, marker))
        if hits > best_hits:
            best, best_hits = dialect, hits
    return best


def analyze_regional_nuances(text: str, region: str, kb: KnowledgeBase) -> RegionalAnalysis:
    detected_markers = []
    local_slang = []
    for marker in kb.markers_for_region(region):
        if contains_term(text, marker.term):
            detected_markers.append(marker.term)
            if marker.type == "slang":
                local_slang.append(marker.term)

    return RegionalAnalysis(
        primary_region=region,
        cultural_markers=detected_markers,
        local_slang_detected=local_slang,
        dialect_variation=detect_dialect_variation(text, region, kb),
        religion_neutrality=neutrality_score(
            text, kb.neutrality.get("religion", ()), DEFAULT_RELIGION_NEUTRALITY
        ),
        caste_neutrality=neutrality_score(
            text, kb.neutrality.get("caste", ()), DEFAULT_CASTE_NEUTRALITY
        ),
        gender_sensitivity=neutrality_score(
            text, kb.neutrality.get("gender", ()), DEFAULT_GENDER_SENSITIVITY
        ),
    )
