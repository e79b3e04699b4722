"""
Cultural Signal Analyzer - Generational Classifier
Copyright (c) 2026 beautifulplanet
Licensed under MIT License
"""

from knowledge_base import GENERATIONS, KnowledgeBase
from models import GenerationalAnalysis
from text_matching import matched_terms

POINTS_PER_KEYWORD = 10

# Generation -> lexicon name. Iteration order is also the tie-break order.
GENERATION_LEXICONS = {
    "gen-z": "gen_z",
    "millennial": "millennial",
    "gen-x": "gen_x",
    "boomer": "boomer",
}


def analyze_generational_segment(text: str, kb: KnowledgeBase) -> GenerationalAnalysis:
    scores = {
        generation: POINTS_PER_KEYWORD * len(matched_terms(text, kb.lexicon(GENERATION_LEXICONS[generation])))
        for generation in GENERATIONS
    }

    # Strict ">" keeps the earlier generation on ties (gen-z > millennial > gen-x > boomer)
    primary = GENERATIONS[0]
    for generation in GENERATIONS[1:]:
        if scores[generation] > scores[primary]:
            primary = generation

    profile = kb.generation_profiles[primary]
    return GenerationalAnalysis(
        primary_generation=primary,
        communication_style=profile.communication_style,
        value_system=list(profile.value_system),
        digital_savviness=profile.digital_savviness,
        consumption_pattern=profile.consumption_pattern,
        generation_scores=scores,
    )
