"""
Cultural Signal Analyzer - Script/Language Mixture Detector
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Measures how much of a text is written in each Indian script (plus Latin),
then names the code-mixing pattern (Hinglish, Tanglish, ...).

Romanized words found in a language's lexicon ("yaar", "accha", "machaa")
are credited to that language rather than to English once at least two
distinct ones appear, so Latin-only Hinglish is still recognised as
Hinglish while an English sentence naming "Anna" stays English.
"""

import logging

from knowledge_base import KnowledgeBase
from models import CodeMixingResult, ScriptMatch
from text_matching import LATIN_WORD_PATTERN, count_term, matched_terms

logger = logging.getLogger(__name__)

# Entries at or below this share of the text are treated as noise
MIN_SCRIPT_PERCENTAGE = 5

# Distinct lexicon words needed before Latin text is credited to a language.
# A lone "Anna" or "Ko" stays English.
MIN_ROMANIZED_HITS = 2

AUTHENTICITY_BASE = 50
AUTHENTICITY_PER_PARTICLE = 8

# Checked in order; first pair fully present wins
MIXING_PATTERNS = [
    ({"English", "Hindi"}, "hinglish"),
    ({"English", "Tamil"}, "tanglish"),
    ({"English", "Bengali"}, "banglish"),
    ({"English", "Punjabi"}, "punglish"),
]


def _romanized_language(word: str, kb: KnowledgeBase) -> str | None:
    for language, words in kb.romanized_lexicons.items():
        if word in words:
            return language
    return None


def measure_scripts(text: str, kb: KnowledgeBase) -> list[ScriptMatch]:
    """
    Percentage of `text` written in each known script, noise filtered out.

    Percentages are relative to the full text length (spaces and
    punctuation included), so they rarely add up to 100.
    """
    total = len(text)
    if total == 0:
        return []

    native_counts: dict[str, int] = {s.script: 0 for s in kb.scripts}
    romanized_counts: dict[str, int] = {s.script: 0 for s in kb.scripts}
    latin = kb.script_for_language("English")

    for char in text:
        for script in kb.scripts:
            if script is latin:
                continue  # Latin letters are attributed per word below
            if script.matches(char):
                native_counts[script.script] += 1
                break

    if latin is not None:
        hits: dict[str, set[str]] = {}
        letters_by_language: dict[str, int] = {}
        for match in LATIN_WORD_PATTERN.finditer(text):
            word = match.group().lower()
            letters = sum(1 for c in word if latin.matches(c))
            language = _romanized_language(word, kb)
            if language is not None and kb.script_for_language(language) is not None:
                hits.setdefault(language, set()).add(word)
                letters_by_language[language] = letters_by_language.get(language, 0) + letters
            else:
                native_counts[latin.script] += letters

        for language, letters in letters_by_language.items():
            if len(hits[language]) >= MIN_ROMANIZED_HITS:
                romanized_counts[kb.script_for_language(language).script] += letters
            else:
                native_counts[latin.script] += letters

    results = []
    for script in kb.scripts:
        native = native_counts[script.script]
        romanized = romanized_counts[script.script]
        percentage = round((native + romanized) / total * 100, 1)
        if percentage > MIN_SCRIPT_PERCENTAGE:
            results.append(ScriptMatch(
                script_name=script.script,
                language_name=script.language,
                percentage=percentage,
                transliterated=native == 0 and romanized > 0,
            ))
    return results


def identify_mixing_pattern(languages: list[ScriptMatch]) -> str:
    present = {match.language_name for match in languages}
    for required, pattern in MIXING_PATTERNS:
        if required <= present:
            return pattern
    return "custom"


def calculate_authenticity_score(text: str, kb: KnowledgeBase) -> int:
    """How natural the code-mixing feels: +8 per particle occurrence, capped at 100."""
    score = AUTHENTICITY_BASE
    for particle in kb.lexicon("code_mixing_particles"):
        score += AUTHENTICITY_PER_PARTICLE * count_term(text, particle)
    return min(100, score)


def detect_urban_rural_pattern(text: str, kb: KnowledgeBase) -> str:
    urban_count = len(matched_terms(text, kb.lexicon("urban")))
    rural_count = len(matched_terms(text, kb.lexicon("rural")))
    if urban_count > rural_count:
        return "urban"
    if rural_count > urban_count:
        return "rural"
    return "semi-urban"


def detect_code_mixing(text: str, kb: KnowledgeBase) -> CodeMixingResult:
    """Full code-mixing report for one text."""
    if not text:
        return CodeMixingResult()

    languages = measure_scripts(text, kb)
    logger.debug(f"Script mix: {[(m.language_name, m.percentage) for m in languages]}")
    return CodeMixingResult(
        languages=languages,
        mixing_pattern=identify_mixing_pattern(languages),
        authenticity_score=calculate_authenticity_score(text, kb),
        urban_rural_indicator=detect_urban_rural_pattern(text, kb),
    )
