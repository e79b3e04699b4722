"""
Keyword matching helpers shared by the heuristic analyzers.

All matching is case-insensitive and whole-word, so short terms like
"da" or "lit" don't fire inside "today" or "political". Single words
also match their plain inflections ("sharing", "tagged", "trends").
"""

import re
from functools import lru_cache
from typing import Iterable

# Strip punctuation around tokens, keep inner apostrophes/hyphens ("can't", "high-end")
_TOKEN_STRIP = "\"'.,!?;:()[]{}<>…“”‘’*_~`|/\\"

# Latin words (ASCII letters, optional apostrophe)
LATIN_WORD_PATTERN = re.compile(r"[a-zA-Z]+(?:'[a-zA-Z]+)?")


# Single ASCII words at least this long also match simple inflections
INFLECTION_MIN_LENGTH = 3


def _inflected(term: str) -> str:
    # share -> shares/shared/sharing, tag -> tags/tagged
    escaped = re.escape(term)
    forms = [escaped + "(?:s|es|ed|ing)?"]
    if term.endswith("e"):
        forms.append(re.escape(term[:-1]) + "(?:ed|ing)")
    elif term[-1] not in "aeiouwxy":
        forms.append(escaped + re.escape(term[-1]) + "(?:ed|ing)")
    return "(?:" + "|".join(forms) + ")"


@lru_cache(maxsize=4096)
def _term_pattern(term: str) -> re.Pattern:
    # \b only makes sense next to word characters ("18+" ends in a symbol)
    prefix = r"\b" if term[:1].isalnum() else ""
    suffix = r"\b" if term[-1:].isalnum() else ""
    term = term.lower()
    if term.isascii() and term.isalpha() and len(term) >= INFLECTION_MIN_LENGTH:
        body = _inflected(term)
    else:
        body = re.escape(term)
    return re.compile(prefix + body + suffix, re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    """True if `term` appears in `text` as a whole word/phrase."""
    if not term:
        return False
    return _term_pattern(term).search(text) is not None


def count_term(text: str, term: str) -> int:
    """Number of whole-word occurrences of `term` in `text`."""
    if not term:
        return 0
    return len(_term_pattern(term).findall(text))


def matched_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Distinct terms from `terms` present in `text`, in table order."""
    found = []
    for term in terms:
        if term not in found and contains_term(text, term):
            found.append(term)
    return found


def tokenize(text: str) -> list[str]:
    """Lowercased whitespace tokens with surrounding punctuation removed."""
    tokens = []
    for raw in text.lower().split():
        token = raw.strip(_TOKEN_STRIP)
        if token:
            tokens.append(token)
    return tokens


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))
