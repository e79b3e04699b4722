"""
Cultural Signal Analyzer - Cultural Knowledge Base
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Static lexicons and tables that drive every heuristic analyzer: script
Unicode ranges, regional slang, the festival calendar, sensitive topics
and the keyword sets for virality, generations, economics and politics.

Think of it like an antivirus definition database for cultural signals.
Built-in defaults live in this module; a directory of JSON files can
override individual tables without touching pipeline code. A loaded
KnowledgeBase is an immutable snapshot and is passed explicitly to
every analyzer.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KB_VERSION = "2026.10-builtin"
DEFAULT_KB_PATH = Path(__file__).parent.parent / "cultural-kb"

SENSITIVE_CATEGORIES = ("religious", "political", "social")
GENERATIONS = ("gen-z", "millennial", "gen-x", "boomer")
ALL_INDIA = "All India"


@dataclass(frozen=True)
class ScriptRange:
    script: str
    language: str
    ranges: tuple[tuple[int, int], ...]

    def matches(self, char: str) -> bool:
        code = ord(char)
        return any(start <= code <= end for start, end in self.ranges)


@dataclass(frozen=True)
class RegionalMarker:
    term: str
    type: str  # slang, cultural


@dataclass(frozen=True)
class FestivalEntry:
    name: str
    applicable_months: frozenset[int]
    importance: float
    sentiment_boost: float


@dataclass(frozen=True)
class SensitiveTopicEntry:
    term: str
    risk_weight: float
    category: str
    description: str


@dataclass(frozen=True)
class WeightedTerm:
    term: str
    weight: float


@dataclass(frozen=True)
class GenerationProfile:
    communication_style: str
    value_system: tuple[str, ...]
    digital_savviness: int
    consumption_pattern: str


# Lexicons every analyzer expects to find. A JSON override that drops one
# of these is a configuration error, not a silent empty list.
REQUIRED_LEXICONS = (
    "cultural_positive", "cultural_negative",
    "sentiment_positive", "sentiment_negative",
    "code_mixing_particles", "urban", "rural",
    "viral", "emotional_triggers", "virality_pride", "meme", "influencer",
    "gifting", "family_gathering", "age_inappropriate",
    "gen_z", "millennial", "gen_x", "boomer",
    "purchase", "price", "brand", "luxury", "budget", "economic_anxiety",
    "political_left", "political_right", "government",
    "government_positive", "government_negative",
    "national_pride", "social_causes", "activism",
)


@dataclass(frozen=True)
class KnowledgeBase:
    """Immutable snapshot of every cultural table, tagged with a version."""

    version: str
    scripts: tuple[ScriptRange, ...]
    romanized_lexicons: Mapping[str, frozenset[str]]
    regional_markers: Mapping[str, tuple[RegionalMarker, ...]]
    dialect_markers: Mapping[str, Mapping[str, tuple[str, ...]]]
    regional_sentiment: Mapping[str, tuple[WeightedTerm, ...]]
    festivals: tuple[FestivalEntry, ...]
    sensitive_topics: tuple[SensitiveTopicEntry, ...]
    neutrality: Mapping[str, tuple[WeightedTerm, ...]]
    lexicons: Mapping[str, tuple[str, ...]]
    generation_profiles: Mapping[str, GenerationProfile] = field(default_factory=dict)

    def lexicon(self, name: str) -> tuple[str, ...]:
        try:
            return self.lexicons[name]
        except KeyError:
            raise ConfigurationError(f"Unknown lexicon '{name}'", {"lexicon": name})

    def markers_for_region(self, region: str) -> tuple[RegionalMarker, ...]:
        """Markers for `region`; "All India" is the union of every region."""
        if region == ALL_INDIA:
            seen = {}
            for markers in self.regional_markers.values():
                for marker in markers:
                    seen.setdefault(marker.term, marker)
            return tuple(seen.values())
        return self.regional_markers.get(region, ())

    def script_for_language(self, language: str) -> Optional[ScriptRange]:
        for script in self.scripts:
            if script.language == language:
                return script
        return None

    def topics_in_category(self, category: str) -> list[SensitiveTopicEntry]:
        return [t for t in self.sensitive_topics if t.category == category]


# ------------------------------------------------------------------ #
#  Built-in tables                                                    #
# ------------------------------------------------------------------ #

def _default_scripts() -> list[dict]:
    return [
        {"script": "devanagari", "language": "Hindi", "ranges": [[0x0900, 0x097F]]},
        {"script": "bengali", "language": "Bengali", "ranges": [[0x0980, 0x09FF]]},
        {"script": "gurmukhi", "language": "Punjabi", "ranges": [[0x0A00, 0x0A7F]]},
        {"script": "gujarati", "language": "Gujarati", "ranges": [[0x0A80, 0x0AFF]]},
        {"script": "tamil", "language": "Tamil", "ranges": [[0x0B80, 0x0BFF]]},
        {"script": "telugu", "language": "Telugu", "ranges": [[0x0C00, 0x0C7F]]},
        {"script": "kannada", "language": "Kannada", "ranges": [[0x0C80, 0x0CFF]]},
        {"script": "malayalam", "language": "Malayalam", "ranges": [[0x0D00, 0x0D7F]]},
        {"script": "latin", "language": "English", "ranges": [[0x0041, 0x005A], [0x0061, 0x007A]]},
    ]


def _default_romanized_lexicons() -> dict[str, list[str]]:
    # Order matters: a word listed under two languages goes to the first one.
    # Words that are also common English words or names (anna, ko, dada) are left out.
    return {
        "Hindi": [
            "yaar", "bhai", "accha", "acha", "achha", "theek", "thik", "kya", "hai", "hain",
            "nahi", "nahin", "hoga", "hogi", "sab", "kuch", "bahut",
            "bohot", "kaise", "kaisa", "kyun", "mera", "meri", "tera", "teri", "aap", "tum",
            "shubhkamnaye", "shubhkamnayein", "badhai", "dhanyawad", "namaste",
            "paisa", "lakh", "crore", "chalo", "matlab", "ekdum", "bindaas",
            "jaldi", "abhi", "aur", "lekin", "toh", "bhi", "ghar", "dil", "pyaar",
            "khush", "khushi", "zindagi", "dost", "ji", "gaon", "khet", "daru",
        ],
        "Tamil": [
            "machaa", "machan", "machi", "enna", "romba", "illa", "seri", "sapadu",
            "vanakkam", "nalla", "paaru", "vaa", "poda", "akka", "thala",
            "semma", "kalakkal", "nanba",
        ],
        "Bengali": [
            "tumi", "bhalo", "kemon", "acho", "achi", "khub",
            "ekta", "kotha", "hobe", "korbo", "jabo", "shubho", "bijoya", "pujo",
            "mishti", "nomoskar",
        ],
        "Punjabi": [
            "paaji", "oye", "balle", "kiddan", "tussi", "sadda", "sanu", "tuhada",
            "vadhaiyan", "kudi", "munda", "changa", "haanji", "pind",
        ],
    }


def _default_regional_markers() -> dict[str, list[dict]]:
    return {
        "North India": [
            {"term": "bhai", "type": "slang"},
            {"term": "yaar", "type": "slang"},
            {"term": "paaji", "type": "cultural"},
            {"term": "sardar", "type": "cultural"},
        ],
        "South India": [
            {"term": "anna", "type": "slang"},
            {"term": "machaa", "type": "slang"},
            {"term": "da", "type": "slang"},
            {"term": "ra", "type": "slang"},
            {"term": "akka", "type": "cultural"},
        ],
        "West India": [
            {"term": "boss", "type": "slang"},
            {"term": "bhau", "type": "slang"},
            {"term": "dada", "type": "cultural"},
            {"term": "tai", "type": "cultural"},
        ],
        "East India": [
            {"term": "machcha", "type": "slang"},
            {"term": "bhai", "type": "slang"},
            {"term": "dada", "type": "cultural"},
            {"term": "didi", "type": "cultural"},
        ],
    }


def _default_dialect_markers() -> dict[str, dict[str, list[str]]]:
    return {
        "North India": {
            "haryanvi": ["thare", "mhare", "kyukar", "ghana"],
            "bhojpuri": ["hamaar", "rauwa", "ka ho", "bujhata"],
            "punjabi-hindi": ["paaji", "oye", "balle", "tussi"],
        },
        "South India": {
            "chennai-tamil": ["machaa", "gethu", "semma", "kalakkal"],
            "bangalore-kannada": ["guru", "maga", "swalpa adjust"],
            "hyderabadi": ["hau", "nakko", "kaiku", "baigan"],
        },
        "West India": {
            "mumbai-bambaiya": ["bhidu", "apun", "kya re", "bindaas"],
            "marathi": ["bhau", "kay", "ahe", "mast re"],
            "gujarati": ["kem cho", "majama", "saru"],
        },
        "East India": {
            "kolkata-bengali": ["dada", "khub", "bhalo", "ki hobe"],
            "odia": ["bhai re", "kana", "mu"],
        },
    }


def _default_regional_sentiment() -> dict[str, list[dict]]:
    return {
        "North India": [
            {"term": "balle balle", "weight": 5}, {"term": "mast", "weight": 3},
            {"term": "ekdum", "weight": 2}, {"term": "bakwas", "weight": -5},
        ],
        "South India": [
            {"term": "semma", "weight": 5}, {"term": "kalakkal", "weight": 4},
            {"term": "mokka", "weight": -5},
        ],
        "West India": [
            {"term": "bindaas", "weight": 4}, {"term": "jhakaas", "weight": 5},
            {"term": "faltu", "weight": -4},
        ],
        "East India": [
            {"term": "darun", "weight": 5}, {"term": "khub bhalo", "weight": 4},
            {"term": "baje", "weight": -4},
        ],
    }


def _default_festivals() -> list[dict]:
    return [
        {"name": "Diwali", "months": [10, 11], "importance": 0.9, "sentiment_boost": 0.8},
        {"name": "Holi", "months": [2, 3], "importance": 0.8, "sentiment_boost": 0.7},
        {"name": "Durga Puja", "months": [9, 10], "importance": 0.85, "sentiment_boost": 0.7},
        {"name": "Eid", "months": [4, 5, 7, 8], "importance": 0.8, "sentiment_boost": 0.7},
        {"name": "Ganesh Chaturthi", "months": [8, 9], "importance": 0.8, "sentiment_boost": 0.65},
        {"name": "Dussehra", "months": [10], "importance": 0.7, "sentiment_boost": 0.6},
        {"name": "Navratri", "months": [9, 10], "importance": 0.7, "sentiment_boost": 0.6},
        {"name": "Christmas", "months": [12], "importance": 0.7, "sentiment_boost": 0.6},
        {"name": "Onam", "months": [8, 9], "importance": 0.7, "sentiment_boost": 0.6},
        {"name": "Pongal", "months": [1], "importance": 0.7, "sentiment_boost": 0.6},
        {"name": "Baisakhi", "months": [4], "importance": 0.65, "sentiment_boost": 0.6},
        {"name": "Karva Chauth", "months": [10, 11], "importance": 0.6, "sentiment_boost": 0.5},
    ]


def _default_sensitive_topics() -> list[dict]:
    return [
        {"term": "hindu muslim", "risk_weight": 25, "category": "religious",
         "description": "Religious community comparison"},
        {"term": "caste system", "risk_weight": 30, "category": "religious",
         "description": "Caste-related discussion"},
        {"term": "mandir masjid", "risk_weight": 25, "category": "religious",
         "description": "Place-of-worship dispute"},
        {"term": "communal", "risk_weight": 20, "category": "religious",
         "description": "Communal tension reference"},
        {"term": "blasphemy", "risk_weight": 25, "category": "religious",
         "description": "Blasphemy accusation"},
        {"term": "modi", "risk_weight": 15, "category": "political",
         "description": "Political figure mention"},
        {"term": "congress", "risk_weight": 15, "category": "political",
         "description": "Political party mention"},
        {"term": "bjp", "risk_weight": 15, "category": "political",
         "description": "Political party mention"},
        {"term": "election", "risk_weight": 10, "category": "political",
         "description": "Electoral politics reference"},
        {"term": "dowry", "risk_weight": 20, "category": "social",
         "description": "Social issue mention"},
        {"term": "corruption", "risk_weight": 18, "category": "social",
         "description": "Systemic issue mention"},
        {"term": "honour killing", "risk_weight": 30, "category": "social",
         "description": "Violent social practice"},
    ]


def _default_neutrality() -> dict[str, list[dict]]:
    return {
        "religion": [
            {"term": "hindu muslim", "weight": 25}, {"term": "mandir masjid", "weight": 25},
            {"term": "kafir", "weight": 35}, {"term": "communal", "weight": 20},
            {"term": "conversion", "weight": 15}, {"term": "jihad", "weight": 30},
            {"term": "dharm yudh", "weight": 25}, {"term": "blasphemy", "weight": 20},
        ],
        "caste": [
            {"term": "caste", "weight": 15}, {"term": "untouchable", "weight": 35},
            {"term": "lower caste", "weight": 30}, {"term": "upper caste", "weight": 25},
            {"term": "jaat", "weight": 10}, {"term": "reservation", "weight": 10},
        ],
        "gender": [
            {"term": "like a girl", "weight": 20}, {"term": "women should", "weight": 20},
            {"term": "ladki hai", "weight": 15}, {"term": "mard ho", "weight": 15},
            {"term": "dowry", "weight": 25}, {"term": "chudiyan pehen", "weight": 25},
        ],
    }


def _default_lexicons() -> dict[str, list[str]]:
    return {
        "cultural_positive": [
            "amazing", "fantastic", "excellent", "beautiful", "wonderful", "perfect", "best",
            "love", "great", "awesome", "fabulous", "outstanding", "superb", "brilliant",
            "magnificent", "namaste", "dhanyawad", "shubh", "mangal", "prasad", "ashirwad",
            "samman",
        ],
        "cultural_negative": [
            "terrible", "awful", "horrible", "bad", "worst", "hate", "disgusting", "pathetic",
            "disappointing", "useless", "annoying", "frustrating", "boring", "stupid",
            "ridiculous", "paap", "dukh", "kasht", "mushkil", "bura", "galat",
        ],
        "sentiment_positive": [
            "good", "nice", "happy", "joy", "excited", "pleased", "satisfied", "delighted",
            "thrilled", "grateful", "blessed", "lucky", "proud", "confident", "optimistic",
        ],
        "sentiment_negative": [
            "sad", "angry", "upset", "disappointed", "frustrated", "worried", "stressed",
            "anxious", "depressed", "scared", "confused", "tired", "sick", "hurt", "lonely",
        ],
        "code_mixing_particles": ["yaar", "bhai", "ji", "na", "hai", "kar", "ke", "me"],
        "urban": ["metro", "city", "mall", "cafe", "uber", "swiggy", "zomato"],
        "rural": ["village", "gaon", "khet", "farm", "agriculture"],
        "viral": [
            "viral", "trending", "share", "tag", "omg", "wow", "amazing", "unbelievable",
            "must watch", "can't believe", "shocked", "emotional", "heartwarming",
        ],
        "emotional_triggers": [
            "happy", "sad", "angry", "surprised", "love", "hate", "excited", "shocked",
            "proud", "nostalgic", "inspired", "motivated",
        ],
        "virality_pride": ["india", "bharat", "proud", "culture", "tradition"],
        "meme": ["lol", "lmao", "meme", "funny", "relatable", "savage", "troll", "epic", "bruh"],
        "influencer": [
            "collab", "link in bio", "follow", "subscribe", "giveaway", "review",
            "unboxing", "sponsored", "haul",
        ],
        "gifting": ["gift", "gifts", "tohfa", "present", "shagun", "hamper", "surprise"],
        "family_gathering": [
            "family", "parivar", "relatives", "reunion", "get-together", "ghar", "together",
        ],
        "age_inappropriate": [
            "nsfw", "porn", "xxx", "18+", "sexy", "daru", "sharab", "ganja", "betting",
            "gambling", "drugs",
        ],
        "gen_z": ["lit", "fire", "slay", "no cap", "periodt", "stan", "simp", "vibe", "flex"],
        "millennial": ["awesome", "epic", "legendary", "adulting", "netflix", "hashtag"],
        "gen_x": ["cool", "whatever", "internet", "email", "website"],
        "boomer": ["nice", "good", "proper", "respect", "tradition"],
        "purchase": ["buy", "purchase", "order", "cart", "checkout", "payment"],
        "price": ["cheap", "expensive", "discount", "offer", "sale", "budget"],
        "brand": ["brand", "quality", "original", "authentic", "premium"],
        "luxury": ["luxury", "premium", "high-end", "expensive", "exclusive"],
        "budget": ["cheap", "affordable", "budget", "discount", "value"],
        "economic_anxiety": ["worried", "concerned", "expensive", "inflation", "crisis", "recession"],
        "political_left": ["equality", "social justice", "progressive", "reform", "welfare"],
        "political_right": ["tradition", "conservative", "nationalism", "security", "discipline"],
        "government": ["government", "sarkar", "policy", "minister", "bureaucracy"],
        "government_positive": ["development", "vikas", "progress", "thank", "success", "achievement"],
        "government_negative": ["failed", "failure", "scam", "corrupt", "corruption", "shame"],
        "national_pride": ["india", "bharat", "proud", "nation", "country"],
        "social_causes": [
            "environment", "education", "healthcare", "poverty", "women rights", "corruption",
        ],
        "activism": ["protest", "movement", "petition", "rally", "campaign", "activism"],
    }


def _default_generation_profiles() -> dict[str, dict]:
    return {
        "gen-z": {
            "communication_style": "Informal, emoji-heavy, abbreviated",
            "value_system": ["diversity", "authenticity", "mental health", "sustainability"],
            "digital_savviness": 95,
            "consumption_pattern": "Social media influenced, brand conscious, sustainable choices",
        },
        "millennial": {
            "communication_style": "Digital-native, meme-aware, casual",
            "value_system": ["work-life balance", "experiences", "social media", "flexibility"],
            "digital_savviness": 85,
            "consumption_pattern": "Experience-driven, online research, brand comparison",
        },
        "gen-x": {
            "communication_style": "Direct, email-style, professional",
            "value_system": ["independence", "pragmatism", "family", "stability"],
            "digital_savviness": 65,
            "consumption_pattern": "Quality focused, brand loyal, practical purchases",
        },
        "boomer": {
            "communication_style": "Formal, complete sentences, respectful",
            "value_system": ["tradition", "respect", "hard work", "loyalty"],
            "digital_savviness": 45,
            "consumption_pattern": "Traditional channels, word-of-mouth, established brands",
        },
    }


# ------------------------------------------------------------------ #
#  Table builders (raw JSON-ish data -> immutable entries)            #
# ------------------------------------------------------------------ #

def _fail(table: str, error: Exception) -> ConfigurationError:
    return ConfigurationError(
        f"Malformed knowledge base table '{table}': {error}",
        {"table": table, "original_error": str(error)},
    )


def _build_festivals(raw: list[dict]) -> tuple[FestivalEntry, ...]:
    entries = []
    try:
        for item in raw:
            months = frozenset(int(m) for m in item["months"])
            importance = float(item["importance"])
            boost = float(item["sentiment_boost"])
            if not months or not all(1 <= m <= 12 for m in months):
                raise ValueError(f"{item['name']}: months must be within 1..12")
            if not (0 <= importance <= 1 and 0 <= boost <= 1):
                raise ValueError(f"{item['name']}: importance/sentiment_boost must be within 0..1")
            entries.append(FestivalEntry(str(item["name"]), months, importance, boost))
    except (KeyError, TypeError, ValueError) as e:
        raise _fail("festivals", e)
    return tuple(entries)


def _build_sensitive_topics(raw: list[dict]) -> tuple[SensitiveTopicEntry, ...]:
    entries = []
    try:
        for item in raw:
            weight = float(item["risk_weight"])
            category = item["category"]
            if weight < 0:
                raise ValueError(f"{item['term']}: risk_weight must be >= 0")
            if category not in SENSITIVE_CATEGORIES:
                raise ValueError(f"{item['term']}: unknown category '{category}'")
            entries.append(SensitiveTopicEntry(
                term=str(item["term"]).lower(),
                risk_weight=weight,
                category=category,
                description=str(item["description"]),
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise _fail("sensitive_topics", e)
    return tuple(entries)


def _build_regional_markers(raw: dict[str, list[dict]]) -> Mapping[str, tuple[RegionalMarker, ...]]:
    try:
        table = {
            region: tuple(RegionalMarker(str(m["term"]).lower(), str(m["type"])) for m in markers)
            for region, markers in raw.items()
        }
    except (KeyError, TypeError, AttributeError) as e:
        raise _fail("regional_markers", e)
    return MappingProxyType(table)


def _build_weighted(table_name: str, raw: dict[str, list[dict]]) -> Mapping[str, tuple[WeightedTerm, ...]]:
    try:
        table = {
            key: tuple(WeightedTerm(str(t["term"]).lower(), float(t["weight"])) for t in terms)
            for key, terms in raw.items()
        }
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise _fail(table_name, e)
    return MappingProxyType(table)


def _build_term_table(table_name: str, raw: Any) -> dict[str, tuple[str, ...]]:
    """Validate a `{name: [term, ...]}` table and lowercase its terms."""
    if not isinstance(raw, dict):
        raise _fail(table_name, TypeError(f"expected an object, got {type(raw).__name__}"))
    table = {}
    for name, terms in raw.items():
        if not isinstance(terms, list) or not all(isinstance(t, str) for t in terms):
            raise _fail(table_name, TypeError(f"'{name}' must be a list of strings"))
        table[name] = tuple(t.lower() for t in terms)
    return table


def _build_romanized_lexicons(raw: Any) -> Mapping[str, frozenset[str]]:
    table = _build_term_table("romanized_lexicons", raw)
    return MappingProxyType({lang: frozenset(words) for lang, words in table.items()})


def _build_dialect_markers(raw: Any) -> Mapping[str, Mapping[str, tuple[str, ...]]]:
    if not isinstance(raw, dict):
        raise _fail("dialect_markers", TypeError(f"expected an object, got {type(raw).__name__}"))
    return MappingProxyType({
        region: MappingProxyType(_build_term_table("dialect_markers", dialects))
        for region, dialects in raw.items()
    })


def _build_lexicons(raw: Any) -> Mapping[str, tuple[str, ...]]:
    """Built-in lexicons with `raw` merged over them per lexicon."""
    table = _build_term_table("lexicons", _default_lexicons())
    table.update(_build_term_table("lexicons", raw))
    missing = [name for name in REQUIRED_LEXICONS if name not in table]
    if missing:
        raise ConfigurationError(
            f"Knowledge base is missing lexicons: {', '.join(missing)}",
            {"missing": missing},
        )
    return MappingProxyType(table)


def _build_scripts(raw: list[dict]) -> tuple[ScriptRange, ...]:
    try:
        return tuple(
            ScriptRange(
                script=item["script"],
                language=item["language"],
                ranges=tuple((int(lo), int(hi)) for lo, hi in item["ranges"]),
            )
            for item in raw
        )
    except (KeyError, TypeError, ValueError) as e:
        raise _fail("scripts", e)


def _build_generation_profiles(raw: dict[str, dict]) -> Mapping[str, GenerationProfile]:
    missing = [g for g in GENERATIONS if g not in raw]
    if missing:
        raise ConfigurationError(f"Missing generation profiles: {', '.join(missing)}")
    try:
        table = {
            gen: GenerationProfile(
                communication_style=p["communication_style"],
                value_system=tuple(p["value_system"]),
                digital_savviness=int(p["digital_savviness"]),
                consumption_pattern=p["consumption_pattern"],
            )
            for gen, p in raw.items()
        }
    except (KeyError, TypeError, ValueError) as e:
        raise _fail("generation_profiles", e)
    return MappingProxyType(table)


def build_knowledge_base(overrides: Optional[dict[str, Any]] = None, version: str = DEFAULT_KB_VERSION) -> KnowledgeBase:
    """
    Build a KnowledgeBase from the built-in tables, replacing any table
    named in `overrides` (same shape as the defaults).

    Raises:
        ConfigurationError: if any table is missing fields or out of range
    """
    overrides = overrides or {}

    return KnowledgeBase(
        version=version,
        scripts=_build_scripts(overrides.get("scripts", _default_scripts())),
        romanized_lexicons=_build_romanized_lexicons(
            overrides.get("romanized_lexicons", _default_romanized_lexicons())
        ),
        regional_markers=_build_regional_markers(
            overrides.get("regional_markers", _default_regional_markers())
        ),
        dialect_markers=_build_dialect_markers(
            overrides.get("dialect_markers", _default_dialect_markers())
        ),
        regional_sentiment=_build_weighted(
            "regional_sentiment", overrides.get("regional_sentiment", _default_regional_sentiment())
        ),
        festivals=_build_festivals(overrides.get("festivals", _default_festivals())),
        sensitive_topics=_build_sensitive_topics(
            overrides.get("sensitive_topics", _default_sensitive_topics())
        ),
        neutrality=_build_weighted("neutrality", overrides.get("neutrality", _default_neutrality())),
        lexicons=_build_lexicons(overrides.get("lexicons", {})),
        generation_profiles=_build_generation_profiles(
            overrides.get("generation_profiles", _default_generation_profiles())
        ),
    )


# Files recognised in a knowledge base directory, mapped to override keys
KB_FILES = {
    "festivals.json": "festivals",
    "sensitive_topics.json": "sensitive_topics",
    "regional_markers.json": "regional_markers",
    "lexicons.json": "lexicons",
    "neutrality.json": "neutrality",
    "romanized_lexicons.json": "romanized_lexicons",
}


def load_knowledge_base(db_path: Optional[str | Path] = None) -> KnowledgeBase:
    """
    Load the knowledge base, applying JSON overrides from `db_path`.

    With no path, the default `cultural-kb/` directory is used if present,
    otherwise the built-in tables. An explicit path that doesn't exist is
    a ConfigurationError.
    """
    explicit = db_path is not None
    path = Path(db_path) if explicit else DEFAULT_KB_PATH

    if not path.is_dir():
        if explicit:
            raise ConfigurationError(f"Knowledge base directory not found: {path}", {"path": str(path)})
        logger.info(f"📚 Knowledge base: built-in tables (version {DEFAULT_KB_VERSION})")
        return build_knowledge_base()

    overrides: dict[str, Any] = {}
    version = DEFAULT_KB_VERSION
    manifest = path / "manifest.json"
    if manifest.exists():
        meta = _read_json(manifest)
        if not isinstance(meta, dict):
            raise _fail("manifest", TypeError(f"expected an object, got {type(meta).__name__}"))
        version = str(meta.get("version", DEFAULT_KB_VERSION))

    for filename, key in KB_FILES.items():
        file_path = path / filename
        if file_path.exists():
            overrides[key] = _read_json(file_path)
            logger.info(f"📚 Loaded override table {filename}")

    kb = build_knowledge_base(overrides, version=version)
    logger.info(f"📚 Knowledge base loaded from {path} (version {kb.version})")
    return kb


def _read_json(file_path: Path) -> Any:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Could not read {file_path.name}: {e}",
            {"path": str(file_path), "original_error": str(e)},
        )
