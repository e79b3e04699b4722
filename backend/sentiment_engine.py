"""
Cultural Signal Analyzer - Tiered Sentiment Engine
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Cultural score + sentiment, computed by the first provider in an ordered
chain that succeeds:

  Tier 1: Anthropic (free-form answer, JSON object pulled out of the text)
  Tier 2: OpenAI (JSON mode, nested schema)
  Tier 3: Local keyword heuristic (always succeeds, no API key needed)

Each remote tier gets exactly one attempt bounded by a timeout. Any
network error, timeout or unusable response drops to the next tier.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import anthropic
import openai
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from exceptions import RemoteServiceError, ResponseParseError
from knowledge_base import KnowledgeBase
from models import Sentiment, SentimentResult
from settings import Settings
from text_matching import clamp, contains_term, tokenize

logger = logging.getLogger(__name__)

# --- Local heuristic constants ---
LOCAL_BASE_SCORE = 50
CULTURAL_POSITIVE_POINTS = 8
CULTURAL_NEGATIVE_POINTS = 6
REGIONAL_MODIFIER_CAP = 10
LOCAL_CONFIDENCE_CAP = 0.95
LOCAL_CONFIDENCE_BASE = 0.6
LOCAL_CONFIDENCE_PER_WORD = 0.01
LOCAL_CONFIDENCE_PER_MARGIN = 0.05

# Text sent to remote models is truncated to keep prompts bounded
MAX_PROMPT_TEXT = 4000
REMOTE_MAX_TOKENS = 800

PRIMARY_PROMPT_TEMPLATE = """You are an expert Cultural Sentiment Analysis AI for the Indian market. Analyze this text with deep understanding of Indian culture, languages, and context.

TEXT TO ANALYZE: "{text}"
TARGET REGION: {region}

ANALYSIS REQUIREMENTS:
1. Understand Hindi-English code-mixing (Hinglish), Tamil-English (Tanglish), and other Indian language combinations
2. Recognize Indian cultural context, festivals, traditions, and social nuances
3. Identify regional Indian slang and expressions
4. Assess brand safety for the Indian market
5. Predict social media virality potential in India
6. Understand generational language patterns (Gen-Z, Millennial, Gen-X, Boomer)

REQUIRED OUTPUT (EXACT JSON FORMAT):
{{
  "culturalScore": [0-100 number indicating cultural appropriateness and resonance],
  "sentiment": "[positive|neutral|negative]",
  "confidence": [0-1 decimal indicating analysis confidence],
  "culturalInsights": ["insight1", "insight2", "insight3"],
  "regionalRelevance": [0-100 number for regional connection],
  "codeLanguages": ["detected languages in the text"],
  "festivals": ["relevant festivals mentioned or implied"],
  "urbanRural": "[urban|semi-urban|rural]",
  "generationAppeal": "[gen-z|millennial|gen-x|boomer]",
  "viralPotential": [0-100 number for social media virality],
  "brandSafety": [0-100 number for brand safety],
  "businessValue": "[high|medium|low] commercial potential"
}}

Consider religious and cultural sensitivities, festival seasons, economic sentiment and political neutrality (very important in India).

Respond ONLY with the JSON object, no additional text."""

SECONDARY_SYSTEM_PROMPT = """You are an advanced Cultural Sentiment Analysis AI designed for the Indian market. Focus on Indian cultural nuances, Hindi-English code-mixing, regional variations, and festival/seasonal context. Respond with ONLY valid JSON."""

SECONDARY_USER_TEMPLATE = """Analyze the following text for cultural sentiment, code-mixing patterns, and regional nuances.

Text: "{text}"
Region: {region}

Return JSON with this structure:
{{
  "culturalScore": (0-100),
  "sentiment": "positive|neutral|negative",
  "confidence": (0-1),
  "culturalInsights": ["insight1", "insight2"],
  "codeMixing": {{
    "detected": true/false,
    "languages": ["Hindi", "English"],
    "pattern": "hinglish|tanglish|banglish|other",
    "authenticityScore": (0-1)
  }},
  "regionalContext": {{
    "primaryRegion": "{region}",
    "culturalMarkers": ["marker1", "marker2"],
    "localSlang": ["slang1", "slang2"]
  }},
  "festivalContext": {{
    "activeFestival": "festival_name_or_null",
    "seasonalRelevance": (0-1),
    "commercialOpportunity": "high|medium|low"
  }},
  "viralPotential": {{
    "score": (0-100),
    "factors": ["factor1", "factor2"],
    "memePotential": (0-100)
  }},
  "brandSafety": {{
    "overallSafety": (0-100),
    "risks": ["risk1", "risk2"],
    "corporateRisk": "low|medium|high"
  }}
}}"""


# ------------------------------------------------------------------ #
#  Remote response schemas                                            #
# ------------------------------------------------------------------ #

class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _CoreScores(_WireModel):
    cultural_score: float = Field(..., ge=0, le=100)
    sentiment: Sentiment
    confidence: float = Field(..., ge=0, le=1)
    cultural_insights: list[str] = []

    @field_validator("sentiment", mode="before")
    @classmethod
    def normalize_sentiment(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class PrimaryAIResponse(_CoreScores):
    regional_relevance: Optional[float] = Field(None, ge=0, le=100)
    code_languages: list[str] = []
    festivals: list[str] = []
    urban_rural: Optional[str] = None
    generation_appeal: Optional[str] = None
    viral_potential: Optional[float] = Field(None, ge=0, le=100)
    brand_safety: Optional[float] = Field(None, ge=0, le=100)
    business_value: Optional[str] = None


class CodeMixingBlock(_WireModel):
    detected: bool = False
    languages: list[str] = []
    pattern: Optional[str] = None
    authenticity_score: Optional[float] = None


class RegionalContextBlock(_WireModel):
    primary_region: Optional[str] = None
    cultural_markers: list[str] = []
    local_slang: list[str] = []


class FestivalContextBlock(_WireModel):
    active_festival: Optional[str] = None
    seasonal_relevance: Optional[float] = None
    commercial_opportunity: Optional[str] = None


class ViralPotentialBlock(_WireModel):
    score: Optional[float] = None
    factors: list[str] = []
    meme_potential: Optional[float] = None


class BrandSafetyBlock(_WireModel):
    overall_safety: Optional[float] = None
    risks: list[str] = []
    corporate_risk: Optional[str] = None


class SecondaryAIResponse(_CoreScores):
    code_mixing: Optional[CodeMixingBlock] = None
    regional_context: Optional[RegionalContextBlock] = None
    festival_context: Optional[FestivalContextBlock] = None
    viral_potential: Optional[ViralPotentialBlock] = None
    brand_safety: Optional[BrandSafetyBlock] = None


def extract_json_object(raw: str) -> Optional[str]:
    """
    Return the first balanced {...} block in free-form model output.

    Braces inside JSON strings are ignored. Returns None when there is no
    opening brace or the first object never closes.
    """
    start = raw.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(raw)):
        ch = raw[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return raw[start:i + 1]
    return None


def parse_model_json(provider: str, raw: Optional[str], schema: type[_CoreScores]) -> _CoreScores:
    """Brace-scan, parse and validate a model response. Any problem is a ResponseParseError."""
    if not raw or not raw.strip():
        raise ResponseParseError(provider, "empty response")

    candidate = extract_json_object(raw)
    if candidate is None:
        raise ResponseParseError(provider, "no JSON object found")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseError(provider, f"invalid JSON: {e.msg}")

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(provider, f"schema violation ({e.error_count()} errors)")


# ------------------------------------------------------------------ #
#  Providers                                                          #
# ------------------------------------------------------------------ #

class SentimentProvider(ABC):
    """One tier of the chain. Raises RemoteServiceError/ResponseParseError on failure."""

    name: str = "provider"
    model: str = ""

    @abstractmethod
    async def try_analyze(self, text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
        ...


class AnthropicSentimentProvider(SentimentProvider):
    """Primary tier: Claude answers in free text, we brace-scan the JSON out of it."""

    name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 10.0,
        client=None,
    ):
        self.model = model
        self.timeout = timeout
        # max_retries=0: one attempt per tier, the chain is the retry policy
        self.client = client or anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def try_analyze(self, text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
        prompt = PRIMARY_PROMPT_TEMPLATE.format(text=text[:MAX_PROMPT_TEXT], region=region)
        try:
            response = await asyncio.wait_for(
                self.client.messages.create(
                    model=self.model,
                    max_tokens=REMOTE_MAX_TOKENS,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.1,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise RemoteServiceError(self.name, f"timed out after {self.timeout}s")
        except anthropic.APIError as e:
            raise RemoteServiceError(self.name, e)

        try:
            answer = "".join(
                block.text for block in response.content if getattr(block, "type", None) == "text"
            )
        except (AttributeError, TypeError) as e:
            raise ResponseParseError(self.name, f"unexpected response shape: {e}")

        analysis = parse_model_json(self.name, answer, PrimaryAIResponse)
        return SentimentResult(
            cultural_score=analysis.cultural_score,
            sentiment=analysis.sentiment,
            confidence=analysis.confidence,
            ai_powered=True,
            provider=self.name,
            model=self.model,
            insights=analysis.cultural_insights,
        )


class OpenAISentimentProvider(SentimentProvider):
    """Secondary tier: JSON-mode chat completion with the nested schema."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o",
        timeout: float = 10.0,
        client=None,
    ):
        self.model = model
        self.timeout = timeout
        self.client = client or openai.AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def try_analyze(self, text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
        user_message = SECONDARY_USER_TEMPLATE.format(text=text[:MAX_PROMPT_TEXT], region=region)
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SECONDARY_SYSTEM_PROMPT},
                        {"role": "user", "content": user_message},
                    ],
                    temperature=0.1,
                    max_tokens=REMOTE_MAX_TOKENS,
                    response_format={"type": "json_object"},
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise RemoteServiceError(self.name, f"timed out after {self.timeout}s")
        except openai.OpenAIError as e:
            raise RemoteServiceError(self.name, e)

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ResponseParseError(self.name, f"unexpected response shape: {e}")

        analysis = parse_model_json(self.name, content, SecondaryAIResponse)
        return SentimentResult(
            cultural_score=analysis.cultural_score,
            sentiment=analysis.sentiment,
            confidence=analysis.confidence,
            ai_powered=True,
            provider=self.name,
            model=self.model,
            insights=analysis.cultural_insights,
        )


class LocalHeuristicProvider(SentimentProvider):
    """Terminal tier. Deterministic keyword scoring; never raises."""

    name = "local"
    model = "heuristic"

    async def try_analyze(self, text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
        return local_sentiment(text, region, kb)


def regional_sentiment_modifier(text: str, region: str, kb: KnowledgeBase) -> float:
    """Signed bonus from region-specific praise/insult words, capped at +/-10. 0 for unknown regions."""
    modifier = sum(t.weight for t in kb.regional_sentiment.get(region, ()) if contains_term(text, t.term))
    return clamp(modifier, -REGIONAL_MODIFIER_CAP, REGIONAL_MODIFIER_CAP)


def local_sentiment(text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
    """
    Culturally weighted keyword sentiment.

    Cultural keywords move the score (+8 / -6) and count toward sentiment;
    generic sentiment words only count. Confidence grows with length and
    with the gap between positive and negative hits, capped at 0.95.
    """
    cultural_positive = set(kb.lexicon("cultural_positive"))
    cultural_negative = set(kb.lexicon("cultural_negative"))
    sentiment_positive = set(kb.lexicon("sentiment_positive"))
    sentiment_negative = set(kb.lexicon("sentiment_negative"))

    words = tokenize(text)
    cultural_score = float(LOCAL_BASE_SCORE)
    positive_count = 0
    negative_count = 0

    for word in words:
        if word in cultural_positive:
            cultural_score += CULTURAL_POSITIVE_POINTS
            positive_count += 1
        if word in cultural_negative:
            cultural_score -= CULTURAL_NEGATIVE_POINTS
            negative_count += 1
        if word in sentiment_positive:
            positive_count += 1
        if word in sentiment_negative:
            negative_count += 1

    cultural_score += regional_sentiment_modifier(text, region, kb)

    if positive_count > negative_count:
        sentiment = "positive"
    elif negative_count > positive_count:
        sentiment = "negative"
    else:
        sentiment = "neutral"

    confidence = min(
        LOCAL_CONFIDENCE_CAP,
        LOCAL_CONFIDENCE_BASE
        + LOCAL_CONFIDENCE_PER_WORD * len(words)
        + LOCAL_CONFIDENCE_PER_MARGIN * abs(positive_count - negative_count),
    )

    return SentimentResult(
        cultural_score=clamp(cultural_score),
        sentiment=sentiment,
        confidence=round(confidence, 4),
        ai_powered=False,
        provider=LocalHeuristicProvider.name,
        model=LocalHeuristicProvider.model,
    )


# ------------------------------------------------------------------ #
#  Engine                                                             #
# ------------------------------------------------------------------ #

class SentimentEngine:
    """
    Walks the provider chain until one succeeds.

    The local heuristic is always the last tier, so analyze() always
    returns a result. Cancellation of the caller propagates into the
    in-flight remote call (CancelledError is never caught here).
    """

    def __init__(self, providers: Optional[list[SentimentProvider]] = None):
        remote = [p for p in (providers or []) if not isinstance(p, LocalHeuristicProvider)]
        self.providers: list[SentimentProvider] = remote + [LocalHeuristicProvider()]

    @property
    def chain(self) -> list[str]:
        return [p.name for p in self.providers]

    @property
    def is_ai_enabled(self) -> bool:
        return len(self.providers) > 1

    async def analyze(self, text: str, region: str, kb: KnowledgeBase) -> SentimentResult:
        for tier, provider in enumerate(self.providers, start=1):
            started = time.perf_counter()
            try:
                result = await provider.try_analyze(text, region, kb)
            except (RemoteServiceError, ResponseParseError) as e:
                self._log_attempt(provider.name, tier, started, "failure", e)
                continue
            except Exception as e:
                # Anything unexpected from an SDK is still just a failed tier
                self._log_attempt(provider.name, tier, started, "error", e)
                continue
            self._log_attempt(provider.name, tier, started, "success")
            return result

        # Only reachable if the local tier itself raised
        logger.error("All sentiment tiers failed; returning local heuristic directly")
        return local_sentiment(text, region, kb)

    def _log_attempt(self, provider: str, tier: int, started: float, outcome: str,
                     error: Optional[Exception] = None) -> None:
        latency_ms = round((time.perf_counter() - started) * 1000, 1)
        event = {
            "event": "sentiment_tier",
            "provider": provider,
            "tier": tier,
            "latency_ms": latency_ms,
            "outcome": outcome,
        }
        if error is None:
            logger.info(f"🧠 Sentiment tier {tier} ({provider}) succeeded in {latency_ms}ms", extra=event)
        else:
            event["error"] = str(error)
            logger.warning(
                f"⚠️ Sentiment tier {tier} ({provider}) {outcome} after {latency_ms}ms: {error}",
                extra=event,
            )


def build_providers(settings: Settings) -> list[SentimentProvider]:
    """Remote providers in configured order; ones without an API key are skipped."""
    providers: list[SentimentProvider] = []
    for name in settings.ai_providers:
        if name == "anthropic":
            if settings.anthropic_api_key:
                providers.append(AnthropicSentimentProvider(
                    api_key=settings.anthropic_api_key,
                    model=settings.anthropic_model,
                    timeout=settings.ai_timeout_seconds,
                ))
            else:
                logger.info("Anthropic tier disabled (no ANTHROPIC_API_KEY)")
        elif name == "openai":
            if settings.openai_api_key:
                providers.append(OpenAISentimentProvider(
                    api_key=settings.openai_api_key,
                    model=settings.openai_model,
                    timeout=settings.ai_timeout_seconds,
                ))
            else:
                logger.info("OpenAI tier disabled (no OPENAI_API_KEY)")
        elif name == "local":
            continue  # always appended by the engine
        else:
            logger.warning(f"Unknown AI provider '{name}' in AI_PROVIDERS, skipping")
    return providers
