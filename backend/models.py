"""
Cultural Signal Analyzer - Request/Result models
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Pydantic models for the analysis contract. Python attributes are
snake_case; the wire format (model_dump(by_alias=True)) is camelCase,
matching what the dashboard and business API consume.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_TEXT_LENGTH = 10_000
MAX_LABEL_LENGTH = 64

Sentiment = Literal["positive", "neutral", "negative"]
MixingPattern = Literal["hinglish", "tanglish", "banglish", "punglish", "custom"]
UrbanRural = Literal["urban", "semi-urban", "rural"]
Level = Literal["high", "medium", "low"]
Generation = Literal["gen-z", "millennial", "gen-x", "boomer"]
PoliticalLean = Literal["neutral", "slightly_left", "slightly_right"]


class CamelModel(BaseModel):
    """Frozen model serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AnalysisRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    region: str = Field("All India", min_length=1, max_length=MAX_LABEL_LENGTH)
    language: str = Field("auto", min_length=1, max_length=MAX_LABEL_LENGTH)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v):
        if not v.strip():
            raise ValueError("text must contain non-whitespace characters")
        return v

    @field_validator("region", "language")
    @classmethod
    def strip_label(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ScriptMatch(CamelModel):
    script_name: str
    language_name: str
    percentage: float = Field(..., ge=0, le=100)
    transliterated: bool = False


class CodeMixingResult(CamelModel):
    languages: list[ScriptMatch] = []
    mixing_pattern: MixingPattern = "custom"
    authenticity_score: int = 50
    urban_rural_indicator: UrbanRural = "semi-urban"


class RegionalAnalysis(CamelModel):
    primary_region: str = ""
    cultural_markers: list[str] = []
    local_slang_detected: list[str] = []
    dialect_variation: str = "standard"
    religion_neutrality: float = 85
    caste_neutrality: float = 90
    gender_sensitivity: float = 80


class FestivalAnalysis(CamelModel):
    active_festival: Optional[str] = None
    seasonal_relevance: float = 0.0
    commercial_opportunity: Level = "low"
    festival_sentiment_boost: float = 0.0
    gifting_intent: bool = False
    family_gathering_intent: bool = False


class ViralityPrediction(CamelModel):
    viral_potential: float = 20
    shareability_factors: list[str] = []
    emotional_triggers: list[str] = []
    meme_potential: float = 30
    influencer_appeal: float = 40
    cross_platform_score: float = 50


class BrandSafetyAnalysis(CamelModel):
    overall_safety: float = 100
    religious_conflicts: list[str] = []
    political_sensitivity: list[str] = []
    social_taboos: list[str] = []
    age_appropriate: bool = True
    corporate_risk: Level = "low"


class GenerationalAnalysis(CamelModel):
    primary_generation: Generation = "gen-z"
    communication_style: str = ""
    value_system: list[str] = []
    digital_savviness: int = 0
    consumption_pattern: str = ""
    generation_scores: dict[str, int] = {}


class EconomicIndicators(CamelModel):
    purchase_intent: float = 0
    price_consciousness: float = 0
    brand_loyalty: float = 0
    disposable_income_indicator: Level = "medium"
    economic_anxiety: float = 20


class PoliticalAnalysis(CamelModel):
    political_lean: PoliticalLean = "neutral"
    government_sentiment: float = 50
    national_pride: float = 50
    social_cause: list[str] = []
    activism_level: float = 10


class SentimentResult(CamelModel):
    """Output of one sentiment tier (remote AI or local heuristic)."""

    cultural_score: float = Field(..., ge=0, le=100)
    sentiment: Sentiment
    confidence: float = Field(..., ge=0, le=1)
    ai_powered: bool = False
    provider: str = "local"
    model: str = "heuristic"
    insights: list[str] = []


class AnalysisResult(CamelModel):
    cultural_score: float = Field(..., ge=0, le=100)
    sentiment: Sentiment
    confidence: float = Field(..., ge=0, le=1)
    ai_powered: bool
    provider: str
    model: str
    region: str
    language: str
    knowledge_base_version: str

    cultural_insights: list[str]
    recommendations: list[str]
    risk_factors: list[str]

    code_mixing_detection: CodeMixingResult
    regional_nuances: RegionalAnalysis
    festival_context: FestivalAnalysis
    virality_prediction: ViralityPrediction
    brand_safety: BrandSafetyAnalysis
    generational_segment: GenerationalAnalysis
    economic_sentiment: EconomicIndicators
    political_neutrality: PoliticalAnalysis
