"""
Cultural Signal Analyzer - Pipeline Orchestrator
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Runs the eight heuristic analyzers and the sentiment engine concurrently
against one knowledge-base snapshot, then merges everything into an
AnalysisResult with insights, recommendations and risk factors.
"""

import asyncio
import logging
import time
from datetime import date
from typing import Any, Callable, Optional

from pydantic import ValidationError

from brand_safety import assess_brand_safety
from code_mixing import detect_code_mixing
from economic import extract_economic_indicators
from exceptions import InputValidationError
from festival_analyzer import analyze_festival_context
from generational import analyze_generational_segment
from knowledge_base import ALL_INDIA, KnowledgeBase, load_knowledge_base
from models import (
    AnalysisRequest,
    AnalysisResult,
    BrandSafetyAnalysis,
    CodeMixingResult,
    EconomicIndicators,
    FestivalAnalysis,
    GenerationalAnalysis,
    PoliticalAnalysis,
    RegionalAnalysis,
    SentimentResult,
    ViralityPrediction,
)
from political import analyze_political_neutrality
from regional_analyzer import analyze_regional_nuances
from sentiment_engine import SentimentEngine
from virality import predict_virality

logger = logging.getLogger(__name__)

VIRAL_RECOMMENDATION_THRESHOLD = 60
BRAND_ASSOCIATION_THRESHOLD = 80
BRAND_SAFETY_RISK_THRESHOLD = 70
RELIGION_RISK_THRESHOLD = 70


def generate_insights(sentiment: SentimentResult, region: str) -> list[str]:
    insights = [
        f"Content carries {sentiment.sentiment} sentiment at {round(sentiment.confidence * 100)}% confidence",
        f"Cultural alignment score of {round(sentiment.cultural_score)} out of 100",
    ]
    if region != ALL_INDIA:
        insights.append(f"Scored against {region} regional markers and sentiment terms")
    insights.extend(sentiment.insights)
    return insights


def generate_recommendations(
    sentiment: SentimentResult,
    code_mixing: CodeMixingResult,
    virality: ViralityPrediction,
) -> list[str]:
    recommendations = []
    if virality.viral_potential > VIRAL_RECOMMENDATION_THRESHOLD:
        recommendations.append("High viral potential: amplify through influencer partnerships")
    if len(code_mixing.languages) > 1:
        recommendations.append("Code-mixed text reads as authentic to Indian audiences; keep the natural mix")
    if sentiment.cultural_score > BRAND_ASSOCIATION_THRESHOLD:
        recommendations.append("Strong cultural resonance: good fit for brand association campaigns")
    return recommendations


def identify_risk_factors(
    brand_safety: BrandSafetyAnalysis,
    political: PoliticalAnalysis,
    regional: RegionalAnalysis,
) -> list[str]:
    risks = []
    if brand_safety.overall_safety < BRAND_SAFETY_RISK_THRESHOLD:
        risks.append("Brand safety concerns: review before publishing")
    if political.political_lean != "neutral":
        risks.append("Political lean detected: may alienate part of the audience")
    if regional.religion_neutrality < RELIGION_RISK_THRESHOLD:
        risks.append("Religious sensitivity: prefer neutral messaging")
    return risks


class CulturalAnalyzer:
    """
    Entry point for analysis.

    Usage:
        analyzer = CulturalAnalyzer()
        result = await analyzer.analyze("Diwali ki shubhkamnaye yaar", "North India")
        print(result.cultural_score, result.provider)
    """

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        sentiment_engine: Optional[SentimentEngine] = None,
        knowledge_base_path: Optional[str] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.knowledge_base_path = knowledge_base_path
        self.knowledge_base = knowledge_base or load_knowledge_base(knowledge_base_path)
        self.sentiment_engine = sentiment_engine or SentimentEngine()
        self.clock = clock

    def reload_knowledge_base(self) -> KnowledgeBase:
        """
        Swap in a freshly loaded snapshot. Requests already running keep the
        snapshot they started with. A ConfigurationError leaves the old one in place.
        """
        kb = load_knowledge_base(self.knowledge_base_path)
        self.knowledge_base = kb
        logger.info(f"📚 Knowledge base reloaded (version {kb.version})")
        return kb

    @staticmethod
    def validate_request(text: Any, region: Any, language: Any) -> AnalysisRequest:
        try:
            return AnalysisRequest(text=text, region=region, language=language)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False, include_input=False)
            first = errors[0]
            field = ".".join(str(part) for part in first["loc"]) or "request"
            raise InputValidationError(f"Invalid {field}: {first['msg']}", context={"errors": errors})

    async def _run_analyzer(self, name: str, func: Callable, args: tuple, default: Callable[[], Any]):
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            logger.error(
                f"❌ {name} analyzer failed, using default report: {e}",
                exc_info=True,
                extra={"event": "analyzer_failed", "analyzer": name, "error": str(e)},
            )
            return default()

    async def analyze(self, text: str, region: str = ALL_INDIA, language: str = "auto") -> AnalysisResult:
        request = self.validate_request(text, region, language)
        kb = self.knowledge_base
        text, region = request.text, request.region
        today = self.clock()
        started = time.perf_counter()

        (
            sentiment,
            code_mixing,
            regional,
            festival,
            virality,
            brand_safety,
            generational,
            economic,
            political,
        ) = await asyncio.gather(
            self.sentiment_engine.analyze(text, region, kb),
            self._run_analyzer("code_mixing", detect_code_mixing, (text, kb), CodeMixingResult),
            self._run_analyzer("regional", analyze_regional_nuances, (text, region, kb),
                               lambda: RegionalAnalysis(primary_region=region)),
            self._run_analyzer("festival", analyze_festival_context, (text, kb, today), FestivalAnalysis),
            self._run_analyzer("virality", predict_virality, (text, kb), ViralityPrediction),
            self._run_analyzer("brand_safety", assess_brand_safety, (text, kb), BrandSafetyAnalysis),
            self._run_analyzer("generational", analyze_generational_segment, (text, kb), GenerationalAnalysis),
            self._run_analyzer("economic", extract_economic_indicators, (text, kb), EconomicIndicators),
            self._run_analyzer("political", analyze_political_neutrality, (text, kb), PoliticalAnalysis),
        )

        result = AnalysisResult(
            cultural_score=sentiment.cultural_score,
            sentiment=sentiment.sentiment,
            confidence=sentiment.confidence,
            ai_powered=sentiment.ai_powered,
            provider=sentiment.provider,
            model=sentiment.model,
            region=region,
            language=request.language,
            knowledge_base_version=kb.version,
            cultural_insights=generate_insights(sentiment, region),
            recommendations=generate_recommendations(sentiment, code_mixing, virality),
            risk_factors=identify_risk_factors(brand_safety, political, regional),
            code_mixing_detection=code_mixing,
            regional_nuances=regional,
            festival_context=festival,
            virality_prediction=virality,
            brand_safety=brand_safety,
            generational_segment=generational,
            economic_sentiment=economic,
            political_neutrality=political,
        )

        processing_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.info(
            f"✅ Analysis completed in {processing_ms}ms (provider={result.provider}, score={result.cultural_score})",
            extra={"event": "analysis_completed", "processing_ms": processing_ms, "provider": result.provider},
        )
        return result

    def analyze_sync(self, text: str, region: str = ALL_INDIA, language: str = "auto") -> AnalysisResult:
        """Blocking wrapper for scripts and notebooks. Not for use inside a running event loop."""
        return asyncio.run(self.analyze(text, region, language))
