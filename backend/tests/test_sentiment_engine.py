"""Tests for the tiered sentiment engine.

Tests cover:
1. JSON extraction from free-form model output
2. Local heuristic scoring (no API key needed)
3. Provider fallback order, timeouts and cancellation (mocked SDK clients)
"""

import asyncio
import json
import logging
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import openai

from exceptions import RemoteServiceError, ResponseParseError
from knowledge_base import build_knowledge_base
from models import SentimentResult
from sentiment_engine import (
    AnthropicSentimentProvider,
    LocalHeuristicProvider,
    OpenAISentimentProvider,
    PrimaryAIResponse,
    SecondaryAIResponse,
    SentimentEngine,
    SentimentProvider,
    build_providers,
    extract_json_object,
    local_sentiment,
    parse_model_json,
)
from settings import Settings


def make_provider(name, result=None, error=None):
    provider = MagicMock(spec=SentimentProvider)
    provider.name = name
    provider.try_analyze = AsyncMock(return_value=result, side_effect=error)
    return provider


def remote_result(provider, score=82.0):
    return SentimentResult(
        cultural_score=score,
        sentiment="positive",
        confidence=0.9,
        ai_powered=True,
        provider=provider,
        model=f"{provider}-model",
        insights=["Festive tone"],
    )


def anthropic_response(text):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def openai_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


# ================================================================
# JSON extraction
# ================================================================

class TestExtractJsonObject:

    def test_json_wrapped_in_prose(self):
        raw = 'Sure! Here is the analysis:\n{"culturalScore": 80}\nHope this helps.'
        assert extract_json_object(raw) == '{"culturalScore": 80}'

    def test_nested_objects(self):
        raw = 'x {"a": {"b": {"c": 1}}, "d": 2} y {"second": true}'
        assert json.loads(extract_json_object(raw)) == {"a": {"b": {"c": 1}}, "d": 2}

    def test_braces_inside_strings(self):
        raw = '{"insight": "uses } and { in text", "escaped": "quote \\" }"}'
        assert json.loads(extract_json_object(raw))["insight"] == "uses } and { in text"

    def test_no_object(self):
        assert extract_json_object("I cannot help with that.") is None

    def test_unbalanced(self):
        assert extract_json_object('{"culturalScore": 80, "sentiment": "pos') is None


class TestParseModelJson:

    def test_valid_primary(self):
        raw = 'Result: {"culturalScore": 71, "sentiment": "Positive", "confidence": 0.8, "codeLanguages": ["Hindi"]}'
        parsed = parse_model_json("anthropic", raw, PrimaryAIResponse)
        assert parsed.cultural_score == 71
        assert parsed.sentiment == "positive"
        assert parsed.code_languages == ["Hindi"]

    def test_valid_secondary_nested(self):
        raw = json.dumps({
            "culturalScore": 64, "sentiment": "neutral", "confidence": 0.7,
            "codeMixing": {"detected": True, "languages": ["Hindi", "English"], "pattern": "hinglish"},
            "brandSafety": {"overallSafety": 90, "risks": [], "corporateRisk": "low"},
        })
        parsed = parse_model_json("openai", raw, SecondaryAIResponse)
        assert parsed.code_mixing.pattern == "hinglish"
        assert parsed.brand_safety.corporate_risk == "low"

    def test_empty_response(self):
        with pytest.raises(ResponseParseError):
            parse_model_json("anthropic", "", PrimaryAIResponse)

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError):
            parse_model_json("anthropic", "{culturalScore: 80}", PrimaryAIResponse)

    def test_out_of_range_score(self):
        raw = '{"culturalScore": 150, "sentiment": "positive", "confidence": 0.8}'
        with pytest.raises(ResponseParseError):
            parse_model_json("anthropic", raw, PrimaryAIResponse)

    def test_missing_required_field(self):
        with pytest.raises(ResponseParseError) as exc_info:
            parse_model_json("openai", '{"sentiment": "positive"}', SecondaryAIResponse)
        assert exc_info.value.provider == "openai"

    def test_unknown_sentiment(self):
        raw = '{"culturalScore": 50, "sentiment": "ecstatic", "confidence": 0.8}'
        with pytest.raises(ResponseParseError):
            parse_model_json("anthropic", raw, PrimaryAIResponse)


# ================================================================
# Local heuristic
# ================================================================

class TestLocalSentiment:

    def test_no_keywords(self, kb):
        result = local_sentiment("The meeting is at 5pm.", "All India", kb)
        assert result.cultural_score == 50
        assert result.sentiment == "neutral"
        assert result.confidence == pytest.approx(0.65)
        assert result.provider == "local"
        assert result.model == "heuristic"
        assert result.ai_powered is False

    def test_positive(self, kb):
        result = local_sentiment("This is amazing and wonderful, love it", "All India", kb)
        assert result.cultural_score == 74
        assert result.sentiment == "positive"
        assert result.confidence == pytest.approx(0.82)

    def test_negative(self, kb):
        result = local_sentiment("terrible, awful experience, so sad", "All India", kb)
        assert result.cultural_score == 38
        assert result.sentiment == "negative"

    def test_generic_words_count_but_do_not_score(self, kb):
        result = local_sentiment("feeling happy today", "All India", kb)
        assert result.cultural_score == 50
        assert result.sentiment == "positive"

    def test_regional_modifier(self, kb):
        assert local_sentiment("semma movie", "South India", kb).cultural_score == 55
        assert local_sentiment("semma movie", "All India", kb).cultural_score == 50

    def test_regional_modifier_capped(self):
        kb = build_knowledge_base({"regional_sentiment": {"South India": [{"term": "semma", "weight": 25}]}})
        assert local_sentiment("semma", "South India", kb).cultural_score == 60

    def test_score_floor(self, kb):
        text = " ".join(["terrible awful horrible worst hate disgusting"] * 3)
        assert local_sentiment(text, "All India", kb).cultural_score == 0

    def test_confidence_cap(self, kb):
        result = local_sentiment("word " * 200, "All India", kb)
        assert result.confidence == pytest.approx(0.95)

    @pytest.mark.asyncio
    async def test_provider_wrapper(self, kb):
        result = await LocalHeuristicProvider().try_analyze("The meeting is at 5pm.", "All India", kb)
        assert result.provider == "local"


# ================================================================
# Remote providers (mocked SDK clients)
# ================================================================

class TestAnthropicProvider:

    @pytest.mark.asyncio
    async def test_success(self, kb):
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=anthropic_response(
            'Here you go:\n{"culturalScore": 82, "sentiment": "positive", "confidence": 0.9, '
            '"culturalInsights": ["Festive tone"]}'
        ))
        provider = AnthropicSentimentProvider(client=client, model="claude-test", timeout=1)

        result = await provider.try_analyze("Diwali ki shubhkamnaye", "North India", kb)

        assert result.provider == "anthropic"
        assert result.model == "claude-test"
        assert result.ai_powered is True
        assert result.insights == ["Festive tone"]
        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "Diwali ki shubhkamnaye" in prompt
        assert "North India" in prompt

    @pytest.mark.asyncio
    async def test_text_with_braces_does_not_break_prompt(self, kb):
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=anthropic_response(
            '{"culturalScore": 50, "sentiment": "neutral", "confidence": 0.5}'
        ))
        provider = AnthropicSentimentProvider(client=client, timeout=1)
        result = await provider.try_analyze("json like {this} and {0}", "All India", kb)
        assert result.sentiment == "neutral"

    @pytest.mark.asyncio
    async def test_no_json_is_parse_error(self, kb):
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=anthropic_response("I'd rather not."))
        provider = AnthropicSentimentProvider(client=client, timeout=1)
        with pytest.raises(ResponseParseError):
            await provider.try_analyze("text", "All India", kb)

    @pytest.mark.asyncio
    async def test_api_error_is_remote_error(self, kb):
        client = MagicMock()
        client.messages.create = AsyncMock(side_effect=anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        ))
        provider = AnthropicSentimentProvider(client=client, timeout=1)
        with pytest.raises(RemoteServiceError) as exc_info:
            await provider.try_analyze("text", "All India", kb)
        assert exc_info.value.provider == "anthropic"

    @pytest.mark.asyncio
    async def test_timeout_is_remote_error(self, kb):
        async def hang(**kwargs):
            await asyncio.sleep(5)

        client = MagicMock()
        client.messages.create = hang
        provider = AnthropicSentimentProvider(client=client, timeout=0.05)
        with pytest.raises(RemoteServiceError, match="timed out"):
            await provider.try_analyze("text", "All India", kb)


class TestOpenAIProvider:

    @pytest.mark.asyncio
    async def test_success_uses_json_mode(self, kb):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=openai_response(json.dumps({
            "culturalScore": 67, "sentiment": "positive", "confidence": 0.75,
            "culturalInsights": ["Hinglish greeting"],
            "festivalContext": {"activeFestival": "Diwali", "seasonalRelevance": 0.9},
        })))
        provider = OpenAISentimentProvider(client=client, model="gpt-test", timeout=1)

        result = await provider.try_analyze("Happy Diwali yaar", "All India", kb)

        assert result.provider == "openai"
        assert result.cultural_score == 67
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["model"] == "gpt-test"

    @pytest.mark.asyncio
    async def test_empty_content_is_parse_error(self, kb):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=openai_response(None))
        provider = OpenAISentimentProvider(client=client, timeout=1)
        with pytest.raises(ResponseParseError):
            await provider.try_analyze("text", "All India", kb)

    @pytest.mark.asyncio
    async def test_api_error_is_remote_error(self, kb):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=openai.APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        ))
        provider = OpenAISentimentProvider(client=client, timeout=1)
        with pytest.raises(RemoteServiceError):
            await provider.try_analyze("text", "All India", kb)


# ================================================================
# Engine fallback chain
# ================================================================

class TestSentimentEngine:

    def test_local_always_last(self):
        engine = SentimentEngine([make_provider("anthropic"), make_provider("openai")])
        assert engine.chain == ["anthropic", "openai", "local"]
        assert engine.is_ai_enabled is True

    def test_no_providers(self):
        engine = SentimentEngine()
        assert engine.chain == ["local"]
        assert engine.is_ai_enabled is False

    @pytest.mark.asyncio
    async def test_primary_success_skips_secondary(self, kb):
        primary = make_provider("anthropic", result=remote_result("anthropic"))
        secondary = make_provider("openai", result=remote_result("openai"))
        engine = SentimentEngine([primary, secondary])

        result = await engine.analyze("text", "All India", kb)

        assert result.provider == "anthropic"
        secondary.try_analyze.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_primary_failure_tries_secondary(self, kb):
        primary = make_provider("anthropic", error=RemoteServiceError("anthropic", "connection refused"))
        secondary = make_provider("openai", result=remote_result("openai"))
        engine = SentimentEngine([primary, secondary])

        result = await engine.analyze("text", "All India", kb)

        primary.try_analyze.assert_awaited_once()
        secondary.try_analyze.assert_awaited_once()
        assert result.provider == "openai"

    @pytest.mark.asyncio
    async def test_both_fail_falls_back_to_local(self, kb):
        primary = make_provider("anthropic", error=ResponseParseError("anthropic", "no JSON object found"))
        secondary = make_provider("openai", error=RemoteServiceError("openai", "timed out after 10s"))
        engine = SentimentEngine([primary, secondary])

        result = await engine.analyze("The meeting is at 5pm.", "All India", kb)

        assert result.provider == "local"
        assert result.ai_powered is False
        assert result.confidence < 0.95

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_through(self, kb):
        primary = make_provider("anthropic", error=RuntimeError("sdk bug"))
        engine = SentimentEngine([primary])
        result = await engine.analyze("text", "All India", kb)
        assert result.provider == "local"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, kb):
        primary = make_provider("anthropic", error=asyncio.CancelledError())
        secondary = make_provider("openai", result=remote_result("openai"))
        engine = SentimentEngine([primary, secondary])

        with pytest.raises(asyncio.CancelledError):
            await engine.analyze("text", "All India", kb)
        secondary.try_analyze.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attempts_are_logged_with_fields(self, kb, caplog):
        caplog.set_level(logging.INFO, logger="sentiment_engine")
        primary = make_provider("anthropic", error=RemoteServiceError("anthropic", "boom"))
        engine = SentimentEngine([primary])

        await engine.analyze("text", "All India", kb)

        events = [r for r in caplog.records if getattr(r, "event", None) == "sentiment_tier"]
        assert [(r.provider, r.outcome) for r in events] == [("anthropic", "failure"), ("local", "success")]
        assert all(r.latency_ms >= 0 for r in events)
        assert "boom" in events[0].error


class TestBuildProviders:

    def test_skips_providers_without_keys(self):
        providers = build_providers(Settings(anthropic_api_key="sk-ant-test"))
        assert [p.name for p in providers] == ["anthropic"]

    def test_configured_order(self):
        settings = Settings(
            anthropic_api_key="sk-ant-test",
            openai_api_key="sk-test",
            ai_providers=("openai", "anthropic"),
        )
        assert [p.name for p in build_providers(settings)] == ["openai", "anthropic"]

    def test_unknown_and_local_entries_ignored(self):
        settings = Settings(openai_api_key="sk-test", ai_providers=("mistral", "local", "openai"))
        assert [p.name for p in build_providers(settings)] == ["openai"]

    def test_no_keys(self):
        assert build_providers(Settings()) == []
