"""
Cultural Signal Analyzer - Backend API
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

FastAPI server exposing cultural-signal analysis for Indian-language
social media text.
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from settings import Settings

settings = Settings.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from exceptions import ConfigurationError, InputValidationError
from knowledge_base import ALL_INDIA
from models import AnalysisResult
from pipeline import CulturalAnalyzer
from sentiment_engine import SentimentEngine, build_providers

API_VERSION = "1.0.0"

app = FastAPI(
    title="Cultural Signal Analyzer API",
    description="Cultural sentiment, code-mixing, festival, virality and brand-safety signals for Indian social media text",
    version=API_VERSION
)

# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Attach security headers (X-Content-Type-Options, X-Frame-Options, etc.)."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
    return response

# CORS for the dashboard; locked to ALLOWED_ORIGINS when set
if settings.allowed_origins:
    logger.info(f"CORS: Locked to {len(settings.allowed_origins)} origin(s)")
else:
    logger.warning("CORS: No ALLOWED_ORIGINS set - allowing localhost only (dev mode).")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins) or ["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# Initialize components. A broken knowledge base is fatal here, at startup.
sentiment_engine = SentimentEngine(build_providers(settings))
analyzer = CulturalAnalyzer(
    sentiment_engine=sentiment_engine,
    knowledge_base_path=settings.knowledge_base_path,
)

# Startup validation - log feature availability
_features = {
    "knowledge_base_version": analyzer.knowledge_base.version,
    "ai_sentiment": sentiment_engine.is_ai_enabled,
    "provider_chain": " -> ".join(sentiment_engine.chain),
    "ai_timeout_seconds": str(settings.ai_timeout_seconds),
}
logger.info("=== Feature Availability ===")
for feature, enabled in _features.items():
    if isinstance(enabled, str):
        logger.info(f"  {feature}: {enabled}")
    else:
        status = "ENABLED" if enabled else "DISABLED"
        logger.info(f"  {feature}: {status}")
if not sentiment_engine.is_ai_enabled:
    logger.warning("AI sentiment: using HEURISTIC fallback only. Set ANTHROPIC_API_KEY or OPENAI_API_KEY to enable remote tiers.")


# Request models
class AnalyzeRequest(BaseModel):
    # Limits are enforced by the pipeline so every input problem maps to one 400 shape
    text: str
    region: str = ALL_INDIA
    language: str = "auto"


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    error = InputValidationError("Malformed request body", context={"errors": errors})
    return JSONResponse(status_code=400, content=error.to_dict())


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Knowledge base error: {exc.message}")
    return JSONResponse(status_code=500, content=exc.to_dict())


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": API_VERSION,
        "knowledge_base_version": analyzer.knowledge_base.version,
        "provider_chain": sentiment_engine.chain,
    }


@app.post("/analyze", response_model=AnalysisResult)
async def analyze_text(request: AnalyzeRequest):
    """
    Analyze a piece of text for cultural signals.

    Runs the eight heuristic analyzers and the sentiment provider chain
    concurrently. Remote AI failures never surface here; they show up as
    provider="local" in the result.
    """
    return await analyzer.analyze(request.text, request.region, request.language)


@app.post("/knowledge-base/reload")
async def reload_knowledge_base():
    """Reload knowledge-base tables from disk. On error the previous snapshot stays active."""
    kb = analyzer.reload_knowledge_base()
    return {"status": "reloaded", "knowledge_base_version": kb.version}


if __name__ == "__main__":
    logger.info("Cultural Signal Analyzer API")
    logger.info("Starting server at http://127.0.0.1:8000")
    logger.info("API docs: http://127.0.0.1:8000/docs")
    # SECURITY: bind to localhost only
    uvicorn.run(app, host="127.0.0.1", port=8000)
