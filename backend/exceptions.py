"""
Cultural Signal Analyzer - Error taxonomy
Copyright (c) 2026 beautifulplanet
Licensed under MIT License

Only InputValidationError and ConfigurationError ever leave the pipeline.
RemoteServiceError and ResponseParseError are absorbed by the sentiment
provider chain and only show up in logs.
"""

from typing import Any, Optional


class CulturalAnalysisError(Exception):
    """Base exception for all analyzer errors."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for logging / API error bodies."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class InputValidationError(CulturalAnalysisError):
    """Request rejected before the pipeline runs (empty or oversized text, bad region)."""


class ConfigurationError(CulturalAnalysisError):
    """Knowledge base table missing or malformed. Fatal at startup."""


class RemoteServiceError(CulturalAnalysisError):
    """Network, timeout or auth failure talking to a remote AI provider."""

    def __init__(self, provider: str, original_error: Exception | str):
        message = f"{provider} request failed: {original_error}"
        super().__init__(message, context={
            "provider": provider,
            "original_error": str(original_error),
        })
        self.provider = provider


class ResponseParseError(CulturalAnalysisError):
    """Remote response had no well-formed JSON object or failed schema validation."""

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider} response unusable: {reason}", context={
            "provider": provider,
            "reason": reason,
        })
        self.provider = provider
