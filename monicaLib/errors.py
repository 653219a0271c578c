"""Exceptions raised by monicaLib.

Everything derives from MonicaError so callers can catch the library as a
whole. InvalidModelError is also a ValueError because it always comes from a
bad argument.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Any, Dict, List, Optional, Sequence

__all__ = [
    "MonicaError",
    "InvalidModelError",
    "MonicaApiError",
]

SUGGESTION_THRESHOLD = 50.0

AUTH_ERROR_CODES = frozenset({"invalid_api_key", "authentication_failed"})
RATE_LIMIT_ERROR_CODES = frozenset({"rate_limit_exceeded"})
QUOTA_ERROR_CODES = frozenset({"insufficient_quota", "quota_exceeded", "billing_hard_limit_reached"})


class MonicaError(Exception):
    """Base exception for monicaLib."""
    pass


class InvalidModelError(MonicaError, ValueError):
    """A model id is missing from the chat or image registry.

    Attributes:
        invalid_model: the rejected id, verbatim
        supported_models: ids that would have been accepted (may be empty)
    """

    def __init__(
        self,
        invalid_model: str,
        supported_models: Optional[Sequence[str]] = None,
        message: Optional[str] = None,
    ) -> None:
        self.invalid_model = invalid_model
        self.supported_models: List[str] = list(supported_models or [])
        if not message:
            message = f"Model '{invalid_model}' is not supported"
            if self.supported_models:
                message += ". Supported models: " + ", ".join(self.supported_models)
        self.message = message
        super().__init__(message)

    def has_supported_models(self) -> bool:
        return bool(self.supported_models)

    def suggestions(self, max_suggestions: int = 3) -> List[str]:
        """Supported ids that look like the rejected one, best match first."""
        if not self.supported_models:
            return []
        needle = self.invalid_model.lower()
        scored = []
        for candidate in self.supported_models:
            similarity = SequenceMatcher(None, needle, candidate.lower()).ratio() * 100
            if similarity > SUGGESTION_THRESHOLD:
                scored.append((similarity, candidate))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [candidate for _, candidate in scored[:max_suggestions]]

    def user_friendly_message(self) -> str:
        message = f"The model '{self.invalid_model}' is not supported."
        suggestions = self.suggestions()
        if suggestions:
            message += " Did you mean: " + ", ".join(suggestions) + "?"
        elif self.has_supported_models():
            message += " Please use one of the supported models."
        return message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "invalid_model": self.invalid_model,
            "supported_models": list(self.supported_models),
            "suggestions": self.suggestions(),
        }


class MonicaApiError(MonicaError):
    """Transport or API failure.

    Attributes:
        message: error message
        status_code: HTTP status when one was received
        api_error_code: `error.code` from the API body, if any
        response_data: decoded error body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        api_error_code: Optional[str] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.api_error_code = api_error_code
        self.response_data = response_data
        super().__init__(message)

    def is_authentication_error(self) -> bool:
        return self.status_code == 401 or self.api_error_code in AUTH_ERROR_CODES

    def is_rate_limit_error(self) -> bool:
        return self.status_code == 429 or self.api_error_code in RATE_LIMIT_ERROR_CODES

    def is_quota_error(self) -> bool:
        return self.api_error_code in QUOTA_ERROR_CODES

    def is_server_error(self) -> bool:
        return self.status_code is not None and 500 <= self.status_code < 600

    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500

    def user_friendly_message(self) -> str:
        if self.is_authentication_error():
            return "Authentication failed. Please check your API key."
        if self.is_rate_limit_error():
            return "Rate limit exceeded. Please wait before making more requests."
        if self.is_quota_error():
            return "API quota exceeded. Please check your billing and usage limits."
        if self.is_server_error():
            return "Monica API server error. Please try again later."
        if self.is_client_error():
            return "Invalid request. Please check your request parameters."
        return self.message or "An unknown error occurred while communicating with Monica API."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "status_code": self.status_code,
            "api_error_code": self.api_error_code,
            "response_data": self.response_data,
        }
