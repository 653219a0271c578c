"""
monicaLib: client library for the Monica AI API platform.

Usage (simple façade, configured from MONICA_API_KEY and friends):
    from monicaLib import (
        MonicaClient, ChatMessage, ImageGeneration,
        chat, chat_with_messages,
        generate_image, generate_image_simple,
        models_by_provider, all_model_ids, is_model_supported,
    )

Run examples:
    python -m monicaLib
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from .client import MonicaClient
from .completions import ChatCompletion, ChatCompletionResponse
from .config import MonicaConfig, get_config
from .errors import InvalidModelError, MonicaApiError, MonicaError
from .images import ImageGeneration, ImageGenerationResponse
from .messages import ChatMessage
from .models import (
    ModelFamily,
    all_model_ids,
    all_models_with_human_names,
    image_model_family,
    image_model_human_name,
    image_model_ids,
    is_image_model_supported,
    is_model_supported,
    model_human_name,
    models_by_provider,
    supported_image_models,
    supported_models,
)

__all__ = [
    "MonicaClient",
    "MonicaConfig",
    "get_config",
    "ChatMessage",
    "ChatCompletion",
    "ChatCompletionResponse",
    "ImageGeneration",
    "ImageGenerationResponse",
    "ModelFamily",
    "MonicaError",
    "InvalidModelError",
    "MonicaApiError",
    "supported_models",
    "models_by_provider",
    "all_model_ids",
    "all_models_with_human_names",
    "is_model_supported",
    "model_human_name",
    "supported_image_models",
    "image_model_ids",
    "is_image_model_supported",
    "image_model_human_name",
    "image_model_family",
    "chat",
    "chat_with_messages",
    "generate_image",
    "generate_image_simple",
    "__version__",
]

__version__ = "1.0.0"


_default_client: Optional[MonicaClient] = None


def _client() -> MonicaClient:
    global _default_client
    if _default_client is None:
        _default_client = MonicaClient()
    return _default_client


def chat(message: str, **options: Any) -> ChatCompletionResponse:
    return _client().chat(message, **options)


def chat_with_messages(
    messages: Iterable[Union[ChatMessage, Mapping[str, Any]]],
    **options: Any,
) -> ChatCompletionResponse:
    return _client().chat_with_messages(messages, **options)


def generate_image(request: ImageGeneration) -> ImageGenerationResponse:
    return _client().generate_image(request)


def generate_image_simple(model: str, prompt: str, **options: Any) -> ImageGenerationResponse:
    return _client().generate_image_simple(model, prompt, **options)
