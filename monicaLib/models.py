from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

DEFAULT_MODEL = "gpt-4.1"

CHAT_MODELS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "OpenAI": MappingProxyType(
            {
                "gpt-5": "GPT-5",
                "gpt-4.1": "GPT-4.1",
                "gpt-4.1-mini": "GPT-4.1 Mini",
                "gpt-4.1-nano": "GPT-4.1 Nano",
                "gpt-4o": "GPT-4o",
                "gpt-4o-mini": "GPT-4o Mini",
            }
        ),
        "Anthropic": MappingProxyType(
            {
                "claude-sonnet-4-20250514": "Claude Sonnet 4",
                "claude-opus-4-20250514": "Claude Opus 4",
                "claude-3-7-sonnet-latest": "Claude 3.7 Sonnet",
                "claude-3-5-sonnet-latest": "Claude Sonnet 3.5",
                "claude-3-5-haiku-latest": "Claude Haiku 3.5",
            }
        ),
        "Google": MappingProxyType(
            {
                "gemini-2.5-pro": "Gemini 2.5 Pro Preview",
                "gemini-2.5-flash": "Gemini 2.5 Flash",
            }
        ),
        "DeepSeek": MappingProxyType(
            {
                "deepseek-reasoner": "DeepSeek V3 Reasoner",
                "deepseek-chat": "DeepSeek V3 Chat",
            }
        ),
        "Meta": MappingProxyType(
            {
                "meta-llama/llama-3-8b-instruct": "Meta: Llama 3 8B Instruct",
                "meta-llama/llama-3.1-8b-instruct": "Meta: Llama 3.1 8B Instruct",
            }
        ),
        "Grok": MappingProxyType({"x-ai/grok-3-beta": "Grok 3 Beta"}),
        "NVIDIA": MappingProxyType(
            {"nvidia/llama-3.1-nemotron-70b-instruct": "NVIDIA: Llama 3.1 Nemotron 70B"}
        ),
        "Mistral": MappingProxyType(
            {"mistralai/mistral-7b-instruct": "Mistral: Mistral 7B Instruct"}
        ),
    }
)

IMAGE_MODELS: Mapping[str, str] = MappingProxyType(
    {
        "flux_schnell": "FLUX.1 Schnell",
        "flux_dev": "FLUX.1 Dev",
        "flux_pro": "FLUX.1 Pro",
        "sdxl_1_0": "Stable Diffusion XL 1.0",
        "sd3": "Stable Diffusion 3",
        "sd3_5": "Stable Diffusion 3.5 Large",
        "dall-e-3": "DALL·E 3",
        "playground-v2-5": "Playground V2.5",
        "V_2": "Ideogram V2",
    }
)

SUPPORTED_SIZES = ("256x256", "512x512", "1024x1024", "1024x1792", "1792x1024")

IDEOGRAM_ASPECT_RATIOS = (
    "ASPECT_10_16",
    "ASPECT_16_10",
    "ASPECT_9_16",
    "ASPECT_16_9",
    "ASPECT_4_3",
    "ASPECT_3_4",
    "ASPECT_1_1",
    "ASPECT_3_2",
    "ASPECT_2_3",
)


class ModelFamily(str, Enum):
    """Wire schema an image model id serializes to."""

    FLUX = "flux"
    STABLE_DIFFUSION = "sd"
    DALLE = "dalle"
    PLAYGROUND = "playground"
    IDEOGRAM = "ideogram"


FLUX_PREFIX = "flux_"
STABLE_DIFFUSION_MODELS = frozenset({"sdxl_1_0", "sd3", "sd3_5"})
DALLE_MODEL = "dall-e-3"
PLAYGROUND_MODEL = "playground-v2-5"
IDEOGRAM_MODEL = "V_2"


def image_model_family(model_id: str) -> Optional[ModelFamily]:
    """Classify an image model id, or return None when no family claims it.

    Both the payload builder and the endpoint resolver go through here, so
    the two can never disagree about a model.
    """
    if model_id.startswith(FLUX_PREFIX):
        return ModelFamily.FLUX
    if model_id in STABLE_DIFFUSION_MODELS:
        return ModelFamily.STABLE_DIFFUSION
    if model_id == DALLE_MODEL:
        return ModelFamily.DALLE
    if model_id == PLAYGROUND_MODEL:
        return ModelFamily.PLAYGROUND
    if model_id == IDEOGRAM_MODEL:
        return ModelFamily.IDEOGRAM
    return None


# ----- chat models -----
def supported_models() -> Dict[str, Dict[str, str]]:
    return {provider: dict(models) for provider, models in CHAT_MODELS.items()}


def models_by_provider(provider: str) -> Dict[str, str]:
    return dict(CHAT_MODELS.get(provider, {}))


def all_model_ids() -> List[str]:
    out: List[str] = []
    for models in CHAT_MODELS.values():
        out.extend(models.keys())
    return out


def all_models_with_human_names() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for models in CHAT_MODELS.values():
        out.update(models)
    return out


def is_model_supported(model_id: str) -> bool:
    return any(model_id in models for models in CHAT_MODELS.values())


def model_human_name(model_id: str) -> Optional[str]:
    for models in CHAT_MODELS.values():
        if model_id in models:
            return models[model_id]
    return None


# ----- image models -----
def supported_image_models() -> Dict[str, str]:
    return dict(IMAGE_MODELS)


def image_model_ids() -> List[str]:
    return list(IMAGE_MODELS.keys())


def is_image_model_supported(model_id: str) -> bool:
    return model_id in IMAGE_MODELS


def image_model_human_name(model_id: str) -> Optional[str]:
    return IMAGE_MODELS.get(model_id)
