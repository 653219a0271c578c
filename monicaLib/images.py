from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional

from .errors import InvalidModelError, MonicaError
from .models import (
    ModelFamily,
    image_model_family,
    image_model_ids,
    is_image_model_supported,
    supported_image_models,
)
from .transport import HttpTransport

__all__ = [
    "DEFAULT_SIZE",
    "IMAGE_ENDPOINTS",
    "IMAGE_OPTIONS",
    "ImageGeneration",
    "ImageGenerationResponse",
    "ImageMixin",
]

logger = logging.getLogger(__name__)

DEFAULT_SIZE = "1024x1024"
DOWNLOAD_TIMEOUT = 30.0

IMAGE_ENDPOINTS: Dict[ModelFamily, str] = {
    ModelFamily.FLUX: "/v1/image/gen/flux",
    ModelFamily.STABLE_DIFFUSION: "/v1/image/gen/sd",
    ModelFamily.DALLE: "/v1/image/gen/dalle",
    ModelFamily.PLAYGROUND: "/v1/image/gen/playground",
    ModelFamily.IDEOGRAM: "/v1/image/gen/ideogram",
}

IMAGE_OPTIONS = (
    "negative_prompt",
    "num_outputs",
    "size",
    "seed",
    "steps",
    "guidance",
    "cfg_scale",
    "quality",
    "style",
    "aspect_ratio",
    "magic_prompt_option",
    "style_type",
    "safety_tolerance",
)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


_default_transport: Optional[HttpTransport] = None


def _shared_transport() -> HttpTransport:
    # one download session for every response not bound to a client
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpTransport()
    return _default_transport


def _decimal_text(value: float) -> str:
    # 3.5 -> "3.5", 4.0 -> "4", 0.1 + 0.2 -> "0.3"
    return format(value, ".14g")


class ImageGeneration:
    """Unified image generation request.

    Every model takes the same options; `to_dict` decides which of them reach
    the wire, and under what names, from the model family. Options a family
    does not understand are dropped without error.

    Example:
        req = ImageGeneration("flux_dev", "A lighthouse at dusk").set_steps(25).set_guidance(3.5)
        client.generate_image(req)
    """

    def __init__(self, model: str, prompt: str, **options: Any) -> None:
        unknown = set(options) - set(IMAGE_OPTIONS)
        if unknown:
            raise TypeError(f"Unknown image option(s): {', '.join(sorted(unknown))}")
        self.model = model
        self.prompt = prompt
        self.negative_prompt: Optional[str] = None
        self._num_outputs = 1
        self.size = DEFAULT_SIZE
        self.seed: Optional[int] = None
        self.steps: Optional[int] = None
        self.guidance: Optional[float] = None
        self.cfg_scale: Optional[float] = None
        self.quality: Optional[str] = None
        self.style: Optional[str] = None
        self.aspect_ratio: Optional[str] = None
        self.magic_prompt_option: Optional[str] = None
        self.style_type: Optional[str] = None
        self._safety_tolerance: Optional[int] = None
        self.set_options(options)

    @property
    def num_outputs(self) -> int:
        return self._num_outputs

    @num_outputs.setter
    def num_outputs(self, value: int) -> None:
        self._num_outputs = _clamp(int(value), 1, 4)

    @property
    def safety_tolerance(self) -> Optional[int]:
        return self._safety_tolerance

    @safety_tolerance.setter
    def safety_tolerance(self, value: int) -> None:
        self._safety_tolerance = _clamp(int(value), 1, 5)

    @property
    def family(self) -> Optional[ModelFamily]:
        return image_model_family(self.model)

    def set_options(self, options: Mapping[str, Any]) -> "ImageGeneration":
        """Apply every recognised, non-None key through its setter."""
        for key in IMAGE_OPTIONS:
            value = options.get(key)
            if value is not None:
                getattr(self, f"set_{key}")(value)
        return self

    # ----- fluent setters -----
    def set_negative_prompt(self, negative_prompt: str) -> "ImageGeneration":
        self.negative_prompt = str(negative_prompt)
        return self

    def set_num_outputs(self, num_outputs: int) -> "ImageGeneration":
        self.num_outputs = num_outputs
        return self

    def set_size(self, size: str) -> "ImageGeneration":
        self.size = str(size)
        return self

    def set_seed(self, seed: int) -> "ImageGeneration":
        self.seed = int(seed)
        return self

    def set_steps(self, steps: int) -> "ImageGeneration":
        self.steps = int(steps)
        return self

    def set_guidance(self, guidance: float) -> "ImageGeneration":
        self.guidance = float(guidance)
        return self

    def set_cfg_scale(self, cfg_scale: float) -> "ImageGeneration":
        self.cfg_scale = float(cfg_scale)
        return self

    def set_quality(self, quality: str) -> "ImageGeneration":
        self.quality = str(quality)
        return self

    def set_style(self, style: str) -> "ImageGeneration":
        self.style = str(style)
        return self

    def set_aspect_ratio(self, aspect_ratio: str) -> "ImageGeneration":
        self.aspect_ratio = str(aspect_ratio)
        return self

    def set_magic_prompt_option(self, magic_prompt_option: str) -> "ImageGeneration":
        self.magic_prompt_option = str(magic_prompt_option)
        return self

    def set_style_type(self, style_type: str) -> "ImageGeneration":
        self.style_type = str(style_type)
        return self

    def set_safety_tolerance(self, safety_tolerance: int) -> "ImageGeneration":
        self.safety_tolerance = safety_tolerance
        return self

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model, "prompt": self.prompt}
        if self.negative_prompt is not None:
            payload["negative_prompt"] = self.negative_prompt
        family = self.family
        if family is None:
            logger.warning("No payload schema for image model %r; sending model and prompt only", self.model)
            return payload
        payload.update(_FAMILY_FIELDS[family](self))
        return payload

    def __repr__(self) -> str:
        return f"ImageGeneration(model={self.model!r}, prompt={self.prompt!r})"


# ----- per-family wire schemas -----
def _flux_fields(req: ImageGeneration) -> Dict[str, Any]:
    out: Dict[str, Any] = {"num_outputs": req.num_outputs, "size": req.size}
    if req.seed is not None:
        out["seed"] = req.seed
    if req.steps is not None:
        out["steps"] = req.steps
    if req.guidance is not None:
        out["guidance"] = _decimal_text(req.guidance)
    if req.safety_tolerance is not None:
        out["safety_tolerance"] = req.safety_tolerance
    out["interval"] = 2
    return out


def _stable_diffusion_fields(req: ImageGeneration) -> Dict[str, Any]:
    out: Dict[str, Any] = {"num_outputs": req.num_outputs, "size": req.size}
    if req.seed is not None:
        out["seed"] = str(req.seed)
    if req.steps is not None:
        out["steps"] = req.steps
    if req.cfg_scale is not None:
        out["cfg_scale"] = _decimal_text(req.cfg_scale)
    out["output_quality"] = 90
    out["scheduler"] = "K_EULER"
    out["num_inference_steps"] = req.steps if req.steps is not None else 50
    return out


def _dalle_fields(req: ImageGeneration) -> Dict[str, Any]:
    out: Dict[str, Any] = {"n": req.num_outputs, "size": req.size}
    if req.quality is not None:
        out["quality"] = req.quality
    if req.style is not None:
        out["style"] = req.style
    return out


def _playground_fields(req: ImageGeneration) -> Dict[str, Any]:
    out: Dict[str, Any] = {"count": req.num_outputs, "size": req.size}
    if req.steps is not None:
        out["step"] = req.steps
    if req.seed is not None:
        out["seed"] = str(req.seed)
    if req.cfg_scale is not None:
        out["cfg_scale"] = _decimal_text(req.cfg_scale)
    out["safety_check"] = False
    return out


def _ideogram_fields(req: ImageGeneration) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if req.aspect_ratio is not None:
        out["aspect_ratio"] = req.aspect_ratio
    if req.magic_prompt_option is not None:
        out["magic_prompt_option"] = req.magic_prompt_option
    if req.seed is not None:
        out["seed"] = req.seed
    if req.style_type is not None:
        out["style_type"] = req.style_type
    return out


_FAMILY_FIELDS: Dict[ModelFamily, Callable[[ImageGeneration], Dict[str, Any]]] = {
    ModelFamily.FLUX: _flux_fields,
    ModelFamily.STABLE_DIFFUSION: _stable_diffusion_fields,
    ModelFamily.DALLE: _dalle_fields,
    ModelFamily.PLAYGROUND: _playground_fields,
    ModelFamily.IDEOGRAM: _ideogram_fields,
}


class ImageGenerationResponse:
    def __init__(self, response: Mapping[str, Any], transport: Optional[HttpTransport] = None) -> None:
        self.raw_response: Dict[str, Any] = dict(response)
        data = response.get("data")
        self.data: List[Any] = list(data) if isinstance(data, list) else []
        self._transport = transport

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            self._transport = _shared_transport()
        return self._transport

    def image_urls(self) -> List[str]:
        return [item["url"] for item in self.data if isinstance(item, dict) and item.get("url")]

    def first_image_url(self) -> Optional[str]:
        urls = self.image_urls()
        return urls[0] if urls else None

    def image_count(self) -> int:
        return len(self.data)

    def has_images(self) -> bool:
        return bool(self.data)

    def image_data(self, index: int) -> Optional[Any]:
        if 0 <= index < len(self.data):
            return self.data[index]
        return None

    def all_image_data(self) -> List[Any]:
        return list(self.data)

    # ----- downloads -----
    def download_image(self, url: str) -> Optional[bytes]:
        return self.transport.get(url, timeout=DOWNLOAD_TIMEOUT)

    def download_first_image(self) -> Optional[bytes]:
        url = self.first_image_url()
        if url is None:
            return None
        return self.download_image(url)

    def save_image(self, url: str, filepath: str) -> bool:
        content = self.download_image(url)
        if content is None:
            return False
        directory = os.path.dirname(filepath)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(filepath, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.warning("Could not write image to %s: %s", filepath, e)
            return False
        return True

    def save_first_image(self, filepath: str) -> bool:
        url = self.first_image_url()
        if url is None:
            return False
        return self.save_image(url, filepath)

    def save_all_images(self, directory: str, prefix: str = "image_", extension: str = "png") -> List[str]:
        """Save every image as `{prefix}{n}.{extension}` (n from 1) and return
        the paths that were written. A failed image does not stop the rest."""
        os.makedirs(directory, exist_ok=True)
        ext = extension.lstrip(".")
        saved: List[str] = []
        for index, url in enumerate(self.image_urls(), start=1):
            filepath = os.path.join(directory, f"{prefix}{index}.{ext}")
            if self.save_image(url, filepath):
                saved.append(filepath)
            else:
                logger.warning("Skipping image %d (%s)", index, url)
        return saved

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image_count": self.image_count(),
            "image_urls": self.image_urls(),
            "data": self.data,
        }

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    def __str__(self) -> str:
        count = self.image_count()
        if count == 0:
            return "ImageGenerationResponse: No images generated"
        if count == 1:
            return f"ImageGenerationResponse: 1 image generated - {self.first_image_url() or ''}"
        return f"ImageGenerationResponse: {count} images generated"


class ImageMixin:
    def generate_image(self, request: ImageGeneration) -> ImageGenerationResponse:
        model = request.model
        if not is_image_model_supported(model):
            raise InvalidModelError(
                model,
                image_model_ids(),
                f"Image generation model '{model}' is not supported",
            )
        endpoint = self._image_endpoint(model)
        data = self.transport.post(endpoint, request.to_dict())
        return ImageGenerationResponse(data, transport=self.transport)

    def generate_image_simple(self, model: str, prompt: str, **options: Any) -> ImageGenerationResponse:
        request = ImageGeneration(model, prompt).set_options(options)
        return self.generate_image(request)

    @staticmethod
    def supported_image_models() -> Dict[str, str]:
        return supported_image_models()

    @staticmethod
    def is_image_model_supported(model: str) -> bool:
        return is_image_model_supported(model)

    # ----- helpers -----
    @staticmethod
    def _image_endpoint(model: str) -> str:
        family = image_model_family(model)
        if family is None:
            # registry and classifier have drifted apart
            raise MonicaError(f"No endpoint for registered image model '{model}'")
        return IMAGE_ENDPOINTS[family]
