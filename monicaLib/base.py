from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from . import models as registry
from .config import MonicaConfig, get_config
from .errors import InvalidModelError
from .transport import HttpTransport

DEFAULT_API_VERSION = "v1"


class BaseClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_version: str = DEFAULT_API_VERSION,
        default_max_tokens: Optional[int] = None,
        default_temperature: Optional[float] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        config: Optional[MonicaConfig] = None,
    ) -> None:
        cfg = config or get_config()
        self.api_key = api_key if api_key is not None else cfg.api_key
        self.api_version = api_version
        self.default_max_tokens = default_max_tokens
        self.default_temperature = default_temperature
        self.model = model or cfg.model
        self.transport = HttpTransport(
            base_url=base_url or cfg.base_url,
            api_key=self.api_key,
            timeout=timeout if timeout is not None else cfg.timeout,
            connect_timeout=connect_timeout if connect_timeout is not None else cfg.connect_timeout,
            session=session,
        )

    @property
    def model(self) -> str:
        return self._model

    @model.setter
    def model(self, model: str) -> None:
        if not registry.is_model_supported(model):
            raise InvalidModelError(model, registry.all_model_ids())
        self._model = model

    def set_model(self, model: str) -> "BaseClient":
        self.model = model
        return self

    def set_default_max_tokens(self, max_tokens: Optional[int]) -> "BaseClient":
        self.default_max_tokens = max_tokens
        return self

    def set_default_temperature(self, temperature: Optional[float]) -> "BaseClient":
        self.default_temperature = temperature
        return self

    @property
    def session(self) -> requests.Session:
        return self.transport.session

    # ----- registry lookups -----
    @staticmethod
    def supported_models() -> Dict[str, Dict[str, str]]:
        return registry.supported_models()

    @staticmethod
    def models_by_provider(provider: str) -> Dict[str, str]:
        return registry.models_by_provider(provider)

    @staticmethod
    def all_model_ids() -> List[str]:
        return registry.all_model_ids()

    @staticmethod
    def all_models_with_human_names() -> Dict[str, str]:
        return registry.all_models_with_human_names()

    @staticmethod
    def model_human_name(model: str) -> Optional[str]:
        return registry.model_human_name(model)

    @staticmethod
    def is_model_supported(model: str) -> bool:
        return registry.is_model_supported(model)

    # ----- helpers -----
    def _apply_default_chat_options(self, options: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(options)
        if merged.get("max_tokens") is None and self.default_max_tokens is not None:
            merged["max_tokens"] = self.default_max_tokens
        if merged.get("temperature") is None and self.default_temperature is not None:
            merged["temperature"] = self.default_temperature
        return merged
