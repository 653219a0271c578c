from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .messages import ChatMessage

__all__ = [
    "CHAT_OPTIONS",
    "ChatCompletion",
    "ChatCompletionResponse",
]

CHAT_OPTIONS = (
    "system",
    "max_tokens",
    "temperature",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "stream",
)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        value = float(value.strip())
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        value = value.strip()
    return float(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_message(message: Union[ChatMessage, Mapping[str, Any]]) -> ChatMessage:
    if isinstance(message, ChatMessage):
        return message
    return ChatMessage.from_dict(dict(message))


class ChatCompletion:
    """Payload builder for /chat/completions.

    `options` accepts the keys in CHAT_OPTIONS; `system` becomes a leading
    system message and the rest map onto sampling fields. Unknown keys and
    None values are ignored. Message order is: system option, `messages`,
    then `message` as a user turn.
    """

    def __init__(
        self,
        model: str,
        message: str = "",
        options: Optional[Mapping[str, Any]] = None,
        messages: Optional[Iterable[Union[ChatMessage, Mapping[str, Any]]]] = None,
    ) -> None:
        self.model = model
        self.messages: List[ChatMessage] = []
        self.max_tokens: Optional[int] = None
        self.temperature: Optional[float] = None
        self.top_p: Optional[float] = None
        self.frequency_penalty: Optional[float] = None
        self.presence_penalty: Optional[float] = None
        self.stream = False
        options = options or {}
        system = options.get("system")
        if system:
            self.add_system_message(str(system))
        if messages is not None:
            self.messages.extend(_as_message(m) for m in messages)
        if message:
            self.add_user_message(message)
        self.set_options(options)

    def set_options(self, options: Mapping[str, Any]) -> "ChatCompletion":
        if options.get("max_tokens") is not None:
            self.max_tokens = _to_int(options["max_tokens"])
        if options.get("temperature") is not None:
            self.temperature = _to_float(options["temperature"])
        if options.get("top_p") is not None:
            self.top_p = _to_float(options["top_p"])
        if options.get("frequency_penalty") is not None:
            self.frequency_penalty = _to_float(options["frequency_penalty"])
        if options.get("presence_penalty") is not None:
            self.presence_penalty = _to_float(options["presence_penalty"])
        if options.get("stream") is not None:
            self.stream = _to_bool(options["stream"])
        return self

    def set_messages(self, messages: Iterable[Union[ChatMessage, Mapping[str, Any]]]) -> "ChatCompletion":
        self.messages = [_as_message(m) for m in messages]
        return self

    def add_message(self, message: ChatMessage) -> "ChatCompletion":
        self.messages.append(message)
        return self

    def add_user_message(self, content: str, name: Optional[str] = None) -> "ChatCompletion":
        return self.add_message(ChatMessage.user(content, name))

    def add_assistant_message(self, content: str, name: Optional[str] = None) -> "ChatCompletion":
        return self.add_message(ChatMessage.assistant(content, name))

    def add_system_message(self, content: str, name: Optional[str] = None) -> "ChatCompletion":
        return self.add_message(ChatMessage.system(content, name))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.top_p is not None:
            payload["top_p"] = self.top_p
        if self.frequency_penalty is not None:
            payload["frequency_penalty"] = self.frequency_penalty
        if self.presence_penalty is not None:
            payload["presence_penalty"] = self.presence_penalty
        if self.stream:
            payload["stream"] = True
        return payload


@dataclass
class ChatCompletionResponse:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: List[Dict[str, Any]] = field(default_factory=list)
    usage: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatCompletionResponse":
        created = data.get("created")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created=int(created) if created is not None else int(time.time()),
            model=data.get("model") or "",
            choices=list(data.get("choices") or []),
            usage=dict(data.get("usage") or {}),
        )

    def first_choice(self) -> Optional[Dict[str, Any]]:
        return self.choices[0] if self.choices else None

    def _first_message(self) -> Dict[str, Any]:
        choice = self.first_choice() or {}
        return choice.get("message") or {}

    def content(self) -> str:
        return self._first_message().get("content") or ""

    def role(self) -> str:
        return self._first_message().get("role") or "assistant"

    def finish_reason(self) -> Optional[str]:
        choice = self.first_choice()
        if choice is None:
            return None
        return choice.get("finish_reason")

    def is_complete(self) -> bool:
        return self.finish_reason() == "stop"

    def was_truncated(self) -> bool:
        return self.finish_reason() == "length"

    def was_filtered(self) -> bool:
        return self.finish_reason() == "content_filter"

    def prompt_tokens(self) -> int:
        return int(self.usage.get("prompt_tokens") or 0)

    def completion_tokens(self) -> int:
        return int(self.usage.get("completion_tokens") or 0)

    def total_tokens(self) -> int:
        return int(self.usage.get("total_tokens") or 0)

    def first_choice_as_message(self) -> Optional[ChatMessage]:
        choice = self.first_choice()
        if choice is None or "message" not in choice:
            return None
        message = choice["message"] or {}
        return ChatMessage(
            message.get("role") or "assistant",
            message.get("content") or "",
            message.get("name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "choices": self.choices,
            "usage": self.usage,
        }

    def __str__(self) -> str:
        return self.content()
