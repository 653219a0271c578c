from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Union

from .completions import ChatCompletion, ChatCompletionResponse
from .messages import ChatMessage


class ChatMixin:
    def chat(self, message: str, **options: Any) -> ChatCompletionResponse:
        """Send one user prompt. Options: system, max_tokens, temperature,
        top_p, frequency_penalty, presence_penalty, stream."""
        options = self._apply_default_chat_options(options)
        completion = ChatCompletion(self.model, message, options)
        return self._send_chat(completion)

    def chat_with_messages(
        self,
        messages: Iterable[Union[ChatMessage, Mapping[str, Any]]],
        **options: Any,
    ) -> ChatCompletionResponse:
        options = self._apply_default_chat_options(options)
        completion = ChatCompletion(self.model, "", options, messages=messages)
        return self._send_chat(completion)

    # ----- helpers -----
    def _chat_endpoint(self) -> str:
        return f"/{self.api_version}/chat/completions"

    def _send_chat(self, completion: ChatCompletion) -> ChatCompletionResponse:
        payload: Dict[str, Any] = completion.to_dict()
        data = self.transport.post(self._chat_endpoint(), payload)
        return ChatCompletionResponse.from_dict(data)
