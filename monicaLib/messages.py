from __future__ import annotations

import base64
import copy
import mimetypes
import os
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple, Union

__all__ = [
    "Role",
    "ROLE_SYSTEM",
    "ROLE_USER",
    "ROLE_ASSISTANT",
    "VALID_ROLES",
    "VALID_DETAILS",
    "ChatMessage",
    "image_block",
    "render_content",
]

Role = Literal["system", "user", "assistant"]
Content = Union[str, List[Dict[str, Any]]]

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
VALID_ROLES = (ROLE_SYSTEM, ROLE_USER, ROLE_ASSISTANT)
VALID_DETAILS = ("low", "high", "auto")


def image_block(url: str, detail: str = "auto") -> Dict[str, Any]:
    if detail not in VALID_DETAILS:
        raise ValueError(f"Invalid image detail '{detail}'. Valid values are: {', '.join(VALID_DETAILS)}")
    return {"type": "image_url", "image_url": {"url": url, "detail": detail}}


def render_content(text: str, images: Sequence[Dict[str, Any]]) -> Content:
    """Wire content for a message: the plain text, or text + image blocks once
    any image is attached."""
    if not images:
        return text
    blocks: List[Dict[str, Any]] = []
    if text:
        blocks.append({"type": "text", "text": text})
    for image in images:
        blocks.append({"type": "image_url", "image_url": dict(image["image_url"])})
    return blocks


def _split_content(content: Union[str, Iterable[Any]]) -> Tuple[str, List[Dict[str, Any]]]:
    if isinstance(content, str):
        return content, []
    texts: List[str] = []
    images: List[Dict[str, Any]] = []
    for item in content:
        if not isinstance(item, dict):
            continue
        kind = item.get("type")
        if kind == "text":
            texts.append(str(item.get("text") or ""))
        elif kind == "image_url":
            ref = item.get("image_url")
            if isinstance(ref, str):
                ref = {"url": ref}
            if isinstance(ref, dict) and ref.get("url"):
                images.append(image_block(ref["url"], ref.get("detail") or "auto"))
    return "\n".join(texts), images


class ChatMessage:
    """One chat turn.

    Text and attached images are stored separately; `content` is rendered
    from them, so it is a plain string until the first image is added and a
    block list from then on. A block list supplied by the caller is sent
    as given, in its own order, until the message is next mutated.
    """

    def __init__(self, role: str, content: Union[str, List[Dict[str, Any]]] = "", name: Optional[str] = None) -> None:
        self.role = role
        self._set_content(content)
        self.name = name

    def _set_content(self, content: Union[str, List[Dict[str, Any]]]) -> None:
        if not isinstance(content, str):
            content = list(content)
        self._text, self._images = _split_content(content)
        # original blocks are only worth keeping when they carry images
        self._blocks: Optional[List[Dict[str, Any]]] = None
        if self._images:
            self._blocks = [copy.deepcopy(item) for item in content if isinstance(item, dict)]

    # ----- factories -----
    @classmethod
    def system(cls, content: str, name: Optional[str] = None) -> "ChatMessage":
        return cls(ROLE_SYSTEM, content, name)

    @classmethod
    def user(cls, content: str, name: Optional[str] = None) -> "ChatMessage":
        return cls(ROLE_USER, content, name)

    @classmethod
    def assistant(cls, content: str, name: Optional[str] = None) -> "ChatMessage":
        return cls(ROLE_ASSISTANT, content, name)

    @classmethod
    def user_with_image(cls, text: str, image_url: str, name: Optional[str] = None, detail: str = "auto") -> "ChatMessage":
        return cls.user(text, name).add_image(image_url, detail)

    @classmethod
    def user_with_images(cls, text: str, image_urls: Iterable[str], name: Optional[str] = None) -> "ChatMessage":
        message = cls.user(text, name)
        for url in image_urls:
            message.add_image(url)
        return message

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        if "role" not in data:
            raise ValueError("Message role is required")
        if data.get("content") is None:
            raise ValueError("Message content is required")
        return cls(data["role"], data["content"], data.get("name"))

    # ----- properties -----
    @property
    def role(self) -> str:
        return self._role

    @role.setter
    def role(self, value: str) -> None:
        if value not in VALID_ROLES:
            raise ValueError(f"Invalid role '{value}'. Valid roles are: {', '.join(VALID_ROLES)}")
        self._role = value

    @property
    def content(self) -> Content:
        if self._blocks is not None:
            return copy.deepcopy(self._blocks)
        return render_content(self._text, self._images)

    @content.setter
    def content(self, value: Union[str, List[Dict[str, Any]]]) -> None:
        self._set_content(value)

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        self._blocks = None

    @property
    def images(self) -> List[Dict[str, Any]]:
        return render_content("", self._images) if self._images else []

    def has_images(self) -> bool:
        return bool(self._images)

    def is_system(self) -> bool:
        return self._role == ROLE_SYSTEM

    def is_user(self) -> bool:
        return self._role == ROLE_USER

    def is_assistant(self) -> bool:
        return self._role == ROLE_ASSISTANT

    # ----- images -----
    def add_image(self, image_url: str, detail: str = "auto") -> "ChatMessage":
        self._images.append(image_block(image_url, detail))
        self._blocks = None
        return self

    def add_image_from_base64(self, b64_data: str, mime_type: str = "image/jpeg", detail: str = "auto") -> "ChatMessage":
        return self.add_image(f"data:{mime_type};base64,{b64_data}", detail)

    def add_image_from_file(self, image_path: str, detail: str = "auto") -> "ChatMessage":
        if not os.path.isfile(image_path):
            raise FileNotFoundError(image_path)
        mime_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"
        with open(image_path, "rb") as f:
            b64 = base64.b64encode(f.read()).decode("utf-8")
        return self.add_image_from_base64(b64, mime_type, detail)

    def clear_images(self) -> "ChatMessage":
        self._images = []
        self._blocks = None
        return self

    # ----- serialization -----
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self._role, "content": self.content}
        if self.name is not None:
            data["name"] = self.name
        return data

    def __str__(self) -> str:
        prefix = f"[{self.name}] " if self.name else ""
        text = self._text
        count = len(self._images)
        if count:
            text += f" [+{count} image{'s' if count > 1 else ''}]"
        return f"{prefix}{self._role}: {text}"

    def __repr__(self) -> str:
        return f"ChatMessage(role={self._role!r}, content={self.content!r}, name={self.name!r})"
