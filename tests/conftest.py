import os
import sys
import json

import pytest

# Ensure the package path is importable: add the project root directory
CURRENT_DIR = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)


CHAT_OK = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "gpt-4.1",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "ok"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
}


class FakeResponse:
    def __init__(self, *, status=200, text=None, json_data=None, content=b"", headers=None):
        self.status_code = status
        self._text = text
        self._json = json_data
        self.content = content
        self.headers = headers or {}
        self.closed = False

    def json(self):
        if self._json is not None:
            return self._json
        return json.loads(self._text or "")

    @property
    def text(self):
        return self._text or ""

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, post_response=None):
        self.last_get = None
        self.last_post = None
        self.posts = []
        self.post_response = post_response

    def get(self, url, **kw):
        self.last_get = (url, kw)
        return FakeResponse(content=b"IMG")

    def post(self, url, headers=None, json=None, **kw):
        self.last_post = (url, headers or {}, json or {}, kw)
        self.posts.append(self.last_post)
        return self.post_response or FakeResponse(json_data=CHAT_OK)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("MONICA_API_KEY", "MONICA_BASE_URL", "MONICA_MODEL", "MONICA_TIMEOUT", "MONICA_CONNECT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
