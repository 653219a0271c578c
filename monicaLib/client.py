from __future__ import annotations

from .base import BaseClient
from .chat import ChatMixin
from .images import ImageMixin


class MonicaClient(BaseClient, ChatMixin, ImageMixin):
    pass
