import base64
import os

import pytest

from monicaLib import ChatMessage
from monicaLib.messages import render_content


def test_factories_and_roles():
    assert ChatMessage.system("s").is_system()
    assert ChatMessage.user("u").is_user()
    assert ChatMessage.assistant("a").is_assistant()
    with pytest.raises(ValueError):
        ChatMessage("tool", "x")


def test_plain_text_serialization_and_name():
    m = ChatMessage.user("hello", name="bob")
    assert m.content == "hello"
    assert m.to_dict() == {"role": "user", "content": "hello", "name": "bob"}
    assert "name" not in ChatMessage.user("hi").to_dict()


def test_add_image_switches_to_blocks():
    m = ChatMessage.user("look").add_image("http://x/a.png", detail="high")
    assert m.has_images()
    assert m.content == [
        {"type": "text", "text": "look"},
        {"type": "image_url", "image_url": {"url": "http://x/a.png", "detail": "high"}},
    ]


def test_clear_images_collapses_back_to_text():
    m = ChatMessage.user_with_images("two", ["http://x/1.png", "http://x/2.png"])
    assert len(m.content) == 3
    m.clear_images()
    assert m.content == "two"
    assert not m.has_images()


def test_text_edit_after_images_is_reflected():
    m = ChatMessage.user_with_image("first", "http://x/1.png")
    m.text = "second"
    assert m.content[0] == {"type": "text", "text": "second"}
    # empty text leaves only image blocks
    m.text = ""
    assert [b["type"] for b in m.content] == ["image_url"]


def test_invalid_detail_rejected():
    with pytest.raises(ValueError):
        ChatMessage.user("x").add_image("http://x", detail="ultra")


def test_render_content_is_pure():
    images = [{"type": "image_url", "image_url": {"url": "u", "detail": "auto"}}]
    out = render_content("t", images)
    out[1]["image_url"]["url"] = "changed"
    assert images[0]["image_url"]["url"] == "u"
    assert render_content("t", []) == "t"


def test_from_dict_with_multimodal_content():
    m = ChatMessage.from_dict(
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "what is it"},
                {"type": "image_url", "image_url": {"url": "http://x/img.jpg"}},
            ],
        }
    )
    assert m.text == "what is it"
    assert m.images == [{"type": "image_url", "image_url": {"url": "http://x/img.jpg", "detail": "auto"}}]


def test_from_dict_text_blocks_only_becomes_string():
    m = ChatMessage.from_dict({"role": "assistant", "content": [{"type": "text", "text": "plain"}]})
    assert m.content == "plain"


def test_from_dict_requires_role_and_content():
    with pytest.raises(ValueError):
        ChatMessage.from_dict({"content": "x"})
    with pytest.raises(ValueError):
        ChatMessage.from_dict({"role": "user"})


def test_add_image_from_file(tmp_path):
    img_path = os.path.join(tmp_path, "img.png")
    with open(img_path, "wb") as f:
        f.write(b"\x89PNG")
    m = ChatMessage.user("file").add_image_from_file(img_path)
    url = m.content[1]["image_url"]["url"]
    assert url == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("utf-8")
    with pytest.raises(FileNotFoundError):
        m.add_image_from_file(os.path.join(tmp_path, "missing.png"))


def test_str_rendering():
    m = ChatMessage.user_with_images("hi", ["a", "b"], name="amy")
    assert str(m) == "[amy] user: hi [+2 images]"
    assert str(ChatMessage.assistant("yo")) == "assistant: yo"


INTERLEAVED = [
    {"type": "text", "text": "compare this"},
    {"type": "image_url", "image_url": {"url": "http://x/a.png", "detail": "low"}},
    {"type": "text", "text": "with this"},
    {"type": "image_url", "image_url": {"url": "http://x/b.png"}},
]


def test_interleaved_blocks_survive_round_trip():
    m = ChatMessage.from_dict({"role": "user", "content": INTERLEAVED})
    assert m.to_dict() == {"role": "user", "content": INTERLEAVED}
    assert m.text == "compare this\nwith this"
    assert len(m.images) == 2
    # the caller's list is copied, not aliased
    m.content[0]["text"] = "changed"
    assert m.to_dict()["content"][0]["text"] == "compare this"


def test_interleaved_blocks_rerendered_after_mutation():
    m = ChatMessage.from_dict({"role": "user", "content": INTERLEAVED})
    m.add_image("http://x/c.png")
    assert [b["type"] for b in m.content] == ["text", "image_url", "image_url", "image_url"]
    assert m.content[0] == {"type": "text", "text": "compare this\nwith this"}
