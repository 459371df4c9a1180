"""Tests blocs : union discriminée, coercition des champs, blocs inconnus."""
import pytest
from pydantic import ValidationError

from doxa_builder.blocks import (
    BLOCK_TYPES,
    CardsBlock,
    HeadingBlock,
    HeroBlock,
    ImageBlock,
    PilgrimagesBlock,
    TextBlock,
    InvalidBlock,
    UnknownBlock,
    coerce_int,
    parse_block,
    parse_blocks,
)


# ── Hydratation ──────────────────────────────────────────────────────────────

def test_block_types_closed_set():
    assert set(BLOCK_TYPES) == {
        "heading", "text", "image", "hero", "cards", "features", "banners", "cta", "pilgrimages",
    }


def test_parse_block_dispatches_on_type():
    b = parse_block({"id": "x", "type": "hero", "content": {"title": "Sus"}})
    assert isinstance(b, HeroBlock)
    assert b.content.title == "Sus"
    assert b.content.height == 400


def test_parse_block_fills_missing_id():
    b = parse_block({"type": "heading"})
    assert b.id.startswith("heading-")


def test_parse_block_unknown_type_kept_verbatim():
    raw = {"id": "v1", "type": "video", "content": {"src": "/a.mp4", "loop": True}, "styles": {"margin": "0"}}
    b = parse_block(raw)
    assert isinstance(b, UnknownBlock)
    assert b.to_json() == raw


def test_parse_block_missing_type_is_unknown():
    b = parse_block({"id": "z", "content": "texte brut"})
    assert isinstance(b, UnknownBlock)
    assert b.type == ""
    assert b.content == "texte brut"


def test_malformed_known_block_kept_raw():
    raw = {"id": "c9", "type": "cards", "content": {"cards": "x"}, "styles": {"margin": "0"}}
    blocks = parse_blocks([{"id": "h", "type": "heading"}, raw])
    assert isinstance(blocks[0], HeadingBlock)
    assert isinstance(blocks[1], InvalidBlock)
    assert blocks[1].type == "cards"
    assert "cards" in blocks[1].error
    assert blocks[1].to_json() == raw


def test_malformed_block_with_non_dict_styles():
    b = parse_block({"id": "h", "type": "heading", "content": {"text": ["a"]}, "styles": "x"})
    assert isinstance(b, InvalidBlock)
    assert b.styles == {}


def test_parse_blocks_none():
    assert parse_blocks(None) == []


def test_null_content_and_styles_fall_back():
    b = parse_block({"id": "h", "type": "heading", "content": None, "styles": None})
    assert b.content.size == 24
    assert b.styles == {}


def test_type_is_frozen():
    b = HeadingBlock()
    with pytest.raises(ValidationError):
        b.type = "text"


# ── Coercition ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("32", 32), ("18.7", 18), (20, 20), ("abc", 24), ("", 24), (None, 24), (True, 24),
])
def test_heading_size_coercion(raw, expected):
    assert HeadingBlock(content={"size": raw}).content.size == expected


def test_text_size_default_is_16():
    assert TextBlock(content={"size": "oops"}).content.size == 16


def test_alignment_out_of_range_falls_back():
    assert HeadingBlock(content={"alignment": "justify"}).content.alignment == "left"
    assert ImageBlock(content={"alignment": "diagonal"}).content.alignment == "center"


def test_image_width_clamped():
    assert ImageBlock(content={"width": 500}).content.width == 100
    assert ImageBlock(content={"width": "3"}).content.width == 10


def test_pilgrimages_count_clamped():
    assert PilgrimagesBlock(content={"count": 0}).content.count == 1
    assert PilgrimagesBlock(content={"count": "100"}).content.count == 24


def test_camel_case_keys_accepted_on_read():
    b = parse_block({"type": "hero", "content": {"backgroundImage": "/bg.jpg", "showOverlay": False}})
    assert b.content.background_image == "/bg.jpg"
    assert b.content.show_overlay is False
    # écrit en snake_case
    assert "background_image" in b.to_json()["content"]


def test_unknown_content_keys_ignored():
    b = parse_block({"type": "cards", "content": {"title": "T", "legacy": 1, "cards": [{"title": "A", "x": 2}]}})
    assert isinstance(b, CardsBlock)
    assert "legacy" not in b.to_json()["content"]
    assert b.content.cards[0].title == "A"


def test_coerce_int_bounds():
    assert coerce_int("7", 1, lo=1, hi=5) == 5
    assert coerce_int("-3", 1, lo=0) == 0
    assert coerce_int(float("inf"), 4) == 4
