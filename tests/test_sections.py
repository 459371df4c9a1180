"""Tests PageSectionList : opérations, invariants d'ordre, scénario de référence."""
import random

import pytest

from doxa_builder.blocks import HeadingBlock, TextBlock, parse_block
from doxa_builder.exceptions import UnknownBlockType
from doxa_builder.gateway import InMemoryGateway
from doxa_builder.sections import PageSectionList


# ── Scénario ─────────────────────────────────────────────────────────────────

def test_reference_scenario():
    sections = PageSectionList()

    heading = sections.insert("heading")
    assert len(sections) == 1
    assert sections[0].type == "heading"
    assert sections[0].to_json()["content"] == {
        "text": "Titlu Nou", "size": 32, "color": "#000000", "alignment": "left",
    }

    text = sections.insert("text", position=0)
    assert sections.ids() == [text.id, heading.id]

    sections.move_down(text.id)
    assert sections.ids() == [heading.id, text.id]

    sections.delete(heading.id)
    assert sections.ids() == [text.id]


# ── insert ───────────────────────────────────────────────────────────────────

def test_insert_appends_by_default(three_blocks):
    b = three_blocks.insert("image")
    assert three_blocks.ids()[-1] == b.id


def test_insert_position_clamped(three_blocks):
    first = three_blocks.insert("image", position=-5)
    last = three_blocks.insert("image", position=99)
    assert three_blocks.ids()[0] == first.id
    assert three_blocks.ids()[-1] == last.id


def test_insert_unknown_type_raises(three_blocks):
    with pytest.raises(UnknownBlockType):
        three_blocks.insert("carousel")
    assert len(three_blocks) == 3


def test_insert_prebuilt_duplicate_id_gets_fresh_id(three_blocks):
    b = three_blocks.insert(HeadingBlock(id="h1"))
    assert b.id != "h1"
    assert len(set(three_blocks.ids())) == 4


def test_duplicate_ids_on_hydration_are_renamed():
    sections = PageSectionList([{"id": "a", "type": "text"}, {"id": "a", "type": "heading"}])
    assert sections.ids()[0] == "a"
    assert sections.ids()[1] != "a"


# ── delete / move ────────────────────────────────────────────────────────────

def test_delete_unknown_id_is_noop(three_blocks):
    before = three_blocks.copy()
    assert three_blocks.delete("nope") is None
    assert three_blocks == before


def test_move_up_first_is_noop(three_blocks):
    before = three_blocks.copy()
    assert three_blocks.move_up("h1") is False
    assert three_blocks == before


def test_move_down_last_is_noop(three_blocks):
    before = three_blocks.copy()
    assert three_blocks.move_down("c1") is False
    assert three_blocks == before


def test_move_swaps_with_neighbour(three_blocks):
    assert three_blocks.move("t1", "up") is True
    assert three_blocks.ids() == ["t1", "h1", "c1"]
    assert three_blocks.move("t1", "sideways") is False


def test_reorder_splice_and_clamp(three_blocks):
    assert three_blocks.reorder("h1", 2) is True
    assert three_blocks.ids() == ["t1", "c1", "h1"]
    assert three_blocks.reorder("h1", -10) is True
    assert three_blocks.ids() == ["h1", "t1", "c1"]
    assert three_blocks.reorder("ghost", 0) is False


def test_first_last_helpers(three_blocks):
    assert three_blocks.is_first("h1") and not three_blocks.is_first("t1")
    assert three_blocks.is_last("c1") and not three_blocks.is_last("ghost")


# ── duplicate ────────────────────────────────────────────────────────────────

def test_duplicate_inserted_after_source(three_blocks):
    clone = three_blocks.duplicate("h1")
    assert three_blocks.ids()[1] == clone.id
    assert clone.id != "h1"
    assert clone.content == three_blocks.get("h1").content


def test_duplicate_is_deep_copy():
    sections = PageSectionList([{"id": "c", "type": "cards", "content": {"cards": [{"title": "A"}]}}])
    clone = sections.duplicate("c")
    clone.content.cards[0].title = "B"
    clone.styles["color"] = "red"
    assert sections.get("c").content.cards[0].title == "A"
    assert sections.get("c").styles == {}


def test_duplicate_unknown_id_is_noop(three_blocks):
    assert three_blocks.duplicate("ghost") is None
    assert len(three_blocks) == 3


# ── update_content / update_styles ───────────────────────────────────────────

def test_update_content_replaces_wholesale(three_blocks):
    three_blocks.update_content("h1", {"text": "X", "size": 40, "color": "#ff0000"})
    three_blocks.update_content("h1", {"text": "Y"})
    content = three_blocks.get("h1").to_json()["content"]
    assert content == {"text": "Y", "size": 24, "color": "#000000", "alignment": "left"}


def test_update_content_keeps_id_and_type(three_blocks):
    b = three_blocks.update_content("t1", {"text": "nou"})
    assert isinstance(b, TextBlock)
    assert b.id == "t1"


def test_update_content_unknown_block_takes_raw_content():
    sections = PageSectionList([{"id": "v", "type": "video", "content": {"src": "a"}}])
    sections.update_content("v", {"src": "b", "autoplay": True})
    assert sections.get("v").content == {"src": "b", "autoplay": True}


def test_update_styles_merges(three_blocks):
    three_blocks.update_styles("t1", {"a": 1})
    three_blocks.update_styles("t1", {"b": 2})
    assert three_blocks.get("t1").styles == {"a": 1, "b": 2}


def test_update_on_missing_id_is_noop(three_blocks):
    assert three_blocks.update_content("ghost", {"text": "x"}) is None
    assert three_blocks.update_styles("ghost", {"a": 1}) is None


# ── Invariants ───────────────────────────────────────────────────────────────

def test_order_invariant_random_sequences():
    rng = random.Random(42)
    for _ in range(30):
        sections = PageSectionList()
        inserts = duplicates = deletes = 0
        for _ in range(40):
            ids = sections.ids()
            op = rng.choice(["insert", "delete", "up", "down", "duplicate", "stale"])
            if op == "insert":
                sections.insert(rng.choice(["heading", "text", "cta"]), rng.choice([None, 0, 2, 50]))
                inserts += 1
            elif op == "stale":
                sections.delete("deja-sters")
            elif not ids:
                continue
            elif op == "delete":
                sections.delete(rng.choice(ids))
                deletes += 1
            elif op == "duplicate":
                sections.duplicate(rng.choice(ids))
                duplicates += 1
            elif op == "up":
                sections.move_up(rng.choice(ids))
            else:
                sections.move_down(rng.choice(ids))
        assert len(set(sections.ids())) == len(sections)
        assert len(sections) == inserts + duplicates - deletes


def test_round_trip_through_gateway(three_blocks):
    three_blocks.insert(parse_block({"id": "v", "type": "video", "content": {"src": "x"}}))
    three_blocks.update_styles("h1", {"paddingTop": "2rem"})
    gw = InMemoryGateway()
    gw.save("acasa", three_blocks)
    assert gw.load("acasa").section_list() == three_blocks


def test_json_round_trip_is_stable(three_blocks):
    data = three_blocks.to_json()
    assert PageSectionList.from_json(data).to_json() == data


# ── Contenu illisible ────────────────────────────────────────────────────────

def test_update_content_rejected_leaves_list_unchanged(three_blocks):
    before = three_blocks.to_json()
    assert three_blocks.update_content("h1", {"text": 2024}) is None
    assert three_blocks.to_json() == before
    assert isinstance(three_blocks.get("h1"), HeadingBlock)


def test_update_content_non_list_cards_is_noop():
    sections = PageSectionList([{"id": "c", "type": "cards"}])
    before = sections.to_json()
    assert sections.update_content("c", {"cards": "nu e listă"}) is None
    assert sections.to_json() == before


def test_malformed_block_survives_hydration_and_round_trip(three_blocks):
    raw = three_blocks.to_json() + [{"id": "c9", "type": "cards", "content": {"cards": 3}, "styles": {}}]
    sections = PageSectionList(raw)
    assert sections.ids() == ["h1", "t1", "c1", "c9"]
    assert sections.to_json() == raw
    assert sections.move_up("c9") is True
    assert sections.ids() == ["h1", "t1", "c9", "c1"]
