"""Tests SectionEditor : modes, brouillons par bloc, contrôles, persistance."""
from unittest.mock import MagicMock

import pytest

from doxa_builder.editor import EDIT, VIEW, SectionEditor
from doxa_builder.exceptions import PersistenceError, VersionConflict
from doxa_builder.gateway import InMemoryGateway


@pytest.fixture
def editor(three_blocks, admin):
    ed = SectionEditor(three_blocks, user=admin)
    ed.enter_edit_mode()
    return ed


# ── Modes ────────────────────────────────────────────────────────────────────

def test_default_mode_is_view(three_blocks, admin):
    assert SectionEditor(three_blocks, user=admin).mode == VIEW


def test_unauthorized_user_stays_in_view(three_blocks, pilgrim):
    ed = SectionEditor(three_blocks, user=pilgrim)
    assert ed.enter_edit_mode() is False
    assert ed.mode == VIEW
    assert ed.controls("h1") == []


def test_custom_editor_roles(three_blocks):
    from doxa_builder.identity import CurrentUser
    ed = SectionEditor(three_blocks, user=CurrentUser(role="operator"), editor_roles=["admin", "operator"])
    assert ed.enter_edit_mode() is True


def test_toggle_has_no_effect_on_data(editor, three_blocks):
    before = three_blocks.copy()
    assert editor.toggle_edit_mode() == VIEW
    assert editor.toggle_edit_mode() == EDIT
    assert three_blocks == before
    assert editor.dirty is False


def test_mutations_ignored_in_view_mode(three_blocks, admin):
    ed = SectionEditor(three_blocks, user=admin)
    assert ed.add("heading") is None
    assert ed.delete("h1") is None
    assert ed.move_down("h1") is False
    assert ed.open("h1") is None
    assert len(three_blocks) == 3


# ── Opérations de liste ──────────────────────────────────────────────────────

def test_add_before_and_after(editor, three_blocks):
    before = editor.add_before("t1", "image")
    after = editor.add_after("t1", "hero")
    assert three_blocks.ids() == ["h1", before.id, "t1", after.id, "c1"]


def test_on_change_receives_whole_list(three_blocks, admin):
    seen = []
    ed = SectionEditor(three_blocks, user=admin, on_change=lambda s: seen.append(s.ids()))
    ed.enter_edit_mode()
    ed.move_down("h1")
    ed.duplicate("c1")
    assert seen[0] == ["t1", "h1", "c1"]
    assert len(seen[1]) == 4
    assert ed.dirty is True


def test_boundary_moves_do_not_notify(three_blocks, admin):
    calls = MagicMock()
    ed = SectionEditor(three_blocks, user=admin, on_change=calls)
    ed.enter_edit_mode()
    assert ed.move_up("h1") is False
    assert ed.move_down("c1") is False
    calls.assert_not_called()


def test_drag_through_editor_marks_dirty(editor, three_blocks):
    session = editor.start_drag("c1")
    session.hover("t1", 0, 100, 10)
    assert three_blocks.ids() == ["h1", "c1", "t1"]
    assert editor.dirty is True


# ── Brouillons ───────────────────────────────────────────────────────────────

def test_open_snapshots_complete_form(editor):
    draft = editor.open("h1")
    assert draft == {"text": "Bine ați venit", "size": 24, "color": "#000000", "alignment": "left"}


def test_draft_does_not_leak_before_save(editor, three_blocks):
    editor.open("h1")
    editor.edit("h1", text="Schimbat")
    assert three_blocks.get("h1").content.text == "Bine ați venit"
    editor.save("h1")
    assert three_blocks.get("h1").content.text == "Schimbat"
    assert editor.is_open("h1") is False


def test_cancel_reverts(editor, three_blocks):
    editor.open("t1")
    editor.edit("t1", {"text": "Ciornă"})
    assert editor.cancel("t1") is True
    assert three_blocks.get("t1").content.text == "Despre noi"
    assert editor.draft("t1") is None


def test_drafts_are_independent(editor):
    editor.open("h1")
    editor.open("t1")
    editor.edit("h1", text="A")
    editor.edit("t1", text="B")
    assert editor.draft("h1")["text"] == "A"
    assert editor.draft("t1")["text"] == "B"


def test_save_coerces_numeric_fields(editor, three_blocks):
    editor.open("h1")
    editor.edit("h1", size="nu e număr")
    editor.save("h1")
    assert three_blocks.get("h1").content.size == 24


def test_list_item_editing(editor, three_blocks):
    cards = three_blocks.insert("cards")
    editor.open(cards.id)
    editor.edit_item(cards.id, "cards", 0, title="Prima")
    editor.add_item(cards.id, "cards", {"title": "A doua"})
    editor.add_item(cards.id, "cards")
    editor.remove_item(cards.id, "cards", 2)
    editor.save(cards.id)
    assert [c.title for c in three_blocks.get(cards.id).content.cards] == ["Prima", "A doua"]


def test_exit_edit_mode_discards_drafts(editor, three_blocks):
    editor.open("h1")
    editor.edit("h1", text="pierdut")
    editor.exit_edit_mode()
    assert editor.draft("h1") is None
    assert three_blocks.get("h1").content.text == "Bine ați venit"


def test_delete_drops_draft(editor):
    editor.open("t1")
    editor.delete("t1")
    assert editor.is_open("t1") is False


def test_unknown_block_has_no_form(admin):
    from doxa_builder.sections import PageSectionList
    ed = SectionEditor(PageSectionList([{"id": "v", "type": "video"}]), user=admin)
    ed.enter_edit_mode()
    assert ed.open("v") is None
    assert "edit" not in ed.controls("v")


# ── Contrôles ────────────────────────────────────────────────────────────────

def test_controls_first_block(editor):
    assert editor.controls("h1") == ["add_before", "move_down", "edit", "duplicate", "delete", "add_after"]


def test_controls_last_block_open(editor):
    editor.open("c1")
    assert editor.controls("c1") == ["add_before", "move_up", "save", "cancel", "duplicate", "delete", "add_after"]


def test_controls_middle_block(editor):
    assert editor.controls("t1")[:3] == ["add_before", "move_up", "move_down"]


# ── Persistance ──────────────────────────────────────────────────────────────

def test_persist_and_reload(editor):
    gw = InMemoryGateway()
    editor.add("pilgrimages")
    doc = editor.persist(gw, "acasa")
    assert doc.version == 1
    assert editor.dirty is False

    other = SectionEditor()
    other.load(gw, "acasa")
    assert other.sections == editor.sections
    assert other.version == 1


def test_persist_failure_keeps_state(editor, three_blocks):
    gw = MagicMock()
    gw.save.side_effect = PersistenceError("rețea indisponibilă")
    editor.add("text")
    with pytest.raises(PersistenceError):
        editor.persist(gw, "acasa")
    assert editor.dirty is True
    assert len(three_blocks) == 4
    assert "rețea" in editor.last_error


def test_concurrent_save_conflicts(admin):
    gw = InMemoryGateway()
    a = SectionEditor(user=admin)
    b = SectionEditor(user=admin)
    a.load(gw, "p")
    b.load(gw, "p")
    a.enter_edit_mode(); b.enter_edit_mode()
    a.add("heading"); b.add("text")
    a.persist(gw, "p")
    with pytest.raises(VersionConflict):
        b.persist(gw, "p")
    # dernier écrivain gagnant, choisi explicitement
    assert b.persist(gw, "p", optimistic=False).version == 2


# ── Brouillons refusés ───────────────────────────────────────────────────────

def test_save_rejected_draft_stays_open(editor, three_blocks):
    editor.open("h1")
    editor.edit("h1", text=2024)
    assert editor.save("h1") is None
    assert editor.is_open("h1") is True
    assert "h1" in editor.last_error
    assert editor.dirty is False
    assert three_blocks.get("h1").content.text == "Bine ați venit"
    # le brouillon corrigé passe ensuite
    editor.edit("h1", text="2024")
    assert editor.save("h1").content.text == "2024"
    assert editor.last_error is None
    assert editor.is_open("h1") is False


def test_load_page_with_unreadable_block(admin):
    gw = InMemoryGateway()
    from doxa_builder.sections import PageSectionList
    gw.save("p", PageSectionList([
        {"id": "h", "type": "heading", "content": {"text": "Titlu"}},
        {"id": "c", "type": "cards", "content": {"cards": "x"}},
    ]))
    ed = SectionEditor(user=admin)
    ed.load(gw, "p")
    ed.enter_edit_mode()
    assert ed.sections.ids() == ["h", "c"]
    assert ed.open("c") is None
    assert ed.move_up("c") is True


# ── Images ───────────────────────────────────────────────────────────────────

@pytest.fixture
def uploader():
    u = MagicMock()
    u.upload.return_value = "/uploads/putna.jpg"
    return u


def test_attach_image_to_image_block(editor, three_blocks, uploader):
    img = editor.add("image")
    editor.open(img.id)
    assert editor.attach_image(img.id, uploader, "putna.jpg", b"\xff") == "/uploads/putna.jpg"
    uploader.upload.assert_called_once_with("putna.jpg", b"\xff")
    editor.save(img.id)
    assert three_blocks.get(img.id).content.url == "/uploads/putna.jpg"


def test_attach_image_to_hero_background(editor, uploader):
    hero = editor.add("hero")
    editor.open(hero.id)
    editor.attach_image(hero.id, uploader, "putna.jpg", b"\xff")
    assert editor.draft(hero.id)["background_image"] == "/uploads/putna.jpg"


def test_attach_image_to_banners(editor, uploader):
    b = editor.add("banners")
    editor.open(b.id)
    editor.attach_image(b.id, uploader, "putna.jpg", b"\xff")
    assert editor.draft(b.id)["banners"] == [{"image": "/uploads/putna.jpg"}]
    uploader.upload.return_value = "/uploads/athos.jpg"
    editor.attach_image(b.id, uploader, "athos.jpg", b"\xff", index=0)
    assert editor.draft(b.id)["banners"][0]["image"] == "/uploads/athos.jpg"


def test_attach_image_needs_open_image_field(editor, uploader):
    assert editor.attach_image("h1", uploader, "a.jpg", b"\xff") is None
    editor.open("h1")
    assert editor.attach_image("h1", uploader, "a.jpg", b"\xff") is None
    uploader.upload.assert_not_called()
