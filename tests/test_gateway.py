"""Tests Persistence Gateway : mémoire et client HTTP (requests mocké)."""
import json
from unittest.mock import MagicMock

import pytest
import requests

from doxa_builder.exceptions import PersistenceError, VersionConflict
from doxa_builder.gateway import HttpGateway, InMemoryGateway, PageDocument


def _resp(status=200, body=None):
    r = MagicMock()
    r.status_code = status
    if body is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = body
    return r


# ── InMemoryGateway ──────────────────────────────────────────────────────────

def test_new_page_is_empty():
    doc = InMemoryGateway().load("nou")
    assert doc == PageDocument(id="nou")


def test_saved_copy_is_not_aliased(three_blocks):
    gw = InMemoryGateway()
    gw.save("p", three_blocks)
    three_blocks.update_content("h1", {"text": "după salvare"})
    assert gw.load("p").sections[0]["content"]["text"] == "Bine ați venit"


def test_version_conflict():
    gw = InMemoryGateway()
    gw.save("p", [], expected_version=0)
    with pytest.raises(VersionConflict) as exc:
        gw.save("p", [], expected_version=0)
    assert exc.value.actual == 1


def test_title_and_slug_kept_between_saves():
    gw = InMemoryGateway()
    gw.save("p", [], title="Acasă", slug="acasa")
    doc = gw.save("p", [{"type": "text"}])
    assert (doc.title, doc.slug, doc.version) == ("Acasă", "acasa", 2)


# ── HttpGateway ──────────────────────────────────────────────────────────────

def test_http_load_parses_document():
    session = MagicMock()
    session.get.return_value = _resp(200, {
        "id": "p", "title": "T", "version": 3, "sections": [{"id": "h", "type": "heading"}],
    })
    doc = HttpGateway("http://api", session=session).load("p")
    session.get.assert_called_once_with("http://api/api/pages/p", timeout=10.0)
    assert doc.version == 3
    assert doc.section_list().ids() == ["h"]


def test_http_load_legacy_content_string():
    session = MagicMock()
    session.get.return_value = _resp(200, {"id": "p", "content": json.dumps({"sections": [{"type": "text"}]})})
    doc = HttpGateway("http://api", session=session).load("p")
    assert doc.sections == [{"type": "text"}]


def test_http_load_404_is_new_page():
    session = MagicMock()
    session.get.return_value = _resp(404, {"error": "not found"})
    assert HttpGateway("http://api", session=session).load("p").sections == []


def test_http_load_network_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("down")
    with pytest.raises(PersistenceError):
        HttpGateway("http://api", session=session).load("p")


def test_http_save_sends_whole_list(three_blocks):
    session = MagicMock()
    session.put.return_value = _resp(200, {"id": "p", "version": 5, "sections": three_blocks.to_json()})
    doc = HttpGateway("http://api", session=session).save("p", three_blocks, expected_version=4)
    payload = session.put.call_args.kwargs["json"]
    assert payload["version"] == 4
    assert [s["id"] for s in payload["sections"]] == ["h1", "t1", "c1"]
    assert doc.version == 5


def test_http_save_409_is_version_conflict():
    session = MagicMock()
    session.put.return_value = _resp(409, {"version": 8})
    with pytest.raises(VersionConflict) as exc:
        HttpGateway("http://api", session=session).save("p", [], expected_version=7)
    assert exc.value.actual == 8


def test_http_save_500_is_persistence_error():
    session = MagicMock()
    session.put.return_value = _resp(500)
    with pytest.raises(PersistenceError):
        HttpGateway("http://api", session=session).save("p", [])


def test_http_save_empty_body():
    session = MagicMock()
    session.put.return_value = _resp(204)
    doc = HttpGateway("http://api", session=session).save("p", [{"id": "a", "type": "text"}], expected_version=2)
    assert doc.version == 3
    assert doc.sections[0]["id"] == "a"
