import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from doxa_builder.feed import Pilgrimage, StaticFeed
from doxa_builder.identity import CurrentUser
from doxa_builder.sections import PageSectionList


@pytest.fixture
def admin():
    return CurrentUser(id=1, username="admin", role="admin")


@pytest.fixture
def pilgrim():
    return CurrentUser(id=7, username="ion", role="user")


@pytest.fixture
def three_blocks():
    """[heading h1, text t1, cta c1] avec ids fixes."""
    return PageSectionList([
        {"id": "h1", "type": "heading", "content": {"text": "Bine ați venit"}},
        {"id": "t1", "type": "text", "content": {"text": "Despre noi"}},
        {"id": "c1", "type": "cta", "content": {"title": "Rezervă"}},
    ])


@pytest.fixture
def feed():
    return StaticFeed([
        Pilgrimage(id=1, title="Athos", location="Grecia", month="iunie", price=1200, promoted=True),
        Pilgrimage(id=2, title="Putna", location="Suceava", month="august", price=300, featured=True),
        Pilgrimage(id=3, title="Ierusalim", location="Israel", month="aprilie", price=2500,
                   featured=True, promoted=True, verified=True, images=["/img/ierusalim.jpg"]),
        Pilgrimage(id=4, title="Nicula", location="Cluj", month="august", price=150),
    ])
