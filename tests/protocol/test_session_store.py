from __future__ import annotations

import pytest

from src.engine.game import Game
from src.protocol.http.session import InMemorySessionStore


def test_store_create_get_set_delete() -> None:
    store = InMemorySessionStore()
    gid = store.create()
    game = store.get(gid)
    assert game is not None and len(store) == 1

    replacement = Game.from_fen("4k3/8/8/8/8/8/8/4K3 w - -")
    store.set(gid, replacement)
    assert store.get(gid) is replacement

    assert store.delete(gid) is True
    assert store.get(gid) is None
    assert store.delete(gid) is False


def test_store_set_unknown_raises() -> None:
    store = InMemorySessionStore()
    with pytest.raises(KeyError):
        store.set("missing", Game.new())
