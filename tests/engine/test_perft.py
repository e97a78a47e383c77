from __future__ import annotations

import pytest

from src.engine.perft import perft
from src.engine.position import Position


def test_perft_startpos_depths_0_2() -> None:
    p = Position.startpos()
    assert perft(p, 0) == 1
    assert perft(p, 1) == 20
    assert perft(p, 2) == 400


def test_perft_does_not_mutate_board() -> None:
    p = Position.startpos()
    before = p.to_fen()
    perft(p, 2)
    assert p.to_fen() == before


def test_perft_lone_pieces() -> None:
    # King a1 (3) + knight h8 (2)
    p = Position.from_fen("7N/8/8/8/8/8/8/K7 w - -")
    assert perft(p, 1) == 5


def test_perft_negative_depth_raises() -> None:
    with pytest.raises(ValueError):
        perft(Position.startpos(), -1)
