from __future__ import annotations

import pytest

from src.engine.move import Candidate, parse_move, square_to_str, str_to_square
from src.engine.movegen import EDGE_DISTANCES, compute_edge_distances
from src.engine.piece import Piece, PieceKind, Side
from src.engine.position import Position


@pytest.mark.parametrize(
    "square,expected",
    [
        # N, S, E, W, NW, SE, NE, SW
        ("a1", (7, 0, 7, 0, 0, 0, 7, 0)),
        ("h8", (0, 7, 0, 7, 0, 0, 0, 7)),
        ("d4", (4, 3, 4, 3, 3, 3, 4, 3)),
        ("h1", (7, 0, 0, 7, 7, 0, 0, 0)),
    ],
)
def test_edge_distances(square: str, expected: tuple) -> None:
    assert EDGE_DISTANCES[str_to_square(square)] == expected


def test_edge_table_depends_only_on_geometry() -> None:
    empty = Position.from_fen("8/8/8/8/8/8/8/8 w - -")
    full = Position.startpos()
    assert empty.edges == full.edges == compute_edge_distances()
    assert len(empty.edges) == 64


def test_square_names_round_trip() -> None:
    assert [square_to_str(str_to_square(s)) for s in ("a1", "e4", "h8")] == ["a1", "e4", "h8"]
    assert str_to_square("e4") == 28


@pytest.mark.parametrize("bad", ["", "e", "i1", "a9", "a0", "E4", "e44"])
def test_invalid_square_name(bad: str) -> None:
    with pytest.raises(ValueError):
        str_to_square(bad)


def test_invalid_square_index() -> None:
    with pytest.raises(ValueError):
        square_to_str(64)


def test_parse_move() -> None:
    assert parse_move("e2e4") == (12, 28)
    with pytest.raises(ValueError):
        parse_move("e2e4q")


def test_candidate_rendering() -> None:
    assert Candidate(28).to_str() == "e4"
    assert Candidate(28, is_capture=True).to_str() == "xe4"


def test_piece_letters() -> None:
    knight = Piece.from_char("n")
    assert knight == Piece(Side.BLACK, PieceKind.KNIGHT)
    assert str(knight) == "n"
    assert Piece.from_char("Q").char == "Q"
    assert Piece.from_char("Q").is_sliding and not Piece.from_char("Q").is_leaping
    assert Piece.from_char("K").is_leaping
    with pytest.raises(ValueError):
        Piece.from_char("x")


def test_side_helpers() -> None:
    assert Side.WHITE.opposite is Side.BLACK
    assert Side.from_char("b") is Side.BLACK
    with pytest.raises(ValueError):
        Side.from_char("B")
