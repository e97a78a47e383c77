from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .move import Candidate
from .piece import Piece, PieceKind, Side


BoardView = Sequence[Optional[Piece]]

# Ray directions as index deltas, in the order N, S, E, W, NW, SE, NE, SW.
# Rooks use 0..3, bishops 4..7, queens all eight.
DIRECTION_OFFSETS: Tuple[int, ...] = (8, -8, 1, -1, 7, -7, 9, -9)
ROOK_DIRECTIONS = range(0, 4)
BISHOP_DIRECTIONS = range(4, 8)
QUEEN_DIRECTIONS = range(0, 8)

# (rank delta, file delta)
KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (2, -1),
    (-2, 1),
    (-1, -2),
    (1, 2),
    (2, 1),
    (-2, -1),
    (1, -2),
    (-1, 2),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, -1),
    (0, 1),
    (1, -1),
    (-1, 1),
    (1, 1),
    (-1, -1),
)

# Pawn geometry per side: forward direction index, start rank, capture directions.
PAWN_FORWARD = {Side.WHITE: 0, Side.BLACK: 1}
PAWN_START_RANK = {Side.WHITE: 1, Side.BLACK: 6}
PAWN_CAPTURE_DIRECTIONS = {Side.WHITE: (4, 6), Side.BLACK: (5, 7)}


def compute_edge_distances() -> List[Tuple[int, ...]]:
    """Build the squares-to-edge table for all 64 squares.

    Returns:
        List[Tuple[int, ...]]: For each square, the number of squares to the
            board edge in each direction of ``DIRECTION_OFFSETS``.
    """
    table: List[Tuple[int, ...]] = []
    for sq in range(64):
        rank, file = sq // 8, sq % 8
        north = 7 - rank
        south = rank
        east = 7 - file
        west = file
        table.append(
            (
                north,
                south,
                east,
                west,
                min(north, west),
                min(south, east),
                min(north, east),
                min(south, west),
            )
        )
    return table


EDGE_DISTANCES: List[Tuple[int, ...]] = compute_edge_distances()


def sliding_candidates(
    board: BoardView, square: int, piece: Piece, edges: Sequence[Tuple[int, ...]] = EDGE_DISTANCES
) -> List[Candidate]:
    """Cast rays for a bishop, rook or queen.

    Each ray stops at the first occupied square, which is included as a
    capture when it holds an opposing piece.
    """
    if piece.kind is PieceKind.BISHOP:
        directions = BISHOP_DIRECTIONS
    elif piece.kind is PieceKind.ROOK:
        directions = ROOK_DIRECTIONS
    else:
        directions = QUEEN_DIRECTIONS

    out: List[Candidate] = []
    for direction in directions:
        step = DIRECTION_OFFSETS[direction]
        for n in range(1, edges[square][direction] + 1):
            target = square + step * n
            occupant = board[target]
            if occupant is None:
                out.append(Candidate(target))
                continue
            if occupant.side is not piece.side:
                out.append(Candidate(target, is_capture=True))
            break
    return out


def leaping_candidates(board: BoardView, square: int, piece: Piece) -> List[Candidate]:
    """Fixed-offset targets for a knight or king."""
    offsets = KNIGHT_OFFSETS if piece.kind is PieceKind.KNIGHT else KING_OFFSETS
    rank, file = square // 8, square % 8
    out: List[Candidate] = []
    for dr, df in offsets:
        tr, tf = rank + dr, file + df
        if not (0 <= tr < 8 and 0 <= tf < 8):
            continue
        target = tr * 8 + tf
        occupant = board[target]
        if occupant is None:
            out.append(Candidate(target))
        elif occupant.side is not piece.side:
            out.append(Candidate(target, is_capture=True))
    return out


def pawn_candidates(
    board: BoardView, square: int, piece: Piece, en_passant: Optional[int]
) -> List[Candidate]:
    """Forward pushes followed by diagonal captures (including en passant)."""
    rank, file = square // 8, square % 8
    forward = DIRECTION_OFFSETS[PAWN_FORWARD[piece.side]]
    rank_step = 1 if piece.side is Side.WHITE else -1

    out: List[Candidate] = []
    steps = 2 if rank == PAWN_START_RANK[piece.side] else 1
    for n in range(1, steps + 1):
        if not 0 <= rank + rank_step * n < 8:
            break
        target = square + forward * n
        if board[target] is not None:
            break
        out.append(Candidate(target))

    if not 0 <= rank + rank_step < 8:
        return out
    for direction in PAWN_CAPTURE_DIRECTIONS[piece.side]:
        target = square + DIRECTION_OFFSETS[direction]
        # Diagonal steps change rank by one; a file jump of more than one means wrap-around.
        if abs(target % 8 - file) != 1:
            continue
        occupant = board[target]
        if (occupant is not None and occupant.side is not piece.side) or target == en_passant:
            out.append(Candidate(target, is_capture=True))
    return out
