from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple, Union

from .move import Candidate, square_to_str, str_to_square
from .movegen import (
    DIRECTION_OFFSETS,
    EDGE_DISTANCES,
    PAWN_FORWARD,
    leaping_candidates,
    pawn_candidates,
    sliding_candidates,
)
from .piece import Piece, PieceKind, Side


logger = logging.getLogger(__name__)

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"

_CASTLE_ORDER = "KQkq"
_SIDE_BY_CHAR = {s.value: s for s in Side}


class Position:
    """Mutable 64-square position with pseudo-legal move generation.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's side.
    - Moves follow a query-then-apply protocol: ``generate_candidates`` primes
      a one-shot candidate cache that the next ``apply_move`` consumes.
    - No king safety, castling moves, promotion or move counters.
    - A position is driven by one sequential caller; wrap each
      generate/apply pair in a lock when sharing it.
    """

    def __init__(
        self,
        board: List[Optional[Piece]],
        turn: Side,
        castle: str = "-",
        en_passant: Optional[int] = None,
    ) -> None:
        if len(board) != 64:
            raise ValueError("board must have 64 squares")
        self.board = board
        self._turn = turn
        self._castle = castle
        self._en_passant = en_passant
        self.edges = EDGE_DISTANCES
        self._path: List[int] = []
        self._path_origin: Optional[int] = None

    # --- Construction & encoding ---

    @classmethod
    def parse(
        cls,
        placement: str,
        turn: Union[Side, str],
        castle: str = "-",
        en_passant: str = "-",
    ) -> "Position":
        """Build a position from the separate FEN fields.

        Args:
            placement (str): FEN piece placement, rank 8 first.
            turn (Union[Side, str]): Side to move, ``"w"`` or ``"b"``.
            castle (str): Castling rights, kept verbatim and never consulted.
            en_passant (str): Algebraic en-passant target or ``"-"``.

        Returns:
            Position: Parsed position.

        Notes:
            Input is trusted; use ``from_fen`` to validate untrusted text.
        """
        board: List[Optional[Piece]] = [None] * 64
        rank, file = 7, 0
        for ch in placement:
            if ch == "/":
                rank -= 1
                file = 0
            elif ch.isdigit():
                file += int(ch)
            else:
                board[rank * 8 + file] = Piece.from_char(ch)
                file += 1
        side = turn if isinstance(turn, Side) else Side.from_char(turn)
        ep_square = None if en_passant == "-" else str_to_square(en_passant)
        return cls(board, side, castle, ep_square)

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Create a position from a FEN string, validating every field.

        Args:
            fen (str): Placement and side to move, optionally followed by
                castling rights, en-passant target and move counters (the
                counters are accepted and ignored).

        Returns:
            Position: Parsed position.

        Raises:
            ValueError: If ``fen`` is empty, has too few or too many fields, or
                contains invalid piece placement, side to move, castling
                rights or en passant square.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) < 2 or len(parts) > 6:
            raise ValueError("FEN must have between 2 and 6 fields")
        placement, stm = parts[0], parts[1]
        castle = parts[2] if len(parts) > 2 else "-"
        ep = parts[3] if len(parts) > 3 else "-"

        _validate_placement(placement)
        side = Side.from_char(stm)

        if castle != "-":
            if any(ch not in _CASTLE_ORDER for ch in castle) or len(set(castle)) != len(castle):
                raise ValueError("invalid castling rights")

        if ep != "-":
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            # ep target is on rank 6 with white to move, rank 3 with black
            if ep_square // 8 != (5 if side is Side.WHITE else 2):
                raise ValueError("invalid en passant square rank")

        return cls.parse(placement, stm, castle, ep)

    @classmethod
    def startpos(cls) -> "Position":
        return cls.from_fen(STARTPOS_FEN)

    def to_fen(self) -> str:
        """Serialize placement, side to move, castling placeholder and ep square.

        Returns:
            str: FEN such as ``"rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3"``.
        """
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                piece = self.board[rank_idx * 8 + file_idx]
                if piece is None:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(piece.char)
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        placement = "/".join(ranks_str)

        ep = square_to_str(self._en_passant) if self._en_passant is not None else "-"
        return f"{placement} {self._turn.value} - {ep}"

    def copy(self) -> "Position":
        """Return an independent position with an empty candidate cache."""
        return Position(list(self.board), self._turn, self._castle, self._en_passant)

    # --- Read-only state ---

    @property
    def turn(self) -> Side:
        return self._turn

    @property
    def castle(self) -> str:
        return self._castle

    @property
    def en_passant(self) -> Optional[int]:
        return self._en_passant

    @property
    def path(self) -> Tuple[int, ...]:
        """Destinations cached by the last ``generate_candidates`` call."""
        return tuple(self._path)

    @property
    def path_origin(self) -> Optional[int]:
        return self._path_origin

    def piece_at(self, square: int) -> Optional[Piece]:
        if not 0 <= square < 64:
            return None
        return self.board[square]

    def squares_of(self, side: Side) -> Iterator[int]:
        """Yield occupied squares of ``side`` in index order."""
        for sq, piece in enumerate(self.board):
            if piece is not None and piece.side is side:
                yield sq

    # --- Move generation ---

    def generate_candidates(self, square: int, side: Union[Side, str]) -> List[Candidate]:
        """Return pseudo-legal destinations for the piece on ``square``.

        Args:
            square (int): Origin square index.
            side (Union[Side, str]): Side asking; must be the side to move.

        Returns:
            List[Candidate]: Destinations in generation order (direction order,
                then offset order). Empty when it is not ``side``'s turn or
                the square does not hold one of ``side``'s pieces.

        Notes:
            Replaces the candidate cache with these destinations, even when
            the result is empty.
        """
        side = side if isinstance(side, Side) else _SIDE_BY_CHAR.get(side)
        moves: List[Candidate] = []
        piece = self.piece_at(square)
        if side is self._turn and piece is not None and piece.side is side:
            if piece.is_sliding:
                moves = sliding_candidates(self.board, square, piece, self.edges)
            elif piece.is_leaping:
                moves = leaping_candidates(self.board, square, piece)
            else:
                moves = pawn_candidates(self.board, square, piece, self._en_passant)
        self._path = [m.destination for m in moves]
        self._path_origin = square if moves else None
        return moves

    # --- Move application ---

    def apply_move(self, origin: int, destination: int) -> bool:
        """Move the piece on ``origin`` to ``destination`` if it was just offered.

        Args:
            origin (int): Square passed to the preceding ``generate_candidates``.
            destination (int): One of the destinations it returned.

        Returns:
            bool: ``True`` when the move was applied. ``False`` leaves the board
                unchanged.

        Notes:
            The candidate cache is cleared on every call, so a second apply
            without a fresh query always fails.
        """
        path, path_origin = self._path, self._path_origin
        self._path = []
        self._path_origin = None

        if not path:
            logger.debug("apply rejected: no candidates cached")
            return False
        if origin != path_origin or destination not in path:
            logger.debug("apply rejected: %s -> %s not offered", origin, destination)
            return False
        mover = self.board[origin]
        target = self.board[destination]
        if mover is None:
            return False
        if target is not None and target.side is mover.side:
            logger.debug("apply rejected: %s holds own piece", square_to_str(destination))
            return False

        next_ep: Optional[int] = None
        if mover.kind is PieceKind.PAWN:
            forward = DIRECTION_OFFSETS[PAWN_FORWARD[mover.side]]
            if abs(destination // 8 - origin // 8) == 2:
                next_ep = origin + forward
            elif destination == self._en_passant:
                captured = destination - forward
                logger.debug("en passant capture removes %s", square_to_str(captured))
                self.board[captured] = None

        self.board[destination] = mover
        self.board[origin] = None
        self._en_passant = next_ep
        self._turn = self._turn.opposite
        return True


def _validate_placement(placement: str) -> None:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError("FEN board must have 8 ranks")
    for rank in ranks:
        file_idx = 0
        for ch in rank:
            if ch.isdigit():
                n = int(ch)
                if n < 1 or n > 8:
                    raise ValueError("invalid empty count in FEN rank")
                file_idx += n
            else:
                Piece.from_char(ch)
                file_idx += 1
            if file_idx > 8:
                raise ValueError("too many squares in FEN rank")
        if file_idx != 8:
            raise ValueError("rank does not sum to 8 squares in FEN")
