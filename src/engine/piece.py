from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Side(Enum):
    """Side to move, valued by its FEN letter."""

    WHITE = "w"
    BLACK = "b"

    @property
    def opposite(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @classmethod
    def from_char(cls, ch: str) -> "Side":
        try:
            return cls(ch)
        except ValueError as e:
            raise ValueError(f"side to move must be 'w' or 'b', got {ch!r}") from e


class PieceKind(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


SLIDING_KINDS = frozenset({PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN})
LEAPING_KINDS = frozenset({PieceKind.KNIGHT, PieceKind.KING})


@dataclass(frozen=True)
class Piece:
    """A piece on one board slot.

    Attributes:
        side (Side): Owning side.
        kind (PieceKind): Piece kind.
    """

    side: Side
    kind: PieceKind

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Decode a FEN piece letter (uppercase white, lowercase black).

        Raises:
            ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
        """
        if len(ch) != 1:
            raise ValueError(f"invalid piece in FEN: {ch!r}")
        try:
            kind = PieceKind(ch.lower())
        except ValueError as e:
            raise ValueError(f"invalid piece in FEN: {ch!r}") from e
        return cls(Side.WHITE if ch.isupper() else Side.BLACK, kind)

    @property
    def char(self) -> str:
        return self.kind.value.upper() if self.side is Side.WHITE else self.kind.value

    @property
    def is_sliding(self) -> bool:
        return self.kind in SLIDING_KINDS

    @property
    def is_leaping(self) -> bool:
        return self.kind in LEAPING_KINDS

    def __str__(self) -> str:
        return self.char
