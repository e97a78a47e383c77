from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Candidate:
    """One destination offered for a queried origin square.

    Attributes:
        destination (int): Destination square index (0-based, a1=0).
        is_capture (bool): Whether the destination holds an opposing piece,
            or is the en-passant target for a pawn.
    """

    destination: int
    is_capture: bool = False

    def to_str(self) -> str:
        """Render as ``"e4"`` or ``"xe4"`` for captures."""
        return ("x" if self.is_capture else "") + square_to_str(self.destination)


def parse_move(text: str) -> Tuple[int, int]:
    """Parse a coordinate move string.

    Args:
        text (str): Origin and destination squares, e.g. ``"e2e4"``.

    Returns:
        Tuple[int, int]: ``(origin, destination)`` square indices.

    Raises:
        ValueError: If the string has an invalid length or squares.
    """
    if len(text) != 4:
        raise ValueError(f"invalid move length: {text!r}")
    return str_to_square(text[0:2]), str_to_square(text[2:4])


def move_to_str(origin: int, destination: int) -> str:
    return square_to_str(origin) + square_to_str(destination)


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
