from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .move import Candidate, move_to_str
from .piece import Side
from .position import Position


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickResult:
    """Outcome of one board click.

    Attributes:
        selected (Optional[int]): Square selected after the click, if any.
        candidates (List[Candidate]): Destinations for ``selected``.
        moved (Optional[Tuple[int, int]]): ``(origin, destination)`` when the
            click completed a move.
    """

    selected: Optional[int]
    candidates: List[Candidate] = field(default_factory=list)
    moved: Optional[Tuple[int, int]] = None


@dataclass
class Game:
    """Single-owner wrapper around a position for an input layer.

    Responsibility: hold the click selection, serialize each
    generate-then-apply pair under a lock, record applied moves.
    """

    position: Position
    history: List[Tuple[int, int]] = field(default_factory=list)
    selected: Optional[int] = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @classmethod
    def new(cls) -> "Game":
        return cls(position=Position.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(position=Position.from_fen(fen))

    def to_fen(self) -> str:
        with self._lock:
            return self.position.to_fen()

    @property
    def turn(self) -> Side:
        return self.position.turn

    def candidates(self, square: int) -> List[Candidate]:
        """Destinations for the piece on ``square`` if it belongs to the side to move."""
        with self._lock:
            return self.position.generate_candidates(square, self.position.turn)

    def move(self, origin: int, destination: int) -> bool:
        """Generate for ``origin`` and apply the move to ``destination`` atomically."""
        with self._lock:
            self.position.generate_candidates(origin, self.position.turn)
            if not self.position.apply_move(origin, destination):
                return False
            self._record(origin, destination)
            self.selected = None
            return True

    def click(self, square: int) -> ClickResult:
        """Advance the select-then-move state machine by one click.

        With nothing selected, a square that has candidates becomes the
        selection. With a selection, a click on one of its destinations moves
        the piece, a click on another movable piece reselects, and any other
        click (the selected square included) clears the selection.
        """
        with self._lock:
            if self.selected is not None:
                origin = self.selected
                if square == origin:
                    self.selected = None
                    return ClickResult(selected=None)
                offered = self.position.generate_candidates(origin, self.position.turn)
                if any(c.destination == square for c in offered):
                    self.selected = None
                    if self.position.apply_move(origin, square):
                        self._record(origin, square)
                        return ClickResult(selected=None, moved=(origin, square))
                    return ClickResult(selected=None)
            moves = self.position.generate_candidates(square, self.position.turn)
            self.selected = square if moves else None
            return ClickResult(selected=self.selected, candidates=moves)

    def history_uci(self) -> List[str]:
        return [move_to_str(o, d) for o, d in self.history]

    def _record(self, origin: int, destination: int) -> None:
        self.history.append((origin, destination))
        logger.debug("applied %s", move_to_str(origin, destination))
