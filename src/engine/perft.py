from __future__ import annotations

from .position import Position


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes of the pseudo-legal move tree below ``position``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all child positions' perft(depth-1).

    Note: children come from ``generate_candidates``/``apply_move`` on copies,
    so counts include moves that leave the own king in check and exclude
    castling and promotion. They match standard perft only at shallow depths.
    The candidate cache of ``position`` itself is overwritten.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    side = position.turn
    for origin in list(position.squares_of(side)):
        destinations = [c.destination for c in position.generate_candidates(origin, side)]
        if depth == 1:
            nodes += len(destinations)
            continue
        for dest in destinations:
            child = position.copy()
            child.generate_candidates(origin, side)
            if child.apply_move(origin, dest):
                nodes += perft(child, depth - 1)
    return nodes
