from cubie_sim.logic.moves import FUNDAMENTAL_MOVES, Move, parse, parse_sequence
from cubie_sim.logic.transition import apply, apply_notation, apply_sequence

__all__ = [
    "FUNDAMENTAL_MOVES",
    "Move",
    "apply",
    "apply_notation",
    "apply_sequence",
    "parse",
    "parse_sequence",
]
