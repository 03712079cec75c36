from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

from cubie_sim.core.errors import InvalidNotation, LayerOutOfRange
from cubie_sim.core.rotation import FACE_AXIS, Axis, Face

LETTER_TO_FACE: Dict[str, Face] = {
    "F": "front",
    "B": "back",
    "R": "right",
    "L": "left",
    "U": "top",
    "D": "bottom",
}
FACE_TO_LETTER: Dict[Face, str] = {f: l for l, f in LETTER_TO_FACE.items()}

# Conjunto de movimientos fundamentales (un cuarto de vuelta por cara).
FUNDAMENTAL_MOVES: List[str] = [
    "R", "R'",
    "U", "U'",
    "L", "L'",
    "F", "F'",
    "B", "B'",
    "D", "D'",
]

_MODIFIERS: List[str] = ["", "'", "2"]

# [<dígitos>]<Cara>[2]['|i]
_NOTATION_RE = re.compile(r"^([0-9]*)([FBRLUD])(2)?(['i])?$")


@dataclass(frozen=True)
class Move:
    """Movimiento ya interpretado.

    Attributes:
        face: Cara que define eje y sentido.
        layer_depth: 1 = capa exterior de `face`, 2 = la siguiente, etc.
        turns: 1 (cuarto de vuelta) o 2 (media vuelta).
        clockwise: Sentido horario mirando `face` desde afuera del cubo.
    """

    face: Face
    layer_depth: int = 1
    turns: int = 1
    clockwise: bool = True

    @property
    def axis(self) -> Axis:
        return FACE_AXIS[self.face]

    @property
    def notation(self) -> str:
        """Texto canónico del movimiento, por ejemplo "3U'" o "R2"."""
        prefix = str(self.layer_depth) if self.layer_depth > 1 else ""
        suffix = "2" if self.turns == 2 else ("" if self.clockwise else "'")
        return f"{prefix}{FACE_TO_LETTER[self.face]}{suffix}"

    @property
    def angle(self) -> float:
        """Ángulo con signo (radianes) que usa la capa de animación.

        U y D tienen el sentido invertido respecto de las otras cuatro caras,
        como en la notación estándar que consume el renderer.
        """
        magnitude = self.turns * math.pi / 2
        sign = -1 if self.clockwise else 1
        if self.face in ("top", "bottom"):
            sign = -sign
        return sign * magnitude

    def inverse(self) -> "Move":
        if self.turns == 2:
            return self
        return replace(self, clockwise=not self.clockwise)

    def __str__(self) -> str:
        return self.notation


def normalize_token(tok: str) -> str:
    """Limpia un token: quita espacios y convierte comillas tipográficas (’ ‘) en '."""
    return tok.strip().replace("’", "'").replace("‘", "'")


def parse(text: str, size: int) -> Move:
    """Convierte notación de texto en un `Move`.

    Gramática: `[<dígitos>]<Cara>[2]['|i]`, con caras F B R L U D.
    Una media vuelta se guarda siempre en sentido horario ("R2'" == "R2").

    Args:
        text: Movimiento, por ejemplo "R", "R'", "R2", "2R", "3U'".
        size: Tamaño del cubo sobre el que se aplicará.

    Returns:
        El movimiento interpretado.

    Raises:
        InvalidNotation: Si el texto no respeta la gramática o la capa es 0.
        LayerOutOfRange: Si la capa es mayor que `size`.
    """
    tok = normalize_token(text)
    match = _NOTATION_RE.match(tok)
    if match is None:
        raise InvalidNotation(text)

    layer_str, letter, double, prime = match.groups()
    layer_depth = int(layer_str) if layer_str else 1
    if layer_depth < 1:
        raise InvalidNotation(text, "la capa debe ser >= 1")
    if layer_depth > size:
        raise LayerOutOfRange(text, layer_depth, size)

    turns = 2 if double else 1
    clockwise = turns == 2 or prime is None
    return Move(face=LETTER_TO_FACE[letter], layer_depth=layer_depth, turns=turns, clockwise=clockwise)


def inverse_move(m: str) -> str:
    """Devuelve el movimiento inverso de un token.

    Ejemplos:
        - "R"   -> "R'"
        - "R'"  -> "R"
        - "R2"  -> "R2"
        - "2Ui" -> "2U"

    Raises:
        InvalidNotation: Si `m` no es un token válido.
    """
    tok = normalize_token(m)
    if not tok:
        return tok
    match = _NOTATION_RE.match(tok)
    if match is None:
        raise InvalidNotation(m)
    layer_str, letter, double, prime = match.groups()
    if layer_str and int(layer_str) < 1:
        raise InvalidNotation(m, "la capa debe ser >= 1")
    move = Move(
        face=LETTER_TO_FACE[letter],
        layer_depth=int(layer_str) if layer_str else 1,
        turns=2 if double else 1,
        clockwise=bool(double) or prime is None,
    )
    return move.inverse().notation


def parse_sequence(text: str, size: int) -> List[Move]:
    """Convierte una secuencia separada por espacios en una lista de movimientos.

    Ejemplo: "R U R' U'" -> [Move(right), Move(top), ...]

    Raises:
        InvalidNotation: Si algún token es inválido.
    """
    return [parse(t, size) for t in text.split() if t.strip()]


def invert_sequence(moves: Iterable[Move]) -> List[Move]:
    """Secuencia que deshace `moves` (orden inverso, cada uno invertido)."""
    return [m.inverse() for m in reversed(list(moves))]


def find_invalid(tokens: Iterable[str], size: int) -> Optional[str]:
    """Primer token que no se puede interpretar, o None si todos son válidos."""
    for tok in tokens:
        try:
            parse(tok, size)
        except InvalidNotation:
            return tok
    return None


def all_moves(size: int) -> List[str]:
    """Todos los movimientos de una cara para un cubo de tamaño `size`.

    Incluye las capas exteriores ("R", "R'", "R2") y las interiores con
    prefijo ("2R", ...) hasta `size - 1`.
    """
    moves: List[str] = []
    for letter in ("R", "L", "U", "D", "F", "B"):
        for mod in _MODIFIERS:
            moves.append(f"{letter}{mod}")
        for layer in range(2, size):
            for mod in _MODIFIERS:
                moves.append(f"{layer}{letter}{mod}")
    return moves
