from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from cubie_sim.core.cube_model import Cubie, CubeState, cubies_in_layer, visible_faces
from cubie_sim.core.errors import LayerOutOfRange
from cubie_sim.core.rotation import (
    FACE_AXIS,
    FACE_NORMAL,
    Face,
    Matrix3,
    Vec3i,
    apply_matrix,
    multiply,
    rotate_vector,
    rotation_matrix,
    snap_to_axis,
)
from cubie_sim.logic.moves import Move, parse, parse_sequence

# Cuartos de vuelta (regla de la mano derecha sobre el eje positivo) que
# equivalen a un giro horario de la cara mirada desde afuera. Caras opuestas
# comparten eje pero giran en sentido contrario.
_CW_TURNS: Dict[Face, int] = {
    "right": -1,
    "left": +1,
    "top": -1,
    "bottom": +1,
    "front": -1,
    "back": +1,
}

_QUARTER_TURN_MATRIX: Dict[Tuple[Face, bool], Matrix3] = {
    (face, cw): rotation_matrix(FACE_AXIS[face], turns if cw else -turns)
    for face, turns in _CW_TURNS.items()
    for cw in (True, False)
}


def quarter_turn_matrix(face: Face, clockwise: bool) -> Matrix3:
    """Matriz fija de un cuarto de vuelta de `face` en el sentido pedido."""
    return _QUARTER_TURN_MATRIX[(face, clockwise)]


def _signed_turns(face: Face, clockwise: bool) -> int:
    return _CW_TURNS[face] if clockwise else -_CW_TURNS[face]


def rotate_position(position: Vec3i, face: Face, clockwise: bool, size: int) -> Vec3i:
    """Nueva posición de una pieza tras un cuarto de vuelta de `face`.

    Se trabaja con coordenadas centradas y duplicadas (2p - (N-1)) para que la
    rotación quede en enteros para cualquier N.
    """
    last = size - 1
    centered = tuple(2 * c - last for c in position)
    rx, ry, rz = rotate_vector(centered, FACE_AXIS[face], _signed_turns(face, clockwise))
    return ((rx + last) // 2, (ry + last) // 2, (rz + last) // 2)


# --------------------------
# Reglas de orientación por tipo de pieza
# --------------------------
def _sign(c: int, size: int) -> int:
    return 1 if c == size - 1 else -1


def _reference_face(cubie: Cubie, preferred: Tuple[Face, ...]) -> Optional[Face]:
    for face in cubie.face_colors:
        if face in preferred:
            return face
    return None


def _current_direction(cubie: Cubie, original_face: Face) -> Optional[Vec3i]:
    return snap_to_axis(apply_matrix(cubie.orientation_matrix, FACE_NORMAL[original_face]))


def _corner_twist(cubie: Cubie, size: int) -> int:
    """Giro de esquina (mod 3).

    0 si el sticker que era U/D apunta al eje Y; si no, 1 o 2 según en qué
    cara cae contando en sentido horario alrededor de la esquina, empezando
    por su cara U/D.
    """
    ref = _reference_face(cubie, ("top", "bottom"))
    direction = _current_direction(cubie, ref) if ref is not None else None
    if direction is None or direction[1] != 0:
        return 0
    sx, sy, sz = (_sign(c, size) for c in cubie.current_position)
    if sx * sy * sz > 0:
        # Horario visto desde afuera: Y -> X -> Z
        return 1 if direction[0] != 0 else 2
    # Horario visto desde afuera: Y -> Z -> X
    return 1 if direction[2] != 0 else 2


def _edge_flip(cubie: Cubie, size: int) -> int:
    """Volteo de arista (mod 2).

    El sticker de referencia es el U/D de la pieza (o el F/B en las aristas
    del ecuador); la orientación es 0 cuando apunta al eje de referencia de la
    ranura actual (Y si la ranura toca U/D, Z si no).
    """
    ref = _reference_face(cubie, ("top", "bottom")) or _reference_face(cubie, ("front", "back"))
    if ref is None:
        return 0
    direction = _current_direction(cubie, ref)
    if direction is None:
        return 0
    slot_faces = visible_faces(cubie.current_position, size)
    slot_axis = 1 if ("top" in slot_faces or "bottom" in slot_faces) else 2
    return 0 if direction[slot_axis] != 0 else 1


def _no_orientation(cubie: Cubie, size: int) -> int:
    return 0


_ORIENTATION_RULES: Dict[str, Callable[[Cubie, int], int]] = {
    "corner": _corner_twist,
    "edge": _edge_flip,
    "midEdge": _edge_flip,
    "wing": _no_orientation,
    "center": _no_orientation,
    "innerCenter": _no_orientation,
}


def orientation_of(cubie: Cubie, size: int) -> int:
    """Orientación entera de la pieza en su posición y rotación actuales."""
    return _ORIENTATION_RULES[cubie.kind](cubie, size)


# --------------------------
# Aplicación de movimientos
# --------------------------
def _quarter_turn(state: CubeState, face: Face, layer_depth: int, clockwise: bool) -> CubeState:
    size = state.size
    affected = cubies_in_layer(state, face, layer_depth)
    rot = _QUARTER_TURN_MATRIX[(face, clockwise)]

    cubies = list(state.cubies)
    for i, cubie in enumerate(cubies):
        if cubie.id not in affected:
            continue
        moved = replace(
            cubie,
            current_position=rotate_position(cubie.current_position, face, clockwise, size),
            orientation_matrix=multiply(rot, cubie.orientation_matrix),
        )
        cubies[i] = replace(moved, orientation=orientation_of(moved, size))

    # El índice de posiciones se reconstruye completo en CubeState.__post_init__.
    return CubeState(size=size, cubies=tuple(cubies))


def apply(state: CubeState, move: Move) -> CubeState:
    """Aplica un movimiento y devuelve un estado nuevo (no modifica `state`).

    La media vuelta se compone de dos cuartos de vuelta por el mismo camino.

    Args:
        state: Estado de partida.
        move: Movimiento interpretado para un cubo de este tamaño.

    Returns:
        El estado resultante.

    Raises:
        LayerOutOfRange: Si `move` no corresponde al tamaño de `state`.
    """
    if not 1 <= move.layer_depth <= state.size:
        raise LayerOutOfRange(move.notation, move.layer_depth, state.size)

    out = state
    for _ in range(move.turns):
        out = _quarter_turn(out, move.face, move.layer_depth, move.clockwise)
    return out


def apply_notation(state: CubeState, text: str) -> CubeState:
    """Interpreta `text` para el tamaño de `state` y lo aplica."""
    return apply(state, parse(text, state.size))


def apply_sequence(state: CubeState, moves: Union[str, Iterable[Union[Move, str]]]) -> CubeState:
    """Aplica una secuencia de movimientos.

    Args:
        state: Estado de partida.
        moves: String separado por espacios ("R U R' U'") o iterable de
            `Move` / tokens.

    Returns:
        El estado final.
    """
    if isinstance(moves, str):
        moves = parse_sequence(moves, state.size)
    out = state
    for m in moves:
        out = apply(out, m) if isinstance(m, Move) else apply_notation(out, m)
    return out
