from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Literal, Optional, Sequence, Tuple

from cubie_sim.core.cube_model import Color, Cubie, CubeState
from cubie_sim.core.errors import SolverBoundsExceeded
from cubie_sim.core.rotation import FACE_NORMAL, Face, apply_matrix
from cubie_sim.logic.moves import FUNDAMENTAL_MOVES, LETTER_TO_FACE, inverse_move, parse
from cubie_sim.logic.transition import apply

logger = logging.getLogger(__name__)

SOLVED_HASH = "SOLVED"

DEFAULT_MAX_DEPTH = 12
DEFAULT_MAX_NODES = 50_000

# Primero las caras del eje de la cruz, después F/B y al final R/L.
DEFAULT_FACE_PRIORITY: Tuple[Tuple[Face, ...], ...] = (
    ("top", "bottom"),
    ("front", "back"),
    ("right", "left"),
)

# Algoritmos cortos que se prueban si la BFS agota sus límites.
DEFAULT_FALLBACK_SEQUENCES: Tuple[Tuple[str, ...], ...] = (
    ("F", "D", "R'", "D'"),
    ("R", "D", "B'", "D'"),
    ("B", "D", "L'", "D'"),
    ("L", "D", "F'", "D'"),
    ("U", "R", "U", "R'"),
    ("U", "F", "U", "F'"),
    ("U", "L", "U", "L'"),
    ("U", "B", "U", "B'"),
)

EventKind = Literal["start", "depth", "solved", "bounds", "exhausted", "fallback", "cancelled"]


@dataclass(frozen=True)
class SolveEvent:
    """Evento de traza emitido por el solver a través de `on_event`."""

    kind: EventKind
    depth: int = 0
    nodes_explored: int = 0
    moves: Tuple[str, ...] = field(default_factory=tuple)


OnEventCallback = Callable[[SolveEvent], None]
ShouldCancelCallback = Callable[[], bool]


@dataclass
class _Node:
    state: CubeState
    state_hash: str
    moves: List[str]
    depth: int


class WhiteCrossSolver:
    """Resuelve la cruz (por defecto blanca) con BFS sobre estados del cubo.

    Nodos = estados identificados por un hash reducido a las cuatro aristas de
    la cruz. Aristas del grafo = los 12 movimientos fundamentales.

    La BFS está acotada por profundidad y por cantidad de nodos; si se agota
    (o se queda sin frontera) se prueban secuencias fijas de respaldo.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
        cross_color: Color = "white",
        face_priority: Sequence[Sequence[Face]] = DEFAULT_FACE_PRIORITY,
        fallback_sequences: Sequence[Sequence[str]] = DEFAULT_FALLBACK_SEQUENCES,
        on_event: Optional[OnEventCallback] = None,
        should_cancel: Optional[ShouldCancelCallback] = None,
    ) -> None:
        """Configura el solver.

        Args:
            max_depth: Profundidad a partir de la cual la BFS se rinde.
            max_nodes: Máximo de nodos que se sacan de la frontera.
            cross_color: Color de las aristas que forman la cruz.
            face_priority: Grupos de caras en orden de exploración por nodo.
            fallback_sequences: Secuencias fijas para la fase de respaldo.
            on_event: Callback opcional de traza (`SolveEvent`).
            should_cancel: Callback opcional de cancelación cooperativa.
        """
        self.max_depth = max_depth
        self.max_nodes = max_nodes
        self.cross_color = cross_color
        self.face_priority = tuple(tuple(g) for g in face_priority)
        self.fallback_sequences = tuple(tuple(s) for s in fallback_sequences)
        self.on_event = on_event
        self.should_cancel = should_cancel
        self.last_nodes_explored = 0
        self._edge_slots: Dict[int, Tuple[int, ...]] = {}

    # --------------------------
    # Public API
    # --------------------------
    def solve(self, state: CubeState) -> Optional[List[str]]:
        """Busca la secuencia más corta que arma la cruz.

        Args:
            state: Estado de partida (no se modifica).

        Returns:
            Lista de movimientos (ej: ["F'", "U"]). Vacía si la cruz ya está
            armada o si ni la BFS ni el respaldo la encuentran. None solo si
            se canceló mediante `should_cancel`.

        Raises:
            ValueError: Si el cubo no tiene cuatro aristas de la cruz
                (por ejemplo, cubos de tamaño par).
        """
        start_hash = self.state_hash(state)
        self.last_nodes_explored = 0
        self._emit("start")
        logger.debug("Resolviendo cruz %s (N=%d)", self.cross_color, state.size)

        if start_hash == SOLVED_HASH:
            self._emit("solved")
            return []

        try:
            found = self._search(state, start_hash)
        except SolverBoundsExceeded as exc:
            logger.debug("%s; se pasa a la fase de respaldo", exc)
            self._emit("bounds", depth=exc.depth)
            return self._fallback(state)
        except _SearchCancelled:
            logger.info("Búsqueda cancelada tras %d nodos", self.last_nodes_explored)
            self._emit("cancelled")
            return None

        if found is None:
            logger.debug("Frontera agotada sin solución")
            self._emit("exhausted")
            return self._fallback(state)

        logger.info(
            "Cruz resuelta en %d movimientos (%d nodos)", len(found), self.last_nodes_explored
        )
        self._emit("solved", depth=len(found), moves=found)
        return found

    def validate(self, state: CubeState) -> bool:
        """True si la cruz está armada en `state`."""
        return self.state_hash(state) == SOLVED_HASH

    def state_hash(self, state: CubeState) -> str:
        """Hash reducido a las aristas de la cruz.

        Para cada arista guarda su posición actual y si el color de la cruz
        mira hacia la cara de la cruz ("W") o no ("X"), ordenadas por posición
        original. Devuelve "SOLVED" si todas están en su lugar y orientadas.

        Raises:
            ValueError: Si no hay exactamente cuatro aristas de la cruz.
        """
        edges = self._cross_edges(state)
        normal = FACE_NORMAL[self._cross_face(edges)]

        entries = []
        all_solved = True
        for cubie in edges:
            # La pegatina de la cruz nació en esa cara: mira hacia ella si la
            # matriz deja fija su normal.
            facing = apply_matrix(cubie.orientation_matrix, normal) == normal
            if not (facing and cubie.is_home):
                all_solved = False
            entries.append((cubie.original_position, cubie.current_position, facing))

        if all_solved:
            return SOLVED_HASH

        entries.sort(key=lambda e: e[0])
        return "|".join(
            "{},{},{}:{}".format(*cur, "W" if facing else "X") for _, cur, facing in entries
        )

    # --------------------------
    # BFS
    # --------------------------
    def _search(self, state: CubeState, start_hash: str) -> Optional[List[str]]:
        parsed = {mv: parse(mv, state.size) for mv in FUNDAMENTAL_MOVES}
        frontier: Deque[_Node] = deque([_Node(state, start_hash, [], 0)])
        visited: Dict[str, List[str]] = {start_hash: []}
        current_depth = -1

        while frontier:
            if self.should_cancel is not None and self.should_cancel():
                raise _SearchCancelled()

            node = frontier.popleft()
            if node.depth >= self.max_depth:
                raise SolverBoundsExceeded("profundidad", node.depth, self.last_nodes_explored)
            if self.last_nodes_explored >= self.max_nodes:
                raise SolverBoundsExceeded("nodos", node.depth, self.last_nodes_explored)
            self.last_nodes_explored += 1

            if node.depth != current_depth:
                current_depth = node.depth
                logger.debug("Profundidad %d (%d en frontera)", current_depth, len(frontier) + 1)
                self._emit("depth", depth=current_depth)

            for mv in self._prioritized(self._valid_moves(node.moves)):
                child = apply(node.state, parsed[mv])
                h = self.state_hash(child)

                # Estado ya alcanzado por un camino igual o más corto
                if h in visited:
                    continue

                moves = node.moves + [mv]
                if h == SOLVED_HASH:
                    return moves

                visited[h] = moves
                frontier.append(_Node(child, h, moves, node.depth + 1))

        return None

    def _valid_moves(self, previous: List[str]) -> List[str]:
        """Movimientos fundamentales permitidos después de `previous`.

        Podas:
        - No aplicar el inverso exacto del último movimiento.
        - No girar la misma cara por tercera vez seguida.
        """
        if not previous:
            return list(FUNDAMENTAL_MOVES)

        last = previous[-1]
        inverse = _INVERSE[last]
        twice = len(previous) >= 2 and previous[-2][0] == last[0]
        return [
            mv for mv in FUNDAMENTAL_MOVES
            if mv != inverse and not (twice and mv[0] == last[0])
        ]

    def _prioritized(self, moves: List[str]) -> List[str]:
        """Ordena los movimientos por grupos de `face_priority` (orden estable)."""
        rank: Dict[Face, int] = {}
        for i, group in enumerate(self.face_priority):
            for face in group:
                rank.setdefault(face, i)
        last = len(self.face_priority)
        return sorted(moves, key=lambda mv: rank.get(LETTER_TO_FACE[mv[0]], last))

    # --------------------------
    # Fase de respaldo
    # --------------------------
    def _fallback(self, state: CubeState) -> List[str]:
        """Prueba cada secuencia fija desde el estado original.

        Se revisa el hash después de cada movimiento y se devuelve el primer
        prefijo que arma la cruz, o una lista vacía si ninguno lo logra.
        """
        for seq in self.fallback_sequences:
            current = state
            for i, mv in enumerate(seq):
                current = apply(current, parse(mv, state.size))
                if self.state_hash(current) == SOLVED_HASH:
                    result = list(seq[: i + 1])
                    logger.info("Respaldo encontró %s", " ".join(result))
                    self._emit("fallback", depth=len(result), moves=result)
                    return result

        logger.info("Respaldo sin solución")
        self._emit("fallback")
        return []

    # --------------------------
    # Helpers
    # --------------------------
    def _cross_edges(self, state: CubeState) -> List[Cubie]:
        # `apply` conserva el orden de los cubies: los índices se buscan una
        # vez por tamaño y se revalidan con el color.
        slots = self._edge_slots.get(state.size)
        if slots is not None and len(state.cubies) > max(slots):
            edges = [state.cubies[i] for i in slots]
            if all(self._is_cross_edge(c) for c in edges):
                return edges

        slots = tuple(i for i, c in enumerate(state.cubies) if self._is_cross_edge(c))
        if len(slots) != 4:
            raise ValueError(
                f"Se esperaban 4 aristas {self.cross_color} y hay {len(slots)} (N={state.size})"
            )
        self._edge_slots[state.size] = slots
        return [state.cubies[i] for i in slots]

    def _is_cross_edge(self, cubie: Cubie) -> bool:
        return cubie.kind in ("edge", "midEdge") and cubie.has_color(self.cross_color)

    def _cross_face(self, edges: List[Cubie]) -> Face:
        for face, color in edges[0].face_colors.items():
            if color == self.cross_color:
                return face
        raise ValueError(f"Color de cruz sin cara: {self.cross_color}")

    def _emit(
        self, kind: EventKind, depth: int = 0, moves: Sequence[str] = ()
    ) -> None:
        if self.on_event is not None:
            self.on_event(
                SolveEvent(
                    kind=kind,
                    depth=depth,
                    nodes_explored=self.last_nodes_explored,
                    moves=tuple(moves),
                )
            )


_INVERSE: Dict[str, str] = {mv: inverse_move(mv) for mv in FUNDAMENTAL_MOVES}


class _SearchCancelled(Exception):
    """Interna: `should_cancel` pidió cortar la búsqueda."""


def solve_white_cross(state: CubeState, **kwargs) -> Optional[List[str]]:
    """Atajo: `WhiteCrossSolver(**kwargs).solve(state)`."""
    return WhiteCrossSolver(**kwargs).solve(state)
