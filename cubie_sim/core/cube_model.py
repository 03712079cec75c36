from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Literal, Mapping, Optional, Tuple

from cubie_sim.core.rotation import (
    FACE_AXIS,
    FACE_NORMAL,
    IDENTITY,
    Face,
    Matrix3,
    Vec3i,
    apply_matrix,
    axis_index,
    invert,
    normal_to_face,
)

Color = str  # "white", "yellow", "red", "orange", "blue", "green"
CubieKind = Literal["corner", "edge", "center", "innerCenter", "wing", "midEdge"]

FACES: List[Face] = ["front", "back", "left", "right", "top", "bottom"]

DEFAULT_COLORS: Dict[Face, Color] = {
    "front": "red",
    "back": "orange",
    "left": "green",
    "right": "blue",
    "top": "white",
    "bottom": "yellow",
}


@dataclass(frozen=True)
class Cubie:
    """Una pieza física del cubo.

    Attributes:
        id: Identidad estable, derivada de la posición original.
        kind: Clase de pieza según cuántas caras exteriores toca.
        current_position: Posición actual en la grilla [0, N-1]^3.
        original_position: Posición en el estado resuelto (no cambia).
        orientation: Giro relativo al estado resuelto (esquinas mod 3,
            aristas mod 2, resto siempre 0).
        orientation_matrix: Rotación acumulada de la pieza (9 números).
        face_colors: Cara original -> color. Nunca se modifica: el color que
            se ve en cada cara actual se deriva de `orientation_matrix`.
    """

    id: int
    kind: CubieKind
    current_position: Vec3i
    original_position: Vec3i
    orientation: int = 0
    orientation_matrix: Matrix3 = IDENTITY
    face_colors: Mapping[Face, Color] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    @property
    def is_home(self) -> bool:
        return self.current_position == self.original_position

    def has_color(self, color: Color) -> bool:
        return color in self.face_colors.values()


@dataclass(frozen=True)
class CubeState:
    """Estado completo de un cubo N×N×N como lista plana de cubies.

    Es un valor inmutable: cada movimiento produce un `CubeState` nuevo. Los
    cubies que no se mueven se comparten entre estados (son inmutables).

    Attributes:
        size: Tamaño N (>= 2).
        cubies: Todas las piezas visibles, ordenadas por id.
        position_index: Posición actual -> índice en `cubies`. Se reconstruye
            siempre al crear el estado y no participa en la igualdad.
    """

    size: int
    cubies: Tuple[Cubie, ...]
    position_index: Mapping[Vec3i, int] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        index: Dict[Vec3i, int] = {}
        for i, cubie in enumerate(self.cubies):
            index[cubie.current_position] = i
        if len(index) != len(self.cubies):
            raise ValueError("Dos cubies comparten la misma posición")
        object.__setattr__(self, "position_index", MappingProxyType(index))

    def __iter__(self) -> Iterator[Cubie]:
        return iter(self.cubies)

    def __len__(self) -> int:
        return len(self.cubies)

    def cubie_at(self, position: Vec3i) -> Optional[Cubie]:
        """Cubie que ocupa `position`, o None si no hay pieza visible ahí."""
        idx = self.position_index.get(tuple(position))
        return None if idx is None else self.cubies[idx]

    def by_id(self, cubie_id: int) -> Cubie:
        """Busca un cubie por su id.

        Raises:
            KeyError: Si no existe un cubie con ese id.
        """
        for cubie in self.cubies:
            if cubie.id == cubie_id:
                return cubie
        raise KeyError(cubie_id)


# --------------------------
# Geometría de la grilla
# --------------------------
def cubie_id(position: Vec3i, size: int) -> int:
    x, y, z = position
    return x + y * size + z * size * size


def id_to_position(cid: int, size: int) -> Vec3i:
    z = cid // (size * size)
    y = (cid % (size * size)) // size
    x = cid % size
    return (x, y, z)


def count_pieces(size: int) -> int:
    """Cantidad de piezas visibles de un cubo de tamaño `size`."""
    inner = max(size - 2, 0)
    return size ** 3 - inner ** 3


def _on_boundary(c: int, size: int) -> bool:
    return c == 0 or c == size - 1


def visible_faces(position: Vec3i, size: int) -> List[Face]:
    """Caras exteriores que toca una posición de la grilla.

    Args:
        position: Coordenada (x, y, z).
        size: Tamaño del cubo.

    Returns:
        Lista de caras en orden left, right, bottom, top, back, front.
    """
    x, y, z = position
    last = size - 1
    faces: List[Face] = []
    if x == 0:
        faces.append("left")
    if x == last:
        faces.append("right")
    if y == 0:
        faces.append("bottom")
    if y == last:
        faces.append("top")
    if z == 0:
        faces.append("back")
    if z == last:
        faces.append("front")
    return faces


def cubie_layers(position: Vec3i, size: int) -> List[int]:
    """Índices de capa (contando desde ambos lados) a los que pertenece una posición."""
    layers = set()
    for c in position:
        layers.add(c)
        layers.add(size - 1 - c)
    return sorted(layers)


def classify(position: Vec3i, size: int) -> CubieKind:
    """Clasifica la pieza por la cantidad de coordenadas en el borde.

    - 3 en el borde: esquina.
    - 2 en el borde: arista en 3x3; en cubos grandes, `midEdge` si la
      coordenada libre es el centro exacto (N impar) y `wing` si no.
    - 1 en el borde: centro en 3x3 o si ambas coordenadas libres son el centro
      exacto; `innerCenter` en otro caso.

    Raises:
        ValueError: Si la posición es interior (no visible).
    """
    free = [c for c in position if not _on_boundary(c, size)]
    boundary = 3 - len(free)
    middle = (size - 1) / 2

    if boundary == 3:
        return "corner"
    if boundary == 2:
        if size == 3:
            return "edge"
        return "midEdge" if free[0] == middle else "wing"
    if boundary == 1:
        if size == 3 or all(c == middle for c in free):
            return "center"
        return "innerCenter"
    raise ValueError(f"Posición interior sin piezas visibles: {position}")


def create_solved(size: int, colors: Optional[Mapping[Face, Color]] = None) -> CubeState:
    """Crea un cubo resuelto de tamaño `size`.

    Solo se materializan las piezas que tocan al menos una cara exterior.

    Args:
        size: Tamaño N del cubo.
        colors: Paleta cara -> color. Por defecto `DEFAULT_COLORS`.

    Returns:
        El estado "génesis" del cubo.

    Raises:
        ValueError: Si `size` es menor que 2.
    """
    if size < 2:
        raise ValueError(f"El tamaño del cubo debe ser >= 2 (recibido: {size})")
    palette = dict(DEFAULT_COLORS if colors is None else colors)

    cubies: List[Cubie] = []
    # Orden por id: x varía más rápido, luego y, luego z.
    for z in range(size):
        for y in range(size):
            for x in range(size):
                pos = (x, y, z)
                if not any(_on_boundary(c, size) for c in pos):
                    continue
                face_colors = MappingProxyType(
                    {f: palette[f] for f in visible_faces(pos, size)}
                )
                cubies.append(
                    Cubie(
                        id=cubie_id(pos, size),
                        kind=classify(pos, size),
                        current_position=pos,
                        original_position=pos,
                        face_colors=face_colors,
                    )
                )

    return CubeState(size=size, cubies=tuple(cubies))


# --------------------------
# Consultas
# --------------------------
def layer_coordinate(face: Face, layer_depth: int, size: int) -> int:
    """Valor de la coordenada (sobre el eje de `face`) de la capa pedida.

    La capa 1 es la exterior de `face`; right/top/front cuentan desde N-1
    hacia adentro y left/bottom/back desde 0.
    """
    if FACE_NORMAL[face][axis_index(FACE_AXIS[face])] > 0:
        return size - layer_depth
    return layer_depth - 1


def cubies_in_layer(state: CubeState, face: Face, layer_depth: int) -> FrozenSet[int]:
    """Ids de los cubies de la capa `layer_depth` contada desde `face`.

    Recorre solo las N*N posiciones del corte usando `position_index`.
    """
    size = state.size
    axis = axis_index(FACE_AXIS[face])
    coord = layer_coordinate(face, layer_depth, size)

    ids = set()
    for a in range(size):
        for b in range(size):
            pos = [a, b]
            pos.insert(axis, coord)
            idx = state.position_index.get((pos[0], pos[1], pos[2]))
            if idx is not None:
                ids.add(state.cubies[idx].id)
    return frozenset(ids)


def original_face_showing(cubie: Cubie, face: Face) -> Optional[Face]:
    """Cara original de la pieza que hoy apunta hacia `face`.

    Aplica la inversa de `orientation_matrix` a la normal de `face` y ajusta
    el resultado al eje cardinal más cercano.
    """
    normal = FACE_NORMAL[face]
    original_normal = apply_matrix(invert(cubie.orientation_matrix), normal)
    return normal_to_face(original_normal)


def display_color_on_face(cubie: Cubie, face: Face, size: int) -> Optional[Color]:
    """Color que muestra `cubie` sobre la cara `face`.

    Args:
        cubie: Pieza a consultar.
        face: Cara actual del cubo.
        size: Tamaño del cubo.

    Returns:
        El color, o None si la pieza no toca `face` en su posición actual.
    """
    if face not in visible_faces(cubie.current_position, size):
        return None
    original = original_face_showing(cubie, face)
    if original is None:
        return None
    return cubie.face_colors.get(original)


def is_solved(state: CubeState) -> bool:
    """Indica si todas las piezas están en su lugar y con orientación 0."""
    return all(c.is_home and c.orientation == 0 for c in state.cubies)


def _grid_cell(face: Face, position: Vec3i, size: int) -> Tuple[int, int]:
    """(fila, columna) de una posición dentro de la grilla de `face`, vista desde afuera."""
    x, y, z = position
    last = size - 1
    if face == "front":
        return last - y, x
    if face == "back":
        return last - y, last - x
    if face == "right":
        return last - y, last - z
    if face == "left":
        return last - y, z
    if face == "top":
        return z, x
    return last - z, x  # bottom


def face_grid(state: CubeState, face: Face) -> List[List[Optional[Color]]]:
    """Colores visibles en una cara como grilla N×N (filas de arriba a abajo).

    La cara superior se lista con la fila trasera primero y la inferior con la
    fila frontal primero, como si se girara el cubo para mirarlas.
    """
    size = state.size
    grid: List[List[Optional[Color]]] = [[None] * size for _ in range(size)]
    axis = axis_index(FACE_AXIS[face])
    coord = layer_coordinate(face, 1, size)
    for cubie in state.cubies:
        if cubie.current_position[axis] != coord:
            continue
        row, col = _grid_cell(face, cubie.current_position, size)
        grid[row][col] = display_color_on_face(cubie, face, size)
    return grid


def face_grids(state: CubeState) -> Dict[Face, List[List[Optional[Color]]]]:
    return {f: face_grid(state, f) for f in FACES}
