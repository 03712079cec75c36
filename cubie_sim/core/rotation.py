from __future__ import annotations

from typing import Dict, Literal, Optional, Sequence, Tuple

Axis = Literal["x", "y", "z"]
Face = Literal["front", "back", "left", "right", "top", "bottom"]
Vec3i = Tuple[int, int, int]
# Matriz 3x3 como 9 números, fila por fila: (m11, m12, m13, m21, ...).
Matrix3 = Tuple[float, ...]

IDENTITY: Matrix3 = (1, 0, 0, 0, 1, 0, 0, 0, 1)

# Normales exteriores por cara (x, y, z). Y hacia arriba, Z hacia el frente.
FACE_NORMAL: Dict[Face, Vec3i] = {
    "right": (1, 0, 0),
    "left": (-1, 0, 0),
    "top": (0, 1, 0),
    "bottom": (0, -1, 0),
    "front": (0, 0, 1),
    "back": (0, 0, -1),
}

FACE_AXIS: Dict[Face, Axis] = {
    "right": "x",
    "left": "x",
    "top": "y",
    "bottom": "y",
    "front": "z",
    "back": "z",
}

_NORMAL_TO_FACE: Dict[Vec3i, Face] = {n: f for f, n in FACE_NORMAL.items()}
_AXIS_INDEX: Dict[Axis, int] = {"x": 0, "y": 1, "z": 2}


def axis_index(axis: Axis) -> int:
    """Índice de coordenada (0, 1, 2) de un eje."""
    return _AXIS_INDEX[axis]


def _rot_x(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de X (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (x, -z, y)
    if turns == 2:
        return (x, -y, -z)
    return (x, z, -y)


def _rot_y(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Y (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (z, y, -x)
    if turns == 2:
        return (-x, y, -z)
    return (-z, y, x)


def _rot_z(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Z (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (-y, x, z)
    if turns == 2:
        return (-x, -y, z)
    return (y, -x, z)


_ROTATORS = {"x": _rot_x, "y": _rot_y, "z": _rot_z}


def rotate_vector(v: Vec3i, axis: Axis, turns: int) -> Vec3i:
    """Rota un vector entero 90°*turns alrededor de `axis`.

    Args:
        v: Vector (x, y, z).
        axis: Eje de rotación ('x', 'y' o 'z').
        turns: Cuartos de vuelta con signo (positivo = antihorario mirando
            desde el lado positivo del eje).

    Returns:
        El vector rotado.
    """
    return _ROTATORS[axis](v, turns)


def rotation_matrix(axis: Axis, turns: int) -> Matrix3:
    """Construye la matriz de rotación equivalente a `rotate_vector`.

    Las columnas son las imágenes de la base canónica.
    """
    cols = [rotate_vector(e, axis, turns) for e in ((1, 0, 0), (0, 1, 0), (0, 0, 1))]
    return tuple(cols[c][r] for r in range(3) for c in range(3))


def multiply(a: Sequence[float], b: Sequence[float]) -> Matrix3:
    """Producto matricial a × b de dos matrices 3x3 planas."""
    return tuple(
        sum(a[i * 3 + k] * b[k * 3 + j] for k in range(3))
        for i in range(3)
        for j in range(3)
    )


def apply_matrix(m: Sequence[float], v: Sequence[float]) -> Tuple[float, float, float]:
    """Multiplica la matriz `m` por el vector columna `v`."""
    x, y, z = v
    return (
        m[0] * x + m[1] * y + m[2] * z,
        m[3] * x + m[4] * y + m[5] * z,
        m[6] * x + m[7] * y + m[8] * z,
    )


def determinant(m: Sequence[float]) -> float:
    a, b, c, d, e, f, g, h, i = m
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def invert(m: Sequence[float]) -> Matrix3:
    """Inversa de una matriz 3x3 por adjunta / determinante.

    Args:
        m: Matriz plana de 9 números.

    Returns:
        La matriz inversa (en flotantes).

    Raises:
        ValueError: Si la matriz es singular.
    """
    a, b, c, d, e, f, g, h, i = m
    det = determinant(m)
    if abs(det) < 1e-10:
        raise ValueError("Matriz singular: no tiene inversa")
    inv_det = 1.0 / det
    return (
        (e * i - f * h) * inv_det,
        (c * h - b * i) * inv_det,
        (b * f - c * e) * inv_det,
        (f * g - d * i) * inv_det,
        (a * i - c * g) * inv_det,
        (c * d - a * f) * inv_det,
        (d * h - e * g) * inv_det,
        (b * g - a * h) * inv_det,
        (a * e - b * d) * inv_det,
    )


def snap_to_axis(v: Sequence[float], tolerance: float = 0.5) -> Optional[Vec3i]:
    """Ajusta un vector a la dirección cardinal más cercana.

    Se revisan los ejes en orden X, Y, Z; gana el primero cuya componente
    supera `tolerance` en valor absoluto.

    Returns:
        Un vector unitario entero, o None si ninguna componente supera la
        tolerancia.
    """
    for idx in range(3):
        comp = v[idx]
        if abs(comp) > tolerance:
            out = [0, 0, 0]
            out[idx] = 1 if comp > 0 else -1
            return (out[0], out[1], out[2])
    return None


def normal_to_face(v: Sequence[float], tolerance: float = 0.5) -> Optional[Face]:
    """Cara cuya normal exterior es la más cercana a `v` (o None)."""
    snapped = snap_to_axis(v, tolerance)
    if snapped is None:
        return None
    return _NORMAL_TO_FACE[snapped]
