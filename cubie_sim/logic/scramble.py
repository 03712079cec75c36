from __future__ import annotations

import random
from typing import List, Optional

FACE_LETTERS: List[str] = ["U", "D", "L", "R", "F", "B"]
SUFFIXES: List[str] = ["", "'", "2"]


def generate_scramble(n: int, seed: Optional[int] = None, size: int = 3) -> str:
    """Mezcla aleatoria en notación de capas para un cubo N×N×N.

    Cada token elige una cara distinta de la anterior y un sufijo ("", "'", "2").
    Desde N=4 el token puede llevar prefijo de capa: la profundidad se sortea
    entre 1 y N // 2, así que nunca pasa de la mitad del cubo ("2R", "3U'" en
    un 6x6). En 2x2 y 3x3 solo salen giros de capa externa. Todos los tokens
    son válidos para `parse(token, size)`.

    Args:
        n: Cantidad de tokens.
        seed: Semilla para `random.Random`; None da una mezcla distinta cada vez.
        size: N del cubo.

    Returns:
        Tokens separados por espacios.

    Raises:
        ValueError: Si `n` es menor o igual a 0 o `size` es menor que 2.
    """
    if n <= 0:
        raise ValueError("n debe ser mayor que 0.")
    if size < 2:
        raise ValueError("size debe ser mayor o igual a 2.")

    rng = random.Random(seed)
    max_layer = size // 2

    seq: List[str] = []
    last_face: Optional[str] = None

    for _ in range(n):
        # Nunca la misma cara dos veces seguidas
        candidates = [m for m in FACE_LETTERS if m != last_face]
        face = rng.choice(candidates)
        last_face = face

        layer = rng.randint(1, max_layer) if size >= 4 else 1
        prefix = str(layer) if layer > 1 else ""
        seq.append(prefix + face + rng.choice(SUFFIXES))

    return " ".join(seq)
