from __future__ import annotations


class CubeError(ValueError):
    """Error base del paquete.

    Hereda de `ValueError` para que el código que ya capturaba `ValueError`
    (como hacía el parser original de movimientos) siga funcionando.
    """


class InvalidNotation(CubeError):
    """El texto no es un movimiento válido según la gramática
    `[<dígitos>]<Cara>[2]['|i]`.

    Attributes:
        notation: Texto recibido.
    """

    def __init__(self, notation: str, reason: str = "") -> None:
        self.notation = notation
        msg = f"Movimiento inválido: {notation!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class LayerOutOfRange(InvalidNotation):
    """La profundidad de capa no cabe en un cubo de tamaño `size`.

    Attributes:
        layer_depth: Capa pedida (1 = capa exterior).
        size: Tamaño N del cubo.
    """

    def __init__(self, notation: str, layer_depth: int, size: int) -> None:
        self.layer_depth = layer_depth
        self.size = size
        super().__init__(notation, f"capa {layer_depth} fuera de [1, {size}]")


class SolverBoundsExceeded(CubeError):
    """La BFS alcanzó su límite de profundidad o de nodos.

    Es interna al solver: nunca sale de `WhiteCrossSolver.solve`, que la usa
    para pasar a la fase de respaldo.
    """

    def __init__(self, reason: str, depth: int, nodes_explored: int) -> None:
        self.reason = reason
        self.depth = depth
        self.nodes_explored = nodes_explored
        super().__init__(
            f"Límite de búsqueda alcanzado ({reason}): "
            f"profundidad={depth}, nodos={nodes_explored}"
        )
