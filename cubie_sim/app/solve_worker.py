from __future__ import annotations

import traceback
from typing import List, Optional

from PySide6.QtCore import QThread, Signal

from cubie_sim.core.cube_model import CubeState
from cubie_sim.solve.white_cross_solver import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    SolveEvent,
    WhiteCrossSolver,
)


class SolveWorker(QThread):
    """Hilo de trabajo para buscar la cruz sin bloquear la UI.

    Ejecuta `WhiteCrossSolver` sobre el estado recibido y emite señales para
    informar progreso y resultado. El estado es inmutable, así que no hace falta
    clonarlo: la UI puede seguir aplicando movimientos sobre su propia copia.

    Signals:
        depth_update(int): Se emite cada vez que la BFS pasa a una nueva profundidad.
        finished_solution(object): Se emite al terminar con la solución (list[str])
            o None si se pidió interrupción.
        error(str): Se emite si ocurre una excepción durante la búsqueda.
    """

    depth_update = Signal(int)          # profundidad actual
    finished_solution = Signal(object)  # list[str] o None
    error = Signal(str)                 # traceback si algo falla

    def __init__(
        self,
        state: CubeState,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
    ) -> None:
        """Crea el worker.

        Args:
            state: Estado del cubo a resolver.
            max_depth: Profundidad máxima de la BFS.
            max_nodes: Máximo de nodos explorados antes del respaldo.
        """
        super().__init__()
        self.state: CubeState = state
        self.max_depth: int = max_depth
        self.max_nodes: int = max_nodes

    def _on_event(self, event: SolveEvent) -> None:
        if event.kind == "depth":
            self.depth_update.emit(event.depth)

    def run(self) -> None:
        """Punto de entrada del hilo.

        Llama al solver y emite el resultado por señales.
        """
        try:
            solver = WhiteCrossSolver(
                max_depth=self.max_depth,
                max_nodes=self.max_nodes,
                on_event=self._on_event,
                should_cancel=self.isInterruptionRequested,
            )
            sol: Optional[List[str]] = solver.solve(self.state)
            self.finished_solution.emit(sol)
        except Exception:
            msg = traceback.format_exc()
            self.error.emit(msg)
