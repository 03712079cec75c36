from cubie_sim.core.cube_model import (
    DEFAULT_COLORS,
    FACES,
    Cubie,
    CubeState,
    create_solved,
    cubies_in_layer,
    display_color_on_face,
    face_grid,
    is_solved,
)
from cubie_sim.core.errors import CubeError, InvalidNotation, LayerOutOfRange

__all__ = [
    "DEFAULT_COLORS",
    "FACES",
    "Cubie",
    "CubeState",
    "CubeError",
    "InvalidNotation",
    "LayerOutOfRange",
    "create_solved",
    "cubies_in_layer",
    "display_color_on_face",
    "face_grid",
    "is_solved",
]
