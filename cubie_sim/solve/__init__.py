from cubie_sim.solve.white_cross_solver import SolveEvent, WhiteCrossSolver, solve_white_cross

__all__ = ["SolveEvent", "WhiteCrossSolver", "solve_white_cross"]
