import unittest

from cubie_sim.app.solve_worker import SolveWorker
from cubie_sim.core import create_solved
from cubie_sim.logic.transition import apply_notation


class TestSolveWorker(unittest.TestCase):
    def test_run_emits_solution(self):
        worker = SolveWorker(apply_notation(create_solved(3), "F"))
        solutions, depths, errors = [], [], []
        worker.finished_solution.connect(solutions.append)
        worker.depth_update.connect(depths.append)
        worker.error.connect(errors.append)

        # run() directo: mismo hilo, las señales llegan sin loop de eventos
        worker.run()

        self.assertEqual(solutions, [["F'"]])
        self.assertEqual(depths, [0])
        self.assertEqual(errors, [])

    def test_run_reports_errors(self):
        worker = SolveWorker(create_solved(4))
        solutions, errors = [], []
        worker.finished_solution.connect(solutions.append)
        worker.error.connect(errors.append)

        worker.run()

        self.assertEqual(solutions, [])
        self.assertEqual(len(errors), 1)
        self.assertIn("ValueError", errors[0])


if __name__ == "__main__":
    unittest.main()
