import unittest
from collections import Counter

from cubie_sim.core import create_solved, is_solved
from cubie_sim.core.cube_model import face_grids
from cubie_sim.core.errors import LayerOutOfRange
from cubie_sim.core.rotation import IDENTITY
from cubie_sim.logic.moves import Move, all_moves, invert_sequence, parse, parse_sequence
from cubie_sim.logic.scramble import generate_scramble
from cubie_sim.logic.transition import (
    apply,
    apply_notation,
    apply_sequence,
    quarter_turn_matrix,
    rotate_position,
)


class TestApply(unittest.TestCase):
    def test_U_then_Uprime_returns(self):
        c = create_solved(3)
        self.assertEqual(apply_sequence(c, "U U'"), c)

    def test_every_move_then_inverse_returns(self):
        for size in (2, 3, 4, 5):
            c = create_solved(size)
            for tok in all_moves(size):
                m = parse(tok, size)
                self.assertEqual(apply(apply(c, m), m.inverse()), c, f"{tok} N={size}")

    def test_four_quarter_turns_identity(self):
        for size in (2, 3, 4):
            start = apply_sequence(create_solved(size), generate_scramble(6, seed=size, size=size))
            for tok in all_moves(size):
                m = parse(tok, size)
                if m.turns != 1:
                    continue
                c = start
                for _ in range(4):
                    c = apply(c, m)
                self.assertEqual(c, start, f"{tok} N={size}")

    def test_half_turn_twice_identity(self):
        c = create_solved(3)
        for tok in ("R2", "U2", "2F2", "B2"):
            self.assertEqual(apply_sequence(c, [tok, tok]), c, tok)

    def test_U2_equals_two_U(self):
        c = create_solved(3)
        self.assertEqual(apply_notation(c, "U2"), apply_sequence(c, "U U"))

    def test_D2_equals_two_D(self):
        c = create_solved(4)
        self.assertEqual(apply_notation(c, "2D2"), apply_sequence(c, "2D 2D"))

    def test_sexy_move_order_six(self):
        c = create_solved(3)
        out = apply_sequence(c, "R U R' U' " * 6)
        self.assertEqual(out, c)
        self.assertFalse(is_solved(apply_sequence(c, "R U R' U'")))

    def test_input_not_mutated(self):
        c = create_solved(3)
        snapshot = create_solved(3)
        apply_notation(c, "R")
        self.assertEqual(c, snapshot)
        self.assertTrue(is_solved(c))

    def test_unaffected_cubies_are_shared(self):
        c = create_solved(3)
        out = apply_notation(c, "R")
        moved = sum(1 for a, b in zip(c, out) if a is not b)
        self.assertEqual(moved, 9)

    def test_scramble_and_inverse_returns(self):
        for size in (3, 4):
            c = create_solved(size)
            seq = parse_sequence(generate_scramble(20, seed=42, size=size), size)
            scrambled = apply_sequence(c, seq)
            self.assertFalse(is_solved(scrambled))
            self.assertEqual(apply_sequence(scrambled, invert_sequence(seq)), c)

    def test_position_index_rebuilt(self):
        c = apply_sequence(create_solved(4), generate_scramble(10, seed=1, size=4))
        for i, cubie in enumerate(c.cubies):
            self.assertEqual(c.position_index[cubie.current_position], i)

    def test_layer_out_of_range(self):
        with self.assertRaises(LayerOutOfRange):
            apply(create_solved(3), Move("right", layer_depth=4))

    def test_color_counts_remain_constant(self):
        c = apply_sequence(create_solved(3), "R U R' U' L D L' D' U2 R2 2F B'")
        counts = Counter()
        for grid in face_grids(c).values():
            for row in grid:
                counts.update(row)
        for color in ["white", "yellow", "orange", "red", "green", "blue"]:
            self.assertEqual(counts[color], 9)


class TestKinematics(unittest.TestCase):
    def test_rotate_position_R(self):
        self.assertEqual(rotate_position((2, 2, 2), "right", True, 3), (2, 2, 0))
        self.assertEqual(rotate_position((2, 0, 0), "right", True, 3), (2, 0, 2))
        self.assertEqual(rotate_position((3, 1, 0), "right", False, 4), (3, 3, 1))

    def test_rotate_position_U(self):
        # U horario: el frente pasa a la izquierda
        self.assertEqual(rotate_position((1, 2, 2), "top", True, 3), (0, 2, 1))

    def test_opposite_faces_turn_opposite(self):
        self.assertEqual(quarter_turn_matrix("right", True), quarter_turn_matrix("left", False))
        self.assertEqual(quarter_turn_matrix("top", True), quarter_turn_matrix("bottom", False))
        self.assertEqual(quarter_turn_matrix("front", True), quarter_turn_matrix("back", False))

    def test_matrix_left_multiplied(self):
        c = apply_notation(create_solved(3), "R")
        corner = c.cubie_at((2, 2, 0))
        self.assertEqual(corner.orientation_matrix, quarter_turn_matrix("right", True))
        untouched = c.cubie_at((0, 0, 0))
        self.assertEqual(untouched.orientation_matrix, IDENTITY)

    def test_F_flips_edges_R_does_not(self):
        s = create_solved(3)
        after_f = apply_notation(s, "F")
        flipped = [c for c in after_f if c.kind == "edge" and c.orientation == 1]
        self.assertEqual(len(flipped), 4)

        after_r = apply_notation(s, "R")
        self.assertTrue(all(c.orientation == 0 for c in after_r if c.kind == "edge"))

    def test_U_keeps_corner_twist(self):
        c = apply_notation(create_solved(3), "U")
        self.assertTrue(all(x.orientation == 0 for x in c if x.kind == "corner"))

    def test_R_twists_corners(self):
        c = apply_notation(create_solved(3), "R")
        twists = sorted(x.orientation for x in c if x.kind == "corner" and x.orientation)
        self.assertEqual(twists, [1, 1, 2, 2])

    def test_orientation_invariants(self):
        for seed in range(5):
            tokens = [t for t in generate_scramble(25, seed=seed).split()]
            c = apply_sequence(create_solved(3), tokens)
            twist = sum(x.orientation for x in c if x.kind == "corner")
            flip = sum(x.orientation for x in c if x.kind == "edge")
            self.assertEqual(twist % 3, 0)
            self.assertEqual(flip % 2, 0)

    def test_orientation_back_to_zero(self):
        c = create_solved(3)
        for _ in range(4):
            c = apply_notation(c, "F")
        self.assertTrue(is_solved(c))


if __name__ == "__main__":
    unittest.main()
