import unittest

from cubie_sim.logic.moves import find_invalid
from cubie_sim.logic.scramble import generate_scramble


class TestScramble(unittest.TestCase):
    def test_length(self):
        self.assertEqual(len(generate_scramble(20, seed=3).split()), 20)

    def test_reproducible_with_seed(self):
        self.assertEqual(generate_scramble(15, seed=7), generate_scramble(15, seed=7))

    def test_no_repeated_face(self):
        tokens = generate_scramble(50, seed=11, size=5).split()
        faces = [t.lstrip("0123456789")[0] for t in tokens]
        for a, b in zip(faces, faces[1:]):
            self.assertNotEqual(a, b)

    def test_tokens_parse(self):
        for size in (2, 3, 4, 6):
            tokens = generate_scramble(30, seed=size, size=size).split()
            self.assertIsNone(find_invalid(tokens, size))

    def test_inner_layers_only_on_big_cubes(self):
        self.assertFalse(any(t[0].isdigit() for t in generate_scramble(40, seed=1).split()))
        self.assertTrue(any(t[0].isdigit() for t in generate_scramble(40, seed=1, size=6).split()))

    def test_inner_layers_stop_at_half(self):
        for size in (4, 5, 7):
            tokens = generate_scramble(60, seed=size, size=size).split()
            depths = [int(t[0]) for t in tokens if t[0].isdigit()]
            self.assertTrue(depths)
            self.assertLessEqual(max(depths), size // 2)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            generate_scramble(0)
        with self.assertRaises(ValueError):
            generate_scramble(5, size=1)


if __name__ == "__main__":
    unittest.main()
