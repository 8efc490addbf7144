import json
import os
import tempfile
import unittest

from l_systems_tree.config import GeneratorConfig, load_config, load_params, params_from_dict
from l_systems_tree.errors import InvalidGrammar


class TestGeneratorConfig(unittest.TestCase):

    def test_defaults(self):
        config = GeneratorConfig()
        self.assertEqual(config.distance_range, (2.0, 5.0))
        self.assertAlmostEqual(config.jitter_fraction, 0.05)
        self.assertTrue(config.strict)

    def test_invalid_values(self):
        with self.assertRaises(InvalidGrammar):
            GeneratorConfig(distance_range=(5.0, 2.0))
        with self.assertRaises(InvalidGrammar):
            GeneratorConfig(jitter_fraction=-0.1)
        with self.assertRaises(InvalidGrammar):
            GeneratorConfig(max_length=0)

    def test_load_config_section(self):
        config = load_config({"distance_range": [1, 2], "strict": False, "max_length": 50})
        self.assertEqual(config.distance_range, (1.0, 2.0))
        self.assertFalse(config.strict)
        self.assertEqual(config.max_length, 50)
        self.assertEqual(load_config(None), GeneratorConfig())


class TestLoadParams(unittest.TestCase):

    def test_params_from_dict(self):
        params = params_from_dict({"axiom": "F", "rules": {"F": "FF"}, "iterations": 2, "angle": 30})
        self.assertEqual(params.initial_string, "F")
        self.assertEqual(params.iteration_count, 2)
        self.assertEqual(params.rotation_degrees, 30)

    def test_params_from_dict_validates(self):
        with self.assertRaises(InvalidGrammar):
            params_from_dict({"axiom": "F", "rules": {"F": "FF"}, "iterations": -1})
        with self.assertRaises(InvalidGrammar):
            params_from_dict({"axiom": "F", "rules": ["F"]})

    def test_load_params_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "grammar.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({
                    "initial_string": "F",
                    "rules": {"F": "F[+F]"},
                    "iteration_count": 3,
                    "generator": {"jitter_fraction": 0.1},
                }, f)
            params, config = load_params(path)
        self.assertEqual(params.rules, {"F": "F[+F]"})
        self.assertAlmostEqual(config.jitter_fraction, 0.1)

    def test_non_numeric_generator_values(self):
        for section in (
            {"jitter_fraction": "abc"},
            {"distance_range": ["low", 5]},
            {"distance_range": [1, None]},
            {"jitter_fraction": True},
            {"strict": "yes"},
        ):
            with self.assertRaises(InvalidGrammar):
                load_config(section)

    def test_malformed_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "bad.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{ not json }")
            with self.assertRaises(InvalidGrammar):
                load_params(path)


if __name__ == "__main__":
    unittest.main()
