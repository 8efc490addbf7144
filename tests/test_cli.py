import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from l_systems_tree.cli import main


class TestCLI(unittest.TestCase):

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_string_command(self):
        code, out, _ = self._run(["string", "--axiom", "F", "--rule", "F=F+F-F", "--iterations", "2"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "F+F-F+F+F-F-F+F-F")

    def test_string_default_grammar(self):
        code, out, _ = self._run(["string"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "F+F-F-F+F")

    def test_negative_iterations_is_an_error(self):
        code, _, err = self._run(["string", "--axiom", "F", "--rule", "F=FF", "--iterations", "-1"])
        self.assertEqual(code, 2)
        self.assertIn("iteration count", err)

    def test_overflow_is_an_error(self):
        code, _, _ = self._run([
            "string", "--axiom", "F", "--rule", "F=FF", "--iterations", "20", "--max_length", "1000",
        ])
        self.assertEqual(code, 2)

    def test_unknown_preset_is_an_error(self):
        code, _, _ = self._run(["string", "--preset", "nope"])
        self.assertEqual(code, 2)

    def test_generate_writes_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "tree.json")
            code, _, _ = self._run(["generate", "--seed", "3", "--json", path])
            self.assertEqual(code, 0)
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        self.assertEqual(data["symbols"], "F+F-F-F+F")
        self.assertEqual(len(data["nodes"]), data["symbols"].count("F") + 1)
        self.assertEqual(len(data["nodes"]), 6)
        self.assertEqual(data["diagnostics"], [])

    def test_generate_lenient(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "tree.json")
            args = ["generate", "--axiom", "]F", "--rule", "F=F", "--iterations", "0", "--json", path]
            self.assertEqual(self._run(args)[0], 2)
            self.assertEqual(self._run(args + ["--lenient"])[0], 0)
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        self.assertEqual(data["diagnostics"][0]["kind"], "unbalanced_close")

    def test_batch(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "runs.json")
            code, _, _ = self._run([
                "batch", "--preset", "dichotomous", "--iterations", "2", "--count", "3", "--output", path,
            ])
            self.assertEqual(code, 0)
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        self.assertEqual([run["seed"] for run in data["runs"]], [0, 1, 2])
        self.assertTrue(all(run["nodes"] == 10 for run in data["runs"]))

    def test_non_numeric_generator_value_is_an_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "grammar.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({
                    "axiom": "F",
                    "rules": {"F": "FF"},
                    "generator": {"jitter_fraction": "abc"},
                }, f)
            code, _, err = self._run(["string", "--config", path])
        self.assertEqual(code, 2)
        self.assertIn("jitter_fraction", err)

    def test_presets(self):
        code, out, _ = self._run(["presets"])
        self.assertEqual(code, 0)
        self.assertIn("dichotomous", out)


if __name__ == "__main__":
    unittest.main()
