import unittest

import numpy as np

from l_systems_tree.preset import LSYSTEM_PRESETS, get_preset, list_presets
from l_systems_tree.turtle_3d import SUPPORTED_SYMBOLS, generate_lsystem


class TestPresets(unittest.TestCase):

    def test_presets_use_supported_symbols(self):
        for name, preset in LSYSTEM_PRESETS.items():
            symbols = set(preset["axiom"]) | set("".join(preset["rules"].values())) | set(preset["rules"])
            self.assertTrue(symbols <= SUPPORTED_SYMBOLS, name)

    def test_every_preset_generates_a_clean_tree(self):
        for name in list_presets():
            generation = generate_lsystem(None, get_preset(name, iterations=2), seed=0)
            self.assertEqual(generation.diagnostics, [], name)
            self.assertEqual(len(generation.tree), generation.symbols.count("F") + 1)
            self.assertTrue(np.isfinite([n.position for n in generation.tree]).all())

    def test_unknown_preset(self):
        with self.assertRaises(KeyError):
            get_preset("does_not_exist")


if __name__ == "__main__":
    unittest.main()
