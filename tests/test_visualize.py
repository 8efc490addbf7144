import os
import tempfile
import unittest

import matplotlib
matplotlib.use("Agg")

import numpy as np

from l_systems_tree import rotation
from l_systems_tree.grammar import GrammarParams
from l_systems_tree.tree import SpatialTree
from l_systems_tree.turtle_3d import generate_lsystem
from l_systems_tree.visualize import (
    describe_edges,
    edge_segment,
    plot_tree,
    tree_points,
    tree_segments,
)


class TestEdgeGeometry(unittest.TestCase):

    def setUp(self):
        self.tree = SpatialTree()
        self.child = self.tree.add_child(0, [0, 4, 0], rotation.IDENTITY, symbol_index=0)

    def test_edge_segment(self):
        seg = edge_segment(self.tree.root, self.child)
        self.assertAlmostEqual(seg.length, 4.0)
        np.testing.assert_allclose(seg.midpoint, [0, 2, 0])
        np.testing.assert_allclose(seg.direction, [0, 1, 0])
        np.testing.assert_allclose(rotation.rotate(seg.rotation, rotation.FORWARD), [0, 1, 0], atol=1e-9)
        np.testing.assert_allclose(seg.scale, [0.65, 0.65, 4.0])

    def test_segments_and_points(self):
        self.assertEqual(tree_segments(self.tree).shape, (1, 2, 3))
        self.assertEqual(tree_points(self.tree).shape, (2, 3))
        self.assertEqual(tree_segments(SpatialTree()).shape, (0, 2, 3))

    def test_describe_edges(self):
        self.assertEqual(describe_edges(self.tree), ["Root_to_Node_0 length=4.000"])


class TestPlotTree(unittest.TestCase):

    def test_plot_saves_png(self):
        params = GrammarParams(initial_string="F", rules={"F": "F[+F][-F]"}, iteration_count=2)
        tree = generate_lsystem(None, params, seed=3).tree
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "tree.png")
            ax = plot_tree(tree, title="test", show_nodes=True, save_path=path)
            self.assertTrue(os.path.exists(path))
        self.assertEqual(len(ax.lines), len(tree) - 1)


if __name__ == "__main__":
    unittest.main()
