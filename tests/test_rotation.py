import unittest

import numpy as np

from l_systems_tree import rotation


class TestRotation(unittest.TestCase):

    def test_identity_keeps_up(self):
        np.testing.assert_allclose(rotation.rotate(rotation.IDENTITY, rotation.UP), rotation.UP)

    def test_yaw_turns_forward_to_right(self):
        q = rotation.euler(0, 90, 0)
        np.testing.assert_allclose(rotation.rotate(q, rotation.FORWARD), [1, 0, 0], atol=1e-9)

    def test_euler_applies_z_then_x_then_y(self):
        q = rotation.euler(90, 90, 0)
        # X takes up to forward, then Y takes forward to right
        np.testing.assert_allclose(rotation.rotate(q, rotation.UP), [1, 0, 0], atol=1e-9)

    def test_multiply_composes(self):
        a = rotation.axis_angle([0, 0, 1], 30)
        b = rotation.axis_angle([0, 0, 1], 60)
        np.testing.assert_allclose(
            rotation.multiply(a, b), rotation.axis_angle([0, 0, 1], 90), atol=1e-9
        )

    def test_matrix_round_trip(self):
        q = rotation.normalize(np.array([0.3, -0.2, 0.9, 0.1]))
        back = rotation.from_matrix(rotation.to_matrix(q))
        # q and -q are the same rotation
        self.assertAlmostEqual(abs(float(np.dot(q, back))), 1.0, places=9)

    def test_look_rotation_points_forward_axis(self):
        for direction in ([1, 2, 3], [0, 1, 0], [0, -1, 0], [0, 0, -1]):
            d = np.array(direction, dtype=float)
            q = rotation.look_rotation(d)
            np.testing.assert_allclose(
                rotation.rotate(q, rotation.FORWARD), d / np.linalg.norm(d), atol=1e-9
            )

    def test_look_rotation_of_zero_vector(self):
        np.testing.assert_allclose(rotation.look_rotation(np.zeros(3)), rotation.IDENTITY)


if __name__ == "__main__":
    unittest.main()
