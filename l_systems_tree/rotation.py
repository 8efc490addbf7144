"""
Quaternion helpers on numpy arrays.

Quaternions are stored as float arrays in (w, x, y, z) order. Angles are in
degrees. The world is y-up: the turtle moves along the orientation applied to
UP, and look rotations align the local z axis with a direction.
"""

import numpy as np

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])
IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])


def axis_angle(axis: np.ndarray, degrees: float) -> np.ndarray:
    """Quaternion rotating `degrees` around `axis`."""
    axis = np.asarray(axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    half = np.radians(degrees) / 2.0
    return np.concatenate(([np.cos(half)], np.sin(half) * axis))


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (b is applied first, then a)."""
    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def normalize(q: np.ndarray) -> np.ndarray:
    return q / np.linalg.norm(q)


def euler(x: float, y: float, z: float) -> np.ndarray:
    """Rotation of z degrees around Z, then x around X, then y around Y."""
    qx = axis_angle([1.0, 0.0, 0.0], x)
    qy = axis_angle([0.0, 1.0, 0.0], y)
    qz = axis_angle([0.0, 0.0, 1.0], z)
    return multiply(qy, multiply(qx, qz))


def rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Apply rotation q to vector v."""
    w = q[0]
    u = q[1:]
    v = np.asarray(v, dtype=float)
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def to_matrix(q: np.ndarray) -> np.ndarray:
    w, x, y, z = normalize(q)
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def from_matrix(m: np.ndarray) -> np.ndarray:
    """Convert a proper rotation matrix to a unit quaternion."""
    trace = np.trace(m)
    if trace > 0:
        s = 2.0 * np.sqrt(trace + 1.0)
        q = np.array([
            0.25 * s,
            (m[2, 1] - m[1, 2]) / s,
            (m[0, 2] - m[2, 0]) / s,
            (m[1, 0] - m[0, 1]) / s,
        ])
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * np.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        q = np.array([
            (m[2, 1] - m[1, 2]) / s,
            0.25 * s,
            (m[0, 1] + m[1, 0]) / s,
            (m[0, 2] + m[2, 0]) / s,
        ])
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * np.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        q = np.array([
            (m[0, 2] - m[2, 0]) / s,
            (m[0, 1] + m[1, 0]) / s,
            0.25 * s,
            (m[1, 2] + m[2, 1]) / s,
        ])
    else:
        s = 2.0 * np.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        q = np.array([
            (m[1, 0] - m[0, 1]) / s,
            (m[0, 2] + m[2, 0]) / s,
            (m[1, 2] + m[2, 1]) / s,
            0.25 * s,
        ])
    return normalize(q)


def look_rotation(forward: np.ndarray, up: np.ndarray = UP) -> np.ndarray:
    """
    Rotation whose local z axis points along `forward`.

    Falls back to the world x axis as the up hint when `forward` is parallel
    to `up`. A zero-length `forward` gives the identity.
    """
    forward = np.asarray(forward, dtype=float)
    norm = np.linalg.norm(forward)
    if norm < 1e-12:
        return IDENTITY.copy()
    f = forward / norm
    right = np.cross(up, f)
    if np.linalg.norm(right) < 1e-8:
        right = np.cross([1.0, 0.0, 0.0], f)
    right = right / np.linalg.norm(right)
    true_up = np.cross(f, right)
    return from_matrix(np.column_stack((right, true_up, f)))
