"""
Realise a SpatialTree as connector segments and preview it with matplotlib.

Nothing in the generation core depends on this module; it only consumes
the tree through traverse().
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401

from l_systems_tree import rotation
from l_systems_tree.tree import SpatialNode, SpatialTree, traverse

logger = logging.getLogger(__name__)

CONNECTOR_THICKNESS = 0.65


@dataclass(frozen=True)
class EdgeSegment:
    """Box-like connector between a node and one of its children."""

    start: np.ndarray
    end: np.ndarray
    midpoint: np.ndarray
    direction: np.ndarray
    length: float
    rotation: np.ndarray
    scale: np.ndarray


def edge_segment(parent: SpatialNode, child: SpatialNode) -> EdgeSegment:
    """Placement of a connector: centred between both nodes, z axis along the edge."""
    delta = child.position - parent.position
    length = float(np.linalg.norm(delta))
    direction = delta / length if length > 0 else np.zeros(3)
    return EdgeSegment(
        start=parent.position.copy(),
        end=child.position.copy(),
        midpoint=parent.position + delta * 0.5,
        direction=direction,
        length=length,
        rotation=rotation.look_rotation(direction),
        scale=np.array([CONNECTOR_THICKNESS, CONNECTOR_THICKNESS, length]),
    )


def tree_segments(tree: SpatialTree) -> np.ndarray:
    """(M, 2, 3) array of edge endpoints in traversal order."""
    segments = [(parent.position, child.position) for parent, child in traverse(tree)]
    if not segments:
        return np.zeros((0, 2, 3))
    return np.array(segments, dtype=float)


def tree_points(tree: SpatialTree) -> np.ndarray:
    """(N, 3) array of node positions in creation order."""
    return np.array([node.position for node in tree], dtype=float)


def plot_tree(
    tree: SpatialTree,
    ax=None,
    title: Optional[str] = None,
    color: str = "green",
    linewidth: float = 1.0,
    show_nodes: bool = False,
    save_path: Optional[str] = None,
    show: bool = False,
    elev: float = 20,
    azim: float = 45,
):
    """
    Draw every edge of the tree as a 3D line.

    Args:
        tree: Generated tree
        ax: Existing 3D axes; a new figure is created when omitted
        title: Optional axes title
        color: Line colour
        linewidth: Line width
        show_nodes: Also scatter the node positions
        save_path: Optional path to save the figure
        show: Call plt.show() after drawing
        elev: Elevation angle for 3D view
        azim: Azimuth angle for 3D view

    Returns:
        The axes drawn on
    """
    fig = None
    if ax is None:
        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(111, projection='3d')

    # The tree grows along +Y; plot it with Y as the vertical axis
    for start, end in tree_segments(tree):
        xs, ys, zs = zip(start, end)
        ax.plot(xs, zs, ys, color=color, linewidth=linewidth)

    if show_nodes and len(tree) > 0:
        points = tree_points(tree)
        ax.scatter(points[:, 0], points[:, 2], points[:, 1], color=color, s=8)

    ax.set_xlabel("X")
    ax.set_ylabel("Z")
    ax.set_zlabel("Y")
    if title:
        ax.set_title(title, fontsize=14, weight='bold')
    ax.view_init(elev=elev, azim=azim)

    if save_path:
        (fig if fig is not None else ax.figure).savefig(save_path, dpi=150, bbox_inches='tight', facecolor='white')
        logger.info("saved tree plot to %s", save_path)
    if show:
        plt.show()
    elif fig is not None and save_path:
        plt.close(fig)
    return ax


def describe_edges(tree: SpatialTree) -> List[str]:
    """One human-readable line per edge, e.g. for text export."""
    lines = []
    for parent, child in traverse(tree):
        seg = edge_segment(parent, child)
        lines.append(f"{parent.name}_to_{child.name} length={seg.length:.3f}")
    return lines
