"""
Grid sampling for composition trees.

Evaluates a tree over a square canvas in one vectorized call, so a
driver can produce whole frames without a per-pixel Python loop.
"""

import logging
from typing import Callable, Iterable, Optional

import numpy as np

from .tree import CompositionTree

logger = logging.getLogger(__name__)


class GridManager:
    """
    Samples composition trees over an N x N canvas.

    Pixel indices are the canvas coordinates; the tree's global conf
    maps them into noise space.  The sequence number is the z axis.
    """

    def __init__(self, canvas_size: int = 256):
        if canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {canvas_size}")
        self.canvas_size = canvas_size

        coords = np.arange(canvas_size, dtype=np.float64)
        # Rows index y, columns index x.
        self.X, self.Y = np.meshgrid(coords, coords, indexing='xy')

    @classmethod
    def for_tree(cls, tree: CompositionTree, default_size: int = 256) -> "GridManager":
        """Use the tree's own canvas size when it has one."""
        size = tree.global_conf.canvas_size
        return cls(size if size > 0 else default_size)

    def sample(self, tree: CompositionTree, sequence: float = 0.0) -> np.ndarray:
        """
        Evaluate `tree` at every canvas pixel for one sequence number.

        Returns:
            Float array of shape (canvas_size, canvas_size)
        """

        Z = np.full_like(self.X, sequence)
        values = tree.evaluate(self.X, self.Y, Z)
        return np.asarray(values, dtype=np.float64)

    def sample_frames(
        self,
        tree: CompositionTree,
        sequences: Iterable[float],
        progress: Optional[Callable] = None
    ) -> np.ndarray:
        """
        Sample consecutive frames and stack them along a leading axis.

        Args:
            tree: Tree to evaluate
            sequences: Sequence numbers, one per frame
            progress: Optional wrapper for the iterable (e.g. tqdm)
        """

        if progress is not None:
            sequences = progress(sequences)

        frames = [self.sample(tree, sequence) for sequence in sequences]
        logger.debug("Sampled %d frames of %dx%d", len(frames), self.canvas_size, self.canvas_size)

        if not frames:
            return np.empty((0, self.canvas_size, self.canvas_size), dtype=np.float64)
        return np.stack(frames)
