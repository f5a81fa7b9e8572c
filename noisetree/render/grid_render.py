"""
Render a composition tree definition to a stack of sampled frames.

Reads a definition file (tagged or IR), samples the tree over an
N x N canvas for consecutive sequence numbers and saves the result as
a float array of shape (frames, N, N).  Color mapping is left to
whatever consumes the array.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from tqdm import tqdm

from ..compatibility import load_tree
from ..engine import GridManager
from ..errors import CompositionError

logger = logging.getLogger(__name__)


def render_frames(
    definition_path: Path,
    size: Optional[int] = None,
    sequence: float = 0.0,
    frames: int = 1,
    show_progress: bool = True
) -> np.ndarray:
    """
    Build the tree in `definition_path` and sample `frames` frames.

    Frame i is sampled at sequence number `sequence + i`.  Without an
    explicit `size` the tree's own `canvas_size` is used, falling back
    to 256 pixels.
    """

    tree = load_tree(Path(definition_path).read_text())
    grid = GridManager(size) if size else GridManager.for_tree(tree)

    sequences = [sequence + i for i in range(frames)]
    progress = (lambda it: tqdm(it, desc="Rendering frames")) if show_progress else None
    return grid.sample_frames(tree, sequences, progress=progress)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main():
    """CLI entry point for grid rendering."""

    parser = argparse.ArgumentParser(description="Sample a composition tree over a square canvas")
    parser.add_argument("definition", type=str, help="Tree definition JSON file (tagged or IR)")
    parser.add_argument("--size", type=_positive_int, default=None,
                        help="Canvas size in pixels (default: the tree's canvas_size, else 256)")
    parser.add_argument("--sequence", type=float, default=0.0, help="Sequence number of the first frame")
    parser.add_argument("--frames", type=_positive_int, default=1, help="Number of consecutive frames")
    parser.add_argument("-o", "--output", type=str, default="frames.npy", help="Output .npy path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not Path(args.definition).exists():
        print(f"Error: Definition file does not exist: {args.definition}")
        return 1

    try:
        frames = render_frames(
            Path(args.definition),
            size=args.size,
            sequence=args.sequence,
            frames=args.frames
        )
    except CompositionError as e:
        print(f"Error: {e}")
        return 1

    np.save(args.output, frames.astype(np.float32))

    size = frames.shape[1]
    print(f"Saved {frames.shape[0]} frame(s) of {size}x{size} to {args.output}")
    print(f"  min={frames.min():.3f}, max={frames.max():.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
