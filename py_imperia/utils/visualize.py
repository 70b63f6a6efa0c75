"""
Debug images for generated heightmaps and terrain.

These images are a development aid only; nothing reads them back.
"""

from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import structlog
from matplotlib.colors import ListedColormap

logger = structlog.get_logger()


def save_heightmap_image(
    samples: np.ndarray,
    path: Union[str, Path],
    threshold: Optional[float] = None,
    title: str = "Heightmap",
) -> Path:
    """
    Write a heightmap as a PNG image.

    Args:
        samples: (height, width) array of samples in [-1, 1]
        path: Output file path
        threshold: When given, draw the land/ocean coastline contour
        title: Plot title

    Returns:
        Path of the written image
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 10 * samples.shape[0] / max(samples.shape[1], 1)))
    image = ax.imshow(samples, cmap="terrain", vmin=-1.0, vmax=1.0, interpolation="nearest")
    fig.colorbar(image, ax=ax, label="Height")

    if threshold is not None and samples.min() < threshold <= samples.max():
        ax.contour(samples, levels=[threshold], colors="black", linewidths=0.5)

    ax.set_title(title)
    ax.set_xlabel("Column")
    ax.set_ylabel("Row")
    fig.tight_layout()
    fig.savefig(path, dpi=100)
    plt.close(fig)

    logger.info("Heightmap image saved", path=str(path), shape=list(samples.shape))
    return path


def save_terrain_image(visual_indices: np.ndarray, path: Union[str, Path], title: str = "Terrain") -> Path:
    """Write a (height, width) grid of visual indices as a PNG image."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    colors = ["#1f4e79", "#4f8f3a", "#b5a36a", "#8c8c8c", "#ffffff"]
    n_colors = max(int(visual_indices.max()) + 1, 1)
    cmap = ListedColormap([colors[i % len(colors)] for i in range(n_colors)])

    fig, ax = plt.subplots(figsize=(10, 10 * visual_indices.shape[0] / max(visual_indices.shape[1], 1)))
    ax.imshow(visual_indices, cmap=cmap, vmin=-0.5, vmax=n_colors - 0.5, interpolation="nearest")
    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(path, dpi=100)
    plt.close(fig)

    logger.info("Terrain image saved", path=str(path))
    return path
