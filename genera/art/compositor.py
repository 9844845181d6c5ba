"""Compositing operators over premultiplied float buffers.

All buffers hold premultiplied color (H, W, 3) and alpha (H, W) in [0, 1].
The operator names follow the 2D canvas ``globalCompositeOperation``
vocabulary:

  - source-over     -> ordinary painter's-algorithm alpha blending
  - lighter         -> additive light (used for volumetric rays)
  - destination-out -> punches the source's alpha out of the destination
"""

from __future__ import annotations

import numpy as np

COMPOSITE_OPERATIONS = ("source-over", "lighter", "destination-out")


def composite(
    dst: np.ndarray,
    dst_a: np.ndarray,
    src: np.ndarray,
    src_a: np.ndarray,
    op: str = "source-over",
) -> tuple[np.ndarray, np.ndarray]:
    """Composite a source layer onto a destination region.

    Args:
        dst, dst_a: Destination premultiplied color and alpha.
        src, src_a: Source premultiplied color and alpha, already scaled by
            coverage and global alpha.
        op: One of ``COMPOSITE_OPERATIONS``.

    Returns:
        (color, alpha) of the result.
    """
    if op == "source-over":
        keep = 1.0 - src_a
        return src + dst * keep[..., np.newaxis], src_a + dst_a * keep
    elif op == "lighter":
        return np.minimum(dst + src, 1.0), np.minimum(dst_a + src_a, 1.0)
    elif op == "destination-out":
        keep = 1.0 - src_a
        return dst * keep[..., np.newaxis], dst_a * keep
    raise ValueError(f"Unknown composite operation: {op!r}. Available: {list(COMPOSITE_OPERATIONS)}")


def unpremultiply(color: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Straight-alpha color from premultiplied buffers (0 where alpha is 0)."""
    safe = np.where(alpha > 0, alpha, 1.0)
    return np.where(alpha[..., np.newaxis] > 0, color / safe[..., np.newaxis], 0.0)
